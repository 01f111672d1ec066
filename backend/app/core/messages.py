"""
Error messages and error field names returned in response envelopes.
"""

# Common messages
INTERNAL_SERVER_ERROR = "An unexpected error occurred."

# Contact validation errors
CONTACT_CANNOT_BE_NULL = "Contact cannot be null"
CONTACT_ID_MISMATCH = "Contact Id in path must match Id in the body"
INVALID_ID = "Id should be greater than zero"
PATCH_CANNOT_BE_NULL = "Patch document cannot be null"
UNKNOWN_PATCH_PATH = "Unknown field path"

# Operation specific errors
ERROR_RETRIEVING_CONTACTS = "An error occurred while retrieving contacts"
ERROR_CREATING_CONTACT = "An error occurred while creating contact."

# Field names used to tag errors
CONTACT_ID_FIELD = "ContactId"
CONTACT_FIELD = "Contact"


def contact_not_found(contact_id: int) -> str:
    return f"Contact with Id {contact_id} not found"


def error_retrieving_contact(contact_id: int) -> str:
    return f"An error occurred while retrieving contact with Id: {contact_id}"


def error_updating_contact(contact_id: int) -> str:
    return f"An unexpected error occurred while updating the contact with ID: {contact_id}"


def error_deleting_contact(contact_id: int) -> str:
    return f"An unexpected error occurred while deleting the contact with ID: {contact_id}"
