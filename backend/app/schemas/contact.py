"""
Contact Pydantic schemas for request/response validation.
"""

import re
from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import (
    EmailStr,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)
from pydantic_core import PydanticCustomError

from app.schemas.common import CamelModel, PaginationInfo, SortInfo

MAX_EMERGENCY_CONTACTS = 3

_PHONE_PATTERN = re.compile(
    r"^\+?[\d\s\-.()]*\d[\d\s\-.()]*(\s*(ext\.?|extension|x)\s*\d+)?$",
    re.IGNORECASE,
)

INVALID_EMAIL = "Invalid email address format"
INVALID_PHONE = "Invalid phone number format"

# Field -> pydantic error type -> message returned to the client.
# "missing" also covers an explicit null.
ADDRESS_MESSAGES: Dict[str, Dict[str, str]] = {
    "address1": {"string_too_long": "Address line 1 cannot be longer than 100 characters"},
    "address2": {"string_too_long": "Address line 2 cannot be longer than 100 characters"},
    "city": {"string_too_long": "City cannot be longer than 30 characters"},
    "state": {"string_too_long": "State cannot be longer than 30 characters"},
    "zip_code": {"string_too_long": "Zip code cannot be longer than 10 characters"},
    "country": {"string_too_long": "Country cannot be longer than 30 characters"},
}

EMERGENCY_CONTACT_MESSAGES: Dict[str, Dict[str, str]] = {
    "name": {
        "missing": "Emergency Contact Name is required",
        "string_too_short": "Emergency Contact Name is required",
        "string_too_long": "Name cannot be longer than 100 characters",
    },
    "relationship": {
        "missing": "Emergency Contact Relationship is required",
        "string_too_short": "Emergency Contact Relationship is required",
        "string_too_long": "Relationship cannot be longer than 50 characters",
    },
    "phone_number": {
        "missing": "Emergency Contact Phone Number is required",
        "string_too_short": "Emergency Contact Phone Number is required",
    },
    "email": {
        "missing": "Emergency Contact Email is required",
        "value_error": INVALID_EMAIL,
    },
}

CONTACT_MESSAGES: Dict[str, Dict[str, str]] = {
    "prefix": {"string_too_long": "Prefix cannot be longer than 5 characters"},
    "first_name": {
        "missing": "First name is required",
        "string_too_short": "First name is required",
        "string_too_long": "First name cannot be longer than 50 characters",
    },
    "last_name": {"string_too_long": "Last name cannot be longer than 50 characters"},
    "email": {
        "missing": "Email is required",
        "value_error": INVALID_EMAIL,
    },
    "company_name": {"string_too_long": "Company name cannot be longer than 50 characters"},
    "job_title": {"string_too_long": "Job title cannot be longer than 50 characters"},
    "notes": {"string_too_long": "Notes cannot be longer than 500 characters"},
}


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _check_phone(value: Optional[str]) -> Optional[str]:
    if value is not None and not _PHONE_PATTERN.match(value.strip()):
        raise PydanticCustomError("phone_format", INVALID_PHONE)
    return value


def _with_messages(value: Any, handler: ValidatorFunctionWrapHandler, messages: Dict[str, str]) -> Any:
    """Run the field's own validation and swap in the field's client-facing message."""
    try:
        result = handler(value)
    except ValidationError as exc:
        error_type = exc.errors()[0]["type"]
        if error_type not in messages:
            raise
        raise PydanticCustomError(error_type, messages[error_type])
    if result is None and "missing" in messages:
        raise PydanticCustomError("missing", messages["missing"])
    return result


class AddressBase(CamelModel):
    """Home address fields."""
    address1: Optional[str] = Field(None, max_length=100)
    address2: Optional[str] = Field(None, max_length=100)
    city: Optional[str] = Field(None, max_length=30)
    state: Optional[str] = Field(None, max_length=30)
    zip_code: Optional[str] = Field(None, max_length=10)
    country: Optional[str] = Field(None, max_length=30)

    @field_validator(*ADDRESS_MESSAGES, mode="wrap")
    @classmethod
    def apply_field_messages(cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo) -> Any:
        return _with_messages(value, handler, ADDRESS_MESSAGES[info.field_name])


class AddressWrite(AddressBase):
    """Address as accepted on create/update. Stored ids are echoed back by clients."""
    id: Optional[int] = None
    contact_id: Optional[int] = None

    class Config:
        extra = "forbid"


class AddressResponse(AddressBase):
    id: int
    contact_id: int


class EmergencyContactBase(CamelModel):
    """Emergency contact fields. Required fields default to None so a missing value gets its own message."""
    name: Optional[str] = Field(None, min_length=1, max_length=100, validate_default=True)
    relationship: Optional[str] = Field(None, min_length=1, max_length=50, validate_default=True)
    phone_number: Optional[str] = Field(None, min_length=1, validate_default=True)
    email: Optional[EmailStr] = Field(None, validate_default=True)

    @field_validator("phone_number")
    @classmethod
    def validate_phone_number(cls, value: Optional[str]) -> Optional[str]:
        return _check_phone(value)

    @field_validator(*EMERGENCY_CONTACT_MESSAGES, mode="wrap")
    @classmethod
    def apply_field_messages(cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo) -> Any:
        return _with_messages(value, handler, EMERGENCY_CONTACT_MESSAGES[info.field_name])


class EmergencyContactWrite(EmergencyContactBase):
    id: Optional[int] = None
    contact_id: Optional[int] = None

    class Config:
        extra = "forbid"


class EmergencyContactResponse(EmergencyContactBase):
    id: int
    contact_id: int


class ContactBase(CamelModel):
    """Base contact schema with the rules shared by every write path."""
    prefix: Optional[str] = Field(None, max_length=5)
    first_name: Optional[str] = Field(None, min_length=1, max_length=50, validate_default=True)
    last_name: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = Field(None, validate_default=True)
    contact_number: Optional[str] = None
    alternative_contact_number: Optional[str] = None
    company_name: Optional[str] = Field(None, max_length=50)
    job_title: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=500)
    date_of_birth: Optional[date] = None

    @field_validator("contact_number", "alternative_contact_number", mode="before")
    @classmethod
    def blank_phone_is_absent(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("contact_number", "alternative_contact_number")
    @classmethod
    def validate_phone_numbers(cls, value: Optional[str]) -> Optional[str]:
        return _check_phone(value)

    @field_validator("date_of_birth")
    @classmethod
    def validate_date_of_birth(cls, value: Optional[date]) -> Optional[date]:
        if value is not None and value > date.today():
            raise PydanticCustomError("future_date", "Date of birth cannot be in the future")
        return value

    @field_validator(*CONTACT_MESSAGES, mode="wrap")
    @classmethod
    def apply_field_messages(cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo) -> Any:
        return _with_messages(value, handler, CONTACT_MESSAGES[info.field_name])


class ContactWrite(ContactBase):
    """Contact body including the nested records."""
    home_address: Optional[AddressWrite] = None
    emergency_contacts: Optional[List[EmergencyContactWrite]] = None

    @field_validator("emergency_contacts")
    @classmethod
    def validate_emergency_contact_count(
        cls, value: Optional[List[EmergencyContactWrite]]
    ) -> Optional[List[EmergencyContactWrite]]:
        if value is not None and len(value) > MAX_EMERGENCY_CONTACTS:
            raise PydanticCustomError(
                "too_many_emergency_contacts",
                "Maximum {max} Emergency Contacts allowed",
                {"max": MAX_EMERGENCY_CONTACTS},
            )
        return value


class ContactCreate(ContactWrite):
    """Schema for creating a contact. Generated fields sent by clients are ignored."""
    pass


class ContactUpdate(ContactWrite):
    """Schema for replacing a contact; the body id must match the path id."""
    id: int


class ContactResponse(ContactBase):
    """Schema for a stored contact."""
    id: int
    home_address: Optional[AddressResponse] = None
    emergency_contacts: List[EmergencyContactResponse] = []
    created_on: datetime
    updated_on: Optional[datetime] = None

    # Stored values are trusted; rules only apply to incoming data.
    @field_validator("date_of_birth")
    @classmethod
    def validate_date_of_birth(cls, value: Optional[date]) -> Optional[date]:
        return value


class ContactListItem(CamelModel):
    """Summary row returned by contact search."""
    id: int
    name: str
    email: str
    contact_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    created_on: datetime
    company_name: Optional[str] = None
    job_title: Optional[str] = None
    address: Optional[AddressResponse] = None

    @staticmethod
    def display_name(first_name: str, last_name: Optional[str]) -> str:
        if last_name and last_name.strip():
            return f"{first_name} {last_name}"
        return first_name

    @classmethod
    def from_contact(cls, contact) -> "ContactListItem":
        address = contact.home_address
        return cls(
            id=contact.id,
            name=cls.display_name(contact.first_name, contact.last_name),
            email=contact.email,
            contact_number=contact.contact_number,
            date_of_birth=contact.date_of_birth,
            created_on=contact.created_on,
            company_name=contact.company_name,
            job_title=contact.job_title,
            address=AddressResponse.model_validate(address) if address is not None else None,
        )


class ContactSearchCriteria(CamelModel):
    """Filters, paging and sorting for a contact search."""
    email: Optional[str] = None
    name: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    company: Optional[str] = None
    job_title: Optional[str] = None
    pagination_info: Optional[PaginationInfo] = None
    sort_info: Optional[SortInfo] = None


class PatchOperation(CamelModel):
    """One JSON Patch operation. Only add, remove and replace are accepted."""
    op: Literal["add", "remove", "replace"]
    path: str
    value: Any = None
