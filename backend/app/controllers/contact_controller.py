"""
Contact controller.
"""

from typing import List, Optional

from fastapi import status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.base_controller import BaseController
from app.core import messages
from app.core.logging import get_logger
from app.schemas.common import PaginatedResponse, ResponseEnvelope
from app.schemas.contact import (
    ContactCreate,
    ContactListItem,
    ContactResponse,
    ContactSearchCriteria,
    ContactUpdate,
    PatchOperation,
)
from app.services.contact_service import ContactService
from app.utils.json_patch import JsonPatchError, apply_patch, strip_operations

logger = get_logger(__name__)

# Generated or immutable members a patch may never touch
PROTECTED_PATCH_PATHS = frozenset({"/id", "/email", "/createdOn", "/updatedOn"})

# Top-level members a patch may target
PATCHABLE_FIELDS = frozenset(
    field.alias or name
    for name, field in ContactUpdate.model_fields.items()
    if name not in ("id", "email")
)


class ContactController(BaseController):
    """Controller for contact operations."""

    def __init__(self, session: AsyncSession):
        self.contact_service = ContactService(session)

    async def search_contacts(
        self,
        criteria: Optional[ContactSearchCriteria],
    ) -> ResponseEnvelope[PaginatedResponse[ContactListItem]]:
        """Search contacts."""
        return await self.contact_service.search_contacts(criteria)

    async def get_contact(self, contact_id: int) -> ResponseEnvelope[ContactResponse]:
        """Get contact by ID."""
        return await self.contact_service.get_contact(contact_id)

    async def create_contact(
        self,
        contact_data: Optional[ContactCreate],
    ) -> ResponseEnvelope[ContactResponse]:
        """Create a new contact."""
        return await self.contact_service.create_contact(contact_data)

    async def update_contact(
        self,
        contact_id: int,
        contact_data: Optional[ContactUpdate],
    ) -> ResponseEnvelope[ContactResponse]:
        """Replace a contact."""
        return await self.contact_service.update_contact(contact_id, contact_data)

    async def patch_contact(
        self,
        contact_id: int,
        operations: Optional[List[PatchOperation]],
    ) -> ResponseEnvelope[ContactResponse]:
        """
        Apply a JSON Patch document to a contact.

        Operations on protected paths are dropped, the rest are applied to the
        stored contact in order, the result is validated like a full update
        and then saved through the update path.
        """
        envelope = ResponseEnvelope[ContactResponse]
        if operations is None:
            return envelope.error(status.HTTP_400_BAD_REQUEST, messages.PATCH_CANNOT_BE_NULL)

        operations = strip_operations(operations, PROTECTED_PATCH_PATHS)

        current = await self.contact_service.get_contact(contact_id)
        if not current.success:
            return current

        document = current.data.model_dump(mode="json", by_alias=True)
        try:
            patched = apply_patch(document, operations, allowed_roots=PATCHABLE_FIELDS)
        except JsonPatchError as exc:
            logger.warning(
                "Patch could not be applied",
                extra={"contact_id": contact_id, "path": exc.path, "reason": exc.message},
            )
            return envelope.error(status.HTTP_400_BAD_REQUEST, exc.message, exc.path)

        try:
            contact_data = ContactUpdate.model_validate(patched)
        except ValidationError as exc:
            return envelope.from_validation_errors(exc.errors())

        return await self.contact_service.update_contact(contact_id, contact_data)

    async def delete_contact(self, contact_id: int) -> ResponseEnvelope[bool]:
        """Delete a contact."""
        return await self.contact_service.delete_contact(contact_id)
