"""
Contact service with business logic.
Every operation returns a ResponseEnvelope; failures never escape raw.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import messages
from app.core.config import settings
from app.core.logging import get_logger
from app.db.repositories.contact_repository import ContactRepository
from app.models.contact import Address, Contact, EmergencyContact
from app.schemas.common import (
    PaginatedResponse,
    PaginationInfo,
    ResponseEnvelope,
    SORTABLE_FIELDS,
    SortInfo,
)
from app.schemas.contact import (
    AddressWrite,
    ContactCreate,
    ContactListItem,
    ContactResponse,
    ContactSearchCriteria,
    ContactUpdate,
    EmergencyContactWrite,
)
from app.services.base_service import BaseService

logger = get_logger(__name__)

# Fields copied from a write schema onto the Contact row
_SCALAR_FIELDS = (
    "prefix",
    "first_name",
    "last_name",
    "contact_number",
    "alternative_contact_number",
    "company_name",
    "job_title",
    "notes",
    "date_of_birth",
)
_ADDRESS_FIELDS = ("address1", "address2", "city", "state", "zip_code", "country")
_EMERGENCY_CONTACT_FIELDS = ("name", "relationship", "phone_number", "email")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ContactService(BaseService):
    """Service for contact operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.contact_repo = ContactRepository(session)

    async def search_contacts(
        self,
        criteria: Optional[ContactSearchCriteria],
    ) -> ResponseEnvelope[PaginatedResponse[ContactListItem]]:
        """Search contacts by criteria with paging and sorting."""
        envelope = ResponseEnvelope[PaginatedResponse[ContactListItem]]
        criteria = criteria or ContactSearchCriteria()
        pagination = criteria.pagination_info or PaginationInfo(page_size=settings.DEFAULT_PAGE_SIZE)
        sort = criteria.sort_info or SortInfo()
        if sort.sort_by not in SORTABLE_FIELDS:
            logger.info("Unsupported sort field, using default", extra={"sort_by": sort.sort_by})
            sort = SortInfo()

        try:
            contacts, total = await self.contact_repo.search(criteria, pagination, sort)
        except Exception:
            logger.exception("Error occurred while getting contacts by criteria")
            await self.session.rollback()
            return envelope.error(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                messages.ERROR_RETRIEVING_CONTACTS,
            )

        page = PaginatedResponse[ContactListItem](
            items=[ContactListItem.from_contact(contact) for contact in contacts],
            pagination_info=PaginationInfo(
                current_page=pagination.current_page,
                page_size=pagination.page_size,
                total_records=total,
            ),
            sort_info=sort,
        )
        return envelope.ok(page)

    async def get_contact(self, contact_id: int) -> ResponseEnvelope[ContactResponse]:
        """Get contact by ID."""
        envelope = ResponseEnvelope[ContactResponse]
        if contact_id <= 0:
            return envelope.error(
                status.HTTP_400_BAD_REQUEST,
                messages.INVALID_ID,
                messages.CONTACT_ID_FIELD,
            )

        try:
            contact = await self.contact_repo.get(contact_id)
        except Exception:
            logger.exception("Error occurred while getting contact", extra={"contact_id": contact_id})
            await self.session.rollback()
            return envelope.error(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                messages.error_retrieving_contact(contact_id),
            )

        if contact is None:
            logger.warning("Contact not found", extra={"contact_id": contact_id})
            return envelope.error(
                status.HTTP_404_NOT_FOUND,
                messages.contact_not_found(contact_id),
            )
        return envelope.ok(self._to_response(contact))

    async def create_contact(
        self,
        contact_data: Optional[ContactCreate],
    ) -> ResponseEnvelope[ContactResponse]:
        """Create a new contact. The store assigns the id; createdOn is stamped now."""
        envelope = ResponseEnvelope[ContactResponse]
        if contact_data is None:
            return envelope.error(
                status.HTTP_400_BAD_REQUEST,
                messages.CONTACT_CANNOT_BE_NULL,
                messages.CONTACT_FIELD,
            )

        try:
            contact = Contact(
                email=contact_data.email,
                created_on=utcnow(),
                updated_on=None,
                **{field: getattr(contact_data, field) for field in _SCALAR_FIELDS},
            )
            if contact_data.home_address is not None:
                contact.home_address = self._new_address(contact_data.home_address)
            contact.emergency_contacts = [
                self._new_emergency_contact(item) for item in contact_data.emergency_contacts or []
            ]
            contact = await self.contact_repo.add(contact)
            await self.session.commit()
            contact = await self.contact_repo.get(contact.id)
        except Exception:
            logger.exception("Unexpected error while creating contact")
            await self.session.rollback()
            return envelope.error(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                messages.ERROR_CREATING_CONTACT,
            )

        logger.info("Contact created", extra={"contact_id": contact.id})
        return envelope.ok(self._to_response(contact))

    async def update_contact(
        self,
        contact_id: int,
        contact_data: Optional[ContactUpdate],
    ) -> ResponseEnvelope[ContactResponse]:
        """
        Replace a contact's mutable fields and stamp updatedOn.

        Email and createdOn are kept from the stored record. Concurrent updates
        of the same contact are last-write-wins.
        """
        envelope = ResponseEnvelope[ContactResponse]
        if contact_data is None:
            return envelope.error(
                status.HTTP_400_BAD_REQUEST,
                messages.CONTACT_CANNOT_BE_NULL,
                messages.CONTACT_FIELD,
            )
        if contact_id <= 0:
            return envelope.error(
                status.HTTP_400_BAD_REQUEST,
                messages.INVALID_ID,
                messages.CONTACT_ID_FIELD,
            )
        if contact_id != contact_data.id:
            return envelope.error(
                status.HTTP_400_BAD_REQUEST,
                messages.CONTACT_ID_MISMATCH,
                messages.CONTACT_ID_FIELD,
            )

        try:
            if not await self.contact_exists(contact_id):
                logger.warning("Attempted to update non-existent contact", extra={"contact_id": contact_id})
                return envelope.error(
                    status.HTTP_404_NOT_FOUND,
                    messages.contact_not_found(contact_id),
                )

            contact = await self.contact_repo.get(contact_id)
            self._replace_address(contact, contact_data.home_address)
            self._replace_emergency_contacts(contact, contact_data.emergency_contacts or [])
            await self.contact_repo.update(
                contact,
                updated_on=utcnow(),
                **{field: getattr(contact_data, field) for field in _SCALAR_FIELDS},
            )
            await self.session.commit()
            contact = await self.contact_repo.get(contact_id)
        except Exception:
            logger.exception("Unexpected error while updating contact", extra={"contact_id": contact_id})
            await self.session.rollback()
            return envelope.error(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                messages.error_updating_contact(contact_id),
            )

        logger.info("Contact updated", extra={"contact_id": contact_id})
        return envelope.ok(self._to_response(contact))

    async def delete_contact(self, contact_id: int) -> ResponseEnvelope[bool]:
        """Delete a contact together with its address and emergency contacts."""
        envelope = ResponseEnvelope[bool]
        if contact_id <= 0:
            return envelope.error(
                status.HTTP_400_BAD_REQUEST,
                messages.INVALID_ID,
                messages.CONTACT_ID_FIELD,
            )

        try:
            if not await self.contact_exists(contact_id):
                logger.warning("Attempted to delete non-existent contact", extra={"contact_id": contact_id})
                return envelope.error(
                    status.HTTP_404_NOT_FOUND,
                    messages.contact_not_found(contact_id),
                )

            await self.contact_repo.delete(contact_id)
            await self.session.commit()
        except Exception:
            logger.exception("Unexpected error while deleting contact", extra={"contact_id": contact_id})
            await self.session.rollback()
            return envelope.error(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                messages.error_deleting_contact(contact_id),
            )

        logger.info("Contact deleted", extra={"contact_id": contact_id})
        return envelope.ok(True)

    async def contact_exists(self, contact_id: int) -> bool:
        """Existence check used before mutating. Errors are logged and re-raised."""
        try:
            return await self.contact_repo.exists(contact_id)
        except Exception:
            logger.error("Error checking if contact exists", extra={"contact_id": contact_id})
            raise

    def _replace_address(self, contact: Contact, address_data: Optional[AddressWrite]) -> None:
        if address_data is None:
            contact.home_address = None
        elif contact.home_address is None:
            contact.home_address = self._new_address(address_data)
        else:
            for field in _ADDRESS_FIELDS:
                setattr(contact.home_address, field, getattr(address_data, field))

    def _replace_emergency_contacts(
        self,
        contact: Contact,
        items: List[EmergencyContactWrite],
    ) -> None:
        existing: Dict[int, EmergencyContact] = {item.id: item for item in contact.emergency_contacts}
        replacement = []
        for item in items:
            current = existing.pop(item.id, None) if item.id is not None else None
            if current is None:
                replacement.append(self._new_emergency_contact(item))
                continue
            for field in _EMERGENCY_CONTACT_FIELDS:
                setattr(current, field, getattr(item, field))
            replacement.append(current)
        # Records left out of the list are deleted as orphans
        contact.emergency_contacts = replacement

    @staticmethod
    def _new_address(address_data: AddressWrite) -> Address:
        return Address(**{field: getattr(address_data, field) for field in _ADDRESS_FIELDS})

    @staticmethod
    def _new_emergency_contact(item: EmergencyContactWrite) -> EmergencyContact:
        return EmergencyContact(**{field: getattr(item, field) for field in _EMERGENCY_CONTACT_FIELDS})

    def _to_response(self, contact: Contact) -> ContactResponse:
        """Convert contact model to response schema."""
        return ContactResponse.model_validate(contact)
