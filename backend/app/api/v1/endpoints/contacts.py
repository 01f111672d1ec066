"""
Contact API endpoints.
Every route answers with a response envelope; see BaseController.to_http_response.
"""

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.controllers.contact_controller import ContactController
from app.schemas.common import PaginatedResponse, ResponseEnvelope
from app.schemas.contact import (
    ContactCreate,
    ContactListItem,
    ContactResponse,
    ContactSearchCriteria,
    ContactUpdate,
    PatchOperation,
)

router = APIRouter()


@router.post("/search", response_model=ResponseEnvelope[PaginatedResponse[ContactListItem]])
async def search_contacts(
    criteria: Optional[ContactSearchCriteria] = Body(None),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Search contacts with filters, paging and sorting."""
    controller = ContactController(db)
    return controller.to_http_response(await controller.search_contacts(criteria))


@router.get("/{contact_id}", response_model=ResponseEnvelope[ContactResponse])
async def get_contact(
    contact_id: int,
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Get contact by ID."""
    controller = ContactController(db)
    return controller.to_http_response(await controller.get_contact(contact_id))


@router.post("", response_model=ResponseEnvelope[ContactResponse])
async def create_contact(
    contact_data: Optional[ContactCreate] = Body(None),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Create a new contact."""
    controller = ContactController(db)
    return controller.to_http_response(await controller.create_contact(contact_data))


@router.put("/{contact_id}", response_model=ResponseEnvelope[ContactResponse])
async def update_contact(
    contact_id: int,
    contact_data: Optional[ContactUpdate] = Body(None),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Replace a contact."""
    controller = ContactController(db)
    return controller.to_http_response(await controller.update_contact(contact_id, contact_data))


@router.patch("/{contact_id}", response_model=ResponseEnvelope[ContactResponse])
async def patch_contact(
    contact_id: int,
    operations: Optional[List[PatchOperation]] = Body(None),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Partially update a contact with a JSON Patch document."""
    controller = ContactController(db)
    return controller.to_http_response(await controller.patch_contact(contact_id, operations))


@router.delete("/{contact_id}", response_model=ResponseEnvelope[bool])
async def delete_contact(
    contact_id: int,
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Delete a contact."""
    controller = ContactController(db)
    return controller.to_http_response(await controller.delete_contact(contact_id))
