"""
Contact service tests for create, update, delete and the existence check.
"""

from datetime import timedelta

import pytest
from sqlalchemy import func, select

from app.models.contact import Address, EmergencyContact
from app.schemas.contact import (
    AddressWrite,
    ContactCreate,
    ContactUpdate,
    EmergencyContactWrite,
)
from app.services.contact_service import ContactService

from conftest import as_naive_utc, utc_now_naive


def new_contact(**overrides) -> ContactCreate:
    data = {
        "first_name": "Ann",
        "last_name": "Smith",
        "email": "ann@x.com",
        "home_address": AddressWrite(address1="1 Main St", city="Springfield"),
        "emergency_contacts": [
            EmergencyContactWrite(name="Tom", relationship="Brother", phone_number="555-0100", email="tom@x.com"),
            EmergencyContactWrite(name="Sue", relationship="Sister", phone_number="555-0101", email="sue@x.com"),
        ],
    }
    data.update(overrides)
    return ContactCreate(**data)


async def count_rows(session, model) -> int:
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar()


@pytest.fixture
def service(test_db_session):
    return ContactService(test_db_session)


@pytest.mark.asyncio
async def test_create_assigns_id_and_creation_time(service):
    before = utc_now_naive()

    response = await service.create_contact(new_contact())

    assert response.success
    assert response.status_code == 200
    contact = response.data
    assert contact.id > 0
    assert contact.updated_on is None
    created_on = as_naive_utc(contact.created_on)
    assert before - timedelta(seconds=5) <= created_on <= utc_now_naive() + timedelta(seconds=5)
    assert contact.home_address.contact_id == contact.id
    assert [item.name for item in contact.emergency_contacts] == ["Tom", "Sue"]


@pytest.mark.asyncio
async def test_create_without_data_is_bad_request(service):
    response = await service.create_contact(None)

    assert response.status_code == 400
    assert response.errors[0].field == "Contact"


@pytest.mark.asyncio
async def test_ids_are_unique(service):
    first = await service.create_contact(new_contact())
    second = await service.create_contact(new_contact(email="other@x.com"))

    assert first.data.id != second.data.id


@pytest.mark.asyncio
async def test_get_unknown_contact(service):
    response = await service.get_contact(5)

    assert response.status_code == 404
    assert response.errors[0].field is None
    assert response.errors[0].message == "Contact with Id 5 not found"


@pytest.mark.asyncio
async def test_update_stamps_time_and_keeps_immutable_fields(service):
    created = (await service.create_contact(new_contact())).data
    tom = created.emergency_contacts[0]
    update = ContactUpdate(
        id=created.id,
        first_name="Annie",
        email="changed@x.com",
        home_address=AddressWrite(city="Shelbyville"),
        emergency_contacts=[
            EmergencyContactWrite(
                id=tom.id, name="Thomas", relationship="Brother", phone_number="555-0100", email="tom@x.com"
            ),
            EmergencyContactWrite(name="Max", relationship="Friend", phone_number="555-0199", email="max@x.com"),
        ],
    )

    response = await service.update_contact(created.id, update)

    assert response.success
    updated = response.data
    assert updated.first_name == "Annie"
    assert updated.last_name is None
    assert updated.email == "ann@x.com"
    assert updated.created_on == created.created_on
    assert updated.updated_on is not None
    assert updated.home_address.id == created.home_address.id
    assert updated.home_address.city == "Shelbyville"
    assert updated.home_address.address1 is None
    names = {item.id: item.name for item in updated.emergency_contacts}
    assert names[tom.id] == "Thomas"
    assert sorted(names.values()) == ["Max", "Thomas"]
    assert await count_rows(service.session, EmergencyContact) == 2


@pytest.mark.asyncio
async def test_update_validation(service):
    created = (await service.create_contact(new_contact())).data
    body = ContactUpdate(id=created.id, first_name="Ann", email="ann@x.com")

    missing = await service.update_contact(created.id, None)
    bad_id = await service.update_contact(0, body)
    mismatch = await service.update_contact(created.id + 1, body)
    unknown = await service.update_contact(99, ContactUpdate(id=99, first_name="Ann", email="ann@x.com"))

    assert (missing.status_code, missing.errors[0].field) == (400, "Contact")
    assert (bad_id.status_code, bad_id.errors[0].field) == (400, "ContactId")
    assert (mismatch.status_code, mismatch.errors[0].field) == (400, "ContactId")
    assert unknown.status_code == 404


@pytest.mark.asyncio
async def test_delete_cascades_to_owned_records(service):
    created = (await service.create_contact(new_contact())).data

    response = await service.delete_contact(created.id)

    assert response.success
    assert response.data is True
    assert await count_rows(service.session, Address) == 0
    assert await count_rows(service.session, EmergencyContact) == 0
    assert (await service.get_contact(created.id)).status_code == 404


@pytest.mark.asyncio
async def test_delete_unknown_contact_is_not_found_twice(service):
    first = await service.delete_contact(8)
    second = await service.delete_contact(8)

    assert first.status_code == second.status_code == 404


@pytest.mark.asyncio
async def test_contact_exists(service):
    created = (await service.create_contact(new_contact())).data

    assert await service.contact_exists(created.id) is True
    assert await service.contact_exists(created.id + 100) is False


@pytest.mark.asyncio
async def test_existence_check_failure_becomes_internal_error(service, monkeypatch):
    created = (await service.create_contact(new_contact())).data

    async def broken(contact_id):
        raise RuntimeError("connection reset")

    monkeypatch.setattr(service.contact_repo, "exists", broken)

    with pytest.raises(RuntimeError):
        await service.contact_exists(created.id)

    response = await service.delete_contact(created.id)
    assert response.status_code == 500
    assert response.errors[0].message == f"An unexpected error occurred while deleting the contact with ID: {created.id}"
    assert "connection reset" not in response.errors[0].message
