"""
Seed data loading tests.
"""

import json

import pytest

from app.core.config import settings
from app.db import session as db_session
from app.db.init_db import DEFAULT_SEED_FILE, load_seed_contacts, seed_initial_data
from app.db.repositories.contact_repository import ContactRepository


@pytest.fixture
def seed_session_maker(test_session_maker, monkeypatch):
    monkeypatch.setattr(db_session, "async_session_maker", test_session_maker)
    return test_session_maker


async def stored_count(session_maker) -> int:
    async with session_maker() as session:
        return await ContactRepository(session).count_all()


def test_bundled_seed_file_is_valid():
    contacts = load_seed_contacts(DEFAULT_SEED_FILE)

    assert len(contacts) == 5
    assert all(contact.first_name for contact in contacts)


@pytest.mark.asyncio
async def test_seeds_empty_store_once(seed_session_maker):
    assert await seed_initial_data(str(DEFAULT_SEED_FILE)) == 5
    assert await seed_initial_data(str(DEFAULT_SEED_FILE)) == 0
    assert await stored_count(seed_session_maker) == 5


@pytest.mark.asyncio
async def test_no_seed_path_seeds_nothing(seed_session_maker, monkeypatch):
    monkeypatch.setattr(settings, "SEED_DATA_PATH", None)

    assert await seed_initial_data() == 0
    assert await stored_count(seed_session_maker) == 0


@pytest.mark.asyncio
async def test_missing_or_invalid_file_seeds_nothing(seed_session_maker, tmp_path):
    broken = tmp_path / "contacts.json"
    broken.write_text(json.dumps([{"firstName": "", "email": "not-an-email"}]), encoding="utf-8")

    assert await seed_initial_data(str(tmp_path / "absent.json")) == 0
    assert await seed_initial_data(str(broken)) == 0
    assert await stored_count(seed_session_maker) == 0
