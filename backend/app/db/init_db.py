"""
Database initialization and bootstrapping.
Creates tables and seeds an empty store from a JSON file.
"""

import json
from pathlib import Path
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from app.core.config import settings
from app.core.logging import get_logger
from app.db import session as db_session
from app.db.base import Base
from app.db.repositories.contact_repository import ContactRepository
from app.schemas.contact import ContactCreate

# Registers the models with Base.metadata
import app.models  # noqa: F401

logger = get_logger(__name__)

DEFAULT_SEED_FILE = Path(__file__).resolve().parent.parent / "data" / "contacts.json"


async def create_tables() -> None:
    """Create all database tables that do not exist yet."""
    async with db_session.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database tables initialized")


def load_seed_contacts(path: Path) -> List[ContactCreate]:
    """Read and validate seed contacts from a JSON array file."""
    raw = json.loads(path.read_text(encoding="utf-8"))
    return TypeAdapter(List[ContactCreate]).validate_python(raw)


async def seed_initial_data(path: Optional[str] = None) -> int:
    """
    Seed contacts into an empty store.

    Uses ``path`` or ``SEED_DATA_PATH``; nothing is seeded when neither is set
    or the store already holds contacts. Returns the number of contacts created.
    """
    seed_path = path or settings.SEED_DATA_PATH
    if not seed_path:
        logger.info("Initial data seeding skipped")
        return 0

    seed_file = Path(seed_path)
    if not seed_file.is_file():
        logger.warning("Seed file not found", extra={"path": str(seed_file)})
        return 0

    try:
        contacts = load_seed_contacts(seed_file)
    except (json.JSONDecodeError, ValidationError):
        logger.exception("Seed file is invalid", extra={"path": str(seed_file)})
        return 0

    from app.services.contact_service import ContactService

    async with db_session.async_session_maker() as session:
        repo = ContactRepository(session)
        if await repo.count_all() > 0:
            logger.info("Store already populated, seeding skipped")
            return 0

        service = ContactService(session)
        created = 0
        for contact in contacts:
            response = await service.create_contact(contact)
            if response.success:
                created += 1

    logger.info("Initial data seeded", extra={"contacts": created})
    return created
