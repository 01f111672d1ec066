"""
Health service.
Reports uptime and the state of the contact store.
"""

import time

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.logging import get_logger
from app.db.repositories.contact_repository import ContactRepository
from app.db.repositories.health_repository import HealthRepository
from app.schemas.health import HealthResponse
from app.services.base_service import BaseService

logger = get_logger(__name__)


class HealthService(BaseService):
    """Service for health check operations."""

    def __init__(self):
        self.start_time = time.time()

    async def get_health(self, session: AsyncSession) -> HealthResponse:
        """
        Get system health status.

        Returns:
            HealthResponse with status, uptime, checks and the stored contact count
        """
        uptime_seconds = int(time.time() - self.start_time)
        uptime_str = f"PT{uptime_seconds}S"  # ISO 8601 duration format

        checks = {}
        contacts = None

        repo = HealthRepository(session=session)
        db_ok = await repo.check_database()
        checks["database"] = "ok" if db_ok else "error"

        if db_ok:
            try:
                contacts = await ContactRepository(session).count_all()
                checks["contacts"] = "ok"
            except Exception as e:
                logger.warning("Contact store check failed", extra={"error": str(e)})
                checks["contacts"] = "error"

        status = "ok" if all(check == "ok" for check in checks.values()) else "degraded"

        return HealthResponse(
            status=status,
            version=settings.VERSION,
            uptime=uptime_str,
            checks=checks,
            contacts=contacts,
        )
