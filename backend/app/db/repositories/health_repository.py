"""
Health repository.
Provides database health check functionality.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text

from app.core.logging import get_logger

logger = get_logger(__name__)


class HealthRepository:
    """Repository for health check operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def check_database(self) -> bool:
        """
        Check database connectivity.

        Returns:
            True if the database answers a trivial query, False otherwise
        """
        try:
            result = await self.session.execute(text("SELECT 1"))
            return result.scalar() == 1
        except Exception as e:
            logger.warning("Database check failed", extra={"error": str(e)})
            return False
