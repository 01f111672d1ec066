"""
Health controller.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.base_controller import BaseController
from app.schemas.health import HealthResponse
from app.services.health_service import HealthService


class HealthController(BaseController):
    """Controller for health check operations."""

    def __init__(self, health_service: HealthService):
        self.health_service = health_service

    async def get_health(self, session: AsyncSession) -> HealthResponse:
        """Get system health status using the request's database session."""
        return await self.health_service.get_health(session)
