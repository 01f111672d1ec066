"""
Health check response schemas.
"""

from pydantic import BaseModel
from typing import Dict, Optional


class HealthResponse(BaseModel):
    """Health check response schema."""
    status: str
    version: str
    uptime: str
    checks: Dict[str, str] = {}
    contacts: Optional[int] = None
