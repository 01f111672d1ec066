"""
SQLAlchemy declarative base shared by the contact models.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base; its metadata creates the contact tables at startup."""
    pass
