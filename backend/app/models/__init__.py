"""
Database models.
Import all models here to ensure they're registered with Base.
"""

from app.models.contact import Contact, Address, EmergencyContact

__all__ = [
    "Contact",
    "Address",
    "EmergencyContact",
]
