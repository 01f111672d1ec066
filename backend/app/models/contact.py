"""
Contact model with its owned home address and emergency contacts.
"""

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.db.base import Base


class Contact(Base):
    """Contact model (root entity)."""

    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    prefix = Column(String(5), nullable=True)
    first_name = Column(String(50), nullable=False, index=True)
    last_name = Column(String(50), nullable=True, index=True)
    email = Column(String(255), nullable=False, index=True)
    contact_number = Column(String(50), nullable=True)
    alternative_contact_number = Column(String(50), nullable=True)
    company_name = Column(String(50), nullable=True)
    job_title = Column(String(50), nullable=True)
    notes = Column(String(500), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    created_on = Column(DateTime(timezone=True), nullable=False)
    updated_on = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    home_address = relationship(
        "Address",
        back_populates="contact",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    emergency_contacts = relationship(
        "EmergencyContact",
        back_populates="contact",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="EmergencyContact.id",
    )


class Address(Base):
    """Home address (one-to-one with Contact)."""

    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    contact_id = Column(Integer, ForeignKey("contacts.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    address1 = Column(String(100), nullable=True)
    address2 = Column(String(100), nullable=True)
    city = Column(String(30), nullable=True)
    state = Column(String(30), nullable=True)
    zip_code = Column(String(10), nullable=True)
    country = Column(String(30), nullable=True)

    contact = relationship("Contact", back_populates="home_address")


class EmergencyContact(Base):
    """Emergency contact (many-to-one with Contact, at most three per contact)."""

    __tablename__ = "emergency_contacts"

    # Must precede the "relationship" column, which shadows the function in this class body.
    contact = relationship("Contact", back_populates="emergency_contacts")

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    contact_id = Column(Integer, ForeignKey("contacts.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    relationship = Column(String(50), nullable=False)
    phone_number = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False)
