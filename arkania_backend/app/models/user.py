"""Modelo de usuarios"""
import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.utils import utc_now_naive


class DocumentType(str, enum.Enum):
    CC = "CC"
    CE = "CE"
    TI = "TI"
    PP = "PP"
    NIT = "NIT"


class User(Base):
    """Residentes, propietarios y personal del conjunto"""
    __tablename__ = "usuarios"

    id = Column(Integer, primary_key=True, index=True)
    document_type = Column(SQLEnum(DocumentType), nullable=False, comment="CC, CE, TI, PP o NIT")
    document_number = Column(String(20), unique=True, nullable=False, index=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(150), unique=True, nullable=False, index=True)
    phone = Column(String(15), nullable=True)
    password_hash = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, comment="Soft delete")
    created_at = Column(DateTime, default=utc_now_naive, nullable=False)
    updated_at = Column(DateTime, default=utc_now_naive, onupdate=utc_now_naive, nullable=False)

    role_assignments = relationship(
        "UserRole", back_populates="user", cascade="all, delete-orphan"
    )
    apartments = relationship("Apartment", back_populates="owner")
    parking_spots = relationship("ParkingSpot", back_populates="user")
    service_requests = relationship("ServiceRequest", back_populates="user")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<User(id={self.id}, document='{self.document_number}', email='{self.email}')>"
