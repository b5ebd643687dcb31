"""Modelo de parqueaderos"""
import enum

from sqlalchemy import Column, Integer, String, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.apartment import UnitStatus


class ParkingRoleType(str, enum.Enum):
    RESIDENTE = "RESIDENTE"
    VISITANTE = "VISITANTE"


class ParkingSpot(Base):
    __tablename__ = "parqueaderos"

    id = Column(Integer, primary_key=True, index=True)
    role_type = Column(SQLEnum(ParkingRoleType), nullable=False)
    number = Column(String(15), unique=True, nullable=False)
    user_id = Column(Integer, ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True, index=True)
    status = Column(SQLEnum(UnitStatus), nullable=False, default=UnitStatus.LIBRE)

    user = relationship("User", back_populates="parking_spots")

    def __repr__(self):
        return f"<ParkingSpot(id={self.id}, number='{self.number}', status='{self.status}')>"
