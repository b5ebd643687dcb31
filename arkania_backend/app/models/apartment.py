"""Modelo de apartamentos"""
import enum

from sqlalchemy import Column, Integer, String, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship

from app.core.database import Base


class UnitStatus(str, enum.Enum):
    """Estado de apartamentos y parqueaderos"""
    LIBRE = "LIBRE"
    OCUPADO = "OCUPADO"
    INACTIVO = "INACTIVO"


class Apartment(Base):
    __tablename__ = "apartamentos"

    id = Column(Integer, primary_key=True, index=True)
    number = Column(String(10), nullable=False)
    tower = Column(String(20), nullable=False)
    owner_id = Column(Integer, ForeignKey("usuarios.id"), nullable=False, index=True)
    status = Column(SQLEnum(UnitStatus), nullable=False, default=UnitStatus.LIBRE)

    owner = relationship("User", back_populates="apartments")
    correspondence = relationship("Correspondence", back_populates="apartment")

    def __repr__(self):
        return f"<Apartment(id={self.id}, tower='{self.tower}', number='{self.number}')>"
