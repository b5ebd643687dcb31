"""Modelo de áreas comunes"""
import enum

from sqlalchemy import Column, Integer, String, Enum as SQLEnum

from app.core.database import Base


class CommonAreaStatus(str, enum.Enum):
    ACTIVA = "activa"
    INACTIVA = "inactiva"


class CommonArea(Base):
    __tablename__ = "areas_comunes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(String(1000), nullable=False)
    location = Column(String(200), nullable=False)
    max_capacity = Column(Integer, nullable=False, comment="Entre 1 y 1000 personas")
    opening_hours = Column(String(200), nullable=False)
    status = Column(
        SQLEnum(CommonAreaStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False
    )

    def __repr__(self):
        return f"<CommonArea(id={self.id}, name='{self.name}')>"
