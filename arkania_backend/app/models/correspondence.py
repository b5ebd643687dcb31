"""Modelo de correspondencia (paquetes y documentos recibidos en portería)"""
import enum

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.utils import utc_now_naive


class CorrespondenceType(str, enum.Enum):
    PAQUETE = "PAQUETE"
    DOCUMENTO = "DOCUMENTO"
    OTRO = "OTRO"


class CorrespondenceStatus(str, enum.Enum):
    PENDIENTE = "PENDIENTE"
    ENTREGADA = "ENTREGADA"


class Correspondence(Base):
    __tablename__ = "correspondencias"

    id = Column(Integer, primary_key=True, index=True)
    registered_by_id = Column(Integer, ForeignKey("usuarios.id"), nullable=False, comment="Quien la recibe en portería")
    recipient_id = Column(Integer, ForeignKey("usuarios.id"), nullable=False, index=True)
    retrieved_by_id = Column(Integer, ForeignKey("usuarios.id"), nullable=True, comment="Quien la retira")
    apartment_id = Column(Integer, ForeignKey("apartamentos.id", ondelete="SET NULL"), nullable=True)
    type = Column(SQLEnum(CorrespondenceType), nullable=False)
    received_at = Column(DateTime, default=utc_now_naive, nullable=False, index=True)
    delivered_at = Column(DateTime, nullable=True)
    status = Column(SQLEnum(CorrespondenceStatus), nullable=False, default=CorrespondenceStatus.PENDIENTE)
    notes = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=utc_now_naive, nullable=False)
    updated_at = Column(DateTime, default=utc_now_naive, onupdate=utc_now_naive, nullable=False)

    registered_by = relationship("User", foreign_keys=[registered_by_id])
    recipient = relationship("User", foreign_keys=[recipient_id])
    retrieved_by = relationship("User", foreign_keys=[retrieved_by_id])
    apartment = relationship("Apartment", back_populates="correspondence")

    @property
    def registered_by_name(self):
        return self.registered_by.full_name if self.registered_by else None

    @property
    def recipient_name(self):
        return self.recipient.full_name if self.recipient else None

    @property
    def retrieved_by_name(self):
        return self.retrieved_by.full_name if self.retrieved_by else None

    def __repr__(self):
        return f"<Correspondence(id={self.id}, type='{self.type}', status='{self.status}')>"
