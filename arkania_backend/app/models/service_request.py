"""Modelo de solicitudes de residentes"""
import enum

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.utils import utc_now_naive


class RequestType(str, enum.Enum):
    MANTENIMIENTO = "mantenimiento"
    QUEJA = "queja"
    RESERVA = "reserva"
    CONSULTA = "consulta"


class RequestStatus(str, enum.Enum):
    PENDIENTE = "pendiente"
    EN_PROCESO = "en_proceso"
    RESUELTA = "resuelta"
    RECHAZADA = "rechazada"


# Estados que cierran la solicitud y fijan la fecha de resolución
CLOSED_STATUSES = (RequestStatus.RESUELTA, RequestStatus.RECHAZADA)


def _values(enum_cls):
    return [member.value for member in enum_cls]


class ServiceRequest(Base):
    """Solicitud de mantenimiento, queja, reserva o consulta"""
    __tablename__ = "solicitudes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False, index=True)
    request_type = Column(SQLEnum(RequestType, values_callable=_values), nullable=False)
    description = Column(String(500), nullable=False)
    status = Column(
        SQLEnum(RequestStatus, values_callable=_values),
        nullable=False,
        default=RequestStatus.PENDIENTE
    )
    created_at = Column(DateTime, default=utc_now_naive, nullable=False, index=True)
    resolved_at = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="service_requests")

    def __repr__(self):
        return f"<ServiceRequest(id={self.id}, type='{self.request_type}', status='{self.status}')>"
