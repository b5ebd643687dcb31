"""
Schemas de Correspondencia
Conjunto Residencial Arkania
"""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List

from app.models.correspondence import CorrespondenceType, CorrespondenceStatus


class CorrespondenceBase(BaseModel):
    registered_by_id: int = Field(..., gt=0, description="Usuario que registra la recepción")
    recipient_id: int = Field(..., gt=0, description="Usuario destinatario")
    apartment_id: Optional[int] = Field(None, gt=0)
    type: CorrespondenceType
    notes: Optional[str] = Field(None, max_length=500)


class CorrespondenceCreate(CorrespondenceBase):
    """Schema para registrar correspondencia"""
    received_at: Optional[datetime] = Field(None, description="Por defecto, la fecha actual")

    class Config:
        json_schema_extra = {
            "example": {
                "registered_by_id": 2,
                "recipient_id": 7,
                "apartment_id": 12,
                "type": "PAQUETE",
                "notes": "Caja mediana, empresa de mensajería"
            }
        }


class CorrespondenceUpdate(CorrespondenceBase):
    """Actualización completa de correspondencia"""
    retrieved_by_id: Optional[int] = Field(None, gt=0)
    received_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    status: CorrespondenceStatus = CorrespondenceStatus.PENDIENTE


class DeliverRequest(BaseModel):
    """Request para registrar la entrega"""
    retrieved_by_id: int = Field(..., gt=0, description="Usuario que retira")
    notes: Optional[str] = Field(None, max_length=500)


class CorrespondenceResponse(CorrespondenceBase):
    id: int
    retrieved_by_id: Optional[int] = None
    status: CorrespondenceStatus
    received_at: datetime
    delivered_at: Optional[datetime] = None
    registered_by_name: Optional[str] = None
    recipient_name: Optional[str] = None
    retrieved_by_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CorrespondencePaginatedResponse(BaseModel):
    items: List[CorrespondenceResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
