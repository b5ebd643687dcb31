"""
Schemas de Solicitudes
Conjunto Residencial Arkania
"""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List

from app.models.service_request import RequestType, RequestStatus


class ServiceRequestCreate(BaseModel):
    """Schema para crear solicitud"""
    user_id: int = Field(..., gt=0)
    request_type: RequestType
    description: str = Field(..., min_length=10, max_length=500)
    status: RequestStatus = RequestStatus.PENDIENTE

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": 7,
                "request_type": "mantenimiento",
                "description": "Filtración de agua en el baño principal del apartamento 502"
            }
        }


class ServiceRequestUpdate(BaseModel):
    """Solo se editan el estado y la descripción"""
    status: Optional[RequestStatus] = None
    description: Optional[str] = Field(None, min_length=10, max_length=500)


class ServiceRequestResponse(BaseModel):
    id: int
    user_id: int
    request_type: RequestType
    description: str
    status: RequestStatus
    created_at: datetime
    resolved_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ServiceRequestPaginatedResponse(BaseModel):
    items: List[ServiceRequestResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
