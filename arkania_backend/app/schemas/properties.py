"""
Schemas de Apartamentos, Parqueaderos y Áreas Comunes
Conjunto Residencial Arkania
"""
from pydantic import BaseModel, Field
from typing import Optional, List

from app.models.apartment import UnitStatus
from app.models.parking_spot import ParkingRoleType
from app.models.common_area import CommonAreaStatus


# =============================================================================
# APARTAMENTOS
# =============================================================================

class ApartmentBase(BaseModel):
    number: str = Field(..., min_length=1, max_length=10)
    tower: str = Field(..., min_length=1, max_length=20)
    owner_id: int = Field(..., gt=0, description="ID del propietario")
    status: UnitStatus = UnitStatus.LIBRE


class ApartmentCreate(ApartmentBase):
    """Schema para crear apartamento"""

    class Config:
        json_schema_extra = {
            "example": {"number": "502", "tower": "Torre 2", "owner_id": 4, "status": "OCUPADO"}
        }


class ApartmentUpdate(ApartmentBase):
    """Actualización completa de apartamento"""


class ApartmentResponse(ApartmentBase):
    id: int

    class Config:
        from_attributes = True


class ApartmentPaginatedResponse(BaseModel):
    items: List[ApartmentResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


# =============================================================================
# PARQUEADEROS
# =============================================================================

class ParkingSpotBase(BaseModel):
    role_type: ParkingRoleType
    number: str = Field(..., min_length=1, max_length=15)
    user_id: Optional[int] = Field(None, gt=0, description="Usuario asignado (opcional)")
    status: UnitStatus = UnitStatus.LIBRE


class ParkingSpotCreate(ParkingSpotBase):
    """Schema para crear parqueadero"""

    class Config:
        json_schema_extra = {
            "example": {"role_type": "RESIDENTE", "number": "P-101", "user_id": 4, "status": "OCUPADO"}
        }


class ParkingSpotUpdate(ParkingSpotBase):
    """Actualización completa de parqueadero"""


class ParkingSpotResponse(ParkingSpotBase):
    id: int

    class Config:
        from_attributes = True


class ParkingSpotPaginatedResponse(BaseModel):
    items: List[ParkingSpotResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


# =============================================================================
# ÁREAS COMUNES
# =============================================================================

class CommonAreaBase(BaseModel):
    name: str = Field(..., min_length=3, max_length=100)
    description: str = Field(..., min_length=10, max_length=1000)
    location: str = Field(..., min_length=5, max_length=200)
    max_capacity: int = Field(..., ge=1, le=1000)
    opening_hours: str = Field(..., min_length=5, max_length=200)
    status: CommonAreaStatus


class CommonAreaCreate(CommonAreaBase):
    """Schema para crear área común"""

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Salón social",
                "description": "Salón para eventos de residentes con cocina",
                "location": "Torre 1, primer piso",
                "max_capacity": 80,
                "opening_hours": "Lunes a domingo 8:00 - 22:00",
                "status": "activa"
            }
        }


class CommonAreaUpdate(BaseModel):
    """Campos actualizables de un área común"""
    description: str = Field(..., min_length=10, max_length=1000)
    max_capacity: int = Field(..., ge=1, le=1000)
    opening_hours: str = Field(..., min_length=5, max_length=200)
    status: CommonAreaStatus


class CommonAreaResponse(CommonAreaBase):
    id: int

    class Config:
        from_attributes = True


class CommonAreaPaginatedResponse(BaseModel):
    items: List[CommonAreaResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
