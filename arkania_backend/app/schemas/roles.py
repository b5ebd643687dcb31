"""
Schemas de Roles
Conjunto Residencial Arkania
"""
import re

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional, List, Dict

from app.core.policies import ROLE_NAME_PATTERN


def _normalize_role_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip().upper()
    if not re.match(ROLE_NAME_PATTERN, value):
        raise ValueError("El nombre del rol solo puede contener letras mayúsculas y guiones bajos")
    return value


class RoleBase(BaseModel):
    """Base para roles"""
    name: str = Field(..., min_length=3, max_length=50, description="Se convierte a mayúsculas")
    description: Optional[str] = Field(None, max_length=255)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        return _normalize_role_name(value)


class RoleCreate(RoleBase):
    """Schema para crear rol"""
    permissions: List[str] = Field(default_factory=list)
    is_active: bool = True

    class Config:
        json_schema_extra = {
            "example": {
                "name": "CONSERJE",
                "description": "Personal de mantenimiento y servicios generales",
                "permissions": ["READ_PROFILE", "READ_CORRESPONDENCE"]
            }
        }


class RoleUpdate(BaseModel):
    """Schema para actualizar rol (PUT completo o PATCH parcial)"""
    name: Optional[str] = Field(None, min_length=3, max_length=50)
    description: Optional[str] = Field(None, max_length=255)
    permissions: Optional[List[str]] = None
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: Optional[str]) -> Optional[str]:
        return _normalize_role_name(value)


class RoleResponse(BaseModel):
    """Schema de respuesta de rol"""
    id: int
    name: str
    description: Optional[str] = None
    is_active: bool
    permissions: List[str] = Field(default_factory=list, validation_alias="permission_list")
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RolePaginatedResponse(BaseModel):
    """Response paginada de roles"""
    items: List[RoleResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class PermissionsRequest(BaseModel):
    """Request para reemplazar los permisos de un rol"""
    permissions: List[str]

    class Config:
        json_schema_extra = {
            "example": {"permissions": ["READ_PROFILE", "UPDATE_PROFILE"]}
        }


class RoleStatistics(BaseModel):
    """Schema de estadísticas de roles"""
    total: int
    active: int
    inactive: int
    users_by_role: Dict[str, int]
