"""
Schemas de Usuarios
Conjunto Residencial Arkania
"""
from pydantic import BaseModel, EmailStr, Field, field_validator
from datetime import datetime
from typing import Optional, List, Dict

from app.models.user import DocumentType

PHONE_PATTERN = r"^[0-9+\-\s()]*$"


class UserBase(BaseModel):
    """Base para usuarios"""
    document_type: DocumentType = Field(..., description="Tipo de documento: CC, CE, TI, PP, NIT")
    document_number: str = Field(..., min_length=6, max_length=20)
    first_name: str = Field(..., min_length=2, max_length=50)
    last_name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr = Field(..., max_length=150)
    phone: Optional[str] = Field(None, max_length=15, pattern=PHONE_PATTERN)

    @field_validator("document_number", "first_name", "last_name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("no puede estar vacío")
        return value


class UserCreate(UserBase):
    """Schema para crear usuario"""
    password: str = Field(..., min_length=8)

    class Config:
        json_schema_extra = {
            "example": {
                "document_type": "CC",
                "document_number": "1020304050",
                "first_name": "María",
                "last_name": "Gómez",
                "email": "maria.gomez@example.com",
                "phone": "+57 300 1234567",
                "password": "Arkania2024"
            }
        }


class UserUpdate(BaseModel):
    """
    Schema para actualizar usuario

    En PUT se envían todos los campos; en PATCH solo los que cambian.
    """
    document_type: Optional[DocumentType] = None
    document_number: Optional[str] = Field(None, min_length=6, max_length=20)
    first_name: Optional[str] = Field(None, min_length=2, max_length=50)
    last_name: Optional[str] = Field(None, min_length=2, max_length=50)
    email: Optional[EmailStr] = Field(None, max_length=150)
    phone: Optional[str] = Field(None, max_length=15, pattern=PHONE_PATTERN)
    password: Optional[str] = Field(None, min_length=8)
    is_active: Optional[bool] = None


class UserReplace(UserBase):
    """Schema para reemplazo completo (PUT)"""
    password: Optional[str] = Field(None, min_length=8)
    is_active: Optional[bool] = None


class UserResponse(BaseModel):
    """Schema de respuesta de usuario (sin contraseña)"""
    id: int
    document_type: DocumentType
    document_number: str
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# =============================================================================
# SCHEMAS DE PAGINACIÓN
# =============================================================================

class UserPaginatedResponse(BaseModel):
    """Response paginada de usuarios"""
    items: List[UserResponse]
    total: int
    page: int
    page_size: int
    total_pages: int

    class Config:
        json_schema_extra = {
            "example": {
                "items": [],
                "total": 50,
                "page": 1,
                "page_size": 20,
                "total_pages": 3
            }
        }


# =============================================================================
# SCHEMAS DE ESTADÍSTICAS
# =============================================================================

class UserStatistics(BaseModel):
    """Schema de estadísticas de usuarios"""
    total: int
    active: int
    inactive: int
    by_document_type: Dict[str, int]
    created_last_month: int

    class Config:
        json_schema_extra = {
            "example": {
                "total": 120,
                "active": 110,
                "inactive": 10,
                "by_document_type": {"CC": 100, "CE": 12, "PP": 8},
                "created_last_month": 6
            }
        }


# =============================================================================
# SCHEMAS DE ACCIONES
# =============================================================================

class ChangePasswordRequest(BaseModel):
    """Request para cambio de contraseña"""
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)

    class Config:
        json_schema_extra = {
            "example": {
                "current_password": "Arkania2024",
                "new_password": "NuevaClave2025"
            }
        }


class ResetPasswordRequest(BaseModel):
    """Request para restablecer contraseña"""
    new_password: str = Field(..., min_length=8, description="Nueva contraseña")


class ValidationResponse(BaseModel):
    """Response para validaciones de disponibilidad"""
    available: bool
    message: str


class DocumentTypeResponse(BaseModel):
    code: str
    description: str
