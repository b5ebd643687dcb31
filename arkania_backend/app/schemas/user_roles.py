"""
Schemas de Asignaciones Usuario-Rol
Conjunto Residencial Arkania
"""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List, Dict


class UserRoleCreate(BaseModel):
    """Schema para crear una asignación"""
    user_id: int = Field(..., gt=0)
    role_id: int = Field(..., gt=0)

    class Config:
        json_schema_extra = {
            "example": {"user_id": 3, "role_id": 2}
        }


class UserRoleUpdate(BaseModel):
    """Solo se puede cambiar el estado de una asignación"""
    is_active: bool


class UserRoleResponse(BaseModel):
    """Asignación con datos básicos del usuario y el rol"""
    id: int
    user_id: int
    role_id: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
    user_document_number: Optional[str] = None
    user_full_name: Optional[str] = None
    role_name: Optional[str] = None

    class Config:
        from_attributes = True


class UserRolePaginatedResponse(BaseModel):
    """Response paginada de asignaciones"""
    items: List[UserRoleResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


# =============================================================================
# SCHEMAS DE OPERACIONES MASIVAS
# =============================================================================

class RoleIdsRequest(BaseModel):
    """Lista de roles para asignar/desasignar a un usuario"""
    role_ids: List[int] = Field(..., min_length=1)


class UserIdsRequest(BaseModel):
    """Lista de usuarios a los que se asigna un rol"""
    user_ids: List[int] = Field(..., min_length=1)


# =============================================================================
# SCHEMAS DE CONSULTA
# =============================================================================

class CheckResponse(BaseModel):
    """Respuesta booleana para verificaciones"""
    result: bool


class PolicyValidationResponse(BaseModel):
    """Resultado de evaluar una asignación contra las políticas de roles"""
    user_id: int
    role_id: int
    role_name: str
    compliant: bool
    violations: List[str]


class RolePolicies(BaseModel):
    """Políticas estáticas de asignación de roles"""
    max_users_per_role: Dict[str, int]
    exclusive_roles: Dict[str, List[str]]
    prerequisite_roles: Dict[str, List[str]]
    expiration_days: Dict[str, int]
    renewal_days: Dict[str, int]


class UserRoleStatistics(BaseModel):
    """Schema de estadísticas de asignaciones"""
    total: int
    active: int
    inactive: int
    by_role: Dict[str, int]
    by_user: Dict[int, int]
