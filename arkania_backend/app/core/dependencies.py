"""
Dependencias reutilizables para FastAPI
Conjunto Residencial Arkania

Proporciona:
- get_current_user: Obtiene usuario autenticado desde JWT
- get_current_active_user: Verifica que el usuario esté activo
- RoleChecker / PermissionChecker: Autorización por rol activo o permiso
- PaginationParams: Parámetros de paginación validados
- DateRangeParams: Rango de fechas para consultas
"""

import math
from datetime import datetime, timezone
from typing import List, Optional
from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.core.database import get_async_db
from app.core.policies import ADMIN_ROLE, ALL_PERMISSIONS
from app.core.security import verify_token
from app.models.user import User
from app.models.user_role import UserRole

# Security scheme para JWT
security = HTTPBearer()


# =============================================================================
# DEPENDENCIAS DE AUTENTICACIÓN
# =============================================================================

async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_async_db)
) -> User:
    """
    Obtiene el usuario actual autenticado desde el token JWT

    Args:
        credentials: Credenciales Bearer con el token JWT
        db: Sesión de base de datos

    Returns:
        User: Usuario autenticado, con sus asignaciones de rol cargadas

    Raises:
        HTTPException 401: Si el token es inválido o el usuario no existe
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="No se pudo validar las credenciales",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = verify_token(credentials.credentials, token_type="access")
    if payload is None:
        raise credentials_exception

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise credentials_exception

    result = await db.execute(
        select(User)
        .options(selectinload(User.role_assignments).selectinload(UserRole.role))
        .where(User.id == user_id)
    )
    user = result.scalar_one_or_none()

    if user is None:
        raise credentials_exception

    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Obtiene el usuario actual y verifica que esté activo

    Raises:
        HTTPException 403: Si el usuario está inactivo
    """
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Usuario inactivo"
        )
    return current_user


def active_roles_of(user: User) -> list:
    """Roles activos del usuario a través de asignaciones activas"""
    return [
        assignment.role
        for assignment in user.role_assignments
        if assignment.is_active and assignment.role is not None and assignment.role.is_active
    ]


# =============================================================================
# DEPENDENCIAS DE AUTORIZACIÓN (Roles y Permisos)
# =============================================================================

class RoleChecker:
    """
    Dependency para verificar que el usuario tenga alguno de los roles indicados

    Ejemplo:
        @router.post("/inicializar")
        async def seed(current_user: User = Depends(RoleChecker(["ADMINISTRADOR"]))):
            ...
    """

    def __init__(self, allowed_roles: List[str]):
        self.allowed_roles = allowed_roles

    async def __call__(
        self,
        current_user: User = Depends(get_current_active_user)
    ) -> User:
        role_names = {role.name for role in active_roles_of(current_user)}
        if not role_names.intersection(self.allowed_roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requiere uno de estos roles: {', '.join(self.allowed_roles)}"
            )
        return current_user


class PermissionChecker:
    """
    Dependency para verificar que el usuario tenga todos los permisos indicados

    ALL_PERMISSIONS concede cualquier permiso.
    """

    def __init__(self, required_permissions: List[str]):
        self.required_permissions = required_permissions

    async def __call__(
        self,
        current_user: User = Depends(get_current_active_user)
    ) -> User:
        roles = active_roles_of(current_user)

        for permission in self.required_permissions:
            granted = any(
                role.has_permission(ALL_PERMISSIONS) or role.has_permission(permission)
                for role in roles
            )
            if not granted:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail=f"Permiso requerido: {permission}"
                )

        return current_user


def require_admin():
    """Requiere rol ADMINISTRADOR"""
    return RoleChecker([ADMIN_ROLE])


# =============================================================================
# DEPENDENCIAS DE PAGINACIÓN
# =============================================================================

class PaginationParams:
    """Parámetros de paginación con validación"""

    def __init__(self, skip: int = 0, limit: int = settings.DEFAULT_PAGE_SIZE):
        if skip < 0:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="'skip' no puede ser negativo"
            )

        max_size = settings.MAX_PAGE_SIZE
        if limit <= 0 or limit > max_size:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"'limit' debe estar entre 1 y {max_size}"
            )

        self.skip = skip
        self.limit = limit

    @property
    def page(self) -> int:
        return (self.skip // self.limit) + 1


def build_page(items: list, total: int, pagination: "PaginationParams") -> dict:
    """Arma el cuerpo de una respuesta paginada"""
    total_pages = math.ceil(total / pagination.limit) if total > 0 else 1
    return {
        "items": items,
        "total": total,
        "page": pagination.page,
        "page_size": pagination.limit,
        "total_pages": total_pages
    }


def get_pagination_params(
    skip: int = Query(0, description="Registros a saltar"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, description="Máximo de registros")
) -> PaginationParams:
    """Obtiene parámetros de paginación validados"""
    return PaginationParams(skip=skip, limit=limit)


# =============================================================================
# DEPENDENCIAS DE RANGO DE FECHAS
# =============================================================================

class DateRangeParams:
    """Rango de fechas [inicio, fin]; el orden lo valida cada servicio"""

    def __init__(self, start: datetime, end: datetime):
        self.start = start
        self.end = end


def _naive_utc(value: datetime) -> datetime:
    # Las columnas DateTime se guardan en UTC sin tzinfo
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def get_date_range_params(
    inicio: datetime = Query(..., description="Fecha inicial (ISO 8601)"),
    fin: datetime = Query(..., description="Fecha final (ISO 8601)")
) -> DateRangeParams:
    """Obtiene un rango de fechas validado"""
    return DateRangeParams(start=_naive_utc(inicio), end=_naive_utc(fin))


def optional_enum(enum_cls, value: Optional[str], field_name: str):
    """
    Convierte un string de query a enum, o None si no se envió

    Raises:
        HTTPException 400: Si el valor no pertenece al enum
    """
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{field_name} inválido. Valores permitidos: {allowed}"
        )
