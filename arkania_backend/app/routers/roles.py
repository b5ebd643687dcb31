"""
Router de Roles
Conjunto Residencial Arkania

Endpoints:
- CRUD de roles (el DELETE es un soft delete); crear, modificar, desactivar
  y reactivar requieren permiso WRITE_ROLES
- Consultas por nombre, estado, descripción, permiso y usuarios asignados
- Gestión de permisos de un rol (requiere permiso WRITE_ROLES)
- POST /roles/inicializar - Crear roles por defecto (solo admin)
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_async_db
from app.core.dependencies import (
    PaginationParams,
    PermissionChecker,
    build_page,
    get_pagination_params,
    require_admin,
)
from app.models.user import User
from app.services.role_service import get_role_service
from app.schemas.roles import (
    RoleCreate,
    RoleUpdate,
    RoleResponse,
    RolePaginatedResponse,
    PermissionsRequest,
    RoleStatistics,
)


router = APIRouter(
    prefix="/roles",
    tags=["Roles"]
)

manage_roles = PermissionChecker(["WRITE_ROLES"])


# =============================================================================
# ENDPOINTS DE CREACIÓN Y LISTADO
# =============================================================================

@router.post("", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
async def create_role(
    role_data: RoleCreate,
    current_user: User = Depends(manage_roles),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Crea un rol

    - **name**: se convierte a mayúsculas; solo letras y guion bajo
    - **permissions**: deben pertenecer al catálogo de permisos válidos

    **Requiere:** permiso WRITE_ROLES
    """
    return await get_role_service(db).create_role(role_data)


@router.get("", response_model=RolePaginatedResponse)
async def list_roles(
    pagination: PaginationParams = Depends(get_pagination_params),
    is_active: Optional[bool] = Query(None, description="Filtrar por estado"),
    db: AsyncSession = Depends(get_async_db)
):
    roles, total = await get_role_service(db).list_roles(
        skip=pagination.skip,
        limit=pagination.limit,
        is_active=is_active
    )
    return build_page(roles, total, pagination)


@router.post("/inicializar", response_model=List[str], status_code=status.HTTP_201_CREATED)
async def initialize_roles(
    current_user: User = Depends(require_admin()),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Crea los roles por defecto que falten

    Returns:
        Nombres de los roles creados

    **Requiere:** rol ADMINISTRADOR
    """
    return await get_role_service(db).initialize_default_roles()


# =============================================================================
# ENDPOINTS DE CONSULTA
# =============================================================================

@router.get("/estadisticas", response_model=RoleStatistics)
async def get_statistics(db: AsyncSession = Depends(get_async_db)):
    return RoleStatistics(**await get_role_service(db).get_statistics())


@router.get("/activos", response_model=List[RoleResponse])
async def get_active_roles(db: AsyncSession = Depends(get_async_db)):
    return await get_role_service(db).get_active_roles()


@router.get("/inactivos", response_model=List[RoleResponse])
async def get_inactive_roles(db: AsyncSession = Depends(get_async_db)):
    return await get_role_service(db).get_inactive_roles()


@router.get("/buscar", response_model=List[RoleResponse])
async def search_roles(
    descripcion: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_async_db)
):
    return await get_role_service(db).search_by_description(descripcion)


@router.get("/sin-usuarios", response_model=List[RoleResponse])
async def get_roles_without_users(db: AsyncSession = Depends(get_async_db)):
    return await get_role_service(db).get_roles_without_users()


@router.get("/con-minimo-usuarios", response_model=List[RoleResponse])
async def get_roles_with_min_users(
    minimo: int = Query(1, description="Mínimo de asignaciones activas"),
    db: AsyncSession = Depends(get_async_db)
):
    return await get_role_service(db).get_roles_with_min_users(minimo)


@router.get("/nombre/{name}", response_model=RoleResponse)
async def get_role_by_name(name: str, db: AsyncSession = Depends(get_async_db)):
    return await get_role_service(db).get_role_by_name(name)


@router.get("/nombre-ignore-case/{name}", response_model=RoleResponse)
async def get_role_by_name_ignore_case(name: str, db: AsyncSession = Depends(get_async_db)):
    return await get_role_service(db).get_role_by_name_ignore_case(name)


@router.get("/permiso/{permission}", response_model=List[RoleResponse])
async def get_roles_by_permission(permission: str, db: AsyncSession = Depends(get_async_db)):
    """Roles cuyo JSON de permisos contiene el texto"""
    return await get_role_service(db).get_roles_by_permission(permission)


@router.get("/usuario/{user_id}", response_model=List[RoleResponse])
async def get_roles_of_user(user_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_role_service(db).get_roles_of_user(user_id)


# =============================================================================
# ENDPOINTS POR ID
# =============================================================================

@router.get("/{role_id}", response_model=RoleResponse)
async def get_role(role_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_role_service(db).get_role_by_id(role_id)


@router.put("/{role_id}", response_model=RoleResponse)
async def replace_role(
    role_id: int,
    role_data: RoleCreate,
    current_user: User = Depends(manage_roles),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Actualización completa (nombre, descripción, permisos y estado)

    ADMINISTRADOR y PROPIETARIO no se pueden renombrar.
    """
    update = RoleUpdate(**role_data.model_dump())
    return await get_role_service(db).update_role(role_id, update)


@router.patch("/{role_id}", response_model=RoleResponse)
async def update_role(
    role_id: int,
    role_data: RoleUpdate,
    current_user: User = Depends(manage_roles),
    db: AsyncSession = Depends(get_async_db)
):
    return await get_role_service(db).update_role(role_id, role_data)


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_role(
    role_id: int,
    current_user: User = Depends(manage_roles),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Desactiva un rol (soft delete)

    No se permite para ADMINISTRADOR, PROPIETARIO ni roles con asignaciones.
    """
    await get_role_service(db).delete_role(role_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{role_id}/reactivar", response_model=RoleResponse)
async def reactivate_role(
    role_id: int,
    current_user: User = Depends(manage_roles),
    db: AsyncSession = Depends(get_async_db)
):
    return await get_role_service(db).reactivate_role(role_id)


@router.get("/{role_id}/puede-eliminar", response_model=bool)
async def can_delete_role(role_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_role_service(db).can_delete_role(role_id)


@router.get("/{role_id}/usuarios/count", response_model=int)
async def count_role_users(role_id: int, db: AsyncSession = Depends(get_async_db)):
    """Cantidad de asignaciones activas del rol"""
    return await get_role_service(db).count_users(role_id)


# =============================================================================
# ENDPOINTS DE PERMISOS
# =============================================================================

@router.get("/{role_id}/permisos", response_model=List[str])
async def get_permissions(role_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_role_service(db).get_permissions(role_id)


@router.put("/{role_id}/permisos", response_model=RoleResponse)
async def replace_permissions(
    role_id: int,
    request: PermissionsRequest,
    current_user: User = Depends(manage_roles),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Reemplaza todos los permisos del rol

    **Requiere:** permiso WRITE_ROLES
    """
    return await get_role_service(db).replace_permissions(role_id, request.permissions)


@router.post("/{role_id}/permisos/{permission}", response_model=RoleResponse)
async def add_permission(
    role_id: int,
    permission: str,
    current_user: User = Depends(manage_roles),
    db: AsyncSession = Depends(get_async_db)
):
    return await get_role_service(db).add_permission(role_id, permission)


@router.delete("/{role_id}/permisos/{permission}", response_model=RoleResponse)
async def remove_permission(
    role_id: int,
    permission: str,
    current_user: User = Depends(manage_roles),
    db: AsyncSession = Depends(get_async_db)
):
    return await get_role_service(db).remove_permission(role_id, permission)


@router.get("/{role_id}/tiene-permiso/{permission}", response_model=bool)
async def has_permission(role_id: int, permission: str, db: AsyncSession = Depends(get_async_db)):
    return await get_role_service(db).role_has_permission(role_id, permission)
