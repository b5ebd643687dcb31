"""
Router de Asignaciones Usuario-Rol
Conjunto Residencial Arkania

Endpoints:
- POST /usuario-roles - Asignar rol (reactiva si existía inactiva)
- GET /usuario-roles - Listar asignaciones (paginado)
- PUT /usuario-roles/{id} - Cambiar estado
- DELETE /usuario-roles/{id} - Eliminar físicamente
- Activación/desactivación por ID o por par usuario-rol
- Consultas por usuario, rol, estado y fechas
- Toda operación que asigna, activa, desactiva o elimina requiere rol ADMINISTRADOR
- Validación consultiva de políticas de asignación
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_async_db
from app.core.dependencies import (
    DateRangeParams,
    PaginationParams,
    build_page,
    get_date_range_params,
    get_pagination_params,
    require_admin,
)
from app.models.user import User
from app.services.user_role_service import UserRoleService, get_user_role_service
from app.schemas.user_roles import (
    UserRoleCreate,
    UserRoleUpdate,
    UserRoleResponse,
    UserRolePaginatedResponse,
    RoleIdsRequest,
    UserIdsRequest,
    CheckResponse,
    PolicyValidationResponse,
    RolePolicies,
    UserRoleStatistics,
)


router = APIRouter(
    prefix="/usuario-roles",
    tags=["Asignaciones de roles"]
)


# =============================================================================
# ENDPOINTS DE ASIGNACIÓN Y LISTADO
# =============================================================================

@router.post("", response_model=UserRoleResponse, status_code=status.HTTP_201_CREATED)
async def create_assignment(
    assignment_data: UserRoleCreate,
    current_user: User = Depends(require_admin()),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Asigna un rol a un usuario

    Si el par ya existe inactivo, se reactiva. Si ya está activo retorna 409.

    **Requiere:** rol ADMINISTRADOR
    """
    return await get_user_role_service(db).assign_role(
        assignment_data.user_id,
        assignment_data.role_id
    )


@router.post("/asignar/{user_id}/{role_id}", response_model=UserRoleResponse, status_code=status.HTTP_201_CREATED)
async def assign_role(
    user_id: int,
    role_id: int,
    current_user: User = Depends(require_admin()),
    db: AsyncSession = Depends(get_async_db)
):
    return await get_user_role_service(db).assign_role(user_id, role_id)


@router.get("", response_model=UserRolePaginatedResponse)
async def list_assignments(
    pagination: PaginationParams = Depends(get_pagination_params),
    is_active: Optional[bool] = Query(None, description="Filtrar por estado"),
    db: AsyncSession = Depends(get_async_db)
):
    assignments, total = await get_user_role_service(db).list_assignments(
        skip=pagination.skip,
        limit=pagination.limit,
        is_active=is_active
    )
    return build_page(assignments, total, pagination)


# =============================================================================
# ENDPOINTS DE CONSULTA
# =============================================================================

@router.get("/activas", response_model=List[UserRoleResponse])
async def get_active_assignments(db: AsyncSession = Depends(get_async_db)):
    return await get_user_role_service(db).get_active_assignments()


@router.get("/inactivas", response_model=List[UserRoleResponse])
async def get_inactive_assignments(db: AsyncSession = Depends(get_async_db)):
    return await get_user_role_service(db).get_inactive_assignments()


@router.get("/estadisticas", response_model=UserRoleStatistics)
async def get_statistics(db: AsyncSession = Depends(get_async_db)):
    return UserRoleStatistics(**await get_user_role_service(db).get_statistics())


@router.get("/politicas", response_model=RolePolicies)
async def get_policies():
    """Límites, exclusiones, prerequisitos, expiración y renovación por rol"""
    return RolePolicies(**UserRoleService.get_policies())


@router.get("/fecha-creacion", response_model=List[UserRoleResponse])
async def get_assignments_created_between(
    date_range: DateRangeParams = Depends(get_date_range_params),
    db: AsyncSession = Depends(get_async_db)
):
    return await get_user_role_service(db).get_assignments_created_between(date_range.start, date_range.end)


@router.get("/modificadas", response_model=List[UserRoleResponse])
async def get_assignments_modified_between(
    date_range: DateRangeParams = Depends(get_date_range_params),
    db: AsyncSession = Depends(get_async_db)
):
    return await get_user_role_service(db).get_assignments_modified_between(date_range.start, date_range.end)


# =============================================================================
# ENDPOINTS POR USUARIO
# =============================================================================

@router.get("/usuario/{user_id}", response_model=List[UserRoleResponse])
async def get_assignments_by_user(user_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_user_role_service(db).get_assignments_by_user(user_id)


@router.get("/usuario/{user_id}/activas", response_model=List[UserRoleResponse])
async def get_active_assignments_by_user(user_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_user_role_service(db).get_assignments_by_user(user_id, only_active=True)


@router.get("/usuario/{user_id}/rol/{role_id}", response_model=UserRoleResponse)
async def get_assignment_by_pair(user_id: int, role_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_user_role_service(db).get_assignment(user_id, role_id)


@router.get("/usuario/{user_id}/rol/{role_id}/activa", response_model=UserRoleResponse)
async def get_active_assignment_by_pair(user_id: int, role_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_user_role_service(db).get_active_assignment(user_id, role_id)


@router.put("/usuario/{user_id}/rol/{role_id}/activar", response_model=UserRoleResponse)
async def activate_pair(
    user_id: int,
    role_id: int,
    current_user: User = Depends(require_admin()),
    db: AsyncSession = Depends(get_async_db)
):
    return await get_user_role_service(db).activate_pair(user_id, role_id)


@router.put("/usuario/{user_id}/rol/{role_id}/desactivar", response_model=UserRoleResponse)
async def deactivate_pair(
    user_id: int,
    role_id: int,
    current_user: User = Depends(require_admin()),
    db: AsyncSession = Depends(get_async_db)
):
    return await get_user_role_service(db).deactivate_pair(user_id, role_id)


@router.delete("/usuario/{user_id}/rol/{role_id}", response_model=UserRoleResponse)
async def unassign_role(
    user_id: int,
    role_id: int,
    current_user: User = Depends(require_admin()),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Desasigna un rol (desactiva la asignación activa del par)

    No se permite quitar el rol ADMINISTRADOR al último administrador activo.
    """
    return await get_user_role_service(db).deactivate_pair(user_id, role_id)


@router.get("/usuario/{user_id}/tiene-rol/{role_id}", response_model=CheckResponse)
async def user_has_role(user_id: int, role_id: int, db: AsyncSession = Depends(get_async_db)):
    return CheckResponse(result=await get_user_role_service(db).user_has_role(user_id, role_id))


@router.get("/usuario/{user_id}/tiene-rol-nombre/{role_name}", response_model=CheckResponse)
async def user_has_role_name(user_id: int, role_name: str, db: AsyncSession = Depends(get_async_db)):
    return CheckResponse(result=await get_user_role_service(db).user_has_role_name(user_id, role_name))


@router.get("/usuario/{user_id}/puede-asignar/{role_id}", response_model=CheckResponse)
async def can_assign(user_id: int, role_id: int, db: AsyncSession = Depends(get_async_db)):
    return CheckResponse(result=await get_user_role_service(db).can_assign(user_id, role_id))


@router.get("/usuario/{user_id}/validar-politicas/{role_id}", response_model=PolicyValidationResponse)
async def validate_policies(user_id: int, role_id: int, db: AsyncSession = Depends(get_async_db)):
    """
    Evalúa la asignación contra las políticas de roles

    Es solo informativo: las políticas no bloquean la asignación.
    """
    return PolicyValidationResponse(**await get_user_role_service(db).validate_policies(user_id, role_id))


# =============================================================================
# OPERACIONES MASIVAS (solo admin)
# =============================================================================

@router.post("/usuario/{user_id}/roles", response_model=List[UserRoleResponse], status_code=status.HTTP_201_CREATED)
async def assign_roles_to_user(
    user_id: int,
    request: RoleIdsRequest,
    current_user: User = Depends(require_admin()),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Asigna varios roles a un usuario; omite los que ya tiene activos

    **Requiere:** rol ADMINISTRADOR
    """
    return await get_user_role_service(db).assign_roles_to_user(user_id, request.role_ids)


@router.delete("/usuario/{user_id}/roles", response_model=List[UserRoleResponse])
async def unassign_roles_from_user(
    user_id: int,
    request: RoleIdsRequest,
    current_user: User = Depends(require_admin()),
    db: AsyncSession = Depends(get_async_db)
):
    return await get_user_role_service(db).unassign_roles_from_user(user_id, request.role_ids)


@router.put("/usuario/{user_id}/roles", response_model=List[UserRoleResponse])
async def replace_user_roles(
    user_id: int,
    request: RoleIdsRequest,
    current_user: User = Depends(require_admin()),
    db: AsyncSession = Depends(get_async_db)
):
    """Deja activos exactamente los roles indicados"""
    return await get_user_role_service(db).replace_user_roles(user_id, request.role_ids)


@router.post("/rol/{role_id}/usuarios", response_model=List[UserRoleResponse], status_code=status.HTTP_201_CREATED)
async def assign_role_to_users(
    role_id: int,
    request: UserIdsRequest,
    current_user: User = Depends(require_admin()),
    db: AsyncSession = Depends(get_async_db)
):
    return await get_user_role_service(db).assign_role_to_users(role_id, request.user_ids)


# =============================================================================
# ENDPOINTS POR ROL
# =============================================================================

@router.get("/rol/{role_id}", response_model=List[UserRoleResponse])
async def get_assignments_by_role(role_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_user_role_service(db).get_assignments_by_role(role_id)


@router.get("/rol/{role_id}/activas", response_model=List[UserRoleResponse])
async def get_active_assignments_by_role(role_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_user_role_service(db).get_assignments_by_role(role_id, only_active=True)


# =============================================================================
# ENDPOINTS POR ID
# =============================================================================

@router.get("/{assignment_id}", response_model=UserRoleResponse)
async def get_assignment(assignment_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_user_role_service(db).get_assignment_by_id(assignment_id)


@router.put("/{assignment_id}", response_model=UserRoleResponse)
async def update_assignment(
    assignment_id: int,
    assignment_data: UserRoleUpdate,
    current_user: User = Depends(require_admin()),
    db: AsyncSession = Depends(get_async_db)
):
    """Solo se puede cambiar el estado (is_active)"""
    return await get_user_role_service(db).update_assignment(assignment_id, assignment_data.is_active)


@router.delete("/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_assignment(
    assignment_id: int,
    current_user: User = Depends(require_admin()),
    db: AsyncSession = Depends(get_async_db)
):
    await get_user_role_service(db).delete_assignment(assignment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{assignment_id}/activar", response_model=UserRoleResponse)
async def activate_assignment(
    assignment_id: int,
    current_user: User = Depends(require_admin()),
    db: AsyncSession = Depends(get_async_db)
):
    return await get_user_role_service(db).activate_assignment(assignment_id)


@router.put("/{assignment_id}/desactivar", response_model=UserRoleResponse)
async def deactivate_assignment(
    assignment_id: int,
    current_user: User = Depends(require_admin()),
    db: AsyncSession = Depends(get_async_db)
):
    return await get_user_role_service(db).deactivate_assignment(assignment_id)
