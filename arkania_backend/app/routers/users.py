"""
Router de Usuarios
Conjunto Residencial Arkania

Endpoints:
- POST /usuarios - Registrar usuario
- GET /usuarios - Listar usuarios (paginado)
- GET /usuarios/{id} - Ver usuario
- PUT/PATCH /usuarios/{id} - Actualizar usuario
- DELETE /usuarios/{id} - Desactivar usuario (soft delete)
- PUT /usuarios/{id}/reactivar - Reactivar usuario
- PUT /usuarios/{id}/password - Cambiar contraseña
- PUT /usuarios/{id}/restablecer-password - Restablecer contraseña (solo admin)
- GET /usuarios/estadisticas - Estadísticas de usuarios
- Consultas por documento, email, rol, fechas y búsqueda libre
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
from app.services.user_service import UserService, get_user_service
from app.schemas.users import (
    UserCreate,
    UserReplace,
    UserUpdate,
    UserResponse,
    UserPaginatedResponse,
    UserStatistics,
    ChangePasswordRequest,
    ResetPasswordRequest,
    ValidationResponse,
    DocumentTypeResponse,
)


# =============================================================================
# ROUTER
# =============================================================================

router = APIRouter(
    prefix="/usuarios",
    tags=["Usuarios"]
)


# =============================================================================
# ENDPOINTS DE CREACIÓN Y LISTADO
# =============================================================================

@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_async_db)
):
    """
    Registra un nuevo usuario

    El documento y el email deben ser únicos. La contraseña debe tener al
    menos 8 caracteres, una letra y un número.
    """
    return await get_user_service(db).create_user(user_data)


@router.get("", response_model=UserPaginatedResponse, status_code=status.HTTP_200_OK)
async def list_users(
    pagination: PaginationParams = Depends(get_pagination_params),
    is_active: Optional[bool] = Query(None, description="Filtrar por estado activo/inactivo"),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Lista usuarios con paginación

    **Paginación:**
    - `skip`: Registros a saltar (default: 0)
    - `limit`: Límite de resultados (default: 20, max: 100)
    """
    users_list, total = await get_user_service(db).list_users(
        skip=pagination.skip,
        limit=pagination.limit,
        is_active=is_active
    )
    return build_page(users_list, total, pagination)


# =============================================================================
# ENDPOINTS DE CONSULTA (rutas fijas antes de /{user_id})
# =============================================================================

@router.get("/estadisticas", response_model=UserStatistics)
async def get_statistics(db: AsyncSession = Depends(get_async_db)):
    """Totales, activos, inactivos, tipos de documento y altas del último mes"""
    stats = await get_user_service(db).get_statistics()
    return UserStatistics(**stats)


@router.get("/tipos-documento", response_model=List[DocumentTypeResponse])
async def get_document_types():
    """Tipos de documento aceptados con su descripción"""
    return UserService.get_document_types()


@router.get("/activos", response_model=List[UserResponse])
async def get_active_users(db: AsyncSession = Depends(get_async_db)):
    """Usuarios activos ordenados por nombres y apellidos"""
    return await get_user_service(db).get_active_users()


@router.get("/inactivos", response_model=List[UserResponse])
async def get_inactive_users(db: AsyncSession = Depends(get_async_db)):
    return await get_user_service(db).get_inactive_users()


@router.get("/buscar", response_model=List[UserResponse])
async def search_users(
    busqueda: str = Query(..., min_length=1, description="Nombre completo, email o documento"),
    db: AsyncSession = Depends(get_async_db)
):
    return await get_user_service(db).search_users(busqueda)


@router.get("/sin-roles", response_model=List[UserResponse])
async def get_users_without_roles(db: AsyncSession = Depends(get_async_db)):
    return await get_user_service(db).get_users_without_roles()


@router.get("/multiples-roles", response_model=List[UserResponse])
async def get_users_with_multiple_roles(db: AsyncSession = Depends(get_async_db)):
    return await get_user_service(db).get_users_with_multiple_roles()


@router.get("/fecha-creacion", response_model=List[UserResponse])
async def get_users_created_between(
    date_range: DateRangeParams = Depends(get_date_range_params),
    db: AsyncSession = Depends(get_async_db)
):
    return await get_user_service(db).get_users_created_between(date_range.start, date_range.end)


@router.get("/validar-email", response_model=ValidationResponse)
async def validate_email(
    email: str = Query(..., min_length=3),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Validar si un email está disponible

    Útil para validación en tiempo real en formularios de registro.
    """
    is_available = await get_user_service(db).is_email_available(email)
    return ValidationResponse(
        available=is_available,
        message="Email disponible" if is_available else "Email ya está registrado"
    )


@router.get("/validar-documento", response_model=ValidationResponse)
async def validate_document(
    numero: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_async_db)
):
    is_available = await get_user_service(db).is_document_available(numero)
    return ValidationResponse(
        available=is_available,
        message="Documento disponible" if is_available else "Documento ya está registrado"
    )


@router.get("/documento/{document_number}", response_model=UserResponse)
async def get_user_by_document(document_number: str, db: AsyncSession = Depends(get_async_db)):
    return await get_user_service(db).get_user_by_document(document_number)


@router.get("/email/{email}", response_model=UserResponse)
async def get_user_by_email(email: str, db: AsyncSession = Depends(get_async_db)):
    return await get_user_service(db).get_user_by_email(email)


@router.get("/rol/{role_name}", response_model=List[UserResponse])
async def get_users_by_role(role_name: str, db: AsyncSession = Depends(get_async_db)):
    """Usuarios con asignación activa del rol"""
    return await get_user_service(db).get_users_by_role_name(role_name)


# =============================================================================
# ENDPOINTS POR ID
# =============================================================================

@router.get("/{user_id}", response_model=UserResponse)
async def get_user_by_id(user_id: int, db: AsyncSession = Depends(get_async_db)):
    """Obtiene un usuario por ID, esté activo o no"""
    return await get_user_service(db).get_user_by_id(user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def replace_user(
    user_id: int,
    user_data: UserReplace,
    db: AsyncSession = Depends(get_async_db)
):
    """Actualización completa de los datos del usuario"""
    return await get_user_service(db).update_user(user_id, user_data)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    db: AsyncSession = Depends(get_async_db)
):
    """Actualización parcial: solo cambian los campos enviados"""
    return await get_user_service(db).update_user(user_id, user_data)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: int, db: AsyncSession = Depends(get_async_db)):
    """
    Desactiva un usuario (soft delete)

    No se permite desactivar al último administrador activo.
    """
    await get_user_service(db).delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{user_id}/reactivar", response_model=UserResponse)
async def reactivate_user(user_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_user_service(db).reactivate_user(user_id)


@router.put("/{user_id}/password")
async def change_password(
    user_id: int,
    request: ChangePasswordRequest,
    db: AsyncSession = Depends(get_async_db)
):
    """Cambia la contraseña verificando la actual"""
    await get_user_service(db).change_password(
        user_id=user_id,
        current_password=request.current_password,
        new_password=request.new_password
    )
    return {
        "message": "Contraseña cambiada exitosamente",
        "success": True
    }


@router.put("/{user_id}/restablecer-password")
async def reset_password(
    user_id: int,
    request: ResetPasswordRequest,
    current_user: User = Depends(require_admin()),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Fija una contraseña nueva sin pedir la actual

    **Requiere:** rol ADMINISTRADOR
    """
    await get_user_service(db).reset_password(user_id, request.new_password)
    return {
        "message": "Contraseña restablecida exitosamente",
        "success": True
    }


@router.get("/{user_id}/puede-eliminar", response_model=bool)
async def can_delete_user(user_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_user_service(db).can_delete_user(user_id)
