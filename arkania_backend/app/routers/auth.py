"""
Router de Autenticación
Conjunto Residencial Arkania

Endpoints:
- POST /auth/login - Iniciar sesión con email y contraseña
- POST /auth/refresh - Renovar tokens
- GET /auth/me - Usuario autenticado
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_async_db
from app.core.dependencies import get_current_active_user
from app.services.auth_service import get_auth_service
from app.models.user import User
from app.schemas.auth import LoginRequest, RefreshTokenRequest, Token
from app.schemas.users import UserResponse


router = APIRouter(
    prefix="/auth",
    tags=["Autenticación"]
)


# =============================================================================
# ENDPOINTS PÚBLICOS (Sin autenticación)
# =============================================================================

@router.post("/login", response_model=Token, status_code=status.HTTP_200_OK)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_async_db)
):
    """
    Autentica por email y contraseña

    El access token incluye el nombre completo y los roles activos del
    usuario. Un usuario desactivado recibe 403 aunque la contraseña sea
    correcta.
    """
    tokens = await get_auth_service(db).login(
        email=request.email,
        password=request.password
    )
    return Token(**tokens)


@router.post("/refresh", response_model=Token, status_code=status.HTTP_200_OK)
async def refresh_token(
    request: RefreshTokenRequest,
    db: AsyncSession = Depends(get_async_db)
):
    """
    Renovar el par de tokens usando un refresh token válido
    """
    tokens = await get_auth_service(db).refresh_access_token(request.refresh_token)
    return Token(**tokens)


# =============================================================================
# ENDPOINTS PROTEGIDOS (Requieren autenticación)
# =============================================================================

@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_active_user)
):
    """
    Obtener información del usuario autenticado

    Requiere header `Authorization: Bearer <access_token>`.
    """
    return current_user
