"""
Servicio de Autenticación
Conjunto Residencial Arkania

Maneja toda la lógica de negocio relacionada con:
- Login por email y generación de tokens
- Refresh de tokens
"""

import logging
from typing import Dict, List
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.repositories.role_repository import RoleRepository
from app.repositories.user_repository import UserRepository
from app.core.security import verify_password, create_token_pair, verify_token

logger = logging.getLogger(__name__)


class AuthService:
    """Servicio de autenticación"""

    def __init__(self, db: AsyncSession):
        """
        Inicializa el servicio con la sesión de BD

        Args:
            db: Sesión asíncrona de SQLAlchemy
        """
        self.db = db
        self.user_repo = UserRepository(db)
        self.role_repo = RoleRepository(db)

    # =========================================================================
    # AUTENTICACIÓN
    # =========================================================================

    async def login(self, email: str, password: str) -> Dict[str, str]:
        """
        Autentica un usuario y genera tokens JWT

        Args:
            email: Email del usuario
            password: Contraseña en texto plano

        Returns:
            Dict con access_token, refresh_token y token_type

        Raises:
            HTTPException 401: Si las credenciales son incorrectas
            HTTPException 403: Si el usuario está inactivo
        """
        user = await self.user_repo.get_by_email(email)

        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Login fallido para %s", email)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Credenciales incorrectas",
                headers={"WWW-Authenticate": "Bearer"},
            )

        if not user.is_active:
            logger.warning("Login de usuario inactivo: id=%s", user.id)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Usuario inactivo. Contacte al administrador."
            )

        logger.info("Login exitoso: id=%s", user.id)
        return create_token_pair(await self._token_data(user))

    async def refresh_access_token(self, refresh_token: str) -> Dict[str, str]:
        """
        Genera un nuevo par de tokens usando un refresh token válido

        Raises:
            HTTPException 401: Si el refresh token es inválido o el usuario no está activo
        """
        payload = verify_token(refresh_token, token_type="refresh")

        if payload is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Refresh token inválido o expirado",
                headers={"WWW-Authenticate": "Bearer"},
            )

        try:
            user_id = int(payload.get("sub"))
        except (TypeError, ValueError):
            user_id = None

        user = await self.user_repo.get_by_id(user_id) if user_id is not None else None

        if user is None or not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Usuario no encontrado o inactivo",
                headers={"WWW-Authenticate": "Bearer"},
            )

        return create_token_pair(await self._token_data(user))

    async def _token_data(self, user: User) -> Dict:
        roles: List[str] = [role.name for role in await self.role_repo.get_roles_of_user(user.id)]
        return {
            "sub": user.id,
            "email": user.email,
            "full_name": user.full_name,
            "roles": roles
        }


# =============================================================================
# FUNCIÓN HELPER
# =============================================================================

def get_auth_service(db: AsyncSession) -> AuthService:
    """
    Factory function para obtener una instancia del AuthService

    Args:
        db: Sesión de base de datos

    Returns:
        Instancia de AuthService
    """
    return AuthService(db)
