"""
Servicio de Usuarios
Conjunto Residencial Arkania

Maneja toda la lógica de negocio para:
- Registro y edición de usuarios (documento y email únicos)
- Soft delete y reactivación
- Cambio y restablecimiento de contraseñas
- Consultas por rol, fechas y búsqueda libre
- Estadísticas de usuarios
"""

import logging
from typing import List, Optional, Dict, Any
from datetime import datetime, timedelta
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    UserNotFoundException,
    UserAlreadyExistsException,
    UserInvalidOperationException,
)
from app.core.policies import ADMIN_ROLE, DOCUMENT_TYPE_DESCRIPTIONS
from app.core.security import hash_password, verify_password, validate_password_strength
from app.core.utils import utc_now_naive
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.repositories.user_role_repository import UserRoleRepository
from app.schemas.users import UserCreate

logger = logging.getLogger(__name__)


class UserService:
    """Servicio para gestión de usuarios"""

    def __init__(self, db: AsyncSession):
        """
        Inicializa el servicio con la sesión de BD

        Args:
            db: Sesión asíncrona de SQLAlchemy
        """
        self.db = db
        self.user_repo = UserRepository(db)
        self.user_role_repo = UserRoleRepository(db)

    # =========================================================================
    # OPERACIONES DE CONSULTA
    # =========================================================================

    async def get_user_by_id(self, user_id: int) -> User:
        """
        Obtiene un usuario por ID (activo o no)

        Raises:
            UserNotFoundException: Si no existe
        """
        user = await self.user_repo.get_by_id(user_id)

        if user is None:
            raise UserNotFoundException.by_id(user_id)

        return user

    async def get_user_by_document(self, document_number: str) -> User:
        user = await self.user_repo.get_by_document(document_number)

        if user is None:
            raise UserNotFoundException.by_document(document_number)

        return user

    async def get_user_by_email(self, email: str) -> User:
        user = await self.user_repo.get_by_email(email)

        if user is None:
            raise UserNotFoundException.by_email(email)

        return user

    async def list_users(
        self,
        skip: int = 0,
        limit: int = 20,
        is_active: Optional[bool] = None
    ) -> tuple[List[User], int]:
        """
        Lista usuarios con filtros y paginación

        Args:
            skip: Registros a saltar
            limit: Límite de resultados
            is_active: Filtrar por estado activo/inactivo

        Returns:
            Tupla (lista_usuarios, total_count)
        """
        users_list = await self.user_repo.get_all(skip=skip, limit=limit, is_active=is_active)
        total = await self.user_repo.count(is_active=is_active)
        return users_list, total

    async def get_active_users(self) -> List[User]:
        return await self.user_repo.get_active()

    async def get_inactive_users(self) -> List[User]:
        return await self.user_repo.get_inactive()

    async def search_users(self, search_term: str) -> List[User]:
        return await self.user_repo.search(search_term)

    async def get_users_by_role_name(self, role_name: str) -> List[User]:
        return await self.user_repo.get_by_role_name(role_name.strip().upper())

    async def get_users_without_roles(self) -> List[User]:
        return await self.user_repo.get_without_roles()

    async def get_users_with_multiple_roles(self) -> List[User]:
        return await self.user_repo.get_with_multiple_roles()

    async def get_users_created_between(self, start: datetime, end: datetime) -> List[User]:
        """
        Usuarios creados en el rango [start, end]

        Raises:
            UserInvalidOperationException: Si start es posterior a end
        """
        if start > end:
            raise UserInvalidOperationException.invalid_date_range()
        return await self.user_repo.get_created_between(start, end)

    # =========================================================================
    # OPERACIONES DE MODIFICACIÓN
    # =========================================================================

    async def create_user(self, user_data: UserCreate) -> User:
        """
        Registra un nuevo usuario

        Raises:
            UserAlreadyExistsException: Si el documento o el email ya existen
            UserInvalidOperationException: Si la contraseña no es segura
        """
        if await self.user_repo.exists_by_document(user_data.document_number):
            logger.warning("Documento duplicado rechazado: %s", user_data.document_number)
            raise UserAlreadyExistsException.by_document(user_data.document_number)

        if await self.user_repo.exists_by_email(user_data.email):
            logger.warning("Email duplicado rechazado: %s", user_data.email)
            raise UserAlreadyExistsException.by_email(user_data.email)

        self._ensure_strong_password(user_data.password)

        user = User(
            document_type=user_data.document_type,
            document_number=user_data.document_number,
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            email=user_data.email,
            phone=user_data.phone,
            password_hash=hash_password(user_data.password),
            is_active=True
        )

        created_user = await self.user_repo.create(user)
        await self.db.commit()

        logger.info("Usuario creado: %s (id=%s)", created_user.email, created_user.id)
        return created_user

    async def update_user(self, user_id: int, user_data: BaseModel) -> User:
        """
        Actualiza un usuario con los campos enviados

        Sirve para PUT (UserReplace) y PATCH (UserUpdate). La unicidad de
        documento y email solo se revisa si cambian.

        Returns:
            Usuario actualizado
        """
        user = await self.get_user_by_id(user_id)
        values = user_data.model_dump(exclude_unset=True)

        new_document = values.pop("document_number", None)
        if new_document is not None and new_document != user.document_number:
            if await self.user_repo.exists_by_document(new_document):
                raise UserAlreadyExistsException.by_document(new_document)
            user.document_number = new_document

        new_email = values.pop("email", None)
        if new_email is not None and new_email != user.email:
            # Un cambio solo de mayúsculas no choca con el propio usuario
            if new_email.lower() != user.email.lower() and await self.user_repo.exists_by_email(new_email):
                raise UserAlreadyExistsException.by_email(new_email)
            user.email = new_email

        password = values.pop("password", None)
        if password is not None:
            self._ensure_strong_password(password)
            user.password_hash = hash_password(password)

        is_active = values.pop("is_active", None)
        if is_active is not None and is_active != user.is_active:
            if not is_active:
                await self._ensure_not_last_admin(user)
            user.is_active = is_active

        for field in ("document_type", "first_name", "last_name", "phone"):
            if field in values:
                if values[field] is None and field != "phone":
                    continue
                setattr(user, field, values[field])

        updated_user = await self.user_repo.update(user)
        await self.db.commit()

        logger.info("Usuario actualizado: id=%s", updated_user.id)
        return updated_user

    async def delete_user(self, user_id: int) -> User:
        """
        Desactiva un usuario (soft delete)

        Raises:
            UserInvalidOperationException: Si es el último administrador activo
        """
        user = await self.get_user_by_id(user_id)
        await self._ensure_not_last_admin(user)

        user.is_active = False
        updated_user = await self.user_repo.update(user)
        await self.db.commit()

        logger.info("Usuario desactivado: id=%s", user_id)
        return updated_user

    async def reactivate_user(self, user_id: int) -> User:
        user = await self.get_user_by_id(user_id)

        user.is_active = True
        updated_user = await self.user_repo.update(user)
        await self.db.commit()

        logger.info("Usuario reactivado: id=%s", user_id)
        return updated_user

    # =========================================================================
    # GESTIÓN DE CONTRASEÑA
    # =========================================================================

    async def change_password(
        self,
        user_id: int,
        current_password: str,
        new_password: str
    ) -> bool:
        """
        Cambia la contraseña verificando la actual

        Raises:
            UserInvalidOperationException: Si la contraseña actual no coincide
                o la nueva no es segura
        """
        user = await self.get_user_by_id(user_id)

        if not verify_password(current_password, user.password_hash):
            logger.warning("Cambio de contraseña rechazado para usuario id=%s", user_id)
            raise UserInvalidOperationException.wrong_password()

        self._ensure_strong_password(new_password)

        user.password_hash = hash_password(new_password)
        await self.user_repo.update(user)
        await self.db.commit()

        logger.info("Contraseña cambiada para usuario id=%s", user_id)
        return True

    async def reset_password(self, user_id: int, new_password: str) -> bool:
        """
        Restablece la contraseña de un usuario (solo administración)

        Returns:
            True si se restableció correctamente
        """
        user = await self.get_user_by_id(user_id)
        self._ensure_strong_password(new_password)

        user.password_hash = hash_password(new_password)
        await self.user_repo.update(user)
        await self.db.commit()

        logger.info("Contraseña restablecida para usuario id=%s", user_id)
        return True

    @staticmethod
    def _ensure_strong_password(password: str) -> None:
        is_valid, error_message = validate_password_strength(password)
        if not is_valid:
            raise UserInvalidOperationException(error_message)

    # =========================================================================
    # VALIDACIONES
    # =========================================================================

    async def _is_last_admin(self, user: User) -> bool:
        if not user.is_active:
            return False
        if not await self.user_role_repo.user_has_role_name(user.id, ADMIN_ROLE):
            return False
        return await self.user_repo.count_active_with_role(ADMIN_ROLE) <= 1

    async def _ensure_not_last_admin(self, user: User) -> None:
        if await self._is_last_admin(user):
            logger.warning("Intento de desactivar al último administrador (id=%s)", user.id)
            raise UserInvalidOperationException.last_admin(user.id)

    async def can_delete_user(self, user_id: int) -> bool:
        user = await self.get_user_by_id(user_id)
        return not await self._is_last_admin(user)

    async def is_email_available(self, email: str) -> bool:
        return not await self.user_repo.exists_by_email(email.strip())

    async def is_document_available(self, document_number: str) -> bool:
        return not await self.user_repo.exists_by_document(document_number.strip())

    # =========================================================================
    # ESTADÍSTICAS
    # =========================================================================

    async def get_statistics(self) -> Dict[str, Any]:
        """
        Obtiene estadísticas generales de usuarios

        Returns:
            Dict con totales, activos, inactivos, conteo por tipo de documento
            y usuarios creados en los últimos 30 días
        """
        last_month = utc_now_naive() - timedelta(days=30)

        return {
            "total": await self.user_repo.count(),
            "active": await self.user_repo.count(is_active=True),
            "inactive": await self.user_repo.count(is_active=False),
            "by_document_type": await self.user_repo.count_by_document_type(),
            "created_last_month": await self.user_repo.count_created_since(last_month)
        }

    @staticmethod
    def get_document_types() -> List[Dict[str, str]]:
        return [
            {"code": code, "description": description}
            for code, description in DOCUMENT_TYPE_DESCRIPTIONS.items()
        ]


# =============================================================================
# FUNCIÓN HELPER
# =============================================================================

def get_user_service(db: AsyncSession) -> UserService:
    """Factory function para obtener una instancia del UserService"""
    return UserService(db)
