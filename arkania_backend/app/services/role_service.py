"""
Servicio de Roles
Conjunto Residencial Arkania

Maneja toda la lógica de negocio para:
- Creación y edición de roles (nombre único en mayúsculas)
- Gestión de permisos (catálogo de permisos válidos)
- Soft delete con protección de roles críticos y roles en uso
- Inicialización de los roles por defecto
- Estadísticas de roles
"""

import logging
from typing import List, Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    RoleNotFoundException,
    RoleAlreadyExistsException,
    RoleInvalidOperationException,
    UserNotFoundException,
)
from app.core.policies import CRITICAL_ROLES, DEFAULT_ROLES, invalid_permissions
from app.models.role import Role
from app.repositories.role_repository import RoleRepository
from app.repositories.user_repository import UserRepository
from app.schemas.roles import RoleCreate, RoleUpdate

logger = logging.getLogger(__name__)


def _normalize_permission(permission: str) -> str:
    return permission.strip().upper()


class RoleService:
    """Servicio para gestión de roles y permisos"""

    def __init__(self, db: AsyncSession):
        """
        Inicializa el servicio con la sesión de BD

        Args:
            db: Sesión asíncrona de SQLAlchemy
        """
        self.db = db
        self.role_repo = RoleRepository(db)
        self.user_repo = UserRepository(db)

    # =========================================================================
    # OPERACIONES DE CONSULTA
    # =========================================================================

    async def get_role_by_id(self, role_id: int) -> Role:
        """
        Obtiene un rol por ID

        Raises:
            RoleNotFoundException: Si no existe
        """
        role = await self.role_repo.get_by_id(role_id)

        if role is None:
            raise RoleNotFoundException.by_id(role_id)

        return role

    async def get_role_by_name(self, name: str) -> Role:
        """Busca por nombre exacto (se normaliza a mayúsculas)"""
        normalized = name.strip().upper()
        role = await self.role_repo.get_by_name(normalized)

        if role is None:
            raise RoleNotFoundException.by_name(normalized)

        return role

    async def get_role_by_name_ignore_case(self, name: str) -> Role:
        role = await self.role_repo.get_by_name_ignore_case(name.strip())

        if role is None:
            raise RoleNotFoundException.by_name(name)

        return role

    async def list_roles(
        self,
        skip: int = 0,
        limit: int = 20,
        is_active: Optional[bool] = None
    ) -> tuple[List[Role], int]:
        """
        Lista roles con paginación

        Returns:
            Tupla (lista_roles, total_count)
        """
        roles = await self.role_repo.get_all(skip=skip, limit=limit, is_active=is_active)
        total = await self.role_repo.count(is_active=is_active)
        return roles, total

    async def get_active_roles(self) -> List[Role]:
        return await self.role_repo.get_by_status(True)

    async def get_inactive_roles(self) -> List[Role]:
        return await self.role_repo.get_by_status(False)

    async def search_by_description(self, text: str) -> List[Role]:
        return await self.role_repo.search_by_description(text)

    async def get_roles_by_permission(self, permission: str) -> List[Role]:
        return await self.role_repo.get_by_permission(_normalize_permission(permission))

    async def get_roles_without_users(self) -> List[Role]:
        return await self.role_repo.get_without_users()

    async def get_roles_with_min_users(self, minimum: int) -> List[Role]:
        if minimum < 0:
            raise RoleInvalidOperationException("El mínimo de usuarios no puede ser negativo")
        return await self.role_repo.get_with_min_users(minimum)

    async def get_roles_of_user(self, user_id: int) -> List[Role]:
        """
        Roles activos de un usuario a través de sus asignaciones activas

        Raises:
            UserNotFoundException: Si el usuario no existe
        """
        if await self.user_repo.get_by_id(user_id) is None:
            raise UserNotFoundException.by_id(user_id)

        return await self.role_repo.get_roles_of_user(user_id)

    # =========================================================================
    # OPERACIONES DE MODIFICACIÓN
    # =========================================================================

    async def create_role(self, role_data: RoleCreate) -> Role:
        """
        Crea un nuevo rol

        El nombre llega normalizado a mayúsculas desde el schema.

        Raises:
            RoleAlreadyExistsException: Si el nombre ya existe
            RoleInvalidOperationException: Si algún permiso no es válido
        """
        if await self.role_repo.exists_by_name(role_data.name):
            logger.warning("Rol duplicado rechazado: %s", role_data.name)
            raise RoleAlreadyExistsException.by_name(role_data.name)

        permissions = self._validated_permissions(role_data.permissions)

        role = Role(
            name=role_data.name,
            description=role_data.description,
            is_active=role_data.is_active
        )
        role.set_permissions(permissions)

        created_role = await self.role_repo.create(role)
        await self.db.commit()

        logger.info("Rol creado: %s (id=%s)", created_role.name, created_role.id)
        return created_role

    async def update_role(self, role_id: int, role_data: RoleUpdate) -> Role:
        """
        Actualiza un rol con los campos enviados

        Args:
            role_id: ID del rol
            role_data: Campos a modificar (los no enviados se conservan)

        Raises:
            RoleInvalidOperationException: Si se renombra un rol crítico o se
                desactiva uno que no se puede eliminar

        Returns:
            Rol actualizado
        """
        role = await self.get_role_by_id(role_id)
        values = role_data.model_dump(exclude_unset=True)

        new_name = values.get("name")
        if new_name and new_name != role.name:
            if role.name in CRITICAL_ROLES:
                logger.warning("Intento de renombrar el rol crítico %s a %s", role.name, new_name)
                raise RoleInvalidOperationException.critical_rename(role.name)
            if await self.role_repo.exists_by_name(new_name):
                raise RoleAlreadyExistsException.by_name(new_name)
            role.name = new_name

        if "description" in values:
            role.description = values["description"]

        if values.get("permissions") is not None:
            role.set_permissions(self._validated_permissions(values["permissions"]))

        is_active = values.get("is_active")
        if is_active is not None and is_active != role.is_active:
            if not is_active:
                await self._ensure_can_delete(role)
            role.is_active = is_active

        updated_role = await self.role_repo.update(role)
        await self.db.commit()

        logger.info("Rol actualizado: %s (id=%s)", updated_role.name, updated_role.id)
        return updated_role

    async def delete_role(self, role_id: int) -> Role:
        """
        Desactiva un rol (soft delete)

        Raises:
            RoleInvalidOperationException: Si el rol es crítico o tiene asignaciones
        """
        role = await self.get_role_by_id(role_id)
        await self._ensure_can_delete(role)

        role.is_active = False
        updated_role = await self.role_repo.update(role)
        await self.db.commit()

        logger.info("Rol desactivado: %s (id=%s)", role.name, role.id)
        return updated_role

    async def reactivate_role(self, role_id: int) -> Role:
        role = await self.get_role_by_id(role_id)

        role.is_active = True
        updated_role = await self.role_repo.update(role)
        await self.db.commit()

        logger.info("Rol reactivado: %s (id=%s)", role.name, role.id)
        return updated_role

    async def initialize_default_roles(self) -> List[str]:
        """
        Crea los roles por defecto que aún no existen

        Returns:
            Nombres de los roles creados (vacío si ya existían todos)
        """
        created = []

        for name, definition in DEFAULT_ROLES.items():
            if await self.role_repo.exists_by_name(name):
                continue

            role = Role(name=name, description=definition["description"], is_active=True)
            role.set_permissions(definition["permissions"])
            await self.role_repo.create(role)
            created.append(name)

        if created:
            await self.db.commit()

        return created

    # =========================================================================
    # GESTIÓN DE PERMISOS
    # =========================================================================

    async def get_permissions(self, role_id: int) -> List[str]:
        role = await self.get_role_by_id(role_id)
        return role.permission_list

    async def add_permission(self, role_id: int, permission: str) -> Role:
        """
        Agrega un permiso al rol

        Raises:
            RoleAlreadyExistsException: Si el rol ya tiene el permiso
            RoleInvalidOperationException: Si el permiso no está en el catálogo
        """
        role = await self.get_role_by_id(role_id)
        permission = _normalize_permission(permission)
        self._validated_permissions([permission])

        permissions = role.permission_list
        if permission in permissions:
            raise RoleAlreadyExistsException.permission(role.name, permission)

        permissions.append(permission)
        role.set_permissions(permissions)

        updated_role = await self.role_repo.update(role)
        await self.db.commit()

        logger.info("Permiso %s agregado al rol %s", permission, role.name)
        return updated_role

    async def remove_permission(self, role_id: int, permission: str) -> Role:
        """
        Quita un permiso del rol

        Raises:
            RoleNotFoundException: Si el rol no tiene el permiso
        """
        role = await self.get_role_by_id(role_id)
        permission = _normalize_permission(permission)

        permissions = role.permission_list
        if permission not in permissions:
            raise RoleNotFoundException.missing_permission(role.name, permission)

        role.set_permissions([p for p in permissions if p != permission])

        updated_role = await self.role_repo.update(role)
        await self.db.commit()

        logger.info("Permiso %s removido del rol %s", permission, role.name)
        return updated_role

    async def replace_permissions(self, role_id: int, permissions: List[str]) -> Role:
        role = await self.get_role_by_id(role_id)
        role.set_permissions(self._validated_permissions(permissions))

        updated_role = await self.role_repo.update(role)
        await self.db.commit()

        logger.info("Permisos del rol %s reemplazados", role.name)
        return updated_role

    async def role_has_permission(self, role_id: int, permission: str) -> bool:
        """Verifica pertenencia exacta del permiso en la lista del rol"""
        role = await self.get_role_by_id(role_id)
        return _normalize_permission(permission) in role.permission_list

    @staticmethod
    def _validated_permissions(permissions: List[str]) -> List[str]:
        normalized = []
        for permission in permissions:
            value = _normalize_permission(permission)
            if value not in normalized:
                normalized.append(value)

        invalid = invalid_permissions(normalized)
        if invalid:
            raise RoleInvalidOperationException.invalid_permissions(invalid)

        return normalized

    # =========================================================================
    # VALIDACIONES
    # =========================================================================

    async def _ensure_can_delete(self, role: Role) -> None:
        if role.name in CRITICAL_ROLES:
            raise RoleInvalidOperationException.critical_role(role.name)

        assignments = await self.role_repo.count_assignments(role.id)
        if assignments > 0:
            raise RoleInvalidOperationException.has_users(role.name, assignments)

    async def can_delete_role(self, role_id: int) -> bool:
        role = await self.get_role_by_id(role_id)
        if role.name in CRITICAL_ROLES:
            return False
        return await self.role_repo.count_assignments(role.id) == 0

    async def count_users(self, role_id: int) -> int:
        """Cantidad de asignaciones activas del rol"""
        await self.get_role_by_id(role_id)
        return await self.role_repo.count_assignments(role_id, only_active=True)

    # =========================================================================
    # ESTADÍSTICAS
    # =========================================================================

    async def get_statistics(self) -> Dict[str, Any]:
        return {
            "total": await self.role_repo.count(),
            "active": await self.role_repo.count(is_active=True),
            "inactive": await self.role_repo.count(is_active=False),
            "users_by_role": await self.role_repo.count_users_by_role()
        }


# =============================================================================
# FUNCIÓN HELPER
# =============================================================================

def get_role_service(db: AsyncSession) -> RoleService:
    """Factory function para obtener una instancia del RoleService"""
    return RoleService(db)
