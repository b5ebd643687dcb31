"""
Servicio de Asignaciones Usuario-Rol
Conjunto Residencial Arkania

Maneja toda la lógica de negocio para:
- Asignación de roles (reactivando asignaciones inactivas existentes)
- Activación, desactivación y eliminación de asignaciones
- Protección del último administrador activo
- Operaciones masivas por usuario y por rol
- Evaluación de las políticas de asignación (solo consultiva)
- Estadísticas de asignaciones
"""

import logging
from typing import List, Optional, Dict, Any
from datetime import datetime
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    UserNotFoundException,
    RoleNotFoundException,
    UserRoleNotFoundException,
    UserRoleAlreadyExistsException,
    UserRoleInvalidOperationException,
)
from app.core import policies
from app.models.role import Role
from app.models.user import User
from app.models.user_role import UserRole
from app.repositories.role_repository import RoleRepository
from app.repositories.user_repository import UserRepository
from app.repositories.user_role_repository import UserRoleRepository

logger = logging.getLogger(__name__)


class UserRoleService:
    """Servicio para gestión de asignaciones de roles"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_role_repo = UserRoleRepository(db)
        self.user_repo = UserRepository(db)
        self.role_repo = RoleRepository(db)

    # =========================================================================
    # HELPERS DE EXISTENCIA
    # =========================================================================

    async def _get_user(self, user_id: int) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundException.by_id(user_id)
        return user

    async def _get_role(self, role_id: int) -> Role:
        role = await self.role_repo.get_by_id(role_id)
        if role is None:
            raise RoleNotFoundException.by_id(role_id)
        return role

    # =========================================================================
    # OPERACIONES DE CONSULTA
    # =========================================================================

    async def get_assignment_by_id(self, assignment_id: int) -> UserRole:
        """
        Obtiene una asignación por ID

        Raises:
            UserRoleNotFoundException: Si no existe
        """
        assignment = await self.user_role_repo.get_by_id(assignment_id)

        if assignment is None:
            raise UserRoleNotFoundException.by_id(assignment_id)

        return assignment

    async def list_assignments(
        self,
        skip: int = 0,
        limit: int = 20,
        is_active: Optional[bool] = None
    ) -> tuple[List[UserRole], int]:
        assignments = await self.user_role_repo.get_all(skip=skip, limit=limit, is_active=is_active)
        total = await self.user_role_repo.count(is_active=is_active)
        return assignments, total

    async def get_assignment(self, user_id: int, role_id: int) -> UserRole:
        """Asignación del par usuario-rol (activa o no)"""
        assignment = await self.user_role_repo.get_by_user_and_role(user_id, role_id)

        if assignment is None:
            raise UserRoleNotFoundException.by_pair(user_id, role_id)

        return assignment

    async def get_active_assignment(self, user_id: int, role_id: int) -> UserRole:
        assignment = await self.user_role_repo.get_active_by_user_and_role(user_id, role_id)

        if assignment is None:
            raise UserRoleNotFoundException.by_pair(user_id, role_id)

        return assignment

    async def get_assignments_by_user(self, user_id: int, only_active: bool = False) -> List[UserRole]:
        await self._get_user(user_id)
        return await self.user_role_repo.get_by_user(user_id, only_active=only_active)

    async def get_assignments_by_role(self, role_id: int, only_active: bool = False) -> List[UserRole]:
        await self._get_role(role_id)
        return await self.user_role_repo.get_by_role(role_id, only_active=only_active)

    async def get_active_assignments(self) -> List[UserRole]:
        return await self.user_role_repo.get_by_status(True)

    async def get_inactive_assignments(self) -> List[UserRole]:
        return await self.user_role_repo.get_by_status(False)

    async def get_assignments_created_between(self, start: datetime, end: datetime) -> List[UserRole]:
        if start > end:
            raise UserRoleInvalidOperationException.invalid_date_range()
        return await self.user_role_repo.get_created_between(start, end)

    async def get_assignments_modified_between(self, start: datetime, end: datetime) -> List[UserRole]:
        if start > end:
            raise UserRoleInvalidOperationException.invalid_date_range()
        return await self.user_role_repo.get_modified_between(start, end)

    # =========================================================================
    # ASIGNACIÓN
    # =========================================================================

    async def assign_role(self, user_id: int, role_id: int) -> UserRole:
        """
        Asigna un rol a un usuario

        Si ya existe una asignación inactiva del par, se reactiva en lugar de
        crear otra.

        Raises:
            UserNotFoundException / RoleNotFoundException: Si no existen
            UserRoleAlreadyExistsException: Si el par ya está asignado y activo
            UserRoleInvalidOperationException: Si el usuario o el rol están inactivos
        """
        user = await self._get_user(user_id)
        role = await self._get_role(role_id)

        assignment = await self._assign(user, role)
        await self.db.commit()

        return assignment

    async def _assign(self, user: User, role: Role) -> UserRole:
        if not user.is_active:
            raise UserRoleInvalidOperationException.inactive_user(user.id)
        if not role.is_active:
            raise UserRoleInvalidOperationException.inactive_role(role.id)

        existing = await self.user_role_repo.get_by_user_and_role(user.id, role.id)

        if existing is not None and existing.is_active:
            logger.warning("Asignación duplicada rechazada: usuario=%s rol=%s", user.id, role.name)
            raise UserRoleAlreadyExistsException.active_pair(user.id, role.id)

        if existing is not None:
            existing.is_active = True
            assignment = await self.user_role_repo.update(existing)
            logger.info("Asignación reactivada: usuario=%s rol=%s", user.id, role.name)
            return assignment

        user_id, role_id, role_name = user.id, role.id, role.name
        try:
            assignment = await self.user_role_repo.create(
                UserRole(user_id=user_id, role_id=role_id, is_active=True)
            )
        except IntegrityError:
            # Otra petición insertó el mismo par entre la consulta y el insert
            await self.db.rollback()
            logger.warning("Asignación concurrente rechazada: usuario=%s rol=%s", user_id, role_name)
            raise UserRoleAlreadyExistsException.active_pair(user_id, role_id)

        logger.info("Rol %s asignado al usuario %s", role.name, user.id)
        return assignment

    async def can_assign(self, user_id: int, role_id: int) -> bool:
        """El usuario y el rol existen, están activos y el par no está activo"""
        user = await self.user_repo.get_by_id(user_id)
        role = await self.role_repo.get_by_id(role_id)

        if user is None or role is None:
            return False
        if not user.is_active or not role.is_active:
            return False

        return not await self.user_role_repo.exists(user_id, role_id, only_active=True)

    # =========================================================================
    # ACTIVACIÓN / DESACTIVACIÓN
    # =========================================================================

    async def update_assignment(self, assignment_id: int, is_active: bool) -> UserRole:
        """Solo el estado de una asignación es modificable"""
        if is_active:
            return await self.activate_assignment(assignment_id)
        return await self.deactivate_assignment(assignment_id)

    async def activate_assignment(self, assignment_id: int) -> UserRole:
        assignment = await self.get_assignment_by_id(assignment_id)
        return await self._set_active(assignment, True)

    async def deactivate_assignment(self, assignment_id: int) -> UserRole:
        assignment = await self.get_assignment_by_id(assignment_id)
        return await self._set_active(assignment, False)

    async def activate_pair(self, user_id: int, role_id: int) -> UserRole:
        assignment = await self.get_assignment(user_id, role_id)
        return await self._set_active(assignment, True)

    async def deactivate_pair(self, user_id: int, role_id: int) -> UserRole:
        """
        Desasigna un rol de un usuario (marca la asignación como inactiva)

        Raises:
            UserRoleNotFoundException: Si no hay asignación activa del par
        """
        assignment = await self.get_active_assignment(user_id, role_id)
        return await self._set_active(assignment, False)

    async def _set_active(self, assignment: UserRole, is_active: bool) -> UserRole:
        if assignment.is_active == is_active:
            return assignment

        if not is_active:
            await self._ensure_not_last_admin(assignment)

        assignment.is_active = is_active
        updated = await self.user_role_repo.update(assignment)
        await self.db.commit()

        logger.info(
            "Asignación %s %s (usuario=%s rol=%s)",
            assignment.id,
            "activada" if is_active else "desactivada",
            assignment.user_id,
            assignment.role_name
        )
        return updated

    async def delete_assignment(self, assignment_id: int) -> bool:
        """Elimina físicamente una asignación"""
        assignment = await self.get_assignment_by_id(assignment_id)
        if assignment.is_active:
            await self._ensure_not_last_admin(assignment)

        deleted = await self.user_role_repo.delete(assignment_id)
        await self.db.commit()

        logger.info("Asignación %s eliminada", assignment_id)
        return deleted

    async def _ensure_not_last_admin(self, assignment: UserRole) -> None:
        if not assignment.is_active or assignment.role_name != policies.ADMIN_ROLE:
            return
        if assignment.user is None or not assignment.user.is_active:
            return

        if await self.user_repo.count_active_with_role(policies.ADMIN_ROLE) <= 1:
            logger.warning(
                "Intento de retirar el rol %s al último administrador (usuario=%s)",
                policies.ADMIN_ROLE,
                assignment.user_id
            )
            raise UserRoleInvalidOperationException.last_admin(assignment.user_id)

    # =========================================================================
    # OPERACIONES MASIVAS
    # =========================================================================

    async def assign_roles_to_user(self, user_id: int, role_ids: List[int]) -> List[UserRole]:
        """
        Asigna varios roles a un usuario

        Los roles que el usuario ya tiene activos se omiten.
        """
        user = await self._get_user(user_id)
        assigned = []

        for role_id in dict.fromkeys(role_ids):
            role = await self._get_role(role_id)
            if await self.user_role_repo.exists(user_id, role_id, only_active=True):
                continue
            assigned.append(await self._assign(user, role))

        await self.db.commit()
        return assigned

    async def unassign_roles_from_user(self, user_id: int, role_ids: List[int]) -> List[UserRole]:
        """Desactiva las asignaciones activas de los roles indicados"""
        await self._get_user(user_id)
        deactivated = []

        for role_id in dict.fromkeys(role_ids):
            assignment = await self.user_role_repo.get_active_by_user_and_role(user_id, role_id)
            if assignment is None:
                continue
            await self._ensure_not_last_admin(assignment)
            assignment.is_active = False
            deactivated.append(await self.user_role_repo.update(assignment))

        await self.db.commit()
        logger.info("Roles %s desasignados del usuario %s", list(role_ids), user_id)
        return deactivated

    async def replace_user_roles(self, user_id: int, role_ids: List[int]) -> List[UserRole]:
        """
        Reemplaza el conjunto de roles activos del usuario

        Returns:
            Asignaciones activas del usuario después del reemplazo
        """
        user = await self._get_user(user_id)
        wanted = list(dict.fromkeys(role_ids))
        roles = [await self._get_role(role_id) for role_id in wanted]

        for assignment in await self.user_role_repo.get_by_user(user_id, only_active=True):
            if assignment.role_id not in wanted:
                await self._ensure_not_last_admin(assignment)
                assignment.is_active = False
                await self.user_role_repo.update(assignment)

        for role in roles:
            if not await self.user_role_repo.exists(user_id, role.id, only_active=True):
                await self._assign(user, role)

        await self.db.commit()
        logger.info("Roles del usuario %s reemplazados por %s", user_id, wanted)
        return await self.user_role_repo.get_by_user(user_id, only_active=True)

    async def assign_role_to_users(self, role_id: int, user_ids: List[int]) -> List[UserRole]:
        """Asigna un rol a varios usuarios, omitiendo los que ya lo tienen activo"""
        role = await self._get_role(role_id)
        assigned = []

        for user_id in dict.fromkeys(user_ids):
            user = await self._get_user(user_id)
            if await self.user_role_repo.exists(user_id, role_id, only_active=True):
                continue
            assigned.append(await self._assign(user, role))

        await self.db.commit()
        return assigned

    # =========================================================================
    # VERIFICACIONES Y POLÍTICAS
    # =========================================================================

    async def user_has_role(self, user_id: int, role_id: int) -> bool:
        return await self.user_role_repo.exists(user_id, role_id, only_active=True)

    async def user_has_role_name(self, user_id: int, role_name: str) -> bool:
        return await self.user_role_repo.user_has_role_name(user_id, role_name.strip())

    async def validate_policies(self, user_id: int, role_id: int) -> Dict[str, Any]:
        """
        Evalúa una posible asignación contra las políticas de roles

        No modifica nada: solo informa las violaciones encontradas.
        """
        await self._get_user(user_id)
        role = await self._get_role(role_id)

        current_roles = [r.name for r in await self.role_repo.get_roles_of_user(user_id)]
        users_with_role = await self.user_role_repo.count_active_by_role(role_id)

        violations = policies.evaluate_assignment_policy(role.name, current_roles, users_with_role)

        return {
            "user_id": user_id,
            "role_id": role_id,
            "role_name": role.name,
            "compliant": not violations,
            "violations": violations
        }

    @staticmethod
    def get_policies() -> Dict[str, Any]:
        return {
            "max_users_per_role": policies.MAX_USERS_PER_ROLE,
            "exclusive_roles": policies.EXCLUSIVE_ROLES,
            "prerequisite_roles": policies.PREREQUISITE_ROLES,
            "expiration_days": policies.EXPIRATION_DAYS,
            "renewal_days": policies.RENEWAL_DAYS
        }

    # =========================================================================
    # ESTADÍSTICAS
    # =========================================================================

    async def get_statistics(self) -> Dict[str, Any]:
        return {
            "total": await self.user_role_repo.count(),
            "active": await self.user_role_repo.count(is_active=True),
            "inactive": await self.user_role_repo.count(is_active=False),
            "by_role": await self.user_role_repo.count_active_by_role_name(),
            "by_user": await self.user_role_repo.count_active_by_user()
        }


def get_user_role_service(db: AsyncSession) -> UserRoleService:
    """Factory function para obtener una instancia del UserRoleService"""
    return UserRoleService(db)
