"""
Repository de Roles
Conjunto Residencial Arkania

Consultas de roles: búsqueda por nombre, descripción y permiso, y conteos
de usuarios asignados.
"""

from typing import Optional, List, Dict
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, and_

from app.models.role import Role
from app.models.user_role import UserRole


class RoleRepository:
    """Repository para operaciones CRUD de roles"""

    def __init__(self, db: AsyncSession):
        self.db = db

    # =========================================================================
    # OPERACIONES DE LECTURA
    # =========================================================================

    async def get_by_id(self, role_id: int) -> Optional[Role]:
        """Obtiene un rol por ID"""
        result = await self.db.execute(
            select(Role).where(Role.id == role_id)
        )
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Optional[Role]:
        """Obtiene un rol por nombre exacto"""
        result = await self.db.execute(
            select(Role).where(Role.name == name)
        )
        return result.scalar_one_or_none()

    async def get_by_name_ignore_case(self, name: str) -> Optional[Role]:
        """Obtiene un rol por nombre sin distinguir mayúsculas"""
        result = await self.db.execute(
            select(Role).where(func.upper(Role.name) == name.upper())
        )
        return result.scalar_one_or_none()

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 20,
        is_active: Optional[bool] = None
    ) -> List[Role]:
        """Obtiene los roles con paginación y filtro opcional de estado"""
        query = select(Role)

        if is_active is not None:
            query = query.where(Role.is_active == is_active)

        query = query.order_by(Role.name).offset(skip).limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_status(self, is_active: bool) -> List[Role]:
        """Roles activos o inactivos, ordenados por nombre"""
        result = await self.db.execute(
            select(Role).where(Role.is_active == is_active).order_by(Role.name)
        )
        return list(result.scalars().all())

    async def count(self, is_active: Optional[bool] = None) -> int:
        query = select(func.count(Role.id))

        if is_active is not None:
            query = query.where(Role.is_active == is_active)

        result = await self.db.execute(query)
        return result.scalar()

    async def exists_by_name(self, name: str) -> bool:
        result = await self.db.execute(
            select(func.count(Role.id)).where(Role.name == name)
        )
        return result.scalar() > 0

    async def search_by_description(self, text: str) -> List[Role]:
        """Roles cuya descripción contiene el texto (sin distinguir mayúsculas)"""
        result = await self.db.execute(
            select(Role)
            .where(Role.description.ilike(f"%{text.strip()}%"))
            .order_by(Role.name)
        )
        return list(result.scalars().all())

    async def get_by_permission(self, permission: str) -> List[Role]:
        """
        Roles cuyo JSON de permisos contiene el texto dado

        Es una coincidencia por contenido (LIKE) sobre la columna de texto.
        """
        result = await self.db.execute(
            select(Role)
            .where(Role.permissions.like(f"%{permission}%"))
            .order_by(Role.name)
        )
        return list(result.scalars().all())

    # =========================================================================
    # OPERACIONES DE ESCRITURA
    # =========================================================================

    async def create(self, role: Role) -> Role:
        """Crea un nuevo rol"""
        self.db.add(role)
        await self.db.flush()
        await self.db.refresh(role)
        return role

    async def update(self, role: Role) -> Role:
        """Guarda los cambios de un rol existente"""
        await self.db.flush()
        await self.db.refresh(role)
        return role

    # =========================================================================
    # OPERACIONES ESPECIALES
    # =========================================================================

    async def count_assignments(self, role_id: int, only_active: bool = False) -> int:
        """
        Cuenta las asignaciones de usuarios a un rol

        Args:
            role_id: ID del rol
            only_active: Contar solo asignaciones activas

        Returns:
            Número de asignaciones
        """
        query = select(func.count(UserRole.id)).where(UserRole.role_id == role_id)

        if only_active:
            query = query.where(UserRole.is_active.is_(True))

        result = await self.db.execute(query)
        return result.scalar() or 0

    async def get_roles_of_user(self, user_id: int) -> List[Role]:
        """Roles activos asignados de forma activa a un usuario"""
        result = await self.db.execute(
            select(Role)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(
                and_(
                    UserRole.user_id == user_id,
                    UserRole.is_active.is_(True),
                    Role.is_active.is_(True)
                )
            )
            .order_by(Role.name)
        )
        return list(result.scalars().all())

    async def get_without_users(self) -> List[Role]:
        """Roles sin ninguna asignación activa"""
        active_assignment = (
            select(UserRole.id)
            .where(
                and_(
                    UserRole.role_id == Role.id,
                    UserRole.is_active.is_(True)
                )
            )
            .exists()
        )
        result = await self.db.execute(
            select(Role).where(~active_assignment).order_by(Role.name)
        )
        return list(result.scalars().all())

    async def get_with_min_users(self, minimum: int) -> List[Role]:
        """Roles con al menos `minimum` asignaciones activas"""
        counts = (
            select(UserRole.role_id)
            .where(UserRole.is_active.is_(True))
            .group_by(UserRole.role_id)
            .having(func.count(UserRole.id) >= minimum)
        )
        result = await self.db.execute(
            select(Role).where(Role.id.in_(counts)).order_by(Role.name)
        )
        return list(result.scalars().all())

    async def count_users_by_role(self) -> Dict[str, int]:
        """Asignaciones activas agrupadas por nombre de rol (incluye roles sin usuarios)"""
        result = await self.db.execute(
            select(Role.name, func.count(UserRole.id))
            .outerjoin(
                UserRole,
                and_(UserRole.role_id == Role.id, UserRole.is_active.is_(True))
            )
            .group_by(Role.name)
            .order_by(Role.name)
        )
        return {name: total for name, total in result.all()}


def get_role_repository(db: AsyncSession) -> RoleRepository:
    """Factory function para obtener una instancia del RoleRepository"""
    return RoleRepository(db)
