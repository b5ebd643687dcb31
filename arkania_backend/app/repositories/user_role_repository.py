"""
Repository de Asignaciones Usuario-Rol
Conjunto Residencial Arkania

Todas las consultas cargan el usuario y el rol de la asignación para poder
responder con el documento y nombre del usuario y el nombre del rol.
"""

from datetime import datetime
from typing import Optional, List, Dict
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func, and_
from sqlalchemy.orm import selectinload

from app.models.role import Role
from app.models.user_role import UserRole


class UserRoleRepository:
    """Repository para asignaciones de roles a usuarios"""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _base_query(self):
        return select(UserRole).options(
            selectinload(UserRole.user),
            selectinload(UserRole.role)
        )

    async def _list(self, *conditions, order_by=None) -> List[UserRole]:
        query = self._base_query()
        if conditions:
            query = query.where(and_(*conditions))
        query = query.order_by(order_by if order_by is not None else UserRole.id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    # =========================================================================
    # OPERACIONES DE LECTURA
    # =========================================================================

    async def get_by_id(self, assignment_id: int) -> Optional[UserRole]:
        """Obtiene una asignación por ID"""
        result = await self.db.execute(
            self._base_query().where(UserRole.id == assignment_id)
        )
        return result.scalar_one_or_none()

    async def get_by_user_and_role(self, user_id: int, role_id: int) -> Optional[UserRole]:
        """
        Obtiene la asignación de un par usuario-rol

        Si hubiera varias, retorna la activa o, en su defecto, la más reciente.
        """
        result = await self.db.execute(
            self._base_query()
            .where(and_(UserRole.user_id == user_id, UserRole.role_id == role_id))
            .order_by(UserRole.is_active.desc(), UserRole.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_active_by_user_and_role(self, user_id: int, role_id: int) -> Optional[UserRole]:
        result = await self.db.execute(
            self._base_query()
            .where(
                and_(
                    UserRole.user_id == user_id,
                    UserRole.role_id == role_id,
                    UserRole.is_active.is_(True)
                )
            )
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 20,
        is_active: Optional[bool] = None
    ) -> List[UserRole]:
        query = self._base_query()

        if is_active is not None:
            query = query.where(UserRole.is_active == is_active)

        query = query.order_by(UserRole.id).offset(skip).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_status(self, is_active: bool) -> List[UserRole]:
        return await self._list(UserRole.is_active == is_active)

    async def get_by_user(self, user_id: int, only_active: bool = False) -> List[UserRole]:
        conditions = [UserRole.user_id == user_id]
        if only_active:
            conditions.append(UserRole.is_active.is_(True))
        return await self._list(*conditions)

    async def get_by_role(self, role_id: int, only_active: bool = False) -> List[UserRole]:
        conditions = [UserRole.role_id == role_id]
        if only_active:
            conditions.append(UserRole.is_active.is_(True))
        return await self._list(*conditions)

    async def get_created_between(self, start: datetime, end: datetime) -> List[UserRole]:
        return await self._list(
            UserRole.created_at.between(start, end),
            order_by=UserRole.created_at
        )

    async def get_modified_between(self, start: datetime, end: datetime) -> List[UserRole]:
        return await self._list(
            UserRole.updated_at.between(start, end),
            order_by=UserRole.updated_at
        )

    async def exists(self, user_id: int, role_id: int, only_active: bool = False) -> bool:
        query = select(func.count(UserRole.id)).where(
            and_(UserRole.user_id == user_id, UserRole.role_id == role_id)
        )
        if only_active:
            query = query.where(UserRole.is_active.is_(True))
        result = await self.db.execute(query)
        return result.scalar() > 0

    async def user_has_role_name(self, user_id: int, role_name: str) -> bool:
        """Verifica si el usuario tiene una asignación activa del rol con ese nombre"""
        result = await self.db.execute(
            select(func.count(UserRole.id))
            .join(Role, Role.id == UserRole.role_id)
            .where(
                and_(
                    UserRole.user_id == user_id,
                    UserRole.is_active.is_(True),
                    func.upper(Role.name) == role_name.upper()
                )
            )
        )
        return result.scalar() > 0

    async def count(self, is_active: Optional[bool] = None) -> int:
        query = select(func.count(UserRole.id))
        if is_active is not None:
            query = query.where(UserRole.is_active == is_active)
        result = await self.db.execute(query)
        return result.scalar()

    async def count_active_by_role(self, role_id: int) -> int:
        result = await self.db.execute(
            select(func.count(UserRole.id)).where(
                and_(UserRole.role_id == role_id, UserRole.is_active.is_(True))
            )
        )
        return result.scalar() or 0

    async def count_active_by_role_name(self) -> Dict[str, int]:
        result = await self.db.execute(
            select(Role.name, func.count(UserRole.id))
            .join(Role, Role.id == UserRole.role_id)
            .where(UserRole.is_active.is_(True))
            .group_by(Role.name)
        )
        return {name: total for name, total in result.all()}

    async def count_active_by_user(self) -> Dict[int, int]:
        result = await self.db.execute(
            select(UserRole.user_id, func.count(UserRole.id))
            .where(UserRole.is_active.is_(True))
            .group_by(UserRole.user_id)
        )
        return {user_id: total for user_id, total in result.all()}

    # =========================================================================
    # OPERACIONES DE ESCRITURA
    # =========================================================================

    async def create(self, assignment: UserRole) -> UserRole:
        """Crea una asignación y la retorna con usuario y rol cargados"""
        self.db.add(assignment)
        await self.db.flush()
        return await self.get_by_id(assignment.id)

    async def update(self, assignment: UserRole) -> UserRole:
        await self.db.flush()
        await self.db.refresh(assignment, attribute_names=["is_active", "updated_at"])
        return assignment

    async def delete(self, assignment_id: int) -> bool:
        """Elimina físicamente una asignación"""
        result = await self.db.execute(
            delete(UserRole).where(UserRole.id == assignment_id)
        )
        return result.rowcount > 0


def get_user_role_repository(db: AsyncSession) -> UserRoleRepository:
    """Factory function para obtener una instancia del UserRoleRepository"""
    return UserRoleRepository(db)
