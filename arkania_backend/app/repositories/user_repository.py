"""
Repository de Usuarios
Conjunto Residencial Arkania

Maneja todas las operaciones de base de datos relacionadas con usuarios.
Implementa el patrón Repository para separar la lógica de acceso a datos.
"""

from datetime import datetime
from typing import Optional, List, Dict
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, and_

from app.models.user import User
from app.models.role import Role
from app.models.user_role import UserRole


class UserRepository:
    """Repository para operaciones CRUD de usuarios"""

    def __init__(self, db: AsyncSession):
        """
        Inicializa el repository con una sesión de base de datos

        Args:
            db: Sesión asíncrona de SQLAlchemy
        """
        self.db = db

    # =========================================================================
    # OPERACIONES DE LECTURA
    # =========================================================================

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """
        Obtiene un usuario por su ID (activo o no)

        Args:
            user_id: ID del usuario

        Returns:
            Usuario encontrado o None si no existe
        """
        result = await self.db.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_document(self, document_number: str) -> Optional[User]:
        """Obtiene un usuario por su número de documento"""
        result = await self.db.execute(
            select(User).where(User.document_number == document_number)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Obtiene un usuario por su email (sin distinguir mayúsculas)"""
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 20,
        is_active: Optional[bool] = None
    ) -> List[User]:
        """
        Obtiene todos los usuarios con paginación

        Args:
            skip: Número de registros a saltar
            limit: Número máximo de registros a retornar
            is_active: Filtrar por usuarios activos/inactivos (opcional)

        Returns:
            Lista de usuarios
        """
        query = select(User)

        if is_active is not None:
            query = query.where(User.is_active == is_active)

        query = query.order_by(User.id).offset(skip).limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_active(self) -> List[User]:
        """Usuarios activos ordenados por nombres y apellidos"""
        result = await self.db.execute(
            select(User)
            .where(User.is_active.is_(True))
            .order_by(User.first_name, User.last_name)
        )
        return list(result.scalars().all())

    async def get_inactive(self) -> List[User]:
        """Usuarios desactivados (soft delete)"""
        result = await self.db.execute(
            select(User)
            .where(User.is_active.is_(False))
            .order_by(User.first_name, User.last_name)
        )
        return list(result.scalars().all())

    async def search(self, search_term: str) -> List[User]:
        """
        Busca usuarios por nombre completo, email o documento

        Args:
            search_term: Término de búsqueda

        Returns:
            Lista de usuarios que coinciden con la búsqueda
        """
        search_pattern = f"%{search_term.strip()}%"
        full_name = User.first_name + " " + User.last_name

        result = await self.db.execute(
            select(User)
            .where(
                or_(
                    full_name.ilike(search_pattern),
                    User.email.ilike(search_pattern),
                    User.document_number.ilike(search_pattern)
                )
            )
            .order_by(User.first_name, User.last_name)
        )
        return list(result.scalars().all())

    async def count(self, is_active: Optional[bool] = None) -> int:
        """
        Cuenta el total de usuarios

        Args:
            is_active: Filtrar por activos/inactivos (opcional)

        Returns:
            Número total de usuarios
        """
        query = select(func.count(User.id))

        if is_active is not None:
            query = query.where(User.is_active == is_active)

        result = await self.db.execute(query)
        return result.scalar()

    async def exists_by_document(self, document_number: str) -> bool:
        """Verifica si existe un usuario con el número de documento dado"""
        result = await self.db.execute(
            select(func.count(User.id)).where(User.document_number == document_number)
        )
        return result.scalar() > 0

    async def exists_by_email(self, email: str) -> bool:
        """Verifica si existe un usuario con el email dado"""
        result = await self.db.execute(
            select(func.count(User.id)).where(func.lower(User.email) == email.lower())
        )
        return result.scalar() > 0

    # =========================================================================
    # OPERACIONES DE ESCRITURA
    # =========================================================================

    async def create(self, user: User) -> User:
        """
        Crea un nuevo usuario en la base de datos

        Args:
            user: Instancia de User a crear

        Returns:
            Usuario creado con su ID asignado
        """
        self.db.add(user)
        await self.db.flush()
        await self.db.refresh(user)
        return user

    async def update(self, user: User) -> User:
        """Guarda los cambios de un usuario existente"""
        await self.db.flush()
        await self.db.refresh(user)
        return user

    # =========================================================================
    # OPERACIONES ESPECIALES
    # =========================================================================

    async def get_by_role_name(self, role_name: str) -> List[User]:
        """
        Usuarios que tienen asignado (activo) el rol con el nombre dado

        Args:
            role_name: Nombre del rol

        Returns:
            Lista de usuarios con ese rol
        """
        result = await self.db.execute(
            select(User)
            .join(UserRole, UserRole.user_id == User.id)
            .join(Role, Role.id == UserRole.role_id)
            .where(
                and_(
                    Role.name == role_name,
                    UserRole.is_active.is_(True)
                )
            )
            .order_by(User.first_name, User.last_name)
            .distinct()
        )
        return list(result.scalars().all())

    async def count_active_with_role(self, role_name: str) -> int:
        """Usuarios activos con asignación activa del rol dado"""
        result = await self.db.execute(
            select(func.count(func.distinct(User.id)))
            .select_from(User)
            .join(UserRole, UserRole.user_id == User.id)
            .join(Role, Role.id == UserRole.role_id)
            .where(
                and_(
                    Role.name == role_name,
                    UserRole.is_active.is_(True),
                    User.is_active.is_(True)
                )
            )
        )
        return result.scalar() or 0

    async def get_without_roles(self) -> List[User]:
        """Usuarios que no tienen ninguna asignación activa"""
        active_assignment = (
            select(UserRole.id)
            .where(
                and_(
                    UserRole.user_id == User.id,
                    UserRole.is_active.is_(True)
                )
            )
            .exists()
        )
        result = await self.db.execute(
            select(User)
            .where(~active_assignment)
            .order_by(User.first_name, User.last_name)
        )
        return list(result.scalars().all())

    async def get_with_multiple_roles(self) -> List[User]:
        """Usuarios con más de una asignación activa"""
        multi = (
            select(UserRole.user_id)
            .where(UserRole.is_active.is_(True))
            .group_by(UserRole.user_id)
            .having(func.count(UserRole.id) > 1)
        )
        result = await self.db.execute(
            select(User)
            .where(User.id.in_(multi))
            .order_by(User.first_name, User.last_name)
        )
        return list(result.scalars().all())

    async def get_created_between(self, start: datetime, end: datetime) -> List[User]:
        """Usuarios creados dentro del rango de fechas (inclusive)"""
        result = await self.db.execute(
            select(User)
            .where(User.created_at.between(start, end))
            .order_by(User.created_at)
        )
        return list(result.scalars().all())

    async def count_created_since(self, since: datetime) -> int:
        result = await self.db.execute(
            select(func.count(User.id)).where(User.created_at >= since)
        )
        return result.scalar() or 0

    async def count_by_document_type(self) -> Dict[str, int]:
        """Cantidad de usuarios por tipo de documento"""
        result = await self.db.execute(
            select(User.document_type, func.count(User.id))
            .group_by(User.document_type)
        )
        return {
            (doc_type.value if hasattr(doc_type, "value") else str(doc_type)): total
            for doc_type, total in result.all()
        }


# =============================================================================
# FUNCIÓN HELPER PARA OBTENER EL REPOSITORY
# =============================================================================

def get_user_repository(db: AsyncSession) -> UserRepository:
    """
    Factory function para obtener una instancia del UserRepository

    Args:
        db: Sesión de base de datos

    Returns:
        Instancia de UserRepository
    """
    return UserRepository(db)
