"""
Repository de Apartamentos
Conjunto Residencial Arkania
"""

from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func

from app.models.apartment import Apartment, UnitStatus


class ApartmentRepository:
    """Repository para operaciones CRUD de apartamentos"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, apartment_id: int) -> Optional[Apartment]:
        result = await self.db.execute(
            select(Apartment).where(Apartment.id == apartment_id)
        )
        return result.scalar_one_or_none()

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 20,
        status: Optional[UnitStatus] = None,
        tower: Optional[str] = None
    ) -> List[Apartment]:
        """
        Obtiene los apartamentos con filtros opcionales

        Args:
            skip: Registros a saltar
            limit: Límite de resultados
            status: Filtrar por estado (LIBRE, OCUPADO, INACTIVO)
            tower: Filtrar por torre
        """
        query = self._filtered(select(Apartment), status, tower)
        query = query.order_by(Apartment.tower, Apartment.number).offset(skip).limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count(
        self,
        status: Optional[UnitStatus] = None,
        tower: Optional[str] = None
    ) -> int:
        query = self._filtered(select(func.count(Apartment.id)), status, tower)
        result = await self.db.execute(query)
        return result.scalar()

    @staticmethod
    def _filtered(query, status: Optional[UnitStatus], tower: Optional[str]):
        if status is not None:
            query = query.where(Apartment.status == status)
        if tower is not None:
            query = query.where(Apartment.tower == tower)
        return query

    async def get_by_owner(self, owner_id: int) -> List[Apartment]:
        result = await self.db.execute(
            select(Apartment)
            .where(Apartment.owner_id == owner_id)
            .order_by(Apartment.tower, Apartment.number)
        )
        return list(result.scalars().all())

    async def create(self, apartment: Apartment) -> Apartment:
        self.db.add(apartment)
        await self.db.flush()
        await self.db.refresh(apartment)
        return apartment

    async def update(self, apartment: Apartment) -> Apartment:
        await self.db.flush()
        await self.db.refresh(apartment)
        return apartment

    async def delete(self, apartment_id: int) -> bool:
        result = await self.db.execute(
            delete(Apartment).where(Apartment.id == apartment_id)
        )
        return result.rowcount > 0


def get_apartment_repository(db: AsyncSession) -> ApartmentRepository:
    return ApartmentRepository(db)
