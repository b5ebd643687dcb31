"""
Repository de Parqueaderos
Conjunto Residencial Arkania
"""

from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func

from app.models.apartment import UnitStatus
from app.models.parking_spot import ParkingSpot, ParkingRoleType


class ParkingSpotRepository:
    """Repository para operaciones CRUD de parqueaderos"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, parking_id: int) -> Optional[ParkingSpot]:
        result = await self.db.execute(
            select(ParkingSpot).where(ParkingSpot.id == parking_id)
        )
        return result.scalar_one_or_none()

    async def get_by_number(self, number: str) -> Optional[ParkingSpot]:
        result = await self.db.execute(
            select(ParkingSpot).where(ParkingSpot.number == number)
        )
        return result.scalar_one_or_none()

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 20,
        role_type: Optional[ParkingRoleType] = None,
        status: Optional[UnitStatus] = None
    ) -> List[ParkingSpot]:
        query = self._filtered(select(ParkingSpot), role_type, status)
        query = query.order_by(ParkingSpot.number).offset(skip).limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count(
        self,
        role_type: Optional[ParkingRoleType] = None,
        status: Optional[UnitStatus] = None
    ) -> int:
        query = self._filtered(select(func.count(ParkingSpot.id)), role_type, status)
        result = await self.db.execute(query)
        return result.scalar()

    @staticmethod
    def _filtered(query, role_type: Optional[ParkingRoleType], status: Optional[UnitStatus]):
        if role_type is not None:
            query = query.where(ParkingSpot.role_type == role_type)
        if status is not None:
            query = query.where(ParkingSpot.status == status)
        return query

    async def get_by_user(self, user_id: int) -> List[ParkingSpot]:
        result = await self.db.execute(
            select(ParkingSpot)
            .where(ParkingSpot.user_id == user_id)
            .order_by(ParkingSpot.number)
        )
        return list(result.scalars().all())

    async def exists_by_number(self, number: str) -> bool:
        result = await self.db.execute(
            select(func.count(ParkingSpot.id)).where(ParkingSpot.number == number)
        )
        return result.scalar() > 0

    async def create(self, parking: ParkingSpot) -> ParkingSpot:
        self.db.add(parking)
        await self.db.flush()
        await self.db.refresh(parking)
        return parking

    async def update(self, parking: ParkingSpot) -> ParkingSpot:
        await self.db.flush()
        await self.db.refresh(parking)
        return parking

    async def delete(self, parking_id: int) -> bool:
        result = await self.db.execute(
            delete(ParkingSpot).where(ParkingSpot.id == parking_id)
        )
        return result.rowcount > 0


def get_parking_repository(db: AsyncSession) -> ParkingSpotRepository:
    return ParkingSpotRepository(db)
