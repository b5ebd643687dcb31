"""
Repository de Áreas Comunes
Conjunto Residencial Arkania
"""

from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func

from app.models.common_area import CommonArea, CommonAreaStatus


class CommonAreaRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, area_id: int) -> Optional[CommonArea]:
        result = await self.db.execute(
            select(CommonArea).where(CommonArea.id == area_id)
        )
        return result.scalar_one_or_none()

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 20,
        status: Optional[CommonAreaStatus] = None
    ) -> List[CommonArea]:
        query = select(CommonArea)
        if status is not None:
            query = query.where(CommonArea.status == status)
        query = query.order_by(CommonArea.name).offset(skip).limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count(self, status: Optional[CommonAreaStatus] = None) -> int:
        query = select(func.count(CommonArea.id))
        if status is not None:
            query = query.where(CommonArea.status == status)
        result = await self.db.execute(query)
        return result.scalar()

    async def create(self, area: CommonArea) -> CommonArea:
        self.db.add(area)
        await self.db.flush()
        await self.db.refresh(area)
        return area

    async def update(self, area: CommonArea) -> CommonArea:
        await self.db.flush()
        await self.db.refresh(area)
        return area

    async def delete(self, area_id: int) -> bool:
        result = await self.db.execute(
            delete(CommonArea).where(CommonArea.id == area_id)
        )
        return result.rowcount > 0


def get_common_area_repository(db: AsyncSession) -> CommonAreaRepository:
    return CommonAreaRepository(db)
