"""
Servicio de Áreas Comunes
Conjunto Residencial Arkania
"""

import logging
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import CommonAreaNotFoundException
from app.models.common_area import CommonArea, CommonAreaStatus
from app.repositories.common_area_repository import CommonAreaRepository
from app.schemas.properties import CommonAreaCreate, CommonAreaUpdate

logger = logging.getLogger(__name__)


class CommonAreaService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.area_repo = CommonAreaRepository(db)

    async def get_area_by_id(self, area_id: int) -> CommonArea:
        area = await self.area_repo.get_by_id(area_id)

        if area is None:
            raise CommonAreaNotFoundException.by_id(area_id)

        return area

    async def list_areas(
        self,
        skip: int = 0,
        limit: int = 20,
        status: Optional[CommonAreaStatus] = None
    ) -> tuple[List[CommonArea], int]:
        areas = await self.area_repo.get_all(skip=skip, limit=limit, status=status)
        total = await self.area_repo.count(status=status)
        return areas, total

    async def create_area(self, area_data: CommonAreaCreate) -> CommonArea:
        area = await self.area_repo.create(CommonArea(**area_data.model_dump()))
        await self.db.commit()

        logger.info("Área común creada: %s (id=%s)", area.name, area.id)
        return area

    async def update_area(self, area_id: int, area_data: CommonAreaUpdate) -> CommonArea:
        """
        Actualiza un área común

        Solo cambian descripción, capacidad, horario y estado; nombre y
        ubicación se conservan.
        """
        area = await self.get_area_by_id(area_id)

        area.description = area_data.description
        area.max_capacity = area_data.max_capacity
        area.opening_hours = area_data.opening_hours
        area.status = area_data.status

        updated = await self.area_repo.update(area)
        await self.db.commit()

        logger.info("Área común actualizada: id=%s", area_id)
        return updated

    async def delete_area(self, area_id: int) -> bool:
        await self.get_area_by_id(area_id)

        deleted = await self.area_repo.delete(area_id)
        await self.db.commit()

        logger.info("Área común eliminada: id=%s", area_id)
        return deleted


def get_common_area_service(db: AsyncSession) -> CommonAreaService:
    return CommonAreaService(db)
