"""
Servicio de Apartamentos
Conjunto Residencial Arkania
"""

import logging
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ApartmentNotFoundException, UserNotFoundException
from app.models.apartment import Apartment, UnitStatus
from app.repositories.apartment_repository import ApartmentRepository
from app.repositories.user_repository import UserRepository
from app.schemas.properties import ApartmentCreate, ApartmentUpdate

logger = logging.getLogger(__name__)


class ApartmentService:
    """Servicio para gestión de apartamentos"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.apartment_repo = ApartmentRepository(db)
        self.user_repo = UserRepository(db)

    async def get_apartment_by_id(self, apartment_id: int) -> Apartment:
        apartment = await self.apartment_repo.get_by_id(apartment_id)

        if apartment is None:
            raise ApartmentNotFoundException.by_id(apartment_id)

        return apartment

    async def list_apartments(
        self,
        skip: int = 0,
        limit: int = 20,
        status: Optional[UnitStatus] = None,
        tower: Optional[str] = None
    ) -> tuple[List[Apartment], int]:
        apartments = await self.apartment_repo.get_all(skip=skip, limit=limit, status=status, tower=tower)
        total = await self.apartment_repo.count(status=status, tower=tower)
        return apartments, total

    async def get_apartments_by_owner(self, owner_id: int) -> List[Apartment]:
        await self._ensure_owner_exists(owner_id)
        return await self.apartment_repo.get_by_owner(owner_id)

    async def create_apartment(self, apartment_data: ApartmentCreate) -> Apartment:
        """
        Registra un apartamento

        Raises:
            UserNotFoundException: Si el propietario no existe
        """
        await self._ensure_owner_exists(apartment_data.owner_id)

        apartment = await self.apartment_repo.create(Apartment(**apartment_data.model_dump()))
        await self.db.commit()

        logger.info("Apartamento creado: %s-%s (id=%s)", apartment.tower, apartment.number, apartment.id)
        return apartment

    async def update_apartment(self, apartment_id: int, apartment_data: ApartmentUpdate) -> Apartment:
        apartment = await self.get_apartment_by_id(apartment_id)
        await self._ensure_owner_exists(apartment_data.owner_id)

        for field, value in apartment_data.model_dump().items():
            setattr(apartment, field, value)

        updated = await self.apartment_repo.update(apartment)
        await self.db.commit()

        logger.info("Apartamento actualizado: id=%s", apartment_id)
        return updated

    async def delete_apartment(self, apartment_id: int) -> bool:
        await self.get_apartment_by_id(apartment_id)

        deleted = await self.apartment_repo.delete(apartment_id)
        await self.db.commit()

        logger.info("Apartamento eliminado: id=%s", apartment_id)
        return deleted

    async def _ensure_owner_exists(self, owner_id: int) -> None:
        if await self.user_repo.get_by_id(owner_id) is None:
            raise UserNotFoundException.by_id(owner_id)


def get_apartment_service(db: AsyncSession) -> ApartmentService:
    return ApartmentService(db)
