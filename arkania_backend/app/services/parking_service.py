"""
Servicio de Parqueaderos
Conjunto Residencial Arkania

Maneja la lógica de negocio para:
- Registro de parqueaderos con número único
- Asignación y liberación de parqueaderos a usuarios
"""

import logging
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    ParkingSpotNotFoundException,
    ParkingSpotAlreadyExistsException,
    UserNotFoundException,
)
from app.models.apartment import UnitStatus
from app.models.parking_spot import ParkingSpot, ParkingRoleType
from app.repositories.parking_repository import ParkingSpotRepository
from app.repositories.user_repository import UserRepository
from app.schemas.properties import ParkingSpotCreate, ParkingSpotUpdate

logger = logging.getLogger(__name__)


class ParkingSpotService:
    """Servicio para gestión de parqueaderos"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.parking_repo = ParkingSpotRepository(db)
        self.user_repo = UserRepository(db)

    # =========================================================================
    # OPERACIONES DE CONSULTA
    # =========================================================================

    async def get_parking_by_id(self, parking_id: int) -> ParkingSpot:
        parking = await self.parking_repo.get_by_id(parking_id)

        if parking is None:
            raise ParkingSpotNotFoundException.by_id(parking_id)

        return parking

    async def list_parking_spots(
        self,
        skip: int = 0,
        limit: int = 20,
        role_type: Optional[ParkingRoleType] = None,
        status: Optional[UnitStatus] = None
    ) -> tuple[List[ParkingSpot], int]:
        spots = await self.parking_repo.get_all(skip=skip, limit=limit, role_type=role_type, status=status)
        total = await self.parking_repo.count(role_type=role_type, status=status)
        return spots, total

    async def get_parking_by_user(self, user_id: int) -> List[ParkingSpot]:
        await self._ensure_user_exists(user_id)
        return await self.parking_repo.get_by_user(user_id)

    # =========================================================================
    # OPERACIONES DE MODIFICACIÓN
    # =========================================================================

    async def create_parking(self, parking_data: ParkingSpotCreate) -> ParkingSpot:
        """
        Registra un parqueadero

        Raises:
            ParkingSpotAlreadyExistsException: Si el número ya existe
            UserNotFoundException: Si el usuario asignado no existe
        """
        if await self.parking_repo.exists_by_number(parking_data.number):
            logger.warning("Número de parqueadero duplicado: %s", parking_data.number)
            raise ParkingSpotAlreadyExistsException.by_number(parking_data.number)

        if parking_data.user_id is not None:
            await self._ensure_user_exists(parking_data.user_id)

        parking = await self.parking_repo.create(ParkingSpot(**parking_data.model_dump()))
        await self.db.commit()

        logger.info("Parqueadero creado: %s (id=%s)", parking.number, parking.id)
        return parking

    async def update_parking(self, parking_id: int, parking_data: ParkingSpotUpdate) -> ParkingSpot:
        parking = await self.get_parking_by_id(parking_id)

        if parking_data.number != parking.number:
            if await self.parking_repo.exists_by_number(parking_data.number):
                raise ParkingSpotAlreadyExistsException.by_number(parking_data.number)

        if parking_data.user_id is not None:
            await self._ensure_user_exists(parking_data.user_id)

        for field, value in parking_data.model_dump().items():
            setattr(parking, field, value)

        updated = await self.parking_repo.update(parking)
        await self.db.commit()

        logger.info("Parqueadero actualizado: id=%s", parking_id)
        return updated

    async def delete_parking(self, parking_id: int) -> bool:
        await self.get_parking_by_id(parking_id)

        deleted = await self.parking_repo.delete(parking_id)
        await self.db.commit()

        logger.info("Parqueadero eliminado: id=%s", parking_id)
        return deleted

    async def assign_to_user(self, parking_id: int, user_id: int) -> ParkingSpot:
        """Asigna el parqueadero a un usuario y lo marca OCUPADO"""
        parking = await self.get_parking_by_id(parking_id)
        await self._ensure_user_exists(user_id)

        parking.user_id = user_id
        parking.status = UnitStatus.OCUPADO

        updated = await self.parking_repo.update(parking)
        await self.db.commit()

        logger.info("Parqueadero %s asignado al usuario %s", parking.number, user_id)
        return updated

    async def release(self, parking_id: int) -> ParkingSpot:
        """Quita el usuario asignado y deja el parqueadero LIBRE"""
        parking = await self.get_parking_by_id(parking_id)

        parking.user_id = None
        parking.status = UnitStatus.LIBRE

        updated = await self.parking_repo.update(parking)
        await self.db.commit()

        logger.info("Parqueadero %s liberado", parking.number)
        return updated

    async def _ensure_user_exists(self, user_id: int) -> None:
        if await self.user_repo.get_by_id(user_id) is None:
            raise UserNotFoundException.by_id(user_id)


def get_parking_service(db: AsyncSession) -> ParkingSpotService:
    return ParkingSpotService(db)
