"""
Servicio de Correspondencia
Conjunto Residencial Arkania

Maneja toda la lógica de negocio para:
- Registro de paquetes y documentos recibidos en portería
- Entrega al residente (quién retira y cuándo)
- Consultas de pendientes, por tipo, estado y fechas
"""

import logging
from typing import List, Optional
from datetime import datetime, timedelta
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    ApartmentNotFoundException,
    CorrespondenceNotFoundException,
    CorrespondenceInvalidOperationException,
    UserNotFoundException,
)
from app.core.utils import utc_now_naive
from app.models.correspondence import Correspondence, CorrespondenceStatus, CorrespondenceType
from app.repositories.apartment_repository import ApartmentRepository
from app.repositories.correspondence_repository import CorrespondenceRepository
from app.repositories.user_repository import UserRepository
from app.schemas.correspondence import CorrespondenceCreate, CorrespondenceUpdate

logger = logging.getLogger(__name__)


class CorrespondenceService:
    """Servicio para gestión de correspondencia"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.correspondence_repo = CorrespondenceRepository(db)
        self.user_repo = UserRepository(db)
        self.apartment_repo = ApartmentRepository(db)

    # =========================================================================
    # OPERACIONES DE CONSULTA
    # =========================================================================

    async def get_correspondence_by_id(self, correspondence_id: int) -> Correspondence:
        correspondence = await self.correspondence_repo.get_by_id(correspondence_id)

        if correspondence is None:
            raise CorrespondenceNotFoundException.by_id(correspondence_id)

        return correspondence

    async def list_correspondence(self, skip: int = 0, limit: int = 20) -> tuple[List[Correspondence], int]:
        items = await self.correspondence_repo.get_all(skip=skip, limit=limit)
        total = await self.correspondence_repo.count()
        return items, total

    async def get_by_recipient(self, user_id: int) -> List[Correspondence]:
        await self._ensure_user_exists(user_id)
        return await self.correspondence_repo.get_by_recipient(user_id)

    async def get_pending_by_recipient(self, user_id: int) -> List[Correspondence]:
        await self._ensure_user_exists(user_id)
        return await self.correspondence_repo.get_pending_by_recipient(user_id)

    async def get_by_status(self, status: CorrespondenceStatus) -> List[Correspondence]:
        return await self.correspondence_repo.get_by_status(status)

    async def get_by_type(self, correspondence_type: CorrespondenceType) -> List[Correspondence]:
        return await self.correspondence_repo.get_by_type(correspondence_type)

    async def get_by_type_and_status(
        self,
        correspondence_type: CorrespondenceType,
        status: CorrespondenceStatus
    ) -> List[Correspondence]:
        return await self.correspondence_repo.get_by_type_and_status(correspondence_type, status)

    async def get_received_between(self, start: datetime, end: datetime) -> List[Correspondence]:
        """
        Correspondencia recibida en el rango [start, end]

        Raises:
            CorrespondenceInvalidOperationException: Si start es posterior a end
        """
        if start > end:
            raise CorrespondenceInvalidOperationException.invalid_date_range()
        return await self.correspondence_repo.get_received_between(start, end)

    async def get_by_retriever(self, user_id: int) -> List[Correspondence]:
        return await self.correspondence_repo.get_by_retriever(user_id)

    async def get_by_registrar(self, user_id: int) -> List[Correspondence]:
        return await self.correspondence_repo.get_by_registrar(user_id)

    async def get_pending(self) -> List[Correspondence]:
        return await self.correspondence_repo.get_pending()

    async def get_pending_older_than(self, days: int) -> List[Correspondence]:
        """Pendientes recibidas hace más de `days` días"""
        if days < 0:
            raise CorrespondenceInvalidOperationException("El número de días no puede ser negativo")

        cutoff = utc_now_naive() - timedelta(days=days)
        return await self.correspondence_repo.get_pending_received_before(cutoff)

    # =========================================================================
    # OPERACIONES DE MODIFICACIÓN
    # =========================================================================

    async def create_correspondence(self, data: CorrespondenceCreate) -> Correspondence:
        """
        Registra correspondencia recibida

        Raises:
            UserNotFoundException: Si quien registra o el destinatario no existen
            ApartmentNotFoundException: Si el apartamento no existe
        """
        await self._ensure_references(
            data.registered_by_id, data.recipient_id, None, data.apartment_id
        )

        correspondence = Correspondence(
            registered_by_id=data.registered_by_id,
            recipient_id=data.recipient_id,
            apartment_id=data.apartment_id,
            type=data.type,
            notes=data.notes,
            received_at=data.received_at or utc_now_naive(),
            status=CorrespondenceStatus.PENDIENTE
        )

        created = await self.correspondence_repo.create(correspondence)
        await self.db.commit()

        logger.info("Correspondencia registrada: id=%s destinatario=%s", created.id, created.recipient_id)
        return created

    async def update_correspondence(self, correspondence_id: int, data: CorrespondenceUpdate) -> Correspondence:
        correspondence = await self.get_correspondence_by_id(correspondence_id)
        await self._ensure_references(
            data.registered_by_id, data.recipient_id, data.retrieved_by_id, data.apartment_id
        )

        correspondence.registered_by_id = data.registered_by_id
        correspondence.recipient_id = data.recipient_id
        correspondence.retrieved_by_id = data.retrieved_by_id
        correspondence.apartment_id = data.apartment_id
        correspondence.type = data.type
        correspondence.notes = data.notes
        correspondence.status = data.status
        if data.received_at is not None:
            correspondence.received_at = data.received_at

        if data.status == CorrespondenceStatus.ENTREGADA:
            correspondence.delivered_at = data.delivered_at or correspondence.delivered_at or utc_now_naive()
        else:
            correspondence.delivered_at = data.delivered_at

        updated = await self.correspondence_repo.update(correspondence)
        await self.db.commit()

        logger.info("Correspondencia actualizada: id=%s", correspondence_id)
        return updated

    async def deliver(
        self,
        correspondence_id: int,
        retrieved_by_id: int,
        notes: Optional[str] = None
    ) -> Correspondence:
        """
        Registra la entrega de la correspondencia

        Raises:
            CorrespondenceInvalidOperationException: Si ya fue entregada
        """
        correspondence = await self.get_correspondence_by_id(correspondence_id)

        if correspondence.status == CorrespondenceStatus.ENTREGADA:
            logger.warning("Entrega repetida rechazada: correspondencia id=%s", correspondence_id)
            raise CorrespondenceInvalidOperationException.already_delivered(correspondence_id)

        await self._ensure_user_exists(retrieved_by_id)

        correspondence.retrieved_by_id = retrieved_by_id
        correspondence.status = CorrespondenceStatus.ENTREGADA
        correspondence.delivered_at = utc_now_naive()
        if notes is not None:
            correspondence.notes = notes

        updated = await self.correspondence_repo.update(correspondence)
        await self.db.commit()

        logger.info("Correspondencia %s entregada a usuario %s", correspondence_id, retrieved_by_id)
        return updated

    async def delete_correspondence(self, correspondence_id: int) -> bool:
        if not await self.correspondence_repo.exists(correspondence_id):
            raise CorrespondenceNotFoundException.by_id(correspondence_id)

        deleted = await self.correspondence_repo.delete(correspondence_id)
        await self.db.commit()

        logger.info("Correspondencia eliminada: id=%s", correspondence_id)
        return deleted

    # =========================================================================
    # VALIDACIONES
    # =========================================================================

    async def _ensure_user_exists(self, user_id: int) -> None:
        if await self.user_repo.get_by_id(user_id) is None:
            raise UserNotFoundException.by_id(user_id)

    async def _ensure_references(
        self,
        registered_by_id: int,
        recipient_id: int,
        retrieved_by_id: Optional[int],
        apartment_id: Optional[int]
    ) -> None:
        await self._ensure_user_exists(registered_by_id)
        await self._ensure_user_exists(recipient_id)

        if retrieved_by_id is not None:
            await self._ensure_user_exists(retrieved_by_id)

        if apartment_id is not None and await self.apartment_repo.get_by_id(apartment_id) is None:
            raise ApartmentNotFoundException.by_id(apartment_id)


def get_correspondence_service(db: AsyncSession) -> CorrespondenceService:
    return CorrespondenceService(db)
