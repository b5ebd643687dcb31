"""
Repository de Correspondencia
Conjunto Residencial Arkania

Maneja las consultas de paquetes y documentos:
- Pendientes por destinatario y antigüedad
- Filtros por estado, tipo y rango de fechas de recepción
- Búsqueda por quien registra o retira
"""

from datetime import datetime
from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func, and_
from sqlalchemy.orm import selectinload

from app.models.correspondence import Correspondence, CorrespondenceStatus, CorrespondenceType


class CorrespondenceRepository:
    """Repository para operaciones CRUD de correspondencia"""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _base_query(self):
        return select(Correspondence).options(
            selectinload(Correspondence.registered_by),
            selectinload(Correspondence.recipient),
            selectinload(Correspondence.retrieved_by)
        )

    async def _list(self, *conditions, order_by=None) -> List[Correspondence]:
        query = self._base_query()
        if conditions:
            query = query.where(and_(*conditions))
        query = query.order_by(
            order_by if order_by is not None else Correspondence.received_at.desc()
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    # =========================================================================
    # OPERACIONES DE LECTURA
    # =========================================================================

    async def get_by_id(self, correspondence_id: int) -> Optional[Correspondence]:
        """Obtiene una correspondencia con los usuarios relacionados"""
        result = await self.db.execute(
            self._base_query()
            .where(Correspondence.id == correspondence_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_all(self, skip: int = 0, limit: int = 20) -> List[Correspondence]:
        result = await self.db.execute(
            self._base_query()
            .order_by(Correspondence.received_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.db.execute(select(func.count(Correspondence.id)))
        return result.scalar()

    async def exists(self, correspondence_id: int) -> bool:
        result = await self.db.execute(
            select(func.count(Correspondence.id)).where(Correspondence.id == correspondence_id)
        )
        return result.scalar() > 0

    async def get_by_recipient(self, user_id: int) -> List[Correspondence]:
        """Correspondencia de un destinatario, la más reciente primero"""
        return await self._list(Correspondence.recipient_id == user_id)

    async def get_pending_by_recipient(self, user_id: int) -> List[Correspondence]:
        return await self._list(
            Correspondence.recipient_id == user_id,
            Correspondence.status == CorrespondenceStatus.PENDIENTE
        )

    async def get_pending(self) -> List[Correspondence]:
        """Pendientes por entregar, la más antigua primero"""
        return await self._list(
            Correspondence.status == CorrespondenceStatus.PENDIENTE,
            order_by=Correspondence.received_at.asc()
        )

    async def get_pending_received_before(self, cutoff: datetime) -> List[Correspondence]:
        """Pendientes recibidas antes de la fecha de corte"""
        return await self._list(
            Correspondence.status == CorrespondenceStatus.PENDIENTE,
            Correspondence.received_at < cutoff,
            order_by=Correspondence.received_at.asc()
        )

    async def get_by_status(self, status: CorrespondenceStatus) -> List[Correspondence]:
        return await self._list(Correspondence.status == status)

    async def get_by_type(self, correspondence_type: CorrespondenceType) -> List[Correspondence]:
        return await self._list(Correspondence.type == correspondence_type)

    async def get_by_type_and_status(
        self,
        correspondence_type: CorrespondenceType,
        status: CorrespondenceStatus
    ) -> List[Correspondence]:
        return await self._list(
            Correspondence.type == correspondence_type,
            Correspondence.status == status
        )

    async def get_received_between(self, start: datetime, end: datetime) -> List[Correspondence]:
        return await self._list(
            Correspondence.received_at.between(start, end),
            order_by=Correspondence.received_at.asc()
        )

    async def get_by_retriever(self, user_id: int) -> List[Correspondence]:
        return await self._list(Correspondence.retrieved_by_id == user_id)

    async def get_by_registrar(self, user_id: int) -> List[Correspondence]:
        return await self._list(Correspondence.registered_by_id == user_id)

    # =========================================================================
    # OPERACIONES DE ESCRITURA
    # =========================================================================

    async def create(self, correspondence: Correspondence) -> Correspondence:
        self.db.add(correspondence)
        await self.db.flush()
        return await self.get_by_id(correspondence.id)

    async def update(self, correspondence: Correspondence) -> Correspondence:
        await self.db.flush()
        return await self.get_by_id(correspondence.id)

    async def delete(self, correspondence_id: int) -> bool:
        result = await self.db.execute(
            delete(Correspondence).where(Correspondence.id == correspondence_id)
        )
        return result.rowcount > 0


def get_correspondence_repository(db: AsyncSession) -> CorrespondenceRepository:
    return CorrespondenceRepository(db)
