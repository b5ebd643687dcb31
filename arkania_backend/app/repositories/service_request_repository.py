"""
Repository de Solicitudes
Conjunto Residencial Arkania
"""

from datetime import datetime
from typing import Optional, List, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func

from app.models.service_request import ServiceRequest, RequestStatus, RequestType


class ServiceRequestRepository:
    """Repository para solicitudes de mantenimiento, quejas, reservas y consultas"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, request_id: int) -> Optional[ServiceRequest]:
        result = await self.db.execute(
            select(ServiceRequest).where(ServiceRequest.id == request_id)
        )
        return result.scalar_one_or_none()

    async def get_all(self, skip: int = 0, limit: int = 20) -> List[ServiceRequest]:
        result = await self.db.execute(
            select(ServiceRequest)
            .order_by(ServiceRequest.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.db.execute(select(func.count(ServiceRequest.id)))
        return result.scalar()

    async def get_by_user(self, user_id: int) -> List[ServiceRequest]:
        result = await self.db.execute(
            select(ServiceRequest)
            .where(ServiceRequest.user_id == user_id)
            .order_by(ServiceRequest.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_created_between(self, start: datetime, end: datetime) -> List[ServiceRequest]:
        result = await self.db.execute(
            select(ServiceRequest)
            .where(ServiceRequest.created_at.between(start, end))
            .order_by(ServiceRequest.created_at)
        )
        return list(result.scalars().all())

    async def get_resolved_between(self, start: datetime, end: datetime) -> List[ServiceRequest]:
        result = await self.db.execute(
            select(ServiceRequest)
            .where(ServiceRequest.resolved_at.between(start, end))
            .order_by(ServiceRequest.resolved_at)
        )
        return list(result.scalars().all())

    async def get_by_statuses(self, statuses: Sequence[RequestStatus]) -> List[ServiceRequest]:
        """Solicitudes en cualquiera de los estados, la más antigua primero"""
        result = await self.db.execute(
            select(ServiceRequest)
            .where(ServiceRequest.status.in_(list(statuses)))
            .order_by(ServiceRequest.created_at.asc())
        )
        return list(result.scalars().all())

    async def get_by_types(self, request_types: Sequence[RequestType]) -> List[ServiceRequest]:
        result = await self.db.execute(
            select(ServiceRequest)
            .where(ServiceRequest.request_type.in_(list(request_types)))
            .order_by(ServiceRequest.created_at.desc())
        )
        return list(result.scalars().all())

    async def search_description(self, text: str) -> List[ServiceRequest]:
        result = await self.db.execute(
            select(ServiceRequest)
            .where(ServiceRequest.description.ilike(f"%{text.strip()}%"))
            .order_by(ServiceRequest.created_at.desc())
        )
        return list(result.scalars().all())

    async def filter_by_status_and_type(
        self,
        status: Optional[RequestStatus] = None,
        request_type: Optional[RequestType] = None
    ) -> List[ServiceRequest]:
        """Filtro combinado; un criterio en None no se aplica"""
        query = select(ServiceRequest)
        if status is not None:
            query = query.where(ServiceRequest.status == status)
        if request_type is not None:
            query = query.where(ServiceRequest.request_type == request_type)
        result = await self.db.execute(query.order_by(ServiceRequest.created_at.desc()))
        return list(result.scalars().all())

    async def create(self, request: ServiceRequest) -> ServiceRequest:
        self.db.add(request)
        await self.db.flush()
        await self.db.refresh(request)
        return request

    async def update(self, request: ServiceRequest) -> ServiceRequest:
        await self.db.flush()
        await self.db.refresh(request)
        return request

    async def delete(self, request_id: int) -> bool:
        result = await self.db.execute(
            delete(ServiceRequest).where(ServiceRequest.id == request_id)
        )
        return result.rowcount > 0


def get_service_request_repository(db: AsyncSession) -> ServiceRequestRepository:
    return ServiceRequestRepository(db)
