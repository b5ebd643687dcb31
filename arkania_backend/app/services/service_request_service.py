"""
Servicio de Solicitudes
Conjunto Residencial Arkania

Maneja la lógica de negocio para:
- Registro de solicitudes de residentes
- Cambio de estado con fecha de resolución automática
- Consultas por fechas, estados, tipos y texto
"""

import logging
from typing import List, Optional
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    ServiceRequestNotFoundException,
    ServiceRequestInvalidOperationException,
    UserNotFoundException,
)
from app.core.utils import utc_now_naive
from app.models.service_request import ServiceRequest, RequestStatus, RequestType, CLOSED_STATUSES
from app.repositories.service_request_repository import ServiceRequestRepository
from app.repositories.user_repository import UserRepository
from app.schemas.service_requests import ServiceRequestCreate, ServiceRequestUpdate

logger = logging.getLogger(__name__)


class ServiceRequestService:
    """Servicio para gestión de solicitudes"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.request_repo = ServiceRequestRepository(db)
        self.user_repo = UserRepository(db)

    # =========================================================================
    # OPERACIONES DE CONSULTA
    # =========================================================================

    async def get_request_by_id(self, request_id: int) -> ServiceRequest:
        request = await self.request_repo.get_by_id(request_id)

        if request is None:
            raise ServiceRequestNotFoundException.by_id(request_id)

        return request

    async def list_requests(self, skip: int = 0, limit: int = 20) -> tuple[List[ServiceRequest], int]:
        requests = await self.request_repo.get_all(skip=skip, limit=limit)
        total = await self.request_repo.count()
        return requests, total

    async def get_requests_by_user(self, user_id: int) -> List[ServiceRequest]:
        await self._ensure_user_exists(user_id)
        return await self.request_repo.get_by_user(user_id)

    async def get_created_between(self, start: datetime, end: datetime) -> List[ServiceRequest]:
        self._check_range(start, end)
        return await self.request_repo.get_created_between(start, end)

    async def get_resolved_between(self, start: datetime, end: datetime) -> List[ServiceRequest]:
        self._check_range(start, end)
        return await self.request_repo.get_resolved_between(start, end)

    async def get_by_statuses(self, statuses: List[RequestStatus]) -> List[ServiceRequest]:
        if not statuses:
            return []
        return await self.request_repo.get_by_statuses(statuses)

    async def get_by_types(self, request_types: List[RequestType]) -> List[ServiceRequest]:
        if not request_types:
            return []
        return await self.request_repo.get_by_types(request_types)

    async def search_description(self, text: str) -> List[ServiceRequest]:
        return await self.request_repo.search_description(text)

    async def filter_by_status_and_type(
        self,
        status: Optional[RequestStatus] = None,
        request_type: Optional[RequestType] = None
    ) -> List[ServiceRequest]:
        return await self.request_repo.filter_by_status_and_type(status, request_type)

    @staticmethod
    def _check_range(start: datetime, end: datetime) -> None:
        if start > end:
            raise ServiceRequestInvalidOperationException.invalid_date_range()

    # =========================================================================
    # OPERACIONES DE MODIFICACIÓN
    # =========================================================================

    async def create_request(self, data: ServiceRequestCreate) -> ServiceRequest:
        """
        Registra una solicitud

        Raises:
            UserNotFoundException: Si el usuario no existe
        """
        await self._ensure_user_exists(data.user_id)

        request = ServiceRequest(
            user_id=data.user_id,
            request_type=data.request_type,
            description=data.description,
            status=data.status
        )
        self._apply_resolution(request, data.status)

        created = await self.request_repo.create(request)
        await self.db.commit()

        logger.info("Solicitud creada: id=%s tipo=%s", created.id, created.request_type.value)
        return created

    async def update_request(self, request_id: int, data: ServiceRequestUpdate) -> ServiceRequest:
        """
        Edita estado y descripción de una solicitud

        Al pasar a resuelta o rechazada se fija la fecha de resolución; al
        volver a un estado abierto se borra.
        """
        request = await self.get_request_by_id(request_id)

        if data.description is not None:
            request.description = data.description

        if data.status is not None and data.status != request.status:
            self._apply_resolution(request, data.status)
            request.status = data.status
            logger.info("Solicitud %s cambió a estado %s", request_id, data.status.value)

        updated = await self.request_repo.update(request)
        await self.db.commit()

        return updated

    async def delete_request(self, request_id: int) -> bool:
        await self.get_request_by_id(request_id)

        deleted = await self.request_repo.delete(request_id)
        await self.db.commit()

        logger.info("Solicitud eliminada: id=%s", request_id)
        return deleted

    @staticmethod
    def _apply_resolution(request: ServiceRequest, new_status: RequestStatus) -> None:
        if new_status in CLOSED_STATUSES:
            if request.resolved_at is None:
                request.resolved_at = utc_now_naive()
        else:
            request.resolved_at = None

    async def _ensure_user_exists(self, user_id: int) -> None:
        if await self.user_repo.get_by_id(user_id) is None:
            raise UserNotFoundException.by_id(user_id)


def get_service_request_service(db: AsyncSession) -> ServiceRequestService:
    return ServiceRequestService(db)
