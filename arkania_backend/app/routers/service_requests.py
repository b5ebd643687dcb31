"""
Router de Solicitudes
Conjunto Residencial Arkania

Endpoints:
- CRUD de solicitudes (la edición solo cambia estado y descripción)
- Consultas por fechas de creación y resolución, estados, tipos y texto
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_async_db
from app.core.dependencies import (
    DateRangeParams,
    PaginationParams,
    build_page,
    get_date_range_params,
    get_pagination_params,
    optional_enum,
)
from app.models.service_request import RequestStatus, RequestType
from app.services.service_request_service import get_service_request_service
from app.schemas.service_requests import (
    ServiceRequestCreate,
    ServiceRequestUpdate,
    ServiceRequestResponse,
    ServiceRequestPaginatedResponse,
)


router = APIRouter(
    prefix="/solicitudes",
    tags=["Solicitudes"]
)


@router.get("", response_model=ServiceRequestPaginatedResponse)
async def list_requests(
    pagination: PaginationParams = Depends(get_pagination_params),
    db: AsyncSession = Depends(get_async_db)
):
    requests, total = await get_service_request_service(db).list_requests(
        skip=pagination.skip,
        limit=pagination.limit
    )
    return build_page(requests, total, pagination)


@router.post("", response_model=ServiceRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_request(data: ServiceRequestCreate, db: AsyncSession = Depends(get_async_db)):
    """
    Registra una solicitud

    - **request_type**: mantenimiento, queja, reserva o consulta
    - **status**: pendiente por defecto
    """
    return await get_service_request_service(db).create_request(data)


# =============================================================================
# ENDPOINTS DE CONSULTA
# =============================================================================

@router.get("/por-fecha-creacion", response_model=List[ServiceRequestResponse])
async def get_by_creation_date(
    date_range: DateRangeParams = Depends(get_date_range_params),
    db: AsyncSession = Depends(get_async_db)
):
    return await get_service_request_service(db).get_created_between(date_range.start, date_range.end)


@router.get("/por-fecha-resolucion", response_model=List[ServiceRequestResponse])
async def get_by_resolution_date(
    date_range: DateRangeParams = Depends(get_date_range_params),
    db: AsyncSession = Depends(get_async_db)
):
    return await get_service_request_service(db).get_resolved_between(date_range.start, date_range.end)


@router.get("/por-estados", response_model=List[ServiceRequestResponse])
async def get_by_statuses(
    estados: List[str] = Query(..., description="Uno o más estados"),
    db: AsyncSession = Depends(get_async_db)
):
    """Solicitudes en cualquiera de los estados, la más antigua primero"""
    statuses = [optional_enum(RequestStatus, value, "estado") for value in estados]
    return await get_service_request_service(db).get_by_statuses(statuses)


@router.get("/por-tipos", response_model=List[ServiceRequestResponse])
async def get_by_types(
    tipos: List[str] = Query(..., description="Uno o más tipos"),
    db: AsyncSession = Depends(get_async_db)
):
    request_types = [optional_enum(RequestType, value, "tipo") for value in tipos]
    return await get_service_request_service(db).get_by_types(request_types)


@router.get("/buscar-descripcion", response_model=List[ServiceRequestResponse])
async def search_description(
    texto: str = Query(..., min_length=1),
    db: AsyncSession = Depends(get_async_db)
):
    return await get_service_request_service(db).search_description(texto)


@router.get("/filtrar-estado-y-tipo", response_model=List[ServiceRequestResponse])
async def filter_by_status_and_type(
    estado: Optional[str] = Query(None),
    tipo: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_async_db)
):
    return await get_service_request_service(db).filter_by_status_and_type(
        optional_enum(RequestStatus, estado, "estado"),
        optional_enum(RequestType, tipo, "tipo")
    )


@router.get("/usuario/{user_id}", response_model=List[ServiceRequestResponse])
async def get_by_user(user_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_service_request_service(db).get_requests_by_user(user_id)


# =============================================================================
# ENDPOINTS POR ID
# =============================================================================

@router.get("/{request_id}", response_model=ServiceRequestResponse)
async def get_request(request_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_service_request_service(db).get_request_by_id(request_id)


@router.put("/{request_id}", response_model=ServiceRequestResponse)
async def update_request(
    request_id: int,
    data: ServiceRequestUpdate,
    db: AsyncSession = Depends(get_async_db)
):
    """
    Edita estado y descripción

    Pasar a resuelta o rechazada fija la fecha de resolución.
    """
    return await get_service_request_service(db).update_request(request_id, data)


@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_request(request_id: int, db: AsyncSession = Depends(get_async_db)):
    await get_service_request_service(db).delete_request(request_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
