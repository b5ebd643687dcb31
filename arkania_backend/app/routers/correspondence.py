"""
Router de Correspondencia
Conjunto Residencial Arkania

Endpoints:
- CRUD de correspondencia
- PUT /correspondencias/{id}/entregar - Registrar entrega
- Consultas por destinatario, estado, tipo, fechas y pendientes
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_async_db
from app.core.dependencies import (
    DateRangeParams,
    PaginationParams,
    build_page,
    get_date_range_params,
    get_pagination_params,
    optional_enum,
)
from app.models.correspondence import CorrespondenceStatus, CorrespondenceType
from app.services.correspondence_service import get_correspondence_service
from app.schemas.correspondence import (
    CorrespondenceCreate,
    CorrespondenceUpdate,
    CorrespondenceResponse,
    CorrespondencePaginatedResponse,
    DeliverRequest,
)


router = APIRouter(
    prefix="/correspondencias",
    tags=["Correspondencia"]
)


# =============================================================================
# ENDPOINTS DE CREACIÓN Y LISTADO
# =============================================================================

@router.get("", response_model=CorrespondencePaginatedResponse)
async def list_correspondence(
    pagination: PaginationParams = Depends(get_pagination_params),
    db: AsyncSession = Depends(get_async_db)
):
    items, total = await get_correspondence_service(db).list_correspondence(
        skip=pagination.skip,
        limit=pagination.limit
    )
    return build_page(items, total, pagination)


@router.post("", response_model=CorrespondenceResponse, status_code=status.HTTP_201_CREATED)
async def create_correspondence(data: CorrespondenceCreate, db: AsyncSession = Depends(get_async_db)):
    """
    Registra correspondencia recibida en portería

    Queda en estado PENDIENTE hasta que se registre la entrega.
    """
    return await get_correspondence_service(db).create_correspondence(data)


# =============================================================================
# ENDPOINTS DE CONSULTA
# =============================================================================

@router.get("/pendientes", response_model=List[CorrespondenceResponse])
async def get_pending(db: AsyncSession = Depends(get_async_db)):
    """Pendientes por entregar, la más antigua primero"""
    return await get_correspondence_service(db).get_pending()


@router.get("/pendientes-antiguas", response_model=List[CorrespondenceResponse])
async def get_old_pending(
    dias: int = Query(7, description="Antigüedad mínima en días"),
    db: AsyncSession = Depends(get_async_db)
):
    return await get_correspondence_service(db).get_pending_older_than(dias)


@router.get("/rango-fechas", response_model=List[CorrespondenceResponse])
async def get_by_date_range(
    date_range: DateRangeParams = Depends(get_date_range_params),
    db: AsyncSession = Depends(get_async_db)
):
    return await get_correspondence_service(db).get_received_between(date_range.start, date_range.end)


@router.get("/destinatario/{user_id}", response_model=List[CorrespondenceResponse])
async def get_by_recipient(user_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_correspondence_service(db).get_by_recipient(user_id)


@router.get("/destinatario/{user_id}/pendientes", response_model=List[CorrespondenceResponse])
async def get_pending_by_recipient(user_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_correspondence_service(db).get_pending_by_recipient(user_id)


@router.get("/estado/{estado}", response_model=List[CorrespondenceResponse])
async def get_by_status(estado: str, db: AsyncSession = Depends(get_async_db)):
    status_value = optional_enum(CorrespondenceStatus, estado.upper(), "estado")
    return await get_correspondence_service(db).get_by_status(status_value)


@router.get("/tipo/{tipo}", response_model=List[CorrespondenceResponse])
async def get_by_type(tipo: str, db: AsyncSession = Depends(get_async_db)):
    type_value = optional_enum(CorrespondenceType, tipo.upper(), "tipo")
    return await get_correspondence_service(db).get_by_type(type_value)


@router.get("/tipo/{tipo}/estado/{estado}", response_model=List[CorrespondenceResponse])
async def get_by_type_and_status(tipo: str, estado: str, db: AsyncSession = Depends(get_async_db)):
    return await get_correspondence_service(db).get_by_type_and_status(
        optional_enum(CorrespondenceType, tipo.upper(), "tipo"),
        optional_enum(CorrespondenceStatus, estado.upper(), "estado")
    )


@router.get("/retirado-por/{user_id}", response_model=List[CorrespondenceResponse])
async def get_by_retriever(user_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_correspondence_service(db).get_by_retriever(user_id)


@router.get("/registrado-por/{user_id}", response_model=List[CorrespondenceResponse])
async def get_by_registrar(user_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_correspondence_service(db).get_by_registrar(user_id)


# =============================================================================
# ENDPOINTS POR ID
# =============================================================================

@router.get("/{correspondence_id}", response_model=CorrespondenceResponse)
async def get_correspondence(correspondence_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_correspondence_service(db).get_correspondence_by_id(correspondence_id)


@router.put("/{correspondence_id}", response_model=CorrespondenceResponse)
async def update_correspondence(
    correspondence_id: int,
    data: CorrespondenceUpdate,
    db: AsyncSession = Depends(get_async_db)
):
    return await get_correspondence_service(db).update_correspondence(correspondence_id, data)


@router.delete("/{correspondence_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_correspondence(correspondence_id: int, db: AsyncSession = Depends(get_async_db)):
    await get_correspondence_service(db).delete_correspondence(correspondence_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{correspondence_id}/entregar", response_model=CorrespondenceResponse)
async def deliver_correspondence(
    correspondence_id: int,
    request: DeliverRequest,
    db: AsyncSession = Depends(get_async_db)
):
    """
    Registra la entrega: estado ENTREGADA y fecha de entrega actual

    Si ya fue entregada retorna 400.
    """
    return await get_correspondence_service(db).deliver(
        correspondence_id,
        retrieved_by_id=request.retrieved_by_id,
        notes=request.notes
    )
