"""
Router de Parqueaderos
Conjunto Residencial Arkania

Endpoints:
- CRUD de parqueaderos (número único)
- GET /parqueaderos/usuario/{id} - Parqueaderos de un usuario
- PUT /parqueaderos/{id}/asignar/{usuario} - Asignar a un usuario (OCUPADO)
- PUT /parqueaderos/{id}/liberar - Liberar (LIBRE)
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_async_db
from app.core.dependencies import PaginationParams, build_page, get_pagination_params, optional_enum
from app.models.apartment import UnitStatus
from app.models.parking_spot import ParkingRoleType
from app.services.parking_service import get_parking_service
from app.schemas.properties import (
    ParkingSpotCreate,
    ParkingSpotUpdate,
    ParkingSpotResponse,
    ParkingSpotPaginatedResponse,
)


router = APIRouter(
    prefix="/parqueaderos",
    tags=["Parqueaderos"]
)


@router.get("", response_model=ParkingSpotPaginatedResponse)
async def list_parking_spots(
    pagination: PaginationParams = Depends(get_pagination_params),
    tipo: Optional[str] = Query(None, description="RESIDENTE o VISITANTE"),
    estado: Optional[str] = Query(None, description="LIBRE, OCUPADO o INACTIVO"),
    db: AsyncSession = Depends(get_async_db)
):
    spots, total = await get_parking_service(db).list_parking_spots(
        skip=pagination.skip,
        limit=pagination.limit,
        role_type=optional_enum(ParkingRoleType, tipo, "tipo"),
        status=optional_enum(UnitStatus, estado, "estado")
    )
    return build_page(spots, total, pagination)


@router.post("", response_model=ParkingSpotResponse, status_code=status.HTTP_201_CREATED)
async def create_parking(parking_data: ParkingSpotCreate, db: AsyncSession = Depends(get_async_db)):
    """Registra un parqueadero; el número no puede repetirse (409)"""
    return await get_parking_service(db).create_parking(parking_data)


@router.get("/usuario/{user_id}", response_model=List[ParkingSpotResponse])
async def get_parking_by_user(user_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_parking_service(db).get_parking_by_user(user_id)


@router.get("/{parking_id}", response_model=ParkingSpotResponse)
async def get_parking(parking_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_parking_service(db).get_parking_by_id(parking_id)


@router.put("/{parking_id}", response_model=ParkingSpotResponse)
async def update_parking(
    parking_id: int,
    parking_data: ParkingSpotUpdate,
    db: AsyncSession = Depends(get_async_db)
):
    return await get_parking_service(db).update_parking(parking_id, parking_data)


@router.delete("/{parking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_parking(parking_id: int, db: AsyncSession = Depends(get_async_db)):
    await get_parking_service(db).delete_parking(parking_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{parking_id}/asignar/{user_id}", response_model=ParkingSpotResponse)
async def assign_parking(parking_id: int, user_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_parking_service(db).assign_to_user(parking_id, user_id)


@router.put("/{parking_id}/liberar", response_model=ParkingSpotResponse)
async def release_parking(parking_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_parking_service(db).release(parking_id)
