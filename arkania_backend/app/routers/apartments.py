"""
Router de Apartamentos
Conjunto Residencial Arkania
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_async_db
from app.core.dependencies import PaginationParams, build_page, get_pagination_params, optional_enum
from app.models.apartment import UnitStatus
from app.services.apartment_service import get_apartment_service
from app.schemas.properties import (
    ApartmentCreate,
    ApartmentUpdate,
    ApartmentResponse,
    ApartmentPaginatedResponse,
)


router = APIRouter(
    prefix="/apartamentos",
    tags=["Apartamentos"]
)


@router.get("", response_model=ApartmentPaginatedResponse)
async def list_apartments(
    pagination: PaginationParams = Depends(get_pagination_params),
    estado: Optional[str] = Query(None, description="LIBRE, OCUPADO o INACTIVO"),
    torre: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Lista apartamentos con paginación

    **Filtros disponibles:**
    - `estado`: LIBRE, OCUPADO o INACTIVO
    - `torre`: Nombre exacto de la torre
    """
    apartments, total = await get_apartment_service(db).list_apartments(
        skip=pagination.skip,
        limit=pagination.limit,
        status=optional_enum(UnitStatus, estado, "estado"),
        tower=torre
    )
    return build_page(apartments, total, pagination)


@router.post("", response_model=ApartmentResponse, status_code=status.HTTP_201_CREATED)
async def create_apartment(apartment_data: ApartmentCreate, db: AsyncSession = Depends(get_async_db)):
    return await get_apartment_service(db).create_apartment(apartment_data)


@router.get("/propietario/{owner_id}", response_model=List[ApartmentResponse])
async def get_apartments_by_owner(owner_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_apartment_service(db).get_apartments_by_owner(owner_id)


@router.get("/{apartment_id}", response_model=ApartmentResponse)
async def get_apartment(apartment_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_apartment_service(db).get_apartment_by_id(apartment_id)


@router.put("/{apartment_id}", response_model=ApartmentResponse)
async def update_apartment(
    apartment_id: int,
    apartment_data: ApartmentUpdate,
    db: AsyncSession = Depends(get_async_db)
):
    return await get_apartment_service(db).update_apartment(apartment_id, apartment_data)


@router.delete("/{apartment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_apartment(apartment_id: int, db: AsyncSession = Depends(get_async_db)):
    await get_apartment_service(db).delete_apartment(apartment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
