"""
Router de Áreas Comunes
Conjunto Residencial Arkania
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_async_db
from app.core.dependencies import PaginationParams, build_page, get_pagination_params, optional_enum
from app.models.common_area import CommonAreaStatus
from app.services.common_area_service import get_common_area_service
from app.schemas.properties import (
    CommonAreaCreate,
    CommonAreaUpdate,
    CommonAreaResponse,
    CommonAreaPaginatedResponse,
)


router = APIRouter(
    prefix="/areas-comunes",
    tags=["Áreas comunes"]
)


@router.get("", response_model=CommonAreaPaginatedResponse)
async def list_areas(
    pagination: PaginationParams = Depends(get_pagination_params),
    estado: Optional[str] = Query(None, description="activa o inactiva"),
    db: AsyncSession = Depends(get_async_db)
):
    areas, total = await get_common_area_service(db).list_areas(
        skip=pagination.skip,
        limit=pagination.limit,
        status=optional_enum(CommonAreaStatus, estado, "estado")
    )
    return build_page(areas, total, pagination)


@router.post("", response_model=CommonAreaResponse, status_code=status.HTTP_201_CREATED)
async def create_area(area_data: CommonAreaCreate, db: AsyncSession = Depends(get_async_db)):
    return await get_common_area_service(db).create_area(area_data)


@router.get("/{area_id}", response_model=CommonAreaResponse)
async def get_area(area_id: int, db: AsyncSession = Depends(get_async_db)):
    return await get_common_area_service(db).get_area_by_id(area_id)


@router.put("/{area_id}", response_model=CommonAreaResponse)
async def update_area(
    area_id: int,
    area_data: CommonAreaUpdate,
    db: AsyncSession = Depends(get_async_db)
):
    """Actualiza descripción, capacidad, horario y estado"""
    return await get_common_area_service(db).update_area(area_id, area_data)


@router.delete("/{area_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_area(area_id: int, db: AsyncSession = Depends(get_async_db)):
    await get_common_area_service(db).delete_area(area_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
