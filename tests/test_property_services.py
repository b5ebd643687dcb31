"""Tests de apartamentos, parqueaderos y áreas comunes"""
import pytest

from app.core.exceptions import (
    ApartmentNotFoundException,
    CommonAreaNotFoundException,
    ParkingSpotAlreadyExistsException,
    UserNotFoundException,
)
from app.models.apartment import UnitStatus
from app.models.common_area import CommonAreaStatus
from app.models.parking_spot import ParkingRoleType
from app.schemas.properties import (
    ApartmentCreate,
    ApartmentUpdate,
    CommonAreaCreate,
    CommonAreaUpdate,
    ParkingSpotCreate,
    ParkingSpotUpdate,
)
from app.services.apartment_service import ApartmentService
from app.services.common_area_service import CommonAreaService
from app.services.parking_service import ParkingSpotService


# =============================================================================
# APARTAMENTOS
# =============================================================================

async def test_create_apartment_requires_existing_owner(db):
    with pytest.raises(UserNotFoundException):
        await ApartmentService(db).create_apartment(
            ApartmentCreate(number="101", tower="Torre 1", owner_id=999)
        )


async def test_apartment_crud(db, make_user):
    owner = await make_user()
    service = ApartmentService(db)

    apartment = await service.create_apartment(
        ApartmentCreate(number="101", tower="Torre 1", owner_id=owner.id)
    )
    assert apartment.status == UnitStatus.LIBRE

    updated = await service.update_apartment(
        apartment.id,
        ApartmentUpdate(number="102", tower="Torre 1", owner_id=owner.id, status=UnitStatus.OCUPADO)
    )
    assert updated.number == "102"
    assert updated.status == UnitStatus.OCUPADO

    assert [a.id for a in await service.get_apartments_by_owner(owner.id)] == [apartment.id]

    await service.delete_apartment(apartment.id)
    with pytest.raises(ApartmentNotFoundException):
        await service.get_apartment_by_id(apartment.id)


async def test_list_apartments_filters(db, make_user):
    owner = await make_user()
    service = ApartmentService(db)
    await service.create_apartment(ApartmentCreate(number="101", tower="Torre 1", owner_id=owner.id))
    await service.create_apartment(
        ApartmentCreate(number="201", tower="Torre 2", owner_id=owner.id, status=UnitStatus.OCUPADO)
    )

    items, total = await service.list_apartments(tower="Torre 2")
    assert total == 1
    assert items[0].number == "201"

    items, total = await service.list_apartments(status=UnitStatus.LIBRE)
    assert [a.number for a in items] == ["101"]


# =============================================================================
# PARQUEADEROS
# =============================================================================

async def test_parking_number_is_unique(db):
    service = ParkingSpotService(db)
    await service.create_parking(ParkingSpotCreate(role_type=ParkingRoleType.VISITANTE, number="V-01"))

    with pytest.raises(ParkingSpotAlreadyExistsException):
        await service.create_parking(ParkingSpotCreate(role_type=ParkingRoleType.RESIDENTE, number="V-01"))

    assert (await service.list_parking_spots())[1] == 1


async def test_update_parking_to_taken_number_conflicts(db):
    service = ParkingSpotService(db)
    await service.create_parking(ParkingSpotCreate(role_type=ParkingRoleType.VISITANTE, number="V-01"))
    second = await service.create_parking(ParkingSpotCreate(role_type=ParkingRoleType.VISITANTE, number="V-02"))

    with pytest.raises(ParkingSpotAlreadyExistsException):
        await service.update_parking(
            second.id,
            ParkingSpotUpdate(role_type=ParkingRoleType.VISITANTE, number="V-01")
        )


async def test_assign_and_release_parking(db, make_user):
    user = await make_user()
    service = ParkingSpotService(db)
    spot = await service.create_parking(ParkingSpotCreate(role_type=ParkingRoleType.RESIDENTE, number="P-101"))

    assigned = await service.assign_to_user(spot.id, user.id)
    assert assigned.user_id == user.id
    assert assigned.status == UnitStatus.OCUPADO
    assert [p.id for p in await service.get_parking_by_user(user.id)] == [spot.id]

    released = await service.release(spot.id)
    assert released.user_id is None
    assert released.status == UnitStatus.LIBRE


async def test_list_parking_by_type(db):
    service = ParkingSpotService(db)
    await service.create_parking(ParkingSpotCreate(role_type=ParkingRoleType.VISITANTE, number="V-01"))
    await service.create_parking(ParkingSpotCreate(role_type=ParkingRoleType.RESIDENTE, number="P-01"))

    items, total = await service.list_parking_spots(role_type=ParkingRoleType.RESIDENTE)

    assert total == 1
    assert items[0].number == "P-01"


# =============================================================================
# ÁREAS COMUNES
# =============================================================================

def _area(**overrides) -> CommonAreaCreate:
    data = {
        "name": "Salón social",
        "description": "Salón para eventos de residentes",
        "location": "Torre 1, primer piso",
        "max_capacity": 80,
        "opening_hours": "8:00 - 22:00",
        "status": CommonAreaStatus.ACTIVA,
    }
    data.update(overrides)
    return CommonAreaCreate(**data)


async def test_update_area_keeps_name_and_location(db):
    service = CommonAreaService(db)
    area = await service.create_area(_area())

    updated = await service.update_area(
        area.id,
        CommonAreaUpdate(
            description="Salón cerrado por remodelación",
            max_capacity=40,
            opening_hours="Cerrado temporalmente",
            status=CommonAreaStatus.INACTIVA
        )
    )

    assert updated.name == "Salón social"
    assert updated.location == "Torre 1, primer piso"
    assert updated.max_capacity == 40
    assert updated.status == CommonAreaStatus.INACTIVA


async def test_list_areas_by_status_and_delete(db):
    service = CommonAreaService(db)
    active = await service.create_area(_area())
    await service.create_area(_area(name="Piscina", status=CommonAreaStatus.INACTIVA))

    items, total = await service.list_areas(status=CommonAreaStatus.ACTIVA)
    assert total == 1
    assert items[0].id == active.id

    await service.delete_area(active.id)
    with pytest.raises(CommonAreaNotFoundException):
        await service.get_area_by_id(active.id)
