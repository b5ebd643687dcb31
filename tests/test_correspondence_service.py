"""Tests del servicio de correspondencia"""
from datetime import timedelta

import pytest

from app.core.exceptions import (
    CorrespondenceInvalidOperationException,
    UserNotFoundException,
)
from app.core.utils import utc_now_naive
from app.models.correspondence import CorrespondenceStatus, CorrespondenceType
from app.schemas.correspondence import CorrespondenceCreate, CorrespondenceUpdate
from app.services.correspondence_service import CorrespondenceService


@pytest.fixture
def people(make_user):
    async def _people():
        porter = await make_user(1, first_name="Pedro", last_name="Portero")
        resident = await make_user(2, first_name="Rosa", last_name="Residente")
        return porter, resident
    return _people


async def test_register_correspondence_is_pending(db, people):
    porter, resident = await people()

    item = await CorrespondenceService(db).create_correspondence(
        CorrespondenceCreate(registered_by_id=porter.id, recipient_id=resident.id, type=CorrespondenceType.PAQUETE)
    )

    assert item.status == CorrespondenceStatus.PENDIENTE
    assert item.received_at is not None
    assert item.delivered_at is None
    assert item.recipient_name == "Rosa Residente"


async def test_register_with_missing_recipient_fails(db, people):
    porter, _ = await people()

    with pytest.raises(UserNotFoundException):
        await CorrespondenceService(db).create_correspondence(
            CorrespondenceCreate(registered_by_id=porter.id, recipient_id=999, type=CorrespondenceType.OTRO)
        )


async def test_deliver_sets_status_and_timestamp(db, people):
    porter, resident = await people()
    service = CorrespondenceService(db)
    item = await service.create_correspondence(
        CorrespondenceCreate(registered_by_id=porter.id, recipient_id=resident.id, type=CorrespondenceType.DOCUMENTO)
    )

    delivered = await service.deliver(item.id, retrieved_by_id=resident.id, notes="Retirado en portería")

    assert delivered.status == CorrespondenceStatus.ENTREGADA
    assert delivered.delivered_at is not None
    assert delivered.retrieved_by_name == "Rosa Residente"
    assert delivered.notes == "Retirado en portería"

    with pytest.raises(CorrespondenceInvalidOperationException):
        await service.deliver(item.id, retrieved_by_id=resident.id)


async def test_update_to_delivered_stamps_delivery(db, people):
    porter, resident = await people()
    service = CorrespondenceService(db)
    item = await service.create_correspondence(
        CorrespondenceCreate(registered_by_id=porter.id, recipient_id=resident.id, type=CorrespondenceType.PAQUETE)
    )

    updated = await service.update_correspondence(
        item.id,
        CorrespondenceUpdate(
            registered_by_id=porter.id,
            recipient_id=resident.id,
            retrieved_by_id=resident.id,
            type=CorrespondenceType.PAQUETE,
            status=CorrespondenceStatus.ENTREGADA
        )
    )

    assert updated.delivered_at is not None


async def test_pending_queries(db, people):
    porter, resident = await people()
    service = CorrespondenceService(db)
    now = utc_now_naive()
    old = await service.create_correspondence(
        CorrespondenceCreate(
            registered_by_id=porter.id,
            recipient_id=resident.id,
            type=CorrespondenceType.PAQUETE,
            received_at=now - timedelta(days=10)
        )
    )
    recent = await service.create_correspondence(
        CorrespondenceCreate(registered_by_id=porter.id, recipient_id=resident.id, type=CorrespondenceType.DOCUMENTO)
    )

    assert [c.id for c in await service.get_pending()] == [old.id, recent.id]
    assert [c.id for c in await service.get_pending_older_than(7)] == [old.id]
    assert [c.id for c in await service.get_by_recipient(resident.id)] == [recent.id, old.id]

    await service.deliver(recent.id, retrieved_by_id=resident.id)

    assert [c.id for c in await service.get_pending_by_recipient(resident.id)] == [old.id]
    assert [c.id for c in await service.get_by_retriever(resident.id)] == [recent.id]
    assert [c.id for c in await service.get_by_type_and_status(
        CorrespondenceType.DOCUMENTO, CorrespondenceStatus.ENTREGADA
    )] == [recent.id]


async def test_received_between_validates_range(db):
    now = utc_now_naive()

    with pytest.raises(CorrespondenceInvalidOperationException):
        await CorrespondenceService(db).get_received_between(now, now - timedelta(hours=1))
