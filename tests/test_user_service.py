"""Tests del servicio de usuarios"""
from datetime import timedelta

import pytest

from app.core.exceptions import (
    UserAlreadyExistsException,
    UserInvalidOperationException,
    UserNotFoundException,
)
from app.core.policies import ADMIN_ROLE
from app.core.security import verify_password
from app.core.utils import utc_now_naive
from app.schemas.users import UserCreate, UserUpdate
from app.services.user_role_service import UserRoleService
from app.services.user_service import UserService
from tests.conftest import PASSWORD, user_payload


async def test_create_user_hashes_password(db, make_user):
    user = await make_user()

    assert user.id is not None
    assert user.is_active is True
    assert user.password_hash != PASSWORD
    assert verify_password(PASSWORD, user.password_hash)


async def test_duplicate_document_is_rejected(db, make_user):
    await make_user(1)
    service = UserService(db)

    with pytest.raises(UserAlreadyExistsException):
        await service.create_user(
            UserCreate(**user_payload(2, document_number=user_payload(1)["document_number"]))
        )

    assert await service.user_repo.count() == 1


async def test_duplicate_email_is_rejected_ignoring_case(db, make_user):
    await make_user(1)

    with pytest.raises(UserAlreadyExistsException):
        await UserService(db).create_user(
            UserCreate(**user_payload(2, email="USUARIO1@arkania.com"))
        )


async def test_weak_password_is_rejected(db):
    with pytest.raises(UserInvalidOperationException):
        await UserService(db).create_user(UserCreate(**user_payload(1, password="solotexto")))


async def test_soft_delete_keeps_user_retrievable(db, make_user):
    user = await make_user()
    service = UserService(db)

    await service.delete_user(user.id)

    active_ids = [u.id for u in await service.get_active_users()]
    assert user.id not in active_ids
    assert (await service.get_user_by_id(user.id)).is_active is False
    assert user.id in [u.id for u in await service.get_inactive_users()]


async def test_reactivate_user(db, make_user):
    user = await make_user()
    service = UserService(db)
    await service.delete_user(user.id)

    reactivated = await service.reactivate_user(user.id)

    assert reactivated.is_active is True


async def test_get_missing_user_raises_not_found(db):
    with pytest.raises(UserNotFoundException):
        await UserService(db).get_user_by_id(404)


async def test_last_admin_cannot_be_deleted(db, admin_user):
    service = UserService(db)

    assert await service.can_delete_user(admin_user.id) is False
    with pytest.raises(UserInvalidOperationException):
        await service.delete_user(admin_user.id)


async def test_admin_can_be_deleted_when_another_admin_exists(db, admin_user, make_user, role_id):
    other = await make_user(2)
    await UserRoleService(db).assign_role(other.id, await role_id(ADMIN_ROLE))

    deleted = await UserService(db).delete_user(admin_user.id)

    assert deleted.is_active is False


async def test_partial_update_only_touches_sent_fields(db, make_user):
    user = await make_user()

    updated = await UserService(db).update_user(user.id, UserUpdate(phone="3001112233"))

    assert updated.phone == "3001112233"
    assert updated.first_name == "María"
    assert updated.email == "usuario1@arkania.com"


async def test_email_case_change_is_saved(db, make_user):
    user = await make_user()

    updated = await UserService(db).update_user(user.id, UserUpdate(email="Usuario1@arkania.com"))

    assert updated.email == "Usuario1@arkania.com"
    assert (await UserService(db).get_user_by_email("usuario1@arkania.com")).id == user.id


async def test_update_to_taken_email_conflicts(db, make_user):
    await make_user(1)
    second = await make_user(2)

    with pytest.raises(UserAlreadyExistsException):
        await UserService(db).update_user(second.id, UserUpdate(email="usuario1@arkania.com"))


async def test_change_password_requires_current_password(db, make_user):
    user = await make_user()
    service = UserService(db)

    with pytest.raises(UserInvalidOperationException):
        await service.change_password(user.id, "Incorrecta1", "NuevaClave2025")

    assert await service.change_password(user.id, PASSWORD, "NuevaClave2025") is True
    assert verify_password("NuevaClave2025", (await service.get_user_by_id(user.id)).password_hash)


async def test_search_matches_full_name_and_document(db, make_user):
    user = await make_user(1, first_name="Carlos", last_name="Restrepo")
    await make_user(2)
    service = UserService(db)

    assert [u.id for u in await service.search_users("carlos rest")] == [user.id]
    assert [u.id for u in await service.search_users(user.document_number)] == [user.id]


async def test_users_by_role_and_without_roles(db, admin_user, make_user):
    plain = await make_user(1)
    service = UserService(db)

    assert [u.id for u in await service.get_users_by_role_name("administrador")] == [admin_user.id]
    assert plain.id in [u.id for u in await service.get_users_without_roles()]
    assert admin_user.id not in [u.id for u in await service.get_users_without_roles()]


async def test_created_between_rejects_inverted_range(db):
    now = utc_now_naive()

    with pytest.raises(UserInvalidOperationException):
        await UserService(db).get_users_created_between(now, now - timedelta(days=1))


async def test_statistics(db, make_user):
    await make_user(1)
    second = await make_user(2)
    service = UserService(db)
    await service.delete_user(second.id)

    stats = await service.get_statistics()

    assert stats["total"] == 2
    assert stats["active"] == 1
    assert stats["inactive"] == 1
    assert stats["by_document_type"] == {"CC": 2}
    assert stats["created_last_month"] == 2


async def test_availability_checks(db, make_user):
    user = await make_user()
    service = UserService(db)

    assert await service.is_email_available("otro@arkania.com") is True
    assert await service.is_email_available(user.email) is False
    assert await service.is_document_available(user.document_number) is False
