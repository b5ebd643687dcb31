"""Tests del servicio de asignaciones usuario-rol"""
import pytest
from sqlalchemy.exc import IntegrityError

from app.core.config import settings
from app.core.database import seed_admin_user
from app.core.exceptions import (
    RoleNotFoundException,
    UserNotFoundException,
    UserRoleAlreadyExistsException,
    UserRoleInvalidOperationException,
    UserRoleNotFoundException,
)
from app.core.policies import ADMIN_ROLE
from app.models.user_role import UserRole
from app.schemas.roles import RoleCreate
from app.services.role_service import RoleService
from app.services.user_role_service import UserRoleService
from app.services.user_service import UserService


async def test_assign_role(db, make_user, role_id):
    user = await make_user()
    residente = await role_id("RESIDENTE")

    assignment = await UserRoleService(db).assign_role(user.id, residente)

    assert assignment.is_active is True
    assert assignment.role_name == "RESIDENTE"
    assert assignment.user_document_number == user.document_number


async def test_assigning_active_pair_twice_conflicts(db, make_user, role_id):
    user = await make_user()
    residente = await role_id("RESIDENTE")
    service = UserRoleService(db)
    await service.assign_role(user.id, residente)

    with pytest.raises(UserRoleAlreadyExistsException):
        await service.assign_role(user.id, residente)

    assert len(await service.get_assignments_by_user(user.id)) == 1


async def test_deactivate_then_reactivate_restores_assignment(db, make_user, role_id):
    user = await make_user()
    residente = await role_id("RESIDENTE")
    service = UserRoleService(db)
    original = await service.assign_role(user.id, residente)

    await service.deactivate_pair(user.id, residente)
    assert await service.get_assignments_by_user(user.id, only_active=True) == []

    reactivated = await service.assign_role(user.id, residente)

    assert reactivated.id == original.id
    active = await service.get_assignments_by_user(user.id, only_active=True)
    assert [a.id for a in active] == [original.id]


async def test_activate_assignment_by_id(db, make_user, role_id):
    user = await make_user()
    service = UserRoleService(db)
    assignment = await service.assign_role(user.id, await role_id("RESIDENTE"))

    await service.deactivate_assignment(assignment.id)
    assert (await service.get_assignment_by_id(assignment.id)).is_active is False

    await service.activate_assignment(assignment.id)
    assert await service.user_has_role(user.id, assignment.role_id) is True


async def test_assign_to_missing_user_or_role(db, make_user, role_id):
    service = UserRoleService(db)
    user = await make_user()

    with pytest.raises(UserNotFoundException):
        await service.assign_role(999, await role_id("RESIDENTE"))
    with pytest.raises(RoleNotFoundException):
        await service.assign_role(user.id, 999)


async def test_inactive_user_or_role_cannot_be_assigned(db, make_user):
    service = UserRoleService(db)
    user = await make_user(1)
    other = await make_user(2)
    role = await RoleService(db).create_role(RoleCreate(name="JARDINERO", is_active=False))
    await UserService(db).delete_user(other.id)

    with pytest.raises(UserRoleInvalidOperationException):
        await service.assign_role(user.id, role.id)
    with pytest.raises(UserRoleInvalidOperationException):
        await service.assign_role(other.id, (await RoleService(db).get_role_by_name("RESIDENTE")).id)

    assert await service.can_assign(user.id, role.id) is False


async def test_deactivate_missing_pair_is_not_found(db, make_user, role_id):
    user = await make_user()

    with pytest.raises(UserRoleNotFoundException):
        await UserRoleService(db).deactivate_pair(user.id, await role_id("RESIDENTE"))


async def test_last_admin_role_cannot_be_removed(db, admin_user, role_id):
    service = UserRoleService(db)
    admin_role = await role_id(ADMIN_ROLE)

    with pytest.raises(UserRoleInvalidOperationException):
        await service.deactivate_pair(admin_user.id, admin_role)

    assignment = await service.get_active_assignment(admin_user.id, admin_role)
    with pytest.raises(UserRoleInvalidOperationException):
        await service.delete_assignment(assignment.id)


async def test_delete_assignment(db, make_user, role_id):
    user = await make_user()
    service = UserRoleService(db)
    assignment = await service.assign_role(user.id, await role_id("RESIDENTE"))

    assert await service.delete_assignment(assignment.id) is True
    with pytest.raises(UserRoleNotFoundException):
        await service.get_assignment_by_id(assignment.id)


async def test_bulk_assign_skips_active_roles(db, make_user, role_id):
    user = await make_user()
    residente = await role_id("RESIDENTE")
    propietario = await role_id("PROPIETARIO")
    service = UserRoleService(db)
    await service.assign_role(user.id, residente)

    assigned = await service.assign_roles_to_user(user.id, [residente, propietario, propietario])

    assert [a.role_id for a in assigned] == [propietario]
    active = await service.get_assignments_by_user(user.id, only_active=True)
    assert {a.role_id for a in active} == {residente, propietario}


async def test_replace_user_roles(db, make_user, role_id):
    user = await make_user()
    residente = await role_id("RESIDENTE")
    propietario = await role_id("PROPIETARIO")
    vigilante = await role_id("VIGILANTE")
    service = UserRoleService(db)
    await service.assign_roles_to_user(user.id, [residente, propietario])

    active = await service.replace_user_roles(user.id, [propietario, vigilante])

    assert {a.role_id for a in active} == {propietario, vigilante}
    inactive = [a for a in await service.get_assignments_by_user(user.id) if not a.is_active]
    assert [a.role_id for a in inactive] == [residente]


async def test_unassign_roles_from_user(db, make_user, role_id):
    user = await make_user()
    residente = await role_id("RESIDENTE")
    service = UserRoleService(db)
    await service.assign_role(user.id, residente)

    deactivated = await service.unassign_roles_from_user(user.id, [residente])

    assert [a.role_id for a in deactivated] == [residente]
    assert await service.user_has_role(user.id, residente) is False


async def test_assign_role_to_users(db, make_user, role_id):
    first = await make_user(1)
    second = await make_user(2)
    residente = await role_id("RESIDENTE")

    assigned = await UserRoleService(db).assign_role_to_users(residente, [first.id, second.id])

    assert {a.user_id for a in assigned} == {first.id, second.id}


async def test_policy_validation_is_advisory(db, make_user, role_id):
    user = await make_user()
    service = UserRoleService(db)
    residente = await role_id("RESIDENTE")

    result = await service.validate_policies(user.id, residente)

    assert result["compliant"] is False
    assert len(result["violations"]) == 1
    # La política no impide la asignación
    assignment = await service.assign_role(user.id, residente)
    assert assignment.is_active is True


async def test_exclusive_roles_are_reported(db, make_user, role_id):
    user = await make_user()
    service = UserRoleService(db)
    await service.assign_role(user.id, await role_id("PROPIETARIO"))

    result = await service.validate_policies(user.id, await role_id("ARRENDATARIO"))

    assert result["compliant"] is False
    assert "incompatible" in result["violations"][0]


async def test_statistics(db, make_user, role_id):
    user = await make_user()
    service = UserRoleService(db)
    residente = await role_id("RESIDENTE")
    await service.assign_role(user.id, residente)
    await service.assign_role(user.id, await role_id("PROPIETARIO"))
    await service.deactivate_pair(user.id, residente)

    stats = await service.get_statistics()

    assert stats["total"] == 2
    assert stats["active"] == 1
    assert stats["inactive"] == 1
    assert stats["by_role"] == {"PROPIETARIO": 1}
    assert stats["by_user"] == {user.id: 1}


async def test_pair_is_unique_in_database(db, make_user, role_id):
    user = await make_user()
    residente = await role_id("RESIDENTE")
    await UserRoleService(db).assign_role(user.id, residente)

    db.add(UserRole(user_id=user.id, role_id=residente, is_active=True))
    with pytest.raises(IntegrityError):
        await db.flush()
    await db.rollback()


async def test_seed_admin_user_creates_and_assigns(db, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_EMAIL", "gerencia@arkania.com")
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "Gerencia2024")

    admin = await seed_admin_user(db)
    again = await seed_admin_user(db)

    assert admin is not None
    assert again.id == admin.id
    assert await UserRoleService(db).user_has_role_name(admin.id, ADMIN_ROLE) is True
    assert len(await UserRoleService(db).get_assignments_by_user(admin.id)) == 1


async def test_seed_admin_user_reuses_existing_account(db, make_user, monkeypatch):
    user = await make_user(3)
    monkeypatch.setattr(settings, "ADMIN_EMAIL", user.email.upper())
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "Gerencia2024")

    admin = await seed_admin_user(db)

    assert admin.id == user.id
    assert await UserRoleService(db).user_has_role_name(user.id, ADMIN_ROLE) is True
