"""Tests del servicio de roles"""
import pytest
from pydantic import ValidationError

from app.core.exceptions import (
    RoleAlreadyExistsException,
    RoleInvalidOperationException,
    RoleNotFoundException,
)
from app.core.policies import DEFAULT_ROLES
from app.schemas.roles import RoleCreate, RoleUpdate
from app.services.role_service import RoleService
from app.services.user_role_service import UserRoleService


async def test_default_roles_are_seeded_once(db):
    service = RoleService(db)

    assert await service.initialize_default_roles() == []
    roles, total = await service.list_roles(limit=100)
    assert total == len(DEFAULT_ROLES)
    assert {role.name for role in roles} == set(DEFAULT_ROLES)


async def test_role_name_is_uppercased(db):
    role = await RoleService(db).create_role(RoleCreate(name="jardinero", description="Jardines"))

    assert role.name == "JARDINERO"


def test_role_name_with_invalid_characters_fails_validation():
    with pytest.raises(ValidationError):
        RoleCreate(name="rol-1")


async def test_duplicate_role_name_conflicts(db):
    service = RoleService(db)

    with pytest.raises(RoleAlreadyExistsException):
        await service.create_role(RoleCreate(name="conserje"))

    assert (await service.list_roles())[1] == len(DEFAULT_ROLES)


async def test_invalid_permissions_are_rejected(db):
    with pytest.raises(RoleInvalidOperationException):
        await RoleService(db).create_role(
            RoleCreate(name="JARDINERO", permissions=["READ_PROFILE", "VOLAR"])
        )


async def test_permissions_are_normalized_and_deduplicated(db):
    role = await RoleService(db).create_role(
        RoleCreate(name="JARDINERO", permissions=[" read_profile", "READ_PROFILE", "update_profile"])
    )

    assert role.permission_list == ["READ_PROFILE", "UPDATE_PROFILE"]


async def test_add_and_remove_permission(db):
    service = RoleService(db)
    role = await service.create_role(RoleCreate(name="JARDINERO", permissions=["READ_PROFILE"]))

    role = await service.add_permission(role.id, "limited_access")
    assert role.permission_list == ["READ_PROFILE", "LIMITED_ACCESS"]

    with pytest.raises(RoleAlreadyExistsException):
        await service.add_permission(role.id, "LIMITED_ACCESS")

    role = await service.remove_permission(role.id, "READ_PROFILE")
    assert role.permission_list == ["LIMITED_ACCESS"]

    with pytest.raises(RoleNotFoundException):
        await service.remove_permission(role.id, "READ_PROFILE")


async def test_role_has_permission_is_exact(db):
    service = RoleService(db)
    role = await service.create_role(RoleCreate(name="AUDITOR", permissions=["READ_USERS"]))

    assert await service.role_has_permission(role.id, "READ_USERS") is True
    assert await service.role_has_permission(role.id, "READ_USER") is False
    assert role.has_permission("read_users") is True
    assert role.has_permission("READ_USER") is False
    assert role.has_permission("READ") is False


async def test_permission_lookup_keeps_text_search(db):
    service = RoleService(db)
    await service.create_role(RoleCreate(name="AUDITOR", permissions=["READ_USERS"]))

    names = [role.name for role in await service.get_roles_by_permission("READ_USER")]

    assert "AUDITOR" in names


async def test_roles_by_permission(db):
    names = [role.name for role in await RoleService(db).get_roles_by_permission("write_correspondence")]

    assert names == ["CONSERJE"]


async def test_delete_role_with_assignments_is_rejected(db, make_user):
    service = RoleService(db)
    role = await service.create_role(RoleCreate(name="JARDINERO"))
    user = await make_user()
    assignments = UserRoleService(db)
    await assignments.assign_role(user.id, role.id)

    assert await service.can_delete_role(role.id) is False
    with pytest.raises(RoleInvalidOperationException):
        await service.delete_role(role.id)

    # Una asignación inactiva también impide eliminar
    await assignments.deactivate_pair(user.id, role.id)
    with pytest.raises(RoleInvalidOperationException):
        await service.delete_role(role.id)


async def test_critical_role_cannot_be_deleted(db, role_id):
    service = RoleService(db)

    with pytest.raises(RoleInvalidOperationException):
        await service.delete_role(await role_id("ADMINISTRADOR"))
    with pytest.raises(RoleInvalidOperationException):
        await service.update_role(await role_id("PROPIETARIO"), RoleUpdate(is_active=False))


async def test_critical_role_cannot_be_renamed(db, role_id):
    service = RoleService(db)
    admin_id = await role_id("ADMINISTRADOR")

    with pytest.raises(RoleInvalidOperationException):
        await service.update_role(admin_id, RoleUpdate(name="JEFE"))
    with pytest.raises(RoleInvalidOperationException):
        await service.update_role(await role_id("PROPIETARIO"), RoleUpdate(name="DUENO"))

    role = await service.get_role_by_name("ADMINISTRADOR")
    assert role.id == admin_id
    assert await service.can_delete_role(admin_id) is False


async def test_critical_role_keeps_name_when_case_changes(db, role_id):
    role = await RoleService(db).update_role(
        await role_id("ADMINISTRADOR"), RoleUpdate(name="administrador", description="Control total")
    )

    assert role.name == "ADMINISTRADOR"
    assert role.description == "Control total"


async def test_soft_delete_and_reactivate_role(db):
    service = RoleService(db)
    role = await service.create_role(RoleCreate(name="JARDINERO"))

    deleted = await service.delete_role(role.id)
    assert deleted.is_active is False
    assert role.id in [r.id for r in await service.get_inactive_roles()]

    reactivated = await service.reactivate_role(role.id)
    assert reactivated.is_active is True


async def test_rename_to_existing_name_conflicts(db):
    service = RoleService(db)
    role = await service.create_role(RoleCreate(name="JARDINERO"))

    with pytest.raises(RoleAlreadyExistsException):
        await service.update_role(role.id, RoleUpdate(name="vigilante"))


async def test_get_role_by_name_ignore_case(db):
    role = await RoleService(db).get_role_by_name_ignore_case("Vigilante")

    assert role.name == "VIGILANTE"


async def test_count_users_and_roles_without_users(db, make_user, role_id):
    service = RoleService(db)
    user = await make_user()
    residente = await role_id("RESIDENTE")
    await UserRoleService(db).assign_role(user.id, residente)

    assert await service.count_users(residente) == 1
    assert residente not in [r.id for r in await service.get_roles_without_users()]
    assert [r.id for r in await service.get_roles_with_min_users(1)] == [residente]
    assert [r.name for r in await service.get_roles_of_user(user.id)] == ["RESIDENTE"]


async def test_negative_minimum_is_rejected(db):
    with pytest.raises(RoleInvalidOperationException):
        await RoleService(db).get_roles_with_min_users(-1)
