"""Tests de autenticación y autorización por HTTP"""
from tests.conftest import PASSWORD


async def test_login_issues_tokens_usable_on_me(client, admin_user):
    response = await client.post(
        "/api/auth/login",
        json={"email": "admin@arkania.com", "password": PASSWORD},
    )

    assert response.status_code == 200
    tokens = response.json()
    assert tokens["token_type"] == "bearer"

    me = await client.get(
        "/api/auth/me",
        headers={"Authorization": f"Bearer {tokens['access_token']}"},
    )
    assert me.status_code == 200
    assert me.json()["id"] == admin_user.id
    assert "password_hash" not in me.json()


async def test_login_with_wrong_password(client, admin_user):
    response = await client.post(
        "/api/auth/login",
        json={"email": "admin@arkania.com", "password": "Incorrecta1"},
    )

    assert response.status_code == 401


async def test_inactive_user_cannot_login(client, make_user):
    user = await make_user()
    await client.delete(f"/api/usuarios/{user.id}")

    response = await client.post(
        "/api/auth/login",
        json={"email": user.email, "password": PASSWORD},
    )

    assert response.status_code == 403


async def test_refresh_returns_new_pair(client, admin_user):
    login = await client.post(
        "/api/auth/login",
        json={"email": "admin@arkania.com", "password": PASSWORD},
    )

    response = await client.post(
        "/api/auth/refresh",
        json={"refresh_token": login.json()["refresh_token"]},
    )

    assert response.status_code == 200
    assert response.json()["access_token"]


async def test_access_token_is_not_a_refresh_token(client, admin_headers):
    access_token = admin_headers["Authorization"].split()[1]

    response = await client.post("/api/auth/refresh", json={"refresh_token": access_token})

    assert response.status_code == 401


async def test_me_requires_valid_token(client):
    missing = await client.get("/api/auth/me")
    invalid = await client.get("/api/auth/me", headers={"Authorization": "Bearer basura"})

    assert missing.status_code in (401, 403)
    assert invalid.status_code == 401


async def test_role_seed_requires_admin(client, make_user, admin_headers):
    resident = await make_user(1)
    login = await client.post(
        "/api/auth/login",
        json={"email": resident.email, "password": PASSWORD},
    )
    resident_headers = {"Authorization": f"Bearer {login.json()['access_token']}"}

    forbidden = await client.post("/api/roles/inicializar", headers=resident_headers)
    allowed = await client.post("/api/roles/inicializar", headers=admin_headers)

    assert forbidden.status_code == 403
    assert allowed.status_code == 201
    assert allowed.json() == []


async def test_permission_routes_accept_all_permissions(client, admin_headers):
    jardinero = await client.post("/api/roles", json={"name": "jardinero"}, headers=admin_headers)
    role = jardinero.json()

    response = await client.post(
        f"/api/roles/{role['id']}/permisos/read_profile",
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["permissions"] == ["READ_PROFILE"]


async def _login(client, email: str) -> dict:
    response = await client.post("/api/auth/login", json={"email": email, "password": PASSWORD})
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


async def test_role_changes_require_write_roles(client, make_user, role_id):
    vigilante = await role_id("VIGILANTE")
    resident = await make_user(1)
    resident_headers = await _login(client, resident.email)

    calls = [
        ("POST", "/api/roles", {"name": "jardinero"}),
        ("PUT", f"/api/roles/{vigilante}", {"name": "VIGILANTE", "permissions": ["ALL_PERMISSIONS"]}),
        ("PATCH", f"/api/roles/{vigilante}", {"permissions": ["ALL_PERMISSIONS"]}),
        ("DELETE", f"/api/roles/{vigilante}", None),
        ("PUT", f"/api/roles/{vigilante}/reactivar", None),
    ]
    for method, url, body in calls:
        anonymous = await client.request(method, url, json=body)
        resident_call = await client.request(method, url, json=body, headers=resident_headers)

        assert anonymous.status_code in (401, 403), (method, url)
        assert resident_call.status_code == 403, (method, url)

    role = (await client.get(f"/api/roles/{vigilante}")).json()
    assert role["permissions"] == ["READ_VISITORS", "MANAGE_ACCESS"]
    assert role["is_active"] is True


async def test_single_assignment_changes_require_admin(client, make_user, role_id):
    admin_role = await role_id("ADMINISTRADOR")
    user = await make_user(1)
    user_headers = await _login(client, user.email)

    calls = [
        ("POST", "/api/usuario-roles", {"user_id": user.id, "role_id": admin_role}),
        ("POST", f"/api/usuario-roles/asignar/{user.id}/{admin_role}", None),
        ("PUT", f"/api/usuario-roles/usuario/{user.id}/rol/{admin_role}/activar", None),
        ("PUT", f"/api/usuario-roles/usuario/{user.id}/rol/{admin_role}/desactivar", None),
        ("DELETE", f"/api/usuario-roles/usuario/{user.id}/rol/{admin_role}", None),
        ("PUT", "/api/usuario-roles/1", {"is_active": False}),
        ("DELETE", "/api/usuario-roles/1", None),
        ("PUT", "/api/usuario-roles/1/activar", None),
        ("PUT", "/api/usuario-roles/1/desactivar", None),
    ]
    for method, url, body in calls:
        anonymous = await client.request(method, url, json=body)
        self_service = await client.request(method, url, json=body, headers=user_headers)

        assert anonymous.status_code in (401, 403), (method, url)
        assert self_service.status_code == 403, (method, url)

    check = await client.get(f"/api/usuario-roles/usuario/{user.id}/tiene-rol/{admin_role}")
    assert check.json() == {"result": False}

    seed = await client.post("/api/roles/inicializar", headers=user_headers)
    assert seed.status_code == 403


async def test_admin_can_manage_single_assignments(client, admin_headers, make_user, role_id):
    user = await make_user(1)
    conserje = await role_id("CONSERJE")

    assigned = await client.post(f"/api/usuario-roles/asignar/{user.id}/{conserje}", headers=admin_headers)
    assert assigned.status_code == 201
    assignment_id = assigned.json()["id"]

    deactivated = await client.put(f"/api/usuario-roles/{assignment_id}/desactivar", headers=admin_headers)
    assert deactivated.json()["is_active"] is False

    deleted = await client.delete(f"/api/usuario-roles/{assignment_id}", headers=admin_headers)
    assert deleted.status_code == 204


async def test_password_reset_requires_admin(client, admin_headers, make_user):
    user = await make_user(1)
    user_headers = await _login(client, user.email)
    body = {"new_password": "Restablecida2025"}

    anonymous = await client.put(f"/api/usuarios/{user.id}/restablecer-password", json=body)
    own = await client.put(f"/api/usuarios/{user.id}/restablecer-password", json=body, headers=user_headers)
    assert anonymous.status_code in (401, 403)
    assert own.status_code == 403

    reset = await client.put(f"/api/usuarios/{user.id}/restablecer-password", json=body, headers=admin_headers)
    assert reset.status_code == 200

    login = await client.post(
        "/api/auth/login",
        json={"email": user.email, "password": "Restablecida2025"},
    )
    assert login.status_code == 200


async def test_critical_role_rename_is_rejected(client, admin_headers, admin_user, role_id):
    admin_role = await role_id("ADMINISTRADOR")

    renamed = await client.patch(f"/api/roles/{admin_role}", json={"name": "JEFE"}, headers=admin_headers)
    assert renamed.status_code == 400
    assert "renombrar" in renamed.json()["detail"]

    assert (await client.get(f"/api/roles/{admin_role}")).json()["name"] == "ADMINISTRADOR"
    assert (await client.post("/api/roles/inicializar", headers=admin_headers)).status_code == 201
    assert (await client.get(f"/api/usuarios/{admin_user.id}/puede-eliminar")).json() is False


async def test_write_roles_permission_grants_role_changes(client, admin_headers, make_user):
    editor_role = await client.post(
        "/api/roles",
        json={"name": "editor_roles", "permissions": ["WRITE_ROLES"]},
        headers=admin_headers,
    )
    editor = await make_user(2)
    await client.post(
        f"/api/usuario-roles/asignar/{editor.id}/{editor_role.json()['id']}",
        headers=admin_headers,
    )
    editor_headers = await _login(client, editor.email)

    created = await client.post("/api/roles", json={"name": "jardinero"}, headers=editor_headers)
    seed = await client.post("/api/roles/inicializar", headers=editor_headers)

    assert created.status_code == 201
    assert seed.status_code == 403
