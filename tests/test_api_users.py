"""Tests de los endpoints de usuarios, roles y asignaciones"""
from tests.conftest import PASSWORD, user_payload


def _json_user(index: int = 1, **overrides) -> dict:
    payload = user_payload(index, **overrides)
    payload["document_type"] = payload["document_type"].value
    return payload


async def test_create_user(client):
    response = await client.post("/api/usuarios", json=_json_user())

    assert response.status_code == 201
    body = response.json()
    assert body["full_name"] == "María GómezA"
    assert body["is_active"] is True
    assert "password" not in body


async def test_duplicate_user_conflicts(client):
    await client.post("/api/usuarios", json=_json_user(1))

    response = await client.post("/api/usuarios", json=_json_user(2, email="usuario1@arkania.com"))

    assert response.status_code == 409
    assert "email" in response.json()["detail"]


async def test_validation_errors_are_bad_request(client):
    response = await client.post("/api/usuarios", json={"email": "no-es-email"})

    assert response.status_code == 400
    assert response.json()["errors"]


async def test_pagination_bounds(client):
    assert (await client.get("/api/usuarios", params={"limit": 0})).status_code == 400
    assert (await client.get("/api/usuarios", params={"limit": 1000})).status_code == 400
    assert (await client.get("/api/usuarios", params={"skip": -1})).status_code == 400


async def test_paginated_listing(client):
    for index in range(1, 4):
        await client.post("/api/usuarios", json=_json_user(index))

    response = await client.get("/api/usuarios", params={"skip": 2, "limit": 2})

    body = response.json()
    assert body["total"] == 3
    assert body["page"] == 2
    assert body["total_pages"] == 2
    assert len(body["items"]) == 1


async def test_soft_delete_via_api(client):
    created = (await client.post("/api/usuarios", json=_json_user())).json()

    response = await client.delete(f"/api/usuarios/{created['id']}")
    assert response.status_code == 204

    fetched = await client.get(f"/api/usuarios/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["is_active"] is False

    active = await client.get("/api/usuarios", params={"is_active": True})
    assert active.json()["total"] == 0


async def test_missing_user_is_not_found(client):
    response = await client.get("/api/usuarios/999")

    assert response.status_code == 404
    assert response.json()["detail"] == "Usuario con ID 999 no encontrado"


async def test_patch_and_password_change(client):
    created = (await client.post("/api/usuarios", json=_json_user())).json()

    patched = await client.patch(f"/api/usuarios/{created['id']}", json={"first_name": "Lucía"})
    assert patched.json()["first_name"] == "Lucía"
    assert patched.json()["email"] == created["email"]

    changed = await client.put(
        f"/api/usuarios/{created['id']}/password",
        json={"current_password": PASSWORD, "new_password": "NuevaClave2025"},
    )
    assert changed.status_code == 200
    assert changed.json()["success"] is True


async def test_lookup_endpoints(client):
    created = (await client.post("/api/usuarios", json=_json_user())).json()

    by_document = await client.get(f"/api/usuarios/documento/{created['document_number']}")
    email_check = await client.get("/api/usuarios/validar-email", params={"email": created["email"]})
    types = await client.get("/api/usuarios/tipos-documento")

    assert by_document.json()["id"] == created["id"]
    assert email_check.json()["available"] is False
    assert {t["code"] for t in types.json()} == {"CC", "CE", "TI", "PP", "NIT"}


async def test_role_lifecycle(client, admin_headers):
    created = await client.post(
        "/api/roles",
        json={"name": "jardinero", "description": "Cuida los jardines", "permissions": ["read_profile"]},
        headers=admin_headers,
    )
    assert created.status_code == 201
    role = created.json()
    assert role["name"] == "JARDINERO"
    assert role["permissions"] == ["READ_PROFILE"]

    invalid = await client.post(
        "/api/roles", json={"name": "OTRO", "permissions": ["VOLAR"]}, headers=admin_headers
    )
    assert invalid.status_code == 400

    assert (await client.get(f"/api/roles/{role['id']}/tiene-permiso/READ_PROFILE")).json() is True

    deleted = await client.delete(f"/api/roles/{role['id']}", headers=admin_headers)
    assert deleted.status_code == 204
    assert (await client.get(f"/api/roles/{role['id']}")).json()["is_active"] is False


async def test_assignment_endpoints(client, admin_headers, role_id):
    user = (await client.post("/api/usuarios", json=_json_user())).json()
    residente = await role_id("RESIDENTE")

    assigned = await client.post(
        "/api/usuario-roles",
        json={"user_id": user["id"], "role_id": residente},
        headers=admin_headers,
    )
    assert assigned.status_code == 201
    assert assigned.json()["role_name"] == "RESIDENTE"

    duplicate = await client.post(
        f"/api/usuario-roles/asignar/{user['id']}/{residente}", headers=admin_headers
    )
    assert duplicate.status_code == 409

    role_delete = await client.delete(f"/api/roles/{residente}", headers=admin_headers)
    assert role_delete.status_code == 400

    unassigned = await client.delete(
        f"/api/usuario-roles/usuario/{user['id']}/rol/{residente}", headers=admin_headers
    )
    assert unassigned.json()["is_active"] is False

    check = await client.get(f"/api/usuario-roles/usuario/{user['id']}/tiene-rol/{residente}")
    assert check.json() == {"result": False}

    policies = await client.get("/api/usuario-roles/politicas")
    assert policies.json()["max_users_per_role"]["ADMINISTRADOR"] == 5


async def test_bulk_assignment_requires_admin(client, admin_headers, make_user, role_id):
    user = await make_user(1)
    roles = [await role_id("PROPIETARIO"), await role_id("VIGILANTE")]

    anonymous = await client.post(f"/api/usuario-roles/usuario/{user.id}/roles", json={"role_ids": roles})
    assert anonymous.status_code in (401, 403)

    response = await client.post(
        f"/api/usuario-roles/usuario/{user.id}/roles",
        json={"role_ids": roles},
        headers=admin_headers,
    )
    assert response.status_code == 201
    assert sorted(a["role_id"] for a in response.json()) == sorted(roles)

    removed = await client.request(
        "DELETE",
        f"/api/usuario-roles/usuario/{user.id}/roles",
        json={"role_ids": roles[:1]},
        headers=admin_headers,
    )
    assert [a["role_id"] for a in removed.json()] == roles[:1]
