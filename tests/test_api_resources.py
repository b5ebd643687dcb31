"""Tests de los endpoints de inmuebles, correspondencia y solicitudes"""


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_apartment_endpoints(client, make_user):
    owner = await make_user()

    created = await client.post(
        "/api/apartamentos",
        json={"number": "502", "tower": "Torre 2", "owner_id": owner.id, "status": "OCUPADO"},
    )
    assert created.status_code == 201
    apartment = created.json()

    listed = await client.get("/api/apartamentos", params={"estado": "OCUPADO"})
    assert listed.json()["total"] == 1

    bad_filter = await client.get("/api/apartamentos", params={"estado": "DEMOLIDO"})
    assert bad_filter.status_code == 400

    missing_owner = await client.post(
        "/api/apartamentos",
        json={"number": "503", "tower": "Torre 2", "owner_id": 999},
    )
    assert missing_owner.status_code == 404

    deleted = await client.delete(f"/api/apartamentos/{apartment['id']}")
    assert deleted.status_code == 204
    assert (await client.get(f"/api/apartamentos/{apartment['id']}")).status_code == 404


async def test_parking_endpoints(client, make_user):
    user = await make_user()
    payload = {"role_type": "RESIDENTE", "number": "P-101"}

    created = await client.post("/api/parqueaderos", json=payload)
    assert created.status_code == 201
    spot = created.json()

    duplicate = await client.post("/api/parqueaderos", json=payload)
    assert duplicate.status_code == 409

    assigned = await client.put(f"/api/parqueaderos/{spot['id']}/asignar/{user.id}")
    assert assigned.json()["status"] == "OCUPADO"

    released = await client.put(f"/api/parqueaderos/{spot['id']}/liberar")
    assert released.json()["user_id"] is None
    assert released.json()["status"] == "LIBRE"


async def test_common_area_endpoints(client):
    created = await client.post(
        "/api/areas-comunes",
        json={
            "name": "Gimnasio",
            "description": "Gimnasio con máquinas de cardio",
            "location": "Torre 3, sótano",
            "max_capacity": 15,
            "opening_hours": "5:00 - 21:00",
            "status": "activa",
        },
    )
    assert created.status_code == 201

    too_big = await client.put(
        f"/api/areas-comunes/{created.json()['id']}",
        json={
            "description": "Gimnasio con máquinas de cardio",
            "max_capacity": 5000,
            "opening_hours": "5:00 - 21:00",
            "status": "activa",
        },
    )
    assert too_big.status_code == 400


async def test_correspondence_delivery_flow(client, make_user):
    porter = await make_user(1)
    resident = await make_user(2)

    created = await client.post(
        "/api/correspondencias",
        json={"registered_by_id": porter.id, "recipient_id": resident.id, "type": "PAQUETE"},
    )
    assert created.status_code == 201
    item = created.json()
    assert item["status"] == "PENDIENTE"

    pending = await client.get(f"/api/correspondencias/destinatario/{resident.id}/pendientes")
    assert [c["id"] for c in pending.json()] == [item["id"]]

    delivered = await client.put(
        f"/api/correspondencias/{item['id']}/entregar",
        json={"retrieved_by_id": resident.id},
    )
    assert delivered.status_code == 200
    assert delivered.json()["status"] == "ENTREGADA"
    assert delivered.json()["delivered_at"] is not None

    again = await client.put(
        f"/api/correspondencias/{item['id']}/entregar",
        json={"retrieved_by_id": resident.id},
    )
    assert again.status_code == 400

    by_status = await client.get("/api/correspondencias/estado/entregada")
    assert [c["id"] for c in by_status.json()] == [item["id"]]


async def test_service_request_flow(client, make_user):
    user = await make_user()

    created = await client.post(
        "/api/solicitudes",
        json={
            "user_id": user.id,
            "request_type": "queja",
            "description": "Ruido excesivo después de las 10 pm",
        },
    )
    assert created.status_code == 201
    request = created.json()
    assert request["resolved_at"] is None

    resolved = await client.put(f"/api/solicitudes/{request['id']}", json={"status": "resuelta"})
    assert resolved.json()["resolved_at"] is not None

    by_status = await client.get(
        "/api/solicitudes/por-estados",
        params=[("estados", "resuelta"), ("estados", "pendiente")],
    )
    assert [r["id"] for r in by_status.json()] == [request["id"]]

    search = await client.get("/api/solicitudes/buscar-descripcion", params={"texto": "ruido"})
    assert len(search.json()) == 1

    bad_range = await client.get(
        "/api/solicitudes/por-fecha-creacion",
        params={"inicio": "2025-02-01T00:00:00", "fin": "2025-01-01T00:00:00"},
    )
    assert bad_range.status_code == 400
