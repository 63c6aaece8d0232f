def summary_payload(**overrides):
    payload = {
        "fecha": "2025-01-05",
        "area": "Calderas",
        "ubicacion": "Nave 3",
        "novedades": "Sin incidencias relevantes durante el turno.",
    }
    payload.update(overrides)
    return payload


def create(client, headers, payload):
    return client.post("/api/summaries", json=payload, headers=headers)


def test_create_summary_uses_full_name(client, user_headers):
    response = create(client, user_headers, summary_payload())
    assert response.status_code == 201
    data = response.get_json()
    assert data["ownerName"] == "Test User"
    assert data["fotos"] == []
    assert "status" not in data


def test_create_summary_validation(client, user_headers):
    response = create(client, user_headers, summary_payload(fecha="05/01/2025", area="x", novedades="ok"))
    assert response.status_code == 400
    assert {"fecha", "area", "novedades"} <= set(response.get_json()["details"])


def test_list_summaries_scope_and_enrichment(client, auth_headers, user_headers, admin_headers, seed_other_user):
    """
    GIVEN novedades de dos usuarios
    WHEN se listan
    THEN cada usuario ve las suyas, el admin todas, y cada una lleva ownerFullName
    """
    create(client, user_headers, summary_payload(fecha="2025-01-04"))
    create(client, user_headers, summary_payload(fecha="2025-01-06"))
    create(client, auth_headers(seed_other_user), summary_payload())

    mine = client.get("/api/summaries", headers=user_headers).get_json()
    assert [s["fecha"] for s in mine] == ["2025-01-06", "2025-01-04"]
    assert all(s["ownerFullName"] == "Test User" for s in mine)

    everything = client.get("/api/summaries", headers=admin_headers).get_json()
    assert len(everything) == 3
    others = [s for s in everything if s["ownerName"] == "otheruser"]
    assert others[0]["ownerFullName"] == "otheruser"

    ranged = client.get("/api/summaries?from=2025-01-05&to=2025-01-06", headers=admin_headers).get_json()
    assert len(ranged) == 2


def test_partial_update(client, user_headers):
    summary = create(client, user_headers, summary_payload()).get_json()
    url = f"/api/summaries/{summary['_id']}"

    response = client.patch(url, json={"novedades": "Cambio de filtro en la bomba 2."}, headers=user_headers)
    assert response.status_code == 200
    data = response.get_json()
    assert data["novedades"] == "Cambio de filtro en la bomba 2."
    assert data["area"] == "Calderas"

    assert client.patch(url, json={}, headers=user_headers).status_code == 400
    assert client.patch(url, json={"area": "x"}, headers=user_headers).status_code == 400


def test_summary_access_control(client, auth_headers, user_headers, admin_headers, seed_other_user):
    summary = create(client, user_headers, summary_payload()).get_json()
    url = f"/api/summaries/{summary['_id']}"
    other = auth_headers(seed_other_user)

    assert client.get(url, headers=other).status_code == 403
    assert client.patch(url, json={"area": "Otra"}, headers=other).status_code == 403
    assert client.delete(url, headers=other).status_code == 403

    assert client.get(url, headers=admin_headers).status_code == 200
    assert client.delete(url, headers=user_headers).status_code == 200
    assert client.get(url, headers=user_headers).status_code == 404
