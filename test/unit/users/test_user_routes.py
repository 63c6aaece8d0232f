from conftest import PASSWORD


def test_update_own_profile(client, user_headers):
    response = client.patch(
        "/api/users/me", json={"fullName": "Nombre Nuevo", "photoUrl": "https://img.example/a.png"},
        headers=user_headers,
    )
    assert response.status_code == 200
    assert response.get_json()["fullName"] == "Nombre Nuevo"
    assert response.get_json()["photoUrl"] == "https://img.example/a.png"


def test_update_own_profile_validation(client, user_headers):
    assert client.patch("/api/users/me", json={"photoUrl": "ftp://x"}, headers=user_headers).status_code == 400
    assert client.patch("/api/users/me", json={"fullName": "ab"}, headers=user_headers).status_code == 400
    assert client.patch("/api/users/me", json={}, headers=user_headers).status_code == 400


def test_change_own_password(client, user_headers):
    wrong = client.patch(
        "/api/users/me/password", json={"currentPassword": "incorrecta", "newPassword": "nuevaclave"},
        headers=user_headers,
    )
    assert wrong.status_code == 401

    ok = client.patch(
        "/api/users/me/password", json={"currentPassword": PASSWORD, "newPassword": "nuevaclave"},
        headers=user_headers,
    )
    assert ok.status_code == 200

    login = client.post("/api/auth/login", json={"username": "testuser", "password": "nuevaclave"})
    assert login.status_code == 200


def test_get_user_self_or_admin(client, user_headers, admin_headers, seed_test_user, seed_test_admin):
    assert client.get(f"/api/users/{seed_test_user.id}", headers=user_headers).status_code == 200
    assert client.get(f"/api/users/{seed_test_admin.id}", headers=user_headers).status_code == 403
    assert client.get(f"/api/users/{seed_test_user.id}", headers=admin_headers).status_code == 200


def test_admin_endpoints_require_admin(client, user_headers):
    assert client.get("/api/users", headers=user_headers).status_code == 403
    assert client.post("/api/users", json={}, headers=user_headers).status_code == 403


def test_admin_lists_and_creates_users(client, admin_headers, seed_test_user):
    """
    GIVEN un administrador
    WHEN crea un usuario y lista
    THEN el nuevo usuario aparece sin hash de contraseña
    """
    created = client.post(
        "/api/users",
        json={"username": "operario", "fullName": "Operario Uno", "password": "secreto1", "role": "user"},
        headers=admin_headers,
    )
    assert created.status_code == 201

    users = client.get("/api/users", headers=admin_headers).get_json()
    assert {u["username"] for u in users} == {"testuser", "admin", "operario"}
    assert users[-1]["username"] == "operario"
    assert all("passHash" not in u for u in users)

    duplicate = client.post(
        "/api/users",
        json={"username": "operario", "fullName": "Otro", "password": "secreto1"},
        headers=admin_headers,
    )
    assert duplicate.status_code == 409


def test_admin_create_rejects_unknown_role(client, admin_headers):
    response = client.post(
        "/api/users",
        json={"username": "operario", "fullName": "Operario Uno", "password": "secreto1", "role": "supervisor"},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert "role" in response.get_json()["details"]


def test_admin_updates_user(client, admin_headers, seed_test_user, make_user):
    make_user("ocupado")
    url = f"/api/users/{seed_test_user.id}"

    taken = client.patch(url, json={"username": "ocupado"}, headers=admin_headers)
    assert taken.status_code == 409

    response = client.patch(url, json={"role": "admin", "fullName": "Test Admin"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.get_json()["role"] == "admin"
    assert response.get_json()["username"] == "testuser"


def test_admin_cannot_demote_or_delete_self(client, admin_headers, seed_test_admin):
    url = f"/api/users/{seed_test_admin.id}"
    assert client.patch(url, json={"role": "user"}, headers=admin_headers).status_code == 400
    assert client.delete(url, headers=admin_headers).status_code == 400


def test_admin_deletes_user(client, admin_headers, seed_test_user):
    url = f"/api/users/{seed_test_user.id}"
    assert client.delete(url, headers=admin_headers).status_code == 200
    assert client.get(url, headers=admin_headers).status_code == 404


def test_deleted_user_token_no_longer_authenticates(client, admin_headers, user_headers, seed_test_user):
    client.delete(f"/api/users/{seed_test_user.id}", headers=admin_headers)
    assert client.get("/api/auth/me", headers=user_headers).status_code == 401


def test_admin_cannot_delete_self_with_uppercase_id(client, admin_headers, seed_test_admin):
    """
    GIVEN un administrador
    WHEN pide borrar su propia cuenta escribiendo el id en mayúsculas
    THEN se rechaza igual que con el id canónico
    """
    response = client.delete(f"/api/users/{seed_test_admin.id.upper()}", headers=admin_headers)
    assert response.status_code == 400
    assert client.get(f"/api/users/{seed_test_admin.id}", headers=admin_headers).status_code == 200
