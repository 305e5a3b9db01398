from conftest import login_headers, register_user


def test_register_login_logout(client):
    data = register_user(client, role="admin", email="Admin@Example.com", name="  Ada Admin ")
    assert data["email"] == "admin@example.com"
    assert data["name"] == "Ada Admin"
    assert data["role"] == "admin"
    assert "hashed_password" not in data

    login_response = client.post(
        "/api/auth/login",
        json={"email": "admin@example.com", "password": "password123", "role": "admin"},
    )
    assert login_response.status_code == 200
    login_data = login_response.json()
    assert login_data["token_type"] == "bearer"
    assert login_data["session_id"]
    headers = {"Authorization": f"Bearer {login_data['access_token']}"}

    me_response = client.get("/api/auth/me", headers=headers)
    assert me_response.status_code == 200
    me_data = me_response.json()
    assert me_data["session_id"] == login_data["session_id"]
    assert me_data["role"] == "admin"
    assert me_data["user"]["email"] == "admin@example.com"

    logout_response = client.post("/api/auth/logout", headers=headers)
    assert logout_response.status_code == 200
    assert logout_response.json()["success"] is True

    # The token outlives the session it names; revoked sessions are rejected.
    assert client.get("/api/auth/me", headers=headers).status_code == 401


def test_duplicate_registration_is_rejected(client):
    register_user(client, role="faculty", email="faculty@example.com")
    response = client.post(
        "/api/auth/register",
        json={"name": "Other", "email": "faculty@example.com", "password": "password123", "role": "faculty"},
    )
    assert response.status_code == 409


def test_login_rejects_wrong_password_and_role(client):
    register_user(client, role="student", email="student@example.com")

    wrong_password = client.post("/api/auth/login", json={"email": "student@example.com", "password": "nope-nope"})
    assert wrong_password.status_code == 401

    wrong_role = client.post(
        "/api/auth/login",
        json={"email": "student@example.com", "password": "password123", "role": "admin"},
    )
    assert wrong_role.status_code == 403


def test_each_login_opens_an_independent_session(client):
    register_user(client, role="admin", email="admin@example.com")
    first = login_headers(client, email="admin@example.com")
    second = login_headers(client, email="admin@example.com")

    assert client.post("/api/auth/logout", headers=first).status_code == 200
    assert client.get("/api/auth/me", headers=first).status_code == 401
    assert client.get("/api/auth/me", headers=second).status_code == 200


def test_invalid_token_is_rejected(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_roles_guard_admin_operations(client, student_headers, faculty_headers):
    for headers in (student_headers, faculty_headers):
        response = client.put("/api/rooms/import", json=[], headers=headers)
        assert response.status_code == 403
        assert response.json()["detail"] == "Insufficient permissions"

    assert client.get("/api/rooms/", headers=student_headers).status_code == 200
