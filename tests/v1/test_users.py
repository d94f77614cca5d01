"""Tests for handle registration, login and profile endpoints."""

from fastapi import status

from traderfm.models import User


def test_create_handle(client) -> None:
    r = client.post("/api/v1/users/create", json={"handle": "Trader42"})
    assert r.status_code == status.HTTP_201_CREATED
    data = r.json()
    assert data["message"] == "Handle created successfully"
    assert data["handle"] == "trader42"
    assert len(data["secretKey"]) >= 43


def test_create_handle_is_logged(client) -> None:
    client.post("/api/v1/users/create", json={"handle": "loggedone"})
    lines = client.app.state.log_buffer.lines()
    assert any("Created handle loggedone" in line for line in lines)
    assert not any("secret" in line.lower() for line in lines if "loggedone" in line)


def test_create_duplicate_handle_any_case(client, test_user: User) -> None:
    r = client.post("/api/v1/users/create", json={"handle": "ALICE"})
    assert r.status_code == status.HTTP_409_CONFLICT
    assert r.json()["detail"] == "Handle already exists"


def test_create_invalid_handle(client) -> None:
    r = client.post("/api/v1/users/create", json={"handle": "no"})
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    body = r.json()
    assert body["detail"] == "Validation failed"
    assert body["errors"] == ["Handle must be between 3 and 20 characters"]


def test_create_reserved_handle(client) -> None:
    r = client.post("/api/v1/users/create", json={"handle": "support"})
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json()["errors"] == ["This handle is reserved"]


def test_create_missing_body_field(client) -> None:
    r = client.post("/api/v1/users/create", json={})
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    body = r.json()
    assert body["detail"] == "Validation failed"
    assert body["errors"]


def test_auth_with_secret_key(client) -> None:
    created = client.post("/api/v1/users/create", json={"handle": "dana"}).json()
    r = client.post(
        "/api/v1/users/auth",
        json={"handle": "DANA", "secretKey": created["secretKey"]},
    )
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["message"] == "Authentication successful"
    assert data["handle"] == "dana"
    assert data["authType"] == "secret_key"
    assert data["tokenType"] == "bearer"

    inbox = client.get(
        "/api/v1/questions/dana/unanswered",
        headers={"Authorization": f"Bearer {data['token']}"},
    )
    assert inbox.status_code == status.HTTP_200_OK


def test_auth_wrong_secret(client, test_user: User) -> None:
    r = client.post("/api/v1/users/auth", json={"handle": "alice", "secretKey": "guess"})
    assert r.status_code == status.HTTP_401_UNAUTHORIZED
    assert r.json()["detail"] == "Invalid credentials"


def test_auth_unknown_handle(client) -> None:
    r = client.post("/api/v1/users/auth", json={"handle": "nobody", "secretKey": "guess"})
    assert r.status_code == status.HTTP_401_UNAUTHORIZED
    assert r.json()["detail"] == "Invalid credentials"


def test_check_handle(client, test_user: User, make_answer) -> None:
    make_answer(test_user)
    r = client.get("/api/v1/users/check/Alice")
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["exists"] is True
    assert data["handle"] == "alice"
    assert data["authType"] == "secret_key"
    assert data["answerCount"] == 1
    assert "createdAt" in data
    assert "secretKeyHash" not in data
    assert "id" not in data


def test_check_unknown_handle(client) -> None:
    r = client.get("/api/v1/users/check/nobody")
    assert r.status_code == status.HTTP_404_NOT_FOUND
    assert r.json()["detail"] == "Handle not found"


def test_directory(client, test_user: User, other_user: User, external_user: User) -> None:
    r = client.get("/api/v1/users/directory")
    assert r.status_code == status.HTTP_200_OK
    users = r.json()["users"]
    assert [u["handle"] for u in users] == [external_user.handle, "bob", "alice"]
    external = users[0]
    assert external["authType"] == "external"
    assert external["displayName"] == "Carol"
    assert external["profileImageUrl"] == "https://images.example/carol.png"
