import pytest
from httpx import AsyncClient

from services.user_management.models.users import UserRole
from shared.auth import create_access_token, decode_token, get_password_hash


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    response = await client.get("/api/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "OK"
    assert data["environment"] == "testing"
    assert "X-Request-ID" in response.headers


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(client: AsyncClient):
    response = await client.get("/api/nowhere")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Route /api/nowhere not found"}


@pytest.mark.asyncio
async def test_login_returns_token_with_department(client: AsyncClient, make_user, cse):
    user = await make_user(
        UserRole.TEACHER, cse, email="teacher@example.com", hashed_password=get_password_hash("s3cret-pass")
    )

    response = await client.post("/api/auth/login", json={"email": "teacher@example.com", "password": "s3cret-pass"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["id"] == str(user.id)
    assert data["user"]["role"] == "teacher"
    assert "hashed_password" not in data["user"]

    claims = decode_token(data["token"])
    assert claims["sub"] == "teacher@example.com"
    assert claims["department_id"] == str(cse.id)


@pytest.mark.asyncio
async def test_login_token_grants_scoped_access(client: AsyncClient, make_user, make_section, cse, ece):
    teacher = await make_user(
        UserRole.TEACHER, cse, email="scoped@example.com", hashed_password=get_password_hash("pw-12345")
    )
    await make_section(cse, teacher, name="A")
    await make_section(ece, teacher, name="B")

    login = await client.post("/api/auth/login", json={"email": "scoped@example.com", "password": "pw-12345"})
    token = login.json()["data"]["token"]

    response = await client.get("/api/sections", headers={"Authorization": f"Bearer {token}"})
    assert [s["name"] for s in response.json()["data"]["sections"]] == ["A"]


@pytest.mark.asyncio
async def test_login_rejects_wrong_password(client: AsyncClient, make_user, cse):
    await make_user(UserRole.STUDENT, cse, email="student@example.com", hashed_password=get_password_hash("right"))

    response = await client.post("/api/auth/login", json={"email": "student@example.com", "password": "wrong"})

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid credentials"}


@pytest.mark.asyncio
async def test_login_rejects_inactive_account(client: AsyncClient, make_user, cse):
    await make_user(
        UserRole.STUDENT, cse, email="gone@example.com", hashed_password=get_password_hash("pw"), is_active=False
    )

    response = await client.post("/api/auth/login", json={"email": "gone@example.com", "password": "pw"})

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_invalid_token_is_rejected(client: AsyncClient):
    response = await client.get("/api/sections", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid authentication credentials"


@pytest.mark.asyncio
async def test_token_without_identity_is_rejected(client: AsyncClient):
    token = create_access_token({"sub": "someone@example.com"})

    response = await client.get("/api/sections", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
