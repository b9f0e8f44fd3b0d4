"""
Tests for the auth API endpoints (/api/v2/auth).
"""
import pytest
from datetime import timedelta
from httpx import AsyncClient
from jose import jwt

from finishing_touch.api.deps import create_access_token, get_password_hash, verify_password
from finishing_touch.config import settings
from finishing_touch.models.user import User

AUTH_PREFIX = "/api/v2/auth"


class TestPasswordHashing:
    def test_hash_roundtrip(self):
        hashed = get_password_hash("Password123!")
        assert hashed != "Password123!"
        assert verify_password("Password123!", hashed)
        assert not verify_password("wrong-password", hashed)


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_success(self, client: AsyncClient, test_user: User):
        response = await client.post(
            f"{AUTH_PREFIX}/login",
            json={"email": "test@example.com", "password": "testpassword123"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert response.headers["set-cookie"].startswith("session=")

        payload = jwt.decode(data["access_token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        assert payload["sub"] == test_user.id
        assert payload["email"] == "test@example.com"
        assert payload["role"] == "ADMIN"
        assert data["user"]["email"] == "test@example.com"

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient, test_user: User):
        response = await client.post(
            f"{AUTH_PREFIX}/login",
            json={"email": "test@example.com", "password": "not-the-password"},
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Incorrect email or password"

    @pytest.mark.asyncio
    async def test_login_unknown_user(self, client: AsyncClient, test_user: User):
        response = await client.post(
            f"{AUTH_PREFIX}/login",
            json={"email": "nobody@example.com", "password": "testpassword123"},
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_login_validation(self, client: AsyncClient):
        response = await client.post(
            f"{AUTH_PREFIX}/login",
            json={"email": "not-an-email", "password": "short"},
        )
        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "VAL_001"
        fields = {error["field"] for error in body["errors"]}
        assert {"body.email", "body.password"} <= fields

    @pytest.mark.asyncio
    async def test_login_disabled_account(self, client: AsyncClient, test_user: User, test_db):
        test_user.is_active = False
        await test_db.commit()

        response = await client.post(
            f"{AUTH_PREFIX}/login",
            json={"email": "test@example.com", "password": "testpassword123"},
        )
        assert response.status_code == 403
        assert response.json()["code"] == "AUTH_002"


class TestCurrentUser:
    @pytest.mark.asyncio
    async def test_me(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get(f"{AUTH_PREFIX}/me")

        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "test@example.com"
        assert data["role"] == "ADMIN"
        assert data["is_active"] is True

    @pytest.mark.asyncio
    async def test_me_without_token(self, client: AsyncClient):
        response = await client.get(f"{AUTH_PREFIX}/me")
        assert response.status_code == 401
        assert response.json()["code"] == "AUTH_001"

    @pytest.mark.asyncio
    async def test_me_with_session_cookie(self, client: AsyncClient, test_user: User):
        token = create_access_token(test_user)
        response = await client.get(f"{AUTH_PREFIX}/me", headers={"Cookie": f"session={token}"})
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_expired_token(self, client: AsyncClient, test_user: User):
        token = create_access_token(test_user, expires_delta=timedelta(minutes=-1))

        response = await client.get(
            f"{AUTH_PREFIX}/me", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_tampered_token(self, client: AsyncClient, test_user: User):
        token = jwt.encode({"sub": test_user.id}, "some-other-key", algorithm="HS256")

        response = await client.get(
            f"{AUTH_PREFIX}/me", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401


class TestHealth:
    @pytest.mark.asyncio
    async def test_health_is_public(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Request-ID" in response.headers

    @pytest.mark.asyncio
    async def test_correlation_id_echoed(self, client: AsyncClient):
        response = await client.get("/health", headers={"X-Correlation-ID": "abc-123"})
        assert response.headers["X-Correlation-ID"] == "abc-123"

    @pytest.mark.asyncio
    async def test_response_time_header(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.headers["X-Response-Time"].endswith("ms")

    @pytest.mark.asyncio
    async def test_problem_trace_id_matches_request_id(self, client: AsyncClient):
        response = await client.get(f"{AUTH_PREFIX}/me", headers={"X-Request-ID": "req-42"})

        assert response.status_code == 401
        assert response.headers["content-type"].startswith("application/problem+json")
        assert response.json()["trace_id"] == "req-42"
