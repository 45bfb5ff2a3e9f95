import pytest

from app.auth.models.user import UserStatus
from app.core import redis as redis_module
from app.core.security import hash_token
from tests.utils.factories import create_user_factory
from tests.utils.helpers import (
    API,
    assert_error_response,
    assert_token_response_valid,
    create_auth_headers,
    decode_jwt_token,
)


class TestSignupEndpoint:
    @pytest.mark.asyncio
    async def test_should_create_student_and_return_tokens(self, test_client):
        payload = {"email": "New.User@Example.com", "password": "secret123", "name": "홍길동"}

        response = await test_client.post(f"{API}/auth/signup", json=payload)

        assert response.status_code == 201
        data = response.json()
        assert_token_response_valid(data)
        assert data["user"]["email"] == "new.user@example.com"
        assert data["user"]["role"] == "STUDENT"
        assert data["user"]["user_type"] == "TRAINER"
        assert data["user"]["nickname"].startswith("홍길동")
        assert len(data["user"]["nickname"]) == len("홍길동") + 4

    @pytest.mark.asyncio
    async def test_should_return_409_when_email_taken(self, test_client, test_user):
        payload = {"email": test_user.email, "password": "secret123", "name": "홍길동"}

        response = await test_client.post(f"{API}/auth/signup", json=payload)

        assert response.status_code == 409
        assert_error_response(response.json(), "CONFLICT")

    @pytest.mark.asyncio
    async def test_should_return_422_when_password_too_short(self, test_client):
        payload = {"email": "short@example.com", "password": "123", "name": "홍길동"}

        response = await test_client.post(f"{API}/auth/signup", json=payload)

        assert response.status_code == 422


class TestSigninEndpoint:
    @pytest.mark.asyncio
    async def test_should_return_tokens_when_valid_credentials(self, test_client, test_user):
        payload = {"email": test_user.email, "password": "testpass123"}

        response = await test_client.post(f"{API}/auth/signin", json=payload)

        assert response.status_code == 200
        data = response.json()
        assert_token_response_valid(data)
        assert data["user"]["id"] == str(test_user.id)
        assert data["user"]["last_login_at"] is not None

        claims = decode_jwt_token(data["access_token"])
        assert claims["sub"] == str(test_user.id)
        assert claims["type"] == "access"

        token_data = await redis_module.get_refresh_token(hash_token(data["refresh_token"]))
        assert token_data is not None
        assert token_data["user_id"] == str(test_user.id)

    @pytest.mark.asyncio
    async def test_should_return_401_when_password_incorrect(self, test_client, test_user):
        payload = {"email": test_user.email, "password": "wrongpassword"}

        response = await test_client.post(f"{API}/auth/signin", json=payload)

        assert response.status_code == 401
        assert_error_response(response.json(), "UNAUTHORIZED")

    @pytest.mark.asyncio
    async def test_should_return_401_when_email_not_found(self, test_client):
        payload = {"email": "nobody@example.com", "password": "testpass123"}

        response = await test_client.post(f"{API}/auth/signin", json=payload)

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_should_return_401_when_user_suspended(self, test_client, db_session):
        user = create_user_factory(
            db_session, email="suspended@example.com", status=UserStatus.SUSPENDED
        )

        payload = {"email": user.email, "password": "testpass123"}
        response = await test_client.post(f"{API}/auth/signin", json=payload)

        assert response.status_code == 401


class TestRefreshEndpoint:
    @pytest.mark.asyncio
    async def test_should_rotate_refresh_token(self, test_client, test_refresh_token):
        response = await test_client.post(
            f"{API}/auth/refresh", json={"refresh_token": test_refresh_token}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["access_token"]
        assert data["refresh_token"] != test_refresh_token

        assert await redis_module.get_refresh_token(hash_token(test_refresh_token)) is None
        assert await redis_module.get_refresh_token(hash_token(data["refresh_token"])) is not None

    @pytest.mark.asyncio
    async def test_should_reject_reused_refresh_token(self, test_client, test_refresh_token):
        first = await test_client.post(
            f"{API}/auth/refresh", json={"refresh_token": test_refresh_token}
        )
        assert first.status_code == 200

        second = await test_client.post(
            f"{API}/auth/refresh", json={"refresh_token": test_refresh_token}
        )

        assert second.status_code == 401

    @pytest.mark.asyncio
    async def test_should_reject_access_token_as_refresh(self, test_client, test_user_token):
        response = await test_client.post(
            f"{API}/auth/refresh", json={"refresh_token": test_user_token}
        )

        assert response.status_code == 401
        assert "detail" in response.json()


class TestLogoutAndMe:
    @pytest.mark.asyncio
    async def test_logout_revokes_every_refresh_token(
        self, test_client, test_user_token, test_refresh_token
    ):
        response = await test_client.post(
            f"{API}/auth/logout", headers=create_auth_headers(test_user_token)
        )

        assert response.status_code == 200
        assert await redis_module.get_refresh_token(hash_token(test_refresh_token)) is None

    @pytest.mark.asyncio
    async def test_me_returns_current_user(self, test_client, test_user, test_user_token):
        response = await test_client.get(
            f"{API}/auth/me", headers=create_auth_headers(test_user_token)
        )

        assert response.status_code == 200
        assert response.json()["email"] == test_user.email

    @pytest.mark.asyncio
    async def test_me_requires_token(self, test_client):
        response = await test_client.get(f"{API}/auth/me")

        assert response.status_code == 401
        assert response.json()["detail"]

    @pytest.mark.asyncio
    async def test_me_rejects_garbage_token(self, test_client):
        response = await test_client.get(
            f"{API}/auth/me", headers=create_auth_headers("not-a-jwt")
        )

        assert response.status_code == 401
