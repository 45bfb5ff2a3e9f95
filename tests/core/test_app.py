import pytest
from fastapi import APIRouter, FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import AppError, ForbiddenError, NotFoundError, register_exception_handlers
from app.main import app


class TestRoot:
    @pytest.mark.asyncio
    async def test_root(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert response.json()["message"] == "LVUP EDU API"


class TestExceptionHandlers:
    @pytest.fixture
    def failing_client(self):
        router = APIRouter()

        @router.get("/missing")
        async def missing():
            raise NotFoundError("강의를 찾을 수 없습니다.", resource="course")

        @router.get("/duplicate")
        async def duplicate():
            raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: users.email"))

        local_app = FastAPI()
        register_exception_handlers(local_app)
        local_app.include_router(router)
        return AsyncClient(transport=ASGITransport(app=local_app), base_url="http://test")

    @pytest.mark.asyncio
    async def test_app_error_envelope(self, failing_client):
        async with failing_client as client:
            response = await client.get("/missing")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": {
                "code": "NOT_FOUND",
                "message": "강의를 찾을 수 없습니다.",
                "details": {"resource": "course"},
            },
        }

    @pytest.mark.asyncio
    async def test_integrity_error_becomes_conflict(self, failing_client):
        async with failing_client as client:
            response = await client.get("/duplicate")

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONFLICT"

    def test_main_app_registers_handlers(self):
        assert AppError in app.exception_handlers
        assert IntegrityError in app.exception_handlers

    def test_default_message_and_status_follow_error_type(self):
        exc = ForbiddenError()

        assert exc.status_code == 403
        assert exc.message == "접근 권한이 없습니다."
        assert exc.details == {}
