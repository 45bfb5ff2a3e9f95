import re
import uuid

import pytest

from app.commerce.models.cart_item import CartItem
from app.commerce.models.order import Order, OrderStatus
from app.commerce.utils.order_number import generate_order_number
from app.courses.models import Enrollment
from tests.utils.factories import create_enrollment_factory, create_order_factory
from tests.utils.helpers import API, assert_error_response, create_auth_headers


class TestOrderNumber:
    def test_should_match_format(self):
        assert re.match(r"^LVUP-\d{13}-[A-Z0-9]{6}$", generate_order_number())

    def test_should_be_unique_across_calls(self):
        assert len({generate_order_number() for _ in range(50)}) == 50


class TestCreateOrder:
    @pytest.mark.asyncio
    async def test_paid_course_creates_pending_order(
        self, test_client, db_session, paid_course, test_user_token
    ):
        response = await test_client.post(
            f"{API}/orders",
            json={"course_id": str(paid_course.id), "payment_method": "card"},
            headers=create_auth_headers(test_user_token),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["is_free"] is False
        order = data["order"]
        assert order["status"] == "PENDING"
        assert order["amount"] == 89000
        assert order["original_amount"] == 129000
        assert order["discount_amount"] == 40000
        assert order["payment_method"] == "card"
        assert order["paid_at"] is None
        assert order["course"]["title"] == "퍼스널 트레이닝 실전"
        assert db_session.query(Enrollment).count() == 0

    @pytest.mark.asyncio
    async def test_free_course_enrolls_immediately(
        self, test_client, db_session, test_user, free_course, test_user_token
    ):
        db_session.add(CartItem(user_id=test_user.id, course_id=free_course.id))
        db_session.commit()

        response = await test_client.post(
            f"{API}/orders",
            json={"course_id": str(free_course.id)},
            headers=create_auth_headers(test_user_token),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["is_free"] is True
        assert data["order"] is None
        assert data["enrollment_id"]
        assert db_session.query(Order).count() == 0
        assert db_session.query(CartItem).count() == 0
        db_session.refresh(free_course)
        assert free_course.enrollment_count == 1

    @pytest.mark.asyncio
    async def test_should_reject_when_already_enrolled(
        self, test_client, db_session, test_user, paid_course, test_user_token
    ):
        create_enrollment_factory(db_session, test_user, paid_course)

        response = await test_client.post(
            f"{API}/orders",
            json={"course_id": str(paid_course.id)},
            headers=create_auth_headers(test_user_token),
        )

        assert response.status_code == 409
        assert_error_response(response.json(), "CONFLICT")

    @pytest.mark.asyncio
    async def test_should_404_for_unknown_course(self, test_client, test_user_token):
        response = await test_client.post(
            f"{API}/orders",
            json={"course_id": str(uuid.uuid4())},
            headers=create_auth_headers(test_user_token),
        )

        assert response.status_code == 404


class TestReadOrders:
    @pytest.mark.asyncio
    async def test_should_list_own_orders(
        self, test_client, db_session, test_user, test_admin, paid_course, test_user_token
    ):
        mine = create_order_factory(db_session, test_user, paid_course)
        create_order_factory(db_session, test_admin, paid_course)

        response = await test_client.get(
            f"{API}/orders", headers=create_auth_headers(test_user_token)
        )

        assert response.status_code == 200
        assert [o["id"] for o in response.json()] == [str(mine.id)]

    @pytest.mark.asyncio
    async def test_owner_and_admin_can_read_detail(
        self, test_client, db_session, test_user, paid_course, test_user_token, test_admin_token
    ):
        order = create_order_factory(db_session, test_user, paid_course, status=OrderStatus.PAID)

        own = await test_client.get(
            f"{API}/orders/{order.id}", headers=create_auth_headers(test_user_token)
        )
        admin = await test_client.get(
            f"{API}/orders/{order.id}", headers=create_auth_headers(test_admin_token)
        )

        assert own.status_code == 200
        assert own.json()["status"] == "PAID"
        assert own.json()["paid_at"] is not None
        assert admin.status_code == 200

    @pytest.mark.asyncio
    async def test_other_user_is_forbidden(
        self, test_client, db_session, test_admin, paid_course, test_user_token
    ):
        order = create_order_factory(db_session, test_admin, paid_course)

        response = await test_client.get(
            f"{API}/orders/{order.id}", headers=create_auth_headers(test_user_token)
        )

        assert response.status_code == 403
        assert_error_response(response.json(), "FORBIDDEN")

    @pytest.mark.asyncio
    async def test_unknown_order_is_404(self, test_client, test_user_token):
        response = await test_client.get(
            f"{API}/orders/{uuid.uuid4()}", headers=create_auth_headers(test_user_token)
        )

        assert response.status_code == 404
