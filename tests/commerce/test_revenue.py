from datetime import UTC, datetime
from types import SimpleNamespace

import pytest

from app.commerce.services.revenue import (
    PaidOrder,
    calculate_fee,
    estimate_course_revenue,
    monthly_totals,
    revenue_since,
    summarize_orders,
)

NOW = datetime(2026, 3, 15, 12, 0)


def paid(order_id: str, course_id: str, amount: int, created_at: datetime) -> PaidOrder:
    return PaidOrder(
        id=order_id,
        order_number=f"LVUP-{order_id}",
        course_id=course_id,
        course_title=f"강의 {course_id}",
        amount=amount,
        created_at=created_at,
        buyer_name="김수강",
    )


@pytest.fixture
def orders():
    return [
        paid("a", "c1", 30000, datetime(2026, 3, 10)),
        paid("b", "c1", 50000, datetime(2026, 2, 20)),
        paid("c", "c2", 20000, datetime(2026, 1, 5)),
    ]


class TestCalculateFee:
    def test_default_rate_is_twenty_percent(self):
        split = calculate_fee(50000)

        assert split.fee == pytest.approx(10000.0)
        assert split.net == pytest.approx(40000.0)

    def test_fee_is_not_rounded_to_won(self):
        split = calculate_fee(999)

        assert split.fee == pytest.approx(199.8)
        assert split.net == pytest.approx(799.2)

    def test_rate_override(self):
        assert calculate_fee(10000, rate=0.1).fee == pytest.approx(1000.0)


class TestAggregations:
    def test_monthly_totals_newest_first(self, orders):
        totals = monthly_totals(orders)

        assert list(totals) == ["2026-03", "2026-02", "2026-01"]
        assert totals["2026-02"] == 50000

    def test_revenue_since_accepts_aware_datetimes(self, orders):
        since = datetime(2026, 2, 13, tzinfo=UTC)

        assert revenue_since(orders, since) == 80000

    def test_estimate_course_revenue(self):
        courses = [
            SimpleNamespace(price=50000, enrollment_count=3),
            SimpleNamespace(price=0, enrollment_count=100),
        ]

        assert estimate_course_revenue(courses) == 150000


class TestSummarizeOrders:
    def test_should_roll_up_totals(self, orders):
        summary = summarize_orders(orders, now=NOW)

        assert summary.total_revenue == 100000
        assert summary.platform_fee == pytest.approx(20000.0)
        assert summary.net_revenue == pytest.approx(80000.0)
        assert summary.this_month_revenue == 30000
        assert summary.last_30_days_revenue == 80000

    def test_should_break_down_by_course(self, orders):
        summary = summarize_orders(orders, now=NOW)

        assert [c.course_id for c in summary.courses] == ["c1", "c2"]
        top = summary.courses[0]
        assert (top.revenue, top.count, top.average) == (80000, 2, 40000)

    def test_should_keep_order_rows_in_input_order(self, orders):
        rows = summarize_orders(orders, now=NOW).orders

        assert [r.order_id for r in rows] == ["a", "b", "c"]
        assert rows[0].fee == pytest.approx(6000.0)
        assert rows[0].buyer_name == "김수강"

    def test_empty(self):
        summary = summarize_orders([], now=NOW)

        assert summary.total_revenue == 0
        assert summary.monthly_revenue == {}
        assert summary.courses == []
