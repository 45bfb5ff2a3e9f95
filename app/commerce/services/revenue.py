"""Revenue and platform fee arithmetic.

Everything here works on plain values so instructor and admin statistics can
share one implementation of the fee split:

    fee = amount * PLATFORM_FEE_RATE
    net = amount - fee
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

from app.commerce.models.order import Order
from app.commerce.schemas.revenue import (
    CourseRevenue,
    FeeBreakdown,
    RevenueOrderRow,
    RevenueSummary,
)
from app.core.config import settings
from app.core.constants import REVENUE_RECENT_WINDOW_DAYS
from app.core.datetime_utils import month_key, to_naive_utc, utcnow


@dataclass(frozen=True)
class PaidOrder:
    """The slice of a paid order that revenue reporting needs."""

    id: str
    order_number: str
    course_id: str
    course_title: str
    amount: int
    created_at: datetime
    buyer_name: str | None = None
    buyer_email: str | None = None

    @classmethod
    def from_model(cls, order: Order) -> "PaidOrder":
        return cls(
            id=str(order.id),
            order_number=order.order_number,
            course_id=str(order.course_id),
            course_title=order.course.title if order.course else "",
            amount=order.amount,
            created_at=order.created_at,
            buyer_name=order.user.name if order.user else None,
            buyer_email=order.user.email if order.user else None,
        )


class PricedCourse(Protocol):
    price: int
    enrollment_count: int


def calculate_fee(amount: int, rate: float | None = None) -> FeeBreakdown:
    """Split an amount into the platform fee and the instructor's net.

    Args:
        amount: Gross amount in KRW.
        rate: Fee rate; defaults to ``settings.PLATFORM_FEE_RATE``.

    Returns:
        FeeBreakdown with ``fee = amount * rate`` and ``net = amount - fee``.
    """
    if rate is None:
        rate = settings.PLATFORM_FEE_RATE
    fee = amount * rate
    return FeeBreakdown(amount=amount, fee=fee, net=amount - fee)


def monthly_totals(orders: Iterable[PaidOrder]) -> dict[str, int]:
    """Sum amounts per ``YYYY-MM`` of the order's creation time, newest month first."""
    totals: dict[str, int] = {}
    for order in orders:
        key = month_key(order.created_at)
        totals[key] = totals.get(key, 0) + order.amount
    return dict(sorted(totals.items(), reverse=True))


def revenue_since(orders: Iterable[PaidOrder], since: datetime) -> int:
    since = to_naive_utc(since)
    return sum(o.amount for o in orders if to_naive_utc(o.created_at) >= since)


def summarize_orders(
    orders: Sequence[PaidOrder],
    now: datetime | None = None,
    rate: float | None = None,
) -> RevenueSummary:
    """Roll paid orders up into totals, monthly and per-course breakdowns.

    Args:
        orders: Paid orders, in the order the rows should be reported.
        now: Reference time for the current month and the recent window.
        rate: Fee rate override, see calculate_fee.

    Returns:
        RevenueSummary; courses are sorted by revenue, highest first.
    """
    now = to_naive_utc(now) if now is not None else utcnow()

    total = sum(o.amount for o in orders)
    split = calculate_fee(total, rate)
    monthly = monthly_totals(orders)

    per_course: dict[str, CourseRevenue] = {}
    for order in orders:
        entry = per_course.get(order.course_id)
        if entry is None:
            entry = CourseRevenue(
                course_id=order.course_id, title=order.course_title, revenue=0, count=0, average=0
            )
            per_course[order.course_id] = entry
        entry.revenue += order.amount
        entry.count += 1
    for entry in per_course.values():
        entry.average = entry.revenue // entry.count

    rows = []
    for order in orders:
        order_split = calculate_fee(order.amount, rate)
        rows.append(
            RevenueOrderRow(
                order_id=order.id,
                order_number=order.order_number,
                course_id=order.course_id,
                course_title=order.course_title,
                buyer_name=order.buyer_name,
                buyer_email=order.buyer_email,
                amount=order.amount,
                fee=order_split.fee,
                net=order_split.net,
                created_at=order.created_at,
            )
        )

    return RevenueSummary(
        total_revenue=total,
        platform_fee=split.fee,
        net_revenue=split.net,
        this_month_revenue=monthly.get(month_key(now), 0),
        last_30_days_revenue=revenue_since(
            orders, now - timedelta(days=REVENUE_RECENT_WINDOW_DAYS)
        ),
        monthly_revenue=monthly,
        courses=sorted(per_course.values(), key=lambda c: c.revenue, reverse=True),
        orders=rows,
    )


def estimate_course_revenue(courses: Iterable[PricedCourse]) -> int:
    """Gross revenue estimated as price x enrollment_count summed over courses."""
    return sum(c.price * c.enrollment_count for c in courses)
