from pydantic import BaseModel

from app.core.datetime_utils import UTCDatetime


class FeeBreakdown(BaseModel):
    amount: int
    fee: float
    net: float


class CourseRevenue(BaseModel):
    course_id: str
    title: str
    revenue: int
    count: int
    average: int


class RevenueOrderRow(BaseModel):
    order_id: str
    order_number: str
    course_id: str
    course_title: str
    buyer_name: str | None = None
    buyer_email: str | None = None
    amount: int
    fee: float
    net: float
    created_at: UTCDatetime


class RevenueSummary(BaseModel):
    total_revenue: int
    platform_fee: float
    net_revenue: float
    this_month_revenue: int
    last_30_days_revenue: int
    monthly_revenue: dict[str, int]
    courses: list[CourseRevenue]
    orders: list[RevenueOrderRow]
