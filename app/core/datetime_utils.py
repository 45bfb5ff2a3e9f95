from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Annotated

from pydantic.functional_serializers import PlainSerializer


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(UTC).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def month_key(value: datetime) -> str:
    return value.strftime("%Y-%m")


def monthly_counts(timestamps: Iterable[datetime]) -> dict[str, int]:
    """Number of timestamps per ``YYYY-MM``, newest month first."""
    counts: dict[str, int] = {}
    for ts in timestamps:
        key = month_key(ts)
        counts[key] = counts.get(key, 0) + 1
    return dict(sorted(counts.items(), reverse=True))


def _serialize_utc_datetime(v: datetime | None) -> str | None:
    if v is None:
        return None
    if v.tzinfo is None:
        v = v.replace(tzinfo=UTC)
    return v.isoformat()


UTCDatetime = Annotated[datetime, PlainSerializer(_serialize_utc_datetime)]
