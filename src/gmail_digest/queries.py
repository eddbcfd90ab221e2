"""Gmail search queries used by the digests."""

from __future__ import annotations

from datetime import datetime, timedelta

from .constants import EXCLUDED_CATEGORIES, EXCLUDED_LABELS, QUERY_DATE_FORMAT, RECENT_DAYS


def _after(day: datetime) -> str:
    return f"after:{day.strftime(QUERY_DATE_FORMAT)}"


def today_query(now: datetime | None = None) -> str:
    """Messages received since local midnight, e.g. ``after:2024/05/01``."""
    now = now or datetime.now()
    return _after(now)


def recent_non_subscription_query(now: datetime | None = None) -> str:
    """Messages from the last RECENT_DAYS days, minus bulk categories and labels."""
    now = now or datetime.now()
    parts = [
        _after(now - timedelta(days=RECENT_DAYS)),
        "-category:{" + " ".join(EXCLUDED_CATEGORIES) + "}",
    ]
    parts.extend(f"-label:{label}" for label in EXCLUDED_LABELS)
    return " ".join(parts)
