"""Digest orchestration - lists messages, fetches headers, groups."""

from __future__ import annotations

from datetime import datetime

from .display import create_progress
from .gmail_client import fetch_message_headers, fetch_subject, list_message_ids
from .models import GroupedReport
from .queries import recent_non_subscription_query, today_query
from .report import group_messages


def list_todays_subjects(service, now: datetime | None = None) -> list[str]:
    """Return the subjects of today's messages in API order."""
    ids = list_message_ids(service, today_query(now))

    subjects: list[str] = []
    with create_progress("Fetching subjects") as progress:
        task = progress.add_task("fetching", total=len(ids))
        for msg_id in ids:
            subjects.append(fetch_subject(service, msg_id))
            progress.advance(task)

    return subjects


def recent_non_subscription_report(service, now: datetime | None = None) -> GroupedReport:
    """Group the last RECENT_DAYS days of non-subscription messages by domain and sender."""
    ids = list_message_ids(service, recent_non_subscription_query(now))

    pairs: list[tuple[str, str]] = []
    with create_progress("Fetching headers") as progress:
        task = progress.add_task("fetching", total=len(ids))
        for msg_id in ids:
            headers = fetch_message_headers(service, msg_id)
            pairs.append((headers.subject, headers.sender))
            progress.advance(task)

    return group_messages(pairs)
