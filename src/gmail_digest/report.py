"""Grouping of messages by sender domain and sender, and report rendering."""

from __future__ import annotations

from typing import Iterable

from .constants import NO_DOMAIN_LABEL
from .models import EmailInfo, GroupedReport


def parse_sender(from_value: str) -> tuple[str, str, str]:
    """Split a From header into (display name, email address, domain).

    Handles formats like:
      "Jane Doe <jane@example.com>" -> ("Jane Doe", "jane@example.com", "example.com")
      "jane@example.com"            -> ("", "jane@example.com", "example.com")
      "malformed"                   -> ("", "malformed", "")

    No validation is done; odd input yields partial or empty fields.
    """
    if "<" in from_value:
        name, _, rest = from_value.partition("<")
        name = name.strip()
        email = rest.strip().removesuffix(">").strip()
    else:
        name = ""
        email = from_value.strip()

    _, at, domain = email.partition("@")
    return name, email, domain if at else ""


def group_messages(messages: Iterable[tuple[str, str]]) -> GroupedReport:
    """Group (subject, From header) pairs by domain, then by From header.

    Messages keep their arrival order within each sender.
    """
    report: GroupedReport = {}
    for subject, from_value in messages:
        name, email, domain = parse_sender(from_value)
        info = EmailInfo(subject=subject, sender_name=name, sender_email=email)
        report.setdefault(domain, {}).setdefault(from_value, []).append(info)
    return report


def render_report(report: GroupedReport) -> str:
    """Render a grouped report as text, domains and senders sorted."""
    blocks: list[str] = []
    for domain in sorted(report):
        senders = report[domain]
        sender_blocks = []
        for from_value in sorted(senders):
            lines = [f"  {from_value}"]
            lines.extend(f"    - {info.subject}" for info in senders[from_value])
            sender_blocks.append("\n".join(lines))
        blocks.append((domain or NO_DOMAIN_LABEL) + "\n" + "\n\n".join(sender_blocks))
    return "\n\n".join(blocks)
