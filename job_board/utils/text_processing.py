"""Form text splitting, search patterns and date formatting utilities."""

import re
from datetime import datetime, timezone

REMOTE_LOCATION = "Remote"
ANY_LOCATION = "Anywhere"

_LIKE_SPECIAL = re.compile(r"([\\%_])")


def split_lines(text: str | list | None) -> list[str]:
    """Split a textarea into trimmed, non-blank lines (order kept, duplicates kept).

    A list (JSON clients) is taken as already split and only cleaned.
    """
    if not text:
        return []
    items = text if isinstance(text, list) else text.splitlines()
    return [str(line).strip() for line in items if str(line).strip()]


def split_tags(text: str | list | None) -> list[str]:
    """Split a comma-separated tag field into trimmed, non-blank tags."""
    if not text:
        return []
    items = text if isinstance(text, list) else text.split(",")
    return [str(tag).strip() for tag in items if str(tag).strip()]


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so user input matches literally (escape char is a backslash)."""
    return _LIKE_SPECIAL.sub(r"\\\1", term)


def contains_pattern(term: str) -> str:
    """LIKE pattern matching ``term`` anywhere in a column."""
    return f"%{escape_like(term)}%"


def format_posted_at(created_at: datetime | None, now: datetime | None = None) -> str:
    """Human relative date: Today, Yesterday, N days/weeks/months ago."""
    if created_at is None:
        return ""
    now = now or datetime.now(timezone.utc)
    # SQLite hands back naive datetimes; everything is stored in UTC
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    diff_days = abs(now - created_at).days

    if diff_days == 0:
        return "Today"
    if diff_days == 1:
        return "Yesterday"
    if diff_days < 7:
        return f"{diff_days} days ago"
    if diff_days < 30:
        weeks = diff_days // 7
        return f"{weeks} {'week' if weeks == 1 else 'weeks'} ago"
    months = diff_days // 30
    return f"{months} {'month' if months == 1 else 'months'} ago"
