"""Display helpers for commit items."""

from datetime import UTC, datetime

from app.services.github.types import CommitRecord

SHORT_SHA_LENGTH = 7


def first_line(message: str) -> str:
    return message.split("\n", 1)[0]


def short_sha(sha: str) -> str:
    return sha[:SHORT_SHA_LENGTH]


def author_display_name(commit: CommitRecord) -> str:
    """Commit author name, else the linked account login, else "Unknown"."""
    if commit.author_name:
        return commit.author_name
    if commit.account:
        return commit.account.login
    return "Unknown"


def _parse_iso(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def relative_time(iso: str, now: datetime | None = None) -> str:
    """
    Render an ISO 8601 timestamp relative to now ("5 minutes ago", "in 2 hours").

    Unparseable values are returned unchanged.
    """
    try:
        then = _parse_iso(iso)
    except ValueError:
        return iso

    now = now or datetime.now(UTC)
    seconds = int((now - then).total_seconds())
    future = seconds < 0
    seconds = abs(seconds)

    if seconds < 45:
        return "just now"

    minutes = round(seconds / 60)
    hours = round(seconds / 3600)
    days = round(seconds / 86400)
    if minutes < 45:
        text = _plural(max(minutes, 1), "minute")
    elif hours < 24:
        text = _plural(max(hours, 1), "hour")
    elif days < 30:
        text = _plural(days, "day")
    elif days < 365:
        text = _plural(round(days / 30), "month")
    else:
        text = _plural(round(days / 365), "year")

    return f"in {text}" if future else f"{text} ago"
