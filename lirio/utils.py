import re
from datetime import date, datetime, timezone

_DAY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def iso_now() -> str:
    """UTC timestamp with millisecond precision, e.g. 2024-01-05T09:30:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def iso_today() -> str:
    # Calendar day in UTC, matching the day component of iso_now().
    return datetime.now(timezone.utc).date().isoformat()


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts the trailing "Z" form. Naive values are taken as UTC.
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def day_of(timestamp: str) -> str:
    """Calendar day (YYYY-MM-DD, UTC) of an ISO timestamp."""
    return parse_timestamp(timestamp).date().isoformat()


def is_iso_day(value: str) -> bool:
    if not isinstance(value, str) or not _DAY_RE.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True
