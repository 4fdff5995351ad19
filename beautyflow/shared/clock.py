"""Time-of-day and calendar helpers shared by scheduling, dashboard and financials"""

from datetime import date, datetime
from typing import Optional

MINUTES_PER_DAY = 24 * 60

# pt-BR short month labels, as the dashboard and cash-flow chart display them
MONTH_ABBREVIATIONS = [
    "jan", "fev", "mar", "abr", "mai", "jun",
    "jul", "ago", "set", "out", "nov", "dez",
]


def parse_hhmm(value: Optional[str]) -> Optional[int]:
    """Parse "HH:MM" into minutes since midnight. Returns None when unparsable."""
    if not value or ":" not in value:
        return None
    hours, _, minutes = value.strip().partition(":")
    try:
        h = int(hours)
        m = int(minutes[:2])
    except ValueError:
        return None
    if h < 0 or h > 23 or m < 0 or m > 59:
        return None
    return h * 60 + m


def format_hhmm(minutes: int) -> str:
    """Format minutes since midnight as "HH:MM", wrapping on the 24h clock"""
    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def add_minutes(start: str, duration: int) -> Optional[str]:
    """
    Wall-clock addition: "23:30" + 60 -> "00:30".
    Crossing midnight is not rejected; the day rollover is simply dropped.
    """
    start_minutes = parse_hhmm(start)
    if start_minutes is None:
        return None
    return format_hhmm(start_minutes + duration)


def parse_date(value) -> Optional[date]:
    """Calendar date from 'YYYY-MM-DD' or an ISO timestamp (date component only)"""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def month_label(day: date) -> str:
    return MONTH_ABBREVIATIONS[day.month - 1]


def quarter_of(day: date) -> int:
    return (day.month - 1) // 3
