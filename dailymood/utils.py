from datetime import date, datetime, timezone, timedelta
from decimal import Decimal, ROUND_HALF_UP

# Python weekday() numbering: 0=Mon .. 6=Sun
WEEK_START = 6


def to_utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Clock:
    """Source of "now" for date keys and streaks. Dates are UTC calendar dates."""

    def now(self) -> datetime:
        return to_utc_now()

    def today(self) -> date:
        return self.now().date()


class FixedClock(Clock):
    def __init__(self, at: datetime | date):
        if not isinstance(at, datetime):
            at = datetime(at.year, at.month, at.day, 12, 0, tzinfo=timezone.utc)
        elif at.tzinfo is None:
            at = at.replace(tzinfo=timezone.utc)
        self._at = at.astimezone(timezone.utc)

    def now(self) -> datetime:
        return self._at


def start_of_week(d: date, week_start: int = WEEK_START) -> date:
    dow = (d.weekday() - week_start) % 7
    return d - timedelta(days=dow)


def parse_date_key(value: str | date) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def date_key(d: date) -> str:
    return d.isoformat()


def short_label(d: date) -> str:
    """'Oct 19' style axis label."""
    return f"{d:%b} {d.day}"


def round_half_up(value: float, places: int = 1) -> float:
    """Round half away from zero (2.25 -> 2.3, -0.05 -> -0.1)."""
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    # + 0.0 folds -0.0 into 0.0
    return float(rounded) + 0.0
