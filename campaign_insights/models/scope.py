"""Request-side value types: credentials, date windows and cache scopes."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone

from ..exceptions import ValidationError


@dataclass(frozen=True)
class Credentials:
    """API key and data-center prefix for one Mailchimp account."""

    api_key: str
    server: str = "us19"

    @property
    def base_url(self) -> str:
        return f"https://{self.server}.api.mailchimp.com/3.0"

    def __repr__(self) -> str:
        return f"Credentials(api_key='***', server={self.server!r})"


def as_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime. Naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class DateRange:
    """Inclusive send-time window, both bounds in UTC.

    Raises:
        ValidationError: If start is after end
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", as_utc(self.start))
        object.__setattr__(self, "end", as_utc(self.end))
        if self.start > self.end:
            raise ValidationError(
                f"Invalid date range: start {self.start.isoformat()} "
                f"is after end {self.end.isoformat()}"
            )

    @classmethod
    def from_dates(cls, start: date, end: date) -> "DateRange":
        """Whole-day window: start of `start` through the last instant of `end`."""
        return cls(
            start=datetime.combine(start, time.min, tzinfo=timezone.utc),
            end=datetime.combine(end, time.max, tzinfo=timezone.utc),
        )

    @classmethod
    def last_days(cls, days: int, now: datetime | None = None) -> "DateRange":
        """Window covering the `days` days before `now`."""
        if days < 0:
            raise ValidationError(f"days must be non-negative, got {days}")
        end = as_utc(now or datetime.now(timezone.utc))
        return cls(start=end - timedelta(days=days), end=end)

    def contains(self, moment: datetime) -> bool:
        return self.start <= as_utc(moment) <= self.end


@dataclass(frozen=True)
class Scope:
    """Account plus optional audience list; the unit of caching."""

    account_key: str
    list_id: str | None = None
