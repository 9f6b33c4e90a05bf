"""
Booking window rules: which calendar dates may be booked.
"""

import datetime as dt
from dataclasses import dataclass
from typing import Optional, Union

import pendulum
from pendulum import Date, DateTime

from .exceptions import BookingWindowError, ValidationError

DateLike = Union[Date, dt.date, str]

SUNDAY_REASON = "Appointments cannot be booked on Sundays."
PAST_REASON = "Appointments cannot be booked in the past."


def coerce_date(value: DateLike) -> Date:
    """
    Convert a date-like value to a pendulum Date.

    Accepts pendulum/stdlib dates and datetimes (the time part is dropped)
    and ISO ``YYYY-MM-DD`` strings.

    Raises:
        ValidationError: If a string cannot be parsed as a calendar date
    """
    if isinstance(value, str):
        try:
            parsed = pendulum.parse(value.strip(), exact=True)
        except ValueError as exc:
            raise ValidationError(f"Invalid date '{value}'. Use YYYY-MM-DD.") from exc
        if isinstance(parsed, DateTime):
            return parsed.date()
        if isinstance(parsed, Date):
            return parsed
        raise ValidationError(f"Invalid date '{value}'. Use YYYY-MM-DD.")

    if isinstance(value, dt.date):
        return pendulum.date(value.year, value.month, value.day)

    raise ValidationError(f"Unsupported date value: {value!r}")


@dataclass(frozen=True)
class DateValidation:
    """Outcome of checking a candidate date against the booking window."""
    accepted: bool
    date: Optional[Date] = None
    reason: str = ""

    def __bool__(self) -> bool:
        return self.accepted


class BookingWindowValidator:
    """
    Enforces which calendar dates are legal to book.

    A date is bookable when it lies within [today, today + window_days]
    inclusive and is not a Sunday. Same-day bookings are allowed.
    """

    def __init__(self, window_days: int = 7, timezone: str = "UTC"):
        if window_days < 0:
            raise ValueError("window_days must not be negative")
        self.window_days = window_days
        self.timezone = timezone

    @property
    def beyond_window_reason(self) -> str:
        return f"Appointments can only be booked up to {self.window_days} days in advance."

    def today(self) -> Date:
        return pendulum.today(self.timezone).date()

    def last_bookable_day(self, today: Optional[Date] = None) -> Date:
        return (today or self.today()).add(days=self.window_days)

    def validate(self, candidate: DateLike, today: Optional[DateLike] = None) -> DateValidation:
        """
        Check a candidate date.

        Args:
            candidate: The date the user picked
            today: Reference day, defaults to today in the configured timezone

        Returns:
            DateValidation, rejected with a user-facing reason if not bookable
        """
        try:
            date = coerce_date(candidate)
        except ValidationError as exc:
            return DateValidation(accepted=False, reason=str(exc))

        reference = coerce_date(today) if today is not None else self.today()

        if date.day_of_week == pendulum.SUNDAY:
            return DateValidation(accepted=False, date=date, reason=SUNDAY_REASON)
        if date < reference:
            return DateValidation(accepted=False, date=date, reason=PAST_REASON)
        if date > self.last_bookable_day(reference):
            return DateValidation(accepted=False, date=date, reason=self.beyond_window_reason)

        return DateValidation(accepted=True, date=date)

    def ensure_valid(self, candidate: DateLike, today: Optional[DateLike] = None) -> Date:
        """Like validate(), but raise BookingWindowError on rejection."""
        result = self.validate(candidate, today=today)
        if not result.accepted:
            raise BookingWindowError(result.reason)
        return result.date  # type: ignore[return-value]
