"""
Turns a date, a 12-hour time selection and a set of services into an
absolute appointment interval.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Tuple, Union

import pendulum
from pendulum import DateTime

from .booking_window import DateLike, coerce_date
from .catalog import DEFAULT_CATALOG, DurationCatalog, ServiceOption
from .exceptions import ParseError

_TIME_OF_DAY = re.compile(r"^(?P<hour>[^:\s]+):(?P<minute>[^:\s]+)\s+(?P<period>\S+)$")


def parse_time_of_day(text: str) -> Tuple[int, int]:
    """
    Parse a ``"HH:MM AM"`` style selection into a 24-hour (hour, minute) pair.

    12 AM is midnight and 12 PM is noon.

    Raises:
        ParseError: If the text is not a valid 12-hour time with an AM/PM period
    """
    match = _TIME_OF_DAY.match((text or "").strip())
    if not match:
        raise ParseError(f"Invalid time '{text}'. Expected format like '09:00 AM'.")

    hour_text, minute_text = match.group("hour"), match.group("minute")
    if not (hour_text.isdecimal() and minute_text.isdecimal()):
        raise ParseError(f"Invalid time '{text}': hour and minute must be numeric.")

    period = match.group("period").upper()
    if period not in ("AM", "PM"):
        raise ParseError(f"Invalid time '{text}': period must be AM or PM.")

    hour, minute = int(hour_text), int(minute_text)
    if not 1 <= hour <= 12:
        raise ParseError(f"Invalid time '{text}': hour must be between 1 and 12.")
    if not 0 <= minute <= 59:
        raise ParseError(f"Invalid time '{text}': minute must be between 0 and 59.")

    if period == "PM" and hour != 12:
        hour += 12
    elif period == "AM" and hour == 12:
        hour = 0

    return hour, minute


@dataclass(frozen=True)
class AppointmentInterval:
    """
    Absolute start/end of an appointment covering all selected services.

    Invariant: start is not after end. A zero-length interval is allowed
    when no services are selected.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Start time {self.start} must not be after end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def __str__(self) -> str:
        return f"{self.start.format('YYYY-MM-DD HH:mm')} - {self.end.format('HH:mm')}"


class IntervalComposer:
    """
    Composes the interval for a booking.

    Services are placed back to back starting at the selected time. No check
    is made against business hours or midnight; the availability provider only
    offers start times that fit.
    """

    def __init__(self, catalog: DurationCatalog = DEFAULT_CATALOG, timezone: str = "UTC"):
        self.catalog = catalog
        self.timezone = timezone

    def compose(
        self,
        date: DateLike,
        time_of_day: str,
        service_ids: Iterable[Union[ServiceOption, str]],
    ) -> AppointmentInterval:
        """
        Build the absolute interval for a booking.

        Args:
            date: Calendar date of the appointment
            time_of_day: Selected start time, e.g. "10:15 AM"
            service_ids: Selected services, in any order

        Returns:
            AppointmentInterval with seconds set to zero

        Raises:
            ParseError: If the time of day is malformed
            UnknownServiceError: If a service id has no duration
        """
        day = coerce_date(date)
        hour, minute = parse_time_of_day(time_of_day)
        total_minutes = self.catalog.total_minutes(service_ids)

        start = pendulum.datetime(
            day.year, day.month, day.day,
            hour, minute, 0,
            tz=self.timezone,
        )
        end = start.add(minutes=total_minutes)

        return AppointmentInterval(start=start, end=end)
