"""
In-memory stand-ins for the availability provider and persistence service.

Used by the CLI ``--mock`` mode and by tests, without any HTTP server.
"""

from typing import Any, Dict, Iterable, List, Tuple, Union

import pendulum
from pendulum import DateTime

from ..domain.booking_window import DateLike, coerce_date
from ..domain.catalog import DEFAULT_CATALOG, DurationCatalog, ServiceOption
from ..domain.interval import AppointmentInterval


class MockBookingStore:
    """
    Mock persistence service keeping bookings in a list.

    Rejects a booking with ``{"error": "slot taken"}`` when it overlaps an
    existing one, mirroring what the real service answers.
    """

    def __init__(self, timezone: str = "UTC"):
        self.timezone = timezone
        self.bookings: List[Dict[str, Any]] = []

    def booked_intervals(self) -> List[AppointmentInterval]:
        return [
            AppointmentInterval(
                start=self._parse(booking["time"]),
                end=self._parse(booking["end_time"]),
            )
            for booking in self.bookings
        ]

    async def book_appointment(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            requested = AppointmentInterval(
                start=self._parse(payload["time"]),
                end=self._parse(payload["end_time"]),
            )
        except (KeyError, ValueError) as exc:
            return {"error": f"invalid booking payload: {exc}"}

        for booked in self.booked_intervals():
            if requested.start < booked.end and requested.end > booked.start:
                return {"error": "slot taken"}

        self.bookings.append(dict(payload))
        return {"success": True}

    def _parse(self, value: str) -> DateTime:
        parsed = pendulum.parse(value, tz=self.timezone)
        if not isinstance(parsed, DateTime):
            raise ValueError(f"Could not parse datetime: {value}")
        return parsed


class MockAvailabilityProvider:
    """
    Mock availability provider.

    Offers start times every ``step_minutes`` within opening hours, Monday to
    Saturday, where the whole set of services fits before closing and does not
    overlap a booking in the attached store.
    """

    def __init__(
        self,
        store: MockBookingStore | None = None,
        catalog: DurationCatalog = DEFAULT_CATALOG,
        opening_hour: int = 9,
        closing_hour: int = 17,
        step_minutes: int = 30,
        timezone: str = "UTC",
    ):
        self.store = store or MockBookingStore(timezone=timezone)
        self.catalog = catalog
        self.opening_hour = opening_hour
        self.closing_hour = closing_hour
        self.step_minutes = step_minutes
        self.timezone = timezone
        self.calls: List[Tuple[str, Tuple[str, ...]]] = []

    async def fetch_free_times(
        self,
        date: DateLike,
        service_ids: Iterable[Union[ServiceOption, str]],
    ) -> Tuple[str, ...]:
        day = coerce_date(date)
        services = tuple(str(service_id) for service_id in service_ids)
        self.calls.append((day.to_date_string(), services))

        if day.day_of_week == pendulum.SUNDAY or not services:
            return ()

        duration = self.catalog.total_minutes(services)
        opening = pendulum.datetime(day.year, day.month, day.day, self.opening_hour, tz=self.timezone)
        closing = opening.set(hour=self.closing_hour)
        booked = self.store.booked_intervals()

        free: List[str] = []
        start = opening
        while start.add(minutes=duration) <= closing:
            end = start.add(minutes=duration)
            if not any(start < other.end and end > other.start for other in booked):
                free.append(start.format("hh:mm A"))
            start = start.add(minutes=self.step_minutes)

        return tuple(free)
