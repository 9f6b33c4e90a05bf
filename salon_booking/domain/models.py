"""
Session-scoped domain models for a single booking attempt.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple, Union

from pendulum import Date, DateTime

from .booking_window import BookingWindowValidator, DateLike
from .catalog import DEFAULT_CATALOG, DurationCatalog, ServiceCategory, ServiceOption
from .exceptions import ValidationError


class SubmissionState(str, Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class SubmissionStatus:
    """
    Observable state of the submit button.

    ``reason`` is only set for FAILED.
    """
    state: SubmissionState = SubmissionState.IDLE
    reason: Optional[str] = None

    @classmethod
    def idle(cls) -> "SubmissionStatus":
        return cls(SubmissionState.IDLE)

    @classmethod
    def in_progress(cls) -> "SubmissionStatus":
        return cls(SubmissionState.IN_PROGRESS)

    @classmethod
    def succeeded(cls) -> "SubmissionStatus":
        return cls(SubmissionState.SUCCEEDED)

    @classmethod
    def failed(cls, reason: str) -> "SubmissionStatus":
        return cls(SubmissionState.FAILED, reason)

    @property
    def is_terminal(self) -> bool:
        return self.state in (SubmissionState.SUCCEEDED, SubmissionState.FAILED)

    @property
    def accepts_submit(self) -> bool:
        """Whether a new submit may start from this state."""
        return self.state is not SubmissionState.IN_PROGRESS

    def __str__(self) -> str:
        if self.state is SubmissionState.FAILED:
            return f"{self.state.value}: {self.reason}"
        return self.state.value


@dataclass(frozen=True)
class BookingRequest:
    """
    The entity handed to the persistence service.

    Built once per submit attempt and never mutated.
    """
    email: str
    date: Date
    start: DateTime
    end: DateTime
    services: Tuple[ServiceOption, ...]

    def to_payload(self) -> Dict[str, Any]:
        """Render the ``book_appointment`` payload with ISO-8601 strings."""
        return {
            "email": self.email,
            "date": self.date.to_date_string(),
            "time": self.start.to_iso8601_string(),
            "end_time": self.end.to_iso8601_string(),
            "services": [service.value for service in self.services],
        }


@dataclass(frozen=True)
class BookingSession:
    """
    Everything the user has selected so far in one booking attempt.

    Instances are immutable; each selection returns a new session.
    """
    category: Optional[ServiceCategory] = None
    email: str = ""
    selected_date: Optional[Date] = None
    date_error: str = ""
    services: Tuple[ServiceOption, ...] = ()
    available_times: Tuple[str, ...] = ()
    selected_time: str = ""
    catalog: DurationCatalog = field(default=DEFAULT_CATALOG, repr=False, compare=False)

    @property
    def availability_query(self) -> Optional[Tuple[Date, Tuple[ServiceOption, ...]]]:
        """The (date, services) pair to query free times for, if complete."""
        if self.selected_date is None or not self.services:
            return None
        return self.selected_date, self.services

    def with_category(self, category: Union[ServiceCategory, str]) -> "BookingSession":
        """Switch category; previously selected services no longer apply."""
        return replace(
            self,
            category=ServiceCategory.parse(category),
            services=(),
            available_times=(),
            selected_time="",
        )

    def with_email(self, email: str) -> "BookingSession":
        cleaned = (email or "").strip()
        if not cleaned or "@" not in cleaned:
            raise ValidationError("Please enter a valid email address.")
        return replace(self, email=cleaned)

    def with_date(self, candidate: DateLike, validator: BookingWindowValidator) -> "BookingSession":
        """
        Apply a date pick.

        A rejected date leaves no date selected and records the reason in
        ``date_error`` instead of raising.
        """
        result = validator.validate(candidate)
        if not result.accepted:
            return replace(
                self,
                selected_date=None,
                date_error=result.reason,
                available_times=(),
                selected_time="",
            )
        return replace(
            self,
            selected_date=result.date,
            date_error="",
            available_times=(),
            selected_time="",
        )

    def with_services(self, service_ids: Iterable[Union[ServiceOption, str]]) -> "BookingSession":
        if self.category is None:
            raise ValidationError("Select a category before choosing services.")

        services = self.catalog.resolve(service_ids)
        foreign = [service.value for service in services if not self.category.offers(service)]
        if foreign:
            raise ValidationError(
                f"Not offered for category '{self.category.value}': {', '.join(foreign)}"
            )

        return replace(
            self,
            services=tuple(services),
            available_times=(),
            selected_time="",
        )

    def with_available_times(self, times: Sequence[str]) -> "BookingSession":
        """Show fresh free times, keeping the selected time only if still offered."""
        times = tuple(times)
        selected = self.selected_time if self.selected_time in times else ""
        return replace(self, available_times=times, selected_time=selected)

    def with_time(self, time_of_day: str) -> "BookingSession":
        cleaned = (time_of_day or "").strip()
        if cleaned not in self.available_times:
            raise ValidationError(f"'{time_of_day}' is not one of the available times.")
        return replace(self, selected_time=cleaned)

    def missing_fields(self) -> Tuple[str, ...]:
        """Names of required selections that are still empty."""
        missing = []
        if self.category is None:
            missing.append("category")
        if not self.email:
            missing.append("email")
        if self.selected_date is None:
            missing.append("date")
        if not self.services:
            missing.append("services")
        if not self.selected_time:
            missing.append("time")
        return tuple(missing)
