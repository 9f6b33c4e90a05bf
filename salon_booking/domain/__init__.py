"""
Domain layer - Pure booking logic without external dependencies.
"""

from .booking_window import BookingWindowValidator, DateValidation
from .catalog import DEFAULT_CATALOG, DurationCatalog, ServiceCategory, ServiceOption
from .interval import AppointmentInterval, IntervalComposer, parse_time_of_day
from .models import BookingRequest, BookingSession, SubmissionState, SubmissionStatus

__all__ = [
    "AppointmentInterval",
    "BookingRequest",
    "BookingSession",
    "BookingWindowValidator",
    "DEFAULT_CATALOG",
    "DateValidation",
    "DurationCatalog",
    "IntervalComposer",
    "ServiceCategory",
    "ServiceOption",
    "SubmissionState",
    "SubmissionStatus",
    "parse_time_of_day",
]
