"""
Domain-specific exception hierarchy for the booking engine.
"""


class BookingEngineError(Exception):
    """Base class for all engine-level errors."""


class ValidationError(BookingEngineError):
    """Raised when a user selection is rejected before any downstream use."""


class BookingWindowError(ValidationError):
    """Raised when a candidate date falls outside the bookable window."""


class CompositionError(BookingEngineError):
    """Raised when a start/end interval cannot be built for a submission."""


class ParseError(CompositionError):
    """Raised when a time-of-day selection is malformed."""


class UnknownServiceError(CompositionError):
    """Raised when a service identifier is not in the duration catalog."""

    def __init__(self, service_id: str):
        self.service_id = service_id
        super().__init__(f"Unknown service: '{service_id}'")


class TransportError(BookingEngineError):
    """Raised when a remote collaborator cannot be reached or understood."""


class AvailabilityProviderError(TransportError):
    """Raised when the availability provider fails."""


class PersistenceError(TransportError):
    """Raised when the booking persistence service fails."""


class SubmissionInProgressError(BookingEngineError):
    """Raised when a submit is attempted while another one is still pending."""
