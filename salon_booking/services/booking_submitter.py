"""
Booking submission and its state machine.

    Idle | Succeeded | Failed --submit--> InProgress --> Succeeded | Failed(reason)

The submitter is the only writer of the submission status. While a submit is
in progress a second one is refused, so at most one persistence request is
pending per session.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, List, Protocol

from ..domain.exceptions import (
    CompositionError,
    SubmissionInProgressError,
    TransportError,
    ValidationError,
)
from ..domain.interval import IntervalComposer
from ..domain.models import BookingRequest, BookingSession, SubmissionStatus

logger = logging.getLogger(__name__)

COMPOSITION_ERROR = "composition error"
SUBMISSION_ERROR = "submission error, please retry"
MISSING_EMAIL = "A contact email is required."

StatusListener = Callable[[SubmissionStatus], None]


class PersistenceClientProtocol(Protocol):
    """Protocol describing the persistence service call used for booking."""

    async def book_appointment(self, payload: Dict[str, Any]) -> Any:
        """Create a booking; returns a success body or an object with ``error``."""


class BookingSubmitter:
    """
    Orchestrates interval composition and the create-booking request.

    Failures are scoped to one attempt; the submitter can always be retried
    once it has reached a terminal state.
    """

    def __init__(
        self,
        persistence: PersistenceClientProtocol,
        composer: IntervalComposer,
    ) -> None:
        self._persistence = persistence
        self._composer = composer
        self._status = SubmissionStatus.idle()
        self._listeners: List[StatusListener] = []

    @property
    def status(self) -> SubmissionStatus:
        return self._status

    @property
    def can_submit(self) -> bool:
        """False while a request is pending; the submit control is disabled."""
        return self._status.accepts_submit

    def subscribe(self, listener: StatusListener) -> None:
        """Register a callback invoked on every status transition."""
        self._listeners.append(listener)

    async def submit(self, session: BookingSession) -> SubmissionStatus:
        """
        Submit the session's selections as a booking.

        Returns:
            The terminal status of this attempt

        Raises:
            SubmissionInProgressError: If a previous submit is still pending
        """
        if not self.can_submit:
            raise SubmissionInProgressError("A booking request is already in progress.")

        self._transition(SubmissionStatus.in_progress())

        try:
            request = self.build_request(session)
        except (CompositionError, ValidationError) as exc:
            logger.warning("Could not compose booking interval: %s", exc)
            return self._transition(SubmissionStatus.failed(COMPOSITION_ERROR))

        if not request.email:
            return self._transition(SubmissionStatus.failed(MISSING_EMAIL))

        try:
            response = await self._persistence.book_appointment(request.to_payload())
        except TransportError as exc:
            logger.warning("Booking submission failed: %s", exc)
            return self._transition(SubmissionStatus.failed(SUBMISSION_ERROR))
        except asyncio.CancelledError:
            self._transition(SubmissionStatus.failed(SUBMISSION_ERROR))
            raise
        except Exception:
            logger.exception("Unexpected error while submitting booking")
            return self._transition(SubmissionStatus.failed(SUBMISSION_ERROR))

        server_error = self._extract_error(response)
        if server_error is not None:
            return self._transition(SubmissionStatus.failed(server_error))

        logger.info(
            "Booked %s for %s (%s)",
            ", ".join(service.value for service in request.services),
            request.email,
            request.start.to_datetime_string(),
        )
        return self._transition(SubmissionStatus.succeeded())

    def build_request(self, session: BookingSession) -> BookingRequest:
        """
        Compose the interval and freeze the request for this attempt.

        Raises:
            CompositionError: If the time or a service cannot be resolved
            ValidationError: If no date is selected
        """
        if session.selected_date is None:
            raise ValidationError("No date selected.")

        interval = self._composer.compose(
            session.selected_date,
            session.selected_time,
            session.services,
        )
        return BookingRequest(
            email=session.email,
            date=session.selected_date,
            start=interval.start,
            end=interval.end,
            services=tuple(session.services),
        )

    @staticmethod
    def _extract_error(response: Any) -> str | None:
        if isinstance(response, dict) and response.get("error"):
            return str(response["error"])
        return None

    def _transition(self, status: SubmissionStatus) -> SubmissionStatus:
        logger.debug("Submission status %s -> %s", self._status, status)
        self._status = status
        for listener in self._listeners:
            listener(status)
        return status
