"""
Session orchestration for one booking attempt.

The flow owns the immutable BookingSession and applies each user event to it:
pure session transitions for the selections, plus the two I/O boundaries
(availability refresh and booking submission).
"""

from __future__ import annotations

import logging
from typing import Iterable, Union

from ..domain.booking_window import BookingWindowValidator, DateLike
from ..domain.catalog import ServiceCategory, ServiceOption
from ..domain.models import BookingSession, SubmissionStatus
from .availability import AvailabilityService
from .booking_submitter import BookingSubmitter

logger = logging.getLogger(__name__)


class BookingFlow:
    """
    Applies caller events to a booking session.

    Dependency inversion toward the availability and submission services makes
    it easy to plug in the HTTP adapters or the in-memory mocks.
    """

    def __init__(
        self,
        validator: BookingWindowValidator,
        availability: AvailabilityService,
        submitter: BookingSubmitter,
        session: BookingSession | None = None,
    ) -> None:
        self._validator = validator
        self._availability = availability
        self._submitter = submitter
        self._session = session or BookingSession()

    @property
    def session(self) -> BookingSession:
        return self._session

    @property
    def validator(self) -> BookingWindowValidator:
        return self._validator

    @property
    def availability(self) -> AvailabilityService:
        return self._availability

    @property
    def status(self) -> SubmissionStatus:
        return self._submitter.status

    def choose_category(self, category: Union[ServiceCategory, str]) -> BookingSession:
        """Select the category; clears services and any displayed times."""
        self._session = self._session.with_category(category)
        self._availability.invalidate()
        return self._session

    def set_email(self, email: str) -> BookingSession:
        self._session = self._session.with_email(email)
        return self._session

    async def choose_date(self, candidate: DateLike) -> BookingSession:
        """
        Select a date and refresh free times when services are already chosen.

        A rejected date is not raised; the message ends up in
        ``session.date_error``.
        """
        self._session = self._session.with_date(candidate, self._validator)

        if self._session.date_error:
            logger.info("Date %s rejected: %s", candidate, self._session.date_error)
            self._availability.invalidate()
            return self._session

        return await self._refresh_times()

    async def choose_services(
        self,
        service_ids: Iterable[Union[ServiceOption, str]],
    ) -> BookingSession:
        """Select services and refresh free times when a date is already chosen."""
        self._session = self._session.with_services(service_ids)
        return await self._refresh_times()

    def choose_time(self, time_of_day: str) -> BookingSession:
        self._session = self._session.with_time(time_of_day)
        return self._session

    async def submit(self) -> SubmissionStatus:
        return await self._submitter.submit(self._session)

    async def _refresh_times(self) -> BookingSession:
        query = self._session.availability_query
        if query is None:
            self._availability.invalidate()
            return self._session

        date, services = query
        times = await self._availability.refresh(date, services)
        if times is not None:
            self._session = self._session.with_available_times(times)
        return self._session
