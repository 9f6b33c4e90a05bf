"""
Availability queries with last-issued-wins ordering.

Free-time queries are re-issued whenever the date or the services change, and
their responses may arrive in any order. Each query is tagged with a
monotonically increasing sequence number; only the response to the most
recently issued query is ever handed back for display.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, Tuple, Union

from pendulum import Date

from ..domain.booking_window import DateLike, coerce_date
from ..domain.catalog import ServiceOption

logger = logging.getLogger(__name__)


class AvailabilityProviderProtocol(Protocol):
    """Protocol describing the availability client behaviour needed by the service."""

    async def fetch_free_times(
        self,
        date: DateLike,
        service_ids: Iterable[Union[ServiceOption, str]],
    ) -> Tuple[str, ...]:
        """Return free start times; empty when the provider fails."""


@dataclass(frozen=True)
class AvailabilityQuery:
    """One issued free-time query."""
    sequence: int
    date: Date
    services: Tuple[str, ...]


class AvailabilityService:
    """
    Issues availability queries and suppresses superseded responses.

    There is no cancellation of in-flight requests; a stale response is simply
    discarded when it arrives.
    """

    def __init__(self, provider: AvailabilityProviderProtocol) -> None:
        self._provider = provider
        self._latest_sequence = 0

    @property
    def latest_sequence(self) -> int:
        return self._latest_sequence

    def issue(
        self,
        date: DateLike,
        service_ids: Iterable[Union[ServiceOption, str]],
    ) -> AvailabilityQuery:
        """Register a new query, superseding every earlier one."""
        self._latest_sequence += 1
        return AvailabilityQuery(
            sequence=self._latest_sequence,
            date=coerce_date(date),
            services=tuple(str(service_id) for service_id in service_ids),
        )

    def invalidate(self) -> None:
        """Supersede all in-flight queries without issuing a new one."""
        self._latest_sequence += 1

    def is_current(self, query: AvailabilityQuery) -> bool:
        return query.sequence == self._latest_sequence

    async def refresh(
        self,
        date: DateLike,
        service_ids: Iterable[Union[ServiceOption, str]],
    ) -> Optional[Tuple[str, ...]]:
        """
        Query free times for a date and set of services.

        Returns:
            The free times, or None if a newer query was issued while this
            one was in flight and its response must not be shown
        """
        query = self.issue(date, service_ids)
        times = await self._provider.fetch_free_times(query.date, query.services)

        if not self.is_current(query):
            logger.debug(
                "Discarding stale availability response #%d for %s %s (latest is #%d)",
                query.sequence,
                query.date.to_date_string(),
                ",".join(query.services),
                self._latest_sequence,
            )
            return None

        return tuple(times)
