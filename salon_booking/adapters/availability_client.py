"""
HTTP client for the external availability provider.
"""

import asyncio
import logging
from typing import Any, Iterable, List, Tuple, Union

import requests

from ..domain.booking_window import DateLike, coerce_date
from ..domain.catalog import ServiceOption
from ..domain.exceptions import AvailabilityProviderError

logger = logging.getLogger(__name__)


class AvailabilityClient:
    """
    Fetches free start times for a date and a set of services.

    Uses the provider's ``get-free-time`` endpoint, which answers with a JSON
    array of time-of-day strings such as ``"09:00 AM"``. Provider failures never
    propagate: they are logged and reported as "no free times".

    Every query is a standalone ``requests.get`` call, so overlapping queries
    running on worker threads share no connection state.
    """

    def __init__(self, url: str, timeout: float = 10.0):
        """
        Initialize the availability client.

        Args:
            url: Full URL of the get-free-time endpoint
            timeout: Request timeout in seconds
        """
        self.url = url
        self.timeout = timeout

    async def fetch_free_times(
        self,
        date: DateLike,
        service_ids: Iterable[Union[ServiceOption, str]],
    ) -> Tuple[str, ...]:
        """
        Get the free start times for the given date and services.

        Returns:
            Tuple of time-of-day strings, empty if the provider failed
        """
        params = self.build_params(date, service_ids)

        try:
            data = await asyncio.to_thread(self._get, params)
        except AvailabilityProviderError as exc:
            logger.warning("Error fetching available times for %s: %s", params, exc)
            return ()

        return self._parse_free_times(data, params)

    @staticmethod
    def build_params(
        date: DateLike,
        service_ids: Iterable[Union[ServiceOption, str]],
    ) -> dict:
        """Build the query string: ISO date plus comma-joined service ids."""
        services = ",".join(str(service_id) for service_id in service_ids)
        return {
            "date": coerce_date(date).to_date_string(),
            "services": services,
        }

    def _get(self, params: dict) -> Any:
        try:
            response = requests.get(self.url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as exc:
            raise AvailabilityProviderError(f"Availability request failed: {exc}") from exc
        except ValueError as exc:
            raise AvailabilityProviderError(f"Availability response is not JSON: {exc}") from exc

    def _parse_free_times(self, data: Any, params: dict) -> Tuple[str, ...]:
        """
        Normalize the provider response.

        Anything but a JSON array is treated as "no free times". Entries that
        are not non-empty strings are skipped.
        """
        if not isinstance(data, list):
            logger.warning(
                "Availability provider returned %s instead of a list for %s; showing no times",
                type(data).__name__,
                params,
            )
            return ()

        times: List[str] = []
        for item in data:
            if isinstance(item, str) and item.strip():
                times.append(item.strip())
            else:
                logger.warning("Skipping malformed free time entry: %r", item)

        return tuple(times)
