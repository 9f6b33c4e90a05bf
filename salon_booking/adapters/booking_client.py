"""
HTTP client for the external booking persistence service.
"""

import asyncio
import logging
from typing import Any, Dict

import requests

from ..domain.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class BookingClient:
    """
    Creates bookings by POSTing the payload as JSON.

    The service answers either with a success body or with an object carrying
    an ``error`` string. Error objects are returned as-is, whatever the HTTP
    status, so the caller can show the server's reason.
    """

    def __init__(self, url: str, timeout: float = 10.0):
        self.url = url
        self.timeout = timeout

    async def book_appointment(self, payload: Dict[str, Any]) -> Any:
        """
        Create a booking.

        Raises:
            PersistenceError: On network failure, timeout or an unreadable response
        """
        return await asyncio.to_thread(self._post, payload)

    def _post(self, payload: Dict[str, Any]) -> Any:
        try:
            response = requests.post(self.url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            raise PersistenceError(f"Booking request failed: {exc}") from exc

        body = self._read_body(response)

        if isinstance(body, dict) and body.get("error"):
            logger.info("Booking rejected by server (HTTP %s): %s", response.status_code, body["error"])
            return body

        if not response.ok:
            raise PersistenceError(f"Booking request failed with HTTP {response.status_code}")

        return body

    @staticmethod
    def _read_body(response: requests.Response) -> Any:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            if not response.ok:
                # Non-JSON error pages are reported by status code
                return None
            raise PersistenceError(f"Booking response is not JSON: {exc}") from exc
