"""
Shared test helpers.
"""

from typing import Any, Dict, List

import pendulum
import pytest
import requests

from salon_booking.domain.booking_window import BookingWindowValidator

# A Monday
TODAY = pendulum.date(2024, 11, 25)


class FixedDayValidator(BookingWindowValidator):
    """Validator whose notion of today does not move."""

    def __init__(self, today=TODAY, window_days: int = 7, timezone: str = "Europe/Berlin"):
        super().__init__(window_days=window_days, timezone=timezone)
        self._today = today

    def today(self):
        return self._today


class FakeResponse:
    """Just enough of requests.Response for the adapters."""

    def __init__(self, status_code: int = 200, body: Any = None, text: str | None = None):
        self.status_code = status_code
        self._body = body
        self._text = text

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    @property
    def content(self) -> bytes:
        if self._text is not None:
            return self._text.encode("utf-8")
        return b"" if self._body is None else b"{}"

    def json(self) -> Any:
        if self._text is not None:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._body

    def raise_for_status(self) -> None:
        if not self.ok:
            raise requests.exceptions.HTTPError(f"{self.status_code} Server Error")


class FakeRequests:
    """Stands in for requests.get/requests.post; records calls and replays a canned response or error."""

    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None):
        self.response = response or FakeResponse()
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"method": "GET", "url": url, "params": params, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response

    def post(self, url, json=None, timeout=None):
        self.calls.append({"method": "POST", "url": url, "json": json, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response


@pytest.fixture
def validator() -> FixedDayValidator:
    return FixedDayValidator()


@pytest.fixture
def fake_requests(monkeypatch):
    """Route requests.get/requests.post to a FakeRequests instance."""
    def install(fake: FakeRequests) -> FakeRequests:
        monkeypatch.setattr(requests, "get", fake.get)
        monkeypatch.setattr(requests, "post", fake.post)
        return fake
    return install
