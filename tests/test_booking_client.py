"""
Tests for the HTTP booking client.
"""

import asyncio

import pytest
import requests

from salon_booking.adapters.booking_client import BookingClient
from salon_booking.domain.exceptions import PersistenceError, TransportError

from conftest import FakeRequests, FakeResponse

URL = "http://127.0.0.1:8000/book-appointment"
PAYLOAD = {
    "email": "anna@example.com",
    "date": "2024-11-25",
    "time": "2024-11-25T10:15:00Z",
    "end_time": "2024-11-25T13:00:00Z",
    "services": ["Women's Haircut", "Full Hair Color"],
}


def _book():
    client = BookingClient(URL, timeout=3)
    return asyncio.run(client.book_appointment(PAYLOAD))


def test_posts_payload_as_json(fake_requests):
    http = fake_requests(FakeRequests(FakeResponse(body={"success": True})))

    assert _book() == {"success": True}
    assert http.calls[0]["method"] == "POST"
    assert http.calls[0]["json"] == PAYLOAD
    assert http.calls[0]["timeout"] == 3


def test_empty_success_body(fake_requests):
    fake_requests(FakeRequests(FakeResponse(status_code=201)))
    assert _book() == {}


def test_error_field_is_returned_whatever_the_status(fake_requests):
    fake_requests(FakeRequests(FakeResponse(status_code=409, body={"error": "slot taken"})))
    assert _book() == {"error": "slot taken"}


def test_error_status_without_error_field(fake_requests):
    fake_requests(FakeRequests(FakeResponse(status_code=503, body={"detail": "down"})))

    with pytest.raises(PersistenceError, match="HTTP 503"):
        _book()


def test_transport_failure(fake_requests):
    fake_requests(FakeRequests(error=requests.exceptions.ConnectTimeout("timed out")))

    with pytest.raises(TransportError, match="Booking request failed"):
        _book()


def test_unreadable_success_body(fake_requests):
    fake_requests(FakeRequests(FakeResponse(text="not json")))

    with pytest.raises(PersistenceError, match="not JSON"):
        _book()
