"""
Adapters layer - External integrations (availability provider, persistence service).
"""

from .availability_client import AvailabilityClient
from .booking_client import BookingClient
from .mock_provider import MockAvailabilityProvider, MockBookingStore

__all__ = ["AvailabilityClient", "BookingClient", "MockAvailabilityProvider", "MockBookingStore"]
