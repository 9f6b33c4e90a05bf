"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability import AvailabilityProviderProtocol, AvailabilityQuery, AvailabilityService
from .booking_flow import BookingFlow
from .booking_submitter import BookingSubmitter, PersistenceClientProtocol

__all__ = [
    "AvailabilityProviderProtocol",
    "AvailabilityQuery",
    "AvailabilityService",
    "BookingFlow",
    "BookingSubmitter",
    "PersistenceClientProtocol",
]
