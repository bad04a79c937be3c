"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .booking_service import AvailableSlotsResult, BookingQueryService, BookingStoreProtocol

__all__ = ["AvailableSlotsResult", "BookingQueryService", "BookingStoreProtocol"]
