"""
Adapters layer - Booking storage integrations.
"""

from .json_store import JsonBookingStore

__all__ = ["JsonBookingStore"]
