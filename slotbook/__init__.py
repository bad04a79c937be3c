"""
slotbook - Appointment slot generation and day occupancy for meeting bookings.
"""

__version__ = "0.1.0"
