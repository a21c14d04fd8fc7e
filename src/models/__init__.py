"""
Models package - Database models for the reservation service
"""

# Import database instance
from src.database import db

# Import enums first
from .enums import (
    ToolStatus,
    ReservationStatus,
    ReservationAction,
    ActorRole,
    PolicyViolationReason,
    EarlyPickupPolicy,
    TERMINAL_STATUSES,
)

# Import models
from .tool import Tool, ToolPolicy
from .reservation import Reservation
from .reservation_event import ReservationEvent

# Export all models and enums
__all__ = [
    'db',
    'ToolStatus',
    'ReservationStatus',
    'ReservationAction',
    'ActorRole',
    'PolicyViolationReason',
    'EarlyPickupPolicy',
    'TERMINAL_STATUSES',
    'Tool',
    'ToolPolicy',
    'Reservation',
    'ReservationEvent'
]
