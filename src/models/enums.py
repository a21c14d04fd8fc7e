"""
Model Enums
"""

from enum import Enum


class ToolStatus(Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    ARCHIVED = "archived"


class ReservationStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    DECLINED = "declined"

    @property
    def is_terminal(self):
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({
    ReservationStatus.COMPLETED,
    ReservationStatus.CANCELLED,
    ReservationStatus.DECLINED,
})


class ReservationAction(Enum):
    CREATE = "create"
    APPROVE = "approve"
    DECLINE = "decline"
    CANCEL = "cancel"
    PICKUP = "pickup"
    RETURN = "return"


class ActorRole(Enum):
    OWNER = "owner"
    BORROWER = "borrower"
    NONE = "none"


class PolicyViolationReason(Enum):
    TOO_SOON = "TOO_SOON"
    TOO_LONG = "TOO_LONG"
    INVERTED_RANGE = "INVERTED_RANGE"
    TOOL_UNAVAILABLE = "TOOL_UNAVAILABLE"
    EARLY_PICKUP = "EARLY_PICKUP"


class EarlyPickupPolicy(Enum):
    ALLOW = "allow"   # pickup before start_date proceeds silently
    FLAG = "flag"     # proceeds, recorded on the reservation and logged
    BLOCK = "block"   # rejected with PolicyViolation(EARLY_PICKUP)
