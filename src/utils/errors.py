"""
Reservation error taxonomy

Every error is terminal for the current request; none is retried internally.
"""

from src.models.enums import PolicyViolationReason


class ReservationError(Exception):
    """Base class for typed reservation errors"""
    kind = 'ReservationError'
    code = 'RESERVATION_ERROR'
    status_code = 400

    def __init__(self, message, code=None):
        self.message = message
        if code is not None:
            self.code = code
        super().__init__(self.message)

    def to_dict(self):
        return {
            'error': self.kind,
            'code': self.code,
            'message': self.message
        }


class ReservationValidationError(ReservationError):
    """Malformed input, e.g. a decline without a reason"""
    kind = 'ValidationError'
    code = 'VALIDATION_ERROR'
    status_code = 400

    def __init__(self, message, details=None):
        self.details = details
        super().__init__(message)

    def to_dict(self):
        body = super().to_dict()
        if self.details:
            body['details'] = self.details
        return body


class PolicyViolation(ReservationError):
    """Requested range breaks the tool's scheduling policy"""
    kind = 'PolicyViolation'
    status_code = 422

    def __init__(self, reason: PolicyViolationReason, message):
        self.reason = reason
        super().__init__(message, code=reason.value)


class ReservationConflict(ReservationError):
    """Range overlaps a binding reservation, or the slot was taken concurrently"""
    kind = 'Conflict'
    code = 'CONFLICT'
    status_code = 409


class InvalidTransition(ReservationError):
    """Action is not legal from the reservation's current status"""
    kind = 'InvalidTransition'
    code = 'INVALID_TRANSITION'
    status_code = 409
    public_message = 'This reservation can no longer be modified.'

    def __init__(self, status, action):
        self.status = status
        self.action = action
        super().__init__(
            f"Cannot {action.value} a reservation with status \"{status.value}\"."
        )

    def to_dict(self):
        return {
            'error': self.kind,
            'code': self.code,
            'message': self.public_message,
            'status': self.status.value,
            'action': self.action.value
        }


class NotFound(ReservationError):
    kind = 'NotFound'
    code = 'NOT_FOUND'
    status_code = 404


class Forbidden(ReservationError):
    kind = 'Forbidden'
    code = 'FORBIDDEN'
    status_code = 403
