"""
Reservation State Machine

pending -> confirmed -> active -> completed is the happy path; pending may be
declined, and pending/confirmed may be cancelled. completed, cancelled and
declined are terminal.
"""

from collections import namedtuple
from typing import Dict, Tuple

from src.models.enums import ActorRole, ReservationAction, ReservationStatus
from src.utils.errors import Forbidden, InvalidTransition

Transition = namedtuple('Transition', ['roles', 'target'])

_OWNER = frozenset({ActorRole.OWNER})
_BORROWER = frozenset({ActorRole.BORROWER})
_EITHER = frozenset({ActorRole.OWNER, ActorRole.BORROWER})

INITIAL_STATUS = ReservationStatus.PENDING

TRANSITIONS: Dict[Tuple[ReservationStatus, ReservationAction], Transition] = {
    (ReservationStatus.PENDING, ReservationAction.APPROVE): Transition(_OWNER, ReservationStatus.CONFIRMED),
    (ReservationStatus.PENDING, ReservationAction.DECLINE): Transition(_OWNER, ReservationStatus.DECLINED),
    (ReservationStatus.PENDING, ReservationAction.CANCEL): Transition(_EITHER, ReservationStatus.CANCELLED),
    (ReservationStatus.CONFIRMED, ReservationAction.CANCEL): Transition(_EITHER, ReservationStatus.CANCELLED),
    (ReservationStatus.CONFIRMED, ReservationAction.PICKUP): Transition(_BORROWER, ReservationStatus.ACTIVE),
    (ReservationStatus.ACTIVE, ReservationAction.RETURN): Transition(_BORROWER, ReservationStatus.COMPLETED),
}


def get_transition(status: ReservationStatus, action: ReservationAction):
    """Table lookup; None when the edge does not exist"""
    return TRANSITIONS.get((status, action))


def is_allowed(status: ReservationStatus, action: ReservationAction, role: ActorRole) -> bool:
    transition = get_transition(status, action)
    return transition is not None and role in transition.roles


def next_status(status: ReservationStatus, action: ReservationAction, role: ActorRole) -> ReservationStatus:
    """
    Resolve the target status of `action` taken by `role` from `status`.

    Raises:
        Forbidden: role is NONE, or the edge exists but not for this role
        InvalidTransition: no such edge from `status` (every terminal state)
    """
    if role == ActorRole.NONE:
        raise Forbidden('Only the borrower or the tool owner can modify this reservation.')

    transition = get_transition(status, action)
    if transition is None:
        raise InvalidTransition(status, action)

    if is_allowed(status, action, role):
        return transition.target

    if action in (ReservationAction.APPROVE, ReservationAction.DECLINE):
        raise Forbidden(f'Only the tool owner can {action.value} reservations.')
    if action == ReservationAction.PICKUP:
        raise Forbidden('Only the borrower can confirm pickup.')
    if action == ReservationAction.RETURN:
        raise Forbidden('Only the borrower can confirm return.')
    raise Forbidden(f'Not authorized to {action.value} this reservation.')


def allowed_actions(status: ReservationStatus, role: ActorRole):
    """Actions `role` may take from `status`, in table order"""
    if status.is_terminal:
        return []
    return [
        action for (from_status, action), transition in TRANSITIONS.items()
        if from_status == status and role in transition.roles
    ]
