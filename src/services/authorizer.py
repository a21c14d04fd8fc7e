"""
Role-Based Action Authorizer

Derives the acting user's role on a reservation and the actions currently
open to them. Holds no state; recompute on every request.
"""

from typing import List, Optional

from src.models.enums import ActorRole, ReservationAction, ReservationStatus
from src.services import state_machine


def resolve_role(borrower_id: str, owner_id: Optional[str], actor_id: Optional[str]) -> ActorRole:
    if not actor_id:
        return ActorRole.NONE
    if owner_id is not None and actor_id == owner_id:
        return ActorRole.OWNER
    if actor_id == borrower_id:
        return ActorRole.BORROWER
    return ActorRole.NONE


def role_for(reservation, actor_id: Optional[str]) -> ActorRole:
    return resolve_role(reservation.borrower_id, reservation.owner_id, actor_id)


def permitted_actions(status: ReservationStatus, role: ActorRole) -> List[ReservationAction]:
    if role == ActorRole.NONE:
        return []
    return state_machine.allowed_actions(status, role)


def permitted_actions_for(reservation, actor_id: Optional[str]) -> List[ReservationAction]:
    """Actions `actor_id` may take on `reservation` right now"""
    return permitted_actions(reservation.status, role_for(reservation, actor_id))


def can_view(reservation, actor_id: Optional[str]) -> bool:
    return role_for(reservation, actor_id) != ActorRole.NONE
