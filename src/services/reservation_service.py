"""
Reservation Service - composition root of the reservation lifecycle

Every mutating action runs inside the per-tool critical section and ends in
a single conditional write; notifications go out only after the commit.
"""

from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, Optional
import logging

from flask import current_app

from src.models import (
    ActorRole, EarlyPickupPolicy, PolicyViolationReason, Reservation,
    ReservationAction, ReservationEvent, ReservationStatus
)
from src.repositories import ReservationRepository, ToolRepository
from src.services import authorizer, state_machine
from src.services.availability import check_range, earliest_start
from src.services.conflicts import (
    BINDING_STATUSES, OPEN_STATUSES, find_duplicate_request, has_conflict
)
from src.utils.errors import (
    Forbidden, NotFound, PolicyViolation, ReservationConflict, ReservationValidationError
)

logger = logging.getLogger(__name__)

LIST_ROLES = ('all', 'borrower', 'lender')


class ReservationService:
    """Business logic for tool reservations"""

    def __init__(self, reservation_repo=None, tool_repo=None, notifier=None,
                 today_provider: Optional[Callable[[], date]] = None,
                 early_pickup_policy=None, block_booked_overlap: Optional[bool] = None):
        self.reservation_repo = reservation_repo or ReservationRepository()
        self.tool_repo = tool_repo or ToolRepository()
        if notifier is None:
            from src.events.publisher import event_publisher
            notifier = event_publisher
        self.notifier = notifier
        self.today_provider = today_provider or date.today
        self._early_pickup_policy = early_pickup_policy
        self._block_booked_overlap = block_booked_overlap

    @property
    def early_pickup_policy(self) -> EarlyPickupPolicy:
        value = self._early_pickup_policy
        if value is None:
            value = current_app.config.get('EARLY_PICKUP_POLICY', 'flag')
        return value if isinstance(value, EarlyPickupPolicy) else EarlyPickupPolicy(value)

    @property
    def block_booked_overlap(self) -> bool:
        if self._block_booked_overlap is not None:
            return self._block_booked_overlap
        return bool(current_app.config.get('BLOCK_BOOKED_OVERLAP_ON_CREATE', False))

    def today(self) -> date:
        return self.today_provider()

    # ============================================================================
    # Lifecycle actions
    # ============================================================================

    def create_reservation(self, tool_id: str, borrower_id: str, start_date: date,
                           end_date: date, note: Optional[str] = None) -> Dict[str, Any]:
        """
        Submit a borrow request.

        Args:
            tool_id: Tool to borrow
            borrower_id: Requesting user
            start_date: First day of the loan
            end_date: Last day of the loan (inclusive)
            note: Optional message to the owner

        Returns:
            The new reservation in `pending`

        Raises:
            ReservationValidationError, NotFound, PolicyViolation, ReservationConflict
        """
        if not borrower_id:
            raise ReservationValidationError('Borrower is required.')
        if start_date is None or end_date is None:
            raise ReservationValidationError('Start date and end date are required.')

        # Unknown tools never reach the lock registry
        if self.tool_repo.get_policy(tool_id) is None:
            raise NotFound(f'Tool {tool_id} not found.')

        with self.tool_repo.locked(tool_id) as tool:
            if tool is None:
                raise NotFound(f'Tool {tool_id} not found.')

            policy = tool.to_policy()
            if policy.owner_id == borrower_id:
                raise ReservationValidationError('You cannot reserve your own tool.')
            if not policy.is_available:
                raise PolicyViolation(
                    PolicyViolationReason.TOOL_UNAVAILABLE,
                    'This tool is not available for reservations.'
                )

            check_range(policy, start_date, end_date, self.today()).raise_for_violation()

            existing = self.reservation_repo.list_for_tool(tool_id, OPEN_STATUSES)
            if find_duplicate_request(borrower_id, start_date, end_date, existing):
                raise ReservationConflict('You already have a pending request for these dates.')
            if self.block_booked_overlap and has_conflict(start_date, end_date, existing):
                raise ReservationConflict('This tool is already booked for the selected dates.')

            reservation = Reservation(
                tool_id=tool_id,
                borrower_id=borrower_id,
                status=state_machine.INITIAL_STATUS,
                start_date=start_date,
                end_date=end_date,
                note=note
            )
            event = ReservationEvent(
                action=ReservationAction.CREATE,
                actor_id=borrower_id,
                from_status=None,
                to_status=state_machine.INITIAL_STATUS,
                note=note
            )
            self.reservation_repo.create(reservation, event)
            result = reservation.to_dict()

        logger.info(f"Reservation {result['id']} requested for tool {tool_id} by {borrower_id}")
        self._notify(ReservationAction.CREATE, result, ActorRole.BORROWER, result['note'])
        return result

    def approve_reservation(self, reservation_id: str, actor_id: str,
                            note: Optional[str] = None) -> Dict[str, Any]:
        """Owner accepts a pending request; dates are re-checked against bookings"""
        return self._apply(reservation_id, actor_id, ReservationAction.APPROVE, note)

    def decline_reservation(self, reservation_id: str, actor_id: str, reason: Optional[str]) -> Dict[str, Any]:
        """Owner rejects a pending request; a reason is mandatory"""
        reason = (reason or '').strip()
        if not reason:
            raise ReservationValidationError('A reason is required to decline a reservation.')
        return self._apply(reservation_id, actor_id, ReservationAction.DECLINE, reason)

    def cancel_reservation(self, reservation_id: str, actor_id: str,
                           note: Optional[str] = None) -> Dict[str, Any]:
        return self._apply(reservation_id, actor_id, ReservationAction.CANCEL, note)

    def confirm_pickup(self, reservation_id: str, actor_id: str,
                       note: Optional[str] = None) -> Dict[str, Any]:
        return self._apply(reservation_id, actor_id, ReservationAction.PICKUP, note)

    def confirm_return(self, reservation_id: str, actor_id: str,
                       note: Optional[str] = None) -> Dict[str, Any]:
        return self._apply(reservation_id, actor_id, ReservationAction.RETURN, note)

    def _apply(self, reservation_id: str, actor_id: str, action: ReservationAction,
               note: Optional[str]) -> Dict[str, Any]:
        reservation = self.reservation_repo.get_by_id(reservation_id)
        if not reservation:
            raise NotFound(f'Reservation {reservation_id} not found.')

        with self.tool_repo.locked(reservation.tool_id) as tool:
            reservation = self.reservation_repo.get_by_id(reservation_id)
            current = reservation.status
            role = authorizer.role_for(reservation, actor_id)
            target = state_machine.next_status(current, action, role)

            note = (note or '').strip() or None
            if action == ReservationAction.CANCEL and note is None:
                note = f'Cancelled by {role.value}'

            changes = {'status': target, 'updated_at': datetime.utcnow()}
            # Borrower notes live only in the event history
            if note is not None and role == ActorRole.OWNER:
                changes['owner_note'] = note
            changes.update(self._preconditions(action, reservation, tool))

            event = ReservationEvent(
                reservation_id=reservation.id,
                action=action,
                actor_id=actor_id,
                from_status=current,
                to_status=target,
                note=note
            )
            if not self.reservation_repo.commit_transition(reservation.id, current, changes, event):
                logger.warning(
                    f"Reservation {reservation_id} left {current.value} before {action.value} committed"
                )
                raise ReservationConflict('This reservation was changed by someone else. Please reload and try again.')

            result = self.reservation_repo.get_by_id(reservation_id).to_dict()

        logger.info(
            f"Reservation {reservation_id}: {action.value} by {actor_id} "
            f"({current.value} -> {target.value})"
        )
        self._notify(action, result, role, note)
        return result

    def _preconditions(self, action: ReservationAction, reservation: Reservation, tool) -> Dict[str, Any]:
        """Action-specific checks; returns extra column changes for the write"""
        if action == ReservationAction.APPROVE:
            # Notice and length are re-checked against today, not creation day
            check_range(
                tool.to_policy(), reservation.start_date, reservation.end_date, self.today()
            ).raise_for_violation()

            booked = self.reservation_repo.list_for_tool(reservation.tool_id, BINDING_STATUSES)
            if has_conflict(reservation.start_date, reservation.end_date, booked,
                            exclude_id=reservation.id):
                raise ReservationConflict(
                    'These dates overlap a confirmed reservation for this tool.'
                )
            return {}

        if action == ReservationAction.PICKUP:
            changes = {'pickup_confirmed_at': datetime.utcnow()}
            if self.today() < reservation.start_date:
                policy = self.early_pickup_policy
                if policy == EarlyPickupPolicy.BLOCK:
                    raise PolicyViolation(
                        PolicyViolationReason.EARLY_PICKUP,
                        'Pickup cannot be confirmed before the reservation start date.'
                    )
                if policy == EarlyPickupPolicy.FLAG:
                    logger.warning(
                        f"Early pickup of reservation {reservation.id}: "
                        f"starts {reservation.start_date.isoformat()}, picked up {self.today().isoformat()}"
                    )
                    changes['early_pickup'] = True
            return changes

        if action == ReservationAction.RETURN:
            return {'return_confirmed_at': datetime.utcnow()}

        return {}

    def _notify(self, action: ReservationAction, reservation: Dict[str, Any], actor_role: ActorRole,
                note: Optional[str] = None):
        """Hand the event to the notifier; never fails the action"""
        if action in (ReservationAction.APPROVE, ReservationAction.DECLINE):
            recipient = reservation['borrower_id']
        elif action == ReservationAction.CANCEL:
            recipient = (reservation['borrower_id'] if actor_role == ActorRole.OWNER
                         else reservation['owner_id'])
        else:
            recipient = reservation['owner_id']

        try:
            self.notifier.publish_reservation_event(action, reservation, recipient, note=note)
        except Exception as e:
            logger.error(f"Failed to notify {action.value} for reservation {reservation['id']}: {str(e)}")

    # ============================================================================
    # Queries
    # ============================================================================

    def get_reservation(self, reservation_id: str, actor_id: str) -> Dict[str, Any]:
        """Reservation detail with the caller's role and open actions"""
        reservation = self.reservation_repo.get_by_id(reservation_id)
        if not reservation:
            raise NotFound(f'Reservation {reservation_id} not found.')

        if not authorizer.can_view(reservation, actor_id):
            raise Forbidden('You do not have access to this reservation.')

        result = reservation.to_dict()
        result['role'] = authorizer.role_for(reservation, actor_id).value
        result['permitted_actions'] = [
            a.value for a in authorizer.permitted_actions_for(reservation, actor_id)
        ]
        result['history'] = [e.to_dict() for e in self.reservation_repo.get_events(reservation_id)]
        return result

    def list_reservations(self, actor_id: str, role: str = 'all',
                          statuses: Optional[Iterable[str]] = None, tool_id: Optional[str] = None,
                          page: int = 1, per_page: Optional[int] = None) -> Dict[str, Any]:
        """Reservations where the caller is borrower and/or lender, newest start first"""
        role = role or 'all'
        if role not in LIST_ROLES:
            raise ReservationValidationError(f"role must be one of {', '.join(LIST_ROLES)}.")

        try:
            status_filter = [ReservationStatus(s) for s in statuses or []]
        except ValueError:
            raise ReservationValidationError(f"Unknown status in {list(statuses)}.")

        max_page_size = current_app.config.get('MAX_PAGE_SIZE', 100)
        per_page = min(per_page or current_app.config.get('DEFAULT_PAGE_SIZE', 20), max_page_size)
        page = max(page or 1, 1)

        items, total = self.reservation_repo.search(
            user_id=actor_id,
            role=role,
            tool_id=tool_id,
            statuses=status_filter,
            page=page,
            per_page=per_page
        )

        results = []
        for reservation in items:
            data = reservation.to_dict()
            data['role'] = authorizer.role_for(reservation, actor_id).value
            results.append(data)

        return {
            'items': results,
            'total': total,
            'page': page,
            'per_page': per_page
        }

    def get_tool_calendar(self, tool_id: str, from_date: Optional[date] = None) -> Dict[str, Any]:
        """Booked ranges of a tool plus the earliest start it accepts today"""
        policy = self.tool_repo.get_policy(tool_id)
        if policy is None:
            raise NotFound(f'Tool {tool_id} not found.')

        today = self.today()
        booked = self.reservation_repo.list_booked_for_tool(tool_id, from_date or today)
        return {
            'tool_id': tool_id,
            'status': policy.status.value,
            'advance_notice_days': policy.advance_notice_days,
            'max_loan_days': policy.max_loan_days,
            'earliest_start': earliest_start(policy, today).isoformat(),
            'booked': [
                {
                    'reservation_id': r.id,
                    'status': r.status.value,
                    'start_date': r.start_date.isoformat(),
                    'end_date': r.end_date.isoformat()
                }
                for r in booked
            ]
        }

    def get_dashboard_stats(self, actor_id: str) -> Dict[str, int]:
        return {
            'tools_listed': self.tool_repo.count_by_owner(actor_id),
            'active_loans': self.reservation_repo.count_for_borrower(actor_id, ReservationStatus.ACTIVE),
            'pending_requests': self.reservation_repo.count_for_owner(actor_id, ReservationStatus.PENDING)
        }
