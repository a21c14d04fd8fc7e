"""
Reservation Repository Implementation
"""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import or_

from src.database import db
from src.models import Reservation, ReservationEvent, ReservationStatus, Tool
from .base import ReservationRepositoryInterface

BOOKED = (ReservationStatus.CONFIRMED, ReservationStatus.ACTIVE)


class ReservationRepository(ReservationRepositoryInterface):
    """Concrete implementation of the reservation store"""

    def get_by_id(self, reservation_id: str) -> Optional[Reservation]:
        """Get reservation by ID"""
        return Reservation.query.filter_by(id=reservation_id).first()

    def list_for_tool(self, tool_id: str, statuses: Iterable[ReservationStatus]) -> List[Reservation]:
        """Get reservations of a tool in the given statuses"""
        return Reservation.query.filter(
            Reservation.tool_id == tool_id,
            Reservation.status.in_(list(statuses))
        ).all()

    def create(self, reservation: Reservation, event: ReservationEvent) -> Reservation:
        """Insert a new reservation with its creation event"""
        try:
            db.session.add(reservation)
            db.session.flush()
            event.reservation_id = reservation.id
            db.session.add(event)
            db.session.commit()
            return reservation
        except Exception:
            db.session.rollback()
            raise

    def commit_transition(self, reservation_id: str, expected_status: ReservationStatus,
                          changes: Dict[str, Any], event: ReservationEvent) -> bool:
        """
        Conditionally apply `changes` and record `event`.

        The update only matches while the row is still in `expected_status`;
        returns False (and writes nothing) when it no longer is.
        """
        try:
            updated = Reservation.query.filter(
                Reservation.id == reservation_id,
                Reservation.status == expected_status
            ).update(changes, synchronize_session=False)

            if updated != 1:
                db.session.rollback()
                return False

            db.session.add(event)
            db.session.commit()
            return True
        except Exception:
            db.session.rollback()
            raise

    def search(self, **kwargs) -> tuple[List[Reservation], int]:
        """Search reservations visible to a user"""
        query = Reservation.query.join(Tool, Reservation.tool_id == Tool.id)

        user_id = kwargs.get('user_id')
        role = kwargs.get('role') or 'all'
        if user_id:
            if role == 'borrower':
                query = query.filter(Reservation.borrower_id == user_id)
            elif role == 'lender':
                query = query.filter(Tool.owner_id == user_id)
            else:
                query = query.filter(or_(
                    Reservation.borrower_id == user_id,
                    Tool.owner_id == user_id
                ))

        if kwargs.get('tool_id'):
            query = query.filter(Reservation.tool_id == kwargs['tool_id'])

        if kwargs.get('statuses'):
            query = query.filter(Reservation.status.in_(list(kwargs['statuses'])))

        total = query.count()
        page = kwargs.get('page', 1)
        per_page = kwargs.get('per_page', 20)

        items = query.order_by(
            Reservation.start_date.desc(), Reservation.created_at.desc()
        ).paginate(page=page, per_page=per_page, error_out=False).items
        return items, total

    def list_booked_for_tool(self, tool_id: str, from_date: Optional[date] = None) -> List[Reservation]:
        """Confirmed and active reservations of a tool, earliest first"""
        query = Reservation.query.filter(
            Reservation.tool_id == tool_id,
            Reservation.status.in_(BOOKED)
        )
        if from_date:
            query = query.filter(Reservation.end_date >= from_date)
        return query.order_by(Reservation.start_date.asc()).all()

    def count_for_borrower(self, borrower_id: str, status: ReservationStatus) -> int:
        return Reservation.query.filter_by(borrower_id=borrower_id, status=status).count()

    def count_for_owner(self, owner_id: str, status: ReservationStatus) -> int:
        return Reservation.query.join(Tool, Reservation.tool_id == Tool.id).filter(
            Tool.owner_id == owner_id,
            Reservation.status == status
        ).count()

    def get_events(self, reservation_id: str) -> List[ReservationEvent]:
        """Lifecycle history of a reservation, oldest first"""
        return ReservationEvent.query.filter_by(
            reservation_id=reservation_id
        ).order_by(ReservationEvent.id.asc()).all()
