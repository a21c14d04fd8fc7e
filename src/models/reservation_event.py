"""
Reservation Event Model - append-only history of lifecycle actions
"""

from src.database import db
from datetime import datetime
from .enums import ReservationAction, ReservationStatus


class ReservationEvent(db.Model):
    """One row per successful reservation action"""
    __tablename__ = 'reservation_events'

    id = db.Column(db.Integer, primary_key=True)
    reservation_id = db.Column(db.String(36), db.ForeignKey('reservations.id'), nullable=False, index=True)
    action = db.Column(db.Enum(ReservationAction), nullable=False)
    actor_id = db.Column(db.String(36), nullable=False)
    from_status = db.Column(db.Enum(ReservationStatus), nullable=True)  # None for create
    to_status = db.Column(db.Enum(ReservationStatus), nullable=False)
    note = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<ReservationEvent {self.reservation_id} {self.action.value}>'

    def to_dict(self):
        """Convert to dictionary"""
        return {
            'id': self.id,
            'reservation_id': self.reservation_id,
            'action': self.action.value,
            'actor_id': self.actor_id,
            'from_status': self.from_status.value if self.from_status else None,
            'to_status': self.to_status.value,
            'note': self.note,
            'created_at': self.created_at.isoformat()
        }
