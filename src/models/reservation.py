"""
Reservation Model
"""

from src.database import db
from datetime import datetime
import uuid
from .enums import ReservationStatus


class Reservation(db.Model):
    """Borrow request for a tool over an inclusive date range"""
    __tablename__ = 'reservations'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tool_id = db.Column(db.String(36), db.ForeignKey('tools.id'), nullable=False, index=True)
    borrower_id = db.Column(db.String(36), nullable=False, index=True)
    status = db.Column(db.Enum(ReservationStatus), default=ReservationStatus.PENDING, nullable=False, index=True)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    note = db.Column(db.Text, nullable=True)
    owner_note = db.Column(db.Text, nullable=True)
    pickup_confirmed_at = db.Column(db.DateTime, nullable=True)
    return_confirmed_at = db.Column(db.DateTime, nullable=True)
    early_pickup = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    events = db.relationship(
        'ReservationEvent', backref='reservation', lazy=True,
        order_by='ReservationEvent.id'
    )

    def __repr__(self):
        return f'<Reservation {self.id}>'

    @property
    def owner_id(self):
        """Owner of the reserved tool"""
        return self.tool.owner_id if self.tool else None

    def to_dict(self):
        """Convert to dictionary"""
        return {
            'id': self.id,
            'tool_id': self.tool_id,
            'borrower_id': self.borrower_id,
            'owner_id': self.owner_id,
            'status': self.status.value,
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
            'note': self.note,
            'owner_note': self.owner_note,
            'pickup_confirmed_at': self.pickup_confirmed_at.isoformat() if self.pickup_confirmed_at else None,
            'return_confirmed_at': self.return_confirmed_at.isoformat() if self.return_confirmed_at else None,
            'early_pickup': self.early_pickup,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat()
        }
