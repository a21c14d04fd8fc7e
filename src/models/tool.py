"""
Tool Model - local mirror of the tool directory's scheduling policy
"""

from dataclasses import dataclass
from datetime import datetime

from src.database import db
from .enums import ToolStatus


@dataclass(frozen=True)
class ToolPolicy:
    """Per-tool scheduling constraints consumed by the reservation engine"""
    tool_id: str
    owner_id: str
    status: ToolStatus
    advance_notice_days: int
    max_loan_days: int

    def __post_init__(self):
        if self.advance_notice_days < 0:
            raise ValueError("advance_notice_days must be >= 0")
        if self.max_loan_days < 1:
            raise ValueError("max_loan_days must be >= 1")

    @property
    def is_available(self):
        return self.status == ToolStatus.AVAILABLE


class Tool(db.Model):
    """Tool listed by an owner"""
    __tablename__ = 'tools'

    id = db.Column(db.String(36), primary_key=True)
    owner_id = db.Column(db.String(36), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=True)
    status = db.Column(db.Enum(ToolStatus), default=ToolStatus.AVAILABLE, nullable=False)
    advance_notice_days = db.Column(db.Integer, default=1, nullable=False)
    max_loan_days = db.Column(db.Integer, default=7, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    reservations = db.relationship('Reservation', backref='tool', lazy=True)

    def __repr__(self):
        return f'<Tool {self.id}>'

    def to_policy(self) -> ToolPolicy:
        """Snapshot the scheduling policy"""
        return ToolPolicy(
            tool_id=self.id,
            owner_id=self.owner_id,
            status=self.status,
            advance_notice_days=self.advance_notice_days,
            max_loan_days=self.max_loan_days,
        )

    def to_dict(self):
        """Convert to dictionary"""
        return {
            'id': self.id,
            'owner_id': self.owner_id,
            'name': self.name,
            'status': self.status.value,
            'advance_notice_days': self.advance_notice_days,
            'max_loan_days': self.max_loan_days,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat()
        }
