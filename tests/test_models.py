import pytest
from datetime import timedelta

from src.models import (
    Tool, ToolStatus, Reservation, ReservationStatus, ReservationEvent, ReservationAction
)
from tests.conftest import create_test_tool, create_test_reservation, TODAY, BORROWER_ID, OWNER_ID


class TestTool:
    """Test Tool model."""

    def test_create_tool_defaults(self, db_session):
        """Test default policy values."""
        tool = Tool(id='tool-defaults', owner_id=OWNER_ID)
        db_session.add(tool)
        db_session.commit()

        assert tool.status == ToolStatus.AVAILABLE
        assert tool.advance_notice_days == 1
        assert tool.max_loan_days == 7
        assert tool.created_at is not None

    def test_to_policy(self, db_session):
        tool = create_test_tool(db_session, advance_notice_days=3, max_loan_days=14)

        policy = tool.to_policy()

        assert policy.tool_id == tool.id
        assert policy.owner_id == OWNER_ID
        assert policy.advance_notice_days == 3
        assert policy.max_loan_days == 14
        assert policy.is_available

    def test_to_dict(self, db_session):
        tool = create_test_tool(db_session, status=ToolStatus.UNAVAILABLE)

        data = tool.to_dict()

        assert data['id'] == tool.id
        assert data['status'] == 'unavailable'


class TestReservation:
    """Test Reservation model."""

    def test_create_reservation(self, db_session):
        tool = create_test_tool(db_session)
        reservation = create_test_reservation(db_session, tool)

        assert reservation.id is not None
        assert len(reservation.id) == 36
        assert reservation.status == ReservationStatus.PENDING
        assert reservation.early_pickup is False
        assert reservation.pickup_confirmed_at is None

    def test_owner_id_comes_from_tool(self, db_session):
        tool = create_test_tool(db_session, owner_id='someone-else')
        reservation = create_test_reservation(db_session, tool)

        assert reservation.owner_id == 'someone-else'

    def test_to_dict(self, db_session):
        tool = create_test_tool(db_session)
        reservation = create_test_reservation(db_session, tool, note='Need it for a shelf')

        data = reservation.to_dict()

        assert data['tool_id'] == tool.id
        assert data['borrower_id'] == BORROWER_ID
        assert data['owner_id'] == OWNER_ID
        assert data['status'] == 'pending'
        assert data['start_date'] == (TODAY + timedelta(days=2)).isoformat()
        assert data['note'] == 'Need it for a shelf'
        assert data['return_confirmed_at'] is None


class TestReservationEvent:
    """Test ReservationEvent model."""

    def test_events_relationship_ordered(self, db_session):
        tool = create_test_tool(db_session)
        reservation = create_test_reservation(db_session, tool)
        db_session.add(ReservationEvent(
            reservation_id=reservation.id, action=ReservationAction.CREATE,
            actor_id=BORROWER_ID, from_status=None, to_status=ReservationStatus.PENDING
        ))
        db_session.add(ReservationEvent(
            reservation_id=reservation.id, action=ReservationAction.APPROVE,
            actor_id=OWNER_ID, from_status=ReservationStatus.PENDING,
            to_status=ReservationStatus.CONFIRMED
        ))
        db_session.commit()

        actions = [e.action for e in reservation.events]

        assert actions == [ReservationAction.CREATE, ReservationAction.APPROVE]
        assert reservation.events[0].to_dict()['from_status'] is None
        assert reservation.events[1].to_dict()['to_status'] == 'confirmed'
