import os
import uuid
import pytest
from datetime import date, datetime, timedelta

import jwt

# Set test environment variables before importing the app
os.environ['FLASK_ENV'] = 'testing'
os.environ['EVENTS_ENABLED'] = 'false'

from src.api.main import create_app
from src.models import db, Tool, ToolStatus, Reservation, ReservationStatus
from src.services import ReservationService

OWNER_ID = 'owner-1'
BORROWER_ID = 'borrower-1'
OTHER_BORROWER_ID = 'borrower-2'
STRANGER_ID = 'stranger-1'

# Fixed reference date for service-level tests
TODAY = date(2026, 3, 2)


@pytest.fixture(scope='session')
def app():
    """Create application for the tests."""
    app = create_app('testing')

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture
def db_session(app):
    """Database session that is emptied after each test."""
    with app.app_context():
        db.create_all()

        yield db.session

        db.session.rollback()
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()


class RecordingNotifier:
    """Notifier double that records every published reservation event."""

    def __init__(self, fail=False):
        self.fail = fail
        self.events = []
        self.notes = []

    def publish_reservation_event(self, action, reservation, recipient_id, note=None, correlation_id=None):
        if self.fail:
            raise RuntimeError('pub/sub unavailable')
        self.events.append((action, reservation['id'], recipient_id))
        self.notes.append(note)
        return True


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def service(db_session, notifier):
    """ReservationService pinned to TODAY with a recording notifier."""
    return ReservationService(notifier=notifier, today_provider=lambda: TODAY)


def make_token(user_id, roles=None, secret='test-secret', **claims):
    payload = {
        'id': user_id,
        'roles': roles or ['customer'],
        'iss': 'auth-service',
        'aud': 'toolshare-platform',
        'exp': datetime.utcnow() + timedelta(hours=1),
    }
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm='HS256')


def auth_headers(user_id, roles=None):
    """Bearer headers for a user."""
    return {
        'Authorization': f'Bearer {make_token(user_id, roles)}',
        'Content-Type': 'application/json'
    }


# Helper functions for tests
def create_test_tool(db_session, **kwargs):
    """Create a test tool with default policy (1 day notice, 7 day max)."""
    defaults = {
        'id': str(uuid.uuid4()),
        'owner_id': OWNER_ID,
        'name': 'Cordless Drill',
        'status': ToolStatus.AVAILABLE,
        'advance_notice_days': 1,
        'max_loan_days': 7,
    }
    defaults.update(kwargs)

    tool = Tool(**defaults)
    db_session.add(tool)
    db_session.commit()
    return tool


def create_test_reservation(db_session, tool, **kwargs):
    """Insert a reservation directly, bypassing the lifecycle rules."""
    defaults = {
        'tool_id': tool.id,
        'borrower_id': BORROWER_ID,
        'status': ReservationStatus.PENDING,
        'start_date': TODAY + timedelta(days=2),
        'end_date': TODAY + timedelta(days=4),
    }
    defaults.update(kwargs)

    reservation = Reservation(**defaults)
    db_session.add(reservation)
    db_session.commit()
    return reservation


def days(n, base=TODAY):
    return base + timedelta(days=n)
