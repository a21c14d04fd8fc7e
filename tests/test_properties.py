import os
import random
import tempfile
import threading
import uuid
from datetime import timedelta
import pytest
from itertools import combinations

from flask import Flask

from src.database import db
from src.models import Reservation, ReservationStatus, Tool
from src.services import ReservationService
from src.services.conflicts import BINDING_STATUSES, ranges_overlap
from src.utils.errors import ReservationError, ReservationConflict
from tests.conftest import (
    create_test_tool, create_test_reservation, days, TODAY, RecordingNotifier, OWNER_ID
)

BORROWERS = ['borrower-1', 'borrower-2', 'borrower-3', 'borrower-4']


def assert_no_double_booking(tool_id):
    booked = Reservation.query.filter(
        Reservation.tool_id == tool_id,
        Reservation.status.in_(list(BINDING_STATUSES))
    ).all()
    for a, b in combinations(booked, 2):
        assert not ranges_overlap(a.start_date, a.end_date, b.start_date, b.end_date), \
            f'{a.id} ({a.start_date}..{a.end_date}) overlaps {b.id} ({b.start_date}..{b.end_date})'


class TestNoDoubleBooking:
    """Random create/approve/cancel sequences never leave overlapping bookings."""

    @pytest.mark.parametrize('seed', range(12))
    def test_random_action_sequences(self, service, db_session, seed):
        rng = random.Random(seed)
        tool = create_test_tool(db_session, advance_notice_days=1, max_loan_days=5)
        tool_id = tool.id
        created = []

        for _ in range(40):
            roll = rng.random()
            try:
                if roll < 0.5 or not created:
                    start = days(rng.randint(0, 20))
                    end = start + timedelta(days=rng.randint(0, 6))
                    result = service.create_reservation(tool_id, rng.choice(BORROWERS), start, end)
                    created.append(result['id'])
                elif roll < 0.9:
                    service.approve_reservation(rng.choice(created), OWNER_ID)
                else:
                    service.cancel_reservation(rng.choice(created), OWNER_ID)
            except ReservationError:
                pass

            assert_no_double_booking(tool_id)

    def test_approving_every_pending_request(self, service, db_session):
        """Approving all of a pile of overlapping requests confirms a non-overlapping subset."""
        tool = create_test_tool(db_session, max_loan_days=7)
        for i, borrower in enumerate(BORROWERS):
            create_test_reservation(db_session, tool, borrower_id=borrower,
                                    start_date=days(2 + i), end_date=days(4 + i))
        pending = [r.id for r in Reservation.query.filter_by(tool_id=tool.id).all()]

        outcomes = []
        for reservation_id in pending:
            try:
                outcomes.append(service.approve_reservation(reservation_id, OWNER_ID)['status'])
            except ReservationConflict:
                outcomes.append('conflict')

        assert 'confirmed' in outcomes
        assert 'conflict' in outcomes
        assert_no_double_booking(tool.id)


@pytest.fixture
def race_app():
    """Separate app on a file-backed SQLite database so threads use real connections."""
    fd, path = tempfile.mkstemp(suffix='.db')
    os.close(fd)

    app = Flask('race')
    app.config.update(
        TESTING=True,
        SQLALCHEMY_DATABASE_URI=f'sqlite:///{path}',
        EVENTS_ENABLED=False,
        EARLY_PICKUP_POLICY='flag',
        BLOCK_BOOKED_OVERLAP_ON_CREATE=False,
    )
    db.init_app(app)

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()
        db.engine.dispose()
    os.remove(path)


class TestConcurrentApproval:
    """Two concurrent approvals of overlapping requests on one tool."""

    def _seed(self, app):
        with app.app_context():
            tool = Tool(id=str(uuid.uuid4()), owner_id=OWNER_ID, advance_notice_days=1, max_loan_days=7)
            db.session.add(tool)
            db.session.commit()
            first = Reservation(tool_id=tool.id, borrower_id='borrower-1',
                                status=ReservationStatus.PENDING, start_date=days(2), end_date=days(4))
            second = Reservation(tool_id=tool.id, borrower_id='borrower-2',
                                 status=ReservationStatus.PENDING, start_date=days(3), end_date=days(5))
            db.session.add_all([first, second])
            db.session.commit()
            return tool.id, [first.id, second.id]

    @pytest.mark.parametrize('round_', range(5))
    def test_exactly_one_approval_wins(self, race_app, round_):
        tool_id, reservation_ids = self._seed(race_app)
        barrier = threading.Barrier(len(reservation_ids))
        outcomes = {}

        def approve(reservation_id):
            with race_app.app_context():
                service = ReservationService(notifier=RecordingNotifier(), today_provider=lambda: TODAY)
                barrier.wait()
                try:
                    outcomes[reservation_id] = service.approve_reservation(reservation_id, OWNER_ID)['status']
                except ReservationConflict:
                    outcomes[reservation_id] = 'conflict'
                except Exception as e:
                    outcomes[reservation_id] = repr(e)

        threads = [threading.Thread(target=approve, args=(rid,)) for rid in reservation_ids]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=30)

        assert sorted(outcomes.values()) == ['confirmed', 'conflict']

        with race_app.app_context():
            statuses = sorted(r.status.value for r in Reservation.query.filter_by(tool_id=tool_id).all())
            assert statuses == ['confirmed', 'pending']
            assert_no_double_booking(tool_id)
