import pytest
from collections import namedtuple
from datetime import date, timedelta

from src.models import ReservationStatus
from src.services.conflicts import (
    ranges_overlap, find_conflicts, has_conflict, find_duplicate_request,
    BINDING_STATUSES, OPEN_STATUSES
)

Booking = namedtuple('Booking', ['id', 'borrower_id', 'status', 'start_date', 'end_date'])

BASE = date(2026, 3, 1)


def d(n):
    return BASE + timedelta(days=n)


def booking(id, start, end, status=ReservationStatus.CONFIRMED, borrower_id='borrower-1'):
    return Booking(id, borrower_id, status, d(start), d(end))


class TestRangesOverlap:
    """Test inclusive date range overlap."""

    def test_shared_boundary_day_overlaps(self):
        assert ranges_overlap(d(1), d(3), d(3), d(5))
        assert ranges_overlap(d(3), d(5), d(1), d(3))

    def test_adjacent_ranges_do_not_overlap(self):
        assert not ranges_overlap(d(1), d(3), d(4), d(6))
        assert not ranges_overlap(d(4), d(6), d(1), d(3))

    def test_containment_overlaps(self):
        assert ranges_overlap(d(1), d(10), d(3), d(4))
        assert ranges_overlap(d(3), d(4), d(1), d(10))

    def test_single_day_ranges(self):
        assert ranges_overlap(d(2), d(2), d(2), d(2))
        assert not ranges_overlap(d(2), d(2), d(3), d(3))

    @pytest.mark.parametrize('s1,e1,s2,e2', [
        (0, 2, 1, 5), (3, 4, 0, 9), (0, 0, 0, 3), (5, 9, 1, 5),
    ])
    def test_symmetric(self, s1, e1, s2, e2):
        assert ranges_overlap(d(s1), d(e1), d(s2), d(e2)) == ranges_overlap(d(s2), d(e2), d(s1), d(e1))


class TestFindConflicts:
    """Test conflict lookup against existing reservations."""

    def test_only_binding_statuses_conflict_by_default(self):
        existing = [
            booking('confirmed', 2, 4, ReservationStatus.CONFIRMED),
            booking('active', 3, 5, ReservationStatus.ACTIVE),
            booking('pending', 2, 4, ReservationStatus.PENDING),
            booking('cancelled', 2, 4, ReservationStatus.CANCELLED),
            booking('declined', 2, 4, ReservationStatus.DECLINED),
            booking('completed', 2, 4, ReservationStatus.COMPLETED),
        ]

        conflicts = find_conflicts(d(3), d(3), existing)

        assert {c.id for c in conflicts} == {'confirmed', 'active'}

    def test_exclude_id_skips_self(self):
        existing = [booking('self', 2, 4)]

        assert not has_conflict(d(2), d(4), existing, exclude_id='self')
        assert has_conflict(d(2), d(4), existing)

    def test_open_statuses_include_pending(self):
        existing = [booking('pending', 2, 4, ReservationStatus.PENDING)]

        assert has_conflict(d(4), d(6), existing, statuses=OPEN_STATUSES)
        assert not has_conflict(d(4), d(6), existing, statuses=BINDING_STATUSES)

    def test_non_overlapping_range_is_clear(self):
        existing = [booking('a', 2, 4), booking('b', 8, 9)]

        assert find_conflicts(d(5), d(7), existing) == []


class TestFindDuplicateRequest:
    """Test double-submission detection."""

    def test_same_borrower_same_dates_pending(self):
        existing = [booking('p', 2, 4, ReservationStatus.PENDING)]

        assert find_duplicate_request('borrower-1', d(2), d(4), existing).id == 'p'

    def test_different_dates_or_borrower_is_not_duplicate(self):
        existing = [booking('p', 2, 4, ReservationStatus.PENDING)]

        assert find_duplicate_request('borrower-1', d(2), d(5), existing) is None
        assert find_duplicate_request('borrower-2', d(2), d(4), existing) is None

    def test_confirmed_request_is_not_duplicate(self):
        existing = [booking('c', 2, 4, ReservationStatus.CONFIRMED)]

        assert find_duplicate_request('borrower-1', d(2), d(4), existing) is None
