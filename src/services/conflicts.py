"""
Conflict Detector - date-range overlap against existing reservations of a tool
"""

from datetime import date
from typing import Iterable, List, Optional

from src.models.enums import ReservationStatus

# Reservations that hold the tool for their dates
BINDING_STATUSES = frozenset({ReservationStatus.CONFIRMED, ReservationStatus.ACTIVE})

# Reservations still in play
OPEN_STATUSES = frozenset({
    ReservationStatus.PENDING,
    ReservationStatus.CONFIRMED,
    ReservationStatus.ACTIVE,
})


def ranges_overlap(start: date, end: date, other_start: date, other_end: date) -> bool:
    """Inclusive overlap test: [start, end] meets [other_start, other_end]"""
    return start <= other_end and other_start <= end


def find_conflicts(start: date, end: date, reservations: Iterable,
                   statuses=BINDING_STATUSES, exclude_id: Optional[str] = None) -> List:
    """
    Return the reservations whose status is in `statuses` and whose range
    overlaps [start, end].

    `reservations` may be ORM rows or any object exposing id, status,
    start_date and end_date.
    """
    return [
        r for r in reservations
        if r.id != exclude_id
        and r.status in statuses
        and ranges_overlap(start, end, r.start_date, r.end_date)
    ]


def has_conflict(start: date, end: date, reservations: Iterable,
                 statuses=BINDING_STATUSES, exclude_id: Optional[str] = None) -> bool:
    return bool(find_conflicts(start, end, reservations, statuses, exclude_id))


def find_duplicate_request(borrower_id: str, start: date, end: date, reservations: Iterable):
    """Pending request by the same borrower for the exact same range, if any"""
    for r in reservations:
        if (r.status == ReservationStatus.PENDING
                and r.borrower_id == borrower_id
                and r.start_date == start
                and r.end_date == end):
            return r
    return None
