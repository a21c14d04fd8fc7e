"""
Availability Calculator - structural legality of a date range for a tool

Pure functions of (tool policy, candidate range, today); other bookings are
the conflict detector's concern.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from src.models.enums import PolicyViolationReason
from src.models.tool import ToolPolicy
from src.utils.errors import PolicyViolation


@dataclass(frozen=True)
class AvailabilityResult:
    reason: Optional[PolicyViolationReason] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    def raise_for_violation(self):
        if not self.ok:
            raise PolicyViolation(self.reason, self.message)


LEGAL = AvailabilityResult()


def loan_length(start_date: date, end_date: date) -> int:
    """Inclusive number of days covered by the range"""
    return (end_date - start_date).days + 1


def earliest_start(policy: ToolPolicy, today: date) -> date:
    return today + timedelta(days=policy.advance_notice_days)


def check_range(policy: ToolPolicy, start_date: date, end_date: date, today: date) -> AvailabilityResult:
    """
    Check a candidate range against the tool's notice and length limits.

    Args:
        policy: Tool scheduling policy
        start_date: First day of the loan
        end_date: Last day of the loan (inclusive)
        today: Reference date for the notice check

    Returns:
        LEGAL, or a result carrying INVERTED_RANGE, TOO_SOON or TOO_LONG
    """
    if end_date < start_date:
        return AvailabilityResult(
            PolicyViolationReason.INVERTED_RANGE,
            'End date must be on or after start date.'
        )

    if start_date < earliest_start(policy, today):
        return AvailabilityResult(
            PolicyViolationReason.TOO_SOON,
            f'This tool requires at least {policy.advance_notice_days} day(s) advance notice.'
        )

    if loan_length(start_date, end_date) > policy.max_loan_days:
        return AvailabilityResult(
            PolicyViolationReason.TOO_LONG,
            f'Maximum loan duration for this tool is {policy.max_loan_days} days.'
        )

    return LEGAL
