"""
Base Repository Interface - Abstract base classes
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, Any, Iterable, List, Optional
from src.models import Tool, ToolPolicy, Reservation, ReservationEvent, ReservationStatus


class ToolRepositoryInterface(ABC):
    """Abstract base class for the tool directory"""

    @abstractmethod
    def get_by_id(self, tool_id: str) -> Optional[Tool]:
        pass

    @abstractmethod
    def get_policy(self, tool_id: str) -> Optional[ToolPolicy]:
        pass

    @abstractmethod
    def upsert(self, tool_id: str, **fields) -> Tool:
        pass

    @abstractmethod
    def archive(self, tool_id: str) -> Optional[Tool]:
        pass

    @abstractmethod
    def locked(self, tool_id: str):
        pass

    @abstractmethod
    def count_by_owner(self, owner_id: str) -> int:
        pass


class ReservationRepositoryInterface(ABC):
    """Abstract base class for the reservation store"""

    @abstractmethod
    def get_by_id(self, reservation_id: str) -> Optional[Reservation]:
        pass

    @abstractmethod
    def list_for_tool(self, tool_id: str, statuses: Iterable[ReservationStatus]) -> List[Reservation]:
        pass

    @abstractmethod
    def create(self, reservation: Reservation, event: ReservationEvent) -> Reservation:
        pass

    @abstractmethod
    def commit_transition(self, reservation_id: str, expected_status: ReservationStatus,
                          changes: Dict[str, Any], event: ReservationEvent) -> bool:
        pass

    @abstractmethod
    def search(self, **kwargs) -> tuple[List[Reservation], int]:
        pass

    @abstractmethod
    def list_booked_for_tool(self, tool_id: str, from_date: Optional[date] = None) -> List[Reservation]:
        pass

    @abstractmethod
    def count_for_borrower(self, borrower_id: str, status: ReservationStatus) -> int:
        pass

    @abstractmethod
    def count_for_owner(self, owner_id: str, status: ReservationStatus) -> int:
        pass

    @abstractmethod
    def get_events(self, reservation_id: str) -> List[ReservationEvent]:
        pass
