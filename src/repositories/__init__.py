"""
Repositories package - Data access layer for the reservation service
"""

# Import interfaces
from .base import ToolRepositoryInterface, ReservationRepositoryInterface

# Import concrete implementations
from .tool_repository import ToolRepository
from .reservation_repository import ReservationRepository

# Export all interfaces and implementations
__all__ = [
    'ToolRepositoryInterface',
    'ReservationRepositoryInterface',
    'ToolRepository',
    'ReservationRepository'
]
