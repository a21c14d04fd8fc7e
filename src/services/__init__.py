"""
Services - Business logic layer
"""

# Import service classes
from .reservation_service import ReservationService
from .tool_events_service import ToolEventsService

# Export services
__all__ = [
    'ReservationService',
    'ToolEventsService',
]
