"""
Events module for the Reservation Service
Handles reservation notification publishing via Dapr
"""

from .publisher import event_publisher, ReservationEventPublisher, ACTION_TOPICS

__all__ = ['event_publisher', 'ReservationEventPublisher', 'ACTION_TOPICS']
