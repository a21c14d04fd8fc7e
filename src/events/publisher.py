"""
Dapr Event Publisher for the Reservation Service
Synchronous Flask-compatible event publishing using Dapr SDK
"""

from dapr.clients import DaprClient
from flask import current_app
import json
from typing import Dict, Any, Optional
from datetime import datetime
import uuid

from src.api.middlewares.trace_context import get_trace_id, create_traceparent_header
from src.models import ReservationAction


# Topic per lifecycle action
ACTION_TOPICS = {
    ReservationAction.CREATE: "reservation.requested",
    ReservationAction.APPROVE: "reservation.approved",
    ReservationAction.DECLINE: "reservation.declined",
    ReservationAction.CANCEL: "reservation.cancelled",
    ReservationAction.PICKUP: "reservation.picked_up",
    ReservationAction.RETURN: "reservation.returned",
}


class ReservationEventPublisher:
    """
    Synchronous Dapr event publisher for the reservation service.
    Notification delivery is owned by downstream subscribers; a failed
    publish is logged and reported as False, never raised.
    """

    def __init__(self):
        self.service_name = "reservation-service"

    @property
    def pubsub_name(self):
        return current_app.config.get('PUBSUB_NAME', 'reservation-pubsub')

    def _build_event_payload(self, event_type: str, data: Dict[str, Any],
                             correlation_id: Optional[str] = None) -> Dict[str, Any]:
        """Build CloudEvents-compliant event payload"""
        payload = {
            "specversion": "1.0",
            "type": event_type,
            "source": self.service_name,
            "id": str(uuid.uuid4()),
            "time": datetime.utcnow().isoformat() + "Z",
            "datacontenttype": "application/json",
            "data": data,
            "correlationid": correlation_id or str(uuid.uuid4())
        }
        traceparent = create_traceparent_header()
        if traceparent:
            # CloudEvents distributed tracing extension
            payload["traceparent"] = traceparent
        return payload

    def publish_event(self, event_type: str, data: Dict[str, Any],
                      correlation_id: Optional[str] = None) -> bool:
        """
        Publish event to Dapr pub/sub synchronously.

        Args:
            event_type: Event type/topic name (e.g., 'reservation.approved')
            data: Event payload data
            correlation_id: Optional correlation ID for tracing (defaults to current trace_id)

        Returns:
            bool: True if published successfully, False otherwise
        """
        if not current_app.config.get('EVENTS_ENABLED', True):
            current_app.logger.debug(f"Event publishing disabled, skipping {event_type}")
            return False

        try:
            if correlation_id is None:
                correlation_id = get_trace_id()

            event_payload = self._build_event_payload(event_type, data, correlation_id)

            with DaprClient() as client:
                client.publish_event(
                    pubsub_name=self.pubsub_name,
                    topic_name=event_type,
                    data=json.dumps(event_payload),
                    data_content_type="application/json"
                )

            current_app.logger.info(
                f"✅ Published event: {event_type}",
                extra={
                    "eventType": event_type,
                    "correlationId": correlation_id,
                    "service": self.service_name
                }
            )
            return True

        except Exception as e:
            current_app.logger.error(
                f"❌ Failed to publish event: {event_type} - {str(e)}",
                extra={
                    "eventType": event_type,
                    "error": str(e),
                    "correlationId": correlation_id
                }
            )
            return False

    def publish_reservation_event(self, action: ReservationAction, reservation: Dict[str, Any],
                                  recipient_id: Optional[str], note: Optional[str] = None,
                                  correlation_id: Optional[str] = None) -> bool:
        """Publish the notification event for a completed reservation action; `note` is the acting party's"""
        data = {
            "reservationId": reservation['id'],
            "toolId": reservation['tool_id'],
            "borrowerId": reservation['borrower_id'],
            "ownerId": reservation.get('owner_id'),
            "recipientId": recipient_id,
            "status": reservation['status'],
            "startDate": reservation['start_date'],
            "endDate": reservation['end_date'],
            "note": note,
            "timestamp": datetime.utcnow().isoformat() + "Z"
        }
        return self.publish_event(ACTION_TOPICS[action], data, correlation_id)


# Global singleton instance
event_publisher = ReservationEventPublisher()
