"""
Dapr Event Subscription Endpoints for the Reservation Service
Flask blueprint handling Dapr pub/sub subscriptions
"""

from flask import Blueprint, request, jsonify, current_app
from src.services import ToolEventsService

events_bp = Blueprint('events', __name__, url_prefix='/dapr')

# topic -> route suffix
TOOL_TOPICS = {
    'tool.created': 'tool-created',
    'tool.updated': 'tool-updated',
    'tool.deleted': 'tool-deleted',
}


@events_bp.route('/subscribe', methods=['GET'])
def get_subscriptions():
    """
    Dapr calls this endpoint to discover subscription configurations.
    Returns list of topics this service wants to subscribe to.
    """
    pubsub_name = current_app.config.get('PUBSUB_NAME', 'reservation-pubsub')
    subscriptions = [
        {
            "pubsubname": pubsub_name,
            "topic": topic,
            "route": f"/dapr/events/{route}"
        }
        for topic, route in TOOL_TOPICS.items()
    ]

    current_app.logger.info(
        f"📋 Dapr subscription discovery: {len(subscriptions)} subscriptions configured"
    )

    return jsonify(subscriptions)


def _dispatch(topic, handler):
    try:
        event_data = request.get_json(silent=True) or {}
        correlation_id = event_data.get('correlationid', 'N/A')

        current_app.logger.info(
            f"📥 Received {topic} event",
            extra={"correlationId": correlation_id}
        )

        result = handler(event_data)

        if result.get('status') == 'success':
            return jsonify({"success": True}), 200
        else:
            # Even on error, return 200 to Dapr so the message is not redelivered
            return jsonify({"success": False, "error": result.get('message')}), 200

    except Exception as e:
        current_app.logger.error(f"❌ Error processing {topic}: {str(e)}")
        return jsonify({"success": False, "error": str(e)}), 200


# ============================================================================
# Tool Events
# ============================================================================

@events_bp.route('/events/tool-created', methods=['POST'])
def tool_created():
    """Handle tool.created event"""
    return _dispatch('tool.created', ToolEventsService().handle_tool_created)


@events_bp.route('/events/tool-updated', methods=['POST'])
def tool_updated():
    """Handle tool.updated event"""
    return _dispatch('tool.updated', ToolEventsService().handle_tool_updated)


@events_bp.route('/events/tool-deleted', methods=['POST'])
def tool_deleted():
    """Handle tool.deleted event"""
    return _dispatch('tool.deleted', ToolEventsService().handle_tool_deleted)
