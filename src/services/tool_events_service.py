"""
Tool Events Service - keeps the local tool directory in step with the tool service
"""

from flask import current_app
from typing import Dict, Any

from src.repositories import ToolRepository

# Event field -> Tool column
TOOL_FIELDS = {
    'ownerId': 'owner_id',
    'name': 'name',
    'status': 'status',
    'advanceNoticeDays': 'advance_notice_days',
    'maxLoanDays': 'max_loan_days',
}


def _tool_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    return {column: data.get(key) for key, column in TOOL_FIELDS.items()}


class ToolEventsService:
    """Service for handling tool events from the tool service"""

    def __init__(self, tool_repo=None):
        self.tool_repo = tool_repo or ToolRepository()

    def handle_tool_created(self, event_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Handle tool.created event.
        Register the tool and its scheduling policy.
        """
        try:
            data = event_data.get('data', {})
            tool_id = data.get('toolId')
            correlation_id = event_data.get('correlationid')

            if not tool_id:
                raise ValueError("Missing toolId in event data")
            if not data.get('ownerId'):
                raise ValueError("Missing ownerId in event data")

            current_app.logger.info(
                f"🔧 Handling tool.created for tool: {tool_id}",
                extra={"correlationId": correlation_id}
            )

            if self.tool_repo.get_by_id(tool_id):
                current_app.logger.warning(
                    f"⚠️ Tool already registered: {tool_id}",
                    extra={"correlationId": correlation_id}
                )
                return {"status": "skipped", "message": "Tool already exists"}

            self.tool_repo.upsert(tool_id, **_tool_fields(data))

            current_app.logger.info(
                f"✅ Registered tool: {tool_id}",
                extra={"correlationId": correlation_id}
            )
            return {"status": "success", "message": f"Tool {tool_id} registered"}

        except Exception as e:
            current_app.logger.error(
                f"❌ Error handling tool.created: {str(e)}",
                extra={"error": str(e), "correlationId": event_data.get('correlationid')}
            )
            return {"status": "error", "message": str(e)}

    def handle_tool_updated(self, event_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Handle tool.updated event.
        Policy changes apply to future actions only; existing reservations keep their status.
        """
        try:
            data = event_data.get('data', {})
            tool_id = data.get('toolId')
            correlation_id = event_data.get('correlationid')

            if not tool_id:
                raise ValueError("Missing toolId in event data")

            current_app.logger.info(
                f"📝 Handling tool.updated for tool: {tool_id}",
                extra={"correlationId": correlation_id}
            )

            if not self.tool_repo.get_by_id(tool_id) and not data.get('ownerId'):
                current_app.logger.warning(
                    f"⚠️ Tool not found: {tool_id}",
                    extra={"correlationId": correlation_id}
                )
                return {"status": "not_found", "message": "Tool not found"}

            self.tool_repo.upsert(tool_id, **_tool_fields(data))

            current_app.logger.info(
                f"✅ Updated tool policy: {tool_id}",
                extra={"correlationId": correlation_id}
            )
            return {"status": "success", "message": f"Tool {tool_id} updated"}

        except Exception as e:
            current_app.logger.error(
                f"❌ Error handling tool.updated: {str(e)}",
                extra={"error": str(e), "correlationId": event_data.get('correlationid')}
            )
            return {"status": "error", "message": str(e)}

    def handle_tool_deleted(self, event_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Handle tool.deleted event.
        Archive the tool; its reservations are kept as history.
        """
        try:
            data = event_data.get('data', {})
            tool_id = data.get('toolId')
            correlation_id = event_data.get('correlationid')

            if not tool_id:
                raise ValueError("Missing toolId in event data")

            current_app.logger.info(
                f"🗑️ Handling tool.deleted for tool: {tool_id}",
                extra={"correlationId": correlation_id}
            )

            if not self.tool_repo.archive(tool_id):
                current_app.logger.warning(
                    f"⚠️ Tool not found: {tool_id}",
                    extra={"correlationId": correlation_id}
                )
                return {"status": "not_found", "message": "Tool not found"}

            current_app.logger.info(
                f"✅ Archived tool: {tool_id}",
                extra={"correlationId": correlation_id}
            )
            return {"status": "success", "message": f"Tool {tool_id} archived"}

        except Exception as e:
            current_app.logger.error(
                f"❌ Error handling tool.deleted: {str(e)}",
                extra={"error": str(e), "correlationId": event_data.get('correlationid')}
            )
            return {"status": "error", "message": str(e)}
