"""
Tools Controller - Tool scheduling policy and booked-date calendar
"""

from flask import request
from flask_restx import Resource, fields
from src.api.controllers.api import api
from src.api.middlewares.auth import require_auth, require_admin
from src.repositories import ToolRepository
from src.services import ReservationService
from src.utils.errors import NotFound, ReservationValidationError
from src.utils.schemas import (
    ToolPolicyRequestSchema, ToolPolicyResponseSchema, CalendarQuerySchema, load_request
)
import logging

logger = logging.getLogger(__name__)

tools_ns = api.namespace('tools', description='Tool policy and availability')

policy_request_schema = ToolPolicyRequestSchema()
policy_response_schema = ToolPolicyResponseSchema()
calendar_query_schema = CalendarQuerySchema()

tool_policy_model = api.model('ToolPolicy', {
    'owner_id': fields.String(description='Owner of the tool (required for new tools)'),
    'name': fields.String(description='Tool name'),
    'status': fields.String(description='available, unavailable or archived'),
    'advance_notice_days': fields.Integer(description='Minimum days between request and start'),
    'max_loan_days': fields.Integer(description='Longest loan in days, inclusive')
})


@tools_ns.route('/<string:tool_id>/policy')
class ToolPolicyResource(Resource):
    @api.doc('get_tool_policy')
    @require_auth
    def get(self, tool_id):
        """Get the scheduling policy of a tool"""
        tool = ToolRepository().get_by_id(tool_id)
        if not tool:
            raise NotFound(f'Tool {tool_id} not found.')
        return policy_response_schema.dump(tool.to_dict()), 200

    @api.doc('update_tool_policy')
    @api.expect(tool_policy_model)
    @require_admin
    def put(self, tool_id):
        """Create or update a tool's scheduling policy (admin)"""
        data = load_request(policy_request_schema, request.get_json(silent=True) or {})
        tool_repo = ToolRepository()

        if not tool_repo.get_by_id(tool_id) and not data.get('owner_id'):
            raise ReservationValidationError('owner_id is required for a new tool.')

        try:
            tool = tool_repo.upsert(tool_id, **data)
        except ValueError as e:
            raise ReservationValidationError(str(e))

        logger.info(f"Tool policy updated: {tool_id}")
        return policy_response_schema.dump(tool.to_dict()), 200


@tools_ns.route('/<string:tool_id>/availability')
class ToolAvailability(Resource):
    @api.doc('get_tool_availability')
    @require_auth
    def get(self, tool_id):
        """Booked (confirmed or active) ranges of a tool"""
        params = load_request(calendar_query_schema, request.args.to_dict())
        return ReservationService().get_tool_calendar(tool_id, params.get('from_date')), 200
