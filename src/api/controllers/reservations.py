"""
Reservations Controller - Borrow request lifecycle endpoints
"""

from flask import request
from flask_restx import Resource, fields
from src.api.controllers.api import api
from src.api.middlewares.auth import require_auth, current_user_id
from src.services import ReservationService
from src.utils.schemas import (
    ReservationRequestSchema, ReservationActionSchema, DeclineRequestSchema,
    ReservationSearchSchema, ReservationResponseSchema, load_request
)
import logging

logger = logging.getLogger(__name__)

# Create namespace
reservations_ns = api.namespace('reservations', description='Reservation lifecycle operations')

# Initialize schemas
reservation_request_schema = ReservationRequestSchema()
action_schema = ReservationActionSchema()
decline_schema = DeclineRequestSchema()
search_schema = ReservationSearchSchema()
reservation_response_schema = ReservationResponseSchema()


def get_reservation_models(api):
    """Define API models for reservation operations"""
    reservation_request_model = api.model('ReservationRequest', {
        'tool_id': fields.String(required=True, description='Tool to borrow'),
        'start_date': fields.Date(required=True, description='First day of the loan'),
        'end_date': fields.Date(required=True, description='Last day of the loan (inclusive)'),
        'note': fields.String(description='Message to the owner')
    })

    action_model = api.model('ReservationAction', {
        'note': fields.String(description='Optional note')
    })

    decline_model = api.model('ReservationDecline', {
        'reason': fields.String(required=True, description='Why the request was declined')
    })

    return reservation_request_model, action_model, decline_model


reservation_request_model, action_model, decline_model = get_reservation_models(api)


def _body():
    return request.get_json(silent=True) or {}


@reservations_ns.route('/')
class ReservationList(Resource):
    @api.doc('list_reservations')
    @require_auth
    def get(self):
        """List reservations where the caller is borrower and/or lender"""
        params = load_request(search_schema, request.args.to_dict())
        statuses = [s for s in (params.get('status') or '').split(',') if s]

        result = ReservationService().list_reservations(
            current_user_id(),
            role=params['role'],
            statuses=statuses,
            tool_id=params.get('tool_id'),
            page=params['page'],
            per_page=params.get('per_page')
        )
        per_page = result['per_page']

        return {
            'items': reservation_response_schema.dump(result['items'], many=True),
            'pagination': {
                'page': result['page'],
                'per_page': per_page,
                'total': result['total'],
                'pages': (result['total'] + per_page - 1) // per_page
            }
        }, 200

    @api.doc('create_reservation')
    @api.expect(reservation_request_model)
    @require_auth
    def post(self):
        """Submit a borrow request"""
        data = load_request(reservation_request_schema, _body())
        reservation = ReservationService().create_reservation(
            tool_id=data['tool_id'],
            borrower_id=current_user_id(),
            start_date=data['start_date'],
            end_date=data['end_date'],
            note=data.get('note')
        )
        return reservation_response_schema.dump(reservation), 201


@reservations_ns.route('/<string:reservation_id>')
class ReservationDetail(Resource):
    @api.doc('get_reservation')
    @require_auth
    def get(self, reservation_id):
        """Get a reservation with the caller's role and permitted actions"""
        reservation = ReservationService().get_reservation(reservation_id, current_user_id())
        return reservation_response_schema.dump(reservation), 200


@reservations_ns.route('/<string:reservation_id>/approve')
class ReservationApprove(Resource):
    @api.doc('approve_reservation')
    @api.expect(action_model)
    @require_auth
    def post(self, reservation_id):
        """Owner approves a pending request"""
        data = load_request(action_schema, _body())
        reservation = ReservationService().approve_reservation(
            reservation_id, current_user_id(), data.get('note')
        )
        return reservation_response_schema.dump(reservation), 200


@reservations_ns.route('/<string:reservation_id>/decline')
class ReservationDecline(Resource):
    @api.doc('decline_reservation')
    @api.expect(decline_model)
    @require_auth
    def post(self, reservation_id):
        """Owner declines a pending request with a reason"""
        data = load_request(decline_schema, _body())
        reservation = ReservationService().decline_reservation(
            reservation_id, current_user_id(), data.get('reason')
        )
        return reservation_response_schema.dump(reservation), 200


@reservations_ns.route('/<string:reservation_id>/cancel')
class ReservationCancel(Resource):
    @api.doc('cancel_reservation')
    @api.expect(action_model)
    @require_auth
    def post(self, reservation_id):
        """Borrower or owner cancels a pending or confirmed reservation"""
        data = load_request(action_schema, _body())
        reservation = ReservationService().cancel_reservation(
            reservation_id, current_user_id(), data.get('note')
        )
        return reservation_response_schema.dump(reservation), 200


@reservations_ns.route('/<string:reservation_id>/pickup')
class ReservationPickup(Resource):
    @api.doc('confirm_pickup')
    @api.expect(action_model)
    @require_auth
    def post(self, reservation_id):
        """Borrower confirms they picked the tool up"""
        data = load_request(action_schema, _body())
        reservation = ReservationService().confirm_pickup(
            reservation_id, current_user_id(), data.get('note')
        )
        return reservation_response_schema.dump(reservation), 200


@reservations_ns.route('/<string:reservation_id>/return')
class ReservationReturn(Resource):
    @api.doc('confirm_return')
    @api.expect(action_model)
    @require_auth
    def post(self, reservation_id):
        """Borrower confirms they returned the tool"""
        data = load_request(action_schema, _body())
        reservation = ReservationService().confirm_return(
            reservation_id, current_user_id(), data.get('note')
        )
        return reservation_response_schema.dump(reservation), 200
