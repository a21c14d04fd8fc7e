from flask import jsonify
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
import logging

from src.utils.errors import ReservationError, InvalidTransition

logger = logging.getLogger(__name__)


def reservation_error_body(error):
    """Log a reservation error and build its (body, status) pair"""
    if isinstance(error, InvalidTransition):
        logger.warning(f"Invalid transition: {error.message}")
    else:
        logger.info(f"{error.kind}: {error.message}")
    return error.to_dict(), error.status_code


def validation_error_body(error):
    return {
        'error': 'ValidationError',
        'code': 'VALIDATION_ERROR',
        'message': 'Request data validation failed',
        'details': error.messages
    }, 400


def register_api_error_handlers(api):
    """Register handlers on a Flask-RESTX Api"""

    @api.errorhandler(ReservationError)
    def handle_reservation_error(error):
        return reservation_error_body(error)


def register_error_handlers(app):
    """Register application error handlers"""

    @app.errorhandler(ReservationError)
    def reservation_error(error):
        body, status_code = reservation_error_body(error)
        return jsonify(body), status_code

    @app.errorhandler(ValidationError)
    def validation_error(error):
        body, status_code = validation_error_body(error)
        return jsonify(body), status_code

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            'error': 'Not Found',
            'message': 'The requested resource was not found',
            'status_code': 404
        }), 404

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"Internal server error: {error}")
        return jsonify({
            'error': 'Internal Server Error',
            'message': 'An unexpected error occurred',
            'status_code': 500
        }), 500

    @app.errorhandler(HTTPException)
    def http_exception(error):
        return jsonify({
            'error': error.name,
            'message': error.description,
            'status_code': error.code
        }), error.code
