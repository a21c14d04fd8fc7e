"""
Flask-RESTX Api shared by the /api/v1 namespaces
"""

from flask import Blueprint
from flask_restx import Api

from src.utils.error_handlers import register_api_error_handlers

api_bp = Blueprint('api_v1', __name__)
api = Api(api_bp, version='1.0', title='Reservation API',
          description='Tool reservation lifecycle endpoints', doc='/docs/')

register_api_error_handlers(api)
