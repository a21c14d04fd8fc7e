"""
Health check endpoints for the reservation service
These endpoints are used by monitoring systems, load balancers, and Kubernetes
"""

from flask import Blueprint, jsonify
from datetime import datetime
from sqlalchemy import text
import os
import time
import logging

from src.database import db

logger = logging.getLogger(__name__)

SERVICE_NAME = 'reservation-service'
_started_at = time.time()

# Create blueprint for health endpoints
health_bp = Blueprint('health', __name__)


def _timestamp():
    return datetime.utcnow().isoformat() + 'Z'


def check_database():
    """Ping the database; returns a check result dict"""
    start = time.time()
    try:
        db.session.execute(text('SELECT 1'))
        return {'status': 'healthy', 'response_time': round(time.time() - start, 4)}
    except Exception as e:
        db.session.rollback()
        logger.error('Database health check failed', extra={'error': str(e)})
        return {'status': 'unhealthy', 'error': str(e)}


@health_bp.route('/health', methods=['GET'])
def health():
    """Main health check endpoint"""
    return jsonify({
        'status': 'healthy',
        'service': os.environ.get('NAME', SERVICE_NAME),
        'timestamp': _timestamp(),
        'version': os.environ.get('VERSION', '1.0.0'),
        'environment': os.environ.get('FLASK_ENV', 'development'),
    }), 200


@health_bp.route('/health/ready', methods=['GET'])
def readiness():
    """Readiness check - checks if service is ready to handle traffic"""
    checks = {'database': check_database()}
    ready = all(check['status'] == 'healthy' for check in checks.values())

    logger.info('Readiness check performed', extra={
        'status': 'ready' if ready else 'not ready',
        'checks': {key: check['status'] for key, check in checks.items()},
    })

    return jsonify({
        'status': 'ready' if ready else 'not ready',
        'service': SERVICE_NAME,
        'timestamp': _timestamp(),
        'checks': checks,
    }), 200 if ready else 503


@health_bp.route('/health/live', methods=['GET'])
def liveness():
    """Liveness check - checks if service is alive and responsive"""
    return jsonify({
        'status': 'alive',
        'service': SERVICE_NAME,
        'timestamp': _timestamp(),
        'uptime': round(time.time() - _started_at, 2),
    }), 200
