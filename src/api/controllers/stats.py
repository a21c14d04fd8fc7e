"""
Stats Controller - Provides per-user reservation statistics for dashboards
"""

from flask import Blueprint, jsonify
from src.api.middlewares.auth import require_auth, current_user_id
from src.services import ReservationService
import logging

logger = logging.getLogger(__name__)

# Create blueprint
stats_bp = Blueprint('stats', __name__)


@stats_bp.route('/stats/dashboard', methods=['GET'])
@require_auth
def get_dashboard_stats():
    """
    Get reservation statistics for the caller's dashboard

    Returns:
        JSON with:
        - tools_listed: Tools the caller lists (archived excluded)
        - active_loans: Tools the caller is currently borrowing
        - pending_requests: Requests awaiting the caller's decision as owner
    """
    user_id = current_user_id()
    stats = ReservationService().get_dashboard_stats(user_id)

    logger.info(f"Stats retrieved for {user_id}: {stats}")
    return jsonify(stats), 200
