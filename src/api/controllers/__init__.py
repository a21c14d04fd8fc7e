"""
Controllers package initialization
"""

# Namespaces attach themselves to the shared Api on import
from src.api.controllers.api import api_bp, api
from src.api.controllers import reservations, tools  # noqa: F401
from src.api.controllers.stats import stats_bp
from src.api.controllers.events import events_bp
from src.api.controllers.health import health_bp

__all__ = ['api_bp', 'api', 'stats_bp', 'events_bp', 'health_bp']
