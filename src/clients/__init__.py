"""
Clients Module
Centralized exports for external service clients
"""

# Dapr clients
from src.clients.dapr_secret_manager import (
    DaprSecretManager,
    get_secret_manager,
    get_database_config,
)

__all__ = [
    'DaprSecretManager',
    'get_secret_manager',
    'get_database_config',
]
