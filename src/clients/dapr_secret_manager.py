"""
Dapr Secret Store access for the reservation service

Holds the MySQL credentials and, when it is not set in the environment,
the JWT signing secret shared with the auth service.
"""
import os
import logging
from typing import Dict, Any, Optional
from dapr.clients import DaprClient

logger = logging.getLogger(__name__)

# Config key -> secret name
DATABASE_SECRETS = {
    'host': 'DATABASE_HOST',
    'port': 'DATABASE_PORT',
    'database': 'MYSQL_DATABASE',
    'user': 'MYSQL_USER',
    'password': 'MYSQL_PASSWORD',
}


class DaprSecretManager:
    """Reads secrets from one Dapr secret store, caching each value once read"""

    def __init__(self, secret_store_name: Optional[str] = None):
        self.secret_store_name = secret_store_name or os.environ.get('SECRET_STORE_NAME', 'secret-store')
        self._cache: Dict[str, str] = {}

    def get_secret(self, key: str) -> str:
        """
        Raises:
            KeyError: the store has no value for `key`
        """
        if key in self._cache:
            return self._cache[key]

        with DaprClient() as client:
            response = client.get_secret(store_name=self.secret_store_name, key=key)

        value = (response.secret or {}).get(key) if response else None
        if not value:
            logger.error(f"Secret '{key}' missing from store '{self.secret_store_name}'")
            raise KeyError(f"Secret '{key}' not found in store '{self.secret_store_name}'")

        self._cache[key] = value
        return value

    def get_database_config(self) -> Dict[str, Any]:
        db_config = {name: self.get_secret(secret) for name, secret in DATABASE_SECRETS.items()}
        db_config['port'] = int(db_config['port'])
        return db_config


_secret_manager = None


def get_secret_manager() -> DaprSecretManager:
    global _secret_manager
    if _secret_manager is None:
        _secret_manager = DaprSecretManager()
    return _secret_manager


def get_database_config() -> Dict[str, Any]:
    return get_secret_manager().get_database_config()
