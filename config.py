import os


def get_database_uri():
    """
    Lazy load database URI from Dapr secrets
    Called when database connection is actually needed
    """
    try:
        from src.clients.dapr_secret_manager import get_database_config
        db_config = get_database_config()
        return (
            f"mysql+pymysql://{db_config['user']}:{db_config['password']}@"
            f"{db_config['host']}:{db_config['port']}/{db_config['database']}"
        )
    except Exception:
        # Fallback to environment variables if Dapr not available
        user = os.environ.get('MYSQL_USER', 'admin')
        password = os.environ.get('MYSQL_PASSWORD', 'admin123')
        host = os.environ.get('DATABASE_HOST', 'localhost')
        port = os.environ.get('DATABASE_PORT', '3306')
        database = os.environ.get('MYSQL_DATABASE', 'reservation_service_db')
        return f"mysql+pymysql://{user}:{password}@{host}:{port}/{database}"


def _env_bool(key, default):
    return os.environ.get(key, str(default)).lower() == 'true'


class Config:
    """Base configuration"""

    # Flask
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Database - resolved lazily in create_app
    SQLALCHEMY_DATABASE_URI = None
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
    }

    # Reservation rules
    EARLY_PICKUP_POLICY = os.environ.get('EARLY_PICKUP_POLICY', 'flag')
    BLOCK_BOOKED_OVERLAP_ON_CREATE = _env_bool('BLOCK_BOOKED_OVERLAP_ON_CREATE', False)

    # Events
    EVENTS_ENABLED = _env_bool('EVENTS_ENABLED', True)
    PUBSUB_NAME = os.environ.get('PUBSUB_NAME', 'reservation-pubsub')

    # Auth
    JWT_SECRET = os.environ.get('JWT_SECRET')
    JWT_ALGORITHM = os.environ.get('JWT_ALGORITHM', 'HS256')
    JWT_ISSUER = os.environ.get('JWT_ISSUER', 'auth-service')
    JWT_AUDIENCE = os.environ.get('JWT_AUDIENCE', 'toolshare-platform')

    # Pagination
    DEFAULT_PAGE_SIZE = int(os.environ.get('DEFAULT_PAGE_SIZE', 20))
    MAX_PAGE_SIZE = int(os.environ.get('MAX_PAGE_SIZE', 100))

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    LOG_LEVEL = 'DEBUG'


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    # Use in-memory SQLite for testing
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    EVENTS_ENABLED = False
    EARLY_PICKUP_POLICY = 'flag'
    BLOCK_BOOKED_OVERLAP_ON_CREATE = False
    JWT_SECRET = 'test-secret'
    JWT_ISSUER = 'auth-service'
    JWT_AUDIENCE = 'toolshare-platform'


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False


config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'test': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
