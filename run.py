#!/usr/bin/env python3
"""
Reservation Service
Flask-based microservice for the tool lending reservation lifecycle.
"""

import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Validate configuration before anything configures logging
from src.validators.config_validator import validate_config
validate_config()

from src import create_app, init_database

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def main():
    """Main application entry point."""
    env = os.environ.get('FLASK_ENV', 'production')

    logger.info(f"Starting Reservation Service in {env} mode")

    app = create_app(env)
    app.config['ENV_NAME'] = env
    init_database(app)

    host = os.environ.get('HOST', '0.0.0.0')
    port = int(os.environ.get('PORT', 5000))
    debug = env == 'development'

    logger.info(f"Starting Reservation Service on {host}:{port}")

    app.run(
        host=host,
        port=port,
        debug=debug,
        threaded=True
    )


if __name__ == '__main__':
    main()
