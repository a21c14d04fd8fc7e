#!/usr/bin/env python3
"""
Reservation Service API
Flask-based REST API for the tool reservation lifecycle.
"""

import os
import logging
from flask import Flask
from flask_cors import CORS

logger = logging.getLogger(__name__)


def create_app(config_name='default'):
    """Application factory pattern for API"""
    # Load environment variables
    from dotenv import load_dotenv
    load_dotenv()

    app = Flask(__name__)

    # Load configuration
    from config import config, get_database_uri
    app.config.from_object(config[config_name])
    if not app.config.get('SQLALCHEMY_DATABASE_URI'):
        app.config['SQLALCHEMY_DATABASE_URI'] = get_database_uri()

    # Configure logging
    if not app.testing:
        logging.basicConfig(
            level=getattr(logging, app.config['LOG_LEVEL']),
            format='%(asctime)s %(levelname)s %(name)s: %(message)s'
        )

    # Initialize trace context middleware
    from src.api.middlewares.trace_context import TraceContextMiddleware
    TraceContextMiddleware(app)

    # Initialize database
    from src.database import init_db
    init_db(app)

    # CORS setup
    CORS(app, origins=app.config.get('CORS_ORIGINS', ['*']))

    # Register blueprints/controllers
    from src.api.controllers import api_bp, stats_bp, events_bp, health_bp
    app.register_blueprint(api_bp, url_prefix='/api/v1')
    app.register_blueprint(stats_bp, url_prefix='/api/v1')
    app.register_blueprint(events_bp)
    app.register_blueprint(health_bp)
    app.logger.info("Controllers registered successfully")

    # Register error handlers
    from src.utils.error_handlers import register_error_handlers
    register_error_handlers(app)

    return app


def init_database(app):
    """Initialize database tables"""
    from src.database import db
    with app.app_context():
        try:
            from sqlalchemy import text
            db.session.execute(text('SELECT 1'))
            db.create_all()
            app.logger.info("Database tables created successfully")
            return True
        except Exception as e:
            app.logger.error(f"Failed to create database tables: {e}")
            if app.config.get('ENV_NAME') == 'production':
                raise
            else:
                app.logger.warning("Continuing without database connection in development mode")
                return False


def main():
    """Main application entry point for API"""
    env = os.environ.get('FLASK_ENV', 'production')

    # Create Flask application
    app = create_app(env)
    app.config['ENV_NAME'] = env

    # Initialize database
    init_database(app)

    # Get host and port from environment
    host = os.environ.get('HOST', '0.0.0.0')
    port = int(os.environ.get('PORT', 5000))
    debug = env == 'development'

    logger.info(f"Starting Reservation API Service on {host}:{port} (env: {env})")

    # Run the application
    app.run(
        host=host,
        port=port,
        debug=debug,
        threaded=True
    )


if __name__ == '__main__':
    main()
