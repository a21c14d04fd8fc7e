"""
Configuration Validator
Validates environment variables at application startup and fails fast if any
is missing or invalid.

Must not import logging setup; logging depends on the validated config.
"""

import os
import sys

from src.utils.colored_print import (
    print_warning, print_error, print_step, print_success, print_failure
)


def is_valid_port(port: str) -> bool:
    """Validates a port number"""
    try:
        port_num = int(port)
        return 0 < port_num <= 65535
    except (ValueError, TypeError):
        return False


def is_valid_log_level(level: str) -> bool:
    return level.upper() in ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def is_valid_environment(env: str) -> bool:
    return env.lower() in ['development', 'production', 'test', 'testing']


def is_valid_boolean(value: str) -> bool:
    return value.lower() in ['true', 'false']


def is_positive_int(value: str) -> bool:
    return value.isdigit() and int(value) > 0



# Configuration validation rules
VALIDATION_RULES = {
    # Service Configuration
    'FLASK_ENV': {
        'required': False,
        'validator': is_valid_environment,
        'error_message': 'FLASK_ENV must be one of: development, production, test, testing',
        'default': 'production',
    },
    'PORT': {
        'required': False,
        'validator': is_valid_port,
        'error_message': 'PORT must be a valid port number',
        'default': '5000',
    },

    # Database Configuration (Dapr secret store takes precedence at runtime)
    'DATABASE_PORT': {
        'required': False,
        'validator': is_valid_port,
        'error_message': 'DATABASE_PORT must be a valid port number if provided',
        'default': '3306',
    },
    'MYSQL_DATABASE': {
        'required': False,
        'validator': lambda v: len(v) > 0,
        'error_message': 'MYSQL_DATABASE must be a non-empty string',
        'default': 'reservation_service_db',
    },

    # Security Configuration
    'JWT_SECRET': {
        'required': False,
        'validator': lambda v: len(v) >= 32,
        'error_message': 'JWT_SECRET must be at least 32 characters long (omit it to use the Dapr secret store)',
    },
    'SECRET_KEY': {
        'required': True,
        'validator': lambda v: len(v) >= 32,
        'error_message': 'SECRET_KEY must be at least 32 characters long',
    },

    # Logging Configuration
    'LOG_LEVEL': {
        'required': False,
        'validator': is_valid_log_level,
        'error_message': 'LOG_LEVEL must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL',
        'default': 'INFO',
    },

    # Reservation rules
    'EARLY_PICKUP_POLICY': {
        'required': False,
        'validator': lambda v: v.lower() in ['allow', 'flag', 'block'],
        'error_message': 'EARLY_PICKUP_POLICY must be one of: allow, flag, block',
        'default': 'flag',
    },
    'BLOCK_BOOKED_OVERLAP_ON_CREATE': {
        'required': False,
        'validator': is_valid_boolean,
        'error_message': 'BLOCK_BOOKED_OVERLAP_ON_CREATE must be true or false',
        'default': 'false',
    },

    # Events
    'EVENTS_ENABLED': {
        'required': False,
        'validator': is_valid_boolean,
        'error_message': 'EVENTS_ENABLED must be true or false',
        'default': 'true',
    },
    'PUBSUB_NAME': {
        'required': False,
        'validator': lambda v: len(v) > 0,
        'error_message': 'PUBSUB_NAME must be a non-empty string',
        'default': 'reservation-pubsub',
    },

    # Pagination
    'DEFAULT_PAGE_SIZE': {
        'required': False,
        'validator': is_positive_int,
        'error_message': 'DEFAULT_PAGE_SIZE must be a positive integer',
        'default': '20',
    },
    'MAX_PAGE_SIZE': {
        'required': False,
        'validator': is_positive_int,
        'error_message': 'MAX_PAGE_SIZE must be a positive integer',
        'default': '100',
    },
}


def _masked(key: str, value: str) -> str:
    if 'PASSWORD' in key or 'SECRET' in key or 'KEY' in key:
        return '***'
    if len(value) > 100:
        return f"{value[:100]}..."
    return value


def collect_errors(environ=None):
    """
    Check `environ` against VALIDATION_RULES, filling in defaults.

    Returns:
        (errors, warnings) lists of printable messages
    """
    environ = os.environ if environ is None else environ
    errors = []
    warnings = []

    for key, rule in VALIDATION_RULES.items():
        value = environ.get(key)

        if not value:
            if rule['required']:
                errors.append(f"❌ {key} is required but not set")
            elif 'default' in rule:
                warnings.append(f"⚠️  {key} not set, using default: {rule['default']}")
                environ[key] = rule['default']
            continue

        if not rule['validator'](value):
            errors.append(f"❌ {key}: {rule['error_message']}")
            errors.append(f"   Current value: {_masked(key, value)}")

    if environ.get('MAX_PAGE_SIZE', '').isdigit() and environ.get('DEFAULT_PAGE_SIZE', '').isdigit():
        if int(environ['DEFAULT_PAGE_SIZE']) > int(environ['MAX_PAGE_SIZE']):
            errors.append("❌ DEFAULT_PAGE_SIZE cannot exceed MAX_PAGE_SIZE")

    return errors, warnings


def validate_config():
    """
    Validates all environment variables according to the rules
    Raises SystemExit if any required variable is missing or invalid
    """
    print_step('[CONFIG] Validating environment configuration...')

    errors, warnings = collect_errors()

    for warning in warnings:
        print_warning(warning)

    if errors:
        print_failure('[CONFIG] Configuration validation failed:')
        for error in errors:
            print_error(error)
        print_error('\n💡 Please check your .env file and ensure all required variables are set correctly.')
        sys.exit(1)

    print_success('[CONFIG] All required environment variables are valid')
