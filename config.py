"""Flask application configuration.

This module provides environment-based configuration for the Flask application.
Configuration is loaded from environment variables with sensible defaults.

Environment Variables:
    FLASK_ENV: Application environment (development, production, testing)
    FLASK_DEBUG: Enable Flask debug mode (0 or 1)
    DATABASE_URL: SQLAlchemy database URI
    HOST: Server host address (default: 0.0.0.0)
    PORT: Server port (default: 3000)
    METRICS_URL: Endpoint receiving metric lines (reporting is off when unset)
    METRICS_USER_ID / METRICS_API_KEY: Credentials sent as ``Bearer <id>:<key>``
    FACTORY_URL / FACTORY_API_KEY: Pizza factory that fulfills orders
"""

import os


def _env_flag(name, default):
    return os.environ.get(name, default).lower() not in ('0', 'false', 'no')


class Config:
    """Base configuration with defaults suitable for production."""

    # Flask core settings
    DEBUG = False
    TESTING = False
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Server settings
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', 3000))
    SERVICE_VERSION = os.environ.get('SERVICE_VERSION', '')

    # Database settings
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Default admin account, created on first start
    ADMIN_NAME = os.environ.get('ADMIN_NAME', '常用名字')
    ADMIN_EMAIL = os.environ.get('ADMIN_EMAIL', 'a@jwt.com')
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD', 'admin')

    # Pizza factory
    FACTORY_URL = os.environ.get('FACTORY_URL', 'https://pizza-factory.cs329.click')
    FACTORY_API_KEY = os.environ.get('FACTORY_API_KEY', '')
    FACTORY_TIMEOUT_SECONDS = float(os.environ.get('FACTORY_TIMEOUT_SECONDS', 10))

    # Metrics
    METRICS_ENABLED = _env_flag('METRICS_ENABLED', '1')
    METRICS_URL = os.environ.get('METRICS_URL', '')
    METRICS_SOURCE = os.environ.get('METRICS_SOURCE', 'jwt-pizza-service')
    METRICS_USER_ID = os.environ.get('METRICS_USER_ID', '')
    METRICS_API_KEY = os.environ.get('METRICS_API_KEY', '')
    METRICS_INTERVAL_SECONDS = float(os.environ.get('METRICS_INTERVAL_SECONDS', 30))
    METRICS_TIMEOUT_SECONDS = float(os.environ.get('METRICS_TIMEOUT_SECONDS', 10))


class DevelopmentConfig(Config):
    """Development configuration with debug enabled and verbose logging."""

    DEBUG = True
    ENV = 'development'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    """Production configuration - secure and optimized."""

    DEBUG = False
    ENV = 'production'


class TestingConfig(Config):
    """Testing configuration with in-memory database."""

    TESTING = True
    DEBUG = False
    # Use in-memory SQLite for tests
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    # Instrument requests but never start the background reporter
    METRICS_URL = ''
    FACTORY_URL = 'http://factory.test'
    FACTORY_API_KEY = 'test-factory-key'


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': ProductionConfig  # Default to production for safety
}


def get_config():
    """Get the appropriate configuration based on environment.

    Returns:
        Config: Configuration class based on FLASK_ENV or FLASK_DEBUG

    Priority:
        1. FLASK_ENV environment variable
        2. FLASK_DEBUG environment variable (0/1)
        3. Default to production (safe default)
    """
    env = os.environ.get('FLASK_ENV', '').lower()
    if env in config:
        return config[env]

    debug = os.environ.get('FLASK_DEBUG', '0').lower()
    if debug in ('1', 'true', 'yes', 'on'):
        return config['development']

    return config['default']
