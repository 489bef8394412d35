"""
Application Configuration

Centralizes all Flask and application configuration settings.
"""

import os


def _env_bool(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Base configuration class."""

    # Flask settings
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-only-change-in-production')

    # SQLAlchemy settings
    # The key/value store (rows, ingredient cache, settings) lives on the
    # default engine; profile records live on their own bind.
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///recipe_costs.db')
    SQLALCHEMY_BINDS = {
        'profiles': os.environ.get('PROFILE_DATABASE_URL', 'sqlite:///recipe_profiles.db'),
    }
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Profile store can be switched off entirely (degrades to a no-op store)
    PROFILE_STORE_ENABLED = _env_bool('PROFILE_STORE_ENABLED', True)

    # Quiet period before an edited row set is written back
    SAVE_DEBOUNCE_SECONDS = float(os.environ.get('SAVE_DEBOUNCE_SECONDS', '0.25'))

    # Suggested sale price markup when none has been saved yet
    DEFAULT_MARGIN_PCT = float(os.environ.get('DEFAULT_MARGIN_PCT', '30'))

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Upload settings
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB max backup upload


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_BINDS = {'profiles': 'sqlite:///:memory:'}
    PROFILE_STORE_ENABLED = True
    DEFAULT_MARGIN_PCT = 30.0


# Configuration dictionary for easy access
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config(env=None):
    """Get configuration based on environment."""
    if env is None:
        env = os.environ.get('FLASK_ENV', 'development')
    return config.get(env, config['default'])
