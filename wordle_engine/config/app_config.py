"""
Configuration Management Module

Centralized configuration management following the 12-factor app methodology.
All configuration is loaded from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

# Load environment variables from config.env
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.env'))


class Config:
    """Base configuration class with all settings."""

    # Flask Settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    TESTING = False

    # Server Settings
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', 5000))

    # Storage Settings ("memory", "file" or "mongo")
    STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'file')
    STORAGE_DIR = os.getenv('STORAGE_DIR', 'data')
    STATE_KEY = os.getenv('STATE_KEY', 'wordleGameState')

    # Database Settings
    MONGO_URI = os.getenv('MONGO_URI')
    MONGO_DB = os.getenv('MONGO_DB', 'wordle_game')
    MONGO_COLLECTION = os.getenv('MONGO_COLLECTION', 'game_state')

    # Game Settings
    MAX_GUESSES = int(os.getenv('MAX_GUESSES', 6))
    HISTORY_DAYS = int(os.getenv('HISTORY_DAYS', 30))

    # Logging Settings
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'mongo')


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    STORAGE_BACKEND = 'memory'


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
