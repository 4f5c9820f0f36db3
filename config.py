import os
from datetime import timedelta

class Config:
    """Base configuration"""

    # Flask Settings
    SECRET_KEY = os.environ.get('SESSION_SECRET', 'CHANGE-THIS-SECRET-KEY-IN-PRODUCTION')
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)
    SESSION_COOKIE_SECURE = False
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    # Backend selection: 'firestore' (hosted) or 'sql' (local document table)
    BACKEND = os.environ.get('BACKEND', 'sql')

    # Firebase / Firestore Settings
    FIREBASE_API_KEY = os.environ.get('FIREBASE_API_KEY')
    FIREBASE_PROJECT_ID = os.environ.get('FIREBASE_PROJECT_ID')
    FIRESTORE_DATABASE = os.environ.get('FIRESTORE_DATABASE', '(default)')
    GOOGLE_APPLICATION_CREDENTIALS = os.environ.get('GOOGLE_APPLICATION_CREDENTIALS')

    # Database Settings (sql backend)
    _database_url = os.environ.get('DATABASE_URL')
    if _database_url and _database_url.startswith("postgres://"):
        _database_url = _database_url.replace("postgres://", "postgresql://", 1)

    SQLALCHEMY_DATABASE_URI = _database_url or 'sqlite:///portfolio.db'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
    }
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Upload Settings
    MAX_CONTENT_LENGTH = 55 * 1024 * 1024  # 50MB videos plus form overhead
    CLOUDINARY_API_BASE = 'https://api.cloudinary.com/v1_1'
    CLOUDINARY_CLOUD_NAME = os.environ.get('CLOUDINARY_CLOUD_NAME')
    CLOUDINARY_UPLOAD_PRESET = os.environ.get('CLOUDINARY_UPLOAD_PRESET', 'portfolio')

    # Cache Settings (public portfolio reads)
    CACHE_TYPE = os.environ.get('CACHE_TYPE', 'SimpleCache')
    CACHE_DEFAULT_TIMEOUT = int(os.environ.get('CACHE_DEFAULT_TIMEOUT', '300'))

    # Receiver of visitor messages when no profile exists yet
    SITE_OWNER_ID = os.environ.get('SITE_OWNER_ID')

    # JSON Settings
    JSON_AS_ASCII = False


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = True
    BACKEND = os.environ.get('BACKEND', 'firestore')


class TestingConfig(Config):
    """Testing configuration"""
    DEBUG = True
    TESTING = True
    BACKEND = 'sql'
    SECRET_KEY = 'testing-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    # For in-memory SQLite during tests, keep engine options empty to avoid
    # passing invalid pool settings to SQLite's StaticPool.
    SQLALCHEMY_ENGINE_OPTIONS = {}
    CACHE_TYPE = 'NullCache'
    CLOUDINARY_CLOUD_NAME = 'test-cloud'
    CLOUDINARY_UPLOAD_PRESET = 'portfolio'
    SITE_OWNER_ID = None


# Select configuration based on environment
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}

def get_config(config_name=None):
    """Get configuration by name, defaulting to FLASK_ENV"""
    env = config_name or os.environ.get('FLASK_ENV', 'development')
    return config.get(env, config['default'])
