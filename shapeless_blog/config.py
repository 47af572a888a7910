import os
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env


def _env_flag(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Base configuration (override with .env)."""
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///shapeless-blog.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-fallback-key')  # Change in production!

    # Bearer tokens
    TOKEN_TTL_HOURS = int(os.getenv('TOKEN_TTL_HOURS', '24'))
    TOKEN_SWEEP_INTERVAL_MINUTES = int(os.getenv('TOKEN_SWEEP_INTERVAL_MINUTES', '10'))
    SCHEDULER_ENABLED = _env_flag('SCHEDULER_ENABLED', True)

    # CORS / rate limiting
    CORS_ORIGINS = [o.strip() for o in os.getenv(
        'CORS_ORIGINS', 'http://localhost:3000,http://127.0.0.1:3000').split(',') if o.strip()]
    RATELIMIT_ENABLED = _env_flag('RATELIMIT_ENABLED', True)
    RATELIMIT_STORAGE_URI = os.getenv('RATELIMIT_STORAGE_URI', 'memory://')
    AUTH_RATE_LIMIT = os.getenv('AUTH_RATE_LIMIT', '5 per minute')

    # Warnings and errors also go to a daily rotated file when set
    LOG_DIRECTORY = os.getenv('LOG_DIRECTORY')


class TestConfig(Config):
    """In-memory database, no background jobs, no rate limits."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SCHEDULER_ENABLED = False
    RATELIMIT_ENABLED = False
    LOG_DIRECTORY = None
