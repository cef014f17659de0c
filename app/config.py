import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()


def _api_keys_from_env():
    """Collect AI credentials in order: GROQ_API_KEYS (comma list) then GROQ_API_KEY_1..3."""
    keys = [k.strip() for k in os.getenv('GROQ_API_KEYS', '').split(',') if k.strip()]
    for index in (1, 2, 3):
        key = os.getenv(f'GROQ_API_KEY_{index}')
        if key and key not in keys:
            keys.append(key)
    return keys


class Config:
    # App settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-key-change-in-production')
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'jwt-secret-change-in-production')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=24)
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Database
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # AI text generation (OpenAI-compatible endpoint)
    AI_API_KEYS = _api_keys_from_env()
    AI_BASE_URL = os.getenv('AI_BASE_URL', 'https://api.groq.com/openai/v1')
    AI_MODEL = os.getenv('AI_MODEL', 'llama3-8b-8192')
    AI_TIMEOUT = float(os.getenv('AI_TIMEOUT', '30'))
    AI_TEMPERATURE = 0.7
    AI_MAX_TOKENS = 1500
    AI_REQUIRE_KEYS = True

    # Journal
    ENTRIES_PER_PAGE = 10


class DevelopmentConfig(Config):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv('DEV_DATABASE_URI', 'sqlite:///dev.db')


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    AI_API_KEYS = ['test-key-1', 'test-key-2', 'test-key-3']
    LOG_LEVEL = 'WARNING'


class ProductionConfig(Config):
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URI', 'sqlite:///bloom.db')


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
