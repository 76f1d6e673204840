import os
from datetime import timedelta
from dotenv import load_dotenv

# Load variables from a local .env file when one exists
load_dotenv()


def _env_bool(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Base configuration"""

    # Flask Settings
    SECRET_KEY = os.environ.get('SESSION_SECRET', 'CHANGE-THIS-SECRET-KEY-IN-PRODUCTION')
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)
    SESSION_COOKIE_SECURE = False
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PORT = int(os.environ.get('PORT', '3000'))

    # Form posts are small; reject anything larger than 1MB
    MAX_CONTENT_LENGTH = 1 * 1024 * 1024

    # JSON Settings
    JSON_AS_ASCII = False

    # Site Settings
    SITE_TITLE = os.environ.get('SITE_TITLE', 'Alex Rivera - Full-Stack Developer')
    SENDER_NAME = os.environ.get('SENDER_NAME', 'Alex Rivera')
    CONTACT_FROM_NAME = os.environ.get('CONTACT_FROM_NAME', 'Portfolio Contact')
    OWNER_EMAIL = os.environ.get('OWNER_EMAIL', 'alex.rivera@email.com')

    # SMTP Relay Settings
    SMTP_HOST = os.environ.get('SMTP_HOST', 'smtp.gmail.com')
    SMTP_PORT = int(os.environ.get('SMTP_PORT', '587'))
    SMTP_USE_TLS = _env_bool('SMTP_USE_TLS', True)
    SMTP_TIMEOUT = float(os.environ.get('SMTP_TIMEOUT', '10'))
    SMTP_VERIFY_ON_STARTUP = _env_bool('SMTP_VERIFY_ON_STARTUP', False)
    EMAIL_USER = os.environ.get('EMAIL_USER', '')
    EMAIL_PASS = os.environ.get('EMAIL_PASS', '')

    # Owner Telegram Alert (optional)
    OWNER_TELEGRAM_BOT_TOKEN = os.environ.get('OWNER_TELEGRAM_BOT_TOKEN')
    OWNER_TELEGRAM_CHAT_ID = os.environ.get('OWNER_TELEGRAM_CHAT_ID')

    # Rate Limiting
    RATE_LIMIT_ENABLED = _env_bool('RATE_LIMIT_ENABLED', True)
    RATE_LIMIT_GENERAL_MAX = 100
    RATE_LIMIT_GENERAL_WINDOW = 15 * 60
    RATE_LIMIT_CONTACT_MAX = 5
    RATE_LIMIT_CONTACT_WINDOW = 60 * 60
    # Number of reverse proxies whose X-Forwarded-For hop is trusted
    TRUSTED_PROXY_COUNT = int(os.environ.get('TRUSTED_PROXY_COUNT', '0'))


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = True
    SMTP_VERIFY_ON_STARTUP = _env_bool('SMTP_VERIFY_ON_STARTUP', True)


class TestingConfig(Config):
    """Testing configuration"""
    DEBUG = False
    TESTING = True
    RATE_LIMIT_ENABLED = False
    # Never open a socket to a real relay during tests
    SMTP_VERIFY_ON_STARTUP = False
    EMAIL_USER = 'portfolio@example.com'
    EMAIL_PASS = ''
    OWNER_EMAIL = 'owner@example.com'
    OWNER_TELEGRAM_BOT_TOKEN = None
    OWNER_TELEGRAM_CHAT_ID = None


# Select configuration based on environment
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}

def get_config(config_name=None):
    """Get configuration by name, falling back to FLASK_ENV"""
    env = config_name or os.environ.get('FLASK_ENV', 'development')
    return config.get(env, config['default'])
