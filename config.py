# config.py
import os
import secrets
from pathlib import Path
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()

basedir = os.path.abspath(os.path.dirname(__file__))


class Config:
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'raiz.db')
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
    }
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Security settings
    SECURITY_PASSWORD_SALT = os.environ.get('SECURITY_PASSWORD_SALT', 'raiz-dev-salt')
    # --- Stable SECRET_KEY -------------------------------------------------
    # Without SECRET_KEY in the environment, generate it once and keep it
    # under instance/.flask_secret_key so restarts don't invalidate sessions.
    _secret_key_env = os.environ.get('SECRET_KEY')
    if _secret_key_env:
        SECRET_KEY = _secret_key_env
    else:
        _secret_file = Path(basedir) / 'instance' / '.flask_secret_key'
        if _secret_file.exists():
            SECRET_KEY = _secret_file.read_text().strip()
        else:
            _secret_file.parent.mkdir(parents=True, exist_ok=True)
            SECRET_KEY = secrets.token_hex(32)
            _secret_file.write_text(SECRET_KEY)

    # Flask-Security endpoints live under /security; the public /login,
    # /register and /reset-password URLs are guarded redirects in routes.auth
    SECURITY_URL_PREFIX = '/security'
    SECURITY_LOGIN_URL = '/login'
    SECURITY_LOGOUT_URL = '/logout'
    SECURITY_REGISTER_URL = '/register'
    SECURITY_FORGOT_PASSWORD_URL = '/forgot-password'
    SECURITY_RESET_URL = '/reset'
    SECURITY_REGISTER_USER_TEMPLATE = 'security/register_user.html'

    SECURITY_REGISTERABLE = True
    SECURITY_CONFIRMABLE = False
    SECURITY_RECOVERABLE = True
    SECURITY_CHANGEABLE = True
    SECURITY_TRACKABLE = True
    SECURITY_SEND_REGISTER_EMAIL = False
    SECURITY_PASSWORD_LENGTH_MIN = 6
    SECURITY_PASSWORD_CONFIRM_REQUIRED = True
    SECURITY_EMAIL_VALIDATOR_ARGS = {'check_deliverability': False}
    SECURITY_CSRF_PROTECT_MECHANISMS = ('session',)
    SECURITY_CSRF_IGNORE_UNAUTH_ENDPOINTS = True
    WTF_CSRF_CHECK_DEFAULT = False
    SECURITY_FLASH_MESSAGES = True
    SECURITY_MSG_USER_DOES_NOT_EXIST = ("Incorrect e-mail or password.", "error")
    SECURITY_MSG_INVALID_PASSWORD = ("Incorrect e-mail or password.", "error")
    SECURITY_MSG_DISABLED_ACCOUNT = ("Your account has been banned.", "error")
    SECURITY_MSG_LOGIN = ("Please log in to access this page.", "info")
    SECURITY_MSG_UNAUTHENTICATED = ("Please log in to access this page.", "info")

    SECURITY_POST_LOGIN_VIEW = '/dashboard'
    SECURITY_POST_LOGOUT_VIEW = '/login'
    SECURITY_POST_REGISTER_VIEW = '/dashboard'

    # Session settings
    SESSION_TYPE = 'filesystem'
    SESSION_FILE_DIR = os.path.join(basedir, 'instance', 'flask_session')
    SESSION_PERMANENT = True
    PERMANENT_SESSION_LIFETIME = timedelta(hours=24)
    SESSION_COOKIE_SECURE = False
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    # Email settings
    MAIL_SERVER = os.environ.get('MAIL_SERVER')
    MAIL_PORT = int(os.environ.get('MAIL_PORT', 587))
    MAIL_USE_TLS = os.environ.get('MAIL_USE_TLS', 'True').lower() == 'true'
    MAIL_USERNAME = os.environ.get('MAIL_USERNAME')
    MAIL_PASSWORD = os.environ.get('MAIL_PASSWORD')
    MAIL_DEFAULT_SENDER = os.environ.get('MAIL_DEFAULT_SENDER', 'no-reply@raiz.local')
    SECURITY_EMAIL_SENDER = MAIL_DEFAULT_SENDER

    # Public listing cache
    CACHE_TYPE = 'SimpleCache'
    CACHE_DEFAULT_TIMEOUT = 60

    # Object storage (avatars / project images)
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.join(basedir, 'instance', 'uploads')
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024
    ALLOWED_IMAGE_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}
    # Set S3_BUCKET to store uploads in S3 instead of UPLOAD_FOLDER
    S3_BUCKET = os.environ.get('S3_BUCKET')
    AWS_REGION = os.environ.get('AWS_REGION', 'us-east-1')
    AWS_ACCESS_KEY_ID = os.environ.get('AWS_ACCESS_KEY_ID')
    AWS_SECRET_ACCESS_KEY = os.environ.get('AWS_SECRET_ACCESS_KEY')

    # Platform rules
    RAIZ_STARTING_TOKENS = int(os.environ.get('RAIZ_STARTING_TOKENS', 100))
    RAIZ_NEAR_DEADLINE_DAYS = 7


class DevelopmentConfig(Config):
    DEBUG = True
    FLASK_ENV = 'development'
    APPLICATION_URL = os.environ.get('DEV_APPLICATION_URL') or os.environ.get('APPLICATION_URL')


class ProductionConfig(Config):
    DEBUG = False
    FLASK_ENV = 'production'
    APPLICATION_URL = os.environ.get('PROD_APPLICATION_URL') or os.environ.get('APPLICATION_URL')
    SESSION_COOKIE_SECURE = True

    if not os.environ.get('SECURITY_PASSWORD_SALT'):
        import warnings
        warnings.warn('SECURITY_PASSWORD_SALT not set. Using default value.')


# Function to get the appropriate config
def get_config():
    env = os.environ.get('FLASK_ENV', 'development').lower()
    if env == 'production':
        return ProductionConfig()
    return DevelopmentConfig()
