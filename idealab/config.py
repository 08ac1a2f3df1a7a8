import os
from dotenv import dotenv_values

_ENV_FALLBACK = dotenv_values(".env")

class BaseConfig:
    # Secrets (env in prod; dev/test may use defaults)
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-not-secure")
    WTF_CSRF_SECRET_KEY = SECRET_KEY
    WTF_CSRF_TIME_LIMIT = None

    # Database (env in prod; dev/test may use default)
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL") or _ENV_FALLBACK.get("DATABASE_URL") or "sqlite:///idealab.sqlite3"
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Logging / misc
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Cookies: secure-by-default
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"

    # Flask-Limiter default: off globally; prefer per-route limits
    RATELIMIT_DEFAULT = None

    # Used for OAuth redirect targets (must be https in prod)
    APP_BASE_URL = os.getenv("APP_BASE_URL", "http://localhost:5000")

    # --- Auth backend (Supabase-compatible GoTrue API) ---
    SUPABASE_URL = os.getenv("SUPABASE_URL", "")
    SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
    AUTH_BACKEND_TIMEOUT = float(os.getenv("AUTH_BACKEND_TIMEOUT", "10"))
    AUTH_COOKIE_NAME = os.getenv("AUTH_COOKIE_NAME", "sb-access-token")
    AUTH_COOKIE_SECURE = False
    OAUTH_PROVIDER = os.getenv("OAUTH_PROVIDER", "google")
    # Salt for the signed OAuth state parameter
    OAUTH_STATE_SALT = os.getenv("OAUTH_STATE_SALT", "oauth-state-v1")

    # --- AI feedback ---
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
    OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    OPENAI_TIMEOUT = float(os.getenv("OPENAI_TIMEOUT", "60"))

    # --- Admin panel ---
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
    ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH")
    ADMIN_SESSION_TTL_HOURS = int(os.getenv("ADMIN_SESSION_TTL_HOURS", "24"))

    SITE_NAME = os.getenv("SITE_NAME", "Idea Lab")

    # --- Uploads ---
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", os.path.join(os.getcwd(), "uploads"))
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(5 * 1024 * 1024)))

class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG")
    SESSION_COOKIE_SECURE = False

class ProductionConfig(BaseConfig):
    DEBUG = False
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "WARNING")
    # Required values are enforced in create_app() so imports never crash
    SESSION_COOKIE_SECURE = True
    AUTH_COOKIE_SECURE = True
    SESSION_COOKIE_SAMESITE = os.environ.get("SESSION_COOKIE_SAMESITE", "Lax")

class TestingConfig(BaseConfig):
    TESTING = True
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get("TEST_DATABASE_URL", "sqlite:///:memory:")
    SESSION_COOKIE_SECURE = False
    WTF_CSRF_ENABLED = False
    SUPABASE_URL = "https://auth.example.test"
    SUPABASE_ANON_KEY = "test-anon-key-0000000000"
    OPENAI_API_KEY = "sk-test"
    ADMIN_PASSWORD = "letmein"
    RATELIMIT_ENABLED = False

_ENV_MAP = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "staging": ProductionConfig,
    "testing": TestingConfig,
}

def get_config():
    env = os.environ.get("APP_ENV", "development").lower()
    return _ENV_MAP.get(env, DevelopmentConfig)
