import os
from flask import Flask, jsonify

# Load .env only for local/dev. In prod, env vars come from the platform.
if os.getenv("APP_ENV", "development") != "production":
    from dotenv import load_dotenv
    load_dotenv(".env", override=True)


from .config import get_config
from .errors import AppError
from .extensions import db, migrate, csrf, login_manager, limiter
from .security import init_security
from .observability import init_logging, init_sentry

def create_app():
    app = Flask(__name__)

    # ---- Rate limiting storage configuration ----
    app_env = (os.getenv("APP_ENV", "development") or "development").lower()
    use_redis = app_env in ("staging", "production")
    storage_uri = os.environ.get("REDIS_URL") if use_redis else "memory://"
    if use_redis and not storage_uri:
        # Hard fail in stage/prod so we never silently run without RL storage
        raise RuntimeError("REDIS_URL is required in staging/production for rate limiting")
    app.config["RATELIMIT_STORAGE_URI"] = storage_uri
    app.config.setdefault("RATELIMIT_HEADERS_ENABLED", True)

    # Config: clean, explicit, class-based
    app.config.from_object(get_config())
    app.config["APP_ENV"] = app_env

    # --- Required env validation for prod-like envs (staging/production) ---
    def _require(name: str):
        val = os.getenv(name) or app.config.get(name)
        if not val:
            raise RuntimeError(f"Missing required environment variable: {name}")
        app.config[name] = val
        return val

    if app_env in ("staging", "production"):
        # Enforce hard requirements at startup (not at import time)
        _require("SECRET_KEY")
        app.config["SQLALCHEMY_DATABASE_URI"] = _require("DATABASE_URL")
        if not _require("SUPABASE_URL").startswith("https://"):
            raise RuntimeError("SUPABASE_URL must be a valid HTTPS URL")
        _require("SUPABASE_ANON_KEY")
        _require("OPENAI_API_KEY")

    # --- Observability & Security ---
    init_logging(app)
    init_sentry(app)
    _warn_on_odd_keys(app)

    # Apply HTTPS, HSTS & CSP only in staging/production
    if app_env in ("staging", "production"):
        init_security(app)

    # Init extensions
    db.init_app(app)
    migrate.init_app(app, db, directory=os.path.join(os.path.dirname(app.root_path), "migrations"))
    csrf.init_app(app)
    login_manager.init_app(app)
    limiter.init_app(app)

    # Blueprints (explicit, consistent prefixes)
    from .blueprints.main import bp as main_bp
    from .blueprints.auth import bp as auth_bp
    from .blueprints.api import bp as api_bp
    from .blueprints.admin import bp as admin_bp

    app.register_blueprint(main_bp)                             # "/", "/uploads/*"
    app.register_blueprint(auth_bp, url_prefix="/auth")         # OAuth entry/callback
    app.register_blueprint(api_bp, url_prefix="/api")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")

    # JSON API authenticates by bearer token / SameSite cookie; admin keeps CSRF
    csrf.exempt(api_bp)

    @limiter.exempt
    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}, 200

    _register_error_handlers(app)

    # CLI commands (ops-grade utilities)
    from .cli import register_cli
    register_cli(app)

    return app


def _warn_on_odd_keys(app):
    anon = app.config.get("SUPABASE_ANON_KEY") or ""
    if anon and len(anon) < 20:
        app.logger.warning("SUPABASE_ANON_KEY does not appear to be in expected format")
    openai_key = app.config.get("OPENAI_API_KEY") or ""
    if openai_key and not openai_key.startswith("sk-"):
        app.logger.warning("OPENAI_API_KEY does not appear to be in expected format")
    if not (app.config.get("ADMIN_PASSWORD") or app.config.get("ADMIN_PASSWORD_HASH")):
        app.logger.warning("No admin password configured; admin dashboard login is disabled")


def _register_error_handlers(app):
    @app.errorhandler(AppError)
    def handle_app_error(e):
        if e.status >= 500:
            app.logger.error("%s: %s", type(e).__name__, e.message)
        return jsonify(e.to_dict()), e.status

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "not_found", "message": "Not Found"}), 404

    @app.errorhandler(413)
    def too_large(e):
        return jsonify({"error": "too_large", "message": "Upload is too large"}), 413

    @app.errorhandler(500)
    def server_error(e):
        return jsonify({"error": "server_error", "message": "Internal Server Error"}), 500

    # CSRF error handler (clean 400 instead of generic 500)
    from flask_wtf.csrf import CSRFError
    @app.errorhandler(CSRFError)
    def handle_csrf_error(e):
        return jsonify({"error": "csrf_failed", "message": e.description}), 400

    # 429 Too Many Requests with Retry-After
    @app.errorhandler(429)
    def too_many_requests(e):
        retry_after = getattr(e, "retry_after", None)
        headers = {}
        payload = {"error": "rate_limited", "message": "Too many requests"}
        if retry_after is not None:
            headers["Retry-After"] = str(int(retry_after))
            payload["retry_after"] = int(retry_after)
        return payload, 429, headers
