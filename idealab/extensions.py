from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_wtf import CSRFProtect
from flask_login import LoginManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_login import current_user

db = SQLAlchemy()
migrate = Migrate()
csrf = CSRFProtect()
login_manager = LoginManager()


@login_manager.request_loader
def _load_user_from_request(req):
    # Lazy import avoids circulars during app init
    from idealab.services.policy import resolve_request_user
    return resolve_request_user(req)


# Key: signed-in user id; otherwise client IP
def _rate_limit_key():
    if getattr(current_user, "is_authenticated", False) and getattr(current_user, "id", None):
        return f"user:{current_user.id}"
    return get_remote_address()

# Storage is configured in create_app() via limiter.init_app(...).
limiter = Limiter(key_func=_rate_limit_key)
