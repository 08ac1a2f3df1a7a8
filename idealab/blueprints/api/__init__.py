from flask import Blueprint

bp = Blueprint("api", __name__)

# Import submodules so their @bp.route decorators register
from . import account      # noqa: E402,F401  /api/auth/user, /api/validations, /api/submissions
from . import validate     # noqa: E402,F401  /api/validate, /api/generate-prompt
from . import submit       # noqa: E402,F401  /api/submit
from . import tracking     # noqa: E402,F401  /api/track-click, /api/csrf-token
