from flask_talisman import Talisman

def init_security(app):
    """
    Production/staging security headers with a conservative CSP.
    The API serves JSON plus stored screenshots; nothing here runs inline JS.
    """
    csp = {
        "default-src": ["'self'"],
        "script-src":  ["'self'"],
        "style-src":   ["'self'", "'unsafe-inline'"],
        # Google profile avatars are linked, not proxied
        "img-src":     ["'self'", "data:", "blob:", "https://*.googleusercontent.com"],
        "connect-src": ["'self'", app.config.get("SUPABASE_URL") or "'self'"],
        "frame-ancestors": ["'self'"],
        "base-uri":    ["'self'"],
        # OAuth entry redirects to the auth backend
        "form-action": ["'self'", app.config.get("SUPABASE_URL") or "'self'"],
    }

    Talisman(
        app,
        content_security_policy=csp,
        force_https=True,
        strict_transport_security=True,
        session_cookie_secure=True,
        frame_options="SAMEORIGIN",
        referrer_policy="strict-origin-when-cross-origin",
    )
