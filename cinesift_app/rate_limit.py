"""
Rate limiting configuration for the CineSift API.

Uses Flask-Limiter to protect upstream providers from being hammered through
us: every search fans out to up to four sites plus per-item detail pages.

Rate Limit Tiers:
- Heavy: /search-media (parallel upstream fan-out)
- Light: /api/providers, /api/health (no upstream calls)
"""

import os
from flask import current_app, jsonify
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Initialize limiter (will be attached to app in create_app)
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],
    storage_uri=os.environ.get("RATELIMIT_STORAGE_URI", "memory://"),
    strategy="fixed-window",
    headers_enabled=True,  # Add X-RateLimit-* headers to responses
)


# ==============================================================================
# RATE LIMIT TIERS
# ==============================================================================

DEFAULT_SEARCH_LIMIT = "30 per minute"

LIGHT_LIMIT = "120 per minute"


def _search_limit() -> str:
    return current_app.config.get('SEARCH_RATE_LIMIT') or DEFAULT_SEARCH_LIMIT


def limit_heavy(f):
    """Apply the configurable search limit to upstream fan-out endpoints."""
    return limiter.limit(_search_limit)(f)


def limit_light(f):
    """Apply light rate limit to cheap operations."""
    return limiter.limit(LIGHT_LIMIT)(f)


# ==============================================================================
# ERROR HANDLER
# ==============================================================================

def rate_limit_exceeded_handler(e):
    """Return a JSON 429 with the retry hint."""
    retry_after = getattr(e, 'retry_after', None) or 60
    response = jsonify({
        "error": "Rate limit exceeded",
        "message": str(e.description),
        "retry_after": retry_after
    })
    response.status_code = 429
    response.headers['Retry-After'] = str(retry_after)
    return response


# ==============================================================================
# INITIALIZATION
# ==============================================================================

def init_rate_limiting(app):
    """
    Initialize rate limiting for a Flask app.

    Call this in create_app() after app configuration.
    """
    # The limiter is shared, so every app states its own enabled flag
    app.config['RATELIMIT_ENABLED'] = not app.config.get('DISABLE_RATE_LIMITING')

    limiter.init_app(app)

    # Register custom error handler
    app.errorhandler(429)(rate_limit_exceeded_handler)

    return limiter
