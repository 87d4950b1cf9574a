# Load environment variables FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

import os
import time
import uuid
from typing import Any, Mapping, Optional
from flask import Flask, request
from flask import g

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'authorization, x-client-info, apikey, content-type',
}


def _env_flag(name: str, default: str = 'false') -> bool:
    return os.environ.get(name, default).lower() in ('true', '1', 'yes')


def create_app(config: Optional[Mapping[str, Any]] = None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)

    # =============================================================================
    # CONFIGURATION
    # =============================================================================
    app.config.from_mapping(
        JSON_SORT_KEYS=False,
        TMDB_ACCESS_TOKEN=os.environ.get('TMDB_ACCESS_TOKEN') or None,
        PROVIDER_TIMEOUT=float(os.environ.get('PROVIDER_TIMEOUT', '15')),
        HTTP_TIMEOUT=float(os.environ.get('HTTP_TIMEOUT', '10')),
        DISABLE_RATE_LIMITING=_env_flag('DISABLE_RATE_LIMITING'),
        SEARCH_RATE_LIMIT=os.environ.get('SEARCH_RATE_LIMIT', '30 per minute'),
        HOST=os.environ.get('FLASK_HOST', '127.0.0.1'),
        PORT=int(os.environ.get('FLASK_PORT', '5000')),
        DEBUG=_env_flag('FLASK_DEBUG'),
    )
    if config:
        app.config.update(config)

    # Keep CJK titles readable in responses
    app.json.ensure_ascii = False
    app.json.sort_keys = False

    # =============================================================================
    # LOGGING, RATE LIMITING
    # =============================================================================
    from .log import log, debug_log_event
    from .rate_limit import init_rate_limiting

    init_rate_limiting(app)

    @app.before_request
    def assign_request_id():
        g.request_id = uuid.uuid4().hex[:12]
        g.request_start = time.time()

    @app.after_request
    def add_cors_headers(response):
        response.headers.update(CORS_HEADERS)
        return response

    @app.after_request
    def debug_request_log(response):
        try:
            duration_ms = None
            start_time = getattr(g, 'request_start', None)
            if start_time:
                duration_ms = int((time.time() - start_time) * 1000)
            debug_log_event({
                'event': 'request',
                'request_id': getattr(g, 'request_id', None),
                'method': request.method,
                'path': request.path,
                'status': response.status_code,
                'duration_ms': duration_ms,
                'remote_addr': request.remote_addr,
            })
        except Exception as exc:
            log(f"Debug log error: {exc}")
        return response

    @app.teardown_request
    def debug_exception_log(error=None):
        if not error:
            return
        debug_log_event({
            'event': 'exception',
            'request_id': getattr(g, 'request_id', None),
            'method': request.method,
            'path': request.path,
            'error_type': error.__class__.__name__,
            'error': str(error)
        })

    # =============================================================================
    # SEARCH ORCHESTRATOR
    # =============================================================================
    # Holds configuration only; providers and HTTP clients are built per search
    from .search.smart_search import SmartSearch

    app.extensions['smart_search'] = SmartSearch(
        tmdb_token=app.config['TMDB_ACCESS_TOKEN'],
        provider_timeout=app.config['PROVIDER_TIMEOUT'],
        http_timeout=app.config['HTTP_TIMEOUT'],
    )

    # =============================================================================
    # BLUEPRINTS & ROUTES
    # =============================================================================
    from .routes.main_api import main_bp
    from .routes.search_api import search_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(search_bp)

    if not app.config['TMDB_ACCESS_TOKEN']:
        log("TMDB_ACCESS_TOKEN not set: TMDb results will be empty")

    return app
