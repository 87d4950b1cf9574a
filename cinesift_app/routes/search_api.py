"""
================================================================================
CineSift - Search API Routes
================================================================================
Flask blueprint for the aggregated media search endpoint.

ENDPOINTS:
  POST    /search-media        - Search all providers for {query, type}
  POST    /api/search-media    - Same, under the API prefix
  OPTIONS (both)               - CORS pre-flight acknowledgement

Response:
  200 {"results": [...]}   ranked, deduplicated records
  400 {"error": "Query is required"}
  500 {"error": "<message>"}
================================================================================
"""

from flask import Blueprint, current_app, jsonify, make_response, request
import asyncio
import logging

from ..rate_limit import limit_heavy
from ..search.smart_search import SmartSearch
from .validators import validate_search_payload

logger = logging.getLogger(__name__)

# Create blueprint
search_bp = Blueprint('search_api', __name__)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def run_async(coro):
    """
    Run async coroutine in sync Flask context.

    Flask routes are sync, but the provider fan-out is async. Every request
    gets its own event loop, so no loop or HTTP client outlives a request.
    """
    return asyncio.run(coro)


def get_smart_search() -> SmartSearch:
    return current_app.extensions['smart_search']


def _error(message: str, status: int):
    return jsonify({'error': message}), status


# =============================================================================
# SEARCH ROUTES
# =============================================================================

@search_bp.route('/search-media', methods=['OPTIONS'])
@search_bp.route('/api/search-media', methods=['OPTIONS'])
def search_media_preflight():
    """CORS pre-flight: bare acknowledgement (headers added in after_request)."""
    return make_response('ok', 200)


@search_bp.route('/search-media', methods=['POST'])
@search_bp.route('/api/search-media', methods=['POST'])
@limit_heavy
def search_media():
    """
    Search for titles across providers.

    Request:
        {
            "query": "铃芽之旅",
            "type": "movie"   // "anime", "movie", anything else = all
        }

    Returns:
        {
            "results": [
                {
                    "sourceType": "tmdb",
                    "sourceId": "916224",
                    "titleZh": "铃芽之旅",
                    "matchCount": 3,
                    ...
                }
            ]
        }
    """
    payload = request.get_json(silent=True)
    query, type_hint, error = validate_search_payload(payload)
    if error:
        return _error(error, 400)

    try:
        results = run_async(get_smart_search().search(query, type_hint))
        return jsonify({'results': [record.to_dict() for record in results]})

    except Exception as e:
        logger.exception(f"Search error: {e}")
        return _error(str(e), 500)
