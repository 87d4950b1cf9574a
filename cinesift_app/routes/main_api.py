from flask import Blueprint, current_app, jsonify

from ..rate_limit import limit_light

main_bp = Blueprint('main_api', __name__)


@main_bp.route('/api/providers')
@limit_light
def list_providers():
    """List search providers with their configuration status."""
    smart_search = current_app.extensions['smart_search']
    return jsonify({'providers': smart_search.describe_providers()})


@main_bp.route('/api/health')
@limit_light
def health():
    """Liveness check; never touches upstream sites."""
    smart_search = current_app.extensions['smart_search']
    return jsonify({
        'status': 'ok',
        'providers': len(smart_search.describe_providers())
    })
