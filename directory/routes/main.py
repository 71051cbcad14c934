"""
Directory page and health check routes.
"""
from flask import Blueprint, current_app, jsonify, render_template, request

from directory import get_engine
from directory.services import UserFilter, load_directory_page, probe_connection

main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    """Render the searchable user table with province counts."""
    user_filter = UserFilter.from_args(request.args)
    engine = get_engine()
    page = load_directory_page(engine, user_filter)
    return render_template(
        'index.html',
        page=page,
        user_filter=user_filter,
        db_host=engine.url.host or 'local',
        db_name=engine.url.database,
    )


@main_bp.route('/health')
def health():
    """Health check endpoint backed by the connectivity probe."""
    error = probe_connection(get_engine())
    body = {
        'status': 'healthy' if error is None else 'unhealthy',
        'service': current_app.config.get('SERVICE_NAME', 'user-directory'),
        'database': 'ok' if error is None else error.display_message,
    }
    return jsonify(body), 200 if error is None else 503
