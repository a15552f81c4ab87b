"""Health check endpoints"""
from datetime import datetime, timezone
from flask import Blueprint, current_app, jsonify
from estate_agent.db.connection import is_database_connected

bp = Blueprint('health', __name__)


def _database_status() -> str:
    return "Connected" if is_database_connected() else "Disconnected"


@bp.route('/', methods=['GET'])
def root():
    return jsonify({
        'status': 'OK',
        'message': 'Real Estate AI Agent API is running!',
        'database': _database_status(),
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'environment': current_app.config.get('ENVIRONMENT', 'development')
    }), 200


@bp.route('/api/health', methods=['GET'])
def health():
    return jsonify({
        'status': 'OK',
        'message': 'Real Estate AI Agent Backend Running!',
        'features': ['Property Search', 'AI Query Processing', 'Natural Language Understanding'],
        'database': _database_status(),
        'timestamp': datetime.now(timezone.utc).isoformat()
    }), 200
