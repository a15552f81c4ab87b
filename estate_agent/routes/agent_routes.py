"""
Agent endpoints
- /api/agent/query: natural language search with a conversational reply
- /api/agent/contact-owner: simulated owner outreach
- /api/agent/recommendations: cheapest matches first
"""
import logging
from flask import Blueprint, request, jsonify
from estate_agent.routes import get_agent_service
from estate_agent.services.data.property_store import PropertyNotFoundError

logger = logging.getLogger(__name__)

bp = Blueprint('agent', __name__, url_prefix='/api/agent')


def _json_object():
    """Request body as a dict; anything else (list, string, invalid JSON) reads as empty"""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@bp.route('/query', methods=['POST'])
async def query():
    """
    Natural language property search

    Request:
    {
        "query": "3 BHK flat under 50 lakh in Panaji",
        "sessionId": "session_1700000000000" (optional)
    }

    Response:
    {
        "success": true,
        "query": "...",
        "response": "...",
        "properties": [...],
        "filtersApplied": {...},
        "totalFound": 1,
        "sessionId": "...",
        "timestamp": "..."
    }
    """
    data = _json_object()
    query_text = data.get('query')
    if not isinstance(query_text, str) or not query_text.strip():
        return jsonify({
            'success': False,
            'error': 'Query is required'
        }), 400

    try:
        result = await get_agent_service().handle_query(
            query_text,
            session_id=data.get('sessionId'),
        )
        return jsonify(result), 200
    except Exception:
        logger.error("Agent query failed", exc_info=True)
        return jsonify({
            'success': False,
            'error': 'Failed to process query',
            'message': "I'm experiencing some technical difficulties. Please try again."
        }), 500


@bp.route('/contact-owner', methods=['POST'])
async def contact_owner():
    """Simulated owner contact for {"propertyId": ...}"""
    data = _json_object()
    property_id = data.get('propertyId')
    if property_id is None or property_id == '':
        return jsonify({
            'success': False,
            'error': 'propertyId is required'
        }), 400

    try:
        result = await get_agent_service().contact_owner(property_id)
        return jsonify(result), 200
    except PropertyNotFoundError:
        return jsonify({
            'success': False,
            'error': 'Property not found'
        }), 404
    except Exception:
        logger.error("Contact owner failed", exc_info=True)
        return jsonify({
            'success': False,
            'error': 'Failed to contact owner'
        }), 500


@bp.route('/recommendations', methods=['POST'])
def recommendations():
    """{"budget": 5000000, "propertyType": "flat", "location": "panaji"} -> price-sorted list"""
    data = _json_object()
    try:
        result = get_agent_service().recommend(
            budget=data.get('budget'),
            property_type=data.get('propertyType'),
            location=data.get('location'),
        )
        return jsonify(result), 200
    except Exception:
        logger.error("Recommendations failed", exc_info=True)
        return jsonify({
            'success': False,
            'error': 'Failed to get recommendations'
        }), 500
