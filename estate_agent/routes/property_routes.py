"""Property catalog endpoints"""
import logging
from datetime import datetime, timezone
from flask import Blueprint, current_app, request, jsonify
from estate_agent.services.data.property_store import (
    PropertyStore,
    PropertyValidationError,
    listing_filters,
)

logger = logging.getLogger(__name__)

bp = Blueprint('properties', __name__, url_prefix='/api/properties')
property_store = PropertyStore()


@bp.route('', methods=['GET'])
def list_properties():
    """
    Catalog listing

    Query string: type, location, maxPrice, bedrooms, forSale (true/false)
    """
    args = request.args
    filters = listing_filters(
        property_type=args.get('type'),
        location=args.get('location'),
        max_price=args.get('maxPrice'),
        bedrooms=args.get('bedrooms'),
        for_sale=args.get('forSale'),
    )

    try:
        properties = property_store.find(filters, limit=current_app.config.get('PROPERTY_LIST_LIMIT', 20))
    except Exception:
        logger.error("Property listing failed", exc_info=True)
        return jsonify({'success': False, 'error': 'Failed to load properties'}), 500

    return jsonify({
        'success': True,
        'count': len(properties),
        'properties': properties,
        'timestamp': datetime.now(timezone.utc).isoformat()
    }), 200


@bp.route('', methods=['POST'])
def create_property():
    """Add a listing"""
    payload = request.get_json(silent=True)
    try:
        created = property_store.create(payload)
    except PropertyValidationError as e:
        return jsonify({'success': False, 'error': str(e)}), 400
    except Exception:
        logger.error("Property creation failed", exc_info=True)
        return jsonify({'success': False, 'error': 'Failed to create property'}), 500

    return jsonify({'success': True, 'property': created}), 201


@bp.route('/<property_id>', methods=['GET'])
def get_property(property_id):
    try:
        prop = property_store.find_by_id(property_id)
    except Exception:
        logger.error("Property lookup failed: %s", property_id, exc_info=True)
        return jsonify({'success': False, 'error': 'Failed to load property'}), 500

    if prop is None:
        return jsonify({'success': False, 'error': 'Property not found'}), 404
    return jsonify({'success': True, 'property': prop}), 200
