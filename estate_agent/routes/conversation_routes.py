"""Conversation history endpoints"""
import logging
from flask import Blueprint, jsonify
from estate_agent.services.data.conversation import ConversationStore

logger = logging.getLogger(__name__)

bp = Blueprint('conversations', __name__, url_prefix='/api/conversations')
conversation_store = ConversationStore()


@bp.route('/<session_id>', methods=['GET'])
def get_conversation(session_id):
    """Messages of a session, or an empty list for an unknown one"""
    try:
        conversation = conversation_store.get(session_id)
    except Exception:
        logger.error("Get conversation failed: %s", session_id, exc_info=True)
        return jsonify({'error': 'Failed to get conversation'}), 500

    if conversation is None:
        return jsonify({'messages': []}), 200
    return jsonify(conversation), 200


@bp.route('/<session_id>', methods=['DELETE'])
def clear_conversation(session_id):
    try:
        conversation_store.delete(session_id)
    except Exception:
        logger.error("Clear conversation failed: %s", session_id, exc_info=True)
        return jsonify({'error': 'Failed to clear conversation'}), 500
    return jsonify({'success': True, 'message': 'Conversation cleared'}), 200
