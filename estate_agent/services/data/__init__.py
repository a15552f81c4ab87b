"""Data access module"""
from estate_agent.services.data.property_store import PropertyStore, PropertyNotFoundError, PropertyValidationError
from estate_agent.services.data.conversation import ConversationStore

__all__ = ['PropertyStore', 'PropertyNotFoundError', 'PropertyValidationError', 'ConversationStore']
