"""LLM reply module"""
from estate_agent.services.llm.base import Responder, ResponderError
from estate_agent.services.llm.client import AnthropicResponder, OllamaResponder
from estate_agent.services.llm.composer import ResponseComposer, TemplateResponder

__all__ = [
    'Responder',
    'ResponderError',
    'OllamaResponder',
    'AnthropicResponder',
    'TemplateResponder',
    'ResponseComposer',
]
