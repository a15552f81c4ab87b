"""HTTP route blueprints"""
from flask import current_app
from estate_agent.services.agent_service import AgentService


def get_agent_service() -> AgentService:
    """AgentService built for the current app in create_app"""
    return current_app.extensions['agent_service']
