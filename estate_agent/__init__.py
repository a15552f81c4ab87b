"""
Real estate AI agent backend application
"""
import logging
from typing import Optional
from flask import Flask
from flask_cors import CORS
from estate_agent.config import config


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO),
                        format='[%(levelname)s] %(message)s')


def create_app(config_name: Optional[str] = None):
    """Flask application factory"""
    app = Flask(__name__)

    # Settings are needed before CORS is configured
    app.config.from_object(config.get(config_name or 'default', config['default']))
    _configure_logging(app.config['LOG_LEVEL'])

    CORS(
        app,
        resources={
            r"/api/*": {
                "origins": list(app.config['CORS_ORIGINS'])
            }
        },
        supports_credentials=True,
    )

    from estate_agent.db import init_db
    init_db(app)

    # Agent service is built once per app and shared by requests
    from estate_agent.services.agent_service import AgentService
    app.extensions['agent_service'] = AgentService.from_config(app.config)

    # Routes
    from estate_agent.routes import health_routes
    app.register_blueprint(health_routes.bp)

    from estate_agent.routes import property_routes
    app.register_blueprint(property_routes.bp)

    from estate_agent.routes import agent_routes
    app.register_blueprint(agent_routes.bp)

    from estate_agent.routes import conversation_routes
    app.register_blueprint(conversation_routes.bp)

    return app
