"""
Flask routes orchestrator for the translation API

Registers the route blueprints:

- blueprints/config_routes.py: Health check and configuration
- blueprints/batch_routes.py: Batch upload, status, retry, removal, download
- blueprints/settings_routes.py: Persisted API keys and Claude model
"""
import logging
from flask import jsonify

from linguavision.config import MAX_UPLOAD_MB
from .blueprints import (
    create_config_blueprint,
    create_batch_blueprint,
    create_settings_blueprint
)

logger = logging.getLogger(__name__)


def configure_routes(app, orchestrator, background_loop, settings_store):
    """
    Configure Flask routes by registering all blueprints

    Args:
        app: Flask application instance
        orchestrator: BatchOrchestrator owning the items
        background_loop: BackgroundLoop the orchestrator runs on
        settings_store: SettingsStore for the persisted settings
    """
    app.register_blueprint(create_config_blueprint(orchestrator))
    app.register_blueprint(create_batch_blueprint(
        orchestrator, background_loop,
        max_upload_mb=app.config.get('MAX_UPLOAD_MB_PER_FILE', MAX_UPLOAD_MB)
    ))
    app.register_blueprint(create_settings_blueprint(orchestrator, settings_store))

    _register_error_handlers(app)


def _register_error_handlers(app):
    """Register global error handlers"""

    @app.errorhandler(404)
    def route_not_found(error):
        return jsonify({"error": "API Endpoint not found"}), 404

    @app.errorhandler(500)
    def internal_server_error(error):
        logger.exception(f"INTERNAL SERVER ERROR: {error}")
        return jsonify({"error": "Internal server error", "details": str(error)}), 500
