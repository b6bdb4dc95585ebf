"""
Flask web server for the image translation API with WebSocket support
"""
import sys
import logging
from datetime import datetime
from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO

from linguavision.config import (
    DEBUG_MODE,
    HOST,
    PORT,
    TranslationConfig
)
from linguavision.api.handlers import BackgroundLoop
from linguavision.api.routes import configure_routes
from linguavision.api.websocket import (
    configure_websocket_handlers,
    emit_credentials_required,
    emit_item_update
)
from linguavision.core.orchestrator import BatchOrchestrator
from linguavision.core.strategy import TranslationStrategy
from linguavision.persistence.settings_store import SettingsStore

logger = logging.getLogger(__name__)


def create_app(settings_store=None, background_loop=None,
               strategy_factory=TranslationStrategy.from_config):
    """
    Build the Flask application, its Socket.IO server and the orchestrator

    Args:
        settings_store: SettingsStore (defaults to SETTINGS_FILE)
        background_loop: BackgroundLoop to run the orchestrator on (started
            here when omitted)
        strategy_factory: Builds the translation strategy from a config

    Returns:
        Flask app; the orchestrator, loop, store and socketio are available
        in ``app.extensions['linguavision']``
    """
    app = Flask(__name__)
    CORS(app)
    socketio = SocketIO(app, cors_allowed_origins="*", async_mode='threading')

    settings_store = settings_store or SettingsStore()
    background_loop = background_loop or BackgroundLoop()
    background_loop.start()

    config = TranslationConfig.from_settings(settings_store.load())
    orchestrator = BatchOrchestrator(
        config,
        strategy_factory=strategy_factory,
        on_credentials_required=lambda error: emit_credentials_required(socketio, error)
    )
    orchestrator.add_listener(lambda item: emit_item_update(socketio, item))

    configure_routes(app, orchestrator, background_loop, settings_store)
    configure_websocket_handlers(socketio, orchestrator)

    app.extensions['linguavision'] = {
        'orchestrator': orchestrator,
        'background_loop': background_loop,
        'settings_store': settings_store,
        'socketio': socketio
    }
    return app


def validate_configuration(config):
    """Log which credentials are available (keys are never printed)"""
    if not config.gemini.credential:
        logger.warning("No Gemini API key configured: every translation needs one for text extraction.")
        logger.warning("   Add GEMINI_API_KEY to .env or save it through /api/settings.")
    if not config.claude.credential:
        logger.info("No Claude API key configured: only the Gemini provider is usable.")
    logger.info("Configuration: %s", config.to_dict())


def main():
    logging.basicConfig(
        level=logging.DEBUG if DEBUG_MODE else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    # Reduce verbosity of werkzeug (Flask HTTP server logs)
    logging.getLogger('werkzeug').setLevel(logging.WARNING)

    app = create_app()
    context = app.extensions['linguavision']
    validate_configuration(context['orchestrator'].config)

    logger.info("=" * 60)
    logger.info(f"LINGUAVISION TRANSLATION SERVER (Version {datetime.now().strftime('%Y%m%d-%H%M')})")
    logger.info("=" * 60)
    logger.info(f"   - API: http://{HOST}:{PORT}/api/")
    logger.info(f"   - Health Check: http://{HOST}:{PORT}/api/health")
    logger.info("   - Supported formats: PNG, JPEG, WEBP")
    logger.info("")

    if HOST == '0.0.0.0':
        logger.warning("Server is binding to 0.0.0.0 (all network interfaces)")

    try:
        context['socketio'].run(app, host=HOST, port=PORT, debug=False, allow_unsafe_werkzeug=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    finally:
        context['background_loop'].stop()
    return 0


if __name__ == '__main__':
    sys.exit(main())
