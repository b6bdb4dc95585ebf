"""
User settings routes (API keys and Claude model)
"""
import logging
from flask import Blueprint, jsonify, request

from linguavision.config import CLAUDE_MODELS, SETTINGS_KEYS, TranslationConfig

logger = logging.getLogger(__name__)


def create_settings_blueprint(orchestrator, settings_store):
    """
    Create and configure the settings blueprint

    Args:
        orchestrator: BatchOrchestrator whose configuration follows the settings
        settings_store: SettingsStore persisting the values
    """
    bp = Blueprint('settings', __name__)

    @bp.route('/api/settings', methods=['GET'])
    def get_settings():
        """Current settings, credentials masked"""
        settings = settings_store.load()
        return jsonify({
            "settings": settings_store.masked(settings),
            "configured": {key: bool(value) for key, value in settings.items()},
            "claude_models": CLAUDE_MODELS
        })

    @bp.route('/api/settings', methods=['POST'])
    def save_settings():
        """Save all four settings and apply them to new attempts"""
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "Expected a JSON object"}), 400

        unknown = sorted(set(data) - set(SETTINGS_KEYS))
        if unknown:
            return jsonify({"error": f"Unknown settings: {', '.join(unknown)}"}), 400

        not_text = sorted(
            key for key, value in data.items() if value is not None and not isinstance(value, str)
        )
        if not_text:
            return jsonify({"error": f"Settings must be strings: {', '.join(not_text)}"}), 400

        saved = settings_store.save(data)
        orchestrator.update_config(TranslationConfig.from_settings(saved))
        logger.info("Settings saved and applied")
        return jsonify({
            "message": "Settings saved.",
            "settings": settings_store.masked(saved)
        })

    return bp
