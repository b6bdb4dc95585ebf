"""
Configuration and health check routes
"""
import logging
from flask import Blueprint, jsonify

from linguavision.config import (
    ALLOWED_IMAGE_MIME_TYPES,
    CLAUDE_MODELS,
    DEBUG_MODE,
    MAX_UPLOAD_MB
)
from linguavision.core.models import ModelProvider, SourceLanguage

# Setup logger for this module
logger = logging.getLogger(__name__)
if DEBUG_MODE:
    logger.setLevel(logging.DEBUG)


def create_config_blueprint(orchestrator):
    """Create and configure the config blueprint"""
    bp = Blueprint('config', __name__)

    @bp.route('/api/health', methods=['GET'])
    def health_check():
        """API health check endpoint"""
        return jsonify({
            "status": "ok",
            "message": "Translation API is running",
            "items": len(orchestrator.items()),
            "pending_tasks": orchestrator.pending_count
        })

    @bp.route('/api/config', methods=['GET'])
    def get_default_config():
        """Get default configuration values"""
        config = orchestrator.config
        config_response = {
            "source_languages": [
                {"value": language.value, "name": language.name.title()}
                for language in SourceLanguage
            ],
            "providers": [
                {"value": provider.value, "name": provider.display_name}
                for provider in ModelProvider
            ],
            "claude_models": CLAUDE_MODELS,
            "ocr_model": config.ocr_model,
            "translation_models": {
                "premium": config.translation_model_pro,
                "standard": config.translation_model_flash
            },
            "retry": {
                "max_retries": config.max_retries,
                "initial_delay": config.retry_delay
            },
            "max_concurrent_requests": config.max_concurrent_requests,
            "max_upload_mb": MAX_UPLOAD_MB,
            "supported_formats": list(ALLOWED_IMAGE_MIME_TYPES)
        }

        if DEBUG_MODE:
            logger.debug(f"/api/config response: {config.to_dict()}")

        return jsonify(config_response)

    return bp
