"""
Batch management routes: upload, status, retry, removal and download
"""
import io
import logging

from flask import Blueprint, jsonify, request, send_file

from linguavision.config import ALLOWED_IMAGE_MIME_TYPES, MAX_UPLOAD_MB
from linguavision.core.export import artifact_filename, render_item
from linguavision.core.models import ImagePayload, ItemStatus, ModelProvider, SourceLanguage
from linguavision.core.strategy import missing_credential
from linguavision.core.translation_clients import ProviderCredentials
from linguavision.utils.image_utils import detect_image_mime

logger = logging.getLogger(__name__)


def _parse_selection(values):
    """
    Read source language and provider from form or JSON values.

    Returns:
        tuple: (language, provider), either may be None when not given

    Raises:
        ValueError: On an unsupported value
    """
    language = values.get('source_language')
    provider = values.get('provider')
    return (
        SourceLanguage.from_value(language) if language is not None else None,
        ModelProvider.from_value(provider) if provider is not None else None
    )


def _read_images(files, max_upload_mb):
    """
    Validate uploaded files.

    Returns:
        tuple: (accepted ImagePayload list, rejected list of {filename, error})
    """
    max_bytes = max_upload_mb * 1024 * 1024
    images, rejected = [], []
    for storage in files:
        if not storage or not storage.filename:
            continue
        data = storage.read()
        if not data:
            rejected.append({"filename": storage.filename, "error": "Empty file not allowed"})
            continue
        if len(data) > max_bytes:
            rejected.append({"filename": storage.filename,
                             "error": f"File exceeds the {max_upload_mb} MB limit"})
            continue
        mime_type = detect_image_mime(data)
        if mime_type not in ALLOWED_IMAGE_MIME_TYPES:
            rejected.append({"filename": storage.filename,
                             "error": "Unsupported file type (PNG, JPEG or WEBP expected)"})
            continue
        images.append(ImagePayload(filename=storage.filename, data=data, mime_type=mime_type))
    return images, rejected


def create_batch_blueprint(orchestrator, background_loop, max_upload_mb=MAX_UPLOAD_MB):
    """
    Create and configure the batch blueprint

    Args:
        orchestrator: BatchOrchestrator owning the items
        background_loop: BackgroundLoop the orchestrator runs on
        max_upload_mb: Per-file upload limit
    """
    bp = Blueprint('batch', __name__)

    @bp.route('/api/batch', methods=['POST'])
    def upload_batch():
        """Accept images and start translating them"""
        files = request.files.getlist('files')
        if not files:
            return jsonify({"error": "No files provided"}), 400

        try:
            language, provider = _parse_selection(request.form)
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        language = language or SourceLanguage.AUTO
        provider = provider or ModelProvider.GEMINI

        images, rejected = _read_images(files, max_upload_mb)
        if not images:
            return jsonify({"error": "No valid image files", "rejected": rejected}), 400

        credentials = ProviderCredentials.from_config(orchestrator.config)
        credentials_required = missing_credential(provider, credentials) is not None

        items = background_loop.run(orchestrator.add_files(images, language, provider))
        logger.info(f"Batch upload: {len(items)} accepted, {len(rejected)} rejected")
        return jsonify({
            "items": [item.to_dict() for item in items],
            "rejected": rejected,
            "credentials_required": credentials_required
        }), 202

    @bp.route('/api/batch', methods=['GET'])
    def list_items():
        return jsonify({"items": [item.to_dict() for item in orchestrator.items()]})

    @bp.route('/api/batch/<item_id>', methods=['GET'])
    def get_item(item_id):
        item = orchestrator.get(item_id)
        if item is None:
            return jsonify({"error": "Item not found"}), 404
        return jsonify(item.to_dict())

    @bp.route('/api/batch/<item_id>/retry', methods=['POST'])
    def retry_item(item_id):
        """Start a fresh attempt (refused while the item is analyzing)"""
        if orchestrator.get(item_id) is None:
            return jsonify({"error": "Item not found"}), 404

        try:
            language, provider = _parse_selection(request.get_json(silent=True) or {})
        except ValueError as e:
            return jsonify({"error": str(e)}), 400

        accepted = background_loop.run(orchestrator.retry(item_id, language, provider))
        item = orchestrator.get(item_id)
        if not accepted:
            if item is None:
                return jsonify({"error": "Item not found"}), 404
            return jsonify({"error": "Item is still being analyzed", "item": item.to_dict()}), 409
        return jsonify(item.to_dict() if item else {"id": item_id}), 202

    @bp.route('/api/batch/<item_id>', methods=['DELETE'])
    def remove_item(item_id):
        if not orchestrator.remove(item_id):
            return jsonify({"error": "Item not found"}), 404
        return jsonify({"removed": item_id})

    @bp.route('/api/batch', methods=['DELETE'])
    def clear_items():
        return jsonify({"cleared": orchestrator.clear()})

    @bp.route('/api/batch/<item_id>/download', methods=['GET'])
    def download_item(item_id):
        """Plain-text translation artifact of a successful item"""
        item = orchestrator.get(item_id)
        if item is None or item.status is not ItemStatus.SUCCESS:
            return jsonify({"error": "No translation available for this item"}), 404
        return send_file(
            io.BytesIO(render_item(item).encode('utf-8')),
            mimetype='text/plain; charset=utf-8',
            as_attachment=True,
            download_name=artifact_filename(item.filename)
        )

    return bp
