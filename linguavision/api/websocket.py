"""
WebSocket handlers for real-time communication
"""
import logging

from flask import request
from flask_socketio import emit

logger = logging.getLogger(__name__)


def configure_websocket_handlers(socketio, orchestrator):
    """Configure WebSocket event handlers"""

    @socketio.on('connect')
    def handle_websocket_connect():
        logger.info(f'WebSocket client connected: {request.sid}')
        emit('connected', {
            'message': 'Connected to translation server via WebSocket',
            'items': [item.to_dict() for item in orchestrator.items()]
        })

    @socketio.on('disconnect')
    def handle_websocket_disconnect():
        logger.info(f'WebSocket client disconnected: {request.sid}')


def emit_item_update(socketio, item):
    """
    Emit a WebSocket update with the latest snapshot of an item

    Args:
        socketio: SocketIO instance
        item: BatchItem that was just written
    """
    try:
        socketio.emit('item_update', item.to_dict(), namespace='/')
    except Exception as e:
        logger.error(f"WebSocket emission error for {item.id}: {e}")


def emit_credentials_required(socketio, error):
    """Ask connected clients to open the settings (a key is missing)"""
    try:
        socketio.emit('credentials_required', {
            'provider': error.provider,
            'message': error.message
        }, namespace='/')
    except Exception as e:
        logger.error(f"WebSocket emission error for credentials_required: {e}")
