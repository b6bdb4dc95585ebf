"""
API Routes
"""
from .config_routes import create_config_blueprint
from .batch_routes import create_batch_blueprint
from .settings_routes import create_settings_blueprint

__all__ = [
    'create_config_blueprint',
    'create_batch_blueprint',
    'create_settings_blueprint'
]
