"""
Centralized configuration
"""
import os
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv

# Setup debug logger for configuration
_config_logger = logging.getLogger('config')

# Check for DEBUG_MODE early (before .env is loaded, check environment)
_debug_mode = os.getenv('DEBUG_MODE', 'false').lower() == 'true'
if _debug_mode:
    logging.basicConfig(level=logging.DEBUG, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    _config_logger.setLevel(logging.DEBUG)
    _config_logger.debug("DEBUG_MODE enabled - verbose logging active")

_env_file = Path.cwd() / '.env'

if not _env_file.exists():
    _config_logger.info(
        ".env not found in %s, using environment variables and defaults "
        "(copy .env.example to .env to configure)", Path.cwd()
    )

_dotenv_result = load_dotenv(_env_file)
if _debug_mode:
    _config_logger.debug(f"load_dotenv() returned: {_dotenv_result}")

# Provider credentials (process-level defaults, user settings take precedence)
GEMINI_API_KEY = os.getenv('GEMINI_API_KEY', '')
GEMINI_PRO_API_KEY = os.getenv('GEMINI_PRO_API_KEY', '')
CLAUDE_API_KEY = os.getenv('CLAUDE_API_KEY', '')

# Models
CLAUDE_MODEL_ID = os.getenv('CLAUDE_MODEL_ID', 'claude-sonnet-4-5-20250929')
OCR_MODEL = os.getenv('OCR_MODEL', 'gemini-3-flash-preview')
TRANSLATION_MODEL_PRO = os.getenv('TRANSLATION_MODEL_PRO', 'gemini-3-pro-preview')
TRANSLATION_MODEL_FLASH = os.getenv('TRANSLATION_MODEL_FLASH', 'gemini-3-flash-preview')

# Endpoints
GEMINI_API_BASE = os.getenv('GEMINI_API_BASE', 'https://generativelanguage.googleapis.com/v1beta')
CLAUDE_API_ENDPOINT = os.getenv('CLAUDE_API_ENDPOINT', 'https://api.anthropic.com/v1/messages')
CLAUDE_API_VERSION = '2023-06-01'

# Request / retry behaviour
REQUEST_TIMEOUT = int(os.getenv('REQUEST_TIMEOUT', '120'))
MAX_RETRIES = int(os.getenv('MAX_RETRIES', '3'))
RETRY_DELAY_SECONDS = float(os.getenv('RETRY_DELAY_SECONDS', '2'))
# 0 means no cap on concurrent in-flight translation calls per provider
MAX_CONCURRENT_REQUESTS = int(os.getenv('MAX_CONCURRENT_REQUESTS', '0'))

# Server configuration
HOST = os.getenv('HOST', '127.0.0.1')
PORT = int(os.getenv('PORT', '5000'))
OUTPUT_DIR = os.getenv('OUTPUT_DIR', 'translated_files')
SETTINGS_FILE = os.getenv('SETTINGS_FILE', 'data/settings.env')
MAX_UPLOAD_MB = int(os.getenv('MAX_UPLOAD_MB', '10'))
ALLOWED_IMAGE_MIME_TYPES = ('image/png', 'image/jpeg', 'image/webp')

# Debug mode (reload after .env is loaded)
DEBUG_MODE = os.getenv('DEBUG_MODE', 'false').lower() == 'true'


def mask_secret(value: Optional[str]) -> str:
    """Mask a credential for logs and API responses."""
    return '***' + value[-4:] if value else '(not set)'


if DEBUG_MODE or _debug_mode:
    _config_logger.setLevel(logging.DEBUG)
    _config_logger.debug("=" * 60)
    _config_logger.debug("LOADED CONFIGURATION VALUES:")
    _config_logger.debug(f"   OCR_MODEL: {OCR_MODEL}")
    _config_logger.debug(f"   TRANSLATION_MODEL_PRO: {TRANSLATION_MODEL_PRO}")
    _config_logger.debug(f"   TRANSLATION_MODEL_FLASH: {TRANSLATION_MODEL_FLASH}")
    _config_logger.debug(f"   CLAUDE_MODEL_ID: {CLAUDE_MODEL_ID}")
    _config_logger.debug(f"   REQUEST_TIMEOUT: {REQUEST_TIMEOUT}")
    _config_logger.debug(f"   MAX_RETRIES: {MAX_RETRIES}")
    _config_logger.debug(f"   GEMINI_API_KEY: {mask_secret(GEMINI_API_KEY)}")
    _config_logger.debug(f"   GEMINI_PRO_API_KEY: {mask_secret(GEMINI_PRO_API_KEY)}")
    _config_logger.debug(f"   CLAUDE_API_KEY: {mask_secret(CLAUDE_API_KEY)}")
    _config_logger.debug("=" * 60)


# Claude models offered in the settings surface
CLAUDE_MODELS = [
    {'id': 'claude-sonnet-4-5-20250929', 'name': 'Claude 4.5 Sonnet (Sept 2025)'},
    {'id': 'claude-3-5-sonnet-20241022', 'name': 'Claude 3.5 Sonnet (Oct 2024)'},
    {'id': 'claude-3-5-haiku-20241022', 'name': 'Claude 3.5 Haiku (Oct 2024)'},
    {'id': 'claude-3-5-sonnet-20240620', 'name': 'Claude 3.5 Sonnet (June 2024)'},
    {'id': 'claude-3-5-sonnet-latest', 'name': 'Claude 3.5 Sonnet (Auto Latest)'},
    {'id': 'claude-3-opus-20240229', 'name': 'Claude 3 Opus'},
    {'id': 'claude-3-sonnet-20240229', 'name': 'Claude 3 Sonnet (Legacy)'},
    {'id': 'claude-3-haiku-20240307', 'name': 'Claude 3 Haiku (Legacy)'},
]

# Keys of the persisted settings file
SETTINGS_KEYS = ('CLAUDE_API_KEY', 'CLAUDE_MODEL_ID', 'GEMINI_API_KEY', 'GEMINI_PRO_API_KEY')


@dataclass
class ProviderConfig:
    """Credentials and model of one provider.

    ``api_key`` is the user-supplied value; when empty the process-level
    default named by ``env_var`` is used instead.
    """
    api_key: str = ''
    premium_api_key: str = ''
    model: Optional[str] = None
    env_var: str = ''
    premium_env_var: str = ''

    @property
    def credential(self) -> str:
        """Resolved standard credential (may be empty)"""
        return resolve_api_key(self.api_key, self.env_var)

    @property
    def premium_credential(self) -> str:
        """Resolved premium credential, falling back to the standard one"""
        return resolve_api_key(self.premium_api_key, self.premium_env_var) or self.credential


def resolve_api_key(value: Optional[str], env_var_name: str) -> str:
    """
    Resolve API key value from user input or environment.

    Args:
        value: User-supplied value (may be empty)
        env_var_name: Name of environment variable to fall back to

    Returns:
        Resolved API key string ('' when neither is set)
    """
    if value:
        return value.strip()
    if not env_var_name:
        return ''
    return os.getenv(env_var_name, '').strip()


@dataclass
class TranslationConfig:
    """Explicit configuration handed to the batch orchestrator"""

    gemini: ProviderConfig = field(default_factory=lambda: ProviderConfig(
        env_var='GEMINI_API_KEY', premium_env_var='GEMINI_PRO_API_KEY'
    ))
    claude: ProviderConfig = field(default_factory=lambda: ProviderConfig(
        model=CLAUDE_MODEL_ID, env_var='CLAUDE_API_KEY'
    ))

    ocr_model: str = OCR_MODEL
    translation_model_pro: str = TRANSLATION_MODEL_PRO
    translation_model_flash: str = TRANSLATION_MODEL_FLASH

    timeout: int = REQUEST_TIMEOUT
    max_retries: int = MAX_RETRIES
    retry_delay: float = RETRY_DELAY_SECONDS
    max_concurrent_requests: int = MAX_CONCURRENT_REQUESTS

    @classmethod
    def from_settings(cls, settings: dict) -> 'TranslationConfig':
        """Create config from the persisted settings (user-supplied values)"""
        return cls(
            gemini=ProviderConfig(
                api_key=settings.get('GEMINI_API_KEY', '') or '',
                premium_api_key=settings.get('GEMINI_PRO_API_KEY', '') or '',
                env_var='GEMINI_API_KEY',
                premium_env_var='GEMINI_PRO_API_KEY'
            ),
            claude=ProviderConfig(
                api_key=settings.get('CLAUDE_API_KEY', '') or '',
                model=settings.get('CLAUDE_MODEL_ID') or CLAUDE_MODEL_ID,
                env_var='CLAUDE_API_KEY'
            )
        )

    @classmethod
    def from_cli_args(cls, args) -> 'TranslationConfig':
        """Create config from CLI arguments"""
        config = cls.from_settings({
            'GEMINI_API_KEY': getattr(args, 'gemini_api_key', ''),
            'GEMINI_PRO_API_KEY': getattr(args, 'gemini_pro_api_key', ''),
            'CLAUDE_API_KEY': getattr(args, 'claude_api_key', ''),
            'CLAUDE_MODEL_ID': getattr(args, 'claude_model', ''),
        })
        config.max_retries = getattr(args, 'max_retries', MAX_RETRIES)
        return config

    def to_settings(self) -> dict:
        """The four persisted settings"""
        return {
            'CLAUDE_API_KEY': self.claude.api_key,
            'CLAUDE_MODEL_ID': self.claude.model or CLAUDE_MODEL_ID,
            'GEMINI_API_KEY': self.gemini.api_key,
            'GEMINI_PRO_API_KEY': self.gemini.premium_api_key,
        }

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization (credentials masked)"""
        return {
            'gemini_api_key': mask_secret(self.gemini.credential),
            'gemini_pro_api_key': mask_secret(self.gemini.premium_api_key or
                                              resolve_api_key('', self.gemini.premium_env_var)),
            'claude_api_key': mask_secret(self.claude.credential),
            'claude_model_id': self.claude.model,
            'ocr_model': self.ocr_model,
            'translation_model_pro': self.translation_model_pro,
            'translation_model_flash': self.translation_model_flash,
            'timeout': self.timeout,
            'max_retries': self.max_retries,
            'retry_delay': self.retry_delay,
            'max_concurrent_requests': self.max_concurrent_requests,
        }
