"""
Persisted user settings (API keys and Claude model)

Stored as a dotenv file, separate from the process ``.env``: values saved
here are user-supplied and take precedence over environment defaults.
"""
import logging
import threading
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values, set_key

from linguavision.config import SETTINGS_FILE, SETTINGS_KEYS, mask_secret

logger = logging.getLogger(__name__)

_SECRET_KEYS = ('CLAUDE_API_KEY', 'GEMINI_API_KEY', 'GEMINI_PRO_API_KEY')


class SettingsStore:
    """Loads and saves the four persisted settings"""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or SETTINGS_FILE)
        self._lock = threading.Lock()

    def load(self) -> Dict[str, str]:
        """
        Read the settings file.

        Returns:
            Every key of SETTINGS_KEYS, '' for the ones never saved
        """
        with self._lock:
            values = dotenv_values(self.path) if self.path.exists() else {}
        settings = {key: (values.get(key) or '') for key in SETTINGS_KEYS}
        logger.debug(f"Loaded settings from {self.path}: {self.masked(settings)}")
        return settings

    def save(self, settings: Dict[str, Optional[str]]) -> Dict[str, str]:
        """
        Rewrite the settings file with all four keys.

        Unknown keys are ignored; missing keys are saved empty.
        """
        cleaned = {key: str(settings.get(key) or '').strip() for key in SETTINGS_KEYS}
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text('', encoding='utf-8')
            for key, value in cleaned.items():
                set_key(str(self.path), key, value)
        logger.info(f"Saved settings to {self.path}")
        return cleaned

    @staticmethod
    def masked(settings: Dict[str, str]) -> Dict[str, str]:
        """Copy of the settings safe to log or return over the API"""
        return {
            key: mask_secret(value) if key in _SECRET_KEYS else value
            for key, value in settings.items()
        }
