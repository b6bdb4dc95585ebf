"""
Persistence module for user settings.
"""

from .settings_store import SettingsStore

__all__ = ['SettingsStore']
