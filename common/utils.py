"""
Utility functions for accessing application settings
"""
from django.conf import settings
from core.constants import Defaults
import logging

logger = logging.getLogger(__name__)

APP_SETTING_DEFAULTS = {
    'DEFAULT_UNIT': Defaults.UNIT,
    'STEP_UP_GRANT_TTL': Defaults.STEP_UP_GRANT_TTL,
}


def get_app_setting(key, default=None):
    """
    Read a value from settings.EQUIPTRACK, falling back to the built-in default.
    """
    configured = getattr(settings, 'EQUIPTRACK', None) or {}
    if key in configured:
        return configured[key]
    if key in APP_SETTING_DEFAULTS:
        return APP_SETTING_DEFAULTS[key]
    if default is None:
        logger.warning(f"Unknown application setting requested: {key}")
    return default
