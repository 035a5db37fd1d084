"""
Configuration management module.

Centralizes the client settings loaded from the environment.
"""

from .settings import Settings, get_settings, set_settings, DEFAULT_API_URL

__all__ = [
    'Settings',
    'get_settings',
    'set_settings',
    'DEFAULT_API_URL',
]
