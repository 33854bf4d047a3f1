"""Configuration layer."""

from .settings import Settings, get_settings, initialize_settings

__all__ = ['Settings', 'get_settings', 'initialize_settings']
