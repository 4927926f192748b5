"""
Configuration package for The Local Yield.

Environment settings and logging setup.
"""

from local_yield.config.settings import Settings, get_settings, settings

__all__ = ['Settings', 'get_settings', 'settings']
