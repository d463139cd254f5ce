"""
Core package initialization.
"""

from .config import API_PREFIX, Settings, build_logging_config

__all__ = ['API_PREFIX', 'Settings', 'build_logging_config']
