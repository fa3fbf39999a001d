"""
Configuration package for Tourna system.
"""

from .config_manager import ConfigManager

__all__ = ['ConfigManager']
