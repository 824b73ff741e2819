"""
Configuration module - Base settings class for environment configuration.
"""

from common.config.base_settings import BaseAppSettings, STORAGE_BACKENDS

__all__ = ["BaseAppSettings", "STORAGE_BACKENDS"]
