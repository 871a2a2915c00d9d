"""
Platform configuration.
"""

from .loader import DEFAULT_CONFIG, PlatformConfig, load_platform_config

__all__ = ["DEFAULT_CONFIG", "PlatformConfig", "load_platform_config"]
