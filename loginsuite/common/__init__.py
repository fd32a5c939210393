"""
================================================================================
Login Suite Common Utilities
================================================================================

Shared configuration management and logging setup.

Usage:
    from loginsuite.common import UISettings, init_logger

    init_logger()
    settings = UISettings.from_config()

================================================================================
"""

from .global_config import (
    ConfigurationError,
    UISettings,
    get_config,
    init_logger,
    reload_config,
    set_config,
)

__all__ = [
    "ConfigurationError",
    "UISettings",
    "get_config",
    "init_logger",
    "reload_config",
    "set_config",
]
