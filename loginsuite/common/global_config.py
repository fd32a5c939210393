"""
================================================================================
Global Configuration
================================================================================

Centralized configuration management and logging setup for the login suite.

Features:
    - YAML-based configuration loading (config/config.yaml + config/{ENV}.yaml)
    - Environment variable overrides (UI__BASE_URL overrides ui.base_url)
    - Centralized Loguru logging configuration
    - Typed UI settings consumed by the browser session layer

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import copy
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger


# Project root: loginsuite/common/global_config.py -> repo root
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Locations searched (in order) for the configuration directory
CONFIG_DIRS = [
    Path("config"),
    PROJECT_ROOT / "config",
]

DEFAULT_LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"
)

EMPTY_SUBMIT_POLICIES = ("disable", "validate", "either")

# Global configuration storage
_config: Dict[str, Any] = {}
_config_dir: Optional[Path] = None
_logger_initialized: bool = False


class ConfigurationError(Exception):
    """Raised when configuration loading or access fails."""
    pass


def init_logger(level: Optional[str] = None, format_str: Optional[str] = None) -> None:
    """
    Initializes the global Loguru logger with consistent configuration.

    Safe to call repeatedly; only the first call configures sinks.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to config value.
        format_str: Custom log format string. Defaults to config value.
    """
    global _logger_initialized

    if _logger_initialized:
        return

    log_level = level or get_config("logging.level", "INFO")
    log_format = format_str or get_config("logging.format", DEFAULT_LOG_FORMAT)

    logger.remove()
    logger.add(
        sys.stderr,
        level=str(log_level).upper(),
        format=log_format,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    log_file = get_config("logging.file", None)
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=str(log_level).upper(),
            format=log_format.replace("{level: <8}", "{level}"),
            rotation=get_config("logging.rotation", "10 MB"),
            retention=get_config("logging.retention", "7 days"),
        )

    _logger_initialized = True
    logger.debug(f"Logger initialized with level: {log_level}")


def _ensure_config_loaded() -> None:
    if not _config:
        _load_config()


def _load_config(config_dir: Optional[Path] = None) -> None:
    """
    Loads configuration from YAML files and environment variables.

    Configuration loading order:
        1. Built-in defaults
        2. Default configuration file (config/config.yaml)
        3. Environment-specific configuration (config/{ENV}.yaml)
        4. Environment variables (override YAML settings)
    """
    global _config, _config_dir

    if config_dir is None:
        config_dir = next((d for d in CONFIG_DIRS if d.exists()), None)
    _config_dir = config_dir

    _config = _get_defaults()

    if config_dir is None:
        logger.warning("No configuration directory found. Using defaults.")
    else:
        _config = _deep_merge(_config, _read_yaml(config_dir / "config.yaml"))

        env = os.getenv("ENVIRONMENT", os.getenv("ENV", "dev"))
        env_config = _read_yaml(config_dir / f"{env}.yaml")
        if env_config:
            _config = _deep_merge(_config, env_config)
            logger.debug(f"Merged environment config: {config_dir / f'{env}.yaml'}")

    _apply_env_overrides()


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")
    logger.debug(f"Loaded configuration from {path}")
    return data


def _get_defaults() -> Dict[str, Any]:
    """
    Returns default configuration values.
    """
    return {
        "logging": {
            "level": "INFO",
            "format": DEFAULT_LOG_FORMAT,
        },
        "ui": {
            "base_url": "https://dev-dash.example/",
            "headless": True,
            "explicit_timeout_ms": 10000,
            "install_browsers": True,
            "e2e_enabled": False,
            "login": {
                "empty_submit_policy": "either",
            },
        },
    }


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merges two dictionaries, with override taking precedence.
    """
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _apply_env_overrides() -> None:
    """
    Applies environment variable overrides to the configuration.

    Environment variable naming convention:
        - Use double underscore to separate nested keys
        - Example: UI__BASE_URL=https://staging.example/ overrides ui.base_url
    """
    for key, value in os.environ.items():
        if "__" in key and not key.startswith("_"):
            parts = [p.lower() for p in key.split("__")]
            _set_nested(_config, parts, value)


def _set_nested(d: Dict, keys: list, value: Any) -> None:
    for key in keys[:-1]:
        nested = d.get(key)
        if not isinstance(nested, dict):
            nested = {}
            d[key] = nested
        d = nested
    d[keys[-1]] = value


def get_config(key: str, default: Any = None) -> Any:
    """
    Retrieves a configuration value using a dot-separated key path.

    Args:
        key: Dot-separated key path (e.g., "logging.level", "ui.base_url").
        default: Default value to return if key is not found.

    Returns:
        The configuration value, or the default if not found.

    Examples:
        >>> get_config("ui.explicit_timeout_ms", 10000)
        10000
    """
    _ensure_config_loaded()

    value: Any = _config
    for k in key.split("."):
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return default

    return value


def set_config(key: str, value: Any) -> None:
    """
    Sets a configuration value at runtime.

    Args:
        key: Dot-separated key path.
        value: Value to set.
    """
    _ensure_config_loaded()
    _set_nested(_config, key.split("."), value)


def reload_config(config_dir: Optional[Path] = None) -> None:
    """
    Reloads the configuration from files.

    Args:
        config_dir: Directory holding config.yaml. Searches CONFIG_DIRS if None.
    """
    global _config
    _config = {}
    _load_config(config_dir)
    logger.info("Configuration reloaded.")


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


@dataclass(frozen=True)
class UISettings:
    """
    Typed view over the `ui` configuration section.

    Attributes:
        base_url: Address opened at the start of every browser session
        headless: Run the browser without a visible window
        explicit_timeout_ms: Upper bound for every blocking wait
        install_browsers: Provision the browser binary once before the run
        e2e_enabled: Run browser scenarios without passing --run-e2e
        empty_submit_policy: Expected reaction to an empty login submit
    """

    base_url: str = "https://dev-dash.example/"
    headless: bool = True
    explicit_timeout_ms: int = 10000
    install_browsers: bool = True
    e2e_enabled: bool = False
    empty_submit_policy: str = "either"

    def __post_init__(self) -> None:
        if self.empty_submit_policy not in EMPTY_SUBMIT_POLICIES:
            raise ConfigurationError(
                f"Unknown ui.login.empty_submit_policy: {self.empty_submit_policy!r} "
                f"(expected one of {', '.join(EMPTY_SUBMIT_POLICIES)})"
            )
        if self.explicit_timeout_ms <= 0:
            raise ConfigurationError("ui.explicit_timeout_ms must be positive")

    @classmethod
    def from_config(cls, **overrides: Any) -> "UISettings":
        """
        Build settings from the loaded configuration.

        Args:
            **overrides: Field values that win over configuration (None is ignored)
        """
        values = {
            "base_url": str(get_config("ui.base_url", cls.base_url)),
            "headless": _as_bool(get_config("ui.headless", cls.headless)),
            "explicit_timeout_ms": int(
                get_config("ui.explicit_timeout_ms", cls.explicit_timeout_ms)
            ),
            "install_browsers": _as_bool(
                get_config("ui.install_browsers", cls.install_browsers)
            ),
            "e2e_enabled": _as_bool(get_config("ui.e2e_enabled", cls.e2e_enabled)),
            "empty_submit_policy": str(
                get_config("ui.login.empty_submit_policy", cls.empty_submit_policy)
            ).lower(),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


__all__ = [
    "ConfigurationError",
    "UISettings",
    "EMPTY_SUBMIT_POLICIES",
    "init_logger",
    "get_config",
    "set_config",
    "reload_config",
]
