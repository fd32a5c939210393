"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based UI automation framework.

Components:
    - smart_locator: Ordered fallback locator variants with explicit waits
    - page_base: Base page object for common operations
    - browser_manager: Browser session lifecycle management

Author: Automation Team
License: MIT
================================================================================
"""

from .smart_locator import (
    ElementNotFoundError,
    LocatorSpec,
    LocatorTimeoutError,
    SmartLocator,
)
from .page_base import BasePage, PageLoadTimeoutError
from .browser_manager import (
    BrowserLaunchError,
    BrowserManager,
    EnvironmentSetupError,
    InfrastructureError,
    Session,
    WaitPolicy,
    ensure_browser_installed,
    session_scope,
)

__all__ = [
    "SmartLocator",
    "LocatorSpec",
    "ElementNotFoundError",
    "LocatorTimeoutError",
    "BasePage",
    "PageLoadTimeoutError",
    "BrowserManager",
    "Session",
    "WaitPolicy",
    "session_scope",
    "ensure_browser_installed",
    "InfrastructureError",
    "EnvironmentSetupError",
    "BrowserLaunchError",
]
