"""
================================================================================
Base Page Object
================================================================================

Foundation class for Page Object Model implementation.

Provides:
    - SmartLocator construction from declarative LocatorSpecs
    - Explicit-wait bound shared by every blocking query
    - Failure diagnostics (screenshot + URL) attached to Allure
    - Locator health reporting

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Dict, Sequence

import allure
from loguru import logger
from playwright.async_api import Page

from .browser_manager import WaitPolicy
from .smart_locator import (
    LocatorHealth,
    LocatorSpec,
    LocatorTimeoutError,
    SmartLocator,
    build_health_report,
    wait_any_visible,
)


class PageLoadTimeoutError(LocatorTimeoutError):
    """Raised when a page's defining elements never appear."""
    pass


class BasePage:
    """
    Base class for all page objects.

    Subclasses declare their elements as LocatorSpec class attributes and
    list the ones that prove the page is loaded in LOAD_MARKERS.

    Usage:
        class LoginPage(BasePage):
            PASSWORD_INPUT = LocatorSpec("password_input", (("by_id", "#password"),))
            LOAD_MARKERS = (PASSWORD_INPUT,)

        login = await LoginPage(session.page, session.wait).load()
    """

    # Override in subclasses
    PAGE_TITLE: str = ""
    LOAD_MARKERS: Sequence[LocatorSpec] = ()

    def __init__(
        self,
        page: Page,
        wait: WaitPolicy = WaitPolicy(),
    ):
        """
        Initialize page object.

        Args:
            page: Playwright Page object
            wait: Explicit wait policy for blocking queries
        """
        self.page = page
        self.wait = wait
        self._elements: Dict[str, SmartLocator] = {}

    @property
    def timeout_ms(self) -> int:
        return self.wait.timeout_ms

    def element(self, spec: LocatorSpec) -> SmartLocator:
        """Return the SmartLocator bound to this page for a spec."""
        if spec.name not in self._elements:
            self._elements[spec.name] = SmartLocator(self.page, spec)
        return self._elements[spec.name]

    async def load(self) -> "BasePage":
        """
        Block until any LOAD_MARKERS element is visible.

        Returns:
            self, for chaining

        Raises:
            PageLoadTimeoutError: The page did not render in time
        """
        if self.LOAD_MARKERS:
            with allure.step(f"Wait for {self.PAGE_TITLE or type(self).__name__} page"):
                try:
                    await wait_any_visible(self.page, self.LOAD_MARKERS, self.timeout_ms)
                except LocatorTimeoutError as e:
                    raise PageLoadTimeoutError(f"{type(self).__name__} did not load: {e}") from e
        logger.debug(f"Page loaded: {self.page.url}")
        return self

    # =========================================================================
    # Screenshot and Debug Utilities
    # =========================================================================

    async def capture_failure(self, test_name: str) -> None:
        """
        Attach debugging information for a failed test to Allure.

        Saves:
            - Full-page screenshot
            - Current URL
        """
        with allure.step("Capture failure details"):
            screenshot = await self.page.screenshot(full_page=True)
            allure.attach(
                screenshot,
                name=f"failure_{test_name}",
                attachment_type=allure.attachment_type.PNG,
            )
            allure.attach(
                self.page.url,
                name="Current URL",
                attachment_type=allure.attachment_type.TEXT,
            )

    def locator_health_report(self) -> str:
        """Summarize which elements resolved through fallback variants."""
        fallbacks: Dict[str, LocatorHealth] = {}
        for smart in self._elements.values():
            for record in smart.health_records:
                if record.used_fallback:
                    fallbacks[record.element_name] = record
        return build_health_report(fallbacks)


# Alias used by page objects
PageBase = BasePage

__all__ = [
    "BasePage",
    "PageLoadTimeoutError",
    "PageBase",
]
