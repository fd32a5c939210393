"""
================================================================================
Browser Manager
================================================================================

Browser session lifecycle for UI automation.

Features:
    - One-time browser binary provisioning per test run
    - A fresh, isolated browser per test (no shared cookies or form state)
    - Launch presets: maximized window, no infobars, notifications allowed
    - Guaranteed teardown on every exit path

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import subprocess
import sys
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional

from loguru import logger
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
)

from loginsuite.common.global_config import UISettings


class InfrastructureError(Exception):
    """Environment problem that prevents a scenario from running at all."""
    pass


class EnvironmentSetupError(InfrastructureError):
    """Browser binary could not be provisioned."""
    pass


class BrowserLaunchError(InfrastructureError):
    """Browser failed to launch or reach the base URL."""
    pass


_browsers_installed: Dict[str, bool] = {}


def ensure_browser_installed(browser_type: str = "chromium", timeout: int = 600) -> None:
    """
    Provision the browser binary used by Playwright.

    Runs `playwright install <browser>` once per process; later calls
    return immediately. Playwright skips the download when a matching
    build is already present.

    Args:
        browser_type: Browser build to install
        timeout: Seconds to allow for the download

    Raises:
        EnvironmentSetupError: The installer is missing or failed
    """
    if _browsers_installed.get(browser_type):
        return

    cmd = [sys.executable, "-m", "playwright", "install", browser_type]
    logger.info(f"Provisioning browser binary: {' '.join(cmd[2:])}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except (OSError, subprocess.TimeoutExpired) as e:
        raise EnvironmentSetupError(f"Could not run Playwright installer: {e}") from e

    if result.returncode != 0:
        output = (result.stderr or result.stdout or "").strip()
        raise EnvironmentSetupError(
            f"Playwright install {browser_type} failed "
            f"(exit code {result.returncode}): {output[-500:]}"
        )

    _browsers_installed[browser_type] = True
    logger.debug(f"Browser binary ready: {browser_type}")


@dataclass(frozen=True)
class WaitPolicy:
    """Explicit wait bound shared by every blocking page query."""
    timeout_ms: int = 10000


@dataclass
class Session:
    """
    One exclusive browser instance plus its wait policy.

    Owned by a single test; never shared.
    """
    playwright: Playwright
    browser: Browser
    context: BrowserContext
    page: Page
    wait: WaitPolicy
    base_url: str
    closed: bool = field(default=False)


class BrowserManager:
    """
    Starts and stops isolated browser sessions.

    Usage:
        async with BrowserManager(settings) as manager:
            session = await manager.start_session()
            await session.page.title()

        # Or scoped to one session
        async with session_scope(settings) as session:
            ...
    """

    # Chromium launch arguments
    DEFAULT_LAUNCH_ARGS: List[str] = [
        "--start-maximized",
        "--disable-infobars",
    ]

    # Headless windows ignore --start-maximized; they get this size instead
    HEADLESS_WINDOW: Dict[str, int] = {"width": 1920, "height": 1080}

    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "permissions": ["notifications"],
    }

    def __init__(self, settings: Optional[UISettings] = None):
        """
        Initialize browser manager.

        Args:
            settings: UI settings; loaded from configuration if omitted
        """
        self.settings = settings or UISettings.from_config()
        self._sessions: List[Session] = []

    async def __aenter__(self) -> "BrowserManager":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def launch_args(self) -> List[str]:
        args = list(self.DEFAULT_LAUNCH_ARGS)
        if self.settings.headless:
            args.append(
                f"--window-size={self.HEADLESS_WINDOW['width']},{self.HEADLESS_WINDOW['height']}"
            )
        return args

    def context_options(self) -> Dict[str, Any]:
        """
        Context options for the configured browser mode.

        Headed: no_viewport lets the maximized window define the size.
        Headless: a fixed full-HD viewport.
        """
        options = dict(self.DEFAULT_CONTEXT_OPTIONS)
        if self.settings.headless:
            options["viewport"] = dict(self.HEADLESS_WINDOW)
        else:
            options["no_viewport"] = True
        return options

    async def start_session(self, base_url: Optional[str] = None) -> Session:
        """
        Launch a fresh browser and open the base URL.

        Args:
            base_url: Address to open; defaults to settings.base_url

        Returns:
            Started Session

        Raises:
            BrowserLaunchError: Launch or initial navigation failed
        """
        target = base_url or self.settings.base_url
        wait = WaitPolicy(timeout_ms=self.settings.explicit_timeout_ms)

        playwright: Optional[Playwright] = None
        browser: Optional[Browser] = None
        try:
            playwright = await async_playwright().start()
            browser = await playwright.chromium.launch(
                headless=self.settings.headless,
                args=self.launch_args(),
            )
            context = await browser.new_context(**self.context_options())
            context.set_default_timeout(wait.timeout_ms)
            page = await context.new_page()
            await page.goto(target)
        except PlaywrightError as e:
            await self._release(browser, playwright)
            raise BrowserLaunchError(f"Browser session failed to start for {target}: {e}") from e

        session = Session(
            playwright=playwright,
            browser=browser,
            context=context,
            page=page,
            wait=wait,
            base_url=target,
        )
        self._sessions.append(session)
        logger.debug(
            f"Browser session started: chromium (headless={self.settings.headless}) -> {target}"
        )
        return session

    async def end_session(self, session: Session) -> None:
        """
        Terminate the browser behind a session.

        Calling it again for the same session is a no-op.
        """
        if session.closed:
            logger.debug("Browser session already closed")
            return
        session.closed = True

        try:
            await session.context.close()
        except PlaywrightError as e:
            logger.warning(f"Failed to close browser context: {e}")
        await self._release(session.browser, session.playwright)

        if session in self._sessions:
            self._sessions.remove(session)
        logger.debug("Browser session closed")

    async def close(self) -> None:
        """End every session this manager started."""
        for session in list(self._sessions):
            await self.end_session(session)

    @staticmethod
    async def _release(
        browser: Optional[Browser],
        playwright: Optional[Playwright],
    ) -> None:
        if browser is not None:
            try:
                await browser.close()
            except PlaywrightError as e:
                logger.warning(f"Failed to close browser: {e}")
        if playwright is not None:
            await playwright.stop()


@asynccontextmanager
async def session_scope(
    settings: Optional[UISettings] = None,
    base_url: Optional[str] = None,
) -> AsyncIterator[Session]:
    """
    Yield a started session and end it on every exit path.

    Args:
        settings: UI settings; loaded from configuration if omitted
        base_url: Address to open; defaults to settings.base_url
    """
    manager = BrowserManager(settings)
    session = await manager.start_session(base_url)
    try:
        yield session
    finally:
        await manager.end_session(session)


__all__ = [
    "BrowserManager",
    "Session",
    "WaitPolicy",
    "session_scope",
    "ensure_browser_installed",
    "InfrastructureError",
    "EnvironmentSetupError",
    "BrowserLaunchError",
]
