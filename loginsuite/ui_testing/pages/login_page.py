"""
================================================================================
Login Page Object (Async / Playwright)
================================================================================

Models the login form: identity and password inputs, the submit control,
the password visibility toggle and the error surface.

Every element is an ordered list of selector variants covering the markup
patterns login forms commonly use (name, id, type, placeholder, aria-label,
icon classes). Variants are tried in order on every query.

================================================================================
"""

from __future__ import annotations

from contextlib import contextmanager
from time import monotonic
from typing import Iterator

import allure
from loguru import logger
from playwright.async_api import Locator
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from loginsuite.ui_testing.framework.page_base import PageBase
from loginsuite.ui_testing.framework.smart_locator import LocatorSpec, LocatorTimeoutError


_PASSWORD_FIELD_XPATH = "//input[@name='password' or @id='password' or @type='password']"


class LoginPage(PageBase):
    """Login page object (async)."""

    PAGE_TITLE = "Login"

    IDENTITY_INPUT = LocatorSpec(
        name="identity_input",
        variants=(
            ("by_name", "input[name='email']"),
            ("by_id", "input#email"),
            ("by_type", "input[type='email']"),
            ("by_email_placeholder", "input[placeholder*='Email']"),
            ("by_user_placeholder", "input[placeholder*='User']"),
        ),
    )

    # The type selector stops matching once the password is revealed,
    # so name/id come first.
    PASSWORD_INPUT = LocatorSpec(
        name="password_input",
        variants=(
            ("by_name", "input[name='password']"),
            ("by_id", "input#password"),
            ("by_type", "input[type='password']"),
            ("by_placeholder", "input[placeholder*='Password']"),
        ),
    )

    SUBMIT_BUTTON = LocatorSpec(
        name="submit_button",
        variants=(
            ("by_type", "button[type='submit']"),
            ("by_text_log_in", "button:has-text('Log in')"),
            ("by_text_login", "button:has-text('Login')"),
        ),
    )

    VISIBILITY_TOGGLE = LocatorSpec(
        name="visibility_toggle",
        variants=(
            (
                "following_aria_label",
                f"xpath=({_PASSWORD_FIELD_XPATH}/following::button["
                "contains(@aria-label,'show') or contains(@aria-label,'hide') "
                "or contains(@aria-label,'toggle')])[1]",
            ),
            (
                "following_eye_class",
                f"xpath=({_PASSWORD_FIELD_XPATH}/following::button[contains(@class,'eye')])[1]",
            ),
            (
                "eye_icon_ancestor",
                "xpath=//span[contains(@class,'eye') or contains(@data-icon,'eye')]"
                "/ancestor::button[1]",
            ),
        ),
    )

    ERROR_MESSAGE = LocatorSpec(
        name="error_message",
        variants=(
            ("aria_alert", "[role='alert']"),
            ("error_class", "[class*='error']"),
            ("alert_class", "[class*='alert']"),
            ("error_wording", "text=/invalid|incorrect|wrong/i"),
        ),
        require_text=True,
    )

    LOAD_MARKERS = (IDENTITY_INPUT, PASSWORD_INPUT)

    # =========================================================================
    # Visibility checks (non-blocking)
    # =========================================================================

    async def is_identity_visible(self) -> bool:
        return await self.element(self.IDENTITY_INPUT).is_present()

    async def is_password_visible(self) -> bool:
        return await self.element(self.PASSWORD_INPUT).is_present()

    async def is_toggle_visible(self) -> bool:
        return await self.element(self.VISIBILITY_TOGGLE).is_present()

    async def is_submit_visible(self) -> bool:
        return await self.element(self.SUBMIT_BUTTON).is_present()

    # =========================================================================
    # Actions
    # =========================================================================

    @allure.step("Type identity: {text}")
    async def type_identity(self, text: str) -> None:
        """Clear the identity field and type text into it."""
        started = monotonic()
        field = await self.element(self.IDENTITY_INPUT).wait_visible(self.timeout_ms)
        await self._replace_text(field, text, self.IDENTITY_INPUT, started)

    async def type_password(self, text: str) -> None:
        """Clear the password field and type text into it."""
        with allure.step(f"Type password: {'*' * len(text)}"):
            started = monotonic()
            field = await self.element(self.PASSWORD_INPUT).wait_visible(self.timeout_ms)
            await self._replace_text(field, text, self.PASSWORD_INPUT, started)

    @allure.step("Click submit")
    async def click_submit(self) -> None:
        """Click the submit control once it accepts clicks."""
        started = monotonic()
        button = await self.element(self.SUBMIT_BUTTON).wait_visible(self.timeout_ms)
        with _interaction(self.SUBMIT_BUTTON):
            await button.click(timeout=self._remaining_ms(started))

    @allure.step("Toggle password visibility")
    async def toggle_visibility(self) -> None:
        """
        Click the show/hide password control.

        Does not check the resulting state; call is_password_masked().
        """
        started = monotonic()
        toggle = await self.element(self.VISIBILITY_TOGGLE).wait_visible(self.timeout_ms)
        with _interaction(self.VISIBILITY_TOGGLE):
            await toggle.click(timeout=self._remaining_ms(started))

    # =========================================================================
    # State queries (blocking)
    # =========================================================================

    async def is_submit_enabled(self) -> bool:
        """
        Whether the submit control can be used.

        True only if the element reports enabled, its `disabled` attribute
        is absent or "false", and it is not marked aria-disabled.
        """
        button = await self.element(self.SUBMIT_BUTTON).wait_visible(self.timeout_ms)
        enabled = await button.is_enabled()
        disabled = await button.get_attribute("disabled")
        aria_disabled = await button.get_attribute("aria-disabled")
        return (
            enabled
            and (disabled is None or disabled.strip().lower() == "false")
            and (aria_disabled or "").strip().lower() != "true"
        )

    async def is_password_masked(self) -> bool:
        """True iff the password input's type is "password"."""
        field = await self.element(self.PASSWORD_INPUT).wait_visible(self.timeout_ms)
        field_type = await field.get_attribute("type")
        return (field_type or "").lower() == "password"

    @allure.step("Capture error message")
    async def capture_error_if_any(self) -> str:
        """
        Wait for an error message and return its text.

        Returns:
            Trimmed error text, or "" if none appeared within the wait bound
        """
        try:
            error = await self.element(self.ERROR_MESSAGE).wait_visible(self.timeout_ms)
        except LocatorTimeoutError:
            logger.debug("No error message displayed")
            return ""
        text = (await error.inner_text()).strip()
        logger.info(f"Error message displayed: {text}")
        return text

    # =========================================================================
    # Helpers
    # =========================================================================

    def _remaining_ms(self, started: float) -> int:
        """What is left of the explicit bound for an operation begun at `started`."""
        elapsed_ms = (monotonic() - started) * 1000
        return max(1, int(self.timeout_ms - elapsed_ms))

    async def _replace_text(
        self,
        field: Locator,
        text: str,
        spec: LocatorSpec,
        started: float,
    ) -> None:
        with _interaction(spec):
            await field.clear(timeout=self._remaining_ms(started))
            if text:
                await field.fill(text, timeout=self._remaining_ms(started))


@contextmanager
def _interaction(spec: LocatorSpec) -> Iterator[None]:
    """Report Playwright action timeouts as locator timeouts."""
    try:
        yield
    except PlaywrightTimeoutError as e:
        raise LocatorTimeoutError(
            f"Element '{spec.name}' did not become interactable: {e}"
        ) from e


__all__ = ["LoginPage"]
