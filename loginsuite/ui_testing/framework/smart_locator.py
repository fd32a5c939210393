"""
================================================================================
Smart Locator with Ordered Fallback Variants
================================================================================

Resilient element location for page objects:
    - Each element is declared as an ordered list of selector variants
    - Variants are tried in order; the first one with a visible match wins
    - Blocking waits are bounded by a single explicit timeout
    - Fallback usage is recorded for a locator health report

Markup drifts between releases. Declaring each alternative separately keeps
every variant readable and testable on its own instead of hiding them in one
compound XPath.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from loguru import logger
from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError


# Non-whitespace text; used to skip empty error containers
NON_EMPTY_TEXT = re.compile(r"\S")


class ElementNotFoundError(Exception):
    """Raised when no locator variant matches a visible element."""
    pass


class LocatorTimeoutError(ElementNotFoundError):
    """Raised when a blocking wait exceeds the explicit timeout."""
    pass


@dataclass(frozen=True)
class LocatorSpec:
    """
    Declarative, ordered locator definition for one page element.

    Attributes:
        name: Human-readable element name (logging/reporting)
        variants: Ordered (label, selector) pairs; first entry is the primary
        require_text: Only match elements carrying non-whitespace text
    """
    name: str
    variants: Tuple[Tuple[str, str], ...]
    require_text: bool = False

    def __post_init__(self) -> None:
        if not self.variants:
            raise ValueError(f"No locator variants defined for element: {self.name}")

    @property
    def primary(self) -> str:
        return self.variants[0][1]

    @property
    def selectors(self) -> List[str]:
        return [selector for _, selector in self.variants]


@dataclass
class LocatorHealth:
    """
    Records which variant resolved an element.

    Attributes:
        element_name: Human-readable element name
        primary_selector: The preferred selector
        used_fallback: Whether a fallback was used
        fallback_name: Label of the fallback used (if any)
        fallback_selector: The fallback selector used (if any)
    """
    element_name: str
    primary_selector: str
    used_fallback: bool = False
    fallback_name: Optional[str] = None
    fallback_selector: Optional[str] = None


class SmartLocator:
    """
    Resolves a LocatorSpec against a live Playwright page.

    Resolution runs again on every call, so DOM changes between actions
    are picked up. Nothing is cached except health statistics.

    Usage:
        >>> password = SmartLocator(page, PASSWORD_INPUT)
        >>> field = await password.wait_visible(timeout_ms=10000)
        >>> await field.fill("secret")
        >>> await password.is_present()
        True
    """

    def __init__(self, page: Page, spec: LocatorSpec):
        """
        Initialize SmartLocator for one element.

        Args:
            page: Playwright Page object
            spec: Ordered locator variants for the element
        """
        self.page = page
        self.spec = spec
        self._health_records: List[LocatorHealth] = []

    @property
    def name(self) -> str:
        return self.spec.name

    def variant(self, selector: str) -> Locator:
        """Visible matches for a single selector variant."""
        locator = self.page.locator(selector)
        if self.spec.require_text:
            return locator.filter(visible=True, has_text=NON_EMPTY_TEXT)
        return locator.filter(visible=True)

    def any_variant(self) -> Locator:
        """Union of visible matches across every variant."""
        union: Optional[Locator] = None
        for selector in self.spec.selectors:
            candidate = self.variant(selector)
            union = candidate if union is None else union.or_(candidate)
        return union

    async def is_present(self) -> bool:
        """
        Non-blocking check: is any variant visible right now?

        Returns:
            True if a visible match exists, False otherwise (never raises
            for absent elements)
        """
        for _, selector in self.spec.variants:
            if await self.variant(selector).count() > 0:
                return True
        return False

    async def wait_visible(self, timeout_ms: int) -> Locator:
        """
        Block until some variant has a visible match.

        Args:
            timeout_ms: Explicit wait bound in milliseconds

        Returns:
            Locator for the first visible match of the first matching variant

        Raises:
            LocatorTimeoutError: No variant became visible within the bound
        """
        try:
            await self.any_variant().first.wait_for(state="visible", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            message = (
                f"Element '{self.name}' not visible after {timeout_ms} ms; tried:\n"
                + "\n".join(f"  - {label}: {sel}" for label, sel in self.spec.variants)
            )
            logger.debug(message)
            raise LocatorTimeoutError(message) from e

        resolved = await self._first_visible_variant()
        if resolved is None:
            # Element vanished between the wait and resolution
            return self.any_variant().first
        return resolved

    async def _first_visible_variant(self) -> Optional[Locator]:
        for index, (label, selector) in enumerate(self.spec.variants):
            locator = self.variant(selector)
            if await locator.count() == 0:
                continue

            health = LocatorHealth(
                element_name=self.name,
                primary_selector=self.spec.primary,
                used_fallback=index > 0,
                fallback_name=label if index > 0 else None,
                fallback_selector=selector if index > 0 else None,
            )
            self._health_records.append(health)
            if index > 0:
                logger.warning(
                    f"Element '{self.name}' used fallback: {label} -> {selector}"
                )
            else:
                logger.debug(f"Element '{self.name}' found: {selector}")
            return locator.first
        return None

    @property
    def health_records(self) -> List[LocatorHealth]:
        return list(self._health_records)


async def wait_any_visible(
    page: Page,
    specs: Sequence[LocatorSpec],
    timeout_ms: int,
) -> None:
    """
    Block until at least one of several elements is visible.

    Args:
        page: Playwright Page object
        specs: Elements to wait for
        timeout_ms: Explicit wait bound in milliseconds

    Raises:
        LocatorTimeoutError: None of the elements appeared in time
    """
    union: Optional[Locator] = None
    for spec in specs:
        candidate = SmartLocator(page, spec).any_variant()
        union = candidate if union is None else union.or_(candidate)

    try:
        await union.first.wait_for(state="visible", timeout=timeout_ms)
    except PlaywrightTimeoutError as e:
        names = ", ".join(spec.name for spec in specs)
        raise LocatorTimeoutError(
            f"None of [{names}] became visible within {timeout_ms} ms"
        ) from e


def build_health_report(records: Dict[str, LocatorHealth]) -> str:
    """
    Format fallback usage as a maintenance report.

    Args:
        records: Element name -> last fallback health record

    Returns:
        Formatted health report string
    """
    if not records:
        return "All elements used primary locators. No maintenance needed."

    report_lines = [
        "Locator Health Report - Fallbacks Used:",
        "",
        "The following elements used fallback locators.",
        "Consider updating the primary selectors:",
        "",
    ]
    for element_name, health in records.items():
        report_lines.extend([
            f"  [{element_name}]",
            f"    Failed primary: {health.primary_selector}",
            f"    Used: {health.fallback_name} -> {health.fallback_selector}",
            "",
        ])
    return "\n".join(report_lines)


__all__ = [
    "SmartLocator",
    "LocatorSpec",
    "LocatorHealth",
    "ElementNotFoundError",
    "LocatorTimeoutError",
    "wait_any_visible",
    "build_health_report",
]
