"""
In-memory stand-ins for the Playwright objects the framework talks to.

FakePage maps selectors to FakeElements; FakeLocator implements the subset
of the async Locator API used by SmartLocator and LoginPage. Waits never
sleep: an unmet condition raises Playwright's TimeoutError straight away.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError


@dataclass(eq=False)
class FakeElement:
    name: str
    visible: bool = True
    enabled: bool = True
    text: str = ""
    value: str = ""
    attrs: Dict[str, Optional[str]] = field(default_factory=dict)
    on_click: Optional[Callable[[], None]] = None


class FakeLocator:
    def __init__(self, page: "FakePage", resolve: Callable[[], List[FakeElement]]):
        self.page = page
        self._resolve = resolve

    def filter(self, visible=None, has_text=None) -> "FakeLocator":
        def resolve():
            items = self._resolve()
            if visible is not None:
                items = [e for e in items if e.visible == visible]
            if has_text is not None:
                items = [e for e in items if has_text.search(e.text)]
            return items
        return FakeLocator(self.page, resolve)

    def or_(self, other: "FakeLocator") -> "FakeLocator":
        def resolve():
            items = list(self._resolve())
            items.extend(e for e in other._resolve() if e not in items)
            return items
        return FakeLocator(self.page, resolve)

    @property
    def first(self) -> "FakeLocator":
        return FakeLocator(self.page, lambda: self._resolve()[:1])

    async def count(self) -> int:
        return len(self._resolve())

    async def wait_for(self, state: str = "visible", timeout: Optional[int] = None) -> None:
        self.page.waits.append(timeout)
        items = self._resolve()
        if items and all(e.visible for e in items):
            return
        raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")

    def _element(self) -> FakeElement:
        items = self._resolve()
        if not items:
            raise PlaywrightTimeoutError("Timeout exceeded: element not found")
        return items[0]

    async def is_enabled(self) -> bool:
        return self._element().enabled

    async def get_attribute(self, name: str) -> Optional[str]:
        return self._element().attrs.get(name)

    async def inner_text(self) -> str:
        return self._element().text

    async def clear(self, timeout: Optional[int] = None) -> None:
        element = self._element()
        element.value = ""
        self.page.actions.append(("clear", element.name))
        self.page.action_timeouts.append(timeout)

    async def fill(self, value: str, timeout: Optional[int] = None) -> None:
        element = self._element()
        element.value = value
        self.page.actions.append(("fill", element.name, value))
        self.page.action_timeouts.append(timeout)

    async def click(self, timeout: Optional[int] = None) -> None:
        element = self._element()
        self.page.action_timeouts.append(timeout)
        if not element.enabled:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded: element is not enabled")
        self.page.actions.append(("click", element.name))
        if element.on_click:
            element.on_click()


class FakePage:
    def __init__(self, url: str = "https://dev-dash.example/"):
        self.url = url
        self.selectors: Dict[str, List[FakeElement]] = {}
        self.actions: List[tuple] = []
        self.waits: List[Optional[int]] = []
        self.action_timeouts: List[Optional[int]] = []

    def add(self, selectors, element: FakeElement) -> FakeElement:
        """Register an element under one or more selectors, in document order."""
        if isinstance(selectors, str):
            selectors = [selectors]
        for selector in selectors:
            self.selectors.setdefault(selector, []).append(element)
        return element

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, lambda: list(self.selectors.get(selector, [])))


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage()


@pytest.fixture
def make_element():
    return FakeElement


# ================================================================================
# Playwright launcher fakes
# ================================================================================

class FakeNavigationPage:
    def __init__(self, recorder: "LaunchRecorder"):
        self.recorder = recorder
        self.url = "about:blank"

    async def goto(self, url: str) -> None:
        self.recorder.calls.append(("goto", url))
        if self.recorder.fail_goto:
            raise PlaywrightError("net::ERR_NAME_NOT_RESOLVED")
        self.url = url


class FakeContext:
    def __init__(self, recorder: "LaunchRecorder"):
        self.recorder = recorder

    def set_default_timeout(self, timeout: int) -> None:
        self.recorder.calls.append(("default_timeout", timeout))

    async def new_page(self) -> FakeNavigationPage:
        return FakeNavigationPage(self.recorder)

    async def close(self) -> None:
        self.recorder.calls.append(("context.close",))


class FakeBrowser:
    def __init__(self, recorder: "LaunchRecorder"):
        self.recorder = recorder

    async def new_context(self, **options) -> FakeContext:
        self.recorder.context_options.append(options)
        return FakeContext(self.recorder)

    async def close(self) -> None:
        self.recorder.calls.append(("browser.close",))


class FakeChromium:
    def __init__(self, recorder: "LaunchRecorder"):
        self.recorder = recorder

    async def launch(self, **options) -> FakeBrowser:
        self.recorder.launch_options.append(options)
        if self.recorder.fail_launch:
            raise PlaywrightError("Executable doesn't exist")
        return FakeBrowser(self.recorder)


class FakePlaywright:
    def __init__(self, recorder: "LaunchRecorder"):
        self.recorder = recorder
        self.chromium = FakeChromium(recorder)

    async def stop(self) -> None:
        self.recorder.calls.append(("playwright.stop",))


class FakePlaywrightStarter:
    def __init__(self, recorder: "LaunchRecorder"):
        self.recorder = recorder

    async def start(self) -> FakePlaywright:
        self.recorder.calls.append(("playwright.start",))
        return FakePlaywright(self.recorder)


@dataclass
class LaunchRecorder:
    calls: List[tuple] = field(default_factory=list)
    launch_options: List[dict] = field(default_factory=list)
    context_options: List[dict] = field(default_factory=list)
    fail_launch: bool = False
    fail_goto: bool = False

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


@pytest.fixture
def fake_playwright(monkeypatch) -> LaunchRecorder:
    """Replace async_playwright in the browser manager with an in-memory fake."""
    recorder = LaunchRecorder()
    monkeypatch.setattr(
        "loginsuite.ui_testing.framework.browser_manager.async_playwright",
        lambda: FakePlaywrightStarter(recorder),
    )
    return recorder
