"""Playwright-powered browser session implementation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from playwright.async_api import Error, async_playwright
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..config import BrowserConfig
from ..models import ActionDescriptor, BrowserActionType
from .base import BrowserActionError, BrowserSession, PageElement, PageSnapshot

LOGGER = logging.getLogger(__name__)

_SUPPORTED_BROWSERS = {"chromium", "firefox", "webkit"}

_COLLECT_ELEMENTS_JS = """
(limit) => {
    const query = 'a, button, input, select, textarea, [role=button], [role=link], [onclick]';
    const visible = (el) => {
        const rect = el.getBoundingClientRect();
        return rect.width > 0 && rect.height > 0 && getComputedStyle(el).visibility !== 'hidden';
    };
    const selectorFor = (el) => {
        if (el.id) return '#' + CSS.escape(el.id);
        const parts = [];
        let node = el;
        while (node && node.nodeType === 1 && parts.length < 5) {
            let part = node.tagName.toLowerCase();
            const parent = node.parentElement;
            if (parent) {
                const siblings = Array.from(parent.children).filter((c) => c.tagName === node.tagName);
                if (siblings.length > 1) part += `:nth-of-type(${siblings.indexOf(node) + 1})`;
            }
            parts.unshift(part);
            if (node.id) { parts[0] = '#' + CSS.escape(node.id); break; }
            node = parent;
        }
        return parts.join(' > ');
    };
    return Array.from(document.querySelectorAll(query))
        .filter(visible)
        .slice(0, limit)
        .map((el) => ({
            tag: el.tagName.toLowerCase(),
            role: el.getAttribute('role') || el.getAttribute('type'),
            text: (el.innerText || el.value || el.getAttribute('aria-label') || el.getAttribute('placeholder') || '').trim().slice(0, 80),
            selector: selectorFor(el),
        }));
}
"""


class PlaywrightBrowserSession(BrowserSession):
    """Browser session backed by Playwright's asyncio API."""

    def __init__(self, config: Optional[BrowserConfig] = None, *, max_elements: int = 60) -> None:
        self._config = config or BrowserConfig()
        self._max_elements = max_elements
        self._playwright = None
        self._browser = None
        self._context = None
        self._page = None

    async def start(self) -> None:
        name = self._config.browser.lower()
        if name not in _SUPPORTED_BROWSERS:
            raise BrowserActionError(
                f"Unsupported browser {self._config.browser!r}; "
                f"expected one of {', '.join(sorted(_SUPPORTED_BROWSERS))}"
            )
        LOGGER.debug("Starting Playwright %s session", name)
        self._playwright = await async_playwright().start()
        self._browser = await getattr(self._playwright, name).launch(headless=self._config.headless)
        viewport = {"width": self._config.viewport_width, "height": self._config.viewport_height}
        self._context = await self._browser.new_context(viewport=viewport)
        self._page = await self._context.new_page()
        if self._config.start_url:
            await self._page.goto(self._config.start_url, wait_until="load")

    async def stop(self) -> None:
        LOGGER.debug("Stopping Playwright browser session")
        try:
            if self._context:
                await self._context.close()
        finally:
            if self._browser:
                await self._browser.close()
            if self._playwright:
                await self._playwright.stop()
        self._context = None
        self._browser = None
        self._playwright = None
        self._page = None

    async def get_url(self) -> str:
        return self._require_page().url

    async def save_screenshot(self, path: str) -> None:
        target = Path(path)
        if target.parent != Path("."):
            target.parent.mkdir(parents=True, exist_ok=True)
        await self._require_page().screenshot(path=str(target))

    async def find(self, selector: str) -> Any:
        return await self._require_page().query_selector(selector)

    async def find_all(self, selector: str) -> list[Any]:
        return await self._require_page().query_selector_all(selector)

    async def execute(self, action: ActionDescriptor) -> None:
        page = self._require_page()
        LOGGER.info("Executing browser action %s", action)
        try:
            action_type = BrowserActionType(action.type.lower())
        except ValueError as exc:
            raise BrowserActionError(f"Unsupported action type: {action.type}") from exc
        try:
            if action_type == BrowserActionType.NAVIGATE:
                url = action.value or action.target
                if not url:
                    raise BrowserActionError("Navigate action requires a URL")
                await page.goto(url, wait_until="load")
            elif action_type == BrowserActionType.CLICK:
                await page.click(_require_target(action))
            elif action_type == BrowserActionType.TYPE:
                if action.value is None:
                    raise BrowserActionError("Type action requires a value")
                await page.fill(_require_target(action), action.value)
            elif action_type == BrowserActionType.PRESS:
                key = action.value or action.target
                if not key:
                    raise BrowserActionError("Press action requires a key")
                if action.value and action.target:
                    await page.press(action.target, action.value)
                else:
                    await page.keyboard.press(key)
            elif action_type == BrowserActionType.SELECT:
                if action.value is None:
                    raise BrowserActionError("Select action requires a value")
                await page.select_option(_require_target(action), action.value)
            elif action_type == BrowserActionType.SCROLL:
                delta = int(action.value or 600)
                await page.mouse.wheel(0, delta)
            elif action_type == BrowserActionType.WAIT:
                seconds = float(action.value or 1)
                await page.wait_for_timeout(seconds * 1000)
            elif action_type == BrowserActionType.BACK:
                await page.go_back()
        except PlaywrightTimeoutError as exc:
            raise TimeoutError(str(exc)) from exc
        except Error as exc:  # pragma: no cover - Playwright exception path
            raise BrowserActionError(str(exc)) from exc

    async def snapshot(self) -> PageSnapshot:
        page = self._require_page()
        raw = await page.evaluate(_COLLECT_ELEMENTS_JS, self._max_elements)
        elements = [
            PageElement(
                ref=index,
                tag=item["tag"],
                selector=item["selector"],
                role=item.get("role") or None,
                text=item.get("text") or None,
            )
            for index, item in enumerate(raw, start=1)
        ]
        return PageSnapshot(url=page.url, title=await page.title(), elements=elements)

    def _require_page(self):
        if not self._page:
            raise BrowserActionError("Browser session is not started")
        return self._page


def _require_target(action: ActionDescriptor) -> str:
    if not action.target:
        raise BrowserActionError(f"{action.type.capitalize()} action requires a target selector")
    return action.target
