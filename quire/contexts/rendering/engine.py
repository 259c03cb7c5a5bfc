"""
Headless browser engine helpers (Playwright / Chromium).

Launching, font readiness, and in-page measurement, in sync and async flavors.
Engine failures are translated into ExportError subclasses here so callers
only handle the rendering context's own exceptions.
"""

import os
from typing import List

from dotenv import load_dotenv
from playwright.async_api import Browser as AsyncBrowser
from playwright.async_api import Page as AsyncPage
from playwright.sync_api import Browser, Error as PlaywrightError, Page, Playwright
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from quire.contexts.rendering.exceptions import EngineLaunchError, FontLoadTimeoutError
from quire.contexts.rendering.render_data_structures import UnitBox

load_dotenv()
CHROMIUM_ARGS = os.getenv("QUIRE_CHROMIUM_ARGS", "--no-sandbox --disable-dev-shm-usage").split()
FONT_TIMEOUT_MS = int(os.getenv("QUIRE_FONT_TIMEOUT_MS", "10000"))

FONTS_READY_JS = "() => document.fonts.status === 'loaded'"

CONTENT_HEIGHT_JS = """
() => {
  const root = document.getElementById('resume-content') || document.body;
  return root.getBoundingClientRect().height;
}
"""

UNIT_BOXES_JS = """
() => {
  const root = document.getElementById('resume-content') || document.body;
  const origin = root.getBoundingClientRect().top;
  return Array.from(root.querySelectorAll('[data-atomic]')).map((el) => {
    const r = el.getBoundingClientRect();
    return {
      kind: el.dataset.atomic,
      top: r.top - origin,
      bottom: r.bottom - origin,
      label: el.dataset.label || '',
    };
  });
}
"""


def _to_boxes(raw: list) -> List[UnitBox]:
    boxes = [
        UnitBox(kind=b["kind"], top=float(b["top"]), bottom=float(b["bottom"]), label=b["label"])
        for b in raw
    ]
    return sorted(boxes, key=lambda b: b.top)


# =============================================================================
# Sync API (measurement surface, client export)
# =============================================================================


def launch_browser(playwright: Playwright) -> Browser:
    """
    Launch headless Chromium.

    Raises:
        EngineLaunchError: If the browser binary is missing or fails to start
    """
    try:
        return playwright.chromium.launch(headless=True, args=CHROMIUM_ARGS)
    except PlaywrightError as e:
        raise EngineLaunchError("Could not launch headless Chromium", original_error=e) from e


def wait_for_fonts(page: Page, timeout_ms: int = None) -> None:
    """
    Block until document.fonts reports every face loaded.

    Raises:
        FontLoadTimeoutError: If fonts are still loading after timeout_ms
    """
    timeout_ms = FONT_TIMEOUT_MS if timeout_ms is None else timeout_ms
    try:
        page.wait_for_function(FONTS_READY_JS, timeout=timeout_ms)
    except PlaywrightTimeoutError as e:
        raise FontLoadTimeoutError(
            f"Fonts not ready after {timeout_ms}ms", original_error=e
        ) from e


def content_height(page: Page) -> float:
    return float(page.evaluate(CONTENT_HEIGHT_JS))


def unit_boxes(page: Page) -> List[UnitBox]:
    """Boxes of every [data-atomic] element, sorted top to bottom."""
    return _to_boxes(page.evaluate(UNIT_BOXES_JS))


# =============================================================================
# Async API (server export)
# =============================================================================


async def launch_browser_async(playwright) -> AsyncBrowser:
    """Async counterpart of launch_browser()."""
    try:
        return await playwright.chromium.launch(headless=True, args=CHROMIUM_ARGS)
    except PlaywrightError as e:
        raise EngineLaunchError("Could not launch headless Chromium", original_error=e) from e


async def wait_for_fonts_async(page: AsyncPage, timeout_ms: int = None) -> None:
    """Async counterpart of wait_for_fonts()."""
    timeout_ms = FONT_TIMEOUT_MS if timeout_ms is None else timeout_ms
    try:
        await page.wait_for_function(FONTS_READY_JS, timeout=timeout_ms)
    except PlaywrightTimeoutError as e:
        raise FontLoadTimeoutError(
            f"Fonts not ready after {timeout_ms}ms", original_error=e
        ) from e
