"""
Measurement surfaces.

A measurement surface lays markup out at a fixed width somewhere the user
never sees it and reports the resulting height and atomic-unit boxes.

Two implementations:
- BrowserMeasurementSurface: real layout in headless Chromium (Playwright)
- ApproximateMeasurementSurface: no browser; walks the markup with
  BeautifulSoup and estimates line wraps from average glyph widths
"""

import math
from typing import List, Optional, Protocol, Tuple

from bs4 import BeautifulSoup, Tag
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from quire.contexts.rendering.engine import (
    content_height,
    launch_browser,
    unit_boxes,
    wait_for_fonts,
)
from quire.contexts.rendering.exceptions import MeasurementError
from quire.contexts.rendering.render_data_structures import UnitBox


class MeasurementSurface(Protocol):
    """Off-screen layout target used by the pagination calculator."""

    name: str

    def attach(self, markup: str, width: float) -> None:
        ...

    def height(self) -> float:
        ...

    def unit_boxes(self) -> List[UnitBox]:
        ...

    def detach(self) -> None:
        ...


# =============================================================================
# Browser surface
# =============================================================================


class BrowserMeasurementSurface:
    """
    Measures markup in a headless Chromium page.

    Args:
        browser: Existing sync Playwright browser to open pages in. When omitted,
                 attach() starts Playwright and launches its own browser, and
                 detach() shuts both down.
        wait_fonts: Wait for webfonts before measuring
    """

    name = "browser"

    def __init__(self, browser=None, wait_fonts: bool = True):
        self._browser = browser
        self._owns_browser = browser is None
        self._playwright = None
        self._page = None
        self.wait_fonts = wait_fonts

    def attach(self, markup: str, width: float) -> None:
        if self._owns_browser:
            self._playwright = sync_playwright().start()
            self._browser = launch_browser(self._playwright)

        try:
            self._page = self._browser.new_page(viewport={"width": int(width), "height": 800})
            self._page.set_content(markup, wait_until="networkidle")
            if self.wait_fonts:
                wait_for_fonts(self._page)
        except PlaywrightError as e:
            raise MeasurementError(f"Could not lay out markup: {e}") from e

    def height(self) -> float:
        if self._page is None:
            raise MeasurementError("Surface is not attached")
        return content_height(self._page)

    def unit_boxes(self) -> List[UnitBox]:
        if self._page is None:
            raise MeasurementError("Surface is not attached")
        return unit_boxes(self._page)

    def detach(self) -> None:
        if self._page is not None:
            self._page.close()
            self._page = None
        if self._owns_browser:
            if self._browser is not None:
                self._browser.close()
                self._browser = None
            if self._playwright is not None:
                self._playwright.stop()
                self._playwright = None


# =============================================================================
# Approximate surface
# =============================================================================

PX_PER_PT = 96 / 72

# Average glyph advance as a fraction of the font size
AVERAGE_CHAR_WIDTH_EM = 0.5

# class -> (font size pt, line height, space after in pt)
LINE_STYLES = {
    "name": (22, 1.2, 6),
    "contact-info": (10, 1.4, 0),
    "contact-links": (10, 1.4, 4),
    "section-header": (12, 1.4, 13),
    "entry-header": (11, 1.4, 2),
    "entry-subtitle": (10, 1.4, 4),
    "entry-tech": (10, 1.4, 4),
    "entry-details": (10, 1.4, 0),
    "summary-text": (10, 1.5, 0),
    "skill-row": (10, 1.4, 4),
    "cert-entry": (10, 1.4, 4),
    "li": (10, 1.4, 3),
}

# class -> extra space a container adds around its children, in pt
CONTAINER_SPACING = {
    "contact-header": 24,
    "section": 14,
    "entry": 10,
}

# Fixed-size blocks: class -> height in px
FIXED_BLOCKS = {
    "contact-photo": 72 + 6 * PX_PER_PT,
}


class ApproximateMeasurementSurface:
    """
    Estimates layout without a browser.

    Block heights are line count x font size x line height, with line counts
    from text length against the available width. Good enough to count pages
    for typical resumes; not a layout engine.
    """

    name = "approximate"

    def __init__(self, char_width_em: float = AVERAGE_CHAR_WIDTH_EM):
        self.char_width_em = char_width_em
        self._width: Optional[float] = None
        self._height = 0.0
        self._boxes: List[UnitBox] = []

    def attach(self, markup: str, width: float) -> None:
        if width <= 0:
            raise MeasurementError(f"Cannot lay out at width {width}")
        self._width = width

        soup = BeautifulSoup(markup or "", "html.parser")
        root = soup.find(id="resume-content") or soup.body or soup

        self._boxes = []
        cursor = 0.0
        for child in root.find_all(recursive=False):
            cursor = self._layout(child, cursor)
        self._height = cursor
        self._boxes.sort(key=lambda b: b.top)

    def height(self) -> float:
        if self._width is None:
            raise MeasurementError("Surface is not attached")
        return self._height

    def unit_boxes(self) -> List[UnitBox]:
        if self._width is None:
            raise MeasurementError("Surface is not attached")
        return list(self._boxes)

    def detach(self) -> None:
        self._width = None
        self._height = 0.0
        self._boxes = []

    # -------------------------------------------------------------------------

    def _line_style(self, element: Tag) -> Optional[Tuple[float, float, float]]:
        if element.name == "li":
            return LINE_STYLES["li"]
        for css_class in element.get("class", []):
            if css_class in LINE_STYLES:
                return LINE_STYLES[css_class]
        return None

    def _text_block_height(self, text: str, style: Tuple[float, float, float]) -> float:
        if not text:
            return 0.0
        font_pt, line_height, space_after_pt = style
        font_px = font_pt * PX_PER_PT
        chars_per_line = max(1, int(self._width / (font_px * self.char_width_em)))
        lines = math.ceil(len(text) / chars_per_line)
        return lines * font_px * line_height + space_after_pt * PX_PER_PT

    def _layout(self, element: Tag, top: float) -> float:
        """Lay out one element starting at top; returns its bottom edge."""
        classes = element.get("class", [])
        fixed = next((FIXED_BLOCKS[c] for c in classes if c in FIXED_BLOCKS), None)
        style = self._line_style(element)

        if fixed is not None:
            height = fixed
        elif style is not None:
            height = self._text_block_height(element.get_text(" ", strip=True), style)
        else:
            cursor = top
            for child in element.find_all(recursive=False):
                cursor = self._layout(child, cursor)
            spacing = sum(CONTAINER_SPACING.get(c, 0) for c in classes) * PX_PER_PT
            height = (cursor - top) + spacing

        if element.has_attr("data-atomic"):
            self._boxes.append(
                UnitBox(
                    kind=element["data-atomic"],
                    top=top,
                    bottom=top + height,
                    label=element.get("data-label", ""),
                )
            )

        return top + height
