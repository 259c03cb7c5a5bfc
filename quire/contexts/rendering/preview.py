"""
Interactive Preview Backend

Keeps a paginated, zoomable preview of a document in sync with edits.
Edits and template switches schedule a debounced re-measure; the measure pass
runs on a frozen deep copy of the document, so the page count may briefly lag
the latest edit but is never computed from a half-applied one.
"""

import copy
import dataclasses
import os
import threading
from typing import Callable, Optional

from dotenv import load_dotenv

from quire.contexts.rendering.logger import _log_debug
from quire.contexts.rendering.pagination import estimate_pages
from quire.contexts.rendering.render_data_structures import PageEstimate
from quire.contexts.rendering.surfaces import ApproximateMeasurementSurface, MeasurementSurface
from quire.contexts.templating.content_renderer import render_document
from quire.contexts.templating.resume_components_data_structures import (
    PageGeometry,
    RenderedDocument,
)
from quire.contexts.templating.resume_data_structure import Document
from quire.contexts.templating.stylesheet import (
    build_page_document,
    build_stylesheet,
    render_structure,
)
from quire.contexts.templating.template_registry import webfont_url

load_dotenv()
PREVIEW_DEBOUNCE_MS = int(os.getenv("QUIRE_PREVIEW_DEBOUNCE_MS", "300"))

ZOOM_MIN = 0.5
ZOOM_MAX = 1.5
ZOOM_STEP = 0.1

PREVIEW_TEMPLATE = "structure/preview.html"


class Debouncer:
    """
    Coalesces bursts of triggers into one callback after a quiet period.

    Each trigger() restarts the timer. flush() runs a pending callback now.
    """

    def __init__(self, callback: Callable[[], None], delay_ms: int = PREVIEW_DEBOUNCE_MS):
        self.callback = callback
        self.delay_ms = delay_ms
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def trigger(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.delay_ms / 1000, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def _fire(self) -> None:
        with self._lock:
            self._timer = None
        self.callback()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def flush(self) -> bool:
        """Run the pending callback immediately. Returns False if none was pending."""
        with self._lock:
            if self._timer is None:
                return False
            self._timer.cancel()
            self._timer = None
        self.callback()
        return True


class PreviewSession:
    """
    Paginated on-screen preview of one document.

    Args:
        document: Initial document snapshot
        surface_factory: Creates a fresh measurement surface per measure pass
        geometry: Page geometry (defaults to A4 with 15mm margins)
        debounce_ms: Quiet period before re-measuring after an edit
        include_webfont: Link the template webfont in preview markup

    Example:
        >>> session = PreviewSession(document)
        >>> session.refresh().page_count
        1
        >>> session.zoom_in()
        1.1
    """

    def __init__(
        self,
        document: Document,
        surface_factory: Callable[[], MeasurementSurface] = ApproximateMeasurementSurface,
        geometry: PageGeometry = None,
        debounce_ms: int = PREVIEW_DEBOUNCE_MS,
        include_webfont: bool = True,
    ):
        self.surface_factory = surface_factory
        self.geometry = geometry or PageGeometry()
        self.include_webfont = include_webfont

        self.zoom = 1.0
        self.current_page = 1
        self.estimate: Optional[PageEstimate] = None
        self.rendered: Optional[RenderedDocument] = None

        self._document = document
        self._lock = threading.Lock()
        self._debouncer = Debouncer(self.refresh, debounce_ms)

    # -------------------------------------------------------------------------
    # Document changes
    # -------------------------------------------------------------------------

    @property
    def document(self) -> Document:
        return self._document

    def update_document(self, document: Document) -> None:
        """Replace the document and schedule a re-measure."""
        with self._lock:
            self._document = document
        self._debouncer.trigger()

    def set_template(self, template_id: str) -> None:
        """Switch template and schedule a re-measure (fonts change line wraps)."""
        with self._lock:
            self._document = dataclasses.replace(self._document, template_id=template_id)
        self._debouncer.trigger()

    @property
    def stale(self) -> bool:
        """True while an edit is waiting for its re-measure."""
        return self._debouncer.pending

    def refresh(self) -> PageEstimate:
        """Render and measure the current document now."""
        with self._lock:
            snapshot = copy.deepcopy(self._document)

        rendered = render_document(snapshot)
        markup = build_page_document(rendered, self.geometry, include_webfont=self.include_webfont)
        estimate = estimate_pages(
            markup,
            self.geometry.content_width_px,
            self.geometry.content_height_px,
            self.surface_factory(),
        )

        with self._lock:
            self.rendered = rendered
            self.estimate = estimate
            self.current_page = min(self.current_page, estimate.page_count)

        _log_debug(f"Preview of {snapshot.id or '<unsaved>'}: {estimate.page_count} page(s)")
        return estimate

    def flush(self) -> PageEstimate:
        """Apply any pending re-measure immediately and return the estimate."""
        if not self._debouncer.flush() and self.estimate is None:
            self.refresh()
        return self.estimate

    def close(self) -> None:
        self._debouncer.cancel()

    # -------------------------------------------------------------------------
    # Viewport
    # -------------------------------------------------------------------------

    @property
    def page_count(self) -> int:
        return self.estimate.page_count if self.estimate else 1

    def set_zoom(self, zoom: float) -> float:
        self.zoom = round(min(ZOOM_MAX, max(ZOOM_MIN, zoom)), 1)
        return self.zoom

    def zoom_in(self) -> float:
        return self.set_zoom(self.zoom + ZOOM_STEP)

    def zoom_out(self) -> float:
        return self.set_zoom(self.zoom - ZOOM_STEP)

    def go_to_page(self, page: int) -> int:
        self.current_page = min(self.page_count, max(1, page))
        return self.current_page

    def next_page(self) -> int:
        return self.go_to_page(self.current_page + 1)

    def previous_page(self) -> int:
        return self.go_to_page(self.current_page - 1)

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def render_html(self) -> str:
        """
        Standalone HTML page showing every page window at the current zoom.

        Each page is a fixed-size frame over the continuous content stream,
        offset by i x page content height.
        """
        if self.estimate is None or self.rendered is None:
            self.refresh()

        zoom = self.zoom
        geometry = self.geometry
        style = self.rendered.style
        pages = [
            {"number": i + 1, "offset": round(offset * zoom, 2)}
            for i, offset in enumerate(self.estimate.window_offsets)
        ]

        return render_structure(
            PREVIEW_TEMPLATE,
            title=self._document.contact.full_name or "Resume",
            style=style,
            stylesheet=build_stylesheet(style, geometry),
            webfont_url=webfont_url(style) if self.include_webfont else "",
            body=self.rendered.body,
            pages=pages,
            page_count=self.estimate.page_count,
            current_page=self.current_page,
            clipped_units=self.estimate.clipped_units,
            zoom=zoom,
            zoom_percent=int(round(zoom * 100)),
            page_width=round(geometry.page_width_px * zoom, 2),
            page_height=round(geometry.page_height_px * zoom, 2),
            margin=round(geometry.margin_px * zoom, 2),
            content_width=round(geometry.content_width_px * zoom, 2),
            content_height=round(geometry.content_height_px * zoom, 2),
        )
