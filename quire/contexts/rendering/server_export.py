"""
Server Export Backend

Regenerates the canonical page document from a document payload and prints
it with a headless browser's native print-to-PDF. One engine per request; the
engine is closed on success and on failure, and no state is shared between
requests.
"""

import time
from typing import Callable, Optional, Protocol

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from quire.contexts.rendering.client_export import export_filename
from quire.contexts.rendering.engine import launch_browser_async, wait_for_fonts_async
from quire.contexts.rendering.exceptions import EngineLaunchError, ExportError, PrintError
from quire.contexts.rendering.logger import (
    _log_debug,
    _log_warning,
    log_export_failure,
    log_export_result,
    log_export_start,
)
from quire.contexts.rendering.render_data_structures import ExportResult
from quire.contexts.templating.content_renderer import render_document
from quire.contexts.templating.resume_components_data_structures import PageGeometry
from quire.contexts.templating.resume_data_structure import Document
from quire.contexts.templating.stylesheet import build_page_document
from quire.utils.event_logging import log_pipeline_event
from quire.utils.pdf_processing import page_count


class PrintEngine(Protocol):
    """Request-scoped print engine: start(), print_pdf() any number of times, close()."""

    async def start(self) -> None:
        ...

    async def print_pdf(self, html: str, geometry: PageGeometry) -> bytes:
        ...

    async def close(self) -> None:
        ...


class ChromiumPrintEngine:
    """Headless Chromium driven through Playwright's async API."""

    def __init__(self):
        self._playwright = None
        self._browser = None

    async def start(self) -> None:
        try:
            self._playwright = await async_playwright().start()
        except PlaywrightError as e:
            raise EngineLaunchError("Could not start Playwright", original_error=e) from e
        self._browser = await launch_browser_async(self._playwright)

    async def print_pdf(self, html: str, geometry: PageGeometry) -> bytes:
        """
        Print a page document to PDF bytes.

        Raises:
            FontLoadTimeoutError: If webfonts never become ready
            PrintError: If opening a page, loading the content, or printing fails
        """
        page = None
        try:
            page = await self._browser.new_page()
            await page.set_content(html, wait_until="networkidle")
            await wait_for_fonts_async(page)
            return await page.pdf(
                format=geometry.page_size,
                print_background=True,
                prefer_css_page_size=True,
                display_header_footer=False,
                margin={
                    "top": geometry.margin_css,
                    "bottom": geometry.margin_css,
                    "left": geometry.margin_css,
                    "right": geometry.margin_css,
                },
            )
        except PlaywrightError as e:
            raise PrintError("Print to PDF failed", original_error=e) from e
        finally:
            if page is not None:
                try:
                    await page.close()
                except PlaywrightError as e:
                    _log_debug(f"Page already gone on close: {e}")

    async def close(self) -> None:
        # Close errors are logged, never raised
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None
        if browser is not None:
            try:
                await browser.close()
            except PlaywrightError as e:
                _log_warning(f"Browser close failed: {e}")
        if playwright is not None:
            await playwright.stop()


async def export_pdf_bytes(
    document: Document,
    filename: Optional[str] = None,
    engine_factory: Callable[[], PrintEngine] = ChromiumPrintEngine,
    geometry: PageGeometry = None,
) -> ExportResult:
    """
    Export a document to PDF bytes with a fresh print engine.

    Args:
        document: Document snapshot
        filename: Requested output name (".pdf" appended when missing)
        engine_factory: Creates the request-scoped engine
        geometry: Page geometry (defaults to A4 with 15mm margins)

    Returns:
        ExportResult carrying the PDF bytes (nothing is written to disk)

    Raises:
        ExportError: Launch, font loading, or printing failed. The engine has
                     been closed by the time this propagates.
    """
    geometry = geometry or PageGeometry()
    document_id = document.id or "<unsaved>"
    name = export_filename(document, filename)
    start_time = time.time()

    rendered = render_document(document)
    html = build_page_document(rendered, geometry)
    log_export_start(document_id, "server", rendered.style.template_id)
    log_pipeline_event("export_started", document_id, "server_export", filename=name)

    engine = engine_factory()
    try:
        try:
            await engine.start()
            pdf_bytes = await engine.print_pdf(html, geometry)
        except ExportError:
            raise
        except Exception as e:
            raise PrintError("Print engine failed", original_error=e) from e
    except ExportError as e:
        elapsed = time.time() - start_time
        log_export_failure(document_id, "server", e, elapsed)
        log_pipeline_event(
            "export_failed",
            document_id,
            "server_export",
            stage=e.stage,
            error=e.message,
            elapsed_s=round(elapsed, 2),
        )
        raise
    finally:
        await engine.close()
        _log_debug("Print engine closed")

    elapsed = time.time() - start_time
    result = ExportResult(
        backend="server",
        filename=name,
        pdf_bytes=pdf_bytes,
        page_count=page_count(pdf_bytes),
        elapsed_s=round(elapsed, 2),
    )
    log_export_result(document_id, "server", result, elapsed)
    log_pipeline_event(
        "export_completed",
        document_id,
        "server_export",
        filename=name,
        page_count=result.page_count,
        elapsed_s=result.elapsed_s,
    )
    return result
