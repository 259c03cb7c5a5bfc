"""
Client Export Backend

Produces a print-quality PDF locally by rasterizing the canonical page
document in an off-screen Chromium page and assembling the slices with
Pillow.

Flow:
1. Render canonical markup and wrap it in the standalone page document
2. Lay it out at the page content width, wait for webfonts
3. Read atomic-unit boxes and plan page slices with break avoidance
4. Screenshot each slice at 2x scale
5. Place each slice inside the page margins and save a multi-page PDF

A newer export() on the same exporter supersedes an in-flight one: the older
call raises ExportSupersededError at its next checkpoint and writes nothing.
"""

import io
import os
import threading
import time
from pathlib import Path
from typing import Callable, List, Optional

from dotenv import load_dotenv
from PIL import Image
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from quire.contexts.rendering.engine import (
    content_height,
    launch_browser,
    unit_boxes,
    wait_for_fonts,
)
from quire.contexts.rendering.exceptions import (
    ExportError,
    ExportSupersededError,
    RasterizationError,
)
from quire.contexts.rendering.logger import (
    _log_debug,
    _log_info,
    log_export_failure,
    log_export_result,
    log_export_start,
)
from quire.contexts.rendering.pagination import plan_slices
from quire.contexts.rendering.render_data_structures import ExportResult, Slice
from quire.contexts.templating.content_renderer import render_document
from quire.contexts.templating.resume_components_data_structures import PageGeometry
from quire.contexts.templating.resume_data_structure import Document
from quire.contexts.templating.stylesheet import build_page_document
from quire.utils.event_logging import log_pipeline_event
from quire.utils.pdf_processing import page_count
from quire.utils.timestamp import today

load_dotenv()
RESULTS_PATH = Path(os.getenv("QUIRE_RESULTS_PATH", "outs/results"))

# Device pixels per CSS pixel for slice screenshots
RASTER_SCALE = 2

CSS_DPI = 96


def export_filename(document: Document, filename: Optional[str] = None) -> str:
    """
    Output file name: caller's filename, else full name, else "resume", plus .pdf.

    Example:
        >>> export_filename(Document(), None)
        'resume.pdf'
    """
    stem = (filename or "").strip() or document.export_basename
    if stem.lower().endswith(".pdf"):
        stem = stem[:-4]
    return f"{stem}.pdf"


def assemble_pdf(
    slices: List[Image.Image], geometry: PageGeometry = None, scale: int = RASTER_SCALE
) -> bytes:
    """
    Place slice images inside page margins and save them as one PDF.

    Args:
        slices: One image per page, already at `scale` device pixels per CSS pixel
        geometry: Page geometry the slices were planned for
        scale: Raster scale of the slice images

    Returns:
        PDF bytes with len(slices) pages sized to the geometry

    Raises:
        RasterizationError: If there is nothing to assemble or Pillow fails
    """
    if not slices:
        raise RasterizationError("No page slices to assemble")

    geometry = geometry or PageGeometry()
    page_size = (geometry.page_width_px * scale, geometry.page_height_px * scale)
    offset = (geometry.margin_px * scale, geometry.margin_px * scale)

    pages = []
    try:
        for image in slices:
            page = Image.new("RGB", page_size, "white")
            page.paste(image.convert("RGB"), offset)
            pages.append(page)

        buffer = io.BytesIO()
        pages[0].save(
            buffer,
            "PDF",
            save_all=True,
            append_images=pages[1:],
            resolution=CSS_DPI * scale,
        )
    except (OSError, ValueError) as e:
        raise RasterizationError("Could not assemble page images into a PDF", original_error=e) from e

    return buffer.getvalue()


class ClientExporter:
    """
    Local PDF exporter.

    Args:
        geometry: Page geometry (defaults to A4 with 15mm margins)
        results_dir: Default output directory (QUIRE_RESULTS_PATH/<today>)
        scale: Raster scale for slice screenshots
    """

    backend = "client"

    def __init__(
        self,
        geometry: PageGeometry = None,
        results_dir: Optional[Path] = None,
        scale: int = RASTER_SCALE,
    ):
        self.geometry = geometry or PageGeometry()
        self.results_dir = results_dir
        self.scale = scale
        self._generation = 0
        self._lock = threading.Lock()

    def _begin(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def _checkpoint(self, token: int) -> None:
        with self._lock:
            current = self._generation
        if token != current:
            raise ExportSupersededError(f"Export {token} superseded by export {current}")

    def capture(self, html: str, checkpoint: Callable[[], None]) -> List[Image.Image]:
        """
        Lay out the page document in Chromium and capture one image per page.

        Browser and page are closed on every path.

        Raises:
            EngineLaunchError, FontLoadTimeoutError, RasterizationError
        """
        geometry = self.geometry
        with sync_playwright() as playwright:
            browser = launch_browser(playwright)
            try:
                page = browser.new_page(
                    viewport={
                        "width": geometry.content_width_px,
                        "height": geometry.content_height_px,
                    },
                    device_scale_factor=self.scale,
                )
                page.set_content(html, wait_until="networkidle")
                wait_for_fonts(page)
                checkpoint()

                total = content_height(page)
                slices = plan_slices(unit_boxes(page), total, geometry.content_height_px)
                _log_debug(f"Planned {len(slices)} slice(s) over {total:.0f}px")

                images = []
                for band in slices:
                    checkpoint()
                    images.append(self._screenshot(page, band))
                return images
            except PlaywrightError as e:
                raise RasterizationError("Page capture failed", original_error=e) from e
            finally:
                browser.close()

    def _screenshot(self, page, band: Slice) -> Image.Image:
        if band.height <= 0:
            return Image.new("RGB", (self.geometry.content_width_px * self.scale, 1), "white")
        png = page.screenshot(
            clip={
                "x": 0,
                "y": band.top,
                "width": self.geometry.content_width_px,
                "height": band.height,
            },
            full_page=True,
        )
        return Image.open(io.BytesIO(png))

    def export(
        self,
        document: Document,
        filename: Optional[str] = None,
        output_dir: Optional[Path] = None,
    ) -> ExportResult:
        """
        Export a document to a local PDF file.

        Args:
            document: Document snapshot
            filename: Output file name (".pdf" appended when missing)
            output_dir: Target directory (defaults to results_dir or QUIRE_RESULTS_PATH/<today>)

        Returns:
            ExportResult with the written path and page count

        Raises:
            ExportSupersededError: A newer export started before this one finished
            ExportError: Engine launch, font loading, or rasterization failed
        """
        token = self._begin()
        document_id = document.id or "<unsaved>"
        name = export_filename(document, filename)
        start_time = time.time()

        rendered = render_document(document)
        log_export_start(document_id, self.backend, rendered.style.template_id)
        log_pipeline_event("export_started", document_id, "client_export", filename=name)

        try:
            html = build_page_document(rendered, self.geometry)
            images = self.capture(html, lambda: self._checkpoint(token))
            pdf_bytes = assemble_pdf(images, self.geometry, self.scale)
            self._checkpoint(token)
        except ExportSupersededError as e:
            _log_info(f"{document_id}: {e.message}")
            log_pipeline_event("export_superseded", document_id, "client_export", filename=name)
            raise
        except ExportError as e:
            elapsed = time.time() - start_time
            log_export_failure(document_id, self.backend, e, elapsed)
            log_pipeline_event(
                "export_failed",
                document_id,
                "client_export",
                stage=e.stage,
                error=e.message,
                elapsed_s=round(elapsed, 2),
            )
            raise

        output_dir = Path(output_dir or self.results_dir or RESULTS_PATH / today())
        output_dir.mkdir(parents=True, exist_ok=True)
        output_path = output_dir / name
        output_path.write_bytes(pdf_bytes)

        elapsed = time.time() - start_time
        result = ExportResult(
            backend=self.backend,
            filename=name,
            pdf_bytes=pdf_bytes,
            page_count=page_count(pdf_bytes),
            output_path=output_path,
            elapsed_s=round(elapsed, 2),
        )
        log_export_result(document_id, self.backend, result, elapsed)
        log_pipeline_event(
            "export_completed",
            document_id,
            "client_export",
            filename=name,
            page_count=result.page_count,
            elapsed_s=result.elapsed_s,
            output_path=str(output_path),
        )
        return result
