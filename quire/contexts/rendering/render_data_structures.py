"""
Rendering Data Structures

Measured boxes, page estimates, slice plans, and export results shared by
the preview and export backends.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

# Pagination is height-based windowing, not true layout
APPROXIMATE = "approximate"


@dataclass(frozen=True)
class UnitBox:
    """
    Vertical extent of one atomic unit, relative to the top of the content.

    Attributes:
        kind: "entry" (never split) or "header" (never last on a page)
        top: Top edge in CSS pixels
        bottom: Bottom edge in CSS pixels
        label: Display label (entry title or section heading) for diagnostics
    """

    kind: str
    top: float
    bottom: float
    label: str = ""

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def straddles(self, y: float, tolerance: float = 0.5) -> bool:
        """True if the line y cuts through this box."""
        return self.top < y - tolerance and self.bottom > y + tolerance


@dataclass
class PageEstimate:
    """
    Result of paginating a markup stream.

    Attributes:
        page_count: Number of fixed-height windows (always >= 1)
        content_height: Measured height of the whole stream
        window_offsets: Vertical offset of each page window
        clipped_units: Atomic units cut by a window boundary in the preview
        confidence: Always "approximate"
        surface_name: Measurement surface used
        measured: False when measurement failed and one page was assumed
    """

    page_count: int
    content_height: float = 0.0
    window_offsets: List[float] = field(default_factory=list)
    clipped_units: List[UnitBox] = field(default_factory=list)
    confidence: str = APPROXIMATE
    surface_name: str = ""
    measured: bool = True


@dataclass(frozen=True)
class Slice:
    """A vertical band of content placed on one output page."""

    top: float
    bottom: float

    @property
    def height(self) -> float:
        return self.bottom - self.top


@dataclass
class ExportResult:
    """
    Result of a successful export. Failures raise ExportError instead.

    Attributes:
        backend: "client" or "server"
        filename: Output file name (always ends with .pdf)
        pdf_bytes: The exported document
        page_count: Pages in the exported file
        output_path: Where the file was written (client export only)
        elapsed_s: Wall time of the export
    """

    backend: str
    filename: str
    pdf_bytes: bytes = field(default=b"", repr=False)
    page_count: Optional[int] = None
    output_path: Optional[Path] = None
    elapsed_s: float = 0.0
