"""
Export validation.

Checks an exported PDF against the document it was exported from, so the
three backends can be compared for agreement:
- page count against the preview estimate
- every rendered section header present in the text layer
- every atomic entry (by its label) present in the text layer

Rasterized exports (client export) have no text layer; for them only the
page count is checked.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from bs4 import BeautifulSoup

from quire.contexts.rendering.logger import log_validation_result
from quire.contexts.rendering.pagination import estimate_pages
from quire.contexts.rendering.surfaces import MeasurementSurface
from quire.contexts.templating.content_renderer import render_document
from quire.contexts.templating.resume_components_data_structures import (
    PageGeometry,
    RenderedSection,
)
from quire.contexts.templating.resume_data_structure import Document
from quire.contexts.templating.stylesheet import build_page_document
from quire.utils.event_logging import log_pipeline_event
from quire.utils.pdf_processing import (
    PDFSource,
    extract_page_text,
    find_section_header,
    normalize_for_matching,
    page_count,
)

# Character count for prefix matching of entry labels
MATCH_LENGTH = 30


class IssueTemplates:
    """Centralized issue message templates (f-string style)."""

    # Document-level
    UNREADABLE = "Exported file is not a readable PDF"
    PAGE_COUNT_MISMATCH = "Page count mismatch: {actual} (expected {expected})"

    # Section-level
    HEADER_NOT_FOUND = "'{section}': header not found in exported text"

    # Entry-level
    ENTRY_NOT_FOUND = "'{entry}' ({section}): not found in exported text"


# =============================================================================
# Diagnostics Hierarchy
# =============================================================================


@dataclass
class Diagnostics:
    """Base class for hierarchical diagnostics."""

    components: List["Diagnostics"] = field(default_factory=list)

    def get_issues(self) -> List[str]:
        """Generate issues for this level based on field values. Override in subclasses."""
        return []

    def get_inherited_issues(self) -> List[str]:
        """Collect issues from this level and all descendants."""
        all_issues = list(self.get_issues())
        for component in self.components:
            all_issues.extend(component.get_inherited_issues())
        return all_issues

    @property
    def is_valid(self) -> bool:
        """True if no issues at this level or any descendant."""
        return len(self.get_inherited_issues()) == 0


@dataclass
class EntryDiagnostics(Diagnostics):
    """Diagnostics for one atomic entry."""

    label: str = ""
    section_name: str = ""
    found: bool = False
    page: Optional[int] = None

    def get_issues(self) -> List[str]:
        if self.found:
            return []
        return [IssueTemplates.ENTRY_NOT_FOUND.format(entry=self.label, section=self.section_name)]


@dataclass
class SectionDiagnostics(Diagnostics):
    """Diagnostics for one rendered section."""

    section_name: str = ""
    has_header: bool = True
    header_found: bool = False
    page: Optional[int] = None

    def get_issues(self) -> List[str]:
        if self.has_header and not self.header_found:
            return [IssueTemplates.HEADER_NOT_FOUND.format(section=self.section_name)]
        return []


@dataclass
class DocumentDiagnostics(Diagnostics):
    """Top-level diagnostics for the exported file."""

    readable: bool = True
    actual_page_count: int = 0
    expected_page_count: int = 0
    has_text_layer: bool = False

    def get_issues(self) -> List[str]:
        if not self.readable:
            return [IssueTemplates.UNREADABLE]
        if self.actual_page_count != self.expected_page_count:
            return [
                IssueTemplates.PAGE_COUNT_MISMATCH.format(
                    actual=self.actual_page_count,
                    expected=self.expected_page_count,
                )
            ]
        return []


@dataclass
class ValidationResult:
    """
    Result of export validation.

    Attributes:
        is_valid: Whether the export passes all checks
        diagnostics: Diagnostics hierarchy (document -> sections -> entries)
    """

    is_valid: bool
    diagnostics: DocumentDiagnostics

    @property
    def issues(self) -> List[str]:
        """All issues from diagnostics hierarchy."""
        return self.diagnostics.get_inherited_issues()

    @property
    def page_count(self) -> int:
        """Actual page count from PDF."""
        return self.diagnostics.actual_page_count


# =============================================================================
# Helper Functions
# =============================================================================


def _first_page_containing(label: str, page_streams: List[str]) -> Optional[int]:
    needle = normalize_for_matching(label)[:MATCH_LENGTH]
    if not needle:
        return None
    for number, stream in enumerate(page_streams, 1):
        if needle in stream:
            return number
    return None


def _diagnose_section(
    section: RenderedSection, page_lines: List[List[str]], page_streams: List[str]
) -> SectionDiagnostics:
    soup = BeautifulSoup(section.markup, "html.parser")
    header = soup.find(attrs={"data-atomic": "header"})
    section_name = header.get("data-label", "") if header else section.descriptor.id

    diagnostics = SectionDiagnostics(section_name=section_name, has_header=header is not None)

    if header is not None:
        for number, lines in enumerate(page_lines, 1):
            if find_section_header(section_name, lines) is not None:
                diagnostics.header_found = True
                diagnostics.page = number
                break

    for element in soup.find_all(attrs={"data-atomic": "entry"}):
        label = element.get("data-label", "")
        if not label or label == section_name:
            continue
        page = _first_page_containing(label, page_streams)
        diagnostics.components.append(
            EntryDiagnostics(label=label, section_name=section_name, found=page is not None, page=page)
        )

    return diagnostics


def validate_export(
    document: Document,
    pdf: PDFSource,
    expected_pages: Optional[int] = None,
    surface: MeasurementSurface = None,
    geometry: PageGeometry = None,
) -> ValidationResult:
    """
    Validate an exported PDF against its document.

    Args:
        document: Document the PDF was exported from
        pdf: Path to the PDF or its bytes
        expected_pages: Expected page count. When omitted, the preview
                        estimate for the document is used
        surface: Measurement surface for the preview estimate
        geometry: Page geometry (defaults to A4 with 15mm margins)

    Returns:
        ValidationResult with the diagnostics hierarchy

    Example:
        >>> result = validate_export(document, "outs/results/2026-10-18/Ada Lovelace.pdf")
        >>> result.issues
        []
    """
    geometry = geometry or PageGeometry()
    rendered = render_document(document)

    if expected_pages is None:
        estimate = estimate_pages(
            build_page_document(rendered, geometry, include_webfont=False),
            geometry.content_width_px,
            geometry.content_height_px,
            surface,
        )
        expected_pages = estimate.page_count

    actual = page_count(pdf)
    diagnostics = DocumentDiagnostics(
        readable=actual is not None,
        actual_page_count=actual or 0,
        expected_page_count=expected_pages,
    )

    if diagnostics.readable:
        page_texts = extract_page_text(pdf)
        diagnostics.has_text_layer = any(text.strip() for text in page_texts)

        # Rasterized exports only get the page-count check
        if diagnostics.has_text_layer:
            page_lines = [text.splitlines() for text in page_texts]
            page_streams = [normalize_for_matching(text) for text in page_texts]
            for section in rendered.sections:
                if section.is_empty:
                    continue
                diagnostics.components.append(_diagnose_section(section, page_lines, page_streams))

    result = ValidationResult(is_valid=diagnostics.is_valid, diagnostics=diagnostics)

    document_id = document.id or "<unsaved>"
    log_validation_result(document_id, result)
    log_pipeline_event(
        "export_validated",
        document_id,
        "validator",
        is_valid=result.is_valid,
        page_count=result.page_count,
        issue_count=len(result.issues),
    )
    return result
