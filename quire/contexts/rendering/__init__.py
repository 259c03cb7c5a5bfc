"""
Rendering Context

Responsibilities:
- Measures canonical markup and estimates page counts (preview)
- Exports PDFs locally by rasterizing page slices (client export)
- Exports PDFs by native print in a headless browser (server export)
- Validates exported files against their documents

Owns: Measurement surfaces, pagination, browser engine lifecycle, export outputs
Never: Changes document content or section order
"""

from quire.contexts.rendering.client_export import ClientExporter, export_filename
from quire.contexts.rendering.exceptions import (
    DocumentValidationError,
    EngineLaunchError,
    ExportError,
    ExportSupersededError,
    FontLoadTimeoutError,
    PrintError,
    RasterizationError,
)
from quire.contexts.rendering.pagination import estimate_pages, paginate, plan_slices
from quire.contexts.rendering.preview import PreviewSession
from quire.contexts.rendering.render_data_structures import ExportResult, PageEstimate, UnitBox
from quire.contexts.rendering.server_export import ChromiumPrintEngine, export_pdf_bytes
from quire.contexts.rendering.surfaces import (
    ApproximateMeasurementSurface,
    BrowserMeasurementSurface,
)
from quire.contexts.rendering.validator import ValidationResult, validate_export

__all__ = [
    # Pagination
    "paginate",
    "estimate_pages",
    "plan_slices",
    "PageEstimate",
    "UnitBox",
    "ApproximateMeasurementSurface",
    "BrowserMeasurementSurface",
    # Backends
    "PreviewSession",
    "ClientExporter",
    "export_filename",
    "export_pdf_bytes",
    "ChromiumPrintEngine",
    "ExportResult",
    # Validation
    "validate_export",
    "ValidationResult",
    # Errors
    "ExportError",
    "EngineLaunchError",
    "FontLoadTimeoutError",
    "RasterizationError",
    "PrintError",
    "ExportSupersededError",
    "DocumentValidationError",
]
