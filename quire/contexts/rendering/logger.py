"""
Logging for preview, export and validation.

Every message carries a [render] prefix so render lines stand out in a
session log shared with the template layer. Rendering modules log through
the helpers below rather than calling loguru directly.
"""

import os
from pathlib import Path

from loguru import logger

from quire.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(log_dir: Path, backend: str = "") -> Path:
    """
    Start a render session log in `log_dir/render.log`.

    The provenance block records the backend and the Chromium launch flags,
    since page counts can differ between sandboxed and unsandboxed runs.
    """
    return _setup_logger(
        "render",
        log_dir,
        extra_provenance={
            "Backend": backend or "-",
            "Chromium args": os.getenv("QUIRE_CHROMIUM_ARGS", ""),
        },
    )


def _log_info(message: str) -> None:
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_export_start(document_id: str, backend: str, template_id: str) -> None:
    """Log start of an export with context."""
    _log_info(f"Starting {backend} export: {document_id}")
    _log_debug(f"  Template: {template_id}")


def log_export_result(document_id: str, backend: str, result, elapsed_time: float) -> None:
    """
    Log a successful export.

    Args:
        document_id: Document identifier
        backend: "client" or "server"
        result: ExportResult from an export backend
        elapsed_time: Time taken to export
    """
    _log_success(
        f"{document_id}: {backend} export produced {result.page_count} page(s) "
        f"({elapsed_time:.2f}s)"
    )
    _log_debug(f"  File: {result.output_path or result.filename}")


def log_export_failure(document_id: str, backend: str, error, elapsed_time: float) -> None:
    """Log a failed export with the stage that failed."""
    _log_error(f"{document_id}: {backend} export failed at {error.stage} ({elapsed_time:.2f}s)")
    _log_debug(f"  {error}")


def log_pagination_result(estimate, surface_name: str) -> None:
    """Log a page estimate and any atomic units that straddle a window edge."""
    _log_debug(
        f"Paginated with {surface_name}: {estimate.content_height:.0f}px -> "
        f"{estimate.page_count} page(s)"
    )
    if estimate.clipped_units:
        labels = ", ".join(u.label or u.kind for u in estimate.clipped_units[:5])
        _log_debug(f"  {len(estimate.clipped_units)} unit(s) cross a page edge: {labels}")


def log_validation_result(document_id: str, result) -> None:
    """Log export validation outcome."""
    if result.is_valid:
        _log_success(f"{document_id}: export validated ({result.page_count} page(s))")
    else:
        _log_warning(f"{document_id}: {len(result.issues)} validation issue(s)")
        for issue in result.issues:
            _log_warning(f"  {issue}")
