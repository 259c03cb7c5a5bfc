"""
Templating context logger.

Provides logging interface for templating context with automatic [template] prefix.
All templating modules should import from this module, not from utils.logger directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[template]"


# Wrapper functions with automatic [template] prefix


def _log_warning(message: str) -> None:
    """Log warning message with [template] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [template] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level templating-specific logging helpers


def log_template_fallback(requested_id, resolved_id: str) -> None:
    """Log that an unknown template id resolved to the default style."""
    _log_debug(f"Template '{requested_id}' not registered, using '{resolved_id}'")


def log_composition(document_id: str, total: int, visible: int) -> None:
    """Log the outcome of section composition."""
    _log_debug(f"Composed {document_id}: {visible} visible of {total} sections")


def log_render_summary(document_id: str, rendered: int, omitted: list) -> None:
    """Log which sections rendered and which were omitted as empty."""
    _log_debug(f"Rendered {document_id}: {rendered} sections")
    if omitted:
        _log_debug(f"  Omitted (empty): {', '.join(omitted)}")
