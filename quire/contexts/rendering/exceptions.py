"""Custom exceptions for the rendering context with stage references."""

from typing import Optional


class ExportError(Exception):
    """
    Exception raised when an export backend fails.

    No partial output exists when this is raised: the backend releases its
    engine resources and writes nothing.

    Attributes:
        message: Error description
        stage: Pipeline stage that failed (e.g., "launch", "fonts", "print")
        original_error: The underlying engine error
    """

    stage_default: Optional[str] = None

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.stage = stage or self.stage_default
        self.original_error = original_error

        # Build enhanced error message
        parts = [message]

        if self.stage:
            parts.append(f"\nStage: {self.stage}")

        if original_error:
            parts.append(f"\nOriginal error: {str(original_error)}")

        super().__init__("\n".join(parts))


class EngineLaunchError(ExportError):
    """Headless browser engine could not be started."""

    stage_default = "launch"


class FontLoadTimeoutError(ExportError):
    """Webfonts did not become ready before the timeout."""

    stage_default = "fonts"


class RasterizationError(ExportError):
    """Capturing page slices or assembling them into a PDF failed."""

    stage_default = "rasterize"


class PrintError(ExportError):
    """The engine's native print-to-PDF step failed."""

    stage_default = "print"


class ExportSupersededError(ExportError):
    """A newer export of the same exporter started before this one finished."""

    stage_default = "superseded"


class MeasurementError(Exception):
    """A measurement surface could not attach or measure markup."""

    pass


class DocumentValidationError(ValueError):
    """
    Exception raised when an export request carries no document.

    Raised at the request boundary; mapped to HTTP 400 by the API.
    """

    pass
