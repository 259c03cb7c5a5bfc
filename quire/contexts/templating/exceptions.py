"""Templating errors. Render failures point at the markup file involved."""

from pathlib import Path
from typing import Optional


class TemplateRenderError(Exception):
    """
    A markup template is missing, malformed, or failed while rendering.

    `template_name` is the registry name ("sections/skills.html");
    `template_path` the file on disk. Syntax errors also carry the line.
    """

    def __init__(
        self,
        message: str,
        template_name: Optional[str] = None,
        template_path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.template_name = template_name
        self.template_path = template_path
        self.original_error = original_error

        location = template_path or template_name
        lineno = getattr(original_error, "lineno", None)
        if location and lineno:
            location = f"{location}:{lineno}"

        text = message
        if location:
            text += f" [{location}]"
        if original_error is not None:
            text += f": {type(original_error).__name__}: {original_error}"
        super().__init__(text)


class InvalidDocumentStructureError(ValueError):
    """
    Exception raised when a resume payload is not a document at all.

    Missing nested fields never raise; they degrade to placeholders. This is
    only raised when the root is absent or is not a mapping.
    """

    pass


class DuplicateSectionError(ValueError):
    """
    Exception raised when two custom sections share an id.

    Section descriptors for custom sections cross-reference their content by id,
    so aliased ids would render one section's content twice.
    """

    def __init__(self, section_id: str):
        self.section_id = section_id
        super().__init__(f"Custom section id '{section_id}' is used by more than one section")
