"""
Templating Context

Responsibilities:
- Manages the resume document model (editor payload -> dataclasses)
- Resolves template identifiers to styles (font, accent, layout)
- Composes user-ordered sections into one ordered stream
- Renders sections to canonical HTML markup with Jinja2 templates
- Builds the print stylesheet and standalone page document

Owns: Document model, template style table, markup templates
Never: Measures, paginates, or drives a browser engine
"""

from quire.contexts.templating.content_renderer import (
    ContentRenderer,
    render,
    render_document,
)
from quire.contexts.templating.resume_components_data_structures import (
    PageGeometry,
    RenderedDocument,
    RenderedSection,
    StyleConfiguration,
)
from quire.contexts.templating.resume_data_structure import (
    Document,
    SectionDescriptor,
    SectionType,
    document_payload,
    load_document,
)
from quire.contexts.templating.section_composer import compose, compose_all
from quire.contexts.templating.stylesheet import build_page_document, build_stylesheet
from quire.contexts.templating.template_registry import TemplateRegistry, resolve
from quire.contexts.templating.text_export import export_text

__all__ = [
    # Document model
    "Document",
    "SectionDescriptor",
    "SectionType",
    "load_document",
    "document_payload",
    # Template resolution and composition
    "TemplateRegistry",
    "resolve",
    "compose",
    "compose_all",
    # Canonical rendering
    "ContentRenderer",
    "render",
    "render_document",
    "RenderedDocument",
    "RenderedSection",
    "StyleConfiguration",
    "PageGeometry",
    "build_stylesheet",
    "build_page_document",
    "export_text",
]
