"""
Stylesheet and page document builder.

Turns a resolved style plus page geometry into the print stylesheet, and
wraps canonical rendered markup into a complete, self-contained HTML page.
Both export backends print or rasterize exactly this page.
"""

from typing import Optional

from jinja2 import TemplateError

from quire.contexts.templating.exceptions import TemplateRenderError
from quire.contexts.templating.registries import MarkupRegistry
from quire.contexts.templating.resume_components_data_structures import (
    PageGeometry,
    RenderedDocument,
    StyleConfiguration,
)
from quire.contexts.templating.template_registry import webfont_url

STYLESHEET_TEMPLATE = "structure/stylesheet.css"
DOCUMENT_TEMPLATE = "structure/document.html"

_markup_registry: Optional[MarkupRegistry] = None


def get_markup_registry() -> MarkupRegistry:
    global _markup_registry
    if _markup_registry is None:
        _markup_registry = MarkupRegistry()
    return _markup_registry


def render_structure(name: str, registry: MarkupRegistry = None, **context) -> str:
    """
    Render a structure template (stylesheet, page document, preview).

    Raises:
        TemplateRenderError: If the template is missing or fails to render
    """
    registry = registry or get_markup_registry()
    try:
        return registry.get_template(name).render(**context)
    except TemplateError as e:
        raise TemplateRenderError(
            f"Failed to render {name}",
            template_name=name,
            template_path=registry.get_template_path(name),
            original_error=e,
        ) from e


def build_stylesheet(style: StyleConfiguration, geometry: PageGeometry = None) -> str:
    """
    Print stylesheet for a style.

    Carries the @page size and margins, the template font and accent color,
    and the break-avoidance rules for atomic units:
    [data-atomic="entry"] never splits, [data-atomic="header"] never ends a page.
    """
    geometry = geometry or PageGeometry()
    return render_structure(STYLESHEET_TEMPLATE, style=style, geometry=geometry)


def build_page_document(
    rendered: RenderedDocument,
    geometry: PageGeometry = None,
    include_webfont: bool = True,
    title: str = "Resume",
) -> str:
    """
    Complete standalone HTML page for a rendered document.

    Args:
        rendered: Canonical markup from render_document()
        geometry: Page geometry (defaults to A4 with 15mm margins)
        include_webfont: Link the template's webfont stylesheet. Disable for
                         offline measurement where the fallback family is used
        title: <title> text

    Returns:
        HTML page with stylesheet inlined and content under #resume-content
    """
    geometry = geometry or PageGeometry()
    style = rendered.style
    return render_structure(
        DOCUMENT_TEMPLATE,
        title=title,
        style=style,
        stylesheet=build_stylesheet(style, geometry),
        webfont_url=webfont_url(style) if include_webfont else "",
        body=rendered.body,
    )
