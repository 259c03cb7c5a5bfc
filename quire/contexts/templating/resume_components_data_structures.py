"""
Resume Component Data Structures

Defines data classes for derived rendering components: resolved template
styles, page geometry, and the canonical rendered markup consumed by every
backend.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from quire.contexts.templating.defaults import DEFAULT_PAGE_GEOMETRY
from quire.contexts.templating.resume_data_structure import SectionDescriptor


@dataclass(frozen=True)
class StyleConfiguration:
    """
    Resolved typography, color, and layout for a template.

    Derived from a document's template id, never persisted.

    Attributes:
        template_id: Registry key this style was resolved to
        font_name: Webfont family name (e.g., "Open Sans")
        font_family_fallback: Generic CSS family (e.g., "sans-serif")
        font_weights: Weights to request from the webfont provider
        accent_color: Hex color for names, headers, and entry titles
        layout_variant: Page layout (currently always "single-column")
    """

    template_id: str
    font_name: str
    font_family_fallback: str
    font_weights: Tuple[int, ...] = (400, 700)
    accent_color: str = "#000000"
    layout_variant: str = "single-column"

    @property
    def font_stack(self) -> str:
        """CSS font-family value."""
        return f"'{self.font_name}', {self.font_family_fallback}"


@dataclass(frozen=True)
class PageGeometry:
    """
    Physical page in CSS pixels (96 dpi).

    Attributes:
        page_width_px: Full page width
        page_height_px: Full page height
        margin_px: Uniform margin on all four sides
        page_size: CSS @page size keyword
        margin_css: Margin as a CSS length (must match margin_px)
    """

    page_width_px: int = DEFAULT_PAGE_GEOMETRY["page_width_px"]
    page_height_px: int = DEFAULT_PAGE_GEOMETRY["page_height_px"]
    margin_px: int = DEFAULT_PAGE_GEOMETRY["margin_px"]
    page_size: str = DEFAULT_PAGE_GEOMETRY["page_size"]
    margin_css: str = DEFAULT_PAGE_GEOMETRY["margin_css"]

    @property
    def content_width_px(self) -> int:
        return self.page_width_px - 2 * self.margin_px

    @property
    def content_height_px(self) -> int:
        return self.page_height_px - 2 * self.margin_px


@dataclass
class RenderedSection:
    """
    Markup for one composed section.

    Attributes:
        descriptor: The section descriptor this markup was rendered from
        markup: HTML fragment ("" when the section has no content)
    """

    descriptor: SectionDescriptor
    markup: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.markup.strip()


@dataclass
class RenderedDocument:
    """
    Canonical markup for a document under one style.

    Produced once per render cycle and shared by preview, client export,
    and server export so their content cannot diverge.

    Attributes:
        document_id: Source document id
        style: Resolved style the markup was rendered with
        sections: Rendered sections in composed order (visible only)
    """

    document_id: str
    style: StyleConfiguration
    sections: List[RenderedSection] = field(default_factory=list)

    @property
    def body(self) -> str:
        """Concatenated markup of all non-empty sections."""
        return "".join(s.markup for s in self.sections if not s.is_empty)

    @property
    def section_order(self) -> List[str]:
        """Ids of sections that produced markup, in order."""
        return [s.descriptor.id for s in self.sections if not s.is_empty]

    @property
    def omitted_sections(self) -> List[str]:
        return [s.descriptor.id for s in self.sections if s.is_empty]
