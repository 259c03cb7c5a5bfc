"""
Content Renderer

Single canonical transformer from (section, document, style) to an HTML
fragment. The preview, client export, and server export all consume the
output of render_document(), so their content and order cannot diverge.

Each section type builds a plain view dict (placeholders applied, rich text
reduced to plain text) that a Jinja2 fragment template turns into markup.
Escaping is left to template autoescape.
"""

from typing import Callable, Dict, List, Optional

from jinja2 import TemplateError

from quire.contexts.templating.defaults import (
    CURRENT_POSITION_LABEL,
    DEFAULT_SKILL_CATEGORY,
    PLACEHOLDERS,
    SECTION_HEADINGS,
)
from quire.contexts.templating.exceptions import TemplateRenderError
from quire.contexts.templating.logger import log_render_summary
from quire.contexts.templating.registries import MarkupRegistry
from quire.contexts.templating.resume_components_data_structures import (
    RenderedDocument,
    RenderedSection,
    StyleConfiguration,
)
from quire.contexts.templating.resume_data_structure import (
    Document,
    SectionDescriptor,
    SectionType,
)
from quire.contexts.templating.section_composer import compose
from quire.contexts.templating.template_registry import resolve
from quire.utils.text_processing import is_empty_content, strip_html

ViewBuilder = Callable[[SectionDescriptor, Document], Optional[dict]]


# =============================================================================
# View builders (one per section type; None means "omit the section")
# =============================================================================


def _heading(section: SectionDescriptor) -> str:
    return section.title.strip() or SECTION_HEADINGS.get(section.type.value, "")


def _bullets(bullets: List[str]) -> List[str]:
    """Plain-text bullets, dropping those that strip to nothing."""
    return [strip_html(b) for b in bullets if not is_empty_content(b)]


def _join(parts: List[str], separator: str) -> str:
    return separator.join(p for p in parts if p)


def _contact_view(section: SectionDescriptor, document: Document) -> dict:
    contact = document.contact
    return {
        "full_name": contact.full_name.strip() or PLACEHOLDERS["full_name"],
        "contact_parts": [p for p in (contact.email, contact.phone, contact.location) if p],
        "link_parts": [p for p in (contact.linkedin, contact.website) if p],
        "photo": contact.photo,
    }


def _summary_view(section: SectionDescriptor, document: Document) -> Optional[dict]:
    text = strip_html(document.summary)
    if not text:
        return None
    return {"text": text}


def _experience_view(section: SectionDescriptor, document: Document) -> Optional[dict]:
    if not document.experiences:
        return None

    entries = []
    for exp in document.experiences:
        end = CURRENT_POSITION_LABEL if exp.current else exp.end_date
        if exp.start_date and end:
            dates = f"{exp.start_date} - {end}"
        else:
            dates = exp.start_date or end
        entries.append(
            {
                "title": exp.title.strip() or PLACEHOLDERS["experience_title"],
                "subtitle": _join([exp.company, exp.location], ", "),
                "dates": dates,
                "bullets": _bullets(exp.bullets),
            }
        )
    return {"entries": entries}


def _education_view(section: SectionDescriptor, document: Document) -> Optional[dict]:
    if not document.education:
        return None

    entries = []
    for edu in document.education:
        title = edu.degree.strip() or PLACEHOLDERS["education_degree"]
        if edu.field_of_study:
            title = f"{title} in {edu.field_of_study}"
        gpa = f"GPA: {edu.gpa}" if edu.gpa else ""
        entries.append(
            {
                "title": title,
                "subtitle": _join([edu.institution, edu.location], ", "),
                "batch": edu.batch,
                "details": _join([gpa, strip_html(edu.honors)], " | "),
            }
        )
    return {"entries": entries}


def _skills_view(section: SectionDescriptor, document: Document) -> Optional[dict]:
    if not document.skills:
        return None

    # dicts keep insertion order, so categories appear in first-seen order
    grouped: Dict[str, List[str]] = {}
    for skill in document.skills:
        category = skill.category.strip() or DEFAULT_SKILL_CATEGORY
        grouped.setdefault(category, []).append(skill.name.strip())

    groups = [
        {"category": category, "items": [name for name in names if name]}
        for category, names in grouped.items()
    ]
    return {"groups": groups}


def _certifications_view(section: SectionDescriptor, document: Document) -> Optional[dict]:
    if not document.certifications:
        return None

    entries = []
    for cert in document.certifications:
        expires = f"Expires {cert.expiration_date}" if cert.expiration_date else ""
        credential = f"ID: {cert.credential_id}" if cert.credential_id else ""
        entries.append(
            {
                "name": cert.name.strip() or PLACEHOLDERS["certification_name"],
                "details": _join([cert.issuer, cert.date], " • "),
                "extras": _join([expires, credential], " | "),
            }
        )
    return {"entries": entries}


def _custom_view(section: SectionDescriptor, document: Document) -> Optional[dict]:
    custom = document.find_custom_section(section.id)
    if custom is None or not custom.items:
        return None

    entries = []
    for item in custom.items:
        entries.append(
            {
                "title": item.title.strip() or PLACEHOLDERS["custom_item_title"],
                "date": item.date or "",
                "technologies": item.technologies if custom.show_technologies else "",
                "bullets": _bullets(item.bullets),
            }
        )
    return {"entries": entries, "title": custom.title or section.title}


VIEW_BUILDERS: Dict[SectionType, ViewBuilder] = {
    SectionType.CONTACT: _contact_view,
    SectionType.SUMMARY: _summary_view,
    SectionType.EXPERIENCE: _experience_view,
    SectionType.EDUCATION: _education_view,
    SectionType.SKILLS: _skills_view,
    SectionType.CERTIFICATIONS: _certifications_view,
    SectionType.CUSTOM: _custom_view,
}


# =============================================================================
# Renderer
# =============================================================================


class ContentRenderer:
    """
    Renders composed sections to HTML fragments with the section templates.

    Args:
        markup_registry: Template source. Defaults to the packaged templates
    """

    def __init__(self, markup_registry: MarkupRegistry = None):
        self.markup_registry = markup_registry or MarkupRegistry()

    def render(self, section: SectionDescriptor, document: Document, style: StyleConfiguration) -> str:
        """
        Render one section to markup.

        Returns:
            HTML fragment, or "" when the section has no content to show

        Raises:
            TemplateRenderError: If the section template itself is broken
        """
        builder = VIEW_BUILDERS.get(section.type)
        if builder is None:
            return ""

        view = builder(section, document)
        if view is None:
            return ""

        context = {
            "section_id": section.id,
            "template_id": style.template_id,
            "title": _heading(section),
        }
        context.update(view)

        template_name = f"sections/{section.type.value}.html"
        try:
            template = self.markup_registry.get_template(template_name)
            return template.render(**context)
        except TemplateError as e:
            raise TemplateRenderError(
                f"Failed to render section '{section.id}'",
                template_name=template_name,
                template_path=self.markup_registry.get_template_path(template_name),
                original_error=e,
            ) from e

    def render_document(
        self, document: Document, style: StyleConfiguration = None
    ) -> RenderedDocument:
        """
        Render every visible section of a document in composed order.

        Args:
            document: Document snapshot
            style: Resolved style; resolved from document.template_id when omitted

        Returns:
            RenderedDocument with one RenderedSection per visible descriptor
            (empty sections keep their slot with markup "")
        """
        if style is None:
            style = resolve(document.template_id)

        rendered = RenderedDocument(document_id=document.id, style=style)
        for descriptor in compose(document):
            markup = self.render(descriptor, document, style)
            rendered.sections.append(RenderedSection(descriptor=descriptor, markup=markup))

        log_render_summary(
            document.id or "<unsaved>",
            len(rendered.section_order),
            rendered.omitted_sections,
        )
        return rendered


_default_renderer: Optional[ContentRenderer] = None


def _get_renderer() -> ContentRenderer:
    global _default_renderer
    if _default_renderer is None:
        _default_renderer = ContentRenderer()
    return _default_renderer


def render(section: SectionDescriptor, document: Document, style: StyleConfiguration) -> str:
    """Render one section with the packaged templates."""
    return _get_renderer().render(section, document, style)


def render_document(document: Document, style: StyleConfiguration = None) -> RenderedDocument:
    """Render a whole document with the packaged templates."""
    return _get_renderer().render_document(document, style)
