"""
Plain-text export.

Renders a document as plain text in composed section order, for pasting
into forms and word processors that reject PDFs.
"""

from typing import List

from quire.contexts.templating.defaults import (
    CURRENT_POSITION_LABEL,
    DEFAULT_SKILL_CATEGORY,
    PLACEHOLDERS,
    SECTION_HEADINGS,
)
from quire.contexts.templating.resume_data_structure import (
    Document,
    SectionDescriptor,
    SectionType,
)
from quire.contexts.templating.section_composer import compose
from quire.utils.text_processing import is_empty_content, strip_html

RULE = "-" * 40


def _heading(lines: List[str], title: str) -> None:
    lines.append(title.upper())
    lines.append(RULE)


def _bullet_lines(lines: List[str], bullets: List[str]) -> None:
    for bullet in bullets:
        if not is_empty_content(bullet):
            lines.append(f"  • {strip_html(bullet)}")


def _contact_lines(document: Document) -> List[str]:
    contact = document.contact
    lines = [contact.full_name.strip() or PLACEHOLDERS["full_name"]]
    contact_line = " | ".join(p for p in (contact.email, contact.phone, contact.location) if p)
    if contact_line:
        lines.append(contact_line)
    for link in (contact.linkedin, contact.website):
        if link:
            lines.append(link)
    lines.append("")
    return lines


def _section_lines(section: SectionDescriptor, document: Document) -> List[str]:
    lines: List[str] = []
    title = section.title.strip() or SECTION_HEADINGS.get(section.type.value, "")

    if section.type is SectionType.SUMMARY:
        if is_empty_content(document.summary):
            return []
        _heading(lines, title)
        lines.append(strip_html(document.summary))
        lines.append("")

    elif section.type is SectionType.EXPERIENCE and document.experiences:
        _heading(lines, title)
        for exp in document.experiences:
            lines.append(f"{exp.title or PLACEHOLDERS['experience_title']} | {exp.company}")
            end = CURRENT_POSITION_LABEL if exp.current else exp.end_date
            location = f" | {exp.location}" if exp.location else ""
            lines.append(f"{exp.start_date} - {end}{location}")
            _bullet_lines(lines, exp.bullets)
            lines.append("")

    elif section.type is SectionType.EDUCATION and document.education:
        _heading(lines, title)
        for edu in document.education:
            lines.append(edu.degree or PLACEHOLDERS["education_degree"])
            location = f", {edu.location}" if edu.location else ""
            batch = f" | {edu.batch}" if edu.batch else ""
            lines.append(f"{edu.institution}{location}{batch}")
            if edu.gpa:
                lines.append(f"GPA: {edu.gpa}")
            if not is_empty_content(edu.honors):
                lines.append(strip_html(edu.honors))
            lines.append("")

    elif section.type is SectionType.SKILLS and document.skills:
        _heading(lines, title)
        grouped = {}
        for skill in document.skills:
            grouped.setdefault(skill.category.strip() or DEFAULT_SKILL_CATEGORY, []).append(skill.name)
        for category, names in grouped.items():
            lines.append(f"{category}: {', '.join(n for n in names if n)}")
        lines.append("")

    elif section.type is SectionType.CERTIFICATIONS and document.certifications:
        _heading(lines, title)
        for cert in document.certifications:
            lines.append(f"{cert.name or PLACEHOLDERS['certification_name']} - {cert.issuer} ({cert.date})")
        lines.append("")

    elif section.type is SectionType.CUSTOM:
        custom = document.find_custom_section(section.id)
        if custom is None or not custom.items:
            return []
        _heading(lines, custom.title or title)
        for item in custom.items:
            title_line = item.title or PLACEHOLDERS["custom_item_title"]
            if custom.show_technologies and item.technologies:
                title_line += f" ({item.technologies})"
            if item.date:
                title_line += f" | {item.date}"
            lines.append(title_line)
            _bullet_lines(lines, item.bullets)
            lines.append("")

    return lines


def export_text(document: Document) -> str:
    """
    Plain-text rendering of a document.

    The contact block always comes first (even when hidden or reordered), then
    every other visible section in composed order.

    Example:
        >>> print(export_text(document).splitlines()[0])
        Ada Lovelace
    """
    lines = _contact_lines(document)
    for section in compose(document):
        if section.type is SectionType.CONTACT:
            continue
        lines.extend(_section_lines(section, document))
    return "\n".join(lines)
