"""Unit tests for the canonical content renderer."""

import pytest

from quire.contexts.templating.content_renderer import ContentRenderer, render, render_document
from quire.contexts.templating.exceptions import TemplateRenderError
from quire.contexts.templating.registries import MarkupRegistry
from quire.contexts.templating.resume_data_structure import (
    Document,
    SectionDescriptor,
    SectionType,
)
from quire.contexts.templating.template_registry import resolve
from quire.utils.text_processing import strip_html

CLASSIC = resolve("classic")


def _section(section_type: SectionType, section_id: str = None, title: str = "") -> SectionDescriptor:
    return SectionDescriptor(id=section_id or section_type.value, type=section_type, title=title)


@pytest.mark.unit
def test_experience_entry_markup(one_experience_document):
    markup = render(_section(SectionType.EXPERIENCE, title="Work Experience"), one_experience_document, CLASSIC)

    assert 'data-atomic="entry"' in markup
    assert 'data-atomic="header"' in markup
    assert 'data-label="Programmer"' in markup
    assert "Harvard Computation Lab" in markup
    assert "1944 - 1949" in markup
    assert "<li>Programmed the Mark I computer</li>" in markup
    assert 'data-template="classic"' in markup


@pytest.mark.unit
def test_empty_bullets_produce_no_list_items():
    """Bullets that strip to nothing are never rendered."""
    document = Document.from_dict(
        {"experiences": [{"title": "Engineer", "bullets": ["", "<p><br></p>", "   "]}]}
    )
    markup = render(_section(SectionType.EXPERIENCE), document, CLASSIC)

    assert "<li" not in markup
    assert 'class="bullets"' in markup


@pytest.mark.unit
def test_bullet_with_angle_brackets_kept_verbatim():
    document = Document.from_dict(
        {"experiences": [{"title": "SRE", "bullets": ["<p>Cut p99 latency from <200ms to >50ms</p>"]}]}
    )
    markup = render(_section(SectionType.EXPERIENCE), document, CLASSIC)

    assert "<li>Cut p99 latency from &lt;200ms to &gt;50ms</li>" in markup


@pytest.mark.unit
def test_current_position_shows_present():
    document = Document.from_dict(
        {"experiences": [{"title": "Lead", "startDate": "2020", "endDate": "2021", "current": True}]}
    )
    markup = render(_section(SectionType.EXPERIENCE), document, CLASSIC)

    assert "2020 - Present" in markup
    assert "2021" not in markup


@pytest.mark.unit
def test_missing_entry_fields_use_placeholders():
    document = Document.from_dict(
        {
            "experiences": [{}],
            "education": [{}],
            "certifications": [{}],
        }
    )

    assert "Position" in render(_section(SectionType.EXPERIENCE), document, CLASSIC)
    assert "Degree" in render(_section(SectionType.EDUCATION), document, CLASSIC)
    assert "Certification" in render(_section(SectionType.CERTIFICATIONS), document, CLASSIC)


@pytest.mark.unit
def test_contact_always_renders_with_placeholder_name():
    markup = render(_section(SectionType.CONTACT), Document.from_dict({}), CLASSIC)

    assert "Your Name" in markup
    assert 'data-atomic="entry"' in markup


@pytest.mark.unit
def test_contact_parts(sample_document):
    markup = render(_section(SectionType.CONTACT), sample_document, resolve("modern"))

    assert '<h1 class="name">Ada Lovelace</h1>' in markup
    assert "ada@example.com" in markup
    assert "linkedin.com/in/ada" in markup
    assert "contact-photo" not in markup


@pytest.mark.unit
@pytest.mark.parametrize("summary", ["", "<p><br></p>", "<p>   </p>"])
def test_empty_summary_renders_nothing(summary):
    document = Document.from_dict({"summary": summary})
    assert render(_section(SectionType.SUMMARY), document, CLASSIC) == ""


@pytest.mark.unit
def test_summary_rich_text_is_reduced_to_plain_text(sample_document):
    markup = render(_section(SectionType.SUMMARY), sample_document, CLASSIC)

    assert "<strong>" not in markup
    assert "the first published algorithm" in markup


@pytest.mark.unit
def test_skills_grouped_by_category():
    document = Document.from_dict(
        {
            "skills": [
                {"name": "Go", "category": "Languages"},
                {"name": "Docker", "category": ""},
                {"name": "SQL", "category": "Languages"},
                {"name": "", "category": "Languages"},
            ]
        }
    )
    markup = render(_section(SectionType.SKILLS), document, CLASSIC)
    text = strip_html(markup)

    assert "Languages: Go, SQL" in text
    assert "Other: Docker" in text
    # First-seen category order
    assert text.index("Languages:") < text.index("Other:")


@pytest.mark.unit
def test_education_title_and_details():
    document = Document.from_dict(
        {
            "education": [
                {
                    "institution": "MIT",
                    "degree": "BSc",
                    "field": "Physics",
                    "gpa": "3.9",
                    "honors": "<p>Summa cum laude</p>",
                    "batchStart": "2010",
                    "batchEnd": "2014",
                }
            ]
        }
    )
    text = strip_html(render(_section(SectionType.EDUCATION), document, CLASSIC))

    assert "BSc in Physics" in text
    assert "2010 - 2014" in text
    assert "GPA: 3.9 | Summa cum laude" in text


@pytest.mark.unit
def test_certification_details():
    document = Document.from_dict(
        {
            "certifications": [
                {
                    "name": "CKA",
                    "issuer": "CNCF",
                    "date": "2024",
                    "expirationDate": "2027",
                    "credentialId": "X-1",
                }
            ]
        }
    )
    text = strip_html(render(_section(SectionType.CERTIFICATIONS), document, CLASSIC))

    assert "CNCF • 2024" in text
    assert "Expires 2027 | ID: X-1" in text


@pytest.mark.unit
def test_values_are_escaped():
    document = Document.from_dict(
        {"experiences": [{"title": "Dev", "company": "<script>alert(1)</script>"}]}
    )
    markup = render(_section(SectionType.EXPERIENCE), document, CLASSIC)

    assert "<script>" not in markup
    assert "&lt;script&gt;" in markup


@pytest.mark.unit
def test_custom_section(sample_document):
    descriptor = _section(SectionType.CUSTOM, section_id="projects", title="Projects")
    markup = render(descriptor, sample_document, CLASSIC)

    assert 'data-label="Note G"' in markup
    assert "Analytical Engine" in markup
    assert "Computes Bernoulli numbers" in markup


@pytest.mark.unit
def test_custom_section_hides_technologies_when_disabled():
    document = Document.from_dict(
        {"customSections": [{"id": "p", "items": [{"title": "Tool", "technologies": "Rust"}]}]}
    )
    markup = render(_section(SectionType.CUSTOM, section_id="p"), document, CLASSIC)

    assert "Tool" in markup
    assert "Rust" not in markup


@pytest.mark.unit
def test_empty_or_missing_custom_section_renders_nothing():
    document = Document.from_dict({"customSections": [{"id": "empty", "items": []}]})

    assert render(_section(SectionType.CUSTOM, section_id="empty"), document, CLASSIC) == ""
    assert render(_section(SectionType.CUSTOM, section_id="missing"), document, CLASSIC) == ""


@pytest.mark.unit
def test_blank_title_uses_default_heading():
    document = Document.from_dict({"skills": [{"name": "Go"}]})
    markup = render(_section(SectionType.SKILLS, title="  "), document, CLASSIC)

    assert ">Skills</h2>" in markup


@pytest.mark.unit
def test_render_document_follows_composed_order(sample_document):
    rendered = render_document(sample_document)

    assert rendered.style.template_id == "modern"
    assert rendered.section_order == [
        "contact",
        "summary",
        "experience",
        "education",
        "skills",
        "certifications",
        "projects",
    ]
    body = rendered.body
    assert body.index("Ada Lovelace") < body.index("Analyst") < body.index("Note G")


@pytest.mark.unit
def test_render_document_keeps_empty_sections_as_omitted(one_experience_document):
    rendered = render_document(one_experience_document)

    assert rendered.section_order == ["contact", "experience"]
    assert rendered.omitted_sections == ["summary", "education", "skills", "certifications"]


@pytest.mark.unit
def test_unknown_template_renders_with_default_style():
    rendered = render_document(Document.from_dict({"templateId": "nonexistent-template-xyz"}))

    assert rendered.style.template_id == "classic"
    assert 'data-label="Your Name"' in rendered.body


@pytest.mark.unit
def test_broken_template_raises_render_error(tmp_path):
    (tmp_path / "sections").mkdir()
    (tmp_path / "sections" / "summary.html.jinja").write_text("{{ undefined_value }}", encoding="utf-8")

    renderer = ContentRenderer(MarkupRegistry(tmp_path))
    document = Document.from_dict({"summary": "Hello"})

    with pytest.raises(TemplateRenderError) as exc_info:
        renderer.render(_section(SectionType.SUMMARY), document, CLASSIC)

    assert exc_info.value.template_name == "sections/summary.html"
