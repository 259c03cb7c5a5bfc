"""Unit tests for loading editor payloads into Document."""

import json

import pytest

from quire.contexts.templating.exceptions import InvalidDocumentStructureError
from quire.contexts.templating.resume_data_structure import (
    Document,
    SectionType,
    document_payload,
    load_document,
)


@pytest.mark.unit
def test_from_dict_reads_camel_case(one_experience_payload):
    document = Document.from_dict(one_experience_payload)

    assert document.id == "resume-one"
    assert document.template_id == "classic"
    assert document.contact.full_name == "Grace Hopper"

    exp = document.experiences[0]
    assert exp.company == "Harvard Computation Lab"
    assert exp.start_date == "1944"
    assert exp.end_date == "1949"
    assert exp.current is False
    assert exp.bullets == ["<p>Programmed the Mark I computer</p>"]


@pytest.mark.unit
def test_from_dict_reads_snake_case():
    document = Document.from_dict(
        {
            "template_id": "modern",
            "contact": {"full_name": "Alan Turing"},
            "custom_sections": [{"id": "awards", "show_technologies": True}],
        }
    )

    assert document.template_id == "modern"
    assert document.contact.full_name == "Alan Turing"
    assert document.custom_sections[0].show_technologies is True


@pytest.mark.unit
def test_from_dict_rejects_non_mapping():
    with pytest.raises(InvalidDocumentStructureError, match="list"):
        Document.from_dict(["not", "a", "document"])


@pytest.mark.unit
def test_mistyped_fields_degrade_to_empty():
    """Wrong-typed nested fields become empty values instead of failing the load."""
    document = Document.from_dict(
        {
            "contact": "Ada",
            "summary": {"html": "<p>x</p>"},
            "experiences": [{"company": "Acme", "bullets": "not a list"}, "junk", 7],
            "skills": {"name": "Python"},
            "education": None,
        }
    )

    assert document.contact.full_name == ""
    assert document.summary == ""
    assert len(document.experiences) == 1
    assert document.experiences[0].company == "Acme"
    assert document.experiences[0].bullets == []
    assert document.skills == []
    assert document.education == []


@pytest.mark.unit
def test_missing_ids_get_positional_defaults():
    document = Document.from_dict({"experiences": [{}, {}], "skills": [{"name": "Go"}]})

    assert [e.id for e in document.experiences] == ["experience-0", "experience-1"]
    assert document.skills[0].id == "skill-0"


@pytest.mark.unit
def test_missing_sections_use_built_in_defaults():
    document = Document.from_dict({})

    assert [s.type for s in document.sections] == [
        SectionType.CONTACT,
        SectionType.SUMMARY,
        SectionType.EXPERIENCE,
        SectionType.EDUCATION,
        SectionType.SKILLS,
        SectionType.CERTIFICATIONS,
    ]
    assert [s.order for s in document.sections] == [0, 1, 2, 3, 4, 5]


@pytest.mark.unit
def test_unknown_section_types_are_dropped():
    document = Document.from_dict(
        {
            "sections": [
                {"id": "summary", "type": "summary", "order": 0},
                {"id": "hobbies", "type": "hobbies", "order": 1},
            ]
        }
    )

    assert [s.id for s in document.sections] == ["summary"]


@pytest.mark.unit
def test_visibility_and_order_coercion():
    document = Document.from_dict(
        {
            "sections": [
                {"id": "skills", "type": "skills", "order": "3", "visible": "false"},
                {"id": "summary", "type": "summary", "order": "first"},
            ]
        }
    )

    skills, summary = document.sections
    assert skills.order == 3.0
    assert skills.visible is False
    # Unparseable order falls back to the declared position
    assert summary.order == 1
    assert summary.visible is True


@pytest.mark.unit
def test_duplicate_custom_section_ids_are_suffixed():
    document = Document.from_dict(
        {"customSections": [{"id": "projects"}, {"id": "projects"}, {"id": "projects"}]}
    )

    assert [c.id for c in document.custom_sections] == ["projects", "projects-2", "projects-3"]


@pytest.mark.unit
def test_custom_sections_default_after_built_ins():
    document = Document.from_dict({"customSections": [{"id": "a"}, {"id": "b"}]})

    assert [c.order for c in document.custom_sections] == [6, 7]


@pytest.mark.unit
def test_education_batch_display():
    document = Document.from_dict(
        {
            "education": [
                {"batchStart": "2010", "batchEnd": "2014"},
                {"batchEnd": "2014"},
                {"batchStart": "2010"},
                {},
            ]
        }
    )

    assert [e.batch for e in document.education] == ["2010 - 2014", "2014", "2010", ""]


@pytest.mark.unit
def test_export_basename():
    assert Document.from_dict({"contact": {"fullName": " Ada Lovelace "}}).export_basename == "Ada Lovelace"
    assert Document.from_dict({}).export_basename == "resume"


@pytest.mark.unit
def test_load_document_yaml(sample_document):
    assert sample_document.id == "resume-ada"
    assert sample_document.template_id == "modern"
    assert sample_document.experiences[0].current is True
    assert sample_document.education[0].batch == "1828 - 1835"
    assert sample_document.find_custom_section("projects").show_technologies is True
    assert sample_document.find_custom_section("missing") is None


@pytest.mark.unit
def test_load_document_json(tmp_path, one_experience_payload):
    path = tmp_path / "resume.json"
    path.write_text(json.dumps(one_experience_payload), encoding="utf-8")

    assert load_document(path).contact.full_name == "Grace Hopper"


@pytest.mark.unit
def test_load_document_keeps_dollar_brace_text(tmp_path):
    """User text that looks like a config interpolation is loaded as written."""
    path = tmp_path / "resume.yaml"
    path.write_text(
        "id: resume-cost\n"
        'summary: "Cut spend by ${budget} yearly"\n'
        "experiences:\n"
        "  - title: FinOps\n"
        '    bullets: ["Saved ${oc.env:HOME} per ${x.y}"]\n',
        encoding="utf-8",
    )

    document = load_document(path)

    assert document.summary == "Cut spend by ${budget} yearly"
    assert document.experiences[0].bullets == ["Saved ${oc.env:HOME} per ${x.y}"]


@pytest.mark.unit
def test_load_document_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_document(tmp_path / "missing.yaml")


@pytest.mark.unit
def test_document_payload():
    assert document_payload({"document": {"id": "a"}}) == {"id": "a"}
    assert document_payload({"resume": {"id": "b"}}) == {"id": "b"}
    assert document_payload({"filename": "x"}) is None
    assert document_payload("not a body") is None
