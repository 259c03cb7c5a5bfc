"""
Resume Document Structure

Defines the structured representation of a resume document for QUIRE.
This structure is the interface between the editing layer (which produces
documents as camelCase JSON) and the templating and rendering contexts.

Loading is best-effort: any nested field that is missing or has the wrong
type degrades to an empty value so the rest of the document still renders.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from omegaconf import OmegaConf

from quire.contexts.templating.defaults import (
    CUSTOM_SECTION_BASE_ORDER,
    DEFAULT_TEMPLATE_ID,
    get_default_sections,
)
from quire.contexts.templating.exceptions import InvalidDocumentStructureError


class SectionType(str, Enum):
    """Closed set of section kinds a descriptor may refer to."""

    CONTACT = "contact"
    SUMMARY = "summary"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    SKILLS = "skills"
    CERTIFICATIONS = "certifications"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: Any) -> Optional["SectionType"]:
        """Return the matching member, or None for unknown values."""
        try:
            return cls(value)
        except ValueError:
            return None


# =============================================================================
# Field coercion
# =============================================================================


def _get(data: Mapping, *keys: str, default: Any = None) -> Any:
    """First present key among camelCase/snake_case spellings."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _bool(value: Any, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    if isinstance(value, (int, float)):
        return bool(value)
    return default


def _number(value: Any, default: float) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _mapping(value: Any) -> Mapping:
    return value if isinstance(value, Mapping) else {}


def _records(value: Any) -> List[Mapping]:
    """List of mapping entries; anything else in the list is dropped."""
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def _strings(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [_str(item) for item in value]


# =============================================================================
# Document components
# =============================================================================


@dataclass
class ContactInfo:
    """
    Contact block shown in the document header.

    Attributes:
        full_name: Full display name
        email: Email address
        phone: Phone number
        location: City / region
        linkedin: LinkedIn profile link
        website: Personal website link
        photo: Optional photo URL or data URI
    """

    full_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    website: str = ""
    photo: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "ContactInfo":
        data = _mapping(data)
        photo = _str(_get(data, "photo", "photoUrl", "photo_url"))
        return cls(
            full_name=_str(_get(data, "fullName", "full_name", "name")),
            email=_str(_get(data, "email")),
            phone=_str(_get(data, "phone")),
            location=_str(_get(data, "location")),
            linkedin=_str(_get(data, "linkedin")),
            website=_str(_get(data, "website")),
            photo=photo or None,
        )


@dataclass
class Experience:
    """
    One work experience entry.

    Dates are free-form display strings; they are never parsed as calendar dates.
    When `current` is True the end date is ignored for display.
    """

    id: str = ""
    company: str = ""
    title: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    current: bool = False
    bullets: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping, index: int = 0) -> "Experience":
        return cls(
            id=_str(_get(data, "id")) or f"experience-{index}",
            company=_str(_get(data, "company")),
            title=_str(_get(data, "title")),
            location=_str(_get(data, "location")),
            start_date=_str(_get(data, "startDate", "start_date")),
            end_date=_str(_get(data, "endDate", "end_date")),
            current=_bool(_get(data, "current")),
            bullets=_strings(_get(data, "bullets")),
        )


@dataclass
class Education:
    """One education record."""

    id: str = ""
    institution: str = ""
    degree: str = ""
    field_of_study: str = ""
    location: str = ""
    batch_start: str = ""
    batch_end: str = ""
    gpa: Optional[str] = None
    honors: Optional[str] = None

    @property
    def batch(self) -> str:
        """Display range: "start - end", or whichever side is present."""
        if self.batch_start and self.batch_end:
            return f"{self.batch_start} - {self.batch_end}"
        return self.batch_start or self.batch_end

    @classmethod
    def from_dict(cls, data: Mapping, index: int = 0) -> "Education":
        return cls(
            id=_str(_get(data, "id")) or f"education-{index}",
            institution=_str(_get(data, "institution")),
            degree=_str(_get(data, "degree")),
            field_of_study=_str(_get(data, "field", "fieldOfStudy", "field_of_study")),
            location=_str(_get(data, "location")),
            batch_start=_str(_get(data, "batchStart", "batch_start")),
            batch_end=_str(_get(data, "batchEnd", "batch_end", "graduationDate")),
            gpa=_str(_get(data, "gpa")) or None,
            honors=_str(_get(data, "honors")) or None,
        )


@dataclass
class Skill:
    """A named skill with a free-form display category."""

    id: str = ""
    name: str = ""
    category: str = ""

    @classmethod
    def from_dict(cls, data: Mapping, index: int = 0) -> "Skill":
        return cls(
            id=_str(_get(data, "id")) or f"skill-{index}",
            name=_str(_get(data, "name")),
            category=_str(_get(data, "category")),
        )


@dataclass
class Certification:
    """A certification or license."""

    id: str = ""
    name: str = ""
    issuer: str = ""
    date: str = ""
    expiration_date: Optional[str] = None
    credential_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping, index: int = 0) -> "Certification":
        return cls(
            id=_str(_get(data, "id")) or f"certification-{index}",
            name=_str(_get(data, "name")),
            issuer=_str(_get(data, "issuer")),
            date=_str(_get(data, "date")),
            expiration_date=_str(_get(data, "expirationDate", "expiration_date")) or None,
            credential_id=_str(_get(data, "credentialId", "credential_id")) or None,
        )


@dataclass
class CustomSectionItem:
    """One entry of a user-defined section (a project, an award, ...)."""

    id: str = ""
    title: str = ""
    technologies: Optional[str] = None
    date: Optional[str] = None
    bullets: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping, index: int = 0) -> "CustomSectionItem":
        return cls(
            id=_str(_get(data, "id")) or f"item-{index}",
            title=_str(_get(data, "title")),
            technologies=_str(_get(data, "technologies")) or None,
            date=_str(_get(data, "date")) or None,
            bullets=_strings(_get(data, "bullets")),
        )


@dataclass
class CustomSection:
    """User-defined section with its own title, ordering, and visibility."""

    id: str
    title: str = ""
    items: List[CustomSectionItem] = field(default_factory=list)
    show_technologies: bool = False
    order: float = 0
    visible: bool = True

    @classmethod
    def from_dict(cls, data: Mapping, index: int = 0) -> "CustomSection":
        return cls(
            id=_str(_get(data, "id")) or f"custom-{index}",
            title=_str(_get(data, "title")),
            items=[
                CustomSectionItem.from_dict(item, i)
                for i, item in enumerate(_records(_get(data, "items")))
            ],
            show_technologies=_bool(_get(data, "showTechnologies", "show_technologies")),
            order=_number(_get(data, "order"), CUSTOM_SECTION_BASE_ORDER + index),
            visible=_bool(_get(data, "visible"), default=True),
        )


@dataclass(frozen=True)
class SectionDescriptor:
    """
    Ordering and visibility metadata for one content block.

    For custom sections, `id` cross-references a CustomSection.
    """

    id: str
    type: SectionType
    title: str = ""
    order: float = 0
    visible: bool = True

    @classmethod
    def from_dict(cls, data: Mapping, index: int = 0) -> Optional["SectionDescriptor"]:
        """Build a descriptor, or None when its type is not a known section type."""
        section_type = SectionType.parse(_get(data, "type"))
        if section_type is None:
            return None
        return cls(
            id=_str(_get(data, "id")) or section_type.value,
            type=section_type,
            title=_str(_get(data, "title")),
            order=_number(_get(data, "order"), index),
            visible=_bool(_get(data, "visible"), default=True),
        )


# =============================================================================
# Aggregate root
# =============================================================================


@dataclass
class Document:
    """
    Structured representation of a complete resume document.

    The aggregate root shared by every backend. Treated as an immutable snapshot
    for the duration of one render, measure, or export cycle.

    Attributes:
        id: Stable identifier
        name: Display name of the document (not the person's name)
        contact: Contact block
        summary: Rich-text professional summary
        experiences, education, skills, certifications: Ordered content collections
        custom_sections: User-defined sections, in document order
        sections: Built-in section descriptors (order and visibility)
        template_id: Template identifier; unknown ids resolve to the default style
        created_at, updated_at: ISO timestamps from the editing layer
    """

    id: str = ""
    name: str = ""
    contact: ContactInfo = field(default_factory=ContactInfo)
    summary: str = ""
    experiences: List[Experience] = field(default_factory=list)
    education: List[Education] = field(default_factory=list)
    skills: List[Skill] = field(default_factory=list)
    certifications: List[Certification] = field(default_factory=list)
    custom_sections: List[CustomSection] = field(default_factory=list)
    sections: List[SectionDescriptor] = field(
        default_factory=lambda: [
            SectionDescriptor.from_dict(s, i) for i, s in enumerate(get_default_sections())
        ]
    )
    template_id: str = DEFAULT_TEMPLATE_ID
    created_at: str = ""
    updated_at: str = ""

    def find_custom_section(self, section_id: str) -> Optional[CustomSection]:
        """First custom section with the given id, or None."""
        for custom in self.custom_sections:
            if custom.id == section_id:
                return custom
        return None

    @property
    def export_basename(self) -> str:
        """Default export filename stem (full name, else "resume")."""
        return self.contact.full_name.strip() or "resume"

    @classmethod
    def from_dict(cls, data: Any) -> "Document":
        """
        Build a Document from an editor payload.

        Accepts camelCase (editor) and snake_case keys. Missing or mistyped nested
        fields degrade to empty values. Duplicate custom section ids are made unique
        by suffixing so no two sections alias the same content.

        Raises:
            InvalidDocumentStructureError: If data is not a mapping
        """
        if not isinstance(data, Mapping):
            raise InvalidDocumentStructureError(
                f"Resume document must be an object, got {type(data).__name__}"
            )

        raw_sections = _get(data, "sections")
        if isinstance(raw_sections, (list, tuple)):
            section_records = _records(raw_sections)
        else:
            section_records = get_default_sections()

        sections = []
        for i, record in enumerate(section_records):
            descriptor = SectionDescriptor.from_dict(record, i)
            if descriptor is not None:
                sections.append(descriptor)

        custom_sections = [
            CustomSection.from_dict(record, i)
            for i, record in enumerate(_records(_get(data, "customSections", "custom_sections")))
        ]
        _dedupe_custom_ids(custom_sections)

        return cls(
            id=_str(_get(data, "id")),
            name=_str(_get(data, "name")),
            contact=ContactInfo.from_dict(_get(data, "contact")),
            summary=_str(_get(data, "summary")),
            experiences=[
                Experience.from_dict(r, i)
                for i, r in enumerate(_records(_get(data, "experiences", "experience")))
            ],
            education=[
                Education.from_dict(r, i) for i, r in enumerate(_records(_get(data, "education")))
            ],
            skills=[Skill.from_dict(r, i) for i, r in enumerate(_records(_get(data, "skills")))],
            certifications=[
                Certification.from_dict(r, i)
                for i, r in enumerate(_records(_get(data, "certifications")))
            ],
            custom_sections=custom_sections,
            sections=sections,
            template_id=_str(_get(data, "templateId", "template_id")),
            created_at=_str(_get(data, "createdAt", "created_at")),
            updated_at=_str(_get(data, "updatedAt", "updated_at")),
        )


def _dedupe_custom_ids(custom_sections: List[CustomSection]) -> None:
    seen = set()
    for custom in custom_sections:
        base_id = custom.id
        candidate = base_id
        suffix = 2
        while candidate in seen:
            candidate = f"{base_id}-{suffix}"
            suffix += 1
        custom.id = candidate
        seen.add(candidate)


def load_document(path: Union[str, Path]) -> Document:
    """
    Load a Document from a JSON or YAML file.

    Both formats are read through OmegaConf (JSON is valid YAML).

    Raises:
        FileNotFoundError: If path does not exist
        InvalidDocumentStructureError: If the file root is not a mapping
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Document file not found: {path}")

    loaded = OmegaConf.to_container(OmegaConf.load(path), resolve=False)

    # Files saved by the export API wrap the document
    if isinstance(loaded, dict) and isinstance(loaded.get("document"), dict):
        loaded = loaded["document"]

    return Document.from_dict(loaded)


def document_payload(data: Dict[str, Any]) -> Optional[Any]:
    """Extract the document from a request body ({document} or {resume})."""
    if not isinstance(data, Mapping):
        return None
    return _get(data, "document", "resume")
