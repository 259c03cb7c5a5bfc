"""
Default values for QUIRE resume structure.

Provides shared defaults used by:
- resume_data_structure.py (sections list when a document carries none)
- content_renderer.py (placeholders for missing entry fields)
- stylesheet.py and the rendering context (page geometry)
"""

from typing import Any, Dict, List

# Template used whenever a document's templateId is missing or unknown
DEFAULT_TEMPLATE_ID = "classic"

# Built-in section order for new documents
DEFAULT_SECTIONS: List[Dict[str, Any]] = [
    {"id": "contact", "type": "contact", "title": "Contact Information", "order": 0, "visible": True},
    {"id": "summary", "type": "summary", "title": "Professional Summary", "order": 1, "visible": True},
    {"id": "experience", "type": "experience", "title": "Work Experience", "order": 2, "visible": True},
    {"id": "education", "type": "education", "title": "Education", "order": 3, "visible": True},
    {"id": "skills", "type": "skills", "title": "Skills", "order": 4, "visible": True},
    {"id": "certifications", "type": "certifications", "title": "Certifications", "order": 5, "visible": True},
]

# Heading used when a built-in descriptor has a blank title
SECTION_HEADINGS = {section["type"]: section["title"] for section in DEFAULT_SECTIONS}

# Custom sections imported without an explicit order go after the built-ins
CUSTOM_SECTION_BASE_ORDER = len(DEFAULT_SECTIONS)

# Placeholders for missing entry fields
PLACEHOLDERS = {
    "full_name": "Your Name",
    "experience_title": "Position",
    "education_degree": "Degree",
    "certification_name": "Certification",
    "custom_item_title": "Item",
}

# Bucket for skills with a blank category
DEFAULT_SKILL_CATEGORY = "Other"

# Shown instead of the end date for current positions
CURRENT_POSITION_LABEL = "Present"

# A4 at 96 dpi with 15mm margins, shared by preview and both exports
DEFAULT_PAGE_GEOMETRY = {
    "page_width_px": 794,
    "page_height_px": 1123,
    "margin_px": 57,
    "page_size": "A4",
    "margin_css": "15mm",
}


def get_default_sections() -> List[Dict[str, Any]]:
    """Fresh copy of the built-in section descriptors."""
    return [dict(section) for section in DEFAULT_SECTIONS]
