"""
PDF processing utilities for checking exported documents.

Helper functions:
    page_count: Quick page count without full extraction.
    extract_page_text: Per-page text via pdfplumber.
    normalize_for_matching: Text normalization for fuzzy matching.
    find_section_header: Find header text in a list of lines.
"""

import io
from pathlib import Path
from typing import List, Optional, Union

import pdfplumber
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

PDFSource = Union[str, Path, bytes]


def _open_stream(source: PDFSource):
    if isinstance(source, bytes):
        return io.BytesIO(source)
    return str(source)


def page_count(source: PDFSource) -> Optional[int]:
    """Get page count from a PDF path or bytes, or None if unreadable."""
    try:
        reader = PdfReader(_open_stream(source))
        return len(reader.pages)
    except (PdfReadError, OSError, ValueError):
        return None


def extract_page_text(source: PDFSource) -> List[str]:
    """
    Extract text for each page of a PDF.

    Rasterized exports have no text layer, so every entry is an empty string
    for them.

    Returns:
        One string per page, in page order
    """
    with pdfplumber.open(_open_stream(source)) as pdf:
        return [page.extract_text() or "" for page in pdf.pages]


def normalize_for_matching(text: str) -> str:
    """Keep only lowercase alphanumeric characters for fuzzy text matching."""
    return "".join(c for c in text.lower() if c.isalnum())


def find_section_header(section_name: str, lines: List[str]) -> Optional[int]:
    """Find index of section header in lines using normalized exact match, or None."""
    section_norm = normalize_for_matching(section_name)

    for i, text in enumerate(lines):
        # Exact match prevents "Skills" matching "Skills (continued)"
        if section_norm == normalize_for_matching(text):
            return i

    return None
