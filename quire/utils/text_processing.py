"""
Rich text helpers.

Document fields such as the summary, bullets, and honors arrive as rich-text
HTML fragments from the editor. Rendering reduces them to plain text.
"""

import re

from bs4 import BeautifulSoup

BLOCK_TAGS = ["p", "br", "li", "ul", "ol", "div", "h1", "h2", "h3", "h4", "h5", "h6"]
WHITESPACE_PATTERN = re.compile(r"\s+")


def strip_html(content) -> str:
    """
    Strip tags from a rich-text fragment and decode entities.

    Block boundaries (<p>, <br>, <li>) collapse into single spaces. Text that
    merely contains angle brackets ("<200ms") is kept.

    Example:
        >>> strip_html("<p>Led <strong>5</strong> engineers</p>")
        'Led 5 engineers'
    """
    if not content or not isinstance(content, str):
        return ""

    soup = BeautifulSoup(content, "html.parser")
    for tag in soup.find_all(BLOCK_TAGS):
        tag.insert_before(" ")
        tag.insert_after(" ")
    return WHITESPACE_PATTERN.sub(" ", soup.get_text()).strip()


def is_empty_content(content) -> bool:
    """True when the fragment has no visible text once formatting is stripped."""
    return not strip_html(content)
