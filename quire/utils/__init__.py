"""
Shared utilities for QUIRE.

Common functionality used across contexts:
- Logging setup and pipeline event log
- Timestamps
- PDF inspection
- Rich text helpers
"""

from quire.utils.text_processing import is_empty_content, strip_html
from quire.utils.timestamp import now, now_exact, today

__all__ = ["is_empty_content", "strip_html", "now", "now_exact", "today"]
