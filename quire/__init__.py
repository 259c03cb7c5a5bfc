"""
QUIRE - Composable resume rendering with consistent pagination and export

A domain-driven resume rendering system that turns a structured resume document
into a paginated on-screen preview and print-quality PDF files, keeping all
outputs in agreement on section order, page count, and visual template.

Architecture:
- Templating Context: Document model, template styles, section composition, markup
- Rendering Context: Pagination, interactive preview, client and server PDF export
"""

__version__ = "0.1.0"
