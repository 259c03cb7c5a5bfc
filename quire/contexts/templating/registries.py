"""
Templating Registries

Centralized registry for loading and caching the Jinja2 markup templates
(section fragments, page stylesheet, page documents).
"""

import os
from pathlib import Path
from typing import Dict

from dotenv import load_dotenv
from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    TemplateNotFound,
    select_autoescape,
)

load_dotenv()
MARKUP_TEMPLATES_PATH = Path(
    os.getenv("QUIRE_MARKUP_TEMPLATES_PATH", Path(__file__).parent / "templates")
)


class MarkupRegistry:
    """
    Registry for loading and caching Jinja2 templates for markup generation.

    Templates are stored under templates/{group}/{name}.{html|css}.jinja:
    - sections/: one fragment template per section type
    - structure/: page stylesheet, standalone page document, preview page stack

    HTML templates are autoescaped; the stylesheet template is not.
    """

    def __init__(self, templates_path: Path = None):
        """
        Initialize the markup registry.

        Args:
            templates_path: Base path for template groups. Defaults to
                           QUIRE_MARKUP_TEMPLATES_PATH from environment
        """
        if templates_path is None:
            templates_path = MARKUP_TEMPLATES_PATH

        self.templates_path = templates_path
        self._cache: Dict[str, Template] = {}

        self.env = Environment(
            loader=FileSystemLoader(str(templates_path)),
            # Catches silent failures
            undefined=StrictUndefined,
            autoescape=select_autoescape(enabled_extensions=("html.jinja",), default=False),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
        )

    def get_template(self, name: str) -> Template:
        """
        Get a template by name (e.g., 'sections/experience.html'), loading and caching it.

        Raises:
            TemplateNotFound: If template file doesn't exist
            TemplateSyntaxError: If template has Jinja2 syntax errors
        """
        if name in self._cache:
            return self._cache[name]

        template_file = f"{name}.jinja"

        try:
            template = self.env.get_template(template_file)
        except TemplateNotFound as e:
            raise TemplateNotFound(
                f"Markup template '{name}' not found at {self.templates_path / template_file}"
            ) from e

        self._cache[name] = template
        return template

    def get_template_path(self, name: str) -> Path:
        """File path for a template name."""
        return self.templates_path / f"{name}.jinja"

    def clear_cache(self):
        """Clear the template cache."""
        self._cache.clear()

    def is_cached(self, name: str) -> bool:
        return name in self._cache
