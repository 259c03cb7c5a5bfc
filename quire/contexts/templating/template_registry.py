"""
Template Registry

Maps template identifiers to resolved style configurations (font, accent
color, layout). The table is closed: it is read once from template_styles.yaml
and any identifier not in it resolves to the default template.
"""

import os
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import quote_plus

from dotenv import load_dotenv
from omegaconf import OmegaConf

from quire.contexts.templating.defaults import DEFAULT_TEMPLATE_ID
from quire.contexts.templating.logger import log_template_fallback
from quire.contexts.templating.resume_components_data_structures import StyleConfiguration

load_dotenv()
TEMPLATE_STYLES_PATH = Path(
    os.getenv("QUIRE_TEMPLATE_STYLES_PATH", Path(__file__).parent / "template_styles.yaml")
)
WEBFONT_BASE_URL = os.getenv("QUIRE_WEBFONT_BASE_URL", "https://fonts.googleapis.com/css2")


def load_template_styles(config_path: Path = None) -> Dict[str, StyleConfiguration]:
    """
    Load the style table into StyleConfiguration objects.

    Args:
        config_path: Optional path to a style table (defaults to QUIRE_TEMPLATE_STYLES_PATH)

    Returns:
        Dict mapping template id to its style

    Raises:
        ValueError: If the table does not contain the default template
    """
    if config_path is None:
        config_path = TEMPLATE_STYLES_PATH

    table = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)

    styles = {}
    for template_id, entry in table.items():
        styles[template_id] = StyleConfiguration(
            template_id=template_id,
            font_name=entry["font"],
            font_family_fallback=entry["family"],
            font_weights=tuple(int(w) for w in entry.get("weights", [400, 700])),
            accent_color=entry.get("accent", "#000000"),
            layout_variant=entry.get("layout", "single-column"),
        )

    if DEFAULT_TEMPLATE_ID not in styles:
        raise ValueError(
            f"Style table {config_path} must define the default template '{DEFAULT_TEMPLATE_ID}'"
        )

    return styles


class TemplateRegistry:
    """
    Registry resolving template identifiers to style configurations.

    resolve() is total: empty, None, and unknown identifiers all resolve to the
    default template. Registered identifiers are cached after first use.
    """

    def __init__(self, config_path: Path = None):
        """
        Initialize the template registry.

        Args:
            config_path: Style table location. Defaults to QUIRE_TEMPLATE_STYLES_PATH
        """
        self.config_path = config_path or TEMPLATE_STYLES_PATH
        self._styles = load_template_styles(self.config_path)
        self._cache: Dict[str, StyleConfiguration] = {}

    @property
    def default(self) -> StyleConfiguration:
        return self._styles[DEFAULT_TEMPLATE_ID]

    def resolve(self, template_id: Optional[str]) -> StyleConfiguration:
        """
        Resolve a template identifier to its style.

        Unknown identifiers are not cached; each one resolves to the default.

        Args:
            template_id: Any value; non-strings and unknown ids fall back to the default

        Returns:
            A fully populated StyleConfiguration (never None)
        """
        key = template_id.strip() if isinstance(template_id, str) else ""

        if key in self._cache:
            return self._cache[key]

        style = self._styles.get(key)
        if style is None:
            log_template_fallback(template_id, DEFAULT_TEMPLATE_ID)
            return self.default

        self._cache[key] = style
        return style

    def template_ids(self) -> List[str]:
        """Registered template identifiers, in table order."""
        return list(self._styles)

    def is_registered(self, template_id: str) -> bool:
        return isinstance(template_id, str) and template_id.strip() in self._styles

    def is_cached(self, template_id: str) -> bool:
        return template_id in self._cache

    def clear_cache(self):
        """Clear the resolution cache."""
        self._cache.clear()


def webfont_url(style: StyleConfiguration) -> str:
    """
    Webfont stylesheet URL for a style.

    Example:
        >>> webfont_url(registry.resolve("modern"))
        'https://fonts.googleapis.com/css2?family=Open+Sans:wght@400;600;700&display=swap'
    """
    family = quote_plus(style.font_name)
    weights = ";".join(str(w) for w in style.font_weights)
    return f"{WEBFONT_BASE_URL}?family={family}:wght@{weights}&display=swap"


_default_registry: Optional[TemplateRegistry] = None


def get_registry() -> TemplateRegistry:
    """Process-wide registry loaded from the packaged style table."""
    global _default_registry
    if _default_registry is None:
        _default_registry = TemplateRegistry()
    return _default_registry


def resolve(template_id: Optional[str]) -> StyleConfiguration:
    """Resolve a template identifier using the process-wide registry."""
    return get_registry().resolve(template_id)
