"""Unit tests for TemplateRegistry and MarkupRegistry."""

from pathlib import Path

import pytest
from jinja2 import TemplateNotFound

from quire.contexts.templating.registries import MarkupRegistry
from quire.contexts.templating.template_registry import (
    TemplateRegistry,
    load_template_styles,
    resolve,
    webfont_url,
)


@pytest.mark.unit
def test_registry_loads_full_style_table():
    """All packaged templates are registered, in table order."""
    registry = TemplateRegistry()
    ids = registry.template_ids()

    assert len(ids) == 17
    assert ids[0] == "classic"
    assert "modern" in ids
    assert "tokyo" in ids


@pytest.mark.unit
def test_resolve_known_template():
    registry = TemplateRegistry()
    style = registry.resolve("modern")

    assert style.template_id == "modern"
    assert style.font_name == "Open Sans"
    assert style.accent_color == "#2563eb"
    assert style.font_stack == "'Open Sans', sans-serif"


@pytest.mark.unit
@pytest.mark.parametrize("template_id", ["", None, "nonexistent-template-xyz", 42, "   "])
def test_resolve_is_total(template_id):
    """Empty, missing, mistyped, and unknown ids all fall back to the default."""
    style = TemplateRegistry().resolve(template_id)

    assert style is not None
    assert style.template_id == "classic"
    assert style.font_name == "Georgia"
    assert style.accent_color == "#000000"


@pytest.mark.unit
def test_resolve_strips_whitespace():
    assert TemplateRegistry().resolve(" elegant ").template_id == "elegant"


@pytest.mark.unit
def test_resolution_caching():
    """Resolutions are cached per identifier and can be cleared."""
    registry = TemplateRegistry()

    first = registry.resolve("flat")
    assert registry.is_cached("flat")
    assert registry.resolve("flat") is first

    registry.clear_cache()
    assert not registry.is_cached("flat")


@pytest.mark.unit
def test_unknown_ids_are_not_cached():
    """Arbitrary template ids from requests resolve to the default without growing the cache."""
    registry = TemplateRegistry()

    for i in range(500):
        assert registry.resolve(f"made-up-{i}").template_id == "classic"
    registry.resolve(" flat ")

    assert registry._cache.keys() == {"flat"}
    assert not registry.is_cached("made-up-0")


@pytest.mark.unit
def test_is_registered():
    registry = TemplateRegistry()
    assert registry.is_registered("classic")
    assert not registry.is_registered("nonexistent-template-xyz")
    assert not registry.is_registered(None)


@pytest.mark.unit
def test_module_level_resolve_uses_packaged_table():
    assert resolve("nordic").template_id == "nordic"
    assert resolve("unknown").template_id == "classic"


@pytest.mark.unit
def test_webfont_url():
    """Webfont URL requests the family with every configured weight."""
    url = webfont_url(TemplateRegistry().resolve("modern"))

    assert url.startswith("https://fonts.googleapis.com/css2?family=Open+Sans:wght@")
    assert "400;600;700" in url
    assert url.endswith("&display=swap")


@pytest.mark.unit
def test_style_table_without_default_is_rejected(tmp_path):
    """A style table must define the fallback template."""
    table = tmp_path / "styles.yaml"
    table.write_text("modern:\n  font: Open Sans\n  family: sans-serif\n", encoding="utf-8")

    with pytest.raises(ValueError, match="classic"):
        load_template_styles(table)


@pytest.mark.unit
def test_style_table_defaults(tmp_path):
    """Missing weights, accent, and layout take their defaults."""
    table = tmp_path / "styles.yaml"
    table.write_text("classic:\n  font: Georgia\n  family: serif\n", encoding="utf-8")

    style = load_template_styles(table)["classic"]
    assert style.font_weights == (400, 700)
    assert style.accent_color == "#000000"
    assert style.layout_variant == "single-column"


# =============================================================================
# MarkupRegistry
# =============================================================================


@pytest.mark.unit
def test_markup_registry_init():
    registry = MarkupRegistry()
    assert registry.templates_path.exists()
    assert registry._cache == {}


@pytest.mark.unit
def test_markup_template_caching():
    registry = MarkupRegistry()

    template1 = registry.get_template("sections/experience.html")
    assert registry.is_cached("sections/experience.html")

    template2 = registry.get_template("sections/experience.html")
    assert template1 is template2

    registry.clear_cache()
    assert not registry.is_cached("sections/experience.html")


@pytest.mark.unit
def test_markup_template_not_found():
    with pytest.raises(TemplateNotFound):
        MarkupRegistry().get_template("sections/nonexistent")


@pytest.mark.unit
def test_markup_template_path():
    path = MarkupRegistry().get_template_path("sections/skills.html")

    assert isinstance(path, Path)
    assert path.name == "skills.html.jinja"
    assert path.exists()


@pytest.mark.unit
def test_html_templates_autoescape_and_css_does_not(tmp_path):
    """HTML fragments escape values; the stylesheet template does not."""
    (tmp_path / "sections").mkdir()
    (tmp_path / "sections" / "sample.html.jinja").write_text("{{ value }}", encoding="utf-8")
    (tmp_path / "sections" / "sample.css.jinja").write_text("{{ value }}", encoding="utf-8")

    registry = MarkupRegistry(tmp_path)

    assert registry.get_template("sections/sample.html").render(value="<b>") == "&lt;b&gt;"
    assert registry.get_template("sections/sample.css").render(value="<b>") == "<b>"
