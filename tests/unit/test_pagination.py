"""Unit tests for page estimation, slice planning, and measurement surfaces."""

import pytest

from quire.contexts.rendering.exceptions import MeasurementError
from quire.contexts.rendering.pagination import (
    estimate_pages,
    find_straddling_units,
    paginate,
    plan_slices,
)
from quire.contexts.rendering.render_data_structures import Slice, UnitBox
from quire.contexts.rendering.surfaces import ApproximateMeasurementSurface
from quire.contexts.templating.content_renderer import render_document
from quire.contexts.templating.resume_data_structure import Document
from quire.contexts.templating.stylesheet import build_page_document

PAGE = 1009


class FakeSurface:
    """Measurement surface reporting a fixed height and boxes."""

    name = "fake"

    def __init__(self, height=0.0, boxes=(), fail_on=None):
        self._height = height
        self._boxes = list(boxes)
        self.fail_on = fail_on
        self.attached_width = None
        self.detached = False

    def attach(self, markup, width):
        if self.fail_on == "attach":
            raise MeasurementError("layout engine unavailable")
        self.attached_width = width

    def height(self):
        if self.fail_on == "height":
            raise RuntimeError("lost the page")
        return self._height

    def unit_boxes(self):
        return list(self._boxes)

    def detach(self):
        self.detached = True


def _page_document(document: Document) -> str:
    return build_page_document(render_document(document), include_webfont=False)


# =============================================================================
# estimate_pages / paginate
# =============================================================================


@pytest.mark.unit
@pytest.mark.parametrize(
    "height, expected",
    [(1.0, 1), (1009.0, 1), (1009.5, 2), (2018.0, 2), (2500.0, 3)],
)
def test_page_count_is_ceiling_of_height(height, expected):
    assert paginate("<p>x</p>", surface=FakeSurface(height)) == expected


@pytest.mark.unit
def test_empty_markup_is_one_page():
    assert paginate("") == 1
    assert paginate("", surface=FakeSurface(0.0)) == 1


@pytest.mark.unit
def test_zero_height_is_a_measured_page():
    """An empty document is valid input, not a measurement failure."""
    estimate = estimate_pages("", surface=FakeSurface(0.0))

    assert estimate.measured is True
    assert estimate.page_count == 1
    assert estimate.window_offsets == [0.0]
    assert estimate.content_height == 0.0


@pytest.mark.unit
def test_estimate_window_offsets():
    estimate = estimate_pages("<p>x</p>", surface=FakeSurface(2500.0))

    assert estimate.page_count == 3
    assert estimate.window_offsets == [0, 1009, 2018]
    assert estimate.content_height == 2500.0
    assert estimate.confidence == "approximate"
    assert estimate.surface_name == "fake"
    assert estimate.measured is True


@pytest.mark.unit
def test_surface_receives_content_width():
    surface = FakeSurface(100.0)
    estimate_pages("<p>x</p>", page_content_width=500, surface=surface)

    assert surface.attached_width == 500
    assert surface.detached


@pytest.mark.unit
@pytest.mark.parametrize("fail_on", ["attach", "height"])
def test_measurement_failure_falls_back_to_one_page(fail_on):
    """Measurement errors never propagate; the surface is still released."""
    surface = FakeSurface(5000.0, fail_on=fail_on)
    estimate = estimate_pages("<p>x</p>", surface=surface)

    assert estimate.page_count == 1
    assert estimate.measured is False
    assert estimate.window_offsets == [0.0]
    assert surface.detached


@pytest.mark.unit
def test_invalid_page_box_falls_back():
    surface = FakeSurface(5000.0)

    assert estimate_pages("<p>x</p>", page_content_width=0, surface=surface).measured is False
    assert estimate_pages("<p>x</p>", page_content_height=-5, surface=surface).page_count == 1


@pytest.mark.unit
def test_clipped_units_reported():
    boxes = [
        UnitBox("header", 0, 20, "Experience"),
        UnitBox("entry", 20, 900, "Engineer"),
        UnitBox("entry", 900, 1100, "Analyst"),
        UnitBox("entry", 1100, 1500, "Intern"),
    ]
    estimate = estimate_pages("<p>x</p>", surface=FakeSurface(1500.0, boxes))

    assert estimate.page_count == 2
    assert [u.label for u in estimate.clipped_units] == ["Analyst"]


@pytest.mark.unit
def test_find_straddling_units_ignores_touching_edges():
    boxes = [UnitBox("entry", 0, 1009), UnitBox("entry", 1009, 2018), UnitBox("entry", 2000, 2100)]

    assert find_straddling_units(boxes, PAGE) == [UnitBox("entry", 2000, 2100)]


# =============================================================================
# plan_slices
# =============================================================================


def _assert_partition(slices, total):
    assert slices[0].top == 0
    assert slices[-1].bottom == pytest.approx(total)
    for previous, current in zip(slices, slices[1:]):
        assert previous.bottom == current.top
    for band in slices:
        assert 0 < band.height <= PAGE


@pytest.mark.unit
def test_plan_slices_single_page():
    assert plan_slices([UnitBox("entry", 0, 400)], 400, PAGE) == [Slice(0, 400)]


@pytest.mark.unit
def test_plan_slices_empty_content():
    assert plan_slices([], 0, PAGE) == [Slice(0.0, 0.0)]


@pytest.mark.unit
def test_plan_slices_moves_straddling_entry_and_its_header():
    boxes = [
        UnitBox("header", 0, 20, "Experience"),
        UnitBox("entry", 20, 300),
        UnitBox("entry", 300, 700),
        UnitBox("header", 700, 720, "Education"),
        UnitBox("entry", 720, 1100),
    ]
    slices = plan_slices(boxes, 1100, PAGE)

    # Entry at 720 would be cut; its header moves down with it
    assert slices == [Slice(0, 700), Slice(700, 1100)]


@pytest.mark.unit
def test_plan_slices_cuts_units_taller_than_a_page():
    slices = plan_slices([UnitBox("entry", 0, 2500)], 2500, PAGE)

    assert slices == [Slice(0, 1009), Slice(1009, 2018), Slice(2018, 2500)]


@pytest.mark.unit
def test_plan_slices_never_cuts_fitting_units():
    """Every boundary falls between units for any run of page-sized entries."""
    heights = [120, 340, 80, 500, 60, 610, 240, 90, 700, 35, 410, 150, 980, 55, 300]
    boxes = []
    cursor = 0.0
    for i, height in enumerate(heights):
        if i % 4 == 0:
            boxes.append(UnitBox("header", cursor, cursor + 22, f"Section {i}"))
            cursor += 22
        boxes.append(UnitBox("entry", cursor, cursor + height, f"Entry {i}"))
        cursor += height

    slices = plan_slices(boxes, cursor, PAGE)

    _assert_partition(slices, cursor)
    for band in slices[:-1]:
        assert not any(box.straddles(band.bottom) for box in boxes)
        last_inside = [b for b in boxes if b.bottom <= band.bottom + 0.5][-1]
        assert last_inside.kind != "header"


# =============================================================================
# ApproximateMeasurementSurface
# =============================================================================


@pytest.mark.unit
def test_approximate_surface_one_experience_is_one_page(one_experience_document):
    estimate = estimate_pages(_page_document(one_experience_document))

    assert estimate.page_count == 1
    assert estimate.measured is True
    assert estimate.surface_name == "approximate"
    assert 0 < estimate.content_height < PAGE


@pytest.mark.unit
def test_approximate_surface_long_document_spans_pages():
    bullet = "Delivered a measurable improvement to a long-running internal system " * 3
    document = Document.from_dict(
        {
            "contact": {"fullName": "Grace Hopper"},
            "experiences": [
                {"title": f"Role {i}", "company": "Navy", "bullets": [bullet] * 5}
                for i in range(40)
            ],
        }
    )

    assert paginate(_page_document(document)) > 1


@pytest.mark.unit
def test_approximate_surface_boxes(one_experience_document):
    surface = ApproximateMeasurementSurface()
    surface.attach(_page_document(one_experience_document), 680)
    boxes = surface.unit_boxes()
    height = surface.height()
    surface.detach()

    assert [b.kind for b in boxes] == ["entry", "header", "entry"]
    assert [b.label for b in boxes] == ["Grace Hopper", "Work Experience", "Programmer"]
    assert all(0 <= b.top < b.bottom <= height for b in boxes)


@pytest.mark.unit
def test_approximate_surface_text_wraps_with_width(one_experience_document):
    markup = _page_document(one_experience_document)

    narrow = ApproximateMeasurementSurface()
    narrow.attach(markup, 120)
    wide = ApproximateMeasurementSurface()
    wide.attach(markup, 680)

    assert narrow.height() > wide.height()


@pytest.mark.unit
def test_approximate_surface_requires_attach():
    surface = ApproximateMeasurementSurface()

    with pytest.raises(MeasurementError):
        surface.height()
    with pytest.raises(MeasurementError):
        surface.attach("<p>x</p>", 0)


@pytest.mark.unit
def test_empty_custom_section_adds_no_height(one_experience_payload):
    """A custom section with zero items composes but contributes nothing to the measured height."""
    with_custom = dict(
        one_experience_payload,
        customSections=[{"id": "projects", "title": "Projects", "order": 6, "items": []}],
    )

    baseline = estimate_pages(_page_document(Document.from_dict(one_experience_payload)))
    extended = estimate_pages(_page_document(Document.from_dict(with_custom)))

    assert extended.content_height == baseline.content_height
    assert extended.page_count == baseline.page_count == 1
