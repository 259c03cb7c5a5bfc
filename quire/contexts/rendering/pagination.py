"""
Pagination Calculator

Estimates how many fixed-height pages a markup stream occupies by measuring
its total height on a measurement surface and dividing by the page content
height. The preview shows each page as a window onto the continuous stream
at offset i x page height; atomic units that straddle a window edge are
reported, not reflowed (the exports apply true break avoidance).
"""

import math
from typing import List

from quire.contexts.rendering.logger import _log_warning, log_pagination_result
from quire.contexts.rendering.render_data_structures import PageEstimate, Slice, UnitBox
from quire.contexts.rendering.surfaces import ApproximateMeasurementSurface, MeasurementSurface
from quire.contexts.templating.resume_components_data_structures import PageGeometry

_DEFAULT_GEOMETRY = PageGeometry()


def find_straddling_units(boxes: List[UnitBox], page_content_height: float) -> List[UnitBox]:
    """Atomic units cut by any page window boundary."""
    straddling = []
    for box in boxes:
        first_boundary = math.floor(box.top / page_content_height) + 1
        boundary = first_boundary * page_content_height
        if box.straddles(boundary):
            straddling.append(box)
    return straddling


def _fallback(surface_name: str, reason: str) -> PageEstimate:
    _log_warning(f"Measurement failed ({reason}); assuming one page")
    return PageEstimate(
        page_count=1,
        window_offsets=[0.0],
        surface_name=surface_name,
        measured=False,
    )


def estimate_pages(
    markup: str,
    page_content_width: float = _DEFAULT_GEOMETRY.content_width_px,
    page_content_height: float = _DEFAULT_GEOMETRY.content_height_px,
    surface: MeasurementSurface = None,
) -> PageEstimate:
    """
    Measure markup and window it into pages.

    Args:
        markup: Page document (or body fragment) to measure
        page_content_width: Layout width in CSS pixels
        page_content_height: Height of one page's content box in CSS pixels
        surface: Measurement surface (defaults to ApproximateMeasurementSurface)

    Returns:
        PageEstimate with page_count >= 1. Measurement failures never raise;
        they produce a one-page estimate with measured=False.
    """
    surface = surface or ApproximateMeasurementSurface()
    surface_name = getattr(surface, "name", type(surface).__name__)

    if page_content_width <= 0 or page_content_height <= 0:
        return _fallback(surface_name, f"invalid page box {page_content_width}x{page_content_height}")

    try:
        surface.attach(markup, page_content_width)
        height = surface.height()
        boxes = surface.unit_boxes()
    except Exception as e:
        return _fallback(surface_name, str(e))
    finally:
        surface.detach()

    if height < 0:
        return _fallback(surface_name, f"negative content height {height}")

    page_count = max(1, math.ceil(height / page_content_height))
    estimate = PageEstimate(
        page_count=page_count,
        content_height=height,
        window_offsets=[i * page_content_height for i in range(page_count)],
        clipped_units=find_straddling_units(boxes, page_content_height),
        surface_name=surface_name,
    )
    log_pagination_result(estimate, surface_name)
    return estimate


def paginate(
    markup: str,
    page_content_width: float = _DEFAULT_GEOMETRY.content_width_px,
    page_content_height: float = _DEFAULT_GEOMETRY.content_height_px,
    surface: MeasurementSurface = None,
) -> int:
    """
    Number of pages the markup occupies (always >= 1).

    Example:
        >>> paginate("")
        1
    """
    return estimate_pages(markup, page_content_width, page_content_height, surface).page_count


def plan_slices(boxes: List[UnitBox], total_height: float, page_content_height: float) -> List[Slice]:
    """
    Partition content into page-sized slices with break avoidance.

    Rules, applied per page:
    - a slice ends at most one page height below its start
    - an entry that crosses the end and fits on a page moves to the next slice
    - a header never ends a slice; it moves down with what follows it
    - a unit taller than a page is cut at the page boundary

    Returns:
        Slices covering [0, total_height] without gaps, at least one
    """
    if total_height <= 0:
        return [Slice(0.0, 0.0)]

    boxes = sorted(boxes, key=lambda b: b.top)
    slices = []
    start = 0.0

    while start < total_height - 0.5:
        end = min(start + page_content_height, total_height)

        if end < total_height:
            # Pull back to the top of any fitting unit cut by the page end
            moved = True
            while moved:
                moved = False
                for box in boxes:
                    if box.straddles(end) and box.top > start + 0.5 and box.height <= page_content_height:
                        end = box.top
                        moved = True

            # Keep a trailing header with its first entry
            inside = [b for b in boxes if b.top >= start - 0.5 and b.bottom <= end + 0.5]
            if inside and inside[-1].kind == "header" and inside[-1].top > start + 0.5:
                end = inside[-1].top

        if end <= start + 0.5:
            end = min(start + page_content_height, total_height)

        slices.append(Slice(start, end))
        start = end

    return slices
