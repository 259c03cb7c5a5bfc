"""
Section Composer

Linearizes a document's built-in section descriptors and its custom sections
into one ordered sequence.

Ordering rule: built-in descriptors (in declared sequence) followed by one
descriptor per custom section (in document order), stable-sorted by `order`.
Equal orders keep that concatenation order, so composition is deterministic.
"""

from typing import List

from quire.contexts.templating.exceptions import DuplicateSectionError
from quire.contexts.templating.logger import _log_warning, log_composition
from quire.contexts.templating.resume_data_structure import (
    Document,
    SectionDescriptor,
    SectionType,
)


def _custom_descriptors(document: Document) -> List[SectionDescriptor]:
    descriptors = []
    seen = set()
    for custom in document.custom_sections:
        if custom.id in seen:
            raise DuplicateSectionError(custom.id)
        seen.add(custom.id)
        descriptors.append(
            SectionDescriptor(
                id=custom.id,
                type=SectionType.CUSTOM,
                title=custom.title,
                order=custom.order,
                visible=custom.visible,
            )
        )
    return descriptors


def compose_all(document: Document) -> List[SectionDescriptor]:
    """
    Ordered section descriptors, including hidden ones.

    Used where visibility is edited (reordering), not for rendering.

    Raises:
        DuplicateSectionError: If two custom sections share an id
    """
    built_ins = []
    for descriptor in document.sections:
        if descriptor.type is SectionType.CUSTOM:
            # Custom descriptors come from the custom sections themselves
            continue
        if not isinstance(descriptor.type, SectionType):
            _log_warning(f"Dropping section '{descriptor.id}' with unknown type {descriptor.type!r}")
            continue
        built_ins.append(descriptor)

    # sorted() is stable, which gives the tie-break
    return sorted(built_ins + _custom_descriptors(document), key=lambda d: d.order)


def compose(document: Document) -> List[SectionDescriptor]:
    """
    Ordered, visible section descriptors for rendering.

    Args:
        document: Document snapshot

    Returns:
        Descriptors with non-decreasing `order`, hidden sections removed
    """
    ordered = compose_all(document)
    visible = [d for d in ordered if d.visible]
    log_composition(document.id or "<unsaved>", len(ordered), len(visible))
    return visible
