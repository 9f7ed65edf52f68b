"""Document scanner: recover every annotation link in a scope."""

import logging
from typing import Iterator

from .codec import decode
from .document import Document
from .model import PLACEHOLDER, WHOLE, AnnotationLink, LinkConstruct, Occurrence, Scope
from .ports import LinkScanner

logger = logging.getLogger(__name__)


def iter_annotations(
    text: str,
    links: LinkScanner,
    scope: Scope = WHOLE,
) -> Iterator[tuple[LinkConstruct, AnnotationLink]]:
    """Yield (construct, decoded link) for every annotation link in scope."""
    start, end = scope.bounds(len(text))
    for link in links.iter_links(text, start, end):
        if not link.is_annotation:
            continue
        decoded = decode(link)
        if decoded is not None:
            yield link, decoded


def make_occurrence(
    document: Document,
    link: LinkConstruct,
    decoded: AnnotationLink,
    placeholder: str = PLACEHOLDER,
) -> Occurrence:
    return Occurrence(
        marker=document.marker(link.range.start),
        display_text=decoded.label if decoded.label else placeholder,
        note_path=decoded.note_path,
        label=decoded.label,
        range=link.range,
    )


def scan(
    document: Document,
    scope: Scope = WHOLE,
    placeholder: str = PLACEHOLDER,
) -> list[Occurrence]:
    """
    List every annotation link in scope, in document order.

    Each occurrence carries a live marker at the link start, so it can be
    acted on after edits elsewhere in the document. An empty list means
    no notes were found.
    """
    result = [
        make_occurrence(document, link, decoded, placeholder)
        for link, decoded in iter_annotations(document.text, document.parser, scope)
    ]
    logger.debug("Scanned %d annotation(s) in %s", len(result), scope)
    return result
