"""Mutation engine: create and delete annotation links in place."""

import logging

from ..errors import InvalidRangeError, NotAnAnnotationError
from .codec import decode, encode
from .document import Document, Marker
from .model import Occurrence

logger = logging.getLogger(__name__)


def delete_annotation(document: Document, identity: Marker | Occurrence | int) -> str:
    """
    Collapse the annotation link at identity back to plain text.

    A labelled link becomes its label. The space that followed the link is
    kept, unless the label already ends in whitespace, in which case that
    one space is dropped. A label-less link is removed and nothing else is
    touched. Returns the replacement text.

    Raises NotAnAnnotationError, leaving the document unchanged, when no
    annotation link starts at the resolved position or when the marker was
    already used for a deletion.
    """
    if isinstance(identity, Occurrence):
        identity = identity.marker
    if isinstance(identity, Marker) and identity.detached:
        raise NotAnAnnotationError(identity.position)
    pos = document.resolve(identity)
    text = document.text
    if pos < 0 or pos > len(text):
        raise NotAnAnnotationError(pos)

    link = document.parser.link_at(text, pos)
    if link is None:
        raise NotAnAnnotationError(pos)
    decoded = decode(link)
    if decoded is None:
        raise NotAnAnnotationError(pos, link.path)

    start, end = link.range.start, link.range.end
    if decoded.label:
        replacement = decoded.label
        if replacement[-1].isspace() and text[end:end + 1] in (" ", "\t"):
            end += 1
    else:
        replacement = ""

    document.replace(start, end, replacement)
    if isinstance(identity, Marker):
        document.detach(identity)
    logger.info("Deleted annotation at %d (%r)", start, decoded.note_path)
    return replacement


def insert_annotation(document: Document, start: int, end: int, note_path: str) -> Marker:
    """
    Wrap text [start, end) as the label of a new annotation link.

    An empty span inserts a label-less link at start. Returns a marker on
    the new link.
    """
    if start < 0 or end > len(document) or start > end:
        raise InvalidRangeError(start, end, len(document))
    label = document.text[start:end] or None
    encoded = encode(note_path, label)
    document.replace(start, end, encoded)
    logger.info("Inserted annotation at %d", start)
    return document.marker(start)
