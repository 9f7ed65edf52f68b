"""In-memory document text with edit-tracking position markers."""

import logging
import weakref

from ..errors import InvalidRangeError
from .model import Range
from .ports import DocumentParser

logger = logging.getLogger(__name__)


def splice(text: str, span: Range | tuple[int, int], replacement: str) -> str:
    """
    Return text with span [start, end) replaced.

    Pure counterpart of Document.replace; raises InvalidRangeError for spans
    outside the text or with start > end.
    """
    start, end = (span.start, span.end) if isinstance(span, Range) else span
    if start < 0 or end > len(text) or start > end:
        raise InvalidRangeError(start, end, len(text))
    return text[:start] + replacement + text[end:]


class Marker:
    """
    A position that follows edits made through its Document.

    Text inserted exactly at the marker pushes it forward, so it keeps
    pointing at what followed; a replacement starting at the marker leaves
    it in place; a deletion that swallows the marker moves it to the start
    of the deleted span. A detached marker no longer follows edits.
    """

    __slots__ = ("position", "detached", "__weakref__")

    def __init__(self, position: int):
        self.position = position
        self.detached = False

    def __int__(self) -> int:
        return self.position

    def __repr__(self) -> str:
        return f"Marker({self.position})"

    def _adjust(self, start: int, end: int, new_len: int) -> None:
        if start == end == self.position:
            self.position += new_len
            return
        if self.position <= start:
            return
        if self.position >= end:
            self.position += new_len - (end - start)
        else:
            self.position = start


class Document:
    """
    Mutable text owned by a single editor, with the parser that reads it.

    Markers handed out by marker() stay valid across replace() calls; plain
    offsets are only valid until the next edit.
    """

    def __init__(self, text: str, parser: DocumentParser, name: str | None = None):
        self._text = text
        self.parser = parser
        self.name = name
        self._markers: "weakref.WeakSet[Marker]" = weakref.WeakSet()

    @property
    def text(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    def marker(self, position: int) -> Marker:
        if position < 0 or position > len(self._text):
            raise InvalidRangeError(position, position, len(self._text))
        m = Marker(position)
        self._markers.add(m)
        return m

    def detach(self, marker: Marker) -> None:
        """Stop tracking marker; its identity is gone with the text it marked."""
        marker.detached = True
        self._markers.discard(marker)

    def resolve(self, identity: "Marker | int") -> int:
        """Current offset of a marker, or a plain offset passed through."""
        return identity.position if isinstance(identity, Marker) else int(identity)

    def replace(self, start: int, end: int, replacement: str) -> None:
        self._text = splice(self._text, (start, end), replacement)
        for m in list(self._markers):
            m._adjust(start, end, len(replacement))
        logger.debug(
            "Replaced %d..%d with %d chars (%d live markers)",
            start, end, len(replacement), len(self._markers),
        )

    def insert(self, pos: int, text: str) -> None:
        self.replace(pos, pos, text)
