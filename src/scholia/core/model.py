from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .document import Marker

NOTE_PREFIX = "note:"
PLACEHOLDER = "[no text]"


@dataclass(frozen=True)
class Range:
    start: int  # character offsets in the raw text, end exclusive
    end: int

    def __contains__(self, pos: int) -> bool:
        return self.start <= pos < self.end

    def __len__(self) -> int:
        return self.end - self.start


@dataclass
class Heading:
    level: int  # number of leading stars
    title: str
    range: Range  # the heading line itself
    tags: list[str] = field(default_factory=list)
    slug: str = ""


@dataclass(frozen=True)
class LinkConstruct:
    """Any bracketed link: [[path]] or [[path][description]]."""
    path: str
    description: str | None
    range: Range

    @property
    def is_annotation(self) -> bool:
        return self.path.startswith(NOTE_PREFIX)


@dataclass(frozen=True)
class AnnotationLink:
    note_path: str
    label: str | None = None


@dataclass
class Occurrence:
    marker: "Marker"  # identity; follows the link start across edits
    display_text: str
    note_path: str
    label: str | None = None
    range: Range | None = None  # snapshot taken at scan time

    @property
    def start(self) -> int:
        return self.marker.position


@dataclass(frozen=True)
class Scope:
    start: int
    end: int | None = None  # None: to end of document

    def bounds(self, length: int) -> tuple[int, int]:
        end = length if self.end is None else min(self.end, length)
        return (max(0, self.start), end)


WHOLE = Scope(0, None)
