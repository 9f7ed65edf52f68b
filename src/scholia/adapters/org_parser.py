"""Org-style outline parser.

Implements the link scanner, ambient tag and boundary ports over plain
Org text: `* Heading  :tag1:tag2:` lines, `#+FILETAGS:` and
`#+BEGIN_SRC`/`#+BEGIN_EXAMPLE` verbatim blocks.
"""

import logging
import re
import unicodedata
from dataclasses import dataclass, field
from typing import Iterator

from ..core.codec import LINK_RE
from ..core.model import Heading, LinkConstruct, Range
from ..core.ports import DocumentParser

logger = logging.getLogger(__name__)

HEADING_RE = re.compile(r"^(\*+)[ \t]+(.*?)[ \t]*$")
TAGS_RE = re.compile(r"(?:^|[ \t]+)(:[\w@#%:]+:)$")
FILETAGS_RE = re.compile(r"^[ \t]*#\+filetags:[ \t]*(.*)$", re.IGNORECASE | re.MULTILINE)
BLOCK_RE = re.compile(
    r"^[ \t]*#\+begin_(src|example)\b.*?^[ \t]*#\+end_\1\b[^\n]*$",
    re.IGNORECASE | re.MULTILINE | re.DOTALL,
)


def slugify(text: str) -> str:
    """'Reading List (2024)' -> 'reading-list-2024'"""
    text = re.sub(r"[\u2010-\u2015\u2212]", "-", text.lower())
    text = unicodedata.normalize("NFKD", text)
    text = "".join(c for c in text if not unicodedata.combining(c))
    text = re.sub(r"[^\w\s-]", "", text)
    return re.sub(r"[\s_-]+", "-", text).strip("-")


def _split_tags(value: str) -> list[str]:
    return [t for t in re.split(r"[:\s]+", value) if t]


@dataclass
class Outline:
    headings: list[Heading] = field(default_factory=list)
    filetags: list[str] = field(default_factory=list)
    verbatim: list[Range] = field(default_factory=list)

    def in_verbatim(self, pos: int) -> bool:
        return any(pos in r for r in self.verbatim)


class OrgParser(DocumentParser):
    def __init__(self) -> None:
        self._cached: tuple[str, Outline] | None = None

    def parse(self, text: str) -> Outline:
        if self._cached is not None and self._cached[0] == text:
            return self._cached[1]

        outline = Outline()
        outline.verbatim = [Range(m.start(), m.end()) for m in BLOCK_RE.finditer(text)]
        for m in FILETAGS_RE.finditer(text):
            if not outline.in_verbatim(m.start()):
                outline.filetags.extend(_split_tags(m.group(1)))

        offset = 0
        for ln in text.splitlines(keepends=True):
            line = ln.rstrip("\r\n")
            hm = HEADING_RE.match(line)
            if hm and not outline.in_verbatim(offset):
                title = hm.group(2)
                tags: list[str] = []
                tm = TAGS_RE.search(title)
                if tm:
                    tags = _split_tags(tm.group(1))
                    title = title[: tm.start()].rstrip()
                outline.headings.append(
                    Heading(
                        level=len(hm.group(1)),
                        title=title,
                        range=Range(offset, offset + len(ln)),
                        tags=tags,
                        slug=slugify(title),
                    )
                )
            offset += len(ln)

        logger.debug(
            "Parsed outline: %d headings, %d verbatim blocks",
            len(outline.headings), len(outline.verbatim),
        )
        self._cached = (text, outline)
        return outline

    # Link scanning

    def iter_links(self, text: str, start: int = 0, end: int | None = None) -> Iterator[LinkConstruct]:
        outline = self.parse(text)
        end = len(text) if end is None else end
        for m in LINK_RE.finditer(text, start, end):
            if outline.in_verbatim(m.start()):
                continue
            yield LinkConstruct(
                path=m.group(1),
                description=m.group(2),
                range=Range(m.start(), m.end()),
            )

    def link_at(self, text: str, pos: int) -> LinkConstruct | None:
        m = LINK_RE.match(text, pos)
        if not m or self.parse(text).in_verbatim(pos):
            return None
        return LinkConstruct(path=m.group(1), description=m.group(2), range=Range(m.start(), m.end()))

    # Structure

    def headings(self, text: str) -> list[Heading]:
        return self.parse(text).headings

    def heading_at(self, text: str, pos: int) -> Heading | None:
        """Innermost heading whose line starts at or before pos."""
        found = None
        for h in self.parse(text).headings:
            if h.range.start > pos:
                break
            found = h
        return found

    def next_boundary(self, text: str, pos: int) -> int:
        """
        Start of the next heading at or above the level of the heading
        enclosing pos; before the first heading any heading is a boundary.
        """
        current = self.heading_at(text, pos)
        level = current.level if current else None
        for h in self.parse(text).headings:
            if h.range.start <= pos:
                continue
            if level is None or h.level <= level:
                return h.range.start
        return len(text)

    # Tags

    def _ancestors(self, outline: Outline, pos: int) -> list[Heading]:
        chain: list[Heading] = []
        for h in outline.headings:
            if h.range.start > pos:
                break
            while chain and chain[-1].level >= h.level:
                chain.pop()
            chain.append(h)
        return chain

    def ambient_tags(self, text: str, pos: int) -> list[str]:
        """File tags, then tags of every enclosing heading, outermost first."""
        outline = self.parse(text)
        tags = list(outline.filetags)
        for h in self._ancestors(outline, pos):
            tags.extend(h.tags)
        return list(dict.fromkeys(tags))

    def all_tags(self, text: str) -> list[str]:
        outline = self.parse(text)
        tags = list(outline.filetags)
        for h in outline.headings:
            tags.extend(h.tags)
        return list(dict.fromkeys(tags))
