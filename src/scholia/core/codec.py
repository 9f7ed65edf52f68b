"""Inline encoding of annotation links.

Canonical shapes:
    [[note:<escaped-path>]]
    [[note:<escaped-path>][<escaped-label>]]
"""

import re
from urllib.parse import unquote

from .model import NOTE_PREFIX, AnnotationLink, LinkConstruct, Range

# Path and description never hold raw brackets; both may wrap lines.
LINK_RE = re.compile(r"\[\[([^\[\]]+)\](?:\[([^\[\]]*)\])?\]")
_NEWLINE_RE = re.compile(r"[ \t]*\r?\n[ \t]*")
_ESCAPES = {"%": "%25", "[": "%5B", "]": "%5D"}


def escape(text: str) -> str:
    """Percent-escape the characters that would end a link segment."""
    return "".join(_ESCAPES.get(c, c) for c in text)


def unescape(text: str) -> str:
    return unquote(text)


def normalize(text: str) -> str:
    """Collapse every line break (and the indentation around it) to one space."""
    return _NEWLINE_RE.sub(" ", text)


def encode(note_path: str, label: str | None = None) -> str:
    path = escape(normalize(note_path))
    if not label:
        return f"[[{NOTE_PREFIX}{path}]]"
    return f"[[{NOTE_PREFIX}{path}][{escape(normalize(label))}]]"


def parse_link(raw: str, offset: int = 0) -> LinkConstruct | None:
    """Parse one generic link occupying the whole of raw."""
    m = LINK_RE.fullmatch(raw)
    if not m:
        return None
    return LinkConstruct(
        path=m.group(1),
        description=m.group(2),
        range=Range(offset, offset + len(raw)),
    )


def decode(raw: str | LinkConstruct) -> AnnotationLink | None:
    """
    Decode an annotation link from its raw text or a scanned construct.

    Returns None for anything that is not an annotation link; a missing
    or empty description decodes to label None.
    """
    link = parse_link(raw) if isinstance(raw, str) else raw
    if link is None or not link.is_annotation:
        return None
    note_path = normalize(unescape(link.path[len(NOTE_PREFIX):]))
    label = None
    if link.description:
        label = normalize(unescape(link.description))
    return AnnotationLink(note_path=note_path, label=label)
