"""Query engine: list annotations, optionally filtered by hashtags."""

import logging
from typing import Literal, Sequence

from .document import Document
from .hashtags import extract_hashtags
from .model import PLACEHOLDER, WHOLE, Occurrence, Scope
from .scanner import iter_annotations, make_occurrence, scan

logger = logging.getLogger(__name__)

TagMatch = Literal["substring", "token"]


def list_all(document: Document, scope: Scope = WHOLE, placeholder: str = PLACEHOLDER) -> list[Occurrence]:
    return scan(document, scope, placeholder)


def ambient_suffix(tags: Sequence[str]) -> str:
    """[a, b] -> ' #a,#b '"""
    if not tags:
        return ""
    return " " + ",".join(f"#{t}" for t in tags) + " "


def matches_tags(path: str, tags: Sequence[str], mode: TagMatch = "substring") -> bool:
    """
    True when every tag is present in path.

    "substring" accepts '#' + tag anywhere, so tag "a" also matches
    "#abc"; "token" requires the exact hashtag.
    """
    if mode == "token":
        present = set(extract_hashtags(path))
        return all(tag in present for tag in tags)
    if mode != "substring":
        raise ValueError(f"Unknown tag match mode: {mode!r}")
    return all(f"#{tag}" in path for tag in tags)


def list_by_hashtags(
    document: Document,
    tags: Sequence[str],
    include_ambient_tags: bool = False,
    scope: Scope = WHOLE,
    mode: TagMatch = "substring",
    placeholder: str = PLACEHOLDER,
) -> list[Occurrence]:
    """
    Annotations whose note text carries every one of tags (AND).

    With include_ambient_tags the tags inherited from the enclosing
    structure count as if written in the note. Returned note_path values
    are never augmented.
    """
    if not tags:
        raise ValueError("list_by_hashtags needs at least one tag")

    text = document.text
    result = []
    for link, decoded in iter_annotations(text, document.parser, scope):
        path = decoded.note_path
        if include_ambient_tags:
            path += ambient_suffix(document.parser.ambient_tags(text, link.range.start))
        if matches_tags(path, tags, mode):
            result.append(make_occurrence(document, link, decoded, placeholder))
    logger.debug(
        "Query %s (ambient=%s, mode=%s): %d match(es)",
        list(tags), include_ambient_tags, mode, len(result),
    )
    return result
