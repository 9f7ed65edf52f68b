"""Scope resolution: which part of a document a scan looks at."""

from .model import Heading, Scope
from .ports import BoundaryLookup


def subtree_scope(text: str, pos: int, boundaries: BoundaryLookup) -> Scope:
    """
    Scope of the subtree enclosing pos.

    Runs from the start of the innermost heading at or before pos to the
    next heading of the same or higher level (or end of text). Before the
    first heading the scope is the preamble: from 0 to the first heading.
    """
    heading = boundaries.heading_at(text, pos)
    start = heading.range.start if heading else 0
    return Scope(start, boundaries.next_boundary(text, pos))


def find_heading_by_slug(text: str, slug: str, boundaries: BoundaryLookup) -> Heading | None:
    for heading in boundaries.headings(text):
        if heading.slug == slug:
            return heading
    return None


def heading_scope(text: str, slug: str, boundaries: BoundaryLookup) -> Scope | None:
    """Subtree scope of the first heading with the given slug, None if absent."""
    heading = find_heading_by_slug(text, slug, boundaries)
    if heading is None:
        return None
    return subtree_scope(text, heading.range.start, boundaries)
