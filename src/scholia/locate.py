"""Line/column positions of annotation occurrences."""

import sys
from typing import Any

from .core.document import Document, Marker
from .core.model import Occurrence
from .errors import NotAnAnnotationError


def char_offset_to_line_col(text: str, offset: int) -> tuple[int, int]:
    """
    Convert a character offset to (line, column), both 1-based.

    Examples:
        >>> char_offset_to_line_col("ab\\ncd", 4)
        (2, 2)
    """
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset) + 1
    col = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return line, col


def locate_occurrence(document: Document, identity: Occurrence | Marker | int) -> dict[str, Any]:
    """
    Current location of the annotation link at identity.

    Raises NotAnAnnotationError if no annotation link starts there any more.
    """
    marker = identity.marker if isinstance(identity, Occurrence) else identity
    pos = document.resolve(marker)
    link = document.parser.link_at(document.text, pos)
    if link is None or not link.is_annotation:
        raise NotAnAnnotationError(pos, link.path if link else None)

    line, col = char_offset_to_line_col(document.text, link.range.start)
    end_line, end_col = char_offset_to_line_col(document.text, link.range.end)
    result: dict[str, Any] = {
        "range": {"start": link.range.start, "end": link.range.end},
        "lines": {"start": line, "end": end_line},
        "columns": {"start": col, "end": end_col},
    }
    if document.name:
        result["path"] = document.name
    return result


def cmd_locate(args: Any, rt: Any) -> int:
    """Locate command handler."""
    from . import render

    document = rt.open_document(args.file)
    if document is None:
        print(f"Document {args.file} not found", file=sys.stderr)
        return 1

    location = locate_occurrence(document, args.at)

    if getattr(args, "format", "json") == "tsv":
        print(
            f"{location.get('path', '')}\t{location['range']['start']}\t{location['range']['end']}"
            f"\t{location['lines']['start']}\t{location['columns']['start']}"
        )
    else:
        print(render.dumps(location, "json"))
    return 0
