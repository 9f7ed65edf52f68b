"""Plain-data rendering of query results for the CLI and API."""

import io
import json
from typing import Any, Iterable

import yaml

from .core.document import Document
from .core.model import Occurrence
from .locate import char_offset_to_line_col

FORMATS = ("table", "tsv", "json", "yaml")


def occurrence_to_dict(document: Document, occ: Occurrence) -> dict[str, Any]:
    line, col = char_offset_to_line_col(document.text, occ.start)
    return {
        "start": occ.start,
        "end": occ.start + len(occ.range) if occ.range else None,
        "line": line,
        "column": col,
        "text": occ.display_text,
        "note": occ.note_path,
        "label": occ.label,
    }


def dumps(data: Any, fmt: str = "json") -> str:
    if fmt == "yaml":
        buf = io.StringIO()
        yaml.safe_dump(data, buf, sort_keys=False, allow_unicode=True)
        return buf.getvalue().rstrip("\n")
    return json.dumps(data, indent=2, ensure_ascii=False)


def render_occurrences(document: Document, occurrences: Iterable[Occurrence], fmt: str = "table") -> str:
    rows = [occurrence_to_dict(document, occ) for occ in occurrences]
    if fmt in ("json", "yaml"):
        return dumps(rows, fmt)
    if fmt == "tsv":
        return "\n".join(f"{r['start']}\t{r['text']}\t{r['note']}" for r in rows)

    # table: offset, line:col, visible text, note
    width = max((len(r["text"]) for r in rows), default=0)
    lines = []
    for r in rows:
        where = f"{r['line']}:{r['column']}"
        lines.append(f"{r['start']:>6}  {where:<8} {r['text']:<{width}}  {r['note']}")
    return "\n".join(lines)
