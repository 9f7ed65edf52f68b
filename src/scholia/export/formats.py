"""Export adapter: render annotation links for a target format.

The per-format functions live in an explicit table built from an
ExportConfig; unknown formats degrade to the bare label.
"""

import html
import logging
import re
from datetime import datetime
from typing import Callable

from ..config import LATEX_STYLES, ExportConfig
from ..core.ports import ExportFormatter, LinkScanner
from ..core.scanner import iter_annotations
from ..errors import ConfigError

logger = logging.getLogger(__name__)

ExportTable = dict[str, ExportFormatter]

_LATEX_SPECIAL = {
    "\\": r"\textbackslash{}",
    "{": r"\{",
    "}": r"\}",
    "#": r"\#",
    "$": r"\$",
    "%": r"\%",
    "&": r"\&",
    "_": r"\_",
    "^": r"\^{}",
    "~": r"\~{}",
}
_LATEX_RE = re.compile("|".join(re.escape(c) for c in _LATEX_SPECIAL))


def latex_escape(text: str) -> str:
    return _LATEX_RE.sub(lambda m: _LATEX_SPECIAL[m.group(0)], text)


def html_formatter(css_class: str = "note") -> ExportFormatter:
    def fmt(path: str, description: str) -> str:
        title = html.escape(path, quote=True)
        body = html.escape(description) if description else "&#8224;"
        return f'<span class="{css_class}" title="{title}">{body}</span>'
    return fmt


def latex_formatter(style: str = "marginpar") -> ExportFormatter:
    templates = {
        "marginpar": "{desc}\\marginpar{{{note}}}",
        "todonote": "{desc}\\todo{{{note}}}",
        "footnote": "{desc}\\footnote{{{note}}}",
        "highlight": "\\hl{{{desc}}}\\marginpar{{{note}}}",
    }
    if style not in templates:
        raise ConfigError(f"Unknown LaTeX note style: {style!r}", {"choices": list(LATEX_STYLES)})
    template = templates[style]

    def fmt(path: str, description: str) -> str:
        return template.format(desc=latex_escape(description), note=latex_escape(path))
    return fmt


def odt_formatter(author: str = "", now: Callable[[], datetime] = datetime.now) -> ExportFormatter:
    def fmt(path: str, description: str) -> str:
        stamp = now().replace(microsecond=0).isoformat()
        return (
            "<office:annotation>"
            f"<dc:creator>{html.escape(author)}</dc:creator>"
            f"<dc:date>{stamp}</dc:date>"
            f"<text:p>{html.escape(path)}</text:p>"
            "</office:annotation>"
            f"{html.escape(description)}"
        )
    return fmt


def build_export_table(
    config: ExportConfig | None = None,
    now: Callable[[], datetime] = datetime.now,
) -> ExportTable:
    """Default format table for html, latex and odt."""
    config = config or ExportConfig()
    return {
        "html": html_formatter(config.html_class),
        "latex": latex_formatter(config.latex),
        "odt": odt_formatter(config.author, now),
    }


def export_note(note_path: str, label: str | None, fmt: str, table: ExportTable) -> str:
    """Format one note for fmt; formats missing from table yield the label."""
    description = label or ""
    formatter = table.get(fmt)
    if formatter is None:
        logger.debug("No exporter for format %r, using plain label", fmt)
        return description
    return formatter(note_path, description)


def export_document(text: str, fmt: str, table: ExportTable, links: LinkScanner) -> str:
    """Replace every annotation link in text by its exported form."""
    out: list[str] = []
    pos = 0
    count = 0
    for link, decoded in iter_annotations(text, links):
        out.append(text[pos:link.range.start])
        out.append(export_note(decoded.note_path, decoded.label, fmt, table))
        pos = link.range.end
        count += 1
    out.append(text[pos:])
    logger.info("Exported %d note(s) as %s", count, fmt)
    return "".join(out)
