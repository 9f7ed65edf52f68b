"""Tests for rendering notes in export formats."""

from datetime import datetime

import pytest

from scholia.adapters.org_parser import OrgParser
from scholia.config import ExportConfig
from scholia.errors import ConfigError
from scholia.export.formats import (
    build_export_table,
    export_document,
    export_note,
    latex_escape,
)


def fixed_now():
    return datetime(2024, 5, 1, 12, 30, 15, 123)


@pytest.fixture
def table():
    return build_export_table(ExportConfig(author="Ann"), now=fixed_now)


def test_unknown_format_falls_back_to_label(table):
    assert export_note("path", "desc", "unknownformat", table) == "desc"
    assert export_note("path", None, "unknownformat", table) == ""


def test_html(table):
    out = export_note("see <x> & #y", "word", "html", table)
    assert out == '<span class="note" title="see &lt;x&gt; &amp; #y">word</span>'


def test_html_without_label(table):
    assert export_note("n", None, "html", table) == '<span class="note" title="n">&#8224;</span>'


def test_html_class_from_config():
    table = build_export_table(ExportConfig(html_class="aside"))
    assert export_note("n", "w", "html", table).startswith('<span class="aside"')


@pytest.mark.parametrize(
    "style,expected",
    [
        ("marginpar", r"word\marginpar{\#todo fix}"),
        ("todonote", r"word\todo{\#todo fix}"),
        ("footnote", r"word\footnote{\#todo fix}"),
        ("highlight", r"\hl{word}\marginpar{\#todo fix}"),
    ],
)
def test_latex_styles(style, expected):
    table = build_export_table(ExportConfig(latex=style))
    assert export_note("#todo fix", "word", "latex", table) == expected


def test_latex_unknown_style():
    with pytest.raises(ConfigError):
        build_export_table(ExportConfig(latex="sidenote"))


def test_latex_escape():
    assert latex_escape("50% of $x_1 & {y}") == r"50\% of \$x\_1 \& \{y\}"


def test_odt(table):
    out = export_note("n & m", "word", "odt", table)
    assert out == (
        "<office:annotation>"
        "<dc:creator>Ann</dc:creator>"
        "<dc:date>2024-05-01T12:30:15</dc:date>"
        "<text:p>n &amp; m</text:p>"
        "</office:annotation>word"
    )


def test_custom_table_entry():
    table = {"md": lambda path, desc: f"{desc}[^{path}]"}
    assert export_note("n", "w", "md", table) == "w[^n]"


def test_export_document_replaces_only_notes(table):
    text = (
        "A [[note:n][word]] and [[https://x.org][link]].\n"
        "#+BEGIN_SRC\n[[note:code]]\n#+END_SRC\n"
    )
    out = export_document(text, "html", table, OrgParser())
    assert out == (
        'A <span class="note" title="n">word</span> and [[https://x.org][link]].\n'
        "#+BEGIN_SRC\n[[note:code]]\n#+END_SRC\n"
    )


def test_export_document_unknown_format(table):
    text = "A [[note:n][word]] and [[note:m]]."
    assert export_document(text, "txt", table, OrgParser()) == "A word and ."
