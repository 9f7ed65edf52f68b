"""Tests for the inline note link encoding."""

import pytest

from scholia.core.codec import decode, encode, escape, parse_link, unescape
from scholia.core.model import AnnotationLink


def test_encode_without_label():
    assert encode("foo") == "[[note:foo]]"


def test_encode_empty_label_is_no_label():
    assert encode("x", "") == "[[note:x]]"
    assert decode(encode("x", "")) == AnnotationLink("x", None)


def test_encode_with_label():
    assert encode("foo", "bar") == "[[note:foo][bar]]"


def test_encode_escapes_structural_characters():
    """Brackets and percent signs are percent-escaped in path and label."""
    assert encode("a [b] 100%", "x]") == "[[note:a %5Bb%5D 100%25][x%5D]]"


@pytest.mark.parametrize(
    "note_path,label",
    [
        ("plain note", None),
        ("see #todo, #ref", "word"),
        ("[weird] 50% off", "[label]"),
        ("unicode é ☃ #tag", "über"),
    ],
)
def test_round_trip(note_path, label):
    """Decoding an encoded link gives back its note text and label."""
    assert decode(encode(note_path, label)) == AnnotationLink(note_path, label)


def test_hashtag_survives_escaping():
    encoded = encode("#a%b #c")
    assert "#a" in encoded
    assert decode(encoded).note_path == "#a%b #c"


def test_decode_collapses_newlines():
    """Raw line breaks in non-canonical input become single spaces."""
    link = decode("[[note:line one\n   line two][multi\nline]]")
    assert link == AnnotationLink("line one line two", "multi line")


def test_encode_collapses_newlines():
    assert encode("a\nb") == "[[note:a b]]"


def test_decode_tolerates_foreign_escapes():
    assert decode("[[note:tag%20here]]").note_path == "tag here"


def test_decode_empty_description_is_no_label():
    assert decode("[[note:foo][]]") == AnnotationLink("foo", None)


def test_decode_rejects_other_links():
    assert decode("[[https://example.com][site]]") is None
    assert decode("[[file:notes.org]]") is None


def test_decode_rejects_malformed():
    assert decode("[[note:foo]") is None
    assert decode("[[note:foo][bar]") is None
    assert decode("not a link") is None


def test_parse_link_offsets():
    link = parse_link("[[note:x][y]]", offset=10)
    assert link.range.start == 10
    assert link.range.end == 23
    assert link.is_annotation


def test_escape_unescape_inverse():
    text = "50% [of] it"
    assert unescape(escape(text)) == text
