"""Tests for listing and hashtag queries."""

import pytest

from scholia.core.query import ambient_suffix, list_all, list_by_hashtags, matches_tags
from scholia.core.scanner import scan
from scholia.core.slicer import heading_scope

DOC = (
    "#+FILETAGS: :book:\n"
    "* Reading :urgent:\n"
    "[[note:check #a #b][one]] [[note:only #a][two]] [[note:#abc][three]]\n"
    "* Other\n"
    "[[note:plain][four]] [[note:#b later][five]]\n"
)


def labels(occurrences):
    return [o.display_text for o in occurrences]


def test_list_all_matches_scan(make_doc):
    doc = make_doc(DOC)
    assert labels(list_all(doc)) == labels(scan(doc)) == ["one", "two", "three", "four", "five"]


def test_and_semantics(make_doc):
    doc = make_doc(DOC)
    assert labels(list_by_hashtags(doc, ["a", "b"])) == ["one"]


def test_fewer_tags_give_a_superset(make_doc):
    doc = make_doc(DOC)
    both = labels(list_by_hashtags(doc, ["a", "b"]))
    only_a = labels(list_by_hashtags(doc, ["a"]))
    assert set(both) <= set(only_a)


def test_substring_match_is_loose(make_doc):
    """Tag 'a' also matches '#abc' in substring mode."""
    doc = make_doc(DOC)
    assert labels(list_by_hashtags(doc, ["a"])) == ["one", "two", "three"]


def test_token_match_is_exact(make_doc):
    doc = make_doc(DOC)
    assert labels(list_by_hashtags(doc, ["a"], mode="token")) == ["one", "two"]
    assert labels(list_by_hashtags(doc, ["abc"], mode="token")) == ["three"]


def test_ambient_tags(make_doc):
    doc = make_doc(DOC)
    assert list_by_hashtags(doc, ["urgent"]) == []
    assert labels(list_by_hashtags(doc, ["urgent"], include_ambient_tags=True)) == ["one", "two", "three"]
    assert labels(list_by_hashtags(doc, ["book"], include_ambient_tags=True)) == [
        "one", "two", "three", "four", "five",
    ]


def test_ambient_tags_with_token_match(make_doc):
    """'#book' contains '#b' as a substring but not as a token."""
    doc = make_doc(DOC)
    loose = list_by_hashtags(doc, ["book", "b"], include_ambient_tags=True)
    exact = list_by_hashtags(doc, ["book", "b"], include_ambient_tags=True, mode="token")
    assert len(loose) == 5
    assert labels(exact) == ["one", "five"]


def test_results_keep_plain_note_text(make_doc):
    doc = make_doc(DOC)
    [occ] = list_by_hashtags(doc, ["urgent", "b"], include_ambient_tags=True, mode="token")
    assert occ.note_path == "check #a #b"


def test_query_within_scope(parser, make_doc):
    doc = make_doc(DOC)
    scope = heading_scope(DOC, "other", parser)
    assert labels(list_by_hashtags(doc, ["b"], scope=scope)) == ["five"]


def test_no_match_is_empty(make_doc):
    assert list_by_hashtags(make_doc(DOC), ["missing"]) == []


def test_tags_required(make_doc):
    with pytest.raises(ValueError):
        list_by_hashtags(make_doc(DOC), [])


def test_ambient_suffix():
    assert ambient_suffix(["a", "b"]) == " #a,#b "
    assert ambient_suffix([]) == ""


def test_matches_tags_unknown_mode():
    with pytest.raises(ValueError):
        matches_tags("#a", ["a"], mode="fuzzy")  # type: ignore[arg-type]
