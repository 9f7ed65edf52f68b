"""Tests for the Org outline parser."""

from scholia.adapters.org_parser import OrgParser, slugify

DOC = """#+FILETAGS: :proj:

* Top   :work:
Intro [[note:a]].
** Child :urgent:
Text [[note:b][B]] and [[https://example.com][site]].
* Other
#+BEGIN_SRC python
[[note:hidden]]
* not a heading
#+END_SRC
"""


def test_headings():
    parser = OrgParser()
    headings = parser.headings(DOC)

    assert [h.level for h in headings] == [1, 2, 1]
    assert [h.title for h in headings] == ["Top", "Child", "Other"]
    assert [h.tags for h in headings] == [["work"], ["urgent"], []]
    assert headings[0].slug == "top"
    assert DOC[headings[2].range.start:].startswith("* Other")


def test_heading_with_only_tags():
    parser = OrgParser()
    [heading] = parser.headings("* :a:b:\n")
    assert heading.title == ""
    assert heading.tags == ["a", "b"]


def test_bold_text_is_not_a_heading():
    assert OrgParser().headings("*bold* start\n**\n") == []


def test_links_skip_verbatim_blocks():
    """Links inside source blocks are code, not links."""
    links = list(OrgParser().iter_links(DOC))
    assert [link.path for link in links] == ["note:a", "note:b", "https://example.com"]


def test_unterminated_block_is_plain_text():
    text = "#+BEGIN_SRC\n[[note:x]]\n"
    assert len(list(OrgParser().iter_links(text))) == 1


def test_iter_links_range():
    parser = OrgParser()
    start = DOC.index("** Child")
    links = list(parser.iter_links(DOC, start, len(DOC)))
    assert [link.path for link in links] == ["note:b", "https://example.com"]


def test_link_at():
    parser = OrgParser()
    pos = DOC.index("[[note:b]")
    link = parser.link_at(DOC, pos)
    assert link is not None
    assert link.description == "B"
    assert parser.link_at(DOC, pos + 1) is None
    assert parser.link_at(DOC, DOC.index("[[note:hidden")) is None


def test_ambient_tags():
    """File tags come first, then enclosing headings outermost first."""
    parser = OrgParser()
    assert parser.ambient_tags(DOC, DOC.index("[[note:b]")) == ["proj", "work", "urgent"]
    assert parser.ambient_tags(DOC, DOC.index("[[note:a]")) == ["proj", "work"]
    assert parser.ambient_tags(DOC, DOC.index("* Other")) == ["proj"]
    assert parser.ambient_tags(DOC, 0) == ["proj"]


def test_all_tags():
    assert OrgParser().all_tags(DOC) == ["proj", "work", "urgent"]


def test_next_boundary():
    parser = OrgParser()
    other = DOC.index("* Other")
    assert parser.next_boundary(DOC, DOC.index("[[note:a]")) == other
    # a level-2 subtree ends at the next level-1 heading
    assert parser.next_boundary(DOC, DOC.index("[[note:b]")) == other
    assert parser.next_boundary(DOC, other) == len(DOC)
    # preamble ends at the first heading
    assert parser.next_boundary(DOC, 0) == DOC.index("* Top")


def test_heading_at():
    parser = OrgParser()
    assert parser.heading_at(DOC, 0) is None
    assert parser.heading_at(DOC, DOC.index("[[note:b]")).title == "Child"


def test_slugify():
    assert slugify("Reading List (2024)") == "reading-list-2024"
    assert slugify("Café  notes_and-more") == "cafe-notes-and-more"


def test_slugify_dashes():
    assert slugify("Riemann–Christoffel symbols") == "riemann-christoffel-symbols"
    assert slugify("Test—Example") == "test-example"
