from typing import Iterator, Protocol

from .model import Heading, LinkConstruct


class LinkScanner(Protocol):
    """
    Yield every generic link construct in a text range, in source order.
    Verbatim regions are the scanner's business, not the caller's.
    """

    def iter_links(self, text: str, start: int = 0, end: int | None = None) -> Iterator[LinkConstruct]:
        pass

    def link_at(self, text: str, pos: int) -> LinkConstruct | None:
        pass


class AmbientTagSource(Protocol):
    """
    Categorical labels inherited from the structure enclosing a position.
    """

    def ambient_tags(self, text: str, pos: int) -> list[str]:
        pass

    def all_tags(self, text: str) -> list[str]:
        pass


class BoundaryLookup(Protocol):
    """
    Structural boundaries used to bound subtree scopes.
    """

    def heading_at(self, text: str, pos: int) -> Heading | None:
        pass

    def next_boundary(self, text: str, pos: int) -> int:
        pass

    def headings(self, text: str) -> list[Heading]:
        pass


class DocumentParser(LinkScanner, AmbientTagSource, BoundaryLookup, Protocol):
    pass


class ExportFormatter(Protocol):
    def __call__(self, path: str, description: str) -> str:
        pass
