import pytest

from scholia.adapters.org_parser import OrgParser
from scholia.core.document import Document


@pytest.fixture
def parser():
    return OrgParser()


@pytest.fixture
def make_doc(parser):
    """Build a Document over text with a fresh Org parser."""
    def _make(text: str) -> Document:
        return Document(text, parser)
    return _make
