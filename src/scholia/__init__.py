"""scholia - inline annotations and hashtags for plain-text outlines."""

from .core.codec import decode, encode
from .core.document import Document, Marker, splice
from .core.hashtags import collect_hashtags, extract_hashtags
from .core.model import AnnotationLink, Occurrence, Range, Scope
from .core.mutate import delete_annotation, insert_annotation
from .core.query import list_all, list_by_hashtags
from .core.scanner import scan
from .errors import NotAnAnnotationError, ScholiaError
from .export.formats import build_export_table, export_document, export_note

__version__ = "0.1.0"

__all__ = [
    "AnnotationLink",
    "Document",
    "Marker",
    "NotAnAnnotationError",
    "Occurrence",
    "Range",
    "ScholiaError",
    "Scope",
    "build_export_table",
    "collect_hashtags",
    "decode",
    "delete_annotation",
    "encode",
    "export_document",
    "export_note",
    "extract_hashtags",
    "insert_annotation",
    "list_all",
    "list_by_hashtags",
    "scan",
    "splice",
]
