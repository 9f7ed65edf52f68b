"""Hashtag extraction from annotation note text."""

import logging
import re
from typing import Iterable

from .document import Document
from .scanner import iter_annotations

logger = logging.getLogger(__name__)

# '#' followed by anything but whitespace, comma and '%'. Tabs and other
# whitespace end a tag too, not only the space; stored note text has no
# line breaks left.
HASHTAG_RE = re.compile(r"#([^\s,%]+)")


def extract_hashtags(note_path: str) -> list[str]:
    """
    Hashtags in one note text, deduplicated in order of first appearance.

    Matching walks forward past each match, so a short tag that is a
    prefix of a longer one ("#ab #a") is reported on its own.
    """
    return list(dict.fromkeys(m.group(1) for m in HASHTAG_RE.finditer(note_path)))


def collect_hashtags(document: Document, extra_tags: Iterable[str] | None = None) -> list[str]:
    """
    Every hashtag used by any annotation link in the whole document.

    extra_tags (e.g. the document's structural tags) are merged after the
    hashtags, keeping the first-seen order and dropping duplicates.
    """
    seen: dict[str, None] = {}
    for _link, decoded in iter_annotations(document.text, document.parser):
        for tag in extract_hashtags(decoded.note_path):
            seen.setdefault(tag, None)
    for tag in extra_tags or ():
        seen.setdefault(tag, None)
    logger.debug("Collected %d hashtag(s)", len(seen))
    return list(seen)
