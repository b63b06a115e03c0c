"""Plain text renderings of document parts for tables and trees."""

from __future__ import annotations

from fountainkit.document import Document
from fountainkit.parser import KeyValue, Range

PREVIEW_LENGTH = 60


def preview(document: Document, r: Range, length: int = PREVIEW_LENGTH) -> str:
    """First non-blank source line of a range, shortened to ``length``."""
    raw = document.slice_raw(r)
    first = next((line.strip() for line in raw.splitlines() if line.strip()), "")
    if len(first) > length:
        return first[: length - 1] + "…"
    return first


def title_value(document: Document, entry: KeyValue) -> str:
    """Value lines of a title page entry joined with slashes."""
    return " / ".join(
        document.slice_raw(Range(value[0].range.start, value[-1].range.end)).strip()
        for value in entry.values
        if value
    )


def document_title(document: Document, default: str) -> str:
    """The title page ``Title`` value, or ``default`` without one."""
    for entry in document.title_page:
        if entry.key.lower() == "title":
            return title_value(document, entry) or default
    return default
