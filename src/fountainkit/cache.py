"""Path keyed cache of parsed documents.

Parsing is not incremental, so the cache only reparses when the stored text
actually changed. Text is stored as is and parsed on first access.
"""

from __future__ import annotations

from collections import OrderedDict

from fountainkit.config import FountainKitSettings, get_logger
from fountainkit.document import Document
from fountainkit.exceptions import DocumentNotFoundError, ParseError
from fountainkit.parser.fountain_models import Range
from fountainkit.parser.fountain_parser import parse
from fountainkit.parser.line_classifier import ParseOptions
from fountainkit.utils.text_edit import (
    blank_line_trailer,
    duplicate_scene,
    move_text,
    replace_text,
)

logger = get_logger(__name__)

DEFAULT_MAX_ENTRIES = 64


class ParserCache:
    """Least recently used cache mapping paths to documents.

    The empty path always holds the parsed empty document, representing a
    freshly created buffer. It does not count against ``max_entries``.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        options: ParseOptions | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            max_entries: Maximum number of stored paths besides the empty one
            options: Parse options used for every document
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self.options = options
        self._documents: OrderedDict[str, Document | str] = OrderedDict()
        self._empty = self._parse("", "")

    @classmethod
    def from_settings(cls, settings: FountainKitSettings) -> ParserCache:
        """Create a cache bounded by ``cache_max_entries``."""
        return cls(max_entries=settings.cache_max_entries)

    def __contains__(self, path: str) -> bool:
        return path == "" or path in self._documents

    def __len__(self) -> int:
        return len(self._documents)

    def get(self, path: str) -> Document:
        """Return the parsed document stored at ``path``.

        Raises:
            DocumentNotFoundError: If nothing is stored at ``path``
            ParseError: If the stored text cannot be parsed
        """
        if path == "":
            return self._empty
        if path not in self._documents:
            raise DocumentNotFoundError(path)

        self._documents.move_to_end(path)
        stored = self._documents[path]
        if isinstance(stored, Document):
            logger.debug("Parser cache hit", path=path)
            return stored

        logger.debug("Parser cache miss", path=path, length=len(stored))
        document = self._parse(path, stored)
        self._documents[path] = document
        return document

    def set(self, path: str, text: str) -> None:
        """Store new text for ``path``.

        An already parsed document is kept when the text did not change.

        Raises:
            ValueError: For the reserved empty path
        """
        if path == "":
            raise ValueError("The empty path always holds the empty document")
        stored = self._documents.get(path)
        if isinstance(stored, Document) and stored.source == text:
            self._documents.move_to_end(path)
            return
        self._documents[path] = text
        self._documents.move_to_end(path)
        while len(self._documents) > self.max_entries:
            evicted, _ = self._documents.popitem(last=False)
            logger.debug("Evicted document from parser cache", path=evicted)

    def discard(self, path: str) -> None:
        """Forget whatever is stored at ``path``."""
        self._documents.pop(path, None)

    def get_text(self, path: str, r: Range) -> str:
        """Return a slice of the stored text."""
        return self.get(path).slice_raw(r)

    def replace_text(self, path: str, r: Range, replacement: str) -> None:
        """Replace a range of the stored text."""
        self.set(path, replace_text(self.get(path).source, r, replacement))

    def duplicate_scene(self, path: str, r: Range) -> None:
        """Duplicate the scene covering ``r`` in place."""
        self.set(path, duplicate_scene(self.get(path).source, r))

    def move_scene(
        self, src_path: str, r: Range, dst_path: str, new_start: int
    ) -> None:
        """Move a scene within one document or into another.

        Args:
            src_path: Path of the document holding the scene
            r: Range of the complete scene, heading and content
            dst_path: Path of the target document
            new_start: Offset in the target document to move the scene to
        """
        scene_text = self.get_text(src_path, r)
        trailer = blank_line_trailer(scene_text)
        if src_path == dst_path:
            source = self.get(src_path).source
            self.set(src_path, move_text(source, r, new_start, trailer))
            return
        self.replace_text(src_path, r, "")
        self.replace_text(dst_path, Range(new_start, new_start), scene_text + trailer)

    def _parse(self, path: str, text: str) -> Document:
        result = parse(text, self.options)
        if isinstance(result, ParseError):
            logger.error("Stored document could not be parsed", path=path)
            raise result
        return result
