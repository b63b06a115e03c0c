"""Screenplay-specific query helpers over parsed documents."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from fountainkit.parser.fountain_models import (
    Action,
    Dialogue,
    Element,
    InlineNode,
    Lyrics,
    Note,
    Range,
    Styled,
    Transition,
)
from fountainkit.parser.inline_parser import merge_text

if TYPE_CHECKING:
    from fountainkit.document import Document

HTML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
}
NON_BREAKING_SPACE = "\u00a0"

LEADING_SPACES_PATTERN = re.compile(r"^ +", re.MULTILINE)
SECTION_MARKER_PATTERN = re.compile(r"^\s*#+\s*")


class ScreenplayUtils:
    """Utility functions for querying parsed screenplays."""

    @staticmethod
    def extract_notes(elements: Iterable[Element]) -> list[Note]:
        """Collect every note in action, dialogue and lyrics lines.

        Args:
            elements: Elements to search, in document order

        Returns:
            Notes in the order they appear
        """
        notes: list[Note] = []
        for element in elements:
            if isinstance(element, Action | Dialogue | Lyrics):
                for line in element.lines:
                    notes.extend(ScreenplayUtils._notes_in(line.elements))
        return notes

    @staticmethod
    def _notes_in(nodes: Sequence[InlineNode]) -> list[Note]:
        found: list[Note] = []
        for node in nodes:
            if isinstance(node, Note):
                found.append(node)
            elif isinstance(node, Styled):
                found.extend(ScreenplayUtils._notes_in(node.elements))
        return found

    @staticmethod
    def extract_margin_marker(note: Note) -> str | None:
        """Return the marker word of a ``[[@word]]`` note.

        Returns:
            The word after ``@`` (possibly empty), None for other notes
        """
        if note.note_kind.startswith("@"):
            return note.note_kind[1:]
        return None

    @staticmethod
    def extract_transition_text(transition: Transition, document: Document) -> str:
        """Return the transition text without a forcing ``>`` marker."""
        text = document.slice_raw(transition.range).strip()
        if transition.forced and text.startswith(">"):
            text = text[1:].lstrip()
        return text

    @staticmethod
    def is_blank_lines(element: Element) -> bool:
        """Whether the element is an action made only of blank lines."""
        return isinstance(element, Action) and all(
            not line.elements for line in element.lines
        )

    @staticmethod
    def merge_text(nodes: Sequence[InlineNode]) -> list[InlineNode]:
        """Merge directly adjacent text nodes."""
        return merge_text(nodes)

    @staticmethod
    def intersect(r1: Range, r2: Range) -> bool:
        """Whether each range starts before the other one ends.

        An empty range strictly inside another counts as intersecting it, one
        on its boundary does not.
        """
        return r1.start < r2.end and r2.start < r1.end

    @staticmethod
    def collapse_range_to_start(r: Range) -> Range:
        """Return the empty range at the start of ``r``."""
        return Range(r.start, r.start)

    @staticmethod
    def escape_html(text: str) -> str:
        """Escape the characters that are unsafe in HTML text and attributes."""
        return "".join(HTML_ESCAPES.get(ch, ch) for ch in text)

    @staticmethod
    def escape_leading_spaces(condition: bool, text: str) -> str:
        """Replace leading spaces of every line with non-breaking spaces.

        Args:
            condition: Only replace when true
            text: Text to process

        Returns:
            The processed text
        """
        if not condition:
            return text
        return LEADING_SPACES_PATTERN.sub(
            lambda m: NON_BREAKING_SPACE * len(m.group(0)), text
        )

    @staticmethod
    def section_title(raw: str) -> str:
        """Normalise a section heading for title comparisons.

        ``"## Snippets  "`` becomes ``"snippets"``.
        """
        return SECTION_MARKER_PATTERN.sub("", raw).strip().lower()

    @staticmethod
    def filter_characters(characters: Iterable[str], prefix: str) -> list[str]:
        """Character names starting with ``prefix``, case-sensitive, sorted."""
        return sorted(name for name in characters if name.startswith(prefix))
