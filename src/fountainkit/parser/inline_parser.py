"""Inline text grammar: notes, boneyards and emphasis within a line."""

import re
from bisect import bisect_right
from collections.abc import Sequence
from typing import cast

from fountainkit.parser.fountain_models import (
    Boneyard,
    InlineNode,
    Note,
    Range,
    Styled,
    StyledText,
    Text,
)

# Tried in order, so ``***`` wins over ``**`` and ``**`` over ``*``
EMPHASIS_DELIMITERS: tuple[tuple[str, str], ...] = (
    ("***", "bold-italics"),
    ("**", "bold"),
    ("*", "italics"),
    ("_", "underline"),
)

NOTE_OPEN = "[["
NOTE_CLOSE = "]]"

MARGIN_MARKER_PATTERN = re.compile(r"@(\w*)")
NOTE_PREFIX_PATTERN = re.compile(r"([A-Za-z]+):")
BONEYARD_PATTERN = re.compile(r"/\*.*?\*/", re.DOTALL)


def find_boneyard_spans(source: str) -> list[Range]:
    """Locate every terminated ``/* ... */`` comment in the source.

    Args:
        source: Complete document text

    Returns:
        Non-overlapping comment ranges in source order
    """
    return [Range(m.start(), m.end()) for m in BONEYARD_PATTERN.finditer(source)]


def merge_text(nodes: Sequence[InlineNode]) -> list[InlineNode]:
    """Merge runs of directly adjacent ``Text`` nodes into one node."""
    merged: list[InlineNode] = []
    for node in nodes:
        if (
            isinstance(node, Text)
            and merged
            and isinstance(merged[-1], Text)
            and merged[-1].range.end == node.range.start
        ):
            merged[-1] = Text(Range(merged[-1].range.start, node.range.end))
        else:
            merged.append(node)
    return merged


class InlineParser:
    """Parse the inline content of single lines of a document.

    Boneyard spans are located once for the whole document so that comments
    reaching over several lines are still recognised on each line they touch.
    Unterminated notes, comments and emphasis are kept as plain text.
    """

    def __init__(self, source: str, boneyard_spans: Sequence[Range] = ()) -> None:
        """Initialize the parser.

        Args:
            source: Complete document text
            boneyard_spans: Comment ranges as returned by find_boneyard_spans
        """
        self.source = source
        self.boneyard_spans = list(boneyard_spans)
        self._span_starts = [span.start for span in self.boneyard_spans]
        # Emphasis attempts per (position, delimiter), reset for every line
        self._memo: dict[tuple[int, str], Styled | None] = {}

    def parse(self, text_range: Range) -> tuple[InlineNode, ...]:
        """Parse boneyards, notes, emphasis and text.

        Args:
            text_range: Range of the line content, excluding its newline

        Returns:
            Inline nodes covering the content in order
        """
        self._memo.clear()
        nodes, _ = self._sequence(text_range.start, text_range.end, None, True)
        return tuple(nodes)

    def parse_styled(self, text_range: Range) -> tuple[StyledText, ...]:
        """Parse emphasis and text only, as used for title page values."""
        self._memo.clear()
        nodes, _ = self._sequence(text_range.start, text_range.end, None, False)
        return tuple(cast("list[StyledText]", nodes))

    def boneyard_at(self, pos: int) -> Range | None:
        """Return the comment span containing ``pos``, if any."""
        index = bisect_right(self._span_starts, pos) - 1
        if index >= 0 and self.boneyard_spans[index].end > pos:
            return self.boneyard_spans[index]
        return None

    def _sequence(
        self, start: int, end: int, closer: str | None, full: bool
    ) -> tuple[list[InlineNode], int]:
        """Scan from ``start`` until ``end`` or a matching ``closer``.

        Returns the nodes and the position of the closer. When a closer was
        requested but never found the position is -1. With ``full`` set,
        comments and notes are recognised as well as emphasis, also inside
        emphasis spans.
        """
        nodes: list[InlineNode] = []
        text_start = pos = start

        while pos < end:
            node: InlineNode | None = self._boneyard(pos, end) if full else None
            if node is None:
                if closer is not None and self._closes(pos, start, end, closer):
                    if pos > text_start:
                        nodes.append(Text(Range(text_start, pos)))
                    return nodes, pos
                if full:
                    node = self._note(pos, end)
            if node is None:
                node = self._emphasis(pos, end, full)
            if node is None:
                pos += 1
                continue

            if pos > text_start:
                nodes.append(Text(Range(text_start, pos)))
            nodes.append(node)
            pos = text_start = node.range.end

        if closer is not None:
            return nodes, -1
        if end > text_start:
            nodes.append(Text(Range(text_start, end)))
        return nodes, end

    def _boneyard(self, pos: int, end: int) -> Boneyard | None:
        span = self.boneyard_at(pos)
        if span is None:
            return None
        return Boneyard(Range(pos, min(span.end, end)))

    def _note(self, pos: int, end: int) -> Note | None:
        if not self.source.startswith(NOTE_OPEN, pos, end):
            return None
        inner_start = pos + len(NOTE_OPEN)
        close = self.source.find(NOTE_CLOSE, inner_start, end)
        if close < 0:
            return None

        note_range = Range(pos, close + len(NOTE_CLOSE))
        inner = self.source[inner_start:close]
        if inner.startswith(("+", "-")):
            return Note(note_range, inner[0], Range(inner_start + 1, close))
        marker = MARGIN_MARKER_PATTERN.match(inner)
        if marker is not None:
            return Note(
                note_range,
                "@" + marker.group(1),
                Range(inner_start + marker.end(), close),
            )
        prefix = NOTE_PREFIX_PATTERN.match(inner)
        if prefix is not None:
            return Note(
                note_range,
                prefix.group(1).lower(),
                Range(inner_start + prefix.end(), close),
            )
        return Note(note_range, "", Range(inner_start, close))

    def _emphasis(self, pos: int, end: int, full: bool) -> Styled | None:
        for delimiter, kind in EMPHASIS_DELIMITERS:
            if not self._opens(pos, end, delimiter):
                continue
            key = (pos, delimiter)
            if key not in self._memo:
                self._memo[key] = self._styled(pos, end, delimiter, kind, full)
            styled = self._memo[key]
            if styled is not None:
                return styled
        return None

    def _styled(
        self, pos: int, end: int, delimiter: str, kind: str, full: bool
    ) -> Styled | None:
        inner, close = self._sequence(pos + len(delimiter), end, delimiter, full)
        if close < 0:
            return None
        outer = Range(pos, close + len(delimiter))
        elements = tuple(merge_text(inner))
        if kind == "bold-italics":
            italics = Styled("italics", Range(pos + 2, outer.end - 2), elements)
            return Styled("bold", outer, (italics,))
        return Styled(kind, outer, elements)

    def _opens(self, pos: int, end: int, delimiter: str) -> bool:
        after = pos + len(delimiter)
        if after >= end or not self.source.startswith(delimiter, pos, end):
            return False
        following = self.source[after]
        return not following.isspace() and following != delimiter[0]

    def _closes(self, pos: int, start: int, end: int, delimiter: str) -> bool:
        if pos <= start or not self.source.startswith(delimiter, pos, end):
            return False
        return not self.source[pos - 1].isspace()
