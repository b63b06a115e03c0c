"""Block classification of Fountain source lines.

The classifier walks physical lines and decides, for every line that starts a
block, which element it begins. Forced markers win over heuristics, and the
heuristics for transitions and character cues look at the neighbouring lines.
Every character of the input ends up inside exactly one element.
"""

import re
from dataclasses import dataclass

from fountainkit.parser.fountain_models import (
    Action,
    Dialogue,
    Element,
    KeyValue,
    Line,
    Lyrics,
    PageBreak,
    Range,
    Scene,
    Section,
    StyledText,
    Synopsis,
    Transition,
)
from fountainkit.parser.inline_parser import InlineParser, find_boneyard_spans

SCENE_HEADING_PATTERN = re.compile(r"^(INT|EXT|EST|INT\.?/EXT|I/E)[. ]", re.IGNORECASE)
SCENE_NUMBER_PATTERN = re.compile(r"(#[^#\n]+#)\s*$")
PAGE_BREAK_PATTERN = re.compile(r"={3,}")
TITLE_KEY_PATTERN = re.compile(r"([A-Za-z][A-Za-z0-9 _-]*):(.*)")

MAX_SECTION_DEPTH = 6


@dataclass(frozen=True)
class ParseOptions:
    """Options accepted by the parser.

    Attributes:
        title_page: Recognise a title page at the start of the document
    """

    title_page: bool = True


@dataclass(frozen=True)
class SourceLine:
    """A physical line of the source.

    ``end`` is the end of the content without any ``\\r\\n`` terminator and
    ``next`` is the offset where the following line starts.
    """

    start: int
    end: int
    next: int
    text: str

    @property
    def range(self) -> Range:
        """Range including the line terminator."""
        return Range(self.start, self.next)

    @property
    def content_range(self) -> Range:
        """Range of the content without the terminator."""
        return Range(self.start, self.end)


def split_lines(source: str) -> list[SourceLine]:
    """Split the source into physical lines.

    A trailing newline terminates the last line instead of starting an empty
    one, and a ``\\r`` before a newline is not part of the content.
    """
    lines: list[SourceLine] = []
    pos = 0
    length = len(source)
    while pos < length:
        newline = source.find("\n", pos)
        next_pos = length if newline < 0 else newline + 1
        end = length if newline < 0 else newline
        if end > pos and source[end - 1] == "\r":
            end -= 1
        lines.append(SourceLine(pos, end, next_pos, source[pos:end]))
        pos = next_pos
    return lines


def is_uppercase(text: str) -> bool:
    """Whether ``text`` has cased letters and none of them is lowercase."""
    return any(ch.isupper() for ch in text) and not any(ch.islower() for ch in text)


class LineClassifier:
    """Turn Fountain source into a title page and a flat element list."""

    def __init__(self, source: str, options: ParseOptions | None = None) -> None:
        """Initialize the classifier.

        Args:
            source: Complete document text
            options: Parse options, defaults when omitted
        """
        self.source = source
        self.options = options or ParseOptions()
        self.lines = split_lines(source)
        self.boneyard_spans = find_boneyard_spans(source)
        self.inline = InlineParser(source, self.boneyard_spans)

    def classify(self) -> tuple[list[KeyValue], list[Element]]:
        """Classify the whole document.

        Returns:
            Tuple of (title page entries, elements in source order)
        """
        title_page: list[KeyValue] = []
        index = 0
        if self.options.title_page:
            title_page, index = self._title_page()

        elements: list[Element] = []
        while index < len(self.lines):
            if self.is_blank(index):
                element, index = self._blank_run(index, self.lines[index].start)
            else:
                element, index = self._block(index)
                if isinstance(element, Section) and element.range.end < (
                    self.lines[index - 1].next
                ):
                    elements.append(element)
                    element, index = self._blank_run(index, element.range.end)
            elements.append(element)
        return title_page, elements

    # Line predicates

    def in_boneyard(self, index: int) -> bool:
        """Whether the line starts inside a comment opened on an earlier line."""
        line = self.lines[index]
        span = self.inline.boneyard_at(line.start)
        return span is not None and span.start < line.start

    def is_blank(self, index: int) -> bool:
        """Whether the line only holds whitespace and is not inside a comment."""
        return not self.lines[index].text.strip() and not self.in_boneyard(index)

    def _blank_before(self, index: int) -> bool:
        return index == 0 or self.is_blank(index - 1)

    def _blank_after(self, index: int) -> bool:
        return index + 1 >= len(self.lines) or self.is_blank(index + 1)

    def _interrupts(self, index: int) -> bool:
        """Whether the line ends a running action or dialogue block."""
        if self.in_boneyard(index):
            return False
        stripped = self.lines[index].text.strip()
        return (
            stripped.startswith("#")
            or PAGE_BREAK_PATTERN.fullmatch(stripped) is not None
            or self._is_synopsis(stripped)
        )

    @staticmethod
    def _is_synopsis(stripped: str) -> bool:
        return (
            stripped.startswith("=")
            and not stripped.startswith("==")
            and (len(stripped) == 1 or stripped[1].isspace())
        )

    # Title page

    def _title_page(self) -> tuple[list[KeyValue], int]:
        """Recognise ``Key: value`` lines at the very start of the document."""
        entries: list[tuple[str, int, list[Range]]] = []
        index = 0
        while index < len(self.lines) and not self.is_blank(index):
            line = self.lines[index]
            key_match = TITLE_KEY_PATTERN.fullmatch(line.text)
            if key_match is not None:
                values = []
                value_range = self._trimmed(line, key_match.start(2))
                if value_range is not None:
                    values.append(value_range)
                entries.append((key_match.group(1).strip(), index, values))
            elif entries and line.text[:1] in (" ", "\t"):
                value_range = self._trimmed(line, 0)
                if value_range is not None:
                    entries[-1][2].append(value_range)
            else:
                return [], 0
            index += 1

        if not entries or not entries[0][2]:
            return [], 0

        if index < len(self.lines):
            # The terminating blank line belongs to the last entry
            index += 1

        key_values: list[KeyValue] = []
        for position, (key, first_index, values) in enumerate(entries):
            if position + 1 < len(entries):
                end = self.lines[entries[position + 1][1]].start
            else:
                end = self.lines[index - 1].next
            key_values.append(
                KeyValue(
                    key=key,
                    values=tuple(self.inline.parse_styled(r) for r in values),
                    range=Range(self.lines[first_index].start, end),
                )
            )
        return key_values, index

    @staticmethod
    def _trimmed(line: SourceLine, offset: int) -> Range | None:
        value = line.text[offset:]
        stripped = value.strip()
        if not stripped:
            return None
        start = line.start + offset + (len(value) - len(value.lstrip()))
        return Range(start, start + len(stripped))

    # Blocks

    def _block(self, index: int) -> tuple[Element, int]:
        """Classify the block starting at a non-blank line."""
        line = self.lines[index]
        stripped = line.text.strip()
        marker_text = line.text.lstrip()

        if PAGE_BREAK_PATTERN.fullmatch(stripped):
            return PageBreak(line.range), index + 1
        if marker_text.startswith("#"):
            return self._section(index), index + 1
        if self._is_synopsis(stripped):
            return self._synopsis(index)
        if line.text.startswith("~"):
            return self._lyrics(index)
        if marker_text.startswith("~"):
            # Indented lyrics markers are plain action
            return self._action(index)
        if marker_text.startswith(".") and not marker_text.startswith(".."):
            return self._scene(index)
        if marker_text.startswith("!"):
            return self._action(index, forced=True)
        if marker_text.startswith("@"):
            if not self._blank_after(index):
                return self._dialogue(index)
            return self._action(index)
        if marker_text.startswith(">"):
            if stripped.endswith("<"):
                return self._action(index)
            return self._transition(index, forced=True)

        if SCENE_HEADING_PATTERN.match(marker_text):
            return self._scene(index)
        if (
            is_uppercase(stripped)
            and stripped.endswith(":")
            and self._blank_before(index)
            and self._blank_after(index)
        ):
            return self._transition(index, forced=False)
        if (
            is_uppercase(stripped.split("(", 1)[0])
            and self._blank_before(index)
            and not self._blank_after(index)
        ):
            return self._dialogue(index)
        return self._action(index)

    def _absorb_blank(self, index: int) -> tuple[int, int]:
        """Include one following blank line, if present, in the block.

        Args:
            index: Index of the line after the block's last line

        Returns:
            Tuple of (block end offset, index of the next unclassified line)
        """
        if index < len(self.lines) and self.is_blank(index):
            return self.lines[index].next, index + 1
        return self.lines[index - 1].next, index

    def _blank_run(self, index: int, start: int) -> tuple[Action, int]:
        lines = []
        while index < len(self.lines) and self.is_blank(index):
            lines.append(Line(self.lines[index].range))
            index += 1
        return Action(Range(start, self.lines[index - 1].next), tuple(lines)), index

    def _section(self, index: int) -> Section:
        line = self.lines[index]
        marker_text = line.text.lstrip()
        depth = len(marker_text) - len(marker_text.lstrip("#"))
        end = line.next
        if (
            line.next > line.end
            and index + 1 < len(self.lines)
            and self.is_blank(index + 1)
        ):
            # The newline opens the blank run that follows
            end = line.next - 1
        return Section(Range(line.start, end), min(depth, MAX_SECTION_DEPTH))

    def _synopsis(self, index: int) -> tuple[Synopsis, int]:
        start = self.lines[index].start
        texts = []
        while index < len(self.lines):
            line = self.lines[index]
            if not self._is_synopsis(line.text.strip()):
                break
            marker = line.start + line.text.index("=") + 1
            text = self.source[marker : line.end]
            text_start = marker + len(text) - len(text.lstrip())
            texts.append(Range(min(text_start, line.end), line.end))
            index += 1
        return Synopsis(Range(start, self.lines[index - 1].next), tuple(texts)), index

    def _lyrics(self, index: int) -> tuple[Lyrics, int]:
        start = self.lines[index].start
        lines = []
        while index < len(self.lines) and self.lines[index].text.startswith("~"):
            line = self.lines[index]
            content = line.text[1:]
            text_start = line.start + 1 + len(content) - len(content.lstrip())
            text_range = Range(min(text_start, line.end), line.end)
            lines.append(Line(line.range, self.inline.parse(text_range)))
            index += 1
        end, index = self._absorb_blank(index)
        return Lyrics(Range(start, end), tuple(lines)), index

    def _scene(self, index: int) -> tuple[Scene, int]:
        line = self.lines[index]
        number = None
        heading = line.text
        number_match = SCENE_NUMBER_PATTERN.search(line.text)
        if number_match is not None:
            heading = line.text[: number_match.start(1)]
            number = Range(
                line.start + number_match.start(1), line.start + number_match.end(1)
            )
        end, next_index = self._absorb_blank(index + 1)
        return Scene(Range(line.start, end), heading.rstrip(), number), next_index

    def _transition(self, index: int, forced: bool) -> tuple[Transition, int]:
        end, next_index = self._absorb_blank(index + 1)
        return Transition(Range(self.lines[index].start, end), forced), next_index

    def _continuation(self, index: int) -> int:
        """Index just past the lines that continue the block at ``index``."""
        index += 1
        while (
            index < len(self.lines)
            and not self.is_blank(index)
            and not self._interrupts(index)
        ):
            index += 1
        return index

    def _action(self, index: int, forced: bool = False) -> tuple[Action, int]:
        start = self.lines[index].start
        stop = self._continuation(index)
        lines = [self._action_line(index, forced)]
        lines.extend(self._action_line(i) for i in range(index + 1, stop))
        end, next_index = self._absorb_blank(stop)
        return Action(Range(start, end), tuple(lines)), next_index

    def _action_line(self, index: int, forced: bool = False) -> Line:
        line = self.lines[index]
        stripped = line.text.strip()
        lead = len(line.text) - len(line.text.lstrip())

        if forced:
            # Drop the ``!`` marker from the text
            text_range = Range(line.start + lead + 1, line.end)
            return Line(line.range, self.inline.parse(text_range))

        if len(stripped) >= 2 and stripped.startswith(">") and stripped.endswith("<"):
            inner = stripped[1:-1]
            inner_start = line.start + lead + 1 + len(inner) - len(inner.lstrip())
            inner_end = max(inner_start, line.start + lead + 1 + len(inner.rstrip()))
            elements = self.inline.parse(Range(inner_start, inner_end))
            return Line(line.range, elements, centered=True)

        return Line(line.range, self.inline.parse(line.content_range))

    def _dialogue(self, index: int) -> tuple[Dialogue, int]:
        cue = self.lines[index]
        stop = self._continuation(index)

        name_start = len(cue.text) - len(cue.text.lstrip())
        if cue.text.startswith("@", name_start):
            name_start += 1
        body = cue.text.rstrip()
        dual = body.endswith("^")
        if dual:
            body = body[:-1].rstrip()
        body_end = max(len(body), name_start)

        paren = cue.text.find("(", name_start, body_end)
        if paren >= 0:
            name_end = name_start + len(cue.text[name_start:paren].rstrip())
            extensions = Range(cue.start + paren, cue.start + body_end)
        else:
            name_end = body_end
            extensions = Range(cue.start + body_end, cue.start + body_end)

        parenthetical = None
        first = index + 1
        if first < stop:
            text = self.lines[first].text.strip()
            if text.startswith("(") and text.endswith(")"):
                parenthetical = self.lines[first].content_range
                first += 1

        lines = tuple(
            Line(self.lines[i].range, self.inline.parse(self.lines[i].content_range))
            for i in range(first, stop)
        )
        end, next_index = self._absorb_blank(stop)
        return (
            Dialogue(
                range=Range(cue.start, end),
                character_range=Range(cue.start + name_start, cue.start + name_end),
                character_extensions_range=extensions,
                parenthetical=parenthetical,
                lines=lines,
                dual=dual,
            ),
            next_index,
        )
