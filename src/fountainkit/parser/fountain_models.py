"""Data models for Fountain screenplay parsing.

Every node records the half-open range of source text it was parsed from.
Ranges are offsets into the original, never modified, source string so a
document can always be reconstructed exactly from its elements.
"""

from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, ClassVar


@dataclass(frozen=True)
class Range:
    """Half-open ``[start, end)`` span of source offsets."""

    start: int
    end: int

    def __post_init__(self) -> None:
        """Reject negative or inverted ranges."""
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid range [{self.start}, {self.end})")

    @property
    def length(self) -> int:
        """Number of characters covered by the range."""
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        """Whether the range covers no characters."""
        return self.start == self.end


# Inline nodes


@dataclass(frozen=True)
class Text:
    """A run of plain text without newlines."""

    kind: ClassVar[str] = "text"

    range: Range


@dataclass(frozen=True)
class Styled:
    """Emphasised text: bold, italics or underline.

    Styled nodes nest; ``***x***`` is bold wrapping italics. Inside a line
    body they may also hold notes and boneyards, title page values only
    text and emphasis.
    """

    kind: str
    range: Range
    elements: tuple["Text | Styled | Note | Boneyard", ...] = ()


@dataclass(frozen=True)
class Note:
    """A ``[[...]]`` note.

    ``note_kind`` is ``""`` for plain notes, ``"+"`` or ``"-"`` for
    additions and removals, ``"@word"`` for margin markers and the
    lowercased prefix for notes written as ``[[todo: ...]]``.
    """

    kind: ClassVar[str] = "note"

    range: Range
    note_kind: str
    text_range: Range


@dataclass(frozen=True)
class Boneyard:
    """A ``/* ... */`` comment, excluded from every render."""

    kind: ClassVar[str] = "boneyard"

    range: Range


StyledText = Text | Styled
InlineNode = Text | Styled | Note | Boneyard


@dataclass(frozen=True)
class Line:
    """One physical line of inline content.

    The range includes the line terminator, the element ranges do not. A line
    without elements is a blank line.
    """

    range: Range
    elements: tuple[InlineNode, ...] = ()
    centered: bool = False


# Block elements


@dataclass(frozen=True)
class Scene:
    """A scene heading."""

    kind: ClassVar[str] = "scene"

    range: Range
    heading: str
    number: Range | None = None


@dataclass(frozen=True)
class Transition:
    """A transition such as ``CUT TO:``."""

    kind: ClassVar[str] = "transition"

    range: Range
    forced: bool = False


@dataclass(frozen=True)
class Section:
    """A ``#`` section heading."""

    kind: ClassVar[str] = "section"

    range: Range
    depth: int


@dataclass(frozen=True)
class Synopsis:
    """One or more consecutive ``=`` synopsis lines."""

    kind: ClassVar[str] = "synopsis"

    range: Range
    lines_of_text: tuple[Range, ...] = ()


@dataclass(frozen=True)
class PageBreak:
    """A ``===`` page break."""

    kind: ClassVar[str] = "page-break"

    range: Range


@dataclass(frozen=True)
class Action:
    """Action text, the fallback for anything not otherwise classified."""

    kind: ClassVar[str] = "action"

    range: Range
    lines: tuple[Line, ...] = ()


@dataclass(frozen=True)
class Lyrics:
    """A block of ``~`` lyric lines."""

    kind: ClassVar[str] = "lyrics"

    range: Range
    lines: tuple[Line, ...] = ()


@dataclass(frozen=True)
class Dialogue:
    """A character cue followed by an optional parenthetical and lines."""

    kind: ClassVar[str] = "dialogue"

    range: Range
    character_range: Range
    character_extensions_range: Range
    parenthetical: Range | None = None
    lines: tuple[Line, ...] = ()
    dual: bool = False


Element = (
    Scene | Transition | Section | Synopsis | PageBreak | Action | Lyrics | Dialogue
)


@dataclass(frozen=True)
class KeyValue:
    """A title page entry, one tuple of styled text per value line."""

    key: str
    values: tuple[tuple[StyledText, ...], ...]
    range: Range


# Derived structure views


@dataclass
class StructureScene:
    """A scene heading with its synopsis and the elements that follow it."""

    kind: ClassVar[str] = "scene"

    scene: Scene | None = None
    synopsis: Synopsis | None = None
    content: list[Element] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Whether nothing has been collected yet."""
        return self.scene is None and self.synopsis is None and not self.content

    @property
    def range(self) -> Range:
        """Span from the heading to the end of the last content element."""
        return _span([self.scene, self.synopsis, *self.content])


@dataclass
class StructureSection:
    """A section heading with nested sections and scenes."""

    kind: ClassVar[str] = "section"

    section: Section | None = None
    synopsis: Synopsis | None = None
    content: list["StructureSection | StructureScene"] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Whether nothing has been collected yet."""
        return self.section is None and self.synopsis is None and not self.content

    @property
    def range(self) -> Range:
        """Span from the heading to the end of the last nested node."""
        return _span([self.section, self.synopsis, *self.content])


@dataclass(frozen=True)
class Snippet:
    """A reusable fragment taken from the snippets section."""

    content: tuple[Element, ...]
    page_break: PageBreak | None = None


@dataclass(frozen=True)
class ScriptStructure:
    """Result of grouping a document into sections, scenes and snippets."""

    sections: tuple[StructureSection, ...] = ()
    snippets: tuple[Snippet, ...] = ()


def _span(nodes: list[Any]) -> Range:
    ranges = [node.range for node in nodes if node is not None]
    if not ranges:
        raise ValueError("Empty structure node has no range")
    return Range(min(r.start for r in ranges), max(r.end for r in ranges))


def as_dict(node: Any) -> Any:
    """Convert a node tree into plain JSON-compatible values.

    Args:
        node: Any model instance, tuple or list of them, or a scalar

    Returns:
        Dictionaries carrying a ``kind`` key for tagged nodes, lists for
        sequences and scalars unchanged
    """
    if isinstance(node, Range):
        return {"start": node.start, "end": node.end}
    if is_dataclass(node) and not isinstance(node, type):
        result: dict[str, Any] = {}
        kind = getattr(node, "kind", None)
        if kind is not None:
            result["kind"] = kind
        for f in fields(node):
            if f.name == "kind":
                continue
            result[f.name] = as_dict(getattr(node, f.name))
        if isinstance(node, StructureScene | StructureSection) and not node.is_empty:
            result["range"] = as_dict(node.range)
        return result
    if isinstance(node, list | tuple):
        return [as_dict(item) for item in node]
    return node
