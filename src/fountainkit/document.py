"""Parsed Fountain document and its read-only query surface."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from fountainkit.parser.fountain_models import (
    Action,
    Boneyard,
    Dialogue,
    Element,
    InlineNode,
    KeyValue,
    Line,
    Lyrics,
    Note,
    Range,
    Scene,
    ScriptStructure,
    Section,
    Styled,
    Synopsis,
    as_dict,
)
from fountainkit.parser.fountain_processor import merge_consecutive_actions
from fountainkit.utils.screenplay import ScreenplayUtils

if TYPE_CHECKING:
    from fountainkit.config.settings import FountainKitSettings


@dataclass(frozen=True)
class ShowHideSettings:
    """Which hidden element kinds to drop from a document."""

    hide_notes: bool = False
    hide_synopsis: bool = False
    hide_boneyard: bool = False

    @classmethod
    def from_settings(cls, settings: FountainKitSettings) -> ShowHideSettings:
        """Take the hide flags from application settings."""
        return cls(
            hide_notes=settings.hide_notes,
            hide_synopsis=settings.hide_synopsis,
            hide_boneyard=settings.hide_boneyard,
        )


class Document:
    """An immutable parsed screenplay.

    All ranges of the title page and elements refer to ``source``. Adjacent
    action blocks are merged on construction, and the set of speaking
    characters is computed once.
    """

    def __init__(
        self,
        source: str,
        title_page: Sequence[KeyValue] = (),
        elements: Iterable[Element] = (),
    ) -> None:
        """Initialize the document.

        Args:
            source: Complete document text
            title_page: Title page entries
            elements: Elements in source order
        """
        self.source = source
        self.title_page: tuple[KeyValue, ...] = tuple(title_page)
        self.elements: tuple[Element, ...] = tuple(merge_consecutive_actions(elements))
        self.all_characters: frozenset[str] = frozenset(
            name
            for element in self.elements
            if isinstance(element, Dialogue)
            for name in self.characters_of(element)
        )

    def __repr__(self) -> str:
        return (
            f"Document(length={len(self.source)}, "
            f"title_page={len(self.title_page)}, elements={len(self.elements)})"
        )

    def slice_raw(self, r: Range, escape_leading_spaces: bool = False) -> str:
        """Return the source text of a range without any HTML escaping.

        Args:
            r: Range to extract
            escape_leading_spaces: Turn leading spaces into non-breaking spaces

        Returns:
            The exact source substring, optionally with escaped indentation
        """
        return ScreenplayUtils.escape_leading_spaces(
            escape_leading_spaces, self.source[r.start : r.end]
        )

    def slice_as_html(self, r: Range, escape_leading_spaces: bool = False) -> str:
        """Return the source text of a range, safe to embed in HTML."""
        safe = ScreenplayUtils.escape_html(self.source[r.start : r.end])
        return ScreenplayUtils.escape_leading_spaces(escape_leading_spaces, safe)

    def characters_of(self, dialogue: Dialogue) -> list[str]:
        """Names speaking a dialogue; ``BOB & ALICE`` names two characters."""
        names = self.slice_raw(dialogue.character_range)
        return [part.strip() for part in names.split("&")]

    def scenes(self) -> list[Scene]:
        """All scene headings in document order."""
        return [element for element in self.elements if isinstance(element, Scene)]

    def structure(self) -> ScriptStructure:
        """Group the elements into sections, scenes and snippets."""
        from fountainkit.structure import build_structure

        return build_structure(self)

    def with_source(self) -> list[tuple[Element, str]]:
        """Pair every element with its raw source text."""
        return [(element, self.slice_raw(element.range)) for element in self.elements]

    def with_hidden_elements_removed(self, settings: ShowHideSettings) -> Document:
        """Return a copy without the hidden notes, synopses and boneyards.

        With ``hide_boneyard`` everything from a section titled "Boneyard"
        onwards is dropped as well. Lines left empty by the filter are
        removed, lines that were blank to begin with are kept. Action and
        lyrics blocks without any remaining line disappear, dialogue keeps
        its cue.

        Args:
            settings: Which element kinds to hide

        Returns:
            New document over the same source
        """
        kept: list[Element] = []
        for element in self.elements:
            if (
                settings.hide_boneyard
                and isinstance(element, Section)
                and ScreenplayUtils.section_title(self.slice_raw(element.range))
                == "boneyard"
            ):
                break
            filtered = self._filter_element(element, settings)
            if filtered is not None:
                kept.append(filtered)
        return Document(self.source, self.title_page, kept)

    def _filter_element(
        self, element: Element, settings: ShowHideSettings
    ) -> Element | None:
        if isinstance(element, Synopsis):
            return None if settings.hide_synopsis else element
        if isinstance(element, Action | Lyrics | Dialogue):
            lines = tuple(
                line
                for line in (self._filter_line(ln, settings) for ln in element.lines)
                if line is not None
            )
            if not lines and not isinstance(element, Dialogue):
                return None
            return replace(element, lines=lines)
        return element

    @staticmethod
    def _filter_line(line: Line, settings: ShowHideSettings) -> Line | None:
        if not line.elements:
            return line

        elements = Document._filter_inline(line.elements, settings)
        if not elements:
            return None
        return replace(line, elements=elements)

    @staticmethod
    def _filter_inline(
        nodes: Sequence[InlineNode], settings: ShowHideSettings
    ) -> tuple[InlineNode, ...]:
        """Drop hidden notes and boneyards, also inside emphasis.

        Emphasis left without content is dropped as well.
        """
        kept: list[InlineNode] = []
        for node in nodes:
            if isinstance(node, Note) and settings.hide_notes:
                continue
            if isinstance(node, Boneyard) and settings.hide_boneyard:
                continue
            if isinstance(node, Styled):
                inner = Document._filter_inline(node.elements, settings)
                if not inner:
                    continue
                node = replace(node, elements=inner)
            kept.append(node)
        return tuple(kept)

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible representation of the title page and elements."""
        return {
            "title_page": as_dict(self.title_page),
            "elements": as_dict(self.elements),
        }


