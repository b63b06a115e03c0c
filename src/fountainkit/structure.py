"""Grouping of a flat element list into sections, scenes and snippets."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from fountainkit.config import get_logger
from fountainkit.parser.fountain_models import (
    Element,
    PageBreak,
    Scene,
    ScriptStructure,
    Section,
    Snippet,
    StructureScene,
    StructureSection,
    Synopsis,
)
from fountainkit.utils.screenplay import ScreenplayUtils

if TYPE_CHECKING:
    from fountainkit.document import Document

logger = get_logger(__name__)

# Deeper sections structure the inside of scenes
MAX_STRUCTURE_DEPTH = 3
SNIPPETS_TITLE = "snippets"


def find_snippets_start(document: Document) -> int | None:
    """Index of the top level section titled "Snippets", if any."""
    for index, element in enumerate(document.elements):
        if (
            isinstance(element, Section)
            and element.depth <= MAX_STRUCTURE_DEPTH
            and ScreenplayUtils.section_title(document.slice_raw(element.range))
            == SNIPPETS_TITLE
        ):
            return index
    return None


class StructureBuilder:
    """Walk elements keeping a current section and a current scene."""

    def __init__(self) -> None:
        """Start with empty accumulators."""
        self.sections: list[StructureSection] = []
        self.section = StructureSection()
        self.scene = StructureScene()

    def add(self, element: Element) -> None:
        """Place one element into the structure."""
        if isinstance(element, Section) and element.depth <= MAX_STRUCTURE_DEPTH:
            self._start_section(element)
        elif isinstance(element, Scene):
            self._finish_scene()
            self.scene = StructureScene(scene=element)
        elif isinstance(element, Synopsis):
            self._add_synopsis(element)
        else:
            self.scene.content.append(element)

    def finish(self) -> list[StructureSection]:
        """Flush the accumulators and return the sections."""
        self._finish_scene()
        if not self.section.is_empty:
            self.sections.append(self.section)
        return self.sections

    def _start_section(self, section: Section) -> None:
        if self.section.is_empty and self.scene.is_empty:
            # Only happens before anything else was seen
            self.section.section = section
            return
        self._finish_scene()
        self.sections.append(self.section)
        self.section = StructureSection(section=section)

    def _finish_scene(self) -> None:
        if not self.scene.is_empty:
            self.section.content.append(self.scene)
        self.scene = StructureScene()

    def _only_blank_lines(self) -> bool:
        return all(ScreenplayUtils.is_blank_lines(e) for e in self.scene.content)

    def _add_synopsis(self, synopsis: Synopsis) -> None:
        if (
            self.section.section is not None
            and self.section.synopsis is None
            and not self.section.content
            and self.scene.scene is None
            and self.scene.synopsis is None
            and self._only_blank_lines()
        ):
            self.section.synopsis = synopsis
        elif (
            self.scene.scene is not None
            and self.scene.synopsis is None
            and self._only_blank_lines()
        ):
            self.scene.synopsis = synopsis
        else:
            self.scene.content.append(synopsis)


def split_snippets(elements: Sequence[Element]) -> list[Snippet]:
    """Split elements into snippets at page breaks.

    A page break only closes a snippet that has content, and a trailing
    snippet without content is dropped.
    """
    snippets: list[Snippet] = []
    content: list[Element] = []
    for element in elements:
        if isinstance(element, PageBreak):
            if content:
                snippets.append(Snippet(tuple(content), element))
                content = []
        else:
            content.append(element)
    if content:
        snippets.append(Snippet(tuple(content)))
    return snippets


def build_structure(document: Document) -> ScriptStructure:
    """Build the section and scene tree of a document.

    The first synopsis after a heading, with only blank lines in between, is
    attached to that heading instead of being content. Elements after a top
    level "Snippets" section are not part of the tree; they are returned as
    snippets split at page breaks.

    Args:
        document: Parsed document

    Returns:
        Sections of the main script and the snippets
    """
    snippets_start = find_snippets_start(document)
    main = document.elements
    snippets: list[Snippet] = []
    if snippets_start is not None:
        main = document.elements[:snippets_start]
        snippets = split_snippets(document.elements[snippets_start + 1 :])

    builder = StructureBuilder()
    for element in main:
        builder.add(element)
    sections = builder.finish()

    logger.debug(
        "Built script structure",
        sections=len(sections),
        snippets=len(snippets),
    )
    return ScriptStructure(sections=tuple(sections), snippets=tuple(snippets))
