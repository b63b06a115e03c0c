"""Pure string edits used by the replace-then-reparse editing model.

Documents are never changed in place. Callers compute new text with these
helpers and parse it again.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import TYPE_CHECKING

from fountainkit.parser.fountain_models import Element, Range

if TYPE_CHECKING:
    from fountainkit.document import Document

TRAILING_WHITESPACE_PATTERN = re.compile(r"\s*$")
PURELY_NUMERIC_PATTERN = re.compile(r"\d+")


def replace_text(text: str, r: Range, replacement: str) -> str:
    """Replace the text covered by ``r``.

    Args:
        text: The overall text
        r: Range of text to replace
        replacement: Text that replaces the range

    Returns:
        The modified text
    """
    return text[: r.start] + replacement + text[r.end :]


def move_text(text: str, r: Range, new_start: int, new_trailer: str = "") -> str:
    """Move the text of ``r`` so that it starts at ``new_start``.

    ``new_start`` is an offset into the original text and must not lie
    strictly inside ``r``. ``new_trailer`` is inserted right after the moved
    text.

    Raises:
        ValueError: If ``new_start`` lies inside the moved range
    """
    if r.start < new_start < r.end:
        raise ValueError(f"Cannot move [{r.start}, {r.end}) into itself")
    moved = text[r.start : r.end] + new_trailer
    if new_start >= r.end:
        return text[: r.start] + text[r.end : new_start] + moved + text[new_start:]
    return text[:new_start] + moved + text[new_start : r.start] + text[r.end :]


def blank_line_trailer(block: str) -> str:
    """Newlines needed so that ``block`` ends with a blank line."""
    if block.endswith("\n\n"):
        return ""
    if block.endswith("\n"):
        return "\n"
    return "\n\n"


def duplicate_scene(text: str, r: Range) -> str:
    """Insert a copy of the scene covering ``r`` directly after it.

    A scene at the very end of a document may lack its terminating blank
    line, which is added so the copy starts a scene of its own.
    """
    scene_text = text[r.start : r.end]
    return text[: r.end] + blank_line_trailer(scene_text) + scene_text + text[r.end :]


def remove_elements_from_text(text: str, elements: Iterable[Element]) -> str:
    """Remove the source text of all given elements.

    Args:
        text: Source the elements were parsed from
        elements: Elements to remove, in any order

    Returns:
        The text without the element ranges
    """
    slices: list[str] = []
    position = 0
    for r in sorted((element.range for element in elements), key=lambda r: r.start):
        if position < r.start:
            slices.append(text[position : r.start])
        position = max(position, r.end)
    slices.append(text[position:])
    return "".join(slices)


def elements_in_range(document: Document, selection: Range) -> list[Element]:
    """Elements lying completely inside the selection."""
    return [
        element
        for element in document.elements
        if element.range.start >= selection.start
        and element.range.end <= selection.end
    ]


def number_scenes(document: Document) -> str:
    """Add ``#n#`` scene numbers to every scene heading without one.

    Numbering continues after existing purely numeric scene numbers, so
    ``#5#`` makes the next unnumbered scene ``#6#``. Other numbers such as
    ``#5A#`` or ``#05#`` leave the counter alone.

    Returns:
        The document text with numbers inserted
    """
    insertions: list[tuple[int, str]] = []
    next_number = 1
    for scene in document.scenes():
        if scene.number is None:
            insertions.append(
                (scene.range.start + len(scene.heading), f" #{next_number}#")
            )
            next_number += 1
            continue
        existing = document.source[scene.number.start + 1 : scene.number.end - 1]
        existing = existing.strip()
        # Canonical integers only, ``05`` does not count
        is_integer = PURELY_NUMERIC_PATTERN.fullmatch(existing) is not None
        if is_integer and str(int(existing)) == existing:
            next_number = int(existing) + 1

    text = document.source
    for position, label in reversed(insertions):
        text = text[:position] + label + text[position:]
    return text


def remove_scene_numbers(document: Document) -> str:
    """Remove scene numbers and the whitespace in front of them.

    Whitespace after a scene number is kept.
    """
    text = document.source
    for scene in reversed(document.scenes()):
        if scene.number is None:
            continue
        before = text[scene.range.start + len(scene.heading) : scene.number.start]
        match = TRAILING_WHITESPACE_PATTERN.search(before)
        spaces = len(match.group(0)) if match else 0
        text = text[: scene.number.start - spaces] + text[scene.number.end :]
    return text

