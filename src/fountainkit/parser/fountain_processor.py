"""Post-processing of classified elements."""

from collections.abc import Iterable, Sequence

from fountainkit.config import get_logger
from fountainkit.parser.fountain_models import (
    Action,
    Element,
    KeyValue,
    Line,
    Range,
)

logger = get_logger(__name__)


def merge_consecutive_actions(elements: Iterable[Element]) -> list[Element]:
    """Merge runs of adjacent action blocks into single blocks.

    The classifier splits action text at blank lines. Merging restores one
    block per run while keeping every source line: when the earlier block
    swallowed a terminating blank line, that line is added back as an empty
    ``Line`` so the merged lines still tile the block.

    Args:
        elements: Elements in source order

    Returns:
        New element list, applying it again changes nothing
    """
    merged: list[Element] = []
    previous: Action | None = None
    for element in elements:
        if not isinstance(element, Action):
            if previous is not None:
                merged.append(previous)
                previous = None
            merged.append(element)
            continue

        if previous is None:
            previous = element
            continue

        lines = list(previous.lines)
        last_end = lines[-1].range.end if lines else previous.range.start
        if previous.range.end > last_end:
            lines.append(Line(Range(last_end, previous.range.end)))
        lines.extend(element.lines)
        previous = Action(Range(previous.range.start, element.range.end), tuple(lines))

    if previous is not None:
        merged.append(previous)
    return merged


def check_coverage(
    source: str, title_page: Sequence[KeyValue], elements: Sequence[Element]
) -> None:
    """Verify that the title page and elements tile the whole source.

    Args:
        source: Document text the nodes were parsed from
        title_page: Title page entries
        elements: Elements in source order

    Raises:
        RuntimeError: If there is a gap or an overlap between ranges
    """
    position = 0
    for node in [*title_page, *elements]:
        if node.range.start != position:
            raise RuntimeError(
                f"{type(node).__name__} starts at {node.range.start}, "
                f"expected {position}"
            )
        position = node.range.end
    if position != len(source):
        raise RuntimeError(
            f"Parsed elements end at {position}, source has {len(source)} characters"
        )
    logger.debug(
        "Element ranges cover source",
        title_page_entries=len(title_page),
        elements=len(elements),
        length=len(source),
    )
