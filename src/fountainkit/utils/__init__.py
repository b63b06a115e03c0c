"""fountainkit utilities module."""

from fountainkit.utils.screenplay import ScreenplayUtils
from fountainkit.utils.text_edit import (
    blank_line_trailer,
    duplicate_scene,
    elements_in_range,
    move_text,
    number_scenes,
    remove_elements_from_text,
    remove_scene_numbers,
    replace_text,
)

__all__ = [
    "ScreenplayUtils",
    "blank_line_trailer",
    "duplicate_scene",
    "elements_in_range",
    "move_text",
    "number_scenes",
    "remove_elements_from_text",
    "remove_scene_numbers",
    "replace_text",
]
