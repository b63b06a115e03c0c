"""Fountain screenplay format parser for fountainkit."""

from __future__ import annotations

from .fountain_models import (
    Action,
    Boneyard,
    Dialogue,
    Element,
    KeyValue,
    Line,
    Lyrics,
    Note,
    PageBreak,
    Range,
    Scene,
    ScriptStructure,
    Section,
    Snippet,
    StructureScene,
    StructureSection,
    Styled,
    Synopsis,
    Text,
    Transition,
    as_dict,
)
from .inline_parser import InlineParser
from .line_classifier import LineClassifier, ParseOptions
from .fountain_processor import merge_consecutive_actions
from .fountain_parser import FountainParser, parse

__all__ = [
    "Action",
    "Boneyard",
    "Dialogue",
    "Element",
    "FountainParser",
    "InlineParser",
    "KeyValue",
    "Line",
    "LineClassifier",
    "Lyrics",
    "Note",
    "PageBreak",
    "ParseOptions",
    "Range",
    "Scene",
    "ScriptStructure",
    "Section",
    "Snippet",
    "StructureScene",
    "StructureSection",
    "Styled",
    "Synopsis",
    "Text",
    "Transition",
    "as_dict",
    "merge_consecutive_actions",
    "parse",
]
