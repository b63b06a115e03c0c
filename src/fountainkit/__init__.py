"""fountainkit: Fountain screenplay parser and document model."""

from fountainkit.parser import FountainParser, ParseOptions, parse
from fountainkit.cache import ParserCache
from fountainkit.config import FountainKitSettings, get_settings
from fountainkit.document import Document, ShowHideSettings
from fountainkit.exceptions import (
    ConfigurationError,
    DocumentNotFoundError,
    FountainKitError,
    ParseError,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "Document",
    "DocumentNotFoundError",
    "FountainKitError",
    "FountainKitSettings",
    "FountainParser",
    "ParseError",
    "ParseOptions",
    "ParserCache",
    "ShowHideSettings",
    "__version__",
    "get_settings",
    "parse",
]
