"""Fountain screenplay format parser."""

from pathlib import Path

from fountainkit.config import get_logger
from fountainkit.document import Document
from fountainkit.exceptions import ParseError
from fountainkit.parser.fountain_processor import check_coverage
from fountainkit.parser.line_classifier import LineClassifier, ParseOptions

logger = get_logger(__name__)


class FountainParser:
    """Parse Fountain text into a ``Document``."""

    def __init__(self, options: ParseOptions | None = None) -> None:
        """Initialize the fountain parser.

        Args:
            options: Parse options, defaults when omitted
        """
        self.options = options or ParseOptions()

    def parse(self, content: str) -> Document:
        """Parse Fountain content into a document.

        Any text is valid Fountain, so this only fails when the parsed ranges
        do not add up to the input, which indicates a bug.

        Args:
            content: Raw Fountain text

        Returns:
            Parsed document

        Raises:
            ParseError: If an internal invariant was violated
        """
        try:
            title_page, elements = LineClassifier(content, self.options).classify()
            check_coverage(content, title_page, elements)
            document = Document(content, title_page, elements)
        except (ValueError, IndexError, RuntimeError) as e:
            logger.error(
                "Fountain parser failed",
                error=str(e),
                error_type=type(e).__name__,
                length=len(content),
            )
            raise ParseError(
                message="Failed to parse Fountain text",
                error=e,
                hint="This is a parser bug, please report it with the input text.",
                details={
                    "parser_error": str(e),
                    "length": len(content),
                },
            ) from e

        logger.debug(
            "Parsed fountain document",
            title_page_entries=len(document.title_page),
            elements=len(document.elements),
            characters=len(document.all_characters),
        )
        return document

    def parse_file(self, file_path: Path) -> Document:
        """Parse a Fountain file.

        Args:
            file_path: Path to the Fountain file

        Returns:
            Parsed document
        """
        logger.debug(f"Parsing fountain file: {file_path}")
        content = file_path.read_text(encoding="utf-8")
        try:
            return self.parse(content)
        except ParseError as e:
            raise ParseError(
                message=f"Failed to parse Fountain file: {file_path}",
                error=e.error,
                hint=e.hint,
                details={"file": str(file_path), **(e.details or {})},
            ) from e


def parse(content: str, options: ParseOptions | None = None) -> Document | ParseError:
    """Parse Fountain text, returning failures as a value.

    Args:
        content: Raw Fountain text
        options: Parse options, defaults when omitted

    Returns:
        The document, or the ``ParseError`` describing why it could not be built
    """
    try:
        return FountainParser(options).parse(content)
    except ParseError as e:
        return e
