"""Errors raised by fountainkit.

Every error carries a message, an optional hint telling the user what to
do about it and optional key/value details.
"""

from __future__ import annotations

from typing import Any

COMMON_KEY_MISTAKES = {
    "hide_comments": "hide_boneyard",
    "hide_synopses": "hide_synopsis",
    "show_notes": "hide_notes",
    "cache_size": "cache_max_entries",
}


class FountainKitError(Exception):
    """Root of the fountainkit error hierarchy."""

    def __init__(
        self,
        message: str,
        hint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.hint = hint
        self.details = details
        super().__init__(self.format_error())

    def format_error(self) -> str:
        """Render message, hint and details on separate lines."""
        lines = [f"Error: {self.message}"]
        if self.hint:
            lines.append(f"Hint: {self.hint}")
        if self.details:
            lines.append("Details:")
            lines.extend(f"  {key}: {value}" for key, value in self.details.items())
        return "\n".join(lines)


class ConfigurationError(FountainKitError):
    """A configuration file or value cannot be used."""


class ParseError(FountainKitError):
    """A document could not be turned into a consistent element tree.

    Fountain has no syntax errors, so this only signals a broken internal
    invariant. The underlying failure is kept in ``error``.
    """

    def __init__(
        self,
        message: str,
        error: BaseException | None = None,
        hint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.error = error
        super().__init__(message=message, hint=hint, details=details)


class DocumentNotFoundError(FountainKitError):
    """No document text is stored under the requested path."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            message=f"No fountain document stored at '{path}'",
            hint="Store the document text with set() before reading it",
            details={"path": path},
        )


def check_config_keys(config: dict[str, Any]) -> None:
    """Reject configuration keys that are known misspellings.

    Raises:
        ConfigurationError: Naming the key that was meant
    """
    mistakes = [key for key in COMMON_KEY_MISTAKES if key in config]
    if mistakes:
        wrong = mistakes[0]
        correct = COMMON_KEY_MISTAKES[wrong]
        raise ConfigurationError(
            message=f"Invalid configuration key '{wrong}'",
            hint=f"Use '{correct}' instead of '{wrong}'",
            details={
                "found_keys": list(config.keys()),
                "invalid_key": wrong,
                "correct_key": correct,
            },
        )
