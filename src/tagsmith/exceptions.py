"""
Custom exceptions for the tagsmith application.

The core engine has a deliberately small error surface: only malformed
regular expressions fail. Everything else (empty inputs, scopes that match
nothing, undo on an empty history) is absorbed as a no-op. The remaining
exceptions belong to the file-system collaborators.
"""

from __future__ import annotations

from pathlib import Path


class TagsmithError(Exception):
    """Base exception for all tagsmith errors."""

    def __init__(self, message: str) -> None:
        """
        Initialize TagsmithError.

        Parameters
        ----------
        message : str
            Human-readable error message.
        """
        self.message = message
        super().__init__(message)


class InvalidPatternError(TagsmithError):
    """
    Exception raised when a regular expression fails to compile.

    Raised by the regex builder before any record is visited, so a batch
    operation given a bad pattern never applies a partial update.

    Attributes
    ----------
    message : str
        Human-readable error message.
    pattern : str
        The pattern text that failed to compile.
    original_error : Exception | None
        The ``re.error`` raised by the regex engine.

    Examples
    --------
    >>> try:
    ...     session.rename_tags("([", "cat", use_regex=True)
    ... except InvalidPatternError as e:
    ...     print(f"Bad pattern {e.pattern!r}: {e.message}")
    """

    def __init__(
        self,
        pattern: str,
        original_error: Exception | None = None,
        message: str | None = None,
    ) -> None:
        """
        Initialize InvalidPatternError.

        Parameters
        ----------
        pattern : str
            The pattern text that failed to compile.
        original_error : Exception | None, optional
            The underlying compile error (default: None).
        message : str | None, optional
            Override for the default message (default: None).
        """
        self.pattern = pattern
        self.original_error = original_error
        if message is None:
            detail = f": {original_error}" if original_error is not None else ""
            message = f"Invalid regex pattern {pattern!r}{detail}"
        super().__init__(message)


class CaptionStoreError(TagsmithError):
    """
    Exception raised when a caption file cannot be written.

    Attributes
    ----------
    message : str
        Human-readable error message.
    path : Path
        The caption file that could not be written.
    """

    def __init__(self, path: Path, message: str | None = None) -> None:
        """
        Initialize CaptionStoreError.

        Parameters
        ----------
        path : Path
            The caption file that could not be written.
        message : str | None, optional
            Override for the default message (default: None).
        """
        self.path = path
        super().__init__(message or f"Failed to write caption file {path}")


class PresetFileError(TagsmithError):
    """Exception raised when the preset pair file cannot be saved."""

    def __init__(self, path: Path, message: str | None = None) -> None:
        """
        Initialize PresetFileError.

        Parameters
        ----------
        path : Path
            The preset file that could not be saved.
        message : str | None, optional
            Override for the default message (default: None).
        """
        self.path = path
        super().__init__(message or f"Failed to save preset file {path}")
