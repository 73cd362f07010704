"""
Standardized error message helpers for CLI commands.

Provides:
- Error display formatters with a consistent Title -> Problem -> Hint format
- Rich panel wrappers for error/warning/success display
- Mapping from error categories to CLI exit codes

Examples:
    >>> format_error("Validation", "Invalid regex pattern '(['")
    'Error: Validation: Invalid regex pattern ...'
"""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from tagsmith.cli.constants import EXIT_SYSTEM_ERROR, EXIT_USER_ERROR

# Module-level console for CLI error display
console = Console()


class ErrorCategory:
    """
    Standard error categories for CLI commands.

    - VALIDATION: Input format or value validation failed
    - STORAGE: Reading or writing files failed
    """

    VALIDATION = "Validation"
    STORAGE = "Storage"


def get_exit_code_for_category(category: str) -> int:
    """
    Map error category to appropriate exit code.

    Examples
    --------
    >>> get_exit_code_for_category(ErrorCategory.VALIDATION)
    1
    >>> get_exit_code_for_category(ErrorCategory.STORAGE)
    2
    """
    category_to_exit_code = {
        ErrorCategory.VALIDATION: EXIT_USER_ERROR,
        ErrorCategory.STORAGE: EXIT_SYSTEM_ERROR,
    }
    return category_to_exit_code.get(category, EXIT_USER_ERROR)


def format_error(
    category: str,
    message: str,
    hint: Optional[str] = None,
) -> str:
    """
    Format an error message.

    Parameters
    ----------
    category : str
        Error category (use ErrorCategory constants).
    message : str
        Human-readable error description.
    hint : Optional[str]
        Actionable suggestion for resolving the error.

    Returns
    -------
    str
        Formatted error message string.
    """
    lines = [f"Error: {category}: {message}"]
    if hint is not None:
        lines.append(f"   Hint: {hint}")
    return "\n".join(lines)


def display_error_panel(
    category: str,
    message: str,
    hint: Optional[str] = None,
    title: str = "Error",
) -> None:
    """Display a formatted error in a red Rich panel."""
    formatted = escape(format_error(category, message, hint))
    console.print(Panel(f"[red]{formatted}[/red]", title=title, border_style="red"))


def display_success_panel(
    message: str,
    title: str = "Success",
    extra_info: Optional[str] = None,
) -> None:
    """Display a success message in a green Rich panel."""
    content = f"[green]{escape(message)}[/green]"
    if extra_info:
        content += f"\n\n{escape(extra_info)}"
    console.print(Panel(content, title=title, border_style="green"))


def display_warning_panel(
    message: str,
    title: str = "Warning",
    extra_info: Optional[str] = None,
) -> None:
    """Display a warning message in a yellow Rich panel."""
    content = f"[yellow]{escape(message)}[/yellow]"
    if extra_info:
        content += f"\n\n{escape(extra_info)}"
    console.print(Panel(content, title=title, border_style="yellow"))
