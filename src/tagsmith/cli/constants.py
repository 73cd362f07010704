"""
CLI constants for tagsmith.

Shared values for CLI commands: exit codes, table limits and the
delimiter used to write abstract/concrete pairs on the command line.
Domain constants stay in their domain modules.
"""

from __future__ import annotations

from typing import Final

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_SUCCESS: Final[int] = 0
"""Operation completed normally."""

EXIT_USER_ERROR: Final[int] = 1
"""
User error: invalid input such as a malformed regex or pair argument.
"""

EXIT_SYSTEM_ERROR: Final[int] = 2
"""
System error: a caption or preset file could not be written.
"""

# =============================================================================
# Display Limits
# =============================================================================

DEFAULT_TAG_LIST_LIMIT: Final[int] = 50
"""Rows shown by ``tags list`` unless ``--limit`` says otherwise."""

CHANGED_RECORDS_DISPLAY_LIMIT: Final[int] = 20
"""Changed records listed after a batch edit; the rest are summarized."""

CAPTION_PREVIEW_LENGTH: Final[int] = 80
"""Characters of caption shown per changed record."""

# =============================================================================
# Argument Formats
# =============================================================================

PAIR_DELIMITER: Final[str] = "=>"
"""Separates abstract and concrete tag in ``--pair`` arguments."""
