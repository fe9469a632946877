"""Exit-code constants used by the CLI layer.

Every terminal state of a run maps onto one of these values.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Command completed, or no command was given and the list was shown."""

GENERAL_ERROR: int = 1
"""Usage error, declined confirmation, or a failed action handler."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C.  Follows POSIX convention (128 + SIGINT=2)."""

UNEXPECTED_ERROR: int = 2
"""An unhandled exception escaped all known error boundaries."""
