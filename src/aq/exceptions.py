"""Custom exception hierarchy for aq.

Every user-visible failure inherits from :class:`AqError` so the CLI
error boundary can render a clean message instead of a stack trace.
Action handlers report failures by returning
:class:`~aq.core.models.Failure`, usually wrapping an
:class:`ExecutionError`.

Hierarchy
---------
AqError
├── UsageError
│   └── UnknownCommandError
├── CancellationError
├── ConfirmationError
├── ExecutionError
├── RegistryError
│   ├── DuplicateCommandError
│   └── HandlerNotFoundError
└── EnvironmentError
"""

from __future__ import annotations


class AqError(Exception):
    """Base exception for all aq errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Invocation ------------------------------------------------------------

class UsageError(AqError):
    """Raised when an invocation is malformed (bad flag, bad value, missing argument)."""


class UnknownCommandError(UsageError):
    """Raised when a command name is not present in the registry."""


class CancellationError(AqError):
    """Raised when the user declines a confirmation prompt."""


class ConfirmationError(AqError):
    """Raised when a confirmation prompt cannot be shown or answered."""


# --- Execution -------------------------------------------------------------

class ExecutionError(AqError):
    """Raised (or wrapped in a ``Failure``) when an action handler fails."""


# --- Wiring ----------------------------------------------------------------

class RegistryError(AqError):
    """Raised when the command table or handler mapping is inconsistent."""


class DuplicateCommandError(RegistryError):
    """Raised when two commands are registered under the same name."""


class HandlerNotFoundError(RegistryError):
    """Raised when a registered command has no action handler."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(AqError):
    """Raised when a required runtime dependency is not available."""
