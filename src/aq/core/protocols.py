"""Protocols (interfaces) consumed by the core layer.

Core code depends ONLY on these protocols, never on concrete
implementations.  The interactive prompt and the backend-facing action
handlers are both injected, so the pipeline can be driven with scripted
stand-ins.
"""

from __future__ import annotations

from typing import Protocol

from aq.core.models import ExecutionResult, ParsedInvocation


class Confirmer(Protocol):
    """Contract for the interactive yes/no gate used by destructive commands."""

    def confirm(self, prompt: str) -> bool:
        """Ask *prompt* once and return the user's answer.

        Raises
        ------
        ConfirmationError
            When no answer can be obtained (no terminal, closed stdin).
        """
        ...  # pragma: no cover


class ActionHandler(Protocol):
    """Contract for the backend-facing implementation of one command.

    Implementations perform the remote operation (run a query, list the
    catalog, load a table) and may print their own output.  Failures are
    reported by returning :class:`~aq.core.models.Failure` rather than
    raising, although a raised :class:`~aq.exceptions.AqError` is
    tolerated and treated the same way.
    """

    def execute(self, invocation: ParsedInvocation) -> ExecutionResult:
        """Run the command described by *invocation*."""
        ...  # pragma: no cover
