"""Core layer: command table, parsing, validation and dispatch.

Rules
-----
* No ``print()`` calls.
* No network I/O; the only interactive input goes through a
  :class:`~aq.core.protocols.Confirmer`.
* No imports from ``cli`` or ``infra``.
"""

from aq.core.commands import build_registry
from aq.core.dispatch import Dispatcher
from aq.core.models import (
    Command,
    ExecutionResult,
    Failure,
    FailureKind,
    FlagSpec,
    ParsedInvocation,
    RunOutcome,
    RunState,
    Success,
)
from aq.core.parser import InvocationParser
from aq.core.protocols import ActionHandler, Confirmer
from aq.core.registry import CommandRegistry

__all__: list[str] = [
    "ActionHandler",
    "Command",
    "CommandRegistry",
    "Confirmer",
    "Dispatcher",
    "ExecutionResult",
    "Failure",
    "FailureKind",
    "FlagSpec",
    "InvocationParser",
    "ParsedInvocation",
    "RunOutcome",
    "RunState",
    "Success",
    "build_registry",
]
