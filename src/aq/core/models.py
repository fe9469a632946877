"""Domain models for aq.

All models are **frozen** dataclasses: immutable value objects with no
behaviour beyond data access.  They are created once per run (or once
per process for the command table) and never mutated afterwards.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from aq.exceptions import AqError, CancellationError, ExecutionError, UsageError

if TYPE_CHECKING:
    from aq.core.protocols import Confirmer


FlagValue = str | int | bool
"""Resolved value of a single flag."""


# ---------------------------------------------------------------------------
# Command table
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class FlagSpec:
    """Declarative description of one command-line flag."""

    name: str
    """Long name, used as ``--name`` and as the lookup key."""

    alias: str | None = None
    """Single-letter short alias, used as ``-a``."""

    default: FlagValue | Callable[[], FlagValue] = ""
    """Static default, or a zero-argument callable evaluated at parse time."""

    env_var: str | None = None
    """Environment variable consulted when the flag is not passed."""

    help: str = ""
    """Help text shown by ``aq <command> --help``."""

    kind: type = str
    """Value type: ``str``, ``int`` or ``bool``."""

    def resolve_default(self) -> FlagValue:
        """Return the default, calling it first when it is lazy."""
        if callable(self.default):
            return self.default()
        return self.default


@dataclass(frozen=True, slots=True)
class Command:
    """A single subcommand: its name, usage, flags and precondition."""

    name: str
    usage: str
    """One-line help summary."""

    args_usage: str
    """Positional-argument usage string, e.g. ``DATABASE.TABLE``."""

    flags: tuple[FlagSpec, ...]
    precondition: Callable[[ParsedInvocation, Confirmer], ValidationOutcome]

    def flag_spec(self, name: str) -> FlagSpec:
        """Return the flag declared under *name*."""
        for spec in self.flags:
            if spec.name == name:
                return spec
        raise KeyError(f"{self.name} has no flag {name!r}")


# ---------------------------------------------------------------------------
# Per-run values
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ParsedInvocation:
    """The matched command, its resolved flags and positional arguments."""

    command: Command
    flags: Mapping[str, FlagValue]
    args: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "flags", MappingProxyType(dict(self.flags)))
        object.__setattr__(self, "args", tuple(self.args))

    @property
    def nargs(self) -> int:
        return len(self.args)

    def flag(self, name: str) -> FlagValue:
        return self.flags[name]

    def arg(self, index: int) -> str:
        """Return the positional argument at *index*, or ``""`` if absent."""
        if 0 <= index < len(self.args):
            return self.args[index]
        return ""


class FailureKind(enum.Enum):
    """Why a run ended with a non-zero exit code."""

    USAGE = "usage"
    CANCELLATION = "cancellation"
    EXECUTION = "execution"


@dataclass(frozen=True, slots=True)
class Accepted:
    """The precondition passed."""


@dataclass(frozen=True, slots=True)
class Rejected:
    """The precondition failed; the command must not run."""

    message: str
    exit_code: int = 1
    kind: FailureKind = FailureKind.USAGE


ValidationOutcome = Accepted | Rejected

ACCEPTED = Accepted()


@dataclass(frozen=True, slots=True)
class Success:
    """The action handler completed its work."""


@dataclass(frozen=True, slots=True)
class Failure:
    """The action handler failed with *error*."""

    error: Exception

    @property
    def message(self) -> str:
        return str(self.error)


ExecutionResult = Success | Failure

SUCCESS = Success()


# ---------------------------------------------------------------------------
# Terminal state of one run
# ---------------------------------------------------------------------------

class RunState(enum.Enum):
    """Terminal states of the dispatch pipeline."""

    NO_COMMAND = "no_command"
    REJECTED = "rejected"
    EXECUTED = "executed"


@dataclass(frozen=True, slots=True)
class RunOutcome:
    """Tagged result of one pass through the dispatch pipeline."""

    state: RunState
    exit_code: int
    message: str | None = None
    hint: str | None = None
    kind: FailureKind | None = None
    command: str | None = None
    commands: tuple[str, ...] = ()
    """All registered command names, filled in for ``NO_COMMAND``."""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def raise_for_status(self) -> None:
        """Raise the exception matching this outcome's failure kind, if any."""
        if self.ok:
            return
        error_class = _FAILURE_ERRORS.get(self.kind, AqError)
        raise error_class(self.message or "", hint=self.hint)


_FAILURE_ERRORS: dict[FailureKind, type[AqError]] = {
    FailureKind.USAGE: UsageError,
    FailureKind.CANCELLATION: CancellationError,
    FailureKind.EXECUTION: ExecutionError,
}
