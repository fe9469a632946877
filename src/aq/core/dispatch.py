"""Action dispatcher: drives one run of the pipeline.

Flow
----
1. Parse the arguments against the command table.
2. No command matched: report every command name (exit 0).
3. Run the command's precondition; a rejection ends the run (exit 1).
4. Hand the invocation to the command's action handler and map its
   :class:`~aq.core.models.ExecutionResult` to an exit code.

Guarantees
----------
* No ``print()``; the CLI layer renders the returned :class:`RunOutcome`.
* Only :class:`~aq.exceptions.AqError` subclasses escape, apart from
  ``SystemExit`` raised by ``--help``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence

from aq.core.models import (
    Failure,
    FailureKind,
    ParsedInvocation,
    Rejected,
    RunOutcome,
    RunState,
    Success,
)
from aq.core.parser import InvocationParser
from aq.core.protocols import ActionHandler, Confirmer
from aq.core.registry import CommandRegistry
from aq.core.validation import validate
from aq.exceptions import AqError, HandlerNotFoundError

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class Dispatcher:
    """Parse, validate and execute a single invocation.

    Parameters
    ----------
    registry:
        The command table, built once at startup.
    handlers:
        Action handler for every registered command, keyed by name.
    confirmer:
        Yes/no gate handed to preconditions.
    prog:
        Program name used in generated help.

    Raises
    ------
    HandlerNotFoundError
        When a registered command has no handler.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        handlers: Mapping[str, ActionHandler],
        confirmer: Confirmer,
        *,
        prog: str = "aq",
    ) -> None:
        missing = [name for name in registry.names() if name not in handlers]
        if missing:
            raise HandlerNotFoundError(
                f"no action handler for: {', '.join(missing)}",
            )
        self._registry = registry
        self._handlers = dict(handlers)
        self._confirmer = confirmer
        self._parser = InvocationParser(registry, prog=prog)

    def run(
        self,
        argv: Sequence[str],
        environ: Mapping[str, str] | None = None,
    ) -> RunOutcome:
        """Run the pipeline for *argv* and return its terminal state.

        A malformed flag is reported as a ``REJECTED`` usage outcome, the
        same way a failed precondition is.
        """
        if environ is None:
            environ = os.environ

        try:
            invocation = self._parser.parse(argv, environ)
        except AqError as exc:
            return self._rejected(argv[0] if argv else None, Rejected(str(exc)), hint=exc.hint)

        if invocation is None:
            return RunOutcome(
                state=RunState.NO_COMMAND,
                exit_code=EXIT_SUCCESS,
                commands=self._registry.names(),
            )

        outcome = validate(invocation, self._confirmer)
        if isinstance(outcome, Rejected):
            return self._rejected(invocation.command.name, outcome)

        return self._execute(invocation)

    @staticmethod
    def _rejected(
        command: str | None,
        rejected: Rejected,
        *,
        hint: str | None = None,
    ) -> RunOutcome:
        return RunOutcome(
            state=RunState.REJECTED,
            exit_code=rejected.exit_code,
            message=rejected.message,
            hint=hint,
            kind=rejected.kind,
            command=command,
        )

    def _execute(self, invocation: ParsedInvocation) -> RunOutcome:
        name = invocation.command.name
        handler = self._handlers[name]
        logger.debug("Dispatching %s to %r", name, handler)

        try:
            result = handler.execute(invocation)
        except AqError as exc:
            result = Failure(exc)

        if isinstance(result, Success):
            return RunOutcome(state=RunState.EXECUTED, exit_code=EXIT_SUCCESS, command=name)

        logger.debug("%s failed: %r", name, result.error)
        return RunOutcome(
            state=RunState.EXECUTED,
            exit_code=EXIT_FAILURE,
            message=result.message,
            hint=getattr(result.error, "hint", None),
            kind=FailureKind.EXECUTION,
            command=name,
        )
