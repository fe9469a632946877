"""Discovery of backend-facing action handlers.

Handlers live in separately installed distributions and are advertised
through the ``aq.handlers`` entry-point group.  The entry-point name is
the command name; the object is a handler class (or any zero-argument
factory) whose instances satisfy
:class:`~aq.core.protocols.ActionHandler`.

A command without an installed handler is wired to an
:class:`UnconfiguredHandler`, so the command table can always be
validated and dispatched end to end.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from importlib import metadata

from aq.core.models import ExecutionResult, Failure, ParsedInvocation
from aq.core.protocols import ActionHandler
from aq.exceptions import ExecutionError

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "aq.handlers"


class UnconfiguredHandler:
    """Handler for a command whose backend plugin is not installed."""

    def __init__(self, command: str) -> None:
        self.command = command

    def execute(self, invocation: ParsedInvocation) -> ExecutionResult:
        return Failure(
            ExecutionError(
                f"no action handler is installed for '{self.command}'",
                hint=f"Install a package providing the '{ENTRY_POINT_GROUP}' entry point.",
            )
        )

    def __repr__(self) -> str:
        return f"UnconfiguredHandler({self.command!r})"


def discover_handlers(
    commands: Iterable[str],
    group: str = ENTRY_POINT_GROUP,
) -> dict[str, ActionHandler]:
    """Return one handler per name in *commands*.

    Entry points named after unknown commands are ignored.  A plugin
    that fails to import or instantiate is logged and replaced with an
    :class:`UnconfiguredHandler`.
    """
    names = list(commands)
    handlers: dict[str, ActionHandler] = {
        name: UnconfiguredHandler(name) for name in names
    }

    for ep in metadata.entry_points().select(group=group):
        if ep.name not in handlers:
            logger.debug("Ignoring handler %s for unknown command", ep.value)
            continue
        try:
            factory = ep.load()
            handlers[ep.name] = factory()
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to load handler %s for %s: %r", ep.value, ep.name, exc)
            continue
        logger.debug("Loaded handler %s for %s", ep.value, ep.name)

    return handlers
