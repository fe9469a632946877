"""The command table.

A :class:`CommandRegistry` is built once at startup and then passed by
reference to the parser and the dispatcher.  It is never mutated after
wiring is complete.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from aq.core.models import Command
from aq.exceptions import DuplicateCommandError, UnknownCommandError


class CommandRegistry:
    """Ordered, name-unique collection of :class:`Command` objects."""

    def __init__(self, commands: Iterable[Command] = ()) -> None:
        self._commands: dict[str, Command] = {}
        for command in commands:
            self.register(command)

    def register(self, command: Command) -> None:
        if command.name in self._commands:
            raise DuplicateCommandError(
                f"command {command.name!r} is already registered",
            )
        self._commands[command.name] = command

    def lookup(self, name: str) -> Command:
        """Return the command registered as *name*.

        Raises
        ------
        UnknownCommandError
            When no command has that name.
        """
        try:
            return self._commands[name]
        except KeyError:
            raise UnknownCommandError(
                f"unknown command {name!r}",
                hint=f"Available commands: {', '.join(self.names())}",
            ) from None

    def names(self) -> tuple[str, ...]:
        """Return every registered name in registration order."""
        return tuple(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __iter__(self) -> Iterator[Command]:
        return iter(self._commands.values())

    def __len__(self) -> int:
        return len(self._commands)
