"""Invocation parser: raw arguments to :class:`ParsedInvocation`.

The first token selects the command.  Everything after it is parsed by
an ``argparse`` parser generated from the command's :class:`FlagSpec`
declarations; flags and positional arguments may be interleaved.

Each flag value is resolved by precedence:

1. the value passed explicitly on the command line,
2. the flag's environment variable, when declared and set,
3. the flag's default (evaluated now if it is lazy).
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Mapping, Sequence
from typing import NoReturn

from aq.core.models import Command, FlagSpec, FlagValue, ParsedInvocation
from aq.core.registry import CommandRegistry
from aq.exceptions import UsageError

logger = logging.getLogger(__name__)

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})


class _CommandArgumentParser(argparse.ArgumentParser):
    """``ArgumentParser`` that raises :class:`UsageError` instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message, hint=f"Run '{self.prog} --help' for usage.")


def build_command_parser(command: Command, prog: str) -> argparse.ArgumentParser:
    """Construct the ``argparse`` parser for a single command.

    Explicit flags default to ``None`` so that "not passed" can be told
    apart from "passed with the default value" during resolution.
    """
    parser = _CommandArgumentParser(
        prog=f"{prog} {command.name}",
        usage=f"%(prog)s [options] {command.args_usage}".rstrip(),
        description=command.usage,
        allow_abbrev=False,
    )
    for spec in command.flags:
        option_strings = [f"--{spec.name}"]
        if spec.alias:
            option_strings.append(f"-{spec.alias}")
        if spec.kind is bool:
            parser.add_argument(
                *option_strings,
                dest=spec.name,
                action="store_const",
                const=True,
                default=None,
                help=spec.help,
            )
        else:
            parser.add_argument(
                *option_strings,
                dest=spec.name,
                type=spec.kind,
                default=None,
                metavar=spec.name.upper(),
                help=_help_with_env(spec),
            )
    parser.add_argument(
        "args",
        nargs="*",
        metavar="ARG",
        help=command.args_usage or "no positional arguments",
    )
    return parser


def _help_with_env(spec: FlagSpec) -> str:
    if spec.env_var:
        return f"{spec.help} [${spec.env_var}]"
    return spec.help


def _coerce_env(spec: FlagSpec, raw: str) -> FlagValue:
    """Convert an environment string to the flag's value type."""
    if spec.kind is bool:
        return raw.strip().lower() in _TRUE_STRINGS
    if spec.kind is int:
        try:
            return int(raw)
        except ValueError:
            raise UsageError(
                f"${spec.env_var} must be an integer for --{spec.name}, got {raw!r}",
            ) from None
    return raw


def resolve_flag(
    spec: FlagSpec,
    explicit: FlagValue | None,
    environ: Mapping[str, str],
) -> FlagValue:
    """Resolve one flag: explicit value, else environment, else default."""
    if explicit is not None:
        return explicit
    if spec.env_var and spec.env_var in environ:
        return _coerce_env(spec, environ[spec.env_var])
    return spec.resolve_default()


class InvocationParser:
    """Match the first token against the registry and resolve the rest.

    Parameters
    ----------
    registry:
        The command table to match against.
    prog:
        Program name, used in generated usage and help output.
    """

    def __init__(self, registry: CommandRegistry, prog: str = "aq") -> None:
        self._registry = registry
        self._prog = prog

    def parse(
        self,
        argv: Sequence[str],
        environ: Mapping[str, str],
    ) -> ParsedInvocation | None:
        """Parse *argv* (without the program name).

        Returns
        -------
        ParsedInvocation | None
            ``None`` when *argv* is empty or its first token is not a
            registered command name.

        Raises
        ------
        UsageError
            When a flag is unknown or its value cannot be converted.
        """
        if not argv:
            logger.debug("No command given")
            return None

        name, *rest = argv
        if name not in self._registry:
            logger.debug("No command matched %r", name)
            return None

        command = self._registry.lookup(name)
        namespace = build_command_parser(command, self._prog).parse_intermixed_args(rest)

        flags = {
            spec.name: resolve_flag(spec, getattr(namespace, spec.name), environ)
            for spec in command.flags
        }
        invocation = ParsedInvocation(command=command, flags=flags, args=tuple(namespace.args))
        logger.debug("Parsed %s: flags=%s args=%s", name, dict(invocation.flags), invocation.args)
        return invocation
