"""CLI application entry point for aq.

This module is the **sole error boundary** for the entire application.
It catches :class:`~aq.exceptions.AqError`, ``KeyboardInterrupt``, and
any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* No validation logic lives here: the command table, preconditions and
  dispatch are in the core layer.
* This module is the only place that turns a
  :class:`~aq.core.models.RunOutcome` into terminal output and an OS
  process exit code.
"""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Mapping, Sequence

from aq.cli import exit_codes
from aq.cli.console import console, escape
from aq.core.commands import build_registry
from aq.core.dispatch import Dispatcher
from aq.core.models import RunOutcome, RunState
from aq.core.protocols import ActionHandler, Confirmer
from aq.core.registry import CommandRegistry
from aq.exceptions import AqError
from aq.utils.logging import LOG_LEVEL_ENV_VAR, setup_logging
from aq.version import __version__

PROG = "aq"


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser(registry: CommandRegistry) -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Only global options are parsed here.  The command name and
    everything after it are handed to the dispatcher untouched:
    * ``aq <command> [options] [args]``
    * ``aq`` : list the available commands
    * ``aq --version``
    """
    commands = "\n".join(f"  {command.name:<6} {command.usage}" for command in registry)
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Command Line Tool for AWS Athena (bq command like)",
        epilog=f"commands:\n{commands}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        default=None,
        help=f"Logging verbosity (default: ${LOG_LEVEL_ENV_VAR} or WARNING).",
    )
    parser.add_argument(
        "--generate-bash-completion",
        action="store_true",
        help="Print command names for shell completion and exit.",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default=None,
        help="Command to run.",
    )
    parser.add_argument(
        "args",
        nargs=argparse.REMAINDER,
        help="Command options and arguments.",
    )
    return parser


# ---------------------------------------------------------------------------
# Outcome rendering
# ---------------------------------------------------------------------------

def _report(outcome: RunOutcome) -> int:
    """Print what the user needs to see for *outcome* and return its exit code."""
    if outcome.state is RunState.NO_COMMAND:
        console.print(escape(f"Subcommands: {', '.join(outcome.commands)}"))
        return exit_codes.SUCCESS

    if outcome.ok:
        return exit_codes.SUCCESS

    console.print(f"[bold red]{PROG}:[/bold red] {escape(outcome.message or '')}")
    if outcome.hint:
        console.print(f"[yellow]Hint:[/yellow] {escape(outcome.hint)}")
    return exit_codes.GENERAL_ERROR


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(
    argv: Sequence[str] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    confirmer: Confirmer | None = None,
    handlers: Mapping[str, ActionHandler] | None = None,
) -> int:
    """Run the aq CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.
    environ:
        Environment used for flag fallbacks; defaults to ``os.environ``.
    confirmer:
        Yes/no gate for ``rm``; defaults to a questionary prompt.
    handlers:
        Action handlers keyed by command name; defaults to the handlers
        installed under the ``aq.handlers`` entry-point group.

    Returns
    -------
    int
        OS process exit code.
    """
    env: Mapping[str, str] = os.environ if environ is None else environ
    registry = build_registry()
    args = _build_parser(registry).parse_args(argv)

    setup_logging(args.log_level, env)

    if args.generate_bash_completion:
        for name in registry.names():
            print(name)
        return exit_codes.SUCCESS

    if confirmer is None:
        from aq.cli.confirm import QuestionaryConfirmer

        confirmer = QuestionaryConfirmer()
    if handlers is None:
        from aq.infra.handlers import discover_handlers

        handlers = discover_handlers(registry.names())

    dispatcher = Dispatcher(registry, handlers, confirmer, prog=PROG)
    command_argv = [] if args.command is None else [args.command, *args.args]
    return _report(dispatcher.run(command_argv, env))


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except AqError as exc:
        console.print(f"[bold red]{PROG}:[/bold red] {escape(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(str(exc))}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
