"""CLI console helpers with optional Rich support.

Rich is imported lazily so ``--help`` and ``--version`` keep working
when it is not installed.  All output goes to stderr.
"""

from __future__ import annotations

import sys
from typing import Any

from aq.exceptions import EnvironmentError


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise EnvironmentError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console() -> Any:
	"""Create a Rich console instance targeting stderr."""
	console_class = _load_rich_console_class()
	return console_class(stderr=True, soft_wrap=True, emoji=False, highlight=False)


def escape(text: str) -> str:
	"""Escape *text* so Rich prints square brackets verbatim."""
	try:
		from rich.markup import escape as rich_escape
	except ModuleNotFoundError:
		return text
	return rich_escape(text)


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def print(self, *objects: object) -> None:
		"""Render with Rich when available, else plain stderr print."""
		try:
			rich_console = get_rich_console()
		except EnvironmentError:
			print(*(_strip_markup(obj) for obj in objects), file=sys.stderr)
			return
		rich_console.print(*objects)


def _strip_markup(obj: object) -> object:
	"""Drop the handful of style tags used by the CLI layer."""
	if not isinstance(obj, str):
		return obj
	for tag in ("[bold red]", "[/bold red]", "[yellow]", "[/yellow]", "[bold]", "[/bold]"):
		obj = obj.replace(tag, "")
	return obj.replace("\\[", "[")


console = _ConsoleProxy()
