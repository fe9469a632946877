"""Interactive yes/no confirmation for destructive commands.

:class:`QuestionaryConfirmer` satisfies
:class:`~aq.core.protocols.Confirmer`; tests substitute a scripted
object with the same ``confirm`` method.
"""

from __future__ import annotations

from typing import Any

from aq.exceptions import ConfirmationError, EnvironmentError


def _import_questionary() -> Any:
    """Import questionary lazily for interactive confirmation."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


class QuestionaryConfirmer:
    """Ask a single yes/no question on the terminal.

    ``questionary`` returns ``None`` when the user presses Ctrl+C or
    Esc; that is treated as "no".
    """

    def __init__(self, *, default: bool = False) -> None:
        self._default = default

    def confirm(self, prompt: str) -> bool:
        """Ask *prompt* and return the answer.

        Raises
        ------
        ConfirmationError
            When the prompt cannot be shown or read, e.g. stdin is closed.
        EnvironmentError
            When questionary is not installed.
        """
        questionary = _import_questionary()
        try:
            answer: bool | None = questionary.confirm(prompt, default=self._default).ask()
        except Exception as exc:  # noqa: BLE001
            # prompt_toolkit reports a missing terminal as AttributeError,
            # OSError or EOFError depending on how stdin is broken.
            raise ConfirmationError(
                f"could not read an answer: {exc}",
                hint="Pass --force to skip the confirmation.",
            ) from exc
        return bool(answer)
