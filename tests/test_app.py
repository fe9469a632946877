"""End-to-end tests for the CLI entry point (cli/app.py).

``main`` is driven with an explicit environment, a scripted confirmer
and recording handlers; assertions are on exit codes and stderr.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from aq.cli import app as app_module
from aq.cli import exit_codes
from aq.cli.app import cli, main
from aq.core.models import SUCCESS, ExecutionResult, Failure, ParsedInvocation
from aq.exceptions import ExecutionError, UsageError

COMMANDS = ("query", "ls", "head", "mk", "rm", "load")


class _Handler:
    def __init__(self, result: ExecutionResult = SUCCESS) -> None:
        self.result = result
        self.calls: list[ParsedInvocation] = []

    def execute(self, invocation: ParsedInvocation) -> ExecutionResult:
        self.calls.append(invocation)
        return self.result


class _Confirmer:
    def __init__(self, answer: bool | None = None) -> None:
        self.answer = answer
        self.prompts: list[str] = []

    def confirm(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        if self.answer is None:
            raise AssertionError("confirmation must not be requested")
        return self.answer


def _run(
    argv: list[str],
    *,
    environ: dict[str, str] | None = None,
    confirmer: _Confirmer | None = None,
    handlers: dict[str, _Handler] | None = None,
) -> int:
    all_handlers = {name: _Handler() for name in COMMANDS}
    all_handlers.update(handlers or {})
    return main(
        argv,
        environ=environ if environ is not None else {},
        confirmer=confirmer or _Confirmer(),
        handlers=all_handlers,
    )


# ---------------------------------------------------------------------------
# Fallback listing
# ---------------------------------------------------------------------------

class TestFallbackListing:
    def test_no_command_lists_subcommands(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _run([]) == exit_codes.SUCCESS
        err = capsys.readouterr().err
        assert "Subcommands: query, ls, head, mk, rm, load" in err

    def test_unknown_command_lists_subcommands(
        self, capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert _run(["drop", "db"]) == exit_codes.SUCCESS
        err = capsys.readouterr().err
        for name in COMMANDS:
            assert name in err


# ---------------------------------------------------------------------------
# Rejections
# ---------------------------------------------------------------------------

class TestRejections:
    @pytest.mark.parametrize(
        "argv",
        [
            ["query", "SELECT 1"],
            ["ls"],
            ["head", "db.t"],
            ["mk", "db"],
            ["rm", "-f", "db"],
            ["load", "db.t", "s3://b/k", "schema"],
        ],
    )
    def test_missing_bucket(
        self, argv: list[str], capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert _run(argv) == exit_codes.GENERAL_ERROR
        assert "aq: bucket must be specified." in capsys.readouterr().err

    def test_head_without_dot(self, capsys: pytest.CaptureFixture[str]) -> None:
        handler = _Handler()
        code = _run(["head", "--bucket=b", "foo"], handlers={"head": handler})
        assert code == exit_codes.GENERAL_ERROR
        assert "aq: [DATABASE].[TABLE] must contain `.`." in capsys.readouterr().err
        assert handler.calls == []

    def test_mk_with_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _run(["mk", "-b", "b", "db.table"]) == exit_codes.GENERAL_ERROR
        assert "use `load` subcommand" in capsys.readouterr().err

    def test_rm_declined(self, capsys: pytest.CaptureFixture[str]) -> None:
        handler = _Handler()
        code = _run(["rm", "-b", "b", "db"], confirmer=_Confirmer(False), handlers={"rm": handler})
        assert code == exit_codes.GENERAL_ERROR
        assert "aq: Canceled." in capsys.readouterr().err
        assert handler.calls == []

    def test_load_requires_s3(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _run(["load", "-b", "b", "db.t", "foo", "SCHEMA"]) == exit_codes.GENERAL_ERROR
        assert "`SOURCE` must start with 's3://'" in capsys.readouterr().err

    def test_unknown_flag_prints_hint(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _run(["ls", "--bogus"]) == exit_codes.GENERAL_ERROR
        err = capsys.readouterr().err
        assert "unrecognized arguments: --bogus" in err
        assert "Hint: Run 'aq ls --help' for usage." in err


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------

class TestExecution:
    def test_success_prints_nothing(self, capsys: pytest.CaptureFixture[str]) -> None:
        handler = _Handler()
        code = _run(["ls", "mydb"], environ={"AQ_DEFAULT_BUCKET": "b"}, handlers={"ls": handler})
        assert code == exit_codes.SUCCESS
        assert capsys.readouterr().err == ""
        assert handler.calls[0].flag("bucket") == "b"

    def test_rm_force_skips_prompt(self) -> None:
        confirmer = _Confirmer()
        assert _run(["rm", "--force", "-b", "b", "db"], confirmer=confirmer) == exit_codes.SUCCESS
        assert confirmer.prompts == []

    def test_rm_confirmed(self) -> None:
        confirmer = _Confirmer(True)
        assert _run(["rm", "-b", "b", "db"], confirmer=confirmer) == exit_codes.SUCCESS
        assert confirmer.prompts == ["Would you remove db?"]

    def test_handler_failure(self, capsys: pytest.CaptureFixture[str]) -> None:
        failing = _Handler(Failure(ExecutionError("FAILED: SYNTAX_ERROR")))
        code = _run(["query", "-b", "b", "SELEC 1"], handlers={"query": failing})
        assert code == exit_codes.GENERAL_ERROR
        assert "aq: FAILED: SYNTAX_ERROR" in capsys.readouterr().err

    def test_failure_message_is_printed_verbatim(
        self, capsys: pytest.CaptureFixture[str],
    ) -> None:
        failing = _Handler(Failure(ExecutionError("bad :thumbs_up: value [x]")))
        code = _run(["query", "-b", "b", "SELECT 1"], handlers={"query": failing})
        assert code == exit_codes.GENERAL_ERROR
        assert capsys.readouterr().err == "aq: bad :thumbs_up: value [x]\n"

    def test_default_handlers_are_unconfigured(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        from aq.infra import handlers as handlers_module

        empty = MagicMock()
        empty.select.return_value = ()
        monkeypatch.setattr(handlers_module.metadata, "entry_points", lambda: empty)

        code = main(["ls", "-b", "b"], environ={}, confirmer=_Confirmer())
        assert code == exit_codes.GENERAL_ERROR
        assert "no action handler is installed for 'ls'" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Help
# ---------------------------------------------------------------------------

class TestHelp:
    def test_command_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            _run(["rm", "--help"])
        assert exc_info.value.code == 0
        out = capsys.readouterr().out
        assert "Drop database or table" in out
        assert "--force" in out


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

class TestErrorBoundary:
    def test_exit_code_passthrough(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(app_module, "main", lambda: exit_codes.SUCCESS)
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.SUCCESS

    def test_aq_error(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        def _boom() -> int:
            raise UsageError("bad wiring", hint="check it")

        monkeypatch.setattr(app_module, "main", _boom)
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.GENERAL_ERROR
        err = capsys.readouterr().err
        assert "aq: bad wiring" in err
        assert "Hint: check it" in err

    def test_keyboard_interrupt(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _interrupt() -> int:
            raise KeyboardInterrupt

        monkeypatch.setattr(app_module, "main", _interrupt)
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.KEYBOARD_INTERRUPT

    @patch.object(app_module, "main", side_effect=RuntimeError("kaboom"))
    def test_unexpected_error(
        self, _mock_main: MagicMock, capsys: pytest.CaptureFixture[str],
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.UNEXPECTED_ERROR
        assert "RuntimeError: kaboom" in capsys.readouterr().err
