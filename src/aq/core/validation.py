"""Precondition validator: one predicate per command.

Every precondition receives the parsed invocation and a
:class:`~aq.core.protocols.Confirmer`, inspects the invocation without
changing it, and returns :data:`~aq.core.models.ACCEPTED` or a
:class:`~aq.core.models.Rejected` outcome.  Rules run in declaration
order and the first failure wins.

Only :func:`check_rm` ever touches the confirmer.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from aq.core.models import (
    ACCEPTED,
    FailureKind,
    ParsedInvocation,
    Rejected,
    ValidationOutcome,
)
from aq.core.protocols import Confirmer
from aq.exceptions import ConfirmationError

logger = logging.getLogger(__name__)

S3_SCHEME = "s3://"
SUPPORTED_SOURCE_FORMAT = "NEWLINE_DELIMITED_JSON"

Rule = Callable[[ParsedInvocation], Rejected | None]


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def require_bucket(invocation: ParsedInvocation) -> Rejected | None:
    if not invocation.flag("bucket"):
        return Rejected("bucket must be specified.")
    return None


def require_arg(message: str) -> Rule:
    """Build a rule rejecting invocations with no positional argument."""

    def rule(invocation: ParsedInvocation) -> Rejected | None:
        if invocation.nargs == 0:
            return Rejected(message)
        return None

    return rule


def require_qualified_name(invocation: ParsedInvocation) -> Rejected | None:
    if len(invocation.arg(0).split(".")) != 2:
        return Rejected("[DATABASE].[TABLE] must contain `.`.")
    return None


def forbid_qualified_name(invocation: ParsedInvocation) -> Rejected | None:
    if len(invocation.arg(0).split(".")) >= 2:
        return Rejected("If you want to create table, use `load` subcommand.")
    return None


def require_s3_source(invocation: ParsedInvocation) -> Rejected | None:
    if not invocation.arg(1).startswith(S3_SCHEME):
        return Rejected(f"`SOURCE` must start with '{S3_SCHEME}'")
    return None


def require_supported_format(invocation: ParsedInvocation) -> Rejected | None:
    if invocation.flag("source_format") != SUPPORTED_SOURCE_FORMAT:
        return Rejected(f"Now aq support only {SUPPORTED_SOURCE_FORMAT}.")
    return None


def _first_rejection(invocation: ParsedInvocation, *rules: Rule) -> ValidationOutcome:
    for rule in rules:
        rejected = rule(invocation)
        if rejected is not None:
            logger.debug("%s rejected: %s", invocation.command.name, rejected.message)
            return rejected
    return ACCEPTED


# ---------------------------------------------------------------------------
# Per-command preconditions
# ---------------------------------------------------------------------------

def check_query(invocation: ParsedInvocation, confirmer: Confirmer) -> ValidationOutcome:
    return _first_rejection(
        invocation,
        require_arg("QUERY must be specified."),
        require_bucket,
    )


def check_ls(invocation: ParsedInvocation, confirmer: Confirmer) -> ValidationOutcome:
    return _first_rejection(invocation, require_bucket)


def check_head(invocation: ParsedInvocation, confirmer: Confirmer) -> ValidationOutcome:
    return _first_rejection(
        invocation,
        require_bucket,
        require_arg("DATABASE and TABLE must be specified."),
        require_qualified_name,
    )


def check_mk(invocation: ParsedInvocation, confirmer: Confirmer) -> ValidationOutcome:
    return _first_rejection(
        invocation,
        require_bucket,
        require_arg("DATABASE must be specified."),
        forbid_qualified_name,
    )


def check_rm(invocation: ParsedInvocation, confirmer: Confirmer) -> ValidationOutcome:
    """Validate ``rm`` and ask for confirmation unless ``--force`` is set."""
    outcome = _first_rejection(
        invocation,
        require_bucket,
        require_arg("NAME must be specified."),
    )
    if isinstance(outcome, Rejected):
        return outcome

    if invocation.flag("force"):
        return ACCEPTED

    try:
        answer = confirmer.confirm(f"Would you remove {invocation.arg(0)}?")
    except ConfirmationError as exc:
        logger.debug("Confirmation failed: %s", exc)
        answer = False

    if not answer:
        return Rejected("Canceled.", kind=FailureKind.CANCELLATION)
    return ACCEPTED


def check_load(invocation: ParsedInvocation, confirmer: Confirmer) -> ValidationOutcome:
    return _first_rejection(
        invocation,
        require_bucket,
        require_s3_source,
        require_supported_format,
    )


def validate(invocation: ParsedInvocation, confirmer: Confirmer) -> ValidationOutcome:
    """Run the matched command's precondition against *invocation*."""
    return invocation.command.precondition(invocation, confirmer)
