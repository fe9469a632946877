"""Declarations of every ``aq`` subcommand.

:func:`build_registry` returns a fresh :class:`CommandRegistry`; the
application builds it once at startup.
"""

from __future__ import annotations

from datetime import date

from aq.core.models import Command, FlagSpec
from aq.core.registry import CommandRegistry
from aq.core.validation import (
    SUPPORTED_SOURCE_FORMAT,
    check_head,
    check_load,
    check_ls,
    check_mk,
    check_query,
    check_rm,
)

BUCKET_ENV_VAR = "AQ_DEFAULT_BUCKET"


def default_object_prefix() -> str:
    """``Unsaved/YYYY/MM/DD`` for the day the command is parsed."""
    return "Unsaved/" + date.today().strftime("%Y/%m/%d")


BUCKET_FLAG = FlagSpec(
    name="bucket",
    alias="b",
    env_var=BUCKET_ENV_VAR,
    help="S3 bucket where the query result is stored.",
)

OBJECT_PREFIX_FLAG = FlagSpec(
    name="object_prefix",
    alias="o",
    default=default_object_prefix,
    help="S3 object prefix where the query result is stored.",
)


def build_registry() -> CommandRegistry:
    """Construct the command table in its canonical order."""
    return CommandRegistry(
        [
            Command(
                name="query",
                usage="Run query",
                args_usage="QUERY",
                flags=(
                    BUCKET_FLAG,
                    OBJECT_PREFIX_FLAG,
                    FlagSpec(
                        name="timeout",
                        alias="t",
                        default=0,
                        kind=int,
                        help=(
                            "Wait for execution of the query for this number of seconds. "
                            "If this is set to 0, timeout is disabled."
                        ),
                    ),
                ),
                precondition=check_query,
            ),
            Command(
                name="ls",
                usage="Show databases or tables in specified database",
                args_usage="[DATABASE]",
                flags=(BUCKET_FLAG, OBJECT_PREFIX_FLAG),
                precondition=check_ls,
            ),
            Command(
                name="head",
                usage="Show records in specified table",
                args_usage="DATABASE.TABLE",
                flags=(
                    BUCKET_FLAG,
                    OBJECT_PREFIX_FLAG,
                    FlagSpec(
                        name="max_rows",
                        alias="n",
                        default=100,
                        kind=int,
                        help="This number of rows are printed.",
                    ),
                ),
                precondition=check_head,
            ),
            Command(
                name="mk",
                usage="Create database",
                args_usage="DATABASE",
                flags=(BUCKET_FLAG, OBJECT_PREFIX_FLAG),
                precondition=check_mk,
            ),
            Command(
                name="rm",
                usage="Drop database or table",
                args_usage="NAME",
                flags=(
                    BUCKET_FLAG,
                    OBJECT_PREFIX_FLAG,
                    FlagSpec(
                        name="force",
                        alias="f",
                        default=False,
                        kind=bool,
                        help="Skip confirmation if this is set.",
                    ),
                ),
                precondition=check_rm,
            ),
            Command(
                name="load",
                usage="Create table and load data",
                args_usage="DATABASE.TABLE SOURCE SCHEMA",
                flags=(
                    BUCKET_FLAG,
                    OBJECT_PREFIX_FLAG,
                    FlagSpec(
                        name="source_format",
                        alias="s",
                        default=SUPPORTED_SOURCE_FORMAT,
                        help=(
                            "Specify source file data format. "
                            f"Now aq support only {SUPPORTED_SOURCE_FORMAT}."
                        ),
                    ),
                    FlagSpec(
                        name="partitioning",
                        alias="p",
                        help="Specify partition key and type. ex. key1:type1,key2:type2,...",
                    ),
                ),
                precondition=check_load,
            ),
        ]
    )
