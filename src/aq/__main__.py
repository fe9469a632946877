"""Allow ``python -m aq`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m aq`` behaves identically to the ``aq`` console script.
"""

from __future__ import annotations

from aq.cli.app import cli

if __name__ == "__main__":
    cli()
