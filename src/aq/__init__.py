"""aq: command line tool for a managed query service (bq command like).

Commands are declared up front, validated before they run, and handed
to pluggable action handlers that talk to the actual backend.
"""

from aq.version import __version__

__all__: list[str] = ["__version__"]
