"""Infrastructure layer: integration with installed backend plugins.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
"""

from aq.infra.handlers import ENTRY_POINT_GROUP, UnconfiguredHandler, discover_handlers

__all__: list[str] = [
    "ENTRY_POINT_GROUP",
    "UnconfiguredHandler",
    "discover_handlers",
]
