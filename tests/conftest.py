"""Shared pytest fixtures and configuration for the aq test suite.

Guidelines
----------
* No network access and no real terminal prompts in any test.
* Action handlers and the confirmer are always injected fakes.
* Environment lookups go through an explicit ``environ`` mapping, never
  the real process environment.
"""

from __future__ import annotations

import pytest

from aq.core.commands import build_registry
from aq.core.registry import CommandRegistry


@pytest.fixture
def registry() -> CommandRegistry:
    return build_registry()
