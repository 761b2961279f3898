"""Shared fixtures for the menu editor tests."""

from __future__ import annotations

import pytest

from menu_editor.identity import assign
from menu_editor.models import MenuEntry

SCENARIO_YAML = """\
# site navigation
params:
  title: Example
menu:
  main:
    - name: A
      identifier: a
      weight: 5
    - name: B
      identifier: b
      parent: a
      weight: 1
    - name: B2
      identifier: b
      parent: a
      weight: 2
"""


def _make_entries(*raw: dict) -> list[MenuEntry]:
    return assign(list(raw))


@pytest.fixture
def make_entries():
    """Build keyed entries from raw mappings."""
    return _make_entries


@pytest.fixture
def scenario_yaml() -> str:
    return SCENARIO_YAML


@pytest.fixture
def scenario_entries() -> list[MenuEntry]:
    return _make_entries(
        {"name": "A", "identifier": "a", "weight": 5},
        {"name": "B", "identifier": "b", "parent": "a", "weight": 1},
        {"name": "B2", "identifier": "b", "parent": "a", "weight": 2},
    )


CHAIN_DEPTH = 1500


@pytest.fixture
def deep_chain() -> list[MenuEntry]:
    """A single parent chain deeper than the interpreter's recursion limit."""
    raw = [{"name": "n0", "identifier": "n0"}]
    raw.extend({"name": f"n{i}", "identifier": f"n{i}", "parent": f"n{i - 1}"} for i in range(1, CHAIN_DEPTH))
    return _make_entries(*raw)
