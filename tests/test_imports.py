"""
Smoke test that every package imports.
"""

import importlib

import pytest


@pytest.mark.parametrize("module", [
    "habit_tally.app_logging",
    "habit_tally.cli.main",
    "habit_tally.config.loader",
    "habit_tally.core.errors",
    "habit_tally.core.exporter",
    "habit_tally.core.lifecycle",
    "habit_tally.core.parsing",
    "habit_tally.storage.models",
    "habit_tally.storage.repository",
    "habit_tally.storage.store",
])
def test_module_imports(module):
    assert importlib.import_module(module) is not None
