"""Shared pytest fixtures for rhinogen tests."""

import itertools
import sys
import types
from collections.abc import Callable
from pathlib import Path

import pytest

from rhinogen.compiler import build_grammar_from_text
from rhinogen.core import ir


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def smarthome_path(fixtures_dir: Path) -> Path:
    """Return path to the smart home context fixture."""
    return fixtures_dir / "smarthome.yml"


@pytest.fixture
def smarthome_yaml(smarthome_path: Path) -> str:
    return smarthome_path.read_text(encoding="utf-8")


@pytest.fixture
def smarthome_grammar(smarthome_yaml: str) -> ir.Grammar:
    return build_grammar_from_text(smarthome_yaml, source="smarthome.yml")


@pytest.fixture(scope="session")
def load_generated() -> Callable[[str], types.ModuleType]:
    """
    Return a helper that executes generated source as a throwaway module.

    Session scoped so Hypothesis tests can use it.
    """
    counter = itertools.count()

    def _load(source: str) -> types.ModuleType:
        name = f"_rhinogen_generated_{next(counter)}"
        module = types.ModuleType(name)
        # dataclasses looks the module up while processing string annotations
        sys.modules[name] = module
        try:
            exec(compile(source, f"<{name}>", "exec"), module.__dict__)
        finally:
            sys.modules.pop(name, None)
        return module

    return _load
