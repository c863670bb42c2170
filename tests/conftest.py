"""Shared fixtures: isolate the process registry/config singletons per test."""
import os

import pytest

from record_validate.builtin_rules import BUILTIN_RULES
from record_validate.config_loader import reset_config
from record_validate.rule_registry import RuleRegistry, reset_registry

TESTS_DIR = os.path.dirname(os.path.abspath(__file__))


@pytest.fixture(autouse=True)
def isolated_singletons(monkeypatch):
    """Every test starts from the bundled config and a freshly built default registry."""
    monkeypatch.delenv("RECORD_VALIDATE_CONFIG", raising=False)
    reset_config()
    reset_registry()
    yield
    reset_config()
    reset_registry()


@pytest.fixture
def registry():
    """A private registry holding the built-in rules."""
    return RuleRegistry(BUILTIN_RULES)


@pytest.fixture
def tests_dir():
    return TESTS_DIR
