"""Pytest configuration and shared fixtures for the bbtree test suite."""

import logging
import os
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

from bbtree.vocabulary import TagVocabulary, default_vocabulary

# Hypothesis profiles; select with HYPOTHESIS_PROFILE=ci|dev|debug
settings.register_profile("ci", max_examples=200, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=50)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")
    config.addinivalue_line("markers", "fuzzing: Property-based tests driven by hypothesis")
    config.addinivalue_line("markers", "slow: Slow tests that may take several seconds")


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding vocabulary files and sample posts."""
    return FIXTURES_DIR


@pytest.fixture
def vocab_dir() -> Path:
    """Directory holding sample vocabulary files."""
    return FIXTURES_DIR / "vocabularies"


@pytest.fixture
def default_vocab() -> TagVocabulary:
    """The built-in vocabulary."""
    return default_vocabulary()


@pytest.fixture
def bi_vocab() -> TagVocabulary:
    """Vocabulary with only [b] and [i]."""
    return TagVocabulary.from_mapping({"b": {}, "i": {}})


@pytest.fixture
def code_vocab() -> TagVocabulary:
    """Vocabulary with [b], [i] and a no-nesting [code]."""
    return TagVocabulary.from_mapping({"b": {}, "i": {}, "code": {"no_nesting": True}})


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run in an empty directory with no vocabulary environment override."""
    monkeypatch.delenv("BBTREE_VOCAB", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Undo handler changes made by configure_logging (e.g. through the CLI)."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
