"""Shared pytest fixtures for ExpressionWhizz tests."""

from pathlib import Path

import pytest

from exprwhizz.config import WhizzSettings
from exprwhizz.core.dictionary import Dictionary
from exprwhizz.core.session import Session


@pytest.fixture
def env() -> Dictionary:
    """Return an empty variable environment."""
    return Dictionary()


@pytest.fixture
def settings() -> WhizzSettings:
    """Return default settings."""
    return WhizzSettings()


@pytest.fixture
def session(settings: WhizzSettings) -> Session:
    """Return a fresh calculator session."""
    return Session(settings)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Return the path of a settings file in a temporary directory (not yet written)."""
    return tmp_path / "whizz.toml"
