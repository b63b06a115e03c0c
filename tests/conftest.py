"""Pytest configuration and fixtures."""

import os
from pathlib import Path

import pytest

from fountainkit.config import reset_settings

FIXTURES_DIR = Path(__file__).parent / "fixtures"

SIMPLE_SCRIPT = """EXT. PARK - DAY

A simple scene.

JOHN
Hello world.

JANE
Hi there!

More action here."""


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove FOUNTAINKIT_ variables that might interfere with tests."""
    for var in [k for k in os.environ if k.startswith("FOUNTAINKIT_")]:
        monkeypatch.delenv(var)


@pytest.fixture(autouse=True)
def reset_global_settings():
    """Reset global settings state before and after each test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def simple_script() -> str:
    """A scene with one action, two speeches and a closing action."""
    return SIMPLE_SCRIPT


@pytest.fixture
def brick_and_steel() -> str:
    """The Brick & Steel sample screenplay with a title page."""
    return (FIXTURES_DIR / "brick_and_steel.fountain").read_text(encoding="utf-8")


@pytest.fixture
def brick_and_steel_path() -> Path:
    """Path of the Brick & Steel sample screenplay."""
    return FIXTURES_DIR / "brick_and_steel.fountain"


@pytest.fixture
def fountain_file(tmp_path):
    """Factory writing fountain text to a temporary file."""

    def _write(text: str, name: str = "script.fountain") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
