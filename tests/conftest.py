"""Shared pytest configuration and fixtures."""

import os
from pathlib import Path

import pytest

# pygame is imported by the config module; keep it off any real display
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def levels_dir() -> Path:
    """Directory holding the levels shipped with the game."""
    return PROJECT_ROOT / "levels"
