# tests/conftest.py
# Shared fixtures: small canvases and an in-memory persister so dispatch tests never touch the disk

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Tuple

import numpy as np
import pytest


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def _ensure_python_path():
    # make `import scenescript` work from a fresh clone without an install
    pkg_dir = _repo_root() / "python"
    if str(pkg_dir) not in sys.path:
        sys.path.insert(0, str(pkg_dir))


_ensure_python_path()

from scenescript.interpreter import Interpreter  # noqa: E402


class RecordingPersister:
    """Keeps a copy of every saved canvas instead of writing it."""

    def __init__(self):
        self.saved: List[Tuple[Path, np.ndarray]] = []

    def save(self, canvas, path):
        self.saved.append((Path(path), canvas.pixels.copy()))
        return Path(path)

    @property
    def names(self) -> List[str]:
        return [path.name for path, _ in self.saved]


@pytest.fixture
def small_config(tmp_path: Path) -> dict:
    return {
        "canvas": {"width": 64, "height": 64},
        "shading": {"steps": 8},
        "output": {"directory": str(tmp_path)},
    }


@pytest.fixture
def recorder() -> RecordingPersister:
    return RecordingPersister()


@pytest.fixture
def shown() -> list:
    return []


@pytest.fixture
def interpreter(small_config, recorder, shown) -> Interpreter:
    return Interpreter(small_config, persister=recorder, presenter=shown.append)
