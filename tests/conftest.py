"""Shared pytest fixtures for gistreport tests."""

import logging
from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Undo logging.basicConfig(force=True) calls made by the code under test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def results_dir(tmp_path: Path) -> Path:
    """Return an existing, empty results directory."""
    path = tmp_path / "results"
    path.mkdir()
    return path


@pytest.fixture
def make_result_files(results_dir: Path) -> Callable[[dict[str, str]], list[Path]]:
    """Return a function writing {name: content} files into results_dir."""

    def _make(files: dict[str, str]) -> list[Path]:
        paths = []
        for name, content in files.items():
            path = results_dir / name
            path.write_text(content, newline="")
            paths.append(path)
        return paths

    return _make
