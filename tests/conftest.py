"""Pytest configuration and fixtures for CodeFlow CLI tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Dict, Generator

import pytest


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path_factory, monkeypatch):
    """Point the config home at a throwaway directory for every test."""
    home = tmp_path_factory.mktemp("codeflow_home")
    monkeypatch.setattr("codeflow_cli.config.BASE_DIR", home)
    monkeypatch.setattr("codeflow_cli.config.CONFIG_FILE", home / "config.toml")
    return home


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def sample_project_path() -> Path:
    """Get path to sample test project."""
    return Path(__file__).parent / "fixtures" / "sample_project"


@pytest.fixture
def make_tree(temp_dir: Path) -> Callable[[Dict[str, str]], Path]:
    """Write ``{relative path: content}`` under a fresh root and return it."""

    def _make(files: Dict[str, str]) -> Path:
        for rel, content in files.items():
            target = temp_dir / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return temp_dir

    return _make
