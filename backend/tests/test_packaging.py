"""Tests for the installable module list in pyproject.toml."""

from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

ROOT = Path(__file__).resolve().parents[2]


def _installed_modules():
    config = tomllib.loads((ROOT / "pyproject.toml").read_text(encoding="utf-8"))
    return set(config["tool"]["setuptools"]["py-modules"])


def test_server_module_not_installed():
    assert "main" not in _installed_modules()


def test_library_modules_installed():
    library = {p.stem for p in (ROOT / "backend").glob("*.py")} - {"main"}
    assert _installed_modules() == library
