"""
Checks on pyproject.toml so the console script installs.
"""

from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


def test_package_find_options_are_valid_setuptools_keys() -> None:
    data = tomllib.loads(PYPROJECT.read_text(encoding="utf-8"))
    find = data["tool"]["setuptools"]["packages"]["find"]
    assert set(find) <= {"where", "include", "exclude", "namespaces"}
    assert find["namespaces"] is True


def test_console_script_points_at_main() -> None:
    data = tomllib.loads(PYPROJECT.read_text(encoding="utf-8"))
    assert data["project"]["scripts"]["research-agent"] == "research_agent.main:main"
