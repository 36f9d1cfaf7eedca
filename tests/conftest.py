"""Shared fixtures and helpers for tests."""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from ember_nav.core.position import ASTPath, locate
from ember_nav.core.template_parser import parse_template
from ember_nav.models import Position

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def write_file(root: Path, relative: str, text: str = "") -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def write_package_json(directory: Path, **fields: Any) -> Path:
    return write_file(directory, "package.json", json.dumps(fields))


def focus(template: str, line: int, character: int) -> ASTPath:
    """Parse a template and return the path at the given position."""
    path = locate(parse_template(template), Position(line=line, character=character))
    assert path is not None
    return path


def focus_on(template: str, needle: str, offset: int = 0, occurrence: int = 0) -> ASTPath:
    """Focus ``offset`` characters into the ``occurrence``-th match of ``needle``."""
    index = -1
    for _ in range(occurrence + 1):
        index = template.index(needle, index + 1)
    index += offset
    line = template.count("\n", 0, index)
    character = index - (template.rfind("\n", 0, index) + 1)
    return focus(template, line, character)


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    """Build an Ember app on disk: ``make_project({"app/components/x.js": "..."})``."""

    def _make(files: dict[str, str] | None = None, name: str = "app-root", **package: Any) -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        package.setdefault("name", name)
        package.setdefault("devDependencies", {"ember-cli": "*"})
        write_package_json(root, **package)
        for relative, text in (files or {}).items():
            write_file(root, relative, text)
        return root

    return _make


@pytest.fixture
def make_addon(tmp_path: Path) -> Callable[..., Path]:
    """Install an ember addon under ``<project>/node_modules/<name>``."""

    def _make(project_root: Path, name: str, files: dict[str, str] | None = None, **package: Any) -> Path:
        root = project_root / "node_modules" / name
        root.mkdir(parents=True, exist_ok=True)
        package.setdefault("name", name)
        package.setdefault("keywords", ["ember-addon"])
        write_package_json(root, **package)
        for relative, text in (files or {}).items():
            write_file(root, relative, text)
        return root

    return _make
