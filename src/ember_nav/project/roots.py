"""Project discovery and layout metadata for Ember applications and addons."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from ember_nav.models import Project

logger = logging.getLogger(__name__)

_POD_MODULE_PREFIX = re.compile(r"podModulePrefix\s*[:=]\s*['\"`]([^'\"`]*)['\"`]")


def read_package_json(directory: Path) -> dict[str, Any] | None:
    path = directory / "package.json"
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as exc:
        logger.debug("Ignoring unreadable %s: %s", path, exc)
        return None
    return data if isinstance(data, dict) else None


def dependency_names(package: dict[str, Any]) -> list[str]:
    names: list[str] = []
    for key in ("dependencies", "devDependencies"):
        deps = package.get(key)
        if isinstance(deps, dict):
            names.extend(name for name in deps if name not in names)
    return names


def is_ember_addon(package: dict[str, Any] | None) -> bool:
    if not package:
        return False
    keywords = package.get("keywords")
    return isinstance(keywords, list) and "ember-addon" in keywords


def is_project_root(directory: Path) -> bool:
    if (directory / "ember-cli-build.js").is_file():
        return True
    package = read_package_json(directory)
    if package is None:
        return False
    return "ember-cli" in dependency_names(package) or is_ember_addon(package)


def find_project_root(path: Path) -> Path | None:
    start = path if path.is_dir() else path.parent
    for directory in (start, *start.parents):
        if is_project_root(directory):
            return directory
    return None


def pod_prefix_for_root(root: Path) -> str | None:
    """Last segment of ``podModulePrefix`` from ``config/environment.js``.

    The config is JavaScript, so this is a textual search rather than an
    evaluation.
    """
    config_path = root / "config" / "environment.js"
    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None
    match = _POD_MODULE_PREFIX.search(text)
    if match is None:
        return None
    return match.group(1).rstrip("/").split("/")[-1] or None


def is_module_unification_app(root: Path) -> bool:
    return (root / "src" / "ui").is_dir()


def load_project(root: Path) -> Project:
    return Project(
        root=root,
        module_unification=is_module_unification_app(root),
        pod_prefix=pod_prefix_for_root(root),
    )


def resolve_package_root(start: Path, name: str) -> Path | None:
    for directory in (start, *start.parents):
        candidate = directory / "node_modules" / name
        if (candidate / "package.json").is_file():
            return candidate
    return None


def _in_repo_addon_paths(root: Path, package: dict[str, Any]) -> list[Path]:
    ember_addon = package.get("ember-addon")
    if not isinstance(ember_addon, dict):
        return []
    paths = ember_addon.get("paths")
    if not isinstance(paths, list):
        return []
    return [root / entry for entry in paths if isinstance(entry, str)]


def _addon_dependencies(directory: Path, package: dict[str, Any]) -> list[Path]:
    roots: list[Path] = []
    for name in dependency_names(package):
        package_root = resolve_package_root(directory, name)
        if package_root is not None and is_ember_addon(read_package_json(package_root)):
            roots.append(package_root)
    return roots


def discover_addon_roots(root: Path) -> list[Path]:
    """Ordered addon roots for a project.

    Direct ember-addon dependencies come first (``dependencies`` before
    ``devDependencies``), then in-repo addons from ``ember-addon.paths``,
    then one level of addons those depend on.
    """
    package = read_package_json(root)
    if package is None:
        return []

    roots: list[Path] = []

    def add(candidates: Iterable[Path]) -> None:
        for candidate in candidates:
            if candidate.is_dir() and candidate not in roots:
                roots.append(candidate)

    add(_addon_dependencies(root, package))
    add(_in_repo_addon_paths(root, package))
    for addon_root in list(roots):
        addon_package = read_package_json(addon_root)
        if addon_package is not None:
            add(_addon_dependencies(addon_root, addon_package))
    return roots


class ProjectRoots:
    """Maps files to their owning project.

    Explicitly registered roots take precedence (the deepest one containing
    the file); otherwise the nearest ancestor that looks like an Ember project
    is used.
    """

    def __init__(self, roots: Iterable[Path | str] = ()) -> None:
        self._roots: list[Path] = []
        for root in roots:
            self.add_root(root)

    def add_root(self, root: Path | str) -> None:
        resolved = Path(root).absolute()
        if resolved not in self._roots:
            self._roots.append(resolved)

    @property
    def roots(self) -> list[Path]:
        return list(self._roots)

    def project_for_path(self, path: Path) -> Project | None:
        path = Path(path).absolute()
        registered = [root for root in self._roots if root == path or root in path.parents]
        if registered:
            root: Path | None = max(registered, key=lambda candidate: len(candidate.parts))
        else:
            root = find_project_root(path)
        if root is None:
            logger.debug("No project owns %s", path)
            return None
        return load_project(root)

    def addon_roots(self, root: Path) -> list[Path]:
        return discover_addon_roots(root)
