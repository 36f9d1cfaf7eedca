"""Candidate file paths per layout convention.

Everything here is a pure function of its inputs. Existence filtering is left
to the caller.
"""

import re
from pathlib import Path

from ember_nav.models import LayoutConvention, Project

_SCRIPT_EXTENSIONS = (".js", ".ts")
_WORD = re.compile(r"[A-Z]{2,}(?=[A-Z][a-z]+[0-9]*|\b)|[A-Z]?[a-z]+[0-9]*|[A-Z]|[0-9]+")
_COMPONENT_SUFFIXES = ("/template.hbs", "/component.js", "/component.ts")


def kebab_case(name: str) -> str:
    """``FooBar`` -> ``foo-bar``; nested ``Foo::Bar`` -> ``foo/bar``."""
    return "/".join("-".join(word.lower() for word in _WORD.findall(segment)) for segment in name.split("::"))


def is_template_path(path: Path | str) -> bool:
    return str(path).endswith(".hbs")


def collection_paths(root: Path, prefix: str, collection: str, name: str) -> list[Path]:
    base = root / prefix / collection
    return [base / f"{name}{extension}" for extension in _SCRIPT_EXTENSIONS]


def component_script_paths_for_prefix(root: Path, prefix: str, name: str) -> list[Path]:
    base = root / prefix / "components"
    return [
        base / f"{name}.js",
        base / f"{name}.ts",
        base / name / "component.js",
        base / name / "component.ts",
    ]


def component_template_paths_for_prefix(root: Path, prefix: str, name: str) -> list[Path]:
    return [
        root / prefix / "components" / name / "template.hbs",
        root / prefix / "templates" / "components" / f"{name}.hbs",
    ]


def component_script_paths(root: Path, convention: LayoutConvention, name: str) -> list[Path]:
    return component_script_paths_for_prefix(root, convention.base, name)


def component_template_paths(root: Path, convention: LayoutConvention, name: str) -> list[Path]:
    return component_template_paths_for_prefix(root, convention.base, name)


def helper_paths(root: Path, prefix: str, name: str) -> list[Path]:
    return collection_paths(root, prefix, "helpers", name)


def model_paths(root: Path, name: str) -> list[Path]:
    return collection_paths(root, "app", "models", name)


def transform_paths(root: Path, name: str) -> list[Path]:
    return collection_paths(root, "app", "transforms", name)


def paths_for_component_scripts(project: Project, name: str) -> list[Path]:
    paths: list[Path] = []
    for convention in project.conventions():
        paths.extend(component_script_paths(project.root, convention, name))
    return paths


def paths_for_component_templates(project: Project, name: str) -> list[Path]:
    paths: list[Path] = []
    for convention in project.conventions():
        paths.extend(component_template_paths(project.root, convention, name))
    return paths


def component_name_from_path(root: Path, file_path: Path) -> str | None:
    """Name of the component a file under ``components/`` belongs to.

    ``app/components/foo-bar.js``, ``app/templates/components/foo-bar.hbs``
    and ``app/components/foo-bar/template.hbs`` all give ``foo-bar``.
    """
    try:
        relative = file_path.relative_to(root).as_posix()
    except ValueError:
        relative = file_path.as_posix()

    relative = "/" + relative
    splitter = "/-components/" if "/-components/" in relative else "/components/"
    if splitter not in relative:
        return None
    name = relative.split(splitter, 1)[1]

    for suffix in _COMPONENT_SUFFIXES:
        if name.endswith(suffix):
            return name[: -len(suffix)] or None
    stem, dot, _ = name.rpartition(".")
    return (stem if dot else name) or None
