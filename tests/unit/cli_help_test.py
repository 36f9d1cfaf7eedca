"""Tests for the CLI surface: help flags and the definition/classify commands."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from ember_nav.cli.app import app
from ember_nav.models import ORIGIN_RANGE, Location

runner = CliRunner()


@pytest.mark.parametrize(
    "args",
    [
        [],
        ["definition"],
        ["classify"],
        ["serve"],
        ["serve", "mcp"],
    ],
    ids=["root", "definition", "classify", "serve", "serve-mcp"],
)
def test_short_help_flag(args: list[str]) -> None:
    result = runner.invoke(app, [*args, "-h"])
    assert result.exit_code == 0
    assert "Usage" in result.output


def test_definition_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["definition", str(tmp_path / "nope.hbs"), "0", "0"])

    assert result.exit_code == 1
    assert "File not found" in result.output


def test_definition_json_uses_provider(tmp_path: Path) -> None:
    template = tmp_path / "a.hbs"
    template.write_text("<FooBar />")
    mock_provider = MagicMock()
    mock_provider.resolve_definition.return_value = [Location(uri="file:///x/foo-bar.js", range=ORIGIN_RANGE)]

    with patch("ember_nav.cli.definition._get_provider", return_value=mock_provider):
        result = runner.invoke(app, ["definition", str(template), "0", "2", "--json"])

    assert result.exit_code == 0
    assert json.loads(result.output)[0]["uri"] == "file:///x/foo-bar.js"
    _, position = mock_provider.resolve_definition.call_args.args
    assert (position.line, position.character) == (0, 2)


def test_definition_table_on_real_project(make_project) -> None:
    root = make_project(
        {
            "app/templates/application.hbs": "{{format-date day}}\n",
            "app/helpers/format-date.js": "export default helper(() => {});\n",
        }
    )

    result = runner.invoke(app, ["definition", str(root / "app/templates/application.hbs"), "0", "3"])

    assert result.exit_code == 0
    assert "(1 locations)" in result.output


def test_classify_reports_kind(make_project) -> None:
    root = make_project({"app/templates/application.hbs": "{{this.title}}\n"})

    result = runner.invoke(app, ["classify", str(root / "app/templates/application.hbs"), "0", "8"])

    assert result.exit_code == 0
    assert "local-property" in result.output


def test_classify_nothing(make_project) -> None:
    root = make_project({"app/templates/application.hbs": "plain text\n"})

    result = runner.invoke(app, ["classify", str(root / "app/templates/application.hbs"), "0", "1"])

    assert result.exit_code == 0
    assert "(no reference)" in result.output


def test_negative_line_is_rejected(tmp_path: Path) -> None:
    template = tmp_path / "a.hbs"
    template.write_text("")

    result = runner.invoke(app, ["definition", str(template), "--", "-1", "0"])

    assert result.exit_code != 0


def test_unsupported_extension_exits_with_error(tmp_path: Path) -> None:
    stylesheet = tmp_path / "app.css"
    stylesheet.write_text(".a {}")

    result = runner.invoke(app, ["classify", str(stylesheet), "0", "0"])

    assert result.exit_code == 1
    assert "Unsupported file extension" in result.output
