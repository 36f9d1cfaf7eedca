from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from ember_nav.core.classify import call_callee_name, classify_script_path, string_value
from ember_nav.core.position import ASTPath, locate
from ember_nav.core.script_ast import parse_script
from ember_nav.models import ModelFieldType, Position, TransformFieldType

MODEL_JS = """import Model, { attr, belongsTo, hasMany } from '@ember-data/model';
import DS from 'ember-data';

export default Model.extend({
  name: attr('string'),
  birthday: DS.attr('date'),
  author: belongsTo('user', { async: false }),
  comments: hasMany('comment', 'inverse-name'),
  other: someCall('user'),
});
"""

MODEL_TS = """import Model, { attr, belongsTo } from '@ember-data/model';

export default class Post extends Model {
  @attr('string') title;
  @belongsTo('user') author;
}
"""


def _focus_script(source: str, needle: str, offset: int = 1, dialect: str = "javascript") -> ASTPath:
    index = source.index(needle) + offset
    line = source.count("\n", 0, index)
    character = index - (source.rfind("\n", 0, index) + 1)
    path = locate(parse_script(source, dialect), Position(line=line, character=character))
    assert path is not None
    return path


class TestModelFields:
    @pytest.mark.parametrize(
        ("needle", "expected"),
        [
            ("'user', {", ModelFieldType(name="user")),
            ("'comment'", ModelFieldType(name="comment")),
        ],
    )
    def test_relationship_types(self, needle: str, expected: ModelFieldType) -> None:
        assert classify_script_path(_focus_script(MODEL_JS, needle)) == expected

    def test_cursor_on_opening_quote(self) -> None:
        path = _focus_script(MODEL_JS, "'user', {", offset=0)

        assert classify_script_path(path) == ModelFieldType(name="user")

    def test_only_first_argument_counts(self) -> None:
        assert classify_script_path(_focus_script(MODEL_JS, "'inverse-name'")) is None

    def test_unknown_callee(self) -> None:
        assert classify_script_path(_focus_script(MODEL_JS, "'user'),")) is None

    def test_callee_identifier_is_not_a_reference(self) -> None:
        assert classify_script_path(_focus_script(MODEL_JS, "belongsTo('user'")) is None


class TestTransforms:
    def test_attr_call(self) -> None:
        assert classify_script_path(_focus_script(MODEL_JS, "'string'")) == TransformFieldType(name="string")

    def test_member_attr_call(self) -> None:
        assert classify_script_path(_focus_script(MODEL_JS, "'date'")) == TransformFieldType(name="date")


class TestTypeScriptDecorators:
    def test_attr_decorator(self) -> None:
        path = _focus_script(MODEL_TS, "'string'", dialect="typescript")

        assert classify_script_path(path) == TransformFieldType(name="string")

    def test_belongs_to_decorator(self) -> None:
        path = _focus_script(MODEL_TS, "'user'", dialect="typescript")

        assert classify_script_path(path) == ModelFieldType(name="user")


class TestScriptHelpers:
    def test_string_value_joins_fragments(self) -> None:
        tree = parse_script("x('a\\'b');")
        strings = _find(tree, "string")

        assert string_value(strings[0]) == "a\\'b"

    def test_call_callee_name(self) -> None:
        tree = parse_script("foo(); a.b.bar();")
        names = [call_callee_name(call) for call in _find(tree, "call_expression")]

        assert names == ["foo", "bar"]


class TestFailClosed:
    def test_program_root(self) -> None:
        assert classify_script_path(ASTPath(parse_script(MODEL_JS))) is None

    def test_orphaned_string(self) -> None:
        string = _find(parse_script("belongsTo('user');"), "string")[0]

        assert classify_script_path(ASTPath(string)) is None

    def test_same_answer_without_filesystem(self) -> None:
        path = _focus_script(MODEL_JS, "'user', {")

        with (
            patch.object(Path, "is_file", _refuse),
            patch.object(Path, "exists", _refuse),
            patch.object(Path, "read_text", _refuse),
        ):
            first = classify_script_path(path)
            second = classify_script_path(path)

        assert first == second == ModelFieldType(name="user")


def _refuse(*args, **kwargs):
    raise AssertionError("classification touched the filesystem")


def _find(node, node_type: str) -> list:
    found = [node] if node.type == node_type else []
    for child in node.children:
        found.extend(_find(child, node_type))
    return found
