from __future__ import annotations

import pytest

from ember_nav.core.template_ast import (
    BlockStatement,
    BooleanLiteral,
    CommentStatement,
    ConcatStatement,
    ElementNode,
    MustacheCommentStatement,
    MustacheStatement,
    NumberLiteral,
    PathExpression,
    StringLiteral,
    SubExpression,
    TextNode,
)
from ember_nav.core.template_parser import TemplateSyntaxError, parse_template
from ember_nav.models import Position


def _only(template: str):
    tree = parse_template(template)
    assert len(tree.body) == 1
    return tree.body[0]


class TestElements:
    def test_element_with_attribute_and_text(self) -> None:
        node = _only('<div class="a">hi</div>')

        assert isinstance(node, ElementNode)
        assert node.tag == "div"
        assert node.attributes[0].name == "class"
        assert isinstance(node.attributes[0].value, TextNode)
        assert node.attributes[0].value.chars == "a"
        assert [child.chars for child in node.children if isinstance(child, TextNode)] == ["hi"]

    def test_self_closing_angle_component(self) -> None:
        node = _only("<FooBar @x={{y}} />")

        assert isinstance(node, ElementNode)
        assert node.self_closing
        assert node.attributes[0].name == "@x"
        assert isinstance(node.attributes[0].value, MustacheStatement)

    def test_void_element_needs_no_close(self) -> None:
        node = _only("<input value={{foo}}>")

        assert isinstance(node, ElementNode)
        assert node.children == []

    def test_attribute_without_value(self) -> None:
        node = _only("<input disabled>")

        assert isinstance(node, ElementNode)
        assert node.attributes[0].name == "disabled"
        assert node.attributes[0].value.chars == ""

    def test_quoted_value_with_mustache_is_concat(self) -> None:
        node = _only('<div class="a {{b}}"></div>')

        value = node.attributes[0].value
        assert isinstance(value, ConcatStatement)
        assert isinstance(value.parts[0], TextNode)
        assert isinstance(value.parts[1], MustacheStatement)

    def test_modifier(self) -> None:
        node = _only('<button {{on "click" this.save}}>Go</button>')

        modifier = node.modifiers[0]
        assert modifier.path.original == "on"
        assert isinstance(modifier.params[0], StringLiteral)
        assert modifier.params[0].value == "click"
        assert isinstance(modifier.params[1], PathExpression)
        assert modifier.params[1].this

    def test_splattributes(self) -> None:
        node = _only("<div ...attributes></div>")

        assert node.attributes[0].name == "...attributes"

    def test_element_block_params(self) -> None:
        node = _only("<Foo as |bar baz|>{{bar}}</Foo>")

        assert node.block_params == ["bar", "baz"]

    def test_html_comment(self) -> None:
        node = _only("<!-- note -->")

        assert isinstance(node, CommentStatement)
        assert node.value == " note "


class TestMustaches:
    def test_path_params_and_hash(self) -> None:
        node = _only("{{foo-bar baz=1 qux=true}}")

        assert isinstance(node, MustacheStatement)
        assert node.path.original == "foo-bar"
        assert [pair.key for pair in node.hash.pairs] == ["baz", "qux"]
        assert isinstance(node.hash.pairs[0].value, NumberLiteral)
        assert node.hash.pairs[0].value.value == 1
        assert isinstance(node.hash.pairs[1].value, BooleanLiteral)

    def test_subexpression_param(self) -> None:
        node = _only('{{my-helper (concat "a" b)}}')

        sub = node.params[0]
        assert isinstance(sub, SubExpression)
        assert sub.path.original == "concat"
        assert len(sub.params) == 2

    def test_this_and_data_paths(self) -> None:
        this_path = _only("{{this.foo.bar}}").path
        data_path = _only("{{@arg.name}}").path

        assert this_path.this and this_path.parts == ["foo", "bar"]
        assert data_path.data and data_path.parts == ["arg", "name"]

    def test_triple_and_whitespace_control(self) -> None:
        assert _only("{{{raw}}}").trusting
        assert _only("{{~foo~}}").path.original == "foo"

    def test_long_comment_may_contain_mustaches(self) -> None:
        node = _only("{{!-- a }} b --}}")

        assert isinstance(node, MustacheCommentStatement)
        assert node.value == " a }} b "

    def test_escaped_mustache_is_text(self) -> None:
        node = _only("\\{{foo}}")

        assert isinstance(node, TextNode)


class TestBlocks:
    def test_block_with_params_and_inverse(self) -> None:
        node = _only("{{#foo-bar as |x|}}{{x}}{{else}}no{{/foo-bar}}")

        assert isinstance(node, BlockStatement)
        assert node.program.block_params == ["x"]
        assert node.inverse is not None
        assert node.inverse.body[0].chars == "no"

    def test_else_if_chain_nests_block(self) -> None:
        node = _only("{{#if a}}x{{else if b}}y{{else}}z{{/if}}")

        nested = node.inverse.body[0]
        assert isinstance(nested, BlockStatement)
        assert nested.path.original == "if"
        assert nested.inverse is not None
        assert nested.inverse.body[0].chars == "z"


class TestRanges:
    def test_multiline_positions(self) -> None:
        element = _only("<div>\n  {{foo}}\n</div>")

        mustache = next(child for child in element.children if isinstance(child, MustacheStatement))
        assert mustache.range.start == Position(line=1, character=2)
        assert mustache.range.end == Position(line=1, character=9)

    def test_template_spans_whole_source(self) -> None:
        tree = parse_template("a\r\nb")

        assert tree.range.end == Position(line=1, character=1)

    def test_empty_hash_is_zero_length(self) -> None:
        node = _only("{{foo}}")

        assert node.hash.range.start == node.hash.range.end


class TestErrors:
    @pytest.mark.parametrize(
        "template",
        [
            "{{#foo}}{{/bar}}",
            "<div>",
            "<div></span>",
            "{{foo",
            "</div>",
            "{{foo a=1 b}}",
            '{{foo "bar}}',
            "{{#foo}}",
            "<!-- open",
        ],
    )
    def test_malformed_templates_raise(self, template: str) -> None:
        with pytest.raises(TemplateSyntaxError):
            parse_template(template)

    def test_error_carries_position(self) -> None:
        with pytest.raises(TemplateSyntaxError) as exc_info:
            parse_template("<p>\n  <div>\n</p>")

        assert exc_info.value.position.line >= 1
