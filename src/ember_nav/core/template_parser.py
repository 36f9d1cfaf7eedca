"""Recursive-descent parser for Glimmer templates (``.hbs``).

Produces the tree defined in :mod:`ember_nav.core.template_ast`. Only the
shapes the reference classifier cares about are modelled precisely; anything
else that is syntactically valid ends up as text.
"""

from __future__ import annotations

import re
from bisect import bisect_right

from ember_nav.core.template_ast import (
    AttrNode,
    Block,
    BlockStatement,
    BooleanLiteral,
    CommentStatement,
    ConcatStatement,
    ElementModifierStatement,
    ElementNode,
    Expression,
    Hash,
    HashPair,
    MustacheCommentStatement,
    MustacheStatement,
    NullLiteral,
    NumberLiteral,
    PathExpression,
    Statement,
    StringLiteral,
    SubExpression,
    Template,
    TextNode,
    UndefinedLiteral,
)
from ember_nav.models import Position, SourceRange

_VOID_ELEMENTS = frozenset(
    "area base br col command embed hr img input keygen link meta param source track wbr".split()
)

_LINE_BREAK = re.compile(r"\r\n?|\n")
_TAG_START = re.compile(r"[A-Za-z@:_]")
_HASH_KEY = re.compile(r"([^\s=(){}|~\"'.]+)\s*=")
_BLOCK_PARAMS = re.compile(r"as\s+\|")
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")
_WHITESPACE = " \t\r\n\f"
_PATH_STOP = frozenset(_WHITESPACE + "=(){}|~\"'")
_NAME_STOP = frozenset(_WHITESPACE + "=>/\"'")


class TemplateSyntaxError(ValueError):
    def __init__(self, message: str, position: Position) -> None:
        super().__init__(f"{message} (line {position.line + 1}, character {position.character})")
        self.position = position


class _TemplateParser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.offset = 0
        self._line_starts = [0] + [m.end() for m in _LINE_BREAK.finditer(text)]

    # -- positions ----------------------------------------------------------

    def _position(self, offset: int) -> Position:
        line = bisect_right(self._line_starts, offset) - 1
        return Position(line=line, character=offset - self._line_starts[line])

    def _range(self, start: int, end: int | None = None) -> SourceRange:
        return SourceRange(start=self._position(start), end=self._position(self.offset if end is None else end))

    def _error(self, message: str, offset: int | None = None) -> TemplateSyntaxError:
        return TemplateSyntaxError(message, self._position(self.offset if offset is None else offset))

    # -- low-level scanning -------------------------------------------------

    def _at(self, token: str) -> bool:
        return self.text.startswith(token, self.offset)

    def _eof(self) -> bool:
        return self.offset >= len(self.text)

    def _expect(self, token: str) -> None:
        if not self._at(token):
            raise self._error(f"Expected '{token}'")
        self.offset += len(token)

    def _skip(self, token: str) -> None:
        if self._at(token):
            self.offset += len(token)

    def _skip_ws(self) -> None:
        while self.offset < len(self.text) and self.text[self.offset] in _WHITESPACE:
            self.offset += 1

    def _read_until(self, stop: frozenset[str]) -> str:
        start = self.offset
        while self.offset < len(self.text) and self.text[self.offset] not in stop:
            if self._at("{{"):
                break
            self.offset += 1
        return self.text[start : self.offset]

    def _mustache_kind(self) -> str | None:
        """Classify the mustache starting at the cursor without consuming it."""
        text, i = self.text, self.offset
        if not text.startswith("{{", i):
            return None
        if text.startswith("{{{", i):
            return "triple"
        i += 2
        if text.startswith("~", i):
            i += 1
        if text.startswith("!", i):
            return "comment"
        if text.startswith("#", i):
            return "block"
        while i < len(text) and text[i] in _WHITESPACE:
            i += 1
        if text.startswith("/", i):
            return "close"
        if text.startswith("else", i) and (i + 4 == len(text) or text[i + 4] in _WHITESPACE + "}~"):
            return "else"
        return "plain"

    def _close_mustache(self) -> None:
        self._skip_ws()
        self._skip("~")
        self._expect("}}")

    # -- statements ---------------------------------------------------------

    def parse(self) -> Template:
        body = self._statements()
        if not self._eof():
            raise self._error("Unexpected closing tag")
        return Template(range=self._range(0, len(self.text)), body=body)

    def _statements(self) -> list[Statement]:
        body: list[Statement] = []
        while not self._eof():
            if self._at("</") or self._mustache_kind() in ("close", "else"):
                break
            body.append(self._statement())
        return body

    def _statement(self) -> Statement:
        kind = self._mustache_kind()
        if kind == "comment":
            return self._mustache_comment()
        if kind == "block":
            return self._block()
        if kind in ("plain", "triple"):
            return self._mustache()
        if self._at("<!--"):
            return self._html_comment()
        if self._at("<") and _TAG_START.match(self.text, self.offset + 1):
            return self._element()
        return self._text()

    def _text(self) -> TextNode:
        text, start = self.text, self.offset
        i = start
        while i < len(text):
            if text.startswith("\\{{", i):
                end = text.find("}}", i)
                i = len(text) if end == -1 else end + 2
                continue
            if text.startswith("{{", i):
                break
            if text[i] == "<" and (
                text.startswith("<!--", i) or text.startswith("</", i) or _TAG_START.match(text, i + 1)
            ):
                break
            i += 1
        if i == start:
            i += 1
        self.offset = i
        return TextNode(range=self._range(start), chars=text[start:i])

    def _html_comment(self) -> CommentStatement:
        start = self.offset
        end = self.text.find("-->", start + 4)
        if end == -1:
            raise self._error("Unclosed comment")
        self.offset = end + 3
        return CommentStatement(range=self._range(start), value=self.text[start + 4 : end])

    def _mustache_comment(self) -> MustacheCommentStatement:
        start = self.offset
        self.offset += 2
        self._skip("~")
        self._expect("!")
        long_form = self._at("--")
        terminator = "--" if long_form else ""
        if long_form:
            self.offset += 2
        match = re.compile(re.escape(terminator) + r"~?\}\}").search(self.text, self.offset)
        if match is None:
            raise self._error("Unclosed comment", start)
        value = self.text[self.offset : match.start()]
        self.offset = match.end()
        return MustacheCommentStatement(range=self._range(start), value=value)

    def _mustache(self) -> MustacheStatement:
        start = self.offset
        trusting = self._at("{{{")
        self.offset += 3 if trusting else 2
        self._skip("~")
        self._skip_ws()
        path, params, hash_ = self._call_body()
        if trusting:
            self._skip_ws()
            self._expect("}}}")
        else:
            self._close_mustache()
        return MustacheStatement(range=self._range(start), path=path, params=params, hash=hash_, trusting=trusting)

    def _block(self) -> BlockStatement:
        start = self.offset
        self.offset += 2
        self._skip("~")
        self._expect("#")
        self._skip_ws()
        path, params, hash_ = self._call_body(allow_block_params=True)
        block_params = self._block_params()
        self._close_mustache()

        program_start = self.offset
        body = self._statements()
        program = Block(range=self._range(program_start), body=body, block_params=block_params)
        inverse = self._inverse() if self._mustache_kind() == "else" else None

        self._close_block(path, start)
        return BlockStatement(
            range=self._range(start), path=path, params=params, hash=hash_, program=program, inverse=inverse
        )

    def _inverse(self) -> Block:
        else_start = self.offset
        self.offset += 2
        self._skip("~")
        self._skip_ws()
        self._expect("else")
        self._skip_ws()

        if self._at("}}") or self._at("~}}"):
            self._close_mustache()
            inverse_start = self.offset
            body = self._statements()
            if self._mustache_kind() == "else":
                raise self._error("Unexpected {{else}} after the inverse block")
            return Block(range=self._range(inverse_start), body=body)

        # {{else if cond}} chains a nested block that shares the outer close.
        path, params, hash_ = self._call_body(allow_block_params=True)
        block_params = self._block_params()
        self._close_mustache()
        program_start = self.offset
        body = self._statements()
        program = Block(range=self._range(program_start), body=body, block_params=block_params)
        nested_inverse = self._inverse() if self._mustache_kind() == "else" else None
        nested = BlockStatement(
            range=self._range(else_start),
            path=path,
            params=params,
            hash=hash_,
            program=program,
            inverse=nested_inverse,
        )
        return Block(range=self._range(else_start), body=[nested])

    def _close_block(self, path: Expression, open_offset: int) -> None:
        if self._mustache_kind() != "close":
            raise self._error("Unclosed block", open_offset)
        self.offset += 2
        self._skip("~")
        self._skip_ws()
        self._expect("/")
        name = self._read_until(_PATH_STOP)
        expected = path.original if isinstance(path, PathExpression) else None
        if expected is not None and name != expected:
            raise self._error(f"Closing block '{name}' does not match '{expected}'")
        self._close_mustache()

    def _block_params(self) -> list[str]:
        self._skip_ws()
        match = _BLOCK_PARAMS.match(self.text, self.offset)
        if match is None:
            return []
        self.offset = match.end()
        end = self.text.find("|", self.offset)
        if end == -1:
            raise self._error("Unclosed block params")
        names = self.text[self.offset : end].split()
        self.offset = end + 1
        return names

    # -- elements -----------------------------------------------------------

    def _element(self) -> ElementNode:
        start = self.offset
        self._expect("<")
        tag = self._read_until(frozenset(_WHITESPACE + "/>"))
        attributes: list[AttrNode] = []
        modifiers: list[ElementModifierStatement] = []
        comments: list[MustacheCommentStatement] = []
        block_params: list[str] = []
        self_closing = False

        while True:
            self._skip_ws()
            if self._eof():
                raise self._error(f"Unclosed start tag <{tag}>", start)
            if self._at("/>"):
                self.offset += 2
                self_closing = True
                break
            if self._at(">"):
                self.offset += 1
                break
            kind = self._mustache_kind()
            if kind == "comment":
                comments.append(self._mustache_comment())
            elif kind == "plain":
                modifiers.append(self._modifier())
            elif kind is not None:
                raise self._error("Unexpected mustache in element")
            elif _BLOCK_PARAMS.match(self.text, self.offset):
                block_params = self._block_params()
            else:
                attributes.append(self._attribute())

        children: list[Statement] = []
        if not self_closing and tag not in _VOID_ELEMENTS:
            children = self._statements()
            if not self._at("</"):
                raise self._error(f"Unclosed element <{tag}>", start)
            close_start = self.offset
            self.offset += 2
            close_tag = self._read_until(frozenset(_WHITESPACE + ">"))
            self._skip_ws()
            self._expect(">")
            if close_tag != tag:
                raise self._error(f"Closing tag </{close_tag}> does not match <{tag}>", close_start)

        return ElementNode(
            range=self._range(start),
            tag=tag,
            self_closing=self_closing,
            attributes=attributes,
            modifiers=modifiers,
            comments=comments,
            children=children,
            block_params=block_params,
        )

    def _modifier(self) -> ElementModifierStatement:
        start = self.offset
        self.offset += 2
        self._skip("~")
        self._skip_ws()
        path, params, hash_ = self._call_body()
        self._close_mustache()
        return ElementModifierStatement(range=self._range(start), path=path, params=params, hash=hash_)

    def _attribute(self) -> AttrNode:
        start = self.offset
        name = self._read_until(_NAME_STOP)
        if not name:
            raise self._error("Expected attribute name")
        name_end = self.offset
        self._skip_ws()
        if not self._at("="):
            self.offset = name_end
            empty = TextNode(range=self._range(name_end, name_end), chars="")
            return AttrNode(range=self._range(start), name=name, value=empty)
        self.offset += 1
        self._skip_ws()
        value: TextNode | MustacheStatement | ConcatStatement
        if self._at('"') or self._at("'"):
            value = self._quoted_value()
        elif self._mustache_kind() in ("plain", "triple"):
            value = self._mustache()
        else:
            value_start = self.offset
            chars = self._read_until(frozenset(_WHITESPACE + ">"))
            value = TextNode(range=self._range(value_start), chars=chars)
        return AttrNode(range=self._range(start), name=name, value=value)

    def _quoted_value(self) -> TextNode | ConcatStatement:
        start = self.offset
        quote = self.text[start]
        self.offset += 1
        parts: list[TextNode | MustacheStatement] = []
        while True:
            if self._eof():
                raise self._error("Unclosed attribute value", start)
            if self._at(quote):
                self.offset += 1
                break
            if self._mustache_kind() in ("plain", "triple"):
                parts.append(self._mustache())
                continue
            text_start = self.offset
            self.offset += 1
            while not self._eof() and not self._at(quote) and self._mustache_kind() not in ("plain", "triple"):
                self.offset += 1
            parts.append(TextNode(range=self._range(text_start), chars=self.text[text_start : self.offset]))

        if all(isinstance(part, TextNode) for part in parts):
            chars = "".join(part.chars for part in parts if isinstance(part, TextNode))
            return TextNode(range=self._range(start), chars=chars)
        return ConcatStatement(range=self._range(start), parts=parts)

    # -- expressions --------------------------------------------------------

    def _call_body(self, allow_block_params: bool = False) -> tuple[Expression, list[Expression], Hash]:
        path = self._expression()
        params: list[Expression] = []
        pairs: list[HashPair] = []
        while True:
            self._skip_ws()
            if self._eof():
                raise self._error("Unclosed mustache")
            if self._at("}}") or self._at("~}}") or self._at(")"):
                break
            if allow_block_params and _BLOCK_PARAMS.match(self.text, self.offset):
                break
            if _HASH_KEY.match(self.text, self.offset):
                pairs.append(self._hash_pair())
                continue
            if pairs:
                raise self._error("Positional parameter after named parameters")
            params.append(self._expression())

        if pairs:
            hash_range = SourceRange(start=pairs[0].range.start, end=pairs[-1].range.end)
        else:
            hash_range = self._range(self.offset, self.offset)
        return path, params, Hash(range=hash_range, pairs=pairs)

    def _hash_pair(self) -> HashPair:
        start = self.offset
        match = _HASH_KEY.match(self.text, self.offset)
        assert match is not None
        self.offset = match.end()
        self._skip_ws()
        value = self._expression()
        return HashPair(range=self._range(start), key=match.group(1), value=value)

    def _expression(self) -> Expression:
        if self._at("("):
            return self._sub_expression()
        if self._at('"') or self._at("'"):
            return self._string()

        start = self.offset
        token = self._read_until(_PATH_STOP)
        if not token:
            raise self._error("Expected an expression")
        token_range = self._range(start)
        if token in ("true", "false"):
            return BooleanLiteral(range=token_range, value=token == "true")
        if token == "null":
            return NullLiteral(range=token_range)
        if token == "undefined":
            return UndefinedLiteral(range=token_range)
        if _NUMBER.fullmatch(token):
            return NumberLiteral(range=token_range, value=float(token), original=token)
        return _path_expression(token, token_range)

    def _sub_expression(self) -> SubExpression:
        start = self.offset
        self._expect("(")
        self._skip_ws()
        path, params, hash_ = self._call_body()
        self._skip_ws()
        self._expect(")")
        return SubExpression(range=self._range(start), path=path, params=params, hash=hash_)

    def _string(self) -> StringLiteral:
        start = self.offset
        quote = self.text[start]
        self.offset += 1
        chars: list[str] = []
        while True:
            if self._eof():
                raise self._error("Unclosed string literal", start)
            char = self.text[self.offset]
            if char == "\\" and self.offset + 1 < len(self.text) and self.text[self.offset + 1] == quote:
                chars.append(quote)
                self.offset += 2
                continue
            self.offset += 1
            if char == quote:
                break
            chars.append(char)
        value = "".join(chars)
        return StringLiteral(range=self._range(start), value=value, original=value)


def _path_expression(token: str, token_range: SourceRange) -> PathExpression:
    this = token == "this" or token.startswith("this.") or token.startswith("this/")
    data = token.startswith("@")
    tail = token
    if this:
        tail = token[len("this") :]
    elif data:
        tail = token[1:]
    parts = [part for part in re.split(r"[./]", tail) if part]
    return PathExpression(range=token_range, original=token, this=this, data=data, parts=parts)


def parse_template(text: str) -> Template:
    """Parse template source into a :class:`Template` tree.

    Raises :class:`TemplateSyntaxError` when the source is not well formed.
    """
    return _TemplateParser(text).parse()
