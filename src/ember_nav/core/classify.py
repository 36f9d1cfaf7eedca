"""Structural classification of a focused path into a semantic reference.

Each rule inspects the focused node and its parent/grandparent and either
returns a reference or ``None``. Rules run in order and the first hit wins.
Nothing here touches the filesystem.
"""

from __future__ import annotations

from collections.abc import Callable

from ember_nav.core.position import ASTPath
from ember_nav.core.script_ast import ScriptNode
from ember_nav.core.template_ast import (
    AttrNode,
    BlockStatement,
    ElementModifierStatement,
    ElementNode,
    HashPair,
    MustacheStatement,
    PathExpression,
    StringLiteral,
    SubExpression,
)
from ember_nav.models import (
    ActionName,
    AngleComponent,
    AttributeArgument,
    BlockComponent,
    HashPairUsage,
    LocalProperty,
    ModelFieldType,
    MustacheOrHelper,
    SemanticReference,
    TransformFieldType,
)

Rule = Callable[[ASTPath], SemanticReference | None]

_CALLS = (MustacheStatement, SubExpression, ElementModifierStatement)
_HEADED = (MustacheStatement, BlockStatement, SubExpression)


def is_dashed_component_name(name: str) -> bool:
    """``foo-bar`` yes; ``foo``, ``-foo`` and ``foo.bar-baz`` no."""
    return "-" in name and not name.startswith("-") and "." not in name


def _is_hash_owner_name(name: str) -> bool:
    """Like :func:`is_dashed_component_name` but a leading hyphen is allowed."""
    return "-" in name and "." not in name


def _callee_name(call: object) -> str | None:
    if isinstance(call, (*_CALLS, BlockStatement)) and isinstance(call.path, PathExpression):
        return call.path.original
    return None


def _is_first_param_of(path: ASTPath, callee: str, calls: tuple[type, ...] = _CALLS) -> bool:
    parent = path.parent_node
    if not isinstance(parent, calls) or _callee_name(parent) != callee:
        return False
    return bool(parent.params) and parent.params[0] is path.node


# ---------------------------------------------------------------------------
# Template rules
# ---------------------------------------------------------------------------


def is_angle_component(path: ASTPath) -> bool:
    node = path.node
    return isinstance(node, ElementNode) and bool(node.tag) and node.tag[0].isupper()


def is_component_with_block(path: ASTPath) -> bool:
    node = path.node
    return (
        isinstance(node, BlockStatement)
        and isinstance(node.path, PathExpression)
        and not node.path.this
        and is_dashed_component_name(node.path.original)
    )


def is_action_name(path: ASTPath) -> bool:
    node = path.node
    if not (isinstance(node, StringLiteral) or (isinstance(node, PathExpression) and node.this)):
        return False
    return _is_first_param_of(path, "action")


def is_local_property(path: ASTPath) -> bool:
    node = path.node
    return isinstance(node, PathExpression) and node.this


def is_component_or_helper_name(path: ASTPath) -> bool:
    if is_angle_component(path):
        return True

    node = path.node
    if isinstance(node, StringLiteral):
        return _is_first_param_of(path, "component", (*_CALLS, BlockStatement))

    if not isinstance(node, PathExpression) or node.this:
        return False
    parent = path.parent_node
    return isinstance(parent, _HEADED) and parent.path is node


def is_angle_property_attribute(path: ASTPath) -> bool:
    node = path.node
    return isinstance(node, AttrNode) and node.name.startswith("@")


def is_hash_pair_key(path: ASTPath) -> bool:
    return isinstance(path.node, HashPair)


def _angle_component(path: ASTPath) -> SemanticReference | None:
    if is_angle_component(path):
        return AngleComponent(name=path.node.tag)
    return None


def _block_component(path: ASTPath) -> SemanticReference | None:
    if is_component_with_block(path):
        return BlockComponent(name=path.node.path.original)
    return None


def _action_name(path: ASTPath) -> SemanticReference | None:
    if not is_action_name(path):
        return None
    node = path.node
    return ActionName(name=node.value if isinstance(node, StringLiteral) else node.original)


def _local_property(path: ASTPath) -> SemanticReference | None:
    if is_local_property(path):
        return LocalProperty(name=path.node.original)
    return None


def _mustache_or_helper(path: ASTPath) -> SemanticReference | None:
    if not is_component_or_helper_name(path):
        return None
    node = path.node
    if isinstance(node, ElementNode):
        return MustacheOrHelper(name=node.tag)
    if isinstance(node, StringLiteral):
        return MustacheOrHelper(name=node.value)
    return MustacheOrHelper(name=node.original)


def _attribute_argument(path: ASTPath) -> SemanticReference | None:
    if not is_angle_property_attribute(path):
        return None
    owner = path.parent_node
    if not isinstance(owner, ElementNode):
        return None
    return AttributeArgument(name=path.node.name, owner_tag=owner.tag)


def _hash_pair_usage(path: ASTPath) -> SemanticReference | None:
    if not is_hash_pair_key(path):
        return None
    owner = _callee_name(path.grandparent_node)
    if owner is None or not _is_hash_owner_name(owner):
        return None
    return HashPairUsage(key=path.node.key, owner_component_name=owner)


TEMPLATE_RULES: tuple[Rule, ...] = (
    _angle_component,
    _block_component,
    _action_name,
    _local_property,
    _mustache_or_helper,
    _attribute_argument,
    _hash_pair_usage,
)


def classify_template_path(path: ASTPath) -> SemanticReference | None:
    for rule in TEMPLATE_RULES:
        reference = rule(path)
        if reference is not None:
            return reference
    return None


# ---------------------------------------------------------------------------
# Script rules
# ---------------------------------------------------------------------------

_MODEL_CALLEES = frozenset({"belongsTo", "hasMany"})
_TRANSFORM_CALLEES = frozenset({"attr"})


def _string_literal_path(path: ASTPath) -> ASTPath | None:
    """The path to the ``string`` node the cursor is on, if any.

    tree-sitter places the cursor on a fragment or quote inside the string.
    """
    node = path.node
    if isinstance(node, ScriptNode) and node.type == "string":
        return path
    parent = path.parent
    if parent is not None and isinstance(parent.node, ScriptNode) and parent.node.type == "string":
        return parent
    return None


def string_value(node: ScriptNode) -> str:
    return "".join(child.text or "" for child in node.children if child.type in ("string_fragment", "escape_sequence"))


def call_callee_name(call: ScriptNode) -> str | None:
    callee = call.child_by_field("function")
    if callee is None:
        return None
    if callee.type == "identifier":
        return callee.text
    if callee.type == "member_expression":
        prop = callee.child_by_field("property")
        return prop.text if prop is not None else None
    return None


def _call_of_first_argument(path: ASTPath) -> tuple[ScriptNode, ScriptNode] | None:
    """For a string path, return ``(string, call)`` when it is the call's first argument."""
    string_path = _string_literal_path(path)
    if string_path is None:
        return None
    arguments = string_path.parent_node
    call = string_path.grandparent_node
    if not isinstance(arguments, ScriptNode) or arguments.type != "arguments":
        return None
    if not isinstance(call, ScriptNode) or call.type != "call_expression":
        return None
    named = arguments.named_children()
    if not named or named[0] is not string_path.node:
        return None
    return string_path.node, call


def _model_field_type(path: ASTPath) -> SemanticReference | None:
    found = _call_of_first_argument(path)
    if found is None:
        return None
    string, call = found
    if call_callee_name(call) in _MODEL_CALLEES:
        return ModelFieldType(name=string_value(string))
    return None


def _transform_field_type(path: ASTPath) -> SemanticReference | None:
    found = _call_of_first_argument(path)
    if found is None:
        return None
    string, call = found
    if call_callee_name(call) in _TRANSFORM_CALLEES:
        return TransformFieldType(name=string_value(string))
    return None


SCRIPT_RULES: tuple[Rule, ...] = (
    _model_field_type,
    _transform_field_type,
)


def classify_script_path(path: ASTPath) -> SemanticReference | None:
    for rule in SCRIPT_RULES:
        reference = rule(path)
        if reference is not None:
            return reference
    return None
