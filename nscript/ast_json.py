"""JSON serialization/deserialization for NScript ASTs.

This module converts between `Node` trees and plain Python dict/list
structures suitable for JSON encoding. Every node keeps its kind, payload
and source position, so a deserialized tree evaluates (and reports errors)
exactly like the parsed one.
"""

from __future__ import annotations

from typing import Any, Dict, Sequence, Tuple

from .ast import AssignNode, BinNode, CallNode, Node, NodeKind, UnaNode
from .errors import Position


def pos_to_obj(pos: Position) -> list:
    return [pos.start, pos.end]


def pos_from_obj(o: Sequence[int]) -> Position:
    return Position(int(o[0]), int(o[1]))


def ast_to_obj(node: Node) -> Dict[str, Any]:
    kind = node.kind
    obj: Dict[str, Any] = {"type": kind.name, "pos": pos_to_obj(node.pos)}
    value = node.value
    if kind == NodeKind.BIN:
        obj.update(left=ast_to_obj(value.left), right=ast_to_obj(value.right), op=ast_to_obj(value.op))
    elif kind == NodeKind.UNA:
        obj.update(term=ast_to_obj(value.term), op=ast_to_obj(value.op))
    elif kind == NodeKind.ASSIGN:
        obj.update(name=ast_to_obj(value.name), expr=ast_to_obj(value.expr))
    elif kind == NodeKind.CALL:
        obj.update(name=ast_to_obj(value.name), args=[ast_to_obj(a) for a in value.args])
    else:
        obj["value"] = value
    return obj


def program_to_obj(nodes: Sequence[Node]) -> Dict[str, Any]:
    return {"type": "Program", "body": [ast_to_obj(n) for n in nodes]}


def ast_from_obj(obj: Any) -> Node:
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    try:
        kind = NodeKind[t]
    except KeyError:
        raise ValueError(f"Unknown AST node type: {t}")
    pos = pos_from_obj(obj["pos"])
    if kind == NodeKind.BIN:
        value = BinNode(left=ast_from_obj(obj["left"]), right=ast_from_obj(obj["right"]), op=ast_from_obj(obj["op"]))
    elif kind == NodeKind.UNA:
        value = UnaNode(term=ast_from_obj(obj["term"]), op=ast_from_obj(obj["op"]))
    elif kind == NodeKind.ASSIGN:
        value = AssignNode(name=ast_from_obj(obj["name"]), expr=ast_from_obj(obj["expr"]))
    elif kind == NodeKind.CALL:
        value = CallNode(name=ast_from_obj(obj["name"]), args=tuple(ast_from_obj(a) for a in obj["args"]))
    elif kind == NodeKind.NUM:
        value = float(obj["value"])
    else:
        value = str(obj["value"])
    return Node(kind, value, pos)


def program_from_obj(obj: Any) -> Tuple[Node, ...]:
    if not isinstance(obj, dict) or obj.get("type") != "Program":
        raise TypeError("Invalid program object")
    return tuple(ast_from_obj(n) for n in obj["body"])
