"""Abstract Syntax Tree (AST) definitions for the NScript language.

NScript uses one node type for everything: tokens produced by the lexer,
the syntax tree built by the parser and the values produced by the
evaluator are all `Node` instances, told apart by their `NodeKind`.
Composite kinds (`BIN`, `UNA`, `ASSIGN`, `CALL`) carry a payload dataclass
that exclusively owns its children, so a parsed expression is always a
strict tree.

Nodes are immutable. The evaluator builds new nodes for its results
instead of changing the tree it walks.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Tuple, Union

from .errors import Position
from .escapes import escape


class NodeKind(Enum):
    """Node kinds; the value is the name shown in messages."""
    NUM = 'num'
    STRING = 'string'
    IDENTIFIER = 'identifier'
    NONE = 'none'
    BIN = 'bin'
    UNA = 'una'
    ASSIGN = 'assign'
    CALL = 'call'
    # punctuation, only ever produced by the lexer
    PLUS = '+'
    MINUS = '-'
    STAR = '*'
    SLASH = '/'
    LPAR = '('
    RPAR = ')'
    COMMA = ','
    EQ = '='
    # sentinels
    EOF = '<eof>'
    BAD = 'bad'

    def __str__(self) -> str:
        return self.value


PUNCTUATION = {
    '+': NodeKind.PLUS,
    '-': NodeKind.MINUS,
    '*': NodeKind.STAR,
    '/': NodeKind.SLASH,
    '(': NodeKind.LPAR,
    ')': NodeKind.RPAR,
    ',': NodeKind.COMMA,
    '=': NodeKind.EQ,
}


@dataclass(frozen=True)
class BinNode:
    left: 'Node'
    right: 'Node'
    op: 'Node'


@dataclass(frozen=True)
class UnaNode:
    term: 'Node'
    op: 'Node'


@dataclass(frozen=True)
class AssignNode:
    name: 'Node'  # always an IDENTIFIER
    expr: 'Node'


@dataclass(frozen=True)
class CallNode:
    name: 'Node'  # IDENTIFIER (builtin) or STRING (process)
    args: Tuple['Node', ...]


NodeValue = Union[float, str, BinNode, UnaNode, AssignNode, CallNode]


def format_num(value: float) -> str:
    """Canonical text of a number: shortest round-trip digits in fixed
    notation, without trailing zeros."""
    if not math.isfinite(value):
        return str(value)
    text = format(Decimal(repr(value)), 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text


@dataclass(frozen=True)
class Node:
    kind: NodeKind
    value: NodeValue
    pos: Position

    @staticmethod
    def none(pos: Position) -> 'Node':
        return Node(NodeKind.NONE, 'none', pos)

    @property
    def is_literal(self) -> bool:
        return self.kind in (NodeKind.NUM, NodeKind.STRING, NodeKind.NONE)

    def to_string(self) -> str:
        """Render the node back to NScript source text."""
        kind = self.kind
        value = self.value
        if kind == NodeKind.NUM:
            return format_num(value)
        if kind == NodeKind.STRING:
            return "'" + escape(value) + "'"
        if kind == NodeKind.BIN:
            return f"{value.left.to_string()} {value.op.to_string()} {value.right.to_string()}"
        if kind == NodeKind.UNA:
            return value.op.to_string() + value.term.to_string()
        if kind == NodeKind.ASSIGN:
            return f"{value.name.to_string()} = {value.expr.to_string()}"
        if kind == NodeKind.CALL:
            args = ', '.join(arg.to_string() for arg in value.args)
            return f"{value.name.to_string()}({args})"
        if kind == NodeKind.EOF:
            return '<eof>'
        # identifiers, `none`, punctuation and bad tokens keep their text
        return value

    def __str__(self) -> str:
        return self.to_string()
