"""Recursive-descent parser for the NScript language.

Grammar, from loosest to tightest binding::

    expression := factor (('+' | '-') factor)*
    factor     := term (('*' | '/') term)*
    term       := (NUM | STRING | IDENTIFIER | 'none'
                   | ('+' | '-') term
                   | '(' expression ')') postfix?
    postfix    := '(' [expression (',' expression)*] ')'
                | '=' expression

Both binary levels go through `Parser.expect_binary_or_term`, so every
binary operator is left-associative. The postfix forms turn the term that
precedes them into a call name or an assignment target and are checked
after the fact: only identifiers and strings can be called, only
identifiers can be assigned.

The parser keeps one token of lookahead (`cur_token`) plus the token it
consumed last (`prev_token`), which is what most error positions refer to.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Collection, List, Tuple

from .ast import AssignNode, BinNode, CallNode, Node, NodeKind, UnaNode
from .errors import NScriptError, Position
from .lexer import Lexer

LITERAL_KINDS = (NodeKind.IDENTIFIER, NodeKind.NUM, NodeKind.STRING, NodeKind.NONE)
UNARY_KINDS = (NodeKind.PLUS, NodeKind.MINUS)
ADDITIVE = (NodeKind.PLUS, NodeKind.MINUS)
MULTIPLICATIVE = (NodeKind.STAR, NodeKind.SLASH)


class Parser:
    def __init__(self, source: str):
        self.lexer = Lexer(source)
        self.cur_token = self.lexer.next_token()
        self.prev_token = self.cur_token

    def advance(self):
        self.prev_token = self.cur_token
        self.cur_token = self.lexer.next_token()

    def get_cur_and_advance(self) -> Node:
        self.advance()
        return self.prev_token

    def eof_token(self) -> bool:
        return self.cur_token.kind == NodeKind.EOF

    def unexpected(self, token: Node, expected: str = '') -> NScriptError:
        fragments = ['unexpected token (']
        if expected:
            fragments += ['expected `', expected, '`, ']
        fragments += ['found `', token.to_string(), '`)']
        return NScriptError('SyntaxError', fragments, token.pos)

    def expect_token_and_advance(self, kind: NodeKind) -> Node:
        if self.cur_token.kind != kind:
            raise self.unexpected(self.cur_token, str(kind))
        return self.get_cur_and_advance()

    # Expressions

    def expect_binary_or_term(self, expector: Callable[[], Node], operators: Collection[NodeKind]) -> Node:
        left = expector()
        while not self.eof_token() and self.cur_token.kind in operators:
            op = self.get_cur_and_advance()
            right = expector()
            left = Node(NodeKind.BIN, BinNode(left, right, op), Position.join(left.pos, right.pos))
        return left

    def expect_expression(self) -> Node:
        return self.expect_binary_or_term(self.expect_factor, ADDITIVE)

    def expect_factor(self) -> Node:
        return self.expect_binary_or_term(self.expect_term, MULTIPLICATIVE)

    def expect_term(self) -> Node:
        token = self.get_cur_and_advance()
        if token.kind in LITERAL_KINDS:
            term = token
        elif token.kind in UNARY_KINDS:
            operand = self.expect_term()
            term = Node(NodeKind.UNA, UnaNode(operand, token), Position.join(token.pos, operand.pos))
        elif token.kind == NodeKind.LPAR:
            inner = self.expect_expression()
            closing = self.expect_token_and_advance(NodeKind.RPAR)
            # the group's span includes its parentheses
            term = replace(inner, pos=Position.join(token.pos, closing.pos))
        else:
            raise self.unexpected(token)

        if self.cur_token.kind == NodeKind.LPAR:
            return self.collect_call_node(term)
        if self.cur_token.kind == NodeKind.EQ:
            return self.collect_assign_node(term)
        return term

    def collect_assign_node(self, name: Node) -> Node:
        if name.kind != NodeKind.IDENTIFIER:
            raise NScriptError('SyntaxError', ['expected an identifier when assigning'], name.pos)
        self.advance()  # `=`
        expr = self.expect_expression()
        return Node(NodeKind.ASSIGN, AssignNode(name, expr), Position.join(name.pos, expr.pos))

    def collect_call_node(self, name: Node) -> Node:
        if name.kind not in (NodeKind.IDENTIFIER, NodeKind.STRING):
            raise NScriptError('SyntaxError', ['expected string or identifier call name'], name.pos)
        start = self.cur_token.pos.start
        args: List[Node] = []
        self.advance()  # `(`
        while True:
            if self.eof_token():
                raise NScriptError(
                    'SyntaxError',
                    ['unclosed call parameters list'],
                    Position(start, self.prev_token.pos.end),
                )
            if self.cur_token.kind == NodeKind.RPAR:
                self.advance()
                return Node(
                    NodeKind.CALL,
                    CallNode(name, tuple(args)),
                    Position(name.pos.start, self.prev_token.pos.end),
                )
            # every argument after the first needs a leading comma
            if args:
                self.expect_token_and_advance(NodeKind.COMMA)
            args.append(self.expect_expression())

    # Entry points

    def parse_program(self) -> Tuple[Node, ...]:
        nodes: List[Node] = []
        while not self.eof_token():
            nodes.append(self.expect_expression())
        return tuple(nodes)

    def parse_single(self) -> Node:
        node = self.expect_expression()
        if not self.eof_token():
            raise self.unexpected(self.cur_token, str(NodeKind.EOF))
        return node


def parse_program(source: str) -> Tuple[Node, ...]:
    """Parse every top-level expression in ``source``, in order."""
    return Parser(source).parse_program()


def parse_expression(source: str) -> Node:
    """Parse ``source`` as exactly one expression."""
    return Parser(source).parse_single()
