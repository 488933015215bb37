"""Tree-walking evaluator for the NScript language.

`Evaluator.evaluate` walks one parsed expression and returns the resulting
literal node (`NUM`, `STRING` or `NONE`). The only state it changes is its
`Environment`, which assignments write and identifiers read; reuse the
same environment (or the same `Evaluator`) across calls to keep variables
alive between inputs, as a REPL does.

Any failure raises `NScriptError` and aborts the whole walk.
"""

from __future__ import annotations

import math
import sys
from dataclasses import replace
from typing import Dict, Iterable, Optional, TextIO

from .ast import AssignNode, BinNode, CallNode, Node, NodeKind, UnaNode
from .builtin_function import BuiltinFunction
from .environment import Environment
from .errors import NotImplementedCallError, NScriptError, Position
from .host import OutputSink, ProcessHook, StdoutSink
from .parser import parse_program


class Evaluator:
    """Core interpreter that evaluates NScript ASTs."""
    def __init__(
        self,
        env: Optional[Environment] = None,
        output: Optional[OutputSink] = None,
        process_hook: Optional[ProcessHook] = None,
        debug_level: int = 0,
        debug_file: Optional[str] = 'debug.txt',
    ):
        self.env = env if env is not None else Environment()
        self.output = output if output is not None else StdoutSink()
        self.process_hook = process_hook
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp: Optional[TextIO] = None
        self.builtins: Dict[str, BuiltinFunction] = {}
        self.load_builtins()

    def debug(self, msg: str, level: int = 1):
        if self.debug_level < level:
            return
        if self.debug_file is None:
            print(msg, file=sys.stderr)
            return
        if self.debug_fp is None:
            self.debug_fp = open(self.debug_file, 'w', encoding='utf-8')
        self.debug_fp.write(msg + '\n')
        self.debug_fp.flush()

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Builtins

    def load_builtins(self):
        def builtin_print(call: CallNode, pos: Position) -> Node:
            # arguments are echoed as written, not evaluated
            self.output.write(''.join(arg.to_string() for arg in call.args))
            self.output.flush()
            return Node.none(pos)

        def builtin_floor(call: CallNode, pos: Position) -> Node:
            arg = call.args[0]
            expr = self.expect_type(self.evaluate(arg), NodeKind.NUM, arg.pos)
            if not math.isfinite(expr.value):
                raise NScriptError('TypeError', ['cannot floor `', expr.to_string(), '`'], arg.pos)
            return replace(expr, value=float(math.trunc(expr.value)))

        self.builtins['print'] = BuiltinFunction('print', None, builtin_print)
        self.builtins['floor'] = BuiltinFunction('floor', 1, builtin_floor)

    def expect_type(self, node: Node, kind: NodeKind, pos: Position) -> Node:
        if node.kind != kind:
            raise NScriptError(
                'TypeError',
                ['expected a value with type `', str(kind), '` (found `', str(node.kind), '`)'],
                pos,
            )
        return node

    def expect_args_count(self, call: CallNode, count: int):
        if len(call.args) != count:
            raise NScriptError(
                'ArityError',
                ['expected args ', str(count), ' (found ', str(len(call.args)), ')'],
                call.name.pos,
            )

    # Public API

    def run(self, nodes: Iterable[Node]) -> Node:
        """Evaluate top-level expressions in order and return the last value."""
        result = Node.none(Position(0, 0))
        for node in nodes:
            self.debug(f"evaluate {node.to_string()}")
            result = self.evaluate(node)
        return result

    def evaluate(self, node: Node) -> Node:
        self.debug(f"visit {node.kind} at {node.pos!r}", 3)
        kind = node.kind
        if node.is_literal:
            return node
        if kind == NodeKind.IDENTIFIER:
            return self.evaluate_identifier(node)
        if kind == NodeKind.BIN:
            return self.evaluate_bin(node.value, node.pos)
        if kind == NodeKind.UNA:
            return self.evaluate_una(node.value, node.pos)
        if kind == NodeKind.ASSIGN:
            return self.evaluate_assign(node.value, node.pos)
        if kind == NodeKind.CALL:
            return self.evaluate_call(node.value, node.pos)
        raise NScriptError('TypeError', ['cannot evaluate `', node.to_string(), '`'], node.pos)

    def evaluate_identifier(self, identifier: Node) -> Node:
        value = self.env.lookup(identifier.value)
        if value is None:
            raise NScriptError('NameError', ['unknown variable'], identifier.pos)
        return value

    def evaluate_assign(self, assign: AssignNode, pos: Position) -> Node:
        name = assign.name.value
        value = self.evaluate(assign.expr)
        self.env.assign(name, value)
        self.debug(f"assign {name} = {value.to_string()}", 2)
        return Node.none(pos)

    def evaluate_una(self, una: UnaNode, pos: Position) -> Node:
        term = self.evaluate(una.term)
        if term.kind != NodeKind.NUM:
            raise NScriptError(
                'TypeError',
                ['type `', str(term.kind), '` does not support unary `', str(una.op.kind), '`'],
                una.term.pos,
            )
        sign = -1.0 if una.op.kind == NodeKind.MINUS else 1.0
        return Node(NodeKind.NUM, term.value * sign, pos)

    def evaluate_bin(self, bin: BinNode, pos: Position) -> Node:
        # both sides are evaluated before the operator is checked
        left = self.evaluate(bin.left)
        right = self.evaluate(bin.right)
        if left.kind != right.kind:
            raise NScriptError(
                'TypeError',
                ['unknown bin `', bin.op.to_string(), '` between different types (`',
                 str(left.kind), '` and `', str(right.kind), '`)'],
                bin.op.pos,
            )
        if left.kind == NodeKind.NUM:
            value = self.evaluate_operation_num(bin.op, left.value, right.value, bin.right.pos)
        elif left.kind == NodeKind.STRING:
            value = self.evaluate_operation_str(bin.op, left.value, right.value)
        else:
            raise NScriptError('TypeError', ['type `', str(left.kind), '` does not support bin'], bin.op.pos)
        return Node(left.kind, value, pos)

    def evaluate_operation_num(self, op: Node, a: float, b: float, right_pos: Position) -> float:
        if op.kind == NodeKind.PLUS:
            return a + b
        if op.kind == NodeKind.MINUS:
            return a - b
        if op.kind == NodeKind.STAR:
            return a * b
        if op.kind == NodeKind.SLASH:
            if b == 0:
                raise NScriptError('ArithmeticError', ['dividing by 0'], right_pos)
            return a / b
        raise NScriptError('TypeError', ['unknown bin operator `', op.to_string(), '`'], op.pos)

    def evaluate_operation_str(self, op: Node, a: str, b: str) -> str:
        if op.kind != NodeKind.PLUS:
            raise NScriptError('TypeError', ['string does not support bin `', str(op.kind), '`'], op.pos)
        return a + b

    def evaluate_call(self, call: CallNode, pos: Position) -> Node:
        # a string name refers to an external process, an identifier to a builtin
        if call.name.kind == NodeKind.STRING:
            return self.evaluate_call_process(call, pos)
        name = call.name.value
        builtin = self.builtins.get(name)
        if builtin is None:
            raise NScriptError('NameError', ['unknown builtin function'], call.name.pos)
        if builtin.arity is not None:
            self.expect_args_count(call, builtin.arity)
        self.debug(f"call {builtin!r} with {len(call.args)} args", 2)
        return builtin.fn(call, pos)

    def evaluate_call_process(self, call: CallNode, pos: Position) -> Node:
        process = call.name.value
        if self.process_hook is None:
            raise NotImplementedCallError(process, pos)
        args = tuple(self.evaluate(arg) for arg in call.args)
        self.debug(f"call process {process!r} with {len(args)} args", 2)
        return self.process_hook(process, args, pos)


def evaluate_source(source: str, env: Optional[Environment] = None, **options) -> Node:
    """Parse and evaluate ``source`` against ``env``; errors propagate."""
    nodes = parse_program(source)
    evaluator = Evaluator(env=env, **options)
    try:
        return evaluator.run(nodes)
    finally:
        evaluator.close()


def run_program(source: str, debug_level: int = 0) -> Node:
    """Convenience function to run an NScript program in a fresh environment."""
    return evaluate_source(source, debug_level=debug_level)
