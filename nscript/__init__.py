# NScript language package
# This package provides the lexer, parser and evaluator for the NScript language.
from .ast import Node, NodeKind
from .environment import Environment
from .errors import ErrorInfo, NotImplementedCallError, NScriptError, Position
from .interpreter import Evaluator, evaluate_source, run_program
from .parser import parse_expression, parse_program
from .session import Outcome, Session

__all__ = [
    'Node',
    'NodeKind',
    'Environment',
    'ErrorInfo',
    'NotImplementedCallError',
    'NScriptError',
    'Position',
    'Evaluator',
    'evaluate_source',
    'run_program',
    'parse_expression',
    'parse_program',
    'Outcome',
    'Session',
]
