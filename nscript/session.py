"""Host-facing entry point that reports errors as values.

A `Session` owns one `Environment` for its whole lifetime, so variables
assigned by one `Session.run` call are visible to the next. `run` never
raises `NScriptError`; it returns an `Outcome` holding either the final
value or the error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal, Optional

from .ast import Node
from .environment import Environment
from .errors import ErrorInfo, NScriptError
from .host import OutputSink, ProcessHook
from .interpreter import Evaluator
from .parser import parse_program


@dataclass
class Outcome:
    """The structured result of one `Session.run` call."""
    status: Literal['success', 'error']
    value: Optional[Node] = None
    error: Optional[ErrorInfo] = None

    @property
    def ok(self) -> bool:
        return self.status == 'success'

    def format_error(self) -> str:
        if self.error is None:
            return ''
        return f"{self.error.name}: {self.error.message} (at {self.error.pos!r})"


class Session:
    def __init__(
        self,
        output: Optional[OutputSink] = None,
        process_hook: Optional[ProcessHook] = None,
        debug_level: int = 0,
        debug_file: Optional[str] = 'debug.txt',
    ):
        self.env = Environment()
        self.evaluator = Evaluator(
            env=self.env,
            output=output,
            process_hook=process_hook,
            debug_level=debug_level,
            debug_file=debug_file,
        )

    def run(self, source: str) -> Outcome:
        try:
            nodes = parse_program(source)
        except NScriptError as e:
            self.evaluator.debug(f"error: {e}")
            return Outcome(status='error', error=e.err)
        return self.run_nodes(nodes)

    def run_nodes(self, nodes: Iterable[Node]) -> Outcome:
        """Like `run`, for an already parsed (or deserialized) program."""
        try:
            value = self.evaluator.run(nodes)
        except NScriptError as e:
            self.evaluator.debug(f"error: {e}")
            return Outcome(status='error', error=e.err)
        return Outcome(status='success', value=value)

    def close(self):
        self.evaluator.close()
