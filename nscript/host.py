"""Ports the embedding host provides to the evaluator.

The core only needs two things from its host: somewhere to write text
(`OutputSink`) and, optionally, a way to run external processes
(`ProcessHook`). Calls whose name is a string literal, such as
``'ls'('-l')``, are routed to the process hook.
"""

from __future__ import annotations

import sys
from typing import Callable, Protocol, Tuple

from .ast import Node
from .errors import Position


class OutputSink(Protocol):
    def write(self, text: str) -> object: ...

    def flush(self) -> object: ...


class StdoutSink:
    """Writes to whatever `sys.stdout` is at call time."""
    def write(self, text: str) -> None:
        sys.stdout.write(text)

    def flush(self) -> None:
        sys.stdout.flush()


# (process name, evaluated arguments, call position) -> result
ProcessHook = Callable[[str, Tuple[Node, ...], Position], Node]
