"""Positions and the error type shared by every NScript stage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple


@dataclass(frozen=True)
class Position:
    """A half-open ``[start, end)`` span of character offsets into the source."""
    start: int
    end: int

    @staticmethod
    def join(first: 'Position', last: 'Position') -> 'Position':
        return Position(first.start, last.end)

    def __repr__(self) -> str:
        return f"{self.start}..{self.end}"


@dataclass(frozen=True)
class ErrorInfo:
    """Represents an NScript error value.

    ``name`` is the error category (``LexicalError``, ``SyntaxError``,
    ``TypeError``, ``ArityError``, ``NameError``, ``ArithmeticError`` or
    ``NotImplementedError``). The message is kept as the ordered fragments it
    was built from; hosts usually only want ``message``.
    """
    name: str
    fragments: Tuple[str, ...]
    pos: Position

    @property
    def message(self) -> str:
        return ''.join(self.fragments)

    def __repr__(self) -> str:
        return f"Error(name={self.name!r}, message={self.message!r}, pos={self.pos!r})"


class NScriptError(Exception):
    """Exception type used to abort a parse or evaluation with one error."""
    def __init__(self, name: str, fragments: Iterable[str], pos: Position):
        self.err = ErrorInfo(name, tuple(fragments), pos)
        super().__init__(f"{name}: {self.err.message} (at {pos!r})")

    @property
    def name(self) -> str:
        return self.err.name

    @property
    def message(self) -> str:
        return self.err.message

    @property
    def pos(self) -> Position:
        return self.err.pos


class NotImplementedCallError(NScriptError):
    """Raised for a process call when the host supplied no process hook."""
    def __init__(self, process: str, pos: Position):
        super().__init__('NotImplementedError', ["process calls are not implemented (calling `", process, "`)"], pos)
