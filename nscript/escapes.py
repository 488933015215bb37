"""Conversion between string literal source text and runtime string values."""

from __future__ import annotations

from typing import Dict

from .errors import NScriptError, Position

# escape character -> the character it stands for
ESCAPES: Dict[str, str] = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '0': '\0',
    '\\': '\\',
    '\'': '\'',
    '"': '"',
}

# inverse table used when rendering back to source; `"` needs no escape
# inside single quotes
_RENDER: Dict[str, str] = {v: '\\' + k for k, v in ESCAPES.items() if k != '"'}


def unescape(raw: str, offset: int) -> str:
    """Decode the backslash escapes of a raw string literal body.

    ``offset`` is the source offset of ``raw[0]`` so errors point at the
    offending escape character.
    """
    out = []
    i = 0
    while i < len(raw):
        c = raw[i]
        if c != '\\':
            out.append(c)
            i += 1
            continue
        if i + 1 >= len(raw):
            raise NScriptError('LexicalError', ['incomplete escape sequence'], Position(offset + i, offset + i + 1))
        code = raw[i + 1]
        if code not in ESCAPES:
            raise NScriptError(
                'LexicalError',
                ['unknown escape character `', code, '`'],
                Position(offset + i + 1, offset + i + 2),
            )
        out.append(ESCAPES[code])
        i += 2
    return ''.join(out)


def escape(value: str) -> str:
    """Inverse of `unescape`: turn a runtime string back into literal body text."""
    return ''.join(_RENDER.get(c, c) for c in value)
