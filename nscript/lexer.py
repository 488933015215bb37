"""Tokenizer for the NScript language.

The lexer works on demand: the parser asks for one token at a time with
`Lexer.next_token` and the lexer only ever moves its cursor forward.
Tokens are ordinary `Node` values whose kind is a literal kind, an
identifier, a punctuation kind, `EOF` or `BAD`.
"""

from __future__ import annotations

from typing import List

from .ast import Node, NodeKind, PUNCTUATION
from .errors import NScriptError, Position
from .escapes import unescape

KEYWORDS = {
    'none': NodeKind.NONE,
}


def is_identifier_char(c: str, first: bool) -> bool:
    if c.isalpha() or c == '_':
        return True
    return not first and is_digit(c)


def is_digit(c: str) -> bool:
    return '0' <= c <= '9'


def is_num_char(c: str, first: bool) -> bool:
    return is_digit(c) or (not first and c == '.')


class Lexer:
    def __init__(self, source: str):
        self.source = source
        self.index = 0

    def eof(self) -> bool:
        return self.index >= len(self.source)

    def char_at(self, index: int) -> str:
        if 0 <= index < len(self.source):
            return self.source[index]
        return ''

    def skip_whitespace(self):
        while not self.eof() and self.source[self.index].isspace():
            self.index += 1

    def next_token(self) -> Node:
        self.skip_whitespace()
        if self.eof():
            end = len(self.source)
            return Node(NodeKind.EOF, '', Position(end, end))
        c = self.source[self.index]
        if is_identifier_char(c, first=True):
            return self.collect_identifier()
        if is_num_char(c, first=True):
            return self.collect_num()
        if c == '\'':
            return self.collect_string()
        start = self.index
        self.index += 1
        # anything unknown becomes a BAD token for the parser to reject
        kind = PUNCTUATION.get(c, NodeKind.BAD)
        return Node(kind, c, Position(start, self.index))

    def collect_identifier(self) -> Node:
        start = self.index
        while not self.eof() and is_identifier_char(self.source[self.index], first=False):
            self.index += 1
        text = self.source[start:self.index]
        kind = KEYWORDS.get(text, NodeKind.IDENTIFIER)
        return Node(kind, text, Position(start, self.index))

    def collect_num(self) -> Node:
        start = self.index
        while not self.eof() and is_num_char(self.source[self.index], first=False):
            self.index += 1
        seq = self.source[start:self.index]
        pos = Position(start, self.index)

        # 0.0.1, 1.2.3 and the like
        if seq.count('.') > 1:
            raise NScriptError('LexicalError', ['number cannot include more than one dot'], pos)
        if seq.endswith('.'):
            raise NScriptError(
                'LexicalError',
                ['number cannot end with a dot (correction: `', seq[:-1], '`)'],
                pos,
            )
        # 123hello, 123_
        following = self.char_at(self.index)
        if following and is_identifier_char(following, first=False):
            raise NScriptError(
                'LexicalError',
                ['number cannot include part of identifier (correction: `', seq, ' ', following, '...`)'],
                Position(start, self.index + 1),
            )
        return Node(NodeKind.NUM, float(seq), pos)

    def collect_string(self) -> Node:
        start = self.index
        self.index += 1  # opening quote
        body_start = self.index
        while not self.eof():
            c = self.source[self.index]
            # a quote only counts as escaped behind a single, non-doubled backslash
            escaped = self.char_at(self.index - 1) == '\\' and self.char_at(self.index - 2) != '\\'
            if c == '\'' and not escaped:
                break
            self.index += 1
        else:
            raise NScriptError('LexicalError', ['unclosed string'], Position(start, len(self.source)))
        raw = self.source[body_start:self.index]
        self.index += 1  # closing quote
        return Node(NodeKind.STRING, unescape(raw, body_start), Position(start, self.index))


def tokenize(source: str) -> List[Node]:
    """Lex the whole source eagerly; the last token is always `EOF`."""
    lexer = Lexer(source)
    tokens: List[Node] = []
    while True:
        token = lexer.next_token()
        tokens.append(token)
        if token.kind == NodeKind.EOF:
            return tokens
