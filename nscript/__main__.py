"""CLI entry point for the NScript interpreter.

Usage:
    python -m nscript [-v|-vv|-vvv] <program_file>
    python -m nscript [-v...] -e <expression>
    python -m nscript [-v...] --emit-ast <program_file>
    python -m nscript [-v...] --ast <ast_json_file>
    python -m nscript [-v...]

Options:
  -v            Increase debug verbosity (can be repeated)
  -e            Evaluate the given source text
  --emit-ast    Parse the given program file and emit an AST JSON file
  --ast         Evaluate a previously emitted AST JSON file

Without a program the interpreter starts a REPL in which every line is
evaluated against the same variables. Debug information is written to
`debug.txt` in the current directory when verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path

from .ast import NodeKind
from .ast_json import program_from_obj, program_to_obj
from .errors import NScriptError
from .host import StdoutSink
from .parser import parse_program
from .session import Outcome, Session


def report(outcome: Outcome) -> int:
    """Print a final value or the error; return the process exit status."""
    if not outcome.ok:
        print(outcome.format_error(), file=sys.stderr)
        return 1
    if outcome.value is not None and outcome.value.kind != NodeKind.NONE:
        print(outcome.value.to_string())
    return 0


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


class LineTrackingSink(StdoutSink):
    """Stdout sink that remembers whether the last write ended mid-line."""
    def __init__(self):
        self.pending_line = False

    def write(self, text: str) -> None:
        if text:
            super().write(text)
            self.pending_line = not text.endswith('\n')


def repl(session: Session, sink: LineTrackingSink) -> None:
    print("NScript REPL")
    print("Type 'exit' or press Ctrl+D to quit.")
    while True:
        try:
            line = input(">> ")
        except EOFError:
            print()
            break
        line = line.strip()
        if not line:
            continue
        if line == 'exit':
            break
        outcome = session.run(line)
        # print() writes without a newline, keep the prompt on its own line
        if sink.pending_line:
            sink.write('\n')
        report(outcome)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="NScript language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('-e', metavar='SOURCE', dest='source', help='evaluate the given source text')
    group.add_argument('--emit-ast', metavar='NSCRIPT_FILE', help='emit AST JSON for the given program file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='evaluate AST from a JSON file')
    parser.add_argument('program', nargs='?', help='NScript program file to evaluate')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        source = read_source(program_file)
        try:
            nodes = parse_program(source)
        except NScriptError as e:
            print(str(e), file=sys.stderr)
            sys.exit(1)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(program_to_obj(nodes), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    sink = LineTrackingSink()
    session = Session(output=sink, debug_level=args.v)
    try:
        # Evaluate from AST JSON
        if args.ast:
            ast_path = Path(args.ast)
            data = json.loads(read_source(ast_path))
            status = report(session.run_nodes(program_from_obj(data)))
        elif args.source is not None:
            status = report(session.run(args.source))
        elif args.program:
            status = report(session.run(read_source(Path(args.program))))
        else:
            repl(session, sink)
            status = 0
    finally:
        session.close()
    if status:
        sys.exit(status)


if __name__ == '__main__':
    main()
