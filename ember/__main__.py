"""CLI entry point for the Ember interpreter.

Usage:
    python -m ember [-v|-vv|-vvv] [--debug-file PATH] <program_file>
    python -m ember --tokens <program_file>
    python -m ember --ast <program_file>
    python -m ember                      (interactive prompt)

Options:
  -v            Increase debug verbosity (can be repeated)
  --debug-file  Write debug trace to this file instead of stderr
  --tokens      Print the token stream of the program and exit
  --ast         Print the parsed AST of the program and exit

Diagnostics are printed to stderr. The exit status is 65 when the program
has lexical or syntax errors and 70 when it stops on a runtime error.
At the interactive prompt, globals persist between lines; `.reset`
clears them and `.exit` quits.
"""

import argparse
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from .errors import Diagnostic, Diagnostics
from .interpreter import Interpreter, parse_program
from .printer import format_program
from .scanner import scan

EX_DATAERR = 65
EX_SOFTWARE = 70


def report(diagnostics: Iterable[Diagnostic]) -> None:
    for diagnostic in diagnostics:
        print(diagnostic, file=sys.stderr)


def read_source(path: str) -> str:
    program_file = Path(path)
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)
    with open(program_file, 'r', encoding='utf-8') as f:
        return f.read()


def dump_tokens(source: str) -> int:
    diagnostics = Diagnostics()
    for token in scan(source, diagnostics):
        print(token)
    report(diagnostics)
    return EX_DATAERR if diagnostics else 0


def dump_ast(source: str) -> int:
    diagnostics = Diagnostics()
    statements = parse_program(source, diagnostics)
    print(format_program(statements))
    report(diagnostics)
    return EX_DATAERR if diagnostics else 0


def run_file(source: str, debug_level: int, debug_file: Optional[str]) -> int:
    with Interpreter(debug_level=debug_level, debug_file=debug_file) as interpreter:
        result = interpreter.run_source(source)
    report(result.diagnostics)
    if result.had_static_error:
        return EX_DATAERR
    if result.had_runtime_error:
        return EX_SOFTWARE
    return 0


def repl(debug_level: int, debug_file: Optional[str]) -> int:
    with Interpreter(debug_level=debug_level, debug_file=debug_file) as interpreter:
        while True:
            try:
                line = input('> ')
            except EOFError:
                print()
                return 0
            command = line.strip()
            if command == '.exit':
                return 0
            if command == '.reset':
                interpreter.reset()
                continue
            if not command:
                continue
            report(interpreter.run_source(line).diagnostics)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog='ember', description='Ember language interpreter')
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--debug-file', metavar='PATH', help='write debug trace to PATH instead of stderr')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--tokens', action='store_true', help='print the token stream and exit')
    group.add_argument('--ast', action='store_true', help='print the parsed AST and exit')
    parser.add_argument('program', nargs='?', help='Ember program file (.ember) to execute')
    args = parser.parse_args(argv)

    if args.program is None:
        if args.tokens or args.ast:
            parser.error('--tokens/--ast need a program file')
        sys.exit(repl(args.v, args.debug_file))

    source = read_source(args.program)
    if args.tokens:
        sys.exit(dump_tokens(source))
    if args.ast:
        sys.exit(dump_ast(source))
    sys.exit(run_file(source, args.v, args.debug_file))


if __name__ == '__main__':
    main()
