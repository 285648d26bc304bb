"""CLI entry point for the Bisaya++ interpreter.

Usage:
    python -m bisaya [-v|-vv|-vvv] [--parser descent|grammar] <program_file>
    python -m bisaya [-v...] --emit-ast <program_file>
    python -m bisaya [-v...] --ast <ast_json_file>
    python -m bisaya

Options:
  -v            Increase debug verbosity (can be repeated)
  --debug-file  Where debug information goes (default: debug.txt)
  --parser      Parser front end: recursive descent (default) or the grammar
  --emit-ast    Parse the given program and print its AST as JSON
  --ast         Execute a previously emitted AST JSON file

Without a program file an interactive prompt runs each entered line; lines
that do not start with SUGOD are wrapped in SUGOD ... KATAPUSAN. Variables
survive from one line to the next. Type `exit` to leave.

Exit status: 0 on success, 64 on a usage error, 65 on a lexical or parse
error, 70 on a runtime error and 74 when the program file cannot be read.
"""

import argparse
import json
import sys
from pathlib import Path
from .ast_json import ast_to_obj, ast_from_obj
from .errors import BisayaError, BisayaRuntimeError, ParseError
from .interpreter import parse_program, Interpreter

EXIT_USAGE = 64
EXIT_DATA = 65
EXIT_SOFTWARE = 70
EXIT_IO = 74


class ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: error: {message}\n")


def report(error: BisayaError) -> int:
    """Print a Bisaya++ error to stderr and return the matching exit status."""
    if isinstance(error, ParseError):
        for info in error.errors:
            print(info, file=sys.stderr)
    else:
        print(error.err, file=sys.stderr)
    if isinstance(error, BisayaRuntimeError):
        return EXIT_SOFTWARE
    return EXIT_DATA


def read_source(path: Path) -> str:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except OSError:
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(EXIT_IO)


def repl(args) -> None:
    interpreter = Interpreter(debug_level=args.v, debug_file=args.debug_file)
    while True:
        try:
            line = input('> ')
        except EOFError:
            print()
            break
        if line.strip() == 'exit':
            break
        if not line.strip():
            continue
        if not line.lstrip().startswith('SUGOD'):
            line = f"SUGOD\n{line}\nKATAPUSAN"
        try:
            program = parse_program(line, args.parser)
            interpreter.interpret(program.statements, program.variable_types)
        except BisayaError as e:
            report(e)
            continue
        print()


def main(argv: list[str] | None = None) -> None:
    parser = ArgumentParser(prog='bisaya', description="Bisaya++ language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--debug-file', default='debug.txt', help='file that receives debug output')
    parser.add_argument('--parser', choices=('descent', 'grammar'), default='descent',
                        help='parser front end to use')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', action='store_true', help='print the AST as JSON instead of running')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Bisaya++ program file to execute')
    args = parser.parse_args(argv)

    # Execute from AST JSON
    if args.ast:
        if args.program:
            parser.error('--ast does not take a program file')
        data = json.loads(read_source(Path(args.ast)))
        program = ast_from_obj(data)
        interpreter = Interpreter(debug_level=args.v, debug_file=args.debug_file)
        try:
            interpreter.run(program)
        except BisayaError as e:
            sys.exit(report(e))
        return

    if not args.program:
        if args.emit_ast:
            parser.error('--emit-ast needs a program file')
        repl(args)
        return

    source = read_source(Path(args.program))
    try:
        program = parse_program(source, args.parser)
    except BisayaError as e:
        sys.exit(report(e))

    # Emit AST mode
    if args.emit_ast:
        print(json.dumps(ast_to_obj(program), ensure_ascii=False, indent=2))
        return

    interpreter = Interpreter(debug_level=args.v, debug_file=args.debug_file)
    try:
        interpreter.run(program)
    except BisayaError as e:
        sys.exit(report(e))

if __name__ == '__main__':
    main()
