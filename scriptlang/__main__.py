"""CLI entry point for the scriptlang interpreter.

Usage:
    python -m scriptlang [-v|-vv|-vvv] <program_file>
    python -m scriptlang --tokens <program_file>
    python -m scriptlang --pretty <program_file>
    python -m scriptlang [-v...] --emit-ast <program_file>
    python -m scriptlang [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --tokens      Print the token stream of the given file, one token per line
  --pretty      Parse the given file and print it back in canonical form
  --emit-ast    Parse the given file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. When the program ends with a top-level
`return`, the returned value is printed.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from .ast import Block
from .ast_json import ast_from_obj, ast_to_obj
from .errors import ScriptError
from .interpreter import Interpreter
from .lexer import tokenize
from .parser import parse_program
from .printer import pretty_print
from .types import to_string


def read_source(path_text: str) -> str:
    path = Path(path_text)
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def execute(program: Block, debug_level: int):
    with Interpreter(debug_level=debug_level) as interpreter:
        result = interpreter.run(program)
    if result is not None:
        print(to_string(result))


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(description="scriptlang interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--tokens', metavar='FILE', help='print the tokens of the given file')
    group.add_argument('--pretty', metavar='FILE', help='print the parsed program in canonical form')
    group.add_argument('--emit-ast', metavar='FILE', help='emit AST JSON for the given file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='program file to execute')
    args = parser.parse_args(argv)

    try:
        if args.tokens:
            for token in tokenize(read_source(args.tokens)):
                print(token)
            return

        if args.pretty:
            print(pretty_print(parse_program(read_source(args.pretty))), end='')
            return

        # Emit AST mode
        if args.emit_ast:
            program_file = Path(args.emit_ast)
            program = parse_program(read_source(args.emit_ast))
            out_path = program_file.with_name(program_file.name + '.ast.json')
            with open(out_path, 'w', encoding='utf-8') as out:
                json.dump(ast_to_obj(program), out, ensure_ascii=False, indent=2)
            print(str(out_path))
            return

        # Execute from AST JSON
        if args.ast:
            data = json.loads(read_source(args.ast))
            execute(ast_from_obj(data), args.v)
            return

        if not args.program:
            parser.error('missing program file; or use --tokens/--pretty/--emit-ast/--ast')
        execute(parse_program(read_source(args.program)), args.v)
    except ScriptError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
