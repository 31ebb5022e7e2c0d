# scriptlang package
# This package provides a lexer, parser and tree-walking interpreter for a small scripting language.
from .errors import ScriptError
from .environment import Environment
from .interpreter import Interpreter, compile_module, run_program
from .parser import parse_expression, parse_program
from .printer import pretty_print

__all__ = [
    'parse_program',
    'parse_expression',
    'pretty_print',
    'run_program',
    'compile_module',
    'Interpreter',
    'Environment',
    'ScriptError',
]
