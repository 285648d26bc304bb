# Bisaya++ language package
# This package provides a lexer, two parser front ends and a tree-walking
# interpreter for the Bisaya++ language.
from .errors import BisayaError, ErrorInfo, ErrorKind, LexError, ParseError, BisayaRuntimeError
from .interpreter import run_program, parse_program, Interpreter, RunResult

__all__ = [
    'run_program',
    'parse_program',
    'Interpreter',
    'RunResult',
    'BisayaError',
    'ErrorInfo',
    'ErrorKind',
    'LexError',
    'ParseError',
    'BisayaRuntimeError',
]
