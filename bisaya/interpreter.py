"""Tree-walking interpreter for the Bisaya++ language.

The interpreter executes the statements produced by the parser, in order,
against one flat Environment. Expressions are evaluated by dispatching on
the AST node type. Program output goes to a text stream (stdout unless
another one is given) and the DAWAT statement reads one line from an input
callable (``builtins.input`` unless another one is given).

`parse_program` and `run_program` tie the lexer, the parser and the
interpreter together for callers that start from source text.
"""

from __future__ import annotations

import builtins
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, TextIO

from .ast import (
    Assign, Binary, Block, Expr, ExpressionStmt, Grouping, If, Input,
    Literal, Print, Program, Stmt, Unary, VarDecl, Variable, While,
)
from .environment import Environment
from .errors import BisayaError, BisayaRuntimeError, ErrorInfo, ParseError
from .grammar import parse_with_grammar
from .lexer import scan
from .parser import parse
from .tokens import Token, TokenKind
from .values import (
    CharVal, DeclaredType, convert_input, is_truthy, kind_of, logical,
    to_string, values_equal,
)


class Interpreter:
    """Core interpreter that executes a Bisaya++ AST."""
    def __init__(
        self,
        output: Optional[TextIO] = None,
        read_line: Optional[Callable[[], str]] = None,
        debug_level: int = 0,
        debug_file: str = 'debug.txt',
    ):
        self.environment = Environment()
        self.output = output
        self.read_line = read_line
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_fp:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    # Public API
    def run(self, program: Program):
        if self.debug_level > 0 and self.debug_fp is None:
            # a later run appends to the trace of the earlier ones
            self.debug_fp = open(self.debug_file, 'a', encoding='utf-8')
        try:
            self.interpret(program.statements, program.variable_types)
        finally:
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

    def interpret(self, statements: List[Stmt], variable_types: Optional[Dict[str, DeclaredType]] = None):
        if variable_types:
            self.environment.types.update(variable_types)
        for stmt in statements:
            self.execute(stmt)

    def execute(self, node: Stmt):
        if self.debug_level >= 1:
            self.debug(f"execute {type(node).__name__}")
        if isinstance(node, ExpressionStmt):
            self.evaluate(node.expression)
            return
        if isinstance(node, VarDecl):
            value = self.evaluate(node.initializer) if node.initializer is not None else None
            self.environment.declare(node.name.lexeme, node.declared_type, value)
            if self.debug_level >= 2:
                self.debug(f"declare {node.name.lexeme}: {node.declared_type.value} = "
                           f"{self.environment.values[node.name.lexeme]!r}")
            return
        if isinstance(node, Print):
            text = ''.join(to_string(self.evaluate(expr)) for expr in node.expressions)
            print(text, end='', file=self.output, flush=True)
            return
        if isinstance(node, Block):
            # Blocks share the one environment; nothing is pushed or popped.
            for stmt in node.statements:
                self.execute(stmt)
            return
        if isinstance(node, If):
            cond = self.evaluate(node.condition)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {cond!r} -> {truthy}")
            if truthy:
                self.execute(node.then_branch)
            elif node.else_branch is not None:
                self.execute(node.else_branch)
            return
        if isinstance(node, While):
            while True:
                cond = self.evaluate(node.condition)
                if self.debug_level >= 3:
                    self.debug(f"while condition {cond!r}")
                if not is_truthy(cond):
                    break
                self.execute(node.body)
            return
        if isinstance(node, Input):
            self.execute_input(node)
            return
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def execute_input(self, node: Input):
        line = self.read_input()
        fields = [part.strip() for part in line.split(',')]
        first = node.variables[0].line
        if len(fields) != len(node.variables):
            raise BisayaRuntimeError(f"Expected {len(node.variables)} values, got {len(fields)}.", first)
        for name, text in zip(node.variables, fields):
            declared = self.environment.declared_type(name.lexeme)
            try:
                value = convert_input(text, declared)
            except ValueError as e:
                raise BisayaRuntimeError(f"Invalid input for '{name.lexeme}': {e}.", name.line)
            self.environment.set(name.lexeme, value)
            if self.debug_level >= 2:
                self.debug(f"input {name.lexeme} = {value!r}")

    def read_input(self) -> str:
        if self.read_line is not None:
            return self.read_line()
        try:
            return builtins.input()
        except EOFError:
            return ''

    def evaluate(self, node: Expr) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Grouping):
            return self.evaluate(node.expression)
        if isinstance(node, Variable):
            return self.environment.get(node.name)
        if isinstance(node, Assign):
            value = self.evaluate(node.value)
            self.environment.set(node.name.lexeme, value)
            if self.debug_level >= 2:
                self.debug(f"assign {node.name.lexeme} = {value!r}")
            return value
        if isinstance(node, Unary):
            right = self.evaluate(node.right)
            if node.operator.kind is TokenKind.MINUS:
                if not isinstance(right, float):
                    raise BisayaRuntimeError('Operand must be a number.', node.operator.line)
                return -right
            if node.operator.kind is TokenKind.DILI:
                return logical(not is_truthy(right))
            raise BisayaRuntimeError(f"Unsupported unary operator '{node.operator.lexeme}'.", node.operator.line)
        if isinstance(node, Binary):
            # UG and O do not short-circuit: both sides always run.
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            return self.apply_binary_op(node.operator, left, right)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def apply_binary_op(self, op: Token, a: Any, b: Any) -> Any:
        kind = op.kind
        if kind is TokenKind.PLUS:
            if isinstance(a, float) and isinstance(b, float):
                return a + b
            if isinstance(a, str) or isinstance(b, str):
                return to_string(a) + to_string(b)
            raise BisayaRuntimeError('Operands must be two numbers or two strings.', op.line)
        if kind is TokenKind.CONCAT:
            return to_string(a) + to_string(b)
        if kind is TokenKind.MINUS:
            self.check_numbers(op, a, b)
            return a - b
        if kind is TokenKind.STAR:
            self.check_numbers(op, a, b)
            return a * b
        if kind is TokenKind.SLASH:
            self.check_numbers(op, a, b)
            if b == 0.0:
                raise BisayaRuntimeError('Division by zero.', op.line)
            return a / b
        if kind is TokenKind.PERCENT:
            self.check_numbers(op, a, b)
            if b == 0.0:
                raise BisayaRuntimeError('Modulo by zero.', op.line)
            # remainder takes the sign of the dividend
            return math.fmod(a, b)
        if kind is TokenKind.LESS:
            self.check_numbers(op, a, b)
            return logical(a < b)
        if kind is TokenKind.LESS_EQUAL:
            self.check_numbers(op, a, b)
            return logical(a <= b)
        if kind is TokenKind.GREATER:
            self.check_numbers(op, a, b)
            return logical(a > b)
        if kind is TokenKind.GREATER_EQUAL:
            self.check_numbers(op, a, b)
            return logical(a >= b)
        if kind in (TokenKind.EQUAL, TokenKind.NOT_EQUAL):
            eq = self.equal_values(a, b)
            return logical(eq if kind is TokenKind.EQUAL else not eq)
        if kind is TokenKind.UG:
            return logical(is_truthy(a) and is_truthy(b))
        if kind is TokenKind.O:
            return logical(is_truthy(a) or is_truthy(b))
        raise BisayaRuntimeError(f"Unknown operator '{op.lexeme}'.", op.line)

    def equal_values(self, a: Any, b: Any) -> bool:
        if isinstance(a, CharVal) and isinstance(b, CharVal):
            return a.char == b.char
        return values_equal(a, b)

    def check_numbers(self, op: Token, a: Any, b: Any):
        if isinstance(a, float) and isinstance(b, float):
            return
        raise BisayaRuntimeError(
            f"Operands must be numbers (got {kind_of(a).value} and {kind_of(b).value}).", op.line)


@dataclass
class RunResult:
    """Outcome of `run_program`: empty `errors` means the program ran to the end."""
    errors: List[ErrorInfo] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def parse_program(source: str, front_end: str = 'descent') -> Program:
    """Scan and parse Bisaya++ source into a Program.

    `front_end` selects the recursive-descent parser ('descent', which
    reports every independent error) or the lark grammar ('grammar', which
    stops at the first one).
    """
    if front_end == 'grammar':
        statements, variable_types = parse_with_grammar(source)
    elif front_end == 'descent':
        statements, variable_types = parse(scan(source))
    else:
        raise ValueError(f"unknown parser front end {front_end!r}")
    return Program(statements, variable_types)


def run_program(
    source: str,
    output: Optional[TextIO] = None,
    read_line: Optional[Callable[[], str]] = None,
    debug_level: int = 0,
    front_end: str = 'descent',
) -> RunResult:
    """Convenience function to parse and run a Bisaya++ program from source.

    Language errors from any stage are returned in the result instead of
    being raised.
    """
    try:
        program = parse_program(source, front_end)
        Interpreter(output=output, read_line=read_line, debug_level=debug_level).run(program)
    except ParseError as e:
        return RunResult(e.errors)
    except BisayaError as e:
        return RunResult([e.err])
    return RunResult()
