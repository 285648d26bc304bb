"""Abstract Syntax Tree (AST) definitions for the Bisaya++ language.

The parser builds these nodes once and nothing mutates them afterwards.
There are two node categories: expressions, which evaluate to a runtime
value, and statements, which the interpreter executes for their effects.
`Expr` and `Stmt` name the variants of each category.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .tokens import Token
from .values import DeclaredType


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


# Expressions

@dataclass(frozen=True)
class Literal(Node):
    value: Any


@dataclass(frozen=True)
class Grouping(Node):
    expression: 'Expr'


@dataclass(frozen=True)
class Unary(Node):
    operator: Token
    right: 'Expr'


@dataclass(frozen=True)
class Binary(Node):
    left: 'Expr'
    operator: Token
    right: 'Expr'


@dataclass(frozen=True)
class Variable(Node):
    name: Token


@dataclass(frozen=True)
class Assign(Node):
    name: Token
    value: 'Expr'


Expr = Union[Literal, Grouping, Unary, Binary, Variable, Assign]


# Statements

@dataclass(frozen=True)
class ExpressionStmt(Node):
    expression: Expr


@dataclass(frozen=True)
class Print(Node):
    expressions: List[Expr]


@dataclass(frozen=True)
class VarDecl(Node):
    name: Token
    declared_type: DeclaredType
    initializer: Optional[Expr]  # None means the type's default


@dataclass(frozen=True)
class Block(Node):
    statements: List['Stmt']


@dataclass(frozen=True)
class If(Node):
    condition: Expr
    then_branch: 'Stmt'
    else_branch: Optional['Stmt']  # another If for KUNG DILI


@dataclass(frozen=True)
class While(Node):
    condition: Expr
    body: 'Stmt'


@dataclass(frozen=True)
class Input(Node):
    variables: List[Token]


Stmt = Union[ExpressionStmt, Print, VarDecl, Block, If, While, Input]


@dataclass
class Program:
    """A parsed program: the statements inside SUGOD/KATAPUSAN and the
    declared type of every variable introduced with MUGNA."""
    statements: List[Stmt]
    variable_types: Dict[str, DeclaredType] = field(default_factory=dict)
