"""JSON serialization/deserialization for the Bisaya++ AST.

This module converts between AST dataclasses and plain Python dict/list
structures suitable for JSON encoding. Tokens keep their kind, lexeme and
line; character values are tagged with ``"__type__": "Char"`` so they survive
the trip through JSON, which only knows numbers and strings.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import (
    Program,
    ExpressionStmt,
    Print,
    VarDecl,
    Block,
    If,
    While,
    Input,
    Assign,
    Binary,
    Unary,
    Grouping,
    Literal,
    Variable,
)
from .tokens import Token, TokenKind
from .values import CharVal, DeclaredType


def token_to_obj(tok: Token) -> Dict[str, Any]:
    return {"kind": tok.kind.name, "lexeme": tok.lexeme, "line": tok.line}


def token_from_obj(o: Dict[str, Any]) -> Token:
    return Token(TokenKind[o["kind"]], o["lexeme"], None, o["line"])


def value_to_obj(value: Any) -> Any:
    if isinstance(value, CharVal):
        return {"__type__": "Char", "value": value.char}
    return value


def value_from_obj(o: Any) -> Any:
    if isinstance(o, dict) and o.get("__type__") == "Char":
        return CharVal(o["value"])
    if isinstance(o, int) and not isinstance(o, bool):
        return float(o)
    return o


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None

    if isinstance(node, Program):
        return {
            "type": "Program",
            "body": [ast_to_obj(n) for n in node.statements],
            "variable_types": {name: t.name for name, t in node.variable_types.items()},
        }
    if isinstance(node, ExpressionStmt):
        return {"type": "ExpressionStmt", "expr": ast_to_obj(node.expression)}
    if isinstance(node, Print):
        return {"type": "Print", "expressions": [ast_to_obj(e) for e in node.expressions]}
    if isinstance(node, VarDecl):
        return {
            "type": "VarDecl",
            "name": token_to_obj(node.name),
            "declared_type": node.declared_type.name,
            "initializer": ast_to_obj(node.initializer),
        }
    if isinstance(node, Block):
        return {"type": "Block", "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, If):
        return {
            "type": "If",
            "condition": ast_to_obj(node.condition),
            "then_branch": ast_to_obj(node.then_branch),
            "else_branch": ast_to_obj(node.else_branch),
        }
    if isinstance(node, While):
        return {"type": "While", "condition": ast_to_obj(node.condition), "body": ast_to_obj(node.body)}
    if isinstance(node, Input):
        return {"type": "Input", "variables": [token_to_obj(v) for v in node.variables]}
    if isinstance(node, Assign):
        return {"type": "Assign", "name": token_to_obj(node.name), "value": ast_to_obj(node.value)}
    if isinstance(node, Binary):
        return {
            "type": "Binary",
            "op": token_to_obj(node.operator),
            "left": ast_to_obj(node.left),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, Unary):
        return {"type": "Unary", "op": token_to_obj(node.operator), "right": ast_to_obj(node.right)}
    if isinstance(node, Grouping):
        return {"type": "Grouping", "expr": ast_to_obj(node.expression)}
    if isinstance(node, Literal):
        return {"type": "Literal", "value": value_to_obj(node.value)}
    if isinstance(node, Variable):
        return {"type": "Variable", "name": token_to_obj(node.name)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "Program":
        return Program(
            statements=[ast_from_obj(n) for n in obj["body"]],
            variable_types={name: DeclaredType[k] for name, k in obj.get("variable_types", {}).items()},
        )
    if t == "ExpressionStmt":
        return ExpressionStmt(ast_from_obj(obj["expr"]))
    if t == "Print":
        return Print([ast_from_obj(e) for e in obj["expressions"]])
    if t == "VarDecl":
        return VarDecl(
            name=token_from_obj(obj["name"]),
            declared_type=DeclaredType[obj["declared_type"]],
            initializer=ast_from_obj(obj.get("initializer")),
        )
    if t == "Block":
        return Block([ast_from_obj(s) for s in obj["statements"]])
    if t == "If":
        return If(
            condition=ast_from_obj(obj["condition"]),
            then_branch=ast_from_obj(obj["then_branch"]),
            else_branch=ast_from_obj(obj.get("else_branch")),
        )
    if t == "While":
        return While(condition=ast_from_obj(obj["condition"]), body=ast_from_obj(obj["body"]))
    if t == "Input":
        return Input([token_from_obj(v) for v in obj["variables"]])
    if t == "Assign":
        return Assign(name=token_from_obj(obj["name"]), value=ast_from_obj(obj["value"]))
    if t == "Binary":
        return Binary(
            left=ast_from_obj(obj["left"]),
            operator=token_from_obj(obj["op"]),
            right=ast_from_obj(obj["right"]),
        )
    if t == "Unary":
        return Unary(operator=token_from_obj(obj["op"]), right=ast_from_obj(obj["right"]))
    if t == "Grouping":
        return Grouping(ast_from_obj(obj["expr"]))
    if t == "Literal":
        return Literal(value_from_obj(obj["value"]))
    if t == "Variable":
        return Variable(token_from_obj(obj["name"]))

    raise ValueError(f"Unknown AST node type: {t}")
