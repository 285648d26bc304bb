"""Grammar-driven parser front end for Bisaya++.

This is an alternative to the recursive-descent parser in `bisaya.parser`.
The language is written down as a Lark LALR grammar whose terminals are the
token kinds of `bisaya.tokens`. Lark does not tokenize the source itself: a
custom lexer hands it the tokens produced by `bisaya.lexer.scan`, so both
front ends agree on every lexical detail. The resulting parse tree is
transformed into the same AST, with the same desugaring, as the
recursive-descent parser.

The grammar front end is strict: it stops at the first syntax error and
does not try to recover.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from lark import Lark, Transformer
from lark import Token as LarkToken
from lark.exceptions import UnexpectedInput, VisitError
from lark.lexer import Lexer as LarkLexer

from .ast import (
    Assign, Binary, Block, ExpressionStmt, Grouping, If, Input, Literal,
    Print, Stmt, Unary, VarDecl, Variable,
)
from .errors import BisayaError, ErrorInfo, ErrorKind, ParseError
from .lexer import scan
from .parser import (
    check_literal_initializer, desugar_for, flatten_concat, increment,
    syntax_error,
)
from .tokens import Token, TokenKind
from .values import DeclaredType


BISAYA_GRAMMAR = r"""
    start: SUGOD declaration* KATAPUSAN

    ?declaration: var_decl
                | statement

    var_decl: MUGNA type_keyword declarator (COMMA declarator)*
    type_keyword: NUMERO | TIPIK | LETRA | TINUOD
    declarator: IDENTIFIER (ASSIGN expression)?

    ?statement: print_stmt
              | input_stmt
              | if_stmt
              | for_stmt
              | block
              | expression_stmt

    print_stmt: IPAKITA COLON expression
    input_stmt: DAWAT COLON IDENTIFIER (COMMA IDENTIFIER)*
    if_stmt: KUNG LPAREN expression RPAREN statement else_branch?
    ?else_branch: KUNG_DILI LPAREN expression RPAREN statement else_branch? -> else_if
                | KUNG_WALA statement -> otherwise
    for_stmt: ALANG_SA LPAREN expression COMMA expression COMMA IDENTIFIER INCREMENT RPAREN statement
    block: PUNDOK LBRACE declaration* RBRACE
    expression_stmt: expression

    // Expressions, lowest precedence first
    ?expression: logical ASSIGN expression -> assign
               | logical
    ?logical: equality
            | logical (UG | O) equality -> binary
    ?equality: comparison
             | equality (EQUAL | NOT_EQUAL) comparison -> binary
    ?comparison: term
               | comparison (LESS | LESS_EQUAL | GREATER | GREATER_EQUAL) term -> binary
    ?term: factor
         | term (PLUS | MINUS | CONCAT) factor -> binary
    ?factor: unary
           | factor (STAR | SLASH | PERCENT) unary -> binary
    ?unary: (MINUS | DILI) unary -> unary_op
          | primary
    ?primary: (INTEGER | DECIMAL | STRING | CHAR) -> literal
            | NEWLINE -> newline
            | IDENTIFIER INCREMENT -> increment
            | IDENTIFIER -> variable
            | LPAREN expression RPAREN -> grouping
"""

# Every token kind is a terminal; INCREMENT stands for '++' after a name.
TERMINALS = [kind.name for kind in TokenKind if kind is not TokenKind.EOF] + ['INCREMENT']


class TokenStreamLexer(LarkLexer):
    """Lark lexer that delegates to `bisaya.lexer.scan`.

    Each lark token carries the original Bisaya++ Token as its value. A
    ``PLUS PLUS`` pair directly after an identifier is merged into a single
    INCREMENT terminal, mirroring how the recursive-descent parser reads
    ``name++``.
    """
    def __init__(self, lexer_conf):
        pass

    def lex(self, source):
        tokens = scan(source)
        i = 0
        while tokens[i].kind is not TokenKind.EOF:
            token = tokens[i]
            yield LarkToken(token.kind.name, token, line=token.line)
            if (token.kind is TokenKind.IDENTIFIER
                    and tokens[i + 1].kind is TokenKind.PLUS
                    and tokens[i + 2].kind is TokenKind.PLUS):
                yield LarkToken('INCREMENT', tokens[i + 1], line=tokens[i + 1].line)
                i += 3
                continue
            i += 1


BISAYA_PARSER = Lark(
    BISAYA_GRAMMAR + '\n    %declare ' + ' '.join(TERMINALS) + '\n',
    parser='lalr',
    lexer=TokenStreamLexer,
)


def nodes(items) -> list:
    return [item for item in items if not isinstance(item, LarkToken)]


class ASTTransformer(Transformer):
    """Transforms the Lark parse tree into Bisaya++ AST nodes."""

    def __init__(self):
        super().__init__()
        self.variable_types: Dict[str, DeclaredType] = {}

    def start(self, items):
        return nodes(items)

    def type_keyword(self, items):
        return DeclaredType[items[0].type]

    def declarator(self, items):
        name = items[0].value
        initializer = items[2] if len(items) > 2 else None
        return name, initializer

    def var_decl(self, items):
        declared = items[1]
        declarations: List[Stmt] = []
        for item in items[2:]:
            if isinstance(item, LarkToken):
                continue
            name, initializer = item
            self.variable_types[name.lexeme] = declared
            if initializer is not None:
                check_literal_initializer(declared, initializer, name)
            declarations.append(VarDecl(name, declared, initializer))
        if len(declarations) == 1:
            return declarations[0]
        return Block(declarations)

    def print_stmt(self, items):
        return Print(flatten_concat(items[2]))

    def input_stmt(self, items):
        return Input([item.value for item in items if item.type == 'IDENTIFIER'])

    def if_stmt(self, items):
        else_branch = items[5] if len(items) > 5 else None
        return If(items[2], items[4], else_branch)

    def else_if(self, items):
        else_branch = items[5] if len(items) > 5 else None
        return If(items[2], items[4], else_branch)

    def otherwise(self, items):
        return items[1]

    def for_stmt(self, items):
        initializer = ExpressionStmt(items[2])
        return desugar_for(initializer, items[4], increment(items[6].value), items[9])

    def block(self, items):
        return Block(nodes(items))

    def expression_stmt(self, items):
        return ExpressionStmt(items[0])

    def assign(self, items):
        target, equals, value = items
        if isinstance(target, Variable):
            return Assign(target.name, value)
        raise syntax_error(equals.value, 'Invalid assignment target.')

    def binary(self, items):
        left, operator, right = items
        return Binary(left, operator.value, right)

    def unary_op(self, items):
        operator, right = items
        return Unary(operator.value, right)

    def literal(self, items):
        return Literal(items[0].value.literal)

    def newline(self, items):
        return Literal('\n')

    def increment(self, items):
        return increment(items[0].value)

    def variable(self, items):
        return Variable(items[0].value)

    def grouping(self, items):
        return Grouping(items[1])


def unexpected(error: UnexpectedInput) -> ParseError:
    token = getattr(error, 'token', None)
    if isinstance(token, LarkToken) and isinstance(token.value, Token):
        return syntax_error(token.value, f"Unexpected {token.value.kind.name}.")
    line = getattr(error, 'line', None)
    if not isinstance(line, int):
        line = None
    return ParseError([ErrorInfo(ErrorKind.PARSE, 'Unexpected end of input.', line)])


def parse_with_grammar(source: str) -> Tuple[List[Stmt], Dict[str, DeclaredType]]:
    """Parse Bisaya++ source with the Lark grammar.

    Returns the same (statements, variable types) pair as
    `bisaya.parser.parse`. Raises LexError or a single-error ParseError.
    """
    try:
        tree = BISAYA_PARSER.parse(source)
    except UnexpectedInput as e:
        raise unexpected(e)
    transformer = ASTTransformer()
    try:
        statements = transformer.transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, BisayaError):
            raise e.orig_exc
        raise
    return statements, transformer.variable_types
