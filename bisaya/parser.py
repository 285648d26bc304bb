"""Recursive-descent parser for the Bisaya++ language.

The parser reads the token list produced by the lexer with one token of
lookahead and returns the program's statements together with a table that
maps every variable declared with ``MUGNA`` to its declared type.

Grammar, lowest precedence first::

    program     -> "SUGOD" declaration* "KATAPUSAN"
    declaration -> "MUGNA" type declarator ("," declarator)* | statement
    declarator  -> IDENTIFIER ("=" expression)?
    statement   -> print | input | if | for | "PUNDOK" "{" declaration* "}"
                 | expression
    expression  -> IDENTIFIER "=" expression | logical
    logical     -> equality (("UG" | "O") equality)*
    equality    -> comparison (("==" | "<>") comparison)*
    comparison  -> term (("<" | "<=" | ">" | ">=") term)*
    term        -> factor (("+" | "-" | "&") factor)*
    factor      -> unary (("*" | "/" | "%") unary)*
    unary       -> ("-" | "DILI") unary | primary
    primary     -> literal | "$" | IDENTIFIER "++" | IDENTIFIER
                 | "(" expression ")"

Loops and the postfix increment are desugared here, so the interpreter only
ever sees assignments, blocks and while loops.

When a statement fails to parse the error is recorded and the parser skips
ahead to the next keyword that can start a statement, so one run reports
every independent mistake. The collected errors are raised together as a
single ParseError once the whole token list has been read.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from .ast import (
    Assign, Binary, Block, Expr, ExpressionStmt, Grouping, If, Input,
    Literal, Print, Stmt, Unary, VarDecl, Variable, While,
)
from .errors import ErrorInfo, ErrorKind, ParseError
from .tokens import TYPE_KEYWORDS, Token, TokenKind
from .values import DeclaredType, check_initializer


# Keywords the parser resynchronises on after an error.
RECOVERY_KINDS = {
    TokenKind.SUGOD, TokenKind.KATAPUSAN, TokenKind.MUGNA, TokenKind.IPAKITA,
    TokenKind.DAWAT, TokenKind.KUNG, TokenKind.PUNDOK, TokenKind.ALANG_SA,
}

# Tokens that cannot follow the operands of IPAKITA without a '&' between.
MISSING_CONCAT_KINDS = (
    TokenKind.STRING, TokenKind.INTEGER, TokenKind.DECIMAL, TokenKind.CHAR,
    TokenKind.NEWLINE, TokenKind.COMMA,
)


def syntax_error(token: Token, message: str) -> ParseError:
    if token.kind is TokenKind.EOF:
        where = 'at end'
    else:
        where = f"at '{token.lexeme}'"
    return ParseError([ErrorInfo(ErrorKind.PARSE, f"{message} ({where})", token.line)])


# Desugaring helpers, shared with the grammar front end so that both build
# identical trees.

def increment(name: Token) -> Assign:
    """``name++`` becomes ``name = name + 1``."""
    plus = Token(TokenKind.PLUS, '+', None, name.line)
    return Assign(name, Binary(Variable(name), plus, Literal(1.0)))


def flatten_concat(expr: Expr) -> List[Expr]:
    """Split a left-nested ``a & b & c`` chain into its ordered operands."""
    if isinstance(expr, Binary) and expr.operator.kind is TokenKind.CONCAT:
        return flatten_concat(expr.left) + [expr.right]
    return [expr]


def desugar_for(initializer: Stmt, condition: Expr, step: Expr, body: Stmt) -> Block:
    loop_body = Block([body, ExpressionStmt(step)])
    return Block([initializer, While(condition, loop_body)])


def check_literal_initializer(declared: DeclaredType, initializer: Expr, name: Token):
    # Only literals can be checked before the program runs.
    if not isinstance(initializer, Literal):
        return
    try:
        check_initializer(declared, initializer.value)
    except TypeError as e:
        raise ParseError([ErrorInfo(ErrorKind.PARSE, f"{e} (variable '{name.lexeme}')", name.line)])


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.current = 0
        self.variable_types: Dict[str, DeclaredType] = {}
        self.errors: List[ErrorInfo] = []

    # ------------------------------------------------------------------ public

    def parse(self) -> Tuple[List[Stmt], Dict[str, DeclaredType]]:
        statements: List[Stmt] = []
        if not self.match(TokenKind.SUGOD):
            self.record(syntax_error(self.peek(), "Expect 'SUGOD' at the start of the program."))
        while not self.check(TokenKind.KATAPUSAN) and not self.is_at_end():
            stmt = self.guarded_declaration()
            if stmt is not None:
                statements.append(stmt)
        if not self.match(TokenKind.KATAPUSAN):
            self.record(syntax_error(self.peek(), "Expect 'KATAPUSAN' at the end of the program."))
        elif not self.is_at_end():
            self.record(syntax_error(self.peek(), "Unexpected code after 'KATAPUSAN'."))
        if self.errors:
            raise ParseError(self.errors)
        return statements, self.variable_types

    # ------------------------------------------------------------------ recovery

    def record(self, error: ParseError):
        self.errors.extend(error.errors)

    def guarded_declaration(self) -> Optional[Stmt]:
        start = self.current
        try:
            return self.declaration()
        except ParseError as error:
            self.record(error)
            self.synchronize(start)
            return None

    def synchronize(self, start: int):
        if self.current == start:
            self.advance()
        while not self.is_at_end() and self.peek().kind not in RECOVERY_KINDS:
            self.advance()

    # ------------------------------------------------------------------ statements

    def declaration(self) -> Stmt:
        if self.match(TokenKind.MUGNA):
            return self.var_declaration()
        return self.statement()

    def statement(self) -> Stmt:
        if self.match(TokenKind.IPAKITA):
            return self.print_statement()
        if self.match(TokenKind.DAWAT):
            return self.input_statement()
        if self.match(TokenKind.KUNG):
            return self.if_statement()
        if self.match(TokenKind.ALANG_SA):
            return self.for_statement()
        if self.match(TokenKind.PUNDOK):
            return self.block()
        if self.check(TokenKind.KUNG_DILI) or self.check(TokenKind.KUNG_WALA):
            raise syntax_error(self.peek(), f"'{self.peek().lexeme}' without a preceding 'KUNG'.")
        return ExpressionStmt(self.expression())

    def var_declaration(self) -> Stmt:
        if not self.match(*TYPE_KEYWORDS):
            raise syntax_error(self.peek(), 'Expect type after MUGNA (NUMERO, TIPIK, LETRA or TINUOD).')
        declared = DeclaredType[self.previous().kind.name]
        declarations: List[Stmt] = [self.declarator(declared)]
        while self.match(TokenKind.COMMA):
            if self.check(TokenKind.ASSIGN):
                raise syntax_error(self.peek(), 'Expected variable name after comma.')
            if not self.check(TokenKind.IDENTIFIER):
                raise syntax_error(self.previous(), 'Trailing comma without a following variable.')
            declarations.append(self.declarator(declared))
        if len(declarations) == 1:
            return declarations[0]
        return Block(declarations)

    def declarator(self, declared: DeclaredType) -> VarDecl:
        name = self.consume(TokenKind.IDENTIFIER, 'Expect variable name.')
        self.variable_types[name.lexeme] = declared
        initializer: Optional[Expr] = None
        if self.match(TokenKind.ASSIGN):
            if self.check(TokenKind.COMMA) or self.check(TokenKind.KATAPUSAN) or self.is_at_end():
                raise syntax_error(self.previous(), "Missing value after '='.")
            initializer = self.expression()
            check_literal_initializer(declared, initializer, name)
        return VarDecl(name, declared, initializer)

    def print_statement(self) -> Print:
        self.consume(TokenKind.COLON, "Expect ':' after IPAKITA.")
        expressions = flatten_concat(self.expression())
        if self.check(*MISSING_CONCAT_KINDS):
            raise syntax_error(self.peek(), 'Expected concatenation operator.')
        return Print(expressions)

    def input_statement(self) -> Input:
        self.consume(TokenKind.COLON, "Expect ':' after DAWAT.")
        variables = [self.consume(TokenKind.IDENTIFIER, 'Expect variable name.')]
        while self.match(TokenKind.COMMA):
            variables.append(self.consume(TokenKind.IDENTIFIER, "Expect variable name after ','."))
        return Input(variables)

    def if_statement(self) -> If:
        condition = self.condition('KUNG')
        then_branch = self.statement()
        return If(condition, then_branch, self.else_branch())

    def else_branch(self) -> Optional[Stmt]:
        if self.match(TokenKind.KUNG_DILI):
            condition = self.condition('KUNG DILI')
            then_branch = self.statement()
            return If(condition, then_branch, self.else_branch())
        if self.match(TokenKind.KUNG_WALA):
            return self.statement()
        return None

    def condition(self, keyword: str) -> Expr:
        self.consume(TokenKind.LPAREN, f"Expect '(' after '{keyword}'.")
        expr = self.expression()
        self.consume(TokenKind.RPAREN, f"Expect ')' after {keyword} condition.")
        return expr

    def for_statement(self) -> Block:
        self.consume(TokenKind.LPAREN, "Expect '(' after 'ALANG SA'.")
        initializer = ExpressionStmt(self.expression())
        self.consume(TokenKind.COMMA, "Expect ',' after loop initializer.")
        condition = self.expression()
        self.consume(TokenKind.COMMA, "Expect ',' after loop condition.")
        name = self.consume(TokenKind.IDENTIFIER, "Expect loop variable increment after ','.")
        if not (self.check(TokenKind.PLUS) and self.check_next(TokenKind.PLUS)):
            raise syntax_error(self.peek(), "Expect '++' after loop variable.")
        self.advance()
        self.advance()
        self.consume(TokenKind.RPAREN, "Expect ')' after loop clauses.")
        body = self.statement()
        return desugar_for(initializer, condition, increment(name), body)

    def block(self) -> Block:
        self.consume(TokenKind.LBRACE, "Expect '{' after PUNDOK.")
        statements: List[Stmt] = []
        while not self.check(TokenKind.RBRACE) and not self.is_at_end():
            statements.append(self.declaration())
        self.consume(TokenKind.RBRACE, "Expect '}' after block.")
        return Block(statements)

    # ------------------------------------------------------------------ expressions

    def expression(self) -> Expr:
        return self.assignment()

    def assignment(self) -> Expr:
        expr = self.logical()
        if self.match(TokenKind.ASSIGN):
            equals = self.previous()
            value = self.assignment()
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            raise syntax_error(equals, 'Invalid assignment target.')
        return expr

    def logical(self) -> Expr:
        expr = self.equality()
        while self.match(TokenKind.UG, TokenKind.O):
            operator = self.previous()
            expr = Binary(expr, operator, self.equality())
        return expr

    def equality(self) -> Expr:
        expr = self.comparison()
        while self.match(TokenKind.EQUAL, TokenKind.NOT_EQUAL):
            operator = self.previous()
            expr = Binary(expr, operator, self.comparison())
        return expr

    def comparison(self) -> Expr:
        expr = self.term()
        while self.match(TokenKind.LESS, TokenKind.LESS_EQUAL, TokenKind.GREATER, TokenKind.GREATER_EQUAL):
            operator = self.previous()
            expr = Binary(expr, operator, self.term())
        return expr

    def term(self) -> Expr:
        expr = self.factor()
        while self.match(TokenKind.PLUS, TokenKind.MINUS, TokenKind.CONCAT):
            operator = self.previous()
            expr = Binary(expr, operator, self.factor())
        return expr

    def factor(self) -> Expr:
        expr = self.unary()
        while self.match(TokenKind.STAR, TokenKind.SLASH, TokenKind.PERCENT):
            operator = self.previous()
            expr = Binary(expr, operator, self.unary())
        return expr

    def unary(self) -> Expr:
        if self.match(TokenKind.MINUS, TokenKind.DILI):
            operator = self.previous()
            return Unary(operator, self.unary())
        return self.primary()

    def primary(self) -> Expr:
        if self.match(TokenKind.INTEGER, TokenKind.DECIMAL, TokenKind.STRING, TokenKind.CHAR):
            return Literal(self.previous().literal)
        if self.match(TokenKind.NEWLINE):
            return Literal('\n')
        if self.match(TokenKind.IDENTIFIER):
            name = self.previous()
            if self.check(TokenKind.PLUS) and self.check_next(TokenKind.PLUS):
                self.advance()
                self.advance()
                return increment(name)
            return Variable(name)
        if self.match(TokenKind.LPAREN):
            expr = self.expression()
            self.consume(TokenKind.RPAREN, "Expect ')' after expression.")
            return Grouping(expr)
        raise syntax_error(self.peek(), 'Expect expression.')

    # ------------------------------------------------------------------ helpers

    def match(self, *kinds: TokenKind) -> bool:
        if self.check(*kinds):
            self.advance()
            return True
        return False

    def check(self, *kinds: TokenKind) -> bool:
        if self.is_at_end():
            return False
        return self.peek().kind in kinds

    def check_next(self, kind: TokenKind) -> bool:
        if self.current + 1 >= len(self.tokens):
            return False
        return self.tokens[self.current + 1].kind is kind

    def consume(self, kind: TokenKind, message: str) -> Token:
        if self.check(kind):
            return self.advance()
        raise syntax_error(self.peek(), message)

    def advance(self) -> Token:
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def is_at_end(self) -> bool:
        return self.peek().kind is TokenKind.EOF

    def peek(self) -> Token:
        return self.tokens[self.current]

    def previous(self) -> Token:
        return self.tokens[self.current - 1]


def parse(tokens: List[Token]) -> Tuple[List[Stmt], Dict[str, DeclaredType]]:
    """Parse a token list into statements and the variable-type table."""
    return Parser(tokens).parse()
