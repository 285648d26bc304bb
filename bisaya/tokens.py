from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict


class TokenKind(Enum):
    # Keywords
    SUGOD = auto()
    KATAPUSAN = auto()
    MUGNA = auto()
    NUMERO = auto()
    LETRA = auto()
    TINUOD = auto()
    TIPIK = auto()
    IPAKITA = auto()
    DAWAT = auto()
    KUNG = auto()
    KUNG_DILI = auto()   # KUNG DILI
    KUNG_WALA = auto()   # KUNG WALA
    PUNDOK = auto()
    ALANG_SA = auto()    # ALANG SA
    UG = auto()
    O = auto()
    DILI = auto()
    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()
    CONCAT = auto()         # &
    ASSIGN = auto()         # =
    EQUAL = auto()          # ==
    NOT_EQUAL = auto()      # <>
    LESS = auto()
    LESS_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    COMMA = auto()
    COLON = auto()
    NEWLINE = auto()        # $
    # Literals
    INTEGER = auto()
    DECIMAL = auto()
    STRING = auto()
    CHAR = auto()
    IDENTIFIER = auto()
    # Sentinel
    EOF = auto()


KEYWORDS: Dict[str, TokenKind] = {
    'SUGOD': TokenKind.SUGOD,
    'KATAPUSAN': TokenKind.KATAPUSAN,
    'MUGNA': TokenKind.MUGNA,
    'NUMERO': TokenKind.NUMERO,
    'LETRA': TokenKind.LETRA,
    'TINUOD': TokenKind.TINUOD,
    'TIPIK': TokenKind.TIPIK,
    'IPAKITA': TokenKind.IPAKITA,
    'DAWAT': TokenKind.DAWAT,
    'KUNG': TokenKind.KUNG,
    'PUNDOK': TokenKind.PUNDOK,
    'UG': TokenKind.UG,
    'O': TokenKind.O,
    'DILI': TokenKind.DILI,
}

# First word -> {second word: combined keyword}
TWO_WORD_KEYWORDS: Dict[str, Dict[str, TokenKind]] = {
    'KUNG': {'DILI': TokenKind.KUNG_DILI, 'WALA': TokenKind.KUNG_WALA},
    'ALANG': {'SA': TokenKind.ALANG_SA},
}

TYPE_KEYWORDS = (TokenKind.NUMERO, TokenKind.TIPIK, TokenKind.LETRA, TokenKind.TINUOD)


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    lexeme: str
    literal: Any
    line: int

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.lexeme!r}, line={self.line})"
