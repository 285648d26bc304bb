from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class ErrorKind(Enum):
    LEXICAL = 'Lexical'
    PARSE = 'Parse'
    RUNTIME = 'Runtime'


@dataclass(frozen=True)
class ErrorInfo:
    """A Bisaya++ failure: which tier raised it, what went wrong and where."""
    kind: ErrorKind
    message: str
    line: Optional[int] = None

    def __str__(self) -> str:
        if self.line is None:
            return f"[{self.kind.value} error] {self.message}"
        return f"[{self.kind.value} error] line {self.line}: {self.message}"


class BisayaError(Exception):
    """Exception type used to propagate Bisaya++ errors to the caller."""
    def __init__(self, err: ErrorInfo):
        super().__init__(str(err))
        self.err = err


class LexError(BisayaError):
    def __init__(self, message: str, line: int):
        super().__init__(ErrorInfo(ErrorKind.LEXICAL, message, line))


class ParseError(BisayaError):
    """Raised once parsing is over; `errors` holds every recorded problem."""
    def __init__(self, errors: List[ErrorInfo]):
        super().__init__(errors[0])
        self.errors = list(errors)

    def __str__(self) -> str:
        return '\n'.join(str(e) for e in self.errors)


class BisayaRuntimeError(BisayaError):
    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(ErrorInfo(ErrorKind.RUNTIME, message, line))
