"""Runtime values and declared types for Bisaya++.

A runtime value is one of four kinds:

* Number - a Python ``float``; integer and decimal literals share it.
* Text   - a Python ``str``.
* Char   - a ``CharVal`` holding exactly one character.
* Nil    - the ``NIL`` marker.

Logical results are not a kind of their own. They are the two Text values
``"OO"`` and ``"DILI"``, and truthiness is defined so that only ``"OO"`` is
true among texts. This module also holds the declared types a variable can
be given with ``MUGNA`` together with their default values and the rules for
checking initializers and converting console input.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any


TRUE_TEXT = 'OO'
FALSE_TEXT = 'DILI'


@dataclass(frozen=True)
class NilVal:
    """Marker object for the absence of a value."""
    def __repr__(self) -> str:
        return 'nil'


NIL = NilVal()


@dataclass(frozen=True)
class CharVal:
    """A single character, as written with a ``'x'`` literal."""
    char: str

    def __post_init__(self):
        if len(self.char) != 1:
            raise ValueError(f"a character value holds exactly one character, got {self.char!r}")

    def __repr__(self) -> str:
        return f"CharVal({self.char!r})"


class ValueKind(Enum):
    NUMBER = 'Number'
    TEXT = 'Text'
    CHAR = 'Char'
    NIL = 'Nil'


def kind_of(value: Any) -> ValueKind:
    if isinstance(value, float):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, CharVal):
        return ValueKind.CHAR
    if isinstance(value, NilVal):
        return ValueKind.NIL
    raise TypeError(f"not a Bisaya++ value: {value!r}")


def logical(flag: bool) -> str:
    """Render a Python truth value as the language's logical text."""
    return TRUE_TEXT if flag else FALSE_TEXT


def is_truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value == TRUE_TEXT
    if isinstance(value, float):
        return value != 0.0
    if isinstance(value, CharVal):
        return True
    return False


def java_exponent(text: str) -> str:
    """Rewrite ``1e+16`` style float text as ``1.0E16``."""
    mantissa, exponent = text.split('e')
    if '.' not in mantissa:
        mantissa += '.0'
    return f"{mantissa}E{int(exponent)}"


def to_string(value: Any) -> str:
    """Convert a value to the text that ``IPAKITA`` and ``&`` produce."""
    if isinstance(value, float):
        text = repr(value)
        if 'e' in text:
            return java_exponent(text)
        if text.endswith('.0'):
            text = text[:-2]
        return text
    if isinstance(value, str):
        return value
    if isinstance(value, CharVal):
        return value.char
    return 'nil'


def values_equal(a: Any, b: Any) -> bool:
    # Different kinds never compare equal; 5 and "5" are distinct.
    if kind_of(a) is not kind_of(b):
        return False
    return a == b


class DeclaredType(Enum):
    """The type keyword given to a variable at its ``MUGNA`` declaration."""
    NUMERO = 'NUMERO'
    TIPIK = 'TIPIK'
    LETRA = 'LETRA'
    TINUOD = 'TINUOD'

    @property
    def is_numeric(self) -> bool:
        return self in (DeclaredType.NUMERO, DeclaredType.TIPIK)

    def default_value(self) -> Any:
        if self.is_numeric:
            return 0.0
        if self is DeclaredType.TINUOD:
            return FALSE_TEXT
        # LETRA starts out empty, which is Text rather than a Char.
        return ''


def check_initializer(declared: DeclaredType, value: Any) -> bool:
    """Check a literal initializer against the declared type.

    Returns True when the value fits and raises TypeError with a
    descriptive message otherwise; the parser turns that into a parse error.
    """
    if declared is DeclaredType.LETRA:
        if isinstance(value, CharVal):
            return True
        raise TypeError('LETRA can only be assigned a character.')
    if declared.is_numeric:
        if isinstance(value, float):
            return True
        raise TypeError('NUMERO or TIPIK can only be assigned a number.')
    if isinstance(value, str) and value in (TRUE_TEXT, FALSE_TEXT):
        return True
    raise TypeError("TINUOD must be 'OO' or 'DILI'.")


def convert_input(text: str, declared: Any) -> Any:
    """Convert one trimmed field of console input for a variable.

    ``declared`` is the variable's DeclaredType, or None when the variable
    was never declared with a type, in which case the raw text is kept.
    Raises ValueError when the field does not fit the declared type.
    """
    if declared is None:
        return text
    if declared.is_numeric:
        try:
            if '_' in text:
                raise ValueError(text)
            number = float(text)
            if not math.isfinite(number):
                raise ValueError(text)
        except ValueError:
            raise ValueError(f"expected a number for {declared.value}, got {text!r}")
        return number
    if declared is DeclaredType.LETRA:
        if len(text) != 1:
            raise ValueError(f"expected a single character for LETRA, got {text!r}")
        return CharVal(text)
    normalized = text.upper()
    if normalized not in (TRUE_TEXT, FALSE_TEXT):
        raise ValueError(f"expected OO or DILI for TINUOD, got {text!r}")
    return normalized
