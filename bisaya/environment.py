from typing import Any, Dict, Optional
from bisaya.errors import BisayaRuntimeError
from bisaya.tokens import Token
from bisaya.values import DeclaredType


class Environment:
    """The single variable store shared by a whole program run.

    Bisaya++ has no nested scopes: a variable declared inside a PUNDOK block
    stays visible after the block ends, so blocks never create a new
    Environment. Alongside the values it keeps the declared type of each
    variable, as collected by the parser.
    """
    def __init__(self, types: Optional[Dict[str, DeclaredType]] = None):
        self.values: Dict[str, Any] = {}
        self.types: Dict[str, DeclaredType] = dict(types or {})

    def get(self, name: Token) -> Any:
        if name.lexeme in self.values:
            return self.values[name.lexeme]
        raise BisayaRuntimeError(f"Undefined variable '{name.lexeme}'.", name.line)

    def set(self, name: str, value: Any):
        self.values[name] = value

    def declare(self, name: str, type_spec: DeclaredType, value: Any):
        # Redeclaring simply overwrites; there is only one scope.
        if value is None:
            value = self.default_value(type_spec)
        self.values[name] = value
        self.types[name] = type_spec

    def declared_type(self, name: str) -> Optional[DeclaredType]:
        return self.types.get(name)

    def default_value(self, type_spec: DeclaredType) -> Any:
        return type_spec.default_value()

    def __contains__(self, name: str) -> bool:
        return name in self.values
