"""
cern Variable Types
===================

The type system is deliberately shallow. A value is known to be an
``int`` or a ``char``, or its type is unknown (``NONE``). Types come
from literals only: an identifier's type is derived from its token
kind at the point of use, which is always ``NONE``, because no symbol
table tracks declarations.
"""

from enum import Enum

from cern.lang.lexer import TokenType


class VarType(Enum):
    """Inferred type of a term or expression."""
    NONE = "none"
    INT = "int"
    CHAR = "char"

    def __str__(self) -> str:
        return self.value

    @property
    def cpp_name(self) -> str:
        """C++ spelling used when declaring a variable of this type."""
        return _CPP_NAMES[self]


_CPP_NAMES = {
    VarType.NONE: "auto",
    VarType.INT: "int",
    VarType.CHAR: "char",
}

_TOKEN_TYPES = {
    TokenType.INTEGER_LITERAL: VarType.INT,
    TokenType.CHAR_LITERAL: VarType.CHAR,
}


def to_var_type(token_type: TokenType) -> VarType:
    """Map a token kind to the type of the value it denotes."""
    return _TOKEN_TYPES.get(token_type, VarType.NONE)
