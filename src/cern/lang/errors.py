"""
cern Front-End Error Hierarchy
==============================

Every condition that makes a source file uncompilable is a subclass of
CompileError. These errors are fatal: they are raised at the point of
detection and never caught inside the tokenizer or parser, so a parse
either returns a complete tree or nothing at all. The driver (or the
CLI) reports the message and exits non-zero.

Exception Hierarchy
-------------------
CompileError
├── TokenizeError
│   ├── InvalidCharacterError - character outside the language
│   └── InvalidCharLiteralError - malformed 'x' literal
├── ParseError
│   ├── MissingConstructError - a required token/expression/scope is absent
│   └── OperandTypeError - binary operator applied to mismatched types
└── ArenaError - invalid node reference
    └── ArenaExhaustedError - node store capacity reached

Example:
    main.ce:3:12: error: missing expression
        var x = (1 +
                   ^
"""

from typing import Optional

from cern.errors import CernError, SourceLocation


# =============================================================================
# Base Front-End Exception
# =============================================================================

class CompileError(CernError):
    """
    Base exception for all front-end errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The actual source text at the error location
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    @property
    def line(self) -> Optional[int]:
        """Source line of the error, if known."""
        return self.location.line if self.location else None

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

            main.ce:5:9: error: wrong operation: int + char
                return 1 + 'a'
                         ^
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Tokenizer Errors
# =============================================================================

class TokenizeError(CompileError):
    """Source text that cannot be split into tokens."""
    pass


class InvalidCharacterError(TokenizeError):
    """A character that starts no token of the language."""

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"invalid token `{char}`",
            location=location,
            source_line=source_line,
        )


class InvalidCharLiteralError(TokenizeError):
    """
    Malformed character literal.

    A character literal is exactly one letter or digit between single
    quotes: 'a', '7'.
    """
    pass


# =============================================================================
# Parser Errors
# =============================================================================

class ParseError(CompileError):
    """Token sequence that does not form a program."""
    pass


class MissingConstructError(ParseError):
    """
    A required token or sub-construct is absent.

    Raised for missing delimiters ("')'"), missing expressions after an
    operator or '=', missing scopes after 'if'/'elif'/'else', and for
    leftover tokens that start no statement.

    Attributes:
        expected: Name of the construct that was required
    """

    def __init__(
        self,
        expected: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.expected = expected
        super().__init__(
            f"missing {expected}",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class OperandTypeError(ParseError):
    """
    Arithmetic between operands of two different known types.

    Attributes:
        left_type: Name of the left operand type
        operator: The operator symbol
        right_type: Name of the right operand type
    """

    def __init__(
        self,
        left_type: str,
        operator: str,
        right_type: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.left_type = left_type
        self.operator = operator
        self.right_type = right_type
        super().__init__(
            f"wrong operation: {left_type} {operator} {right_type}",
            location=location,
            hint=f"both operands of '{operator}' must have the same type",
            source_line=source_line,
        )


# =============================================================================
# Arena Errors
# =============================================================================

class ArenaError(CompileError):
    """Invalid access to the node arena."""
    pass


class ArenaExhaustedError(ArenaError):
    """The arena has no free slot left."""

    def __init__(self, capacity: int):
        self.capacity = capacity
        super().__init__(
            f"node arena exhausted ({capacity} slots)",
            hint="the program is too large for the configured arena capacity",
        )
