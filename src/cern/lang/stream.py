"""
Token stream with a cursor.

The parser never indexes the token list directly; it reads through a
TokenStream, which distinguishes the two ways a lookup can fail:

- ``peek``/``try_consume`` report absence with ``None`` and are used
  when trying alternatives.
- ``expect`` raises MissingConstructError, because the construct was
  required.
"""

from typing import Iterable, Optional

from cern.errors import SourceLocation
from cern.lang.errors import MissingConstructError
from cern.lang.lexer import Token, TokenType


class TokenStream:
    """
    Read-only, randomly indexable view over a token sequence.

    Attributes:
        filename: Source filename for diagnostics
        source_lines: Original source lines for diagnostic context
    """

    def __init__(
        self,
        tokens: Iterable[Token],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
    ):
        self._tokens: tuple[Token, ...] = tuple(tokens)
        self._index = 0
        self.filename = filename
        self.source_lines = source_lines or []

    def __len__(self) -> int:
        return len(self._tokens)

    @property
    def position(self) -> int:
        """Index of the token under the cursor."""
        return self._index

    @property
    def at_end(self) -> bool:
        return self._index >= len(self._tokens)

    def peek(self, offset: int = 0) -> Optional[Token]:
        """Return the token at cursor + offset, or None if out of range."""
        index = self._index + offset
        if index < 0 or index >= len(self._tokens):
            return None
        return self._tokens[index]

    def peek_type(self, token_type: TokenType, offset: int = 0) -> bool:
        token = self.peek(offset)
        return token is not None and token.type == token_type

    def consume(self) -> Token:
        """
        Return the token under the cursor and advance.

        Raises:
            IndexError: If the stream is exhausted (check ``peek`` first)
        """
        token = self._tokens[self._index]
        self._index += 1
        return token

    def try_consume(self, token_type: TokenType) -> Optional[Token]:
        """Consume the current token if it has the given kind."""
        if self.peek_type(token_type):
            return self.consume()
        return None

    def expect(self, token_type: TokenType, what: Optional[str] = None) -> Token:
        """
        Consume a token of the given kind or fail.

        Args:
            token_type: Required token kind
            what: Construct name for the diagnostic (defaults to the kind)

        Raises:
            MissingConstructError: If the current token is absent or differs
        """
        token = self.try_consume(token_type)
        if token is None:
            raise self.error(what or token_type.describe())
        return token

    def error_location(self) -> SourceLocation:
        """
        Location used for diagnostics: the current token, or the last one
        when the stream is exhausted.
        """
        token = self.peek()
        if token is None:
            token = self.peek(-1)
        if token is None:
            return SourceLocation(self.filename, 1, 1)
        return token.location

    def source_line(self, line: int) -> Optional[str]:
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    def error(self, expected: str) -> MissingConstructError:
        """Build the diagnostic for a required construct that is absent."""
        location = self.error_location()
        found = self.peek()
        hint = f"found {found.type.describe()}" if found is not None else "found end of input"
        return MissingConstructError(
            expected,
            location=location,
            source_line=self.source_line(location.line),
            hint=hint,
        )
