"""
cern Lexer (Tokenizer)
======================

Converts cern source text into a list of tokens for the parser.

Token Categories
----------------
- Keywords: return, var, if, elif, else
- Identifiers: letter followed by letters, digits or underscores
- Integer literals: decimal digits
- Character literals: a single letter or digit in single quotes ('a')
- Operators and delimiters: = ( ) { } + - * /

Comments
--------
- Single-line: // comment
- Multi-line: /* comment */ (an unterminated one runs to end of input)

Example Usage
-------------
>>> from cern.lang.lexer import tokenize
>>> for token in tokenize("var x = 1"):
...     print(token)
Token(VAR, 1:1)
Token(IDENTIFIER, 'x', 1:5)
Token(EQUAL, 1:7)
Token(INTEGER_LITERAL, '1', 1:9)
"""

import logging
import string
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional

from cern.errors import SourceLocation
from cern.lang.errors import InvalidCharacterError, InvalidCharLiteralError

logger = logging.getLogger(__name__)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token kinds of the cern language."""

    # === Keywords ===
    RETURN = auto()             # return
    VAR = auto()                # var
    IF = auto()                 # if
    ELIF = auto()               # elif
    ELSE = auto()               # else

    # === Identifiers and Literals ===
    IDENTIFIER = auto()
    INTEGER_LITERAL = auto()
    CHAR_LITERAL = auto()

    # === Delimiters ===
    EQUAL = auto()              # =
    LEFT_PAREN = auto()         # (
    RIGHT_PAREN = auto()        # )
    LEFT_BRACE = auto()         # {
    RIGHT_BRACE = auto()        # }

    # === Arithmetic Operators ===
    PLUS = auto()               # +
    MINUS = auto()              # -
    STAR = auto()               # *
    SLASH = auto()              # /

    def describe(self) -> str:
        """Human-readable name used in diagnostics."""
        return _TOKEN_DESCRIPTIONS[self]


_TOKEN_DESCRIPTIONS = {
    TokenType.RETURN: "'return'",
    TokenType.VAR: "'var'",
    TokenType.IF: "'if'",
    TokenType.ELIF: "'elif'",
    TokenType.ELSE: "'else'",
    TokenType.IDENTIFIER: "identifier",
    TokenType.INTEGER_LITERAL: "integer literal",
    TokenType.CHAR_LITERAL: "char literal",
    TokenType.EQUAL: "'='",
    TokenType.LEFT_PAREN: "'('",
    TokenType.RIGHT_PAREN: "')'",
    TokenType.LEFT_BRACE: "'{'",
    TokenType.RIGHT_BRACE: "'}'",
    TokenType.PLUS: "'+'",
    TokenType.MINUS: "'-'",
    TokenType.STAR: "'*'",
    TokenType.SLASH: "'/'",
}

KEYWORDS = {
    "return": TokenType.RETURN,
    "var": TokenType.VAR,
    "if": TokenType.IF,
    "elif": TokenType.ELIF,
    "else": TokenType.ELSE,
}

SINGLE_CHAR_TOKENS = {
    "=": TokenType.EQUAL,
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
}

# Binding power of the binary operators; higher binds tighter.
BINARY_PRECEDENCE = {
    TokenType.PLUS: 0,
    TokenType.MINUS: 0,
    TokenType.STAR: 1,
    TokenType.SLASH: 1,
}

OPERATOR_SYMBOLS = {
    TokenType.PLUS: "+",
    TokenType.MINUS: "-",
    TokenType.STAR: "*",
    TokenType.SLASH: "/",
}


def binary_precedence(token_type: TokenType) -> Optional[int]:
    """Return the precedence of a binary operator, or None for other kinds."""
    return BINARY_PRECEDENCE.get(token_type)


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single lexical token.

    Attributes:
        type: The TokenType classification
        value: Literal text for identifiers and literals, None otherwise
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    type: TokenType
    value: Optional[str] = None
    line: int = 1
    column: int = 1
    filename: str = "<input>"

    def __repr__(self) -> str:
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Character scanner for cern source.

    Usage:
        lexer = Lexer(source, "main.ce")
        tokens = list(lexer.tokenize())
    """

    IDENT_START = string.ascii_letters
    IDENT_CHARS = string.ascii_letters + string.digits + "_"
    CHAR_LITERAL_CHARS = string.ascii_letters + string.digits

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename

        self._pos = 0
        self._line = 1
        self._column = 1
        self._line_start_pos = 0

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source code.

        Yields:
            Token objects in source order. No end-of-file marker is
            produced; the sequence simply ends.

        Raises:
            InvalidCharacterError: On a character that starts no token
            InvalidCharLiteralError: On a malformed character literal
        """
        while True:
            self._skip_whitespace_and_comments()
            if self._at_end():
                break
            yield self._scan_token()

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """Look ahead without advancing; empty string past end of source."""
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume one character, keeping line and column up to date."""
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    def _current_line_text(self) -> str:
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end]

    def _location(self, line: Optional[int] = None, column: Optional[int] = None) -> SourceLocation:
        return SourceLocation(self.filename, line or self._line, column or self._column)

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace_and_comments(self) -> None:
        while not self._at_end():
            char = self._peek()

            if char.isspace():
                self._advance()
                continue

            if char == "/" and self._peek(1) == "/":
                while not self._at_end() and self._peek() != "\n":
                    self._advance()
                continue

            if char == "/" and self._peek(1) == "*":
                self._skip_block_comment()
                continue

            break

    def _skip_block_comment(self) -> None:
        self._advance()
        self._advance()

        while not self._at_end():
            if self._peek() == "*" and self._peek(1) == "/":
                self._advance()
                self._advance()
                return
            self._advance()

        logger.debug("%s: block comment runs to end of input", self.filename)

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _make_token(
        self,
        token_type: TokenType,
        value: Optional[str],
        start_line: int,
        start_column: int,
    ) -> Token:
        return Token(
            type=token_type,
            value=value,
            line=start_line,
            column=start_column,
            filename=self.filename,
        )

    def _scan_token(self) -> Token:
        start_line = self._line
        start_column = self._column
        char = self._peek()

        if char in self.IDENT_START:
            return self._scan_word(start_line, start_column)

        if char in string.digits:
            return self._scan_integer(start_line, start_column)

        if char == "'":
            return self._scan_char(start_line, start_column)

        token_type = SINGLE_CHAR_TOKENS.get(char)
        if token_type is not None:
            self._advance()
            return self._make_token(token_type, None, start_line, start_column)

        raise InvalidCharacterError(
            char,
            location=self._location(start_line, start_column),
            source_line=self._current_line_text(),
        )

    def _scan_word(self, start_line: int, start_column: int) -> Token:
        start = self._pos
        while self._peek() and self._peek() in self.IDENT_CHARS:
            self._advance()
        word = self.source[start:self._pos]

        keyword = KEYWORDS.get(word)
        if keyword is not None:
            return self._make_token(keyword, None, start_line, start_column)
        return self._make_token(TokenType.IDENTIFIER, word, start_line, start_column)

    def _scan_integer(self, start_line: int, start_column: int) -> Token:
        start = self._pos
        while self._peek() and self._peek() in string.digits:
            self._advance()
        return self._make_token(
            TokenType.INTEGER_LITERAL,
            self.source[start:self._pos],
            start_line,
            start_column,
        )

    def _scan_char(self, start_line: int, start_column: int) -> Token:
        self._advance()  # opening '

        char = self._peek()
        if not char or char not in self.CHAR_LITERAL_CHARS:
            raise InvalidCharLiteralError(
                "expected a valid char",
                location=self._location(),
                source_line=self._current_line_text(),
            )
        self._advance()

        if self._peek() != "'":
            raise InvalidCharLiteralError(
                "expected `'`",
                location=self._location(),
                source_line=self._current_line_text(),
            )
        self._advance()

        return self._make_token(TokenType.CHAR_LITERAL, char, start_line, start_column)


def tokenize(source: str, filename: str = "<input>") -> list[Token]:
    """Tokenize a complete source string."""
    tokens = list(Lexer(source, filename).tokenize())
    logger.debug("%s: %d tokens", filename, len(tokens))
    return tokens
