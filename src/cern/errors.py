"""
cern Error Hierarchy
====================

This module defines the root of the exception hierarchy for the cern
toolchain. All exceptions inherit from CernError, allowing callers to
catch every toolchain error with a single except clause.

Exception Hierarchy
-------------------
CernError (base)
├── CompileError (front end, see cern.lang.errors)
│   ├── TokenizeError
│   ├── ParseError
│   └── ArenaError
└── ToolchainError - the external C++ compiler failed

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class CernError(Exception):
    """
    Base exception for all cern errors.

        try:
            compiler.compile_file("main.ce")
        except CernError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Toolchain Exceptions
# =============================================================================

class ToolchainError(CernError):
    """
    The external C++ compiler could not be run or rejected the output.

    Attributes:
        command: The command line that was executed
        return_code: Process exit status (None if it never started)
        stderr: Captured diagnostic output of the compiler
    """

    def __init__(
        self,
        message: str,
        command: Optional[list[str]] = None,
        return_code: Optional[int] = None,
        stderr: str = "",
    ):
        self.message = message
        self.command = command or []
        self.return_code = return_code
        self.stderr = stderr
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [f"error: {self.message}"]
        if self.command:
            parts.append(f"    command: {' '.join(self.command)}")
        if self.stderr:
            parts.append(self.stderr.rstrip())
        return "\n".join(parts)
