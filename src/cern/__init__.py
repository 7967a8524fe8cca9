"""
cern - Compiler for the cern Language
=====================================

cern is a small imperative language with integer and character
arithmetic, variables, nested scopes and if/elif/else chains. This
package parses cern source into a typed syntax tree, emits it as C++,
and drives an external C++ compiler to produce an executable.

Main Components
---------------
- **lang**: lexer, arena-backed syntax tree, parser, C++ generator and
  compiler driver
- **cli**: the ``cernc`` command-line tool

Quick Start
-----------
    >>> from cern import Compiler
    >>> result = Compiler().compile_source("var x = 6 * 7 return x")
    >>> print(result.cpp_source)

Or from the terminal:
    $ cernc main.ce -o app
"""

__version__ = "1.0.0"

from cern.errors import CernError, SourceLocation, ToolchainError
from cern.lang import (
    Compiler,
    CompilerOptions,
    CompilerResult,
    CompileError,
    compile_source,
    parse_source,
)

__all__ = [
    "__version__",
    "CernError",
    "SourceLocation",
    "ToolchainError",
    "CompileError",
    "Compiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_source",
    "parse_source",
]
