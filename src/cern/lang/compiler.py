"""
cern Compiler Driver
====================

Orchestrates the complete compilation process:

    Source → Lex → Parse → Generate C++ → external C++ compiler

Usage
-----
Command line:
    $ cernc main.ce

Programmatic:
    >>> from cern.lang import compile_source
    >>> cpp = compile_source("var x = 1 return x")

Error Handling
--------------
Tokenizer and parser errors are fatal and surface unchanged as
CompileError subclasses; no partial result is returned. A failing
C++ compiler surfaces as ToolchainError.
"""

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from cern.errors import SourceLocation, ToolchainError
from cern.lang.arena import DEFAULT_CAPACITY, Arena
from cern.lang.ast import Program
from cern.lang.codegen import CppGenerator
from cern.lang.errors import TokenizeError
from cern.lang.lexer import Token, tokenize
from cern.lang.parser import Parser

logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        arena_capacity: Node slots available to one parse
        output_comments: Put a header comment naming the source in the C++
        cxx: C++ compiler executable
        cxx_flags: Flags passed to the C++ compiler before the sources
        cxx_timeout: Seconds to wait for the C++ compiler
    """
    arena_capacity: int = DEFAULT_CAPACITY
    output_comments: bool = True
    cxx: str = "g++"
    cxx_flags: list[str] = field(default_factory=lambda: ["-std=c++23", "-Wall", "-Wextra"])
    cxx_timeout: float = 120.0


@dataclass
class CompilerResult:
    """
    Result of compiling one source.

    Attributes:
        filename: Source filename
        tokens: Tokens produced by the lexer
        program: The parsed program (owns its arena)
        cpp_source: Generated C++ text
    """
    filename: str = ""
    tokens: list[Token] = field(default_factory=list)
    program: Optional[Program] = None
    cpp_source: str = ""

    @property
    def token_count(self) -> int:
        return len(self.tokens)

    @property
    def node_count(self) -> int:
        return len(self.program.arena) if self.program else 0


class Compiler:
    """
    cern compiler.

    Example:
        compiler = Compiler()
        result = compiler.compile_file("main.ce")
        compiler.build(result, "main.cpp", "app")
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile_source(self, source: str, filename: str = "<input>") -> CompilerResult:
        """
        Compile cern source to C++.

        Raises:
            CompileError: On any tokenize, parse or type error
        """
        result = CompilerResult(filename=filename)

        result.tokens = tokenize(source, filename)

        arena = Arena(self.options.arena_capacity)
        parser = Parser(result.tokens, filename, source.splitlines(), arena)
        result.program = parser.parse_program()

        generator = CppGenerator(
            source_name=filename if self.options.output_comments else None,
        )
        result.cpp_source = generator.generate(result.program)

        logger.debug(
            "%s: %d tokens, %d nodes, %d bytes of C++",
            filename, result.token_count, result.node_count, len(result.cpp_source),
        )
        return result

    def compile_file(self, filepath: str | Path) -> CompilerResult:
        """
        Compile a cern source file to C++.

        Raises:
            FileNotFoundError: If the source file does not exist
            TokenizeError: If the file is not valid UTF-8
            CompileError: On any tokenize, parse or type error
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        data = path.read_bytes()
        try:
            source = data.decode("utf-8")
        except UnicodeDecodeError as e:
            line_start = data.rfind(b"\n", 0, e.start) + 1
            location = SourceLocation(
                str(filepath),
                data.count(b"\n", 0, e.start) + 1,
                e.start - line_start + 1,
            )
            raise TokenizeError(
                f"source is not valid UTF-8 ({e.reason})",
                location=location,
            ) from e

        return self.compile_source(source, str(filepath))

    def build(
        self,
        result: CompilerResult,
        cpp_path: str | Path,
        executable: str | Path,
    ) -> Path:
        """
        Write the generated C++ and compile it into an executable.

        Args:
            result: A successful compilation result
            cpp_path: Where to write the C++ source
            executable: Output path of the executable

        Returns:
            Path to the executable

        Raises:
            ToolchainError: If the C++ compiler is missing, times out or fails
        """
        cpp_path = Path(cpp_path)
        executable = Path(executable)
        cpp_path.write_text(result.cpp_source, encoding="utf-8")

        cmd = [
            self.options.cxx,
            *self.options.cxx_flags,
            str(cpp_path),
            "-o",
            str(executable),
        ]
        logger.debug("running %s", " ".join(cmd))

        try:
            completed = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.options.cxx_timeout,
            )
        except FileNotFoundError:
            raise ToolchainError(
                f"C++ compiler '{self.options.cxx}' not found",
                command=cmd,
            )
        except subprocess.TimeoutExpired:
            raise ToolchainError(
                f"C++ compiler timed out after {self.options.cxx_timeout:g}s",
                command=cmd,
            )

        if completed.returncode != 0:
            raise ToolchainError(
                f"C++ compiler failed with exit code {completed.returncode}",
                command=cmd,
                return_code=completed.returncode,
                stderr=completed.stderr,
            )

        return executable


def compile_source(source: str, filename: str = "<input>") -> str:
    """Compile cern source and return the generated C++."""
    return Compiler().compile_source(source, filename).cpp_source
