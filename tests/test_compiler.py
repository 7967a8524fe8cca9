"""
Compiler Driver Tests
=====================

Tests for Compiler, CompilerOptions and the external C++ build step.
The C++ compiler is never actually run: subprocess.run is replaced
with a fake that records the command line.
"""

import subprocess

import pytest

from cern import CernError, ToolchainError, compile_source as top_level_compile_source
from cern.lang.arena import DEFAULT_CAPACITY
from cern.lang.compiler import Compiler, CompilerOptions, CompilerResult, compile_source
from cern.lang.errors import (
    ArenaExhaustedError,
    CompileError,
    OperandTypeError,
    TokenizeError,
)


class FakeRun:
    """Stand-in for subprocess.run that records calls."""

    def __init__(self, returncode=0, stderr="", raises=None):
        self.returncode = returncode
        self.stderr = stderr
        self.raises = raises
        self.calls = []

    def __call__(self, cmd, **kwargs):
        self.calls.append((cmd, kwargs))
        if self.raises is not None:
            raise self.raises
        return subprocess.CompletedProcess(cmd, self.returncode, "", self.stderr)


@pytest.fixture
def compiled():
    options = CompilerOptions(output_comments=False)
    return Compiler(options).compile_source("var x = 2\nreturn x * 3", "main.ce")


class TestCompilerOptions:

    def test_defaults(self):
        options = CompilerOptions()
        assert options.arena_capacity == DEFAULT_CAPACITY
        assert options.output_comments is True
        assert options.cxx == "g++"
        assert "-std=c++23" in options.cxx_flags

    def test_flag_lists_are_independent(self):
        first = CompilerOptions()
        first.cxx_flags.append("-O2")
        assert "-O2" not in CompilerOptions().cxx_flags


class TestCompileSource:

    def test_result(self):
        result = Compiler().compile_source("var x = 1\nreturn x", "main.ce")
        assert isinstance(result, CompilerResult)
        assert result.filename == "main.ce"
        assert result.token_count == 6
        assert len(result.program.stmts) == 2
        assert result.node_count == len(result.program.arena)
        assert result.cpp_source.startswith("// Generated by cernc from main.ce\n")
        assert "    int x = 1;\n" in result.cpp_source

    def test_without_comments(self, compiled):
        assert compiled.cpp_source.startswith("int main()\n")

    def test_convenience_function(self):
        cpp = compile_source("return 4 / 2")
        assert "    return 4 / 2;\n" in cpp
        assert top_level_compile_source is compile_source

    def test_errors_propagate(self):
        with pytest.raises(OperandTypeError):
            Compiler().compile_source("return 1 - 'x'")
        with pytest.raises(CompileError):
            Compiler().compile_source("return @")

    def test_arena_capacity_option(self):
        compiler = Compiler(CompilerOptions(arena_capacity=3))
        with pytest.raises(ArenaExhaustedError):
            compiler.compile_source("var x = 1")

    def test_each_compile_gets_a_fresh_arena(self):
        compiler = Compiler(CompilerOptions(arena_capacity=5))
        compiler.compile_source("var x = 1")
        compiler.compile_source("var y = 2")


class TestCompileFile:

    def test_compile_file(self, tmp_path):
        source = tmp_path / "prog.ce"
        source.write_text("var a = 'z'\n", encoding="utf-8")
        result = Compiler().compile_file(source)
        assert result.filename == str(source)
        assert "    char a = 'z';\n" in result.cpp_source

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Compiler().compile_file(tmp_path / "missing.ce")

    def test_invalid_utf8(self, tmp_path):
        source = tmp_path / "latin1.ce"
        source.write_bytes(b"var x = 1\nreturn \xff")
        with pytest.raises(TokenizeError) as exc_info:
            Compiler().compile_file(source)
        assert exc_info.value.line == 2
        assert str(exc_info.value).startswith(f"{source}:2:8: error: source is not valid UTF-8")

    def test_diagnostic_names_file(self, tmp_path):
        source = tmp_path / "bad.ce"
        source.write_text("var x = 1\nreturn (x", encoding="utf-8")
        with pytest.raises(CompileError) as exc_info:
            Compiler().compile_file(source)
        assert str(exc_info.value).startswith(f"{source}:2:9: error: missing ')'")


class TestBuild:

    def test_build_runs_cxx(self, compiled, tmp_path, monkeypatch):
        fake = FakeRun()
        monkeypatch.setattr(subprocess, "run", fake)
        cpp_path = tmp_path / "main.cpp"
        exe_path = tmp_path / "app"

        executable = Compiler(CompilerOptions(cxx_timeout=5)).build(compiled, cpp_path, exe_path)

        assert executable == exe_path
        assert cpp_path.read_text(encoding="utf-8") == compiled.cpp_source
        cmd, kwargs = fake.calls[0]
        assert cmd == ["g++", "-std=c++23", "-Wall", "-Wextra", str(cpp_path), "-o", str(exe_path)]
        assert kwargs["timeout"] == 5
        assert kwargs["capture_output"] is True

    def test_custom_compiler(self, compiled, tmp_path, monkeypatch):
        fake = FakeRun()
        monkeypatch.setattr(subprocess, "run", fake)
        options = CompilerOptions(cxx="clang++", cxx_flags=["-O2"])
        Compiler(options).build(compiled, tmp_path / "m.cpp", tmp_path / "m")
        assert fake.calls[0][0][:2] == ["clang++", "-O2"]

    def test_compiler_failure(self, compiled, tmp_path, monkeypatch):
        monkeypatch.setattr(subprocess, "run", FakeRun(returncode=1, stderr="main.cpp:3: oops\n"))
        with pytest.raises(ToolchainError) as exc_info:
            Compiler().build(compiled, tmp_path / "main.cpp", tmp_path / "app")
        error = exc_info.value
        assert error.return_code == 1
        assert error.stderr == "main.cpp:3: oops\n"
        message = str(error)
        assert message.startswith("error: C++ compiler failed with exit code 1")
        assert "main.cpp:3: oops" in message

    def test_compiler_not_found(self, compiled, tmp_path, monkeypatch):
        monkeypatch.setattr(subprocess, "run", FakeRun(raises=FileNotFoundError("g++")))
        with pytest.raises(ToolchainError, match="C\\+\\+ compiler 'g\\+\\+' not found") as exc_info:
            Compiler().build(compiled, tmp_path / "main.cpp", tmp_path / "app")
        assert exc_info.value.return_code is None
        assert isinstance(exc_info.value, CernError)

    def test_compiler_timeout(self, compiled, tmp_path, monkeypatch):
        monkeypatch.setattr(
            subprocess, "run", FakeRun(raises=subprocess.TimeoutExpired("g++", 2)),
        )
        options = CompilerOptions(cxx_timeout=2)
        with pytest.raises(ToolchainError, match="timed out after 2s"):
            Compiler(options).build(compiled, tmp_path / "main.cpp", tmp_path / "app")
