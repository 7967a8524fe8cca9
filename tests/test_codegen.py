"""
C++ Code Generator Tests
========================

Tests for CppGenerator and the ASTPrinter debug dump.
"""

import pytest

from cern.lang.arena import Arena
from cern.lang.ast import ASTPrinter, ASTVisitor, Program, Stmt, Term, TermIdent
from cern.lang.codegen import CppGenerator, generate_cpp
from cern.lang.errors import ArenaError
from cern.lang.lexer import Token, TokenType
from cern.lang.parser import parse_source


def cpp(source, **kwargs):
    return CppGenerator(**kwargs).generate(parse_source(source, "test.ce"))


def body(source):
    """Generated lines between the braces of main, without the final return."""
    lines = cpp(source).splitlines()
    assert lines[:2] == ["int main()", "{"]
    assert lines[-2:] == ["    return 0;", "}"]
    return lines[2:-2]


class TestCppGenerator:

    def test_empty_program(self):
        assert cpp("") == "int main()\n{\n    return 0;\n}\n"

    def test_full_output(self):
        assert generate_cpp(parse_source("var x = 1 + 2 * 3\nreturn x")) == (
            "int main()\n"
            "{\n"
            "    int x = 1 + 2 * 3;\n"
            "    return x;\n"
            "    return 0;\n"
            "}\n"
        )

    def test_source_header(self):
        lines = cpp("return 1", source_name="hello.ce").splitlines()
        assert lines[0] == "// Generated by cernc from hello.ce"
        assert lines[1] == ""
        assert lines[2] == "int main()"

    def test_declaration_types(self):
        assert body("var a = 1\nvar b = 'c'\nvar d = a") == [
            "    int a = 1;",
            "    char b = 'c';",
            "    auto d = a;",
        ]

    def test_reassignment(self):
        assert body("x = x - 1") == ["    x = x - 1;"]

    def test_parentheses_are_preserved(self):
        assert body("return (1 + 2) * 3") == ["    return (1 + 2) * 3;"]

    def test_left_associative_output(self):
        assert body("return a - b - c") == ["    return a - b - c;"]
        assert body("return a - (b - c)") == ["    return a - (b - c);"]

    def test_scope(self):
        assert body("{ var x = 1 { x = 2 } }") == [
            "    {",
            "        int x = 1;",
            "        {",
            "            x = 2;",
            "        }",
            "    }",
        ]

    def test_if_chain(self):
        assert body("if (a) { x = 1 } elif (b) { x = 2 } else { x = 3 }") == [
            "    if (a)",
            "    {",
            "        x = 1;",
            "    }",
            "    else if (b)",
            "    {",
            "        x = 2;",
            "    }",
            "    else",
            "    {",
            "        x = 3;",
            "    }",
        ]

    def test_indent_width(self):
        lines = cpp("{ return 1 }", indent_width=2).splitlines()
        assert lines[2:5] == ["  {", "    return 1;", "  }"]

    def test_generator_is_reusable(self):
        generator = CppGenerator()
        first = generator.generate(parse_source("return 1"))
        second = generator.generate(parse_source("return 1"))
        assert first == second

    def test_long_elif_chain(self):
        source = "if (a) {}" + " elif (b) {}" * 1000 + " else {}"
        lines = generate_cpp(parse_source(source)).splitlines()
        assert lines.count("    else if (b)") == 1000
        assert lines.count("    else") == 1
        assert lines[-4:] == ["    {", "    }", "    return 0;", "}"]

    def test_wrapper_holding_wrong_variant(self):
        arena = Arena(8)
        ident = arena.construct(TermIdent, Token(TokenType.IDENTIFIER, "x"))
        term = arena.construct(Term, ident)
        stmt = arena.construct(Stmt, term)
        with pytest.raises(ArenaError, match="is a Term, not StmtReturn"):
            generate_cpp(Program((stmt,), arena))


class TestASTPrinter:

    def test_print(self):
        program = parse_source("var x = 1 + 2 * 3")
        assert ASTPrinter().print(program) == "\n".join([
            "Program",
            "  Var x : int",
            "    Add : int",
            "      IntLit 1",
            "      Mul : int",
            "        IntLit 2",
            "        IntLit 3",
        ])

    def test_print_statements(self):
        program = parse_source("if (c) { y = ('a') } else { return y }")
        assert ASTPrinter().print(program) == "\n".join([
            "Program",
            "  If",
            "    Ident c",
            "    Scope",
            "      Assign y",
            "        Paren",
            "          CharLit 'a'",
            "    Else",
            "      Scope",
            "        Return",
            "          Ident y",
        ])

    def test_print_elif(self):
        output = ASTPrinter().print(parse_source("if (a) {} elif (b - 1) {}"))
        assert "    Elif" in output.splitlines()
        assert "      Sub : none" in output.splitlines()

    def test_print_chain_links_as_siblings(self):
        output = ASTPrinter().print(parse_source("if (a) {} elif (b) {} elif (c) {} else {}"))
        assert output.splitlines()[1:] == [
            "  If",
            "    Ident a",
            "    Scope",
            "    Elif",
            "      Ident b",
            "      Scope",
            "    Elif",
            "      Ident c",
            "      Scope",
            "    Else",
            "      Scope",
        ]

    def test_print_long_elif_chain(self):
        source = "if (a) {}" + " elif (b) {}" * 1000
        lines = ASTPrinter().print(parse_source(source)).splitlines()
        assert lines.count("    Elif") == 1000


class TestASTVisitor:

    def test_unhandled_variant(self):
        program = parse_source("return 1")
        with pytest.raises(NotImplementedError, match="ASTVisitor has no visitor for Stmt"):
            ASTVisitor().visit_program(program)

    def test_custom_visitor(self):
        class IdentCollector(ASTVisitor):
            def __init__(self):
                super().__init__()
                self.names = []

            def generic_visit(self, node):
                for name in ("var", "expr", "lhs", "rhs"):
                    child = getattr(node, name, None)
                    if child is not None:
                        self.visit(child)

            def visit_TermIdent(self, node):
                self.names.append(node.token.value)

        collector = IdentCollector()
        collector.visit_program(parse_source("var z = a * (b + c)"))
        assert collector.names == ["a", "b", "c"]
