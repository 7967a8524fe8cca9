"""
C++ Code Generator for cern
===========================

Emits a C++ translation unit from a parsed Program. The whole program
becomes the body of ``main``; the result is handed to an external C++
compiler by the driver.

Translation
-----------
| cern                      | C++                               |
|---------------------------|-----------------------------------|
| return e                  | return e;                         |
| var x = e                 | int x = e;  (auto/char by type)   |
| x = e                     | x = e;                            |
| { ... }                   | { ... }                           |
| if (c) {} elif (d) {}     | if (c) {} else if (d) {}          |
| else {}                   | else {}                           |
| 'a'                       | 'a'                               |

Operator precedence of + - * / is the same in both languages, and the
tree keeps explicit parentheses as TermParen nodes, so expressions are
emitted without extra parentheses.

A trailing ``return 0;`` makes falling off the end of the program a
successful exit.

Example output:
    int main()
    {
        int x = 1 + 2 * 3;
        return x;
        return 0;
    }
"""

import logging
from typing import Optional

from cern.lang.ast import (
    ASTVisitor,
    BIN_EXPR_SYMBOLS,
    BIN_EXPR_VARIANTS,
    BinExpr,
    Expr,
    IfPredElif,
    Program,
    STMT_VARIANTS,
    Scope,
    Stmt,
    StmtAssign,
    StmtIf,
    StmtReturn,
    StmtVar,
    TERM_VARIANTS,
    Term,
    TermCharLit,
    TermIdent,
    TermIntLit,
    TermParen,
    iter_if_chain,
)

logger = logging.getLogger(__name__)


class CppGenerator(ASTVisitor):
    """
    Generates C++ source from a cern Program.

    Statement visitors append lines to the output; expression visitors
    return the C++ text of the expression.

    Attributes:
        indent_width: Spaces per nesting level
        source_name: Optional source filename noted in a header comment
    """

    def __init__(self, indent_width: int = 4, source_name: Optional[str] = None):
        super().__init__()
        self.indent_width = indent_width
        self.source_name = source_name
        self._output: list[str] = []
        self._indent_level = 0

    def generate(self, program: Program) -> str:
        """
        Generate a complete C++ translation unit.

        Args:
            program: The parsed program

        Returns:
            C++ source text ending in a newline
        """
        self._output = []
        self._indent_level = 0

        if self.source_name:
            self._emit(f"// Generated by cernc from {self.source_name}")
            self._emit("")

        self._emit("int main()")
        self._emit("{")
        self._indent_level += 1
        self.visit_program(program)
        self._emit("return 0;")
        self._indent_level -= 1
        self._emit("}")

        logger.debug("generated %d lines of C++", len(self._output))
        return "\n".join(self._output) + "\n"

    def _emit(self, text: str) -> None:
        if text:
            self._output.append(" " * (self.indent_width * self._indent_level) + text)
        else:
            self._output.append("")

    # =========================================================================
    # Statements
    # =========================================================================

    def visit_Stmt(self, node: Stmt) -> None:
        self.visit(node.var, STMT_VARIANTS)

    def visit_StmtReturn(self, node: StmtReturn) -> None:
        self._emit(f"return {self.visit(node.expr)};")

    def visit_StmtVar(self, node: StmtVar) -> None:
        expr = self.arena[node.expr]
        self._emit(f"{expr.type.cpp_name} {node.ident.value} = {self.visit(node.expr)};")

    def visit_StmtAssign(self, node: StmtAssign) -> None:
        self._emit(f"{node.ident.value} = {self.visit(node.expr)};")

    def visit_Scope(self, node: Scope) -> None:
        self._emit("{")
        self._indent_level += 1
        for ref in node.stmts:
            self.visit(ref)
        self._indent_level -= 1
        self._emit("}")

    def visit_StmtIf(self, node: StmtIf) -> None:
        self._emit(f"if ({self.visit(node.expr)})")
        self.visit(node.scope)
        for link in iter_if_chain(self.arena, node.pred):
            if isinstance(link, IfPredElif):
                self._emit(f"else if ({self.visit(link.expr)})")
            else:
                self._emit("else")
            self.visit(link.scope)

    # =========================================================================
    # Expressions
    # =========================================================================

    def visit_Expr(self, node: Expr) -> str:
        return self.visit(node.var, (Term, BinExpr))

    def visit_BinExpr(self, node: BinExpr) -> str:
        operation = self.arena.get(node.var, BIN_EXPR_VARIANTS)
        symbol = BIN_EXPR_SYMBOLS[type(operation)]
        return f"{self.visit(operation.lhs)} {symbol} {self.visit(operation.rhs)}"

    def visit_Term(self, node: Term) -> str:
        return self.visit(node.var, TERM_VARIANTS)

    def visit_TermIntLit(self, node: TermIntLit) -> str:
        return node.token.value

    def visit_TermCharLit(self, node: TermCharLit) -> str:
        return f"'{node.token.value}'"

    def visit_TermIdent(self, node: TermIdent) -> str:
        return node.token.value

    def visit_TermParen(self, node: TermParen) -> str:
        return f"({self.visit(node.expr)})"


def generate_cpp(program: Program, source_name: Optional[str] = None) -> str:
    """Generate C++ source for a program with default settings."""
    return CppGenerator(source_name=source_name).generate(program)
