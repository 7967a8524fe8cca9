"""
cern Recursive Descent Parser
=============================

Turns a token stream into a syntax tree whose nodes live in an Arena.

Grammar (Simplified EBNF)
-------------------------
program     ::= statement*
statement   ::= 'return' expr
              | 'var' IDENTIFIER '=' expr
              | IDENTIFIER '=' expr
              | scope
              | 'if' '(' expr ')' scope if_pred?
scope       ::= '{' statement* '}'
if_pred     ::= 'elif' '(' expr ')' scope if_pred?
              | 'else' scope
expr        ::= term (binop term)*        (precedence climbing)
term        ::= INTEGER_LITERAL | CHAR_LITERAL | IDENTIFIER | '(' expr ')'

Operator Precedence
-------------------
| Operators | Precedence | Associativity |
|-----------|------------|---------------|
| + -       | 0          | left          |
| * /       | 1          | left          |

Absence vs. Failure
-------------------
``parse_term``, ``parse_expr``, ``parse_statement``, ``parse_scope`` and
``parse_if_predicate`` return None when their construct does not start
at the cursor. That is how alternatives are tried and how blocks end;
it is not an error. Once a construct has started, every required part
must follow, otherwise a CompileError is raised and the parse is over.
There is no error recovery.

Type Checking
-------------
Each binary fold compares its operand types. Two known (non-NONE)
types that differ raise OperandTypeError; an unknown operand is
accepted without a verdict and makes the result unknown as well.

Example Usage
-------------
>>> from cern.lang.parser import parse_source
>>> program = parse_source("var x = 1 + 2 * 3")
>>> len(program.stmts)
1
"""

import logging
from typing import Iterable, Optional

from cern.lang.arena import Arena, NodeRef
from cern.lang.ast import (
    BinExpr,
    BinExprAdd,
    BinExprDiv,
    BinExprMul,
    BinExprSub,
    Expr,
    IfPred,
    IfPredElif,
    IfPredElse,
    Program,
    Scope,
    Stmt,
    StmtAssign,
    StmtIf,
    StmtReturn,
    StmtVar,
    Term,
    TermCharLit,
    TermIdent,
    TermIntLit,
    TermParen,
)
from cern.lang.errors import OperandTypeError
from cern.lang.lexer import (
    OPERATOR_SYMBOLS,
    Token,
    TokenType,
    binary_precedence,
    tokenize,
)
from cern.lang.stream import TokenStream
from cern.lang.types import VarType, to_var_type

logger = logging.getLogger(__name__)

_BIN_EXPR_NODES = {
    TokenType.PLUS: BinExprAdd,
    TokenType.MINUS: BinExprSub,
    TokenType.STAR: BinExprMul,
    TokenType.SLASH: BinExprDiv,
}


class Parser:
    """
    Recursive descent parser for cern.

    A parser instance owns its token stream and arena for one parse.
    The arena is handed to the returned Program and must outlive it.

    Attributes:
        arena: Node store for the tree being built
    """

    def __init__(
        self,
        tokens: Iterable[Token],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
        arena: Optional[Arena] = None,
    ):
        """
        Args:
            tokens: Tokens from the lexer
            filename: Source filename for diagnostics
            source_lines: Original source lines for diagnostic context
            arena: Node store to allocate from (a fresh one by default)
        """
        self._tokens = TokenStream(tokens, filename, source_lines)
        self.arena = arena if arena is not None else Arena()

    @property
    def tokens(self) -> TokenStream:
        return self._tokens

    # =========================================================================
    # Expressions
    # =========================================================================

    def parse_term(self) -> Optional[NodeRef]:
        """Parse a literal, identifier or parenthesized expression."""
        if int_lit := self._tokens.try_consume(TokenType.INTEGER_LITERAL):
            term_int_lit = self.arena.construct(TermIntLit, int_lit)
            return self.arena.construct(Term, term_int_lit, VarType.INT)

        if char_lit := self._tokens.try_consume(TokenType.CHAR_LITERAL):
            term_char_lit = self.arena.construct(TermCharLit, char_lit)
            return self.arena.construct(Term, term_char_lit, VarType.CHAR)

        if ident := self._tokens.try_consume(TokenType.IDENTIFIER):
            term_ident = self.arena.construct(TermIdent, ident)
            return self.arena.construct(Term, term_ident, to_var_type(ident.type))

        if self._tokens.try_consume(TokenType.LEFT_PAREN):
            expr = self.parse_expr()
            if expr is None:
                raise self._tokens.error("expression")
            self._tokens.expect(TokenType.RIGHT_PAREN)

            term_paren = self.arena.construct(TermParen, expr)
            return self.arena.construct(Term, term_paren, self.arena[expr].type)

        return None

    def parse_expr(self, min_prec: int = 0) -> Optional[NodeRef]:
        """
        Parse an expression by precedence climbing.

        Only operators binding at least ``min_prec`` are folded at this
        level; the right operand of an operator with precedence p is
        parsed with ``min_prec = p + 1``, which makes equal-precedence
        operators associate to the left.

        The running left operand keeps one slot for the whole loop. Each
        fold moves its current content to a fresh Expr slot, which
        becomes the left child, and rewrites the running slot to the new
        binary node.
        """
        term = self.parse_term()
        if term is None:
            return None

        expr = self.arena.construct(Expr, term, self.arena[term].type)

        while True:
            op = self._tokens.peek()
            if op is None:
                break
            prec = binary_precedence(op.type)
            if prec is None or prec < min_prec:
                break
            self._tokens.consume()

            rhs = self.parse_expr(prec + 1)
            if rhs is None:
                raise self._tokens.error("expression")

            lhs_node = self.arena[expr]
            rhs_node = self.arena[rhs]
            result_type = self._check_operands(op, lhs_node.type, rhs_node.type)

            lhs = self.arena.construct(Expr, lhs_node.var, lhs_node.type)
            operation = self.arena.construct(_BIN_EXPR_NODES[op.type], lhs, rhs)
            bin_expr = self.arena.construct(BinExpr, operation)
            self.arena.rewrite(expr, Expr(bin_expr, result_type))

        return expr

    def _check_operands(self, op: Token, left: VarType, right: VarType) -> VarType:
        """Return the type of ``left op right`` or raise on a mismatch."""
        if left is VarType.NONE or right is VarType.NONE:
            return VarType.NONE
        if left is not right:
            raise OperandTypeError(
                str(left),
                OPERATOR_SYMBOLS[op.type],
                str(right),
                location=op.location,
                source_line=self._tokens.source_line(op.line),
            )
        return left

    # =========================================================================
    # Statements
    # =========================================================================

    def parse_scope(self) -> Optional[NodeRef]:
        """Parse ``{ statement* }``; None if no '{' is present."""
        if not self._tokens.try_consume(TokenType.LEFT_BRACE):
            return None

        stmts = []
        while (stmt := self.parse_statement()) is not None:
            stmts.append(stmt)

        self._tokens.expect(TokenType.RIGHT_BRACE)
        return self.arena.construct(Scope, tuple(stmts))

    def parse_if_predicate(self) -> Optional[NodeRef]:
        """
        Parse the ``elif``/``else`` links following an if, if present.

        Links are read in a loop and chained from the last one back to
        the first, so a chain of any length costs no stack depth and
        every link is created after the link it points to.

        Returns:
            Ref to the first IfPred of the chain, or None
        """
        links = []
        while self._tokens.try_consume(TokenType.ELIF):
            self._tokens.expect(TokenType.LEFT_PAREN)
            expr = self._require_expr("expression")
            self._tokens.expect(TokenType.RIGHT_PAREN)
            links.append((expr, self._require_scope()))

        pred = None
        if self._tokens.try_consume(TokenType.ELSE):
            scope = self._require_scope()
            else_pred = self.arena.construct(IfPredElse, scope)
            pred = self.arena.construct(IfPred, else_pred)

        for expr, scope in reversed(links):
            elif_pred = self.arena.construct(IfPredElif, expr, scope, pred)
            pred = self.arena.construct(IfPred, elif_pred)

        return pred

    def parse_statement(self) -> Optional[NodeRef]:
        """
        Parse one statement.

        Alternatives are tried in a fixed order: return, declaration,
        reassignment, scope, if. Returns None when none of them starts
        at the cursor.
        """
        tokens = self._tokens
        if tokens.peek() is None:
            return None

        if tokens.try_consume(TokenType.RETURN):
            expr = self._require_expr("return value")
            return self.arena.construct(Stmt, self.arena.construct(StmtReturn, expr))

        if (tokens.peek_type(TokenType.VAR)
                and tokens.peek_type(TokenType.IDENTIFIER, 1)
                and tokens.peek_type(TokenType.EQUAL, 2)):
            tokens.consume()
            ident = tokens.consume()
            tokens.consume()
            expr = self._require_expr("expression")
            return self.arena.construct(Stmt, self.arena.construct(StmtVar, ident, expr))

        if tokens.peek_type(TokenType.IDENTIFIER) and tokens.peek_type(TokenType.EQUAL, 1):
            ident = tokens.consume()
            tokens.consume()
            expr = self._require_expr("expression")
            return self.arena.construct(Stmt, self.arena.construct(StmtAssign, ident, expr))

        if tokens.peek_type(TokenType.LEFT_BRACE):
            return self.arena.construct(Stmt, self._require_scope())

        if tokens.try_consume(TokenType.IF):
            tokens.expect(TokenType.LEFT_PAREN)
            expr = self._require_expr("expression")
            tokens.expect(TokenType.RIGHT_PAREN)
            scope = self._require_scope()
            pred = self.parse_if_predicate()
            return self.arena.construct(Stmt, self.arena.construct(StmtIf, expr, scope, pred))

        return None

    def parse_program(self) -> Program:
        """
        Parse statements until the token stream is exhausted.

        Raises:
            CompileError: If tokens remain that start no statement, or
                any statement is malformed
        """
        stmts = []
        while not self._tokens.at_end:
            stmt = self.parse_statement()
            if stmt is None:
                raise self._tokens.error("statement")
            stmts.append(stmt)

        logger.debug(
            "%s: parsed %d statements into %d nodes",
            self._tokens.filename, len(stmts), len(self.arena),
        )
        return Program(tuple(stmts), self.arena)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _require_expr(self, what: str) -> NodeRef:
        expr = self.parse_expr()
        if expr is None:
            raise self._tokens.error(what)
        return expr

    def _require_scope(self) -> NodeRef:
        scope = self.parse_scope()
        if scope is None:
            raise self._tokens.error("scope")
        return scope


def parse_source(
    source: str,
    filename: str = "<input>",
    arena: Optional[Arena] = None,
) -> Program:
    """Tokenize and parse a complete source string."""
    tokens = tokenize(source, filename)
    return Parser(tokens, filename, source.splitlines(), arena).parse_program()
