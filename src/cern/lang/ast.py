"""
cern Syntax Tree
================

Node variants of the cern syntax tree.

Every node kind is its own frozen dataclass. There is no node base
class: a variant's class is its tag, and a wrapper node (Term, Expr,
BinExpr, Stmt, IfPred) holds a reference to exactly one of its
variants. Children are NodeRefs into the Arena that owns the tree;
resolve them with ``arena[ref]``.

Node Variants
-------------
Program                     - top-level statements + owning arena
Stmt -> one of
    StmtReturn              - return <expr>
    StmtVar                 - var <ident> = <expr>
    StmtAssign              - <ident> = <expr>
    Scope                   - { <stmt>* }
    StmtIf                  - if (<expr>) <scope> [IfPred]
IfPred -> one of
    IfPredElif              - elif (<expr>) <scope> [IfPred]
    IfPredElse              - else <scope>
Expr -> one of
    Term -> one of
        TermIntLit          - 42
        TermCharLit         - 'a'
        TermIdent           - x
        TermParen           - (<expr>)
    BinExpr -> one of
        BinExprAdd, BinExprSub, BinExprMul, BinExprDiv

Design Notes
------------
- Nodes are immutable. The only sanctioned change is Arena.rewrite,
  which the parser uses to grow a left-associative chain in place.
- Term and Expr carry an inferred VarType; NONE means "unknown".
"""

from dataclasses import dataclass
from typing import Any, Iterator, Optional, Union

from cern.lang.arena import Arena, NodeRef
from cern.lang.lexer import Token
from cern.lang.types import VarType


# =============================================================================
# Terms
# =============================================================================

@dataclass(frozen=True)
class TermIntLit:
    token: Token


@dataclass(frozen=True)
class TermCharLit:
    token: Token


@dataclass(frozen=True)
class TermIdent:
    token: Token


@dataclass(frozen=True)
class TermParen:
    expr: NodeRef


@dataclass(frozen=True)
class Term:
    """
    Smallest expression unit.

    Attributes:
        var: Ref to a TermIntLit, TermCharLit, TermIdent or TermParen
        type: Inferred type of the term
    """
    var: NodeRef
    type: VarType = VarType.NONE


# =============================================================================
# Binary Expressions
# =============================================================================

@dataclass(frozen=True)
class BinExprAdd:
    lhs: NodeRef
    rhs: NodeRef


@dataclass(frozen=True)
class BinExprSub:
    lhs: NodeRef
    rhs: NodeRef


@dataclass(frozen=True)
class BinExprMul:
    lhs: NodeRef
    rhs: NodeRef


@dataclass(frozen=True)
class BinExprDiv:
    lhs: NodeRef
    rhs: NodeRef


@dataclass(frozen=True)
class BinExpr:
    """Binary operation; ``var`` refers to one of the BinExpr* variants."""
    var: NodeRef


@dataclass(frozen=True)
class Expr:
    """
    Expression node.

    Attributes:
        var: Ref to a Term or a BinExpr
        type: Type propagated from the operands
    """
    var: NodeRef
    type: VarType = VarType.NONE


# =============================================================================
# Statements
# =============================================================================

@dataclass(frozen=True)
class Scope:
    """Block of statements, in execution order."""
    stmts: tuple[NodeRef, ...] = ()


@dataclass(frozen=True)
class StmtReturn:
    expr: NodeRef


@dataclass(frozen=True)
class StmtVar:
    """Declaration with initializer: ``var ident = expr``."""
    ident: Token
    expr: NodeRef


@dataclass(frozen=True)
class StmtAssign:
    """Reassignment of an existing name: ``ident = expr``."""
    ident: Token
    expr: NodeRef


@dataclass(frozen=True)
class IfPredElif:
    expr: NodeRef
    scope: NodeRef
    pred: Optional[NodeRef] = None


@dataclass(frozen=True)
class IfPredElse:
    scope: NodeRef


@dataclass(frozen=True)
class IfPred:
    """Link of an if-chain; ``var`` refers to an IfPredElif or IfPredElse."""
    var: NodeRef


@dataclass(frozen=True)
class StmtIf:
    expr: NodeRef
    scope: NodeRef
    pred: Optional[NodeRef] = None


@dataclass(frozen=True)
class Stmt:
    """Statement; ``var`` refers to one of the statement variants."""
    var: NodeRef


@dataclass(frozen=True)
class Program:
    """
    Root of a parsed program.

    The program keeps its arena alive: every ref in the tree resolves
    through ``program.arena``.

    Attributes:
        stmts: Top-level Stmt refs in source order
        arena: The arena that owns every node of this tree
    """
    stmts: tuple[NodeRef, ...]
    arena: Arena

    def resolve(self, ref: NodeRef) -> Any:
        return self.arena[ref]


IfPredVariant = Union[IfPredElif, IfPredElse]

TERM_VARIANTS = (TermIntLit, TermCharLit, TermIdent, TermParen)
BIN_EXPR_VARIANTS = (BinExprAdd, BinExprSub, BinExprMul, BinExprDiv)
STMT_VARIANTS = (StmtReturn, StmtVar, StmtAssign, Scope, StmtIf)
IF_PRED_VARIANTS = (IfPredElif, IfPredElse)

BIN_EXPR_SYMBOLS = {
    BinExprAdd: "+",
    BinExprSub: "-",
    BinExprMul: "*",
    BinExprDiv: "/",
}

BIN_EXPR_NAMES = {
    BinExprAdd: "Add",
    BinExprSub: "Sub",
    BinExprMul: "Mul",
    BinExprDiv: "Div",
}


def iter_if_chain(arena: Arena, pred: Optional[NodeRef]) -> Iterator[IfPredVariant]:
    """
    Yield the elif/else links of an if-chain in source order.

    The chain is followed with a loop, so its length is not bounded by
    the interpreter's recursion limit.
    """
    while pred is not None:
        link = arena.get(arena.get(pred, IfPred).var, IF_PRED_VARIANTS)
        yield link
        pred = link.pred if isinstance(link, IfPredElif) else None


# =============================================================================
# Visitor Pattern for AST Traversal
# =============================================================================

class ASTVisitor:
    """
    Base class for tree visitors.

    ``visit(ref)`` resolves the ref in the arena and dispatches on the
    node's variant to ``visit_<VariantName>``. Subclasses must handle
    every variant they can reach; an unhandled one raises
    NotImplementedError rather than being silently skipped.

    Usage:
        class Counter(ASTVisitor):
            def visit_TermIdent(self, node):
                ...

        Counter(program.arena).visit(ref)
    """

    def __init__(self, arena: Optional[Arena] = None):
        self.arena = arena

    def visit(self, ref: NodeRef, expected: Optional[tuple[type, ...]] = None) -> Any:
        """
        Dispatch on the node at ``ref``.

        Args:
            ref: Node to visit
            expected: Variants a wrapper's ``var`` may hold; anything
                else raises ArenaError
        """
        node = self.arena.get(ref, expected)
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, None)
        if visitor is None:
            return self.generic_visit(node)
        return visitor(node)

    def visit_program(self, program: Program) -> list[Any]:
        """Visit every top-level statement of a program."""
        self.arena = program.arena
        return [self.visit(ref) for ref in program.stmts]

    def generic_visit(self, node: Any) -> Any:
        """Exhaustiveness guard: every reachable variant needs its own visitor."""
        raise NotImplementedError(
            f"{self.__class__.__name__} has no visitor for {node.__class__.__name__}"
        )


class ASTPrinter(ASTVisitor):
    """
    Pretty printer for tree debugging.

    Wrapper nodes (Stmt, Expr, Term, BinExpr, IfPred) are folded into
    their variant so the dump shows the shape of the program:

        Program
          Var x : int
            Add : int
              IntLit 1
              Mul : int
                IntLit 2
                IntLit 3
    """

    def __init__(self, arena: Optional[Arena] = None):
        super().__init__(arena)
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, program: Program) -> str:
        """Print the tree and return it as a string."""
        self.output = []
        self.indent_level = 0
        self._emit("Program")
        self._indent()
        self.visit_program(program)
        self._dedent()
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        self.output.append(f"{'  ' * self.indent_level}{text}")

    def _indent(self) -> None:
        self.indent_level += 1

    def _dedent(self) -> None:
        self.indent_level = max(0, self.indent_level - 1)

    def _children(self, *refs: Optional[NodeRef]) -> None:
        self._indent()
        for ref in refs:
            if ref is not None:
                self.visit(ref)
        self._dedent()

    # Wrappers

    def visit_Stmt(self, node: Stmt):
        self.visit(node.var, STMT_VARIANTS)

    def visit_Expr(self, node: Expr):
        inner = self.arena[node.var]
        if isinstance(inner, BinExpr):
            op = self.arena.get(inner.var, BIN_EXPR_VARIANTS)
            self._emit(f"{BIN_EXPR_NAMES[type(op)]} : {node.type}")
            self._children(op.lhs, op.rhs)
        else:
            self.visit(node.var, (Term,))

    def visit_Term(self, node: Term):
        self.visit(node.var, TERM_VARIANTS)

    # Statements

    def visit_StmtReturn(self, node: StmtReturn):
        self._emit("Return")
        self._children(node.expr)

    def visit_StmtVar(self, node: StmtVar):
        expr = self.arena[node.expr]
        self._emit(f"Var {node.ident.value} : {expr.type}")
        self._children(node.expr)

    def visit_StmtAssign(self, node: StmtAssign):
        self._emit(f"Assign {node.ident.value}")
        self._children(node.expr)

    def visit_Scope(self, node: Scope):
        self._emit("Scope")
        self._children(*node.stmts)

    def visit_StmtIf(self, node: StmtIf):
        """Print the condition, the scope, then each elif/else link as a sibling."""
        self._emit("If")
        self._indent()
        self.visit(node.expr)
        self.visit(node.scope)
        for link in iter_if_chain(self.arena, node.pred):
            if isinstance(link, IfPredElif):
                self._emit("Elif")
                self._children(link.expr, link.scope)
            else:
                self._emit("Else")
                self._children(link.scope)
        self._dedent()

    # Terms

    def visit_TermIntLit(self, node: TermIntLit):
        self._emit(f"IntLit {node.token.value}")

    def visit_TermCharLit(self, node: TermCharLit):
        self._emit(f"CharLit '{node.token.value}'")

    def visit_TermIdent(self, node: TermIdent):
        self._emit(f"Ident {node.token.value}")

    def visit_TermParen(self, node: TermParen):
        self._emit("Paren")
        self._children(node.expr)
