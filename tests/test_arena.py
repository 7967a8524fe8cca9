# =============================================================================
# test_arena.py - Node Arena Unit Tests
# =============================================================================
# Tests for the index-based node store that owns every syntax-tree node.
# =============================================================================

import pytest

from cern.lang.arena import DEFAULT_CAPACITY, REGION_SIZE, SLOT_SIZE, Arena, NodeRef
from cern.lang.ast import Expr, Term, TermIdent, TermIntLit
from cern.lang.errors import ArenaError, ArenaExhaustedError, CompileError
from cern.lang.lexer import Token, TokenType
from cern.lang.parser import parse_source
from cern.lang.types import VarType


@pytest.fixture
def ident():
    return Token(TokenType.IDENTIFIER, "x")


class TestArenaAllocation:
    """Slot allocation and construction."""

    def test_default_capacity(self):
        assert DEFAULT_CAPACITY == REGION_SIZE // SLOT_SIZE
        assert Arena().capacity == DEFAULT_CAPACITY

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            Arena(0)
        with pytest.raises(ValueError):
            Arena(-5)

    def test_construct_returns_sequential_refs(self, ident):
        arena = Arena(8)
        first = arena.construct(TermIdent, ident)
        second = arena.construct(Term, first)
        assert (first, second) == (0, 1)
        assert len(arena) == 2
        assert arena.remaining == 6

    def test_construct_stores_node(self, ident):
        arena = Arena(8)
        ref = arena.construct(TermIdent, ident)
        assert arena[ref] == TermIdent(ident)

    def test_construct_with_keyword_arguments(self, ident):
        arena = Arena(8)
        term = arena.construct(TermIdent, ident)
        ref = arena.construct(Term, term, type=VarType.INT)
        assert arena[ref].type is VarType.INT

    def test_allocate_leaves_empty_slot(self):
        arena = Arena(4)
        ref = arena.allocate()
        with pytest.raises(ArenaError, match="empty slot"):
            arena.get(ref)

    def test_exhaustion(self, ident):
        arena = Arena(2)
        arena.construct(TermIdent, ident)
        arena.construct(TermIdent, ident)
        with pytest.raises(ArenaExhaustedError) as exc_info:
            arena.construct(TermIdent, ident)
        assert exc_info.value.capacity == 2
        assert "node arena exhausted (2 slots)" in str(exc_info.value)
        assert len(arena) == 2

    def test_exhaustion_is_a_compile_error(self):
        arena = Arena(1)
        arena.allocate()
        with pytest.raises(CompileError):
            arena.allocate()


class TestArenaAccess:
    """Dereferencing, rewriting and reclaiming nodes."""

    def test_get_with_expected_variant(self, ident):
        arena = Arena(4)
        ref = arena.construct(TermIdent, ident)
        assert arena.get(ref, TermIdent).token is ident
        assert arena.get(ref, (TermIntLit, TermIdent)).token is ident

    def test_get_wrong_variant(self, ident):
        arena = Arena(4)
        ref = arena.construct(TermIdent, ident)
        with pytest.raises(ArenaError, match="is a TermIdent, not TermIntLit"):
            arena.get(ref, TermIntLit)

    def test_invalid_refs(self):
        arena = Arena(4)
        arena.allocate()
        for ref in (NodeRef(1), NodeRef(-1), NodeRef(100)):
            with pytest.raises(ArenaError, match="invalid node reference"):
                arena.get(ref)

    def test_rewrite_keeps_slot_identity(self, ident):
        arena = Arena(4)
        term = arena.construct(TermIdent, ident)
        expr = arena.construct(Expr, term)
        arena.rewrite(expr, Expr(term, VarType.CHAR))
        assert len(arena) == 2
        assert arena[expr] == Expr(term, VarType.CHAR)

    def test_rewrite_invalid_ref(self, ident):
        arena = Arena(4)
        with pytest.raises(ArenaError):
            arena.rewrite(NodeRef(0), TermIdent(ident))

    def test_iteration(self, ident):
        arena = Arena(4)
        term = arena.construct(TermIdent, ident)
        arena.construct(Term, term)
        assert [(ref, type(node)) for ref, node in arena] == [(0, TermIdent), (1, Term)]

    def test_reset_reclaims_everything(self, ident):
        arena = Arena(2)
        ref = arena.construct(TermIdent, ident)
        arena.construct(TermIdent, ident)
        arena.reset()
        assert len(arena) == 0
        assert arena.remaining == 2
        with pytest.raises(ArenaError):
            arena.get(ref)
        arena.construct(TermIdent, ident)


class TestArenaWithParser:
    """The parser allocates every node from the arena it is given."""

    def test_program_owns_arena(self):
        arena = Arena(64)
        program = parse_source("var x = 1", arena=arena)
        assert program.arena is arena
        # TermIntLit, Term, Expr, StmtVar, Stmt
        assert len(arena) == 5

    def test_small_arena_exhausts_during_parse(self):
        with pytest.raises(ArenaExhaustedError):
            parse_source("return 1 + 2 * 3", arena=Arena(6))

    def test_exact_capacity_is_enough(self):
        program = parse_source("var x = 1", arena=Arena(5))
        assert program.arena.remaining == 0
