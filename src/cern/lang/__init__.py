"""
cern Language Front End
=======================

Turns cern source text into a typed syntax tree and emits it as C++.

Pipeline
--------
    Source → Lexer → Parser (+ Arena) → Program → CppGenerator → C++

Usage
-----
>>> from cern.lang import parse_source, compile_source
>>> program = parse_source("var x = 1 + 2 * 3")
>>> print(compile_source("return 1 + 2"))
"""

from cern.lang.arena import Arena, NodeRef, DEFAULT_CAPACITY
from cern.lang.ast import (
    ASTPrinter,
    ASTVisitor,
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
    iter_if_chain,
)
from cern.lang.codegen import CppGenerator, generate_cpp
from cern.lang.compiler import Compiler, CompilerOptions, CompilerResult, compile_source
from cern.lang.errors import (
    ArenaError,
    ArenaExhaustedError,
    CompileError,
    InvalidCharacterError,
    InvalidCharLiteralError,
    MissingConstructError,
    OperandTypeError,
    ParseError,
    TokenizeError,
)
from cern.lang.lexer import Lexer, Token, TokenType, tokenize
from cern.lang.parser import Parser, parse_source
from cern.lang.stream import TokenStream
from cern.lang.types import VarType, to_var_type

__all__ = [
    # Main API
    "Compiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_source",
    "parse_source",
    "generate_cpp",
    # Errors
    "CompileError",
    "TokenizeError",
    "InvalidCharacterError",
    "InvalidCharLiteralError",
    "ParseError",
    "MissingConstructError",
    "OperandTypeError",
    "ArenaError",
    "ArenaExhaustedError",
    # Lexer and token stream
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    "TokenStream",
    # Arena
    "Arena",
    "NodeRef",
    "DEFAULT_CAPACITY",
    # Parser and generator
    "Parser",
    "CppGenerator",
    # Types
    "VarType",
    "to_var_type",
    # Tree
    "ASTVisitor",
    "ASTPrinter",
    "iter_if_chain",
    "Program",
    "Stmt",
    "StmtReturn",
    "StmtVar",
    "StmtAssign",
    "StmtIf",
    "Scope",
    "IfPred",
    "IfPredElif",
    "IfPredElse",
    "Expr",
    "BinExpr",
    "BinExprAdd",
    "BinExprSub",
    "BinExprMul",
    "BinExprDiv",
    "Term",
    "TermIntLit",
    "TermCharLit",
    "TermIdent",
    "TermParen",
]
