"""
Teeny - A Tiny BASIC-like Language Compiled to C
================================================

This package provides a single-pass compiler from Teeny source code to
portable C.

Main Components
---------------
- **compiler**: Lexer, parser and emitter, plus the TeenyCompiler driver
- **errors**: Exception hierarchy shared by every stage
- **cli**: The ``teenyc`` command-line tool

Quick Start
-----------
Compile a program from Python:
    >>> from teeny import compile_teeny
    >>> c_source = compile_teeny('PRINT "hello, world"')

Inspect a compilation without exceptions:
    >>> from teeny import TeenyCompiler
    >>> result = TeenyCompiler().compile_source("PRINT x")
    >>> result.success
    False

Or use the command-line tool:
    $ teenyc hello.teeny -o hello.c
    $ cc hello.c -o hello

Version History
---------------
1.0.0 - Initial release
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from teeny.errors import (
    SourceLocation,
    TeenyError,
    LexicalError,
    IllegalCharacterError,
    UnexpectedCharacterError,
    TeenySyntaxError,
    UnexpectedTokenError,
    MissingComparisonError,
    InvalidStatementError,
    SemanticError,
    UndeclaredVariableError,
    DuplicateLabelError,
    UndeclaredLabelError,
)
from teeny.compiler import (
    TeenyCompiler,
    CompilerOptions,
    CompilerResult,
    compile_teeny,
    compile_file,
    Token,
    TokenKind,
    Lexer,
    Parser,
    Emitter,
)

__all__ = [
    "__version__",
    # Compiler
    "TeenyCompiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_teeny",
    "compile_file",
    "Token",
    "TokenKind",
    "Lexer",
    "Parser",
    "Emitter",
    # Exception hierarchy
    "SourceLocation",
    "TeenyError",
    "LexicalError",
    "IllegalCharacterError",
    "UnexpectedCharacterError",
    "TeenySyntaxError",
    "UnexpectedTokenError",
    "MissingComparisonError",
    "InvalidStatementError",
    "SemanticError",
    "UndeclaredVariableError",
    "DuplicateLabelError",
    "UndeclaredLabelError",
]
