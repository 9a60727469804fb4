"""
Teeny Compiler
==============

This package translates Teeny, a tiny BASIC-like language, into C.

Teeny has a single numeric type, variables that are declared by their
first assignment, IF and WHILE blocks, labels with GOTO, and PRINT and
INPUT statements:

    # Count down from 10
    LET n = 10
    WHILE n > 0 REPEAT
        PRINT n
        LET n = n - 1
    ENDWHILE
    PRINT "liftoff"

Pipeline
--------
Compilation is a single pass with no intermediate representation:

    Source → Lexer ⇄ Parser → Emitter → C source

- **lexer**: produces tokens on demand
- **parser**: recursive descent syntax and semantic checks; drives emission
- **emitter**: collects declarations and statements, joins them at the end

Usage
-----
>>> from teeny.compiler import compile_teeny
>>> c_source = compile_teeny('PRINT "Hello!"')

The generated C compiles with any C99 compiler:

    $ teenyc hello.teeny && cc hello.c -o hello
"""

from teeny.compiler.compiler import (
    TeenyCompiler,
    CompilerOptions,
    CompilerResult,
    compile_teeny,
    compile_file,
)
from teeny.compiler.tokens import Token, TokenKind, KEYWORDS, classify_word
from teeny.compiler.lexer import Lexer
from teeny.compiler.parser import Parser, parse_source
from teeny.compiler.emitter import Emitter

__all__ = [
    # Main API
    "TeenyCompiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_teeny",
    "compile_file",
    # Tokens
    "Token",
    "TokenKind",
    "KEYWORDS",
    "classify_word",
    # Pipeline stages
    "Lexer",
    "Parser",
    "parse_source",
    "Emitter",
]
