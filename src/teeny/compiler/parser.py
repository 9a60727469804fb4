"""
Teeny Recursive Descent Parser
==============================

This module implements the syntax checker of the Teeny compiler. It is
also the semantic checker and the driver of code generation: each
grammar rule is one method that consumes tokens from the lexer,
enforces the semantic rules that apply to it, and pushes the matching
C fragments into the emitter as it goes. There is no AST.

Grammar (EBNF)
--------------
program    ::= {newline} {statement}
statement  ::= "PRINT" (string | expression) nl
             | "IF" comparison "THEN" nl {statement} "ENDIF" nl
             | "WHILE" comparison "REPEAT" nl {statement} "ENDWHILE" nl
             | "LABEL" ident nl
             | "GOTO" ident nl
             | "LET" ident "=" expression nl
             | "INPUT" ident nl
nl         ::= newline {newline}
comparison ::= expression comparisonOp expression {comparisonOp expression}
expression ::= term {("+"|"-") term}
term       ::= unary {("*"|"/") unary}
unary      ::= ["+"|"-"] primary
primary    ::= number | ident

Semantic Rules
--------------
- LET and INPUT declare their variable on first use.
- Reading a variable that was never declared is an error.
- A label may be declared only once.
- Every GOTO target must be declared somewhere in the program. Since
  labels may follow the GOTO that names them, this is checked once, at
  the end of the program.

Generated Code
--------------
All variables are ``float``. The program becomes the body of ``main``.
Variables and labels are prefixed with ``t_`` in C, and numbers lose
their leading zeros:

    LET a = 010         float t_a;
    PRINT a     ->      t_a = 10;
                        printf("%.2f\\n", (float)(t_a));

Example Usage
-------------
>>> from teeny.compiler.parser import parse_source
>>> print(parse_source('PRINT "hi"'))
#include <stdio.h>
int main(void) {
printf("hi\\n");
return 0;
}
"""

import difflib
import logging
import re
from typing import Optional

from teeny.errors import (
    SourceLocation,
    UnexpectedTokenError,
    MissingComparisonError,
    InvalidStatementError,
    UndeclaredVariableError,
    DuplicateLabelError,
    UndeclaredLabelError,
)
from teeny.compiler.tokens import Token, TokenKind
from teeny.compiler.lexer import Lexer
from teeny.compiler.emitter import Emitter


logger = logging.getLogger(__name__)


# Readable names for non-keyword token kinds in error messages
_KIND_NAMES: dict[TokenKind, str] = {
    TokenKind.EOF: "end of input",
    TokenKind.NEWLINE: "newline",
    TokenKind.NUMBER: "number",
    TokenKind.IDENTIFIER: "identifier",
    TokenKind.STRING: "string",
    TokenKind.ASSIGN: "'='",
}


def _describe_kind(kind: TokenKind) -> str:
    if kind.is_keyword:
        return kind.name
    return _KIND_NAMES.get(kind, kind.name.lower())


def _describe_token(token: Token) -> str:
    if token.kind in (TokenKind.EOF, TokenKind.NEWLINE):
        return _KIND_NAMES[token.kind]
    if token.kind == TokenKind.STRING:
        return f'"{token.text}"'
    return token.text


# =============================================================================
# C Spelling
# =============================================================================

# Teeny identifiers never contain '_', so prefixed names cannot clash with
# each other, with C keywords, or with anything declared by <stdio.h>
C_NAME_PREFIX = "t_"

_TRIGRAPH_START = re.compile(r"(?<=\?)\?")


def c_name(name: str) -> str:
    """Return the C identifier used for a Teeny variable or label."""
    return C_NAME_PREFIX + name


def c_number(text: str) -> str:
    """
    Return the C spelling of a Teeny number literal.

    Leading zeros are dropped from the integer part, since C reads
    ``010`` as octal. One zero is kept: ``007.5`` -> ``7.5``, ``00`` -> ``0``.
    """
    integer, point, fraction = text.partition(".")
    return (integer.lstrip("0") or "0") + point + fraction


def c_string(text: str) -> str:
    """
    Return the C spelling of a Teeny string literal's text.

    Every '?' directly after another '?' is escaped so that no trigraph
    (``??/`` is a backslash in C99) can form.
    """
    return _TRIGRAPH_START.sub(r"\\?", text)


class Parser:
    """
    Recursive descent checker and code generation driver for Teeny.

    The parser keeps two tokens of lookahead (current_token and
    peek_token) and pulls new tokens from the lexer as it advances.
    Errors are raised at the point of detection and abort the parse.

    Attributes:
        lexer: Token source
        emitter: Sink for the generated C code
        print_precision: Digits after the point when printing numbers
        symbols: Declared variable names
        labels_declared: Declared label -> location of its LABEL
        labels_referenced: GOTO target -> location of its first GOTO
        token_count: Number of tokens pulled, EOF excluded
    """

    def __init__(self, lexer: Lexer, emitter: Emitter, print_precision: int = 2):
        self.lexer = lexer
        self.emitter = emitter
        self.print_precision = print_precision
        self._source_lines = lexer.source.splitlines()

        self.symbols: set[str] = set()
        self.labels_declared: dict[str, SourceLocation] = {}
        self.labels_referenced: dict[str, SourceLocation] = {}

        self.token_count = 0
        self.current_token = Token("", TokenKind.UNKNOWN)
        self.peek_token = Token("", TokenKind.UNKNOWN)

        # Fill both lookahead slots
        self.advance()
        self.advance()

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def check_token(self, *kinds: TokenKind) -> bool:
        """Return True if the current token is one of the given kinds."""
        return self.current_token.kind in kinds

    def check_peek(self, *kinds: TokenKind) -> bool:
        """Return True if the next token is one of the given kinds."""
        return self.peek_token.kind in kinds

    def advance(self) -> Token:
        """Shift the lookahead by one token and return the token left behind."""
        previous = self.current_token
        self.current_token = self.peek_token
        self.peek_token = self.lexer.next_token()
        if self.peek_token.kind != TokenKind.EOF:
            self.token_count += 1
        return previous

    def match(self, kind: TokenKind) -> Token:
        """
        Consume the current token, which must be of the given kind.

        Raises:
            UnexpectedTokenError: If the current token is of another kind
        """
        if not self.check_token(kind):
            raise UnexpectedTokenError(
                _describe_token(self.current_token),
                expected=_describe_kind(kind),
                location=self.current_token.location,
                source_line=self._get_source_line(self.current_token.line),
            )
        return self.advance()

    def _get_source_line(self, line: int) -> Optional[str]:
        """Get source line for error reporting."""
        if 0 < line <= len(self._source_lines):
            return self._source_lines[line - 1]
        return None

    # =========================================================================
    # Program and Statements
    # =========================================================================

    def program(self) -> None:
        """
        program ::= {newline} {statement}

        Raises:
            TeenyError: On the first lexical, syntax or semantic error,
                or with every undeclared GOTO target once the program
                has been read.
        """
        logger.debug("PROGRAM")

        self.emitter.append_declaration("#include <stdio.h>")
        self.emitter.append_declaration("int main(void) {")

        # Newlines are required after statements but allowed before the first
        while self.check_token(TokenKind.NEWLINE):
            self.advance()

        while not self.check_token(TokenKind.EOF):
            self.statement()

        self._check_labels()

        self.emitter.append_code_line("return 0;")
        self.emitter.append_code_line("}")

    def statement(self) -> None:
        """Parse one statement, including its terminating newlines."""
        kind = self.current_token.kind

        if kind == TokenKind.PRINT:
            self._print_statement()
        elif kind == TokenKind.IF:
            self._if_statement()
        elif kind == TokenKind.WHILE:
            self._while_statement()
        elif kind == TokenKind.LABEL:
            self._label_statement()
        elif kind == TokenKind.GOTO:
            self._goto_statement()
        elif kind == TokenKind.LET:
            self._let_statement()
        elif kind == TokenKind.INPUT:
            self._input_statement()
        else:
            raise InvalidStatementError(
                _describe_token(self.current_token),
                self.current_token.location,
                self._get_source_line(self.current_token.line),
            )

        self.nl()

    def _print_statement(self) -> None:
        # "PRINT" (string | expression)
        logger.debug("STATEMENT-PRINT")
        self.advance()

        if self.check_token(TokenKind.STRING):
            text = self.advance().text
            self.emitter.append_code_line(f'printf("{c_string(text)}\\n");')
        else:
            self.emitter.append_code(f'printf("%.{self.print_precision}f\\n", (float)(')
            self.expression()
            self.emitter.append_code_line("));")

    def _if_statement(self) -> None:
        # "IF" comparison "THEN" nl {statement} "ENDIF"
        logger.debug("STATEMENT-IF")
        self.advance()

        self.emitter.append_code("if (")
        self.comparison()
        self.match(TokenKind.THEN)
        self.nl()
        self.emitter.append_code_line(") {")

        self._block(TokenKind.ENDIF)

        self.match(TokenKind.ENDIF)
        self.emitter.append_code_line("}")

    def _while_statement(self) -> None:
        # "WHILE" comparison "REPEAT" nl {statement} "ENDWHILE"
        logger.debug("STATEMENT-WHILE")
        self.advance()

        self.emitter.append_code("while (")
        self.comparison()
        self.match(TokenKind.REPEAT)
        self.nl()
        self.emitter.append_code_line(") {")

        self._block(TokenKind.ENDWHILE)

        self.match(TokenKind.ENDWHILE)
        self.emitter.append_code_line("}")

    def _block(self, terminator: TokenKind) -> None:
        """Parse zero or more statements up to the given terminator."""
        while not self.check_token(terminator):
            if self.check_token(TokenKind.EOF):
                raise UnexpectedTokenError(
                    _describe_token(self.current_token),
                    expected=_describe_kind(terminator),
                    location=self.current_token.location,
                )
            self.statement()

    def _label_statement(self) -> None:
        # "LABEL" ident
        logger.debug("STATEMENT-LABEL")
        self.advance()

        token = self.match(TokenKind.IDENTIFIER)
        if token.text in self.labels_declared:
            raise DuplicateLabelError(
                token.text,
                token.location,
                original_location=self.labels_declared[token.text],
                source_line=self._get_source_line(token.line),
            )
        self.labels_declared[token.text] = token.location

        # Null statement keeps a label before '}' valid C
        self.emitter.append_code_line(f"{c_name(token.text)}:;")

    def _goto_statement(self) -> None:
        # "GOTO" ident
        logger.debug("STATEMENT-GOTO")
        self.advance()

        token = self.match(TokenKind.IDENTIFIER)
        self.labels_referenced.setdefault(token.text, token.location)
        self.emitter.append_code_line(f"goto {c_name(token.text)};")

    def _let_statement(self) -> None:
        # "LET" ident "=" expression
        logger.debug("STATEMENT-LET")
        self.advance()

        token = self.match(TokenKind.IDENTIFIER)
        self._declare(token.text)

        self.emitter.append_code(f"{c_name(token.text)} = ")
        self.match(TokenKind.ASSIGN)
        self.expression()
        self.emitter.append_code_line(";")

    def _input_statement(self) -> None:
        # "INPUT" ident
        logger.debug("STATEMENT-INPUT")
        self.advance()

        name = self.match(TokenKind.IDENTIFIER).text
        self._declare(name)
        target = c_name(name)

        # Invalid input stores 0 and discards the offending word
        self.emitter.append_code_line(f'if (0 == scanf("%f", &{target})) {{')
        self.emitter.append_code_line(f"{target} = 0;")
        self.emitter.append_code_line('scanf("%*s");')
        self.emitter.append_code_line("}")

    def _declare(self, name: str) -> None:
        if name not in self.symbols:
            logger.debug(f"Declaring variable '{name}'")
            self.symbols.add(name)
            self.emitter.append_declaration(f"float {c_name(name)};")

    def nl(self) -> None:
        """nl ::= newline {newline}"""
        logger.debug("NEWLINE")

        self.match(TokenKind.NEWLINE)
        while self.check_token(TokenKind.NEWLINE):
            self.advance()

    # =========================================================================
    # Expressions
    # =========================================================================

    def comparison(self) -> None:
        """
        comparison ::= expression comparisonOp expression {comparisonOp expression}

        At least one comparison operator is required.
        """
        logger.debug("COMPARISON")

        self.expression()

        if not self.current_token.is_comparison_operator():
            raise MissingComparisonError(
                _describe_token(self.current_token),
                self.current_token.location,
                self._get_source_line(self.current_token.line),
            )

        while self.current_token.is_comparison_operator():
            self.emitter.append_code(f" {self.advance().text} ")
            self.expression()

    def expression(self) -> None:
        """expression ::= term {("+"|"-") term}"""
        logger.debug("EXPRESSION")

        self.term()
        while self.check_token(TokenKind.PLUS, TokenKind.MINUS):
            # Spaced so that "a - -b" cannot become the C "--" operator
            self.emitter.append_code(f" {self.advance().text} ")
            self.term()

    def term(self) -> None:
        """term ::= unary {("*"|"/") unary}"""
        logger.debug("TERM")

        self.unary()
        while self.check_token(TokenKind.ASTERISK, TokenKind.SLASH):
            self.emitter.append_code(f" {self.advance().text} ")
            self.unary()

    def unary(self) -> None:
        """unary ::= ["+"|"-"] primary"""
        logger.debug("UNARY")

        if self.check_token(TokenKind.PLUS, TokenKind.MINUS):
            self.emitter.append_code(self.advance().text)
        self.primary()

    def primary(self) -> None:
        """primary ::= number | ident"""
        token = self.current_token
        logger.debug(f"PRIMARY ({token.text})")

        if token.kind == TokenKind.NUMBER:
            self.emitter.append_code(c_number(token.text))
        elif token.kind == TokenKind.IDENTIFIER:
            if token.text not in self.symbols:
                raise UndeclaredVariableError(
                    token.text,
                    token.location,
                    self._get_source_line(token.line),
                    similar_names=difflib.get_close_matches(token.text, sorted(self.symbols)),
                )
            self.emitter.append_code(c_name(token.text))
        else:
            raise UnexpectedTokenError(
                _describe_token(token),
                expected="a number or variable",
                location=token.location,
                source_line=self._get_source_line(token.line),
            )

        self.advance()

    # =========================================================================
    # Deferred Checks
    # =========================================================================

    def _check_labels(self) -> None:
        """
        Verify that every GOTO target was declared.

        Raises:
            UndeclaredLabelError: Listing every missing label once
        """
        missing = [name for name in self.labels_referenced if name not in self.labels_declared]
        if missing:
            raise UndeclaredLabelError(
                missing,
                [self.labels_referenced[name] for name in missing],
            )


def parse_source(source: str, filename: str = "<input>", print_precision: int = 2) -> str:
    """
    Compile Teeny source to C in one call.

    Raises:
        TeenyError: If the source does not compile
    """
    emitter = Emitter()
    parser = Parser(Lexer(source, filename), emitter, print_precision=print_precision)
    parser.program()
    return emitter.finalize()
