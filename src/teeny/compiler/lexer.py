"""
Teeny Lexer (Tokenizer)
=======================

This module converts Teeny source text into tokens, one token per call
to ``Lexer.next_token()``. The parser pulls tokens lazily, so the lexer
never holds more than the current character and one character of
lookahead.

Lexical Rules
-------------
- Spaces, tabs and carriage returns separate tokens and are skipped.
- Newlines are significant: they terminate statements.
- ``#`` starts a comment that runs to the end of the line.
- Numbers: digits with an optional fractional part (``12``, ``3.25``).
  No sign, no exponent; a decimal point needs at least one digit after it.
- Strings: ``"double quoted"``, on one line, without tabs, backslashes or
  percent signs, since they are copied verbatim into a C ``printf`` format.
- Identifiers: an ASCII letter followed by ASCII letters and digits.
  Reserved words are matched exactly and case-sensitively.
- Operators: ``+ - * / = == != < <= > >=``.

The source always gets one extra newline appended, so the last
statement is terminated even when the file is not.

Example Usage
-------------
>>> from teeny.compiler.lexer import Lexer
>>> for token in Lexer("LET a = 1.5"):
...     print(token)
Token(LET, 'LET', 1:1)
Token(IDENTIFIER, 'a', 1:5)
Token(ASSIGN, '=', 1:7)
Token(NUMBER, '1.5', 1:9)
Token(NEWLINE, '\\n', 1:12)
Token(EOF, '', 2:1)
"""

from typing import Iterator
import string

from teeny.errors import (
    SourceLocation,
    IllegalCharacterError,
    UnexpectedCharacterError,
)
from teeny.compiler.tokens import Token, TokenKind, classify_word


# Operators that never extend past one character
SINGLE_CHAR_OPERATORS: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.ASTERISK,
    "/": TokenKind.SLASH,
}

# Operators that may be followed by '=' to form a two-character operator
# char -> (kind alone, kind with '=')
EXTENDABLE_OPERATORS: dict[str, tuple[TokenKind, TokenKind]] = {
    "=": (TokenKind.ASSIGN, TokenKind.EQUAL),
    "<": (TokenKind.LESS, TokenKind.LESS_EQUAL),
    ">": (TokenKind.GREATER, TokenKind.GREATER_EQUAL),
}


class Lexer:
    """
    Tokenizes Teeny source code.

    Usage:
        lexer = Lexer(source_text, filename)
        token = lexer.next_token()
        while token.kind != TokenKind.EOF:
            ...
            token = lexer.next_token()

    Iterating over the lexer (or calling tokenize()) yields the same
    tokens, ending with the EOF token.

    Attributes:
        source: The source being tokenized, with the trailing newline added
        filename: Name of the source file (for error reporting)
    """

    COMMENT_START = "#"

    # Skipped between tokens; newline is not among them
    WHITESPACE = " \t\r"

    # Characters rejected inside string literals
    STRING_FORBIDDEN = "\r\n\t\\%"

    DIGITS = string.digits
    IDENT_START = string.ascii_letters
    IDENT_CHARS = string.ascii_letters + string.digits

    def __init__(self, source: str, filename: str = "<input>"):
        """
        Initialize the lexer with source code.

        Args:
            source: The Teeny source to tokenize
            filename: Name of the source file (for error messages)
        """
        self.source = source + "\n"
        self.filename = filename

        # Current character ("" once past the end) and its position
        self._char = ""
        self._pos = -1
        self._line = 1
        self._column = 0
        self._line_start_pos = 0

        self._next_char()

    def __iter__(self) -> Iterator[Token]:
        return self.tokenize()

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens until the end of input.

        Yields:
            Token objects, the last one being the EOF token

        Raises:
            LexicalError: If a character cannot be tokenized
        """
        while True:
            token = self.next_token()
            yield token
            if token.kind == TokenKind.EOF:
                return

    # =========================================================================
    # Character Access
    # =========================================================================

    def _next_char(self) -> None:
        """Advance to the next character, tracking line and column."""
        if self._pos >= len(self.source):
            return

        if self._char == "\n":
            self._line += 1
            self._column = 0
            self._line_start_pos = self._pos + 1

        self._pos += 1
        self._column += 1
        self._char = self.source[self._pos] if self._pos < len(self.source) else ""

    def peek(self) -> str:
        """Return the character after the current one without consuming it."""
        pos = self._pos + 1
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    @staticmethod
    def _is_one_of(char: str, chars: str) -> bool:
        # "" is a substring of everything, so it has to be excluded explicitly
        return char != "" and char in chars

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def next_token(self) -> Token:
        """
        Scan and return the next token.

        Exactly one token is returned per call. Once the input is
        exhausted, every further call returns an EOF token.

        Raises:
            IllegalCharacterError: Bad character in a string or number
            UnexpectedCharacterError: Character that starts no token
        """
        self._skip_whitespace()
        self._skip_comment()

        line, column = self._line, self._column
        char = self._char

        if char == "":
            return self._make_token("", TokenKind.EOF, line, column)

        if char in SINGLE_CHAR_OPERATORS:
            token = self._make_token(char, SINGLE_CHAR_OPERATORS[char], line, column)

        elif char == '"':
            token = self._make_token(self._scan_string(), TokenKind.STRING, line, column)

        elif char == "!":
            if self.peek() != "=":
                raise UnexpectedCharacterError(
                    "!",
                    self._location(),
                    self._get_current_line(),
                    hint="did you mean '!='?",
                )
            self._next_char()
            token = self._make_token("!=", TokenKind.NOT_EQUAL, line, column)

        elif char in EXTENDABLE_OPERATORS:
            single, double = EXTENDABLE_OPERATORS[char]
            if self.peek() == "=":
                self._next_char()
                token = self._make_token(char + "=", double, line, column)
            else:
                token = self._make_token(char, single, line, column)

        elif char in self.DIGITS:
            token = self._make_token(self._scan_number(), TokenKind.NUMBER, line, column)

        elif char in self.IDENT_START:
            text = self._scan_word()
            token = self._make_token(text, classify_word(text), line, column)

        elif char == "\n":
            token = self._make_token(char, TokenKind.NEWLINE, line, column)

        else:
            raise UnexpectedCharacterError(
                char,
                self._location(),
                self._get_current_line(),
            )

        # Every branch leaves the last character of its token current
        self._next_char()
        return token

    def _make_token(self, text: str, kind: TokenKind, line: int, column: int) -> Token:
        return Token(text=text, kind=kind, line=line, column=column, filename=self.filename)

    def _skip_whitespace(self) -> None:
        """Skip spaces, tabs and carriage returns, never newlines."""
        while self._is_one_of(self._char, self.WHITESPACE):
            self._next_char()

    def _skip_comment(self) -> None:
        """Skip a '#' comment up to, but not including, the newline."""
        if self._char == self.COMMENT_START:
            while self._char not in ("\n", ""):
                self._next_char()

    def _scan_string(self) -> str:
        """
        Scan a string literal and return its text without the quotes.

        Leaves the closing quote as the current character.
        """
        self._next_char()  # opening quote
        start = self._pos

        while self._char != '"':
            if self._char == "" or self._char in self.STRING_FORBIDDEN:
                hint = None
                if self._char in ("\n", ""):
                    hint = "string literals must be closed on the same line"
                elif self._char in "\\%":
                    hint = "backslashes and percent signs are not allowed in strings"
                raise IllegalCharacterError(
                    self._char or "\\0",
                    "string literal",
                    self._location(),
                    self._get_current_line(),
                    hint=hint,
                )
            self._next_char()

        return self.source[start:self._pos]

    def _scan_number(self) -> str:
        """
        Scan digits with an optional fractional part.

        Leaves the last digit as the current character.
        """
        start = self._pos

        while self._is_one_of(self.peek(), self.DIGITS):
            self._next_char()

        if self.peek() == ".":
            self._next_char()
            if not self._is_one_of(self.peek(), self.DIGITS):
                raise IllegalCharacterError(
                    ".",
                    "number literal",
                    self._location(),
                    self._get_current_line(),
                    hint="a decimal point must be followed by at least one digit",
                )
            while self._is_one_of(self.peek(), self.DIGITS):
                self._next_char()

        return self.source[start:self._pos + 1]

    def _scan_word(self) -> str:
        """Scan an identifier or keyword, leaving its last character current."""
        start = self._pos
        while self._is_one_of(self.peek(), self.IDENT_CHARS):
            self._next_char()
        return self.source[start:self._pos + 1]

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self._line, self._column)

    def _get_current_line(self) -> str:
        """Get the current line of source text for error reporting."""
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end]
