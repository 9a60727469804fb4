"""
Teeny Compiler Error Hierarchy
==============================

This module defines the exception hierarchy for the Teeny compiler.
All exceptions inherit from TeenyError, allowing callers to catch every
compilation failure with a single except clause.

Exception Hierarchy
-------------------
TeenyError (base)
├── LexicalError - the tokenizer cannot form a token
│   ├── IllegalCharacterError - bad character inside a string or number
│   └── UnexpectedCharacterError - character that starts no token
├── TeenySyntaxError - the token stream does not match the grammar
│   ├── UnexpectedTokenError - a different token kind was expected
│   ├── MissingComparisonError - IF/WHILE condition without comparison
│   └── InvalidStatementError - token that cannot start a statement
└── SemanticError - grammatically valid but meaningless program
    ├── UndeclaredVariableError - variable read before LET/INPUT
    ├── DuplicateLabelError - LABEL declared twice
    └── UndeclaredLabelError - GOTO to labels that never appear

Error Message Format
--------------------
    filename:line:column: error: description
        source_line_text
        ^
    hint: suggestion for fixing (when available)

Every error is fatal. The compiler aborts on the first one, except for
undeclared labels, which are collected until the end of the program and
reported together.
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in Teeny source code.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Base Exception
# =============================================================================

class TeenyError(Exception):
    """
    Base exception for all Teeny compiler errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            count.teeny:3:7: error: undeclared variable 'cout'
                PRINT cout
                      ^
            hint: did you mean 'count'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Caret under the offending column
        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Lexical Errors
# =============================================================================

class LexicalError(TeenyError):
    """
    The tokenizer could not form a token.

    Examples:
        - Percent sign or backslash inside a string literal
        - Number ending in a decimal point ("1.")
        - A lone '!' or any character outside the language
    """
    pass


class IllegalCharacterError(LexicalError):
    """
    Illegal character inside a string or number literal.

    String literals are copied verbatim into the generated C code, so
    characters that would change their meaning there (escapes, format
    specifiers, line breaks, tabs) are rejected.
    """

    def __init__(
        self,
        char: str,
        literal: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.char = char
        self.literal = literal
        super().__init__(
            f"illegal character {char!r} in {literal}",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnexpectedCharacterError(LexicalError):
    """Character that does not begin any token."""

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"unexpected character {char!r}",
            location=location,
            hint=hint,
            source_line=source_line,
        )


# =============================================================================
# Syntax Errors
# =============================================================================

class TeenySyntaxError(TeenyError):
    """
    The token stream does not match the Teeny grammar.

    Named to avoid shadowing the builtin SyntaxError.
    """
    pass


class UnexpectedTokenError(TeenySyntaxError):
    """A token of a different kind was required at this point."""

    def __init__(
        self,
        found: str,
        expected: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.found = found
        self.expected = expected

        hint = None
        if expected:
            hint = f"expected {expected}"

        super().__init__(
            f"unexpected token {found!r}",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class MissingComparisonError(TeenySyntaxError):
    """
    Condition without a comparison operator.

    IF and WHILE conditions must compare two expressions:
        IF a THEN        # error
        IF a != 0 THEN   # ok
    """

    def __init__(
        self,
        found: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.found = found
        super().__init__(
            f"expected comparison operator, got {found!r}",
            location=location,
            hint="use one of ==, !=, <, <=, >, >=",
            source_line=source_line,
        )


class InvalidStatementError(TeenySyntaxError):
    """Token that cannot begin a statement."""

    def __init__(
        self,
        found: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.found = found
        super().__init__(
            f"invalid statement at {found!r}",
            location=location,
            hint="statements start with PRINT, IF, WHILE, LABEL, GOTO, LET or INPUT",
            source_line=source_line,
        )


# =============================================================================
# Semantic Errors
# =============================================================================

class SemanticError(TeenyError):
    """Program is grammatically valid but violates a semantic rule."""
    pass


class UndeclaredVariableError(SemanticError):
    """
    Variable read before any LET or INPUT assigned it.

    Suggests similarly spelled variables when there are any.
    """

    def __init__(
        self,
        name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_names: Optional[list[str]] = None,
    ):
        self.name = name
        self.similar_names = similar_names or []

        hint = None
        if self.similar_names:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_names[:3])
            hint = f"did you mean {suggestions}?"
        else:
            hint = f"assign it first with LET {name} = ... or INPUT {name}"

        super().__init__(
            f"undeclared variable '{name}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class DuplicateLabelError(SemanticError):
    """LABEL statement for a name that is already a label."""

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.label = label
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{label}' was first declared at {original_location}"

        super().__init__(
            f"duplicate label '{label}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UndeclaredLabelError(SemanticError):
    """
    GOTO targets that no LABEL statement declares.

    Labels may be declared after the GOTO that names them, so this is
    checked once the whole program has been read. A single error lists
    every missing label, each at its first GOTO.

    Attributes:
        labels: Missing label names, in order of first reference
        locations: First GOTO location for each label (same order)
    """

    def __init__(
        self,
        labels: list[str],
        locations: Optional[list[Optional[SourceLocation]]] = None,
    ):
        self.labels = list(labels)
        self.locations = list(locations) if locations else [None] * len(self.labels)
        names = ", ".join(f"'{label}'" for label in self.labels)
        word = "label" if len(self.labels) == 1 else "labels"
        super().__init__(
            f"GOTO to undeclared {word} {names}",
            location=self.locations[0] if self.locations else None,
        )

    def _format_message(self) -> str:
        """One line per missing label."""
        lines = []
        for label, location in zip(self.labels, self.locations):
            prefix = f"{location}: " if location else ""
            lines.append(f"{prefix}error: GOTO to undeclared label '{label}'")
        return "\n".join(lines)
