"""
Teeny Tokens
============

Token kinds, the token value type, and the reserved-word classifier.

Token Families
--------------
| Family     | Kinds                                                  |
|------------|--------------------------------------------------------|
| sentinel   | UNKNOWN, EOF                                           |
| literal    | NEWLINE, NUMBER, IDENTIFIER, STRING                    |
| keyword    | LABEL, GOTO, PRINT, INPUT, LET, IF, THEN, ENDIF,       |
|            | WHILE, REPEAT, ENDWHILE                                |
| operator   | = + - * / == != < <= > >=                              |

The numeric values group the families into ranges so that membership
is a simple range test.
"""

from dataclasses import dataclass
from enum import Enum

from teeny.errors import SourceLocation


# =============================================================================
# Token Kind Enumeration
# =============================================================================

class TokenKind(Enum):
    """Lexical category of a token."""

    # === Sentinels ===
    UNKNOWN = -2
    EOF = -1

    # === Literals and Identifiers ===
    NEWLINE = 0
    NUMBER = 1
    IDENTIFIER = 2
    STRING = 3

    # === Keywords ===
    LABEL = 101
    GOTO = 102
    PRINT = 103
    INPUT = 104
    LET = 105
    IF = 106
    THEN = 107
    ENDIF = 108
    WHILE = 109
    REPEAT = 110
    ENDWHILE = 111

    # === Operators ===
    ASSIGN = 201            # =
    PLUS = 202              # +
    MINUS = 203             # -
    ASTERISK = 204          # *
    SLASH = 205             # /
    EQUAL = 206             # ==
    NOT_EQUAL = 207         # !=
    LESS = 208              # <
    LESS_EQUAL = 209        # <=
    GREATER = 210           # >
    GREATER_EQUAL = 211     # >=

    @property
    def is_keyword(self) -> bool:
        return 100 < self.value < 200

    @property
    def is_operator(self) -> bool:
        return 200 < self.value < 300


COMPARISON_OPERATORS = frozenset({
    TokenKind.EQUAL,
    TokenKind.NOT_EQUAL,
    TokenKind.LESS,
    TokenKind.LESS_EQUAL,
    TokenKind.GREATER,
    TokenKind.GREATER_EQUAL,
})


# =============================================================================
# Reserved Words
# =============================================================================

# Exact, case-sensitive spellings
KEYWORDS: dict[str, TokenKind] = {
    "LABEL": TokenKind.LABEL,
    "GOTO": TokenKind.GOTO,
    "PRINT": TokenKind.PRINT,
    "INPUT": TokenKind.INPUT,
    "LET": TokenKind.LET,
    "IF": TokenKind.IF,
    "THEN": TokenKind.THEN,
    "ENDIF": TokenKind.ENDIF,
    "WHILE": TokenKind.WHILE,
    "REPEAT": TokenKind.REPEAT,
    "ENDWHILE": TokenKind.ENDWHILE,
}


def classify_word(text: str) -> TokenKind:
    """
    Classify an identifier-shaped lexeme.

    Returns the keyword kind for an exact match in KEYWORDS and
    IDENTIFIER for everything else, so "print" and "PRINTS" are
    ordinary identifiers.
    """
    return KEYWORDS.get(text, TokenKind.IDENTIFIER)


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token of Teeny source.

    Attributes:
        text: The lexeme (string literals without their quotes)
        kind: The TokenKind classification
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    text: str
    kind: TokenKind
    line: int = 0
    column: int = 0
    filename: str = "<input>"

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.text!r}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def is_comparison_operator(self) -> bool:
        return self.kind in COMPARISON_OPERATORS
