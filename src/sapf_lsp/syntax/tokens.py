"""
Token definitions for the SAPF lexer.

This module defines the token kinds recognized in SAPF source, the fixed
operator table used for maximal-munch matching, and the Token record itself.
"""

from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    """Enumeration of all token kinds in SAPF source."""

    WORD = "word"
    NUMBER = "number"
    STRING = "string"
    COMMENT = "comment"
    OPERATOR = "operator"
    UNKNOWN = "unknown"


# Operators and punctuation. Multi-character entries win over their prefixes.
OPERATORS: frozenset[str] = frozenset(
    {
        "#[",   # signal list
        "@@@",  # deep each
        "@@",
        "@",    # each
        "[",
        "]",
        "{",
        "}",
        "(",
        ")",
        "\\",   # lambda
        "'",    # symbol quote
        ",",
        ".",
        ":",
        "=",    # bind
        "==",
        "!=",
        "<",
        "<=",
        ">",
        ">=",
        "+",
        "-",
        "*",
        "/",
        "%",
        "^",
        "!",
        "|",
        "&",
    }
)

LONGEST_OPERATOR = max(len(op) for op in OPERATORS)

# Single characters that end a word run
DELIMITERS: frozenset[str] = frozenset(op for op in OPERATORS if len(op) == 1) | {'"', ";"}

STRING_QUOTE = '"'
COMMENT_START = ";"
ESCAPE = "\\"


@dataclass(frozen=True, slots=True)
class Token:
    """
    Represents a single classified span of SAPF source.

    Attributes:
        kind: The kind of this token
        text: The exact source text covered by the token
        start: Offset of the first character
        end: Offset one past the last character
        line: 0-indexed line of the first character
        column: 0-indexed column (in code points) of the first character
        terminated: False only for a string that runs to end-of-text
    """

    kind: TokenKind
    text: str
    start: int
    end: int
    line: int
    column: int
    terminated: bool = True

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.text!r}, {self.line}:{self.column})"

    @property
    def length(self) -> int:
        return self.end - self.start

    def contains(self, offset: int) -> bool:
        """Check if ``offset`` falls inside this token's span."""
        return self.start <= offset < self.end

    @property
    def is_word(self) -> bool:
        return self.kind is TokenKind.WORD

    @property
    def is_anomaly(self) -> bool:
        """Check if this token marks malformed input."""
        return self.kind is TokenKind.UNKNOWN or not self.terminated
