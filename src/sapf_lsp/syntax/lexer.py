"""
SAPF Lexer (Tokenizer).

Transforms SAPF source into an ordered stream of tokens. The lexer is total:
it never raises on malformed input. Unterminated strings run to the end of
the text and unrecognized characters become UNKNOWN tokens, so editors can
keep highlighting while the user is still typing.
"""

from typing import Iterator, Optional

from sapf_lsp.syntax.tokens import (
    COMMENT_START,
    DELIMITERS,
    ESCAPE,
    LONGEST_OPERATOR,
    OPERATORS,
    STRING_QUOTE,
    Token,
    TokenKind,
)


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _is_unknown(char: str) -> bool:
    """Control and other non-printable characters that are not whitespace."""
    return not char.isspace() and not char.isprintable()


class Lexer:
    """
    Tokenizer for SAPF source code.

    The lexer supports:
    - Words (runs of non-whitespace, non-delimiter characters)
    - Numeric literals with optional sign, fraction and exponent
    - Double-quoted strings with backslash escapes, possibly multi-line
    - Line comments starting with ';'
    - Operators and punctuation, matched longest-first

    Whitespace is skipped and never produces tokens.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()
        # or iterate: for token in lexer: ...
    """

    def __init__(self, source: str) -> None:
        """
        Initialize the lexer with source code.

        Args:
            source: The SAPF source code to tokenize
        """
        self.source = source
        self.pos = 0
        self.line = 0
        self.column = 0
        self.tokens: list[Token] = []

    @property
    def _current_char(self) -> Optional[str]:
        """Return the current character or None if at end."""
        if self.pos >= len(self.source):
            return None
        return self.source[self.pos]

    def _peek_ahead(self, n: int) -> Optional[str]:
        """Return the character n positions ahead."""
        peek_pos = self.pos + n
        if peek_pos >= len(self.source):
            return None
        return self.source[peek_pos]

    def _advance(self) -> str:
        """Consume and return the current character."""
        char = self.source[self.pos]
        self.pos += 1

        if char == "\n":
            self.line += 1
            self.column = 0
        else:
            self.column += 1

        return char

    def _advance_to(self, end: int) -> None:
        """Consume characters up to (not including) offset ``end``."""
        while self.pos < end:
            self._advance()

    def _is_boundary(self, offset: int) -> bool:
        """Check whether a token may end right before ``offset``."""
        if offset >= len(self.source):
            return True
        char = self.source[offset]
        return char.isspace() or char in DELIMITERS or _is_unknown(char)

    def _skip_whitespace(self) -> None:
        while self._current_char is not None and self._current_char.isspace():
            self._advance()

    def _make_token(self, kind: TokenKind, start: int, line: int, column: int, terminated: bool = True) -> Token:
        return Token(
            kind=kind,
            text=self.source[start:self.pos],
            start=start,
            end=self.pos,
            line=line,
            column=column,
            terminated=terminated,
        )

    def _read_comment(self) -> None:
        """Consume a ';' comment up to, but not including, the line break."""
        while self._current_char is not None and self._current_char != "\n":
            if self._current_char == "\r" and self._peek_ahead(1) == "\n":
                break
            self._advance()

    def _read_string(self) -> bool:
        """
        Consume a string literal.

        Returns:
            True if the closing quote was found, False if the string runs
            to the end of the text.
        """
        self._advance()  # opening quote

        while self._current_char is not None:
            char = self._advance()
            if char == STRING_QUOTE:
                return True
            if char == ESCAPE and self._current_char is not None:
                self._advance()

        return False

    def _number_end(self) -> Optional[int]:
        """
        Find the end of a numeric literal starting at the current position.

        Supports:
        - Integers: 42, -7
        - Decimals: 3.5, +0.25
        - Exponents: 1e3, 2.5E-3

        A literal only counts when it is followed by a token boundary;
        ``2dup`` is a word, not a number followed by a word.

        Returns:
            The end offset, or None if no number starts here.
        """
        source = self.source
        end = len(source)
        i = self.pos

        if i < end and source[i] in "+-":
            i += 1

        digits_start = i
        while i < end and _is_digit(source[i]):
            i += 1
        if i == digits_start:
            return None

        if i + 1 < end and source[i] == "." and _is_digit(source[i + 1]):
            i += 1
            while i < end and _is_digit(source[i]):
                i += 1

        if i < end and source[i] in "eE":
            j = i + 1
            if j < end and source[j] in "+-":
                j += 1
            if j < end and _is_digit(source[j]):
                i = j
                while i < end and _is_digit(source[i]):
                    i += 1

        if not self._is_boundary(i):
            return None
        return i

    def _operator_end(self) -> Optional[int]:
        """Match the longest operator at the current position."""
        for length in range(LONGEST_OPERATOR, 0, -1):
            candidate = self.source[self.pos:self.pos + length]
            if len(candidate) == length and candidate in OPERATORS:
                return self.pos + length
        return None

    def _read_word(self) -> None:
        while self._current_char is not None and not self._is_boundary(self.pos):
            self._advance()

    def _next_token(self) -> Optional[Token]:
        """
        Extract the next token from the source.

        Returns:
            The next token, or None if at end of source.
        """
        self._skip_whitespace()

        char = self._current_char
        if char is None:
            return None

        start, line, column = self.pos, self.line, self.column

        if char == COMMENT_START:
            self._read_comment()
            return self._make_token(TokenKind.COMMENT, start, line, column)

        if char == STRING_QUOTE:
            terminated = self._read_string()
            return self._make_token(TokenKind.STRING, start, line, column, terminated)

        if _is_unknown(char):
            self._advance()
            return self._make_token(TokenKind.UNKNOWN, start, line, column)

        if _is_digit(char) or (char in "+-" and _is_digit(self._peek_ahead(1) or "")):
            number_end = self._number_end()
            if number_end is not None:
                self._advance_to(number_end)
                return self._make_token(TokenKind.NUMBER, start, line, column)

        operator_end = self._operator_end()
        if operator_end is not None:
            self._advance_to(operator_end)
            return self._make_token(TokenKind.OPERATOR, start, line, column)

        self._read_word()
        return self._make_token(TokenKind.WORD, start, line, column)

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source code.

        Returns:
            A list of all tokens in source order.
        """
        self.tokens = []
        self.pos = 0
        self.line = 0
        self.column = 0

        while True:
            token = self._next_token()
            if token is None:
                break
            self.tokens.append(token)

        return self.tokens

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens (re-tokenizes if necessary)."""
        if not self.tokens:
            self.tokenize()
        return iter(self.tokens)


def tokenize(source: str) -> list[Token]:
    """
    Convenience function to tokenize source code.

    Args:
        source: SAPF source code

    Returns:
        List of tokens
    """
    return Lexer(source).tokenize()
