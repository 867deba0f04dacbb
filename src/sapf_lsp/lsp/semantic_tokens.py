"""
Semantic token encoding for the SAPF LSP.

Every lexed token maps to a fixed entry of the published legend. The LSP
wire format is a flat list of integers, five per token:
``(deltaLine, deltaStart, length, tokenType, tokenModifiers)``, where
``deltaStart`` is relative to the previous token only when both start on
the same line. Columns and lengths are measured in the position units negotiated with the
client (UTF-16 by default).
"""

from dataclasses import dataclass

from lsprotocol import types

from sapf_lsp.lsp.dictionary import WordDictionary
from sapf_lsp.lsp.documents import Document
from sapf_lsp.syntax.tokens import Token, TokenKind

# Semantic token types (must match order in legend)
TOKEN_TYPES: dict[TokenKind, str] = {
    TokenKind.WORD: "function",      # 0
    TokenKind.NUMBER: "number",      # 1
    TokenKind.STRING: "string",      # 2
    TokenKind.COMMENT: "comment",    # 3
    TokenKind.OPERATOR: "operator",  # 4
    TokenKind.UNKNOWN: "unknown",    # 5
}

TOKEN_MODIFIERS = [
    "documentation",   # bit 0 - comments
    "defaultLibrary",  # bit 1 - documented built-in words
]

TOKEN_TYPE_INDEX: dict[TokenKind, int] = {kind: i for i, kind in enumerate(TOKEN_TYPES)}

DOCUMENTATION = 1 << 0
DEFAULT_LIBRARY = 1 << 1

LEGEND = types.SemanticTokensLegend(
    token_types=list(TOKEN_TYPES.values()),
    token_modifiers=TOKEN_MODIFIERS,
)


@dataclass(frozen=True, slots=True)
class SemanticTokenDelta:
    """One encoded token, relative to the previous one."""

    delta_line: int
    delta_start: int
    length: int
    token_type: int
    modifiers: int

    def as_tuple(self) -> tuple[int, int, int, int, int]:
        return (self.delta_line, self.delta_start, self.length, self.token_type, self.modifiers)


class SemanticTokenEncoder:
    """
    Encodes a document's token cache as LSP semantic tokens.

    When a dictionary is given, words it documents carry the
    ``defaultLibrary`` modifier.
    """

    def __init__(self, dictionary: WordDictionary | None = None) -> None:
        self.dictionary = dictionary

    def modifiers_for(self, token: Token) -> int:
        """Return the modifier bitmask for a token."""
        if token.kind is TokenKind.COMMENT:
            return DOCUMENTATION
        if token.kind is TokenKind.WORD and self.dictionary is not None and token.text in self.dictionary:
            return DEFAULT_LIBRARY
        return 0

    def _pieces(self, document: Document, token: Token) -> list[tuple[int, int, int]]:
        """
        Split a token into one (line, start, length) piece per source line.

        Start and length are in client units. The carriage return of a CRLF break
        is not part of a piece; empty and whitespace-only pieces are dropped.
        """
        pieces: list[tuple[int, int, int]] = []
        line = token.line
        column = token.column
        segments = token.text.split("\n")
        for i, segment in enumerate(segments):
            if i + 1 < len(segments):
                segment = segment.removesuffix("\r")
            if i > 0:
                line += 1
                column = 0
            if segment and not segment.isspace():
                start = document.client_length(document.lines[line][:column])
                pieces.append((line, start, document.client_length(segment)))
        return pieces

    def deltas(self, document: Document, tokens: list[Token] | tuple[Token, ...]) -> list[SemanticTokenDelta]:
        """Encode ``tokens`` from ``document`` as relative deltas."""
        result: list[SemanticTokenDelta] = []
        previous_line = 0
        previous_start = 0

        for token in tokens:
            token_type = TOKEN_TYPE_INDEX[token.kind]
            modifiers = self.modifiers_for(token)
            for line, start, length in self._pieces(document, token):
                delta_line = line - previous_line
                delta_start = start if delta_line else start - previous_start
                result.append(SemanticTokenDelta(delta_line, delta_start, length, token_type, modifiers))
                previous_line = line
                previous_start = start

        return result

    def encode(self, document: Document) -> list[int]:
        """Encode every token of ``document`` into the flat LSP data array."""
        return _flatten(self.deltas(document, document.tokens))

    def encode_range(self, document: Document, range_: types.Range) -> list[int]:
        """Encode the tokens of ``document`` that intersect ``range_``."""
        start = document.offset_at(range_.start.line, range_.start.character)
        end = document.offset_at(range_.end.line, range_.end.character)
        return _flatten(self.deltas(document, document.tokens_in_range(start, end)))


def _flatten(deltas: list[SemanticTokenDelta]) -> list[int]:
    data: list[int] = []
    for delta in deltas:
        data.extend(delta.as_tuple())
    return data
