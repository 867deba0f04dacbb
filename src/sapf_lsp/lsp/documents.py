"""
Open-document tracking for the SAPF LSP.

pygls keeps the authoritative text of every open document in its workspace
and applies the client's incremental edits there. The store keeps one
immutable Document per open URI on top of that: the text at a given version
plus the tokens lexed from it. Every accepted change builds a complete new
Document before it is swapped into the store, so providers never see text
and tokens that disagree.
"""

import logging
from bisect import bisect_right
from dataclasses import dataclass, field
from itertools import accumulate

from lsprotocol import types
from pygls.workspace import PositionCodec, ServerTextPosition, ServerTextRange

from sapf_lsp.syntax.lexer import tokenize
from sapf_lsp.syntax.tokens import Token
from sapf_lsp.utils.errors import DocumentNotFoundError, StaleVersionError

logger = logging.getLogger("sapf-lsp.documents")


@dataclass(frozen=True)
class Document:
    """
    An open document and the tokens lexed from its current text.

    Positions exchanged with the client are converted with ``position_codec``,
    the encoding negotiated during initialization (UTF-16 unless the client
    asked for another one).
    """

    uri: str
    version: int
    text: str
    tokens: tuple[Token, ...]
    position_codec: PositionCodec = field(default_factory=PositionCodec, repr=False, compare=False)
    lines: tuple[str, ...] = field(init=False, repr=False, compare=False)
    _line_starts: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Lines end at "\n" only, the same rule the lexer uses for token lines
        lines = tuple(self.text.split("\n"))
        object.__setattr__(self, "lines", lines)
        object.__setattr__(
            self, "_line_starts", tuple(accumulate((len(line) + 1 for line in lines[:-1]), initial=0))
        )

    @classmethod
    def build(
        cls, uri: str, text: str, version: int, position_codec: PositionCodec | None = None
    ) -> "Document":
        """Create a document and lex its text."""
        return cls(
            uri=uri,
            version=version,
            text=text,
            tokens=tuple(tokenize(text)),
            position_codec=position_codec or PositionCodec(),
        )

    def offset_at(self, line: int, character: int) -> int:
        """
        Convert a client position into an offset into the text.

        A character past the end of a line maps to the line end, and a line
        past the end of the text maps to the end of the text.
        """
        if line >= len(self.lines):
            return len(self.text)

        character = min(character, self.position_codec.client_num_units(self.lines[line]))
        position = self.position_codec.position_from_client_units(
            self.lines, types.Position(line=line, character=character)
        )
        return self._line_starts[line] + position.character

    def client_length(self, text: str) -> int:
        """Length of ``text`` in the client's position units."""
        return self.position_codec.client_num_units(text)

    def range_of(self, token: Token) -> types.Range:
        """Return the client range covered by ``token``."""
        newlines = token.text.count("\n")
        if newlines:
            end = ServerTextPosition(token.line + newlines, len(token.text) - token.text.rfind("\n") - 1)
        else:
            end = ServerTextPosition(token.line, token.column + len(token.text))

        return self.position_codec.range_to_client_units(
            self.lines,
            ServerTextRange(start=ServerTextPosition(token.line, token.column), end=end),
        )

    def _index_before(self, offset: int) -> int:
        """Index of the last token starting at or before ``offset``, or -1."""
        return bisect_right(self.tokens, offset, key=lambda token: token.start) - 1

    def token_at(self, offset: int) -> Token | None:
        """Return the token whose span contains ``offset``."""
        index = self._index_before(offset)
        if index < 0:
            return None
        token = self.tokens[index]
        return token if token.contains(offset) else None

    def token_before(self, offset: int) -> Token | None:
        """
        Return the token that contains ``offset`` or ends exactly at it.

        A token starting at ``offset`` does not count: the cursor sits in
        front of it, not inside it.
        """
        index = bisect_right(self.tokens, offset - 1, key=lambda token: token.start) - 1
        if index < 0:
            return None
        token = self.tokens[index]
        return token if token.end >= offset else None

    def previous_token(self, token: Token) -> Token | None:
        """Return the token immediately before ``token`` in the stream."""
        index = self._index_before(token.start) - 1
        return self.tokens[index] if index >= 0 else None

    def tokens_in_range(self, start: int, end: int) -> list[Token]:
        """Return the tokens whose spans intersect ``[start, end)``."""
        if end <= start:
            return []
        first = max(self._index_before(start), 0)
        selected: list[Token] = []
        for token in self.tokens[first:]:
            if token.start >= end:
                break
            if token.end > start:
                selected.append(token)
        return selected


class DocumentStore:
    """
    Holds the open documents of a session, keyed by URI.

    Handlers run one at a time, so the store is not locked; each Document is
    immutable and replaced with a single assignment.
    """

    def __init__(self) -> None:
        self._documents: dict[str, Document] = {}

    def __contains__(self, uri: object) -> bool:
        return uri in self._documents

    def __len__(self) -> int:
        return len(self._documents)

    def open(
        self, uri: str, text: str, version: int, position_codec: PositionCodec | None = None
    ) -> Document:
        """Create a document for ``uri`` and build its token cache."""
        document = Document.build(uri, text, version, position_codec)
        self._documents[uri] = document
        logger.debug(f"Opened {uri} v{version}: {len(document.tokens)} tokens")
        return document

    def change(self, uri: str, text: str, version: int) -> Document:
        """
        Replace the text of ``uri`` with the edited ``text`` and rebuild the token cache.

        Raises:
            DocumentNotFoundError: if ``uri`` is not open
            StaleVersionError: if ``version`` does not advance the document
        """
        current = self._documents.get(uri)
        if current is None:
            raise DocumentNotFoundError(uri)
        if version <= current.version:
            raise StaleVersionError(uri, current.version, version)

        document = Document.build(uri, text, version, current.position_codec)
        self._documents[uri] = document
        logger.debug(f"Changed {uri} v{version}: {len(document.tokens)} tokens")
        return document

    def close(self, uri: str) -> None:
        """Discard the document for ``uri``. Unknown URIs are ignored."""
        self._documents.pop(uri, None)

    def get(self, uri: str) -> Document | None:
        """Return the current document for ``uri``, or None if it is not open."""
        return self._documents.get(uri)
