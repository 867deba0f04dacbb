"""
Completion item provider for the SAPF LSP.

Completions come from the built-in word dictionary. The word under the cursor
is located from the document's token stream, and the text between the start
of that word and the cursor is used as an exact, case-sensitive prefix.

Two contexts are recognized:
- a plain word: every dictionary entry (and category) starting with the prefix
- ``category.word``: only the entries declared in that category
"""

from lsprotocol import types

from sapf_lsp.lsp.dictionary import Category, DictionaryEntry, WordDictionary
from sapf_lsp.lsp.documents import Document
from sapf_lsp.syntax.tokens import Token, TokenKind

TRIGGER_CHARACTERS = ["."]

MEMBER_ACCESS = "."

TRIGGER_SUGGEST = types.Command(title="Trigger Suggestion", command="editor.action.triggerSuggest")


def _sort_text(rank: int) -> str:
    return f"{rank:05d}"


class CompletionProvider:
    """
    Provides completion items for SAPF documents.

    The provider holds a reference to the shared, immutable word dictionary
    and keeps no per-document state.
    """

    def __init__(self, dictionary: WordDictionary) -> None:
        self.dictionary = dictionary

    def entry_item(self, entry: DictionaryEntry, rank: int) -> types.CompletionItem:
        """Project a dictionary entry into a completion item."""
        return types.CompletionItem(
            label=entry.name,
            kind=types.CompletionItemKind.Function,
            detail=entry.signature,
            documentation=entry.description,
            sort_text=_sort_text(rank),
        )

    def category_item(self, category: Category, rank: int) -> types.CompletionItem:
        """
        Project a category into a completion item.

        Accepting it inserts ``category.`` and asks the editor to suggest
        again, which lists the words of that category.
        """
        return types.CompletionItem(
            label=category.name,
            kind=types.CompletionItemKind.Module,
            detail="category",
            documentation=category.description,
            sort_text=_sort_text(rank),
            insert_text=f"{category.name}{MEMBER_ACCESS}",
            command=TRIGGER_SUGGEST,
        )

    def _category_before(self, document: Document, token: Token) -> Category | None:
        """
        Return the category named right before a '.' operator token.

        The category word, the dot and whatever follows must be adjacent.
        """
        if token.kind is not TokenKind.OPERATOR or token.text != MEMBER_ACCESS:
            return None
        previous = document.previous_token(token)
        if previous is None or not previous.is_word or previous.end != token.start:
            return None
        return self.dictionary.category(previous.text)

    def get_completions(
        self, document: Document | None, line: int, character: int
    ) -> list[types.CompletionItem]:
        """
        Get completion items at a position.

        Args:
            document: The open document, or None if the URI is not open
            line: 0-indexed line number
            character: 0-indexed character position (UTF-16 units)

        Returns:
            Ranked completion items; empty when the cursor is not in a word
        """
        if document is None:
            return []

        offset = document.offset_at(line, character)
        token = document.token_before(offset)
        if token is None:
            return []

        # Directly after "category."
        category = self._category_before(document, token)
        if category is not None and token.end == offset:
            entries = self.dictionary.entries_in(category.name)
            return [self.entry_item(entry, rank) for rank, entry in enumerate(entries)]

        if not token.is_word:
            return []

        prefix = document.text[token.start:offset]

        previous = document.previous_token(token)
        if previous is not None and previous.end == token.start:
            category = self._category_before(document, previous)
            if category is not None:
                entries = self.dictionary.entries_in(category.name, prefix)
                return [self.entry_item(entry, rank) for rank, entry in enumerate(entries)]

        items = [
            self.entry_item(entry, rank)
            for rank, entry in enumerate(self.dictionary.prefix_search(prefix))
        ]
        items.extend(
            self.category_item(category, len(items) + rank)
            for rank, category in enumerate(self.dictionary.category_search(prefix))
        )
        return items
