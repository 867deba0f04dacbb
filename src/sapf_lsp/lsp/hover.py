"""
Hover provider for the SAPF LSP.

Shows the stack effect and description of the built-in word under the
cursor. Hovering anything that is not a documented word yields no result.
"""

from lsprotocol import types

from sapf_lsp.lsp.dictionary import Category, DictionaryEntry, WordDictionary
from sapf_lsp.lsp.documents import Document


def format_entry(entry: DictionaryEntry) -> str:
    """Render a dictionary entry as Markdown hover text."""
    parts = [f"```sapf\n{entry.name} {entry.signature}".rstrip() + "\n```"]
    if entry.description:
        parts.append(entry.description)
    parts.append(f"*{entry.category}*")
    return "\n\n".join(parts)


def format_category(category: Category) -> str:
    """Render a category as Markdown hover text."""
    return f"**{category.name}** (category)\n\n{category.description}"


class HoverProvider:
    """Provides hover information from the built-in word dictionary."""

    def __init__(self, dictionary: WordDictionary) -> None:
        self.dictionary = dictionary

    def get_hover(
        self, document: Document | None, line: int, character: int
    ) -> types.Hover | None:
        """
        Get hover information at a position.

        Args:
            document: The open document, or None if the URI is not open
            line: 0-indexed line number
            character: 0-indexed character position (UTF-16 units)

        Returns:
            Hover information or None
        """
        if document is None:
            return None

        token = document.token_at(document.offset_at(line, character))
        if token is None or not token.is_word:
            return None

        # Category names take precedence over words of the same name
        category = self.dictionary.category(token.text)
        if category is not None:
            content = format_category(category)
        else:
            entry = self.dictionary.lookup(token.text)
            if entry is None:
                return None
            content = format_entry(entry)

        return types.Hover(
            contents=types.MarkupContent(
                kind=types.MarkupKind.Markdown,
                value=content,
            ),
            range=document.range_of(token),
        )
