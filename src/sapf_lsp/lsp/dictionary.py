"""
Built-in word documentation for the SAPF LSP.

The documentation ships as a JSON file grouping words into categories:

    {
        "stack": {
            "description": "Stack manipulation.",
            "items": {"dup": "(a --> a a) duplicate the top item."}
        }
    }

It is parsed once at startup into a WordDictionary, which is never mutated
afterwards and is shared by the completion and hover providers.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping

from sapf_lsp.utils.errors import DictionaryLoadError, SourceLocation

logger = logging.getLogger("sapf-lsp.dictionary")

DEFAULT_DICTIONARY_PATH = Path(__file__).resolve().parent.parent / "data" / "words.json"


@dataclass(frozen=True, slots=True)
class DictionaryEntry:
    """
    Documentation for one built-in word.

    Attributes:
        name: The word as written in source
        signature: Stack effect, e.g. "(a b --> c)", or "" if undocumented
        description: Prose description
        category: Name of the category that declares the word
        index: Position of the declaration in the data file
    """

    name: str
    signature: str
    description: str
    category: str
    index: int

    @property
    def documentation(self) -> str:
        """Signature and description as one line, the way SAPF help prints them."""
        return f"{self.signature} {self.description}".strip()


@dataclass(frozen=True, slots=True)
class Category:
    """A named group of words with its own description."""

    name: str
    description: str
    index: int


def split_signature(doc: str) -> tuple[str, str]:
    """
    Split a documentation string into (signature, description).

    A signature is a leading parenthesised stack effect; nested parentheses
    are balanced. Strings without one have an empty signature.
    """
    doc = doc.strip()
    if not doc.startswith("("):
        return "", doc

    depth = 0
    for i, char in enumerate(doc):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return doc[: i + 1], doc[i + 1:].strip()

    return "", doc


def _sort_key(entry: DictionaryEntry) -> tuple[str, int]:
    return entry.name, entry.index


class WordDictionary:
    """
    Immutable table of built-in word documentation.

    Entries keep their declaration order; lookups go through a read-only
    name index where the first declaration of a name wins.
    """

    def __init__(self, entries: list[DictionaryEntry], categories: list[Category]) -> None:
        self._sorted: tuple[DictionaryEntry, ...] = tuple(sorted(entries, key=_sort_key))

        by_name: dict[str, DictionaryEntry] = {}
        for entry in entries:
            by_name.setdefault(entry.name, entry)
        self._by_name: Mapping[str, DictionaryEntry] = MappingProxyType(by_name)

        self._categories: Mapping[str, Category] = MappingProxyType(
            {category.name: category for category in categories}
        )

    def __len__(self) -> int:
        return len(self._sorted)

    def __iter__(self) -> Iterator[DictionaryEntry]:
        return iter(self._sorted)

    def __contains__(self, word: object) -> bool:
        return word in self._by_name

    @property
    def categories(self) -> tuple[Category, ...]:
        return tuple(self._categories.values())

    def lookup(self, word: str) -> DictionaryEntry | None:
        """Return the entry for ``word``, or None if it is undocumented."""
        return self._by_name.get(word)

    def prefix_search(self, prefix: str) -> list[DictionaryEntry]:
        """
        Return every entry whose name starts with ``prefix``.

        Matching is exact and case-sensitive. Results are sorted by name,
        with entries sharing a name kept in declaration order.
        """
        return [entry for entry in self._sorted if entry.name.startswith(prefix)]

    def category(self, name: str) -> Category | None:
        """Return the category called ``name``, or None."""
        return self._categories.get(name)

    def category_search(self, prefix: str) -> list[Category]:
        """Return the categories whose name starts with ``prefix``, sorted by name."""
        return sorted(
            (category for category in self._categories.values() if category.name.startswith(prefix)),
            key=lambda category: category.name,
        )

    def entries_in(self, category: str, prefix: str = "") -> list[DictionaryEntry]:
        """Return the entries declared in ``category`` that start with ``prefix``."""
        return [
            entry
            for entry in self._sorted
            if entry.category == category and entry.name.startswith(prefix)
        ]


def parse_dictionary(data: object, source: str = "<data>") -> WordDictionary:
    """
    Build a WordDictionary from decoded JSON data.

    Raises:
        DictionaryLoadError: if the data does not have the expected shape
    """
    if not isinstance(data, dict):
        raise DictionaryLoadError(f"{source}: expected an object of categories")

    entries: list[DictionaryEntry] = []
    categories: list[Category] = []

    for category_name, category_data in data.items():
        if not isinstance(category_data, dict):
            raise DictionaryLoadError(f"{source}: category {category_name!r} must be an object")

        description = category_data.get("description", "")
        items = category_data.get("items")
        if not isinstance(description, str):
            raise DictionaryLoadError(
                f"{source}: description of category {category_name!r} must be a string"
            )
        if not isinstance(items, dict):
            raise DictionaryLoadError(f"{source}: category {category_name!r} has no items object")

        categories.append(Category(category_name, description, len(categories)))

        for word, doc in items.items():
            if not isinstance(doc, str):
                raise DictionaryLoadError(
                    f"{source}: documentation for {word!r} in {category_name!r} must be a string"
                )
            signature, text = split_signature(doc)
            entries.append(DictionaryEntry(word, signature, text, category_name, len(entries)))

    return WordDictionary(entries, categories)


def load(path: Path | str | None = None) -> WordDictionary:
    """
    Load the word dictionary from ``path`` (the bundled data by default).

    Raises:
        DictionaryLoadError: if the file is missing, unreadable or malformed
    """
    path = Path(path) if path is not None else DEFAULT_DICTIONARY_PATH

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DictionaryLoadError(f"Cannot read word documentation {path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise DictionaryLoadError(
            f"Invalid JSON: {e.msg}", SourceLocation(e.lineno - 1, e.colno - 1, str(path))
        ) from e

    dictionary = parse_dictionary(data, str(path))
    logger.info(f"Loaded {len(dictionary)} words in {len(dictionary.categories)} categories")
    return dictionary
