"""
Pytest configuration and shared fixtures for sapf-lsp tests.
"""

import pytest

from sapf_lsp.lsp import dictionary as word_dictionary
from sapf_lsp.lsp.dictionary import WordDictionary, parse_dictionary
from sapf_lsp.lsp.documents import Document, DocumentStore
from sapf_lsp.syntax.lexer import Lexer
from sapf_lsp.syntax.tokens import Token

TEST_URI = "file:///test.sapf"

# A small dictionary with known contents, including a name declared twice
SAMPLE_WORDS = {
    "stack": {
        "description": "Stack manipulation.",
        "items": {
            "dup": "(a --> a a) push a copy of the top item.",
            "drop": "(a --> ) remove the top item.",
            "swap": "(a b --> b a) exchange the top two items.",
            "dupd": "(a b --> a a b) duplicate the second item.",
        },
    },
    "osc": {
        "description": "Oscillators.",
        "items": {
            "sinosc": "(freq phase --> out) sine wave oscillator.",
            "saw": "(freq --> out) sawtooth oscillator.",
            "Saw": "(freq --> out) capitalised on purpose.",
        },
    },
    "filter": {
        "description": "Filters.",
        "items": {
            "lpf": "(in freq --> out) low pass filter.",
            "saw": "(in --> out) a second saw, declared later.",
            "nodoc": "plain description without a stack effect",
        },
    },
}


@pytest.fixture
def lexer_factory():
    """Factory fixture for creating lexers."""

    def _create_lexer(source: str) -> Lexer:
        return Lexer(source)

    return _create_lexer


@pytest.fixture
def tokenize(lexer_factory):
    """Fixture to tokenize source code."""

    def _tokenize(source: str) -> list[Token]:
        lexer = lexer_factory(source)
        return lexer.tokenize()

    return _tokenize


@pytest.fixture(scope="session")
def bundled_dictionary() -> WordDictionary:
    """The dictionary shipped with the package."""
    return word_dictionary.load()


@pytest.fixture
def dictionary() -> WordDictionary:
    """A small dictionary with known contents."""
    return parse_dictionary(SAMPLE_WORDS)


@pytest.fixture
def store() -> DocumentStore:
    """An empty document store."""
    return DocumentStore()


@pytest.fixture
def open_document(store):
    """Fixture to open a document in the store."""

    def _open(text: str, uri: str = TEST_URI, version: int = 1) -> Document:
        return store.open(uri, text, version)

    return _open
