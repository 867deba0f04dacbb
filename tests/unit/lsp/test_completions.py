"""Tests for the SAPF LSP completion provider."""

import pytest
from lsprotocol import types

from sapf_lsp.lsp.completions import CompletionProvider


@pytest.fixture
def provider(dictionary) -> CompletionProvider:
    return CompletionProvider(dictionary)


def labels(items):
    return [item.label for item in items]


class TestCompletionProvider:
    """Test suite for CompletionProvider."""

    def test_completes_prefix(self, provider, open_document) -> None:
        """Typing 'du' offers dup first."""
        document = open_document("1 du")
        items = provider.get_completions(document, 0, 4)

        assert labels(items) == ["dup", "dupd"]
        assert items[0].detail == "(a --> a a)"
        assert items[0].documentation == "push a copy of the top item."
        assert items[0].kind == types.CompletionItemKind.Function

    def test_sort_text_preserves_ranking(self, provider, open_document) -> None:
        """Clients sorting by sort_text keep the server order."""
        document = open_document("d")
        items = provider.get_completions(document, 0, 1)

        assert [item.sort_text for item in items] == sorted(item.sort_text for item in items)

    def test_prefix_stops_at_cursor(self, provider, open_document) -> None:
        """Only the text before the cursor is used as prefix."""
        document = open_document("swap")
        items = provider.get_completions(document, 0, 1)

        assert labels(items) == ["saw", "saw", "sinosc", "swap", "stack"]

    def test_categories_follow_words(self, provider, open_document) -> None:
        """Matching categories are listed after matching words."""
        document = open_document("os")
        items = provider.get_completions(document, 0, 2)

        assert labels(items) == ["osc"]
        assert items[0].kind == types.CompletionItemKind.Module
        assert items[0].documentation == "Oscillators."

    def test_category_item_opens_member_list(self, provider, open_document) -> None:
        """Accepting a category inserts 'category.' and asks for suggestions again."""
        document = open_document("os")
        item = provider.get_completions(document, 0, 2)[0]

        assert item.insert_text == "osc."
        assert item.command.command == "editor.action.triggerSuggest"

    def test_word_items_insert_their_label(self, provider, open_document) -> None:
        """Word items carry no follow-up command."""
        document = open_document("du")
        item = provider.get_completions(document, 0, 2)[0]

        assert item.insert_text is None
        assert item.command is None

    def test_no_match(self, provider, open_document) -> None:
        """A prefix matching nothing returns an empty list."""
        document = open_document("zzz")
        assert provider.get_completions(document, 0, 3) == []

    def test_case_sensitive(self, provider, open_document) -> None:
        """Completion uses exact case."""
        document = open_document("Du")
        assert provider.get_completions(document, 0, 2) == []

    def test_whitespace_gives_nothing(self, provider, open_document) -> None:
        """A cursor after whitespace is not in a word."""
        document = open_document("dup ")
        assert provider.get_completions(document, 0, 4) == []

    def test_start_of_word_gives_nothing(self, provider, open_document) -> None:
        """A cursor in front of a word is not inside it."""
        document = open_document("dup")
        assert provider.get_completions(document, 0, 0) == []

    @pytest.mark.parametrize("source", ["42", '"du', "; du", "1 2 +"])
    def test_non_word_tokens_give_nothing(self, provider, open_document, source) -> None:
        """Numbers, strings, comments and operators are not completed."""
        document = open_document(source)
        assert provider.get_completions(document, 0, len(source)) == []

    def test_unknown_document(self, provider) -> None:
        """A missing document yields an empty list."""
        assert provider.get_completions(None, 0, 0) == []

    def test_second_line(self, provider, open_document) -> None:
        """Positions on later lines are resolved."""
        document = open_document("1 2 +\n  sw")
        assert labels(provider.get_completions(document, 1, 4)) == ["swap"]


class TestCategoryCompletion:
    """Test suite for category.word completion."""

    def test_after_dot(self, provider, open_document) -> None:
        """Right after 'category.' the category's words are offered."""
        document = open_document("osc.")
        items = provider.get_completions(document, 0, 4)

        assert labels(items) == ["Saw", "saw", "sinosc"]

    def test_member_prefix(self, provider, open_document) -> None:
        """A word after 'category.' only matches that category."""
        document = open_document("filter.sa")
        items = provider.get_completions(document, 0, 9)

        assert labels(items) == ["saw"]
        assert items[0].detail == "(in --> out)"

    def test_dot_after_unknown_category(self, provider, open_document) -> None:
        """A dot after an ordinary word offers nothing."""
        document = open_document("dup.")
        assert provider.get_completions(document, 0, 4) == []

    def test_separated_dot_is_not_member_access(self, provider, open_document) -> None:
        """Whitespace between category and dot breaks the association."""
        document = open_document("osc .sa")
        assert labels(provider.get_completions(document, 0, 7)) == ["saw", "saw"]
