"""Tests for the Dana LSP completion provider."""

import pytest
from lsprotocol.types import CompletionItem, CompletionItemKind

from dana.lexicon import Lexicon
from dana.lsp.completions import (
    CompletionEntry,
    CompletionProvider,
    all_completion_items,
    completion_entry_for,
)


class TestCompletionItems:
    """Test suite for the editor-neutral completion entries."""

    def test_one_item_per_lexicon_entry(self, lexicon: Lexicon) -> None:
        items = all_completion_items(lexicon)

        assert len(items) == len(lexicon) == 39
        assert [item.name for item in items] == [entry.name for entry in lexicon.all_entries()]

    def test_deterministic(self) -> None:
        assert all_completion_items() == all_completion_items()

    def test_duplicate_booleans_offered_twice(self) -> None:
        names = [item.name for item in all_completion_items()]

        assert names.count("true") == 2
        assert names.count("false") == 2

    def test_keyword_with_usage(self, lexicon: Lexicon) -> None:
        item = completion_entry_for(lexicon.find_keyword("def"))

        assert item == CompletionEntry(
            name="def",
            kind="keyword",
            detail="keyword: def",
            documentation=(
                "Function/procedure definition\n\nUsage: def name is returnType: params as type"
            ),
        )

    def test_keyword_without_usage(self, lexicon: Lexicon) -> None:
        item = completion_entry_for(lexicon.find_keyword("end"))

        assert item.documentation == "End block"
        assert item.detail == "keyword: end"

    def test_type_detail(self, lexicon: Lexicon) -> None:
        item = completion_entry_for(lexicon.find_keyword("byte"))

        assert item.kind == "type"
        assert item.detail == "type: byte"

    def test_builtin_function(self, lexicon: Lexicon) -> None:
        item = completion_entry_for(lexicon.find_builtin("strlen"))

        assert item.kind == "function"
        assert item.detail == "strlen(str as byte[]): int"
        assert item.documentation == "Get the length of a string\n\nUsage: len := strlen(str)"

    def test_builtin_without_parameters(self, lexicon: Lexicon) -> None:
        item = completion_entry_for(lexicon.find_builtin("readInteger"))

        assert item.detail == "readInteger(): int"


class TestLspItems:
    """Test suite for the LSP completion item conversion."""

    @pytest.mark.parametrize(
        "name, kind",
        [
            ("if", CompletionItemKind.Keyword),
            ("int", CompletionItemKind.TypeParameter),
            ("and", CompletionItemKind.Operator),
            ("true", CompletionItemKind.Constant),
            ("writeByte", CompletionItemKind.Function),
        ],
    )
    def test_kind_mapping(self, name: str, kind: CompletionItemKind) -> None:
        items = {item.label: item for item in CompletionProvider().get_completions()}

        assert items[name].kind == kind

    def test_unknown_kind_maps_to_text(self) -> None:
        entry = CompletionEntry(name="foo", kind="snippet", detail="", documentation="")

        assert entry.to_lsp_item().kind == CompletionItemKind.Text

    def test_item_fields(self) -> None:
        item = CompletionProvider().get_completions()[0]

        assert item.label == "if"
        assert item.detail == "keyword: if"
        assert item.data == "if"
        assert "Usage: if condition" in item.documentation

    def test_provider_reuses_built_items(self) -> None:
        provider = CompletionProvider()

        first = provider.get_completions()
        second = provider.get_completions()

        assert first is not second
        assert all(a is b for a, b in zip(first, second))

    def test_caller_mutation_does_not_leak(self) -> None:
        provider = CompletionProvider()

        items = provider.get_completions()
        items.clear()

        assert len(provider.get_completions()) == 39

    def test_resolve_returns_item_unchanged(self) -> None:
        item = CompletionItem(label="loop")

        assert CompletionProvider().resolve(item) is item
