"""
Completion items for Dana LSP.

Completion is context-free: every lexicon entry is offered regardless of
cursor position or prefix, keywords first and then built-in functions, in
lexicon order.
"""

from dataclasses import dataclass

from lsprotocol import types

from dana.lexicon import DEFAULT_LEXICON, BuiltinFunction, EntryKind, Lexicon, LexiconEntry

# Map lexicon entry kinds to LSP completion item kinds
KIND_TO_LSP: dict[str, types.CompletionItemKind] = {
    EntryKind.KEYWORD.value: types.CompletionItemKind.Keyword,
    EntryKind.TYPE.value: types.CompletionItemKind.TypeParameter,
    EntryKind.OPERATOR.value: types.CompletionItemKind.Operator,
    EntryKind.BOOLEAN.value: types.CompletionItemKind.Constant,
    EntryKind.FUNCTION.value: types.CompletionItemKind.Function,
}


@dataclass(frozen=True)
class CompletionEntry:
    """
    Editor-neutral completion item derived from a lexicon entry.

    Attributes:
        name: The text to insert
        kind: keyword, type, operator, boolean, function or text
        detail: One-line summary shown next to the label
        documentation: Description and usage example
    """

    name: str
    kind: str
    detail: str
    documentation: str

    def to_lsp_item(self) -> types.CompletionItem:
        """Convert to an LSP CompletionItem."""
        return types.CompletionItem(
            label=self.name,
            kind=KIND_TO_LSP.get(self.kind, types.CompletionItemKind.Text),
            detail=self.detail,
            documentation=self.documentation,
            data=self.name,
        )


def completion_entry_for(entry: LexiconEntry) -> CompletionEntry:
    """Build the completion entry for a single lexicon entry."""
    if isinstance(entry, BuiltinFunction):
        return CompletionEntry(
            name=entry.name,
            kind=entry.kind.value,
            detail=entry.signature,
            documentation=f"{entry.description}\n\nUsage: {entry.usage}",
        )

    documentation = entry.description
    if entry.usage:
        documentation = f"{entry.description}\n\nUsage: {entry.usage}"

    return CompletionEntry(
        name=entry.name,
        kind=entry.kind.value,
        detail=f"{entry.kind.value}: {entry.name}",
        documentation=documentation,
    )


def all_completion_items(lexicon: Lexicon = DEFAULT_LEXICON) -> list[CompletionEntry]:
    """Get a completion entry for every lexicon entry, in lexicon order."""
    return [completion_entry_for(entry) for entry in lexicon.all_entries()]


class CompletionProvider:
    """
    Provides LSP completion items for Dana documents.

    The lexicon never changes, so the LSP items are built on first use and
    reused afterwards.
    """

    def __init__(self, lexicon: Lexicon = DEFAULT_LEXICON) -> None:
        self.lexicon = lexicon
        self._cached_items: list[types.CompletionItem] | None = None

    def get_completions(self) -> list[types.CompletionItem]:
        """Get the full, unfiltered list of LSP completion items."""
        if self._cached_items is None:
            self._cached_items = [
                entry.to_lsp_item() for entry in all_completion_items(self.lexicon)
            ]
        return list(self._cached_items)

    def resolve(self, item: types.CompletionItem) -> types.CompletionItem:
        """Resolve a completion item; items already carry all their details."""
        return item
