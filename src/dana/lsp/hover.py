"""
Hover information for Dana LSP.

Hover works in two steps: find the word under the cursor in the flat
document text, then look that word up in the lexicon by exact name.
"""

import re
from dataclasses import dataclass

from lsprotocol import types

from dana.lexicon import DEFAULT_LEXICON, Lexicon

_WORD_START = re.compile(r"[a-zA-Z_]")
_WORD_PART = re.compile(r"[a-zA-Z_0-9]")


@dataclass(frozen=True)
class HoverResult:
    """Hover content for a symbol."""

    content: str
    is_markdown: bool = True

    def to_lsp_hover(self, range_: types.Range | None = None) -> types.Hover:
        """Convert to an LSP Hover."""
        kind = types.MarkupKind.Markdown if self.is_markdown else types.MarkupKind.PlainText
        return types.Hover(
            contents=types.MarkupContent(kind=kind, value=self.content),
            range=range_,
        )


def get_word_range_at_offset(text: str, offset: int) -> tuple[int, int] | None:
    """
    Find the word surrounding a character offset.

    The word extends left over letters and underscores and right over
    letters, digits and underscores.

    Args:
        text: The full document text
        offset: 0-indexed character offset into the text

    Returns:
        (start, end) offsets of the word, or None if there is no word there
    """
    if offset < 0 or offset > len(text):
        return None

    start = offset
    while start > 0 and _WORD_START.match(text[start - 1]):
        start -= 1

    end = offset
    while end < len(text) and _WORD_PART.match(text[end]):
        end += 1

    if start == end:
        return None

    return start, end


def get_word_at_offset(text: str, offset: int) -> str | None:
    """Get the word surrounding a character offset, or None."""
    word_range = get_word_range_at_offset(text, offset)
    if word_range is None:
        return None
    start, end = word_range
    return text[start:end]


def hover_info(symbol: str, lexicon: Lexicon = DEFAULT_LEXICON) -> HoverResult | None:
    """
    Get hover content for a symbol.

    Keywords are checked before built-in functions. There is no fuzzy
    fallback: unknown symbols produce no hover.

    Args:
        symbol: The exact symbol name
        lexicon: The lexicon to search

    Returns:
        Markdown hover content, or None if the symbol is unknown
    """
    keyword = lexicon.find_keyword(symbol)
    if keyword is not None:
        content = f"**{keyword.name}** ({keyword.kind.value})\n\n{keyword.description}"
        if keyword.usage:
            content += f"\n\n**Usage:** `{keyword.usage}`"
        return HoverResult(content=content)

    func = lexicon.find_builtin(symbol)
    if func is not None:
        params = ", ".join(func.parameters)
        content = (
            f"**{func.name}**({params}): {func.return_type}\n\n"
            f"{func.description}\n\n**Usage:** `{func.usage}`"
        )
        return HoverResult(content=content)

    return None


def hover_at_offset(
    text: str, offset: int, lexicon: Lexicon = DEFAULT_LEXICON
) -> HoverResult | None:
    """Get hover content for the word at an offset in a document."""
    word = get_word_at_offset(text, offset)
    if word is None:
        return None
    return hover_info(word, lexicon)
