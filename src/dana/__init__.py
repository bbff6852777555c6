"""
Dana - language tooling for the Dana teaching language.

Provides the static lexicon of the language, line-level syntax
diagnostics, completion and hover data, and a language server that
exposes them to editors.
"""

__version__ = "0.1.0"

from dana.lexicon import DEFAULT_LEXICON, BuiltinFunction, EntryKind, Keyword, Lexicon

__all__ = [
    "__version__",
    "DEFAULT_LEXICON",
    "BuiltinFunction",
    "EntryKind",
    "Keyword",
    "Lexicon",
]
