"""
Dana Language Server Protocol (LSP) implementation.

This package provides the LSP server for the Dana language, enabling
IDE features such as:
- Syntax diagnostics with spelling suggestions
- Autocomplete for keywords, types and built-in functions
- Hover documentation

Usage:
    # Start the LSP server (stdio mode)
    dana-lsp

    # Or run as a module
    python -m dana.lsp
"""

from dana.lsp.server import DanaLanguageServer, main

__all__ = [
    "DanaLanguageServer",
    "main",
]
