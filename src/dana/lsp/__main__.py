"""
Entry point for running the Dana LSP server as a module.

Usage:
    python -m dana.lsp
    python -m dana.lsp --tcp --port 2087
"""

from dana.lsp.server import main

if __name__ == "__main__":
    main()
