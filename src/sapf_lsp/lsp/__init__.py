"""
SAPF Language Server Protocol (LSP) implementation.

This package provides an LSP server for SAPF, enabling IDE features such as:
- Completion of built-in words
- Hover documentation with stack effects
- Semantic syntax highlighting

Usage:
    # Start the LSP server (stdio mode)
    sapf-lsp

    # Or run as a module
    python -m sapf_lsp.lsp
"""

from sapf_lsp.lsp.server import SapfLanguageServer, create_server, main

__all__ = [
    "SapfLanguageServer",
    "create_server",
    "main",
]
