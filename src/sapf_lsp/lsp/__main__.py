"""
Entry point for running the SAPF LSP server as a module.

Usage:
    python -m sapf_lsp.lsp
    python -m sapf_lsp.lsp --tcp --port 2087
"""

from sapf_lsp.lsp.server import main

if __name__ == "__main__":
    main()
