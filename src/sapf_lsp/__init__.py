"""
sapf-lsp - editor support for SAPF, a stack-based language for audio synthesis.

The package tokenizes SAPF source and serves hover documentation, word
completion and semantic highlighting over the Language Server Protocol.
"""

from sapf_lsp.syntax.lexer import Lexer, tokenize
from sapf_lsp.syntax.tokens import Token, TokenKind

__version__ = "0.1.0"
__all__ = [
    "Lexer",
    "tokenize",
    "Token",
    "TokenKind",
]
