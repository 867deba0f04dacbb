"""
SAPF Syntax Package.

Lexical analysis for SAPF source:
- Tokens: token kinds, the operator table and the Token record
- Lexer: turns source text into an ordered token stream
"""

from sapf_lsp.syntax.lexer import Lexer, tokenize
from sapf_lsp.syntax.tokens import OPERATORS, Token, TokenKind

__all__ = [
    "Lexer",
    "tokenize",
    "Token",
    "TokenKind",
    "OPERATORS",
]
