"""
sapf-lsp Utilities Package.

Error types shared across the server.
"""

from sapf_lsp.utils.errors import (
    DictionaryLoadError,
    DocumentNotFoundError,
    SapfLspError,
    SourceLocation,
    StaleVersionError,
)

__all__ = [
    "SapfLspError",
    "DictionaryLoadError",
    "DocumentNotFoundError",
    "StaleVersionError",
    "SourceLocation",
]
