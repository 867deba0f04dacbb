"""
SAPF Language Server Protocol (LSP) Server.

This module implements an LSP server for SAPF, the stack-based audio
synthesis language, using pygls (Python Language Server). It provides:

- Document synchronization (open, change, close)
- Completion of built-in words
- Hover documentation for built-in words
- Semantic tokens for syntax highlighting (full document and ranges)

The server never evaluates SAPF code; it only tokenizes documents and looks
up names in the bundled word documentation.

Usage:
    # Start the server in stdio mode (for IDE integration)
    sapf-lsp

    # Start in TCP mode (for debugging)
    sapf-lsp --tcp --port 2087
"""

import logging
import sys

from lsprotocol import types
from pygls.lsp.server import LanguageServer

from sapf_lsp import __version__
from sapf_lsp.lsp import dictionary as word_dictionary
from sapf_lsp.lsp.completions import TRIGGER_CHARACTERS, CompletionProvider
from sapf_lsp.lsp.dictionary import WordDictionary
from sapf_lsp.lsp.documents import DocumentStore
from sapf_lsp.lsp.hover import HoverProvider
from sapf_lsp.lsp.semantic_tokens import LEGEND, SemanticTokenEncoder
from sapf_lsp.utils.errors import DictionaryLoadError, StaleVersionError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("sapf-lsp")


class SapfLanguageServer(LanguageServer):
    """
    Language Server Protocol implementation for SAPF.

    pygls reads one message at a time and routes it through the handlers
    registered in ``_register_handlers``. Unknown requests get a
    method-not-found error, unknown notifications are ignored, and an
    exception raised by a handler becomes an error response.
    """

    def __init__(self, dictionary: WordDictionary) -> None:
        """
        Initialize the SAPF language server.

        Args:
            dictionary: The loaded built-in word documentation
        """
        super().__init__(
            name="sapf-lsp",
            version=f"v{__version__}",
            text_document_sync_kind=types.TextDocumentSyncKind.Incremental,
        )

        self.dictionary = dictionary
        self.documents = DocumentStore()

        self._completions = CompletionProvider(dictionary)
        self._hover = HoverProvider(dictionary)
        self._semantic_tokens = SemanticTokenEncoder(dictionary)

        # Register all handlers
        self._register_handlers()

    def _register_handlers(self) -> None:
        """
        Register all LSP request and notification handlers.

        pygls tags each handler with registration attributes, so handlers are
        plain functions closing over the server rather than bound methods.
        """
        # Document synchronization
        @self.feature(types.TEXT_DOCUMENT_DID_OPEN)
        def did_open(params: types.DidOpenTextDocumentParams) -> None:
            self._on_did_open(params)

        @self.feature(types.TEXT_DOCUMENT_DID_CHANGE)
        def did_change(params: types.DidChangeTextDocumentParams) -> None:
            self._on_did_change(params)

        @self.feature(types.TEXT_DOCUMENT_DID_CLOSE)
        def did_close(params: types.DidCloseTextDocumentParams) -> None:
            self._on_did_close(params)

        # Completion
        @self.feature(
            types.TEXT_DOCUMENT_COMPLETION,
            types.CompletionOptions(
                trigger_characters=TRIGGER_CHARACTERS,
                resolve_provider=False,
            ),
        )
        def completion(params: types.CompletionParams) -> types.CompletionList:
            return self._on_completion(params)

        # Hover
        @self.feature(types.TEXT_DOCUMENT_HOVER)
        def hover(params: types.HoverParams) -> types.Hover | None:
            return self._on_hover(params)

        # Semantic tokens
        @self.feature(types.TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL, LEGEND)
        def semantic_tokens_full(params: types.SemanticTokensParams) -> types.SemanticTokens:
            return self._on_semantic_tokens_full(params)

        @self.feature(types.TEXT_DOCUMENT_SEMANTIC_TOKENS_RANGE, LEGEND)
        def semantic_tokens_range(params: types.SemanticTokensRangeParams) -> types.SemanticTokens:
            return self._on_semantic_tokens_range(params)

    # =========================================================================
    # Document Synchronization
    # =========================================================================

    def _on_did_open(self, params: types.DidOpenTextDocumentParams) -> None:
        """Handle document open notification."""
        uri = params.text_document.uri
        logger.info(f"Document opened: {uri}")

        text = self.workspace.get_text_document(uri).source
        self.documents.open(uri, text, params.text_document.version, self.workspace.position_codec)

    def _on_did_change(self, params: types.DidChangeTextDocumentParams) -> None:
        """
        Handle document change notification.

        pygls has already applied the content changes to its workspace copy;
        the edited text is taken from there.
        """
        uri = params.text_document.uri
        if uri not in self.documents:
            logger.warning(f"Ignoring change for unopened document: {uri}")
            return

        text = self.workspace.get_text_document(uri).source
        try:
            self.documents.change(uri, text, params.text_document.version)
        except StaleVersionError as e:
            logger.warning(f"Ignoring change: {e}")
            return

        logger.debug(f"Document changed: {uri}")

    def _on_did_close(self, params: types.DidCloseTextDocumentParams) -> None:
        """Handle document close notification."""
        uri = params.text_document.uri
        logger.info(f"Document closed: {uri}")

        self.documents.close(uri)

    # =========================================================================
    # Completion
    # =========================================================================

    def _on_completion(self, params: types.CompletionParams) -> types.CompletionList:
        """Handle completion request."""
        position = params.position
        document = self.documents.get(params.text_document.uri)

        items = self._completions.get_completions(document, position.line, position.character)

        return types.CompletionList(
            is_incomplete=False,
            items=items,
        )

    # =========================================================================
    # Hover
    # =========================================================================

    def _on_hover(self, params: types.HoverParams) -> types.Hover | None:
        """Handle hover request."""
        position = params.position
        document = self.documents.get(params.text_document.uri)

        return self._hover.get_hover(document, position.line, position.character)

    # =========================================================================
    # Semantic Tokens
    # =========================================================================

    def _on_semantic_tokens_full(
        self, params: types.SemanticTokensParams
    ) -> types.SemanticTokens:
        """Handle full-document semantic tokens request."""
        document = self.documents.get(params.text_document.uri)
        if document is None:
            return types.SemanticTokens(data=[])

        return types.SemanticTokens(data=self._semantic_tokens.encode(document))

    def _on_semantic_tokens_range(
        self, params: types.SemanticTokensRangeParams
    ) -> types.SemanticTokens:
        """Handle ranged semantic tokens request."""
        document = self.documents.get(params.text_document.uri)
        if document is None:
            return types.SemanticTokens(data=[])

        return types.SemanticTokens(
            data=self._semantic_tokens.encode_range(document, params.range)
        )


# =============================================================================
# Server Creation and Main Entry Point
# =============================================================================


def create_server(dictionary: WordDictionary | None = None) -> SapfLanguageServer:
    """
    Create and configure a SAPF language server instance.

    Args:
        dictionary: Word documentation to serve; the bundled data is loaded
            when omitted

    Raises:
        DictionaryLoadError: if the bundled documentation cannot be loaded
    """
    if dictionary is None:
        dictionary = word_dictionary.load()

    server = SapfLanguageServer(dictionary)

    @server.feature(types.INITIALIZE)
    def on_initialize(params: types.InitializeParams) -> None:
        """Handle initialize request."""
        client = params.client_info.name if params.client_info else "unknown client"
        logger.info(f"Initializing SAPF Language Server for {client}")

    @server.feature(types.INITIALIZED)
    def on_initialized(
        params: types.InitializedParams,  # noqa: ARG001
    ) -> None:
        """Handle initialized notification."""
        logger.info("SAPF Language Server initialized successfully")

    @server.feature(types.SHUTDOWN)
    def on_shutdown(
        params: None,  # noqa: ARG001
    ) -> None:
        """Handle shutdown request."""
        logger.info("Shutting down SAPF Language Server")

    return server


def main() -> None:
    """
    Main entry point for the SAPF language server.

    Starts the server in stdio mode for IDE integration.
    """
    import argparse

    parser = argparse.ArgumentParser(
        description="SAPF Language Server",
        prog="sapf-lsp",
    )
    parser.add_argument(
        "--tcp",
        action="store_true",
        help="Start server in TCP mode instead of stdio",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to in TCP mode (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=2087,
        help="Port to listen on in TCP mode (default: 2087)",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="info",
        help="Logging level (default: info)",
    )
    parser.add_argument(
        "--dictionary",
        default=None,
        help="Path to an alternate word documentation JSON file",
    )

    args = parser.parse_args()

    # Configure logging level
    log_level = getattr(logging, args.log_level.upper())
    logging.getLogger("sapf-lsp").setLevel(log_level)

    try:
        dictionary = word_dictionary.load(args.dictionary)
    except DictionaryLoadError as e:
        logger.error(f"Cannot start: {e}")
        sys.exit(1)

    server = create_server(dictionary)

    if args.tcp:
        logger.info(f"Starting SAPF LSP in TCP mode on {args.host}:{args.port}")
        server.start_tcp(args.host, args.port)
    else:
        logger.info("Starting SAPF LSP in stdio mode")
        server.start_io()


if __name__ == "__main__":
    main()
