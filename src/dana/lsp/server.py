"""
Dana Language Server Protocol (LSP) Server.

This module implements the LSP server for the Dana language using pygls
(Python Language Server). It provides:

- Document synchronization (open, change, close)
- Diagnostics (errors, warnings, spelling hints)
- Completion suggestions
- Hover information
- Per-document settings from the client configuration
- The ``dana.insertMainFunction`` command

Usage:
    # Start the server in stdio mode (for IDE integration)
    dana-lsp

    # Start in TCP mode (for debugging)
    dana-lsp --tcp --port 2087
"""

import inspect
import logging
import uuid
from collections.abc import Callable
from typing import Any

from lsprotocol import types
from pygls.lsp.server import LanguageServer

from dana import __version__
from dana.lexicon import DEFAULT_LEXICON, Lexicon
from dana.lsp.completions import CompletionProvider
from dana.lsp.diagnostics import ValidationSettings, safe_validate
from dana.lsp.hover import hover_at_offset
from dana.lsp.settings import DocumentSettingsCache

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("dana-lsp")

SERVER_NAME = "dana-language-server"

# Client configuration section holding the validation settings
CONFIGURATION_SECTION = "danaLanguageServer"

# Key used by clients that push settings with didChangeConfiguration
LEGACY_SETTINGS_KEY = "languageServerExample"

INSERT_MAIN_COMMAND = "dana.insertMainFunction"

MAIN_FUNCTION_TEMPLATE = "def main\n\tbegin\n\t\t# Your code here\n\tend"

COMPLETION_TRIGGER_CHARACTERS = [".", ":", "("]


def insert_main_edit(uri: str, line: int, character: int) -> types.WorkspaceEdit:
    """
    Build the edit that inserts the main procedure template.

    Args:
        uri: The document URI
        line: 0-indexed line of the insertion point
        character: 0-indexed character of the insertion point

    Returns:
        A workspace edit inserting the template at the given position
    """
    position = types.Position(line=line, character=character)
    return types.WorkspaceEdit(
        changes={
            uri: [
                types.TextEdit(
                    range=types.Range(start=position, end=position),
                    new_text=MAIN_FUNCTION_TEMPLATE,
                )
            ]
        }
    )


def _as_handler(method: Callable[..., Any]) -> Callable[..., Any]:
    """
    Wrap a bound method in a plain function for registration with pygls.

    pygls tags registered handlers with attributes, which bound methods do
    not accept. The wrapper keeps the method's sync or async nature so that
    pygls schedules it the same way.

    Args:
        method: The bound handler method

    Returns:
        A function forwarding all arguments to the method
    """
    if inspect.iscoroutinefunction(method):

        async def handler(*args: Any) -> Any:
            return await method(*args)

    else:

        def handler(*args: Any) -> Any:
            return method(*args)

    handler.__name__ = method.__name__
    handler.__doc__ = method.__doc__
    return handler


class DanaLanguageServer(LanguageServer):
    """
    Language Server Protocol implementation for Dana.

    Validation runs on every open and change notification. Settings are
    cached per document when the client supports ``workspace/configuration``;
    otherwise a single global settings value is used.
    """

    def __init__(self, lexicon: Lexicon = DEFAULT_LEXICON) -> None:
        """Initialize the Dana language server."""
        super().__init__(
            name=SERVER_NAME,
            version=f"v{__version__}",
        )

        self.lexicon = lexicon

        # Client capabilities, filled in on initialize
        self.has_configuration_capability = False
        self.has_workspace_folder_capability = False

        # Used when the client cannot be asked for configuration
        self.global_settings = ValidationSettings()

        self.document_settings = DocumentSettingsCache()

        self._completion_provider = CompletionProvider(lexicon)

        self._register_handlers()

    def _register_handlers(self) -> None:
        """Register all LSP request and notification handlers."""
        # Lifecycle
        self.feature(types.INITIALIZE)(_as_handler(self._on_initialize))
        self.feature(types.INITIALIZED)(_as_handler(self._on_initialized))

        # Document synchronization
        self.feature(types.TEXT_DOCUMENT_DID_OPEN)(_as_handler(self._on_did_open))
        self.feature(types.TEXT_DOCUMENT_DID_CHANGE)(_as_handler(self._on_did_change))
        self.feature(types.TEXT_DOCUMENT_DID_CLOSE)(_as_handler(self._on_did_close))

        # Workspace
        self.feature(types.WORKSPACE_DID_CHANGE_CONFIGURATION)(
            _as_handler(self._on_did_change_configuration)
        )
        self.feature(types.WORKSPACE_DID_CHANGE_WATCHED_FILES)(
            _as_handler(self._on_did_change_watched_files)
        )
        self.feature(types.WORKSPACE_DID_CHANGE_WORKSPACE_FOLDERS)(
            _as_handler(self._on_did_change_workspace_folders)
        )

        # Completion
        self.feature(
            types.TEXT_DOCUMENT_COMPLETION,
            types.CompletionOptions(
                trigger_characters=COMPLETION_TRIGGER_CHARACTERS,
                resolve_provider=True,
            ),
        )(_as_handler(self._on_completion))
        self.feature(types.COMPLETION_ITEM_RESOLVE)(_as_handler(self._on_completion_resolve))

        # Hover
        self.feature(types.TEXT_DOCUMENT_HOVER)(_as_handler(self._on_hover))

        # Commands
        self.command(INSERT_MAIN_COMMAND)(_as_handler(self._on_insert_main_function))

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def _on_initialize(self, params: types.InitializeParams) -> None:
        """Record which optional features the client supports."""
        logger.info("Dana Language Server initializing...")
        capabilities = params.capabilities

        workspace = capabilities.workspace
        self.has_configuration_capability = bool(workspace and workspace.configuration)
        self.has_workspace_folder_capability = bool(workspace and workspace.workspace_folders)

    async def _on_initialized(self, params: types.InitializedParams) -> None:  # noqa: ARG002
        """Register for configuration changes once the client is ready."""
        logger.info("Dana Language Server initialized successfully")
        if not self.has_configuration_capability:
            return

        try:
            await self.client_register_capability_async(
                types.RegistrationParams(
                    registrations=[
                        types.Registration(
                            id=str(uuid.uuid4()),
                            method=types.WORKSPACE_DID_CHANGE_CONFIGURATION,
                        )
                    ]
                )
            )
        except Exception:
            logger.exception("Failed to register for configuration changes")

    # =========================================================================
    # Settings
    # =========================================================================

    async def _fetch_settings(self, uri: str) -> ValidationSettings:
        """Ask the client for the settings of one document."""
        result = await self.workspace_configuration_async(
            types.ConfigurationParams(
                items=[types.ConfigurationItem(scope_uri=uri, section=CONFIGURATION_SECTION)]
            )
        )
        payload = result[0] if result else None
        return ValidationSettings.from_dict(payload)

    async def get_document_settings(self, uri: str) -> ValidationSettings:
        """Get the validation settings that apply to a document."""
        if not self.has_configuration_capability:
            return self.global_settings
        return await self.document_settings.get_or_fetch(uri, self._fetch_settings)

    async def _on_did_change_configuration(
        self, params: types.DidChangeConfigurationParams
    ) -> None:
        """Reset settings and revalidate every open document."""
        if self.has_configuration_capability:
            self.document_settings.clear()
        else:
            payload: Any = None
            if isinstance(params.settings, dict):
                payload = params.settings.get(LEGACY_SETTINGS_KEY)
            self.global_settings = ValidationSettings.from_dict(payload)

        for document in list(self.workspace.text_documents.values()):
            await self.validate_document(document.uri, document.source, document.version)

    def _on_did_change_watched_files(self, params: types.DidChangeWatchedFilesParams) -> None:
        logger.debug(f"Watched files changed: {len(params.changes)} event(s)")

    def _on_did_change_workspace_folders(
        self, params: types.DidChangeWorkspaceFoldersParams
    ) -> None:
        logger.info(
            f"Workspace folders changed: +{len(params.event.added)} -{len(params.event.removed)}"
        )

    # =========================================================================
    # Validation
    # =========================================================================

    def _publish_diagnostics(self, uri: str, diagnostics: list[types.Diagnostic]) -> None:
        """Publish diagnostics to the client."""
        self.text_document_publish_diagnostics(
            types.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
        )

    def _is_stale(self, uri: str, version: int | None) -> bool:
        """Check whether a newer revision of a document has arrived."""
        if version is None:
            return False
        try:
            document = self.workspace.get_text_document(uri)
        except Exception:
            return False
        return document.version is not None and document.version != version

    async def validate_document(self, uri: str, text: str, version: int | None = None) -> None:
        """
        Validate a document and publish its diagnostics.

        Any failure publishes an empty diagnostic list. Results for a
        revision that has been superseded while settings were being fetched
        are dropped.

        Args:
            uri: The document URI
            text: The full document text
            version: The document revision the text belongs to
        """
        try:
            settings = await self.get_document_settings(uri)
        except Exception:
            logger.exception(f"Failed to fetch settings for {uri}")
            self._publish_diagnostics(uri, [])
            return

        diagnostics = safe_validate(text, settings, self.lexicon)

        if self._is_stale(uri, version):
            logger.debug(f"Dropping diagnostics for outdated revision of {uri}")
            return

        self._publish_diagnostics(uri, diagnostics)

    # =========================================================================
    # Document Synchronization
    # =========================================================================

    async def _on_did_open(self, params: types.DidOpenTextDocumentParams) -> None:
        """Handle document open notification."""
        document = params.text_document
        logger.info(f"Document opened: {document.uri}")
        await self.validate_document(document.uri, document.text, document.version)

    async def _on_did_change(self, params: types.DidChangeTextDocumentParams) -> None:
        """Handle document change notification."""
        uri = params.text_document.uri

        doc = self.workspace.get_text_document(uri)
        if doc is None:
            return

        logger.debug(f"Document changed: {uri}")
        await self.validate_document(uri, doc.source, doc.version)

    def _on_did_close(self, params: types.DidCloseTextDocumentParams) -> None:
        """Handle document close notification."""
        uri = params.text_document.uri
        logger.info(f"Document closed: {uri}")

        # Only keep settings for open documents
        self.document_settings.invalidate(uri)
        self._publish_diagnostics(uri, [])

    # =========================================================================
    # Completion
    # =========================================================================

    def _on_completion(self, params: types.CompletionParams) -> list[types.CompletionItem]:  # noqa: ARG002
        """Handle completion request; the full lexicon is always offered."""
        try:
            return self._completion_provider.get_completions()
        except Exception:
            logger.exception("Error in completion handler")
            return []

    def _on_completion_resolve(self, item: types.CompletionItem) -> types.CompletionItem:
        return self._completion_provider.resolve(item)

    # =========================================================================
    # Hover
    # =========================================================================

    def _on_hover(self, params: types.HoverParams) -> types.Hover | None:
        """Handle hover request."""
        try:
            doc = self.workspace.get_text_document(params.text_document.uri)
            if doc is None:
                return None

            offset = doc.offset_at_position(params.position)
            result = hover_at_offset(doc.source, offset, self.lexicon)
        except Exception:
            logger.exception("Error in hover handler")
            return None

        if result is None:
            return None
        return result.to_lsp_hover()

    # =========================================================================
    # Commands
    # =========================================================================

    def _on_insert_main_function(self, *args: Any) -> types.WorkspaceEdit | None:
        """
        Insert the main procedure template.

        Arguments are ``[uri, line, character]``, either unpacked or as a
        single list.
        """
        if len(args) == 1 and isinstance(args[0], (list, tuple)):
            args = tuple(args[0])

        if len(args) != 3:
            logger.warning(f"{INSERT_MAIN_COMMAND} expects [uri, line, character], got {args!r}")
            return None

        uri, line, character = args
        edit = insert_main_edit(str(uri), int(line), int(character))
        self.workspace_apply_edit(types.ApplyWorkspaceEditParams(edit=edit, label="Insert main"))
        return edit


# =============================================================================
# Server Creation and Main Entry Point
# =============================================================================


def create_server(lexicon: Lexicon = DEFAULT_LEXICON) -> DanaLanguageServer:
    """Create and configure a Dana language server instance."""
    return DanaLanguageServer(lexicon)


def main() -> None:
    """
    Main entry point for the Dana language server.

    Starts the server in stdio mode for IDE integration.
    """
    import argparse

    parser = argparse.ArgumentParser(
        description="Dana Language Server",
        prog="dana-lsp",
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

    args = parser.parse_args()

    # Configure logging level
    log_level = getattr(logging, args.log_level.upper())
    logging.getLogger("dana-lsp").setLevel(log_level)

    server = create_server()

    if args.tcp:
        logger.info(f"Starting Dana LSP in TCP mode on {args.host}:{args.port}")
        server.start_tcp(args.host, args.port)
    else:
        logger.info("Starting Dana LSP in stdio mode")
        server.start_io()


if __name__ == "__main__":
    main()
