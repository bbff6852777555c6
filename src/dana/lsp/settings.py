"""
Per-document settings cache for the Dana language server.

Settings are fetched from the client once per open document and reused
until the client reports a configuration change (clears everything) or
the document is closed (clears that entry).
"""

from collections.abc import Awaitable, Callable

from dana.lsp.diagnostics import ValidationSettings

SettingsFetcher = Callable[[str], Awaitable[ValidationSettings]]


class DocumentSettingsCache:
    """Mapping from document URI to its last-fetched validation settings."""

    def __init__(self) -> None:
        self._settings: dict[str, ValidationSettings] = {}

    def get(self, uri: str) -> ValidationSettings | None:
        return self._settings.get(uri)

    def set(self, uri: str, settings: ValidationSettings) -> None:
        self._settings[uri] = settings

    async def get_or_fetch(self, uri: str, fetch: SettingsFetcher) -> ValidationSettings:
        """
        Get cached settings for a document, fetching them on a miss.

        A failed fetch leaves the cache untouched and propagates the error.

        Args:
            uri: The document URI
            fetch: Coroutine function that retrieves settings for a URI

        Returns:
            The settings for the document
        """
        settings = self._settings.get(uri)
        if settings is None:
            settings = await fetch(uri)
            self._settings[uri] = settings
        return settings

    def invalidate(self, uri: str) -> None:
        """Drop the cached settings of one document."""
        self._settings.pop(uri, None)

    def clear(self) -> None:
        """Drop all cached settings."""
        self._settings.clear()

    def __contains__(self, uri: object) -> bool:
        return uri in self._settings

    def __len__(self) -> int:
        return len(self._settings)
