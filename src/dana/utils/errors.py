"""
Error types for the Dana language tooling.
"""

from typing import Optional


class DanaError(Exception):
    """Base exception for all Dana tooling errors."""

    def __init__(self, message: str, detail: Optional[str] = None) -> None:
        self.message = message
        self.detail = detail
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.detail:
            return f"{self.message} ({self.detail})"
        return self.message


class LexiconError(DanaError):
    """Raised when a lexicon entry or table is malformed."""

    pass


class ConfigurationError(DanaError):
    """Raised when validation settings are out of range."""

    pass
