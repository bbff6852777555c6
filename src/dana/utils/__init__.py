"""
Dana Utilities Package.

Common utilities for error handling and string similarity.
"""

from dana.utils.errors import ConfigurationError, DanaError, LexiconError
from dana.utils.similarity import first_within, levenshtein_distance

__all__ = [
    # Errors
    "DanaError",
    "LexiconError",
    "ConfigurationError",
    # String similarity utilities
    "levenshtein_distance",
    "first_within",
]
