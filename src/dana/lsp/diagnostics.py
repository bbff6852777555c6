"""
Diagnostic generation for Dana LSP.

This module runs line-level syntax heuristics over Dana source text and
reports the findings as LSP-compatible diagnostics. It does not parse the
language: every check looks at a single line in isolation.

Checks, in the order they run on each line:
- Bracket matching
- Assignment operator misuse ('=' where ':=' was meant)
- Unknown tokens that look like misspelled keywords
- Declaration syntax for 'var' and 'def'
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

from lsprotocol import types

from dana.lexicon import DEFAULT_LEXICON, Lexicon
from dana.utils.errors import ConfigurationError
from dana.utils.similarity import first_within

logger = logging.getLogger("dana-lsp.diagnostics")

DIAGNOSTIC_SOURCE = "dana-language-server"

DEFAULT_MAX_PROBLEMS = 1000

BRACKET_PAIRS = {"(": ")", "[": "]", "{": "}"}
CLOSING_BRACKETS = frozenset(BRACKET_PAIRS.values())

COMMENT_PREFIXES = ("#", "(*")

# Common short or generic identifiers that never trigger a spelling hint
ALLOWED_IDENTIFIERS = frozenset(
    ["i", "j", "k", "x", "y", "z", "n", "len", "size", "count", "temp", "result"]
)

MAX_SUGGESTION_DISTANCE = 2

_LINE_SPLIT = re.compile(r"\r?\n")
_ASSIGNMENT = re.compile(r"\b(\w+)\s*=\s*([^=<>])", re.ASCII)
_IDENTIFIER = re.compile(r"\b[a-zA-Z_][a-zA-Z0-9_]*\b", re.ASCII)

MSG_UNMATCHED_CLOSING = "Unmatched closing bracket '{}'"
MSG_UNCLOSED = "Unclosed bracket(s): {}"
MSG_ASSIGNMENT = "Did you mean ':=' for assignment instead of '='?"
MSG_UNKNOWN_TOKEN = "Unknown token '{}'. Did you mean '{}'?"
MSG_VAR_TYPE = "Variable declaration must specify a type (var name is type)"
MSG_DEF_COLON = (
    "Function definition with return type should use colon syntax "
    "(def name is returnType: params as type)"
)


@dataclass(frozen=True)
class ValidationSettings:
    """
    Per-call validation settings.

    Attributes:
        max_number_of_problems: Stop scanning further lines once this many
            diagnostics have been collected
    """

    max_number_of_problems: int = DEFAULT_MAX_PROBLEMS

    def __post_init__(self) -> None:
        if self.max_number_of_problems < 0:
            raise ConfigurationError(
                "maxNumberOfProblems must be non-negative",
                str(self.max_number_of_problems),
            )

    @classmethod
    def from_dict(cls, payload: Optional[Any]) -> "ValidationSettings":
        """
        Build settings from an editor configuration payload.

        Missing or malformed values fall back to the defaults.

        Args:
            payload: The ``danaLanguageServer`` configuration section

        Returns:
            The validation settings
        """
        if not isinstance(payload, dict):
            return cls()

        value = payload.get("maxNumberOfProblems")
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            if value is not None:
                logger.warning(f"Ignoring invalid maxNumberOfProblems: {value!r}")
            return cls()

        return cls(max_number_of_problems=value)


def _line_range(line: int, start: int, end: int) -> types.Range:
    return types.Range(
        start=types.Position(line=line, character=start),
        end=types.Position(line=line, character=end),
    )


class DiagnosticProvider:
    """
    Generates LSP diagnostics from Dana source code.

    Each non-blank, non-comment line goes through every check in a fixed
    order. Scanning stops at the first line boundary where the number of
    collected diagnostics has reached the configured maximum.
    """

    def __init__(
        self,
        source: str,
        settings: ValidationSettings | None = None,
        lexicon: Lexicon = DEFAULT_LEXICON,
    ) -> None:
        """
        Initialize the diagnostic provider.

        Args:
            source: The Dana source code to analyze
            settings: Validation settings (defaults apply when None)
            lexicon: The lexicon used for known names and suggestions
        """
        self.source = source
        self.settings = settings or ValidationSettings()
        self.lexicon = lexicon
        self._diagnostics: list[types.Diagnostic] = []

        self._known_names = lexicon.names() | ALLOWED_IDENTIFIERS
        self._keyword_names = [keyword.name for keyword in lexicon.keywords]

    def get_diagnostics(self) -> list[types.Diagnostic]:
        """
        Get all diagnostics for the document.

        Returns:
            List of LSP diagnostic objects, in line order
        """
        self._diagnostics = []
        limit = self.settings.max_number_of_problems

        for line_number, line in enumerate(_LINE_SPLIT.split(self.source)):
            if len(self._diagnostics) >= limit:
                break

            # U+FEFF counts as whitespace here
            stripped = line.replace("\ufeff", " ").strip()
            if not stripped or stripped.startswith(COMMENT_PREFIXES):
                continue

            self._check_brackets(line, line_number)
            self._check_assignment_operators(line, line_number)
            self._check_unknown_tokens(line, line_number)
            self._check_declarations(line, line_number)

        return self._diagnostics

    def _add(
        self,
        severity: types.DiagnosticSeverity,
        message: str,
        line: int,
        start: int,
        end: int,
    ) -> None:
        self._diagnostics.append(
            types.Diagnostic(
                range=_line_range(line, start, end),
                message=message,
                severity=severity,
                source=DIAGNOSTIC_SOURCE,
            )
        )

    def _check_brackets(self, line: str, line_number: int) -> None:
        """Report closers without a matching opener and openers left open."""
        stack: list[str] = []

        for i, char in enumerate(line):
            if char in BRACKET_PAIRS:
                stack.append(char)
            elif char in CLOSING_BRACKETS:
                last_open = stack.pop() if stack else None
                if last_open is None or BRACKET_PAIRS[last_open] != char:
                    self._add(
                        types.DiagnosticSeverity.Error,
                        MSG_UNMATCHED_CLOSING.format(char),
                        line_number,
                        i,
                        i + 1,
                    )

        if stack:
            self._add(
                types.DiagnosticSeverity.Error,
                MSG_UNCLOSED.format(", ".join(stack)),
                line_number,
                0,
                len(line),
            )

    def _check_assignment_operators(self, line: str, line_number: int) -> None:
        """Warn about a bare '=' following a word, which is usually meant as ':='."""
        for match in _ASSIGNMENT.finditer(line):
            equal_index = line.find("=", match.start())

            # Part of a comparison operator
            next_char = line[equal_index + 1 : equal_index + 2]
            prev_char = line[equal_index - 1] if equal_index > 0 else ""
            if next_char == "=" or prev_char in ("!", "<", ">"):
                continue

            self._add(
                types.DiagnosticSeverity.Warning,
                MSG_ASSIGNMENT,
                line_number,
                equal_index,
                equal_index + 1,
            )

    def _check_unknown_tokens(self, line: str, line_number: int) -> None:
        """Suggest a keyword for identifiers that look like a misspelling of one."""
        for token in _IDENTIFIER.findall(line):
            if token in self._known_names or token[0].isdigit() or len(token) <= 2:
                continue

            suggestion = first_within(token, self._keyword_names, MAX_SUGGESTION_DISTANCE)
            if suggestion is None:
                continue

            # Always points at the first occurrence in the line
            token_index = line.find(token)
            self._add(
                types.DiagnosticSeverity.Information,
                MSG_UNKNOWN_TOKEN.format(token, suggestion),
                line_number,
                token_index,
                token_index + len(token),
            )

    def _check_declarations(self, line: str, line_number: int) -> None:
        """Check the 'var name is type' and 'def name is type: ...' forms."""
        if "var " in line and " is " not in line:
            self._add(
                types.DiagnosticSeverity.Error,
                MSG_VAR_TYPE,
                line_number,
                line.find("var "),
                len(line),
            )

        if "def " in line and "is " in line and ":" not in line:
            self._add(
                types.DiagnosticSeverity.Warning,
                MSG_DEF_COLON,
                line_number,
                line.find("def "),
                len(line),
            )


def validate(
    text: str,
    settings: ValidationSettings | None = None,
    lexicon: Lexicon = DEFAULT_LEXICON,
) -> list[types.Diagnostic]:
    """
    Convenience function to get diagnostics for a document.

    Args:
        text: The Dana source code
        settings: Validation settings (defaults apply when None)
        lexicon: The lexicon to check against

    Returns:
        List of LSP diagnostics
    """
    provider = DiagnosticProvider(text, settings, lexicon)
    return provider.get_diagnostics()


def safe_validate(
    text: str,
    settings: ValidationSettings | None = None,
    lexicon: Lexicon = DEFAULT_LEXICON,
) -> list[types.Diagnostic]:
    """Like validate(), but logs any failure and returns no diagnostics instead."""
    try:
        return validate(text, settings, lexicon)
    except Exception:
        logger.exception("Error in document validation")
        return []
