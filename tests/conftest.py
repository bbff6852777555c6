"""
Pytest configuration and shared fixtures for Dana tests.
"""

import pytest
from lsprotocol import types

from dana.lexicon import DEFAULT_LEXICON, Lexicon
from dana.lsp.diagnostics import ValidationSettings, validate


@pytest.fixture
def lexicon() -> Lexicon:
    """The default Dana lexicon."""
    return DEFAULT_LEXICON


@pytest.fixture
def check_source():
    """Fixture to validate source text with an optional problem limit."""

    def _check(source: str, max_problems: int | None = None) -> list[types.Diagnostic]:
        settings = None
        if max_problems is not None:
            settings = ValidationSettings(max_number_of_problems=max_problems)
        return validate(source, settings)

    return _check


@pytest.fixture
def by_severity():
    """Fixture to filter diagnostics by severity."""

    def _filter(
        diagnostics: list[types.Diagnostic], severity: types.DiagnosticSeverity
    ) -> list[types.Diagnostic]:
        return [d for d in diagnostics if d.severity == severity]

    return _filter


SAMPLE_PROGRAM = """\
# Print the first ten squares
def main
    var i is int
    begin
        i := 0
        loop:
            if i >= 10: break
            writeInteger: i * i
            writeString: "\\n"
            i := i + 1
    end
"""


@pytest.fixture
def sample_program() -> str:
    """A small, well-formed Dana program."""
    return SAMPLE_PROGRAM
