"""
Dana Command-Line Interface.

Runs the language tooling outside an editor.

Usage:
    dana check program.dana         # Report syntax diagnostics
    dana check a.dana b.dana --json # Machine-readable output
    dana keywords                   # List the lexicon
    dana hover writeInteger         # Show hover documentation
"""

import argparse
import json
import os
import re
import sys
from pathlib import Path
from typing import Any, Optional

from lsprotocol import types

from dana import __version__
from dana.lexicon import DEFAULT_LEXICON, OPERATORS
from dana.lsp.diagnostics import DEFAULT_MAX_PROBLEMS, ValidationSettings, validate
from dana.lsp.hover import hover_info
from dana.utils.errors import DanaError


# =============================================================================
# ANSI Color Codes for Terminal Output
# =============================================================================


class Colors:
    """ANSI escape codes for colored terminal output."""

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    GRAY = "\033[90m"

    BOLD = "\033[1m"

    RESET = "\033[0m"

    @classmethod
    def disable(cls) -> None:
        """Disable all colors (for non-TTY output)."""
        cls.RED = ""
        cls.GREEN = ""
        cls.YELLOW = ""
        cls.BLUE = ""
        cls.CYAN = ""
        cls.GRAY = ""
        cls.BOLD = ""
        cls.RESET = ""


def _init_colors() -> None:
    """Initialize colors based on terminal capabilities."""
    if not sys.stdout.isatty() or os.environ.get("NO_COLOR"):
        Colors.disable()


_init_colors()


SEVERITY_LABELS = {
    types.DiagnosticSeverity.Error: "error",
    types.DiagnosticSeverity.Warning: "warning",
    types.DiagnosticSeverity.Information: "info",
    types.DiagnosticSeverity.Hint: "hint",
}


def _severity_color(severity: Optional[types.DiagnosticSeverity]) -> str:
    if severity == types.DiagnosticSeverity.Error:
        return Colors.RED
    if severity == types.DiagnosticSeverity.Warning:
        return Colors.YELLOW
    return Colors.CYAN


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="dana",
        description="Dana - syntax checking and documentation for Dana programs",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Check command
    check_parser = subparsers.add_parser(
        "check",
        help="Check Dana files for syntax problems",
    )
    check_parser.add_argument(
        "inputs",
        type=Path,
        nargs="+",
        help="Input Dana files",
    )
    check_parser.add_argument(
        "--max-problems",
        type=int,
        default=DEFAULT_MAX_PROBLEMS,
        metavar="N",
        help=f"Stop checking a file after N problems (default: {DEFAULT_MAX_PROBLEMS})",
    )
    check_parser.add_argument(
        "--json",
        action="store_true",
        help="Output diagnostics as JSON",
    )

    # Keywords command
    subparsers.add_parser(
        "keywords",
        help="List keywords, types and built-in functions",
    )

    # Hover command
    hover_parser = subparsers.add_parser(
        "hover",
        help="Show documentation for a keyword or built-in function",
    )
    hover_parser.add_argument("symbol", help="Exact symbol name")

    return parser


# =============================================================================
# Check
# =============================================================================


def render_diagnostic(
    diagnostic: types.Diagnostic, source_lines: list[str], filename: str
) -> str:
    """
    Render a diagnostic with the offending source line underlined.

    Args:
        diagnostic: The diagnostic to render
        source_lines: The document split into lines
        filename: Name shown in the location line

    Returns:
        A formatted multi-line string
    """
    color = _severity_color(diagnostic.severity)
    label = SEVERITY_LABELS.get(diagnostic.severity, "error")
    start = diagnostic.range.start
    end = diagnostic.range.end

    lines = [
        f"{color}{Colors.BOLD}{label}{Colors.RESET}: {Colors.BOLD}{diagnostic.message}{Colors.RESET}",
        f"  {Colors.BLUE}-->{Colors.RESET} {filename}:{start.line + 1}:{start.character + 1}",
    ]

    if 0 <= start.line < len(source_lines):
        source_line = source_lines[start.line]
        width = max(1, end.character - start.character)
        lines.append(f"   {Colors.BLUE}|{Colors.RESET}")
        lines.append(f"{Colors.BLUE}{start.line + 1:3} |{Colors.RESET} {source_line}")
        lines.append(
            f"   {Colors.BLUE}|{Colors.RESET} {' ' * start.character}{color}{'^' * width}{Colors.RESET}"
        )

    return "\n".join(lines)


def _diagnostic_to_dict(diagnostic: types.Diagnostic) -> dict[str, Any]:
    return {
        "severity": SEVERITY_LABELS.get(diagnostic.severity, "error"),
        "range": {
            "startLine": diagnostic.range.start.line,
            "startChar": diagnostic.range.start.character,
            "endLine": diagnostic.range.end.line,
            "endChar": diagnostic.range.end.character,
        },
        "message": diagnostic.message,
        "source": diagnostic.source,
    }


def cmd_check(args: argparse.Namespace) -> int:
    """Handle the check command."""
    try:
        settings = ValidationSettings(max_number_of_problems=args.max_problems)
    except DanaError as e:
        print(f"{Colors.RED}Error:{Colors.RESET} {e}", file=sys.stderr)
        return 1

    exit_code = 0
    report: list[dict[str, Any]] = []

    for input_path in args.inputs:
        if not input_path.exists():
            print(f"Error: File not found: {input_path}", file=sys.stderr)
            exit_code = 1
            continue

        try:
            source = input_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            print(f"{Colors.RED}Error:{Colors.RESET} cannot read {input_path}: {e}", file=sys.stderr)
            exit_code = 1
            continue

        diagnostics = validate(source, settings)
        if any(d.severity == types.DiagnosticSeverity.Error for d in diagnostics):
            exit_code = 1

        if args.json:
            report.append(
                {
                    "file": str(input_path),
                    "diagnostics": [_diagnostic_to_dict(d) for d in diagnostics],
                }
            )
            continue

        if not diagnostics:
            print(f"{Colors.GREEN}OK:{Colors.RESET} {input_path} (no problems)")
            continue

        source_lines = re.split(r"\r?\n", source)
        for diagnostic in diagnostics:
            print(render_diagnostic(diagnostic, source_lines, str(input_path)))
            print()

        errors = sum(1 for d in diagnostics if d.severity == types.DiagnosticSeverity.Error)
        print(
            f"{input_path}: {len(diagnostics)} problem(s), "
            f"{Colors.RED}{errors} error(s){Colors.RESET}"
        )

    if args.json:
        print(json.dumps(report, indent=2))

    return exit_code


# =============================================================================
# Lexicon Queries
# =============================================================================


def cmd_keywords(args: argparse.Namespace) -> int:  # noqa: ARG001
    """Handle the keywords command."""
    print(f"\n{Colors.BOLD}Keywords{Colors.RESET}")
    print("=" * 60)
    seen: set[str] = set()
    for keyword in DEFAULT_LEXICON.keywords:
        if keyword.name in seen:
            continue
        seen.add(keyword.name)
        print(f"  {keyword.name:14s} {Colors.GRAY}{keyword.kind.value:9s}{Colors.RESET} {keyword.description}")

    print(f"\n{Colors.BOLD}Built-in Functions{Colors.RESET}")
    print("=" * 60)
    for func in DEFAULT_LEXICON.builtins:
        print(f"  {Colors.CYAN}{func.signature}{Colors.RESET}")
        print(f"    {Colors.GRAY}{func.description}{Colors.RESET}")

    print(f"\n{Colors.BOLD}Operators{Colors.RESET}")
    print("=" * 60)
    print("  " + "  ".join(OPERATORS))

    print()
    return 0


def cmd_hover(args: argparse.Namespace) -> int:
    """Handle the hover command."""
    result = hover_info(args.symbol)
    if result is None:
        print(f"Unknown symbol: {args.symbol}", file=sys.stderr)
        return 1

    print(result.content)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    command_handlers = {
        "check": cmd_check,
        "keywords": cmd_keywords,
        "hover": cmd_hover,
    }

    handler = command_handlers.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
