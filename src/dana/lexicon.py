"""
Static lexicon of the Dana language.

This module holds the fixed catalog of everything the language tooling
recognizes by name:

- Keywords, types, operator words and boolean literals
- Built-in functions with their parameter and return type signatures
- The operator table

The default lexicon is built once at import time and shared read-only by
the diagnostics, completion and hover providers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from dana.utils.errors import LexiconError


class EntryKind(Enum):
    """Kind of a lexicon entry, as shown to the editor."""

    KEYWORD = "keyword"
    TYPE = "type"
    OPERATOR = "operator"
    BOOLEAN = "boolean"
    FUNCTION = "function"


@dataclass(frozen=True)
class Keyword:
    """
    A keyword, type name, operator word or boolean literal.

    Attributes:
        name: The exact spelling in source code
        description: Short human-readable description
        kind: One of KEYWORD, TYPE, OPERATOR or BOOLEAN
        usage: Optional usage example
    """

    name: str
    description: str
    kind: EntryKind = EntryKind.KEYWORD
    usage: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise LexiconError("Lexicon entry name must not be empty", self.description)
        if self.kind is EntryKind.FUNCTION:
            raise LexiconError("Keywords cannot have the function kind", self.name)


@dataclass(frozen=True)
class BuiltinFunction:
    """
    A built-in function.

    Attributes:
        name: The function name
        description: Short human-readable description
        parameters: Parameter descriptors such as "value as int"
        return_type: Return type name ("void" for procedures)
        usage: Usage example
    """

    name: str
    description: str
    parameters: tuple[str, ...]
    return_type: str
    usage: str

    def __post_init__(self) -> None:
        if not self.name:
            raise LexiconError("Lexicon entry name must not be empty", self.description)

    @property
    def kind(self) -> EntryKind:
        return EntryKind.FUNCTION

    @property
    def signature(self) -> str:
        """Parameter list and return type, e.g. ``strlen(str as byte[]): int``."""
        return f"{self.name}({', '.join(self.parameters)}): {self.return_type}"


LexiconEntry = Union[Keyword, BuiltinFunction]


class Lexicon:
    """
    Immutable registry of known symbols.

    Keywords and built-ins live in separate namespaces. Lookups are exact
    and case-sensitive; fuzzy matching is left to the callers.
    """

    def __init__(
        self,
        keywords: list[Keyword] | tuple[Keyword, ...],
        builtins: list[BuiltinFunction] | tuple[BuiltinFunction, ...],
    ) -> None:
        self._keywords: tuple[Keyword, ...] = tuple(keywords)
        self._builtins: tuple[BuiltinFunction, ...] = tuple(builtins)

        # First registration wins on duplicate names
        self._keyword_index: dict[str, Keyword] = {}
        for keyword in self._keywords:
            self._keyword_index.setdefault(keyword.name, keyword)

        self._builtin_index: dict[str, BuiltinFunction] = {}
        for func in self._builtins:
            self._builtin_index.setdefault(func.name, func)

    @property
    def keywords(self) -> tuple[Keyword, ...]:
        """Keyword entries in registration order, duplicates included."""
        return self._keywords

    @property
    def builtins(self) -> tuple[BuiltinFunction, ...]:
        """Built-in function entries in registration order."""
        return self._builtins

    def find_keyword(self, name: str) -> Keyword | None:
        return self._keyword_index.get(name)

    def find_builtin(self, name: str) -> BuiltinFunction | None:
        return self._builtin_index.get(name)

    def find_exact(self, name: str) -> LexiconEntry | None:
        """
        Look up an entry by exact name.

        Keywords are searched before built-ins.

        Args:
            name: The symbol name to look up

        Returns:
            The matching entry, or None if not found
        """
        keyword = self.find_keyword(name)
        if keyword is not None:
            return keyword
        return self.find_builtin(name)

    def all_entries(self) -> list[LexiconEntry]:
        """Get every entry, keywords first, in registration order."""
        return [*self._keywords, *self._builtins]

    def names(self) -> frozenset[str]:
        """Get the set of all registered names across both namespaces."""
        return frozenset(self._keyword_index) | frozenset(self._builtin_index)

    def duplicate_names(self) -> list[str]:
        """
        Get names registered more than once within the same namespace.

        Returns:
            Duplicated names, in order of their second registration
        """
        duplicates: list[str] = []
        for entries in (self._keywords, self._builtins):
            seen: set[str] = set()
            for entry in entries:
                if entry.name in seen and entry.name not in duplicates:
                    duplicates.append(entry.name)
                seen.add(entry.name)
        return duplicates

    def __len__(self) -> int:
        return len(self._keywords) + len(self._builtins)

    def __contains__(self, name: object) -> bool:
        return name in self._keyword_index or name in self._builtin_index


# =============================================================================
# Dana Language Definitions
# =============================================================================

KW = EntryKind.KEYWORD
TY = EntryKind.TYPE
OP = EntryKind.OPERATOR
BOOL = EntryKind.BOOLEAN

DANA_KEYWORDS: tuple[Keyword, ...] = (
    # Control flow
    Keyword("if", "Conditional statement", KW, "if condition: ... elif condition: ... else: ..."),
    Keyword("elif", "Else-if conditional", KW, "elif condition: ..."),
    Keyword("else", "Else clause", KW, "else: ..."),
    Keyword("loop", "Loop statement", KW, "loop: ... break"),
    Keyword("begin", "Begin block", KW, "begin ... end"),
    Keyword("end", "End block", KW),
    # Statements
    Keyword("skip", "Skip statement (no operation)", KW),
    Keyword("exit", "Exit from procedure", KW),
    Keyword("return", "Return from function", KW, "return: value"),
    Keyword("break", "Break from loop", KW, "break or break: label"),
    Keyword("continue", "Continue to next iteration", KW),
    # Definitions
    Keyword("def", "Function/procedure definition", KW, "def name is returnType: params as type"),
    Keyword("var", "Variable declaration", KW, "var name is type"),
    Keyword("is", "Type declaration keyword", KW, "var x is int"),
    Keyword("as", "Parameter type keyword", KW, "param as type"),
    # Types
    Keyword("int", "Integer type", TY, "var x is int"),
    Keyword("byte", "Byte type (also used for characters)", TY, "var x is byte"),
    Keyword("ref", "Reference parameter modifier", KW, "param as ref int"),
    # Operators
    Keyword("and", "Logical AND operator", OP, "condition1 and condition2"),
    Keyword("or", "Logical OR operator", OP, "condition1 or condition2"),
    Keyword("not", "Logical NOT operator", OP, "not condition"),
    Keyword("mod", "Modulo operator", OP, "a mod b"),
    # Booleans
    Keyword("true", "Boolean true value", BOOL),
    Keyword("false", "Boolean false value", BOOL),
    # Program entry
    Keyword("main", "Main program entry point", KW, "def main"),
    # Booleans again. Completion lists include both copies; see
    # Lexicon.duplicate_names().
    Keyword("true", "Boolean true value", BOOL),
    Keyword("false", "Boolean false value", BOOL),
)

DANA_BUILTIN_FUNCTIONS: tuple[BuiltinFunction, ...] = (
    # Output
    BuiltinFunction(
        "writeInteger", "Write an integer to output", ("value as int",), "void", "writeInteger: 42"
    ),
    BuiltinFunction(
        "writeByte", "Write a byte to output", ("value as byte",), "void", "writeByte: 65"
    ),
    BuiltinFunction(
        "writeChar", "Write a character to output", ("value as byte",), "void", "writeChar: 'A'"
    ),
    BuiltinFunction(
        "writeString", "Write a string to output", ("str as byte[]",), "void", 'writeString: "Hello"'
    ),
    # Input
    BuiltinFunction("readInteger", "Read an integer from input", (), "int", "x := readInteger()"),
    BuiltinFunction("readByte", "Read a byte from input", (), "byte", "b := readByte()"),
    BuiltinFunction("readChar", "Read a character from input", (), "byte", "c := readChar()"),
    BuiltinFunction(
        "readString",
        "Read a string from input",
        ("size as int", "buffer as byte[]"),
        "void",
        "readString: 100, buffer",
    ),
    # Strings
    BuiltinFunction(
        "strlen", "Get the length of a string", ("str as byte[]",), "int", "len := strlen(str)"
    ),
    BuiltinFunction(
        "strcmp",
        "Compare two strings",
        ("str1 as byte[]", "str2 as byte[]"),
        "int",
        "result := strcmp(s1, s2)",
    ),
    BuiltinFunction(
        "strcpy", "Copy a string", ("dest as byte[]", "src as byte[]"), "void", "strcpy: dest, src"
    ),
    BuiltinFunction(
        "strcat",
        "Concatenate two strings",
        ("dest as byte[]", "src as byte[]"),
        "void",
        "strcat: dest, src",
    ),
)

OPERATORS: tuple[str, ...] = (
    ":=", "=", "<>", "<", ">", "<=", ">=",
    "+", "-", "*", "/", "mod", "div",
    "and", "or", "not",
)  # fmt: skip

DEFAULT_LEXICON = Lexicon(DANA_KEYWORDS, DANA_BUILTIN_FUNCTIONS)
