"""AST node definitions for Vim script.

Script units and expressions are two closed families of frozen dataclasses.
The parser builds them once and nothing mutates them afterwards; the
interpreter dispatches on them with ``match``.

Source positions are kept on every node for error reporting but are left out
of equality, so two scripts that only differ in whitespace produce equal
trees.


File: nodes.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class Scope(str, Enum):
    """
    Enumeration of variable and function scopes, valued by their prefix letter.
    """

    GLOBAL_VARIABLE = "g"
    SCRIPT_VARIABLE = "s"
    FUNCTION_VARIABLE = "a"
    LOCAL_VARIABLE = "l"
    BUFFER_VARIABLE = "b"
    WINDOW_VARIABLE = "w"
    TABPAGE_VARIABLE = "t"
    VIM_VARIABLE = "v"

    @classmethod
    def split(cls, text: str) -> tuple[Optional["Scope"], str]:
        """
        Split ``s:name`` style text into its scope and bare name.

        Text without a recognized prefix yields a ``None`` scope.
        """
        if len(text) > 2 and text[1] == ":":
            try:
                return cls(text[0]), text[2:]
            except ValueError:
                pass
        return None, text

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


class FunctionFlag(str, Enum):
    """
    Flags accepted after the argument list of a function declaration.
    """

    RANGE = "range"
    ABORT = "abort"
    DICT = "dict"
    CLOSURE = "closure"

    @classmethod
    def get_by_name(cls, name: str) -> Optional["FunctionFlag"]:
        """Return the flag spelled ``name`` or ``None``."""
        try:
            return cls(name)
        except ValueError:
            return None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


# ---- Expressions ----

@dataclass(frozen=True)
class StringLiteral:
    value: str
    line: int = field(default=0, compare=False)


@dataclass(frozen=True)
class NumberLiteral:
    value: int
    line: int = field(default=0, compare=False)


@dataclass(frozen=True)
class ScopedVariableRef:
    """A variable reference; ``scope`` is ``None`` when no prefix was written."""
    scope: Optional[Scope]
    name: str
    line: int = field(default=0, compare=False)


@dataclass(frozen=True)
class RegisterRef:
    name: str
    line: int = field(default=0, compare=False)


@dataclass(frozen=True)
class FunctionCall:
    scope: Optional[Scope]
    name: str
    args: tuple = ()
    line: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Concatenation:
    left: "Expression"
    right: "Expression"
    line: int = field(default=0, compare=False)


Expression = Union[
    StringLiteral, NumberLiteral, ScopedVariableRef, RegisterRef, FunctionCall, Concatenation
]


# ---- Script units ----

@dataclass(frozen=True)
class FunctionDeclaration:
    """
    A ``:function`` block.

    ``name`` holds the declared name without its scope prefix; dictionary
    functions keep their dotted path (``dict.something.Initialize``).
    """
    scope: Optional[Scope]
    name: str
    args: tuple[str, ...] = ()
    flags: frozenset = frozenset()
    body: tuple = ()
    replace_existing: bool = False
    line: int = field(default=0, compare=False)

    @property
    def qualified_name(self) -> str:
        """The name as written in source, scope prefix included."""
        if self.scope is None:
            return self.name
        return f"{self.scope.value}:{self.name}"


@dataclass(frozen=True)
class EchoCommand:
    expressions: tuple = ()
    line: int = field(default=0, compare=False)


@dataclass(frozen=True)
class ReturnStatement:
    expression: Expression
    line: int = field(default=0, compare=False)


@dataclass(frozen=True)
class LetCommand:
    target: Union[ScopedVariableRef, RegisterRef]
    operator: str
    value: Expression
    line: int = field(default=0, compare=False)


@dataclass(frozen=True)
class CallCommand:
    scope: Optional[Scope]
    name: str
    args: tuple = ()
    line: int = field(default=0, compare=False)


@dataclass(frozen=True)
class GenericCommand:
    """An ex command handed to the host untouched."""
    name: str
    bang: bool = False
    argument: str = ""
    line: int = field(default=0, compare=False)

    @property
    def text(self) -> str:
        """Rebuild the command line from its parts."""
        head = self.name + ("!" if self.bang else "")
        return f"{head} {self.argument}" if self.argument else head


ScriptUnit = Union[
    FunctionDeclaration, EchoCommand, ReturnStatement, LetCommand, CallCommand, GenericCommand
]


@dataclass
class Script:
    """Parsed script: its units in source order and any recovered errors."""
    units: list = field(default_factory=list)
    errors: list = field(default_factory=list)


__all__ = [
    "Scope",
    "FunctionFlag",
    "StringLiteral",
    "NumberLiteral",
    "ScopedVariableRef",
    "RegisterRef",
    "FunctionCall",
    "Concatenation",
    "Expression",
    "FunctionDeclaration",
    "EchoCommand",
    "ReturnStatement",
    "LetCommand",
    "CallCommand",
    "GenericCommand",
    "ScriptUnit",
    "Script",
]
