"""Host context.

The interpreter never touches editor state directly. Everything it needs from
the editor (lines, registers, buffer/window/tab variables and the execution
of ex commands it does not understand itself) goes through a
:class:`HostContext`.

:class:`ScratchHost` keeps that state in memory. The command-line runner and
the tests use it; an editor integration provides its own subclass.


File: host.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

import logging

from vimscript.nodes import Scope

logger = logging.getLogger(__name__)


class HostContext:
    """Interface between the interpreter and the editor session."""

    def get_line(self, lnum: int) -> str:
        """Return the text of 1-based line ``lnum`` or an empty string."""
        raise NotImplementedError

    def current_line_number(self) -> int:
        """Return the 1-based line number of the cursor."""
        raise NotImplementedError

    def line_count(self) -> int:
        """Return the number of lines in the current buffer."""
        raise NotImplementedError

    def get_register(self, name: str) -> str:
        """Return the contents of register ``name``."""
        raise NotImplementedError

    def set_register(self, name: str, value: str) -> None:
        """Store ``value`` in register ``name``."""
        raise NotImplementedError

    def variables(self, scope: Scope) -> dict:
        """Return the namespace for ``b:``, ``w:`` or ``t:`` variables."""
        raise NotImplementedError

    def execute_command(self, name: str, bang: bool, argument: str) -> None:
        """Run an ex command the interpreter passes through."""
        raise NotImplementedError


class ScratchHost(HostContext):
    """In-memory host holding a single buffer."""

    def __init__(self, lines: list[str] | None = None):
        self.lines = list(lines) if lines else []
        self.cursor_line = 1
        self.registers: dict[str, str] = {}
        self.commands: list[tuple[str, bool, str]] = []
        self._namespaces = {
            Scope.BUFFER_VARIABLE: {},
            Scope.WINDOW_VARIABLE: {},
            Scope.TABPAGE_VARIABLE: {},
        }

    def get_line(self, lnum: int) -> str:
        if 1 <= lnum <= len(self.lines):
            return self.lines[lnum - 1]
        return ""

    def current_line_number(self) -> int:
        return self.cursor_line

    def line_count(self) -> int:
        return len(self.lines)

    def get_register(self, name: str) -> str:
        return self.registers.get(name.lower(), "")

    def set_register(self, name: str, value: str) -> None:
        # Uppercase register names append, as in Vim.
        if name.isupper():
            key = name.lower()
            self.registers[key] = self.registers.get(key, "") + value
        else:
            self.registers[name] = value

    def variables(self, scope: Scope) -> dict:
        return self._namespaces[scope]

    def execute_command(self, name: str, bang: bool, argument: str) -> None:
        logger.debug("Host command %s%s %s", name, "!" if bang else "", argument)
        self.commands.append((name, bang, argument))
