"""
Main parser entry point for Vim script.

This module defines the `Parser` class, which coordinates the recursive
descent parsing process. The actual parsing routines are split across
`vimscript.parser.expressions` and `vimscript.parser.statements`.


File: parser.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

import logging

from vimscript.exceptions import ScriptParseError
from vimscript.lexer import Token, tokenize
from vimscript.nodes import Scope, Script

from . import expressions as _expr
from . import statements as _stmt

logger = logging.getLogger(__name__)

_TOKEN_NAMES = {
    'LPAREN': "'('",
    'RPAREN': "')'",
    'COMMA': "','",
    'DOT': "'.'",
    'ASSIGN': "'='",
    'ID': "an identifier",
    'NEWLINE': "end of line",
    'EOF': "end of input",
}


class Parser:
    """Vim script parser."""

    def __init__(self, tokens: list[Token], file: str = "<script>"):
        """
        Initialize the parser with a list of tokens.

        Parameters:
            tokens (list): A list of Token instances ending with ``EOF``.
            file (str): The name of the script.
        """
        self.tokens = tokens
        self.position = 0
        self.curr_token = self.tokens[self.position]
        self.source_file = file

    def eat(self, token_type: str) -> None:
        """
        Consume the current token if it matches the expected type.

        Parameters:
            token_type (str): The expected token type.

        Raises:
            ScriptParseError: If the token does not match the expected type.
        """
        if self.curr_token.type == token_type:
            self.position += 1
            self.curr_token = self.tokens[min(self.position, len(self.tokens) - 1)]
            return
        if self.curr_token.type == 'INVALID':
            raise self.curr_token.value

        expected = _TOKEN_NAMES.get(token_type, token_type)
        actual = _TOKEN_NAMES.get(self.curr_token.type, repr(self.curr_token.value))
        raise ScriptParseError(
            f"Expected {expected} but got {actual}",
            self.curr_token.line,
            self.curr_token.column,
            self.source_file,
        )

    def peek(self, offset: int = 1) -> Token:
        """
        Return the token ``offset`` positions ahead without consuming anything.
        """
        return self.tokens[min(self.position + offset, len(self.tokens) - 1)]

    def at_end_of_line(self) -> bool:
        """
        Return ``True`` if the current logical line has no tokens left.
        """
        return self.curr_token.type in ('NEWLINE', 'EOF')

    def end_of_line(self) -> None:
        """
        Consume the end of the current logical line.

        Raises:
            ScriptParseError: If tokens are left on the line.
        """
        if self.curr_token.type == 'EOF':
            return
        if self.curr_token.type == 'INVALID':
            raise self.curr_token.value
        if self.curr_token.type != 'NEWLINE':
            raise ScriptParseError(
                f"Trailing characters: {self.curr_token.value!r}",
                self.curr_token.line,
                self.curr_token.column,
                self.source_file,
            )
        self.eat('NEWLINE')

    def validate_plain_id_or_raise(self, tok: Token) -> None:
        """
        Reject identifiers that carry a scope prefix where none is allowed.

        Raises:
            ScriptParseError: If ``tok`` is written with a scope prefix.
        """
        scope, _ = Scope.split(tok.value)
        if scope is not None:
            raise ScriptParseError(
                f"Unexpected scope prefix in '{tok.value}'",
                tok.line,
                tok.column,
                self.source_file,
            )

    # Expression wrappers
    def factor(self):
        """
        Parse a literal, variable, register, call or parenthesized group.
        """
        return _expr.parse_factor(self)

    def expr(self):
        """
        Parse a full expression.
        """
        return _expr.parse_expr(self)

    # Statement wrappers
    def statement(self):
        """
        Parse a single statement.
        """
        return _stmt.parse_statement(self)

    def parse_function_declaration(self):
        """
        Parse a function declaration including its body.
        """
        return _stmt.parse_function_declaration(self)

    def parse_echo(self):
        """
        Parse an 'echo' command.
        """
        return _stmt.parse_echo(self)

    def parse_return(self):
        """
        Parse a 'return' statement from within a function.
        """
        return _stmt.parse_return(self)

    def parse_let(self):
        """
        Parse a 'let' assignment.
        """
        return _stmt.parse_let(self)

    def parse_call(self):
        """
        Parse a 'call' command.
        """
        return _stmt.parse_call(self)

    def parse_command(self):
        """
        Parse a generic ex command.
        """
        return _stmt.parse_command(self)

    def _synchronize(self, start: int) -> None:
        """
        Skip past the unit that started at token index ``start``.

        A function declaration is skipped up to its matching ``endfunction``;
        anything else up to the end of its line.
        """
        self.position = start
        depth = 0
        while self.position < len(self.tokens) - 1:
            tok = self.tokens[self.position]
            at_line_start = self.position == 0 or self.tokens[self.position - 1].type == 'NEWLINE'
            if at_line_start and tok.type == 'FUNCTION':
                depth += 1
            elif at_line_start and tok.type == 'ENDFUNCTION':
                depth -= 1
            self.position += 1
            if tok.type == 'NEWLINE' and depth <= 0:
                break
        self.curr_token = self.tokens[self.position]

    def parse(self, recover: bool = False) -> Script:
        """
        Parse the full input into a script.

        Parameters:
            recover (bool): Record parse errors in ``Script.errors`` and skip
                the failing unit instead of raising.

        Raises:
            ScriptParseError: On the first error when ``recover`` is false.
        """
        script = Script()
        while self.curr_token.type != 'EOF':
            while self.curr_token.type == 'NEWLINE':
                self.eat('NEWLINE')
            if self.curr_token.type == 'EOF':
                break
            start = self.position
            try:
                script.units.append(self.statement())
            except ScriptParseError as e:
                if not recover:
                    raise
                logger.warning("Skipping unit: %s", e)
                script.errors.append(e)
                self._synchronize(start)
        return script


def parse(source: str, file: str = "<script>", recover: bool = False) -> Script:
    """
    Tokenize and parse ``source`` into a script.

    Parameters:
        source (str): Vim script source text.
        file (str): Name used in error messages.
        recover (bool): Keep parsing after errors, see :meth:`Parser.parse`.
    """
    tokens = tokenize(source, recover=recover, file=file)
    return Parser(tokens, file).parse(recover=recover)
