"""Statement parsing utilities for Vim script.

These functions operate on a `vimscript.parser.parser.Parser` instance and
handle the command forms the front end understands: function declarations,
``echo``, ``return``, ``let``, ``call`` and generic ex commands passed on to
the host.


File: statements.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

import re
from typing import TYPE_CHECKING

from vimscript.exceptions import (
    ScriptParseError,
    UnknownFunctionFlagError,
    UnsupportedSyntaxError,
    UnterminatedFunctionError,
)
from vimscript.nodes import (
    CallCommand,
    EchoCommand,
    FunctionDeclaration,
    FunctionFlag,
    GenericCommand,
    LetCommand,
    RegisterRef,
    ReturnStatement,
    Scope,
    ScopedVariableRef,
    ScriptUnit,
)
from vimscript.parser.expressions import parse_arguments

if TYPE_CHECKING:
    from vimscript.parser import Parser


_FLAG_LINE = re.compile(r'[a-z]+(?:\s+[A-Za-z_]\w*)*')


def parse_statement(parser: 'Parser') -> ScriptUnit:
    """
    Parse a single statement.

    Syntax:
        <statement>

    Args:
        parser: The parser instance.

    Returns:
        ScriptUnit: The parsed unit.
    """
    tok = parser.curr_token
    if tok.type == 'FUNCTION':
        return parser.parse_function_declaration()
    elif tok.type == 'ECHO':
        return parser.parse_echo()
    elif tok.type == 'RETURN':
        return parser.parse_return()
    elif tok.type == 'LET':
        return parser.parse_let()
    elif tok.type == 'CALL':
        return parser.parse_call()
    elif tok.type in ('COMMAND', 'WORD'):
        return parser.parse_command()
    elif tok.type == 'ENDFUNCTION':
        raise ScriptParseError(
            ":endfunction not inside a function", tok.line, tok.column, parser.source_file
        )
    elif tok.type == 'INVALID':
        raise tok.value
    else:
        raise ScriptParseError(
            f"Unexpected token {tok.type}", tok.line, tok.column, parser.source_file
        )


def _parse_function_name(parser: 'Parser') -> tuple:
    """
    Parse a function name with optional scope prefix and dotted path.

    Syntax:
        [<scope>:]<identifier>[.<identifier>]*

    Returns:
        tuple: (scope or None, name without the prefix)
    """
    tok = parser.curr_token
    if tok.type != 'ID':
        raise ScriptParseError(
            "Expected a function name", tok.line, tok.column, parser.source_file
        )
    parser.eat('ID')
    scope, first = Scope.split(tok.value)
    parts = [first]
    while parser.curr_token.type == 'DOT':
        parser.eat('DOT')
        part_tok = parser.curr_token
        parser.eat('ID')
        parser.validate_plain_id_or_raise(part_tok)
        parts.append(part_tok.value)
    return scope, '.'.join(parts)


def _parse_parameters(parser: 'Parser') -> list:
    """
    Parse the argument names of a function declaration.

    Syntax:
        ( [<identifier> [, <identifier>]*] )
    """
    parser.eat('LPAREN')
    params = []
    if parser.curr_token.type != 'RPAREN':
        while True:
            param_tok = parser.curr_token
            parser.eat('ID')
            parser.validate_plain_id_or_raise(param_tok)
            params.append(param_tok.value)
            if parser.curr_token.type != 'COMMA':
                break
            parser.eat('COMMA')
    parser.eat('RPAREN')
    return params


def _flag_or_raise(parser: 'Parser', word: str, line: int, column: int) -> FunctionFlag:
    flag = FunctionFlag.get_by_name(word)
    if flag is None:
        raise UnknownFunctionFlagError(word, line, column, parser.source_file)
    return flag


def _parse_flags(parser: 'Parser') -> set:
    """
    Parse the flags following the argument list.

    Flags are read from the rest of the header line. When the header line has
    none, a following line made only of plain lowercase words that are not ex
    commands is read as the flag line.
    """
    flags = set()
    while parser.curr_token.type == 'ID':
        tok = parser.curr_token
        parser.eat('ID')
        flags.add(_flag_or_raise(parser, tok.value, tok.line, tok.column))
    parser.end_of_line()
    if flags:
        return flags

    tok = parser.curr_token
    args_tok = parser.peek()
    if tok.type == 'WORD' and args_tok.type == 'ARGS':
        line_text = f"{tok.value} {args_tok.value}".strip()
        if _FLAG_LINE.fullmatch(line_text):
            parser.eat('WORD')
            parser.eat('ARGS')
            for word in line_text.split():
                flags.add(_flag_or_raise(parser, word, tok.line, tok.column))
            parser.end_of_line()
    return flags


def parse_function_declaration(parser: 'Parser') -> FunctionDeclaration:
    """
    Parse a function declaration and its body up to the terminator.

    Syntax:
        function[!] <name>(<params>) [<flags>]
            <statement>*
        endfunction

    Args:
        parser: The parser instance.

    Returns:
        FunctionDeclaration: The declaration node.

    Raises:
        UnknownFunctionFlagError: For a flag outside of the known set.
        UnterminatedFunctionError: If input ends before ``endfunction``.
    """
    start_tok = parser.curr_token
    parser.eat('FUNCTION')
    replace_existing = False
    if parser.curr_token.type == 'BANG':
        parser.eat('BANG')
        replace_existing = True
    scope, name = _parse_function_name(parser)
    params = _parse_parameters(parser)
    flags = _parse_flags(parser)

    body = []
    while True:
        tok = parser.curr_token
        if tok.type == 'EOF':
            display = name if scope is None else f"{scope.value}:{name}"
            raise UnterminatedFunctionError(display, start_tok.line, parser.source_file)
        if tok.type == 'ENDFUNCTION':
            parser.eat('ENDFUNCTION')
            parser.end_of_line()
            break
        body.append(parser.statement())

    return FunctionDeclaration(
        scope,
        name,
        tuple(params),
        frozenset(flags),
        tuple(body),
        replace_existing,
        start_tok.line,
    )


def parse_echo(parser: 'Parser') -> EchoCommand:
    """
    Parse an 'echo' command.

    Syntax:
        echo <expression> [<expression>]*
    """
    tok = parser.curr_token
    parser.eat('ECHO')
    expressions = [parser.expr()]
    while not parser.at_end_of_line():
        expressions.append(parser.expr())
    parser.end_of_line()
    return EchoCommand(tuple(expressions), tok.line)


def parse_return(parser: 'Parser') -> ReturnStatement:
    """
    Parse a 'return' statement.

    Syntax:
        return <expression>

    Raises:
        UnsupportedSyntaxError: For ``return`` without an expression.
    """
    tok = parser.curr_token
    parser.eat('RETURN')
    if parser.at_end_of_line():
        raise UnsupportedSyntaxError(
            ":return without an expression is not supported",
            tok.line,
            tok.column,
            parser.source_file,
        )
    expr_node = parser.expr()
    parser.end_of_line()
    return ReturnStatement(expr_node, tok.line)


def parse_let(parser: 'Parser') -> LetCommand:
    """
    Parse a 'let' assignment.

    Syntax:
        let <variable> = <expression>
        let <variable> .= <expression>
        let @<register> = <expression>
    """
    tok = parser.curr_token
    parser.eat('LET')
    target_tok = parser.curr_token
    if target_tok.type == 'ID':
        parser.eat('ID')
        scope, name = Scope.split(target_tok.value)
        target = ScopedVariableRef(scope, name, target_tok.line)
    elif target_tok.type == 'REGISTER':
        parser.eat('REGISTER')
        target = RegisterRef(target_tok.value, target_tok.line)
    else:
        raise ScriptParseError(
            "Expected a variable name after :let",
            target_tok.line,
            target_tok.column,
            parser.source_file,
        )

    if parser.curr_token.type == 'CONCAT_ASSIGN':
        parser.eat('CONCAT_ASSIGN')
        operator = '.='
    else:
        parser.eat('ASSIGN')
        operator = '='
    value = parser.expr()
    parser.end_of_line()
    return LetCommand(target, operator, value, tok.line)


def parse_call(parser: 'Parser') -> CallCommand:
    """
    Parse a 'call' command.

    Syntax:
        call [<scope>:]<name>[.<name>]*(<arguments>)
    """
    tok = parser.curr_token
    parser.eat('CALL')
    scope, name = _parse_function_name(parser)
    args = parse_arguments(parser)
    parser.end_of_line()
    return CallCommand(scope, name, args, tok.line)


def parse_command(parser: 'Parser') -> GenericCommand:
    """
    Parse any other ex command into an opaque unit for the host.

    Syntax:
        <command>[!] <raw arguments>
    """
    tok = parser.curr_token
    parser.eat(tok.type)
    bang = False
    if parser.curr_token.type == 'BANG':
        parser.eat('BANG')
        bang = True
    argument = parser.curr_token.value
    parser.eat('ARGS')
    parser.end_of_line()
    return GenericCommand(tok.value, bang, argument, tok.line)
