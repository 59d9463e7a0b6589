"""Expression parsing utilities for Vim script.

These functions operate on a `vimscript.parser.parser.Parser` instance and
implement the recursive descent logic for the supported expression subset:
literals, scoped variables, registers, function calls, parenthesized groups
and string concatenation.


File: expressions.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from typing import TYPE_CHECKING

from vimscript.exceptions import ExpressionParseError
from vimscript.nodes import (
    Concatenation,
    Expression,
    FunctionCall,
    NumberLiteral,
    RegisterRef,
    Scope,
    ScopedVariableRef,
    StringLiteral,
)

if TYPE_CHECKING:
    from vimscript.parser import Parser


# ---- Highest precedence ----

def parse_factor(parser: 'Parser') -> Expression:
    """
    Parse a literal, variable, register, function call or parenthesized group.

    Raises:
        ExpressionParseError: If no expression starts at the current token.
    """
    tok = parser.curr_token

    if tok.type == 'STRING':
        parser.eat('STRING')
        return StringLiteral(tok.value, tok.line)

    if tok.type == 'NUMBER':
        parser.eat('NUMBER')
        return NumberLiteral(tok.value, tok.line)

    if tok.type == 'REGISTER':
        parser.eat('REGISTER')
        return RegisterRef(tok.value, tok.line)

    if tok.type == 'ID':
        parser.eat('ID')
        scope, name = Scope.split(tok.value)
        if parser.curr_token.type == 'LPAREN':
            args = parse_arguments(parser)
            return FunctionCall(scope, name, args, tok.line)
        return ScopedVariableRef(scope, name, tok.line)

    if tok.type == 'LPAREN':
        parser.eat('LPAREN')
        node = parser.expr()
        parser.eat('RPAREN')
        return node

    if tok.type == 'INVALID':
        raise tok.value

    found = "end of line" if tok.type in ('NEWLINE', 'EOF') else repr(tok.value)
    raise ExpressionParseError(
        f"Expected an expression but found {found}",
        tok.line,
        tok.column,
        parser.source_file,
    )


def parse_arguments(parser: 'Parser') -> tuple:
    """
    Parse a parenthesized, comma separated list of argument expressions.

    Syntax:
        ( [<expression> [, <expression>]*] )
    """
    parser.eat('LPAREN')
    args = []
    if parser.curr_token.type != 'RPAREN':
        args.append(parser.expr())
        while parser.curr_token.type == 'COMMA':
            parser.eat('COMMA')
            args.append(parser.expr())
    parser.eat('RPAREN')
    return tuple(args)


# ---- Lowest precedence ----

def parse_concat(parser: 'Parser') -> Expression:
    """
    Parse left-associative string concatenation using ``.`` or ``..``.
    """
    result = parser.factor()
    while parser.curr_token.type in ('DOT', 'CONCAT'):
        op_tok = parser.curr_token
        parser.eat(op_tok.type)
        result = Concatenation(result, parser.factor(), op_tok.line)
    return result


def parse_expr(parser: 'Parser') -> Expression:
    """
    Parse a full expression.
    """
    return parse_concat(parser)
