"""Errors.

Parse-time errors derive from :class:`ScriptParseError` and carry the source
position of the offending token. Execution-time errors derive from
:class:`ScriptRuntimeError` and carry the line of the unit being executed.


File: exceptions.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""


def _located(message, line=None, column=None, file=None) -> str:
    if line is not None:
        message += f" on line {line}"
        if column is not None:
            message += f", column {column}"
    if file is not None:
        message += f" in {file}"
    return message


class ScriptParseError(Exception):
    """
    Error raised while turning source text into script units.
    """
    def __init__(self, message, line=None, column=None, file=None):
        self.reason = message
        self.line = line
        self.column = column
        self.file = file
        super().__init__(_located(message, line, column, file))


class LexError(ScriptParseError):
    """
    Error for unterminated strings and unexpected characters.
    """


class ExpressionParseError(ScriptParseError):
    """
    Error for a missing or malformed expression.
    """


class UnknownFunctionFlagError(ScriptParseError):
    """
    Error for a function flag outside of range, abort, dict and closure.
    """
    def __init__(self, flag, line=None, column=None, file=None):
        self.flag = flag
        super().__init__(f"Unknown function flag '{flag}'", line, column, file)


class UnterminatedFunctionError(ScriptParseError):
    """
    Error for a function declaration without a matching endfunction.
    """
    def __init__(self, name, line=None, file=None):
        self.name = name
        super().__init__(f"Missing :endfunction for function '{name}' started", line, None, file)


class UnsupportedSyntaxError(ScriptParseError):
    """
    Error for grammar the parser recognizes but does not support.
    """


class ScriptRuntimeError(Exception):
    """
    Error raised while executing script units.
    """
    def __init__(self, message, line=None, file=None):
        self.reason = message
        self.line = line
        self.file = file
        super().__init__(_located(message, line, None, file))


class UndefinedVariableError(ScriptRuntimeError):
    """
    Error for undefined variables.
    """
    def __init__(self, scope, varname, line=None, file=None):
        self.scope = scope
        self.varname = varname
        prefix = f"{scope.value}:" if scope is not None else ""
        super().__init__(f"Undefined variable '{prefix}{varname}'", line, file)


class UndefinedFunctionError(ScriptRuntimeError):
    """
    Error for calls to functions that were never defined.
    """
    def __init__(self, name, line=None, file=None):
        self.name = name
        super().__init__(f"Unknown function '{name}'", line, file)


class FunctionAlreadyDefinedError(ScriptRuntimeError):
    """
    Error for redefining a function without the replace marker.
    """
    def __init__(self, name, line=None, file=None):
        self.name = name
        super().__init__(f"Function '{name}' already exists, add ! to replace it", line, file)


class ReturnOutsideFunctionError(ScriptRuntimeError):
    """
    Error for a return statement executed outside of a function call.
    """
    def __init__(self, line=None, file=None):
        super().__init__(":return not inside a function", line, file)


class WrongArgumentCountError(ScriptRuntimeError):
    """
    Error for calling a function with too many or too few arguments.
    """
    def __init__(self, name, expected, actual, line=None, file=None):
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Function '{name}' expects {expected} arguments but got {actual}", line, file
        )


class ReadOnlyVariableError(ScriptRuntimeError):
    """
    Error for assigning to a read-only variable such as a function argument.
    """
    def __init__(self, varname, line=None, file=None):
        self.varname = varname
        super().__init__(f"Cannot change read-only variable '{varname}'", line, file)


class CallDepthExceededError(ScriptRuntimeError):
    """
    Error for function calls nested deeper than the configured limit.
    """
    def __init__(self, limit, line=None, file=None):
        self.limit = limit
        super().__init__(f"Function call depth is higher than {limit}", line, file)


class TypeMismatchError(ScriptRuntimeError):
    """
    Error for values of the wrong type, e.g. a function passed to echo.
    """


class ReturnControlFlow(Exception):
    """
    Control flow handling for return statements.
    """
    def __init__(self, value):
        self.value = value
