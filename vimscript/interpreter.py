"""Interpreter.

This is a tree-walk interpreter for the script units produced by the parser.
It defines and calls user functions, evaluates expressions, assigns
variables and passes every command it does not understand to the host.

1. Execution Model
Units are executed in order via `execute()`; expressions are evaluated with
`eval_expr()`. Both dispatch with ``match`` over the closed node families in
`vimscript.nodes`.

2. Session State
One :class:`Interpreter` is one editor session. It owns the global (``g:``)
and Vim (``v:``) namespaces, one ``s:`` namespace per sourced script, the
function registry and the call stack. ``b:``, ``w:`` and ``t:`` variables
live in the host.

3. Call Frames
Every function call pushes a :class:`Frame` holding the ``a:`` arguments and
``l:`` locals, and pops it in a ``finally`` block, so frames are released on
return and on error alike. Unprefixed names refer to ``l:`` inside a function
and ``g:`` at script level.

4. Error Handling
Runtime errors (undefined variables, unknown functions, redefinitions
without ``!``, ``return`` at script level, ...) are raised as subclasses of
`ScriptRuntimeError` with line numbers and file context. `run()` turns them
into an :class:`ExecutionResult` so the host never sees an exception.


File: interpreter.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Literal, Optional

from vimscript.exceptions import (
    CallDepthExceededError,
    FunctionAlreadyDefinedError,
    ReadOnlyVariableError,
    ReturnControlFlow,
    ReturnOutsideFunctionError,
    ScriptParseError,
    ScriptRuntimeError,
    TypeMismatchError,
    UndefinedFunctionError,
    UndefinedVariableError,
    WrongArgumentCountError,
)
from vimscript.host import HostContext, ScratchHost
from vimscript.nodes import (
    CallCommand,
    Concatenation,
    EchoCommand,
    FunctionCall,
    FunctionDeclaration,
    GenericCommand,
    LetCommand,
    NumberLiteral,
    RegisterRef,
    ReturnStatement,
    Scope,
    ScopedVariableRef,
    StringLiteral,
)
from vimscript.parser import parse

logger = logging.getLogger(__name__)

BUILTINS = frozenset({"len", "toupper", "tolower", "string", "getline", "exists"})


class UserFunction:
    """Runtime representation of a defined function."""

    def __init__(self, declaration: FunctionDeclaration, script: str):
        self.declaration = declaration
        # Script whose s: namespace the body sees.
        self.script = script


class Frame:
    """Argument and local variables of one function call."""

    def __init__(self, function: UserFunction, arguments: dict):
        self.function = function
        self.arguments = arguments
        self.locals: dict = {}


@dataclass
class ExecutionResult:
    """The structured result of running a script."""
    status: Literal['success', 'error']
    error: Optional[Exception] = None
    messages: list[str] = field(default_factory=list)

    def format_error(self) -> str:
        """Format the error as ``TypeName: message``."""
        if self.status != 'error' or self.error is None:
            return ""
        return f"{type(self.error).__name__}: {self.error}"


class Interpreter:
    """Tree-walk interpreter for Vim script."""

    def __init__(
        self,
        file: str = "<script>",
        host: HostContext | None = None,
        output: Callable[[str], None] | None = None,
        max_call_depth: int = 100,
    ):
        """
        Initialize the interpreter.

        Parameters:
            file (str): Name of the script executed by `execute()`.
            host (HostContext): Editor access; an empty `ScratchHost` by default.
            output (callable): Receives the text of every ``echo``; `print` by default.
            max_call_depth (int): Deepest allowed nesting of function calls.
        """
        self.file = file
        self.host = host if host is not None else ScratchHost()
        self.output = output if output is not None else print
        self.max_call_depth = max_call_depth
        self.global_vars: dict = {}
        self.vim_vars: dict = {}
        self.script_namespaces: dict[str, dict] = {}
        self.functions: dict[tuple, UserFunction] = {}
        self.frames: list[Frame] = []
        # Echo output of the active run(); None outside of run().
        self.run_messages: list[str] | None = None

    @property
    def script_vars(self) -> dict:
        """The ``s:`` namespace of the script currently executing."""
        return self.script_namespaces.setdefault(self.file, {})

    # ------------------------------------------------------------------
    # Sourcing
    # ------------------------------------------------------------------

    def source(self, code: str, file: str | None = None) -> None:
        """
        Parse ``code`` and execute it as script ``file``.

        Raises:
            ScriptParseError: If the code does not parse.
            ScriptRuntimeError: If execution fails.
        """
        saved_file = self.file
        self.file = file if file is not None else saved_file
        try:
            script = parse(code, self.file)
            self.execute(script.units)
        finally:
            self.file = saved_file

    def run(self, code: str, file: str | None = None) -> ExecutionResult:
        """
        Source ``code`` and report the outcome instead of raising.

        Returns:
            ExecutionResult: ``success`` or ``error`` with the echo output
            produced during the run.
        """
        saved_messages = self.run_messages
        messages: list[str] = []
        self.run_messages = messages
        try:
            self.source(code, file)
        except (ScriptParseError, ScriptRuntimeError) as e:
            logger.debug("Script failed: %s", e)
            return ExecutionResult('error', e, messages)
        finally:
            self.run_messages = saved_messages
        return ExecutionResult('success', None, messages)

    # ------------------------------------------------------------------
    # Functions
    # ------------------------------------------------------------------

    def _function_key(self, scope: Scope | None, name: str, line=None) -> tuple:
        if scope is Scope.SCRIPT_VARIABLE:
            return (self.file, name)
        if scope is None or scope is Scope.GLOBAL_VARIABLE:
            return (None, name)
        raise ScriptRuntimeError(
            f"Invalid scope for function name '{scope.value}:{name}'", line, self.file
        )

    def define_function(self, declaration: FunctionDeclaration) -> None:
        """
        Register ``declaration`` in the function registry.

        Raises:
            FunctionAlreadyDefinedError: If the name is taken and the
                declaration has no ``!``.
        """
        key = self._function_key(declaration.scope, declaration.name, declaration.line)
        if key in self.functions and not declaration.replace_existing:
            raise FunctionAlreadyDefinedError(
                declaration.qualified_name, declaration.line, self.file
            )
        self.functions[key] = UserFunction(declaration, self.file)
        logger.debug("Defined function %s in %s", declaration.qualified_name, self.file)

    def lookup_function(self, scope: Scope | None, name: str, line=None) -> UserFunction:
        """
        Resolve a function reference.

        Unprefixed names are looked up among global functions first and then
        among the functions of the current script.

        Raises:
            UndefinedFunctionError: If no function matches.
        """
        keys = [self._function_key(scope, name, line)]
        if scope is None:
            keys.append((self.file, name))
        for key in keys:
            if key in self.functions:
                return self.functions[key]
        display = name if scope is None else f"{scope.value}:{name}"
        raise UndefinedFunctionError(display, line, self.file)

    def call_function(self, name: str, args=(), scope: Scope | None = None, line=None):
        """
        Call a user function and return its result.

        Parameters:
            name (str): Function name; may carry a scope prefix when ``scope``
                is not given.
            args (sequence): Evaluated argument values.
            scope (Scope): Scope of the function name.
            line (int): Line of the call for error messages.

        Returns:
            The value of the executed ``return``, or 0.
        """
        if scope is None:
            scope, name = Scope.split(name)
        function = self.lookup_function(scope, name, line)
        declaration = function.declaration
        args = list(args)

        if len(args) != len(declaration.args):
            raise WrongArgumentCountError(
                declaration.qualified_name, len(declaration.args), len(args), line, self.file
            )
        if len(self.frames) >= self.max_call_depth:
            raise CallDepthExceededError(self.max_call_depth, line, self.file)

        logger.debug("Calling %s with %r", declaration.qualified_name, args)
        saved_file = self.file
        self.frames.append(Frame(function, dict(zip(declaration.args, args))))
        self.file = function.script
        try:
            self.execute(declaration.body)
            result = 0
        except ReturnControlFlow as ret:
            result = ret.value
        finally:
            self.frames.pop()
            self.file = saved_file
        return result

    # ------------------------------------------------------------------
    # Variables
    # ------------------------------------------------------------------

    def _namespace(self, scope: Scope | None) -> dict | None:
        """
        Return the dictionary backing ``scope``, or ``None`` when the scope
        only exists inside a function and no call is active.
        """
        frame = self.frames[-1] if self.frames else None
        match scope:
            case None:
                return frame.locals if frame else self.global_vars
            case Scope.GLOBAL_VARIABLE:
                return self.global_vars
            case Scope.SCRIPT_VARIABLE:
                return self.script_vars
            case Scope.VIM_VARIABLE:
                return self.vim_vars
            case Scope.FUNCTION_VARIABLE:
                return frame.arguments if frame else None
            case Scope.LOCAL_VARIABLE:
                return frame.locals if frame else None
            case Scope.BUFFER_VARIABLE | Scope.WINDOW_VARIABLE | Scope.TABPAGE_VARIABLE:
                return self.host.variables(scope)
        raise ScriptRuntimeError(f"Unknown scope {scope!r}", None, self.file)

    def _resolved_scope(self, scope: Scope | None) -> Scope:
        """The scope an unprefixed name refers to at this point of execution."""
        if scope is not None:
            return scope
        return Scope.LOCAL_VARIABLE if self.frames else Scope.GLOBAL_VARIABLE

    def lookup_variable(self, scope: Scope | None, name: str, line=None):
        """
        Return the value of a variable.

        Raises:
            UndefinedVariableError: If the variable does not exist.
        """
        namespace = self._namespace(scope)
        if namespace is None or name not in namespace:
            raise UndefinedVariableError(self._resolved_scope(scope), name, line, self.file)
        return namespace[name]

    def _assign(self, stmt: LetCommand) -> None:
        target = stmt.target
        value = self.eval_expr(stmt.value)

        if isinstance(target, RegisterRef):
            text = self._to_string(value, stmt.line)
            if stmt.operator == '.=':
                text = self.host.get_register(target.name) + text
            self.host.set_register(target.name, text)
            return

        if target.scope is Scope.FUNCTION_VARIABLE:
            raise ReadOnlyVariableError(f"a:{target.name}", stmt.line, self.file)
        namespace = self._namespace(target.scope)
        if namespace is None:
            raise ScriptRuntimeError(
                f"Illegal variable name '{target.scope.value}:{target.name}' outside a function",
                stmt.line,
                self.file,
            )
        if stmt.operator == '.=':
            if target.name not in namespace:
                raise UndefinedVariableError(
                    self._resolved_scope(target.scope), target.name, stmt.line, self.file
                )
            value = (
                self._to_string(namespace[target.name], stmt.line)
                + self._to_string(value, stmt.line)
            )
        namespace[target.name] = value

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _to_string(self, value, line=None) -> str:
        if isinstance(value, str):
            return value
        if isinstance(value, int):
            return str(value)
        raise TypeMismatchError(
            f"Cannot use {type(value).__name__} as a String", line, self.file
        )

    def _call_builtin(self, name: str, args: list, line):
        """
        Evaluate a call to a built-in function.
        """
        if name == 'exists':
            if len(args) != 1 or not isinstance(args[0], str):
                raise WrongArgumentCountError(name, 1, len(args), line, self.file)
            target = args[0]
            if target.startswith('*'):
                scope, func_name = Scope.split(target[1:])
                if scope is None and func_name in BUILTINS:
                    return 1
                try:
                    self.lookup_function(scope, func_name, line)
                except UndefinedFunctionError:
                    return 0
                return 1
            scope, var_name = Scope.split(target)
            namespace = self._namespace(scope)
            return int(namespace is not None and var_name in namespace)

        if len(args) != 1:
            raise WrongArgumentCountError(name, 1, len(args), line, self.file)
        arg = args[0]

        if name == 'len':
            return len(self._to_string(arg, line))

        if name == 'toupper':
            return self._to_string(arg, line).upper()

        if name == 'tolower':
            return self._to_string(arg, line).lower()

        if name == 'string':
            if isinstance(arg, str):
                return "'" + arg.replace("'", "''") + "'"
            return self._to_string(arg, line)

        if name == 'getline':
            if arg == '.':
                lnum = self.host.current_line_number()
            elif arg == '$':
                lnum = self.host.line_count()
            elif isinstance(arg, int) or (isinstance(arg, str) and arg.isdigit()):
                lnum = int(arg)
            else:
                raise TypeMismatchError(
                    f"Invalid line number {arg!r} for getline()", line, self.file
                )
            return self.host.get_line(lnum)

        raise UndefinedFunctionError(name, line, self.file)

    def eval_expr(self, node):
        """
        Recursively evaluate an expression node and return its value.

        Raises:
            UndefinedVariableError: If a variable is referenced that has not been defined.
            UndefinedFunctionError: If a called function does not exist.
            TypeMismatchError: If a value cannot be used as a string.
        """
        match node:
            case StringLiteral(value=value) | NumberLiteral(value=value):
                return value
            case ScopedVariableRef(scope=scope, name=name, line=line):
                return self.lookup_variable(scope, name, line)
            case RegisterRef(name=name):
                return self.host.get_register(name)
            case Concatenation(left=left, right=right, line=line):
                return (
                    self._to_string(self.eval_expr(left), line)
                    + self._to_string(self.eval_expr(right), line)
                )
            case FunctionCall(scope=scope, name=name, args=arg_nodes, line=line):
                args = [self.eval_expr(arg) for arg in arg_nodes]
                if scope is None and name in BUILTINS:
                    return self._call_builtin(name, args, line)
                return self.call_function(name, args, scope, line)
        raise RuntimeError(f"Invalid expression node: {node!r}")

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def execute_unit(self, unit) -> None:
        """
        Execute one script unit.

        Raises:
            ReturnOutsideFunctionError: For ``return`` at script level.
        """
        match unit:
            case FunctionDeclaration():
                self.define_function(unit)

            case EchoCommand(expressions=expressions):
                text = ' '.join(
                    self._to_string(self.eval_expr(expr), unit.line) for expr in expressions
                )
                if self.run_messages is not None:
                    self.run_messages.append(text)
                self.output(text)

            case ReturnStatement(expression=expression):
                if not self.frames:
                    raise ReturnOutsideFunctionError(unit.line, self.file)
                raise ReturnControlFlow(self.eval_expr(expression))

            case LetCommand():
                self._assign(unit)

            case CallCommand(scope=scope, name=name, args=arg_nodes):
                args = [self.eval_expr(arg) for arg in arg_nodes]
                if scope is None and name in BUILTINS:
                    self._call_builtin(name, args, unit.line)
                else:
                    self.call_function(name, args, scope, unit.line)

            case GenericCommand(name=name, bang=bang, argument=argument):
                self.host.execute_command(name, bang, argument)

            case _:
                raise TypeError(f"Unknown script unit {unit!r} in {self.file}")

    def execute(self, units) -> None:
        """
        Execute a sequence of script units in order.
        """
        for unit in units:
            self.execute_unit(unit)
