"""
Tests for executing scripts
"""
import textwrap

import pytest

from vimscript.exceptions import (
    FunctionAlreadyDefinedError,
    ReturnOutsideFunctionError,
    ScriptParseError,
    TypeMismatchError,
    UndefinedFunctionError,
    UndefinedVariableError,
)
from vimscript.interpreter import ExecutionResult, Interpreter
from vimscript.nodes import Scope

from vimscript.tests.utils import make_interpreter


def test_echo_joins_expressions_with_space():
    interpreter, output = make_interpreter()
    interpreter.source("echo 'a' 'b' 3")
    assert output == ["a b 3"]


def test_echo_concatenation():
    interpreter, output = make_interpreter()
    interpreter.source("let g:name = 'vim'\necho 'hello ' . g:name .. '!'")
    assert output == ["hello vim!"]


def test_echo_defaults_to_print(capsys):
    Interpreter().source("echo 'printed'")
    assert capsys.readouterr().out == "printed\n"


def test_function_definition_and_call():
    interpreter, output = make_interpreter()
    interpreter.source(textwrap.dedent(
        """\
        function! s:Initialize(cmd, args)
            " a: prefix for arguments
            echo "Command: " . a:cmd
            return 'true'
        endfunction
        echo s:Initialize('run', 'x')
        """
    ))
    assert output == ["Command: run", "true"]


def test_function_without_return_yields_zero():
    interpreter, output = make_interpreter()
    interpreter.source("fun Nothing()\nendf\necho Nothing()")
    assert output == ["0"]


def test_call_discards_result():
    interpreter, output = make_interpreter()
    interpreter.source("fun Hello()\n  echo 'hi'\n  return 'ignored'\nendf\ncall Hello()")
    assert output == ["hi"]


def test_redefinition_requires_bang():
    interpreter, _ = make_interpreter()
    interpreter.source("fun F()\n  return 1\nendf")
    with pytest.raises(FunctionAlreadyDefinedError) as exc:
        interpreter.source("fun F()\n  return 2\nendf")
    assert exc.value.name == "F"
    assert interpreter.call_function("F") == 1


def test_redefinition_with_bang_replaces():
    interpreter, _ = make_interpreter()
    interpreter.source("fun F()\n  return 1\nendf\nfun! F()\n  return 2\nendf")
    assert interpreter.call_function("F") == 2


def test_bang_on_new_function_is_allowed():
    interpreter, _ = make_interpreter()
    interpreter.source("fun! New()\n  return 'ok'\nendf")
    assert interpreter.call_function("New") == "ok"


def test_return_outside_function():
    interpreter, _ = make_interpreter()
    with pytest.raises(ReturnOutsideFunctionError) as exc:
        interpreter.source("echo 1\nreturn 1")
    assert exc.value.line == 2


def test_undefined_variable():
    interpreter, _ = make_interpreter()
    with pytest.raises(UndefinedVariableError) as exc:
        interpreter.source("echo g:missing")
    assert exc.value.scope is Scope.GLOBAL_VARIABLE
    assert exc.value.varname == "missing"
    assert "g:missing" in str(exc.value)


def test_undefined_function():
    interpreter, _ = make_interpreter()
    with pytest.raises(UndefinedFunctionError):
        interpreter.source("call Missing()")


def test_list_value_cannot_be_echoed():
    interpreter, _ = make_interpreter()
    interpreter.global_vars["items"] = ["a"]
    with pytest.raises(TypeMismatchError):
        interpreter.source("echo g:items")


def test_nested_declaration_is_defined_when_outer_runs():
    interpreter, output = make_interpreter()
    interpreter.source(
        "fun Outer()\n  fun! Inner()\n    return 'inner'\n  endf\nendf\n"
        "call Outer()\necho Inner()"
    )
    assert output == ["inner"]


def test_generic_commands_go_to_host():
    interpreter, _ = make_interpreter()
    interpreter.source("set nocompatible\nnormal! gg")
    assert interpreter.host.commands == [
        ("set", False, "nocompatible"),
        ("normal", True, "gg"),
    ]


def test_registers():
    interpreter, output = make_interpreter()
    interpreter.source("let @a = 'one'\nlet @a .= ' two'\nlet @A = ' three'\necho @a")
    assert output == ["one two three"]


def test_builtins():
    interpreter, output = make_interpreter(["first", "second"])
    interpreter.source(textwrap.dedent(
        """\
        echo len('four')
        echo toupper('up') tolower('DOWN')
        echo string('it''s') string(7)
        echo getline(2) getline('$') getline(9)
        echo exists('g:nope') exists('*len')
        """
    ))
    assert output == ["4", "UP down", "'it''s' 7", "second second ", "0 1"]


def test_exists_for_variables_and_functions():
    interpreter, output = make_interpreter()
    interpreter.source(
        "let g:set = 1\nfun Defined()\nendf\n"
        "echo exists('g:set') exists('*Defined') exists('*Undefined')"
    )
    assert output == ["1 1 0"]


def test_run_reports_success_and_messages():
    interpreter, _ = make_interpreter()
    result = interpreter.run("echo 'a'\necho 'b'")
    assert result == ExecutionResult("success", None, ["a", "b"])


def test_run_reports_runtime_error():
    interpreter, output = make_interpreter()
    result = interpreter.run("echo 'before'\necho g:missing\necho 'after'", "broken.vim")
    assert result.status == "error"
    assert isinstance(result.error, UndefinedVariableError)
    assert result.messages == ["before"]
    assert output == ["before"]
    assert result.format_error().startswith("UndefinedVariableError: Undefined variable 'g:missing'")
    assert "broken.vim" in result.format_error()


def test_run_reports_parse_error_without_executing():
    interpreter, output = make_interpreter()
    result = interpreter.run("echo 'a'\nfun F(\n")
    assert result.status == "error"
    assert isinstance(result.error, ScriptParseError)
    assert output == []


def test_file_is_restored_after_source():
    interpreter, _ = make_interpreter()
    interpreter.run("echo g:missing", "other.vim")
    assert interpreter.file == "<test>"


def test_run_messages_are_collected_per_run():
    interpreter, output = make_interpreter()
    first = interpreter.run("echo 'a'")
    interpreter.source("echo 'outside'")
    second = interpreter.run("echo 'b'\necho 'c'")
    assert first.messages == ["a"]
    assert second.messages == ["b", "c"]
    assert interpreter.run_messages is None
    assert output == ["a", "outside", "b", "c"]


def test_run_messages_are_released_after_error():
    interpreter, _ = make_interpreter()
    result = interpreter.run("echo 'a'\necho g:missing")
    assert result.messages == ["a"]
    assert interpreter.run_messages is None
