"""
Tests for echo, return, let, call and generic commands
"""
import pytest

from vimscript.exceptions import ScriptParseError, UnsupportedSyntaxError
from vimscript.nodes import (
    CallCommand,
    EchoCommand,
    GenericCommand,
    LetCommand,
    NumberLiteral,
    RegisterRef,
    ReturnStatement,
    Scope,
    ScopedVariableRef,
    StringLiteral,
)

from vimscript.tests.utils import parse_units


def test_echo_multiple_expressions():
    (unit,) = parse_units("echo 'a' 1 g:x")
    assert unit == EchoCommand((
        StringLiteral("a"),
        NumberLiteral(1),
        ScopedVariableRef(Scope.GLOBAL_VARIABLE, "x"),
    ))
    assert unit.line == 1


def test_echo_requires_an_expression():
    with pytest.raises(ScriptParseError):
        parse_units("echo")


def test_leading_colon_is_ignored():
    assert parse_units(":echo 1") == parse_units("echo 1")


def test_return_with_value():
    (fn,) = parse_units("fun F()\n  return g:x\nendf")
    assert fn.body == (ReturnStatement(ScopedVariableRef(Scope.GLOBAL_VARIABLE, "x")),)


def test_bare_return_is_unsupported():
    with pytest.raises(UnsupportedSyntaxError) as exc:
        parse_units("fun F()\n  return\nendf")
    assert exc.value.line == 2


def test_let_assign():
    (unit,) = parse_units("let s:name = 'vim'")
    assert unit == LetCommand(
        ScopedVariableRef(Scope.SCRIPT_VARIABLE, "name"), "=", StringLiteral("vim")
    )


def test_let_append():
    (unit,) = parse_units("let g:log .= 'more'")
    assert unit.operator == ".="


def test_let_register():
    (unit,) = parse_units("let @a = 'text'")
    assert unit.target == RegisterRef("a")


@pytest.mark.parametrize("source", ["let = 1", "let x", "let x = ", "let 'x' = 1"])
def test_malformed_let(source):
    with pytest.raises(ScriptParseError):
        parse_units(source)


def test_call():
    (unit,) = parse_units("call s:Setup('a', 2)")
    assert unit == CallCommand(
        Scope.SCRIPT_VARIABLE, "Setup", (StringLiteral("a"), NumberLiteral(2))
    )


def test_call_dictionary_function():
    (unit,) = parse_units("call s:dict.something.Initialize()")
    assert unit == CallCommand(Scope.SCRIPT_VARIABLE, "dict.something.Initialize", ())


def test_call_requires_argument_list():
    with pytest.raises(ScriptParseError):
        parse_units("call Foo")


def test_generic_commands():
    units = parse_units("set nocompatible\nnnoremap <C-l> :nohlsearch<CR>\nnorm! dd\nUnknownCmd x y")
    assert units == [
        GenericCommand("set", False, "nocompatible"),
        GenericCommand("nnoremap", False, "<C-l> :nohlsearch<CR>"),
        GenericCommand("normal", True, "dd"),
        GenericCommand("UnknownCmd", False, "x y"),
    ]
    assert units[2].text == "normal! dd"


def test_generic_command_without_arguments():
    (unit,) = parse_units("nohlsearch")
    assert unit == GenericCommand("nohlsearch")
    assert unit.text == "nohlsearch"


def test_trailing_characters():
    with pytest.raises(ScriptParseError) as exc:
        parse_units("call Foo() extra")
    assert "Trailing characters" in str(exc.value)
