"""
Tests for the Vim script lexer.
"""
import pytest

from vimscript.exceptions import LexError
from vimscript.lexer import match_command, match_keyword, tokenize
from vimscript.tests.utils import ENDFUNCTION_ALIASES, FUNCTION_ALIASES


def types(source: str) -> list[str]:
    return [tok.type for tok in tokenize(source)]


@pytest.mark.parametrize("word", FUNCTION_ALIASES)
def test_function_abbreviations(word):
    assert match_keyword(word) == 'FUNCTION'


@pytest.mark.parametrize("word", ENDFUNCTION_ALIASES)
def test_endfunction_abbreviations(word):
    assert match_keyword(word) == 'ENDFUNCTION'


@pytest.mark.parametrize("word", ["f", "functions", "funk", "end", "endfunctions", "endfo", "Function"])
def test_non_abbreviations_are_not_keywords(word):
    assert match_keyword(word) is None


def test_command_abbreviations_resolve_to_canonical_name():
    assert match_command("se") == "set"
    assert match_command("norm") == "normal"
    assert match_command("endfo") == "endfor"
    assert match_command("range") is None


def test_keyword_only_at_command_position():
    tokens = tokenize("echo function")
    assert [t.type for t in tokens] == ['ECHO', 'ID', 'NEWLINE', 'EOF']
    assert tokens[1].value == "function"


def test_comment_and_blank_lines_produce_no_tokens():
    source = '" a comment\n\n   \n    " indented comment\necho 1\n'
    assert types(source) == ['ECHO', 'NUMBER', 'NEWLINE', 'EOF']


def test_empty_source():
    assert types("") == ['EOF']


def test_strings():
    tokens = tokenize("echo 'it''s' \"tab\\there\"")
    assert tokens[1].type == tokens[2].type == 'STRING'
    assert tokens[1].value == "it's"
    assert tokens[2].value == "tab\there"


def test_scoped_identifiers_and_operators():
    tokens = tokenize("let s:x .= a:cmd . g:y .. @a")
    assert [(t.type, t.value) for t in tokens[:-2]] == [
        ('LET', 'let'),
        ('ID', 's:x'),
        ('CONCAT_ASSIGN', '.='),
        ('ID', 'a:cmd'),
        ('DOT', '.'),
        ('ID', 'g:y'),
        ('CONCAT', '..'),
        ('REGISTER', 'a'),
    ]


def test_generic_command_keeps_raw_arguments():
    tokens = tokenize("nnoremap <leader>x :call Foo()<CR>")
    assert [(t.type, t.value) for t in tokens] == [
        ('COMMAND', 'nnoremap'),
        ('ARGS', '<leader>x :call Foo()<CR>'),
        ('NEWLINE', '\n'),
        ('EOF', None),
    ]


def test_generic_command_bang():
    assert types("normal! gg") == ['COMMAND', 'BANG', 'ARGS', 'NEWLINE', 'EOF']


def test_token_positions():
    tokens = tokenize("\n  echo 'x'")
    assert (tokens[0].line, tokens[0].column) == (2, 3)
    assert (tokens[1].line, tokens[1].column) == (2, 8)


def test_tokens_are_immutable():
    token = tokenize("echo 1")[0]
    with pytest.raises(AttributeError):
        token.value = "other"


def test_line_continuation_joins_lines():
    source = "echo 'a'\n    \\ . 'b'\necho 'c'"
    assert types(source) == [
        'ECHO', 'STRING', 'DOT', 'STRING', 'NEWLINE', 'ECHO', 'STRING', 'NEWLINE', 'EOF',
    ]


def test_line_continuation_of_generic_command():
    tokens = tokenize("set tabstop=4\n\\ shiftwidth=4")
    assert tokens[1].type == 'ARGS'
    assert tokens[1].value == "tabstop=4 shiftwidth=4"


def test_unterminated_string():
    with pytest.raises(LexError) as exc:
        tokenize("echo 'ok'\necho 'broken")
    assert exc.value.line == 2
    assert exc.value.column == 6


def test_unexpected_character():
    with pytest.raises(LexError) as exc:
        tokenize("echo 1 + 2")
    assert exc.value.line == 1
    assert exc.value.column == 8


def test_recover_emits_invalid_token():
    tokens = tokenize("echo 'broken\necho 'fine'", recover=True)
    assert [t.type for t in tokens] == [
        'ECHO', 'INVALID', 'NEWLINE', 'ECHO', 'STRING', 'NEWLINE', 'EOF',
    ]
    assert isinstance(tokens[1].value, LexError)
