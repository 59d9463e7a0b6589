"""Lexer for Vim script.

Vim script is line oriented: the first word of every logical line names a
command. The lexer walks the source one physical line at a time and decides
how to tokenize the rest of the line from that first word:

- Keywords (``function``, ``endfunction``, ``echo``, ``return``, ``let``,
  ``call``) are recognized by minimum-unambiguous-prefix matching against a
  static table, e.g. ``fu`` through ``function``. The rest of such a line is
  split into expression tokens with a combined regular expression of named
  groups.
- Any other command word becomes a ``COMMAND`` token (known ex commands, with
  their canonical name) or a ``WORD`` token, followed by an optional ``BANG``
  and the raw argument text as a single ``ARGS`` token.

Blank lines and lines starting with ``"`` produce no tokens at all. A line
starting with ``\\`` continues the previous logical line. Each logical line
ends with a ``NEWLINE`` token and the stream ends with ``EOF``.


File: lexer.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.1
License: MIT
"""

import re

from vimscript.exceptions import LexError


class Token:
    """
    Represents a lexical token with a type, value and source position.
    """
    __slots__ = ("type", "value", "line", "column")

    def __init__(self, type_, value, line, column=1):
        """
        Initialize a new token.

        Parameters:
            type_ (str): The token type.
            value (Any): The token value.
            line (int): 1-based source line.
            column (int): 1-based source column.
        """
        object.__setattr__(self, "type", type_)
        object.__setattr__(self, "value", value)
        object.__setattr__(self, "line", line)
        object.__setattr__(self, "column", column)

    def __setattr__(self, name, value):
        raise AttributeError("Token is immutable")

    def __repr__(self) -> str:
        """
        Return a string representation of the token.
        """
        return f"Token({self.type}, {self.value!r}, line={self.line}, column={self.column})"


# (token type, canonical spelling, shortest accepted abbreviation)
KEYWORDS: list[tuple[str, str, int]] = [
    ('FUNCTION',    'function',    2),
    ('ENDFUNCTION', 'endfunction', 4),
    ('ECHO',        'echo',        2),
    ('RETURN',      'return',      4),
    ('LET',         'let',         3),
    ('CALL',        'call',        3),
]

# Ex commands passed through to the host. Listed so that their abbreviations
# resolve to one canonical name.
COMMANDS: list[tuple[str, int]] = [
    ('aboveleft', 3),
    ('augroup', 3),
    ('autocmd', 2),
    ('badd', 3),
    ('bdelete', 2),
    ('belowright', 3),
    ('botright', 2),
    ('bufdo', 5),
    ('buffer', 1),
    ('catch', 3),
    ('cd', 2),
    ('close', 3),
    ('cmap', 2),
    ('cnoremap', 3),
    ('colorscheme', 4),
    ('command', 3),
    ('delcommand', 4),
    ('delete', 1),
    ('doautocmd', 2),
    ('echoerr', 5),
    ('echohl', 5),
    ('echomsg', 5),
    ('echon', 5),
    ('edit', 1),
    ('else', 2),
    ('elseif', 5),
    ('endfor', 5),
    ('endif', 2),
    ('endtry', 4),
    ('endwhile', 4),
    ('execute', 3),
    ('filetype', 5),
    ('finally', 4),
    ('for', 3),
    ('global', 1),
    ('highlight', 2),
    ('if', 2),
    ('imap', 2),
    ('inoremap', 3),
    ('join', 1),
    ('keepjumps', 5),
    ('lcd', 2),
    ('lockvar', 5),
    ('lua', 3),
    ('map', 3),
    ('mark', 2),
    ('match', 3),
    ('messages', 3),
    ('new', 3),
    ('nmap', 2),
    ('nnoremap', 2),
    ('noautocmd', 3),
    ('nohlsearch', 3),
    ('noremap', 2),
    ('normal', 4),
    ('nunmap', 3),
    ('omap', 2),
    ('only', 2),
    ('onoremap', 3),
    ('packadd', 2),
    ('put', 2),
    ('quit', 1),
    ('redo', 3),
    ('redraw', 4),
    ('runtime', 2),
    ('set', 2),
    ('setfiletype', 4),
    ('setglobal', 4),
    ('setlocal', 4),
    ('sign', 3),
    ('silent', 3),
    ('sleep', 2),
    ('source', 2),
    ('split', 2),
    ('startinsert', 4),
    ('stopinsert', 5),
    ('substitute', 1),
    ('syntax', 2),
    ('tabclose', 4),
    ('tabnew', 6),
    ('tabnext', 4),
    ('terminal', 3),
    ('throw', 2),
    ('try', 3),
    ('undo', 1),
    ('unlet', 3),
    ('unlockvar', 4),
    ('unmap', 3),
    ('update', 2),
    ('vmap', 2),
    ('vnoremap', 2),
    ('vsplit', 2),
    ('while', 2),
    ('wincmd', 4),
    ('windo', 5),
    ('write', 1),
    ('xmap', 2),
    ('xnoremap', 2),
    ('yank', 1),
]

token_specification: list[tuple[str, str]] = [
    # Literals
    ('NUMBER',        r'\d+'),
    ('STRING',        r"'(?:[^'\n]|'')*'"),
    ('DQSTRING',      r'"(?:[^"\\\n]|\\.)*"'),
    ('REGISTER',      r'@[A-Za-z0-9"+*\-.:/%#=_]'),

    # Identifiers, with or without a scope prefix
    ('ID',            r'[gsalbwtv]:[\w#]+|[A-Za-z_][\w#]*'),

    # Operators
    ('CONCAT_ASSIGN', r'\.\.?='),
    ('CONCAT',        r'\.\.'),
    ('DOT',           r'\.'),
    ('ASSIGN',        r'='),
    ('BANG',          r'!'),

    # Delimiters
    ('LPAREN',        r'\('),
    ('RPAREN',        r'\)'),
    ('COMMA',         r','),

    # Miscellaneous
    ('SKIP',          r'[ \t]+'),
    ('UNTERMINATED',  r'[\'"]'),
    ('MISMATCH',      r'.'),
]

tok_regex = re.compile('|'.join(f'(?P<{name}>{pattern})' for name, pattern in token_specification))

_COMMAND_WORD = re.compile(r'[A-Za-z]+')
_ESCAPES = {'n': '\n', 't': '\t', 'r': '\r', 'e': '\x1b', '\\': '\\', '"': '"'}


def _is_abbreviation(word: str, canonical: str, min_len: int) -> bool:
    return min_len <= len(word) <= len(canonical) and canonical.startswith(word)


def match_keyword(word: str) -> str | None:
    """
    Return the keyword token type ``word`` abbreviates, or ``None``.

    Parameters:
        word (str): A command word as written in the source.
    """
    for kind, canonical, min_len in KEYWORDS:
        if _is_abbreviation(word, canonical, min_len):
            return kind
    return None


def match_command(word: str) -> str | None:
    """
    Return the canonical name of the known ex command ``word`` abbreviates.
    """
    for canonical, min_len in COMMANDS:
        if _is_abbreviation(word, canonical, min_len):
            return canonical
    return None


def _unescape(text: str) -> str:
    return re.sub(r'\\(.)', lambda m: _ESCAPES.get(m.group(1), m.group(1)), text)


def _tokenize_expression(text, line_num, col_offset, tokens, file=None) -> None:
    """
    Split the rest of a keyword line into expression tokens.

    Raises:
        LexError: On an unterminated string or an unexpected character.
    """
    for match_obj in tok_regex.finditer(text):
        kind = match_obj.lastgroup
        value = match_obj.group()
        column = col_offset + match_obj.start()

        if kind == 'SKIP':
            continue
        if kind == 'UNTERMINATED':
            raise LexError("Unterminated string literal", line_num, column, file)
        if kind == 'MISMATCH':
            raise LexError(f"Unexpected character {value!r}", line_num, column, file)

        if kind == 'NUMBER':
            tokens.append(Token('NUMBER', int(value), line_num, column))
        elif kind == 'STRING':
            tokens.append(Token('STRING', value[1:-1].replace("''", "'"), line_num, column))
        elif kind == 'DQSTRING':
            tokens.append(Token('STRING', _unescape(value[1:-1]), line_num, column))
        elif kind == 'REGISTER':
            tokens.append(Token('REGISTER', value[1], line_num, column))
        else:
            tokens.append(Token(kind, value, line_num, column))


def tokenize(code: str, recover: bool = False, file: str | None = None) -> list[Token]:
    """
    Convert a string of source code into a list of tokens.

    Parameters:
        code (str): The source code to tokenize.
        recover (bool): Emit an ``INVALID`` token carrying the error instead of
            raising, and skip the rest of the offending line.
        file (str): Name used in error messages.

    Returns:
        list[Token]: A list of Token instances ending with ``EOF``.

    Raises:
        LexError: If an unexpected character or unterminated string is found
            and ``recover`` is false.
    """
    tokens: list[Token] = []
    mode = None  # how the current logical line is tokenized: 'expr' or 'args'
    last_line = 1
    last_end = 1

    for line_num, line in enumerate(code.split('\n'), start=1):
        line = line.rstrip('\r')
        stripped = line.lstrip(' \t')
        if not stripped or stripped.startswith('"'):
            continue
        column = len(line) - len(stripped) + 1

        try:
            if stripped.startswith('\\'):
                if mode is None:
                    raise LexError("Line continuation without a preceding line", line_num, column, file)
                rest = stripped[1:]
                if mode == 'args':
                    prev = tokens[-1]
                    tokens[-1] = Token('ARGS', (prev.value + rest).strip(), prev.line, prev.column)
                else:
                    _tokenize_expression(rest, line_num, column + 1, tokens, file)
                last_line = line_num
                last_end = len(line) + 1
                continue

            body = stripped.lstrip(':')
            if not body.strip():
                continue
            column += len(stripped) - len(body)

            if tokens and tokens[-1].type != 'NEWLINE':
                tokens.append(Token('NEWLINE', '\n', last_line, last_end))
            last_line = line_num
            last_end = len(line) + 1
            mode = 'expr'

            word_match = _COMMAND_WORD.match(body)
            if word_match is None:
                raise LexError(f"Unexpected character {body[0]!r}", line_num, column, file)
            word = word_match.group()
            rest = body[word_match.end():]
            rest_column = column + word_match.end()

            kind = match_keyword(word)
            if kind is not None:
                tokens.append(Token(kind, word, line_num, column))
                if kind == 'ENDFUNCTION' and rest.strip().startswith('"'):
                    continue
                _tokenize_expression(rest, line_num, rest_column, tokens, file)
                continue

            canonical = match_command(word)
            if canonical is not None:
                tokens.append(Token('COMMAND', canonical, line_num, column))
            else:
                tokens.append(Token('WORD', word, line_num, column))
            if rest.startswith('!'):
                tokens.append(Token('BANG', '!', line_num, rest_column))
                rest = rest[1:]
                rest_column += 1
            tokens.append(Token('ARGS', rest.strip(), line_num, rest_column))
            mode = 'args'
        except LexError as e:
            if not recover:
                raise
            tokens.append(Token('INVALID', e, e.line, e.column))

    if tokens and tokens[-1].type != 'NEWLINE':
        tokens.append(Token('NEWLINE', '\n', last_line, last_end))
    tokens.append(Token('EOF', None, last_line, last_end))
    return tokens
