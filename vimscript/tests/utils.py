"""
Utility functions shared across Vim script tests.
"""
from vimscript.host import ScratchHost
from vimscript.interpreter import Interpreter
from vimscript.lexer import tokenize
from vimscript.parser import Parser

FUNCTION_ALIASES = ["fu", "fun", "func", "funct", "functi", "functio", "function"]
ENDFUNCTION_ALIASES = [
    "endf", "endfu", "endfun", "endfunc", "endfunct", "endfuncti", "endfunctio", "endfunction",
]


def parse_source(source: str, recover: bool = False):
    """
    Parse source code and return the script.
    """
    tokens = tokenize(source, recover=recover, file="<test>")
    parser = Parser(tokens, "<test>")
    return parser.parse(recover=recover)


def parse_units(source: str) -> list:
    """
    Parse source code and return its units.
    """
    return parse_source(source).units


def make_interpreter(lines=None) -> tuple[Interpreter, list[str]]:
    """
    Create an interpreter whose echo output is collected in a list.
    """
    output: list[str] = []
    interpreter = Interpreter("<test>", host=ScratchHost(lines), output=output.append)
    return interpreter, output
