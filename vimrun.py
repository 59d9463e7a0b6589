"""
Vim script runner

This is the main entry point for the Vim script front end.

Workflow:
1. The source script is read from the file given on the command line.
2. The Lexer tokenizes the source into keyword, command and expression tokens.
3. The Parser processes tokens into script units following the grammar.
4. The Interpreter executes the units against an in-memory host, printing
   everything the script echoes.

The ``migrate`` command splits a version 6 settings file into the local and
shared version 7 files.

Environment:
    VIMSCRIPT_DEBUG      Print tokens and script units before executing.
    VIMSCRIPT_LOG_LEVEL  Logging level name (default: WARNING).
"""
import argparse
import logging
import os
import sys

from vimscript.exceptions import ScriptParseError
from vimscript.interpreter import Interpreter
from vimscript.lexer import tokenize
from vimscript.migration import migrate_file
from vimscript.parser import Parser


def debug_print_tokens_ast(tokens, script):
    """
    Print tokenized source and script units
    """
    print("\nTokens:\n")
    for token in tokens:
        print(token)
    print("\nUnits:\n")
    for unit in script.units:
        print(unit)
    print(" ")


def run_script(script_name: str) -> int:
    """
    Run a Vim script file
    """
    with open(script_name, "r", encoding="utf-8") as f:
        code = f.read()

    interpreter = Interpreter(script_name)
    if os.environ.get('VIMSCRIPT_DEBUG'):
        try:
            tokens = tokenize(code, file=script_name)
            debug_print_tokens_ast(tokens, Parser(tokens, script_name).parse())
        except ScriptParseError as e:
            print(f"{type(e).__name__}: {e}")
            return 1

    result = interpreter.run(code, script_name)
    if result.status == 'error':
        print(result.format_error(), file=sys.stderr)
        return 1
    return 0


def run_repl() -> None:
    """
    Run the interactive REPL
    """
    print("Vim script REPL")
    print("Type `exit` or `quit` to leave.")
    interpreter = Interpreter("<stdin>")
    buffer: list[str] = []
    while True:
        try:
            prompt = ":" if not buffer else "  "
            line = input(prompt)
            if not buffer and line.strip() in {"exit", "quit"}:
                break
            buffer.append(line)
            result = interpreter.run("\n".join(buffer))
            # An open function body waits for its :endfunction
            if result.status == 'error' and "Missing :endfunction" in str(result.error):
                continue
            if result.status == 'error':
                print(result.format_error())
            buffer.clear()
        except KeyboardInterrupt:
            print("\nInterrupted.")
            break
        except EOFError:
            print()
            break


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the CLI.

    Behaviour:
    - No command: enter the REPL.
    - ``run <script>``: execute a script file.
    - ``migrate <src> <local> <shared>``: split a settings file.
    """
    parser = argparse.ArgumentParser(
        description="Vim script interpreter.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("VIMSCRIPT_LOG_LEVEL", "WARNING"),
        help="Logging level (default: $VIMSCRIPT_LOG_LEVEL or WARNING)",
    )
    sub = parser.add_subparsers(dest="command")

    p_run = sub.add_parser("run", help="Execute a Vim script file")
    p_run.add_argument("script", help="Path to a .vim source file")

    sub.add_parser("repl", help="Start the interactive REPL")

    p_migrate = sub.add_parser(
        "migrate", help="Split a version 6 settings file into local and shared files"
    )
    p_migrate.add_argument("src", help="Version 6 settings file")
    p_migrate.add_argument("local", help="Output path for session state")
    p_migrate.add_argument("shared", help="Output path for user preferences")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "run":
        return run_script(args.script)
    if args.command == "migrate":
        migrate_file(args.src, args.local, args.shared)
        return 0
    run_repl()
    return 0


if __name__ == "__main__":
    sys.exit(main())
