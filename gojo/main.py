#!/usr/bin/env python3
"""
Main entry point for the gojo interpreter

    gojo program.js            run a file
    gojo                       start the REPL
    gojo program.js --dump-ast print the parsed tree as JSON, then run

Exit status: 0 on success, 1 when the program fails to lex, parse or run,
2 on usage errors and unreadable files.
"""

import argparse
import json
import logging
import sys
from typing import Callable, Optional

from gojo.ast_nodes import ast_to_dict
from gojo.config import Config, load_config
from gojo.errors import GojoError
from gojo.interpreter import Interpreter
from gojo.lexer import Lexer
from gojo.parser import Parser
from gojo.values import UNDEFINED, inspect

logger = logging.getLogger(__name__)


def iteration_limit(limit: int) -> Optional[Callable[[], bool]]:
    """A cancellation check that trips after `limit` loop iterations in total."""
    if limit <= 0:
        return None
    count = 0

    def should_cancel() -> bool:
        nonlocal count
        count += 1
        return count > limit

    return should_cancel


def run_file(filename: str, config: Config, dump_ast: bool = False) -> int:
    try:
        with open(filename, 'r', encoding='utf-8') as f:
            source = f.read()
    except OSError as e:
        print(f"Error: cannot read '{filename}': {e.strerror}", file=sys.stderr)
        return 2

    logger.info("running %s (%d characters)", filename, len(source))
    try:
        # Tokenize
        tokens = Lexer(source).tokenize()

        # Parse
        program = Parser(tokens).parse()
        if dump_ast:
            print(json.dumps(ast_to_dict(program), indent=2))

        # Interpret
        interpreter = Interpreter(stream=sys.stdout,
                                  should_cancel=iteration_limit(config.max_loop_iterations))
        interpreter.interpret(program)

    except GojoError as e:
        sys.stdout.flush()
        print(e, file=sys.stderr)
        return 1

    logger.info("finished %s, %d line(s) of output", filename, len(interpreter.output))
    return 0


def run_repl(config: Config) -> int:
    print("Welcome to the gojo REPL")
    print("Type 'exit' or 'quit' to leave")
    print()

    interpreter = Interpreter(stream=sys.stdout)

    while True:
        try:
            line = input(">>> ")
        except EOFError:
            break

        if line.strip() in ('exit', 'quit'):
            break
        if not line.strip():
            continue

        try:
            program = Parser(Lexer(line).tokenize()).parse()
            # the iteration limit applies to each line on its own
            interpreter.should_cancel = iteration_limit(config.max_loop_iterations)
            interpreter.interpret(program)
        except GojoError as e:
            print(e)
            continue

        if interpreter.last_value is not UNDEFINED:
            print(inspect(interpreter.last_value))

    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gojo", description="Run a gojo (JavaScript subset) program.")
    parser.add_argument("file", nargs="?", help="source file to run; without one the REPL starts")
    parser.add_argument("--repl", action="store_true", help="start the interactive REPL")
    parser.add_argument("--verbose", action="store_true", help="log progress and dump the AST")
    parser.add_argument("--debug", action="store_true", help="log every statement and loop")
    parser.add_argument("--dump-ast", action="store_true", help="print the parsed AST as JSON before running")
    parser.add_argument("--max-iterations", type=int, default=None, metavar="N",
                        help="stop after N loop iterations in total (0 = unlimited)")
    return parser


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)

    try:
        config = load_config()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.file:
        config.input_file = args.file
    config.verbose = config.verbose or args.verbose
    config.mega_verbose = config.mega_verbose or args.debug
    config.repl_mode = config.repl_mode or args.repl
    if args.max_iterations is not None:
        if args.max_iterations < 0:
            print("Error: --max-iterations must not be negative", file=sys.stderr)
            return 2
        config.max_loop_iterations = args.max_iterations

    logging.basicConfig(level=config.log_level, stream=sys.stderr,
                        format="%(levelname)s %(name)s: %(message)s")

    if config.repl_mode or not config.input_file:
        return run_repl(config)
    return run_file(config.input_file, config, dump_ast=args.dump_ast or config.verbose)


if __name__ == '__main__':
    sys.exit(main())
