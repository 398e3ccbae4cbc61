"""
Pytest configuration and fixtures for the gojo tests.
"""

import os
import sys

import pytest

# Make the package importable from a plain checkout
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, ROOT)

from gojo.interpreter import Interpreter  # noqa: E402
from gojo.lexer import tokenize  # noqa: E402
from gojo.parser import parse  # noqa: E402


@pytest.fixture
def run_program():
    """Run source text, returning the interpreter so tests can inspect state."""
    def _run(source, **kwargs):
        interpreter = Interpreter(**kwargs)
        interpreter.interpret(parse(tokenize(source)))
        return interpreter
    return _run


@pytest.fixture
def output_of(run_program):
    """Run source text and return its console.log lines."""
    def _output(source):
        return run_program(source).output
    return _output


@pytest.fixture
def root_dir():
    return ROOT
