"""
gojo: a lexer, parser and tree-walking interpreter for a small JavaScript subset.
"""

from gojo.errors import (
    ErrorKind, ExecutionCancelled, GojoError, InterpreterError, LexError, ParseError,
)
from gojo.interpreter import Environment, Interpreter, run, run_source
from gojo.lexer import Token, TokenKind, TokenType, tokenize
from gojo.parser import parse

__version__ = "0.1.0"
