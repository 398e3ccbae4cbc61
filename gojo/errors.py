"""
Error taxonomy for gojo

Every error raised while lexing, parsing or running a program derives from
GojoError and knows the source position it was raised at.
"""

from enum import Enum
from typing import Optional


class GojoError(Exception):
    label = "Error"

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def __str__(self):
        if self.line is None:
            return f"{self.label}: {self.message}"
        return f"{self.label} at line {self.line}, column {self.column}: {self.message}"


class LexError(GojoError):
    label = "LexError"


class ParseError(GojoError):
    label = "ParseError"

    def __init__(self, expected: str, found: str, line: int, column: int, message: Optional[str] = None):
        super().__init__(message or f"expected {expected}, found {found}", line, column)
        self.expected = expected
        self.found = found


class ErrorKind(Enum):
    UNBOUND_IDENTIFIER = "UnboundIdentifier"
    TYPE_MISMATCH = "TypeMismatch"
    DIVISION_BY_ZERO = "DivisionByZero"
    INVALID_BUILTIN_ARGUMENT = "InvalidBuiltinArgument"
    INDEX_OUT_OF_RANGE = "IndexOutOfRange"
    CONST_ASSIGNMENT = "ConstAssignment"
    REDECLARATION = "Redeclaration"
    NOT_CALLABLE = "NotCallable"


class InterpreterError(GojoError):
    """Raised by the evaluator; `kind` says which rule was broken."""

    def __init__(self, kind: ErrorKind, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message, line, column)
        self.kind = kind

    @property
    def label(self):
        return f"RuntimeError({self.kind.value})"


class ExecutionCancelled(GojoError):
    label = "Cancelled"
