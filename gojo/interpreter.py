"""
Interpreter for gojo
Executes the AST

Interpreter.interpret() runs the statements of a Program one by one.
Statements report how control leaves them with a Signal (NORMAL, BREAK,
CONTINUE); loops and switches consume the signals meant for them.
"""

import logging
import math
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional, TextIO

from gojo.ast_nodes import (
    ArrayLiteral, Assignment, ASTNode, BinaryExpr, BlockStmt, BreakStmt, CallExpr,
    ContinueStmt, ExprStmt, Identifier, IfStmt, Literal, LogicalExpr, MemberExpr,
    Program, SwitchStmt, UnaryExpr, VarDecl, WhileStmt,
)
from gojo.builtins import make_globals
from gojo.errors import ErrorKind, ExecutionCancelled, InterpreterError
from gojo.lexer import tokenize
from gojo.parser import parse
from gojo.values import (
    UNDEFINED, BuiltinFunction, BuiltinNamespace, is_number, is_truthy, loose_equals,
    strict_equals, to_string, type_name,
)

logger = logging.getLogger(__name__)


class Signal(Enum):
    NORMAL = auto()
    BREAK = auto()
    CONTINUE = auto()


class Environment:
    '''
    One lexical scope. Lookups walk the parent links outwards; a child
    never writes into its parent's table except through assign().
    '''
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.variables: Dict[str, Any] = {}
        self.constants = set()

    def define(self, name: str, value: Any, constant: bool = False, node: Optional[ASTNode] = None):
        if name in self.constants:
            raise _error(ErrorKind.REDECLARATION, f"Cannot redeclare constant '{name}'", node)
        self.variables[name] = value
        if constant:
            self.constants.add(name)

    def resolve(self, name: str) -> Optional['Environment']:
        env = self
        while env is not None:
            if name in env.variables:
                return env
            env = env.parent
        return None

    def get(self, name: str, node: Optional[ASTNode] = None) -> Any:
        env = self.resolve(name)
        if env is None:
            raise _error(ErrorKind.UNBOUND_IDENTIFIER, f"'{name}' is not defined", node)
        return env.variables[name]

    def assign(self, name: str, value: Any, node: Optional[ASTNode] = None):
        env = self.resolve(name)
        if env is None:
            raise _error(ErrorKind.UNBOUND_IDENTIFIER, f"Cannot assign to undeclared variable '{name}'", node)
        if name in env.constants:
            raise _error(ErrorKind.CONST_ASSIGNMENT, f"Assignment to constant variable '{name}'", node)
        env.variables[name] = value

    def child(self) -> 'Environment':
        return Environment(self)


def _error(kind: ErrorKind, message: str, node: Optional[ASTNode] = None) -> InterpreterError:
    if node is None:
        return InterpreterError(kind, message)
    return InterpreterError(kind, message, node.line, node.column)


class Interpreter:
    """
    Tree-walking evaluator.

    Every console.log line is appended to `output` and, when `stream` is
    given, written to it as it is produced. `should_cancel` is polled before
    each loop iteration runs its body; a true result stops the run with
    ExecutionCancelled.
    """

    def __init__(self, stream: Optional[TextIO] = None,
                 should_cancel: Optional[Callable[[], bool]] = None,
                 env: Optional[Environment] = None):
        self.output: List[str] = []
        self.stream = stream
        self.should_cancel = should_cancel
        self.global_env = env if env is not None else Environment()
        # built-ins sit behind the outermost scope and cannot be reassigned
        self.builtins = make_globals(self.emit)
        self.current_env = self.global_env
        # value of the last top-level expression statement, for the REPL
        self.last_value = UNDEFINED

    def emit(self, line: str):
        self.output.append(line)
        if self.stream is not None:
            self.stream.write(line + "\n")
            self.stream.flush()

    def interpret(self, program: Program) -> List[str]:
        for statement in program.statements:
            self.last_value = UNDEFINED
            # break/continue cannot leave the top level; the parser rejects them
            self.execute(statement)
        return self.output

    # Statements

    def execute(self, node: ASTNode) -> Signal:
        logger.debug("line %d: %s", node.line, type(node).__name__)

        if isinstance(node, VarDecl):
            value = self.evaluate(node.value) if node.value is not None else UNDEFINED
            self.current_env.define(node.name, value, constant=node.kind == 'const', node=node)

        elif isinstance(node, Assignment):
            value = self.evaluate(node.value)
            if isinstance(node.target, Identifier):
                self.assign_name(node.target, value)
            else:
                self.assign_index(node.target, value)

        elif isinstance(node, ExprStmt):
            self.last_value = self.evaluate(node.expression)

        elif isinstance(node, BlockStmt):
            return self.execute_block(node.statements, self.current_env.child())

        elif isinstance(node, IfStmt):
            if is_truthy(self.evaluate(node.condition)):
                return self.execute_branch(node.then_branch)
            elif node.else_branch is not None:
                return self.execute_branch(node.else_branch)

        elif isinstance(node, WhileStmt):
            return self.execute_while(node)

        elif isinstance(node, SwitchStmt):
            return self.execute_switch(node)

        elif isinstance(node, BreakStmt):
            return Signal.BREAK

        elif isinstance(node, ContinueStmt):
            return Signal.CONTINUE

        else:
            raise TypeError(f"Unknown statement type: {type(node).__name__}")

        return Signal.NORMAL

    def execute_block(self, statements: List[ASTNode], env: Environment) -> Signal:
        previous = self.current_env
        self.current_env = env
        try:
            for stmt in statements:
                signal = self.execute(stmt)
                if signal is not Signal.NORMAL:
                    return signal
            return Signal.NORMAL
        finally:
            self.current_env = previous

    def execute_branch(self, node: ASTNode) -> Signal:
        # a branch always runs in its own scope, braces or not
        if isinstance(node, BlockStmt):
            return self.execute(node)
        return self.execute_block([node], self.current_env.child())

    def execute_while(self, node: WhileStmt) -> Signal:
        iterations = 0
        while True:
            if not is_truthy(self.evaluate(node.condition)):
                break
            if self.should_cancel is not None and self.should_cancel():
                raise ExecutionCancelled(f"execution cancelled after {iterations} loop iterations",
                                         node.line, node.column)
            iterations += 1
            signal = self.execute_branch(node.body)
            if signal is Signal.BREAK:
                break
        logger.debug("line %d: while loop finished after %d iterations", node.line, iterations)
        return Signal.NORMAL

    def execute_switch(self, node: SwitchStmt) -> Signal:
        discriminant = self.evaluate(node.discriminant)

        start = None
        for index, case in enumerate(node.cases):
            if case.test is not None and strict_equals(discriminant, self.evaluate(case.test)):
                start = index
                break
        if start is None:
            start = next((i for i, case in enumerate(node.cases) if case.test is None), None)
        if start is None:
            return Signal.NORMAL

        # fall through from the matched clause until a break; the clauses share one scope
        statements = [stmt for case in node.cases[start:] for stmt in case.body]
        signal = self.execute_block(statements, self.current_env.child())
        return Signal.NORMAL if signal is Signal.BREAK else signal

    def is_bound(self, name: str) -> bool:
        return self.current_env.resolve(name) is not None or name in self.builtins

    def lookup(self, node: Identifier) -> Any:
        env = self.current_env.resolve(node.name)
        if env is not None:
            return env.variables[node.name]
        if node.name in self.builtins:
            return self.builtins[node.name]
        raise _error(ErrorKind.UNBOUND_IDENTIFIER, f"'{node.name}' is not defined", node)

    def assign_name(self, target: Identifier, value: Any):
        if self.current_env.resolve(target.name) is None and target.name in self.builtins:
            raise _error(ErrorKind.CONST_ASSIGNMENT, f"Cannot reassign built-in '{target.name}'", target)
        self.current_env.assign(target.name, value, target)

    def assign_index(self, target: MemberExpr, value: Any):
        obj = self.evaluate(target.object)
        index = self.evaluate(target.property)
        if not isinstance(obj, list):
            raise _error(ErrorKind.TYPE_MISMATCH, f"Cannot assign into an index of {type_name(obj)}", target)
        position = self.array_position(index, target)
        if position < len(obj):
            obj[position] = value
        elif position == len(obj):
            obj.append(value)
        else:
            raise _error(ErrorKind.INDEX_OUT_OF_RANGE,
                         f"Index {position} is past the end of an array of length {len(obj)}", target)

    # Expressions

    def evaluate(self, node: ASTNode) -> Any:
        if isinstance(node, Literal):
            return node.value

        elif isinstance(node, Identifier):
            return self.lookup(node)

        elif isinstance(node, ArrayLiteral):
            return [self.evaluate(elem) for elem in node.elements]

        elif isinstance(node, LogicalExpr):
            left = self.evaluate(node.left)
            if node.operator == '&&':
                return self.evaluate(node.right) if is_truthy(left) else left
            return left if is_truthy(left) else self.evaluate(node.right)

        elif isinstance(node, BinaryExpr):
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            return self.binary_op(left, node.operator, right, node)

        elif isinstance(node, UnaryExpr):
            # typeof on an undeclared name is not an error
            if (node.operator == 'typeof' and isinstance(node.operand, Identifier)
                    and not self.is_bound(node.operand.name)):
                return "undefined"
            operand = self.evaluate(node.operand)
            return self.unary_op(node.operator, operand, node)

        elif isinstance(node, MemberExpr):
            return self.member(node)

        elif isinstance(node, CallExpr):
            return self.call(node)

        raise TypeError(f"Unknown expression type: {type(node).__name__}")

    def member(self, node: MemberExpr) -> Any:
        obj = self.evaluate(node.object)

        if not node.computed:
            name = node.property.name
            if isinstance(obj, BuiltinNamespace):
                if name not in obj.members:
                    raise _error(ErrorKind.UNBOUND_IDENTIFIER, f"'{obj.name}.{name}' is not defined", node.property)
                return obj.members[name]
            if name == 'length' and isinstance(obj, (list, str)):
                return float(len(obj))
            raise _error(ErrorKind.TYPE_MISMATCH, f"Cannot read property '{name}' of {type_name(obj)}", node)

        index = self.evaluate(node.property)
        if isinstance(obj, (list, str)):
            position = self.array_position(index, node)
            if position >= len(obj):
                raise _error(ErrorKind.INDEX_OUT_OF_RANGE,
                             f"Index {position} out of range for length {len(obj)}", node)
            return obj[position]
        raise _error(ErrorKind.TYPE_MISMATCH, f"Cannot index into {type_name(obj)}", node)

    def array_position(self, index: Any, node: ASTNode) -> int:
        if not is_number(index):
            raise _error(ErrorKind.TYPE_MISMATCH, f"Index must be a number, got {type_name(index)}", node)
        if not math.isfinite(index) or index != int(index) or index < 0:
            raise _error(ErrorKind.INDEX_OUT_OF_RANGE, f"Invalid index {to_string(index)}", node)
        return int(index)

    def call(self, node: CallExpr) -> Any:
        func = self.evaluate(node.callee)
        args = [self.evaluate(arg) for arg in node.arguments]

        if not isinstance(func, BuiltinFunction):
            raise _error(ErrorKind.NOT_CALLABLE, f"{type_name(func)} is not a function", node)

        try:
            return func(*args)
        except InterpreterError as e:
            # built-ins do not know where they were called from
            if e.line is None:
                e.line, e.column = node.line, node.column
            raise

    def binary_op(self, left: Any, op: str, right: Any, node: ASTNode) -> Any:
        if op == '+':
            if isinstance(left, str) or isinstance(right, str):
                return to_string(left) + to_string(right)
            if is_number(left) and is_number(right):
                return left + right
            raise self.mismatch(op, left, right, node)

        elif op in ('-', '*', '/', '%'):
            if not (is_number(left) and is_number(right)):
                raise self.mismatch(op, left, right, node)
            if op == '-':
                return left - right
            if op == '*':
                return left * right
            if right == 0:
                raise _error(ErrorKind.DIVISION_BY_ZERO, "Division by zero" if op == '/' else "Modulo by zero", node)
            if op == '/':
                return left / right
            # the result takes the sign of the dividend
            return math.fmod(left, right)

        elif op in ('<', '<=', '>', '>='):
            if not ((is_number(left) and is_number(right)) or
                    (isinstance(left, str) and isinstance(right, str))):
                raise self.mismatch(op, left, right, node)
            if op == '<':
                return left < right
            if op == '<=':
                return left <= right
            if op == '>':
                return left > right
            return left >= right

        elif op == '==':
            return loose_equals(left, right)

        elif op == '!=':
            return not loose_equals(left, right)

        elif op == '===':
            return strict_equals(left, right)

        elif op == '!==':
            return not strict_equals(left, right)

        raise TypeError(f"Unknown binary operator: {op}")

    def unary_op(self, op: str, operand: Any, node: ASTNode) -> Any:
        if op == '-':
            if not is_number(operand):
                raise _error(ErrorKind.TYPE_MISMATCH, f"Unary '-' needs a number, got {type_name(operand)}", node)
            return -operand
        elif op == '!':
            return not is_truthy(operand)
        elif op == 'typeof':
            return type_name(operand)
        raise TypeError(f"Unknown unary operator: {op}")

    def mismatch(self, op: str, left: Any, right: Any, node: ASTNode) -> InterpreterError:
        return _error(ErrorKind.TYPE_MISMATCH,
                      f"Operator '{op}' cannot be applied to {type_name(left)} and {type_name(right)}", node)


def run(program: Program, env: Optional[Environment] = None, **kwargs) -> List[str]:
    """Run a parsed program and return its output lines."""
    interpreter = Interpreter(env=env, **kwargs)
    return interpreter.interpret(program)


def run_source(source: str, **kwargs) -> List[str]:
    return run(parse(tokenize(source)), **kwargs)
