"""
AST Node definitions for gojo

Every node gets `line`/`column` attached by the parser (see
Parser.attach_meta); they are plain attributes, not dataclass fields.
"""

from dataclasses import dataclass, fields, is_dataclass
from typing import Any, List, Optional


@dataclass
class ASTNode:
    line = 0
    column = 0


@dataclass
class Program(ASTNode):
    statements: List[ASTNode]


# Expressions

@dataclass
class Literal(ASTNode):
    value: Any  # float, str, bool, UNDEFINED or NULL


@dataclass
class Identifier(ASTNode):
    name: str


@dataclass
class ArrayLiteral(ASTNode):
    elements: List[ASTNode]


@dataclass
class BinaryExpr(ASTNode):
    left: ASTNode
    operator: str
    right: ASTNode


@dataclass
class LogicalExpr(ASTNode):
    left: ASTNode
    operator: str  # '&&' or '||'
    right: ASTNode


@dataclass
class UnaryExpr(ASTNode):
    operator: str  # '-', '!' or 'typeof'
    operand: ASTNode


@dataclass
class MemberExpr(ASTNode):
    # computed: object[property], otherwise object.property with
    # property an Identifier naming the member
    object: ASTNode
    property: ASTNode
    computed: bool


@dataclass
class CallExpr(ASTNode):
    callee: ASTNode
    arguments: List[ASTNode]


# Statements

@dataclass
class VarDecl(ASTNode):
    kind: str  # 'var', 'let' or 'const'
    name: str
    value: Optional[ASTNode]


@dataclass
class Assignment(ASTNode):
    target: ASTNode  # Identifier or computed MemberExpr
    value: ASTNode


@dataclass
class ExprStmt(ASTNode):
    expression: ASTNode


@dataclass
class BlockStmt(ASTNode):
    statements: List[ASTNode]


@dataclass
class IfStmt(ASTNode):
    condition: ASTNode
    then_branch: ASTNode
    else_branch: Optional[ASTNode]  # BlockStmt, nested IfStmt for `else if`, or None


@dataclass
class WhileStmt(ASTNode):
    condition: ASTNode
    body: ASTNode


@dataclass
class SwitchCase(ASTNode):
    test: Optional[ASTNode]  # None for `default:`
    body: List[ASTNode]


@dataclass
class SwitchStmt(ASTNode):
    discriminant: ASTNode
    cases: List[SwitchCase]


@dataclass
class BreakStmt(ASTNode):
    pass


@dataclass
class ContinueStmt(ASTNode):
    pass


def ast_to_dict(node):
    """Plain-data view of a tree, for --dump-ast."""
    if isinstance(node, list):
        return [ast_to_dict(item) for item in node]
    if not is_dataclass(node):
        return node if isinstance(node, (str, bool, int, float)) or node is None else str(node)

    d = {"type": node.__class__.__name__}
    for f in fields(node):
        d[f.name] = ast_to_dict(getattr(node, f.name))
    if node.line:
        d["line"] = node.line
        d["column"] = node.column
    return d
