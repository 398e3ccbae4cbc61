"""
Parser for gojo
Converts tokens into an Abstract Syntax Tree (AST)

Recursive descent, top down. Expressions are parsed by one method per
precedence level, loosest first:

    ||  ->  &&  ->  == != === !==  ->  < > <= >=  ->  + -  ->  * / %
        ->  unary - ! typeof  ->  postfix call/member/index  ->  primary
"""

import logging
from typing import List, Optional

from gojo.ast_nodes import (
    ArrayLiteral, Assignment, ASTNode, BinaryExpr, BlockStmt, BreakStmt, CallExpr,
    ContinueStmt, ExprStmt, Identifier, IfStmt, Literal, LogicalExpr, MemberExpr,
    Program, SwitchCase, SwitchStmt, UnaryExpr, VarDecl, WhileStmt,
)
from gojo.errors import ParseError
from gojo.lexer import Token, TokenType
from gojo.values import NULL, UNDEFINED

logger = logging.getLogger(__name__)

EQUALITY_OPS = {
    TokenType.EQ: '==',
    TokenType.NE: '!=',
    TokenType.STRICT_EQ: '===',
    TokenType.STRICT_NE: '!==',
}

RELATIONAL_OPS = {
    TokenType.LT: '<',
    TokenType.LE: '<=',
    TokenType.GT: '>',
    TokenType.GE: '>=',
}

ADDITIVE_OPS = {
    TokenType.PLUS: '+',
    TokenType.MINUS: '-',
}

MULTIPLICATIVE_OPS = {
    TokenType.MULTIPLY: '*',
    TokenType.DIVIDE: '/',
    TokenType.MODULO: '%',
}

UNARY_OPS = {
    TokenType.MINUS: '-',
    TokenType.NOT: '!',
    TokenType.TYPEOF: 'typeof',
}

DECLARATION_KEYWORDS = {
    TokenType.VAR: 'var',
    TokenType.LET: 'let',
    TokenType.CONST: 'const',
}


class Parser:
    def __init__(self, tokens: List[Token]):
        if not tokens or tokens[-1].type != TokenType.EOF:
            raise ValueError("token stream must end with an EOF token")
        self.tokens = tokens
        self.pos = 0
        # how many loops / switches enclose the statement being parsed
        self.loop_depth = 0
        self.switch_depth = 0

    def error(self, expected: str, token: Optional[Token] = None):
        token = token or self.current_token()
        raise ParseError(expected, token.describe(), token.line, token.column)

    def current_token(self) -> Token:
        return self.tokens[self.pos]

    def previous_token(self) -> Token:
        return self.tokens[self.pos - 1] if self.pos > 0 else self.tokens[0]

    def check(self, token_type: TokenType) -> bool:
        return self.current_token().type == token_type

    def advance(self) -> Token:
        token = self.current_token()
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return token

    def expect(self, token_type: TokenType, expected: str) -> Token:
        if not self.check(token_type):
            self.error(expected)
        return self.advance()

    def attach_meta(self, node: ASTNode, token: Token) -> ASTNode:
        node.line = token.line
        node.column = token.column
        return node

    def parse(self) -> Program:
        statements = []
        while not self.check(TokenType.EOF):
            statements.append(self.parse_statement())
        logger.debug("parsed %d top-level statements", len(statements))
        return Program(statements)

    def parse_statement(self) -> ASTNode:
        token = self.current_token()

        if token.type in DECLARATION_KEYWORDS:
            stmt = self.parse_var_declaration()
        elif token.type == TokenType.LBRACE:
            return self.parse_block()
        elif token.type == TokenType.IF:
            return self.parse_if_statement()
        elif token.type == TokenType.WHILE:
            return self.parse_while_statement()
        elif token.type == TokenType.SWITCH:
            return self.parse_switch_statement()
        elif token.type == TokenType.BREAK:
            self.advance()
            if self.loop_depth == 0 and self.switch_depth == 0:
                self.error("'break' inside a loop or switch", token)
            stmt = self.attach_meta(BreakStmt(), token)
        elif token.type == TokenType.CONTINUE:
            self.advance()
            if self.loop_depth == 0:
                self.error("'continue' inside a loop", token)
            stmt = self.attach_meta(ContinueStmt(), token)
        elif token.type == TokenType.SEMICOLON:
            # an empty statement
            self.advance()
            return self.attach_meta(BlockStmt([]), token)
        else:
            stmt = self.parse_expression_statement()

        self.end_statement()
        return stmt

    def end_statement(self):
        """
        A simple statement ends with ';', or without one when the next token
        closes the block, ends the input, or starts on a later line.
        """
        token = self.current_token()
        if token.type == TokenType.SEMICOLON:
            self.advance()
        elif token.type in (TokenType.RBRACE, TokenType.EOF):
            pass
        elif token.line > self.previous_token().line:
            pass
        else:
            self.error("';'")

    def parse_var_declaration(self) -> VarDecl:
        """
        var name = expr
        let name
        const name = expr
        """
        keyword = self.advance()
        kind = DECLARATION_KEYWORDS[keyword.type]
        name_token = self.expect(TokenType.IDENTIFIER, "identifier")

        value = None
        if self.check(TokenType.ASSIGN):
            self.advance()
            value = self.parse_expression()
        elif kind == 'const':
            self.error("'=' after const name")

        return self.attach_meta(VarDecl(kind, name_token.value, value), keyword)

    def parse_expression_statement(self) -> ASTNode:
        start = self.current_token()
        expr = self.parse_expression()

        if self.check(TokenType.ASSIGN):
            assign_token = self.advance()
            if not (isinstance(expr, Identifier) or (isinstance(expr, MemberExpr) and expr.computed)):
                self.error("identifier or index expression before '='", assign_token)
            value = self.parse_expression()
            return self.attach_meta(Assignment(expr, value), start)

        return self.attach_meta(ExprStmt(expr), start)

    def parse_block(self) -> BlockStmt:
        """
        { stmt* }
        """
        open_brace = self.expect(TokenType.LBRACE, "'{'")
        statements = []
        while not self.check(TokenType.RBRACE):
            if self.check(TokenType.EOF):
                self.error("'}'")
            statements.append(self.parse_statement())
        self.expect(TokenType.RBRACE, "'}'")
        return self.attach_meta(BlockStmt(statements), open_brace)

    def parse_condition(self) -> ASTNode:
        self.expect(TokenType.LPAREN, "'('")
        condition = self.parse_expression()
        self.expect(TokenType.RPAREN, "')'")
        return condition

    def parse_if_statement(self) -> IfStmt:
        '''
        if (..) {..} else if (..) {..} else {..}

        `else if` is an IfStmt sitting in the else branch.
        '''
        if_token = self.expect(TokenType.IF, "'if'")
        condition = self.parse_condition()
        then_branch = self.parse_statement()

        else_branch = None
        if self.check(TokenType.ELSE):
            self.advance()
            else_branch = self.parse_statement()

        return self.attach_meta(IfStmt(condition, then_branch, else_branch), if_token)

    def parse_while_statement(self) -> WhileStmt:
        """
        while (...) {...}
        """
        while_token = self.expect(TokenType.WHILE, "'while'")
        condition = self.parse_condition()

        self.loop_depth += 1
        try:
            body = self.parse_statement()
        finally:
            self.loop_depth -= 1

        return self.attach_meta(WhileStmt(condition, body), while_token)

    def parse_switch_statement(self) -> SwitchStmt:
        """
        switch (expr) {
            case expr: stmt*
            default: stmt*
        }
        """
        switch_token = self.expect(TokenType.SWITCH, "'switch'")
        discriminant = self.parse_condition()
        self.expect(TokenType.LBRACE, "'{'")

        cases = []
        seen_default = False
        self.switch_depth += 1
        try:
            while not self.check(TokenType.RBRACE):
                case_token = self.current_token()
                if case_token.type == TokenType.CASE:
                    self.advance()
                    test = self.parse_expression()
                elif case_token.type == TokenType.DEFAULT:
                    if seen_default:
                        self.error("a single 'default' clause", case_token)
                    seen_default = True
                    self.advance()
                    test = None
                else:
                    self.error("'case', 'default' or '}'")
                self.expect(TokenType.COLON, "':'")

                body = []
                while self.current_token().type not in (TokenType.CASE, TokenType.DEFAULT,
                                                        TokenType.RBRACE, TokenType.EOF):
                    body.append(self.parse_statement())
                cases.append(self.attach_meta(SwitchCase(test, body), case_token))
        finally:
            self.switch_depth -= 1

        self.expect(TokenType.RBRACE, "'}'")
        return self.attach_meta(SwitchStmt(discriminant, cases), switch_token)

    def parse_expression(self) -> ASTNode:
        return self.parse_logical_or()

    def parse_logical_or(self) -> ASTNode:
        left = self.parse_logical_and()

        while self.check(TokenType.OR):
            op_token = self.advance()
            right = self.parse_logical_and()
            left = self.attach_meta(LogicalExpr(left, '||', right), op_token)

        return left

    def parse_logical_and(self) -> ASTNode:
        left = self.parse_equality()

        while self.check(TokenType.AND):
            op_token = self.advance()
            right = self.parse_equality()
            left = self.attach_meta(LogicalExpr(left, '&&', right), op_token)

        return left

    def parse_binary_level(self, operators: dict, parse_operand) -> ASTNode:
        left = parse_operand()

        while self.current_token().type in operators:
            op_token = self.advance()
            right = parse_operand()
            left = self.attach_meta(BinaryExpr(left, operators[op_token.type], right), op_token)

        return left

    def parse_equality(self) -> ASTNode:
        return self.parse_binary_level(EQUALITY_OPS, self.parse_relational)

    def parse_relational(self) -> ASTNode:
        return self.parse_binary_level(RELATIONAL_OPS, self.parse_additive)

    def parse_additive(self) -> ASTNode:
        return self.parse_binary_level(ADDITIVE_OPS, self.parse_multiplicative)

    def parse_multiplicative(self) -> ASTNode:
        return self.parse_binary_level(MULTIPLICATIVE_OPS, self.parse_unary)

    def parse_unary(self) -> ASTNode:
        token = self.current_token()
        if token.type in UNARY_OPS:
            self.advance()
            operand = self.parse_unary()
            return self.attach_meta(UnaryExpr(UNARY_OPS[token.type], operand), token)

        return self.parse_postfix_expression()

    def parse_postfix_expression(self) -> ASTNode:
        expr = self.parse_primary()

        while True:
            token = self.current_token()
            if token.type == TokenType.DOT:
                self.advance()
                member_token = self.expect(TokenType.IDENTIFIER, "property name after '.'")
                member = self.attach_meta(Identifier(member_token.value), member_token)
                expr = self.attach_meta(MemberExpr(expr, member, False), token)
            elif token.type == TokenType.LBRACKET:
                self.advance()
                index = self.parse_expression()
                self.expect(TokenType.RBRACKET, "']'")
                expr = self.attach_meta(MemberExpr(expr, index, True), token)
            elif token.type == TokenType.LPAREN:
                self.advance()
                arguments = self.parse_expression_list(TokenType.RPAREN, "')'")
                expr = self.attach_meta(CallExpr(expr, arguments), token)
            else:
                break

        return expr

    def parse_expression_list(self, closing: TokenType, closing_text: str) -> List[ASTNode]:
        """
        e, e, ...   up to `closing`; a trailing comma is allowed
        """
        items = []
        while not self.check(closing):
            items.append(self.parse_expression())
            if self.check(TokenType.COMMA):
                self.advance()
            elif not self.check(closing):
                self.error(f"',' or {closing_text}")
        self.expect(closing, closing_text)
        return items

    def parse_primary(self) -> ASTNode:
        token = self.current_token()

        if token.type in (TokenType.NUMBER, TokenType.STRING):
            self.advance()
            return self.attach_meta(Literal(token.value), token)

        elif token.type == TokenType.TRUE:
            self.advance()
            return self.attach_meta(Literal(True), token)

        elif token.type == TokenType.FALSE:
            self.advance()
            return self.attach_meta(Literal(False), token)

        elif token.type == TokenType.NULL:
            self.advance()
            return self.attach_meta(Literal(NULL), token)

        elif token.type == TokenType.UNDEFINED:
            self.advance()
            return self.attach_meta(Literal(UNDEFINED), token)

        elif token.type == TokenType.IDENTIFIER:
            self.advance()
            return self.attach_meta(Identifier(token.value), token)

        elif token.type == TokenType.LBRACKET:
            self.advance()
            elements = self.parse_expression_list(TokenType.RBRACKET, "']'")
            return self.attach_meta(ArrayLiteral(elements), token)

        elif token.type == TokenType.LPAREN:
            self.advance()
            expr = self.parse_expression()
            self.expect(TokenType.RPAREN, "')'")
            return expr

        self.error("expression")


def parse(tokens: List[Token]) -> Program:
    return Parser(tokens).parse()
