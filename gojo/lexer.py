"""
Lexer for gojo
Converts source code into tokens

Lexer.scan() walks the source once and yields Token objects lazily;
tokenize() materializes them into a list ending with an EOF token.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, List, Optional

from gojo.errors import LexError

logger = logging.getLogger(__name__)


class TokenKind(Enum):
    NUMBER = auto()
    STRING = auto()
    IDENT = auto()
    KEYWORD = auto()
    OP = auto()
    PUNCT = auto()
    EOF = auto()


class TokenType(Enum):
    # Literals
    NUMBER = auto()
    STRING = auto()
    IDENTIFIER = auto()

    # Keywords
    VAR = auto()
    LET = auto()
    CONST = auto()
    IF = auto()
    ELSE = auto()
    WHILE = auto()
    SWITCH = auto()
    CASE = auto()
    DEFAULT = auto()
    BREAK = auto()
    CONTINUE = auto()
    TRUE = auto()
    FALSE = auto()
    NULL = auto()
    UNDEFINED = auto()
    TYPEOF = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    MULTIPLY = auto()
    DIVIDE = auto()
    MODULO = auto()
    ASSIGN = auto()
    EQ = auto()         # ==
    NE = auto()         # !=
    STRICT_EQ = auto()  # ===
    STRICT_NE = auto()  # !==
    LT = auto()
    LE = auto()
    GT = auto()
    GE = auto()
    AND = auto()        # &&
    OR = auto()         # ||
    NOT = auto()        # !

    # Delimiters
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    COMMA = auto()
    COLON = auto()
    SEMICOLON = auto()
    DOT = auto()

    EOF = auto()


KEYWORDS = {
    'var': TokenType.VAR,
    'let': TokenType.LET,
    'const': TokenType.CONST,
    'if': TokenType.IF,
    'else': TokenType.ELSE,
    'while': TokenType.WHILE,
    'switch': TokenType.SWITCH,
    'case': TokenType.CASE,
    'default': TokenType.DEFAULT,
    'break': TokenType.BREAK,
    'continue': TokenType.CONTINUE,
    'true': TokenType.TRUE,
    'false': TokenType.FALSE,
    'null': TokenType.NULL,
    'undefined': TokenType.UNDEFINED,
    'typeof': TokenType.TYPEOF,
}

# Longest spellings first so that '===' wins over '==' and '='.
OPERATORS = [
    ('===', TokenType.STRICT_EQ),
    ('!==', TokenType.STRICT_NE),
    ('==', TokenType.EQ),
    ('!=', TokenType.NE),
    ('<=', TokenType.LE),
    ('>=', TokenType.GE),
    ('&&', TokenType.AND),
    ('||', TokenType.OR),
    ('+', TokenType.PLUS),
    ('-', TokenType.MINUS),
    ('*', TokenType.MULTIPLY),
    ('/', TokenType.DIVIDE),
    ('%', TokenType.MODULO),
    ('=', TokenType.ASSIGN),
    ('<', TokenType.LT),
    ('>', TokenType.GT),
    ('!', TokenType.NOT),
]

PUNCTUATION = {
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '{': TokenType.LBRACE,
    '}': TokenType.RBRACE,
    '[': TokenType.LBRACKET,
    ']': TokenType.RBRACKET,
    ',': TokenType.COMMA,
    ':': TokenType.COLON,
    ';': TokenType.SEMICOLON,
    '.': TokenType.DOT,
}

ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '0': '\0',
    '\\': '\\',
    '"': '"',
    "'": "'",
}

DIGITS = "0123456789"

_OPERATOR_TYPES = {tt for _, tt in OPERATORS}
_KEYWORD_TYPES = set(KEYWORDS.values())


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: object
    lexeme: str
    line: int
    column: int

    @property
    def kind(self) -> TokenKind:
        if self.type == TokenType.NUMBER:
            return TokenKind.NUMBER
        if self.type == TokenType.STRING:
            return TokenKind.STRING
        if self.type == TokenType.IDENTIFIER:
            return TokenKind.IDENT
        if self.type in _KEYWORD_TYPES:
            return TokenKind.KEYWORD
        if self.type in _OPERATOR_TYPES:
            return TokenKind.OP
        if self.type == TokenType.EOF:
            return TokenKind.EOF
        return TokenKind.PUNCT

    def describe(self) -> str:
        if self.type == TokenType.EOF:
            return "end of input"
        return repr(self.lexeme)


class Lexer:
    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    def error(self, msg: str, line: Optional[int] = None, column: Optional[int] = None):
        raise LexError(msg, line or self.line, column or self.column)

    def peek(self, offset: int = 0) -> Optional[str]:
        pos = self.pos + offset
        if pos < len(self.source):
            return self.source[pos]
        return None

    def advance(self) -> Optional[str]:
        if self.pos < len(self.source):
            char = self.source[self.pos]
            self.pos += 1
            if char == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            return char
        return None

    def skip_whitespace_and_comments(self):
        while self.pos < len(self.source):
            char = self.peek()
            if char in ' \t\r\n':
                self.advance()
            elif char == '/' and self.peek(1) == '/':
                while self.peek() is not None and self.peek() != '\n':
                    self.advance()
            elif char == '/' and self.peek(1) == '*':
                start_line, start_column = self.line, self.column
                self.advance()
                self.advance()
                while not (self.peek() == '*' and self.peek(1) == '/'):
                    if self.peek() is None:
                        self.error("Unterminated block comment", start_line, start_column)
                    self.advance()
                self.advance()
                self.advance()
            else:
                break

    def read_number(self) -> Token:
        start_line = self.line
        start_column = self.column
        start = self.pos

        while self.peek() is not None and self.peek() in DIGITS:
            self.advance()
        # A dot only belongs to the number when a digit follows it.
        if self.peek() == '.' and self.peek(1) is not None and self.peek(1) in DIGITS:
            self.advance()
            while self.peek() is not None and self.peek() in DIGITS:
                self.advance()

        text = self.source[start:self.pos]
        return Token(TokenType.NUMBER, float(text), text, start_line, start_column)

    def read_string(self) -> Token:
        start_line = self.line
        start_column = self.column
        start = self.pos
        quote = self.advance()
        string_val = ''

        while True:
            char = self.peek()
            if char is None or char == '\n':
                self.error("Unterminated string", start_line, start_column)
            if char == quote:
                self.advance()
                break
            if char == '\\':
                self.advance()
                next_char = self.advance()
                if next_char is None:
                    self.error("Unterminated string", start_line, start_column)
                string_val += ESCAPES.get(next_char, next_char)
            else:
                string_val += self.advance()

        return Token(TokenType.STRING, string_val, self.source[start:self.pos], start_line, start_column)

    def read_identifier(self) -> Token:
        start_line = self.line
        start_column = self.column
        start = self.pos

        while self.peek() is not None and (self.peek().isalnum() or self.peek() in '_$'):
            self.advance()

        ident = self.source[start:self.pos]
        token_type = KEYWORDS.get(ident, TokenType.IDENTIFIER)
        value = ident if token_type == TokenType.IDENTIFIER else None
        return Token(token_type, value, ident, start_line, start_column)

    def read_symbol(self) -> Token:
        start_line = self.line
        start_column = self.column

        for spelling, token_type in OPERATORS:
            if self.source.startswith(spelling, self.pos):
                for _ in spelling:
                    self.advance()
                return Token(token_type, None, spelling, start_line, start_column)

        char = self.peek()
        if char in PUNCTUATION:
            self.advance()
            return Token(PUNCTUATION[char], None, char, start_line, start_column)

        self.error(f"Unexpected character: {char!r}")

    def scan(self) -> Iterator[Token]:
        while True:
            self.skip_whitespace_and_comments()
            if self.pos >= len(self.source):
                break

            char = self.peek()
            if char in DIGITS:
                yield self.read_number()
            elif char in '"\'':
                yield self.read_string()
            elif char.isalpha() or char in '_$':
                yield self.read_identifier()
            else:
                yield self.read_symbol()

        yield Token(TokenType.EOF, None, '', self.line, self.column)

    def tokenize(self) -> List[Token]:
        tokens = list(self.scan())
        logger.debug("lexed %d tokens", len(tokens))
        return tokens


def tokenize(source: str) -> List[Token]:
    return Lexer(source).tokenize()
