"""
INCR Programming Language Parser
Scanner built on a pyparsing token grammar, plus a one-token-lookahead
recursive descent parser producing an immutable AST
"""

from typing import Iterator, List, Optional, Tuple, Union
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
import re

# Import pyparsing with error handling
try:
    from pyparsing import (
        Word, alphas, alphanums, nums, one_of, Regex, ParserElement,
        lineno, col
    )
except ImportError:
    raise ImportError("pyparsing library not found. Install with: pip install pyparsing")

from error_handling import IncrSyntaxError
from stdlib import digits_to_int, int_to_digits


# ============================================================================
# TOKENS
# ============================================================================

class TokenType(Enum):
    INC = "inc"
    PRINT = "print"
    ASSIGN = "'='"
    SEMICOLON = "';'"
    LPAREN = "'('"
    RPAREN = "')'"
    NUMBER = "number"
    IDENTIFIER = "identifier"
    END_OF_FILE = "end of input"
    UNKNOWN = "unknown character"


@dataclass(frozen=True)
class Token:
    """INCR token with source position"""
    type: TokenType
    lexeme: str
    value: Union[int, str, None]
    line: int
    column: int = 1

    def __str__(self) -> str:
        if isinstance(self.value, int):
            return f"{self.type.name}({int_to_digits(self.value)})"
        if self.value is not None:
            return f"{self.type.name}({self.value!r})"
        return self.type.name


KEYWORDS = MappingProxyType({
    "inc": TokenType.INC,
    "print": TokenType.PRINT,
})

PUNCTUATION = MappingProxyType({
    "=": TokenType.ASSIGN,
    ";": TokenType.SEMICOLON,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
})


def _build_token_grammar() -> ParserElement:
    """Build the scanner grammar; every non-blank character starts a token"""
    identifier = Word(alphas + "_", alphanums + "_").set_parse_action(
        lambda t: (KEYWORDS.get(t[0], TokenType.IDENTIFIER), t[0])
    )
    number = Word(nums).set_parse_action(lambda t: (TokenType.NUMBER, t[0]))
    punctuation = one_of(list(PUNCTUATION)).set_parse_action(
        lambda t: (PUNCTUATION[t[0]], t[0])
    )
    unknown = Regex(r".", flags=re.DOTALL).set_parse_action(
        lambda t: (TokenType.UNKNOWN, t[0])
    )

    grammar = identifier | number | punctuation | unknown
    # Whitespace is exactly space, tab, CR and LF; keep tabs so offsets
    # stay aligned with the caller's text.
    grammar.set_whitespace_chars(" \t\r\n")
    grammar.parse_with_tabs()
    return grammar


TOKEN_GRAMMAR = _build_token_grammar()


class Lexer:
    """Lazy INCR scanner: hands out one token per next_token() call"""

    def __init__(self, source: str):
        self.source = source
        self._matches = TOKEN_GRAMMAR.scan_string(source)
        self._eof: Optional[Token] = None

    def next_token(self) -> Token:
        """Return the next token; END_OF_FILE repeats once input is exhausted"""
        if self._eof is not None:
            return self._eof

        match = next(self._matches, None)
        if match is None:
            end = len(self.source)
            self._eof = Token(TokenType.END_OF_FILE, "", None,
                              lineno(end, self.source), col(end, self.source))
            return self._eof

        tokens, start, _ = match
        token_type, lexeme = tokens[0]
        if token_type is TokenType.NUMBER:
            value = digits_to_int(lexeme)
        elif token_type in (TokenType.IDENTIFIER, TokenType.UNKNOWN):
            value = lexeme
        else:
            value = None
        return Token(token_type, lexeme, value,
                     lineno(start, self.source), col(start, self.source))

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            yield token
            if token.type is TokenType.END_OF_FILE:
                return


def tokenize(source: str) -> List[Token]:
    """Tokenize INCR source code, END_OF_FILE included"""
    return list(Lexer(source))


# ============================================================================
# AST NODES
# ============================================================================
# Source lines are diagnostics only and do not take part in equality.

@dataclass(frozen=True)
class NumberLit:
    value: int
    line: int = field(default=0, compare=False)


@dataclass(frozen=True)
class VarRef:
    name: str
    line: int = field(default=0, compare=False)


@dataclass(frozen=True)
class IncCall:
    argument: 'Expr'
    line: int = field(default=0, compare=False)


Expr = Union[NumberLit, VarRef, IncCall]


@dataclass(frozen=True)
class VarDecl:
    name: str
    initializer: NumberLit
    line: int = field(default=0, compare=False)


@dataclass(frozen=True)
class PrintStmt:
    expression: Expr
    line: int = field(default=0, compare=False)


Stmt = Union[VarDecl, PrintStmt]


@dataclass(frozen=True)
class Program:
    statements: Tuple[Stmt, ...] = ()

    def __len__(self) -> int:
        return len(self.statements)

    def __iter__(self) -> Iterator[Stmt]:
        return iter(self.statements)


# ============================================================================
# PARSER
# ============================================================================

def describe_token(token: Token) -> str:
    """Text shown for the token a syntax error tripped over"""
    if token.type is TokenType.END_OF_FILE:
        return "end of input"
    return f"'{token.lexeme}'"


class Parser:
    """Recursive descent parser with one token of lookahead.

    Grammar:
        Program    := Statement* EOF
        Statement  := VarDecl | PrintStmt
        VarDecl    := IDENTIFIER '=' NUMBER ';'
        PrintStmt  := 'print' '(' Expr ')' ';'
        Expr       := NUMBER | IDENTIFIER | IncCall
        IncCall    := 'inc' '(' Expr ')'

    Parsing stops at the first error.
    """

    def __init__(self, lexer: Lexer, debug: bool = False):
        self.lexer = lexer
        self.debug = debug
        self.current = lexer.next_token()

    def _advance(self) -> None:
        self.current = self.lexer.next_token()

    def _check(self, token_type: TokenType) -> bool:
        return self.current.type is token_type

    def _error(self, message: str) -> IncrSyntaxError:
        return IncrSyntaxError(
            f"{message} (found {describe_token(self.current)})",
            self.current.line, self.current.column
        )

    def _consume(self, expected: TokenType, message: str) -> Token:
        if self._check(expected):
            token = self.current
            self._advance()
            return token
        raise self._error(message)

    def parse(self) -> Program:
        """Parse a whole program"""
        statements = []
        while not self._check(TokenType.END_OF_FILE):
            statement = self.parse_statement()
            if self.debug:
                print(f"Parsed {type(statement).__name__} at line {statement.line}")
            statements.append(statement)
        return Program(tuple(statements))

    def parse_statement(self) -> Stmt:
        if self._check(TokenType.IDENTIFIER):
            return self._parse_var_decl()
        if self._check(TokenType.PRINT):
            return self._parse_print_stmt()
        raise self._error("Expected statement")

    def _parse_var_decl(self) -> VarDecl:
        name = self._consume(TokenType.IDENTIFIER, "Expected variable name")
        self._consume(TokenType.ASSIGN, "Expected '='")
        # Only a bare literal may initialize a variable
        value = self._consume(TokenType.NUMBER, "Expected number literal")
        self._consume(TokenType.SEMICOLON, "Expected ';'")
        return VarDecl(name.value, NumberLit(value.value, value.line), name.line)

    def _parse_print_stmt(self) -> PrintStmt:
        keyword = self._consume(TokenType.PRINT, "Expected 'print'")
        self._consume(TokenType.LPAREN, "Expected '('")
        expression = self.parse_expr()
        self._consume(TokenType.RPAREN, "Expected ')'")
        self._consume(TokenType.SEMICOLON, "Expected ';'")
        return PrintStmt(expression, keyword.line)

    def parse_expr(self) -> Expr:
        # IncCall := 'inc' '(' Expr ')' is unrolled: collect the chain of
        # 'inc(' prefixes, parse the innermost operand, then close each one.
        inc_lines = []
        while self._check(TokenType.INC):
            keyword = self._consume(TokenType.INC, "Expected 'inc'")
            self._consume(TokenType.LPAREN, "Expected '('")
            inc_lines.append(keyword.line)

        expression = self._parse_operand()
        for line in reversed(inc_lines):
            self._consume(TokenType.RPAREN, "Expected ')'")
            expression = IncCall(expression, line)
        return expression

    def _parse_operand(self) -> Expr:
        if self._check(TokenType.NUMBER):
            token = self._consume(TokenType.NUMBER, "Expected number literal")
            return NumberLit(token.value, token.line)
        if self._check(TokenType.IDENTIFIER):
            token = self._consume(TokenType.IDENTIFIER, "Expected identifier")
            return VarRef(token.value, token.line)
        raise self._error("Expected expression")

    def parse_expression(self) -> Expr:
        """Parse a lone expression that must span the whole input"""
        expression = self.parse_expr()
        self._consume(TokenType.END_OF_FILE, "Expected end of input")
        return expression


class IncrParser:
    """Main INCR parser combining lexer and grammar"""

    def __init__(self, debug: bool = False):
        self.debug = debug

    def parse_file(self, filepath: str) -> Program:
        """Parse an INCR source file"""
        with open(filepath, 'r', encoding='utf-8') as f:
            content = f.read()
        return self.parse_string(content)

    def parse_string(self, text: str) -> Program:
        """Parse INCR source code from string"""
        return Parser(Lexer(text), self.debug).parse()

    def parse_expression(self, text: str) -> Expr:
        """Parse a single INCR expression"""
        return Parser(Lexer(text), self.debug).parse_expression()

    def tokenize(self, text: str) -> List[Token]:
        """Tokenize INCR source code"""
        return tokenize(text)


# Factory functions for creating parsers
def create_parser(debug: bool = False) -> IncrParser:
    """Create an INCR parser"""
    return IncrParser(debug=debug)


def create_debug_parser() -> IncrParser:
    """Create an INCR parser with debug enabled"""
    return IncrParser(debug=True)


# ============================================================================
# AST UTILITIES
# ============================================================================

def pretty_print_ast(node: Union[Program, Stmt, Expr], indent: int = 0) -> str:
    """Pretty print an AST node for debugging"""
    pad = "  " * indent
    if isinstance(node, Program):
        result = f"{pad}Program\n"
        for statement in node.statements:
            result += pretty_print_ast(statement, indent + 1)
        return result
    if isinstance(node, VarDecl):
        return f"{pad}VarDecl({node.name!r})\n" + pretty_print_ast(node.initializer, indent + 1)
    if isinstance(node, PrintStmt):
        return f"{pad}PrintStmt\n" + pretty_print_ast(node.expression, indent + 1)
    if isinstance(node, IncCall):
        result = ""
        while isinstance(node, IncCall):
            result += f"{'  ' * indent}IncCall\n"
            node = node.argument
            indent += 1
        return result + pretty_print_ast(node, indent)
    if isinstance(node, VarRef):
        return f"{pad}VarRef({node.name!r})\n"
    if isinstance(node, NumberLit):
        return f"{pad}NumberLit({int_to_digits(node.value)})\n"
    raise TypeError(f"Unknown AST node: {type(node).__name__}")


def format_token(token: Token) -> str:
    """One-line token dump used by --tokens"""
    return f"{token.line:4d}:{token.column:<4d} {token}"
