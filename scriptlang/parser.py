"""Recursive-descent parser for scriptlang.

Each grammar rule is one method. A method consumes exactly the tokens of
its production and leaves the lexer's lookahead on the first token past
it, so every decision is made from `Lexer.following` alone:

    Script    := Statement* EOF
    Statement := ConstDecl | VarDecl | Assign | FuncDecl | Return | If | CallStmt
    ConstDecl := 'const' IDENT '=' Expr
    VarDecl   := 'var' IDENT '=' Expr
    Assign    := 'set' IDENT ('.' IDENT)* '=' Expr
    FuncDecl  := 'func' IDENT '(' (IDENT (',' IDENT)*)? ')' '{' Statement* '}'
    Return    := 'return' Expr?
    If        := 'if' Expr 'then' Statement* ('else' Statement*)? 'end'
    CallStmt  := Call
    Call      := IDENT '(' (Expr (',' Expr)*)? ')'

Expressions, lowest precedence first: `and`/`or` (right-associative),
comparison (`=`, `<>`, `<`, `>`), additive, multiplicative, prefix unary
(`+`, `-`, `not`) and atoms. The parser stops at the first error; there
is no recovery.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List

from .ast import (
    Assign, BinaryOp, Block, Call, CallStmt, ConstDecl, Expr, FuncDecl,
    Identifier, IfStmt, Literal, ReturnStmt, Statement, UnaryOp, VarDecl,
)
from .errors import ParseError
from .lexer import Lexer, Token, TokenKind


BOOLEAN_OPS = {TokenKind.KWD_AND: 'and', TokenKind.KWD_OR: 'or'}
COMPARISON_OPS = {TokenKind.EQU: '=', TokenKind.NEQ: '<>', TokenKind.LT: '<', TokenKind.GT: '>'}
ADDITIVE_OPS = {TokenKind.ADD: '+', TokenKind.SUB: '-'}
MULTIPLICATIVE_OPS = {TokenKind.MUL: '*', TokenKind.DIV: '/'}
UNARY_OPS = {TokenKind.ADD: '+', TokenKind.SUB: '-', TokenKind.KWD_NOT: 'not'}

# Tokens that may begin an expression; used to decide whether `return` has a value.
EXPRESSION_START = {
    TokenKind.LPAREN, TokenKind.IDENTIFIER, TokenKind.NUMBER, TokenKind.STRING,
    TokenKind.ADD, TokenKind.SUB, TokenKind.KWD_NOT,
}


class Parser:
    def __init__(self, lexer: Lexer):
        self.lexer = lexer

    # Token helpers

    def peek(self) -> Token:
        return self.lexer.following

    def match(self, *kinds: TokenKind) -> bool:
        return self.lexer.following.kind in kinds

    def error(self, token: Token, message: str, expected: str = '') -> ParseError:
        return ParseError(message, token.line, token.column, token.display, expected)

    def consume(self, kind: TokenKind, context: str) -> Token:
        """Advance past the lookahead, which must be of the given kind."""
        token = self.lexer.advance()
        if token.kind is not kind:
            raise self.error(token, f"Expected {kind.value} to follow {context}.", kind.value)
        return token

    # Statements

    def parse_script(self) -> Block:
        statements: List[Statement] = []
        while not self.match(TokenKind.EOF):
            statements.append(self.parse_statement())
        return Block(tuple(statements))

    def parse_statement(self) -> Statement:
        token = self.peek()
        kind = token.kind
        if kind is TokenKind.KWD_CONST:
            return self.parse_const_decl()
        if kind is TokenKind.KWD_VAR:
            return self.parse_var_decl()
        if kind is TokenKind.KWD_SET:
            return self.parse_assign()
        if kind is TokenKind.KWD_FUNC:
            return self.parse_func_decl()
        if kind is TokenKind.KWD_RETURN:
            return self.parse_return_stmt()
        if kind is TokenKind.KWD_IF:
            return self.parse_if_stmt()
        if kind is TokenKind.IDENTIFIER:
            name = self.lexer.advance().text
            if not self.match(TokenKind.LPAREN):
                raise self.error(self.peek(), "Only function calls may be used as statements.", '(')
            return CallStmt(self.parse_call(name))
        if kind is TokenKind.KWD_FOR:
            raise self.error(token, "'for' loops are not supported.", 'statement')
        raise self.error(token, "Not expected in statement position.", 'statement')

    def parse_const_decl(self) -> ConstDecl:
        self.consume(TokenKind.KWD_CONST, 'statement start')
        name = self.consume(TokenKind.IDENTIFIER, "'const'").text
        return ConstDecl(name, self.parse_assignment_tail(name))

    def parse_var_decl(self) -> VarDecl:
        self.consume(TokenKind.KWD_VAR, 'statement start')
        name = self.consume(TokenKind.IDENTIFIER, "'var'").text
        return VarDecl(name, self.parse_assignment_tail(name))

    def parse_assign(self) -> Assign:
        self.consume(TokenKind.KWD_SET, 'statement start')
        name = self.consume(TokenKind.IDENTIFIER, "'set'").text
        target = self.parse_identifier_props(name)
        return Assign(target, self.parse_assignment_tail(target.path))

    def parse_assignment_tail(self, name: str) -> Expr:
        self.consume(TokenKind.EQU, f"'{name}'")
        return self.parse_expression()

    def parse_func_decl(self) -> FuncDecl:
        self.consume(TokenKind.KWD_FUNC, 'statement start')
        name = self.consume(TokenKind.IDENTIFIER, "'func'").text
        self.consume(TokenKind.LPAREN, 'function name')
        params: List[str] = []
        if not self.match(TokenKind.RPAREN):
            params.append(self.consume(TokenKind.IDENTIFIER, "'('").text)
            while self.match(TokenKind.COMMA):
                self.lexer.advance()
                params.append(self.consume(TokenKind.IDENTIFIER, "','").text)
        self.consume(TokenKind.RPAREN, 'parameter list')
        self.consume(TokenKind.LBRACE, 'function parameters')
        statements: List[Statement] = []
        while not self.match(TokenKind.RBRACE):
            if self.match(TokenKind.EOF):
                raise self.error(self.peek(), "Unterminated function body.", '}')
            statements.append(self.parse_statement())
        self.lexer.advance()  # closing brace
        return FuncDecl(name, tuple(params), Block(tuple(statements)))

    def parse_return_stmt(self) -> ReturnStmt:
        self.consume(TokenKind.KWD_RETURN, 'statement start')
        if self.peek().kind in EXPRESSION_START:
            return ReturnStmt(self.parse_expression())
        return ReturnStmt(None)

    def parse_if_stmt(self) -> IfStmt:
        self.consume(TokenKind.KWD_IF, 'statement start')
        condition = self.parse_expression()
        self.consume(TokenKind.KWD_THEN, "'if' condition")
        then_block = self.parse_branch(TokenKind.KWD_ELSE, TokenKind.KWD_END)
        else_block = None
        if self.match(TokenKind.KWD_ELSE):
            self.lexer.advance()
            else_block = self.parse_branch(TokenKind.KWD_END)
        self.consume(TokenKind.KWD_END, "'if' branch")
        return IfStmt(condition, then_block, else_block)

    def parse_branch(self, *terminators: TokenKind) -> Block:
        statements: List[Statement] = []
        while not self.match(*terminators):
            if self.match(TokenKind.EOF):
                raise self.error(self.peek(), "Unterminated 'if' statement.", 'end')
            statements.append(self.parse_statement())
        return Block(tuple(statements))

    # Expressions

    def parse_expression(self) -> Expr:
        return self.parse_boolean()

    def parse_boolean(self) -> Expr:
        left = self.parse_comparison()
        op = BOOLEAN_OPS.get(self.peek().kind)
        if op is None:
            return left
        self.lexer.advance()
        return BinaryOp(op, left, self.parse_boolean())

    def parse_comparison(self) -> Expr:
        node = self.parse_additive()
        while self.peek().kind in COMPARISON_OPS:
            op = COMPARISON_OPS[self.lexer.advance().kind]
            node = BinaryOp(op, node, self.parse_additive())
        return node

    def parse_additive(self) -> Expr:
        node = self.parse_multiplicative()
        while self.peek().kind in ADDITIVE_OPS:
            op = ADDITIVE_OPS[self.lexer.advance().kind]
            node = BinaryOp(op, node, self.parse_multiplicative())
        return node

    def parse_multiplicative(self) -> Expr:
        node = self.parse_unary()
        while self.peek().kind in MULTIPLICATIVE_OPS:
            op = MULTIPLICATIVE_OPS[self.lexer.advance().kind]
            node = BinaryOp(op, node, self.parse_unary())
        return node

    def parse_unary(self) -> Expr:
        op = UNARY_OPS.get(self.peek().kind)
        if op is None:
            return self.parse_atomic()
        self.lexer.advance()
        return UnaryOp(op, self.parse_unary())

    def parse_atomic(self) -> Expr:
        token = self.lexer.advance()
        kind = token.kind
        if kind is TokenKind.LPAREN:
            expr = self.parse_expression()
            self.consume(TokenKind.RPAREN, 'parenthesized expression')
            return expr
        if kind is TokenKind.IDENTIFIER:
            if self.match(TokenKind.LPAREN):
                return self.parse_call(token.text)
            return self.parse_identifier_props(token.text)
        if kind is TokenKind.NUMBER:
            return Literal(Decimal(token.text))
        if kind is TokenKind.STRING:
            return Literal(token.text)
        raise self.error(token, "Expected an expression.", 'expression')

    def parse_call(self, name: str) -> Call:
        self.consume(TokenKind.LPAREN, 'function name')
        args: List[Expr] = []
        if not self.match(TokenKind.RPAREN):
            args.append(self.parse_expression())
            while self.match(TokenKind.COMMA):
                self.lexer.advance()
                args.append(self.parse_expression())
        self.consume(TokenKind.RPAREN, 'function argument')
        return Call(name, tuple(args))

    def parse_identifier_props(self, name: str) -> Identifier:
        properties: List[str] = []
        while self.match(TokenKind.DOT):
            self.lexer.advance()
            properties.append(self.consume(TokenKind.IDENTIFIER, "'.'").text)
        return Identifier(name, tuple(properties))


def parse_program(source: str) -> Block:
    """Parse a complete script into its top-level Block."""
    return Parser(Lexer(source)).parse_script()


def parse_expression(source: str) -> Expr:
    """Parse source consisting of exactly one expression."""
    parser = Parser(Lexer(source))
    expr = parser.parse_expression()
    if not parser.match(TokenKind.EOF):
        token = parser.peek()
        raise parser.error(token, "Unexpected token after expression.", TokenKind.EOF.value)
    return expr
