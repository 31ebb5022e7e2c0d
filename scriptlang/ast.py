"""Abstract Syntax Tree (AST) definitions for scriptlang.

The AST classes defined in this module represent the syntactic structure
of parsed scripts. Nodes are frozen once the parser builds them; the
interpreter dispatches on the node class and the printer renders every
node back to source-like text. The node set is closed: statements are
the `Statement` subclasses and expressions the `Expr` subclasses below.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass(frozen=True)
class Statement(Node):
    pass


@dataclass(frozen=True)
class Expr(Node):
    pass


# Expressions

@dataclass(frozen=True)
class Literal(Expr):
    value: Any  # Decimal, str or bool


@dataclass(frozen=True)
class Identifier(Expr):
    name: str
    properties: Tuple[str, ...] = ()

    @property
    def path(self) -> str:
        return '.'.join((self.name,) + self.properties)


@dataclass(frozen=True)
class Call(Expr):
    name: str
    args: Tuple[Expr, ...] = ()


@dataclass(frozen=True)
class UnaryOp(Expr):
    op: str  # '+', '-', 'not'
    operand: Expr


@dataclass(frozen=True)
class BinaryOp(Expr):
    op: str  # 'and', 'or', '=', '<>', '<', '>', '+', '-', '*', '/'
    left: Expr
    right: Expr


# Statements

@dataclass(frozen=True)
class Block(Statement):
    statements: Tuple[Statement, ...] = ()


@dataclass(frozen=True)
class ConstDecl(Statement):
    name: str
    expr: Expr


@dataclass(frozen=True)
class VarDecl(Statement):
    name: str
    expr: Expr


@dataclass(frozen=True)
class Assign(Statement):
    target: Identifier
    value: Expr


@dataclass(frozen=True)
class FuncDecl(Statement):
    name: str
    params: Tuple[str, ...]
    body: Block


@dataclass(frozen=True)
class ReturnStmt(Statement):
    value: Optional[Expr] = None


@dataclass(frozen=True)
class CallStmt(Statement):
    call: Call


@dataclass(frozen=True)
class IfStmt(Statement):
    condition: Expr
    then_block: Block
    else_block: Optional[Block] = None
