"""Render AST nodes back to source-like text.

The output is deterministic and re-parses to an equivalent tree: binary
operands are always parenthesized, so the printed text does not depend
on precedence or associativity. Statement blocks put each statement on
its own line, indented two spaces per nesting level.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List

from .ast import (
    Assign, BinaryOp, Block, Call, CallStmt, ConstDecl, FuncDecl, Identifier,
    IfStmt, Literal, Node, ReturnStmt, UnaryOp, VarDecl,
)
from .types import to_string

INDENT = '  '


def pretty_print(node: Node, indent: int = 0) -> str:
    """Return the source-like rendering of `node`."""
    out: List[str] = []
    write(node, out, indent)
    return ''.join(out)


def write_block(block: Block, out: List[str], indent: int):
    for stmt in block.statements:
        out.append(INDENT * indent)
        write(stmt, out, indent)
        out.append('\n')


def write(node: Node, out: List[str], indent: int):
    if isinstance(node, Block):
        write_block(node, out, indent)
    elif isinstance(node, ConstDecl):
        out.append(f"const {node.name} = ")
        write(node.expr, out, indent)
    elif isinstance(node, VarDecl):
        out.append(f"var {node.name} = ")
        write(node.expr, out, indent)
    elif isinstance(node, Assign):
        out.append(f"set {node.target.path} = ")
        write(node.value, out, indent)
    elif isinstance(node, FuncDecl):
        out.append(f"func {node.name}({', '.join(node.params)}) {{\n")
        write_block(node.body, out, indent + 1)
        out.append(INDENT * indent + '}')
    elif isinstance(node, ReturnStmt):
        out.append('return')
        if node.value is not None:
            out.append(' ')
            write(node.value, out, indent)
    elif isinstance(node, CallStmt):
        write(node.call, out, indent)
    elif isinstance(node, IfStmt):
        out.append('if ')
        write(node.condition, out, indent)
        out.append(' then\n')
        write_block(node.then_block, out, indent + 1)
        if node.else_block is not None:
            out.append(INDENT * indent + 'else\n')
            write_block(node.else_block, out, indent + 1)
        out.append(INDENT * indent + 'end')
    elif isinstance(node, Literal):
        value = node.value
        # negative numbers only come from evaluation, never from the lexer
        if isinstance(value, Decimal) and value.is_signed():
            out.append(f"-({to_string(-value)})")
        else:
            out.append(to_string(value))
    elif isinstance(node, Identifier):
        out.append(node.path)
    elif isinstance(node, Call):
        out.append(node.name + '(')
        for i, arg in enumerate(node.args):
            if i:
                out.append(', ')
            write(arg, out, indent)
        out.append(')')
    elif isinstance(node, UnaryOp):
        out.append('not (' if node.op == 'not' else node.op + '(')
        write(node.operand, out, indent)
        out.append(')')
    elif isinstance(node, BinaryOp):
        out.append('(')
        write(node.left, out, indent)
        out.append(f") {node.op} (")
        write(node.right, out, indent)
        out.append(')')
    else:
        raise TypeError(f"Unsupported node for printing: {type(node).__name__}")
