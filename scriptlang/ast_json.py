"""JSON serialization/deserialization for scriptlang ASTs.

This module converts between AST dataclasses and plain Python dict/list
structures suitable for JSON encoding. Every node becomes a dict with a
"type" key naming its class and one key per dataclass field; tuples
become lists. Numbers are stored as their decimal text so no precision
is lost on the way through JSON.
"""

from __future__ import annotations

from dataclasses import fields
from decimal import Decimal
from typing import Any, Dict

from .ast import (
    Assign, BinaryOp, Block, Call, CallStmt, ConstDecl, FuncDecl, Identifier,
    IfStmt, Literal, Node, ReturnStmt, UnaryOp, VarDecl,
)
from .types import format_number

NODE_TYPES = {
    cls.__name__: cls
    for cls in (
        Block, ConstDecl, VarDecl, Assign, FuncDecl, ReturnStmt, CallStmt, IfStmt,
        Identifier, Call, UnaryOp, BinaryOp,
    )
}


def literal_to_obj(value: Any) -> Dict[str, Any]:
    if isinstance(value, bool):
        return {"type": "Literal", "value": value, "literal_type": "Boolean"}
    if isinstance(value, Decimal):
        return {"type": "Literal", "value": format_number(value), "literal_type": "Number"}
    if isinstance(value, str):
        return {"type": "Literal", "value": value, "literal_type": "String"}
    raise TypeError(f"Unsupported literal value: {type(value).__name__}")


def literal_from_obj(obj: Dict[str, Any]) -> Literal:
    literal_type = obj["literal_type"]
    if literal_type == "Number":
        number = Decimal(obj["value"])
        if not number.is_finite():
            raise ValueError(f"Number literal must be finite: {obj['value']}")
        return Literal(number)
    if literal_type == "String":
        return Literal(str(obj["value"]))
    if literal_type == "Boolean":
        return Literal(bool(obj["value"]))
    raise ValueError(f"Unknown literal type: {literal_type}")


def field_to_obj(value: Any) -> Any:
    if isinstance(value, tuple):
        return [field_to_obj(item) for item in value]
    if isinstance(value, Node):
        return ast_to_obj(value)
    return value


def field_from_obj(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(field_from_obj(item) for item in value)
    if isinstance(value, dict):
        return ast_from_obj(value)
    return value


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None
    if isinstance(node, Literal):
        return literal_to_obj(node.value)
    if NODE_TYPES.get(type(node).__name__) is not type(node):
        raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")
    obj: Dict[str, Any] = {"type": type(node).__name__}
    for f in fields(node):
        obj[f.name] = field_to_obj(getattr(node, f.name))
    return obj


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "Literal":
        return literal_from_obj(obj)
    cls = NODE_TYPES.get(t)
    if cls is None:
        raise ValueError(f"Unknown AST node type: {t}")
    # absent keys fall back to the field defaults
    kwargs = {f.name: field_from_obj(obj[f.name]) for f in fields(cls) if f.name in obj}
    return cls(**kwargs)
