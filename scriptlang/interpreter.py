"""Tree-walking interpreter for scriptlang.

`Interpreter.execute` runs a statement and `Interpreter.evaluate` an
expression; both dispatch on the (closed) set of AST node classes.
Statements produce `NO_RETURN` unless they end a function through
`return`, which lets a Block stop at the first statement with a result.
Failures are raised as `ScriptError` subclasses and propagate to the
caller of `run`; effects applied before the failure are not rolled back.
"""

from __future__ import annotations

import decimal
from decimal import Decimal
from typing import Any, List, Optional

from .ast import (
    Assign, BinaryOp, Block, Call, CallStmt, ConstDecl, Expr, FuncDecl,
    Identifier, IfStmt, Literal, Node, ReturnStmt, UnaryOp, VarDecl,
)
from .environment import Environment
from .errors import (
    ArityError, DivisionByZeroError, NumericOverflowError, OperatorTypeError,
    PropertyAssignmentError, PropertyNotFoundError, VoidValueError,
)
from .native import NOT_FOUND, AdapterRegistry, SetResult
from .parser import parse_expression, parse_program
from .types import (
    NO_RETURN, VOID, FunctionValue, InternalValue, NativeObject,
    from_native, is_number, is_truthy, to_string, type_name, values_equal,
)


class Interpreter:
    """Core interpreter that executes scriptlang ASTs."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt',
                 natives: Optional[AdapterRegistry] = None, precision: int = 28):
        self.global_env = Environment()
        self.natives = natives if natives is not None else AdapterRegistry()
        self.context = decimal.Context(prec=precision)
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0 and self.debug_fp:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    def __enter__(self) -> 'Interpreter':
        return self

    def __exit__(self, *exc_info):
        self.close()

    # Host API

    def bind_native(self, name: str, obj: Any, env: Optional[Environment] = None) -> NativeObject:
        """Expose a host object to scripts under `name`."""
        handle = obj if isinstance(obj, NativeObject) else NativeObject(obj)
        (env or self.global_env).declare(name, handle)
        return handle

    def run(self, program: Block, env: Optional[Environment] = None) -> Any:
        """Execute a parsed script; return the value of a top-level `return`, if any."""
        if env is None:
            env = self.global_env
        result = self.execute(program, env)
        if isinstance(result, InternalValue):
            return None
        return result

    def run_source(self, source: str, env: Optional[Environment] = None) -> Any:
        return self.run(parse_program(source), env)

    def evaluate_source(self, source: str, env: Optional[Environment] = None) -> Any:
        """Parse and evaluate a single expression."""
        if env is None:
            env = self.global_env
        return self.evaluate_value(parse_expression(source), env, 'expression')

    # Statements

    def execute_block(self, block: Block, env: Environment) -> Any:
        for stmt in block.statements:
            result = self.execute(stmt, env)
            if result is not NO_RETURN:
                return result
        return NO_RETURN

    def execute(self, node: Node, env: Environment) -> Any:
        if isinstance(node, Block):
            return self.execute_block(node, env)
        if isinstance(node, (ConstDecl, VarDecl)):
            is_const = isinstance(node, ConstDecl)
            value = self.evaluate_value(node.expr, env, f"initializer of '{node.name}'")
            env.declare(node.name, value, is_const=is_const)
            if self.debug_level >= 2:
                self.debug(f"declare {'const' if is_const else 'var'} {node.name} = {to_string(value)}")
            return NO_RETURN
        if isinstance(node, Assign):
            value = self.evaluate_value(node.value, env, f"value assigned to '{node.target.path}'")
            if node.target.properties:
                self.assign_property(node.target, value, env)
            else:
                env.assign(node.target.name, value)
            if self.debug_level >= 2:
                self.debug(f"set {node.target.path} = {to_string(value)}")
            return NO_RETURN
        if isinstance(node, FuncDecl):
            func_value = FunctionValue(node.name, node.params, node.body, env)
            env.declare(node.name, func_value, is_const=True)
            if self.debug_level >= 2:
                self.debug(f"define function {node.name}({', '.join(node.params)})")
            return NO_RETURN
        if isinstance(node, ReturnStmt):
            if node.value is None:
                return VOID
            return self.evaluate_value(node.value, env, 'returned expression')
        if isinstance(node, CallStmt):
            self.evaluate(node.call, env)
            return NO_RETURN
        if isinstance(node, IfStmt):
            truthy = is_truthy(self.evaluate_value(node.condition, env, "'if' condition"))
            if self.debug_level >= 3:
                self.debug(f"if condition -> {truthy}")
            branch = node.then_block if truthy else node.else_block
            if branch is None:
                return NO_RETURN
            return self.execute_block(branch, env.child())
        raise NotImplementedError(f"execute: unexpected node type {type(node).__name__}")

    # Expressions

    def evaluate_value(self, node: Expr, env: Environment, description: str) -> Any:
        """Evaluate an expression whose result is consumed as a script value."""
        value = self.evaluate(node, env)
        if isinstance(value, InternalValue):
            raise VoidValueError(description)
        return value

    def evaluate(self, node: Expr, env: Environment) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Identifier):
            if not node.properties:
                return env.lookup(node.name)
            return self.read_property(node, env)
        if isinstance(node, Call):
            return self.call_function(node, env)
        if isinstance(node, UnaryOp):
            operand = self.evaluate_value(node.operand, env, f"operand of '{node.op}'")
            return self.apply_unary_op(node.op, operand)
        if isinstance(node, BinaryOp):
            # Both operands are evaluated, even for 'and' and 'or'
            left = self.evaluate_value(node.left, env, f"left operand of '{node.op}'")
            right = self.evaluate_value(node.right, env, f"right operand of '{node.op}'")
            return self.apply_binary_op(node.op, left, right)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node).__name__}")

    def call_function(self, node: Call, env: Environment) -> Any:
        func = env.lookup(node.name)
        if not isinstance(func, FunctionValue):
            raise OperatorTypeError('function call', 'Function')
        if len(node.args) != len(func.params):
            raise ArityError(node.name, len(func.params), len(node.args))
        # Arguments are evaluated in the caller's scope ...
        args: List[Any] = [
            self.evaluate_value(arg, env, f"argument {i + 1} of '{node.name}'")
            for i, arg in enumerate(node.args)
        ]
        # ... and bound in a child of the scope the function was defined in.
        call_env = func.env.child()
        for param, arg in zip(func.params, args):
            call_env.declare(param, arg)
        if self.debug_level >= 1:
            self.debug(f"call {func.name}({', '.join(to_string(a) for a in args)})")
        result = self.execute_block(func.body, call_env)
        if result is NO_RETURN:
            return VOID
        return result

    # Native objects

    def native_base(self, target: Identifier, env: Environment) -> NativeObject:
        handle = env.lookup(target.name)
        if not isinstance(handle, NativeObject):
            raise OperatorTypeError('.', 'NativeObject')
        return handle

    def get_host_property(self, obj: Any, owner: str, name: str) -> Any:
        value = self.natives.adapter_for(obj).get_property(obj, name)
        if value is NOT_FOUND:
            raise PropertyNotFoundError(owner, name)
        return value

    def read_property(self, target: Identifier, env: Environment) -> Any:
        obj = self.native_base(target, env).obj
        for name in target.properties:
            obj = self.get_host_property(obj, target.name, name)
        if self.debug_level >= 3:
            self.debug(f"read {target.path}")
        return from_native(obj)

    def assign_property(self, target: Identifier, value: Any, env: Environment):
        obj = self.native_base(target, env).obj
        *intermediate, final = target.properties
        for name in intermediate:
            obj = self.get_host_property(obj, target.name, name)
        result = self.natives.adapter_for(obj).set_property(obj, final, value)
        if result is SetResult.NOT_FOUND:
            raise PropertyNotFoundError(target.name, final)
        if result is SetResult.REJECTED:
            raise PropertyAssignmentError(target.path, type_name(value))
        if self.debug_level >= 3:
            self.debug(f"write {target.path}")

    # Operators

    def apply_unary_op(self, op: str, operand: Any) -> Any:
        if op == 'not':
            return not is_truthy(operand)
        if not is_number(operand):
            raise OperatorTypeError(f"{op} (unary)", 'Number')
        if op == '+':
            return operand
        if op == '-':
            return self.context.minus(operand)
        raise NotImplementedError(f"unsupported unary operator {op}")

    def apply_binary_op(self, op: str, a: Any, b: Any) -> Any:
        if op == 'and':
            return b if is_truthy(a) and is_truthy(b) else False
        if op == 'or':
            if is_truthy(a):
                return a
            return b if is_truthy(b) else False
        if op == '=':
            return values_equal(a, b)
        if op == '<>':
            return not values_equal(a, b)
        if op in ('<', '>'):
            return self.compare(op, a, b)
        if not (is_number(a) and is_number(b)):
            raise OperatorTypeError(op, 'Number')
        if op == '/' and b == 0:
            raise DivisionByZeroError()
        try:
            return self.arithmetic(op, a, b)
        except decimal.Overflow:
            raise NumericOverflowError(op) from None

    def arithmetic(self, op: str, a: Decimal, b: Decimal) -> Decimal:
        if op == '+':
            return self.context.add(a, b)
        if op == '-':
            return self.context.subtract(a, b)
        if op == '*':
            return self.context.multiply(a, b)
        if op == '/':
            return self.context.divide(a, b)
        raise NotImplementedError(f"unsupported binary operator {op}")

    def compare(self, op: str, a: Any, b: Any) -> bool:
        # Ordering is defined within Numbers and within Strings only
        both_numbers = is_number(a) and is_number(b)
        both_strings = isinstance(a, str) and isinstance(b, str)
        if not (both_numbers or both_strings):
            raise OperatorTypeError(op, 'Number or String')
        return a < b if op == '<' else a > b


def run_program(source: str, debug_level: int = 0) -> Any:
    """Convenience function to parse and run a script from source text."""
    program = parse_program(source)
    with Interpreter(debug_level=debug_level) as interpreter:
        return interpreter.run(program)


def compile_module(file_path: str, debug_level: int = 0) -> Interpreter:
    """Parse and execute a script file, returning the interpreter instance."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level)
    interpreter.run(program)
    return interpreter
