"""Runtime value model for scriptlang.

Script values are plain Python objects drawn from a closed set:

* Number  -- `decimal.Decimal`, so user-visible arithmetic has no binary
  floating point rounding artifacts;
* String  -- `str`;
* Boolean -- `bool`;
* Function -- `FunctionValue`, a closure over its defining environment;
* NativeObject -- a handle on a host object, reachable only through
  property get/set.

Two `InternalValue` sentinels, `NO_RETURN` and `VOID`, communicate
statement results inside the interpreter. Script code never observes
them: truthiness and equality refuse them outright.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Tuple

from .errors import InternalValueError, NativeConversionError

if TYPE_CHECKING:
    from .ast import Block
    from .environment import Environment


INT64_MIN = -(2 ** 63)
UINT64_MAX = 2 ** 64 - 1


class InternalValue:
    """Marker for interpreter-internal statement results."""
    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return self.name


# The statement did not end in a function return.
NO_RETURN = InternalValue('NoReturn')
# A function returned without a value.
VOID = InternalValue('Void')


class FunctionValue:
    """Represents a user-defined script function."""
    def __init__(self, name: str, params: Tuple[str, ...], body: 'Block', env: 'Environment'):
        self.name = name
        self.params = params
        self.body = body
        self.env = env  # defining environment, kept alive by this closure

    def __repr__(self) -> str:
        return f"<func:{self.name}>"


class NativeObject:
    """Opaque handle on a host object exposed to scripts."""
    def __init__(self, obj: Any):
        if obj is None:
            raise ValueError("native object handle requires an object")
        self.obj = obj

    def __repr__(self) -> str:
        cls = type(self.obj)
        return f"<object:{cls.__module__}.{cls.__qualname__}>"


def is_number(value: Any) -> bool:
    return isinstance(value, Decimal)


def type_name(value: Any) -> str:
    """Return the script type name of a runtime value."""
    if isinstance(value, bool):
        return 'Boolean'
    if isinstance(value, Decimal):
        return 'Number'
    if isinstance(value, str):
        return 'String'
    if isinstance(value, FunctionValue):
        return 'Function'
    if isinstance(value, NativeObject):
        return 'NativeObject'
    if isinstance(value, InternalValue):
        return 'InternalValue'
    return type(value).__name__


def format_number(value: Decimal) -> str:
    # Fixed-point notation: the lexer has no exponent syntax, and
    # Decimal('100') / Decimal('10') would otherwise render as '1E+1'.
    text = format(value, 'f')
    if text == '-0':
        return '0'
    return text


def quote_string(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def to_string(value: Any) -> str:
    """Render a value the way scripts would write it."""
    if isinstance(value, bool):
        return 'True' if value else 'False'
    if isinstance(value, Decimal):
        return format_number(value)
    if isinstance(value, str):
        return quote_string(value)
    return repr(value)


def is_truthy(value: Any) -> bool:
    # False is the only falsy value
    if isinstance(value, InternalValue):
        raise InternalValueError(f"{value!r} has no truth value")
    return value is not False


def values_equal(a: Any, b: Any) -> bool:
    """Variant-aware equality: values of different variants are never equal."""
    if isinstance(a, InternalValue) or isinstance(b, InternalValue):
        raise InternalValueError("internal values cannot be compared")
    if type_name(a) != type_name(b):
        return False
    if isinstance(a, NativeObject):
        return a.obj is b.obj
    if isinstance(a, FunctionValue):
        return a is b
    return a == b


def from_native(obj: Any) -> Any:
    """Wrap a host value read through a property path as a script value."""
    if isinstance(obj, bool):
        return obj
    if isinstance(obj, int):
        if not INT64_MIN <= obj <= UINT64_MAX:
            raise NativeConversionError(f"int (out of 64-bit range: {obj})")
        return Decimal(obj)
    if isinstance(obj, Decimal):
        if not obj.is_finite():
            raise NativeConversionError(f"Decimal (not finite: {obj})")
        return obj
    if isinstance(obj, str):
        return obj
    cls = type(obj)
    raise NativeConversionError(f"{cls.__module__}.{cls.__qualname__}")


def to_native(value: Any) -> Any:
    """Unwrap a script value for handing to host code."""
    if isinstance(value, NativeObject):
        return value.obj
    return value
