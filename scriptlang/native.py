"""Host object interop.

Scripts reach host objects only through dotted property paths such as
`set window.title = "x"` or `const w = window.size.width`. Instead of
reflecting over arbitrary Python objects, the interpreter asks a
`PropertyAdapter` registered for the object's type to read or write a
named property. Adapters report a missing property (`NOT_FOUND` /
`SetResult.NOT_FOUND`) separately from a property that exists but will
not take the value offered (`SetResult.REJECTED`), so the interpreter can
raise the matching error.

Two adapters are provided. `AttributeAdapter` exposes public attributes
and checks assignments against the class annotations, which makes
dataclasses and annotated classes usable without extra code.
`MappingAdapter` exposes the existing keys of a dict.
"""

from __future__ import annotations

import enum
import typing
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Dict, Optional

from .types import FunctionValue, NativeObject


class _NotFound:
    def __repr__(self) -> str:
        return 'NOT_FOUND'


NOT_FOUND = _NotFound()


class SetResult(enum.Enum):
    OK = 'ok'
    NOT_FOUND = 'not found'
    REJECTED = 'rejected'


class PropertyAdapter(ABC):
    @abstractmethod
    def get_property(self, obj: Any, name: str) -> Any:
        """Return the host value of the property, or NOT_FOUND."""

    @abstractmethod
    def set_property(self, obj: Any, name: str, value: Any) -> SetResult:
        """Store a script value into the property."""


_REJECT = object()


def coerce(value: Any, annotation: Any) -> Any:
    """Convert a script value for a property annotated with `annotation`.

    Returns `_REJECT` when the value does not fit. Functions never leave
    the interpreter; any other value fits an unannotated property or one
    annotated `Any` or `object`.
    """
    if isinstance(value, FunctionValue):
        return _REJECT
    if annotation is None or annotation is Any or annotation is object:
        if isinstance(value, NativeObject):
            return value.obj
        return value
    if annotation is bool:
        return value if isinstance(value, bool) else _REJECT
    if isinstance(value, bool):
        return _REJECT
    if annotation is int:
        if isinstance(value, Decimal) and value == value.to_integral_value():
            return int(value)
        return _REJECT
    if annotation is Decimal:
        return value if isinstance(value, Decimal) else _REJECT
    if annotation is str:
        return value if isinstance(value, str) else _REJECT
    if isinstance(value, NativeObject) and isinstance(annotation, type):
        return value.obj if isinstance(value.obj, annotation) else _REJECT
    return _REJECT


class AttributeAdapter(PropertyAdapter):
    """Public attributes of ordinary Python objects."""

    def get_property(self, obj: Any, name: str) -> Any:
        if name.startswith('_'):
            return NOT_FOUND
        return getattr(obj, name, NOT_FOUND)

    def set_property(self, obj: Any, name: str, value: Any) -> SetResult:
        if name.startswith('_') or not hasattr(obj, name):
            return SetResult.NOT_FOUND
        annotation = self.annotations(type(obj)).get(name)
        native = coerce(value, annotation)
        if native is _REJECT:
            return SetResult.REJECTED
        try:
            setattr(obj, name, native)
        except AttributeError:
            # read-only property or frozen dataclass
            return SetResult.REJECTED
        return SetResult.OK

    @staticmethod
    def annotations(cls: type) -> Dict[str, Any]:
        try:
            return typing.get_type_hints(cls)
        except (NameError, TypeError):
            return {}


class MappingAdapter(PropertyAdapter):
    """Existing keys of a dict; assignment never adds keys."""

    def get_property(self, obj: Any, name: str) -> Any:
        return obj.get(name, NOT_FOUND)

    def set_property(self, obj: Any, name: str, value: Any) -> SetResult:
        if name not in obj:
            return SetResult.NOT_FOUND
        native = coerce(value, None)
        if native is _REJECT:
            return SetResult.REJECTED
        obj[name] = native
        return SetResult.OK


class AdapterRegistry:
    """Maps host types to the adapters that expose their properties.

    Lookup follows the method resolution order of the object's type, so
    an adapter registered for a base class covers its subclasses.
    Objects with no registered adapter use `default`.
    """
    def __init__(self, default: Optional[PropertyAdapter] = None):
        self.default = default if default is not None else AttributeAdapter()
        self.adapters: Dict[type, PropertyAdapter] = {dict: MappingAdapter()}

    def register(self, cls: type, adapter: PropertyAdapter):
        self.adapters[cls] = adapter

    def adapter_for(self, obj: Any) -> PropertyAdapter:
        for cls in type(obj).__mro__:
            adapter = self.adapters.get(cls)
            if adapter is not None:
                return adapter
        return self.default
