from dataclasses import dataclass
from decimal import Decimal

import pytest

from scriptlang.ast import Block
from scriptlang.environment import Environment
from scriptlang.errors import InternalValueError, NativeConversionError, ScriptError
from scriptlang.types import (
    INT64_MIN, NO_RETURN, UINT64_MAX, VOID, FunctionValue, NativeObject,
    format_number, from_native, is_truthy, to_native, to_string, type_name, values_equal,
)


@dataclass
class Point:
    x: int = 0


def make_function(name='f'):
    return FunctionValue(name, (), Block(()), Environment())


@pytest.mark.parametrize(
    "value, truthy",
    [
        (False, False),
        (True, True),
        (Decimal(0), True),
        ("", True),
        ("False", True),
        (NativeObject(Point()), True),
    ]
)
def test_only_false_is_falsy(value, truthy):
    assert is_truthy(value) is truthy


def test_function_is_truthy():
    assert is_truthy(make_function())


@pytest.mark.parametrize("sentinel", [NO_RETURN, VOID])
def test_sentinels_refuse_truthiness_and_equality(sentinel):
    with pytest.raises(InternalValueError):
        is_truthy(sentinel)
    with pytest.raises(InternalValueError):
        values_equal(sentinel, Decimal(1))
    with pytest.raises(InternalValueError):
        values_equal(True, sentinel)
    assert not issubclass(InternalValueError, ScriptError)


@pytest.mark.parametrize(
    "a, b, equal",
    [
        (Decimal(1), Decimal("1.0"), True),
        (Decimal(1), "1", False),
        ("a", "a", True),
        ("a", "A", False),
        (True, True, True),
        (True, Decimal(1), False),
        (False, Decimal(0), False),
        (False, "", False),
    ]
)
def test_values_equal(a, b, equal):
    assert values_equal(a, b) is equal


def test_native_objects_compare_by_identity():
    p = Point()
    assert values_equal(NativeObject(p), NativeObject(p))
    assert not values_equal(NativeObject(p), NativeObject(Point()))


def test_functions_compare_by_identity():
    f = make_function()
    assert values_equal(f, f)
    assert not values_equal(f, make_function())


def test_native_object_requires_object():
    with pytest.raises(ValueError):
        NativeObject(None)


@pytest.mark.parametrize(
    "value, name",
    [
        (True, 'Boolean'),
        (Decimal(1), 'Number'),
        ("s", 'String'),
        (NativeObject(Point()), 'NativeObject'),
        (VOID, 'InternalValue'),
    ]
)
def test_type_name(value, name):
    assert type_name(value) == name


@pytest.mark.parametrize(
    "value, text",
    [
        (True, 'True'),
        (False, 'False'),
        (Decimal("3.50"), '3.50'),
        (Decimal("1E+2"), '100'),
        (Decimal("-0"), '0'),
        (Decimal("-2.5"), '-2.5'),
        ('say "hi"', '"say ""hi"""'),
        (VOID, 'Void'),
    ]
)
def test_to_string(value, text):
    assert to_string(value) == text


def test_format_number_never_uses_exponent():
    assert format_number(Decimal(100) / Decimal("0.1")) == '1000'
    assert 'E' not in format_number(Decimal("1E-8"))


@pytest.mark.parametrize(
    "host, expected",
    [
        (True, True),
        (False, False),
        (42, Decimal(42)),
        (INT64_MIN, Decimal(INT64_MIN)),
        (UINT64_MAX, Decimal(UINT64_MAX)),
        (Decimal("2.5"), Decimal("2.5")),
        ("text", "text"),
    ]
)
def test_from_native(host, expected):
    value = from_native(host)
    assert value == expected
    assert type(value) is type(expected)


@pytest.mark.parametrize(
    "host", [UINT64_MAX + 1, INT64_MIN - 1, 1.5, None, [1], Point(), Decimal("NaN"), Decimal("-Infinity")]
)
def test_from_native_rejects(host):
    with pytest.raises(NativeConversionError):
        from_native(host)


def test_to_native_unwraps_handles():
    p = Point()
    assert to_native(NativeObject(p)) is p
    assert to_native(Decimal(1)) == Decimal(1)
