"""
Runtime values for gojo

Values are plain Python objects:

    Number     float (always float, never int)
    String     str
    Boolean    bool
    Array      list (mutable, compared by identity)
    undefined  UNDEFINED
    null       NULL

This module holds the coercion rules every operator goes through.
"""

import math
from decimal import Decimal
from typing import Any, Optional, Set


class _Singleton:
    __slots__ = ('name',)

    def __init__(self, name: str):
        self.name = name

    def __repr__(self):
        return self.name

    __str__ = __repr__

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


UNDEFINED = _Singleton('undefined')
NULL = _Singleton('null')


class BuiltinFunction:
    def __init__(self, name: str, func):
        self.name = name
        self.func = func

    def __call__(self, *args):
        return self.func(*args)

    def __repr__(self):
        return f"<builtin {self.name}>"


class BuiltinNamespace:
    """A read-only bag of built-in members, e.g. `Math` or `console`."""

    def __init__(self, name: str, members: dict):
        self.name = name
        self.members = members

    def __repr__(self):
        return f"<{self.name}>"


def is_number(value: Any) -> bool:
    # bool is a subclass of int, never of float
    return isinstance(value, float)


def type_name(value: Any) -> str:
    """The `typeof` spelling of a value."""
    if isinstance(value, bool):
        return "boolean"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, BuiltinFunction):
        return "function"
    return "object"


def format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == int(value) and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if 'e' in text and 1e-6 <= abs(value) < 1:
        # repr turns to exponent form below 1e-4, JS only below 1e-6
        return format(Decimal(text), 'f')
    if 'e' in text:
        mantissa, exponent = text.split('e')
        exponent = int(exponent)
        return f"{mantissa}e{'+' if exponent > 0 else '-'}{abs(exponent)}"
    return text


def to_string(value: Any, seen: Optional[Set[int]] = None) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return format_number(value)
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        seen = set() if seen is None else seen
        # an array that contains itself joins to "" at the repeat
        if id(value) in seen:
            return ""
        seen.add(id(value))
        try:
            # join renders holes left by undefined/null as empty strings
            return ",".join("" if item is UNDEFINED or item is NULL else to_string(item, seen)
                            for item in value)
        finally:
            seen.discard(id(value))
    if isinstance(value, BuiltinFunction):
        return f"function {value.name}() {{ [native code] }}"
    return str(value)


def inspect(value: Any, nested: bool = False, seen: Optional[Set[int]] = None) -> str:
    """Rendering used by console.log."""
    if isinstance(value, str):
        return repr(value) if nested else value
    if isinstance(value, list):
        if not value:
            return "[]"
        seen = set() if seen is None else seen
        if id(value) in seen:
            return "[Circular]"
        seen.add(id(value))
        try:
            return "[ " + ", ".join(inspect(item, nested=True, seen=seen) for item in value) + " ]"
        finally:
            seen.discard(id(value))
    if isinstance(value, BuiltinFunction):
        return f"[Function: {value.name}]"
    if isinstance(value, BuiltinNamespace):
        return f"Object [{value.name}]"
    return to_string(value)


def to_number(value: Any) -> float:
    """
    Numeric coercion. Raises TypeError for values with no numeric reading;
    the interpreter turns that into a TypeMismatch.
    """
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if is_number(value):
        return value
    if value is NULL:
        return 0.0
    if value is UNDEFINED:
        return math.nan
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if text in ("Infinity", "+Infinity"):
            return math.inf
        if text == "-Infinity":
            return -math.inf
        try:
            number = float(text)
        except ValueError:
            return math.nan
        # float() also takes spellings like 'nan', 'inf' and '1_0'
        if text.lstrip('+-')[:1].isalpha() or '_' in text:
            return math.nan
        return number
    raise TypeError(f"cannot convert {type_name(value)} to a number")


def is_truthy(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if is_number(value):
        return not (value == 0 or math.isnan(value))
    if isinstance(value, str):
        return len(value) > 0
    if value is UNDEFINED or value is NULL:
        return False
    return True


def _is_nullish(value: Any) -> bool:
    return value is UNDEFINED or value is NULL


def strict_equals(left: Any, right: Any) -> bool:
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if is_number(left) and is_number(right):
        return left == right
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    return left is right


def loose_equals(left: Any, right: Any) -> bool:
    if type_name(left) == type_name(right) and not isinstance(left, list):
        return strict_equals(left, right)
    if _is_nullish(left) or _is_nullish(right):
        return _is_nullish(left) and _is_nullish(right)
    scalar = (bool, float, str)
    if isinstance(left, scalar) and isinstance(right, scalar):
        return to_number(left) == to_number(right)
    return left is right
