"""
Built-in objects visible to every gojo program: `console` and `Math`.

Built-ins report misuse with InterpreterError(INVALID_BUILTIN_ARGUMENT);
the interpreter fills in the position of the offending call.
"""

import math
from typing import Callable, Dict

from gojo.errors import ErrorKind, InterpreterError
from gojo.values import UNDEFINED, BuiltinFunction, BuiltinNamespace, inspect, is_number, type_name


def _check_args(name: str, args, count: int):
    if len(args) != count:
        plural = "argument" if count == 1 else "arguments"
        raise InterpreterError(ErrorKind.INVALID_BUILTIN_ARGUMENT,
                               f"{name} expects {count} {plural}, got {len(args)}")
    for arg in args:
        if not is_number(arg):
            raise InterpreterError(ErrorKind.INVALID_BUILTIN_ARGUMENT,
                                   f"{name} expects numeric arguments, got {type_name(arg)}")


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x == int(x) and int(x) % 2 == 1


def math_sqrt(*args) -> float:
    _check_args("Math.sqrt", args, 1)
    x = args[0]
    if math.isnan(x) or x < 0:
        return math.nan
    return math.sqrt(x)


def math_pow(*args) -> float:
    _check_args("Math.pow", args, 2)
    base, exponent = args
    if math.isnan(exponent):
        return math.nan
    if exponent == 0:
        return 1.0
    if abs(base) == 1 and math.isinf(exponent):
        return math.nan
    if base == 0 and exponent < 0:
        return -math.inf if _is_odd_integer(exponent) and math.copysign(1.0, base) < 0 else math.inf
    try:
        return math.pow(base, exponent)
    except ValueError:
        # negative base with a fractional exponent has no real result
        return math.nan
    except OverflowError:
        return -math.inf if base < 0 and _is_odd_integer(exponent) else math.inf


def make_console(emit: Callable[[str], None]) -> BuiltinNamespace:
    def console_log(*args):
        emit(" ".join(inspect(arg) for arg in args))
        return UNDEFINED

    return BuiltinNamespace("console", {
        "log": BuiltinFunction("log", console_log),
    })


def make_math() -> BuiltinNamespace:
    return BuiltinNamespace("Math", {
        "sqrt": BuiltinFunction("sqrt", math_sqrt),
        "pow": BuiltinFunction("pow", math_pow),
    })


def make_globals(emit: Callable[[str], None]) -> Dict[str, BuiltinNamespace]:
    return {
        "console": make_console(emit),
        "Math": make_math(),
    }
