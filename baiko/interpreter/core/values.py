"""
Runtime value model of the interpreter.

Number, String, Boolean and Null are represented by the Python scalars
int/float, str, bool and None. Lists are plain Python lists of runtime values.
Functions and host-interop values get explicit wrapper classes so every value
belongs to exactly one ValueKind.
"""

import json
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional

from baiko.config import DEFAULT_CONFIG, LanguageConfig
from baiko.exceptions import InternalCompilerError
from baiko.parser.core.classes import Parameter

if TYPE_CHECKING:
    from .environment import Environment


class ValueKind(Enum):
    NUMBER = "Isa"
    STRING = "Soratra"
    BOOLEAN = "Marina"
    NULL = "tsisy"
    LIST = "Lisitra"
    FUNCTION = "asa"
    NATIVE = "natif"


@dataclass(eq=False)
class BaikoFunction:
    """A user-declared function together with the environment it closes over."""

    name: str
    params: List[Parameter]
    body: list
    closure: "Environment" = field(repr=False)
    is_async: bool = False


@dataclass(eq=False)
class NativeValue:
    """Wraps an arbitrary host object; opaque to the language's type system."""

    value: Any


@dataclass(frozen=True)
class ReturnSignal:
    """Produced by `mamoaka` and forwarded unchanged by every enclosing block."""

    value: Any = None


def kind_of(value: Any) -> ValueKind:
    # bool is checked before the numeric types since it subclasses int
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, list):
        return ValueKind.LIST
    if isinstance(value, BaikoFunction):
        return ValueKind.FUNCTION
    if isinstance(value, NativeValue):
        return ValueKind.NATIVE
    raise InternalCompilerError(f"Value of host type '{type(value).__name__}' leaked into the interpreter.")


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def format_number(value) -> str:
    """Integral numbers render without a decimal part: 4 / 2 prints 2."""
    if isinstance(value, float) and math.isnan(value):
        return "NaN"
    if isinstance(value, float) and math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def stringify(value: Any, config: LanguageConfig = DEFAULT_CONFIG) -> str:
    """Renders a runtime value the way `asehoy` prints it."""
    kind = kind_of(value)
    if kind is ValueKind.NULL:
        return config.null_word
    if kind is ValueKind.BOOLEAN:
        return config.true_word if value else config.false_word
    if kind is ValueKind.NUMBER:
        return format_number(value)
    if kind is ValueKind.STRING:
        return value
    if kind is ValueKind.LIST:
        return "[" + ", ".join(_stringify_element(v, config) for v in value) + "]"
    if kind is ValueKind.FUNCTION:
        return f"<{config.function_word} {value.name}>"
    return _stringify_native(value.value, config)


def _stringify_element(value: Any, config: LanguageConfig) -> str:
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    return stringify(value, config)


def _stringify_native(obj: Any, config: LanguageConfig) -> str:
    if obj is None:
        return config.null_word
    if isinstance(obj, str):
        return obj
    try:
        return json.dumps(obj, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(obj)


def values_equal(left: Any, right: Any) -> bool:
    """Equality behind `==` and `!=`; values of different kinds are never equal."""
    left_kind, right_kind = kind_of(left), kind_of(right)
    if left_kind is not right_kind:
        return False
    if left_kind is ValueKind.LIST:
        return len(left) == len(right) and all(values_equal(a, b) for a, b in zip(left, right))
    if left_kind is ValueKind.FUNCTION:
        return left is right
    if left_kind is ValueKind.NATIVE:
        return left.value is right.value or left.value == right.value
    return left == right


def is_truthy(value: Any) -> bool:
    if isinstance(value, NativeValue):
        return bool(value.value)
    if isinstance(value, BaikoFunction):
        return True
    return bool(value)


def describe_value(value: Any) -> str:
    """Names the kind of a value for error messages, e.g. 'Isa' or 'tsisy'."""
    return kind_of(value).value


def unwrap_signal(signal: Optional[ReturnSignal]) -> Any:
    return signal.value if signal is not None else None
