from typing import Any, Optional

from baiko.exceptions import BaikoRuntimeError, ErrorCode
from baiko.parser.core.classes import BaseType, ListType, OptionalType, Span, TypeAnnotation, describe_type

from .values import NativeValue, ValueKind, describe_value, kind_of

_BASE_KINDS = {
    BaseType.NUMBER: ValueKind.NUMBER,
    BaseType.STRING: ValueKind.STRING,
    BaseType.BOOLEAN: ValueKind.BOOLEAN,
}


def matches_type(value: Any, annotation: TypeAnnotation) -> bool:
    """
    Structural check of a runtime value against a declared annotation.
    Native values match anything; list elements are checked recursively.
    """
    if isinstance(value, NativeValue):
        return True
    if isinstance(annotation, OptionalType):
        return value is None or matches_type(value, annotation.inner)
    if value is None:
        return False
    if isinstance(annotation, ListType):
        return isinstance(value, list) and all(matches_type(v, annotation.inner) for v in value)
    return kind_of(value) is _BASE_KINDS[annotation]


def check_type(name: str, value: Any, annotation: TypeAnnotation, span: Optional[Span] = None):
    """Raises a TYPE_MISMATCH runtime error naming both the declared and the actual kind."""
    if matches_type(value, annotation):
        return
    raise BaikoRuntimeError(
        ErrorCode.TYPE_MISMATCH,
        span=span,
        name=name,
        expected=describe_type(annotation),
        provided=_describe_actual(value),
    )


def _describe_actual(value: Any) -> str:
    if isinstance(value, list) and value:
        # described by its first element, e.g. 'Lisitra(Soratra)'
        return f"{describe_value(value)}({describe_value(value[0])})"
    return describe_value(value)
