"""
The bridge between Baiko runtime values and host (Python) objects.

The interpreter never touches a host object directly: calls, member access,
indexing and awaiting all go through a NativeBridge, so an embedding
application can substitute its own.
"""

import importlib
import inspect
from collections.abc import Mapping
from typing import Any, List

from .values import BaikoFunction, NativeValue

_SCALARS = (bool, int, float, str)


class NativeBridge:
    def call(self, fn: Any, args: List[Any]) -> Any:
        return fn(*args)

    def get_member(self, obj: Any, name: str) -> Any:
        """Mapping keys take precedence over attributes; raises AttributeError when neither exists."""
        if isinstance(obj, Mapping) and name in obj:
            return obj[name]
        return getattr(obj, name)

    def call_member(self, obj: Any, name: str, args: List[Any]) -> Any:
        return self.call(self.get_member(obj, name), args)

    def get_item(self, obj: Any, key: Any) -> Any:
        return obj[key]

    def set_item(self, obj: Any, key: Any, value: Any):
        obj[key] = value

    def is_callable(self, obj: Any) -> bool:
        return callable(obj)

    def is_awaitable(self, obj: Any) -> bool:
        return inspect.isawaitable(obj)

    async def resolve(self, obj: Any) -> Any:
        return await obj

    def to_host(self, value: Any) -> Any:
        """Unwraps a runtime value before it is handed to host code."""
        if isinstance(value, NativeValue):
            return value.value
        if isinstance(value, list):
            return [self.to_host(v) for v in value]
        return value

    def from_host(self, obj: Any) -> Any:
        """Wraps a host result: scalars and lists become runtime values, anything else Native."""
        if obj is None or isinstance(obj, _SCALARS):
            return obj
        if isinstance(obj, (NativeValue, BaikoFunction)):
            return obj
        if isinstance(obj, (list, tuple)):
            return [self.from_host(v) for v in obj]
        return NativeValue(obj)


def import_package(identifier: str) -> Any:
    """Default package resolver: the identifier is a Python module path."""
    return importlib.import_module(identifier)
