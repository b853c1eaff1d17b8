from typing import Any, Dict, Iterator, Optional

from baiko.exceptions import BaikoRuntimeError, ErrorCode
from baiko.parser.core.classes import Span


class Environment:
    """
    One lexical scope: a name -> value mapping plus a link to the enclosing scope.

    Function calls create a child of the callee's closure environment, block
    entries a child of the surrounding one. Module imports use a parentless
    environment so their private bindings never reach the importer.
    """

    def __init__(self, parent: Optional["Environment"] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}

    def define(self, name: str, value: Any):
        """Binds in this scope, shadowing or overwriting any previous binding."""
        self.values[name] = value

    def get(self, name: str, span: Optional[Span] = None) -> Any:
        scope = self._find(name)
        if scope is None:
            raise BaikoRuntimeError(ErrorCode.UNDEFINED_NAME, span=span, name=name)
        return scope.values[name]

    def assign(self, name: str, value: Any, span: Optional[Span] = None):
        """Rebinds the name in the closest scope that already defines it."""
        scope = self._find(name)
        if scope is None:
            raise BaikoRuntimeError(ErrorCode.UNDEFINED_ASSIGNMENT, span=span, name=name)
        scope.values[name] = value

    def has(self, name: str) -> bool:
        return self._find(name) is not None

    def child(self) -> "Environment":
        return Environment(parent=self)

    def chain(self) -> Iterator["Environment"]:
        scope = self
        while scope is not None:
            yield scope
            scope = scope.parent

    def _find(self, name: str) -> Optional["Environment"]:
        for scope in self.chain():
            if name in scope.values:
                return scope
        return None
