"""
Editor-facing diagnostics: runs a snippet through the whole front end and the
interpreter and reports the first failure as a positioned Diagnostic.
"""

from typing import List, Optional

from pydantic import BaseModel

from .config import DEFAULT_CONFIG
from .interpreter.core.interpreter import Interpreter
from .parser.core.parser import parse_baiko


class Diagnostic(BaseModel):
    message: str
    line: Optional[int] = None
    col: Optional[int] = None


class _NoopProxy:
    """Stands in for any package: every member and call yields another proxy."""

    def __getattr__(self, name):
        return _NoopProxy()

    def __call__(self, *args, **kwargs):
        return _NoopProxy()

    def __getitem__(self, key):
        return _NoopProxy()

    def __setitem__(self, key, value):
        pass

    def __str__(self):
        return "proxy"


def _empty_module(path: str) -> str:
    return ""


def _discard(line: str):
    pass


def check_baiko(code: str) -> List[Diagnostic]:
    """Returns an empty list for a clean run, otherwise the single error that stopped it."""
    try:
        program = parse_baiko(code)
        interpreter = Interpreter(
            print_sink=_discard,
            file_resolver=_empty_module,
            package_resolver=lambda identifier: _NoopProxy(),
        )
        interpreter.run_sync(program)
        return []
    except Exception as e:
        message = getattr(e, "message", None) or str(e)
        match = DEFAULT_CONFIG.position_pattern.search(message)
        if match is None:
            return [Diagnostic(message=message)]
        return [Diagnostic(message=message, line=int(match.group(1)), col=int(match.group(2)))]
