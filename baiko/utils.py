"""
Utility functions for the Baiko toolchain, including terminal coloring,
a robust JSON artifact serializer, package binding names and the
recursion ceiling used by the recursive stages.
"""

import json
import re
import shutil
import sys
from contextlib import contextmanager
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class TerminalColors:
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    RESET = "\033[0m"


class CompilerArtifactEncoder(json.JSONEncoder):
    def default(self, o):
        if isinstance(o, BaseModel):
            return o.model_dump(mode="json")
        if isinstance(o, Enum):
            return o.value
        if isinstance(o, set):
            return list(o)
        return super().default(o)


def package_binding_name(identifier: str) -> str:
    """
    Derives the local name a package is bound under: the last '/' or '.'
    separated segment, with every character outside [A-Za-z0-9_] replaced by '_'.
    `@angular/core` binds `core`, `os.path` binds `path`, `my-lib` binds `my_lib`.
    """
    segment = re.split(r"[/.]", identifier.rstrip("/."))[-1]
    return re.sub(r"[^A-Za-z0-9_]", "_", segment)


def find_node_executable() -> Optional[str]:
    return shutil.which("node")


@contextmanager
def raised_recursion_limit(limit: int):
    """
    Raises the interpreter recursion limit to at least `limit` for the duration
    of the block, restoring the previous value afterwards. Never lowers it.
    """
    previous = sys.getrecursionlimit()
    if limit > previous:
        sys.setrecursionlimit(limit)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)
