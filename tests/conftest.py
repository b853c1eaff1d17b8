import asyncio
import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from baiko.interpreter.core.interpreter import Interpreter
from baiko.parser.core.parser import parse_baiko


@pytest.fixture
def run_baiko():
    """
    A factory fixture that interprets source text and returns the printed lines.
    Extra keyword arguments are forwarded to the Interpreter.
    """

    def _run(source, **kwargs):
        output = []
        interpreter = Interpreter(print_sink=output.append, **kwargs)
        asyncio.run(interpreter.run(parse_baiko(source)))
        return output

    return _run


@pytest.fixture
def modules():
    """A factory fixture building an in-memory file resolver from a path -> source dict."""

    def _modules(files, calls=None):
        def resolver(path):
            if calls is not None:
                calls.append(path)
            if path not in files:
                raise FileNotFoundError(f"tsy hita '{path}'")
            return files[path]

        return resolver

    return _modules


@pytest.fixture
def create_files(tmp_path):
    """A factory fixture to create a temporary file structure for import tests."""

    def _create_files(file_dict):
        for file_path, content in file_dict.items():
            path = tmp_path / file_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return tmp_path

    return _create_files
