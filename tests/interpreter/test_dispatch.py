from typing import get_args

import pytest

from baiko.exceptions import InternalCompilerError
from baiko.interpreter.core.interpreter import Interpreter
from baiko.parser.core.classes import Expression, Program, Statement


def _union_members(annotated):
    return set(get_args(get_args(annotated)[0]))


def test_every_statement_type_has_an_executor():
    assert set(Interpreter()._statement_handlers) == _union_members(Statement)


def test_every_expression_type_has_an_evaluator():
    assert set(Interpreter()._expression_handlers) == _union_members(Expression)


def test_unknown_node_is_an_internal_error():
    interpreter = Interpreter()
    with pytest.raises(InternalCompilerError):
        interpreter.run_sync(Program.model_construct(body=[object()]))
