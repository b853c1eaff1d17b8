import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from baiko.check import Diagnostic, check_baiko


def test_clean_program_has_no_diagnostics():
    code = """
        asa ampio(a: Isa, b: Isa): Isa dia
          mamoaka a + b;
        farany
        asehoy ampio(1, 2);
    """
    assert check_baiko(code) == []


@pytest.mark.parametrize(
    "code, line, col",
    [
        pytest.param("asehoy 1;\nasehoy @;", 2, 8, id="lexical"),
        pytest.param("x: Isa;", 1, 1, id="syntax"),
        pytest.param("asehoy 1;\n  asehoy tsyMisy;", 2, 10, id="runtime"),
        pytest.param('x: Isa = "a";', 1, 1, id="type"),
    ],
)
def test_first_error_is_positioned(code, line, col):
    diagnostics = check_baiko(code)
    assert len(diagnostics) == 1
    diagnostic = diagnostics[0]
    assert isinstance(diagnostic, Diagnostic)
    assert (diagnostic.line, diagnostic.col) == (line, col)
    assert f"(andalana {line}, toerana {col})" in diagnostic.message


def test_only_the_first_error_is_reported():
    assert len(check_baiko("asehoy a;\nasehoy b;")) == 1


def test_output_is_discarded(capsys):
    assert check_baiko('asehoy "tsy aseho";') == []
    assert capsys.readouterr().out == ""


def test_unknown_packages_are_proxied():
    code = """
        ampidiro "package:tsy_misy_mihitsy";
        valiny: Soratra = miandry tsy_misy_mihitsy.maka("url").data[0];
        tsy_misy_mihitsy["ampahany"] = 1;
        asehoy valiny;
    """
    assert check_baiko(code) == []


def test_imports_resolve_to_empty_modules():
    assert check_baiko('ampidiro "fitaovana";\nasehoy 1;') == []


def test_names_from_unresolved_imports_are_undefined():
    diagnostics = check_baiko('ampidiro "fitaovana";\nasehoy ampio(1, 2);')
    assert len(diagnostics) == 1
    assert '"ampio"' in diagnostics[0].message
    assert diagnostics[0].line == 2
