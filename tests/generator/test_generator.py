import pytest

from baiko.exceptions import BaikoError, BaikoRuntimeError, ErrorCode
from baiko.generator.generator import generate_javascript
from baiko.parser.core.parser import parse_baiko


def compile_js(source, file_resolver=None):
    return generate_javascript(parse_baiko(source), file_resolver)


@pytest.mark.parametrize(
    "source, expected",
    [
        # --- Typed declarations ---
        pytest.param("x: Isa = 5;", "let /** @type {Isa} */ x = 5;", id="number_declaration"),
        pytest.param('nom: Soratra = "Rakoto";', 'let /** @type {Soratra} */ nom = "Rakoto";', id="string_declaration"),
        pytest.param("voky: Marina = marina;", "let /** @type {Marina} */ voky = true;", id="boolean_declaration"),
        pytest.param("x: Mety(Isa);", "let /** @type {Isa | null} */ x;", id="optional_without_value"),
        pytest.param("x: Mety(Isa) = tsisy;", "let /** @type {Isa | null} */ x = null;", id="optional_null"),
        pytest.param('x: Mety(Soratra) = "Salama";', 'let /** @type {Soratra | null} */ x = "Salama";', id="optional_value"),
        pytest.param("x: Isa = tsisy;", "let /** @type {Isa} */ x = null;", id="null_is_not_checked_statically"),
        pytest.param("xs: Lisitra(Isa) = [1, 2];", "let /** @type {Array<Isa>} */ xs = [1, 2];", id="list_declaration"),
        pytest.param(
            "m: Mety(Lisitra(Lisitra(Soratra)));",
            "let /** @type {Array<Array<Soratra>> | null} */ m;",
            id="nested_list_type",
        ),
        pytest.param("avoaka x: Isa = 1;", "let /** @type {Isa} */ x = 1;", id="export_marker_dropped"),
        # --- Literals ---
        pytest.param("42;", "42;", id="integer"),
        pytest.param("3.14;", "3.14;", id="float"),
        pytest.param('"Salama";', '"Salama";', id="string"),
        pytest.param('"a\\"b";', '"a\\"b";', id="string_with_escape"),
        pytest.param("marina;", "true;", id="true"),
        pytest.param("diso;", "false;", id="false"),
        pytest.param("tsisy;", "null;", id="null"),
        pytest.param('[1, "a", []];', '[1, "a", []];', id="list"),
        # --- Expressions ---
        pytest.param("1 + 2;", "(1 + 2);", id="addition"),
        pytest.param("1 + 2 * 3;", "(1 + (2 * 3));", id="precedence"),
        pytest.param("(1 + 2) * 3;", "((1 + 2) * 3);", id="grouping"),
        pytest.param("-x;", "(0 - x);", id="negation"),
        pytest.param("x = 42;", "x = 42;", id="assignment"),
        pytest.param("f(1, 2);", "f(1, 2);", id="call"),
        pytest.param("a == b;", "(a === b);", id="strict_equality"),
        pytest.param("a != b;", "(a !== b);", id="strict_inequality"),
        pytest.param("xs[i + 1];", "xs[(i + 1)];", id="index"),
        pytest.param("xs[0] = 1;", "xs[0] = 1;", id="index_assignment"),
        # --- Logical operators ---
        pytest.param("tsy marina;", "!(true);", id="not"),
        pytest.param("a ary b;", "(a && b);", id="and"),
        pytest.param("a na b;", "(a || b);", id="or"),
        # --- Print ---
        pytest.param('asehoy "Salama";', 'console.log("Salama");', id="print"),
        pytest.param("asehoy 1 + 2;", "console.log((1 + 2));", id="print_expression"),
        # --- Native access ---
        pytest.param('ampidiro "package:axios";', "const axios = require('axios');", id="package_require"),
        pytest.param('ampidiro "package:@angular/core";', "const core = require('@angular/core');", id="scoped_package"),
        pytest.param('ampidiro "package:my-lib";', "const my_lib = require('my-lib');", id="dashed_package"),
        pytest.param('asehoy axios.get("url");', 'console.log(axios.get("url"));', id="member_call"),
        pytest.param("asehoy math.pi;", "console.log(math.pi);", id="member"),
        pytest.param("a.b.c(1)[0];", "a.b.c(1)[0];", id="postfix_chain"),
        # --- Async ---
        pytest.param("miandry f();", "await f();", id="await"),
    ],
)
def test_single_line_translation(source, expected):
    assert compile_js(source) == expected


@pytest.mark.parametrize(
    "source, expected",
    [
        pytest.param(
            "raha x > 0 dia asehoy x; farany",
            "if (x > 0) {\n  console.log(x);\n}",
            id="if_without_double_parentheses",
        ),
        pytest.param(
            "raha x > 0 dia asehoy x; ankoatra dia asehoy 0; farany",
            "if (x > 0) {\n  console.log(x);\n} else {\n  console.log(0);\n}",
            id="if_else",
        ),
        pytest.param(
            "raha ok dia asehoy 1; farany",
            "if (ok) {\n  console.log(1);\n}",
            id="if_identifier_condition",
        ),
        pytest.param(
            "avereno raha i > 0 dia asehoy i; farany",
            "while (i > 0) {\n  console.log(i);\n}",
            id="while",
        ),
        pytest.param(
            "asa ampio(a: Isa, b: Isa): Isa dia mamoaka a + b; farany",
            "function ampio(a, b) {\n  return (a + b);\n}",
            id="function_with_parameters",
        ),
        pytest.param(
            "asa f() dia mamoaka; farany",
            "function f() {\n  return;\n}",
            id="function_bare_return",
        ),
        pytest.param("asa f() dia farany", "function f() {\n}", id="empty_function"),
        pytest.param(
            "andrasana asa f(): Isa dia mamoaka 1; farany",
            "async function f() {\n  return 1;\n}",
            id="async_function",
        ),
        pytest.param(
            """
            asa f() dia
              raha marina dia
                asehoy 1;
              farany
            farany
            """,
            "function f() {\n  if (true) {\n    console.log(1);\n  }\n}",
            id="nested_indentation",
        ),
        pytest.param(
            "x: Isa = 1;\nasehoy x;",
            "let /** @type {Isa} */ x = 1;\nconsole.log(x);",
            id="statements_joined_by_newlines",
        ),
    ],
)
def test_block_translation(source, expected):
    assert compile_js(source) == expected


def test_else_branch_present():
    assert "} else {" in compile_js("raha x > 0 dia asehoy x; ankoatra dia asehoy 0; farany")


def test_while_condition_has_single_parentheses():
    assert compile_js("avereno raha x <= 5 dia asehoy x; farany").startswith("while (x <= 5)")


# --- Module inlining ---

MODULE = """
avoaka asa ampio(a: Isa, b: Isa): Isa dia
  mamoaka a + b;
farany
miafina: Isa = 1;
avoaka pi: Isa = 3.14;
"""


def test_module_import_is_inlined_as_iife(modules):
    output = compile_js('ampidiro "math";\nasehoy ampio(1, 2);', modules({"math": MODULE}))
    assert output == (
        "const { ampio, pi } = (() => {\n"
        "  function ampio(a, b) {\n"
        "    return (a + b);\n"
        "  }\n"
        "  let /** @type {Isa} */ miafina = 1;\n"
        "  let /** @type {Isa} */ pi = 3.14;\n"
        "  return { ampio, pi };\n"
        "})();\n"
        "console.log(ampio(1, 2));"
    )


def test_module_without_exports(modules):
    output = compile_js('ampidiro "fanombohana";', modules({"fanombohana": 'asehoy "vonona";'}))
    assert output == '(() => {\n  console.log("vonona");\n})();'


def test_repeated_module_import_is_inlined_once(modules):
    calls = []
    output = compile_js('ampidiro "m";\nampidiro "m";', modules({"m": "avoaka x: Isa = 1;"}, calls))
    assert output.count("(() => {") == 1
    assert output.endswith("\n// m")
    assert calls == ["m"]


def test_nested_module_import_is_indented(modules):
    files = {
        "ivelany": 'ampidiro "anatiny";\navoaka y: Isa = x;',
        "anatiny": "avoaka x: Isa = 1;",
    }
    output = compile_js('ampidiro "ivelany";', modules(files))
    assert output == (
        "const { y } = (() => {\n"
        "  const { x } = (() => {\n"
        "    let /** @type {Isa} */ x = 1;\n"
        "    return { x };\n"
        "  })();\n"
        "  let /** @type {Isa} */ y = x;\n"
        "  return { y };\n"
        "})();"
    )


def test_module_import_inside_function_keeps_indentation(modules):
    output = compile_js('asa f() dia\n  ampidiro "m";\nfarany', modules({"m": "avoaka x: Isa = 1;"}))
    assert output == (
        "function f() {\n"
        "  const { x } = (() => {\n"
        "    let /** @type {Isa} */ x = 1;\n"
        "    return { x };\n"
        "  })();\n"
        "}"
    )


@pytest.mark.parametrize(
    "files",
    [
        pytest.param(None, id="no_resolver"),
        pytest.param({}, id="missing_module"),
        pytest.param({"m": "x: Isa;"}, id="broken_module"),
    ],
)
def test_module_import_failures(modules, files):
    resolver = modules(files) if files is not None else None
    with pytest.raises(BaikoError) as excinfo:
        compile_js('ampidiro "m";', resolver)
    error = excinfo.value
    assert not isinstance(error, BaikoRuntimeError)
    assert error.code == ErrorCode.IMPORT_FAILED
    assert '"m"' in error.message
