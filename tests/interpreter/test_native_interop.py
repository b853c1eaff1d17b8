from types import SimpleNamespace

import pytest

from baiko.exceptions import BaikoRuntimeError, ErrorCode
from baiko.interpreter.core.native import NativeBridge
from baiko.interpreter.core.values import NativeValue


@pytest.fixture
def store():
    return {"anarana": "Rakoto", "taona": 30}


@pytest.fixture
def host(store):
    """A package resolver serving a few host objects by identifier."""

    async def fetch(n):
        return [n, n + 1]

    def fail(*args):
        raise ValueError("ratsy ny fangatahana")

    packages = {
        "store": store,
        "kit": SimpleNamespace(version="1.2", fetch=fetch, fail=fail, total=sum, count=3),
        "greet": lambda name: "Salama " + name,
    }
    return packages.__getitem__


def test_mapping_member(run_baiko, host):
    assert run_baiko('ampidiro "package:store";\nasehoy store.anarana;', package_resolver=host) == ["Rakoto"]


def test_attribute_member(run_baiko, host):
    assert run_baiko('ampidiro "package:kit";\nasehoy kit.version;', package_resolver=host) == ["1.2"]


def test_scalar_member_is_a_runtime_value(run_baiko, host):
    code = 'ampidiro "package:store";\nt: Isa = store.taona;\nasehoy t + 1;'
    assert run_baiko(code, package_resolver=host) == ["31"]


def test_calling_a_native_function(run_baiko, host):
    assert run_baiko('ampidiro "package:greet";\nasehoy greet("Rabe");', package_resolver=host) == ["Salama Rabe"]


def test_member_call_converts_list_arguments(run_baiko, host):
    assert run_baiko('ampidiro "package:kit";\nasehoy kit.total([1, 2, 3]);', package_resolver=host) == ["6"]


def test_member_call_on_python_module(run_baiko):
    assert run_baiko('ampidiro "package:math";\nasehoy math.pow(2, 3);') == ["8"]


def test_awaiting_a_host_coroutine(run_baiko, host):
    code = """
        ampidiro "package:kit";
        xs: Lisitra(Isa) = miandry kit.fetch(4);
        asehoy xs[1];
        asehoy xs;
    """
    assert run_baiko(code, package_resolver=host) == ["5", "[4, 5]"]


def test_native_values_print_as_json(run_baiko, host):
    assert run_baiko('ampidiro "package:store";\nasehoy store;', package_resolver=host) == [
        '{"anarana": "Rakoto", "taona": 30}'
    ]


def test_native_index_read_and_write(run_baiko, host, store):
    code = """
        ampidiro "package:store";
        store["taona"] = 31;
        asehoy store["taona"];
    """
    assert run_baiko(code, package_resolver=host) == ["31"]
    assert store["taona"] == 31


def test_native_arithmetic_is_empty(run_baiko, host):
    assert run_baiko('ampidiro "package:store";\nasehoy store + 1;\nasehoy store * 2;', package_resolver=host) == [
        "tsisy",
        "tsisy",
    ]


def test_native_satisfies_any_declared_type(run_baiko, host):
    assert run_baiko('ampidiro "package:kit";\nk: Isa = kit;\nasehoy k.count;', package_resolver=host) == ["3"]


# --- Failures ---


@pytest.mark.parametrize(
    "code",
    [
        pytest.param("x: Isa = 1;\nasehoy x.y;", id="member_of_number"),
        pytest.param('s: Soratra = "a";\nasehoy s.length;', id="member_of_string"),
        pytest.param("xs: Lisitra(Isa) = [];\nxs.push(1);", id="method_of_list"),
    ],
)
def test_member_on_non_native(run_baiko, code):
    with pytest.raises(BaikoRuntimeError) as excinfo:
        run_baiko(code)
    assert excinfo.value.code == ErrorCode.MEMBER_ON_NON_NATIVE
    assert "tsy natif" in excinfo.value.message


@pytest.mark.parametrize(
    "code",
    [
        pytest.param("asehoy store.adiresy;", id="mapping"),
        pytest.param("asehoy kit.adiresy;", id="attribute"),
        pytest.param("kit.adiresy();", id="method"),
    ],
)
def test_unknown_native_member(run_baiko, host, code):
    with pytest.raises(BaikoRuntimeError) as excinfo:
        run_baiko('ampidiro "package:store";\nampidiro "package:kit";\n' + code, package_resolver=host)
    assert excinfo.value.code == ErrorCode.UNKNOWN_NATIVE_MEMBER
    assert '".adiresy"' in excinfo.value.message


def test_native_call_failure(run_baiko, host):
    with pytest.raises(BaikoRuntimeError) as excinfo:
        run_baiko('ampidiro "package:kit";\nkit.fail(1);', package_resolver=host)
    error = excinfo.value
    assert error.code == ErrorCode.NATIVE_CALL_FAILED
    assert '"kit.fail"' in error.message
    assert "ratsy ny fangatahana" in error.message
    assert isinstance(error.__cause__, ValueError)


def test_calling_a_non_callable_member(run_baiko, host):
    with pytest.raises(BaikoRuntimeError) as excinfo:
        run_baiko('ampidiro "package:kit";\nkit.count();', package_resolver=host)
    assert excinfo.value.code == ErrorCode.NOT_CALLABLE
    assert '"kit.count"' in excinfo.value.message


def test_missing_native_key(run_baiko, host):
    with pytest.raises(BaikoRuntimeError) as excinfo:
        run_baiko('ampidiro "package:store";\nasehoy store["tsy_misy"];', package_resolver=host)
    assert excinfo.value.code == ErrorCode.NATIVE_CALL_FAILED


# --- Bridge ---


@pytest.mark.parametrize(
    "obj, expected",
    [
        pytest.param(None, None, id="none"),
        pytest.param(True, True, id="bool"),
        pytest.param(3.5, 3.5, id="float"),
        pytest.param("a", "a", id="str"),
        pytest.param((1, [2, "b"]), [1, [2, "b"]], id="nested_sequences"),
    ],
)
def test_from_host_keeps_runtime_shapes(obj, expected):
    assert NativeBridge().from_host(obj) == expected


def test_from_host_wraps_other_objects():
    bridge = NativeBridge()
    obj = {"a": 1}
    wrapped = bridge.from_host(obj)
    assert isinstance(wrapped, NativeValue) and wrapped.value is obj
    assert bridge.from_host(wrapped) is wrapped
    assert bridge.from_host([obj])[0].value is obj


def test_to_host_unwraps_natives_inside_lists():
    obj = object()
    assert NativeBridge().to_host([1, NativeValue(obj)]) == [1, obj]


def test_substitute_bridge_is_used(run_baiko):
    class RecordingBridge(NativeBridge):
        def __init__(self):
            self.calls = []

        def call(self, fn, args):
            self.calls.append(args)
            return super().call(fn, args)

    bridge = RecordingBridge()
    output = run_baiko('ampidiro "package:math";\nasehoy math.floor(1.5);', native_bridge=bridge)
    assert output == ["1"]
    assert bridge.calls == [[1.5]]


def test_call_member_looks_up_then_calls():
    bridge = NativeBridge()
    assert bridge.call_member({"ampio": lambda a, b: a + b}, "ampio", [1, 2]) == 3
    with pytest.raises(AttributeError):
        bridge.call_member(object(), "tsy_misy", [])


def test_member_calls_go_through_call_member(run_baiko, host):
    class TracingBridge(NativeBridge):
        def __init__(self):
            self.members = []

        def call_member(self, obj, name, args):
            self.members.append(name)
            return super().call_member(obj, name, args)

    bridge = TracingBridge()
    output = run_baiko('ampidiro "package:kit";\nasehoy kit.total([1, 2, 3]);', package_resolver=host, native_bridge=bridge)
    assert output == ["6"]
    assert bridge.members == ["total"]
