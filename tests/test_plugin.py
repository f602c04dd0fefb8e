# tests/test_plugin.py

import logging

import pytest

from kairos import Kairos, MissingDependencyError, Plugin, PluginInstallError
from kairos.core.plugin import PluginRegistry


def _double_year(self):
    return self.year * 2


def test_methods_are_late_bound(bare):
    d = bare("2024-01-01")  # created before the install
    with pytest.raises(AttributeError):
        d.double_year()

    bare.use(Plugin("doubler", methods={"double_year": _double_year}))
    assert d.double_year() == 4048
    assert "double_year" in dir(d)


def test_install_hook_receives_handle_and_utils(bare):
    seen = {}

    def install(kairos, utils):
        seen["handle"] = kairos
        seen["utils"] = utils
        kairos.add_static({"answer": 42})

    bare.use(Plugin("answer", install=install))
    assert seen["handle"] is bare
    assert seen["utils"].cache is bare.cache
    assert seen["utils"].validate_input(2024, "year")
    assert not seen["utils"].validate_input("2024", "number")
    assert bare.answer == 42


def test_duplicate_install_is_skipped(bare):
    calls = []
    p = Plugin("once", install=lambda k, u: calls.append(1))
    assert bare.registry.install([p, p], handle=bare) == ["once"]
    bare.use(Plugin("once", install=lambda k, u: calls.append(2)))
    assert calls == [1]
    assert bare.plugins == ["once"]


def test_missing_dependency_leaves_registry_unchanged(bare):
    p = Plugin("child", dependencies=("parent",), methods={"child_method": _double_year})
    with pytest.raises(MissingDependencyError) as ei:
        bare.use(p)
    assert ei.value.dependency == "parent"
    assert not bare.is_plugin_loaded("child")
    assert bare.registry.get_method("child_method") is None


def test_dependency_order_within_one_call(bare):
    parent = Plugin("parent")
    child = Plugin("child", dependencies=("parent",))
    bare.use([parent, child])
    assert bare.plugins == ["parent", "child"]


def test_failed_install_rolls_back(bare):
    def boom(kairos, utils):
        raise RuntimeError("nope")

    p = Plugin("broken", install=boom, methods={"broken_method": _double_year}, static_methods={"broken_static": 1})
    with pytest.raises(PluginInstallError) as ei:
        bare.use(p)
    assert "nope" in str(ei.value)
    assert bare.registry.get_method("broken_method") is None
    assert not bare.registry.has_static("broken_static")
    assert not bare.is_plugin_loaded("broken")


def test_failed_install_rolls_back_nested_installs(bare):
    inner = Plugin("inner", methods={"inner_method": _double_year})

    def install_then_fail(kairos, utils):
        kairos.use(inner)
        raise RuntimeError("nope")

    with pytest.raises(PluginInstallError):
        bare.use(Plugin("outer", install=install_then_fail))
    assert not bare.is_plugin_loaded("inner")
    assert bare.registry.get_method("inner_method") is None

    bare.use(inner)
    assert bare.is_plugin_loaded("inner")
    assert bare("2024-01-01").inner_method() == 4048


def test_last_writer_wins_and_logs(bare, caplog):
    bare.use(Plugin("first", methods={"tag": lambda self: "first"}))
    with caplog.at_level(logging.DEBUG, logger="kairos.core.plugin"):
        bare.use(Plugin("second", methods={"tag": lambda self: "second"}))
    assert bare("2024-01-01").tag() == "second"
    assert any("shadowed" in r.getMessage() for r in caplog.records)


def test_builtin_members_win_over_extensions(bare, caplog):
    with caplog.at_level(logging.WARNING, logger="kairos.core.context"):
        bare.extend({"year": lambda self: "plugin"})
    assert bare("2024-01-01").year == 2024
    assert any("hidden" in r.getMessage() for r in caplog.records)


def test_rejects_bad_extension_tables():
    reg = PluginRegistry()
    with pytest.raises(ValueError):
        reg.extend({"_private": _double_year})
    with pytest.raises(TypeError):
        reg.extend({"not_callable": 3})
    with pytest.raises(TypeError):
        reg.install(["not a plugin"])
    with pytest.raises(ValueError):
        Plugin("")


def test_get_plugin_and_unknown_static(bare):
    p = Plugin("x", version="1.2.3", description="test plugin")
    bare.use(p)
    assert bare.registry.get_plugin("x") is p
    with pytest.raises(KeyError, match="Available"):
        bare.registry.get_plugin("y")
    with pytest.raises(AttributeError):
        bare.no_such_static


def test_contexts_are_isolated():
    a, b = Kairos(), Kairos()
    a.use(Plugin("doubler", methods={"double_year": _double_year}))
    assert a("2024-01-01").double_year() == 4048
    assert not b.is_plugin_loaded("doubler")
    with pytest.raises(AttributeError):
        b("2024-01-01").double_year()
