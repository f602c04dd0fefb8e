# tests/test_api.py

from datetime import date

import pytest

import kairos
from kairos import api


@pytest.fixture
def default_ctx():
    """Swap in a fresh default context for the duration of a test."""
    saved = kairos.get_context()
    ctx = kairos.build_default_context()
    kairos.set_context(ctx)
    yield ctx
    kairos.set_context(saved)


def test_import_initializes_default_context():
    ctx = kairos.get_context()
    assert ctx.is_plugin_loaded("holiday-engine")
    assert ctx.is_plugin_loaded("business")
    assert ctx.locales.current_code == "en-US"


def test_module_helpers(default_ctx):
    assert kairos.kairos("2024-07-04").is_holiday()
    assert kairos.is_holiday("2024-07-04")
    assert kairos.is_holiday(date(2024, 11, 29))
    assert not kairos.is_holiday(date(2024, 11, 29), kind="federal")
    assert kairos.get_holiday("2024-12-25").name == "Christmas Day"
    assert kairos.next_holiday("2024-12-25").date == date(2025, 1, 1)
    assert kairos.previous_holiday("2024-01-02").date == date(2024, 1, 1)
    assert len(kairos.holidays(2024, kind="federal")) == 11
    assert kairos.easter(2024) == date(2024, 3, 31)
    assert kairos.easter(2024, orthodox=True) == date(2024, 5, 5)
    assert kairos.now().is_valid()


def test_locale_switch(default_ctx):
    assert kairos.set_locale("de-DE") == "de-DE"
    assert kairos.get_holiday("2024-10-03").name == "Tag der Deutschen Einheit"
    assert kairos.get_holiday("2024-07-04", locale="en-US").name == "Independence Day"
    assert kairos.available_locales() == ["de-DE", "en-US", "ja-JP", "zh-CN"]


def test_invalid_input_raises(default_ctx):
    with pytest.raises(kairos.InvalidInputError):
        kairos.is_holiday("2024-02-30")


def test_use_and_list_plugins(default_ctx):
    kairos.use(kairos.Plugin("extra", methods={"double_year": lambda self: self.year * 2}))
    assert "extra" in kairos.list_plugins()
    assert kairos.kairos("2024-01-01").double_year() == 4048


def test_uninitialized_context(monkeypatch):
    monkeypatch.setattr(api, "_context", None)
    with pytest.raises(RuntimeError):
        kairos.kairos("2024-01-01")
