# tests/test_engine.py

import logging
from datetime import date

import pytest

from kairos import (
    CalculatorNotFoundError,
    CycleDetectedError,
    InvalidRuleError,
    Kairos,
    KairosConfig,
    ObservedRule,
    RuleSet,
)
from kairos.holiday import HOLIDAY_PLUGINS, apply_observed, holiday_engine_plugin
from kairos.holiday.rules import MONDAY_IF_WEEKEND, custom, easter, fixed, nth_weekday, relative


@pytest.fixture
def hk():
    """Context with the engine and every calculator, no locale."""
    return Kairos().use(list(HOLIDAY_PLUGINS))


@pytest.fixture
def engine(hk):
    return hk.holiday_engine


# --- observed-date policy ---

def test_apply_observed_substitute():
    sat, sun = date(2026, 7, 4), date(2026, 7, 5)
    assert apply_observed(MONDAY_IF_WEEKEND, sat) == [date(2026, 7, 6)]
    assert apply_observed(MONDAY_IF_WEEKEND, sun) == [date(2026, 7, 6)]
    back = ObservedRule("substitute", direction="backward")
    assert apply_observed(back, sun) == [date(2026, 7, 3)]
    assert apply_observed(MONDAY_IF_WEEKEND, date(2026, 7, 3)) == [date(2026, 7, 3)]
    assert apply_observed(None, sat) == [sat]


def test_apply_observed_nearest_and_bridge():
    nearest = ObservedRule("nearest-weekday")
    assert apply_observed(nearest, date(2026, 7, 4)) == [date(2026, 7, 3)]
    assert apply_observed(nearest, date(2026, 7, 5)) == [date(2026, 7, 6)]
    bridge = ObservedRule("bridge")
    assert apply_observed(bridge, date(2026, 7, 4)) == [date(2026, 7, 4), date(2026, 7, 6)]


def test_apply_observed_at_calendar_ends():
    last = date(9999, 12, 31)  # Friday
    fri_sat = frozenset({5, 6})
    assert apply_observed(ObservedRule("substitute", weekends=fri_sat), last) == []
    assert apply_observed(ObservedRule("nearest-weekday", weekends=fri_sat), last) == [date(9999, 12, 30)]
    assert apply_observed(ObservedRule("bridge", weekends=fri_sat), last) == [last]
    first = date(1, 1, 1)  # Monday
    back = ObservedRule("substitute", weekends=frozenset({1}), direction="backward")
    assert apply_observed(back, first) == []


def test_observed_rule_near_year_9999(engine):
    rule = fixed("Year End", 12, 31, observed=ObservedRule("substitute", weekends=frozenset({5, 6})))
    assert engine.holidays_for_year(9999, RuleSet.of([rule])) == []
    assert not engine.is_holiday(date(9999, 12, 31), RuleSet.of([rule]))

    long_rule = fixed("Year End", 12, 30, duration=3)
    days = [o.date for o in engine.holidays_for_year(9999, RuleSet.of([long_rule]))]
    assert days == [date(9999, 12, 30), date(9999, 12, 31)]


def test_saturday_holiday_observed_on_monday(engine):
    rs = RuleSet.of([fixed("Independence Day", 7, 4, observed=MONDAY_IF_WEEKEND)])
    assert engine.is_holiday(date(2026, 7, 6), rs)
    assert not engine.is_holiday(date(2026, 7, 4), rs)
    occ = engine.get_holiday(date(2026, 7, 6), rs)
    assert occ.nominal_date == date(2026, 7, 4)
    assert occ.observed


def test_observed_shift_crosses_year_boundary(engine):
    rs = RuleSet.of([fixed("New Year", 1, 1, observed=ObservedRule("nearest-weekday"))])
    # 2022-01-01 is a Saturday
    assert [o.date for o in engine.holidays_for_year(2021, rs)] == [date(2021, 1, 1), date(2021, 12, 31)]
    assert engine.holidays_for_year(2022, rs) == []


# --- rule kinds ---

def test_fixed_nth_and_easter(engine):
    rs = RuleSet.of([
        fixed("Leap Day", 2, 29),
        nth_weekday("Thanksgiving", 11, 4, 4),
        nth_weekday("Memorial Day", 5, 1, -1),
        easter("Good Friday", -2),
        easter("Orthodox Easter", 0, orthodox=True),
    ])
    got = {o.name: o.date for o in engine.holidays_for_year(2024, rs)}
    assert got == {
        "Leap Day": date(2024, 2, 29),
        "Thanksgiving": date(2024, 11, 28),
        "Memorial Day": date(2024, 5, 27),
        "Good Friday": date(2024, 3, 29),
        "Orthodox Easter": date(2024, 5, 5),
    }
    assert "Leap Day" not in {o.name for o in engine.holidays_for_year(2023, rs)}


def test_relative_rule_resolves_by_id_name_and_case(engine):
    rs = RuleSet.of([
        nth_weekday("Thanksgiving", 11, 4, 4, id="thanksgiving"),
        relative("Black Friday", "thanksgiving", 1),
        relative("Cyber Monday", "Black Friday", 3),
        relative("Shouty", "BLACK FRIDAY", -1),
    ])
    got = {o.name: o.date for o in engine.holidays_for_year(2024, rs)}
    assert got["Black Friday"] == date(2024, 11, 29)
    assert got["Cyber Monday"] == date(2024, 12, 2)
    assert got["Shouty"] == date(2024, 11, 28)


def test_relative_cycle_is_detected(engine):
    rs = RuleSet.of([
        relative("A", "b", 1, id="a"),
        relative("B", "c", 1, id="b"),
        relative("C", "a", 1, id="c"),
    ])
    with pytest.raises(CycleDetectedError) as ei:
        engine.holidays_for_year(2024, rs)
    assert ei.value.chain == ("a", "b", "c", "a")
    assert "a -> b -> c -> a" in str(ei.value)


def test_self_reference_is_a_cycle(engine):
    rs = RuleSet.of([relative("Loop", "loop", 1, id="loop")])
    with pytest.raises(CycleDetectedError):
        engine.is_holiday(date(2024, 1, 1), rs)


def test_unresolved_reference(engine):
    rs = RuleSet.of([relative("Orphan", "missing", 1)])
    with pytest.raises(InvalidRuleError, match="missing"):
        engine.holidays_for_year(2024, rs)


def test_missing_calculator_is_reported():
    k = Kairos().use(holiday_engine_plugin)
    rs = RuleSet.of([fixed("New Year", 1, 1)])
    with pytest.raises(CalculatorNotFoundError) as ei:
        k.holiday_engine.is_holiday(date(2024, 1, 1), rs)
    assert ei.value.kind == "fixed"


def test_custom_rule_results(engine):
    ok = custom("Midsummer", lambda y: date(y, 6, 24))
    skip = custom("Odd Years", lambda y: date(y, 3, 3) if y % 2 else None)
    assert engine.calculate(ok, 2024) == date(2024, 6, 24)
    assert engine.calculate(skip, 2024) is None
    assert engine.calculate(skip, 2025) == date(2025, 3, 3)

    bad = custom("Bad", lambda y: "2024-01-01")
    with pytest.raises(InvalidRuleError):
        engine.calculate(bad, 2024)
    failing = custom("Failing", lambda y: 1 / 0)
    with pytest.raises(InvalidRuleError, match="Failing"):
        engine.calculate(failing, 2024)


def test_duration_and_inactive(engine):
    rs = RuleSet.of([
        fixed("Festival", 10, 1, duration=3),
        fixed("Retired", 10, 10, active=False),
    ])
    days = [o.date for o in engine.holidays_for_year(2024, rs)]
    assert days == [date(2024, 10, 1), date(2024, 10, 2), date(2024, 10, 3)]
    assert not any(o.observed for o in engine.holidays_for_year(2024, rs))


def test_several_holidays_on_one_day(engine):
    rs = RuleSet.of([fixed("A", 5, 1), fixed("B", 5, 1)])
    assert [o.name for o in engine.get_holidays(date(2024, 5, 1), rs)] == ["A", "B"]
    assert engine.get_holiday(date(2024, 5, 1), rs).name == "A"
    assert engine.get_holidays(date(2024, 5, 2), rs) == []


# --- navigation and ranges ---

def test_navigation_is_strict(engine):
    rs = RuleSet.of([fixed("A", 3, 1), fixed("B", 9, 1)])
    assert engine.next_holiday(date(2024, 3, 1), rs).date == date(2024, 9, 1)
    assert engine.next_holiday(date(2024, 9, 1), rs).date == date(2025, 3, 1)
    assert engine.previous_holiday(date(2024, 3, 1), rs).date == date(2023, 9, 1)
    assert engine.previous_holiday(date(2024, 9, 2), rs).date == date(2024, 9, 1)


def test_navigation_is_bounded(caplog):
    rs = RuleSet.of([fixed("Leap Day", 2, 29)])
    k = Kairos(KairosConfig(max_lookahead_years=5)).use(list(HOLIDAY_PLUGINS))
    assert k.holiday_engine.next_holiday(date(2024, 3, 1), rs).date == date(2028, 2, 29)

    short = Kairos(KairosConfig(max_lookahead_years=2)).use(list(HOLIDAY_PLUGINS))
    with caplog.at_level(logging.DEBUG, logger="kairos.holiday.engine"):
        assert short.holiday_engine.next_holiday(date(2024, 3, 1), rs) is None
        assert short.holiday_engine.previous_holiday(date(2024, 2, 1), rs) is None
    assert any("no holiday within" in r.getMessage() for r in caplog.records)


def test_empty_rule_set_navigation(engine):
    assert engine.next_holiday(date(2024, 1, 1)) is None
    assert engine.holidays_for_year(2024) == []


def test_holidays_in_range(engine):
    rs = RuleSet.of([fixed("A", 12, 31), fixed("B", 1, 1)])
    got = engine.holidays_in_range(date(2024, 12, 31), date(2025, 1, 1), rs)
    assert [(o.name, o.date) for o in got] == [("A", date(2024, 12, 31)), ("B", date(2025, 1, 1))]
    assert engine.holidays_in_range(date(2025, 1, 2), date(2024, 1, 1), rs) == []


def test_year_tables_are_cached(engine):
    rs = RuleSet.of([fixed("A", 5, 1)])
    engine.is_holiday(date(2024, 5, 1), rs)
    before = engine.cache_stats()
    engine.is_holiday(date(2024, 5, 2), rs)
    after = engine.cache_stats()
    assert after.hits == before.hits + 1
    assert after.size == before.size

    engine.clear_cache()
    assert engine.cache_stats().size == 0


def test_date_extension_methods(hk):
    rs = RuleSet.of([fixed("A", 5, 1), fixed("B", 6, 1)])
    d = hk("2024-05-01")
    assert d.is_holiday(rs)
    assert d.get_holiday(rs).name == "A"
    assert [o.name for o in d.get_holidays(rs)] == ["A"]
    assert d.next_holiday(rs).format() == "2024-06-01"
    assert d.previous_holiday(rs).format() == "2023-06-01"
    assert not hk("garbage").is_holiday(rs)
    assert hk("garbage").next_holiday(rs) is None


def test_engine_statics(hk):
    rs = RuleSet.of([fixed("A", 5, 1)])
    assert [o.date for o in hk.get_year_holidays(2024, rs)] == [date(2024, 5, 1)]
    got = hk.get_holidays_in_range("2023-01-01", "2024-12-31", rs)
    assert [o.date.year for o in got] == [2023, 2024]
    assert hk.get_easter(2024) == date(2024, 3, 31)
    assert hk.get_orthodox_easter(2024) == date(2024, 5, 5)
    assert hk.holiday_engine.calculators() == sorted(
        ["custom", "easter-based", "fixed", "lunar-based", "nth-weekday", "relative"]
    )
