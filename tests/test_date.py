# tests/test_date.py

from datetime import date, datetime, timezone
from unittest.mock import patch

import pytest

from kairos import InvalidInputError, InvalidUnitError, Kairos, KairosConfig


def test_parses_supported_inputs(bare):
    expected = bare("2024-03-15")
    assert expected.to_iso() == "2024-03-15T00:00:00.000Z"

    assert bare("15.03.2024") == expected
    assert bare("2024-03-15T00:00:00Z") == expected
    assert bare("2024-03-15T02:00:00+02:00") == expected
    assert bare(date(2024, 3, 15)) == expected
    assert bare(datetime(2024, 3, 15, tzinfo=timezone.utc)) == expected
    assert bare({"year": 2024, "month": 3, "day": 15}) == expected
    assert bare(expected.value_of()) == expected
    assert bare(expected) == expected


@pytest.mark.parametrize(
    "value",
    [None, "", "invalid", "2024-02-30", "2023-13-01", "31.02.2024", "not a date",
     True, float("nan"), {"year": 2024, "month": 2}, {"year": 2024, "month": 1, "day": 1.5}, object(),
     {1: 2, "x": 3}],
)
def test_invalid_inputs_never_raise(bare, value):
    d = bare(value)
    assert not d.is_valid()
    assert d.errors
    assert d.year is None and d.day is None
    assert d.value_of() is None
    assert d.to_iso() is None
    assert d.format() == "Invalid Date"
    assert str(d) == "Invalid Date"


def test_invalid_date_raises_on_request(bare):
    with pytest.raises(InvalidInputError) as ei:
        bare("2024-02-30").raise_if_invalid()
    assert "out of range" in str(ei.value)


def test_getters(bare):
    d = bare("2024-07-04T13:05:09.250Z")
    assert (d.year, d.month, d.date, d.day) == (2024, 7, 4, 4)  # Thursday
    assert (d.hour, d.minute, d.second, d.millisecond) == (13, 5, 9, 250)
    assert d.unix() == d.value_of() // 1000


def test_unix_and_epoch(bare):
    assert bare.unix(0).to_iso() == "1970-01-01T00:00:00.000Z"
    assert bare("1970-01-02").value_of() == 86_400_000
    assert not bare.unix("soon").is_valid()


def test_now_is_valid(bare):
    assert bare().is_valid()
    assert bare.now().is_valid()


def test_now_reads_the_clock(bare):
    with patch("kairos.core.parse.now_ms", return_value=1_718_000_000_000):
        assert bare().value_of() == 1_718_000_000_000
        assert bare.now().format("YYYY-MM-DD") == "2024-06-10"


def test_is_immutable(bare):
    d = bare("2024-01-01")
    with pytest.raises(AttributeError):
        d.year = 2025
    d2 = d.add(1, "day")
    assert d.format() == "2024-01-01"
    assert d2.format() == "2024-01-02"


def test_add_month_clamps_day(bare):
    assert bare("2024-01-31").add(1, "month").format() == "2024-02-29"
    assert bare("2023-01-31").add(1, "month").format() == "2023-02-28"
    assert bare("2024-03-31").subtract(1, "M").format() == "2024-02-29"
    assert bare("2024-02-29").add(1, "year").format() == "2025-02-28"
    assert bare("2024-11-15").add(3, "months").format() == "2025-02-15"


def test_add_units(bare):
    d = bare("2024-03-10T12:00:00Z")
    assert d.add(2, "w").format() == "2024-03-24"
    assert d.add(1.5, "day").to_iso() == "2024-03-12T00:00:00.000Z"
    assert d.add(90, "minutes").to_iso() == "2024-03-10T13:30:00.000Z"
    assert d.add(1, "ms").millisecond == 1
    assert d.subtract(12, "h").to_iso() == "2024-03-10T00:00:00.000Z"


def test_add_rejects_fractional_months_and_unknown_units(bare):
    d = bare("2024-01-01")
    with pytest.raises(ValueError):
        d.add(1.5, "month")
    with pytest.raises(InvalidUnitError):
        d.add(1, "fortnight")


def test_day_arithmetic_follows_wall_clock_across_dst():
    kb = Kairos(KairosConfig.from_tz_name("Europe/Berlin"))
    d = kb("2024-03-30T12:00:00")  # clocks go forward on 2024-03-31
    assert d.add(1, "day").hour == 12
    assert d.add(24, "hours").hour == 13


def test_set_rolls_over(bare):
    d = bare("2024-01-15T10:00:00Z")
    assert d.set(month=13).format() == "2025-01-15"
    assert d.set(month=3, date=0).format() == "2024-02-29"
    assert d.set(hour=25).format("YYYY-MM-DD HH") == "2024-01-16 01"
    assert d.set(year=2023, month=6, date=30).format() == "2023-06-30"
    with pytest.raises(InvalidUnitError):
        d.set(weekday=3)


def test_start_and_end_of(bare):
    d = bare("2024-07-04T10:20:30.400Z")
    assert d.start_of("year").to_iso() == "2024-01-01T00:00:00.000Z"
    assert d.start_of("month").to_iso() == "2024-07-01T00:00:00.000Z"
    assert d.start_of("week").to_iso() == "2024-06-30T00:00:00.000Z"
    assert d.start_of("day").to_iso() == "2024-07-04T00:00:00.000Z"
    assert d.start_of("hour").to_iso() == "2024-07-04T10:00:00.000Z"
    assert d.end_of("month").to_iso() == "2024-07-31T23:59:59.999Z"
    assert d.end_of("day").to_iso() == "2024-07-04T23:59:59.999Z"
    assert d.end_of("minute").to_iso() == "2024-07-04T10:20:59.999Z"


def test_comparisons(bare):
    a, b = bare("2024-01-01"), bare("2024-01-02")
    assert a < b and b > a and a <= a
    assert a.is_before(b) and b.is_after(a)
    assert a.is_same("2024-01-01")
    assert not a.is_before("garbage")
    assert not bare(None) == bare(None)
    assert len({a, bare("2024-01-01"), b}) == 2
    assert sorted([b, a]) == [a, b]


def test_clone_is_equal_but_distinct(bare):
    a = bare("2024-01-01")
    c = a.clone()
    assert c == a and c is not a


def test_format_tokens(bare):
    d = bare("2024-07-04T15:07:08.009Z")
    assert d.format("dddd, MMMM Do YYYY") == "Thursday, July 4th 2024"
    assert d.format("ddd MMM D YY") == "Thu Jul 4 24"
    assert d.format("HH:mm:ss.SSS") == "15:07:08.009"
    assert d.format("h:mm a") == "3:07 pm"
    assert d.format("[Today is] dddd") == "Today is Thursday"


def test_conversions(bare):
    d = bare("2024-07-04T15:00:00Z")
    assert d.to_date() == date(2024, 7, 4)
    assert d.to_datetime() == datetime(2024, 7, 4, 15, tzinfo=timezone.utc)
    assert repr(d) == "KairosDate('2024-07-04T15:00:00.000Z')"


def test_fields_read_in_context_zone():
    tokyo = Kairos(KairosConfig.from_tz_name("Asia/Tokyo"))
    d = tokyo("2024-07-04T20:00:00Z")
    assert (d.date, d.hour) == (5, 5)
    assert tokyo("2024-07-05").to_iso() == "2024-07-04T15:00:00.000Z"
