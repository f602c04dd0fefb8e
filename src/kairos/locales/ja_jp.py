from __future__ import annotations

from datetime import date, timedelta, timezone

from ..core.locale import Locale
from ..holiday.calculators.custom import autumnal_equinox, vernal_equinox
from ..holiday.rules import SUNDAY_TO_MONDAY, custom, fixed, nth_weekday

JST = timezone(timedelta(hours=9), "JST")


def vernal_equinox_day(year: int) -> date:
    return vernal_equinox(year, JST)


def autumnal_equinox_day(year: int) -> date:
    return autumnal_equinox(year, JST)


def _national(name: str, month: int, day: int, id: str):
    return fixed(name, month, day, id=id, observed=SUNDAY_TO_MONDAY)


# A national holiday falling on a Sunday is observed on the following Monday
# (furikae kyujitsu).
HOLIDAYS = (
    _national("元日", 1, 1, "new-years-day"),
    nth_weekday("成人の日", 1, 1, 2, id="coming-of-age-day"),
    _national("建国記念の日", 2, 11, "national-foundation-day"),
    _national("天皇誕生日", 2, 23, "emperors-birthday"),
    custom("春分の日", vernal_equinox_day, id="vernal-equinox-day", observed=SUNDAY_TO_MONDAY),
    _national("昭和の日", 4, 29, "showa-day"),
    _national("憲法記念日", 5, 3, "constitution-day"),
    _national("みどりの日", 5, 4, "greenery-day"),
    _national("こどもの日", 5, 5, "childrens-day"),
    nth_weekday("海の日", 7, 1, 3, id="marine-day"),
    _national("山の日", 8, 11, "mountain-day"),
    nth_weekday("敬老の日", 9, 1, 3, id="respect-for-the-aged-day"),
    custom("秋分の日", autumnal_equinox_day, id="autumnal-equinox-day", observed=SUNDAY_TO_MONDAY),
    nth_weekday("スポーツの日", 10, 1, 2, id="sports-day"),
    _national("文化の日", 11, 3, "culture-day"),
    _national("勤労感謝の日", 11, 23, "labor-thanksgiving-day"),
)


def _ordinal(n: int) -> str:
    return f"{n}日"


def _meridiem(hour: int, minute: int, is_lower: bool) -> str:
    return "午前" if hour < 12 else "午後"


JA_JP = Locale(
    code="ja-JP",
    name="日本語 (日本)",
    months=tuple(f"{i}月" for i in range(1, 13)),
    months_short=tuple(f"{i}月" for i in range(1, 13)),
    weekdays=("日曜日", "月曜日", "火曜日", "水曜日", "木曜日", "金曜日", "土曜日"),
    weekdays_short=("日", "月", "火", "水", "木", "金", "土"),
    weekdays_min=("日", "月", "火", "水", "木", "金", "土"),
    formats={
        "LT": "HH:mm",
        "LTS": "HH:mm:ss",
        "L": "YYYY/MM/DD",
        "LL": "YYYY年M月D日",
        "LLL": "YYYY年M月D日 HH:mm",
        "LLLL": "YYYY年M月D日 dddd HH:mm",
    },
    ordinal=_ordinal,
    meridiem=_meridiem,
    holidays=HOLIDAYS,
    holiday_sets={"public": HOLIDAYS},
)
