from __future__ import annotations

from ..core.locale import Locale
from ..holiday.rules import fixed, lunar

HOLIDAYS = (
    fixed("元旦", 1, 1, id="new-years-day"),
    lunar("春节", 1, 1, id="spring-festival", duration=3),
    fixed("清明节", 4, 5, id="qingming-festival"),
    fixed("劳动节", 5, 1, id="labour-day"),
    lunar("端午节", 5, 5, id="dragon-boat-festival"),
    lunar("中秋节", 8, 15, id="mid-autumn-festival"),
    fixed("国庆节", 10, 1, id="national-day", duration=3),
)

TRADITIONAL = (
    lunar("除夕", 1, 1, offset=-1, id="new-years-eve"),
    lunar("元宵节", 1, 15, id="lantern-festival"),
    lunar("七夕", 7, 7, id="qixi-festival"),
    lunar("重阳节", 9, 9, id="double-ninth-festival"),
)


def _ordinal(n: int) -> str:
    return f"{n}日"


def _meridiem(hour: int, minute: int, is_lower: bool) -> str:
    hm = hour * 100 + minute
    if hm < 600:
        return "凌晨"
    if hm < 900:
        return "早上"
    if hm < 1130:
        return "上午"
    if hm < 1230:
        return "中午"
    if hm < 1800:
        return "下午"
    return "晚上"


ZH_CN = Locale(
    code="zh-CN",
    name="中文 (中国)",
    months=tuple(f"{i}月" for i in range(1, 13)),
    months_short=tuple(f"{i}月" for i in range(1, 13)),
    weekdays=("星期日", "星期一", "星期二", "星期三", "星期四", "星期五", "星期六"),
    weekdays_short=("周日", "周一", "周二", "周三", "周四", "周五", "周六"),
    weekdays_min=("日", "一", "二", "三", "四", "五", "六"),
    formats={
        "LT": "HH:mm",
        "LTS": "HH:mm:ss",
        "L": "YYYY/MM/DD",
        "LL": "YYYY年M月D日",
        "LLL": "YYYY年M月D日 HH:mm",
        "LLLL": "YYYY年M月D日dddd HH:mm",
    },
    ordinal=_ordinal,
    meridiem=_meridiem,
    holidays=HOLIDAYS,
    holiday_sets={"public": HOLIDAYS, "traditional": TRADITIONAL},
)
