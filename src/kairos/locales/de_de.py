from __future__ import annotations

from datetime import date, timedelta

from ..core.locale import Locale
from ..core.time import weekday
from ..holiday.rules import custom, easter, fixed


def repentance_day(year: int) -> date:
    """Buss- und Bettag: the last Wednesday before November 23."""
    d = date(year, 11, 22)
    return d - timedelta(days=(weekday(d) - 3) % 7)


HOLIDAYS = (
    fixed("Neujahr", 1, 1, id="new-years-day"),
    easter("Karfreitag", -2, id="good-friday"),
    easter("Ostersonntag", 0, id="easter-sunday"),
    easter("Ostermontag", 1, id="easter-monday"),
    fixed("Tag der Arbeit", 5, 1, id="labour-day"),
    easter("Christi Himmelfahrt", 39, id="ascension-day"),
    easter("Pfingstsonntag", 49, id="whit-sunday"),
    easter("Pfingstmontag", 50, id="whit-monday"),
    fixed("Tag der Deutschen Einheit", 10, 3, id="german-unity-day"),
    fixed("1. Weihnachtstag", 12, 25, id="christmas-day"),
    fixed("2. Weihnachtstag", 12, 26, id="boxing-day"),
)

# Nationwide public holidays; Easter Sunday and Whit Sunday fall on Sundays
# anyway and are not statutory everywhere.
FEDERAL_IDS = frozenset(
    {
        "new-years-day",
        "good-friday",
        "easter-monday",
        "labour-day",
        "ascension-day",
        "whit-monday",
        "german-unity-day",
        "christmas-day",
        "boxing-day",
    }
)

_EPIPHANY = fixed("Heilige Drei Könige", 1, 6, id="epiphany")
_WOMENS_DAY = fixed("Internationaler Frauentag", 3, 8, id="womens-day")
_CORPUS_CHRISTI = easter("Fronleichnam", 60, id="corpus-christi")
_ASSUMPTION = fixed("Mariä Himmelfahrt", 8, 15, id="assumption-day")
_CHILDRENS_DAY = fixed("Weltkindertag", 9, 20, id="world-childrens-day")
_REFORMATION = fixed("Reformationstag", 10, 31, id="reformation-day")
_ALL_SAINTS = fixed("Allerheiligen", 11, 1, id="all-saints-day")
_REPENTANCE = custom("Buß- und Bettag", repentance_day, id="repentance-day")

STATES = {
    "BW": (_EPIPHANY, _CORPUS_CHRISTI, _ALL_SAINTS),
    "BY": (_EPIPHANY, _CORPUS_CHRISTI, _ASSUMPTION, _ALL_SAINTS),
    "BE": (_WOMENS_DAY,),
    "BB": (_REFORMATION,),
    "HB": (_REFORMATION,),
    "HH": (_REFORMATION,),
    "HE": (_CORPUS_CHRISTI,),
    "MV": (_WOMENS_DAY, _REFORMATION),
    "NI": (_REFORMATION,),
    "NW": (_CORPUS_CHRISTI, _ALL_SAINTS),
    "RP": (_CORPUS_CHRISTI, _ALL_SAINTS),
    "SL": (_CORPUS_CHRISTI, _ASSUMPTION, _ALL_SAINTS),
    "SN": (_REFORMATION, _REPENTANCE),
    "ST": (_EPIPHANY, _REFORMATION),
    "SH": (_REFORMATION,),
    "TH": (_CHILDRENS_DAY, _REFORMATION),
}


def _ordinal(n: int) -> str:
    return f"{n}."


def _meridiem(hour: int, minute: int, is_lower: bool) -> str:
    return ""


DE_DE = Locale(
    code="de-DE",
    name="Deutsch (Deutschland)",
    months=(
        "Januar", "Februar", "März", "April", "Mai", "Juni",
        "Juli", "August", "September", "Oktober", "November", "Dezember",
    ),
    months_short=(
        "Jan.", "Feb.", "März", "Apr.", "Mai", "Juni",
        "Juli", "Aug.", "Sep.", "Okt.", "Nov.", "Dez.",
    ),
    weekdays=("Sonntag", "Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag", "Samstag"),
    weekdays_short=("So.", "Mo.", "Di.", "Mi.", "Do.", "Fr.", "Sa."),
    weekdays_min=("So", "Mo", "Di", "Mi", "Do", "Fr", "Sa"),
    formats={
        "LT": "HH:mm",
        "LTS": "HH:mm:ss",
        "L": "DD.MM.YYYY",
        "LL": "D. MMMM YYYY",
        "LLL": "D. MMMM YYYY HH:mm",
        "LLLL": "dddd, D. MMMM YYYY HH:mm",
    },
    ordinal=_ordinal,
    meridiem=_meridiem,
    holidays=HOLIDAYS,
    holiday_sets={"federal": tuple(h for h in HOLIDAYS if h.id in FEDERAL_IDS)},
    regions=STATES,
)
