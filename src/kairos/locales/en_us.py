from __future__ import annotations

from ..core.locale import Locale
from ..holiday.rules import NEAREST_WEEKDAY, easter, fixed, nth_weekday, relative

# Federal fixed-date holidays falling on a weekend are observed on the
# nearest weekday (Saturday -> Friday, Sunday -> Monday).
HOLIDAYS = (
    fixed("New Year's Day", 1, 1, id="new-years-day", observed=NEAREST_WEEKDAY),
    nth_weekday("Martin Luther King Jr. Day", 1, 1, 3, id="martin-luther-king-day"),
    nth_weekday("Presidents' Day", 2, 1, 3, id="presidents-day"),
    easter("Good Friday", -2, id="good-friday"),
    easter("Easter Sunday", 0, id="easter-sunday"),
    easter("Easter Monday", 1, id="easter-monday"),
    nth_weekday("Mother's Day", 5, 0, 2, id="mothers-day"),
    nth_weekday("Memorial Day", 5, 1, -1, id="memorial-day"),
    fixed("Juneteenth", 6, 19, id="juneteenth", observed=NEAREST_WEEKDAY),
    nth_weekday("Father's Day", 6, 0, 3, id="fathers-day"),
    fixed("Independence Day", 7, 4, id="independence-day", observed=NEAREST_WEEKDAY),
    nth_weekday("Labor Day", 9, 1, 1, id="labor-day"),
    nth_weekday("Columbus Day", 10, 1, 2, id="columbus-day"),
    fixed("Veterans Day", 11, 11, id="veterans-day", observed=NEAREST_WEEKDAY),
    nth_weekday("Thanksgiving", 11, 4, 4, id="thanksgiving"),
    relative("Black Friday", "thanksgiving", 1, id="black-friday"),
    fixed("Christmas Day", 12, 25, id="christmas-day", observed=NEAREST_WEEKDAY),
)

FEDERAL_IDS = (
    "new-years-day",
    "martin-luther-king-day",
    "presidents-day",
    "memorial-day",
    "juneteenth",
    "independence-day",
    "labor-day",
    "columbus-day",
    "veterans-day",
    "thanksgiving",
    "christmas-day",
)

STATES = {
    "TX": (
        fixed("Texas Independence Day", 3, 2, id="texas-independence-day", regions=("TX",)),
        fixed("Lyndon B. Johnson Day", 8, 27, id="lyndon-b-johnson-day", regions=("TX",)),
    ),
    "CA": (
        fixed("Cesar Chavez Day", 3, 31, id="cesar-chavez-day", regions=("CA",)),
    ),
    "HI": (
        fixed("Prince Kuhio Day", 3, 26, id="prince-kuhio-day", regions=("HI",)),
        fixed("Kamehameha Day", 6, 11, id="kamehameha-day", regions=("HI",)),
        nth_weekday("Statehood Day", 8, 5, 3, id="statehood-day", regions=("HI",)),
    ),
    "MA": (
        nth_weekday("Patriots' Day", 4, 1, 3, id="patriots-day", regions=("MA", "ME")),
    ),
    "ME": (
        nth_weekday("Patriots' Day", 4, 1, 3, id="patriots-day", regions=("MA", "ME")),
    ),
}


EN_US = Locale(
    code="en-US",
    name="English (United States)",
    months=(
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ),
    weekdays=("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"),
    formats={
        "LT": "h:mm A",
        "LTS": "h:mm:ss A",
        "L": "MM/DD/YYYY",
        "LL": "MMMM D, YYYY",
        "LLL": "MMMM D, YYYY h:mm A",
        "LLLL": "dddd, MMMM D, YYYY h:mm A",
    },
    holidays=HOLIDAYS,
    holiday_sets={"federal": tuple(h for h in HOLIDAYS if h.id in FEDERAL_IDS)},
    regions=STATES,
)
