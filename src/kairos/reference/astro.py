"""
Low-precision solar and lunar-phase astronomy (Meeus, Astronomical Algorithms).

Accurate to a few minutes of time for new moons and solar-longitude crossings
around the present era; enough to place lunisolar month starts and equinoxes
on the right civil day except in rare near-midnight cases.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from math import fmod

from .deltat import delta_t_seconds

J2000_TT = 2451545.0
JD_UNIX_EPOCH = 2440587.5
SYNODIC_MONTH = 29.530588861
TROPICAL_YEAR = 365.2421896698


def wrap_deg(x_deg: float) -> float:
    """Wrap degrees to [0,360)."""
    y = fmod(x_deg, 360.0)
    if y < 0:
        y += 360.0
    return y

def wrap180(deg: float) -> float:
    """Wrap degrees to [-180,180)."""
    return (deg + 180.0) % 360.0 - 180.0

def T_centuries(jd_tt: float) -> float:
    """Julian centuries from J2000.0 in TT."""
    return (jd_tt - J2000_TT) / 36525.0


# ------------------------------------------------------------
# Time scales
# ------------------------------------------------------------

def jd_to_datetime_utc(jd: float) -> datetime:
    return datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(days=jd - JD_UNIX_EPOCH)

def datetime_utc_to_jd(dt: datetime) -> float:
    if dt.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")
    delta = dt.astimezone(timezone.utc) - datetime(1970, 1, 1, tzinfo=timezone.utc)
    return JD_UNIX_EPOCH + delta / timedelta(days=1)

def _decimal_year(jd: float) -> float:
    return 2000.0 + (jd - J2000_TT) / 365.25

def jd_utc_to_jd_tt(jd_utc: float) -> float:
    """TT = UT + ΔT (UT1-UTC ignored)."""
    return jd_utc + delta_t_seconds(_decimal_year(jd_utc)) / 86400.0

def jd_tt_to_jd_utc(jd_tt: float) -> float:
    """Inverse of jd_utc_to_jd_tt; ΔT varies slowly so one pass suffices."""
    return jd_tt - delta_t_seconds(_decimal_year(jd_tt)) / 86400.0

def local_date(jd_tt: float, utc_offset_hours: float) -> date:
    """Civil date at a fixed UTC offset of an instant given in TT."""
    jd_local = jd_tt_to_jd_utc(jd_tt) + utc_offset_hours / 24.0
    return jd_to_datetime_utc(jd_local).date()


# ------------------------------------------------------------
# Sun
# ------------------------------------------------------------

@dataclass(frozen=True)
class SolarCoordinates:
    """True and apparent solar longitude (degrees)."""
    L_true_deg: float
    L_app_deg: float


def solar_longitude(jd_tt: float) -> SolarCoordinates:
    """
    Geometric mean longitude plus the equation of center, then aberration
    and the leading nutation term for the apparent longitude (~0.01 deg).
    """
    T = T_centuries(jd_tt)
    L0 = 280.46646 + 36000.76983 * T + 0.0003032 * T * T
    M = math.radians(357.52911 + 35999.05029 * T - 0.0001537 * T * T)
    C = (
        (1.914602 - 0.004817 * T - 0.000014 * T * T) * math.sin(M)
        + (0.019993 - 0.000101 * T) * math.sin(2.0 * M)
        + 0.000289 * math.sin(3.0 * M)
    )
    L_true = wrap_deg(L0 + C)
    omega = math.radians(125.04 - 1934.136 * T)
    L_app = wrap_deg(L_true - 0.00569 - 0.00478 * math.sin(omega))
    return SolarCoordinates(L_true_deg=L_true, L_app_deg=L_app)


def solar_longitude_crossing(target_deg: float, jd_guess_tt: float, *, tol_days: float = 1e-6) -> float:
    """
    JD(TT) at which the apparent solar longitude equals target_deg, starting
    from a guess within a few weeks of the event.
    """
    jd = jd_guess_tt
    for _ in range(50):
        diff = wrap180(target_deg - solar_longitude(jd).L_app_deg)
        step = diff / 360.0 * TROPICAL_YEAR
        jd += step
        if abs(step) < tol_days:
            break
    return jd


# Approximate day-of-year of each quarter-term crossing, used as a starting guess.
_SEASON_GUESS = {0.0: (3, 20), 90.0: (6, 21), 180.0: (9, 23), 270.0: (12, 22)}


def season_jd_tt(year: int, longitude_deg: float) -> float:
    """JD(TT) of the equinox/solstice (0, 90, 180, 270 deg) in Gregorian year."""
    month, day = _SEASON_GUESS[float(longitude_deg)]
    guess = datetime_utc_to_jd(datetime(year, month, day, 12, tzinfo=timezone.utc))
    return solar_longitude_crossing(longitude_deg, guess)


# ------------------------------------------------------------
# Moon: true new moon (Meeus ch. 49, planetary terms omitted)
# ------------------------------------------------------------

def jde_mean_new_moon(k: float) -> float:
    T = k / 1236.85
    T2 = T * T
    return (
        2451550.09766
        + SYNODIC_MONTH * k
        + 0.00015437 * T2
        - 0.000000150 * T2 * T
        + 0.00000000073 * T2 * T2
    )


def jde_true_new_moon(k: int) -> float:
    """JDE (TT) of the k-th new moon after 2000-01-06, periodic terms applied."""
    T = k / 1236.85
    T2 = T * T
    T3 = T2 * T
    T4 = T2 * T2
    E = 1.0 - 0.002516 * T - 0.0000074 * T2
    M = math.radians(2.5534 + 29.10535670 * k - 0.0000014 * T2 - 0.00000011 * T3)
    Mp = math.radians(
        201.5643 + 385.81693528 * k + 0.0107582 * T2 + 0.00001238 * T3 - 0.000000058 * T4
    )
    F = math.radians(
        160.7108 + 390.67050284 * k - 0.0016118 * T2 - 0.00000227 * T3 + 0.000000011 * T4
    )
    Om = math.radians(124.7746 - 1.56375588 * k + 0.0020672 * T2 + 0.00000215 * T3)
    sin = math.sin
    corr = (
        -0.40720 * sin(Mp)
        + 0.17241 * E * sin(M)
        + 0.01608 * sin(2 * Mp)
        + 0.01039 * sin(2 * F)
        + 0.00739 * E * sin(Mp - M)
        - 0.00514 * E * sin(Mp + M)
        + 0.00208 * E * E * sin(2 * M)
        - 0.00111 * sin(Mp - 2 * F)
        - 0.00057 * sin(Mp + 2 * F)
        + 0.00056 * E * sin(2 * Mp + M)
        - 0.00042 * sin(3 * Mp)
        + 0.00042 * E * sin(M + 2 * F)
        + 0.00038 * E * sin(M - 2 * F)
        - 0.00024 * E * sin(2 * Mp - M)
        - 0.00017 * sin(Om)
        - 0.00007 * sin(Mp + 2 * M)
        + 0.00004 * sin(2 * Mp - 2 * F)
        + 0.00004 * sin(3 * M)
        + 0.00003 * sin(Mp + M - 2 * F)
        + 0.00003 * sin(2 * Mp + 2 * F)
        - 0.00003 * sin(Mp + M + 2 * F)
        + 0.00003 * sin(Mp - M + 2 * F)
        - 0.00002 * sin(Mp - M - 2 * F)
        - 0.00002 * sin(3 * Mp + M)
        + 0.00002 * sin(4 * Mp)
    )
    return jde_mean_new_moon(k) + corr


def lunation_near(jd_tt: float) -> int:
    """Lunation index k whose mean new moon is closest to jd_tt."""
    return round((jd_tt - 2451550.09766) / SYNODIC_MONTH)
