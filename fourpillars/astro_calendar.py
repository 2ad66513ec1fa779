"""
Calendar utilities for BaZi pillar boundaries.

Handles the Gregorian → lunisolar conversion, the solar-term boundaries
that decide which solar year and solar month a date belongs to, and LMT
correction arithmetic.

The solar-term dates come from a pluggable table. The default table uses
the same conventional day for each term every year; it is a calendrical
approximation, not an ephemeris. A term can fall a day either side of the
conventional date in a given year, so charts for births within a day of a
boundary should be checked against an almanac.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from types import MappingProxyType
from typing import Optional, Protocol, Union

from lunar_python import Solar

from fourpillars.errors import CalendarRangeError
from fourpillars.symbols import EarthlyBranch, branch_at

LOG = logging.getLogger(__name__)

# Range covered by the lunar table and the solar-term tables.
SUPPORTED_EARLIEST = date(1900, 1, 1)
SUPPORTED_LATEST = date(2100, 12, 31)


def lmt_correction(longitude: float, standard_meridian: float = 120.0) -> float:
    """
    Calculate Local Mean Time correction in minutes.

    China uses a single timezone based on 120°E. For locations
    significantly west of this (like Nanning at 108.37°E), the clock
    time differs from solar time.

    Args:
        longitude: birth location longitude in degrees (east positive)
        standard_meridian: timezone standard meridian (120.0 for China/CST)

    Returns:
        Correction in minutes (negative = subtract from clock time)

    Example:
        Nanning (108.37°E): correction = (108.37 - 120.0) * 4 = -46.52 min
        So 2:05 PM clock time → ~1:18 PM LMT
    """
    return (longitude - standard_meridian) * 4.0


def apply_lmt(clock_time: datetime, longitude: float,
              standard_meridian: float = 120.0) -> datetime:
    """
    Convert clock time to Local Mean Time.

    Args:
        clock_time: datetime in clock/standard time
        longitude: birth location longitude
        standard_meridian: timezone standard meridian

    Returns:
        datetime adjusted to LMT
    """
    correction_minutes = lmt_correction(longitude, standard_meridian)
    return clock_time + timedelta(minutes=correction_minutes)


# ============================================================
# SOLAR TERMS
# ============================================================
#
# The 12 Jie (节) terms mark BaZi month boundaries; the 12 Qi (气) terms
# in between are informational only.
#
# Li Chun     → Tiger month   (solar month 0)
# Jing Zhe    → Rabbit month  (solar month 1)
# Qing Ming   → Dragon month  (solar month 2)
# Li Xia      → Snake month   (solar month 3)
# Mang Zhong  → Horse month   (solar month 4)
# Xiao Shu    → Goat month    (solar month 5)
# Li Qiu      → Monkey month  (solar month 6)
# Bai Lu      → Rooster month (solar month 7)
# Han Lu      → Dog month     (solar month 8)
# Li Dong     → Pig month     (solar month 9)
# Da Xue      → Rat month     (solar month 10)
# Xiao Han    → Ox month      (solar month 11)

class SolarTerm(Enum):
    LI_CHUN = ("立春", "Start of Spring", 0)
    YU_SHUI = ("雨水", "Rain Water", None)
    JING_ZHE = ("惊蛰", "Awakening of Insects", 1)
    CHUN_FEN = ("春分", "Spring Equinox", None)
    QING_MING = ("清明", "Clear and Bright", 2)
    GU_YU = ("谷雨", "Grain Rain", None)
    LI_XIA = ("立夏", "Start of Summer", 3)
    XIAO_MAN = ("小满", "Grain Buds", None)
    MANG_ZHONG = ("芒种", "Grain in Ear", 4)
    XIA_ZHI = ("夏至", "Summer Solstice", None)
    XIAO_SHU = ("小暑", "Minor Heat", 5)
    DA_SHU = ("大暑", "Major Heat", None)
    LI_QIU = ("立秋", "Start of Autumn", 6)
    CHU_SHU = ("处暑", "End of Heat", None)
    BAI_LU = ("白露", "White Dew", 7)
    QIU_FEN = ("秋分", "Autumn Equinox", None)
    HAN_LU = ("寒露", "Cold Dew", 8)
    SHUANG_JIANG = ("霜降", "Frost Descent", None)
    LI_DONG = ("立冬", "Start of Winter", 9)
    XIAO_XUE = ("小雪", "Minor Snow", None)
    DA_XUE = ("大雪", "Major Snow", 10)
    DONG_ZHI = ("冬至", "Winter Solstice", None)
    XIAO_HAN = ("小寒", "Minor Cold", 11)
    DA_HAN = ("大寒", "Major Cold", None)

    def __init__(self, chinese: str, english: str, month_index: Optional[int]):
        self.chinese = chinese
        self.english = english
        self.month_index = month_index  # solar month opened by a Jie term

    @property
    def is_jie(self) -> bool:
        return self.month_index is not None


TERM_BY_CHINESE = MappingProxyType({t.chinese: t for t in SolarTerm})

# (term, month, day) in Gregorian order
FIXED_TERM_DATES = (
    (SolarTerm.XIAO_HAN, 1, 6),
    (SolarTerm.DA_HAN, 1, 20),
    (SolarTerm.LI_CHUN, 2, 4),
    (SolarTerm.YU_SHUI, 2, 19),
    (SolarTerm.JING_ZHE, 3, 6),
    (SolarTerm.CHUN_FEN, 3, 21),
    (SolarTerm.QING_MING, 4, 5),
    (SolarTerm.GU_YU, 4, 20),
    (SolarTerm.LI_XIA, 5, 6),
    (SolarTerm.XIAO_MAN, 5, 21),
    (SolarTerm.MANG_ZHONG, 6, 6),
    (SolarTerm.XIA_ZHI, 6, 21),
    (SolarTerm.XIAO_SHU, 7, 7),
    (SolarTerm.DA_SHU, 7, 23),
    (SolarTerm.LI_QIU, 8, 8),
    (SolarTerm.CHU_SHU, 8, 23),
    (SolarTerm.BAI_LU, 9, 8),
    (SolarTerm.QIU_FEN, 9, 23),
    (SolarTerm.HAN_LU, 10, 8),
    (SolarTerm.SHUANG_JIANG, 10, 23),
    (SolarTerm.LI_DONG, 11, 7),
    (SolarTerm.XIAO_XUE, 11, 22),
    (SolarTerm.DA_XUE, 12, 7),
    (SolarTerm.DONG_ZHI, 12, 22),
)


class SolarTermTable(Protocol):
    """Source of solar-term dates for a Gregorian year."""

    def term_dates(self, year: int) -> list[tuple[date, SolarTerm]]:
        ...


class FixedSolarTermTable:
    """Every term on the same conventional day each year."""

    def __init__(self, dates=FIXED_TERM_DATES):
        self.dates = tuple(dates)

    def term_dates(self, year: int) -> list[tuple[date, SolarTerm]]:
        return [(date(year, month, day), term) for term, month, day in self.dates]


class LunarSolarTermTable:
    """
    Year-specific term dates read from the lunar_python term table.

    The table of a lunar year spans the previous Winter Solstice to this
    year's Major Snow; the terms falling outside the lunar year (the
    following Winter Solstice, Minor Cold, ...) are keyed by upper-case
    pinyin names. Only entries dated inside ``year`` are kept.
    """

    def term_dates(self, year: int) -> list[tuple[date, SolarTerm]]:
        lunar = Solar.fromYmd(year, 7, 1).getLunar()
        found = {}
        for key, solar in lunar.getJieQiTable().items():
            term = TERM_BY_CHINESE.get(key) or SolarTerm.__members__.get(key)
            if term is None or solar.getYear() != year:
                continue
            found[term] = date(solar.getYear(), solar.getMonth(), solar.getDay())

        missing = [t.english for t in SolarTerm if t not in found]
        if missing:
            raise ValueError(f"Solar term table for {year} is missing {', '.join(missing)}")
        return sorted(((d, t) for t, d in found.items()), key=lambda x: x[0])


# ============================================================
# CALENDAR CONTEXT
# ============================================================

@dataclass(frozen=True)
class LunarDate:
    year: int
    month: int
    day: int
    is_leap_month: bool

    def __str__(self):
        leap = "leap " if self.is_leap_month else ""
        return f"{self.year}-{leap}{self.month}-{self.day}"


@dataclass(frozen=True)
class CalendarContext:
    """Everything the pillars need to know about a Gregorian date."""

    gregorian: date
    lunar_date: LunarDate
    solar_year: int
    solar_month_index: int  # 0 = Tiger month … 11 = Ox month
    solar_term: SolarTerm  # most recent term on or before the date

    @property
    def month_branch(self) -> EarthlyBranch:
        return branch_at(self.solar_month_index + 2)


def ensure_supported(value: Union[date, datetime]) -> date:
    """Return the date part of ``value``, raising outside the supported range."""
    day = value.date() if isinstance(value, datetime) else value
    if not SUPPORTED_EARLIEST <= day <= SUPPORTED_LATEST:
        raise CalendarRangeError(day, SUPPORTED_EARLIEST, SUPPORTED_LATEST)
    return day


def lunar_date_for(gregorian: date) -> LunarDate:
    """Lunisolar date for a Gregorian date; lunar_python marks leap months negative."""
    lunar = Solar.fromYmd(gregorian.year, gregorian.month, gregorian.day).getLunar()
    month = lunar.getMonth()
    return LunarDate(
        year=lunar.getYear(),
        month=abs(month),
        day=lunar.getDay(),
        is_leap_month=month < 0,
    )


class CalendarConverter:
    """
    Resolves the solar year, solar month and lunar date for a birth date.

    Boundary dates count as the first day of the new period. The lunar
    date is informational: leap months never shift the solar month, which
    follows the Jie terms alone.
    """

    def __init__(self, solar_terms: Optional[SolarTermTable] = None):
        self.solar_terms = solar_terms if solar_terms is not None else FixedSolarTermTable()

    def to_lunar_and_solar_context(self, gregorian: Union[date, datetime]) -> CalendarContext:
        day = ensure_supported(gregorian)

        this_year = self.solar_terms.term_dates(day.year)
        boundaries = sorted(
            self.solar_terms.term_dates(day.year - 1) + this_year,
            key=lambda x: x[0],
        )
        passed = [term for boundary, term in boundaries if boundary <= day]
        jie = [term for term in passed if term.is_jie]

        li_chun = next(boundary for boundary, term in this_year if term is SolarTerm.LI_CHUN)
        solar_year = day.year if day >= li_chun else day.year - 1

        context = CalendarContext(
            gregorian=day,
            lunar_date=lunar_date_for(day),
            solar_year=solar_year,
            solar_month_index=jie[-1].month_index,
            solar_term=passed[-1],
        )
        LOG.debug("Calendar context for %s: solar year %d, solar month %d (%s), lunar %s",
                  day, solar_year, context.solar_month_index,
                  context.solar_term.english, context.lunar_date)
        return context
