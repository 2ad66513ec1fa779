"""
The sixty Jia-Zi cycle and the four pillars.

Each temporal unit maps to a running count, and the count's position in
the 60-term cycle gives the pillar: stem = index % 10, branch = index % 12.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum

import swisseph as swe

from fourpillars.astro_calendar import CalendarContext
from fourpillars.symbols import EarthlyBranch, HeavenlyStem, branch_at, stem_at

SEXAGENARY_CYCLE_LENGTH = 60

# Year 4 CE was Jia Zi, the start of the cycle.
_YEAR_EPOCH = 4

# Month count offset that puts 1984's Tiger month on Bing Yin. Equivalent
# to the Five Tigers Escape (Wu Hu Dun) table.
_MONTH_EPOCH_OFFSET = 14

# JDN of 1949-10-01, a Jia Zi day.
_REFERENCE_JIA_ZI_JDN = 2433191


class PillarPosition(Enum):
    YEAR = "year"
    MONTH = "month"
    DAY = "day"
    HOUR = "hour"


@dataclass(frozen=True)
class Pillar:
    stem: HeavenlyStem
    branch: EarthlyBranch
    position: PillarPosition
    cycle_index: int  # 0-59

    @classmethod
    def from_index(cls, index: int, position: PillarPosition) -> "Pillar":
        idx = index % SEXAGENARY_CYCLE_LENGTH
        return cls(stem=stem_at(idx), branch=branch_at(idx), position=position, cycle_index=idx)

    @property
    def cycle_number(self) -> int:
        """1-60 ordinal, Jia Zi = 1."""
        return self.cycle_index + 1

    def label(self) -> str:
        return f"{self.stem.chinese}{self.branch.chinese}"

    def pinyin_label(self) -> str:
        return f"{self.stem.pinyin} {self.branch.pinyin}"

    def __str__(self):
        return f"{self.stem.pinyin} {self.branch.pinyin} ({self.stem.polarity.value} {self.stem.element.value} {self.branch.animal})"

    def to_dict(self):
        return {
            "position": self.position.value,
            "stem": {
                "chinese": self.stem.chinese,
                "pinyin": self.stem.pinyin,
                "element": self.stem.element.value,
                "polarity": self.stem.polarity.value,
            },
            "branch": {
                "chinese": self.branch.chinese,
                "pinyin": self.branch.pinyin,
                "animal": self.branch.animal,
                "element": self.branch.element.value,
                "polarity": self.branch.polarity.value,
            },
            "combined": self.label(),
            "pinyin": self.pinyin_label(),
            "cycle_number": self.cycle_number,
            "description": str(self),
        }


@dataclass(frozen=True)
class FourPillars:
    year: Pillar
    month: Pillar
    day: Pillar
    hour: Pillar

    @property
    def day_master(self) -> HeavenlyStem:
        return self.day.stem

    def __iter__(self):
        return iter((self.year, self.month, self.day, self.hour))

    def __getitem__(self, position: PillarPosition) -> Pillar:
        return getattr(self, position.value)

    def label(self) -> str:
        return " ".join(p.label() for p in self)


# ============================================================
# CYCLE INDICES
# ============================================================

def sexagenary_index(stem: HeavenlyStem, branch: EarthlyBranch) -> int:
    """Return the 0-59 index for a stem/branch pairing."""
    for idx in range(SEXAGENARY_CYCLE_LENGTH):
        if idx % 10 == stem.index and idx % 12 == branch.index:
            return idx
    raise ValueError(f"Invalid stem/branch pairing: {stem.pinyin} {branch.pinyin}")


def year_cycle_index(solar_year: int) -> int:
    return (solar_year - _YEAR_EPOCH) % SEXAGENARY_CYCLE_LENGTH


def month_cycle_index(solar_year: int, solar_month_index: int) -> int:
    """
    Month index from a running count of solar months.

    Twelve months per year against a 60-term cycle repeat every five
    years, which is the Five Tigers rule:
    - Jia/Ji year → Tiger month is Bing Yin
    - Yi/Geng year → Wu Yin
    - Bing/Xin year → Geng Yin
    - Ding/Ren year → Ren Yin
    - Wu/Gui year → Jia Yin
    """
    months = solar_year * 12 + solar_month_index
    return (months + _MONTH_EPOCH_OFFSET) % SEXAGENARY_CYCLE_LENGTH


def julian_day_number(day: date) -> int:
    """Julian Day Number (the JD at noon) of a Gregorian date."""
    return int(round(swe.julday(day.year, day.month, day.day, 12.0)))


def day_cycle_index(day: date) -> int:
    return (julian_day_number(day) - _REFERENCE_JIA_ZI_JDN) % SEXAGENARY_CYCLE_LENGTH


def hour_slot(hour: int) -> int:
    """
    Two-hour slot (shi chen) of a clock hour; the slot is the branch index.

    23:00-00:59 = Zi (Rat)      = 0
    01:00-02:59 = Chou (Ox)     = 1
    03:00-04:59 = Yin (Tiger)   = 2
    ...
    21:00-22:59 = Hai (Pig)     = 11
    """
    if hour == 23 or hour == 0:
        return 0
    return ((hour + 1) // 2) % 12


def hour_cycle_index(day_index: int, slot: int) -> int:
    """
    Hour index anchored on the day.

    Each day spans twelve slots, so counting slots from the reference day
    gives the Five Rats rule (Jia/Ji day → Jia Zi hour, Yi/Geng → Bing Zi,
    Bing/Xin → Wu Zi, Ding/Ren → Geng Zi, Wu/Gui → Ren Zi).
    """
    return (day_index * 12 + slot) % SEXAGENARY_CYCLE_LENGTH


def calculate_four_pillars(context: CalendarContext, hour: int) -> FourPillars:
    """
    Compute all four pillars for a resolved calendar context.

    The day pillar belongs to the calendar day even for 23:00 births;
    only the hour branch wraps to Zi.
    """
    day_index = day_cycle_index(context.gregorian)
    return FourPillars(
        year=Pillar.from_index(year_cycle_index(context.solar_year), PillarPosition.YEAR),
        month=Pillar.from_index(
            month_cycle_index(context.solar_year, context.solar_month_index),
            PillarPosition.MONTH,
        ),
        day=Pillar.from_index(day_index, PillarPosition.DAY),
        hour=Pillar.from_index(hour_cycle_index(day_index, hour_slot(hour)), PillarPosition.HOUR),
    )
