"""
Ten Gods (十神) relationship mapping.

The Ten Gods describe how any stem relates to the Day Master. They are
determined by element relationship + polarity match:

- same element:              Parallel (same polarity) / Rob Wealth
- stem produces the DM:      Indirect Seal / Direct Seal
- DM produces the stem:      Eating God / Hurting Officer
- stem controls the DM:      Seven Killings / Direct Officer
- DM controls the stem:      Indirect Wealth / Direct Wealth
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Optional

from fourpillars.hidden_stems import HiddenStems
from fourpillars.sexagenary import FourPillars, PillarPosition
from fourpillars.symbols import Element, HeavenlyStem


class TenGodFamily(Enum):
    PARALLEL = "parallel"    # same as me
    RESOURCE = "resource"    # produces me
    OUTPUT = "output"        # I produce
    WEALTH = "wealth"        # I control
    OFFICER = "officer"      # controls me


class TenGod(Enum):
    PARALLEL = ("比肩", "Parallel", TenGodFamily.PARALLEL, True)
    ROB_WEALTH = ("劫财", "Rob Wealth", TenGodFamily.PARALLEL, False)
    EATING_GOD = ("食神", "Eating God", TenGodFamily.OUTPUT, True)
    HURTING_OFFICER = ("伤官", "Hurting Officer", TenGodFamily.OUTPUT, False)
    INDIRECT_WEALTH = ("偏财", "Indirect Wealth", TenGodFamily.WEALTH, True)
    DIRECT_WEALTH = ("正财", "Direct Wealth", TenGodFamily.WEALTH, False)
    SEVEN_KILLINGS = ("偏官", "Seven Killings", TenGodFamily.OFFICER, True)
    DIRECT_OFFICER = ("正官", "Direct Officer", TenGodFamily.OFFICER, False)
    INDIRECT_SEAL = ("偏印", "Indirect Seal", TenGodFamily.RESOURCE, True)
    DIRECT_SEAL = ("正印", "Direct Seal", TenGodFamily.RESOURCE, False)

    def __init__(self, chinese: str, english: str, family: TenGodFamily, same_polarity: bool):
        self.chinese = chinese
        self.english = english
        self.family = family
        self.same_polarity = same_polarity

    @property
    def is_direct(self) -> bool:
        """Parallel, Eating God, Direct Wealth, Direct Officer and Direct Seal."""
        return self in _DIRECT_GODS

    def __str__(self):
        return f"{self.english} ({self.chinese})"


_DIRECT_GODS = frozenset({
    TenGod.PARALLEL,
    TenGod.EATING_GOD,
    TenGod.DIRECT_WEALTH,
    TenGod.DIRECT_OFFICER,
    TenGod.DIRECT_SEAL,
})

_GOD_BY_RELATION = MappingProxyType({(g.family, g.same_polarity): g for g in TenGod})


def element_relationship(day_master_element: Element, other_element: Element) -> TenGodFamily:
    """Determine the elemental relationship from DM's perspective."""
    if day_master_element == other_element:
        return TenGodFamily.PARALLEL
    elif other_element.generates == day_master_element:
        return TenGodFamily.RESOURCE
    elif day_master_element.generates == other_element:
        return TenGodFamily.OUTPUT
    elif day_master_element.controls == other_element:
        return TenGodFamily.WEALTH
    elif other_element.controls == day_master_element:
        return TenGodFamily.OFFICER
    else:
        raise ValueError(f"No valid relationship between {day_master_element} and {other_element}")


def classify(stem: HeavenlyStem, day_master: HeavenlyStem) -> TenGod:
    """
    Determine the Ten God of ``stem`` relative to the Day Master.

    A stem compared with itself is always Parallel.
    """
    family = element_relationship(day_master.element, stem.element)
    return _GOD_BY_RELATION[(family, stem.polarity == day_master.polarity)]


@dataclass(frozen=True)
class TenGodEntry:
    god: TenGod
    stem: HeavenlyStem
    position: PillarPosition
    is_hidden: bool

    def to_dict(self):
        return {
            "god": self.god.english,
            "stem": self.stem.pinyin,
            "position": self.position.value,
            "is_hidden": self.is_hidden,
        }


@dataclass(frozen=True)
class TenGodsAnalysis:
    gods: tuple[TenGodEntry, ...]
    distribution: Mapping[TenGod, int]
    dominant: Optional[TenGod]
    missing: tuple[TenGod, ...]

    def to_dict(self):
        return {
            "gods": [g.to_dict() for g in self.gods],
            "distribution": {g.english: n for g, n in self.distribution.items()},
            "dominant": self.dominant.english if self.dominant else None,
            "missing": [g.english for g in self.missing],
        }


def calculate_ten_gods(four_pillars: FourPillars,
                       hidden: Mapping[PillarPosition, HiddenStems]) -> TenGodsAnalysis:
    """
    Classify every stem in the chart against the Day Master.

    One entry per stem instance: the year, month and hour stems (the Day
    Master is not compared with itself) followed by the hidden stems of all
    four branches. The distribution counts entries and lists all ten gods.
    """
    day_master = four_pillars.day_master
    entries = [
        TenGodEntry(classify(p.stem, day_master), p.stem, p.position, is_hidden=False)
        for p in four_pillars
        if p.position is not PillarPosition.DAY
    ]
    for p in four_pillars:
        for stem in hidden[p.position].stems:
            entries.append(TenGodEntry(classify(stem, day_master), stem, p.position, is_hidden=True))

    counts = {god: 0 for god in TenGod}
    for entry in entries:
        counts[entry.god] += 1

    dominant = None
    for god in TenGod:
        if counts[god] > 0 and (dominant is None or counts[god] > counts[dominant]):
            dominant = god

    return TenGodsAnalysis(
        gods=tuple(entries),
        distribution=MappingProxyType(counts),
        dominant=dominant,
        missing=tuple(g for g in TenGod if counts[g] == 0),
    )
