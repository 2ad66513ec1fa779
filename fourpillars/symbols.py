"""
Heavenly Stems, Earthly Branches and the Five Elements.

Every symbol the engine works with is a closed enumeration so that the
10 / 12 / 5 / 2-way tables can never silently miss a case. Members carry
their glyph, pinyin and elemental attributes; there is no mutable state.
"""

from enum import Enum
from types import MappingProxyType


# ============================================================
# FUNDAMENTAL DATA STRUCTURES
# ============================================================

class Polarity(Enum):
    YANG = "yang"
    YIN = "yin"


class Element(Enum):
    WOOD = "wood"
    FIRE = "fire"
    EARTH = "earth"
    METAL = "metal"
    WATER = "water"

    @property
    def chinese(self) -> str:
        return _ELEMENT_GLYPHS[self]

    @property
    def english(self) -> str:
        return self.value.capitalize()

    @property
    def generates(self) -> "Element":
        return PRODUCTION_CYCLE[self]

    @property
    def controls(self) -> "Element":
        return CONTROL_CYCLE[self]

    @property
    def generated_by(self) -> "Element":
        return _GENERATED_BY[self]

    @property
    def controlled_by(self) -> "Element":
        return _CONTROLLED_BY[self]


class HeavenlyStem(Enum):
    JIA = (0, "甲", "Jia", Element.WOOD, Polarity.YANG)
    YI = (1, "乙", "Yi", Element.WOOD, Polarity.YIN)
    BING = (2, "丙", "Bing", Element.FIRE, Polarity.YANG)
    DING = (3, "丁", "Ding", Element.FIRE, Polarity.YIN)
    WU = (4, "戊", "Wu", Element.EARTH, Polarity.YANG)
    JI = (5, "己", "Ji", Element.EARTH, Polarity.YIN)
    GENG = (6, "庚", "Geng", Element.METAL, Polarity.YANG)
    XIN = (7, "辛", "Xin", Element.METAL, Polarity.YIN)
    REN = (8, "壬", "Ren", Element.WATER, Polarity.YANG)
    GUI = (9, "癸", "Gui", Element.WATER, Polarity.YIN)

    def __init__(self, index: int, chinese: str, pinyin: str,
                 element: Element, polarity: Polarity):
        self.index = index  # 0-9 in the cycle
        self.chinese = chinese
        self.pinyin = pinyin
        self.element = element
        self.polarity = polarity

    def __str__(self):
        return f"{self.pinyin} ({self.polarity.value} {self.element.value})"


class EarthlyBranch(Enum):
    ZI = (0, "子", "Zi", "Rat", Element.WATER, Polarity.YANG)
    CHOU = (1, "丑", "Chou", "Ox", Element.EARTH, Polarity.YIN)
    YIN = (2, "寅", "Yin", "Tiger", Element.WOOD, Polarity.YANG)
    MAO = (3, "卯", "Mao", "Rabbit", Element.WOOD, Polarity.YIN)
    CHEN = (4, "辰", "Chen", "Dragon", Element.EARTH, Polarity.YANG)
    SI = (5, "巳", "Si", "Snake", Element.FIRE, Polarity.YIN)
    WU = (6, "午", "Wu", "Horse", Element.FIRE, Polarity.YANG)
    WEI = (7, "未", "Wei", "Goat", Element.EARTH, Polarity.YIN)
    SHEN = (8, "申", "Shen", "Monkey", Element.METAL, Polarity.YANG)
    YOU = (9, "酉", "You", "Rooster", Element.METAL, Polarity.YIN)
    XU = (10, "戌", "Xu", "Dog", Element.EARTH, Polarity.YANG)
    HAI = (11, "亥", "Hai", "Pig", Element.WATER, Polarity.YIN)

    def __init__(self, index: int, chinese: str, pinyin: str, animal: str,
                 element: Element, polarity: Polarity):
        self.index = index  # 0-11 in the cycle
        self.chinese = chinese
        self.pinyin = pinyin
        self.animal = animal
        self.element = element  # primary/season element
        self.polarity = polarity

    @property
    def first_hour(self) -> int:
        """Clock hour at which this branch's two-hour slot opens (Zi = 23)."""
        return (2 * self.index - 1) % 24

    def __str__(self):
        return f"{self.pinyin} ({self.animal})"


# ============================================================
# ELEMENT CYCLES
# ============================================================

# Production cycle: Wood → Fire → Earth → Metal → Water → Wood
PRODUCTION_CYCLE = MappingProxyType({
    Element.WOOD: Element.FIRE,
    Element.FIRE: Element.EARTH,
    Element.EARTH: Element.METAL,
    Element.METAL: Element.WATER,
    Element.WATER: Element.WOOD,
})

# Control cycle: Wood → Earth → Water → Fire → Metal → Wood
CONTROL_CYCLE = MappingProxyType({
    Element.WOOD: Element.EARTH,
    Element.EARTH: Element.WATER,
    Element.WATER: Element.FIRE,
    Element.FIRE: Element.METAL,
    Element.METAL: Element.WOOD,
})

_GENERATED_BY = MappingProxyType({v: k for k, v in PRODUCTION_CYCLE.items()})
_CONTROLLED_BY = MappingProxyType({v: k for k, v in CONTROL_CYCLE.items()})

_ELEMENT_GLYPHS = MappingProxyType({
    Element.WOOD: "木",
    Element.FIRE: "火",
    Element.EARTH: "土",
    Element.METAL: "金",
    Element.WATER: "水",
})


# ============================================================
# LOOKUP HELPERS
# ============================================================

HEAVENLY_STEMS = tuple(HeavenlyStem)
EARTHLY_BRANCHES = tuple(EarthlyBranch)

STEM_BY_CHINESE = MappingProxyType({s.chinese: s for s in HeavenlyStem})
BRANCH_BY_ANIMAL = MappingProxyType({b.animal: b for b in EarthlyBranch})


def stem_at(index: int) -> HeavenlyStem:
    """Stem for any integer index, wrapping through the 10-stem cycle."""
    return HEAVENLY_STEMS[index % 10]


def branch_at(index: int) -> EarthlyBranch:
    """Branch for any integer index, wrapping through the 12-branch cycle."""
    return EARTHLY_BRANCHES[index % 12]
