"""
Hidden stems (藏干) held inside each Earthly Branch.

Every branch has a main qi stem and up to two secondary stems (middle qi,
residual qi). Their positional weights are approximate and debated among
practitioners; downstream weighting reads them from here.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator

from fourpillars.sexagenary import FourPillars, PillarPosition
from fourpillars.symbols import EarthlyBranch, HeavenlyStem

# main qi, middle qi, residual qi
HIDDEN_STEM_WEIGHTS = (0.6, 0.3, 0.1)


@dataclass(frozen=True)
class HiddenStems:
    main: HeavenlyStem
    secondary: tuple[HeavenlyStem, ...] = ()

    @property
    def stems(self) -> tuple[HeavenlyStem, ...]:
        return (self.main,) + self.secondary

    def weighted(self) -> Iterator[tuple[HeavenlyStem, float]]:
        return zip(self.stems, HIDDEN_STEM_WEIGHTS)

    def to_dict(self):
        return {
            "main": self.main.pinyin,
            "secondary": [s.pinyin for s in self.secondary],
        }


_J = HeavenlyStem

BRANCH_HIDDEN_STEMS = MappingProxyType({
    EarthlyBranch.ZI: HiddenStems(_J.GUI),
    EarthlyBranch.CHOU: HiddenStems(_J.JI, (_J.GUI, _J.XIN)),
    EarthlyBranch.YIN: HiddenStems(_J.JIA, (_J.BING, _J.WU)),
    EarthlyBranch.MAO: HiddenStems(_J.YI),
    EarthlyBranch.CHEN: HiddenStems(_J.WU, (_J.YI, _J.GUI)),
    EarthlyBranch.SI: HiddenStems(_J.BING, (_J.WU, _J.GENG)),
    EarthlyBranch.WU: HiddenStems(_J.DING, (_J.JI,)),
    EarthlyBranch.WEI: HiddenStems(_J.JI, (_J.DING, _J.YI)),
    EarthlyBranch.SHEN: HiddenStems(_J.GENG, (_J.REN, _J.WU)),
    EarthlyBranch.YOU: HiddenStems(_J.XIN),
    EarthlyBranch.XU: HiddenStems(_J.WU, (_J.XIN, _J.DING)),
    EarthlyBranch.HAI: HiddenStems(_J.REN, (_J.JIA,)),
})


def hidden_stems(branch: EarthlyBranch) -> HiddenStems:
    return BRANCH_HIDDEN_STEMS[branch]


def hidden_stems_for(pillars: FourPillars) -> "MappingProxyType[PillarPosition, HiddenStems]":
    """Hidden stems of each pillar's branch, keyed by position."""
    return MappingProxyType({p.position: hidden_stems(p.branch) for p in pillars})
