"""십성 (Ten Gods) 계산."""
from collections import Counter

from saju_agent import config
from saju_agent.constants import (
    BRANCHES,
    ELEMENT_CONTROLS,
    ELEMENT_PRODUCES,
    HIDDEN_STEMS,
    STEMS,
    STEM_ELEMENTS,
    STEM_POLARITY,
    TEN_GOD_MATRIX,
    TEN_GOD_NAMES,
    TEN_GODS,
)
from saju_agent.models import FourPillars, TenGodMap, TenGodSummary


class TenGodCalculator:
    """십성 계산기 - 일간 기준 오행 관계 × 음양 일치 여부"""

    def element_relation(self, dm_element: str, target_element: str) -> str:
        if target_element == dm_element:
            return "same"
        if ELEMENT_PRODUCES[dm_element] == target_element:
            return "output"
        if ELEMENT_CONTROLS[dm_element] == target_element:
            return "wealth"
        if ELEMENT_CONTROLS[target_element] == dm_element:
            return "officer"
        return "resource"

    def get_ten_god(self, day_master: str, target_stem: str) -> str:
        dm_idx = STEMS.index(day_master)
        t_idx = STEMS.index(target_stem)
        relation = self.element_relation(STEM_ELEMENTS[dm_idx], STEM_ELEMENTS[t_idx])
        same_polarity = STEM_POLARITY[dm_idx] == STEM_POLARITY[t_idx]
        return TEN_GOD_MATRIX[relation][0 if same_polarity else 1]

    def get_branch_ten_god(self, day_master: str, branch: str) -> str:
        """지지는 본기(첫 번째 지장간)로만 판정"""
        return self.get_ten_god(day_master, HIDDEN_STEMS[BRANCHES.index(branch)][0])

    def get_all_ten_gods(self, pillars: FourPillars) -> TenGodMap:
        dm = pillars.day_master
        return TenGodMap(
            year_stem=self.get_ten_god(dm, pillars.year.stem),
            year_branch=self.get_branch_ten_god(dm, pillars.year.branch),
            month_stem=self.get_ten_god(dm, pillars.month.stem),
            month_branch=self.get_branch_ten_god(dm, pillars.month.branch),
            day_stem=None,
            day_branch=self.get_branch_ten_god(dm, pillars.day.branch),
            hour_stem=self.get_ten_god(dm, pillars.hour.stem),
            hour_branch=self.get_branch_ten_god(dm, pillars.hour.branch),
        )

    def summarize(self, ten_god_map: TenGodMap) -> TenGodSummary:
        counter = Counter(ten_god_map.scored_slots().values())
        counts = {god: counter.get(god, 0) for god in TEN_GODS}
        return TenGodSummary(
            counts=counts,
            dominant=[g for g in TEN_GODS if counts[g] >= config.TEN_GOD_DOMINANT_COUNT],
            lacking=[g for g in TEN_GODS if counts[g] == 0],
        )


_TEN_GOD_CALC = TenGodCalculator()


def ten_god(day_master: str, target_stem: str) -> str:
    return _TEN_GOD_CALC.get_ten_god(day_master, target_stem)


def ten_god_name(code: str, locale: str = "ko") -> str:
    names = TEN_GOD_NAMES[code]
    if locale == "ko":
        return f"{names['ko']}({names['hanja']})"
    return names["en"]


def all_ten_gods(pillars: FourPillars) -> TenGodMap:
    return _TEN_GOD_CALC.get_all_ten_gods(pillars)


def summarize_ten_gods(ten_god_map: TenGodMap) -> TenGodSummary:
    return _TEN_GOD_CALC.summarize(ten_god_map)
