"""
지지 형충회합 (branch interactions) between a cycle pillar and the natal chart.

Every fortune granularity shares this scoring; only the weights differ.
"""
from typing import NamedTuple

from saju_agent.constants import (
    ELEMENT_CONTROLS,
    ELEMENT_PRODUCES,
    MUTUAL_PUNISHMENTS,
    PILLAR_LABELS,
    PILLAR_SLOTS,
    SELF_PUNISHMENTS,
    SIX_CLASHES,
    SIX_DESTRUCTIONS,
    SIX_HARMONIES,
    SIX_HARMS,
    THREE_HARMONIES,
    THREE_PUNISHMENTS,
)
from saju_agent.models import FourPillars, Interaction, Pillar


class ScoreWeights(NamedTuple):
    harmony: int
    three_harmony: int
    half_harmony: int
    clash: int
    punishment: int
    harm: int
    destruction: int
    support: int
    against: int


# 대운은 관계 영향이 크고, 시운·월운·세운·소운은 일운보다 용신 가중치가 낮다
MAJOR_WEIGHTS = ScoreWeights(12, 12, 6, 18, 12, 10, 6, 20, 15)
DAILY_WEIGHTS = ScoreWeights(10, 10, 5, 15, 10, 8, 5, 20, 15)
CYCLE_WEIGHTS = ScoreWeights(10, 10, 5, 15, 10, 8, 5, 15, 12)

GRADE_THRESHOLDS = (
    (75, "excellent"),
    (55, "good"),
    (40, "normal"),
    (25, "caution"),
)

GRADE_NAMES = {
    "ko": {
        "excellent": "대길(大吉)", "good": "길(吉)", "normal": "평(平)",
        "caution": "주의(注意)", "challenging": "흉(凶)",
    },
    "en": {
        "excellent": "Excellent", "good": "Good", "normal": "Normal",
        "caution": "Caution", "challenging": "Challenging",
    },
}


def _pair_in(table, a, b) -> bool:
    return (a, b) in table or (b, a) in table


class BranchInteractionCalculator:
    """지지 관계 계산기 - 육합, 삼합/반합, 충, 형, 해, 파"""

    def is_six_harmony(self, a, b):
        return _pair_in(SIX_HARMONIES, a, b)

    def is_clash(self, a, b):
        return _pair_in(SIX_CLASHES, a, b)

    def is_half_harmony(self, a, b):
        if a == b:
            return False
        return any(a in triad and b in triad for triad, _ in THREE_HARMONIES)

    def is_punishment(self, a, b):
        # 삼형 중 서로 다른 두 지지
        if a != b and any(a in group and b in group for group in THREE_PUNISHMENTS):
            return True
        # 子卯 상형
        if _pair_in(MUTUAL_PUNISHMENTS, a, b):
            return True
        # 자형 (辰辰, 午午, 酉酉, 亥亥)
        return a == b and a in SELF_PUNISHMENTS

    def is_harm(self, a, b):
        return _pair_in(SIX_HARMS, a, b)

    def is_destruction(self, a, b):
        return _pair_in(SIX_DESTRUCTIONS, a, b)

    def three_harmonies(self, branch, natal_branches) -> list:
        """운의 지지가 원국의 서로 다른 두 지지와 삼합을 완성하는 경우"""
        found = []
        for triad, _ in THREE_HARMONIES:
            if branch not in triad:
                continue
            others = set(triad) - {branch}
            if others.issubset(set(natal_branches)):
                found.append("".join(triad))
        return found

    def useful_god_relation(self, element: str, yong_shin: str) -> str:
        """운 오행과 용신의 관계: 같거나 생하면 support, 극하면 against"""
        if element == yong_shin or ELEMENT_PRODUCES[element] == yong_shin:
            return "support"
        if ELEMENT_CONTROLS[element] == yong_shin:
            return "against"
        return "neutral"

    def analyze(self, pillar: Pillar, natal: FourPillars, yong_shin: str, weights: ScoreWeights) -> Interaction:
        branch = pillar.branch
        found = {
            "six_harmonies": [], "half_harmonies": [], "clashes": [],
            "punishments": [], "harms": [], "destructions": [],
        }
        for slot in PILLAR_SLOTS:
            natal_branch = natal.slot(slot).branch
            if self.is_six_harmony(branch, natal_branch):
                found["six_harmonies"].append(slot)
            if self.is_half_harmony(branch, natal_branch):
                found["half_harmonies"].append(slot)
            if self.is_clash(branch, natal_branch):
                found["clashes"].append(slot)
            if self.is_punishment(branch, natal_branch):
                found["punishments"].append(slot)
            if self.is_harm(branch, natal_branch):
                found["harms"].append(slot)
            if self.is_destruction(branch, natal_branch):
                found["destructions"].append(slot)
        three = self.three_harmonies(branch, natal.branches)
        # 삼합이 완성된 지지는 반합으로 중복 계산하지 않는다
        if three:
            completed = set("".join(three))
            found["half_harmonies"] = [
                slot for slot in found["half_harmonies"] if natal.slot(slot).branch not in completed
            ]
        relation = self.useful_god_relation(pillar.element, yong_shin)

        score = 50
        score += len(found["six_harmonies"]) * weights.harmony
        score += len(three) * weights.three_harmony
        score += len(found["half_harmonies"]) * weights.half_harmony
        score -= len(found["clashes"]) * weights.clash
        score -= len(found["punishments"]) * weights.punishment
        score -= len(found["harms"]) * weights.harm
        score -= len(found["destructions"]) * weights.destruction
        if relation == "support":
            score += weights.support
        elif relation == "against":
            score -= weights.against
        score = max(0, min(100, score))

        return Interaction(
            three_harmonies=three,
            useful_god_relation=relation,
            score=score,
            grade=score_to_grade(score),
            **found,
        )


def score_to_grade(score: int) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return "challenging"


def describe_interaction(interaction: Interaction, locale: str = "ko") -> list:
    """Readable relation labels, e.g. '월지와 충' / 'clash with month branch'."""
    labels = PILLAR_LABELS[locale]
    kinds = (
        ("six_harmonies", "육합", "six harmony"),
        ("half_harmonies", "반합", "half harmony"),
        ("clashes", "충", "clash"),
        ("punishments", "형", "punishment"),
        ("harms", "해", "harm"),
        ("destructions", "파", "destruction"),
    )
    lines = []
    for field, ko, en in kinds:
        for slot in getattr(interaction, field):
            lines.append(f"{labels[slot]}와 {ko}" if locale == "ko" else f"{en} with {labels[slot]}")
    for triad in interaction.three_harmonies:
        lines.append(f"{triad} 삼합" if locale == "ko" else f"three harmony {triad}")
    return lines


_INTERACTION_CALC = BranchInteractionCalculator()


def analyze_interaction(pillar: Pillar, natal: FourPillars, yong_shin: str, weights: ScoreWeights = CYCLE_WEIGHTS) -> Interaction:
    return _INTERACTION_CALC.analyze(pillar, natal, yong_shin, weights)


def useful_god_relation(element: str, yong_shin: str) -> str:
    return _INTERACTION_CALC.useful_god_relation(element, yong_shin)
