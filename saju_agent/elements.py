"""오행 점수 계산 및 용신 판정."""
from saju_agent import config
from saju_agent.constants import (
    BRANCHES,
    ELEMENT_CONTROLLED_BY,
    ELEMENT_PRODUCED_BY,
    ELEMENTS,
    HIDDEN_STEMS,
    STEMS,
    STEM_ELEMENTS,
    BRANCH_ELEMENTS,
)
from saju_agent.models import ElementAnalysis, FourPillars


class ElementCalculator:
    """오행 분포 계산기 - 가중 점수법"""

    def __init__(self):
        # 천간 10, 지지 본기 10, 지장간 순서대로 6/4/2
        self.stem_weight = 10
        self.branch_weight = 10
        self.hidden_weights = (6, 4, 2)

    def raw_scores(self, pillars: FourPillars) -> dict:
        scores = {element: 0 for element in ELEMENTS}
        for pillar in pillars.pillars:
            scores[STEM_ELEMENTS[STEMS.index(pillar.stem)]] += self.stem_weight
            b_idx = BRANCHES.index(pillar.branch)
            scores[BRANCH_ELEMENTS[b_idx]] += self.branch_weight
            for stem, weight in zip(HIDDEN_STEMS[b_idx], self.hidden_weights):
                scores[STEM_ELEMENTS[STEMS.index(stem)]] += weight
        return scores

    def normalize(self, raw: dict) -> dict:
        """
        정수 백분율로 환산. 반올림 오차는 가장 큰 오행에 흡수시켜 합계를 정확히 100으로 맞춘다.
        """
        total = sum(raw.values())
        percents = {element: int(raw[element] * 100 / total + 0.5) for element in ELEMENTS}
        drift = 100 - sum(percents.values())
        if drift:
            top = max(ELEMENTS, key=lambda e: (raw[e], -ELEMENTS.index(e)))
            percents[top] += drift
        return percents

    def yong_shin(self, scores: dict) -> str:
        """가장 약한 오행. 동점이면 목화토금수 순서가 앞선 것."""
        return min(ELEMENTS, key=lambda e: (scores[e], ELEMENTS.index(e)))

    def related_gods(self, yong: str) -> dict:
        hee = ELEMENT_PRODUCED_BY[yong]     # 용신을 생하는 오행
        gi = ELEMENT_CONTROLLED_BY[yong]    # 용신을 극하는 오행
        gu = ELEMENT_PRODUCED_BY[gi]        # 기신을 생하는 오행
        han = next(e for e in ELEMENTS if e not in (yong, hee, gi, gu))
        return {"hee_shin": hee, "gi_shin": gi, "gu_shin": gu, "han_shin": han}

    def strength(self, scores: dict, day_master_element: str) -> tuple:
        # 비겁 + 인성
        support = scores[day_master_element] + scores[ELEMENT_PRODUCED_BY[day_master_element]]
        if support >= config.STRONG_SUPPORT_THRESHOLD:
            return support, "strong"
        if support <= config.WEAK_SUPPORT_THRESHOLD:
            return support, "weak"
        return support, "neutral"

    def analyze(self, pillars: FourPillars) -> ElementAnalysis:
        scores = self.normalize(self.raw_scores(pillars))
        dominant = [e for e in ELEMENTS if scores[e] >= config.DOMINANT_ELEMENT_THRESHOLD]
        lacking = [e for e in ELEMENTS if scores[e] <= config.LACKING_ELEMENT_THRESHOLD]
        spread = max(scores.values()) - min(scores.values())
        yong = self.yong_shin(scores)
        dm_element = STEM_ELEMENTS[STEMS.index(pillars.day_master)]
        support, strength = self.strength(scores, dm_element)

        return ElementAnalysis(
            scores=scores,
            dominant=dominant,
            lacking=lacking,
            balance="balanced" if spread <= config.BALANCE_SPREAD else "imbalanced",
            yong_shin=yong,
            day_master_element=dm_element,
            support_score=support,
            strength=strength,
            **self.related_gods(yong),
        )


_ELEMENT_CALC = ElementCalculator()


def analyze_elements(pillars: FourPillars) -> ElementAnalysis:
    return _ELEMENT_CALC.analyze(pillars)
