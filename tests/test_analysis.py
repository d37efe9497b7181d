import pytest

from saju_agent.analyzer import analyze_chart, chart_to_prompt_data, summarize_chart
from saju_agent.constants import ELEMENTS, STEMS, TEN_GODS
from saju_agent.elements import analyze_elements
from saju_agent.models import FourPillars, Pillar
from saju_agent.stars import detect_stars
from saju_agent.ten_gods import all_ten_gods, ten_god, ten_god_name


def make_pillars(year, month, day, hour):
    return FourPillars(
        year=Pillar.from_ganzhi(year),
        month=Pillar.from_ganzhi(month),
        day=Pillar.from_ganzhi(day),
        hour=Pillar.from_ganzhi(hour),
    )


SAMPLE_CHARTS = [
    ("己巳", "丁丑", "庚辰", "壬午"),
    ("甲子", "丙寅", "丁卯", "戊辰"),
    ("庚申", "庚辰", "庚戌", "庚辰"),
    ("癸亥", "癸亥", "癸亥", "癸亥"),
    ("丙午", "甲午", "丙午", "甲午"),
    ("乙未", "己卯", "辛酉", "丁酉"),
]


class TestElements:
    @pytest.mark.parametrize("pillars", SAMPLE_CHARTS, ids=lambda p: "".join(p))
    def test_scores_sum_to_100(self, pillars):
        result = analyze_elements(make_pillars(*pillars))
        assert sum(result.scores.values()) == 100
        assert set(result.scores) == set(ELEMENTS)

    def test_reference_scores(self, reference_analysis):
        elements = reference_analysis.elements
        assert elements.scores == {"wood": 3, "fire": 33, "earth": 38, "metal": 13, "water": 13}
        assert elements.dominant == ["fire", "earth"]
        assert elements.lacking == ["wood"]
        assert elements.balance == "imbalanced"
        assert elements.yong_shin == "wood"
        assert elements.strength == "strong"

    def test_related_gods(self, reference_analysis):
        # 용신 목 → 희신 수, 기신 금, 구신 토, 한신 화
        e = reference_analysis.elements
        assert (e.hee_shin, e.gi_shin, e.gu_shin, e.han_shin) == ("water", "metal", "earth", "fire")

    def test_single_element_chart(self):
        result = analyze_elements(make_pillars("癸亥", "癸亥", "癸亥", "癸亥"))
        assert result.scores["water"] > 80
        assert result.yong_shin in result.lacking


class TestTenGods:
    @pytest.mark.parametrize(
        "target, expected",
        list(zip(STEMS, [
            "companion", "rob_wealth", "eating_god", "hurting_officer", "indirect_wealth",
            "direct_wealth", "seven_killings", "direct_officer", "indirect_seal", "direct_seal",
        ])),
    )
    def test_jia_day_master(self, target, expected):
        assert ten_god("甲", target) == expected

    @pytest.mark.parametrize("day_master", STEMS)
    def test_each_day_master_sees_every_ten_god_once(self, day_master):
        assert sorted(ten_god(day_master, stem) for stem in STEMS) == sorted(TEN_GODS)

    def test_reference_map(self, reference_analysis):
        gods = reference_analysis.ten_gods
        assert gods.day_stem is None
        assert gods.year_stem == "direct_seal"
        assert gods.year_branch == "seven_killings"
        assert gods.month_stem == "direct_officer"
        assert gods.hour_stem == "eating_god"
        assert len(gods.scored_slots()) == 7

    def test_reference_summary(self, reference_analysis):
        summary = reference_analysis.ten_god_summary
        assert summary.dominant == ["direct_officer", "direct_seal"]
        assert sum(summary.counts.values()) == 7
        assert "companion" in summary.lacking

    @pytest.mark.parametrize("pillars", SAMPLE_CHARTS, ids=lambda p: "".join(p))
    def test_every_scored_slot_resolves(self, pillars):
        mapping = all_ten_gods(make_pillars(*pillars))
        assert mapping.day_stem is None
        assert all(code in TEN_GODS for code in mapping.scored_slots().values())

    def test_names(self):
        assert ten_god_name("companion", "ko") == "비견(比肩)"
        assert ten_god_name("seven_killings", "en") == "Seven Killings"


class TestStars:
    def test_reference_stars(self, reference_analysis):
        found = {star.key: star.positions for star in reference_analysis.stars}
        assert found == {"cheoneul": ["month"], "hakdang": ["year"], "goegang": ["day"]}

    def test_star_types(self, reference_analysis):
        types = {star.key: star.type for star in reference_analysis.stars}
        assert types["cheoneul"] == "auspicious"
        assert types["goegang"] == "neutral"

    def test_void(self):
        # 甲子 순의 공망은 戌亥
        stars = detect_stars(make_pillars("壬戌", "辛亥", "甲子", "甲子"))
        void = next(s for s in stars if s.key == "gongmang")
        assert void.positions == ["year", "month"]
        assert void.type == "inauspicious"

    def test_peach_blossom_and_travel(self):
        # 일지 子 → 도화 酉, 역마 寅
        stars = {s.key: s.positions for s in detect_stars(make_pillars("丙寅", "丁酉", "甲子", "甲子"))}
        assert stars["dohwa"] == ["month"]
        assert stars["yeokma"] == ["year"]

    def test_each_rule_yields_one_star(self):
        stars = detect_stars(make_pillars("庚辰", "庚辰", "庚辰", "庚辰"))
        keys = [s.key for s in stars]
        assert len(keys) == len(set(keys))


class TestAnalyzer:
    def test_accepts_four_pillars(self, reference_chart, reference_analysis):
        assert analyze_chart(reference_chart.pillars) == reference_analysis

    def test_day_master(self, reference_analysis):
        dm = reference_analysis.day_master
        assert (dm.stem, dm.element, dm.polarity) == ("庚", "metal", "yang")

    @pytest.mark.parametrize("locale", ["ko", "en"])
    def test_summary_mentions_stars(self, reference_chart, reference_analysis, locale):
        text = summarize_chart(reference_chart, reference_analysis, locale)
        assert ("천을귀인" if locale == "ko" else "Heavenly Nobleman") in text

    def test_prompt_data(self, reference_chart, reference_analysis):
        data = chart_to_prompt_data(reference_chart, reference_analysis, "en")
        assert data["pillars"] == {"year": "己巳", "month": "丁丑", "day": "庚辰", "hour": "壬午"}
        assert data["yong_shin"] == "wood"
        assert "day_stem" not in data["ten_gods"]
        assert data["true_solar_time"] == "1990-01-15 12:48"
