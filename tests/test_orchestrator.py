import logging
from datetime import datetime

import pytest

from saju_agent import InvalidInput, build_personalization, config
from saju_agent.agents import (
    SEASON_KEYWORDS,
    age_group_label,
    life_stage_of,
    run_age_agent,
    run_chart_agent,
    run_temporal_agent,
    sensitivities_for,
)
from saju_agent.models import Star
from saju_agent.orchestrator import LIFE_EXPERIENCES, PAST_EVENTS, format_prompt_context

from conftest import BrokenSearcher, FakeSearcher, StalledSearcher


def make_star(key, star_type="auspicious"):
    return Star(
        key=key, name=key, hanja="", name_en=key, type=star_type,
        description=f"{key} 설명", description_en=f"{key} description", positions=["day"],
    )


class TestTemporalAgent:
    def test_grounded(self, fake_searcher, frozen_now):
        ctx = run_temporal_agent(frozen_now, 1990, "male", "ko", fake_searcher)
        assert ctx.grounded is True
        assert ctx.seasonal_topics == fake_searcher.topics
        assert ctx.year_pillar.ganzhi == "丙午"
        assert ctx.month_pillar.ganzhi == "辛卯"
        assert ctx.season == "봄"
        assert fake_searcher.queries == [ctx.search_query]
        assert "30대 중반" in ctx.search_query

    def test_fallback_to_static_keywords(self, failing_searcher, frozen_now, caplog):
        with caplog.at_level(logging.WARNING, logger="saju_agent.agents"):
            ctx = run_temporal_agent(frozen_now, 1990, "female", "en", failing_searcher)
        assert ctx.grounded is False
        assert ctx.seasonal_topics == SEASON_KEYWORDS[3]["en"]
        assert failing_searcher.calls == 1
        assert "seasonal search unavailable" in caplog.text

    def test_unexpected_error_falls_back(self, frozen_now, caplog):
        with caplog.at_level(logging.WARNING, logger="saju_agent.agents"):
            ctx = run_temporal_agent(frozen_now, 1990, "male", "ko", BrokenSearcher(ConnectionResetError("reset")))
        assert ctx.grounded is False
        assert ctx.seasonal_topics == SEASON_KEYWORDS[3]["ko"]
        assert "ConnectionResetError" in caplog.text

    def test_without_searcher(self):
        ctx = run_temporal_agent(datetime(2026, 12, 1), 1990, "male", "ko")
        assert ctx.grounded is False
        assert ctx.season == "겨울"


class TestAgeAgent:
    @pytest.mark.parametrize(
        "age, ko, en",
        [(20, "20대 초반", "early 20s"), (36, "30대 중반", "mid 30s"), (47, "40대 후반", "late 40s")],
    )
    def test_age_group_label(self, age, ko, en):
        assert age_group_label(age, "ko") == ko
        assert age_group_label(age, "en") == en

    @pytest.mark.parametrize(
        "age, code",
        [(25, "young_adult"), (30, "early_prime"), (45, "mid_prime"), (59, "late_prime"), (65, "senior"), (80, "elder")],
    )
    def test_life_stage(self, age, code):
        assert life_stage_of(age)[0] == code

    def test_sensitivities(self):
        assert sensitivities_for(33, "en") == ["Avoid pressuring about marriage/children"]
        assert sensitivities_for(45, "en") == [
            "Avoid excessive health anxiety triggers",
            "Avoid comparing children's success/failure",
        ]
        assert sensitivities_for(20) == []

    def test_age_is_calendar_difference(self, frozen_now):
        ctx = run_age_agent(frozen_now, 1990, "male", "ko")
        assert ctx.age == 36
        assert ctx.life_stage == "장년 초기"


class TestChartAgent:
    def test_reference_flags(self, reference_analysis):
        ctx = run_chart_agent(reference_analysis, "en")
        assert ctx.flags.emphasize_career
        assert ctx.flags.relationship_caution
        assert not ctx.flags.health_caution
        assert ctx.health.lacking == ["wood"]
        assert ctx.health.excess == ["fire", "earth"]
        assert ctx.health.watch_areas == ["liver", "gallbladder", "eyes"]
        assert [t.ten_god for t in ctx.dominant_ten_gods] == ["direct_officer", "direct_seal"]
        assert ctx.context.startswith("Day Master is 庚 (metal)")

    def test_two_lacking_elements_raise_health_caution(self, reference_analysis):
        elements = reference_analysis.elements.model_copy(update={"lacking": ["wood", "water"]})
        analysis = reference_analysis.model_copy(update={"elements": elements})
        assert run_chart_agent(analysis, "ko").flags.health_caution


class TestBuildPersonalization:
    def test_is_reproducible(self, reference_chart, reference_analysis, frozen_now):
        first = build_personalization(reference_chart, reference_analysis, frozen_now, searcher=FakeSearcher())
        second = build_personalization(reference_chart, reference_analysis, frozen_now, searcher=FakeSearcher())
        assert first == second
        assert first.processed_at == frozen_now
        assert first.grounding_used is True

    def test_search_failure_falls_back(self, reference_chart, reference_analysis, frozen_now, failing_searcher):
        bundle = build_personalization(reference_chart, reference_analysis, frozen_now, searcher=failing_searcher)
        assert bundle.grounding_used is False
        assert bundle.temporal.seasonal_topics == SEASON_KEYWORDS[3]["ko"]
        assert bundle.recommended_topics[:3] == SEASON_KEYWORDS[3]["ko"]

    def test_default_searcher_without_key(self, monkeypatch, reference_chart, reference_analysis, frozen_now):
        monkeypatch.setattr(config, "TAVILY_API_KEY", None)
        bundle = build_personalization(reference_chart, reference_analysis, frozen_now)
        assert bundle.grounding_used is False

    def test_career_topics_for_mid_forties(self, reference_chart, reference_analysis):
        stars = [make_star("cheoneul"), make_star("jangseong"), make_star("goegang", "neutral")]
        analysis = reference_analysis.model_copy(update={"stars": stars})
        bundle = build_personalization(
            reference_chart, analysis, datetime(2035, 3, 1), birth_year=1990,
            gender="female", locale="en", searcher=FakeSearcher(["spring", "hiking"]),
        )
        assert bundle.age.age == 45
        assert bundle.flags.emphasize_leadership
        assert "career fortune" in bundle.recommended_topics
        assert "promotion" in bundle.recommended_topics
        assert "career fortune" not in bundle.avoid_topics
        assert "Avoid comparing children's success/failure" in bundle.avoid_topics

    def test_avoid_wins_over_recommended(self, reference_chart, reference_analysis, frozen_now):
        analysis = reference_analysis.model_copy(update={"stars": [make_star("yeokma", "neutral")]})
        searcher = FakeSearcher(["marriage pressure", "spring travel", "moving"])
        bundle = build_personalization(reference_chart, analysis, frozen_now, locale="en", searcher=searcher)
        assert "marriage pressure" in bundle.avoid_topics
        assert "marriage pressure" not in bundle.recommended_topics
        assert "moving" in bundle.recommended_topics
        assert not set(bundle.recommended_topics) & set(bundle.avoid_topics)
        assert all("{year}" not in text for text in bundle.future_directions)
        assert any("丙午 year" in text for text in bundle.future_directions)

    def test_inferences_are_capped(self, reference_chart, reference_analysis, frozen_now, fake_searcher):
        bundle = build_personalization(reference_chart, reference_analysis, frozen_now, searcher=fake_searcher)
        for items in (bundle.life_experiences, bundle.past_events, bundle.future_directions):
            assert 1 <= len(items) <= config.INFERENCE_LIMIT
            assert len(items) == len(set(items))
        assert bundle.life_experiences[0] == LIFE_EXPERIENCES["day_master"]["metal"][0]
        assert len(bundle.personalization_points) <= config.PERSONALIZATION_POINT_LIMIT

    def test_search_queries(self, reference_chart, reference_analysis, frozen_now, fake_searcher):
        bundle = build_personalization(reference_chart, reference_analysis, frozen_now, searcher=fake_searcher)
        assert bundle.search_queries[0] == "30대 중반 병오년 (말띠, 화(火)) 운세"
        assert "30대 중반 2026년 직업운 이직" in bundle.search_queries

    def test_unexpected_search_error_falls_back(self, reference_chart, reference_analysis, frozen_now):
        searcher = BrokenSearcher(TimeoutError("read timed out"))
        bundle = build_personalization(reference_chart, reference_analysis, frozen_now, searcher=searcher)
        assert bundle.grounding_used is False
        assert bundle.temporal.seasonal_topics == SEASON_KEYWORDS[3]["ko"]

    def test_stalled_search_does_not_block(self, monkeypatch, reference_chart, reference_analysis, frozen_now, caplog):
        monkeypatch.setattr(config, "SEARCH_TIMEOUT_SECONDS", 0.05)
        monkeypatch.setattr(config, "AGENT_JOIN_MARGIN_SECONDS", 0.05)
        searcher = StalledSearcher()
        try:
            with caplog.at_level(logging.WARNING, logger="saju_agent.orchestrator"):
                bundle = build_personalization(reference_chart, reference_analysis, frozen_now, searcher=searcher)
        finally:
            searcher.release.set()
        assert bundle.grounding_used is False
        assert bundle.temporal.seasonal_topics == SEASON_KEYWORDS[3]["ko"]
        assert "late topic" not in bundle.recommended_topics
        assert "temporal agent did not finish" in caplog.text

    def test_career_category_narrows_inferences(self, reference_chart, reference_analysis, frozen_now, fake_searcher):
        bundle = build_personalization(
            reference_chart, reference_analysis, frozen_now, searcher=fake_searcher, category="career",
        )
        assert bundle.category == "career"
        assert LIFE_EXPERIENCES["day_master"]["metal"][0] not in bundle.life_experiences
        assert LIFE_EXPERIENCES["ten_god"]["officer"][0] in bundle.life_experiences
        assert LIFE_EXPERIENCES["flag"]["emphasize_career"][0] in bundle.life_experiences
        assert LIFE_EXPERIENCES["ten_god"]["seal"][0] not in bundle.life_experiences

    def test_day_master_category(self, reference_chart, reference_analysis, frozen_now, fake_searcher):
        bundle = build_personalization(
            reference_chart, reference_analysis, frozen_now, searcher=fake_searcher, category="day_master",
        )
        assert bundle.life_experiences == [LIFE_EXPERIENCES["day_master"]["metal"][0]]
        assert bundle.past_events == [PAST_EVENTS["day_master"]["metal"][0]]

    def test_user_query_adds_search(self, reference_chart, reference_analysis, frozen_now, fake_searcher):
        bundle = build_personalization(
            reference_chart, reference_analysis, frozen_now, searcher=fake_searcher, user_query=" 이직 시기 ",
        )
        assert bundle.user_query == "이직 시기"
        assert bundle.search_queries[-1] == "30대 중반 이직 시기 2026년"

    def test_user_query_in_english(self, reference_chart, reference_analysis, frozen_now, fake_searcher):
        bundle = build_personalization(
            reference_chart, reference_analysis, frozen_now, locale="en", searcher=fake_searcher,
            user_query="job change",
        )
        assert bundle.search_queries[-1] == "mid 30s job change 2026"

    def test_blank_user_query_is_ignored(self, reference_chart, reference_analysis, frozen_now, fake_searcher):
        plain = build_personalization(reference_chart, reference_analysis, frozen_now, searcher=fake_searcher)
        blank = build_personalization(reference_chart, reference_analysis, frozen_now, searcher=fake_searcher,
                                      user_query="   ")
        assert blank.user_query is None
        assert blank.search_queries == plain.search_queries

    @pytest.mark.parametrize(
        "kwargs, field",
        [(dict(gender="other"), "gender"), (dict(locale="ja"), "locale"), (dict(category="romance"), "category")],
    )
    def test_invalid_input(self, reference_chart, reference_analysis, frozen_now, fake_searcher, kwargs, field):
        with pytest.raises(InvalidInput) as excinfo:
            build_personalization(reference_chart, reference_analysis, frozen_now, searcher=fake_searcher, **kwargs)
        assert excinfo.value.field == field
        assert fake_searcher.queries == []


class TestPromptContext:
    def test_korean(self, reference_chart, reference_analysis, frozen_now, fake_searcher):
        bundle = build_personalization(reference_chart, reference_analysis, frozen_now, searcher=fake_searcher)
        text = format_prompt_context(bundle)
        assert text.startswith("## 초개인화 컨텍스트")
        assert "병오년" in text
        assert "### 추천 토픽" in text
        assert f'- "{bundle.life_experiences[0]}"' in text

    def test_english(self, reference_chart, reference_analysis, frozen_now, fake_searcher):
        bundle = build_personalization(
            reference_chart, reference_analysis, frozen_now, locale="en", searcher=fake_searcher,
        )
        text = format_prompt_context(bundle)
        assert text.startswith("## Personalized Context")
        assert "### Topics to Avoid" in text
        assert "### 추천 토픽" not in text

    def test_default_includes_every_section(self, reference_chart, reference_analysis, frozen_now, fake_searcher):
        bundle = build_personalization(reference_chart, reference_analysis, frozen_now, searcher=fake_searcher)
        text = format_prompt_context(bundle)
        assert "### 건강 관련 조언" in text
        assert "### 시기별 조언" in text

    def test_health_category(self, reference_chart, reference_analysis, frozen_now, fake_searcher):
        bundle = build_personalization(
            reference_chart, reference_analysis, frozen_now, searcher=fake_searcher, category="health",
        )
        text = format_prompt_context(bundle)
        assert text.startswith("## 건강운 분석 컨텍스트")
        assert "### 건강 관련 조언" in text
        assert "### 시기별 조언" in text

    def test_relationship_category_drops_health_and_timing(self, reference_chart, reference_analysis, frozen_now,
                                                           fake_searcher):
        bundle = build_personalization(
            reference_chart, reference_analysis, frozen_now, locale="en", searcher=fake_searcher,
            category="relationship",
        )
        text = format_prompt_context(bundle)
        assert text.startswith("## Relationship Analysis Context")
        assert "### Health Advice" not in text
        assert "### Timely Advice" not in text
        assert "### Recommended Topics" in text

    def test_career_category_keeps_timing(self, reference_chart, reference_analysis, frozen_now, fake_searcher):
        bundle = build_personalization(
            reference_chart, reference_analysis, frozen_now, searcher=fake_searcher, category="career",
        )
        text = format_prompt_context(bundle)
        assert text.startswith("## 직업/적성 분석 컨텍스트")
        assert "### 시기별 조언" in text
        assert "### 건강 관련 조언" not in text
