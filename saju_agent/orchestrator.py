"""
Personalization orchestrator.

Runs the temporal, age and chart agents concurrently and merges their output
into one PersonalizationBundle for the downstream interpretation service.
"""
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from datetime import datetime

from saju_agent import config
from saju_agent.agents import (
    run_age_agent,
    run_chart_agent,
    run_temporal_agent,
    year_description,
)
from saju_agent.constants import CATEGORIES, GENDERS, LOCALES
from saju_agent.errors import InvalidInput
from saju_agent.models import (
    AgeContext,
    BirthChart,
    ChartAnalysis,
    ChartContext,
    PersonalizationBundle,
    TemporalContext,
)
from saju_agent.search import SeasonalSearch

logger = logging.getLogger(__name__)


# 플래그별 추천 토픽
FLAG_TOPICS = (
    ("emphasize_career", ["직업운", "사업운"], ["career fortune", "business"]),
    ("emphasize_wealth", ["재물운", "투자"], ["wealth fortune", "investment"]),
    ("emphasize_movement", ["이직", "이사", "여행"], ["job change", "moving", "travel"]),
    ("emphasize_study", ["학업운", "자격증", "자기계발"], ["study fortune", "certifications", "self-improvement"]),
    ("emphasize_leadership", ["리더십", "승진"], ["leadership", "promotion"]),
    ("health_caution", ["건강운", "건강관리"], ["health fortune", "wellness"]),
)

# 플래그별 피해야 할 토픽
FLAG_AVOID_TOPICS = (
    ("avoid_marriage_advice", ["결혼 압박", "출산 권유", "연애 조언"],
     ["marriage pressure", "childbirth advice", "dating advice"]),
    ("relationship_caution", ["대인관계 과도한 낙관", "새로운 만남 권유"],
     ["over-optimistic relationship outlook", "encouraging new meetings"]),
)

TEN_GOD_GROUPS = {
    "peer": ("companion", "rob_wealth"),
    "output": ("eating_god", "hurting_officer"),
    "wealth": ("direct_wealth", "indirect_wealth"),
    "officer": ("direct_officer", "seven_killings"),
    "seal": ("direct_seal", "indirect_seal"),
}

# 카테고리별로 참고할 추론 출처 (None이면 해당 출처 전체)
CATEGORY_SOURCES = {
    "day_master": {"day_master": None},
    "personality": {"star": ("hwagae",), "ten_god": ("seal", "output", "peer")},
    "career": {"flag": ("emphasize_career",), "ten_god": ("officer",), "star": ("yeokma",)},
    "wealth": {"ten_god": ("wealth", "peer")},
    "relationship": {"star": ("dohwa", "cheoneul"), "ten_god": ("peer",)},
    "health": {"flag": ("health_caution",)},
    "fortune": {"age": None},
    "ten_gods": {"ten_god": ("officer", "output")},
    "stars": {"star": ("yeokma", "cheoneul")},
}

CATEGORY_HEADERS = {
    "day_master": ("일간(日干) 분석 컨텍스트", "Day Master Analysis Context"),
    "personality": ("성격 분석 컨텍스트", "Personality Analysis Context"),
    "career": ("직업/적성 분석 컨텍스트", "Career Analysis Context"),
    "wealth": ("재물운 분석 컨텍스트", "Wealth Analysis Context"),
    "relationship": ("대인관계 분석 컨텍스트", "Relationship Analysis Context"),
    "health": ("건강운 분석 컨텍스트", "Health Analysis Context"),
    "fortune": ("운세 분석 컨텍스트", "Fortune Analysis Context"),
    "ten_gods": ("십성(十星) 분석 컨텍스트", "Ten Gods Analysis Context"),
    "stars": ("신살(神殺) 분석 컨텍스트", "Special Stars Analysis Context"),
}

# 프롬프트 섹션별로 포함할 카테고리
HEALTH_SECTION_CATEGORIES = ("health",)
TIMING_SECTION_CATEGORIES = ("fortune", "career", "wealth", "health")


# ================== 추론 문장 ==================

LIFE_EXPERIENCES = {
    "day_master": {
        "water": ("어릴 때부터 생각이 깊고 눈치가 빠르셨을 겁니다. 남들이 모르는 것도 먼저 알아채셨던 적이 많으시죠.",
                  "You've been thoughtful and perceptive since childhood, often noticing what others missed."),
        "wood": ("어릴 때부터 성장하고 발전하려는 욕구가 강하셨을 겁니다. 새로운 것을 배우고 시작하는 것을 좋아하셨죠.",
                 "You've had a strong drive to grow since childhood, and you enjoyed learning and starting new things."),
        "fire": ("어릴 때부터 밝고 열정적이셨을 겁니다. 주변 사람들에게 에너지를 주는 존재셨죠.",
                 "You've been bright and passionate since childhood, someone who gave energy to those around you."),
        "earth": ("어릴 때부터 신뢰감을 주는 분이셨을 겁니다. 주변에서 믿고 의지했던 경험이 많으시죠.",
                  "You've inspired trust since childhood; people around you have often relied on you."),
        "metal": ("어릴 때부터 결단력이 있고 원칙을 중요시하셨을 겁니다. '이건 아니다' 싶으면 타협하지 않으셨죠.",
                  "You've been decisive and principled since childhood, refusing to compromise on what felt wrong."),
    },
    "star": {
        "hwagae": ("어릴 때부터 혼자만의 시간을 중요하게 여기셨을 겁니다. 마음 한켠에는 '나만의 세계'가 따로 있으셨죠.",
                   "You've valued your alone time since childhood, having your own inner world."),
        "yeokma": ("한 자리에 오래 머무르기보다 새로운 환경을 찾아 움직였던 시기가 있으셨을 겁니다.",
                   "There were times you moved on to new surroundings rather than staying in one place."),
        "dohwa": ("주변에서 은근히 인기가 있으셨거나, 이성에게 관심을 받았던 경험이 있으셨을 겁니다.",
                  "You've likely received attention from others, perhaps without even realizing it."),
        "cheoneul": ("인생의 중요한 순간마다 누군가의 도움을 받으셨던 경험이 있으셨을 겁니다.",
                     "At important moments in life, someone has been there to help you."),
    },
    "ten_god": {
        "seal": ("어릴 때부터 책이나 공부에 관심이 많으셨거나, 부모님의 기대를 받고 자라셨을 겁니다.",
                 "You were drawn to books and study early on, or grew up carrying your parents' expectations."),
        "output": ("어릴 때부터 표현력이 남달랐거나, 뭔가 만들고 창작하는 것을 좋아하셨을 겁니다.",
                   "You've had a way with expression since childhood, and enjoyed making and creating things."),
        "peer": ("어릴 때부터 독립심이 강하고 주관이 뚜렷하셨을 겁니다. 남에게 지기 싫어하셨던 기억이 있으시죠.",
                 "You've been independent and opinionated since childhood, and you never liked to lose."),
        "officer": ("어렸을 때부터 규칙이나 조직에 맞추려고 노력하셨을 겁니다. 책임감 있게 일하시는 편이시죠.",
                    "You've tried to fit rules and organizations since you were young, and you work responsibly."),
        "wealth": ("어릴 때부터 현실적인 감각이 발달하셨을 겁니다. 이득이 되는 일에 관심이 많으셨던 기억이 있으실 거예요.",
                   "You developed a practical sense early, with a keen eye for what pays off."),
    },
    "flag": {
        "emphasize_career": ("일에 대한 욕심이 있으셔서, 개인적인 것을 희생하면서까지 커리어에 집중하셨던 시기가 있으셨을 겁니다.",
                             "There have been times when you sacrificed personal matters to focus on your career."),
        "health_caution": ("몸이 보내는 신호를 무시하고 무리하셨던 적이 있으셨을 겁니다.",
                           "There have been times when you ignored your body's signals and overworked yourself."),
    },
}

PAST_EVENTS = {
    "day_master": {
        "water": ("생각이 너무 많아서 결정을 미루다 기회를 놓치셨던 적이 있으셨을 겁니다.",
                  "You may have missed a chance by overthinking and postponing a decision."),
        "wood": ("너무 앞서 나가다가 주변과 마찰이 있으셨던 적이 있으셨을 겁니다.",
                 "Pushing ahead too fast may have caused friction with people around you."),
        "fire": ("감정적으로 대응했다가 후회하셨던 적이 있으셨을 겁니다.",
                 "You may have reacted emotionally and regretted it later."),
        "earth": ("남들 챙기느라 정작 본인은 뒷전이었던 시기가 있으셨죠.",
                  "There was a time you looked after everyone else and put yourself last."),
        "metal": ("원칙을 고수하다가 관계에서 어려움을 겪으셨던 적이 있으셨을 겁니다.",
                  "Holding firmly to your principles may have strained some relationships."),
    },
    "star": {
        "yeokma": ("직장이나 거주지를 옮겨야 했던 시기가 있으셨을 겁니다. 쉽지 않은 선택이었지만, 결국 움직이셨죠.",
                   "There was a time you had to change jobs or homes. It wasn't easy, but you moved forward."),
        "dohwa": ("인간관계에서 복잡했던 시기가 있으셨을 겁니다. 마음이 여러 곳으로 흔들렸던 적이 있으시죠.",
                  "You've had complicated times in relationships. Your heart may have been pulled in different directions."),
        "cheoneul": ("어려운 상황에서 예상치 못한 도움을 받으셨던 적이 있으셨을 겁니다.",
                     "In a difficult situation you received help you did not expect."),
        "hwagae": ("'나는 왜 이렇게 다른가' 하는 생각으로 깊이 방황했던 시기가 있으셨을 겁니다.",
                   "There was a period of wandering when you wondered why you felt so different."),
    },
    "ten_god": {
        "officer": ("책임감 때문에 하고 싶은 것을 포기하셨던 적이 있으셨을 겁니다.",
                    "You may have given up something you wanted because of your sense of duty."),
        "output": ("하고 싶은 말을 참다가 터졌던 적이 있으셨을 겁니다.",
                   "You may have held back what you wanted to say until it finally burst out."),
        "peer": ("돈 문제로 가까운 사람과 갈등이 있으셨던 적이 있으셨을 겁니다.",
                 "Money may once have caused conflict with someone close to you."),
        "wealth": ("투자에서 쓰라린 경험을 하셨던 적이 있으셨을 겁니다. 그 경험이 지금의 신중함을 만들었죠.",
                   "A bitter investment experience may be what made you as careful as you are today."),
    },
    "flag": {
        "health_caution": ("몸이 보내는 경고 신호를 무시하고 무리하셨던 적이 있으셨을 겁니다.",
                           "There have been times when you ignored your body's warning signals and overworked yourself."),
    },
}

FUTURE_DIRECTIONS = {
    "day_master": {
        "water": ("물의 유연함을 살려 다양한 분야에서 기회를 모색하세요.",
                  "Use the flexibility of water to look for opportunities in many fields."),
        "wood": ("성장을 향한 에너지를 긍정적으로 발휘하되, 뿌리를 단단히 하는 것도 잊지 마세요.",
                 "Channel your drive to grow, but don't forget to strengthen your roots."),
        "fire": ("열정을 분산시키지 말고 하나에 집중하세요. 지속가능한 방향으로 태우셔야 합니다.",
                 "Focus your passion on one thing and let it burn sustainably."),
        "earth": ("신뢰를 바탕으로 한 관계에서 기회가 올 겁니다. 조급해하지 마시고 차근차근 쌓아가세요.",
                  "Opportunities will come through trusted relationships. Build them up step by step."),
        "metal": ("원칙을 세우되 유연함도 갖추세요. 금이 너무 단단하면 부러집니다.",
                  "Keep your principles but stay flexible; metal that is too hard will snap."),
    },
    "star": {
        "yeokma": ("{year}의 해에는 새로운 업무 환경으로 이동하시면 좋은 결과가 있을 겁니다.",
                   "In this {year}, moving to a new work environment can bring good results."),
        "hwagae": ("내면의 깊이를 살려 전문성을 키우시면 좋겠습니다.",
                   "Build expertise that draws on your inner depth."),
        "jangseong": ("리더십을 발휘할 기회를 적극적으로 찾아보세요.",
                      "Actively look for chances to lead."),
    },
    "ten_god": {
        "seal": ("학습과 자기계발을 꾸준히 하시면 나중에 큰 자산이 될 거예요.",
                 "Steady learning and self-development will become a great asset."),
        "output": ("표현력을 적극 활용하세요. 글쓰기, 강의, 창작 등의 일에서 빛을 발하실 겁니다.",
                   "Make full use of your expressiveness; writing, teaching or creating will suit you."),
        "peer": ("독립심을 살려 자신만의 영역을 만들어가세요.",
                 "Use your independence to build a domain of your own."),
        "officer": ("책임감이 강하신 분이니, 이제는 자신을 위한 시간도 챙기세요.",
                    "You carry a lot of responsibility; make time for yourself too."),
        "wealth": ("안정적인 자산 관리 습관이 장기적인 결실로 이어질 겁니다.",
                   "Steady money habits will pay off in the long run."),
    },
    "flag": {
        "emphasize_career": ("{year}의 해는 커리어에서 중요한 변화가 있을 수 있습니다. 꾸준히 실력을 쌓으세요.",
                             "This {year} may bring an important career change. Keep building your skills."),
        "health_caution": ("무리하지 말고 꾸준한 건강 관리를 생활화하세요.",
                           "Don't overdo it; make steady health care part of daily life."),
    },
}

# 나이대별 (하한, 경험, 과거 사건, 미래 방향)
AGE_INFERENCES = (
    (50,
     ("인생의 전환점을 몇 번 겪으시면서 돌아보셨던 적이 있으셨을 겁니다.",
      "Having gone through several turning points, you've often looked back on your path."),
     ("인생의 큰 전환점을 겪으셨던 시기가 있으셨을 겁니다.",
      "There was a period when your life took a major turn."),
     ("쌓아온 경험을 나누는 역할에서 보람을 찾으실 수 있습니다.",
      "You can find meaning in sharing the experience you've built.")),
    (40,
     ("30대에 인생의 방향에 대해 고민하셨던 시기가 있으셨을 겁니다.",
      "In your 30s, you probably struggled to balance various aspects of life."),
     ("30대에 인생의 전환점이 있으셨을 겁니다. 운의 흐름이 바뀌었던 시기였죠.",
      "In your 30s, you may have experienced significant transitions in life."),
     ("지금까지의 성과를 바탕으로 다음 10년의 방향을 정하기 좋은 때입니다.",
      "It's a good time to set the direction of the next ten years on what you've achieved.")),
    (30,
     ("20대에 진로를 고민하시면서 여러 선택지 앞에서 고민하셨던 적이 있으셨을 겁니다.",
      "In your 20s you likely weighed many options about your path."),
     ("20대 후반에 인생의 방향에 대해 진지하게 고민하셨던 시기가 있으셨을 겁니다.",
      "In your late 20s you seriously questioned the direction of your life."),
     ("지금 다지는 기반이 앞으로의 10년을 좌우합니다.",
      "The foundation you lay now will shape the next decade.")),
)


def _unique(items) -> list:
    return list(dict.fromkeys(items))


def _dominant_groups(chart: ChartContext) -> list:
    dominant = {t.ten_god for t in chart.dominant_ten_gods}
    return [group for group, gods in TEN_GOD_GROUPS.items() if dominant.intersection(gods)]


def _raised_flags(chart: ChartContext) -> list:
    return [name for name, value in chart.flags.model_dump().items() if value]


def _age_inference(age: int, column: int, idx: int):
    for floor, *texts in AGE_INFERENCES:
        if age >= floor:
            return texts[column][idx]
    return None


def _in_focus(category, source: str, key: str = None) -> bool:
    if category is None:
        return True
    sources = CATEGORY_SOURCES[category]
    if source not in sources:
        return False
    keys = sources[source]
    return keys is None or key in keys


def build_inferences(pool: dict, age_column: int, temporal: TemporalContext, age: AgeContext,
                     chart: ChartContext, analysis: ChartAnalysis, locale: str, category: str = None) -> list:
    """
    Collect sentences from one pool: day master, stars, ten-god groups,
    flags, then age bracket. Capped at INFERENCE_LIMIT.

    With a category only the sources listed in CATEGORY_SOURCES contribute,
    so the result may be empty.
    """
    idx = 0 if locale == "ko" else 1
    year = year_description(temporal.year_pillar, locale)
    found = []
    if _in_focus(category, "day_master"):
        found.append(pool["day_master"][analysis.day_master.element][idx])
    for star in analysis.stars:
        if star.key in pool["star"] and _in_focus(category, "star", star.key):
            found.append(pool["star"][star.key][idx])
    for group in _dominant_groups(chart):
        if group in pool["ten_god"] and _in_focus(category, "ten_god", group):
            found.append(pool["ten_god"][group][idx])
    for flag in _raised_flags(chart):
        if flag in pool["flag"] and _in_focus(category, "flag", flag):
            found.append(pool["flag"][flag][idx])
    if _in_focus(category, "age"):
        by_age = _age_inference(age.age, age_column, idx)
        if by_age:
            found.append(by_age)
    return [text.format(year=year) for text in _unique(found)][:config.INFERENCE_LIMIT]


# ================== 병합 ==================

def merge_topics(temporal: TemporalContext, age: AgeContext, chart: ChartContext, locale: str) -> tuple:
    """Returns (recommended, avoid). Anything avoided is never recommended."""
    idx = 0 if locale == "ko" else 1
    flags = chart.flags

    recommended = list(temporal.seasonal_topics[:3]) + list(age.primary_concerns[:2])
    for flag, *topics in FLAG_TOPICS:
        if getattr(flags, flag):
            recommended.extend(topics[idx])

    avoid = list(age.sensitivities)
    for flag, *topics in FLAG_AVOID_TOPICS:
        if getattr(flags, flag):
            avoid.extend(topics[idx])

    avoid = _unique(avoid)
    blocked = set(avoid)
    recommended = [t for t in _unique(recommended) if t not in blocked]
    return recommended, avoid


def personalization_points(temporal: TemporalContext, age: AgeContext, chart: ChartContext, locale: str) -> list:
    year = year_description(temporal.year_pillar, locale)
    if locale == "ko":
        points = [f"현재 {temporal.season}철, {year}"]
    else:
        points = [f"Currently {temporal.season}, {year}"]
    points.extend(temporal.timing_advice[:2])
    points.append(f"{age.age_group} ({age.life_stage})")
    points.append(age.context)
    points.append(chart.context)
    if chart.health.watch_areas:
        label = "건강 주의" if locale == "ko" else "Health watch"
        points.append(f"{label}: {', '.join(chart.health.watch_areas)}")
    if chart.significant_stars:
        label = "주요 신살" if locale == "ko" else "Key stars"
        names = [s.star.name if locale == "ko" else s.star.name_en for s in chart.significant_stars[:3]]
        points.append(f"{label}: {', '.join(names)}")
    return points[:config.PERSONALIZATION_POINT_LIMIT]


def suggest_search_queries(temporal: TemporalContext, age: AgeContext, chart: ChartContext, locale: str,
                           user_query: str = None) -> list:
    year = temporal.now.year
    group = age.age_group
    flags = chart.flags
    desc = year_description(temporal.year_pillar, locale)
    if locale == "ko":
        queries = [f"{group} {desc} 운세"]
        if flags.emphasize_career:
            queries.append(f"{group} {year}년 직업운 이직")
        if flags.emphasize_wealth:
            queries.append(f"{group} {year}년 재테크 투자 트렌드")
        if chart.health.watch_areas:
            queries.append(f"{group} {chart.health.watch_areas[0]} 건강관리")
    else:
        queries = [f"{group} {desc} fortune"]
        if flags.emphasize_career:
            queries.append(f"{group} {year} career trends")
        if flags.emphasize_wealth:
            queries.append(f"{group} {year} investment trends")
        if chart.health.watch_areas:
            queries.append(f"{group} {chart.health.watch_areas[0]} health tips")
    if user_query:
        queries.append(f"{group} {user_query} {year}년" if locale == "ko" else f"{group} {user_query} {year}")
    return _unique(queries)


# ================== 진입점 ==================

def build_personalization(
    chart: BirthChart,
    analysis: ChartAnalysis,
    now: datetime,
    birth_year: int = None,
    gender: str = "male",
    locale: str = "ko",
    searcher=None,
    category: str = None,
    user_query: str = None,
) -> PersonalizationBundle:
    """
    Build the personalization bundle for one chart at one moment.

    Args:
        chart: natal chart from compute_pillars
        analysis: analyze_chart(chart)
        now: reference moment; passing it explicitly keeps results reproducible
        birth_year: defaults to the chart's solar birth year
        gender: "male" | "female"
        locale: "ko" | "en"
        searcher: object with search_topics(query); defaults to SeasonalSearch()
        category: narrows inferences and prompt sections to one consultation
            topic (see CATEGORIES); None covers everything
        user_query: the user's own question, added to the suggested searches

    Returns:
        PersonalizationBundle
    """
    if gender not in GENDERS:
        raise InvalidInput("gender", gender, "gender must be 'male' or 'female'")
    if locale not in LOCALES:
        raise InvalidInput("locale", locale, "locale must be 'ko' or 'en'")
    if category is not None and category not in CATEGORIES:
        raise InvalidInput("category", category, f"category must be one of {', '.join(CATEGORIES)}")
    if user_query is not None:
        user_query = user_query.strip() or None
    if birth_year is None:
        birth_year = chart.solar_date.year
    if searcher is None:
        searcher = SeasonalSearch()

    start_time = time.monotonic()

    def timed(name, fn, *args):
        t0 = time.monotonic()
        result = fn(*args)
        if config.PERF_LOG:
            logger.info("[PERF] %s_agent ms=%d", name, int((time.monotonic() - t0) * 1000))
        return result

    # temporal 에이전트가 제한 시간을 넘기면 정적 키워드로 대체
    join_timeout = config.SEARCH_TIMEOUT_SECONDS + config.AGENT_JOIN_MARGIN_SECONDS
    executor = ThreadPoolExecutor(max_workers=3)
    try:
        temporal_future = executor.submit(timed, "temporal", run_temporal_agent, now, birth_year, gender, locale, searcher)
        age_future = executor.submit(timed, "age", run_age_agent, now, birth_year, gender, locale)
        chart_future = executor.submit(timed, "chart", run_chart_agent, analysis, locale)
        try:
            temporal = temporal_future.result(timeout=join_timeout)
        except FutureTimeout:
            logger.warning("temporal agent did not finish within %.1fs, using static keywords", join_timeout)
            temporal = run_temporal_agent(now, birth_year, gender, locale, None)
        age = age_future.result()
        chart_ctx = chart_future.result()
    finally:
        executor.shutdown(wait=False)

    recommended, avoid = merge_topics(temporal, age, chart_ctx, locale)
    bundle = PersonalizationBundle(
        locale=locale,
        gender=gender,
        temporal=temporal,
        age=age,
        chart=chart_ctx,
        recommended_topics=recommended,
        avoid_topics=avoid,
        life_experiences=build_inferences(LIFE_EXPERIENCES, 0, temporal, age, chart_ctx, analysis, locale, category),
        past_events=build_inferences(PAST_EVENTS, 1, temporal, age, chart_ctx, analysis, locale, category),
        future_directions=build_inferences(FUTURE_DIRECTIONS, 2, temporal, age, chart_ctx, analysis, locale, category),
        personalization_points=personalization_points(temporal, age, chart_ctx, locale),
        search_queries=suggest_search_queries(temporal, age, chart_ctx, locale, user_query),
        processed_at=now,
        grounding_used=temporal.grounded,
        category=category,
        user_query=user_query,
    )

    if config.PERF_LOG:
        logger.info("[PERF] personalization total_ms=%d", int((time.monotonic() - start_time) * 1000))
    return bundle


def format_prompt_context(bundle: PersonalizationBundle) -> str:
    """Render the bundle as a markdown block for the interpretation prompt."""
    ko = bundle.locale == "ko"
    year = year_description(bundle.temporal.year_pillar, bundle.locale)
    category = bundle.category
    include_health = category is None or category in HEALTH_SECTION_CATEGORIES
    include_timing = category is None or category in TIMING_SECTION_CATEGORIES

    def section(title, items, quote=False):
        if not items:
            return ""
        lines = "\n".join(f'- "{item}"' if quote else f"- {item}" for item in items)
        return f"\n### {title}\n{lines}\n"

    if ko:
        head = (
            f"## {CATEGORY_HEADERS[category][0] if category else '초개인화 컨텍스트'}\n"
            f"### 현재 시점\n{year}의 해, {bundle.temporal.season}\n"
            f"### 이 분의 프로필\n{bundle.age.age_group}, {bundle.chart.context}\n"
        )
        titles = ("과거 삶의 경험", "과거 사건/고난", "미래 방향", "건강 관련 조언", "시기별 조언", "추천 토픽", "피해야 할 토픽")
    else:
        head = (
            f"## {CATEGORY_HEADERS[category][1] if category else 'Personalized Context'}\n"
            f"### Current Timing\n{year}, {bundle.temporal.season}\n"
            f"### Profile\n{bundle.age.age_group}, {bundle.chart.context}\n"
        )
        titles = ("Past Life Experiences", "Past Events/Challenges", "Future Direction", "Health Advice",
                  "Timely Advice", "Recommended Topics", "Topics to Avoid")

    return head + "".join([
        section(titles[0], bundle.life_experiences, quote=True),
        section(titles[1], bundle.past_events, quote=True),
        section(titles[2], bundle.future_directions, quote=True),
        section(titles[3], bundle.chart.health.recommendations[:2] if include_health else []),
        section(titles[4], bundle.temporal.timing_advice[:2] if include_timing else []),
        section(titles[5], bundle.recommended_topics),
        section(titles[6], bundle.avoid_topics),
    ])
