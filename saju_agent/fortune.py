"""
Fortune timeline engine (대운 / 소운 / 세운 / 월운 / 일운 / 시운).

Each granularity is an independent, deterministic sequence of pillars
anchored to the natal chart; every entry carries an Interaction scored
against the natal branches and the useful god.

Ages on the major/minor/yearly timelines are counted the traditional way:
the birth year is age 1.
"""
import calendar
import logging
import math
from datetime import date, timedelta
from typing import List

from lunar_python import Solar

from saju_agent.calculator import (
    check_year_range,
    day_pillar_for,
    hour_stem,
    month_pillar_for,
    solar_term_name,
    solar_to_datetime,
    year_pillar,
)
from saju_agent.constants import (
    BRANCHES,
    BRANCH_ELEMENTS,
    HOUR_PERIOD_NAMES,
    HOUR_RANGES,
    ZODIAC_ANIMALS,
)
from saju_agent.interactions import (
    CYCLE_WEIGHTS,
    DAILY_WEIGHTS,
    MAJOR_WEIGHTS,
    analyze_interaction,
    useful_god_relation,
)
from saju_agent.models import (
    BirthChart,
    CalendarDay,
    CalendarStatistics,
    ChartAnalysis,
    DailyFortune,
    FortuneCalendar,
    HourlyFortune,
    MajorFortune,
    MajorFortuneTimeline,
    MinorFortune,
    MonthlyFortune,
    MonthlyOverview,
    Pillar,
    YearlyFortune,
)
from saju_agent.ten_gods import ten_god

logger = logging.getLogger(__name__)

MAJOR_FORTUNE_COUNT = 10

# 대운 천간 오행별 키워드
ELEMENT_KEYWORDS = {
    "wood": ("성장", "growth"),
    "fire": ("열정", "passion"),
    "earth": ("안정", "stability"),
    "metal": ("결실", "harvest"),
    "water": ("지혜", "wisdom"),
}

# 세운 천간의 십성별 한 해 주제
YEARLY_THEMES = {
    "companion": ("독립과 자기 주도의 해", "A year of independence and self-direction"),
    "rob_wealth": ("경쟁과 도전의 해", "A year of competition and challenge"),
    "eating_god": ("표현과 여유의 해", "A year of expression and ease"),
    "hurting_officer": ("변화와 혁신의 해", "A year of change and innovation"),
    "indirect_wealth": ("기회와 확장의 해", "A year of opportunity and expansion"),
    "direct_wealth": ("안정적 축적의 해", "A year of steady accumulation"),
    "seven_killings": ("압박 속 돌파의 해", "A year of breakthroughs under pressure"),
    "direct_officer": ("인정과 책임의 해", "A year of recognition and responsibility"),
    "indirect_seal": ("탐구와 내면 성찰의 해", "A year of exploration and reflection"),
    "direct_seal": ("배움과 도움의 해", "A year of learning and support"),
}

# 등급별 추천/비추천 활동
GRADE_ACTIVITIES = {
    "ko": {
        "excellent": (["중요한 계약", "큰 결정", "새로운 시작", "면접"], []),
        "good": (["사업 미팅", "여행", "소개팅", "발표"], ["극도로 중요한 결정"]),
        "normal": (["일상 업무", "가벼운 약속"], ["중요한 계약", "큰 투자"]),
        "caution": (["휴식", "재충전", "계획 수립"], ["중요한 결정", "계약", "새로운 시작"]),
        "challenging": (["휴식", "정리정돈"], ["중요한 결정", "계약", "여행", "큰 지출"]),
    },
    "en": {
        "excellent": (["important contracts", "big decisions", "new beginnings", "interviews"], []),
        "good": (["business meetings", "travel", "blind dates", "presentations"], ["critical decisions"]),
        "normal": (["routine work", "casual plans"], ["important contracts", "large investments"]),
        "caution": (["rest", "recharging", "planning"], ["important decisions", "contracts", "new beginnings"]),
        "challenging": (["rest", "tidying up"], ["important decisions", "contracts", "travel", "large spending"]),
    },
}

# 활동별 선호 오행
ACTIVITY_ELEMENTS = {
    "meeting": ("wood", "fire"),
    "negotiation": ("metal", "water"),
    "decision": ("metal", "earth"),
    "creative": ("fire", "wood"),
    "rest": ("water", "earth"),
}

GRADE_ORDER = ("challenging", "caution", "normal", "good", "excellent")


# ================== 대운 ==================

def fortune_direction(chart, gender: str) -> str:
    """양남음녀 순행, 음남양녀 역행. Accepts a BirthChart or FourPillars."""
    pillars = chart.pillars if isinstance(chart, BirthChart) else chart
    is_yang = pillars.year.stem_polarity == "yang"
    if (is_yang and gender == "male") or (not is_yang and gender == "female"):
        return "forward"
    return "backward"


def major_fortune_start(chart: BirthChart, direction: str) -> tuple:
    """
    대운 시작 나이: 출생 시점부터 진행 방향의 가장 가까운 절(節)까지의 일수 / 3.

    Returns:
        (start_age, days, term_name)
    """
    t = chart.corrected_time
    lunar = Solar.fromYmdHms(t.year, t.month, t.day, t.hour, t.minute, t.second).getLunar()
    term = lunar.getNextJie() if direction == "forward" else lunar.getPrevJie()
    term_time = solar_to_datetime(term.getSolar())
    days = abs((term_time - t).total_seconds()) / 86400.0
    start_age = max(1, int(math.floor(days / 3.0 + 0.5)))
    return start_age, days, solar_term_name(term)


def major_fortunes(chart: BirthChart, analysis: ChartAnalysis, gender: str, count: int = MAJOR_FORTUNE_COUNT) -> MajorFortuneTimeline:
    pillars = chart.pillars
    direction = fortune_direction(chart, gender)
    start_age, days, term_name = major_fortune_start(chart, direction)
    step = 1 if direction == "forward" else -1
    birth_year = chart.solar_date.year
    yong = analysis.elements.yong_shin

    periods = []
    for i in range(1, count + 1):
        pillar = pillars.month.shift(step * i)
        age_from = start_age + (i - 1) * 10
        age_to = age_from + 9
        ko, en = ELEMENT_KEYWORDS[pillar.element]
        periods.append(MajorFortune(
            index=i,
            pillar=pillar,
            start_age=age_from,
            end_age=age_to,
            start_year=birth_year + age_from - 1,
            end_year=birth_year + age_to - 1,
            keyword=ko,
            keyword_en=en,
            ten_god=ten_god(pillars.day_master, pillar.stem),
            interaction=analyze_interaction(pillar, pillars, yong, MAJOR_WEIGHTS),
        ))

    logger.debug("major fortune %s from age %d (%.1f days to %s)", direction, start_age, days, term_name)
    return MajorFortuneTimeline(
        direction=direction,
        start_age=start_age,
        days_to_term=round(days, 2),
        solar_term=term_name,
        periods=periods,
    )


def current_major_fortune(timeline: MajorFortuneTimeline, year: int):
    """Return the major fortune covering `year`, or None before the first period."""
    for period in timeline.periods:
        if period.start_year <= year <= period.end_year:
            return period
    return None


# ================== 소운 ==================

def minor_fortunes(chart: BirthChart, analysis: ChartAnalysis, timeline: MajorFortuneTimeline) -> List[MinorFortune]:
    """대운 시작 전 어린 시절: 1세는 시주, 이후 대운 방향으로 한 해씩 진행"""
    pillars = chart.pillars
    step = 1 if timeline.direction == "forward" else -1
    birth_year = chart.solar_date.year
    result = []
    for age in range(1, timeline.start_age):
        pillar = pillars.hour.shift(step * (age - 1))
        result.append(MinorFortune(
            age=age,
            year=birth_year + age - 1,
            pillar=pillar,
            interaction=analyze_interaction(pillar, pillars, analysis.elements.yong_shin, CYCLE_WEIGHTS),
        ))
    return result


def current_minor_fortune(minors: List[MinorFortune], age: int):
    for minor in minors:
        if minor.age == age:
            return minor
    return None


# ================== 세운 ==================

def yearly_fortune(chart: BirthChart, analysis: ChartAnalysis, year: int) -> YearlyFortune:
    check_year_range(year)
    pillars = chart.pillars
    pillar = year_pillar(year)
    god = ten_god(pillars.day_master, pillar.stem)
    theme, theme_en = YEARLY_THEMES[god]
    return YearlyFortune(
        year=year,
        age=year - chart.solar_date.year + 1,
        pillar=pillar,
        animal=ZODIAC_ANIMALS["ko"][pillar.branch_index],
        ten_god=god,
        theme=theme,
        theme_en=theme_en,
        interaction=analyze_interaction(pillar, pillars, analysis.elements.yong_shin, CYCLE_WEIGHTS),
    )


def yearly_fortunes(chart: BirthChart, analysis: ChartAnalysis, start_year: int, count: int = 10) -> List[YearlyFortune]:
    check_year_range(start_year + count - 1)
    return [yearly_fortune(chart, analysis, start_year + i) for i in range(count)]


# ================== 월운 ==================

def monthly_fortune(chart: BirthChart, analysis: ChartAnalysis, year: int, month: int) -> MonthlyFortune:
    pillars = chart.pillars
    pillar = month_pillar_for(year, month)
    return MonthlyFortune(
        year=year,
        month=month,
        pillar=pillar,
        ten_god=ten_god(pillars.day_master, pillar.stem),
        interaction=analyze_interaction(pillar, pillars, analysis.elements.yong_shin, CYCLE_WEIGHTS),
    )


def monthly_fortunes(chart: BirthChart, analysis: ChartAnalysis, year: int) -> MonthlyOverview:
    check_year_range(year)
    months = [monthly_fortune(chart, analysis, year, m) for m in range(1, 13)]
    ranked = sorted(months, key=lambda m: (-m.interaction.score, m.month))
    return MonthlyOverview(
        year=year,
        months=months,
        best_months=[m.month for m in ranked[:3]],
        caution_months=[m.month for m in months if m.interaction.grade in ("caution", "challenging")],
    )


# ================== 시운 ==================

def _hour_label(index: int, locale: str) -> str:
    return f"{HOUR_PERIOD_NAMES[locale][index]}({HOUR_RANGES[index]})"


def hourly_fortunes(chart: BirthChart, analysis: ChartAnalysis, day: date) -> List[HourlyFortune]:
    pillars = chart.pillars
    day_stem = day_pillar_for(day).stem
    result = []
    for i, branch in enumerate(BRANCHES):
        pillar = Pillar.of(hour_stem(day_stem, branch), branch)
        result.append(HourlyFortune(
            branch=branch,
            period_name=HOUR_PERIOD_NAMES["ko"][i],
            period_name_en=HOUR_PERIOD_NAMES["en"][i],
            time_range=HOUR_RANGES[i],
            pillar=pillar,
            interaction=analyze_interaction(pillar, pillars, analysis.elements.yong_shin, CYCLE_WEIGHTS),
        ))
    return result


def recommended_hours(chart: BirthChart, analysis: ChartAnalysis, day: date, activity: str, limit: int = 3) -> dict:
    """
    활동에 맞는 시간대 추천.

    Returns:
        {"recommended": [HourlyFortune...], "avoid": [HourlyFortune...]}
    """
    if activity not in ACTIVITY_ELEMENTS:
        raise ValueError(f"unknown activity: {activity}")
    preferred = ACTIVITY_ELEMENTS[activity]
    hours = hourly_fortunes(chart, analysis, day)
    recommended = [
        h for h in hours if h.interaction.score >= 55 and h.pillar.element in preferred
    ]
    recommended.sort(key=lambda h: -h.interaction.score)
    avoid = [
        h for h in hours if h.interaction.has_clash or h.interaction.grade in ("caution", "challenging")
    ]
    return {"recommended": recommended[:limit], "avoid": avoid[:2]}


# ================== 일운 ==================

def daily_fortune(chart: BirthChart, analysis: ChartAnalysis, day: date, locale: str = "ko") -> DailyFortune:
    pillars = chart.pillars
    yong = analysis.elements.yong_shin
    pillar = day_pillar_for(day)

    lucky, caution = [], []
    for i, element in enumerate(BRANCH_ELEMENTS):
        relation = useful_god_relation(element, yong)
        if relation == "support":
            lucky.append(_hour_label(i, locale))
        elif relation == "against":
            caution.append(_hour_label(i, locale))

    return DailyFortune(
        date=day,
        pillar=pillar,
        interaction=analyze_interaction(pillar, pillars, yong, DAILY_WEIGHTS),
        lucky_hours=lucky,
        caution_hours=caution,
    )


def daily_fortunes(chart: BirthChart, analysis: ChartAnalysis, start: date, days: int = 7, locale: str = "ko") -> List[DailyFortune]:
    check_year_range(start + timedelta(days=max(days - 1, 0)))
    return [daily_fortune(chart, analysis, start + timedelta(days=i), locale) for i in range(days)]


# ================== 운세 달력 ==================

def fortune_calendar(chart: BirthChart, analysis: ChartAnalysis, year: int, month: int, locale: str = "ko") -> FortuneCalendar:
    check_year_range(year)
    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12: {month}")

    days = []
    grade_counts = {grade: 0 for grade in GRADE_ORDER}
    for d in range(1, calendar.monthrange(year, month)[1] + 1):
        day = date(year, month, d)
        fortune = daily_fortune(chart, analysis, day, locale)
        good_for, bad_for = GRADE_ACTIVITIES[locale][fortune.interaction.grade]
        days.append(CalendarDay(
            fortune=fortune,
            weekday=day.weekday(),
            good_for=list(good_for),
            bad_for=list(bad_for),
        ))
        grade_counts[fortune.interaction.grade] += 1

    scores = [day.fortune.interaction.score for day in days]

    def dates_with(*grades):
        return [day.fortune.date for day in days if day.fortune.interaction.grade in grades]

    return FortuneCalendar(
        year=year,
        month=month,
        days=days,
        excellent_days=dates_with("excellent"),
        good_days=dates_with("good"),
        caution_days=dates_with("caution", "challenging"),
        statistics=CalendarStatistics(
            average_score=int(sum(scores) / len(scores) + 0.5),
            max_score=max(scores),
            min_score=min(scores),
            grade_counts=grade_counts,
        ),
    )


def find_auspicious_days(cal: FortuneCalendar, min_grade: str = "good") -> List[CalendarDay]:
    """택일: min_grade 이상인 날을 점수 높은 순으로"""
    floor = GRADE_ORDER.index(min_grade)
    picked = [d for d in cal.days if GRADE_ORDER.index(d.fortune.interaction.grade) >= floor]
    return sorted(picked, key=lambda d: (-d.fortune.interaction.score, d.fortune.date))
