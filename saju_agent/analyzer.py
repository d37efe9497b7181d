"""
Chart analysis facade: elements, ten gods and stars over one birth chart,
plus the flat summaries handed to the interpretation service.
"""
from saju_agent.constants import ELEMENT_NAMES, STEMS, STEM_DESCRIPTIONS, STEM_ELEMENTS, STEM_POLARITY
from saju_agent.elements import analyze_elements
from saju_agent.models import BirthChart, ChartAnalysis, DayMasterInfo, FourPillars
from saju_agent.stars import detect_stars
from saju_agent.ten_gods import all_ten_gods, summarize_ten_gods, ten_god_name


def day_master_info(pillars: FourPillars) -> DayMasterInfo:
    idx = STEMS.index(pillars.day_master)
    return DayMasterInfo(
        stem=pillars.day_master,
        element=STEM_ELEMENTS[idx],
        polarity=STEM_POLARITY[idx],
        description=STEM_DESCRIPTIONS["ko"][idx],
        description_en=STEM_DESCRIPTIONS["en"][idx],
    )


def analyze_chart(chart) -> ChartAnalysis:
    """Run element, ten-god and star analysis. Accepts a BirthChart or FourPillars."""
    pillars = chart.pillars if isinstance(chart, BirthChart) else chart
    ten_god_map = all_ten_gods(pillars)
    return ChartAnalysis(
        day_master=day_master_info(pillars),
        elements=analyze_elements(pillars),
        ten_gods=ten_god_map,
        ten_god_summary=summarize_ten_gods(ten_god_map),
        stars=detect_stars(pillars),
    )


def summarize_chart(chart: BirthChart, analysis: ChartAnalysis, locale: str = "ko") -> str:
    p = chart.pillars
    names = ELEMENT_NAMES[locale]
    yong = names[analysis.elements.yong_shin]
    stars = ", ".join(s.name if locale == "ko" else s.name_en for s in analysis.stars)
    if locale == "ko":
        text = (
            f"{p.year.reading('ko')}년 {p.month.reading('ko')}월 {p.day.reading('ko')}일 {p.hour.reading('ko')}시, "
            f"일간 {p.day_master}{names[analysis.day_master.element]}, 용신 {yong}"
        )
        return f"{text}, 신살: {stars}" if stars else text
    text = (
        f"Year {p.year.ganzhi}, Month {p.month.ganzhi}, Day {p.day.ganzhi}, Hour {p.hour.ganzhi}; "
        f"Day Master {p.day_master} ({analysis.day_master.element}), useful element {yong}"
    )
    return f"{text}; stars: {stars}" if stars else text


def chart_to_prompt_data(chart: BirthChart, analysis: ChartAnalysis, locale: str = "ko") -> dict:
    """Flat dict of the chart for the downstream text service."""
    p = chart.pillars
    return {
        "pillars": {slot: p.slot(slot).ganzhi for slot in ("year", "month", "day", "hour")},
        "pillars_reading": {slot: p.slot(slot).reading(locale) for slot in ("year", "month", "day", "hour")},
        "day_master": p.day_master,
        "day_master_element": analysis.day_master.element,
        "day_master_description": (
            analysis.day_master.description if locale == "ko" else analysis.day_master.description_en
        ),
        "element_scores": dict(analysis.elements.scores),
        "dominant_elements": list(analysis.elements.dominant),
        "lacking_elements": list(analysis.elements.lacking),
        "yong_shin": analysis.elements.yong_shin,
        "strength": analysis.elements.strength,
        "ten_gods": {
            slot: ten_god_name(code, locale) for slot, code in analysis.ten_gods.scored_slots().items()
        },
        "dominant_ten_gods": [ten_god_name(code, locale) for code in analysis.ten_god_summary.dominant],
        "stars": [s.name if locale == "ko" else s.name_en for s in analysis.stars],
        "solar_date": chart.solar_date.isoformat(),
        "lunar_date": chart.lunar_date,
        "true_solar_time": chart.corrected_time.strftime("%Y-%m-%d %H:%M"),
        "solar_term": chart.solar_term,
    }
