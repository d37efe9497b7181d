"""
Personalization agents.

Three independent views of the same person, merged by the orchestrator:
- temporal: where "now" sits in the sexagenary cycle and the season
- age: life stage, concerns and sensitive topics
- chart: flags, health and personality drawn from the natal chart
"""
import logging
from datetime import datetime

from saju_agent import config
from saju_agent.calculator import month_pillar_for, year_pillar
from saju_agent.constants import ELEMENT_NAMES, ZODIAC_ANIMALS
from saju_agent.errors import ExternalServiceUnavailable
from saju_agent.models import (
    AgeContext,
    ChartAnalysis,
    ChartContext,
    HealthFlags,
    PersonalityProfile,
    PersonalizationFlags,
    Pillar,
    StarInsight,
    TemporalContext,
    TenGodInsight,
)

logger = logging.getLogger(__name__)


# ================== Temporal ==================

SEASON_NAMES = {
    "ko": {"spring": "봄", "summer": "여름", "autumn": "가을", "winter": "겨울"},
    "en": {"spring": "spring", "summer": "summer", "autumn": "autumn", "winter": "winter"},
}

# 월별 시즌 키워드 (검색 실패 시 기본값)
SEASON_KEYWORDS = {
    1: {"ko": ["새해", "신년 계획", "겨울"], "en": ["new year", "resolutions", "winter"]},
    2: {"ko": ["설날", "새해 운세", "겨울"], "en": ["lunar new year", "fortune", "winter"]},
    3: {"ko": ["봄", "새학기", "이직"], "en": ["spring", "new semester", "job change"]},
    4: {"ko": ["봄", "벚꽃", "새출발"], "en": ["spring", "cherry blossom", "fresh start"]},
    5: {"ko": ["가정의 달", "어버이날", "봄"], "en": ["family month", "parents day", "spring"]},
    6: {"ko": ["여름 시작", "상반기 마무리", "휴가"], "en": ["summer start", "mid-year", "vacation"]},
    7: {"ko": ["여름 휴가", "장마", "더위"], "en": ["summer vacation", "monsoon", "heat"]},
    8: {"ko": ["여름", "휴가", "재충전"], "en": ["summer", "vacation", "recharge"]},
    9: {"ko": ["가을", "추석", "새학기"], "en": ["autumn", "chuseok", "new semester"]},
    10: {"ko": ["가을", "단풍", "결실"], "en": ["autumn", "fall foliage", "harvest"]},
    11: {"ko": ["연말 준비", "수능", "가을"], "en": ["year-end prep", "college exam", "autumn"]},
    12: {"ko": ["연말", "크리스마스", "한 해 정리"], "en": ["year end", "christmas", "year review"]},
}

# 월별 시기 조언
TIMING_ADVICE = {
    1: {"ko": ["새해 목표를 세우기 좋은 시기", "차분히 한 해를 계획하세요", "건강 관리 시작하기 좋은 때"],
        "en": ["Good time to set new year goals", "Plan your year calmly", "Good time to start health management"]},
    2: {"ko": ["설 연휴 가족과의 시간을 소중히", "새해 운세를 점검하기 좋은 때", "재충전의 시간"],
        "en": ["Cherish time with family during Lunar New Year", "Good time to check your fortune", "Time for recharging"]},
    3: {"ko": ["새로운 시작에 좋은 시기", "이직이나 변화를 고려할 때", "봄기운으로 활력 충전"],
        "en": ["Good time for new beginnings", "Consider job changes", "Recharge with spring energy"]},
    4: {"ko": ["계획한 일을 실행에 옮기세요", "대인관계 확장 좋은 시기", "자기계발 시작하기 좋은 때"],
        "en": ["Put your plans into action", "Good time to expand relationships", "Good time to start self-improvement"]},
    5: {"ko": ["가정에 관심을 기울이세요", "부모님께 효도하기 좋은 때", "중간 점검의 시기"],
        "en": ["Focus on family", "Good time to show filial piety", "Time for mid-point review"]},
    6: {"ko": ["상반기 마무리 점검", "하반기 계획 수립", "휴식과 재충전 필요"],
        "en": ["Review first half of the year", "Plan for second half", "Need rest and recharge"]},
    7: {"ko": ["무더위 건강 관리 주의", "휴가로 재충전하세요", "가벼운 마음으로 여유를"],
        "en": ["Watch your health in the heat", "Recharge with vacation", "Take it easy with a light heart"]},
    8: {"ko": ["여름 마무리 준비", "가을 계획 세우기", "에너지 재충전 시기"],
        "en": ["Prepare to wrap up summer", "Plan for autumn", "Time to recharge energy"]},
    9: {"ko": ["추석 명절 가족 화합", "하반기 본격 시작", "결실의 계절 준비"],
        "en": ["Family harmony during Chuseok", "Full start of second half", "Prepare for harvest season"]},
    10: {"ko": ["결실을 맺을 시기", "성과를 점검하세요", "겨울 준비 시작"],
         "en": ["Time to bear fruit", "Check your achievements", "Start preparing for winter"]},
    11: {"ko": ["연말 준비 시작", "한 해 마무리 계획", "차분히 정리하는 시간"],
         "en": ["Start year-end preparations", "Plan to wrap up the year", "Time to organize calmly"]},
    12: {"ko": ["한 해를 돌아보는 시간", "새해 계획 미리 세우기", "감사와 마무리의 달"],
         "en": ["Time to reflect on the year", "Start planning for next year", "Month of gratitude and closure"]},
}

GENDER_NAMES = {
    "ko": {"male": "남성", "female": "여성"},
    "en": {"male": "male", "female": "female"},
}


def season_of(month: int) -> str:
    if 3 <= month <= 5:
        return "spring"
    if 6 <= month <= 8:
        return "summer"
    if 9 <= month <= 11:
        return "autumn"
    return "winter"


def year_description(pillar: Pillar, locale: str = "ko") -> str:
    """e.g. '병오년 (말띠, 화(火))' / '丙午 year (Horse, fire)'"""
    element = pillar.element
    if locale == "ko":
        animal = ZODIAC_ANIMALS["ko"][pillar.branch_index]
        return f"{pillar.korean}년 ({animal}띠, {ELEMENT_NAMES['ko'][element]})"
    animal = ZODIAC_ANIMALS["en"][pillar.branch_index]
    return f"{pillar.ganzhi} year ({animal}, {element})"


def seasonal_query(age_group: str, gender: str, now: datetime, locale: str) -> str:
    gender_text = GENDER_NAMES[locale][gender]
    if locale == "ko":
        return f"{age_group} {gender_text} {now.year}년 {now.month}월 관심사 트렌드 운세"
    return f"{age_group} {gender_text} {now.month}/{now.year} interests trends fortune"


def run_temporal_agent(now: datetime, birth_year: int, gender: str, locale: str = "ko", searcher=None) -> TemporalContext:
    y_pillar = year_pillar(now.year)
    m_pillar = month_pillar_for(now.year, now.month)
    season = SEASON_NAMES[locale][season_of(now.month)]
    query = seasonal_query(age_group_label(now.year - birth_year, locale), gender, now, locale)

    topics = list(SEASON_KEYWORDS[now.month][locale])
    grounded = False
    if searcher is not None:
        try:
            topics = searcher.search_topics(query)
            grounded = True
        except ExternalServiceUnavailable as exc:
            logger.warning("seasonal search unavailable, using static keywords: %s", exc)
        except Exception as exc:
            logger.warning("seasonal search failed (%s), using static keywords: %s", type(exc).__name__, exc)
    else:
        logger.debug("no searcher configured, using static keywords")

    if locale == "ko":
        context = (
            f"올해 {y_pillar.korean}년({ZODIAC_ANIMALS['ko'][y_pillar.branch_index]}띠)은 "
            f"{ELEMENT_NAMES['ko'][y_pillar.element]}의 기운이 강한 해입니다. "
            f"현재 {now.month}월, {season}의 기운이 흐르고 있습니다."
        )
    else:
        context = (
            f"This year ({y_pillar.ganzhi}, Year of the {ZODIAC_ANIMALS['en'][y_pillar.branch_index]}) "
            f"is dominated by {y_pillar.element} energy. "
            f"Currently in month {now.month}, {season} energy is flowing."
        )

    return TemporalContext(
        now=now,
        year_pillar=y_pillar,
        month_pillar=m_pillar,
        animal=ZODIAC_ANIMALS[locale][y_pillar.branch_index],
        season=season,
        seasonal_topics=topics,
        search_query=query,
        grounded=grounded,
        timing_advice=list(TIMING_ADVICE[now.month][locale]),
        context=context,
    )


# ================== Age ==================

# (상한 나이, 코드, ko, en)
LIFE_STAGES = (
    (30, "young_adult", "청년기", "young adulthood"),
    (40, "early_prime", "장년 초기", "early middle age"),
    (50, "mid_prime", "장년 중기", "middle age"),
    (60, "late_prime", "장년 후기", "late middle age"),
    (70, "senior", "중년기", "senior years"),
    (None, "elder", "노년기", "elderly years"),
)

# 생애 단계별 (주요 관심사, 전형적 목표, 흔한 고민)
LIFE_STAGE_CONTEXT = {
    "young_adult": {
        "ko": (["취업", "연애", "자기계발", "독립", "진로"],
               ["첫 직장 안정", "결혼 준비", "경제적 독립", "자아실현"],
               ["취업 경쟁", "주거 문제", "연애 고민", "미래 불안"]),
        "en": (["career", "dating", "self-development", "independence", "career path"],
               ["stable first job", "marriage preparation", "financial independence", "self-realization"],
               ["job competition", "housing issues", "relationship concerns", "future anxiety"]),
    },
    "early_prime": {
        "ko": (["결혼", "출산", "커리어 성장", "재테크", "내 집 마련"],
               ["가정 형성", "직장 안정", "자산 형성", "전문성 확보"],
               ["워라밸", "육아 스트레스", "경력 정체", "경제적 부담"]),
        "en": (["marriage", "childbirth", "career growth", "investment", "home ownership"],
               ["family formation", "job stability", "asset building", "expertise development"],
               ["work-life balance", "parenting stress", "career plateau", "financial burden"]),
    },
    "mid_prime": {
        "ko": (["자녀 교육", "건강 관리", "커리어 전환", "노후 준비", "부모 부양"],
               ["자녀 성장 지원", "건강 유지", "재정 안정", "제2의 커리어"],
               ["중년의 위기", "건강 문제", "가족 갈등", "경제적 압박"]),
        "en": (["children's education", "health management", "career transition", "retirement prep", "elderly care"],
               ["supporting children", "maintaining health", "financial stability", "second career"],
               ["midlife crisis", "health issues", "family conflicts", "economic pressure"]),
    },
    "late_prime": {
        "ko": (["자녀 독립", "건강", "은퇴 준비", "노후 자금", "인생 2막"],
               ["자녀 독립 지원", "건강한 노후", "은퇴 후 계획", "인생 정리"],
               ["빈둥지 증후군", "건강 악화", "은퇴 불안", "정체성 변화"]),
        "en": (["children independence", "health", "retirement prep", "retirement fund", "second life"],
               ["supporting children's independence", "healthy aging", "post-retirement plans", "life organization"],
               ["empty nest syndrome", "health decline", "retirement anxiety", "identity change"]),
    },
    "senior": {
        "ko": (["건강", "은퇴 생활", "손주", "여가", "사회 참여"],
               ["건강 관리", "여유로운 생활", "가족 화합", "취미 생활"],
               ["건강 문제", "경제적 불안", "외로움", "역할 상실감"]),
        "en": (["health", "retirement life", "grandchildren", "leisure", "social participation"],
               ["health management", "comfortable life", "family harmony", "hobbies"],
               ["health issues", "financial insecurity", "loneliness", "loss of role"]),
    },
    "elder": {
        "ko": (["건강", "가족", "삶의 의미", "죽음 준비", "유산"],
               ["건강 유지", "가족과의 시간", "평화로운 노후", "삶의 정리"],
               ["건강 악화", "고독", "경제적 어려움", "의존성 증가"]),
        "en": (["health", "family", "meaning of life", "end-of-life prep", "legacy"],
               ["maintaining health", "time with family", "peaceful retirement", "life organization"],
               ["health decline", "loneliness", "financial difficulties", "increased dependency"]),
    },
}

# (조건, ko, en) - 순서대로 적용
SENSITIVITY_RULES = (
    (lambda age: 27 <= age <= 39, "결혼/출산 압박성 발언 주의", "Avoid pressuring about marriage/children"),
    (lambda age: age >= 40, "건강 불안 과도하게 자극 주의", "Avoid excessive health anxiety triggers"),
    (lambda age: age >= 50, "은퇴/노화 관련 부정적 표현 주의", "Avoid negative expressions about retirement/aging"),
    (lambda age: age >= 45, "자녀 성공/실패 비교 주의", "Avoid comparing children's success/failure"),
    (lambda age: age >= 60, "죽음/질병 관련 직접적 표현 주의", "Avoid direct expressions about death/illness"),
)


def age_group_label(age: int, locale: str = "ko") -> str:
    decade = (age // 10) * 10
    position = age % 10
    if position <= 3:
        part = ("초반", "early")
    elif position <= 6:
        part = ("중반", "mid")
    else:
        part = ("후반", "late")
    if locale == "ko":
        return f"{decade}대 {part[0]}"
    return f"{part[1]} {decade}s"


def life_stage_of(age: int) -> tuple:
    for limit, code, ko, en in LIFE_STAGES:
        if limit is None or age < limit:
            return code, ko, en


def sensitivities_for(age: int, locale: str = "ko") -> list:
    idx = 0 if locale == "ko" else 1
    return [texts[idx] for rule, *texts in SENSITIVITY_RULES if rule(age)]


def run_age_agent(now: datetime, birth_year: int, gender: str, locale: str = "ko") -> AgeContext:
    age = now.year - birth_year
    group = age_group_label(age, locale)
    code, stage_ko, stage_en = life_stage_of(age)
    stage = stage_ko if locale == "ko" else stage_en
    concerns, goals, challenges = LIFE_STAGE_CONTEXT[code][locale]

    if locale == "ko":
        context = (
            f"{group} {GENDER_NAMES['ko'][gender]}으로, 현재 {stage}에 해당합니다. "
            "이 시기의 특성과 관심사를 고려하여 조언드리겠습니다."
        )
    else:
        person = "man" if gender == "male" else "woman"
        context = (
            f"As a {person} in your {group}, you are currently in {stage}. "
            "I will provide advice considering the characteristics and interests of this life stage."
        )

    return AgeContext(
        age=age,
        age_group=group,
        life_stage=stage,
        primary_concerns=list(concerns),
        typical_goals=list(goals),
        common_challenges=list(challenges),
        sensitivities=sensitivities_for(age, locale),
        context=context,
    )


# ================== Chart ==================

# 오행과 장기
ELEMENT_ORGANS = {
    "wood": {"ko": ["간", "담", "눈"], "en": ["liver", "gallbladder", "eyes"]},
    "fire": {"ko": ["심장", "소장", "혀"], "en": ["heart", "small intestine", "tongue"]},
    "earth": {"ko": ["비장", "위", "입"], "en": ["spleen", "stomach", "mouth"]},
    "metal": {"ko": ["폐", "대장", "피부"], "en": ["lungs", "large intestine", "skin"]},
    "water": {"ko": ["신장", "방광", "귀"], "en": ["kidneys", "bladder", "ears"]},
}

# 부족 오행별 건강 권장
ELEMENT_HEALTH_TIPS = {
    "water": {"ko": ["수분 섭취를 충분히 하세요", "신장 건강에 주의하세요"],
              "en": ["Stay well hydrated", "Pay attention to kidney health"]},
    "wood": {"ko": ["간 건강 관리가 필요합니다", "눈의 피로에 주의하세요"],
             "en": ["Liver health management needed", "Watch for eye strain"]},
    "fire": {"ko": ["심장과 혈액순환에 주의하세요", "스트레스 관리가 중요합니다"],
             "en": ["Pay attention to heart and circulation", "Stress management is important"]},
    "earth": {"ko": ["소화기 건강에 주의하세요", "규칙적인 식사가 중요합니다"],
              "en": ["Pay attention to digestive health", "Regular meals are important"]},
    "metal": {"ko": ["호흡기 건강에 주의하세요", "피부 관리가 필요합니다"],
              "en": ["Pay attention to respiratory health", "Skin care is needed"]},
}

# 십성별 (의미, 생활 영역, 적성)
TEN_GOD_MEANINGS = {
    "companion": {
        "ko": ("나와 같은 오행, 독립심", "경쟁, 형제", "독립사업, 프리랜서"),
        "en": ("Same element as me, independence", "Competition, siblings", "Independent business, freelance"),
    },
    "rob_wealth": {
        "ko": ("경쟁과 도전, 재물 유출", "경쟁자, 재정 변동", "투자, 모험적 사업"),
        "en": ("Competition and challenge, wealth outflow", "Competitors, financial changes", "Investment, adventurous business"),
    },
    "eating_god": {
        "ko": ("표현력, 창의성, 예술적 재능", "자녀, 창작활동", "예술가, 작가, 요리사"),
        "en": ("Expression, creativity, artistic talent", "Children, creative activities", "Artist, writer, chef"),
    },
    "hurting_officer": {
        "ko": ("날카로운 통찰력, 반항심", "직장 변동, 이직", "비평가, 컨설턴트, 전문직"),
        "en": ("Sharp insight, rebelliousness", "Job changes, career shifts", "Critic, consultant, professional"),
    },
    "indirect_wealth": {
        "ko": ("투기적 재물, 부수입", "부업, 투자", "투자자, 사업가, 영업"),
        "en": ("Speculative wealth, side income", "Side job, investment", "Investor, entrepreneur, sales"),
    },
    "direct_wealth": {
        "ko": ("안정적 재물, 정직한 수입", "급여, 저축", "회사원, 공무원, 은행원"),
        "en": ("Stable wealth, honest income", "Salary, savings", "Employee, civil servant, banker"),
    },
    "seven_killings": {
        "ko": ("권력과 통제, 압박", "직장 스트레스, 권위", "경찰, 군인, 관리자"),
        "en": ("Power and control, pressure", "Work stress, authority", "Police, military, manager"),
    },
    "direct_officer": {
        "ko": ("명예와 책임, 조직력", "직장, 사회적 지위", "공무원, 대기업, 리더"),
        "en": ("Honor and responsibility, organization", "Work, social status", "Civil servant, corporate, leader"),
    },
    "indirect_seal": {
        "ko": ("비전통적 학습, 영적 능력", "종교, 철학, 비주류", "역술가, 종교인, 연구자"),
        "en": ("Non-traditional learning, spiritual ability", "Religion, philosophy, alternative", "Fortune teller, clergy, researcher"),
    },
    "direct_seal": {
        "ko": ("학문과 지식, 어머니의 사랑", "학업, 자격증", "교사, 학자, 전문가"),
        "en": ("Learning and knowledge, maternal love", "Studies, certifications", "Teacher, scholar, expert"),
    },
}

# 부족한 십성 → 약점
TEN_GOD_WEAKNESSES = (
    ("direct_wealth", "안정적 재물 관리가 어려울 수 있음", "May struggle with stable wealth management"),
    ("direct_officer", "조직 생활에 어려움을 겪을 수 있음", "May face difficulties in organizational life"),
    ("direct_seal", "학업에 대한 인내가 부족할 수 있음", "May lack patience in studies"),
    ("eating_god", "표현력이 다소 부족할 수 있음", "May be somewhat lacking in expressiveness"),
)

# 신살 → 개인화 플래그
STAR_FLAGS = {
    "yeokma": ("avoid_marriage_advice", "emphasize_movement"),
    "dohwa": ("relationship_caution",),
    "hwagae": ("emphasize_study",),
    "jangseong": ("emphasize_leadership", "emphasize_career"),
    "cheoneul": ("emphasize_career",),
    "geumyeo": ("emphasize_wealth",),
    "yangin": ("health_caution",),
    "goegang": ("emphasize_career", "relationship_caution"),
}

STAR_ADVICE = {
    "ko": {
        "auspicious": "이 길신의 기운을 적극 활용하세요",
        "inauspicious": "주의가 필요하지만 노력으로 극복할 수 있습니다",
        "neutral": "상황에 따라 좋게 작용할 수 있습니다",
    },
    "en": {
        "auspicious": "Actively utilize this auspicious energy",
        "inauspicious": "Needs attention but can be overcome with effort",
        "neutral": "Can work positively depending on the situation",
    },
}


def _unique(items) -> list:
    return list(dict.fromkeys(items))


def extract_flags(analysis: ChartAnalysis) -> PersonalizationFlags:
    raised = set()
    for star in analysis.stars:
        raised.update(STAR_FLAGS.get(star.key, ()))
    if len(analysis.elements.lacking) >= 2:
        raised.add("health_caution")
    return PersonalizationFlags(**{name: True for name in raised})


def extract_health(analysis: ChartAnalysis, locale: str = "ko") -> HealthFlags:
    elements = analysis.elements
    lacking = list(elements.lacking)
    excess = [e for e, score in elements.scores.items() if score > config.EXCESS_ELEMENT_THRESHOLD]

    watch_areas = []
    recommendations = []
    for element in lacking:
        watch_areas.extend(ELEMENT_ORGANS[element][locale])
        recommendations.extend(ELEMENT_HEALTH_TIPS[element][locale])

    advice = None
    if lacking:
        if locale == "ko":
            names = ", ".join(ELEMENT_NAMES["ko"][e] for e in lacking)
            advice = f"{names} 기운이 부족하므로 보완이 필요합니다."
        else:
            advice = f"Need to supplement {', '.join(lacking)} energy which is lacking."
    elif excess:
        if locale == "ko":
            names = ", ".join(ELEMENT_NAMES["ko"][e] for e in excess)
            advice = f"{names} 기운이 과다하므로 조절이 필요합니다."
        else:
            advice = f"Need to moderate {', '.join(excess)} energy which is in excess."

    return HealthFlags(
        watch_areas=watch_areas,
        recommendations=recommendations,
        lacking=lacking,
        excess=excess,
        advice=advice,
    )


def extract_personality(analysis: ChartAnalysis, locale: str = "ko") -> PersonalityProfile:
    dominant = analysis.ten_god_summary.dominant
    lacking = analysis.ten_god_summary.lacking

    strengths = [TEN_GOD_MEANINGS[god][locale][0] for god in dominant]
    careers = [TEN_GOD_MEANINGS[god][locale][2] for god in dominant]
    weaknesses = [
        (ko if locale == "ko" else en) for god, ko, en in TEN_GOD_WEAKNESSES if god in lacking
    ]

    if "companion" in dominant or "rob_wealth" in dominant:
        style = ("독립적이고 경쟁적인 관계를 형성하는 편입니다",
                 "Tends to form independent and competitive relationships")
    elif "direct_officer" in dominant or "direct_seal" in dominant:
        style = ("안정적이고 신뢰를 중시하는 관계를 선호합니다",
                 "Prefers stable relationships based on trust")
    elif "eating_god" in dominant or "hurting_officer" in dominant:
        style = ("표현력이 풍부하고 창의적인 소통을 즐깁니다",
                 "Enjoys expressive and creative communication")
    else:
        style = ("균형 잡힌 대인관계를 형성합니다",
                 "Forms balanced interpersonal relationships")

    return PersonalityProfile(
        strengths=_unique(strengths),
        weaknesses=_unique(weaknesses),
        suitable_careers=_unique(careers),
        relationship_style=style[0] if locale == "ko" else style[1],
    )


def run_chart_agent(analysis: ChartAnalysis, locale: str = "ko") -> ChartContext:
    flags = extract_flags(analysis)

    stars = [
        StarInsight(star=star, interpretation=star.describe(locale), advice=STAR_ADVICE[locale][star.type])
        for star in analysis.stars[:config.SIGNIFICANT_STAR_LIMIT]
    ]
    ten_gods = [
        TenGodInsight(
            ten_god=god,
            meaning=TEN_GOD_MEANINGS[god][locale][0],
            life_aspect=TEN_GOD_MEANINGS[god][locale][1],
        )
        for god in analysis.ten_god_summary.dominant
    ]

    dm = analysis.day_master
    description = dm.description if locale == "ko" else dm.description_en
    if not description.endswith("."):
        description += "."
    if locale == "ko":
        context = f"일간이 {dm.stem}({ELEMENT_NAMES['ko'][dm.element]})로, {description}"
        if flags.emphasize_career:
            context += " 사업운과 직장운이 주요 관심사입니다."
        if flags.emphasize_movement:
            context += " 이동과 변화가 많은 인생입니다."
        if flags.avoid_marriage_advice:
            context += " 자유로운 삶을 추구하는 성향이 있습니다."
    else:
        context = f"Day Master is {dm.stem} ({dm.element}), {description}"
        if flags.emphasize_career:
            context += " Career and business fortune are key concerns."
        if flags.emphasize_movement:
            context += " A life with much movement and change."
        if flags.avoid_marriage_advice:
            context += " Tends to pursue a free lifestyle."

    return ChartContext(
        flags=flags,
        health=extract_health(analysis, locale),
        personality=extract_personality(analysis, locale),
        significant_stars=stars,
        dominant_ten_gods=ten_gods,
        context=context,
    )
