"""
Pydantic models for chart, fortune and personalization results.

All models are frozen: a value is built once by the calculators and then
only read. `model_dump()` gives the plain dicts handed to the
interpretation service.
"""
from datetime import date, datetime
from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from saju_agent.constants import (
    BRANCHES,
    BRANCHES_KOREAN,
    BRANCHES_ROMAN,
    BRANCH_ELEMENTS,
    BRANCH_POLARITY,
    HIDDEN_STEMS,
    STEMS,
    STEMS_KOREAN,
    STEMS_ROMAN,
    STEM_ELEMENTS,
    STEM_POLARITY,
)

Element = Literal["wood", "fire", "earth", "metal", "water"]
Polarity = Literal["yang", "yin"]
Gender = Literal["male", "female"]
Locale = Literal["ko", "en"]
Grade = Literal["excellent", "good", "normal", "caution", "challenging"]
StarType = Literal["auspicious", "inauspicious", "neutral"]
UsefulGodRelation = Literal["support", "neutral", "against"]
Direction = Literal["forward", "backward"]
Category = Literal["day_master", "personality", "career", "wealth", "relationship", "health", "fortune", "ten_gods", "stars"]


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


# ================== 기둥 ==================

class Pillar(FrozenModel):
    """A single stem/branch pair (간지) with its derived attributes."""
    stem: str = Field(..., description="Heavenly Stem (천간)")
    branch: str = Field(..., description="Earthly Branch (지지)")
    stem_element: Element
    stem_polarity: Polarity
    branch_element: Element
    branch_polarity: Polarity
    hidden_stems: Tuple[str, ...] = Field(..., description="Hidden stems (지장간), main qi first")

    @classmethod
    def of(cls, stem: str, branch: str) -> "Pillar":
        s_idx = STEMS.index(stem)
        b_idx = BRANCHES.index(branch)
        # 60갑자: 천간과 지지의 음양이 같아야 한다
        if s_idx % 2 != b_idx % 2:
            raise ValueError(f"{stem}{branch} is not a sexagenary pair")
        return cls(
            stem=stem,
            branch=branch,
            stem_element=STEM_ELEMENTS[s_idx],
            stem_polarity=STEM_POLARITY[s_idx],
            branch_element=BRANCH_ELEMENTS[b_idx],
            branch_polarity=BRANCH_POLARITY[b_idx],
            hidden_stems=HIDDEN_STEMS[b_idx],
        )

    @classmethod
    def from_ganzhi(cls, ganzhi: str) -> "Pillar":
        return cls.of(ganzhi[0], ganzhi[1])

    @classmethod
    def from_index(cls, index: int) -> "Pillar":
        index %= 60
        return cls.of(STEMS[index % 10], BRANCHES[index % 12])

    @property
    def stem_index(self) -> int:
        return STEMS.index(self.stem)

    @property
    def branch_index(self) -> int:
        return BRANCHES.index(self.branch)

    @property
    def sexagenary_index(self) -> int:
        # k % 10 == stem, k % 12 == branch
        return (6 * self.stem_index - 5 * self.branch_index) % 60

    @property
    def ganzhi(self) -> str:
        return f"{self.stem}{self.branch}"

    @property
    def korean(self) -> str:
        return f"{STEMS_KOREAN[self.stem_index]}{BRANCHES_KOREAN[self.branch_index]}"

    @property
    def element(self) -> str:
        return self.stem_element

    def shift(self, steps: int) -> "Pillar":
        return Pillar.from_index(self.sexagenary_index + steps)

    def reading(self, locale: str = "ko") -> str:
        if locale == "ko":
            return f"{self.korean}({self.ganzhi})"
        return f"{STEMS_ROMAN[self.stem_index]}-{BRANCHES_ROMAN[self.branch_index]} ({self.ganzhi})"


class FourPillars(FrozenModel):
    year: Pillar
    month: Pillar
    day: Pillar
    hour: Pillar

    @property
    def day_master(self) -> str:
        return self.day.stem

    @property
    def pillars(self) -> Tuple[Pillar, Pillar, Pillar, Pillar]:
        return (self.year, self.month, self.day, self.hour)

    @property
    def stems(self) -> List[str]:
        return [p.stem for p in self.pillars]

    @property
    def branches(self) -> List[str]:
        return [p.branch for p in self.pillars]

    def slot(self, name: str) -> Pillar:
        return getattr(self, name)

    def __str__(self):
        return " ".join(p.ganzhi for p in self.pillars)


class SolarTimeCorrection(FrozenModel):
    """True solar time correction applied before any calendar lookup."""
    civil_time: datetime
    corrected_time: datetime
    longitude: float
    standard_meridian: float
    longitude_minutes: float = Field(..., description="Signed longitude shift, e.g. -32 at 127E")
    equation_of_time: float = Field(..., description="Equation of time in minutes")
    total_minutes: float = Field(..., description="Total signed shift applied to civil time")


class BirthChart(FrozenModel):
    solar_date: date
    lunar_date: str
    is_lunar_input: bool
    civil_time: datetime
    corrected_time: datetime
    longitude: float
    solar_term: Optional[str] = Field(None, description="Most recent solar term (절기) at birth")
    pillars: FourPillars
    correction: SolarTimeCorrection


# ================== 분석 ==================

class ElementAnalysis(FrozenModel):
    scores: Dict[str, int]
    dominant: List[str]
    lacking: List[str]
    balance: Literal["balanced", "imbalanced"]
    yong_shin: Element = Field(..., description="Useful god (용신): lowest element")
    hee_shin: Element = Field(..., description="Element generating the useful god (희신)")
    gi_shin: Element = Field(..., description="Element controlling the useful god (기신)")
    gu_shin: Element = Field(..., description="Element generating the gi_shin (구신)")
    han_shin: Element = Field(..., description="Remaining element (한신)")
    day_master_element: Element
    support_score: int
    strength: Literal["strong", "neutral", "weak"]


class TenGodMap(FrozenModel):
    year_stem: Optional[str]
    year_branch: Optional[str]
    month_stem: Optional[str]
    month_branch: Optional[str]
    day_stem: Optional[str] = Field(None, description="Always None: the day master is not scored against itself")
    day_branch: Optional[str]
    hour_stem: Optional[str]
    hour_branch: Optional[str]

    def scored_slots(self) -> Dict[str, str]:
        return {k: v for k, v in self.model_dump().items() if v is not None}


class TenGodSummary(FrozenModel):
    counts: Dict[str, int]
    dominant: List[str]
    lacking: List[str]


class Star(FrozenModel):
    key: str
    name: str
    hanja: str
    name_en: str
    type: StarType
    description: str
    description_en: str
    positions: List[str] = Field(default_factory=list)

    def describe(self, locale: str = "ko") -> str:
        return self.description if locale == "ko" else self.description_en


class DayMasterInfo(FrozenModel):
    stem: str
    element: Element
    polarity: Polarity
    description: str
    description_en: str


class ChartAnalysis(FrozenModel):
    day_master: DayMasterInfo
    elements: ElementAnalysis
    ten_gods: TenGodMap
    ten_god_summary: TenGodSummary
    stars: List[Star]

    def has_star(self, key: str) -> bool:
        return any(star.key == key for star in self.stars)


# ================== 운세 ==================

class Interaction(FrozenModel):
    """Relations between a cycle branch and the natal branches, with score."""
    six_harmonies: List[str] = Field(default_factory=list)
    three_harmonies: List[str] = Field(default_factory=list)
    half_harmonies: List[str] = Field(default_factory=list)
    clashes: List[str] = Field(default_factory=list)
    punishments: List[str] = Field(default_factory=list)
    harms: List[str] = Field(default_factory=list)
    destructions: List[str] = Field(default_factory=list)
    useful_god_relation: UsefulGodRelation = "neutral"
    score: int = 50
    grade: Grade = "normal"

    @property
    def has_clash(self) -> bool:
        return bool(self.clashes)


class MajorFortune(FrozenModel):
    index: int
    pillar: Pillar
    start_age: int
    end_age: int
    start_year: int
    end_year: int
    keyword: str
    keyword_en: str
    ten_god: str
    interaction: Interaction


class MajorFortuneTimeline(FrozenModel):
    direction: Direction
    start_age: int
    days_to_term: float
    solar_term: str
    periods: List[MajorFortune]


class MinorFortune(FrozenModel):
    age: int
    year: int
    pillar: Pillar
    interaction: Interaction


class YearlyFortune(FrozenModel):
    year: int
    age: int
    pillar: Pillar
    animal: str
    ten_god: str
    theme: str
    theme_en: str
    interaction: Interaction


class MonthlyFortune(FrozenModel):
    year: int
    month: int
    pillar: Pillar
    ten_god: str
    interaction: Interaction


class MonthlyOverview(FrozenModel):
    year: int
    months: List[MonthlyFortune]
    best_months: List[int]
    caution_months: List[int]


class HourlyFortune(FrozenModel):
    branch: str
    period_name: str
    period_name_en: str
    time_range: str
    pillar: Pillar
    interaction: Interaction


class DailyFortune(FrozenModel):
    date: date
    pillar: Pillar
    interaction: Interaction
    lucky_hours: List[str]
    caution_hours: List[str]


class CalendarDay(FrozenModel):
    fortune: DailyFortune
    weekday: int
    good_for: List[str]
    bad_for: List[str]


class CalendarStatistics(FrozenModel):
    average_score: int
    max_score: int
    min_score: int
    grade_counts: Dict[str, int]


class FortuneCalendar(FrozenModel):
    year: int
    month: int
    days: List[CalendarDay]
    excellent_days: List[date]
    good_days: List[date]
    caution_days: List[date]
    statistics: CalendarStatistics


# ================== 개인화 ==================

class TemporalContext(FrozenModel):
    now: datetime
    year_pillar: Pillar
    month_pillar: Pillar
    animal: str
    season: str
    seasonal_topics: List[str]
    search_query: str
    grounded: bool
    timing_advice: List[str]
    context: str


class AgeContext(FrozenModel):
    age: int
    age_group: str
    life_stage: str
    primary_concerns: List[str]
    typical_goals: List[str]
    common_challenges: List[str]
    sensitivities: List[str]
    context: str


class PersonalizationFlags(FrozenModel):
    avoid_marriage_advice: bool = False
    emphasize_career: bool = False
    health_caution: bool = False
    emphasize_wealth: bool = False
    emphasize_movement: bool = False
    emphasize_study: bool = False
    relationship_caution: bool = False
    emphasize_leadership: bool = False


class HealthFlags(FrozenModel):
    watch_areas: List[str]
    recommendations: List[str]
    lacking: List[str]
    excess: List[str]
    advice: Optional[str] = None


class PersonalityProfile(FrozenModel):
    strengths: List[str]
    weaknesses: List[str]
    suitable_careers: List[str]
    relationship_style: str


class StarInsight(FrozenModel):
    star: Star
    interpretation: str
    advice: str


class TenGodInsight(FrozenModel):
    ten_god: str
    meaning: str
    life_aspect: str


class ChartContext(FrozenModel):
    flags: PersonalizationFlags
    health: HealthFlags
    personality: PersonalityProfile
    significant_stars: List[StarInsight]
    dominant_ten_gods: List[TenGodInsight]
    context: str


class PersonalizationBundle(FrozenModel):
    locale: Locale
    gender: Gender
    temporal: TemporalContext
    age: AgeContext
    chart: ChartContext
    recommended_topics: List[str]
    avoid_topics: List[str]
    life_experiences: List[str]
    past_events: List[str]
    future_directions: List[str]
    personalization_points: List[str]
    search_queries: List[str]
    processed_at: datetime
    grounding_used: bool
    category: Optional[Category] = None
    user_query: Optional[str] = None

    @property
    def flags(self) -> PersonalizationFlags:
        return self.chart.flags
