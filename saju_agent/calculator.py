"""
Pillar engine (사주 원국 계산).

Converts a civil birth timestamp and longitude into the four pillars.
Year/Month/Day come from lunar_python (solar-term aware); the Hour pillar is
taken from the corrected hour with the five-rat rule.
"""
import calendar
import logging
from datetime import date, datetime

from lunar_python import Lunar, LunarMonth, Solar

from saju_agent import config
from saju_agent.constants import (
    BRANCHES,
    HOUR_STEM_START,
    HOUR_TO_BRANCH,
    MONTH_STEM_START,
    SOLAR_TERM_ALIASES,
    STEMS,
)
from saju_agent.errors import DateOutOfRange, InvalidInput
from saju_agent.models import BirthChart, FourPillars, Pillar
from saju_agent.solar_time import correct_solar_time

logger = logging.getLogger(__name__)


# ================== 입력 검증 ==================

def _validate_birth_input(year, month, day, hour, minute, longitude, is_lunar, is_leap_month):
    if not isinstance(year, int) or not config.MIN_YEAR <= year <= config.MAX_YEAR:
        raise InvalidInput("year", year, f"year must be between {config.MIN_YEAR} and {config.MAX_YEAR}")
    if not isinstance(month, int) or not 1 <= month <= 12:
        raise InvalidInput("month", month, "month must be between 1 and 12")

    if is_lunar:
        lunar_month = LunarMonth.fromYm(year, -month if is_leap_month else month)
        if lunar_month is None:
            raise InvalidInput("month", month, f"lunar year {year} has no {'leap ' if is_leap_month else ''}month {month}")
        max_day = lunar_month.getDayCount()
    else:
        if is_leap_month:
            raise InvalidInput("is_leap_month", is_leap_month, "leap month only applies to lunar input")
        max_day = calendar.monthrange(year, month)[1]
    if not isinstance(day, int) or not 1 <= day <= max_day:
        raise InvalidInput("day", day, f"day must be between 1 and {max_day}")

    if not isinstance(hour, int) or not 0 <= hour <= 23:
        raise InvalidInput("hour", hour, "hour must be between 0 and 23")
    if not isinstance(minute, int) or not 0 <= minute <= 59:
        raise InvalidInput("minute", minute, "minute must be between 0 and 59")
    if not -180.0 <= longitude <= 180.0:
        raise InvalidInput("longitude", longitude, "longitude must be between -180 and 180")


def check_year_range(value) -> None:
    """Raise DateOutOfRange when a fortune date leaves the supported span."""
    year = value if isinstance(value, int) else value.year
    if not config.MIN_YEAR <= year <= config.MAX_YEAR:
        raise DateOutOfRange(value, config.MIN_YEAR, config.MAX_YEAR)


# ================== 간지 산술 ==================

def hour_branch(hour: int) -> str:
    """시(0-23) → 시지. 23시와 0시는 모두 子시."""
    return BRANCHES[HOUR_TO_BRANCH[hour]]


def hour_stem(day_stem: str, branch: str) -> str:
    """오서둔: 일간으로 子시 천간을 정하고 시지만큼 진행."""
    start = HOUR_STEM_START[STEMS.index(day_stem)]
    return STEMS[(start + BRANCHES.index(branch)) % 10]


def hour_pillar_for(day_stem: str, hour: int) -> Pillar:
    """시주. 23시(야자시)는 일주는 그날로 두고 시간(時干)은 다음 날 일간으로 세운다."""
    branch = hour_branch(hour)
    if hour == 23:
        day_stem = STEMS[(STEMS.index(day_stem) + 1) % 10]
    return Pillar.of(hour_stem(day_stem, branch), branch)


def month_stem(year_stem: str, month_branch: str) -> str:
    """오호둔: 연간으로 寅월 천간을 정하고 寅부터 세어 월간을 구한다."""
    start = MONTH_STEM_START[STEMS.index(year_stem)]
    offset = (BRANCHES.index(month_branch) - 2) % 12
    return STEMS[(start + offset) % 10]


def year_pillar(year: int) -> Pillar:
    """세운 간지. 1984년 = 甲子."""
    return Pillar.from_index(year - 4)


def month_pillar_for(year: int, month: int) -> Pillar:
    """해당 양력 월 15일에 유효한 월주 (절기 기준)."""
    check_year_range(year)
    lunar = Solar.fromYmdHms(year, month, 15, 12, 0, 0).getLunar()
    return Pillar.from_ganzhi(lunar.getMonthInGanZhiExact())


def day_pillar_for(day: date) -> Pillar:
    """일진."""
    check_year_range(day)
    lunar = Solar.fromYmd(day.year, day.month, day.day).getLunar()
    return Pillar.from_ganzhi(lunar.getDayInGanZhi())


def solar_to_datetime(solar) -> datetime:
    return datetime(
        solar.getYear(), solar.getMonth(), solar.getDay(),
        solar.getHour(), solar.getMinute(), solar.getSecond(),
    )


def solar_term_name(jie_qi) -> str:
    name = jie_qi.getName()
    return SOLAR_TERM_ALIASES.get(name, name)


def _format_lunar(lunar) -> str:
    month = lunar.getMonth()
    leap = "윤" if month < 0 else ""
    return f"{lunar.getYear()}-{leap}{abs(month):02d}-{lunar.getDay():02d}"


# ================== 원국 계산 ==================

def compute_pillars(
    year: int,
    month: int,
    day: int,
    hour: int,
    minute: int = 0,
    longitude: float = None,
    is_lunar: bool = False,
    is_leap_month: bool = False,
) -> BirthChart:
    """
    Calculate the four pillars for a birth moment.

    Args:
        year, month, day: birth date, solar unless `is_lunar` is set
        hour, minute: civil clock time (KST)
        longitude: birthplace longitude, defaults to the Seoul area
        is_lunar: the date is a lunar calendar date
        is_leap_month: the lunar month is the intercalary (윤달) month

    Returns:
        BirthChart with pillars and the true solar time correction.

    Raises:
        InvalidInput: a field is out of range (the field name is on `.field`)
    """
    if longitude is None:
        longitude = config.DEFAULT_LONGITUDE
    _validate_birth_input(year, month, day, hour, minute, longitude, is_lunar, is_leap_month)

    # 음력 입력은 먼저 양력 날짜로 변환한 뒤 같은 보정을 거친다
    if is_lunar:
        solar = Lunar.fromYmd(year, -month if is_leap_month else month, day).getSolar()
        civil_time = datetime(solar.getYear(), solar.getMonth(), solar.getDay(), hour, minute)
    else:
        civil_time = datetime(year, month, day, hour, minute)

    correction = correct_solar_time(civil_time, longitude)
    t = correction.corrected_time

    lunar = Solar.fromYmdHms(t.year, t.month, t.day, t.hour, t.minute, t.second).getLunar()
    eight_char = lunar.getEightChar()

    year_p = Pillar.from_ganzhi(eight_char.getYear())
    month_p = Pillar.from_ganzhi(eight_char.getMonth())
    # 일주는 자정에 바뀌고 23시는 그날 일주에 남는다 (야자시)
    day_p = Pillar.from_ganzhi(eight_char.getDay())
    hour_p = hour_pillar_for(day_p.stem, t.hour)

    prev_term = lunar.getPrevJie()
    pillars = FourPillars(year=year_p, month=month_p, day=day_p, hour=hour_p)
    logger.debug("pillars for %s (corrected %s): %s", civil_time, t, pillars)

    return BirthChart(
        solar_date=civil_time.date(),
        lunar_date=_format_lunar(lunar),
        is_lunar_input=is_lunar,
        civil_time=civil_time,
        corrected_time=t,
        longitude=longitude,
        solar_term=solar_term_name(prev_term) if prev_term else None,
        pillars=pillars,
        correction=correction,
    )
