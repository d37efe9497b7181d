"""
True solar time (진태양시) correction.

Civil time in Korea runs on the 135E meridian while most births happen
around 127E, so the sun crosses the local meridian roughly half an hour
later than the clock suggests. The equation of time adds the seasonal
drift of the apparent sun on top of that.
"""
import logging
import math
from datetime import datetime, timedelta

from saju_agent import config
from saju_agent.constants import CITY_LONGITUDES
from saju_agent.errors import InvalidInput
from saju_agent.models import SolarTimeCorrection

logger = logging.getLogger(__name__)


def equation_of_time(day_of_year: int) -> float:
    """균시차 (분). B = 360/365 * (N - 81) 근사식."""
    b = math.radians(360.0 / 365.0 * (day_of_year - 81))
    return 9.87 * math.sin(2 * b) - 7.53 * math.cos(b) - 1.5 * math.sin(b)


def longitude_minutes(longitude: float, standard_meridian: float = None) -> float:
    """경도 보정 (분). 표준 자오선보다 서쪽이면 음수."""
    if standard_meridian is None:
        standard_meridian = config.STANDARD_MERIDIAN
    return (longitude - standard_meridian) * 4.0


def correct_solar_time(civil_time: datetime, longitude: float, standard_meridian: float = None) -> SolarTimeCorrection:
    """
    Shift a civil timestamp to local apparent solar time.

    corrected = civil + (longitude - meridian) * 4 + EoT, which is the civil
    time minus (longitude offset - EoT). The result is floored to the
    second.
    """
    if standard_meridian is None:
        standard_meridian = config.STANDARD_MERIDIAN

    lon_min = longitude_minutes(longitude, standard_meridian)
    eot = equation_of_time(civil_time.timetuple().tm_yday)
    total = lon_min + eot

    # 초 단위 내림 (음수 보정도 아래쪽으로)
    corrected = civil_time + timedelta(seconds=math.floor(total * 60))
    logger.debug(
        "true solar time %s -> %s (longitude %.2f, lon %.1fmin, eot %.2fmin)",
        civil_time, corrected, longitude, lon_min, eot,
    )
    return SolarTimeCorrection(
        civil_time=civil_time,
        corrected_time=corrected,
        longitude=longitude,
        standard_meridian=standard_meridian,
        longitude_minutes=lon_min,
        equation_of_time=round(eot, 2),
        total_minutes=round(total, 2),
    )


def resolve_longitude(place: str = None) -> float:
    """Look up a birthplace longitude by city name, defaulting to Seoul area."""
    if not place:
        return config.DEFAULT_LONGITUDE
    key = place.strip().lower()
    if key not in CITY_LONGITUDES:
        raise InvalidInput("place", place, f"unknown birthplace: {place}")
    return CITY_LONGITUDES[key]
