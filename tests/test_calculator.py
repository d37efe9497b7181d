import math
from datetime import date, datetime

import pytest
from lunar_python import Solar

from saju_agent import DateOutOfRange, InvalidInput, compute_pillars
from saju_agent.calculator import (
    check_year_range,
    day_pillar_for,
    hour_branch,
    hour_pillar_for,
    month_stem,
    year_pillar,
)
from saju_agent.models import Pillar
from saju_agent.solar_time import correct_solar_time, equation_of_time, longitude_minutes, resolve_longitude


class TestReferenceChart:
    def test_pillars(self, reference_chart):
        p = reference_chart.pillars
        assert [p.year.ganzhi, p.month.ganzhi, p.day.ganzhi, p.hour.ganzhi] == ["己巳", "丁丑", "庚辰", "壬午"]
        assert str(p) == "己巳 丁丑 庚辰 壬午"
        assert p.day_master == "庚"

    def test_solar_time_correction(self, reference_chart):
        correction = reference_chart.correction
        assert correction.longitude_minutes == -32.0
        assert -10.0 < correction.equation_of_time < -8.5
        assert reference_chart.corrected_time == datetime(1990, 1, 15, 12, 48, 39)

    def test_hour_boundary_uses_corrected_time(self, reference_chart):
        # 13:30 civil is 未시; after correction it falls back into 午시
        day_stem = reference_chart.pillars.day.stem
        assert hour_pillar_for(day_stem, reference_chart.civil_time.hour).ganzhi == "癸未"
        assert reference_chart.pillars.hour.ganzhi == "壬午"

    def test_chart_metadata(self, reference_chart):
        assert reference_chart.solar_date == date(1990, 1, 15)
        assert reference_chart.is_lunar_input is False
        assert reference_chart.solar_term == "小寒"
        assert reference_chart.longitude == 127.0


class TestSolarTime:
    @pytest.mark.parametrize(
        "longitude, expected",
        [(135.0, 0.0), (127.0, -32.0), (126.98, -32.08), (139.69, 18.76)],
        ids=["meridian", "korea-default", "seoul", "tokyo"],
    )
    def test_longitude_minutes(self, longitude, expected):
        assert longitude_minutes(longitude) == pytest.approx(expected)

    def test_correction_is_signed_sum(self):
        result = correct_solar_time(datetime(2000, 6, 1, 12, 0), 135.0)
        assert result.total_minutes == pytest.approx(result.equation_of_time, abs=0.01)

    def test_negative_shift_rounds_down(self):
        civil = datetime(1990, 1, 15, 13, 30)
        raw_seconds = (longitude_minutes(127.0) + equation_of_time(15)) * 60
        shift = correct_solar_time(civil, 127.0).corrected_time - civil
        assert shift.total_seconds() == math.floor(raw_seconds)
        assert shift.total_seconds() < raw_seconds

    def test_resolve_longitude(self):
        assert resolve_longitude() == 127.0
        assert resolve_longitude("Seoul") == 126.98
        assert resolve_longitude("부산") == 129.04
        with pytest.raises(InvalidInput) as excinfo:
            resolve_longitude("atlantis")
        assert excinfo.value.field == "place"


class TestGanzhiArithmetic:
    @pytest.mark.parametrize(
        "day, expected",
        [(date(2000, 1, 1), "戊午"), (date(1949, 10, 1), "甲子"), (date(1990, 1, 15), "庚辰")],
        ids=["y2k", "1949-10-01", "reference"],
    )
    def test_day_pillar(self, day, expected):
        assert day_pillar_for(day).ganzhi == expected

    @pytest.mark.parametrize(
        "year, expected",
        [(1984, "甲子"), (2024, "甲辰"), (2026, "丙午"), (1900, "庚子")],
    )
    def test_year_pillar(self, year, expected):
        assert year_pillar(year).ganzhi == expected

    @pytest.mark.parametrize("hour, branch", [(23, "子"), (0, "子"), (1, "丑"), (12, "午"), (13, "未"), (22, "亥")])
    def test_hour_branch(self, hour, branch):
        assert hour_branch(hour) == branch

    def test_five_tiger_month_stem(self):
        # 甲己년 寅월은 丙寅
        assert month_stem("甲", "寅") == "丙"
        assert month_stem("己", "丑") == "丁"

    def test_sexagenary_index_roundtrip(self):
        for k in range(60):
            assert Pillar.from_index(k).sexagenary_index == k

    def test_invalid_pair(self):
        with pytest.raises(ValueError):
            Pillar.of("甲", "丑")


class TestInputValidation:
    @pytest.mark.parametrize(
        "kwargs, field",
        [
            (dict(year=1899, month=1, day=1, hour=0), "year"),
            (dict(year=2101, month=1, day=1, hour=0), "year"),
            (dict(year=1990, month=13, day=1, hour=0), "month"),
            (dict(year=1990, month=2, day=30, hour=0), "day"),
            (dict(year=1990, month=1, day=1, hour=24), "hour"),
            (dict(year=1990, month=1, day=1, hour=0, minute=60), "minute"),
            (dict(year=1990, month=1, day=1, hour=0, longitude=200.0), "longitude"),
            (dict(year=1990, month=1, day=1, hour=0, is_leap_month=True), "is_leap_month"),
            (dict(year=2021, month=4, day=1, hour=0, is_lunar=True, is_leap_month=True), "month"),
        ],
        ids=["year-low", "year-high", "month", "feb-30", "hour", "minute", "longitude",
             "leap-without-lunar", "missing-leap-month"],
    )
    def test_invalid_field_is_reported(self, kwargs, field):
        with pytest.raises(InvalidInput) as excinfo:
            compute_pillars(**kwargs)
        assert excinfo.value.field == field

    def test_invalid_input_is_value_error(self):
        with pytest.raises(ValueError):
            compute_pillars(1990, 2, 30, 0)

    def test_check_year_range(self):
        check_year_range(1900)
        check_year_range(date(2100, 12, 31))
        with pytest.raises(DateOutOfRange):
            check_year_range(2101)


class TestLunarInput:
    def test_lunar_date_matches_solar(self, reference_chart):
        lunar = Solar.fromYmd(1990, 1, 15).getLunar()
        chart = compute_pillars(lunar.getYear(), lunar.getMonth(), lunar.getDay(), 13, 30,
                                longitude=127.0, is_lunar=True)
        assert chart.solar_date == date(1990, 1, 15)
        assert chart.is_lunar_input is True
        assert chart.pillars == reference_chart.pillars

    def test_leap_month(self):
        # 2020년 윤4월
        chart = compute_pillars(2020, 4, 1, 12, 0, is_lunar=True, is_leap_month=True)
        assert chart.lunar_date.startswith("2020-윤04")


class TestLateZiHour:
    def test_hour_23_uses_next_day_stem(self):
        # 戊일 23시는 다음 날(己) 기준 甲子시, 0시는 그날 기준 壬子시
        assert hour_pillar_for("戊", 23).ganzhi == "甲子"
        assert hour_pillar_for("戊", 0).ganzhi == "壬子"
        assert hour_pillar_for("癸", 23).ganzhi == "甲子"

    def test_late_evening_birth(self):
        chart = compute_pillars(2000, 1, 1, 23, 50, longitude=135.0)
        assert chart.corrected_time.hour == 23
        assert chart.pillars.day.ganzhi == "戊午"
        assert chart.pillars.hour.ganzhi == "甲子"

    def test_early_morning_birth(self):
        chart = compute_pillars(2000, 1, 1, 0, 40, longitude=135.0)
        assert chart.pillars.day.ganzhi == "戊午"
        assert chart.pillars.hour.ganzhi == "壬子"

    def test_correction_crosses_midnight(self):
        # 00:10 at 127E is about 41 minutes behind, back into the 15th
        chart = compute_pillars(1990, 1, 16, 0, 10, longitude=127.0)
        assert chart.solar_date == date(1990, 1, 16)
        assert chart.corrected_time.date() == date(1990, 1, 15)
        assert chart.corrected_time.hour == 23
        assert chart.pillars.day.ganzhi == "庚辰"
        assert chart.pillars.hour.ganzhi == "戊子"
