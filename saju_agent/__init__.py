"""
Saju (Four Pillars) agent.

Chart calculation, fortune timelines and personalization context
for the downstream interpretation service.
"""
from saju_agent.errors import (
    SajuError,
    InvalidInput,
    DateOutOfRange,
    ExternalServiceUnavailable,
)
from saju_agent.calculator import compute_pillars
from saju_agent.analyzer import analyze_chart
from saju_agent.fortune import (
    major_fortunes,
    minor_fortunes,
    yearly_fortune,
    yearly_fortunes,
    monthly_fortune,
    monthly_fortunes,
    daily_fortune,
    daily_fortunes,
    hourly_fortunes,
    recommended_hours,
    fortune_calendar,
    find_auspicious_days,
)
from saju_agent.orchestrator import build_personalization, format_prompt_context

__version__ = "0.1.0"

__all__ = [
    "SajuError",
    "InvalidInput",
    "DateOutOfRange",
    "ExternalServiceUnavailable",
    "compute_pillars",
    "analyze_chart",
    "major_fortunes",
    "minor_fortunes",
    "yearly_fortune",
    "yearly_fortunes",
    "monthly_fortune",
    "monthly_fortunes",
    "daily_fortune",
    "daily_fortunes",
    "hourly_fortunes",
    "recommended_hours",
    "fortune_calendar",
    "find_auspicious_days",
    "build_personalization",
    "format_prompt_context",
]
