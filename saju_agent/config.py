"""
Runtime configuration.

Values come from the environment (optionally a `.env` file next to the
package) and fall back to the defaults used by the Korean service.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).resolve().parent.parent / ".env")


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return float(raw)


# Tavily Search API Key (계절 관심사 검색)
TAVILY_API_KEY = os.getenv("TAVILY_API_KEY")
SEARCH_TIMEOUT_SECONDS = _float_env("SEARCH_TIMEOUT_SECONDS", 8.0)
# 검색 제한 시간에 더해 temporal 에이전트를 기다리는 여유 시간
AGENT_JOIN_MARGIN_SECONDS = _float_env("AGENT_JOIN_MARGIN_SECONDS", 2.0)
PERF_LOG = os.getenv("PERF_LOG") == "1"

# 한국 표준시 기준 경도 (동경 135°) / 기본 출생지 경도 (서울 인근)
STANDARD_MERIDIAN = _float_env("SAJU_STANDARD_MERIDIAN", 135.0)
DEFAULT_LONGITUDE = _float_env("SAJU_DEFAULT_LONGITUDE", 127.0)

# 지원 연도 범위
MIN_YEAR = 1900
MAX_YEAR = 2100

# 오행 판정 기준 (100점 환산, 균등 평균 20의 1.5배 / 0.5배)
DOMINANT_ELEMENT_THRESHOLD = 30
LACKING_ELEMENT_THRESHOLD = 10
BALANCE_SPREAD = 25
EXCESS_ELEMENT_THRESHOLD = 30

# 신강/신약 판정 (일간 + 인성 점수)
STRONG_SUPPORT_THRESHOLD = 45
WEAK_SUPPORT_THRESHOLD = 35

# 십성 우세 판정 횟수
TEN_GOD_DOMINANT_COUNT = 2

# 추론 문장 카테고리별 최대 개수
INFERENCE_LIMIT = 3
PERSONALIZATION_POINT_LIMIT = 8
SIGNIFICANT_STAR_LIMIT = 5
