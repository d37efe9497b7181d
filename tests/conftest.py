import threading
from datetime import datetime

import pytest

from saju_agent import analyze_chart, compute_pillars
from saju_agent.errors import ExternalServiceUnavailable


class FakeSearcher:
    """Stands in for SeasonalSearch; records every query."""

    def __init__(self, topics=None):
        self.topics = topics if topics is not None else ["봄 여행", "이직 준비", "건강검진", "재테크", "자기계발"]
        self.queries = []

    def search_topics(self, query, limit=5):
        self.queries.append(query)
        return list(self.topics[:limit])


class FailingSearcher:
    def __init__(self, reason="timeout"):
        self.reason = reason
        self.calls = 0

    def search_topics(self, query, limit=5):
        self.calls += 1
        raise ExternalServiceUnavailable("tavily", self.reason)


class BrokenSearcher:
    """Raises whatever error it was given, as a misbehaving client would."""

    def __init__(self, error):
        self.error = error

    def search_topics(self, query, limit=5):
        raise self.error


class StalledSearcher:
    """Blocks until released."""

    def __init__(self):
        self.release = threading.Event()

    def search_topics(self, query, limit=5):
        self.release.wait(timeout=5)
        return ["late topic"]


@pytest.fixture(scope="session")
def reference_chart():
    """1990-01-15 13:30 KST at 127.0E -> 己巳 丁丑 庚辰 壬午"""
    return compute_pillars(1990, 1, 15, 13, 30, longitude=127.0)


@pytest.fixture(scope="session")
def reference_analysis(reference_chart):
    return analyze_chart(reference_chart)


@pytest.fixture
def fake_searcher():
    return FakeSearcher()


@pytest.fixture
def failing_searcher():
    return FailingSearcher()


@pytest.fixture
def frozen_now():
    return datetime(2026, 3, 10, 9, 0)
