import pytest

from saju_agent import config
from saju_agent.errors import ExternalServiceUnavailable
from saju_agent.search import SeasonalSearch, parse_topics


class FakeTavilyClient:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def search(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


ANSWER_RESPONSE = {
    "answer": "요즘 관심사는 다음과 같습니다.\n1. 봄맞이 이직\n2) 재테크\n3. 건강검진\n",
    "results": [{"title": "무관한 기사"}],
}


class TestParseTopics:
    def test_numbered_answer_lines(self):
        assert parse_topics(ANSWER_RESPONSE) == ["봄맞이 이직", "재테크", "건강검진"]

    def test_falls_back_to_titles(self):
        response = {"answer": "no list here", "results": [{"title": " spring trends "}, {"title": ""}, {"title": "jobs"}]}
        assert parse_topics(response) == ["spring trends", "jobs"]

    def test_limit(self):
        response = {"results": [{"title": f"t{i}"} for i in range(10)]}
        assert parse_topics(response, limit=2) == ["t0", "t1"]

    def test_empty(self):
        assert parse_topics({}) == []


class TestSeasonalSearch:
    def test_search_arguments(self):
        client = FakeTavilyClient(ANSWER_RESPONSE)
        searcher = SeasonalSearch(api_key="tvly-test", timeout=3.0, client=client)
        assert searcher.search_topics("30대 중반 남성 관심사", limit=4) == ["봄맞이 이직", "재테크", "건강검진"]
        call = client.calls[0]
        assert call["query"] == "30대 중반 남성 관심사"
        assert call["max_results"] == 4
        assert call["include_answer"] is True
        assert call["timeout"] == 3.0

    @pytest.mark.parametrize("api_key", [None, "", "replace_me"])
    def test_missing_key(self, monkeypatch, api_key):
        monkeypatch.setattr(config, "TAVILY_API_KEY", api_key)
        client = FakeTavilyClient(ANSWER_RESPONSE)
        searcher = SeasonalSearch(client=client)
        assert not searcher.configured
        with pytest.raises(ExternalServiceUnavailable) as excinfo:
            searcher.search_topics("query")
        assert excinfo.value.service == "tavily"
        assert client.calls == []

    def test_client_error_is_wrapped(self):
        error = TimeoutError("read timed out")
        searcher = SeasonalSearch(api_key="tvly-test", client=FakeTavilyClient(error=error))
        with pytest.raises(ExternalServiceUnavailable) as excinfo:
            searcher.search_topics("query")
        assert excinfo.value.__cause__ is error
        assert "read timed out" in str(excinfo.value)

    @pytest.mark.parametrize("response", [None, {"answer": "", "results": []}])
    def test_no_topics(self, response):
        searcher = SeasonalSearch(api_key="tvly-test", client=FakeTavilyClient(response))
        with pytest.raises(ExternalServiceUnavailable):
            searcher.search_topics("query")
