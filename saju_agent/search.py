"""
Seasonal interest search (Tavily).

The only network call in the package. One attempt, bounded by
SEARCH_TIMEOUT_SECONDS; every failure surfaces as ExternalServiceUnavailable
so the temporal agent can fall back to static keywords.
"""
import logging
import re

from tavily import TavilyClient

from saju_agent import config
from saju_agent.errors import ExternalServiceUnavailable

logger = logging.getLogger(__name__)

MAX_TOPICS = 5

_NUMBERED_LINE = re.compile(r"^\s*\d+[.)]\s*(.+)$")


def parse_topics(response: dict, limit: int = MAX_TOPICS) -> list:
    """
    Extract topics from a Tavily response.

    Numbered lines ("1. 주제") in the synthesized answer win; otherwise the
    result titles are used.
    """
    topics = []
    answer = response.get("answer") or ""
    for line in answer.splitlines():
        match = _NUMBERED_LINE.match(line)
        if match and match.group(1).strip():
            topics.append(match.group(1).strip())
    if not topics:
        for result in response.get("results", []):
            title = (result.get("title") or "").strip()
            if title:
                topics.append(title)
    return topics[:limit]


class SeasonalSearch:
    """Look up what an age/gender group cares about this month."""

    def __init__(self, api_key: str = None, timeout: float = None, client=None):
        self.api_key = api_key if api_key is not None else config.TAVILY_API_KEY
        self.timeout = timeout if timeout is not None else config.SEARCH_TIMEOUT_SECONDS
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self.api_key) and self.api_key != "replace_me"

    def _get_client(self):
        if self._client is None:
            self._client = TavilyClient(api_key=self.api_key)
        return self._client

    def search_topics(self, query: str, limit: int = MAX_TOPICS) -> list:
        """
        Run one search and return up to `limit` topics.

        Raises:
            ExternalServiceUnavailable: no API key, request error, timeout,
                or a response without usable topics
        """
        if not self.configured:
            raise ExternalServiceUnavailable("tavily", "TAVILY_API_KEY is not set")

        try:
            response = self._get_client().search(
                query=query,
                search_depth="basic",
                max_results=limit,
                include_answer=True,
                timeout=self.timeout,
            )
        except Exception as exc:
            raise ExternalServiceUnavailable("tavily", str(exc)) from exc

        topics = parse_topics(response or {}, limit)
        if not topics:
            raise ExternalServiceUnavailable("tavily", "no topics in response")
        logger.debug("tavily returned %d topics for %r", len(topics), query)
        return topics
