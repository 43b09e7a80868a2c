import logging
from typing import Any, Dict, Optional

from ..config import Config
from ..core.tools import Tool

logger = logging.getLogger(__name__)

WEB_SEARCH_PARAMETERS = {
    "type": "object",
    "properties": {
        "query": {
            "type": "string",
            "description": "The search query to look up"
        },
        "max_results": {
            "type": "integer",
            "description": "Maximum number of results to return (default: 5)"
        }
    },
    "required": ["query"]
}


class WebSearch:
    """Web search via the Tavily API, with canned results when no key is configured."""

    def __init__(self, api_key: Optional[str] = None, search_depth: str = "advanced"):
        self.api_key = api_key
        self.search_depth = search_depth  # "basic" or "advanced"

    async def __call__(self, query: str, max_results: int = 5) -> Dict[str, Any]:
        if not self.api_key:
            return self._mock_search_results(query)

        from tavily import AsyncTavilyClient

        # Client per call: nothing is shared between concurrent searches.
        client = AsyncTavilyClient(api_key=self.api_key)
        response = await client.search(
            query=query,
            search_depth=self.search_depth,
            max_results=max_results
        )

        results = [
            {
                "title": item.get("title", ""),
                "url": item.get("url", ""),
                "content": item.get("content", ""),
                "score": item.get("score", 0.0)
            }
            for item in response.get("results", [])
        ]
        logger.debug("Tavily returned %d results for %r", len(results), query)

        return {
            "query": query,
            "results": results,
            "answer": response.get("answer", "")
        }

    def _mock_search_results(self, query: str) -> Dict[str, Any]:
        """Generate mock search results for demo purposes."""
        return {
            "query": query,
            "results": [
                {
                    "title": f"Research on: {query}",
                    "url": "https://example.com/research",
                    "content": f"Comprehensive analysis of {query}. This source provides detailed information and data points relevant to the research topic.",
                    "score": 0.95
                },
                {
                    "title": f"Expert Analysis: {query}",
                    "url": "https://academic.example.edu/paper",
                    "content": f"Academic perspective on {query}. Peer-reviewed research with statistical analysis and methodology.",
                    "score": 0.88
                },
                {
                    "title": f"Latest News: {query}",
                    "url": "https://news.example.com/article",
                    "content": f"Recent developments regarding {query}. Updated information from reliable news sources.",
                    "score": 0.82
                }
            ],
            "answer": f"Based on current research, {query} is a topic with multiple perspectives and ongoing developments."
        }


def create_web_search_tool(config: Config) -> Tool:
    return Tool(
        name="web_search",
        description="Search the web for information on a topic. Returns relevant results with titles, URLs, and content snippets.",
        func=WebSearch(api_key=config.tavily_api_key),
        parameters=WEB_SEARCH_PARAMETERS
    )
