import logging
import os
from typing import Any, List
from urllib.parse import urlencode
import httpx
from digest.config import FilterConfig, SourceConfig
from digest.http_client import HTTPClient
from digest.models import SourceResult
from sources.base import BaseSource, FetchError

logger = logging.getLogger(__name__)

DEFAULT_QUERY = "top business finance news today"
DEFAULT_GATEWAY_URL = "http://127.0.0.1:18789"
BRAVE_API_URL = "https://api.search.brave.com/v1/search"

def _result_titles(data: Any) -> List[str]:
    """Pull titles out of either a {"results": [...]} payload or a bare list."""
    if isinstance(data, dict):
        items = data.get("results")
    else:
        items = data
    if not isinstance(items, list):
        return []
    return [item["title"] for item in items if isinstance(item, dict) and item.get("title")]

class BraveSearchSource(BaseSource):
    """
    Brave Search news results. The local gateway is tried first; the public
    API is the fallback when the gateway is not configured or fails.
    """

    def __init__(self, http_client: HTTPClient, config: SourceConfig, rules: FilterConfig, api_key: str = ""):
        super().__init__(http_client, config, rules)
        self.api_key = api_key
        self.gateway_url = os.getenv("OPENCLAW_GATEWAY_URL", DEFAULT_GATEWAY_URL)
        self.gateway_token = os.getenv("OPENCLAW_GATEWAY_TOKEN", "")

    @property
    def query(self) -> str:
        return self.config.query or DEFAULT_QUERY

    async def _from_gateway(self) -> Any:
        if not self.gateway_token:
            raise FetchError(self.name, "OPENCLAW_GATEWAY_TOKEN not configured")
        params = urlencode({"q": self.query, "count": self.config.max_headlines})
        url = f"{self.gateway_url}/api/v1/tools/web/search?{params}"
        return await self.http_client.fetch_json(url, {"Authorization": f"Bearer {self.gateway_token}"})

    async def _from_api(self) -> Any:
        if not self.api_key:
            raise FetchError(self.name, "BRAVE_API_KEY not configured (neither in config nor env var)")
        params = urlencode({"q": self.query, "source": "news", "count": self.config.max_headlines})
        return await self.http_client.fetch_json(
            f"{BRAVE_API_URL}?{params}",
            {"X-Subscription-Token": self.api_key},
        )

    async def fetch(self) -> SourceResult:
        logger.info("Fetching from Brave Search API (via gateway)...")
        try:
            data = await self._from_gateway()
        except (FetchError, httpx.HTTPError, ValueError) as e:
            logger.warning(f"Gateway unavailable ({e}), falling back to direct API...")
            try:
                data = await self._from_api()
            except (httpx.HTTPError, ValueError) as api_error:
                raise FetchError(self.name, str(api_error)) from api_error

        result = self._new_result()
        for title in _result_titles(data):
            self._accept(result, title)

        logger.info(f"Found {len(result.headlines)} headlines from {self.name}")
        return result
