import logging
import httpx
from typing import Any, Dict, Optional
from fake_useragent import UserAgent
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

logger = logging.getLogger(__name__)

class HTTPClient:
    def __init__(self, timeout: float = 10.0, user_agent: Optional[str] = None):
        self.timeout = timeout
        self.user_agent = user_agent
        self.ua = None if user_agent else UserAgent()
        self.client = httpx.AsyncClient(http2=False, follow_redirects=True)

    def _get_headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "User-Agent": self.user_agent or self.ua.random,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
        }
        if extra:
            headers.update(extra)
        return headers

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((httpx.RequestError, httpx.TimeoutException)),
        reraise=True,
    )
    async def _get(self, url: str, headers: Optional[Dict[str, str]] = None) -> httpx.Response:
        response = await self.client.get(url, headers=self._get_headers(headers), timeout=self.timeout)
        response.raise_for_status()
        return response

    async def fetch(self, url: str, headers: Optional[Dict[str, str]] = None) -> str:
        """
        Fetches a URL as text, retrying transient network failures.
        HTTP error statuses are raised immediately as httpx.HTTPStatusError.
        """
        response = await self._get(url, headers)
        logger.info(f"Successfully fetched {url}")
        return response.text

    async def fetch_json(self, url: str, headers: Optional[Dict[str, str]] = None) -> Any:
        json_headers = {"Accept": "application/json"}
        if headers:
            json_headers.update(headers)
        response = await self._get(url, json_headers)
        logger.info(f"Successfully fetched {url}")
        return response.json()

    async def close(self):
        await self.client.aclose()
