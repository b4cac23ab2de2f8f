import logging
import httpx
from bs4 import BeautifulSoup
from digest.models import SourceResult
from sources.base import BaseSource, FetchError

logger = logging.getLogger(__name__)

HEADING_TAGS = ["h1", "h2", "h3", "h4"]
MIN_HEADING_LENGTH = 30
MAX_HEADING_LENGTH = 200

def extract_headings(html: str):
    """Yield heading texts of a plausible headline length, in document order."""
    soup = BeautifulSoup(html, "lxml")
    for tag in soup.find_all(HEADING_TAGS):
        text = tag.get_text(separator=" ", strip=True)
        if MIN_HEADING_LENGTH <= len(text) <= MAX_HEADING_LENGTH:
            yield text

class HTMLSource(BaseSource):
    """News front pages without a feed: headlines come from heading tags."""

    async def fetch(self) -> SourceResult:
        try:
            html = await self.http_client.fetch(self.config.url)
        except httpx.HTTPError as e:
            raise FetchError(self.name, str(e)) from e

        result = self._new_result()
        for text in extract_headings(html):
            self._accept(result, text)
            if self._is_full(result):
                break

        logger.info(f"Found {len(result.headlines)} headlines from {self.name}")
        return result
