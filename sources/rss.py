from datetime import datetime, timezone
from typing import Optional
import feedparser
import httpx
import logging
from digest.models import SourceResult
from sources.base import BaseSource, FetchError
from sources.html import extract_headings

logger = logging.getLogger(__name__)

class RSSSource(BaseSource):
    """
    RSS/Atom feeds. Item titles are used when the document parses as a feed;
    otherwise (a plain page behind a feed-looking URL) heading tags are read.
    """

    def entry_date(self, entry) -> Optional[datetime]:
        # feedparser normalizes RFC 822 and ISO-8601 dates to a UTC struct_time
        parsed = entry.get("published_parsed") or entry.get("updated_parsed")
        if parsed:
            return datetime(*parsed[:6], tzinfo=timezone.utc)
        return self.normalize_date(entry.get("published") or entry.get("updated"))

    async def fetch(self) -> SourceResult:
        try:
            content = await self.http_client.fetch(self.config.url)
        except httpx.HTTPError as e:
            raise FetchError(self.name, str(e)) from e

        result = self._new_result()

        feed = feedparser.parse(content)
        for entry in feed.entries:
            title = entry.get("title")
            if not title:
                continue
            self._accept(result, title, self.entry_date(entry))
            if self._is_full(result):
                break

        if not feed.entries:
            logger.debug(f"{self.name} did not parse as a feed ({feed.get('bozo_exception')}), reading headings")
            for text in extract_headings(content):
                self._accept(result, text)
                if self._is_full(result):
                    break

        logger.info(f"Found {len(result.headlines)} headlines from {self.name}")
        return result
