from abc import ABC, abstractmethod
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import List, Optional
import logging
from digest.config import FilterConfig, SourceConfig
from digest.filters import clean_headline, passes_filters
from digest.http_client import HTTPClient
from digest.models import SourceResult

logger = logging.getLogger(__name__)

class FetchError(Exception):
    """A source could not be retrieved or parsed."""

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source

class BaseSource(ABC):
    def __init__(self, http_client: HTTPClient, config: SourceConfig, rules: FilterConfig):
        self.http_client = http_client
        self.config = config
        self.rules = rules
        self.name = config.name

    @abstractmethod
    async def fetch(self) -> SourceResult:
        """
        Retrieve this source's headlines.
        Raises FetchError on network, timeout or parse failures.
        """
        pass

    async def fetch_headlines(self) -> List[str]:
        result = await self.fetch()
        return result.headlines

    def _new_result(self) -> SourceResult:
        return SourceResult(source=self.name)

    def _accept(self, result: SourceResult, raw: str, published_at: Optional[datetime] = None) -> bool:
        """
        Clean a raw headline and append it to the result if it passes the
        filters, is not a repeat and the source still has room.
        Returns True when the headline was added.
        """
        if self._is_full(result):
            return False
        headline = clean_headline(raw)
        if not headline or headline in result.headlines:
            return False
        if not passes_filters(headline, self.rules):
            logger.debug(f"Filtered out: {headline}")
            return False
        result.headlines.append(headline)
        result.published.append(published_at)
        return True

    def _is_full(self, result: SourceResult) -> bool:
        return len(result.headlines) >= self.config.max_headlines

    def normalize_date(self, date_str: Optional[str]) -> Optional[datetime]:
        if not date_str:
            return None
        try:
            return parsedate_to_datetime(date_str)
        except (TypeError, ValueError):
            logger.warning(f"Could not parse date: {date_str}")
            return None
