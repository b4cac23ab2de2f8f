import asyncio
import logging
from typing import List

from digest.config import AppConfig
from digest.http_client import HTTPClient
from digest.models import SourceResult
from sources.base import BaseSource, FetchError
from sources.brave import BraveSearchSource
from sources.html import HTMLSource
from sources.rss import RSSSource

logger = logging.getLogger(__name__)

def build_sources(config: AppConfig, http: HTTPClient) -> List[BaseSource]:
    """Instantiate one source per enabled config entry."""
    sources = []
    for source_config in config.sources:
        if not source_config.enabled:
            logger.info(f"Skipping {source_config.name} (disabled)")
            continue

        if source_config.type == "api":
            if source_config.api != "brave":
                logger.warning(f"Unknown API '{source_config.api}' for {source_config.name}. Skipping.")
                continue
            sources.append(BraveSearchSource(http, source_config, config.filter, config.brave_api_key))
        elif source_config.type == "html":
            sources.append(HTMLSource(http, source_config, config.filter))
        else:
            sources.append(RSSSource(http, source_config, config.filter))
    return sources

async def collect(sources: List[BaseSource], request_delay: float = 0.0) -> List[SourceResult]:
    """
    Fetch every source in turn, pausing between them.
    A failing source contributes nothing; the run carries on with the rest.
    """
    results = []
    for idx, source in enumerate(sources):
        logger.info(f"Fetching from {source.name}...")
        try:
            result = await source.fetch()
            if result.headlines:
                results.append(result)
        except FetchError as e:
            logger.error(f"Source {source.name} failed: {e}")
        except Exception as e:
            logger.exception(f"Unexpected error in source {source.name}: {e}")

        if request_delay > 0 and idx < len(sources) - 1:
            await asyncio.sleep(request_delay)

    logger.info(f"Collected headlines from {len(results)}/{len(sources)} source(s)")
    return results
