import logging
import asyncio
import os
import sys
from dotenv import load_dotenv

from digest.config import ConfigError, load_config
from digest.http_client import HTTPClient
from digest.collector import build_sources, collect
from digest.consolidate import build_items, consolidate_headlines, to_digest_entries
from digest.publisher import DigestPublisher


# Load env
load_dotenv()

# Setup logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

async def main() -> int:
    logger.info("📰 Starting news digest...")

    try:
        config = load_config()
    except ConfigError as e:
        logger.error(f"Error loading config: {e}")
        return 1

    http = HTTPClient(timeout=config.timeout, user_agent=config.user_agent)
    try:
        # 1. Fetch
        sources = build_sources(config, http)
        results = await collect(sources, config.request_delay)
    finally:
        await http.close()

    # 2. Cluster, score & rank
    items = build_items(results)
    logger.info(f"Found {len(items)} headlines across {len(results)} source(s)")
    ranked = consolidate_headlines(items, config.consolidation)

    for idx, scored in enumerate(ranked, 1):
        logger.info(f"  [{idx}] {scored.score:.2f} - {scored.headline} ({', '.join(sorted(scored.sources))})")

    # 3. Write digest for the sender
    publisher = DigestPublisher(config.output_file, config.flag_file)
    publisher.publish(to_digest_entries(ranked))

    logger.info("✓ Complete!")
    return 0

if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
