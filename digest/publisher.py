import logging
import re
from datetime import datetime
from pathlib import Path
from typing import List, Optional
from digest.models import DigestEntry

logger = logging.getLogger(__name__)

NO_NEWS_MESSAGE = "⚠️ Could not fetch news this morning. Try again tomorrow."
FOOTER = "---\n_Auto-generated news digest_"
MAX_SUMMARY_LENGTH = 100

def summarize(headline: str) -> str:
    """First sentence of the headline, capped at MAX_SUMMARY_LENGTH characters."""
    summary = re.split(r"[.!?](?:\s+|$)", headline, maxsplit=1)[0].strip()
    if len(summary) > MAX_SUMMARY_LENGTH:
        summary = summary[:MAX_SUMMARY_LENGTH - 3] + "..."
    return summary

def format_digest(entries: List[DigestEntry], now: Optional[datetime] = None) -> str:
    if not entries:
        return NO_NEWS_MESSAGE

    now = now or datetime.now()
    date = f"{now:%A}, {now.day} {now:%B %Y}"

    lines = [f"📰 *Morning News Summary* — {date}", ""]
    for idx, entry in enumerate(entries, 1):
        lines.append(f"{idx}. {summarize(entry.headline)}")
        lines.append(f"   ({', '.join(entry.sources)})")
    lines.append("")
    lines.append(FOOTER)
    return "\n".join(lines)

class DigestPublisher:
    """
    Hands the digest to the external sender: the text goes to a well-known
    file and a flag file signals that a fresh digest is waiting.
    """

    def __init__(self, output_file: str, flag_file: Optional[str] = None):
        self.output_file = Path(output_file)
        self.flag_file = Path(flag_file) if flag_file else None

    def publish(self, entries: List[DigestEntry], now: Optional[datetime] = None) -> str:
        message = format_digest(entries, now)
        self.write(message)
        if entries:
            logger.info(f"✓ Digest with {len(entries)} item(s) written to {self.output_file}")
        else:
            logger.warning(f"⚠️ No news fetched, wrote fallback message to {self.output_file}")
        return message

    def write(self, message: str):
        self.output_file.parent.mkdir(parents=True, exist_ok=True)
        self.output_file.write_text(message, encoding="utf-8")
        if self.flag_file:
            self.flag_file.parent.mkdir(parents=True, exist_ok=True)
            self.flag_file.touch()
            logger.debug(f"Notification flag set: {self.flag_file}")
