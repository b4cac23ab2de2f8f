"""
News consolidation engine.

Turns a flat batch of (source, headline) items into a deduplicated, ranked,
size-bounded list. Everything here is synchronous and side-effect free apart
from debug logging.
"""
import logging
import re
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from digest.config import ConsolidationConfig, ScoringWeights
from digest.models import (
    ConsolidatedItem,
    DigestEntry,
    HeadlineItem,
    ScoredItem,
    SourceResult,
)

logger = logging.getLogger(__name__)

# English function words: articles, auxiliaries, prepositions, conjunctions,
# demonstratives. Tokens of length <= 2 are dropped separately.
STOP_WORDS = frozenset({
    "the", "and", "but", "nor", "for", "yet", "not",
    "are", "was", "were", "been", "being", "has", "have", "had", "having",
    "does", "did", "doing", "will", "would", "shall", "should", "can",
    "could", "may", "might", "must",
    "from", "into", "onto", "upon", "with", "within", "without", "about",
    "above", "below", "after", "before", "over", "under", "between",
    "through", "during", "against", "among", "amid", "across", "along",
    "around", "behind", "beyond", "off", "out", "per", "than", "then",
    "toward", "towards", "via",
    "this", "that", "these", "those", "its", "their", "there", "here",
    "they", "them", "what", "which", "who", "whom", "whose", "when",
    "where", "why", "how", "all", "any", "some", "such", "also",
    "because", "while", "though", "although", "unless", "until", "whether",
})

_NON_WORD = re.compile(r"[^\w\s]")


def normalize(text: str) -> List[str]:
    """Reduce a headline to its comparable tokens, in input order."""
    cleaned = _NON_WORD.sub("", text.lower())
    return [
        token for token in cleaned.split()
        if len(token) > 2 and token not in STOP_WORDS
    ]


def similarity(tokens_a: Iterable[str], tokens_b: Iterable[str]) -> float:
    """Jaccard coefficient of two token collections (0.0 when both are empty)."""
    set_a = set(tokens_a)
    set_b = set(tokens_b)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def cluster(items: Sequence[HeadlineItem], threshold: float) -> List[List[HeadlineItem]]:
    """
    Greedy seed-anchored grouping.

    Each unassigned item seeds a new cluster and pulls in every later
    unassigned item whose similarity to the seed reaches the threshold.
    Members are never compared with each other, only with the seed.
    """
    tokens = [normalize(item.headline) for item in items]
    assigned = set()
    clusters = []

    for i, seed in enumerate(items):
        if i in assigned:
            continue
        group = [seed]
        assigned.add(i)
        for j in range(i + 1, len(items)):
            if j in assigned:
                continue
            if similarity(tokens[i], tokens[j]) >= threshold:
                group.append(items[j])
                assigned.add(j)
        clusters.append(group)

    logger.debug(f"Grouped {len(items)} headlines into {len(clusters)} clusters")
    return clusters


def consolidate(group: Sequence[HeadlineItem]) -> ConsolidatedItem:
    """Collapse a cluster into its longest headline plus every contributing source."""
    representative = group[0]
    for member in group[1:]:
        if len(member.headline) > len(representative.headline):
            representative = member

    timestamps = [m.published_at for m in group if m.published_at is not None]
    engagements = [m.engagement for m in group if m.engagement is not None]

    return ConsolidatedItem(
        headline=representative.headline,
        sources=frozenset(m.source for m in group),
        published_at=max(timestamps, key=_as_aware) if timestamps else None,
        engagement=max(engagements) if engagements else None,
    )


def _as_aware(moment: datetime) -> datetime:
    # Feeds mix naive and aware timestamps; naive ones are taken as UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def recency_score(published_at: Optional[datetime], max_age_hours: float, now: Optional[datetime] = None) -> float:
    if published_at is None:
        return 0.5
    now = _as_aware(now or datetime.now(timezone.utc))
    # Future timestamps (clock skew) count as brand new, never newer
    age_hours = max(0.0, (now - _as_aware(published_at)).total_seconds() / 3600)
    if max_age_hours <= 0:
        return 0.0
    return max(0.0, 1 - age_hours / max_age_hours)


def engagement_score(engagement: Optional[float], max_engagement: float) -> float:
    if engagement is None:
        return 0.3
    if max_engagement <= 0:
        return 1.0 if engagement > 0 else 0.0
    return min(engagement / max_engagement, 1.0)


def score(item: ConsolidatedItem, weights: Optional[ScoringWeights] = None, now: Optional[datetime] = None) -> float:
    """Weighted importance: corroboration first, then recency and engagement."""
    weights = weights or ScoringWeights()
    return (
        item.source_count * weights.source_count_weight
        + recency_score(item.published_at, weights.max_age_hours, now) * weights.recency_weight
        + engagement_score(item.engagement, weights.max_engagement) * weights.engagement_weight
    )


def rank(items: Sequence[ScoredItem], max_items: int) -> List[ScoredItem]:
    """Stable sort by score, highest first, truncated to max_items."""
    if max_items <= 0:
        return []
    return sorted(items, key=lambda scored: scored.score, reverse=True)[:max_items]


def build_items(results: Iterable[SourceResult]) -> List[HeadlineItem]:
    """Flatten per-source fetch results into headline items, keeping source order."""
    items = []
    for result in results:
        for idx, headline in enumerate(result.headlines):
            published_at = result.published[idx] if idx < len(result.published) else None
            items.append(HeadlineItem(
                source=result.source,
                headline=headline,
                published_at=published_at,
            ))
    return items


def consolidate_headlines(
    items: Sequence[HeadlineItem],
    config: Optional[ConsolidationConfig] = None,
    now: Optional[datetime] = None,
) -> List[ScoredItem]:
    """Run the full cluster → consolidate → score → rank pipeline."""
    config = config or ConsolidationConfig()
    if not items:
        logger.info("No headlines to consolidate")
        return []

    clusters = cluster(items, config.similarity_threshold)
    scored = []
    for group in clusters:
        merged = consolidate(group)
        scored.append(ScoredItem(item=merged, score=score(merged, config.scoring, now)))

    ranked = rank(scored, config.max_items)
    logger.info(
        f"Consolidated {len(items)} headlines into {len(clusters)} stories, keeping top {len(ranked)}"
    )
    return ranked


def to_digest_entries(ranked: Iterable[ScoredItem]) -> List[DigestEntry]:
    return [
        DigestEntry(
            headline=scored.headline,
            sources=sorted(scored.sources),
            score=round(scored.score, 3),
        )
        for scored in ranked
    ]
