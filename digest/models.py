from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional
from datetime import datetime

@dataclass(frozen=True)
class HeadlineItem:
    source: str  # Site or feed name
    headline: str  # Cleaned headline text
    published_at: Optional[datetime] = None
    engagement: Optional[float] = None  # Popularity signal if the source exposes one

@dataclass
class SourceResult:
    source: str
    headlines: List[str] = field(default_factory=list)
    published: List[Optional[datetime]] = field(default_factory=list)  # Parallel to headlines, may be shorter

@dataclass(frozen=True)
class ConsolidatedItem:
    headline: str  # Representative text for the cluster
    sources: FrozenSet[str]
    published_at: Optional[datetime] = None  # Most recent known member timestamp
    engagement: Optional[float] = None  # Highest known member engagement

    @property
    def source_count(self) -> int:
        return len(self.sources)

@dataclass(frozen=True)
class ScoredItem:
    item: ConsolidatedItem
    score: float

    @property
    def headline(self) -> str:
        return self.item.headline

    @property
    def sources(self) -> FrozenSet[str]:
        return self.item.sources

@dataclass
class DigestEntry:
    headline: str
    sources: List[str]
    score: float
