import json
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path(__file__).resolve().parent.parent / "news-config.json"
DEFAULT_OUTPUT_FILE = "/tmp/latest-news.txt"
DEFAULT_FLAG_FILE = "/tmp/news-notification.flag"

_ENV_REF = re.compile(r"^\$\{(\w+)\}$")


class ConfigError(Exception):
    """Raised when the configuration file cannot be used at all."""


@dataclass
class ScoringWeights:
    source_count_weight: float = 2.0
    recency_weight: float = 1.0
    engagement_weight: float = 0.5
    max_age_hours: float = 24.0
    max_engagement: float = 100.0


@dataclass
class ConsolidationConfig:
    max_items: int = 3
    similarity_threshold: float = 0.5
    scoring: ScoringWeights = field(default_factory=ScoringWeights)

    @classmethod
    def from_dict(cls, raw: Optional[Dict[str, Any]], legacy_max_items: Any = None) -> "ConsolidationConfig":
        """
        Build the engine configuration from the `consolidation` block.
        Missing or malformed values fall back to their defaults with a warning,
        so the engine itself never has to validate anything.
        """
        raw = raw if isinstance(raw, dict) else {}
        scoring_raw = raw.get("scoring") if isinstance(raw.get("scoring"), dict) else {}
        defaults = cls()
        weights = defaults.scoring

        max_items_raw = raw.get("maxItems", legacy_max_items)
        return cls(
            max_items=_coerce(max_items_raw, int, defaults.max_items, "consolidation.maxItems"),
            similarity_threshold=_coerce(
                raw.get("similarityThreshold"), float, defaults.similarity_threshold,
                "consolidation.similarityThreshold",
            ),
            scoring=ScoringWeights(
                source_count_weight=_coerce(
                    scoring_raw.get("sourceCountWeight"), float, weights.source_count_weight,
                    "consolidation.scoring.sourceCountWeight",
                ),
                recency_weight=_coerce(
                    scoring_raw.get("recencyWeight"), float, weights.recency_weight,
                    "consolidation.scoring.recencyWeight",
                ),
                engagement_weight=_coerce(
                    scoring_raw.get("engagementWeight"), float, weights.engagement_weight,
                    "consolidation.scoring.engagementWeight",
                ),
                max_age_hours=_coerce(
                    scoring_raw.get("maxAgeHours"), float, weights.max_age_hours,
                    "consolidation.scoring.maxAgeHours",
                ),
                max_engagement=_coerce(
                    scoring_raw.get("maxEngagement"), float, weights.max_engagement,
                    "consolidation.scoring.maxEngagement",
                ),
            ),
        )


def _coerce(value: Any, kind: type, default: Any, key: str) -> Any:
    if value is None:
        return default
    # bool is an int subclass but never a meaningful weight or count
    if isinstance(value, bool):
        logger.warning(f"Ignoring boolean value for {key}, using default {default}")
        return default
    try:
        return kind(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid value {value!r} for {key}, using default {default}")
        return default


def _string_list(value: Any, key: str) -> List[str]:
    """A list of strings; a bare string counts as one entry, anything else is dropped."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        logger.warning(f"Invalid value {value!r} for {key}, expected a list of strings")
        return []
    kept = [v for v in value if isinstance(v, str)]
    if len(kept) != len(value):
        logger.warning(f"Dropping non-string entries from {key}")
    return kept


def _block(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        logger.warning(f"Ignoring {key}: expected an object, got {value!r}")
        return {}
    return value


def _flag(value: Any, default: bool, key: str) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        logger.warning(f"Invalid value {value!r} for {key}, using default {default}")
        return default
    return value


@dataclass
class FilterConfig:
    min_length: int = 20
    max_length: int = 200
    exclude_patterns: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)


@dataclass
class SourceConfig:
    name: str
    url: str = ""
    type: str = "rss"
    enabled: bool = True
    max_headlines: int = 5
    api: Optional[str] = None
    query: Optional[str] = None


@dataclass
class AppConfig:
    sources: List[SourceConfig]
    filter: FilterConfig = field(default_factory=FilterConfig)
    consolidation: ConsolidationConfig = field(default_factory=ConsolidationConfig)
    timeout: float = 10.0  # seconds
    request_delay: float = 1.0  # seconds
    user_agent: Optional[str] = None
    brave_api_key: str = ""
    output_file: str = DEFAULT_OUTPUT_FILE
    flag_file: str = DEFAULT_FLAG_FILE


def resolve_env(value: Optional[str]) -> str:
    """
    Expand a whole-value `${VAR}` reference from the environment.
    Unset variables resolve to an empty string.
    """
    if not value:
        return ""
    match = _ENV_REF.match(value)
    if match:
        return os.getenv(match.group(1), "")
    return value


def _parse_source(raw: Dict[str, Any]) -> SourceConfig:
    if not isinstance(raw, dict) or not raw.get("name"):
        raise ConfigError(f"Source missing name: {raw!r}")

    source_type = raw.get("type", "rss")
    if source_type != "api" and not raw.get("url"):
        raise ConfigError(f"Source '{raw['name']}' missing url")

    return SourceConfig(
        name=raw["name"],
        url=raw.get("url", ""),
        type=source_type,
        enabled=_flag(raw.get("enabled"), True, f"sources[{raw['name']}].enabled"),
        max_headlines=_coerce(raw.get("maxHeadlines"), int, 5, f"sources[{raw['name']}].maxHeadlines"),
        api=raw.get("api"),
        query=raw.get("query"),
    )


def parse_config(raw: Dict[str, Any]) -> AppConfig:
    if not isinstance(raw, dict):
        raise ConfigError("Config root must be an object")
    if not isinstance(raw.get("sources"), list):
        raise ConfigError("Config missing sources array")

    filter_raw = _block(raw, "filter")
    output_raw = _block(raw, "output")

    return AppConfig(
        sources=[_parse_source(s) for s in raw["sources"]],
        filter=FilterConfig(
            min_length=_coerce(filter_raw.get("minLength"), int, 20, "filter.minLength"),
            max_length=_coerce(filter_raw.get("maxLength"), int, 200, "filter.maxLength"),
            exclude_patterns=_string_list(filter_raw.get("excludePatterns"), "filter.excludePatterns"),
            keywords=_string_list(filter_raw.get("keywords"), "filter.keywords"),
        ),
        consolidation=ConsolidationConfig.from_dict(raw.get("consolidation"), raw.get("maxItems")),
        timeout=_coerce(raw.get("timeout"), float, 10000.0, "timeout") / 1000,
        request_delay=_coerce(raw.get("requestDelay"), float, 1000.0, "requestDelay") / 1000,
        user_agent=raw.get("userAgent"),
        brave_api_key=resolve_env(raw.get("braveApiKey")),
        output_file=output_raw.get("file", DEFAULT_OUTPUT_FILE),
        flag_file=output_raw.get("flagFile", DEFAULT_FLAG_FILE),
    )


def load_config(path: Optional[str] = None) -> AppConfig:
    """
    Load the JSON configuration file.
    Path resolution: explicit argument, then NEWS_CONFIG env var, then
    news-config.json in the project root.
    """
    config_path = Path(path or os.getenv("NEWS_CONFIG") or DEFAULT_CONFIG_FILE)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {config_path}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {config_path}: {e}") from e

    config = parse_config(raw)
    logger.info(f"Loaded config from {config_path}: {len(config.sources)} source(s)")
    return config
