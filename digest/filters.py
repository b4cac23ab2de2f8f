import re
from digest.config import FilterConfig

_ENTITIES = (
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
)

def clean_headline(text: str) -> str:
    """Decode the common HTML entities, drop numeric ones, strip tags and collapse whitespace."""
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    text = re.sub(r"&#\d+;", "", text)
    text = re.sub(r"<[^>]+>", "", text)
    text = re.sub(r"\s+", " ", text)
    return text.strip()

def passes_filters(headline: str, rules: FilterConfig) -> bool:
    lower = headline.lower()

    if len(headline) < rules.min_length or len(headline) > rules.max_length:
        return False

    for pattern in rules.exclude_patterns:
        if pattern.lower() in lower:
            return False

    # Keywords are optional; when present at least one must match
    if rules.keywords and not any(k.lower() in lower for k in rules.keywords):
        return False

    return True
