"""Related Topic Extraction

Flattens the `RelatedTopics` list of an instant answer payload into a
single ordered list of RelatedEntry values. Entries are either leaves
(`FirstURL`, `Icon.URL`, `Result`) or category groups (`Name`, `Topics`);
groups are flattened recursively and their leaves tagged with the group
name.
"""

import re
from typing import Any, List, Mapping, Optional

from .config import BASE_URL
from .models import DEFAULT_CATEGORY, RelatedEntry

import logging

logger = logging.getLogger(__name__)

CLOSING_ANCHOR = re.compile(r"</a>")


def absolute_url(path: Any) -> Optional[str]:
    """Resolve a payload-relative path (e.g. "/i/abc.png") against the API origin.

    Empty or missing paths return None so callers never store "" as an image.
    """
    if not isinstance(path, str) or not path:
        return None
    return f"{BASE_URL}{path}"


def extract_related_topics(
    related_topics: Any,
    category: str = DEFAULT_CATEGORY,
) -> List[RelatedEntry]:
    """
    Flatten related topics into RelatedEntry values.

    Args:
        related_topics: The raw `RelatedTopics` list (anything else yields [])
        category: Category assigned to leaves found at this level

    Returns:
        One RelatedEntry per leaf, in payload order
    """
    entries: List[RelatedEntry] = []
    if not isinstance(related_topics, list):
        return entries

    for topic in related_topics:
        if not isinstance(topic, Mapping):
            logger.debug("Skipping non-object related topic: %r", topic)
            continue

        if "Topics" in topic:
            name = topic.get("Name")
            group = name if isinstance(name, str) and name else category
            entries.extend(extract_related_topics(topic.get("Topics"), group))
            continue

        entries.append(_to_related_entry(topic, category))

    return entries


def _to_related_entry(topic: Mapping[str, Any], category: str) -> RelatedEntry:
    url = topic.get("FirstURL")
    icon = topic.get("Icon")
    icon_path = icon.get("URL") if isinstance(icon, Mapping) else None

    return RelatedEntry(
        url=url if isinstance(url, str) else None,
        image=absolute_url(icon_path),
        text=_result_text(topic.get("Result")),
        category=category,
    )


def _result_text(result: Any) -> Optional[str]:
    if not isinstance(result, str):
        return None
    return CLOSING_ANCHOR.sub("</a><br />", result)
