"""Data Loader Module

Loads saved instant answer payloads and topic lists from disk, so answers
can be normalized and rendered without hitting the API.
"""

import json
from pathlib import Path
from typing import Any, Dict, List


def load_raw_answers(path: str | Path) -> List[Dict[str, Any]]:
    """Load saved raw payloads from a JSON file.

    Supports flexible input formats:
      - A single payload object: {"Type": "A", ...}
      - A list of payloads: [{...}, {...}, ...]
      - Wrapped in 'results' key: {"results": [...]}

    Args:
        path: File path to JSON file containing raw payloads

    Returns:
        List of raw payload dictionaries

    Raises:
        FileNotFoundError: If file does not exist
        json.JSONDecodeError: If file is not valid JSON
        ValueError: If the JSON root is neither an object nor a list
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, list):
        return data
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a JSON object or list in {path}, got {type(data).__name__}"
        )
    if isinstance(data.get("results"), list):
        return data["results"]
    return [data]


def load_topics(path: str | Path) -> List[str]:
    """Load topics from a text file, one per line.

    Blank lines and lines starting with '#' are skipped.
    """
    path = Path(path)
    topics: List[str] = []
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            topic = line.strip()
            if topic and not topic.startswith("#"):
                topics.append(topic)
    return topics
