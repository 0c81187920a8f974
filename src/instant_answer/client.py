"""Instant Answer API Client

Performs the HTTP lookup against the instant answer API and chains the
decoded payload through normalization and rendering.

Transport, HTTP status and JSON decode failures are logged and re-raised
unchanged; nothing here retries or caches.
"""

import json
from typing import Any, Optional

import httpx

from .config import BASE_URL, REQUEST_TIMEOUT, RESPONSE_FORMAT, USER_AGENT
from .markdown import to_markdown
from .models import UnknownAnswer
from .normalizer import normalize

import logging

logger = logging.getLogger(__name__)


def query(topic: str, http_client: Optional[httpx.Client] = None) -> Any:
    """
    Query the instant answer API and return the decoded JSON payload.

    An empty topic short-circuits to UnknownAnswer without a request.

    Args:
        topic: Search topic, e.g. "Elixir Language"
        http_client: Optional client to send the request with; a short-lived
            one is created otherwise

    Returns:
        The raw decoded payload (or UnknownAnswer for an empty topic)

    Raises:
        httpx.HTTPError: On transport failures or non-2xx responses
        json.JSONDecodeError: If the body is not valid JSON
    """
    if topic == "":
        logger.debug("query: empty topic, skipping request")
        return UnknownAnswer()

    params = {"q": topic, "format": RESPONSE_FORMAT}
    logger.debug("query: GET %s params=%r", BASE_URL, params)

    try:
        if http_client is None:
            with httpx.Client(
                timeout=REQUEST_TIMEOUT,
                follow_redirects=True,
                headers={"User-Agent": USER_AGENT},
            ) as client:
                response = client.get(BASE_URL, params=params)
        else:
            response = http_client.get(BASE_URL, params=params)
        response.raise_for_status()
    except httpx.HTTPError:
        logger.exception("Instant answer request failed for topic %r", topic)
        raise

    try:
        return json.loads(response.text)
    except json.JSONDecodeError:
        logger.exception("Invalid JSON in instant answer response for %r", topic)
        raise


def answer(topic: str, http_client: Optional[httpx.Client] = None) -> Any:
    """Look up `topic` and return its normalized answer."""
    return normalize(query(topic, http_client=http_client))


def lookup_markdown(topic: str, http_client: Optional[httpx.Client] = None) -> str:
    """Look up `topic` and render the answer as markdown."""
    return to_markdown(query(topic, http_client=http_client))
