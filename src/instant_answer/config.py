"""
Instant Answer API configuration

Environment variables:
  INSTANT_ANSWER_BASE_URL: API origin, also the origin that relative image
                           paths in payloads are resolved against
                           (default: https://duckduckgo.com)
  INSTANT_ANSWER_TIMEOUT: Request timeout in seconds (default: 10)
  INSTANT_ANSWER_USER_AGENT: User-Agent header sent with lookups
"""

import os

BASE_URL = os.getenv("INSTANT_ANSWER_BASE_URL", "https://duckduckgo.com")

REQUEST_TIMEOUT = float(os.getenv("INSTANT_ANSWER_TIMEOUT", "10"))

USER_AGENT = os.getenv("INSTANT_ANSWER_USER_AGENT", "instant-answer/0.1")

# `format` query parameter sent with every lookup
RESPONSE_FORMAT = "json"
