"""Response Normalization Module

Turns a decoded instant answer payload into one canonical answer model.

The payload's shape depends on what kind of answer was found, so the
normalizer is an ordered list of (predicate, builder) rules evaluated top
to bottom; the first matching rule builds the result. The order encodes
precedence: an explicit `Type` beats a category inferred from related
topics, and the catch-all passthrough rule comes last, which is what makes
normalizing an already-canonical value return it unchanged.

Key responsibilities:
  - Dispatch on the `Type` / `AnswerType` discriminators
  - Build sparse DirectAnswer values (blank fields omitted)
  - Never raise on payload content; unknown shapes pass through
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .models import (
    CalculationAnswer,
    CategoryAnswer,
    DiceRollAnswer,
    DirectAnswer,
    DisambiguationAnswer,
    ErrorAnswer,
    InfoboxEntry,
    TypedAnswer,
    UnitAnswer,
    UnknownAnswer,
)
from .topics import absolute_url, extract_related_topics

import logging

logger = logging.getLogger(__name__)

RAW_DISCRIMINATORS = ("Type", "AnswerType")

# Infobox content data types that carry displayable text
INFOBOX_DATA_TYPES = ("string", "twitter_profile")

Predicate = Callable[[Mapping[str, Any]], bool]
Builder = Callable[[Mapping[str, Any]], Any]


def omit_blank(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Drop entries whose value is "", None or an empty list."""
    return {key: value for key, value in fields.items() if not _is_blank(value)}


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list)):
        return len(value) == 0
    return False


def _text(raw: Mapping[str, Any], key: str) -> Optional[str]:
    value = raw.get(key)
    return value if isinstance(value, str) else None


def is_raw_payload(answer: Any) -> bool:
    """True when `answer` is a mapping still carrying a raw discriminator key."""
    return isinstance(answer, Mapping) and any(
        key in answer for key in RAW_DISCRIMINATORS
    )


# ============================================================================
# Builders
# ============================================================================


def _image_caption(raw: Mapping[str, Any]) -> Optional[str]:
    caption = _text(raw, "Heading")

    infobox = raw.get("Infobox")
    meta = infobox.get("meta") if isinstance(infobox, Mapping) else None
    for item in meta if isinstance(meta, list) else []:
        if isinstance(item, Mapping) and item.get("label") == "caption":
            value = item.get("value")
            if isinstance(value, str):
                caption = value
            break

    if caption is None:
        return None
    return caption.replace('"', "&quot;")


def _information(raw: Mapping[str, Any]) -> List[InfoboxEntry]:
    infobox = raw.get("Infobox")
    content = infobox.get("content") if isinstance(infobox, Mapping) else None
    if not isinstance(content, list):
        return []

    information: List[InfoboxEntry] = []
    for item in content:
        if not isinstance(item, Mapping):
            continue
        if item.get("data_type") not in INFOBOX_DATA_TYPES:
            continue
        label = item.get("label")
        value = item.get("value")
        information.append(
            InfoboxEntry(
                label=label if isinstance(label, str) else None,
                value=value if isinstance(value, str) else None,
            )
        )
    return information


def build_direct(raw: Mapping[str, Any]) -> DirectAnswer:
    fields = {
        "heading": _text(raw, "Heading"),
        "answer": _text(raw, "Abstract"),
        "image": absolute_url(raw.get("Image")),
        "image_caption": _image_caption(raw),
        "entity": _text(raw, "Entity"),
        "url": _text(raw, "AbstractURL"),
        "source": _text(raw, "AbstractSource"),
        "information": _information(raw),
        "related": extract_related_topics(raw.get("RelatedTopics")),
    }
    return DirectAnswer(**omit_blank(fields))


def build_category(raw: Mapping[str, Any]) -> CategoryAnswer:
    return CategoryAnswer(
        heading=_text(raw, "Heading"),
        entries=extract_related_topics(raw.get("RelatedTopics")),
    )


def build_disambiguation(raw: Mapping[str, Any]) -> DisambiguationAnswer:
    return DisambiguationAnswer(
        heading=f'"{_text(raw, "Heading") or ""}" has multiple possible answers',
        entries=extract_related_topics(raw.get("RelatedTopics")),
    )


def build_unit(raw: Mapping[str, Any]) -> UnitAnswer:
    heading = _text(raw, "Heading") or ""
    return UnitAnswer(
        heading=f'"{heading}" is a unit of measurement and has other meanings',
        entries=extract_related_topics(raw.get("RelatedTopics")),
    )


def build_typed(raw: Mapping[str, Any]) -> TypedAnswer:
    answer_type = raw.get("AnswerType")
    answer_type = "" if answer_type is None else str(answer_type)
    return TypedAnswer(type=answer_type, heading=answer_type, answer=raw["Answer"])


# ============================================================================
# Predicates
# ============================================================================


def _type_is(code: str) -> Predicate:
    return lambda raw: raw.get("Type") == code


def _answer_type_is(answer_type: str) -> Predicate:
    return lambda raw: raw.get("AnswerType") == answer_type


def _has_answer_text(raw: Mapping[str, Any]) -> bool:
    answer = raw.get("Answer")
    return isinstance(answer, str) and len(answer) > 0


def _untyped_with_related_topics(raw: Mapping[str, Any]) -> bool:
    related = raw.get("RelatedTopics")
    return "Type" not in raw and isinstance(related, list) and len(related) > 0


def _is_dice_roll(raw: Mapping[str, Any]) -> bool:
    return raw.get("AnswerType") == "dice_roll" and _has_answer_text(raw)


def _is_typed_answer(raw: Mapping[str, Any]) -> bool:
    return "AnswerType" in raw and _has_answer_text(raw)


# Order matters: first match wins.
RULES: List[Tuple[str, Predicate, Builder]] = [
    ("direct", _type_is("A"), build_direct),
    ("category", _type_is("C"), build_category),
    ("disambiguation", _type_is("D"), build_disambiguation),
    ("inferred category", _untyped_with_related_topics, build_category),
    ("unknown", _type_is(""), lambda raw: UnknownAnswer()),
    ("calculation", _answer_type_is("calc"), lambda raw: CalculationAnswer()),
    ("unit", _answer_type_is("conversions"), build_unit),
    ("dice roll", _is_dice_roll, lambda raw: DiceRollAnswer(answer=raw["Answer"])),
    ("typed answer", _is_typed_answer, build_typed),
    ("error", _type_is("E"), lambda raw: ErrorAnswer()),
]


def normalize(raw: Any) -> Any:
    """Normalize a decoded instant answer payload.

    Args:
        raw: Decoded JSON payload, or an already-normalized answer

    Returns:
        The canonical answer model built by the first matching rule, or
        `raw` itself, unchanged, when no rule matches (including canonical
        models and canonical dicts, which carry no raw discriminator).
    """
    if not isinstance(raw, Mapping):
        return raw

    for name, matches, build in RULES:
        if matches(raw):
            logger.debug("normalize: matched rule %r", name)
            return build(raw)

    logger.debug("normalize: no rule matched, passing payload through")
    return raw
