"""Markdown Rendering Module

Renders canonical answers as markdown with embedded HTML for images and
tables. Rendering dispatches on the answer's model class through a
registry; raw payloads are normalized first, so `to_markdown` accepts
both raw and canonical input.

Output layout:
  - "# heading" lines, blocks separated by one blank line
  - <table>/<thead>/<tbody> markup with one tag per line
  - every document ends with a newline, except calculation answers which
    are returned verbatim
"""

import re
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .expressions import ExpressionError, evaluate, format_number
from .models import (
    CalculationAnswer,
    CategoryAnswer,
    DiceRollAnswer,
    DirectAnswer,
    DisambiguationAnswer,
    ErrorAnswer,
    RelatedEntry,
    TypedAnswer,
    UnitAnswer,
    UnknownAnswer,
    answer_from_dict,
)
from .normalizer import is_raw_payload, normalize

import logging

logger = logging.getLogger(__name__)

ARITHMETIC_SIGN = re.compile(r"[+-]")

DICE_ROLL_HEADING = "Dice Roll"


# ============================================================================
# HTML helpers
# ============================================================================


def html_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Build an HTML table, one tag per line, without a trailing newline."""
    lines: List[str] = ["<table>", "<thead>", "<tr>"]
    lines.extend(f"<th>{header}</th>" for header in headers)
    lines.extend(["</tr>", "</thead>", "<tbody>"])
    for row in rows:
        lines.append("<tr>")
        lines.extend(f"<td>{cell}</td>" for cell in row)
        lines.append("</tr>")
    lines.extend(["</tbody>", "</table>"])
    return "\n".join(lines)


def _img(src: Optional[str], caption: Optional[str] = None) -> str:
    if caption is None:
        return f'<img src="{src or ""}" />'
    return f'<img src="{src}" alt="{caption}" title="{caption}" />'


def _document(blocks: Sequence[Optional[str]]) -> str:
    # absent blocks contribute nothing, not even a separator
    return "\n\n".join(block for block in blocks if block) + "\n"


# ============================================================================
# Per-variant renderers
# ============================================================================


def render_direct(answer: DirectAnswer) -> str:
    source_line = None
    if answer.source or answer.url:
        source_line = f"Source: {answer.source or ''} — {answer.url or ''}"

    info_table = None
    if answer.information:
        info_table = html_table(
            ["Label", "Value"],
            [[entry.label or "", entry.value or ""] for entry in answer.information],
        )

    related_table = None
    if answer.related:
        related_table = html_table(
            ["Related"],
            [[entry.text or ""] for entry in answer.related],
        )

    return _document([
        f"# {answer.heading or ''}",
        _img(answer.image, answer.image_caption or "") if answer.image else None,
        answer.answer,
        source_line,
        info_table,
        related_table,
    ])


def render_unknown(answer: UnknownAnswer) -> str:
    return f"no results for {answer.type}\n"


def render_entries(answer: Any) -> str:
    """Category, disambiguation and unit answers share one table layout.

    A category column is only shown when entries span two or more
    distinct categories.
    """
    entries: List[RelatedEntry] = list(answer.entries)
    category_count = len({entry.category for entry in entries})

    if category_count > 1:
        headers = ["Category", "Image", "Text"]
        rows = [
            [entry.category, _img(entry.image), entry.text or ""]
            for entry in entries
        ]
    else:
        headers = ["Image", "Text"]
        rows = [[_img(entry.image), entry.text or ""] for entry in entries]

    return _document([f"# {answer.heading or ''}", html_table(headers, rows)])


def render_calculation(answer: CalculationAnswer) -> str:
    return answer.heading


def render_dice_roll(answer: DiceRollAnswer) -> str:
    rolls = answer.answer
    text = rolls
    if ARITHMETIC_SIGN.search(rolls):
        try:
            text = f"{rolls} = {format_number(evaluate(rolls))}"
        except ExpressionError as e:
            logger.debug("Dice roll %r left unevaluated: %s", rolls, e)

    return _document([f"# {DICE_ROLL_HEADING}", text])


def render_typed(answer: TypedAnswer) -> str:
    return _document([f"# {answer.type}", answer.answer])


def render_heading_only(answer: Any) -> str:
    """Fallback for error answers and unrecognized passthrough values."""
    if isinstance(answer, Mapping):
        heading = answer.get("heading")
    else:
        heading = getattr(answer, "heading", None)

    if not isinstance(heading, str) or not heading:
        return ""
    return f"# {heading}\n"


RENDERERS: Dict[type, Callable[[Any], str]] = {
    DirectAnswer: render_direct,
    UnknownAnswer: render_unknown,
    CategoryAnswer: render_entries,
    DisambiguationAnswer: render_entries,
    UnitAnswer: render_entries,
    CalculationAnswer: render_calculation,
    DiceRollAnswer: render_dice_roll,
    TypedAnswer: render_typed,
    ErrorAnswer: render_heading_only,
}


def to_markdown(answer: Any) -> str:
    """
    Render a raw payload or canonical answer as markdown.

    Raw payloads are normalized first; canonical dicts (as written by
    `answer_to_dict`) are rebuilt from their `type` tag.

    Args:
        answer: A decoded API payload, a value returned by `normalize`, or
            its dict form

    Returns:
        Markdown text with embedded HTML
    """
    if isinstance(answer, Mapping):
        answer = normalize(answer)
    if isinstance(answer, Mapping) and not is_raw_payload(answer):
        answer = answer_from_dict(answer)

    renderer = RENDERERS.get(type(answer), render_heading_only)
    return renderer(answer)
