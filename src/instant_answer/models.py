"""Data Models Module

Defines Pydantic models for the canonical answer shapes produced by the
normalizer. Raw API payloads stay plain dictionaries; every canonical
answer is an immutable model tagged with a `type` string that the
markdown renderer dispatches on.
"""

from typing import Any, Dict, List, Literal, Mapping, Optional, Union
from pydantic import BaseModel, ConfigDict, ValidationError

DEFAULT_CATEGORY = "General"
NO_RESULTS_HEADING = "no results"
CALCULATION_UNSUPPORTED = (
    "Sorry. Calculations are not supported via the instant answer API"
)


class CanonicalModel(BaseModel):
    """Base for every normalized value. Instances are frozen."""
    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict form with absent (None) fields omitted."""
        return self.model_dump(exclude_none=True)


class InfoboxEntry(CanonicalModel):
    """One label/value row of an Infobox fact sheet."""
    label: Optional[str] = None
    value: Optional[str] = None


class RelatedEntry(CanonicalModel):
    """A related topic link, flattened out of its category group."""
    url: Optional[str] = None
    image: Optional[str] = None
    text: Optional[str] = None  # HTML fragment
    category: str = DEFAULT_CATEGORY


class DirectAnswer(CanonicalModel):
    """Direct fact answer (`Type == "A"`).

    Every field is optional: the normalizer only sets fields that carry a
    non-blank value, so `to_dict()` never holds "", None or [].
    """
    type: Literal["answer"] = "answer"
    heading: Optional[str] = None
    answer: Optional[str] = None
    image: Optional[str] = None
    image_caption: Optional[str] = None
    entity: Optional[str] = None
    url: Optional[str] = None
    source: Optional[str] = None
    information: Optional[List[InfoboxEntry]] = None
    related: Optional[List[RelatedEntry]] = None


class CategoryAnswer(CanonicalModel):
    type: Literal["category"] = "category"
    heading: Optional[str] = None
    entries: List[RelatedEntry] = []


class DisambiguationAnswer(CanonicalModel):
    type: Literal["disambiguation"] = "disambiguation"
    heading: str
    entries: List[RelatedEntry] = []


class UnitAnswer(CanonicalModel):
    type: Literal["unit"] = "unit"
    heading: str
    entries: List[RelatedEntry] = []


class UnknownAnswer(CanonicalModel):
    type: Literal["unknown"] = "unknown"
    heading: str = NO_RESULTS_HEADING


class CalculationAnswer(CanonicalModel):
    type: Literal["calculation"] = "calculation"
    heading: str = CALCULATION_UNSUPPORTED


class DiceRollAnswer(CanonicalModel):
    type: Literal["dice roll"] = "dice roll"
    answer: str


class TypedAnswer(CanonicalModel):
    """Computed answer of any other `AnswerType`; the type doubles as heading."""
    type: str
    heading: str
    answer: str


class ErrorAnswer(CanonicalModel):
    type: Literal["error"] = "error"
    heading: str = "error"


CanonicalAnswer = Union[
    DirectAnswer,
    CategoryAnswer,
    DisambiguationAnswer,
    UnitAnswer,
    UnknownAnswer,
    CalculationAnswer,
    DiceRollAnswer,
    TypedAnswer,
    ErrorAnswer,
]


def answer_to_dict(answer: Any) -> Dict[str, Any]:
    """Serialize any normalizer result, including passthrough mappings."""
    if isinstance(answer, CanonicalModel):
        return answer.to_dict()
    if isinstance(answer, Mapping):
        return dict(answer)
    return {"value": answer}


# Canonical `type` tags with a dedicated model; any other tag is a TypedAnswer
ANSWER_MODELS: Dict[str, type] = {
    "answer": DirectAnswer,
    "category": CategoryAnswer,
    "disambiguation": DisambiguationAnswer,
    "unit": UnitAnswer,
    "unknown": UnknownAnswer,
    "calculation": CalculationAnswer,
    "dice roll": DiceRollAnswer,
    "error": ErrorAnswer,
}


def answer_from_dict(data: Mapping[str, Any]) -> Any:
    """Rebuild a canonical model from its dict form, dispatching on `type`.

    Mappings that do not validate as the model their tag names (or that
    carry no string tag) are returned unchanged.
    """
    tag = data.get("type")
    if not isinstance(tag, str):
        return data

    model = ANSWER_MODELS.get(tag, TypedAnswer)
    try:
        return model.model_validate(dict(data))
    except ValidationError:
        return data
