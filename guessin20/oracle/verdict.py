"""
Verdicts - The closed set of judgements the oracle can return.

The game rules only branch on four values: win, yes, no, unsure.
Everything the oracle sends is decoded strictly into one of the verdict
classes below; anything else is an OracleUnavailable, never a guess.

Wire shapes:
    select_secret_item -> {"content": "apple"}
    evaluate_input     -> {"type": "answer", "content": "Yes"}
                          {"type": "clarification", "content": "Could you be more specific?"}
                          {"type": "guess_evaluation", "content": "...", "isCorrect": true}
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field, StrictBool, ValidationError

from .errors import OracleUnavailable


class VerdictKind(str, Enum):
    """Closed oracle vocabulary."""
    WIN = "win"
    YES = "yes"
    NO = "no"
    UNSURE = "unsure"


class Answer(str, Enum):
    """Value of a determinate yes/no answer."""
    YES = "yes"
    NO = "no"


@dataclass(frozen=True)
class Win:
    """The input names the secret item, exactly or by synonym."""
    content: str

    @property
    def kind(self) -> VerdictKind:
        return VerdictKind.WIN


@dataclass(frozen=True)
class PlainAnswer:
    """A determinate yes/no question."""
    value: Answer
    content: str

    @property
    def kind(self) -> VerdictKind:
        return VerdictKind.YES if self.value == Answer.YES else VerdictKind.NO


@dataclass(frozen=True)
class WrongGuess:
    """A guess that does not name the secret item."""
    content: str

    @property
    def kind(self) -> VerdictKind:
        return VerdictKind.NO


@dataclass(frozen=True)
class NeedsClarification:
    """Ambiguous, subjective or multi-part input. Costs no question."""
    content: str

    @property
    def kind(self) -> VerdictKind:
        return VerdictKind.UNSURE


Verdict = Union[Win, PlainAnswer, WrongGuess, NeedsClarification]


# =============================================================================
# Wire payloads
# =============================================================================

class SecretItemPayload(BaseModel):
    """Response to select_secret_item."""
    content: str = Field(..., min_length=1)


class EvaluationPayload(BaseModel):
    """Response to evaluate_input."""
    type: Literal["answer", "clarification", "guess_evaluation"]
    content: str = Field(..., min_length=1)
    is_correct: Optional[StrictBool] = Field(None, alias="isCorrect")

    model_config = {"populate_by_name": True}


def _normalize_answer(content: str) -> str:
    return content.strip().strip(".!").strip().lower()


def decode_secret_item(data: Any) -> str:
    """Decode a select_secret_item response into a lower-case item name."""
    try:
        payload = SecretItemPayload.model_validate(data)
    except ValidationError as e:
        raise OracleUnavailable(f"Malformed secret item payload: {e.error_count()} error(s)") from e

    item = payload.content.strip().strip(".!\"'").strip().lower()
    if not item:
        raise OracleUnavailable("Oracle returned an empty secret item")
    return item


def decode_verdict(data: Any) -> Verdict:
    """
    Decode an evaluate_input response into a Verdict.

    Raises OracleUnavailable for any payload outside the closed set.
    """
    try:
        payload = EvaluationPayload.model_validate(data)
    except ValidationError as e:
        raise OracleUnavailable(f"Malformed verdict payload: {e.error_count()} error(s)") from e

    if payload.type == "clarification":
        return NeedsClarification(content=payload.content)

    if payload.type == "guess_evaluation":
        if payload.is_correct is None:
            raise OracleUnavailable("guess_evaluation verdict is missing isCorrect")
        if payload.is_correct:
            return Win(content=payload.content)
        return WrongGuess(content=payload.content)

    answer = _normalize_answer(payload.content)
    if answer == VerdictKind.YES.value:
        return PlainAnswer(value=Answer.YES, content="Yes")
    if answer == VerdictKind.NO.value:
        return PlainAnswer(value=Answer.NO, content="No")
    raise OracleUnavailable(f"Answer verdict is not yes/no: {payload.content!r}")
