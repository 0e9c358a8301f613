"""Request bodies accepted by the write endpoints.

Bodies are validated strictly: unknown keys and wrongly typed values are
rejected. Handlers validate only after the caller is authenticated and
authorized, so these models never see a request that would be refused
anyway.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..models.score import MAX_SCORE, SCORE_APPROVED
from ..services.profiles import display_name_problem, sanitize_display_name


class _StrictBody(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)


class ScoreUpdate(_StrictBody):
    score: int = Field(ge=0, le=MAX_SCORE)


class ScoreReview(_StrictBody):
    status: Literal["approved", "rejected"]
    score: Optional[int] = Field(default=None, ge=0, le=MAX_SCORE)

    @model_validator(mode="after")
    def _score_required_for_approval(self) -> "ScoreReview":
        if self.status == SCORE_APPROVED and self.score is None:
            raise ValueError("有効なスコアを入力してください")
        return self


class NotificationUpdate(_StrictBody):
    is_read: bool


class ProfileUpdate(_StrictBody):
    display_name: str

    @field_validator("display_name")
    @classmethod
    def _sanitize(cls, value: str) -> str:
        # Sanitize first so the length rule sees what will be stored.
        cleaned = sanitize_display_name(value)
        problem = display_name_problem(cleaned)
        if problem:
            raise ValueError(problem)
        return cleaned


__all__ = ["NotificationUpdate", "ProfileUpdate", "ScoreReview", "ScoreUpdate"]
