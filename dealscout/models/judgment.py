import uuid
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from dealscout.models.candidate import CandidateFeatures, CandidateKind

JudgmentAction = Literal["like", "dislike", "save", "skip"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JudgmentRecord(BaseModel):
    """One like/dislike/save judgment, with the candidate's embedding cached at judgment time."""

    model_config = ConfigDict(frozen=True)

    candidate_id: str
    name: str | None = None
    features: CandidateFeatures
    reason: str | None = None
    timestamp: datetime = Field(default_factory=_utcnow)
    embedding: list[float] | None = None
    action: Literal["like", "dislike", "save"]

    @property
    def is_positive(self) -> bool:
        return self.action != "dislike"


class PairMember(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str | None = None
    features: CandidateFeatures


class PreferencePair(BaseModel):
    """A chosen-vs-rejected comparison kept for offline (DPO-style) training only."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: f"pair_{uuid.uuid4().hex[:12]}")
    timestamp: datetime = Field(default_factory=_utcnow)
    chosen: PairMember
    rejected: PairMember
    reason: str | None = None
    margin: float | None = None


class RewardEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=_utcnow)
    entity_id: str
    entity_kind: CandidateKind = "person"
    action: JudgmentAction
    reward: float
    reason: str | None = None


class RewardResult(BaseModel):
    reward: float
    total_reward: float


class ScoreResult(BaseModel):
    score: int = Field(ge=0, le=100)
    reasons: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class RankedCandidate(BaseModel):
    features: CandidateFeatures
    score: int
    reasons: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class SimilarJudgment(BaseModel):
    candidate_id: str
    name: str | None = None
    similarity: float
    reason: str | None = None
