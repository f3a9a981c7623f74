from datetime import datetime, timezone

from pydantic import BaseModel, Field

from dealscout.core.constants import EXPORT_FORMAT, EXPORT_VERSION
from dealscout.models.judgment import PreferencePair, RewardEvent
from dealscout.models.preference import PreferenceEntry


class ExportStats(BaseModel):
    likes: int = 0
    dislikes: int = 0
    saves: int = 0
    skips: int = 0
    pairs: int = 0
    preferences: int = 0
    total_reward: float = 0.0


class TrainingExport(BaseModel):
    """Snapshot of engine state for offline preference training."""

    format: str = EXPORT_FORMAT
    version: str = EXPORT_VERSION
    exported_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    persona_id: str | None = None
    stats: ExportStats = Field(default_factory=ExportStats)
    pairs: list[PreferencePair] = Field(default_factory=list)
    derived_pairs: list[PreferencePair] = Field(default_factory=list)
    reward_history: list[RewardEvent] = Field(default_factory=list)
    learned_preferences: list[PreferenceEntry] = Field(default_factory=list)
