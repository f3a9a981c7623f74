from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class PreferenceCategory(str, Enum):
    INDUSTRY = "industry"
    ROLE = "role"
    REGION = "region"
    ORGANIZATION = "organization"
    SIGNAL_TYPE = "signal_type"
    TAG = "tag"
    PAST_ORGANIZATION = "past_organization"


class PreferenceEntry(BaseModel):
    """
    Accumulated evidence for one (category, value) pair.

    Weights only ever grow; net weight is derived at read time.
    """

    category: PreferenceCategory
    value: str
    positive_weight: float = Field(default=0.0, ge=0.0)
    negative_weight: float = Field(default=0.0, ge=0.0)
    positive_reasons: list[str] = Field(default_factory=list)
    negative_reasons: list[str] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def key(self) -> tuple[PreferenceCategory, str]:
        return self.category, self.value.casefold()

    @property
    def net_weight(self) -> float:
        return self.positive_weight - self.negative_weight
