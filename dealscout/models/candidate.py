from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

CandidateKind = Literal["person", "company", "signal"]

FALSE_STRINGS = {"", "false", "0", "no", "off", "none", "null"}


def _clean_str(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _clean_str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    return [s for s in (_clean_str(v) for v in value) if s]


class RawRecord(BaseModel):
    """Common base for the raw, schema-variable records supplied by the candidate source."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str | None:
        return _clean_str(value)


class ExperienceEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str | None = None
    company_name: str | None = None
    is_current: bool = False

    @field_validator("title", "company_name", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        return _clean_str(value)

    @field_validator("is_current", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() not in FALSE_STRINGS
        return bool(value)


class PersonRecord(RawRecord):
    """Person profile (people database search results)."""

    person_id: str | None = None
    full_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    headline: str | None = None
    tagline: str | None = None
    about: str | None = None
    experience: list[ExperienceEntry] = Field(default_factory=list)
    industries: list[str] = Field(default_factory=list)
    city: str | None = None
    location: str | None = None
    region: str | None = None
    country: str | None = None
    people_highlights: list[str] = Field(default_factory=list)
    highlights: list[str] = Field(default_factory=list)
    signal_type: str | None = None
    funding_stage: str | None = None

    @field_validator(
        "person_id",
        "full_name",
        "first_name",
        "last_name",
        "headline",
        "tagline",
        "about",
        "city",
        "location",
        "region",
        "country",
        "signal_type",
        "funding_stage",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        return _clean_str(value)

    @field_validator("industries", "people_highlights", "highlights", mode="before")
    @classmethod
    def _coerce_lists(cls, value: Any) -> list[str]:
        return _clean_str_list(value)

    @field_validator("experience", mode="before")
    @classmethod
    def _coerce_experience(cls, value: Any) -> list[dict[str, Any]]:
        if not isinstance(value, (list, tuple)):
            return []
        return [e for e in value if isinstance(e, dict)]


class HeadQuarters(BaseModel):
    model_config = ConfigDict(extra="allow")

    city: str | None = None
    state: str | None = None
    country: str | None = None
    region: str | None = None

    @field_validator("city", "state", "country", "region", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        return _clean_str(value)


class CompanyRecord(RawRecord):
    """Company / organization profile."""

    organization_name: str | None = None
    name: str | None = None
    tagline: str | None = None
    description: str | None = None
    industries: list[str] = Field(default_factory=list)
    hq: HeadQuarters | None = None
    tags: list[str] = Field(default_factory=list)
    highlights: list[str] = Field(default_factory=list)
    growth_stage: str | None = None
    funding: dict[str, Any] | None = None

    @field_validator("organization_name", "name", "tagline", "description", "growth_stage", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        return _clean_str(value)

    @field_validator("industries", "tags", "highlights", mode="before")
    @classmethod
    def _coerce_lists(cls, value: Any) -> list[str]:
        return _clean_str_list(value)

    @field_validator("hq", "funding", mode="before")
    @classmethod
    def _coerce_mapping(cls, value: Any) -> dict[str, Any] | None:
        return value if isinstance(value, dict) else None


class SignalRecord(RawRecord):
    """Talent signal: a person changing position (new founder, spinout, ...)."""

    person_id: str | None = None
    full_name: str | None = None
    headline: str | None = None
    about: str | None = None
    signal_type: str | None = None
    new_position_title: str | None = None
    new_position_company_name: str | None = None
    past_position_title: str | None = None
    past_position_company_name: str | None = None
    people_highlights: list[str] = Field(default_factory=list)
    location: str | None = None
    industry: str | None = None
    funding_stage: str | None = None

    @field_validator(
        "person_id",
        "full_name",
        "headline",
        "about",
        "signal_type",
        "new_position_title",
        "new_position_company_name",
        "past_position_title",
        "past_position_company_name",
        "location",
        "industry",
        "funding_stage",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        return _clean_str(value)

    @field_validator("people_highlights", mode="before")
    @classmethod
    def _coerce_lists(cls, value: Any) -> list[str]:
        return _clean_str_list(value)


class CandidateFeatures(BaseModel):
    """
    Canonical feature set for one candidate.

    Only ``id`` is guaranteed; every other field may be absent and scoring tolerates that.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    kind: CandidateKind = "person"
    name: str | None = None
    role: str | None = None
    industry: str | None = None
    region: str | None = None
    organization: str | None = None
    tags: list[str] = Field(default_factory=list)
    past_organizations: list[str] = Field(default_factory=list, description="Most recent first, at most 3")
    signal_type: str | None = None
    funding_stage: str | None = None
    embedding_text: str = ""

    @property
    def display_name(self) -> str:
        return self.name or self.id
