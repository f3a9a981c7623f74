import hashlib
import json
from typing import Any

from loguru import logger
from pydantic import ValidationError

from dealscout.core.config import Settings, settings
from dealscout.core.constants import DEFAULT_INDUSTRY, HEADLINE_SEPARATOR, INDUSTRY_RULES
from dealscout.models.candidate import (
    CandidateFeatures,
    CandidateKind,
    CompanyRecord,
    PersonRecord,
    RawRecord,
    SignalRecord,
)

RECORD_TYPES: dict[CandidateKind, type[RawRecord]] = {
    "person": PersonRecord,
    "company": CompanyRecord,
    "signal": SignalRecord,
}


def infer_industry(*texts: str | None) -> str:
    """
    Infer an industry label by keyword containment.

    Rules are checked in order against the lowercased concatenation of the texts;
    the first rule with a matching keyword wins, otherwise the default label is returned.
    """
    text = " ".join(t for t in texts if t).lower()
    for industry, keywords in INDUSTRY_RULES:
        if any(keyword in text for keyword in keywords):
            return industry
    return DEFAULT_INDUSTRY


def role_from_headline(headline: str | None) -> str | None:
    if not headline:
        return None
    role = headline.split(HEADLINE_SEPARATOR)[0].strip()
    return role or None


def position_phrase(title: str | None, organization: str | None) -> str | None:
    if title and organization:
        return f"{title} at {organization}"
    return title or organization


def join_text(*pieces: str | None) -> str:
    return " ".join(p.strip() for p in pieces if p and p.strip())


def detect_kind(raw: dict[str, Any]) -> CandidateKind:
    """Pick the record variant: explicit discriminator first, then shape."""
    declared = raw.get("entity_type") or raw.get("type")
    if isinstance(declared, str):
        declared = declared.lower()
        if declared == "talent":
            return "signal"
        if declared in RECORD_TYPES:
            return declared  # type: ignore[return-value]

    if raw.get("new_position_company_name") or raw.get("past_position_company_name"):
        return "signal"
    if raw.get("organization_name") or "hq" in raw or "growth_stage" in raw:
        return "company"
    return "person"


def _canonical(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _canonical(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_canonical(v) for v in value]
    return value


def stable_record_id(raw: Any) -> str:
    # keys are stringified first so mixed key types still sort
    payload = json.dumps(_canonical(raw), sort_keys=True, default=str)
    return "cand_" + hashlib.sha1(payload.encode("utf-8")).hexdigest()[:12]


class FeatureNormalizer:
    """
    Maps raw candidate records of any known shape to ``CandidateFeatures``.

    Never raises: missing or malformed fields degrade to absent features.
    """

    def __init__(self, config: Settings | None = None):
        self.settings = config or settings

    def normalize(self, raw: Any, fallback_id: str | None = None) -> CandidateFeatures:
        if isinstance(raw, CandidateFeatures):
            return raw

        if isinstance(raw, RawRecord):
            kind = next((k for k, t in RECORD_TYPES.items() if isinstance(raw, t)), "person")
            record = raw
        elif isinstance(raw, dict):
            kind = detect_kind(raw)
            try:
                record = RECORD_TYPES[kind].model_validate(raw)
            except ValidationError as e:
                logger.warning(f"Malformed {kind} record, keeping identity only: {e.error_count()} errors")
                candidate_id = self._pick_id(raw.get("id"), raw.get("person_id"), fallback_id) or stable_record_id(raw)
                return CandidateFeatures(id=candidate_id, kind=kind)
        else:
            logger.warning(f"Unsupported candidate record type {type(raw).__name__}")
            return CandidateFeatures(id=fallback_id or stable_record_id(raw))

        if isinstance(record, CompanyRecord):
            features = self._from_company(record, fallback_id)
        elif isinstance(record, SignalRecord):
            features = self._from_signal(record, fallback_id)
        else:
            features = self._from_person(record, fallback_id)

        logger.debug(f"Normalized {kind} candidate {features.id}")
        return features

    @staticmethod
    def _pick_id(*candidates: Any) -> str | None:
        for value in candidates:
            if value is not None and str(value).strip():
                return str(value).strip()
        return None

    def _record_id(self, record: RawRecord, *extra: str | None, fallback_id: str | None) -> str:
        return self._pick_id(record.id, *extra, fallback_id) or stable_record_id(
            record.model_dump(mode="json", exclude_none=True)
        )

    def _from_person(self, record: PersonRecord, fallback_id: str | None) -> CandidateFeatures:
        name = record.full_name or join_text(record.first_name, record.last_name) or None
        headline = record.headline or record.tagline
        current = next((e for e in record.experience if e.is_current), None)

        role = current.title if current and current.title else role_from_headline(headline)
        organization = current.company_name if current else None
        industry = record.industries[0] if record.industries else infer_industry(headline, record.about)
        region = record.city or record.location or record.region or record.country
        tags = record.people_highlights or record.highlights
        past = [e.company_name for e in record.experience if e.company_name]

        text = join_text(
            name,
            headline,
            record.about,
            " ".join(tags),
            *(position_phrase(e.title, e.company_name) for e in record.experience),
        )

        return CandidateFeatures(
            id=self._record_id(record, record.person_id, fallback_id=fallback_id),
            kind="person",
            name=name,
            role=role,
            industry=industry,
            region=region,
            organization=organization,
            tags=list(tags),
            past_organizations=past[: self.settings.MAX_PAST_ORGANIZATIONS],
            signal_type=record.signal_type,
            funding_stage=record.funding_stage,
            embedding_text=text,
        )

    def _from_company(self, record: CompanyRecord, fallback_id: str | None) -> CandidateFeatures:
        name = record.organization_name or record.name
        hq = record.hq
        region = (hq.region or hq.city or hq.country) if hq else None
        industry = record.industries[0] if record.industries else infer_industry(record.tagline, record.description)
        tags = record.tags or record.highlights

        funding_stage = record.growth_stage
        if not funding_stage and record.funding:
            last_round = record.funding.get("last_funding_type")
            funding_stage = last_round if isinstance(last_round, str) and last_round else None

        return CandidateFeatures(
            id=self._record_id(record, fallback_id=fallback_id),
            kind="company",
            name=name,
            industry=industry,
            region=region,
            organization=name,
            tags=list(tags),
            funding_stage=funding_stage,
            embedding_text=join_text(name, record.tagline, record.description, " ".join(tags)),
        )

    def _from_signal(self, record: SignalRecord, fallback_id: str | None) -> CandidateFeatures:
        role = record.new_position_title or role_from_headline(record.headline)
        organization = record.new_position_company_name or record.past_position_company_name
        past = [record.past_position_company_name] if record.past_position_company_name else []

        text = join_text(
            record.full_name,
            record.headline,
            record.about,
            " ".join(record.people_highlights),
            position_phrase(record.new_position_title, record.new_position_company_name),
            position_phrase(record.past_position_title, record.past_position_company_name),
        )

        return CandidateFeatures(
            id=self._record_id(record, record.person_id, fallback_id=fallback_id),
            kind="signal",
            name=record.full_name,
            role=role,
            industry=record.industry or infer_industry(record.headline, record.about),
            region=record.location,
            organization=organization,
            tags=list(record.people_highlights),
            past_organizations=past[: self.settings.MAX_PAST_ORGANIZATIONS],
            signal_type=record.signal_type,
            funding_stage=record.funding_stage,
            embedding_text=text,
        )


def normalize_features(raw: Any, fallback_id: str | None = None) -> CandidateFeatures:
    return FeatureNormalizer().normalize(raw, fallback_id)
