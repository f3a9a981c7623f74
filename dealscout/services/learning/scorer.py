import math

from dealscout.core.constants import EXPLAIN_POTENTIAL_MATCH, EXPLAIN_STRONG_MATCH
from dealscout.models.candidate import CandidateFeatures
from dealscout.models.judgment import JudgmentRecord, RankedCandidate, ScoreResult, SimilarJudgment
from dealscout.models.preference import PreferenceCategory, PreferenceEntry
from dealscout.services.learning.state import EngineState


def _contains(haystack: str | None, needle: str) -> bool:
    return bool(haystack) and needle in haystack.casefold()


def entry_matches(entry: PreferenceEntry, features: CandidateFeatures) -> bool:
    """
    Whether a preference entry applies to a candidate.

    Industry and signal type need exact (case-insensitive) equality; role, region and
    organization match on containment; tags and past organizations match if any element
    contains the value.
    """
    value = entry.value.casefold()
    category = entry.category

    if category == PreferenceCategory.INDUSTRY:
        return bool(features.industry) and features.industry.casefold() == value
    if category == PreferenceCategory.SIGNAL_TYPE:
        return bool(features.signal_type) and features.signal_type.casefold() == value
    if category == PreferenceCategory.ROLE:
        return _contains(features.role, value)
    if category == PreferenceCategory.REGION:
        return _contains(features.region, value)
    if category == PreferenceCategory.ORGANIZATION:
        return _contains(features.organization, value)
    if category == PreferenceCategory.TAG:
        return any(_contains(tag, value) for tag in features.tags)
    if category == PreferenceCategory.PAST_ORGANIZATION:
        return any(_contains(org, value) for org in features.past_organizations)
    return False


def _label(category: PreferenceCategory) -> str:
    return category.value.replace("_", " ")


class CandidateScorer:
    """
    Scores candidates against the learned preferences and judgment history.

    Reads state only; safe to call repeatedly (re-ranking a batch on every navigation).
    """

    def __init__(self, state: EngineState):
        self.state = state
        self.settings = state.settings

    def score(self, features: CandidateFeatures) -> ScoreResult:
        """
        Score a candidate.

        Starts from the base score, adds/subtracts net preference weights for matching
        entries beyond the noise threshold, then applies the strongest embedding match
        against liked and disliked judgments. Result is rounded and clamped to [0, 100].
        """
        cfg = self.settings
        score = cfg.BASE_SCORE
        reasons: list[str] = []
        warnings: list[str] = []

        # 1. Categorical preferences
        for entry in self.state.store.entries():
            if not entry_matches(entry, features):
                continue
            net = entry.net_weight
            if net > cfg.NET_WEIGHT_THRESHOLD:
                score += net * cfg.NET_WEIGHT_MULTIPLIER
                reasons.append(f"Preferred {_label(entry.category)}: {entry.value}")
            elif net < -cfg.NET_WEIGHT_THRESHOLD:
                score -= abs(net) * cfg.NET_WEIGHT_MULTIPLIER
                warnings.append(f"Avoided {_label(entry.category)}: {entry.value}")

        # 2. Similarity to judged candidates (max, not mean)
        if features.embedding_text and self.state.liked:
            vector = self.state.embedder.embed(features.embedding_text)

            max_liked = self._max_similarity(vector, self.state.liked)
            if max_liked is not None and max_liked > cfg.SIMILARITY_THRESHOLD:
                score += max_liked * cfg.SIMILARITY_MULTIPLIER
                reasons.append(f"Similar to liked ({_percent(max_liked)}%)")

            max_disliked = self._max_similarity(vector, self.state.disliked)
            if max_disliked is not None and max_disliked > cfg.SIMILARITY_THRESHOLD:
                score -= max_disliked * cfg.SIMILARITY_MULTIPLIER
                warnings.append(f"Similar to disliked ({_percent(max_disliked)}%)")

        final = max(0, min(100, math.floor(score + 0.5)))
        return ScoreResult(score=final, reasons=reasons, warnings=warnings)

    def _max_similarity(self, vector: list[float], judgments: list[JudgmentRecord]) -> float | None:
        scores = [self.state.embedder.similarity(vector, j.embedding) for j in judgments if j.embedding]
        return max(scores) if scores else None

    def rank(self, candidates: list[CandidateFeatures]) -> list[RankedCandidate]:
        """Score every candidate and sort best first (ties keep input order)."""
        ranked = []
        for features in candidates:
            result = self.score(features)
            ranked.append(
                RankedCandidate(
                    features=features,
                    score=result.score,
                    reasons=result.reasons,
                    warnings=result.warnings,
                )
            )
        ranked.sort(key=lambda r: r.score, reverse=True)
        return ranked

    def find_similar(self, features: CandidateFeatures, top_k: int = 5) -> list[SimilarJudgment]:
        """Liked judgments most similar to the candidate, with the reason each was liked."""
        if not features.embedding_text or not self.state.liked:
            return []

        vector = self.state.embedder.embed(features.embedding_text)
        matches = [
            SimilarJudgment(
                candidate_id=j.candidate_id,
                name=j.name,
                similarity=self.state.embedder.similarity(vector, j.embedding),
                reason=j.reason,
            )
            for j in self.state.liked
            if j.embedding
        ]
        matches.sort(key=lambda m: m.similarity, reverse=True)
        return matches[:top_k]

    def explain(self, features: CandidateFeatures) -> str:
        """Short "why you might like this" summary."""
        result = self.score(features)
        if not result.reasons and not result.warnings:
            return (
                "Still learning your preferences. Like or pass on more candidates to get "
                "personalized recommendations."
            )

        if result.score >= EXPLAIN_STRONG_MATCH:
            parts = [f"Strong match ({result.score}/100)."]
        elif result.score >= EXPLAIN_POTENTIAL_MATCH:
            parts = [f"Potential match ({result.score}/100)."]
        else:
            parts = [f"Mixed signals ({result.score}/100)."]

        if result.reasons:
            parts.append("Why it might fit: " + "; ".join(result.reasons) + ".")
        if result.warnings:
            parts.append("Concerns: " + "; ".join(result.warnings) + ".")
        return " ".join(parts)


def _percent(value: float) -> int:
    return math.floor(value * 100 + 0.5)
