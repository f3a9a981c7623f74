from typing import Any

from loguru import logger

from dealscout.core.constants import REWARD_SIGNALS
from dealscout.models.candidate import CandidateFeatures
from dealscout.models.judgment import (
    JudgmentAction,
    JudgmentRecord,
    PairMember,
    PreferencePair,
    RewardEvent,
    RewardResult,
)
from dealscout.services.learning.builder import PreferenceBuilder
from dealscout.services.learning.state import EngineState
from dealscout.services.normalizer import FeatureNormalizer


class JudgmentRecorder:
    """
    Records operator feedback into engine state.

    Like/dislike/save judgments feed the preference store and the embedding cache;
    skips only touch reward bookkeeping; preference pairs are kept for export only.
    """

    def __init__(self, state: EngineState, normalizer: FeatureNormalizer | None = None):
        self.state = state
        self.normalizer = normalizer or FeatureNormalizer(state.settings)
        self.builder = PreferenceBuilder(state.store, state.settings)

    def record_like(self, candidate: Any, reason: str | None = None) -> RewardResult:
        return self._record_judgment(candidate, "like", reason)

    def record_dislike(self, candidate: Any, reason: str | None = None) -> RewardResult:
        return self._record_judgment(candidate, "dislike", reason)

    def record_save(self, candidate: Any, reason: str | None = None) -> RewardResult:
        """Stronger like: same learning, larger reward."""
        return self._record_judgment(candidate, "save", reason)

    def record_skip(self, candidate: Any, reason: str | None = None) -> RewardResult:
        """Passive pass: reward bookkeeping only, no preference learning."""
        features = self.normalizer.normalize(candidate)
        return self._add_reward(features, "skip", reason)

    def record_preference_pair(self, chosen: Any, rejected: Any, reason: str | None = None) -> PreferencePair:
        """Append a chosen-vs-rejected pair. Never updates the preference store."""
        chosen_features = self.normalizer.normalize(chosen)
        rejected_features = self.normalizer.normalize(rejected)

        pair = PreferencePair(
            chosen=PairMember(id=chosen_features.id, name=chosen_features.name, features=chosen_features),
            rejected=PairMember(id=rejected_features.id, name=rejected_features.name, features=rejected_features),
            reason=reason,
        )
        self.state.pairs.append(pair)
        logger.info(f"Recorded preference pair {chosen_features.display_name} > {rejected_features.display_name}")
        return pair

    def _record_judgment(self, candidate: Any, action: JudgmentAction, reason: str | None) -> RewardResult:
        features = self.normalizer.normalize(candidate)
        is_positive = action != "dislike"

        embedding = self.state.embedder.embed(features.embedding_text) if features.embedding_text else None
        record = JudgmentRecord(
            candidate_id=features.id,
            name=features.name,
            features=features,
            reason=reason,
            embedding=embedding,
            action=action,
        )
        (self.state.liked if is_positive else self.state.disliked).append(record)

        touched = self.builder.learn_from_features(features, is_positive, reason)
        logger.info(f"Recorded {action} for {features.display_name}: {len(touched)} preferences updated")

        return self._add_reward(features, action, reason)

    def _add_reward(self, features: CandidateFeatures, action: JudgmentAction, reason: str | None) -> RewardResult:
        reward = REWARD_SIGNALS[action]
        self.state.total_reward += reward
        self.state.reward_history.append(
            RewardEvent(entity_id=features.id, entity_kind=features.kind, action=action, reward=reward, reason=reason)
        )
        return RewardResult(reward=reward, total_reward=self.state.total_reward)
