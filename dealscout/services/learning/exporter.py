import json
from pathlib import Path

from loguru import logger

from dealscout.core.constants import REWARD_SIGNALS
from dealscout.models.export import ExportStats, TrainingExport
from dealscout.models.judgment import PairMember, PreferencePair
from dealscout.services.learning.state import EngineState


class TrainingExporter:
    """
    Serializes engine state for offline preference training.

    Read-only: exporting never mutates state and never fails on an empty session.
    """

    def __init__(self, state: EngineState):
        self.state = state

    def stats(self) -> ExportStats:
        actions = [event.action for event in self.state.reward_history]
        return ExportStats(
            likes=actions.count("like"),
            dislikes=actions.count("dislike"),
            saves=actions.count("save"),
            skips=actions.count("skip"),
            pairs=len(self.state.pairs),
            preferences=len(self.state.store),
            total_reward=self.state.total_reward,
        )

    def derive_preference_pairs(self) -> list[PreferencePair]:
        """
        Pair every liked judgment with the first disliked judgment of the same kind.

        Margin is the reward difference between the two actions.
        """
        pairs = []
        for liked in self.state.liked:
            rejected = next((d for d in self.state.disliked if d.features.kind == liked.features.kind), None)
            if rejected is None:
                continue
            pairs.append(
                PreferencePair(
                    chosen=PairMember(id=liked.candidate_id, name=liked.name, features=liked.features),
                    rejected=PairMember(id=rejected.candidate_id, name=rejected.name, features=rejected.features),
                    reason=liked.reason,
                    margin=REWARD_SIGNALS[liked.action] - REWARD_SIGNALS[rejected.action],
                )
            )
        return pairs

    def export(self) -> TrainingExport:
        return TrainingExport(
            persona_id=self.state.persona_id,
            stats=self.stats(),
            pairs=list(self.state.pairs),
            derived_pairs=self.derive_preference_pairs(),
            reward_history=list(self.state.reward_history),
            learned_preferences=[entry.model_copy(deep=True) for entry in self.state.store.entries()],
        )

    def to_jsonl(self) -> str:
        """One JSON object per line: reward events, then recorded pairs, then derived pairs."""
        export = self.export()
        lines = [
            json.dumps({"type": "reward_event", **event.model_dump(mode="json")}) for event in export.reward_history
        ]
        lines += [json.dumps({"type": "preference_pair", **pair.model_dump(mode="json")}) for pair in export.pairs]
        lines += [
            json.dumps({"type": "derived_preference_pair", **pair.model_dump(mode="json")})
            for pair in export.derived_pairs
        ]
        return "\n".join(lines)

    def write_export(self, path: str | Path) -> Path:
        export = self.export()
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(export.model_dump_json(indent=2), encoding="utf-8")
        logger.info(
            f"Exported training data to {target} "
            f"({export.stats.pairs} pairs, {len(export.reward_history)} reward events)"
        )
        return target
