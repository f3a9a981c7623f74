import threading
from pathlib import Path
from typing import Any

from loguru import logger

from dealscout.core.config import Settings
from dealscout.models.candidate import CandidateFeatures
from dealscout.models.export import ExportStats, TrainingExport
from dealscout.models.judgment import PreferencePair, RankedCandidate, RewardResult, ScoreResult, SimilarJudgment
from dealscout.models.preference import PreferenceCategory, PreferenceEntry
from dealscout.services.learning.exporter import TrainingExporter
from dealscout.services.learning.personas import PersonaRecipe, get_recipe, seed_persona
from dealscout.services.learning.recorder import JudgmentRecorder
from dealscout.services.learning.scorer import CandidateScorer
from dealscout.services.learning.state import EngineState
from dealscout.services.normalizer import FeatureNormalizer


class CandidateEngine:
    """
    In-process preference learning and scoring for one persona.

    Every public call runs to completion under a single lock: scoring embeds text and so
    grows the shared vocabulary, which makes it a writer like ``update`` and ``embed``.
    """

    def __init__(self, state: EngineState | None = None, config: Settings | None = None):
        self.state = state or EngineState(config)
        self.normalizer = FeatureNormalizer(self.state.settings)
        self.recorder = JudgmentRecorder(self.state, self.normalizer)
        self.scorer = CandidateScorer(self.state)
        self.exporter = TrainingExporter(self.state)
        self._lock = threading.RLock()

    # Features and embeddings

    def normalize_features(self, raw: Any, fallback_id: str | None = None) -> CandidateFeatures:
        return self.normalizer.normalize(raw, fallback_id)

    def embed(self, text: str | None) -> list[float]:
        with self._lock:
            return self.state.embedder.embed(text)

    def similarity(self, a: list[float] | None, b: list[float] | None) -> float:
        return self.state.embedder.similarity(a, b)

    # Feedback

    def record_like(self, candidate: Any, reason: str | None = None) -> RewardResult:
        with self._lock:
            return self.recorder.record_like(candidate, reason)

    def record_dislike(self, candidate: Any, reason: str | None = None) -> RewardResult:
        with self._lock:
            return self.recorder.record_dislike(candidate, reason)

    def record_save(self, candidate: Any, reason: str | None = None) -> RewardResult:
        with self._lock:
            return self.recorder.record_save(candidate, reason)

    def record_skip(self, candidate: Any, reason: str | None = None) -> RewardResult:
        with self._lock:
            return self.recorder.record_skip(candidate, reason)

    def record_preference_pair(self, chosen: Any, rejected: Any, reason: str | None = None) -> PreferencePair:
        with self._lock:
            return self.recorder.record_preference_pair(chosen, rejected, reason)

    def update_preference(
        self, category: PreferenceCategory | str, value: str, is_positive: bool, reason: str | None = None
    ) -> PreferenceEntry | None:
        with self._lock:
            return self.state.store.update(category, value, is_positive, reason)

    # Scoring

    def score(self, candidate: Any) -> ScoreResult:
        features = self.normalizer.normalize(candidate)
        with self._lock:
            return self.scorer.score(features)

    def rank(self, candidates: list[Any]) -> list[RankedCandidate]:
        features = [self.normalizer.normalize(c, fallback_id=f"candidate_{i}") for i, c in enumerate(candidates)]
        with self._lock:
            return self.scorer.rank(features)

    def find_similar(self, candidate: Any, top_k: int = 5) -> list[SimilarJudgment]:
        features = self.normalizer.normalize(candidate)
        with self._lock:
            return self.scorer.find_similar(features, top_k)

    def explain(self, candidate: Any) -> str:
        features = self.normalizer.normalize(candidate)
        with self._lock:
            return self.scorer.explain(features)

    # State management

    def reset_preferences(self) -> None:
        """Irreversibly clear everything learned in this session."""
        with self._lock:
            self.state.clear()

    def seed_persona(self, recipe: PersonaRecipe | str) -> int:
        if isinstance(recipe, str):
            recipe = get_recipe(recipe)
        with self._lock:
            return seed_persona(self.state, recipe)

    def top_preferences(self, limit: int = 5) -> list[PreferenceEntry]:
        with self._lock:
            return self.state.store.top_preferences(limit)

    def top_aversions(self, limit: int = 5) -> list[PreferenceEntry]:
        with self._lock:
            return self.state.store.top_aversions(limit)

    def stats(self) -> ExportStats:
        with self._lock:
            return self.exporter.stats()

    def export_training_data(self) -> TrainingExport:
        with self._lock:
            return self.exporter.export()

    def export_jsonl(self) -> str:
        with self._lock:
            return self.exporter.to_jsonl()

    def write_export(self, path: str | Path) -> Path:
        with self._lock:
            return self.exporter.write_export(path)


class PersonaEngines:
    """One independent engine per persona, seeded from its recipe on first use."""

    def __init__(self, config: Settings | None = None):
        self.settings = config
        self._engines: dict[str, CandidateEngine] = {}
        self._lock = threading.Lock()

    def get(self, persona_id: str) -> CandidateEngine:
        with self._lock:
            engine = self._engines.get(persona_id)
            if engine is None:
                recipe = get_recipe(persona_id)
                engine = CandidateEngine(config=self.settings)
                engine.seed_persona(recipe)
                self._engines[persona_id] = engine
                logger.debug(f"Created engine for persona {persona_id}")
            return engine

    def __contains__(self, persona_id: str) -> bool:
        return persona_id in self._engines
