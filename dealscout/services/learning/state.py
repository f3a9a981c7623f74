from loguru import logger

from dealscout.core.config import Settings, settings
from dealscout.models.judgment import JudgmentRecord, PreferencePair, RewardEvent
from dealscout.services.learning.embedding import HashingEmbedder, TextEmbedder
from dealscout.services.learning.store import PreferenceStore


class EngineState:
    """
    Everything one engine instance learns during a session.

    Owned by the caller and passed to every service; nothing is kept at module level, so
    independent instances (one per persona, say) can coexist in one process.
    """

    def __init__(self, config: Settings | None = None, embedder: TextEmbedder | None = None):
        self.settings = config or settings
        self.embedder: TextEmbedder = embedder or HashingEmbedder(self.settings)
        self.store = PreferenceStore(self.settings)
        self.liked: list[JudgmentRecord] = []
        self.disliked: list[JudgmentRecord] = []
        self.pairs: list[PreferencePair] = []
        self.reward_history: list[RewardEvent] = []
        self.total_reward: float = 0.0
        self.persona_id: str | None = None

    def clear(self) -> None:
        """Drop preferences, judgments, pairs and rewards. The embedder vocabulary is kept."""
        self.store.reset()
        self.liked.clear()
        self.disliked.clear()
        self.pairs.clear()
        self.reward_history.clear()
        self.total_reward = 0.0
        logger.info("Engine state cleared")
