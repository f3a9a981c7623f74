import math
import re
from abc import ABC, abstractmethod

from dealscout.core.config import Settings, settings

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def tokenize(text: str | None, min_length: int = 3) -> list[str]:
    """Lowercase, collapse non-alphanumeric runs to spaces, drop tokens shorter than ``min_length``."""
    if not text:
        return []
    return [t for t in _NON_ALNUM.sub(" ", text.lower()).split() if len(t) >= min_length]


def similarity(a: list[float] | None, b: list[float] | None) -> float:
    """Dot product of two pre-normalized vectors; 0.0 when either is missing or the lengths differ."""
    if not a or not b or len(a) != len(b):
        return 0.0
    return float(sum(x * y for x, y in zip(a, b)))


class TextEmbedder(ABC):
    """
    Fixed-dimension text embedding.

    Scoring depends only on this interface, so a learned model can replace the hashing embedder.
    """

    dimension: int

    @abstractmethod
    def embed(self, text: str | None) -> list[float]:
        """Map text to a vector of length ``dimension``."""

    def embed_batch(self, texts: list[str | None]) -> list[list[float]]:
        return [self.embed(text) for text in texts]

    def similarity(self, a: list[float] | None, b: list[float] | None) -> float:
        return similarity(a, b)


class HashingEmbedder(TextEmbedder):
    """
    Bag-of-words count vector with the hashing trick.

    Tokens get a stable index the first time they are seen; the count for a token lands in
    bucket ``index % dimension`` (collisions accepted). The result is L2-normalized, and
    empty text yields the all-zero vector.
    """

    def __init__(self, config: Settings | None = None):
        cfg = config or settings
        self.dimension = cfg.EMBEDDING_DIM
        self.min_token_length = cfg.MIN_TOKEN_LENGTH
        self._vocabulary: dict[str, int] = {}

    @property
    def vocabulary_size(self) -> int:
        return len(self._vocabulary)

    def token_index(self, token: str) -> int:
        index = self._vocabulary.get(token)
        if index is None:
            index = len(self._vocabulary)
            self._vocabulary[token] = index
        return index

    def embed(self, text: str | None) -> list[float]:
        vector = [0.0] * self.dimension
        for token in tokenize(text, self.min_token_length):
            vector[self.token_index(token) % self.dimension] += 1.0

        norm = math.sqrt(sum(v * v for v in vector)) or 1.0
        return [v / norm for v in vector]
