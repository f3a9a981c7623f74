"""
Preference learning and candidate scoring.

Judgments accumulate into a transparent weighted preference store; scores are
the base score plus matching preference weights plus similarity to judged
candidates. Easy to debug: every point of score comes with a reason or warning.
"""

from dealscout.services.learning.builder import PreferenceBuilder
from dealscout.services.learning.embedding import HashingEmbedder, TextEmbedder, similarity, tokenize
from dealscout.services.learning.engine import CandidateEngine, PersonaEngines
from dealscout.services.learning.exporter import TrainingExporter
from dealscout.services.learning.personas import PERSONA_RECIPES, PersonaRecipe, get_recipe, seed_persona
from dealscout.services.learning.recorder import JudgmentRecorder
from dealscout.services.learning.scorer import CandidateScorer, entry_matches
from dealscout.services.learning.state import EngineState
from dealscout.services.learning.store import InvalidCategoryError, PreferenceStore

__all__ = [
    "CandidateEngine",
    "CandidateScorer",
    "EngineState",
    "HashingEmbedder",
    "InvalidCategoryError",
    "JudgmentRecorder",
    "PERSONA_RECIPES",
    "PersonaEngines",
    "PersonaRecipe",
    "PreferenceBuilder",
    "PreferenceStore",
    "TextEmbedder",
    "TrainingExporter",
    "entry_matches",
    "get_recipe",
    "seed_persona",
    "similarity",
    "tokenize",
]
