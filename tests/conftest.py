from typing import Any

import pytest
from factories import make_person

from dealscout.core.config import Settings
from dealscout.services.learning import CandidateEngine, EngineState


@pytest.fixture
def config() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def state(config: Settings) -> EngineState:
    return EngineState(config)


@pytest.fixture
def engine(config: Settings) -> CandidateEngine:
    return CandidateEngine(config=config)


@pytest.fixture
def person() -> dict[str, Any]:
    return make_person()
