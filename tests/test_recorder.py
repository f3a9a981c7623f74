import pytest
from factories import make_person
from pydantic import ValidationError

from dealscout.models.candidate import CandidateFeatures
from dealscout.services.learning.recorder import JudgmentRecorder
from dealscout.services.learning.state import EngineState


@pytest.fixture
def recorder(state: EngineState) -> JudgmentRecorder:
    return JudgmentRecorder(state)


def test_like_records_judgment_and_reward(state: EngineState, recorder: JudgmentRecorder) -> None:
    result = recorder.record_like(make_person(), "strong balance sheet")

    assert result.reward == 1.0
    assert result.total_reward == 1.0
    assert len(state.liked) == 1
    assert state.disliked == []

    record = state.liked[0]
    assert record.candidate_id == "p1"
    assert record.name == "Jane Doe"
    assert record.reason == "strong balance sheet"
    assert record.action == "like"
    assert record.embedding is not None and len(record.embedding) == 100
    assert state.store.get("industry", "Fintech").positive_reasons == ["strong balance sheet"]


def test_dislike_updates_negative_weights(state: EngineState, recorder: JudgmentRecorder) -> None:
    recorder.record_like(make_person(person_id="a"), "good")
    result = recorder.record_dislike(make_person(person_id="b"), "wrong stage")

    assert result.reward == -1.0
    assert result.total_reward == 0.0
    assert len(state.disliked) == 1
    entry = state.store.get("industry", "Fintech")
    assert entry.positive_weight == pytest.approx(0.15)
    assert entry.negative_weight == pytest.approx(0.15)
    assert entry.negative_reasons == ["wrong stage"]


def test_repeat_judgments_accumulate(state: EngineState, recorder: JudgmentRecorder) -> None:
    person = make_person()
    recorder.record_like(person, "first look")
    recorder.record_like(person, "second look")

    assert [r.reason for r in state.liked] == ["first look", "second look"]
    assert state.store.get("role", "CTO").positive_weight == pytest.approx(0.30)
    assert state.total_reward == 2.0


def test_judgment_records_are_immutable(state: EngineState, recorder: JudgmentRecorder) -> None:
    recorder.record_like(make_person(), "fit")

    with pytest.raises(ValidationError):
        state.liked[0].reason = "changed"


def test_candidate_without_text_has_no_cached_embedding(state: EngineState, recorder: JudgmentRecorder) -> None:
    recorder.record_like(CandidateFeatures(id="bare", industry="AI"), "thesis fit")

    assert state.liked[0].embedding is None
    assert state.store.get("industry", "AI") is not None


def test_save_is_a_stronger_like(state: EngineState, recorder: JudgmentRecorder) -> None:
    result = recorder.record_save(make_person(), "add to pipeline")

    assert result.reward == 2.0
    assert state.liked[0].action == "save"
    assert state.store.get("industry", "Fintech").positive_weight == pytest.approx(0.15)


def test_skip_only_tracks_reward(state: EngineState, recorder: JudgmentRecorder) -> None:
    result = recorder.record_skip(make_person(), "not now")

    assert result.reward == pytest.approx(-0.2)
    assert result.total_reward == pytest.approx(-0.2)
    assert state.liked == [] and state.disliked == []
    assert len(state.store) == 0
    assert state.reward_history[0].action == "skip"


def test_reward_history_keeps_every_judgment(state: EngineState, recorder: JudgmentRecorder) -> None:
    recorder.record_like(make_person(person_id="a"), "r1")
    recorder.record_dislike(make_person(person_id="b"), "r2")
    recorder.record_save(make_person(person_id="c"), "r3")

    history = state.reward_history
    assert [(e.entity_id, e.action, e.reward, e.reason) for e in history] == [
        ("a", "like", 1.0, "r1"),
        ("b", "dislike", -1.0, "r2"),
        ("c", "save", 2.0, "r3"),
    ]
    assert state.total_reward == pytest.approx(2.0)


def test_preference_pair_does_not_touch_store(state: EngineState, recorder: JudgmentRecorder) -> None:
    pair = recorder.record_preference_pair(
        make_person(person_id="a", name="Alice"), make_person(person_id="b", name="Bob"), "A has better metrics"
    )

    assert state.pairs == [pair]
    assert pair.chosen.id == "a" and pair.chosen.name == "Alice"
    assert pair.rejected.id == "b" and pair.rejected.features.role == "CTO"
    assert pair.reason == "A has better metrics"
    assert pair.id.startswith("pair_")
    assert len(state.store) == 0
    assert state.reward_history == []
    assert state.total_reward == 0.0
