import json
from pathlib import Path

import pytest
from factories import make_company, make_person

from dealscout.services.learning.exporter import TrainingExporter
from dealscout.services.learning.recorder import JudgmentRecorder
from dealscout.services.learning.state import EngineState


@pytest.fixture
def session(state: EngineState) -> EngineState:
    recorder = JudgmentRecorder(state)
    recorder.record_like(make_person(person_id="a", name="Alice"), "repeat founder")
    recorder.record_save(make_company(company_id="c1"), "portfolio fit")
    recorder.record_dislike(make_person(person_id="b", name="Bob"), "no technical depth")
    recorder.record_skip(make_person(person_id="d"))
    recorder.record_preference_pair(make_person(person_id="a"), make_person(person_id="b"), "A has better metrics")
    return state


def test_empty_export_is_safe(state: EngineState) -> None:
    export = TrainingExporter(state).export()

    assert export.format == "dpo_preference_pairs"
    assert export.stats.likes == 0 and export.stats.pairs == 0
    assert export.pairs == [] and export.reward_history == [] and export.learned_preferences == []


def test_export_stats(session: EngineState) -> None:
    stats = TrainingExporter(session).export().stats

    assert (stats.likes, stats.dislikes, stats.saves, stats.skips, stats.pairs) == (1, 1, 1, 1, 1)
    assert stats.preferences == len(session.store)
    assert stats.total_reward == pytest.approx(1.0 - 1.0 + 2.0 - 0.2)


def test_export_contains_state_snapshot(session: EngineState) -> None:
    export = TrainingExporter(session).export()

    assert [p.reason for p in export.pairs] == ["A has better metrics"]
    assert [e.action for e in export.reward_history] == ["like", "save", "dislike", "skip"]
    assert {(p.category.value, p.value) for p in export.learned_preferences} >= {("industry", "Fintech")}


def test_export_does_not_alias_live_state(session: EngineState) -> None:
    export = TrainingExporter(session).export()
    export.learned_preferences[0].positive_weight = 99.0
    export.pairs.clear()

    assert session.store.entries()[0].positive_weight < 99.0
    assert len(session.pairs) == 1


def test_derived_pairs_match_kind(session: EngineState) -> None:
    derived = TrainingExporter(session).derive_preference_pairs()

    # the company save has no disliked company to pair with
    assert len(derived) == 1
    assert derived[0].chosen.id == "a"
    assert derived[0].rejected.id == "b"
    assert derived[0].margin == pytest.approx(2.0)


def test_jsonl_lines(session: EngineState) -> None:
    lines = [json.loads(line) for line in TrainingExporter(session).to_jsonl().splitlines()]

    assert [line["type"] for line in lines] == ["reward_event"] * 4 + ["preference_pair", "derived_preference_pair"]
    assert lines[0]["entity_id"] == "a"
    assert lines[4]["reason"] == "A has better metrics"
    assert lines[-1]["chosen"]["id"] == "a"
    assert lines[-1]["margin"] == 2.0


def test_write_export(session: EngineState, tmp_path: Path) -> None:
    target = TrainingExporter(session).write_export(tmp_path / "exports" / "training.json")

    data = json.loads(target.read_text(encoding="utf-8"))
    assert data["format"] == "dpo_preference_pairs"
    assert data["stats"]["pairs"] == 1
    assert len(data["reward_history"]) == 4
