import json
import threading
from pathlib import Path
from typing import Any

import pytest
from factories import make_company, make_person, make_signal

from dealscout.services.learning import CandidateEngine, InvalidCategoryError
from main import main


def test_empty_engine_is_neutral(engine: CandidateEngine, person: dict[str, Any]) -> None:
    result = engine.score(person)

    assert result.score == 50
    assert result.reasons == [] and result.warnings == []


def test_likes_raise_scores_for_similar_candidates(engine: CandidateEngine) -> None:
    for i, name in enumerate(["Ana Ruiz", "Ben Cole", "Cai Wen"]):
        engine.record_like(make_person(person_id=f"liked_{i}", name=name), "great fintech operator")

    fresh = make_person(person_id="new", name="Dara Singh", headline="VP Engineering at Coinvault")
    result = engine.score(fresh)

    assert result.score > 50
    assert "Preferred industry: Fintech" in result.reasons


def test_identical_candidate_scores_high(engine: CandidateEngine, person: dict[str, Any]) -> None:
    engine.record_like(person, "exactly our thesis")

    twin = dict(person, id="twin")
    result = engine.score(twin)

    assert result.score >= 65
    assert "Similar to liked (100%)" in result.reasons


def test_reset_returns_to_neutral(engine: CandidateEngine, person: dict[str, Any]) -> None:
    engine.record_like(person, "fit")
    engine.record_dislike(make_company(), "wrong sector")
    engine.record_preference_pair(person, make_company(), "person over company")
    assert engine.score(person).score > 50

    engine.reset_preferences()

    assert engine.score(person).score == 50
    assert engine.stats().pairs == 0
    assert engine.stats().total_reward == 0.0
    assert engine.top_preferences() == []


def test_preference_pairs_do_not_change_scores(engine: CandidateEngine, person: dict[str, Any]) -> None:
    engine.record_like(make_person(person_id="seed"), "fit")
    candidates = [person, make_company(), make_signal()]
    before = [engine.score(c) for c in candidates]

    for _ in range(5):
        engine.record_preference_pair(make_signal(), make_company(), "signals beat companies")

    assert [engine.score(c) for c in candidates] == before
    assert engine.stats().pairs == 5


def test_rank_accepts_raw_records(engine: CandidateEngine) -> None:
    engine.update_preference("industry", "SaaS", True, "recurring revenue")
    engine.update_preference("industry", "SaaS", True)
    raw = [
        {"full_name": "No Id", "headline": "Founder at Nowhere"},
        make_company(),
        "not a record",
    ]

    ranked = engine.rank(raw)

    assert ranked[0].features.id == "c1"
    assert ranked[0].score == 56
    assert {r.features.id for r in ranked[1:]} == {"candidate_0", "candidate_2"}


def test_scores_stay_in_bounds(engine: CandidateEngine) -> None:
    for i in range(30):
        engine.record_dislike(make_person(person_id=f"d{i}"), "not for us")
    engine.record_like(make_signal(), "keep at least one like")

    for candidate in [make_person(person_id="x"), make_company(), make_signal(signal_id="s2")]:
        assert 0 <= engine.score(candidate).score <= 100
    assert engine.score(make_person(person_id="x")).score == 0


def test_seed_persona_by_id(engine: CandidateEngine) -> None:
    applied = engine.seed_persona("pe")

    assert applied > 0
    assert engine.state.persona_id == "pe"
    assert engine.export_training_data().persona_id == "pe"
    assert any(e.value == "no_corporate_experience" for e in engine.top_aversions(limit=50))


def test_seed_unknown_persona_raises(engine: CandidateEngine) -> None:
    with pytest.raises(ValueError):
        engine.seed_persona("hedge_fund")


def test_invalid_category_is_rejected(engine: CandidateEngine) -> None:
    with pytest.raises(InvalidCategoryError):
        engine.update_preference("sector", "VP", True)


@pytest.mark.parametrize("category", ["past-organization", "signal-type", "seniority"])
def test_category_aliases_are_accepted(engine: CandidateEngine, category: str) -> None:
    entry = engine.update_preference(category, "Stripe", True, "r")

    assert entry is not None
    assert entry.positive_reasons == ["r"]


def test_explain_and_find_similar(engine: CandidateEngine, person: dict[str, Any]) -> None:
    engine.record_like(person, "exactly our thesis")

    assert engine.explain(dict(person, id="twin")).startswith("Strong match")
    matches = engine.find_similar(dict(person, id="twin"))
    assert matches[0].candidate_id == "p1"
    assert matches[0].reason == "exactly our thesis"


def test_embed_and_similarity(engine: CandidateEngine) -> None:
    a = engine.embed("payments banking infrastructure")
    b = engine.embed("payments banking infrastructure")

    assert len(a) == 100
    assert engine.similarity(a, b) == pytest.approx(1.0)
    assert engine.similarity(a, None) == 0.0


def test_concurrent_feedback_and_scoring(engine: CandidateEngine) -> None:
    errors: list[BaseException] = []

    def worker(n: int) -> None:
        try:
            for i in range(20):
                engine.record_like(make_person(person_id=f"w{n}_{i}", about=f"token{n}x{i} payments"))
                engine.score(make_signal(about=f"query{n}x{i} machine learning"))
        except Exception as e:  # pragma: no cover
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert engine.stats().likes == 80
    assert engine.state.store.get("industry", "Fintech").positive_weight == pytest.approx(80 * 0.15)


def test_cli_replays_session(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    session = {
        "persona": "early",
        "judgments": [
            {"action": "like", "candidate": make_person(), "reason": "fintech infra"},
            {"action": "dislike", "candidate": make_company(), "reason": "hardware heavy"},
            {"action": "bogus", "candidate": make_signal()},
        ],
        "pairs": [{"chosen": make_person(), "rejected": make_company(), "reason": "team over product"}],
        "candidates": [make_company(company_id="c2"), make_person(person_id="p2")],
    }
    session_path = tmp_path / "session.json"
    session_path.write_text(json.dumps(session), encoding="utf-8")
    export_path = tmp_path / "out" / "export.json"

    assert main([str(session_path), "--top", "1", "--export", str(export_path)]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith(" 1.")
    assert "Jane Doe" in lines[0]
    assert not any(line.startswith(" 2.") for line in lines)

    exported = json.loads(export_path.read_text(encoding="utf-8"))
    assert exported["persona_id"] == "early"
    assert exported["stats"]["likes"] == 1
    assert exported["stats"]["pairs"] == 1
