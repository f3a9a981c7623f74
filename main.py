import argparse
import json
import sys
from pathlib import Path

from loguru import logger

from dealscout.core.config import APP_VERSION, settings
from dealscout.services.learning import CandidateEngine

JUDGMENT_ACTIONS = ("like", "dislike", "save", "skip")


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level)


def load_session(path: Path) -> dict:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, list):
        return {"candidates": data}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object or a list of candidates")
    return data


def replay(engine: CandidateEngine, session: dict) -> None:
    """Apply persona seed, judgments and pairs from a session document."""
    if session.get("persona"):
        engine.seed_persona(session["persona"])

    for judgment in session.get("judgments", []):
        action = judgment.get("action")
        if action not in JUDGMENT_ACTIONS:
            logger.warning(f"Skipping judgment with unknown action {action!r}")
            continue
        handler = getattr(engine, f"record_{action}")
        handler(judgment.get("candidate", {}), judgment.get("reason"))

    for pair in session.get("pairs", []):
        engine.record_preference_pair(pair.get("chosen", {}), pair.get("rejected", {}), pair.get("reason"))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Rank candidates against learned preferences.")
    parser.add_argument("session", type=Path, help="JSON session: persona, judgments, pairs, candidates")
    parser.add_argument("--top", type=int, default=0, help="Only print the top N candidates")
    parser.add_argument("--export", type=Path, help="Write the training export to this path")
    parser.add_argument("--version", action="version", version=f"dealscout {APP_VERSION}")
    args = parser.parse_args(argv)

    configure_logging(settings.LOG_LEVEL)

    engine = CandidateEngine()
    session = load_session(args.session)
    replay(engine, session)

    ranked = engine.rank(session.get("candidates", []))
    if args.top > 0:
        ranked = ranked[: args.top]

    for position, item in enumerate(ranked, start=1):
        print(f"{position:>2}. {item.score:>3}/100  {item.features.display_name}")
        for reason in item.reasons[:3]:
            print(f"       + {reason}")
        for warning in item.warnings[:3]:
            print(f"       - {warning}")

    if args.export:
        engine.write_export(args.export)

    return 0


if __name__ == "__main__":
    sys.exit(main())
