#!/usr/bin/env python3
"""
Print turn recommendations for a saved hand-off payload.

Usage:
    python scripts/run_advisor.py handoff.json --self-active 0 --opponent-active 2 \
        --opponent-health 45 --scenario A
"""

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from advisor.core.recommender import ActionRecommender
from advisor.data.reference_loader import ReferenceDataRepository
from advisor.engine.state_rebuilder import StateRebuilder


def parse_ally_health(values):
    health = {}
    for item in values or []:
        slot, _, value = item.partition("=")
        health[slot] = value
    return health


def print_result(result) -> None:
    payload = result.to_dict()
    if result.message:
        print(f"[{payload['status']}] {result.message}")
    if result.setup_threats:
        print(f"Opponent may set up: {'/'.join(result.setup_threats)}")
    for rank, action in enumerate(result.recommendations, 1):
        badge = "DANGER" if action.rejected else "OK"
        print(f"{rank}. {action.label} [{badge}] lose {action.lose_probability:.0%}")
        for line in action.details:
            print(f"     - {line}")
        if action.notes:
            print(f"     {' / '.join(action.notes)}")
    if result.rejected:
        print("\nRejected:")
        for action in result.rejected:
            print(f"  {action.label}: lose {action.lose_probability:.0%} ({', '.join(action.reject_reasons)})")


def main() -> int:
    parser = argparse.ArgumentParser(description="Turn action advisor")
    parser.add_argument("handoff", type=Path, help="Hand-off JSON saved by the team planner")
    parser.add_argument("--self-active", type=int, default=None, help="Your active slot index")
    parser.add_argument("--opponent-active", type=int, default=None, help="Opponent active slot index")
    parser.add_argument("--self-health", type=float, default=None, help="Your active HP percent")
    parser.add_argument("--opponent-health", type=float, default=None, help="Opponent HP percent")
    parser.add_argument("--ally-health", nargs="*", metavar="SLOT=HP", help="Bench HP, e.g. 2=40")
    parser.add_argument("--no-setup", action="store_true", help="Ignore setup risk")
    parser.add_argument("--no-switch-risk", action="store_true", help="Ignore no-switch risk")
    parser.add_argument("--scenario", default=None, help="A (aggressive) or B (safety first)")
    parser.add_argument("--data-dir", type=Path, default=None, help="Showdown data directory")
    parser.add_argument("--json", action="store_true", help="Print raw JSON")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    try:
        payload = json.loads(args.handoff.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        print(f"Could not read hand-off payload: {exc}", file=sys.stderr)
        return 2

    repository = ReferenceDataRepository(args.data_dir)
    context = StateRebuilder(repository).rebuild(
        payload,
        self_active=args.self_active,
        opponent_active=args.opponent_active,
        self_health=args.self_health,
        opponent_health=args.opponent_health,
        ally_health=parse_ally_health(args.ally_health),
        consider_setup=not args.no_setup,
        consider_no_switch=not args.no_switch_risk,
        scenario=args.scenario,
    )
    recommender = ActionRecommender(repository.move_table(), repository.setup_knowledge())
    result = recommender.recommend(context)

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        print_result(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
