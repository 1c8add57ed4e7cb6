"""Enumerate the actions available to the active mon this turn."""

from __future__ import annotations

from typing import List

from advisor.core.models import ActionCandidate, BattleContext


def move_candidates(context: BattleContext) -> List[ActionCandidate]:
    active = context.active
    if active is None:
        return []
    return [ActionCandidate.use_move(move_id) for move_id in active.known_moves]


def switch_candidates(context: BattleContext) -> List[ActionCandidate]:
    """Healthy, non-active roster slots."""
    return [
        ActionCandidate.switch_to(idx)
        for idx, mon in context.roster.occupied()
        if idx != context.roster.active_index and mon.health > 0
    ]


def generate_candidates(context: BattleContext) -> List[ActionCandidate]:
    """Stay first, then one candidate per known move, then one per switch target."""
    candidates = [ActionCandidate.stay()]
    candidates.extend(move_candidates(context))
    candidates.extend(switch_candidates(context))
    return candidates
