"""
Rough damage heuristic used by the risk ranking.

This is not the game's damage formula. There are no stats, levels, items or
random rolls: the output is a coarse "expected damage percent" that is only
meant to be consistent between candidates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from advisor.core.models import CombatantState, MoveCategory, MoveDescriptor
from advisor.core.type_chart import effectiveness, type_key

# Tunables, not physical constants.
DEFAULT_BASE_POWER = 60
STAB_MULTIPLIER = 1.5
# A neutral non-STAB 120 power move lands around 60%.
DAMAGE_DIVISOR = 2.0


@dataclass(frozen=True)
class ThreatResult:
    best_percent: float
    best_move: Optional[str] = None


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def predict_damage_percent(
    attacker: CombatantState,
    move: Optional[MoveDescriptor],
    defender: CombatantState,
) -> float:
    """Expected damage of ``move`` against ``defender`` in percent (0-100)."""
    if move is None or move.category is MoveCategory.STATUS:
        return 0.0
    base_power = move.base_power if move.base_power > 0 else DEFAULT_BASE_POWER
    attacker_types = {type_key(name) for name in attacker.types}
    stab = STAB_MULTIPLIER if type_key(move.type) in attacker_types else 1.0
    eff = effectiveness(move.type, defender.types)
    raw = base_power * stab * eff
    return _clamp(raw / DAMAGE_DIVISOR, 0.0, 100.0)


def best_threat(
    mon: CombatantState,
    opponent: CombatantState,
    moves: Mapping[str, MoveDescriptor],
) -> ThreatResult:
    """
    Strongest known move of ``mon`` against ``opponent``.

    Moves are scanned in stored order and only a strictly greater value
    replaces the current best, so ties keep the first move. Moves missing from
    the dictionary score 0 and therefore never become the best move.
    """
    best = 0.0
    best_move: Optional[str] = None
    for move_id in mon.known_moves:
        percent = predict_damage_percent(mon, moves.get(move_id), opponent)
        if percent > best:
            best = percent
            best_move = move_id
    return ThreatResult(best, best_move)
