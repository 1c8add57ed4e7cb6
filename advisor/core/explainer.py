"""Labels and detail lines attached to each scored action."""

from __future__ import annotations

from typing import List, Mapping, Tuple

from advisor.core.damage_estimator import best_threat, predict_damage_percent
from advisor.core.knowledge import SetupKnowledge
from advisor.core.models import (
    ActionCandidate,
    ActionKind,
    BattleContext,
    CombatantState,
    MoveCategory,
    MoveDescriptor,
)
from advisor.core.type_chart import effectiveness


def percent_text(value: float) -> str:
    return f"{round(max(0.0, min(100.0, value)))}%"


def move_name(move_id: str, moves: Mapping[str, MoveDescriptor]) -> str:
    move = moves.get(move_id)
    return move.display_name if move else move_id


def threat_line(mon: CombatantState, opponent: CombatantState, moves: Mapping[str, MoveDescriptor]) -> str:
    threat = best_threat(mon, opponent, moves)
    if threat.best_move is None:
        return "Best hit: no moves entered"
    return f"Best hit: {move_name(threat.best_move, moves)} -> {percent_text(threat.best_percent)} (rough)"


def describe_candidate(
    candidate: ActionCandidate,
    context: BattleContext,
    mon: CombatantState,
    moves: Mapping[str, MoveDescriptor],
    knowledge: SetupKnowledge,
) -> Tuple[str, List[str]]:
    """Return ``(label, details)`` for the candidate; ``mon`` is the post-action mon."""
    opponent = context.opponent

    if candidate.kind is ActionKind.STAY:
        return f"Stay: {mon.display_name}", [threat_line(mon, opponent, moves)]

    if candidate.kind is ActionKind.SWITCH:
        return f"Switch: {mon.display_name}", [threat_line(mon, opponent, moves)]

    move = moves.get(candidate.move_id)
    details = []
    move_type = move.type if move else ""
    eff = effectiveness(move_type, opponent.types) if move_type else 1.0
    details.append(f"Type: {move_type or '?'} / effectiveness x{eff:g}")
    if move is not None and move.category is MoveCategory.STATUS:
        details.append("Status move (no damage)")
    else:
        damage = predict_damage_percent(mon, move, opponent)
        details.append(f"Expected damage: {percent_text(damage)} (rough)")
    if knowledge.is_stop_move(candidate.move_id):
        details.append("Disrupts setup (taunt/encore etc.)")
    return f"Move: {move_name(candidate.move_id, moves)}", details
