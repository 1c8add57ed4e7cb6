"""Game content the risk engine relies on, injected at construction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional

from advisor.core.models import CombatantState

DEFAULT_SETUP_MOVES: Dict[str, str] = {
    "dragondance": "Dragon Dance",
    "swordsdance": "Swords Dance",
}

# Moves that immediately reduce "free setup" risk
DEFAULT_STOP_MOVES: FrozenSet[str] = frozenset({
    "taunt", "encore", "roar", "whirlwind", "haze", "clearsmog",
    "dragontail", "circlethrow", "spectralthief",
})

DEFAULT_ANSWER_ABILITIES: FrozenSet[str] = frozenset({"unaware"})


@dataclass(frozen=True)
class SetupKnowledge:
    """
    Setup / anti-setup reference sets.

    setup_moves: move id -> display label of the boosting move
    stop_moves: moves that disrupt a setup attempt
    answer_abilities: lower-case abilities that ignore boosts
    setup_species: move id -> species ids known to learn it, used when the
        opponent's moves are not revealed yet
    """

    setup_moves: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_SETUP_MOVES))
    stop_moves: FrozenSet[str] = DEFAULT_STOP_MOVES
    answer_abilities: FrozenSet[str] = DEFAULT_ANSWER_ABILITIES
    setup_species: Mapping[str, FrozenSet[str]] = field(default_factory=dict)

    @classmethod
    def default(cls, setup_species: Optional[Mapping[str, Iterable[str]]] = None) -> "SetupKnowledge":
        index = {move: frozenset(species) for move, species in (setup_species or {}).items()}
        return cls(setup_species=index)

    def is_stop_move(self, move_id: Optional[str]) -> bool:
        return bool(move_id) and move_id in self.stop_moves

    def setup_threats(self, opponent: CombatantState) -> List[str]:
        """Labels of setup moves the opponent shows or is known to learn."""
        revealed = set(opponent.known_moves)
        threats = []
        for move_id, label in self.setup_moves.items():
            if move_id in revealed or opponent.species in self.setup_species.get(move_id, ()):
                threats.append(label)
        return threats

    def has_answer(self, mon: CombatantState) -> bool:
        if mon.is_empty:
            return False
        if (mon.ability or "").strip().lower() in self.answer_abilities:
            return True
        return any(move in self.stop_moves for move in mon.known_moves)
