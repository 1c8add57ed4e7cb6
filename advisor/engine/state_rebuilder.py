"""
Utilities that rebuild a BattleContext from the team planner's hand-off payload.

The payload is the JSON blob the planning page stores before opening the
advisor: both six-slot teams plus which mons were picked. Everything that is
specific to one turn (active slots, health, toggles) is passed separately,
because it changes on every recompute while the teams do not.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from advisor.core.models import (
    MAX_KNOWN_MOVES,
    MAX_ROSTER_SIZE,
    BattleContext,
    CombatantState,
    PolicyFlags,
    Roster,
    Scenario,
)
from advisor.data.reference_loader import ReferenceDataRepository, normalize_id

logger = logging.getLogger(__name__)

DEFAULT_HEALTH = 100.0
# Without explicit picks, the first three team members form the ally side.
DEFAULT_PICK_COUNT = 3

Slot = Tuple[int, Mapping[str, Any]]


@dataclass
class StateRebuilder:
    """Recreate an immutable BattleContext from the hand-off payload."""

    repository: ReferenceDataRepository

    def rebuild(
        self,
        payload: Mapping[str, Any],
        *,
        self_active: Optional[int] = None,
        opponent_active: Optional[int] = None,
        self_health: Any = None,
        opponent_health: Any = None,
        ally_health: Optional[Mapping[Any, Any]] = None,
        consider_setup: bool = True,
        consider_no_switch: bool = True,
        scenario: Any = None,
    ) -> BattleContext:
        if not isinstance(payload, Mapping):
            raise ValueError("Hand-off payload must be a JSON object")

        app = self._mapping(payload.get("app")) or payload
        teams = self._mapping(app.get("teams"))
        left = self._sequence(teams.get("left"))[:MAX_ROSTER_SIZE]
        right = self._sequence(teams.get("right"))[:MAX_ROSTER_SIZE]

        left_pool = self.selection_pool(left)
        right_pool = self.selection_pool(right)

        self_idx = self._coerce_index(self_active, left_pool)
        opp_idx = self._coerce_index(opponent_active, right_pool)

        health_by_slot = self._ally_health(left, ally_health)
        if self_idx is not None and 0 <= self_idx < len(left) and self._has_species(left[self_idx]):
            active_health = health_by_slot.get(self_idx, DEFAULT_HEALTH)
            if self_health is not None:
                active_health = self._coerce_health(self_health)
            health_by_slot[self_idx] = active_health

        slots = []
        for idx, raw in enumerate(left):
            if idx in health_by_slot:
                slots.append(self._combatant(raw, health_by_slot[idx]))
            else:
                slots.append(CombatantState(species=None))

        opponent_raw = right[opp_idx] if opp_idx is not None and 0 <= opp_idx < len(right) else None
        if opponent_raw is not None and self._has_species(opponent_raw):
            opponent = self._combatant(opponent_raw, self._coerce_health(opponent_health))
        else:
            logger.debug("opponent active slot %s has no species", opp_idx)
            opponent = CombatantState(species=None)

        policy = PolicyFlags(
            consider_setup=bool(consider_setup),
            consider_no_switch=bool(consider_no_switch),
            scenario=Scenario.parse(scenario if scenario is not None else payload.get("scenario")),
        )
        return BattleContext(
            roster=Roster(slots=tuple(slots), active_index=self_idx),
            opponent=opponent,
            policy=policy,
        )

    @classmethod
    def selection_pool(cls, team: List[Any]) -> List[Slot]:
        """Picked slots when any are picked, otherwise every slot with a species."""
        filled = [(idx, mon) for idx, mon in enumerate(team) if cls._has_species(mon)]
        picked = [(idx, mon) for idx, mon in filled if mon.get("pick")]
        return picked or filled

    def _ally_health(self, team: List[Any], overrides: Optional[Mapping[Any, Any]]) -> Dict[int, float]:
        pool = self.selection_pool(team)
        if not any(mon.get("pick") for _, mon in pool):
            pool = pool[:DEFAULT_PICK_COUNT]

        health = {idx: DEFAULT_HEALTH for idx, _ in pool}
        for key, value in (overrides or {}).items():
            try:
                idx = int(key)
            except (TypeError, ValueError):
                logger.debug("ignoring ally health for non-numeric slot %r", key)
                continue
            if idx in health:
                health[idx] = self._coerce_health(value)
        return health

    def _combatant(self, raw: Mapping[str, Any], health: float) -> CombatantState:
        species = normalize_id(raw.get("speciesId"))
        moves = tuple(normalize_id(move) for move in self._sequence(raw.get("moves"))[:MAX_KNOWN_MOVES])
        return CombatantState(
            species=species,
            types=self.repository.species_types(species),
            ability=raw.get("ability") or None,
            moves=moves,
            health=health,
            name=self.repository.species_name(species),
        )

    @staticmethod
    def _mapping(value: Any) -> Mapping[str, Any]:
        return value if isinstance(value, Mapping) else {}

    @staticmethod
    def _sequence(value: Any) -> List[Any]:
        return list(value) if isinstance(value, (list, tuple)) else []

    @staticmethod
    def _has_species(raw: Any) -> bool:
        return isinstance(raw, Mapping) and bool(raw.get("speciesId"))

    @staticmethod
    def _coerce_index(value: Any, pool: List[Slot]) -> Optional[int]:
        if value is None:
            return pool[0][0] if pool else None
        try:
            return int(value)
        except (TypeError, ValueError):
            return -1

    @staticmethod
    def _coerce_health(value: Any) -> float:
        if value is None or value == "":
            return DEFAULT_HEALTH
        if isinstance(value, str):
            value = value.strip().rstrip("%")
        try:
            numeric = float(value)
        except (TypeError, ValueError):
            return DEFAULT_HEALTH
        if numeric != numeric:  # NaN
            return DEFAULT_HEALTH
        return max(0.0, min(100.0, numeric))
