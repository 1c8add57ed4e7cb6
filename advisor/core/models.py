"""Shared dataclasses used across the advisor package."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

MAX_ROSTER_SIZE = 6
MAX_KNOWN_MOVES = 4


class MoveCategory(Enum):
    PHYSICAL = "Physical"
    SPECIAL = "Special"
    STATUS = "Status"

    @classmethod
    def parse(cls, value: Optional[str]) -> "MoveCategory":
        """Only an explicit "Status" deals no damage; missing or unknown values count as Physical."""
        key = str(value or "").strip().lower()
        for member in cls:
            if key == member.value.lower():
                return member
        return cls.PHYSICAL


class Scenario(Enum):
    """Ranking preference. Reorders scores, never changes them."""

    AGGRESSIVE = "aggressive"
    SAFETY_FIRST = "safety_first"

    @classmethod
    def parse(cls, value: Any) -> "Scenario":
        if isinstance(value, Scenario):
            return value
        key = str(value or "").strip().lower().replace("-", "_")
        if key in {"a", "aggressive"}:
            return cls.AGGRESSIVE
        # "b", "safety_first", "safetyfirst" and anything unknown
        return cls.SAFETY_FIRST


class ActionKind(Enum):
    STAY = "stay"
    MOVE = "move"
    SWITCH = "switch"


class ResultStatus(Enum):
    OK = "ok"
    NO_SAFE_OPTION = "no_safe_option"
    CANNOT_COMPUTE = "cannot_compute"
    NO_ACTIONS = "no_actions"


@dataclass(frozen=True)
class MoveDescriptor:
    """Entry of the move dictionary. base_power 0 means unknown."""

    id: str
    type: str
    category: MoveCategory
    base_power: int = 0
    name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.id


@dataclass(frozen=True)
class CombatantState:
    """One roster slot: species, types, ability, known moves and health."""

    species: Optional[str]
    types: Tuple[str, ...] = ()
    ability: Optional[str] = None
    moves: Tuple[str, ...] = ()
    health: float = 100.0
    name: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.species

    @property
    def display_name(self) -> str:
        return self.name or self.species or "?"

    @property
    def known_moves(self) -> List[str]:
        """Non-empty move ids in their stored order."""
        return [move for move in self.moves[:MAX_KNOWN_MOVES] if move]


@dataclass(frozen=True)
class Roster:
    """Up to six slots for one side; slots with no species are empty."""

    slots: Tuple[CombatantState, ...] = ()
    active_index: Optional[int] = None

    def __post_init__(self):
        if len(self.slots) > MAX_ROSTER_SIZE:
            raise ValueError(f"A roster holds at most {MAX_ROSTER_SIZE} slots, got {len(self.slots)}")

    @property
    def active(self) -> Optional[CombatantState]:
        return self.get(self.active_index)

    def get(self, index: Optional[int]) -> Optional[CombatantState]:
        if index is None or not 0 <= index < len(self.slots):
            return None
        return self.slots[index]

    def occupied(self) -> List[Tuple[int, CombatantState]]:
        return [(idx, mon) for idx, mon in enumerate(self.slots) if not mon.is_empty]


@dataclass(frozen=True)
class PolicyFlags:
    consider_setup: bool = True
    consider_no_switch: bool = True
    scenario: Scenario = Scenario.SAFETY_FIRST


@dataclass(frozen=True)
class BattleContext:
    """Immutable snapshot the engine computes from; rebuilt on every call."""

    roster: Roster
    opponent: CombatantState
    policy: PolicyFlags = field(default_factory=PolicyFlags)

    @property
    def active(self) -> Optional[CombatantState]:
        return self.roster.active

    @property
    def opponent_types(self) -> Tuple[str, ...]:
        return self.opponent.types


@dataclass(frozen=True)
class ActionCandidate:
    """Stay, UseMove(move_id) or SwitchTo(slot)."""

    kind: ActionKind
    move_id: Optional[str] = None
    slot: Optional[int] = None

    @classmethod
    def stay(cls) -> "ActionCandidate":
        return cls(ActionKind.STAY)

    @classmethod
    def use_move(cls, move_id: str) -> "ActionCandidate":
        return cls(ActionKind.MOVE, move_id=move_id)

    @classmethod
    def switch_to(cls, slot: int) -> "ActionCandidate":
        return cls(ActionKind.SWITCH, slot=slot)


@dataclass(frozen=True)
class RiskBreakdown:
    """The four risk components and their combination."""

    setup: float = 0.0
    no_switch: float = 0.0
    exposure: float = 0.0
    punish: float = 0.0

    def dampened(self, setup: float, no_switch: float, exposure: float, punish: float) -> "RiskBreakdown":
        return RiskBreakdown(
            setup=self.setup * setup,
            no_switch=self.no_switch * no_switch,
            exposure=self.exposure * exposure,
            punish=self.punish * punish,
        )

    @property
    def lose_probability(self) -> float:
        # Components are treated as independent.
        survive = (1 - self.setup) * (1 - self.no_switch) * (1 - self.exposure) * (1 - self.punish)
        return max(0.0, min(1.0, 1 - survive))

    def to_dict(self) -> Dict[str, float]:
        return {
            "setup": self.setup,
            "noSwitch": self.no_switch,
            "exposure": self.exposure,
            "punish": self.punish,
        }


@dataclass
class ScoredAction:
    """One evaluated candidate; lives for a single compute cycle."""

    candidate: ActionCandidate
    label: str
    immediate_damage: float
    threat: float
    risks: RiskBreakdown
    knock_out: bool = False
    reject_reasons: List[str] = field(default_factory=list)
    details: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)

    @property
    def lose_probability(self) -> float:
        return self.risks.lose_probability

    @property
    def rejected(self) -> bool:
        return bool(self.reject_reasons)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "kind": self.candidate.kind.value,
            "moveId": self.candidate.move_id,
            "slot": self.candidate.slot,
            "immediateDamage": self.immediate_damage,
            "threat": self.threat,
            "knockOut": self.knock_out,
            "risks": self.risks.to_dict(),
            "loseProbability": self.lose_probability,
            "rejected": self.rejected,
            "rejectReasons": list(self.reject_reasons),
            "details": list(self.details),
            "notes": list(self.notes),
        }


@dataclass
class RecommendationResult:
    """High-level return object for recommend_actions."""

    status: ResultStatus
    scenario: Scenario
    recommendations: List[ScoredAction] = field(default_factory=list)
    rejected: List[ScoredAction] = field(default_factory=list)
    setup_threats: List[str] = field(default_factory=list)
    message: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.status is ResultStatus.NO_SAFE_OPTION

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the response schema expected by the rendering side."""
        return {
            "status": self.status.value,
            "message": self.message,
            "scenario": self.scenario.value,
            "degraded": self.degraded,
            "setupThreats": list(self.setup_threats),
            "recommendations": [action.to_dict() for action in self.recommendations],
            "rejected": [action.to_dict() for action in self.rejected],
        }
