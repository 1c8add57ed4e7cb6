"""
RiskAssessmentEngine - per-candidate loss estimate

Each candidate gets four independent risk components:
  setup      the opponent boosts for free and sweeps
  no_switch  nothing left on the bench can take the opponent's hits
  exposure   the mon left on the field is weak to the opponent's types
  punish     switching straight into a weakness

They are combined as 1 - prod(1 - r). The independence assumption is a known
simplification and is kept as-is because the rankings depend on it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from advisor.core.damage_estimator import ThreatResult, best_threat, predict_damage_percent
from advisor.core.explainer import describe_candidate
from advisor.core.knowledge import SetupKnowledge
from advisor.core.models import (
    ActionCandidate,
    ActionKind,
    BattleContext,
    CombatantState,
    MoveDescriptor,
    RiskBreakdown,
    ScoredAction,
)
from advisor.core.type_chart import worst_case_multiplier

REASON_FREE_SETUP = "free setup, no answer"
REASON_NO_SAFE_SWITCH = "no safe switch-in left"
REASON_WEAK_SWITCH = "switches into a weakness with a thin follow-up"


@dataclass
class RiskConfig:
    """Tunable constants of the risk model."""

    baseline_risk: float = 0.05

    # setup
    free_setup_threat: float = 60.0
    reject_setup_threat: float = 50.0
    free_setup_risk: float = 0.70
    answered_setup_risk: float = 0.35
    pressured_setup_risk: float = 0.12

    # no-switch
    no_safe_switch_risk: float = 0.55
    safe_switch_risk: float = 0.18

    # exposure
    weak_low_health_risk: float = 0.35
    weak_risk: float = 0.22
    neutral_risk: float = 0.08
    resist_risk: float = 0.03
    low_health_cut: float = 50.0

    # punish
    punish_base: float = 0.45
    punish_health_cut: float = 80.0
    punish_health_bonus: float = 0.15
    punish_quad_bonus: float = 0.15
    punish_ceiling: float = 0.85

    # knockout dampening
    ko_setup_factor: float = 0.2
    ko_no_switch_factor: float = 0.6
    ko_exposure_factor: float = 0.6
    ko_punish_factor: float = 0.4

    # ranking
    top_recommendations: int = 3
    max_rejected: int = 12


@dataclass(frozen=True)
class SideSummary:
    """Facts shared by every candidate of one compute cycle."""

    setup_threats: List[str] = field(default_factory=list)
    anti_setup: bool = False

    @property
    def setup_suspected(self) -> bool:
        return bool(self.setup_threats)


@dataclass(frozen=True)
class _Outcome:
    mon: CombatantState
    slot: Optional[int]
    health: float
    immediate_damage: float
    threat: ThreatResult
    stop_now: bool


class RiskAssessmentEngine:
    """Scores ActionCandidates against a BattleContext. Holds no per-call state."""

    def __init__(
        self,
        moves: Mapping[str, MoveDescriptor],
        knowledge: Optional[SetupKnowledge] = None,
        config: Optional[RiskConfig] = None,
    ):
        self.moves = moves
        self.knowledge = knowledge or SetupKnowledge.default()
        self.config = config or RiskConfig()

    def summarize(self, context: BattleContext) -> SideSummary:
        threats = self.knowledge.setup_threats(context.opponent) if context.policy.consider_setup else []
        anti_setup = any(self.knowledge.has_answer(mon) for _, mon in context.roster.occupied())
        return SideSummary(setup_threats=threats, anti_setup=anti_setup)

    def safe_switch_count(self, context: BattleContext, exclude_slot: Optional[int]) -> int:
        """Healthy allies other than ``exclude_slot`` that take at most neutral damage."""
        count = 0
        for idx, mon in context.roster.occupied():
            if idx == exclude_slot or mon.health <= 0:
                continue
            if worst_case_multiplier(mon.types, context.opponent_types) <= 1:
                count += 1
        return count

    def assess(
        self,
        context: BattleContext,
        candidate: ActionCandidate,
        summary: Optional[SideSummary] = None,
    ) -> ScoredAction:
        summary = summary or self.summarize(context)
        cfg = self.config
        policy = context.policy
        opponent = context.opponent
        opp_types = context.opponent_types

        outcome = self._resolve(context, candidate)
        label, details = describe_candidate(candidate, context, outcome.mon, self.moves, self.knowledge)

        is_move = candidate.kind is ActionKind.MOVE
        knock_out = is_move and outcome.immediate_damage > 0 and outcome.immediate_damage >= opponent.health
        threat = outcome.threat.best_percent
        notes: List[str] = []

        # setup
        setup_risk = cfg.baseline_risk
        kinds = "/".join(summary.setup_threats)
        if policy.consider_setup and summary.setup_suspected:
            free_setup = not knock_out and not outcome.stop_now and threat < cfg.free_setup_threat
            if free_setup and summary.anti_setup:
                setup_risk = cfg.answered_setup_risk
                notes.append(
                    f"Opponent may use {kinds}. The team has an answer "
                    "(taunt/encore/haze/Unaware etc.), so the risk is moderate."
                )
            elif free_setup:
                setup_risk = cfg.free_setup_risk
                notes.append(f"Opponent may use {kinds}. Little to stop it, so the risk is high.")
            else:
                setup_risk = cfg.pressured_setup_risk
                notes.append(f"Opponent's {kinds} is a concern, but this action keeps up pressure or disruption.")

        # no-switch
        safe_count = self.safe_switch_count(context, outcome.slot)
        no_switch_risk = cfg.baseline_risk
        if policy.consider_no_switch and opp_types:
            if safe_count == 0:
                no_switch_risk = cfg.no_safe_switch_risk
                notes.append("No ally can switch in safely against the opponent's types (STAB assumed).")
            else:
                no_switch_risk = cfg.safe_switch_risk
                notes.append(f"Safe switch-ins: {safe_count} (STAB assumed)")

        # exposure
        worst = worst_case_multiplier(outcome.mon.types, opp_types)
        if worst >= 2:
            exposure_risk = cfg.weak_low_health_risk if outcome.health <= cfg.low_health_cut else cfg.weak_risk
            notes.append(f"Weak to the opponent's STAB (up to x{worst:g})")
        elif worst <= 0.5:
            exposure_risk = cfg.resist_risk
            notes.append("Takes the opponent's STAB well (half damage or less)")
        else:
            exposure_risk = cfg.neutral_risk
            if opp_types:
                notes.append("Neutral or mixed matchup")

        # punish
        punish_risk = 0.0
        if candidate.kind is ActionKind.SWITCH and opp_types and worst >= 2:
            punish_risk = cfg.punish_base
            if outcome.health <= cfg.punish_health_cut:
                punish_risk += cfg.punish_health_bonus
            if worst >= 4:
                punish_risk += cfg.punish_quad_bonus
            punish_risk = min(punish_risk, cfg.punish_ceiling)
            notes.append("Switching into a weakness is risky (the opponent's STAB hits hard)")

        risks = RiskBreakdown(setup_risk, no_switch_risk, exposure_risk, punish_risk)
        if knock_out:
            risks = risks.dampened(
                cfg.ko_setup_factor, cfg.ko_no_switch_factor, cfg.ko_exposure_factor, cfg.ko_punish_factor
            )
            details.append("Expected to knock out -> leaning safe")

        reasons: List[str] = []
        if policy.consider_setup and summary.setup_suspected:
            if not knock_out and not outcome.stop_now and threat < cfg.reject_setup_threat and not summary.anti_setup:
                reasons.append(REASON_FREE_SETUP)
        if policy.consider_no_switch and opp_types and safe_count == 0 and worst >= 2:
            reasons.append(REASON_NO_SAFE_SWITCH)
        if candidate.kind is ActionKind.SWITCH and worst >= 2 and safe_count <= 1:
            reasons.append(REASON_WEAK_SWITCH)

        return ScoredAction(
            candidate=candidate,
            label=label,
            immediate_damage=outcome.immediate_damage,
            threat=threat,
            risks=risks,
            knock_out=knock_out,
            reject_reasons=reasons,
            details=details,
            notes=notes,
        )

    def _resolve(self, context: BattleContext, candidate: ActionCandidate) -> _Outcome:
        """Mon on the field after the action, its health, damage dealt and remaining threat."""
        active = context.active
        if candidate.kind is ActionKind.SWITCH:
            target = context.roster.get(candidate.slot)
            if target is None or target.is_empty:
                raise ValueError(f"Switch target slot {candidate.slot} is empty")
            return _Outcome(
                mon=target,
                slot=candidate.slot,
                health=target.health,
                immediate_damage=0.0,
                threat=best_threat(target, context.opponent, self.moves),
                stop_now=False,
            )
        if candidate.kind is ActionKind.MOVE:
            damage = predict_damage_percent(active, self.moves.get(candidate.move_id), context.opponent)
            return _Outcome(
                mon=active,
                slot=context.roster.active_index,
                health=active.health,
                immediate_damage=damage,
                threat=ThreatResult(damage, candidate.move_id),
                stop_now=self.knowledge.is_stop_move(candidate.move_id),
            )
        return _Outcome(
            mon=active,
            slot=context.roster.active_index,
            health=active.health,
            immediate_damage=0.0,
            threat=best_threat(active, context.opponent, self.moves),
            stop_now=False,
        )
