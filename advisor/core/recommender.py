"""
ActionRecommender - ranked, explained recommendations for one turn

Pure function of the BattleContext: enumerate candidates, score each with the
RiskAssessmentEngine, split accepted / rejected, sort both under the scenario
comparator and truncate.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from advisor.core.candidate_generator import generate_candidates, move_candidates, switch_candidates
from advisor.core.knowledge import SetupKnowledge
from advisor.core.models import (
    BattleContext,
    MoveDescriptor,
    RecommendationResult,
    ResultStatus,
    Scenario,
    ScoredAction,
)
from advisor.core.risk_engine import RiskAssessmentEngine, RiskConfig

logger = logging.getLogger(__name__)

SortKey = Callable[[ScoredAction], Tuple[float, float]]


def _aggressive_key(action: ScoredAction) -> Tuple[float, float]:
    # Highest threat first, then safest.
    return (-action.threat, action.lose_probability)


def _safety_first_key(action: ScoredAction) -> Tuple[float, float]:
    # Safest first, then highest threat.
    return (action.lose_probability, -action.threat)


SCENARIO_KEYS: Dict[Scenario, SortKey] = {
    Scenario.AGGRESSIVE: _aggressive_key,
    Scenario.SAFETY_FIRST: _safety_first_key,
}


def rank_actions(actions: List[ScoredAction], scenario: Scenario) -> List[ScoredAction]:
    """Stable sort under the scenario's comparator."""
    return sorted(actions, key=SCENARIO_KEYS[scenario])


class ActionRecommender:
    """Candidate generator + ranker on top of a RiskAssessmentEngine."""

    def __init__(
        self,
        moves: Mapping[str, MoveDescriptor],
        knowledge: Optional[SetupKnowledge] = None,
        config: Optional[RiskConfig] = None,
    ):
        self.engine = RiskAssessmentEngine(moves, knowledge, config)

    @property
    def config(self) -> RiskConfig:
        return self.engine.config

    def recommend(self, context: BattleContext) -> RecommendationResult:
        scenario = context.policy.scenario
        active = context.active

        if active is None or active.is_empty or context.opponent.is_empty:
            return RecommendationResult(
                status=ResultStatus.CANNOT_COMPUTE,
                scenario=scenario,
                message="Active mon is not set on one or both sides.",
            )

        if not move_candidates(context) and not switch_candidates(context):
            return RecommendationResult(
                status=ResultStatus.NO_ACTIONS,
                scenario=scenario,
                message="No moves entered and no healthy switch target.",
            )

        summary = self.engine.summarize(context)
        scored = [self.engine.assess(context, candidate, summary) for candidate in generate_candidates(context)]

        accepted = rank_actions([action for action in scored if not action.rejected], scenario)
        rejected = rank_actions([action for action in scored if action.rejected], scenario)

        top_n = self.config.top_recommendations
        if accepted:
            status = ResultStatus.OK
            recommendations = accepted[:top_n]
            message = None
        else:
            status = ResultStatus.NO_SAFE_OPTION
            recommendations = rejected[:top_n]
            message = "No safe option found; listing the least bad of the dangerous ones."

        logger.debug(
            "scored %d candidates (%d accepted, %d rejected) scenario=%s",
            len(scored), len(accepted), len(rejected), scenario.value,
        )

        return RecommendationResult(
            status=status,
            scenario=scenario,
            recommendations=recommendations,
            rejected=rejected[: self.config.max_rejected],
            setup_threats=list(summary.setup_threats),
            message=message,
        )


def recommend_actions(
    context: BattleContext,
    moves: Mapping[str, MoveDescriptor],
    knowledge: Optional[SetupKnowledge] = None,
    config: Optional[RiskConfig] = None,
) -> RecommendationResult:
    """Convenience wrapper around ActionRecommender.recommend."""
    return ActionRecommender(moves, knowledge, config).recommend(context)
