import pytest

from advisor.core.models import ActionCandidate, CombatantState
from advisor.core.risk_engine import (
    REASON_FREE_SETUP,
    REASON_NO_SAFE_SWITCH,
    REASON_WEAK_SWITCH,
    RiskAssessmentEngine,
    RiskConfig,
)

from conftest import make_context


def blastoise(moves=("strength",), health=100):
    return CombatantState(
        species="blastoise", types=("Water",), ability="Torrent", moves=moves, health=health, name="Blastoise"
    )


def umbreon(moves=("taunt",), health=100, ability="Synchronize"):
    return CombatantState(species="umbreon", types=("Dark",), ability=ability, moves=moves, health=health)


def charizard_opponent(health=100):
    return CombatantState(species="charizard", types=("Fire", "Flying"), moves=(), health=health)


@pytest.fixture
def engine(moves, knowledge):
    return RiskAssessmentEngine(moves, knowledge)


class TestSetupRisk:
    def test_free_setup_without_answer_is_high_and_rejected(self, engine, dragonite):
        context = make_context(blastoise(), dragonite)
        scored = engine.assess(context, ActionCandidate.use_move("strength"))

        assert scored.threat == 40.0
        assert scored.risks.setup == pytest.approx(0.70)
        assert scored.reject_reasons == [REASON_FREE_SETUP]
        assert scored.rejected

    def test_answer_on_the_bench_halves_setup_risk(self, engine, dragonite):
        context = make_context(blastoise(), dragonite, bench=(umbreon(),))
        scored = engine.assess(context, ActionCandidate.use_move("strength"))

        assert scored.risks.setup == pytest.approx(0.35)
        assert REASON_FREE_SETUP not in scored.reject_reasons

    def test_unaware_ability_counts_as_answer(self, engine, dragonite):
        context = make_context(blastoise(), dragonite, bench=(umbreon(moves=(), ability="UNAWARE"),))
        scored = engine.assess(context, ActionCandidate.stay())

        assert scored.risks.setup == pytest.approx(0.35)

    def test_stop_move_keeps_pressure(self, engine, dragonite):
        context = make_context(blastoise(moves=("taunt",)), dragonite)
        scored = engine.assess(context, ActionCandidate.use_move("taunt"))

        assert scored.immediate_damage == 0.0
        assert scored.risks.setup == pytest.approx(0.12)
        assert REASON_FREE_SETUP not in scored.reject_reasons
        assert "Disrupts setup (taunt/encore etc.)" in scored.details

    def test_flag_off_uses_baseline(self, engine, dragonite):
        context = make_context(blastoise(), dragonite, consider_setup=False)
        scored = engine.assess(context, ActionCandidate.use_move("strength"))

        assert scored.risks.setup == pytest.approx(0.05)
        assert not scored.rejected

    def test_no_setup_threat_uses_baseline(self, engine):
        opponent = CombatantState(species="blastoise", types=("Water",), moves=("waterfall",))
        context = make_context(blastoise(), opponent)
        scored = engine.assess(context, ActionCandidate.stay())

        assert scored.risks.setup == pytest.approx(0.05)

    def test_setup_species_index_flags_unrevealed_sets(self, engine, dragonite):
        hidden = CombatantState(species="dragonite", types=dragonite.types, moves=(), health=100)
        context = make_context(blastoise(), hidden)

        assert engine.summarize(context).setup_threats == ["Dragon Dance"]
        assert engine.assess(context, ActionCandidate.stay()).risks.setup == pytest.approx(0.70)


class TestNoSwitchAndExposure:
    def test_no_safe_switch_in(self, engine, dragonite):
        context = make_context(blastoise(), dragonite, consider_setup=False)
        scored = engine.assess(context, ActionCandidate.stay())

        assert scored.risks.no_switch == pytest.approx(0.55)
        assert scored.risks.exposure == pytest.approx(0.08)

    def test_fainted_allies_are_not_safe_switch_ins(self, engine, dragonite):
        context = make_context(blastoise(), dragonite, bench=(umbreon(health=0),))
        assert engine.safe_switch_count(context, 0) == 0

        healthy = make_context(blastoise(), dragonite, bench=(umbreon(),))
        assert engine.safe_switch_count(healthy, 0) == 1

    def test_weak_and_low_health_exposure(self, engine):
        opponent = CombatantState(species="blastoise", types=("Water",), moves=())
        low = make_context(CombatantState("charizard", ("Fire", "Flying"), health=40), opponent)
        high = make_context(CombatantState("charizard", ("Fire", "Flying"), health=60), opponent)

        assert engine.assess(low, ActionCandidate.stay()).risks.exposure == pytest.approx(0.35)
        assert engine.assess(high, ActionCandidate.stay()).risks.exposure == pytest.approx(0.22)

    def test_no_safe_switch_and_weak_is_rejected(self, engine):
        opponent = CombatantState(species="blastoise", types=("Water",), moves=())
        context = make_context(CombatantState("charizard", ("Fire", "Flying"), health=60), opponent)
        scored = engine.assess(context, ActionCandidate.stay())

        assert scored.reject_reasons == [REASON_NO_SAFE_SWITCH]

    def test_resisting_mon_has_low_exposure(self, engine):
        opponent = CombatantState(species="blastoise", types=("Water",), moves=())
        context = make_context(CombatantState("ferrothorn", ("Grass", "Steel")), opponent)

        assert engine.assess(context, ActionCandidate.stay()).risks.exposure == pytest.approx(0.03)

    def test_unknown_opponent_types_fall_back_to_baselines(self, engine):
        opponent = CombatantState(species="missingno", types=(), moves=())
        context = make_context(blastoise(), opponent, bench=(umbreon(),))
        scored = engine.assess(context, ActionCandidate.switch_to(1))

        assert scored.risks.no_switch == pytest.approx(0.05)
        assert scored.risks.exposure == pytest.approx(0.08)
        assert scored.risks.punish == 0.0
        assert not scored.rejected


class TestPunishRisk:
    def test_switch_into_quad_weakness_at_70_percent(self, engine):
        target = CombatantState(species="parasect", types=("Grass", "Bug"), health=70)
        context = make_context(blastoise(), charizard_opponent(), bench=(target,), consider_setup=False)
        scored = engine.assess(context, ActionCandidate.switch_to(1))

        assert scored.risks.punish == pytest.approx(0.75)
        assert REASON_WEAK_SWITCH in scored.reject_reasons

    @pytest.mark.parametrize(
        "types, health, expected",
        [
            (("Grass", "Bug"), 90, 0.60),
            (("Grass",), 70, 0.60),
            (("Grass",), 100, 0.45),
            (("Water",), 10, 0.0),
        ],
    )
    def test_punish_components(self, engine, types, health, expected):
        target = CombatantState(species="target", types=types, health=health)
        context = make_context(blastoise(), charizard_opponent(), bench=(target,))
        assert engine.assess(context, ActionCandidate.switch_to(1)).risks.punish == pytest.approx(expected)

    def test_punish_is_capped(self, moves, knowledge):
        engine = RiskAssessmentEngine(moves, knowledge, RiskConfig(punish_base=0.8))
        target = CombatantState(species="parasect", types=("Grass", "Bug"), health=50)
        context = make_context(blastoise(), charizard_opponent(), bench=(target,))

        assert engine.assess(context, ActionCandidate.switch_to(1)).risks.punish == pytest.approx(0.85)

    def test_punish_only_applies_to_switches(self, engine):
        weak = CombatantState(species="parasect", types=("Grass", "Bug"), moves=("strength",), health=70)
        context = make_context(weak, charizard_opponent())
        assert engine.assess(context, ActionCandidate.stay()).risks.punish == 0.0
        assert engine.assess(context, ActionCandidate.use_move("strength")).risks.punish == 0.0


class TestKnockout:
    def test_knockout_dampens_every_component(self, engine, dragonite):
        weakened = CombatantState(
            species="dragonite", types=dragonite.types, moves=dragonite.moves, health=30
        )
        ko_context = make_context(blastoise(moves=("waterfall",)), weakened)
        plain_context = make_context(blastoise(moves=("waterfall",)), dragonite)

        ko = engine.assess(ko_context, ActionCandidate.use_move("waterfall"))
        plain = engine.assess(plain_context, ActionCandidate.use_move("waterfall"))

        assert ko.immediate_damage == plain.immediate_damage == 30.0
        assert ko.knock_out and not plain.knock_out
        assert ko.risks.setup == pytest.approx(0.12 * 0.2)
        assert ko.risks.no_switch == pytest.approx(0.55 * 0.6)
        assert ko.risks.exposure == pytest.approx(0.08 * 0.6)
        assert ko.lose_probability <= plain.lose_probability
        assert "Expected to knock out -> leaning safe" in ko.details

    def test_zero_damage_never_knocks_out(self, engine):
        fainted = CombatantState(species="blastoise", types=("Water",), health=0)
        context = make_context(blastoise(moves=("taunt",)), fainted)
        assert not engine.assess(context, ActionCandidate.use_move("taunt")).knock_out

    def test_stay_is_never_a_knockout(self, engine, dragonite):
        weakened = CombatantState(species="dragonite", types=dragonite.types, health=10)
        context = make_context(blastoise(moves=("waterfall",)), weakened)
        scored = engine.assess(context, ActionCandidate.stay())
        assert scored.threat == 30.0
        assert not scored.knock_out


def test_combined_probability_matches_independence_rule(engine, dragonite):
    context = make_context(blastoise(), dragonite)
    scored = engine.assess(context, ActionCandidate.use_move("strength"))
    risks = scored.risks
    expected = 1 - (1 - risks.setup) * (1 - risks.no_switch) * (1 - risks.exposure) * (1 - risks.punish)
    assert scored.lose_probability == pytest.approx(expected)
    assert scored.lose_probability == pytest.approx(1 - 0.30 * 0.45 * 0.92)


def test_switch_to_empty_slot_is_an_error(engine, dragonite):
    context = make_context(blastoise(), dragonite, bench=(CombatantState(species=None),))
    with pytest.raises(ValueError):
        engine.assess(context, ActionCandidate.switch_to(1))
