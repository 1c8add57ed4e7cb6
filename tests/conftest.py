import json
from pathlib import Path

import pytest

from advisor.core.knowledge import SetupKnowledge
from advisor.core.models import (
    BattleContext,
    CombatantState,
    MoveCategory,
    MoveDescriptor,
    PolicyFlags,
    Roster,
    Scenario,
)
from advisor.data.reference_loader import ReferenceDataRepository

DATA_DIR = Path(__file__).parent / "data"


def make_move(move_id, move_type, category=MoveCategory.PHYSICAL, base_power=80, name=None):
    return MoveDescriptor(id=move_id, type=move_type, category=category, base_power=base_power, name=name)


def make_context(active, opponent, bench=(), *, consider_setup=True, consider_no_switch=True,
                 scenario=Scenario.SAFETY_FIRST):
    """Active mon in slot 0, bench in the following slots."""
    return BattleContext(
        roster=Roster(slots=(active, *bench), active_index=0),
        opponent=opponent,
        policy=PolicyFlags(
            consider_setup=consider_setup,
            consider_no_switch=consider_no_switch,
            scenario=scenario,
        ),
    )


@pytest.fixture
def moves():
    return {
        "strength": make_move("strength", "Normal", base_power=80, name="Strength"),
        "flamethrower": make_move("flamethrower", "Fire", MoveCategory.SPECIAL, 90, "Flamethrower"),
        "firefang": make_move("firefang", "Fire", base_power=80, name="Fire Fang"),
        "thunderpunch": make_move("thunderpunch", "Electric", base_power=75, name="Thunder Punch"),
        "waterfall": make_move("waterfall", "Water", base_power=80, name="Waterfall"),
        "seismictoss": make_move("seismictoss", "Fighting", base_power=0, name="Seismic Toss"),
        "dragondance": make_move("dragondance", "Dragon", MoveCategory.STATUS, 0, "Dragon Dance"),
        "taunt": make_move("taunt", "Dark", MoveCategory.STATUS, 0, "Taunt"),
    }


@pytest.fixture
def knowledge():
    return SetupKnowledge.default({"dragondance": ["dragonite"]})


@pytest.fixture
def dragonite():
    return CombatantState(
        species="dragonite",
        types=("Dragon", "Flying"),
        ability="Multiscale",
        moves=("dragondance",),
        health=100,
        name="Dragonite",
    )


@pytest.fixture
def repository():
    return ReferenceDataRepository(DATA_DIR)


@pytest.fixture
def handoff():
    return json.loads((DATA_DIR / "sample_handoff.json").read_text(encoding="utf-8"))
