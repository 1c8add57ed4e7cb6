"""Load the reference tables the engine reads: species types, moves, setup index."""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from advisor.core.knowledge import SetupKnowledge
from advisor.core.models import MoveCategory, MoveDescriptor

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parents[2] / "data" / "showdown"
DATA_DIR_ENV = "ADVISOR_DATA_DIR"

_NON_ID = re.compile(r"[^a-z0-9]")


def normalize_id(name: Optional[str]) -> str:
    """Showdown-style id: lower-case, letters and digits only."""
    return _NON_ID.sub("", (name or "").lower())


@dataclass
class SpeciesEntry:
    id: str
    name: str
    types: Tuple[str, ...]
    abilities: Dict[str, str]


class ReferenceDataRepository:
    """Lazy loader for the Showdown-derived JSON resources."""

    def __init__(self, data_dir: Optional[Path] = None):
        env_dir = os.environ.get(DATA_DIR_ENV)
        self.data_dir = Path(data_dir or env_dir or DATA_DIR)
        self._pokedex = None
        self._moves = None
        self._setup_index = None
        self._move_table = None

    @property
    def pokedex(self) -> Dict[str, Any]:
        if self._pokedex is None:
            self._pokedex = self._load_json("pokedex.json")
        return self._pokedex

    @property
    def moves(self) -> Dict[str, Any]:
        if self._moves is None:
            self._moves = self._load_json("moves.json")
        return self._moves

    @property
    def setup_index(self) -> Dict[str, Any]:
        if self._setup_index is None:
            try:
                self._setup_index = self._load_json("setup_index.json")
            except FileNotFoundError:
                logger.warning("setup_index.json not found in %s; species-based setup detection is off", self.data_dir)
                self._setup_index = {}
        return self._setup_index

    def _load_json(self, filename: str) -> Dict[str, Any]:
        path = self.data_dir / filename
        if not path.exists():
            raise FileNotFoundError(
                f"Required data file '{filename}' not found in {self.data_dir}. "
                "Run scripts/fetch_showdown_data.py to download the latest dataset."
            )
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)

    @lru_cache(maxsize=1024)
    def get_species(self, name: str) -> Optional[SpeciesEntry]:
        key = normalize_id(name)
        data = self.pokedex.get(key)
        if not data:
            if key:
                logger.warning("Unknown species '%s'", name)
            return None
        return SpeciesEntry(
            id=key,
            name=data.get("name", name),
            types=tuple(data.get("types", []))[:2],
            abilities=data.get("abilities", {}),
        )

    def species_types(self, name: str) -> Tuple[str, ...]:
        """Types of the species; empty for unknown ids."""
        entry = self.get_species(name)
        return entry.types if entry else ()

    def species_name(self, name: str) -> str:
        entry = self.get_species(name)
        return entry.name if entry else name

    @lru_cache(maxsize=2048)
    def get_move(self, name: str) -> Optional[MoveDescriptor]:
        key = normalize_id(name)
        data = self.moves.get(key)
        if not data:
            if key:
                logger.warning("Unknown move '%s'", name)
            return None
        return _move_from_payload(key, data)

    def move_table(self) -> Mapping[str, MoveDescriptor]:
        """Whole move dictionary keyed by id, built once."""
        if self._move_table is None:
            self._move_table = {key: _move_from_payload(key, data) for key, data in self.moves.items() if data}
        return self._move_table

    def setup_species(self) -> Dict[str, FrozenSet[str]]:
        return {
            normalize_id(move): frozenset(normalize_id(species) for species in species_list or [])
            for move, species_list in self.setup_index.items()
        }

    def setup_knowledge(self) -> SetupKnowledge:
        return SetupKnowledge.default(self.setup_species())


def _move_from_payload(key: str, data: Mapping[str, Any]) -> MoveDescriptor:
    return MoveDescriptor(
        id=key,
        type=data.get("type", "Normal"),
        category=MoveCategory.parse(data.get("category")),
        base_power=int(data.get("basePower", 0) or 0),
        name=data.get("name", key),
    )
