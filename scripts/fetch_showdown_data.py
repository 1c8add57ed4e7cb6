#!/usr/bin/env python3
"""
Download Pokémon Showdown data files and derive the setup index.

Usage:
    python scripts/fetch_showdown_data.py --output data/showdown
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List

import requests

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parents[1] / "data" / "showdown"
BASE_URL = "https://play.pokemonshowdown.com/data/"
SOURCES = {
    "pokedex.json": BASE_URL + "pokedex.json",
    "moves.json": BASE_URL + "moves.json",
    "learnsets.json": BASE_URL + "learnsets.json",
}
SETUP_MOVES = ("dragondance", "swordsdance")


def download(target_dir: Path, session: requests.Session) -> Dict[str, Any]:
    target_dir.mkdir(parents=True, exist_ok=True)
    payloads = {}
    for filename, url in SOURCES.items():
        target = target_dir / filename
        logger.info("Downloading %s -> %s", url, target)
        response = session.get(url, timeout=60)
        response.raise_for_status()
        payloads[filename] = response.json()
        with target.open("w", encoding="utf-8") as handle:
            json.dump(payloads[filename], handle)
    return payloads


def build_setup_index(learnsets: Dict[str, Any], moves: Iterable[str] = SETUP_MOVES) -> Dict[str, List[str]]:
    """Species ids that can learn each setup move."""
    index: Dict[str, List[str]] = {move: [] for move in moves}
    for species_id, entry in sorted(learnsets.items()):
        learnset = (entry or {}).get("learnset") or {}
        for move in index:
            if move in learnset:
                index[move].append(species_id)
    return index


def main() -> None:
    parser = argparse.ArgumentParser(description="Fetch Showdown reference data")
    parser.add_argument("--output", type=Path, default=DATA_DIR, help="Output directory")
    args = parser.parse_args()

    with requests.Session() as session:
        payloads = download(args.output, session)

    index = build_setup_index(payloads["learnsets.json"])
    target = args.output / "setup_index.json"
    with target.open("w", encoding="utf-8") as handle:
        json.dump(index, handle)
    logger.info("Wrote %s (%s)", target, ", ".join(f"{k}: {len(v)}" for k, v in index.items()))


if __name__ == "__main__":
    main()
