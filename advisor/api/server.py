"""Optional HTTP interface around recommend_actions."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, Optional

try:
    from fastapi import Depends, FastAPI
    from fastapi.middleware.cors import CORSMiddleware
    from pydantic import BaseModel, Field
except ImportError as exc:  # pragma: no cover - optional dependency
    raise RuntimeError(
        "FastAPI is not installed. Run `pip install fastapi uvicorn` to use the HTTP API."
    ) from exc

from advisor.core.recommender import ActionRecommender
from advisor.data.reference_loader import ReferenceDataRepository
from advisor.engine.state_rebuilder import StateRebuilder


class RecommendRequest(BaseModel):
    handoff: Dict[str, Any]
    self_active: Optional[int] = None
    opponent_active: Optional[int] = None
    self_health: Optional[float] = Field(default=None, ge=0, le=100)
    opponent_health: Optional[float] = Field(default=None, ge=0, le=100)
    ally_health: Dict[int, float] = Field(default_factory=dict)
    consider_setup: bool = True
    consider_no_switch: bool = True
    scenario: Optional[str] = None


app = FastAPI(title="Pick Lab Advisor", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_repository() -> ReferenceDataRepository:
    return ReferenceDataRepository()


@app.post("/recommend")
def recommend_endpoint(
    payload: RecommendRequest,
    repository: ReferenceDataRepository = Depends(get_repository),
):
    context = StateRebuilder(repository).rebuild(
        payload.handoff,
        self_active=payload.self_active,
        opponent_active=payload.opponent_active,
        self_health=payload.self_health,
        opponent_health=payload.opponent_health,
        ally_health=payload.ally_health,
        consider_setup=payload.consider_setup,
        consider_no_switch=payload.consider_no_switch,
        scenario=payload.scenario,
    )
    recommender = ActionRecommender(repository.move_table(), repository.setup_knowledge())
    return recommender.recommend(context).to_dict()
