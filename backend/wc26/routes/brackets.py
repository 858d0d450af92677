"""
Bracket builder endpoints.

Stateless: computes the Round of 32 the UI should display for a set of
group standings and third place picks.
"""

from typing import Dict, List

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from wc26.errors import PredictionError
from wc26.routes.errors import to_http_exception
from wc26.services.bracket_generator import generate_round_of_32
from wc26.services.prediction_payload import BracketMatch
from wc26.services.prediction_service import validate_group_data

router = APIRouter()


class RoundOf32Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    group_standings: Dict[str, List[str]] = Field(alias="groupStandings")
    third_place_teams: List[str] = Field(alias="thirdPlaceTeams")


@router.post("/brackets/round-of-32", response_model=List[BracketMatch])
def build_round_of_32(request: RoundOf32Request):
    try:
        validate_group_data(request.group_standings, request.third_place_teams)
        return generate_round_of_32(request.group_standings, request.third_place_teams)
    except PredictionError as e:
        raise to_http_exception(e)
