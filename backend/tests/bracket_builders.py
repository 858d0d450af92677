"""
Builders for group standings, wildcard picks and fully consistent brackets.

Teams are named <group><finish>, e.g. "C1" won group C, "H3" finished third in H.
"""

import copy
from typing import Callable, Dict, List, Optional

from wc26.services.bracket_generator import generate_round_of_32
from wc26.utils.seeding_table import (
    FINAL_PAIRINGS,
    GROUP_LETTERS,
    QUARTER_FINAL_PAIRINGS,
    ROUND_OF_16_PAIRINGS,
    SEMI_FINAL_PAIRINGS,
    THIRD_PLACE_PAIRINGS,
)

Match = Dict[str, Optional[str]]
Pick = Callable[[Match], str]


def make_standings() -> Dict[str, List[str]]:
    return {g: [f"{g}1", f"{g}2", f"{g}3", f"{g}4"] for g in GROUP_LETTERS}


def make_wildcards(groups: str = "ABCDEFGH") -> List[str]:
    return [f"{g}3" for g in groups]


def pick_team1(match: Match) -> str:
    return match["team1"]


def pick_team2(match: Match) -> str:
    return match["team2"]


def _with_winners(matches: List[Match], pick: Pick) -> List[Match]:
    return [dict(m, winner=pick(m)) for m in matches]


def _next_round(prefix: str, prior: List[Match], pairings) -> List[Match]:
    return [
        {"id": f"{prefix}-{i}", "team1": prior[a]["winner"], "team2": prior[b]["winner"], "winner": None}
        for i, (a, b) in enumerate(pairings)
    ]


def _loser(match: Match) -> Optional[str]:
    return match["team2"] if match["winner"] == match["team1"] else match["team1"]


def build_payload(
    standings: Optional[Dict[str, List[str]]] = None,
    wildcards: Optional[List[str]] = None,
    pick: Pick = pick_team1,
) -> dict:
    """Complete camelCase prediction payload whose every round follows from the previous one."""
    standings = standings or make_standings()
    wildcards = wildcards or make_wildcards()

    r32 = _with_winners([m.model_dump() for m in generate_round_of_32(standings, wildcards)], pick)
    r16 = _with_winners(_next_round("r16", r32, ROUND_OF_16_PAIRINGS), pick)
    qf = _with_winners(_next_round("qf", r16, QUARTER_FINAL_PAIRINGS), pick)
    sf = _with_winners(_next_round("sf", qf, SEMI_FINAL_PAIRINGS), pick)
    final = _with_winners(_next_round("final", sf, FINAL_PAIRINGS), pick)[0]
    final["id"] = "final"
    a, b = THIRD_PLACE_PAIRINGS[0]
    third = {"id": "third-place", "team1": _loser(sf[a]), "team2": _loser(sf[b]), "winner": None}
    third["winner"] = pick(third)

    return {
        "groupStandings": standings,
        "thirdPlaceTeams": wildcards,
        "roundOf32": r32,
        "roundOf16": r16,
        "quarterFinals": qf,
        "semiFinals": sf,
        "final": final,
        "thirdPlace": third,
    }


def group_only_payload() -> dict:
    return {"groupStandings": make_standings(), "thirdPlaceTeams": make_wildcards()}


def flip_final(payload: dict) -> dict:
    """Same bracket with the other finalist winning."""
    changed = copy.deepcopy(payload)
    final = changed["final"]
    final["winner"] = final["team2"] if final["winner"] == final["team1"] else final["team1"]
    return changed
