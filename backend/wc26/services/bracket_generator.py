"""
Round of 32 generation from group standings and wildcard picks.

Seeding follows ROUND_OF_32_SEEDING row by row. Wildcard opponents are drawn
greedily from the wildcard list in its submitted order:
  1. take the first remaining team whose group is in the row's allowed set;
  2. otherwise take the next remaining team regardless of group.
Assigned teams leave the pool. This assignment order is fixed; changing it
changes which brackets validate and which hash as duplicates.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from wc26.errors import InvalidBracketInput
from wc26.services.prediction_payload import BracketMatch, TeamId
from wc26.utils.seeding_table import (
    GROUP_LETTERS,
    ROUND_OF_32_SEEDING,
    THIRD_PLACE,
    WILDCARD_COUNT,
    GroupSeed,
    WildcardSeed,
)

logger = logging.getLogger(__name__)


def wildcard_groups(standings: Mapping[str, Sequence[TeamId]], wildcards: Sequence[TeamId]) -> Dict[TeamId, str]:
    """Map each wildcard team to the first group (letter order) it finished third in."""
    third_by_group = {
        group: teams[THIRD_PLACE]
        for group, teams in sorted(standings.items())
        if teams and len(teams) > THIRD_PLACE
    }
    origin: Dict[TeamId, str] = {}
    for team in wildcards:
        for group, third in third_by_group.items():
            if third == team:
                origin[team] = group
                break
    return origin


class _WildcardPool:
    """Remaining wildcard teams, consumed in submitted order."""

    def __init__(self, wildcards: Sequence[TeamId], origin: Mapping[TeamId, str]):
        self._remaining: List[TeamId] = list(wildcards)
        self._origin = origin

    def draw(self, allowed_groups: Sequence[str]) -> Optional[TeamId]:
        for i, team in enumerate(self._remaining):
            group = self._origin.get(team)
            if group and group in allowed_groups:
                return self._remaining.pop(i)
        if self._remaining:
            return self._remaining.pop(0)
        return None


def _check_inputs(standings: Mapping[str, Sequence[TeamId]], wildcards: Sequence[TeamId]) -> None:
    for group in GROUP_LETTERS:
        teams = standings.get(group)
        if not teams or len(teams) <= THIRD_PLACE:
            raise InvalidBracketInput(
                f"Group {group} needs at least 3 ranked teams to seed the Round of 32",
                group=group,
            )
    if wildcards is None or len(wildcards) != WILDCARD_COUNT:
        raise InvalidBracketInput(
            f"Exactly {WILDCARD_COUNT} third place teams are required, got {len(wildcards or [])}",
        )


def generate_round_of_32(
    standings: Mapping[str, Sequence[TeamId]],
    wildcards: Sequence[TeamId],
) -> List[BracketMatch]:
    """
    Build the canonical Round of 32 for a set of group standings.

    Args:
        standings: group letter -> team ids in finishing order (1st first)
        wildcards: the 8 selected third place teams, in selection order

    Returns:
        16 matches in seeding-table order, winners unset

    Raises:
        InvalidBracketInput: a group is missing or short, or wildcard count != 8
    """
    _check_inputs(standings, wildcards)

    pool = _WildcardPool(wildcards, wildcard_groups(standings, wildcards))

    def resolve(seed) -> Optional[TeamId]:
        if isinstance(seed, GroupSeed):
            return standings[seed.group][seed.position]
        if isinstance(seed, WildcardSeed):
            return pool.draw(seed.allowed_groups)
        raise InvalidBracketInput(f"Unknown seed type: {seed!r}")

    matches = [
        BracketMatch(id=slot.match_id, team1=resolve(slot.team1), team2=resolve(slot.team2), winner=None)
        for slot in ROUND_OF_32_SEEDING
    ]

    logger.debug(f"Generated {len(matches)} Round of 32 matches")
    return matches
