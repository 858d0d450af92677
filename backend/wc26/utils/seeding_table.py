"""
Knockout seeding and round-transition tables.

Static data only. Group letters, the Round of 32 cross-bracket seeding and the
index pairing used to build each later round from the previous one.

Round of 32 rows are 1-based in match ids (r32-1 .. r32-16) but every table
index below is 0-based.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

GROUP_LETTERS: Tuple[str, ...] = ("A", "B", "C", "D", "E", "F", "G", "H", "I", "J", "K", "L")
TEAMS_PER_GROUP = 4
WILDCARD_COUNT = 8

# Positions inside a group standing
WINNER = 0
RUNNER_UP = 1
THIRD_PLACE = 2


class Stage(str, Enum):
    ROUND_OF_32 = "roundOf32"
    ROUND_OF_16 = "roundOf16"
    QUARTER_FINALS = "quarterFinals"
    SEMI_FINALS = "semiFinals"
    FINAL = "final"
    THIRD_PLACE = "thirdPlace"

    @property
    def display_name(self) -> str:
        return STAGE_DISPLAY_NAMES[self]

    @property
    def match_count(self) -> int:
        return STAGE_MATCH_COUNTS[self]


STAGE_DISPLAY_NAMES = {
    Stage.ROUND_OF_32: "Round of 32",
    Stage.ROUND_OF_16: "Round of 16",
    Stage.QUARTER_FINALS: "Quarter Final",
    Stage.SEMI_FINALS: "Semi Final",
    Stage.FINAL: "Final",
    Stage.THIRD_PLACE: "Third Place",
}

STAGE_MATCH_COUNTS = {
    Stage.ROUND_OF_32: 16,
    Stage.ROUND_OF_16: 8,
    Stage.QUARTER_FINALS: 4,
    Stage.SEMI_FINALS: 2,
    Stage.FINAL: 1,
    Stage.THIRD_PLACE: 1,
}

# Validation order
STAGE_ORDER: Tuple[Stage, ...] = (
    Stage.ROUND_OF_32,
    Stage.ROUND_OF_16,
    Stage.QUARTER_FINALS,
    Stage.SEMI_FINALS,
    Stage.FINAL,
    Stage.THIRD_PLACE,
)


@dataclass(frozen=True)
class GroupSeed:
    """A direct seed: the team finishing at ``position`` in ``group``."""
    group: str
    position: int

    def label(self) -> str:
        return f"{self.position + 1}{self.group}"


@dataclass(frozen=True)
class WildcardSeed:
    """A third-place team drawn from one of ``allowed_groups``."""
    allowed_groups: Tuple[str, ...]

    def label(self) -> str:
        return "3" + "/".join(self.allowed_groups)


@dataclass(frozen=True)
class RoundOf32Slot:
    match_id: str
    team1: GroupSeed
    team2: Union[GroupSeed, WildcardSeed]

    @property
    def is_wildcard(self) -> bool:
        return isinstance(self.team2, WildcardSeed)


def _w(group: str) -> GroupSeed:
    return GroupSeed(group, WINNER)


def _r(group: str) -> GroupSeed:
    return GroupSeed(group, RUNNER_UP)


def _third(*groups: str) -> WildcardSeed:
    return WildcardSeed(tuple(groups))


# Row order is also the wildcard consumption order.
ROUND_OF_32_SEEDING: Tuple[RoundOf32Slot, ...] = (
    RoundOf32Slot("r32-1", _r("A"), _r("B")),
    RoundOf32Slot("r32-2", _w("C"), _r("F")),
    RoundOf32Slot("r32-3", _w("E"), _third("A", "B", "C", "D", "F")),
    RoundOf32Slot("r32-4", _w("F"), _r("C")),
    RoundOf32Slot("r32-5", _r("E"), _r("I")),
    RoundOf32Slot("r32-6", _w("I"), _third("C", "D", "F", "G", "H")),
    RoundOf32Slot("r32-7", _w("A"), _third("C", "E", "F", "H", "I")),
    RoundOf32Slot("r32-8", _w("L"), _third("E", "H", "I", "J", "K")),
    RoundOf32Slot("r32-9", _w("G"), _third("A", "E", "H", "I", "J")),
    RoundOf32Slot("r32-10", _w("D"), _third("B", "E", "F", "I", "J")),
    RoundOf32Slot("r32-11", _w("H"), _r("J")),
    RoundOf32Slot("r32-12", _r("K"), _r("L")),
    RoundOf32Slot("r32-13", _w("B"), _third("E", "F", "G", "I", "J")),
    RoundOf32Slot("r32-14", _r("D"), _r("G")),
    RoundOf32Slot("r32-15", _w("J"), _r("H")),
    RoundOf32Slot("r32-16", _w("K"), _third("D", "E", "I", "J", "L")),
)

# target match index -> (source index for team1, source index for team2)
ROUND_OF_16_PAIRINGS: Tuple[Tuple[int, int], ...] = (
    (0, 2),
    (1, 4),
    (3, 5),
    (6, 7),
    (10, 11),
    (8, 9),
    (13, 15),
    (12, 14),
)

QUARTER_FINAL_PAIRINGS: Tuple[Tuple[int, int], ...] = (
    (1, 0),
    (4, 5),
    (2, 3),
    (7, 6),
)

SEMI_FINAL_PAIRINGS: Tuple[Tuple[int, int], ...] = (
    (0, 2),
    (1, 3),
)

# Final takes semi-final winners, third place takes semi-final losers.
FINAL_PAIRINGS: Tuple[Tuple[int, int], ...] = ((0, 1),)
THIRD_PLACE_PAIRINGS: Tuple[Tuple[int, int], ...] = ((0, 1),)


@dataclass(frozen=True)
class RoundTransition:
    """``target`` is built from ``source`` by pairing source matches per ``pairings``."""
    target: Stage
    source: Stage
    pairings: Tuple[Tuple[int, int], ...]
    takes_losers: bool = False


ROUND_TRANSITIONS: Tuple[RoundTransition, ...] = (
    RoundTransition(Stage.ROUND_OF_16, Stage.ROUND_OF_32, ROUND_OF_16_PAIRINGS),
    RoundTransition(Stage.QUARTER_FINALS, Stage.ROUND_OF_16, QUARTER_FINAL_PAIRINGS),
    RoundTransition(Stage.SEMI_FINALS, Stage.QUARTER_FINALS, SEMI_FINAL_PAIRINGS),
    RoundTransition(Stage.FINAL, Stage.SEMI_FINALS, FINAL_PAIRINGS),
    RoundTransition(Stage.THIRD_PLACE, Stage.SEMI_FINALS, THIRD_PLACE_PAIRINGS, takes_losers=True),
)


def transition_into(stage: Stage) -> RoundTransition:
    for transition in ROUND_TRANSITIONS:
        if transition.target is stage:
            return transition
    raise KeyError(f"No round feeds {stage.value}")


def wildcard_slot_indexes() -> Tuple[int, ...]:
    """Indexes of Round of 32 matches whose second team is a wildcard."""
    return tuple(i for i, slot in enumerate(ROUND_OF_32_SEEDING) if slot.is_wildcard)
