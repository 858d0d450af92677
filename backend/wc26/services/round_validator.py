"""
Knockout bracket validation.

Each round is checked against the round before it, never further back:

    R32 (vs generated R32) -> R16 -> QF -> SF -> Final + Third place

Every transition after the Round of 32 comes from ROUND_TRANSITIONS: a target
match takes the winners (losers, for third place) of two source matches.

Team pairs are compared in order: team1 must come from the first source match
and team2 from the second. A swapped pair is a mismatch.

Round of 32 is lenient on wildcard rows only: team1 (the direct seed) must match
exactly, team2 may be any selected wildcard team not already used in the round.
"""

import logging
from typing import List, Optional, Sequence, Set

from wc26.errors import (
    DuplicateMatchInRound,
    DuplicateTeamInMatch,
    IncompleteMatch,
    InvalidBracketInput,
    InvalidWinner,
    PairingMismatch,
    WrongMatchCount,
)
from wc26.services.prediction_payload import BracketMatch, PredictionPayload, TeamId
from wc26.utils.seeding_table import (
    ROUND_OF_32_SEEDING,
    ROUND_TRANSITIONS,
    STAGE_ORDER,
    RoundTransition,
    Stage,
    transition_into,
)

logger = logging.getLogger(__name__)


def _advancing(matches: Sequence[BracketMatch], index: int, takes_losers: bool) -> Optional[TeamId]:
    if index >= len(matches):
        return None
    match = matches[index]
    if takes_losers:
        return match.loser
    return match.winner or None


def _require_count(stage: Stage, submitted: Optional[Sequence[BracketMatch]]) -> None:
    actual = len(submitted) if submitted is not None else 0
    if actual != stage.match_count:
        raise WrongMatchCount(stage.display_name, stage.match_count, actual)


def _check_pair(stage: Stage, index: int, match: BracketMatch, expected_1, expected_2) -> None:
    if match.team1 != expected_1 or match.team2 != expected_2:
        raise PairingMismatch(
            stage.display_name,
            index,
            expected=[expected_1, expected_2],
            actual=match.teams(),
        )


def validate_transition(
    transition: RoundTransition,
    submitted: Sequence[BracketMatch],
    prior: Sequence[BracketMatch],
) -> None:
    """Validate ``submitted`` (the target round) against the source round ``prior``."""
    stage = transition.target
    _require_count(stage, submitted)
    for i, (source_1, source_2) in enumerate(transition.pairings):
        _check_pair(
            stage,
            i,
            submitted[i],
            _advancing(prior, source_1, transition.takes_losers),
            _advancing(prior, source_2, transition.takes_losers),
        )


# ============================================================================
# Per-round validators
# ============================================================================


def validate_round_of_32(
    submitted: Sequence[BracketMatch],
    expected: Sequence[BracketMatch],
    wildcards: Sequence[TeamId],
) -> None:
    """Validate the submitted Round of 32 against the generated one."""
    stage = Stage.ROUND_OF_32
    _require_count(stage, submitted)

    allowed_wildcards = set(wildcards)
    used_wildcards: Set[TeamId] = set()

    for i, slot in enumerate(ROUND_OF_32_SEEDING):
        match = submitted[i]
        want = expected[i]

        if not slot.is_wildcard:
            _check_pair(stage, i, match, want.team1, want.team2)
            continue

        if match.team1 != want.team1:
            raise PairingMismatch(
                stage.display_name,
                i,
                expected=[want.team1, want.team2],
                actual=match.teams(),
                message=f"Invalid {stage.display_name} match {i + 1}: team1 should be {want.team1}",
            )
        # Lenient side: any unused selected wildcard team is accepted.
        if match.team2 not in allowed_wildcards or match.team2 in used_wildcards:
            raise PairingMismatch(
                stage.display_name,
                i,
                expected=[want.team1, want.team2],
                actual=match.teams(),
                message=(
                    f"Invalid {stage.display_name} match {i + 1}: "
                    f"{match.team2} is not an available third place team"
                ),
            )
        used_wildcards.add(match.team2)


def validate_round_of_16(submitted: Sequence[BracketMatch], round_of_32: Sequence[BracketMatch]) -> None:
    validate_transition(transition_into(Stage.ROUND_OF_16), submitted, round_of_32)


def validate_quarter_finals(submitted: Sequence[BracketMatch], round_of_16: Sequence[BracketMatch]) -> None:
    validate_transition(transition_into(Stage.QUARTER_FINALS), submitted, round_of_16)


def validate_semi_finals(submitted: Sequence[BracketMatch], quarter_finals: Sequence[BracketMatch]) -> None:
    validate_transition(transition_into(Stage.SEMI_FINALS), submitted, quarter_finals)


def validate_final_matches(
    final: BracketMatch,
    third_place: BracketMatch,
    semi_finals: Sequence[BracketMatch],
) -> None:
    """Final is the two semi-final winners; third place is the two semi-final losers."""
    validate_transition(transition_into(Stage.FINAL), [final], semi_finals)
    validate_transition(transition_into(Stage.THIRD_PLACE), [third_place], semi_finals)


# ============================================================================
# Whole-round integrity
# ============================================================================


def check_round_integrity(stage: Stage, matches: Sequence[BracketMatch]) -> None:
    """
    Checks that hold for every round regardless of pairing:
    - both teams populated (no TBD at submission time)
    - team1 != team2
    - winner unset or one of the two teams
    - no unordered team pair repeated inside the round
    """
    name = stage.display_name
    seen_pairs: Set[frozenset] = set()

    for i, match in enumerate(matches):
        if not match.team1 or not match.team2:
            raise IncompleteMatch(f"{name} match {i + 1} is missing a team", name, i)
        if match.team1 == match.team2:
            raise DuplicateTeamInMatch(
                f"{name} match {i + 1} has {match.team1} on both sides", name, i, team=match.team1
            )
        if match.winner and match.winner not in (match.team1, match.team2):
            raise InvalidWinner(
                f"{name} match {i + 1}: winner {match.winner} is not playing in this match",
                name,
                i,
                winner=match.winner,
            )
        pair = frozenset((match.team1, match.team2))
        if pair in seen_pairs:
            raise DuplicateMatchInRound(
                f"{name} match {i + 1} repeats {match.team1} vs {match.team2}",
                name,
                i,
                teams=sorted(pair),
            )
        seen_pairs.add(pair)


def validate_bracket(payload: PredictionPayload, expected_round_of_32: Sequence[BracketMatch]) -> None:
    """
    Validate every submitted round of ``payload`` in order, stopping at the first error.

    A round may only be present when its source round is. Final and third
    place must be submitted together.
    """
    present: List[Stage] = [stage for stage in STAGE_ORDER if payload.matches_for(stage) is not None]

    for transition in ROUND_TRANSITIONS:
        if transition.target in present and transition.source not in present:
            raise InvalidBracketInput(
                f"{transition.target.display_name} submitted without {transition.source.display_name}",
                round=transition.target.display_name,
            )
    if (payload.final is None) != (payload.third_place is None):
        raise InvalidBracketInput("Final and Third Place must be submitted together")

    for stage in present:
        matches = payload.matches_for(stage)
        _require_count(stage, matches)
        check_round_integrity(stage, matches)

        if stage is Stage.ROUND_OF_32:
            validate_round_of_32(matches, expected_round_of_32, payload.third_place_teams)
        else:
            transition = transition_into(stage)
            validate_transition(transition, matches, payload.matches_for(transition.source))

    logger.debug(f"Bracket validated: {', '.join(s.display_name for s in present)}")
