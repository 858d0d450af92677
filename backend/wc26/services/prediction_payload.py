"""
Typed prediction payload.

Wire format is the camelCase JSON sent by the bracket builder UI; attributes are
snake_case and either spelling is accepted on input.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from wc26.errors import InvalidBracketInput
from wc26.utils.seeding_table import Stage

TeamId = str


class BracketMatch(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    team1: Optional[TeamId] = None
    team2: Optional[TeamId] = None
    winner: Optional[TeamId] = None

    @property
    def loser(self) -> Optional[TeamId]:
        if not self.winner:
            return None
        return self.team2 if self.winner == self.team1 else self.team1

    def teams(self) -> List[Optional[TeamId]]:
        return [self.team1, self.team2]


class PredictionPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    group_standings: Dict[str, List[TeamId]] = Field(alias="groupStandings")
    third_place_teams: List[TeamId] = Field(alias="thirdPlaceTeams")
    round_of_32: Optional[List[BracketMatch]] = Field(default=None, alias="roundOf32")
    round_of_16: Optional[List[BracketMatch]] = Field(default=None, alias="roundOf16")
    quarter_finals: Optional[List[BracketMatch]] = Field(default=None, alias="quarterFinals")
    semi_finals: Optional[List[BracketMatch]] = Field(default=None, alias="semiFinals")
    final: Optional[BracketMatch] = None
    third_place: Optional[BracketMatch] = Field(default=None, alias="thirdPlace")
    champion: Optional[TeamId] = None
    runner_up: Optional[TeamId] = Field(default=None, alias="runnerUp")

    def matches_for(self, stage: Stage) -> Optional[List[BracketMatch]]:
        """Matches submitted for ``stage``; single-match stages come back as a 1-item list."""
        value = {
            Stage.ROUND_OF_32: self.round_of_32,
            Stage.ROUND_OF_16: self.round_of_16,
            Stage.QUARTER_FINALS: self.quarter_finals,
            Stage.SEMI_FINALS: self.semi_finals,
            Stage.FINAL: self.final,
            Stage.THIRD_PLACE: self.third_place,
        }[stage]
        if value is None:
            return None
        if isinstance(value, BracketMatch):
            return [value]
        return value

    def has_bracket(self) -> bool:
        return any(self.matches_for(stage) is not None for stage in Stage)

    def with_results(self) -> "PredictionPayload":
        """
        Copy with champion / runner-up taken from the Final.

        Every hashed form of a prediction goes through here, so a payload hashes
        the same whether or not the caller filled these in.

        Raises:
            InvalidBracketInput: a supplied value contradicts the Final
        """
        final = self.final
        decided = final is not None and bool(final.winner)
        champion = final.winner if decided else None
        runner_up = final.loser if decided else None

        for label, supplied, derived in (
            ("champion", self.champion, champion),
            ("runnerUp", self.runner_up, runner_up),
        ):
            if supplied and supplied != derived:
                raise InvalidBracketInput(
                    f"{label} {supplied} does not match the Final result",
                    field=label,
                    expected=derived,
                )

        return self.model_copy(update={"champion": champion, "runner_up": runner_up})
