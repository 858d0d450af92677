"""
Tests for Round of 32 generation.
"""

import pytest

from tests.bracket_builders import make_standings, make_wildcards
from wc26.errors import InvalidBracketInput
from wc26.services.bracket_generator import generate_round_of_32, wildcard_groups
from wc26.utils.seeding_table import wildcard_slot_indexes

EXPECTED_DEFAULT = [
    ("A2", "B2"),
    ("C1", "F2"),
    ("E1", "A3"),
    ("F1", "C2"),
    ("E2", "I2"),
    ("I1", "C3"),
    ("A1", "E3"),
    ("L1", "H3"),
    ("G1", "B3"),  # no pick from A/E/H/I/J left: falls back to next in list
    ("D1", "F3"),
    ("H1", "J2"),
    ("K2", "L2"),
    ("B1", "G3"),
    ("D2", "G2"),
    ("J1", "H2"),
    ("K1", "D3"),
]


class TestGenerateRoundOf32:
    def test_matches_seeding_table(self):
        matches = generate_round_of_32(make_standings(), make_wildcards())
        assert [(m.team1, m.team2) for m in matches] == EXPECTED_DEFAULT
        assert [m.id for m in matches] == [f"r32-{i}" for i in range(1, 17)]
        assert all(m.winner is None for m in matches)

    def test_no_team_twice(self):
        matches = generate_round_of_32(make_standings(), make_wildcards())
        teams = [t for m in matches for t in (m.team1, m.team2)]
        assert len(teams) == 32
        assert len(set(teams)) == 32

    def test_every_wildcard_used(self):
        wildcards = make_wildcards("BDFHIJKL")
        matches = generate_round_of_32(make_standings(), wildcards)
        drawn = [matches[i].team2 for i in wildcard_slot_indexes()]
        assert sorted(drawn) == sorted(wildcards)

    def test_assignment_depends_on_list_order(self):
        wildcards = list(reversed(make_wildcards()))
        matches = generate_round_of_32(make_standings(), wildcards)
        drawn = [matches[i].team2 for i in wildcard_slot_indexes()]
        assert drawn == ["F3", "H3", "E3", "G3", "A3", "B3", "D3", "C3"]

    def test_three_ranked_teams_are_enough(self):
        standings = {g: teams[:3] for g, teams in make_standings().items()}
        matches = generate_round_of_32(standings, make_wildcards())
        assert len(matches) == 16

    def test_missing_group(self):
        standings = make_standings()
        del standings["L"]
        with pytest.raises(InvalidBracketInput) as exc:
            generate_round_of_32(standings, make_wildcards())
        assert exc.value.context["group"] == "L"

    def test_short_group(self):
        standings = make_standings()
        standings["C"] = ["C1", "C2"]
        with pytest.raises(InvalidBracketInput):
            generate_round_of_32(standings, make_wildcards())

    @pytest.mark.parametrize("groups", ["ABCDEFG", "ABCDEFGHI"])
    def test_wrong_wildcard_count(self, groups):
        with pytest.raises(InvalidBracketInput):
            generate_round_of_32(make_standings(), make_wildcards(groups))


class TestWildcardGroups:
    def test_maps_third_place_to_group(self):
        origin = wildcard_groups(make_standings(), ["C3", "K3"])
        assert origin == {"C3": "C", "K3": "K"}

    def test_non_third_place_team_not_mapped(self):
        assert wildcard_groups(make_standings(), ["C1"]) == {}
