"""
Tests for the static knockout tables.
"""

from collections import Counter

import pytest

from wc26.utils.seeding_table import (
    GROUP_LETTERS,
    QUARTER_FINAL_PAIRINGS,
    ROUND_OF_16_PAIRINGS,
    ROUND_OF_32_SEEDING,
    ROUND_TRANSITIONS,
    RUNNER_UP,
    SEMI_FINAL_PAIRINGS,
    WINNER,
    GroupSeed,
    Stage,
    WildcardSeed,
    transition_into,
    wildcard_slot_indexes,
)


class TestRoundOf32Seeding:
    def test_sixteen_rows_in_id_order(self):
        assert [slot.match_id for slot in ROUND_OF_32_SEEDING] == [f"r32-{i}" for i in range(1, 17)]

    def test_every_winner_and_runner_up_seeded_once(self):
        direct = [slot.team1 for slot in ROUND_OF_32_SEEDING] + [
            slot.team2 for slot in ROUND_OF_32_SEEDING if not slot.is_wildcard
        ]
        counts = Counter((seed.group, seed.position) for seed in direct)
        for group in GROUP_LETTERS:
            assert counts[(group, WINNER)] == 1
            assert counts[(group, RUNNER_UP)] == 1
        assert len(direct) == 24

    def test_wildcard_rows(self):
        assert wildcard_slot_indexes() == (2, 5, 6, 7, 8, 9, 12, 15)
        for i in wildcard_slot_indexes():
            slot = ROUND_OF_32_SEEDING[i]
            assert slot.team1.position == WINNER
            assert isinstance(slot.team2, WildcardSeed)
            assert len(slot.team2.allowed_groups) == 5

    def test_known_rows(self):
        assert ROUND_OF_32_SEEDING[0].team1 == GroupSeed("A", RUNNER_UP)
        assert ROUND_OF_32_SEEDING[0].team2 == GroupSeed("B", RUNNER_UP)
        assert ROUND_OF_32_SEEDING[2].team1 == GroupSeed("E", WINNER)
        assert ROUND_OF_32_SEEDING[2].team2.allowed_groups == ("A", "B", "C", "D", "F")
        assert ROUND_OF_32_SEEDING[15].team1 == GroupSeed("K", WINNER)
        assert ROUND_OF_32_SEEDING[15].team2.allowed_groups == ("D", "E", "I", "J", "L")

    def test_labels(self):
        assert ROUND_OF_32_SEEDING[1].team1.label() == "1C"
        assert ROUND_OF_32_SEEDING[1].team2.label() == "2F"
        assert ROUND_OF_32_SEEDING[2].team2.label() == "3A/B/C/D/F"


class TestRoundTransitions:
    def test_each_source_feeds_exactly_one_match(self):
        for table, source_count in (
            (ROUND_OF_16_PAIRINGS, 16),
            (QUARTER_FINAL_PAIRINGS, 8),
            (SEMI_FINAL_PAIRINGS, 4),
        ):
            used = sorted(i for pair in table for i in pair)
            assert used == list(range(source_count))

    def test_round_of_16_is_not_sequential(self):
        assert ROUND_OF_16_PAIRINGS[0] == (0, 2)
        assert ROUND_OF_16_PAIRINGS[4] == (10, 11)

    def test_quarter_finals_put_later_match_first(self):
        assert QUARTER_FINAL_PAIRINGS == ((1, 0), (4, 5), (2, 3), (7, 6))

    def test_stage_sizes(self):
        assert [s.match_count for s in Stage] == [16, 8, 4, 2, 1, 1]
        assert Stage.QUARTER_FINALS.display_name == "Quarter Final"

    def test_every_later_stage_has_one_source(self):
        targets = [t.target for t in ROUND_TRANSITIONS]
        assert targets == [Stage.ROUND_OF_16, Stage.QUARTER_FINALS, Stage.SEMI_FINALS, Stage.FINAL, Stage.THIRD_PLACE]
        for transition in ROUND_TRANSITIONS:
            assert len(transition.pairings) == transition.target.match_count

    def test_final_and_third_place_come_from_semi_finals(self):
        final = transition_into(Stage.FINAL)
        third = transition_into(Stage.THIRD_PLACE)
        assert final.source is third.source is Stage.SEMI_FINALS
        assert final.takes_losers is False
        assert third.takes_losers is True

    def test_round_of_32_has_no_source_round(self):
        with pytest.raises(KeyError):
            transition_into(Stage.ROUND_OF_32)
