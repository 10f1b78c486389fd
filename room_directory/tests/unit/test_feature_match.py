# room_directory/tests/unit/test_feature_match.py

"""
Unit tests for the storage-agnostic feature matching helpers.
"""

from itertools import combinations

import pytest

from room_directory.services.directory.feature_match import (
    group_by_room,
    group_feature_ids,
    rooms_with_all_features,
)


LINKS = [
    ("R1", "F1"),
    ("R1", "F2"),
    ("R2", "F2"),
    ("R3", "F1"),
    ("R4", "F1"),
    ("R4", "F2"),
    ("R4", "F3"),
]
CANDIDATES = ["R4", "R5", "R1", "R2", "R3"]


class TestGroupFeatureIds:
    def test_groups_links_per_room(self):
        grouped = group_feature_ids(LINKS)

        assert grouped == {
            "R1": {"F1", "F2"},
            "R2": {"F2"},
            "R3": {"F1"},
            "R4": {"F1", "F2", "F3"},
        }

    def test_empty_input(self):
        assert group_feature_ids([]) == {}


class TestRoomsWithAllFeatures:
    def test_requires_every_feature(self):
        assert rooms_with_all_features(CANDIDATES, LINKS, ["F1", "F2"]) == ["R4", "R1"]

    def test_single_feature(self):
        assert rooms_with_all_features(CANDIDATES, LINKS, ["F3"]) == ["R4"]

    def test_unknown_feature_matches_nothing(self):
        assert rooms_with_all_features(CANDIDATES, LINKS, ["F1", "F99"]) == []

    def test_no_requirement_keeps_all_candidates_in_order(self):
        assert rooms_with_all_features(CANDIDATES, LINKS, []) == CANDIDATES

    def test_room_without_links_never_matches(self):
        assert "R5" not in rooms_with_all_features(CANDIDATES, LINKS, ["F2"])

    def test_duplicate_requirements_are_collapsed(self):
        assert rooms_with_all_features(CANDIDATES, LINKS, ["F2", "F2"]) == [
            "R4",
            "R1",
            "R2",
        ]

    def test_links_outside_candidates_are_ignored(self):
        assert rooms_with_all_features(["R2"], LINKS, ["F1"]) == []

    def test_accepts_generators(self):
        result = rooms_with_all_features(
            (c for c in CANDIDATES), iter(LINKS), {"F1"}
        )
        assert result == ["R4", "R1", "R3"]

    @pytest.mark.parametrize("size", [1, 2, 3])
    def test_superset_is_sound_and_complete(self, size):
        grouped = group_feature_ids(LINKS)
        for required in combinations(["F1", "F2", "F3", "F4"], size):
            result = set(rooms_with_all_features(CANDIDATES, LINKS, required))
            expected = {
                room
                for room in CANDIDATES
                if set(required) <= grouped.get(room, set())
            }
            assert result == expected, required


class TestGroupByRoom:
    def test_buckets_rows_and_drops_key(self):
        rows = [
            {"room_id": "R1", "id": "F2", "name": "Whiteboard"},
            {"room_id": "R4", "id": "F3", "name": "Microphone"},
            {"room_id": "R1", "id": "F1", "name": "Projector"},
        ]

        grouped = group_by_room(rows)

        assert grouped == {
            "R1": [
                {"id": "F2", "name": "Whiteboard"},
                {"id": "F1", "name": "Projector"},
            ],
            "R4": [{"id": "F3", "name": "Microphone"}],
        }

    def test_does_not_mutate_input(self):
        rows = [{"room_id": "R1", "id": "F1"}]
        group_by_room(rows)
        assert rows == [{"room_id": "R1", "id": "F1"}]
