"""
Tests for the team roster normalizer and tool.
"""

import json

import pytest

from nhl_mcp import roster_tools
from nhl_mcp.roster_tools import normalize_roster, normalize_player, GROUP_RANK


def _raw(pid, first, last, number=None, position="C", **extra):
    entry = {
        "id": pid,
        "firstName": {"default": first},
        "lastName": {"default": last},
        "positionCode": position,
    }
    if number is not None:
        entry["sweaterNumber"] = number
    entry.update(extra)
    return entry


SAMPLE_ROSTER = {
    "forwards": [
        _raw(8476453, "Nikita", "Kucherov", 86, "R", shootsCatches="L", headshot="https://assets/86.png"),
        _raw(8474870, "Brandon", "Hagel", 38, "L"),
        _raw(8480000, "Scratch", "Zed", None, "C"),
        _raw(8480001, "Scratch", "Abel", None, "C"),
        _raw(8478010, "Brayden", "Point", 21, "C"),
    ],
    "defensemen": [
        _raw(8476292, "Victor", "Hedman", 77, "D"),
        _raw(8477948, "Erik", "Cernak", 81, "D"),
    ],
    "goalies": [
        _raw(8476883, "Andrei", "Vasilevskiy", 88, "G", shootsCatches="L"),
        _raw(8480100, "Backup", "Goalie", 1, "G"),
    ],
}


class TestNormalizePlayer:
    """Test the per-player default table."""

    def test_full_entry(self):
        player = normalize_player(SAMPLE_ROSTER["forwards"][0], "forwards").to_dict()
        assert player == {
            "id": 8476453,
            "firstName": "Nikita",
            "lastName": "Kucherov",
            "number": 86,
            "positionCode": "R",
            "positionGroup": "forwards",
            "shootsCatches": "L",
            "headshot": "https://assets/86.png",
            "profileLink": "https://www.nhl.com/player/8476453",
        }

    def test_missing_names_default_to_empty_strings(self):
        player = normalize_player({"id": 1, "positionCode": "D"}, "defensemen").to_dict()
        assert player["firstName"] == ""
        assert player["lastName"] == ""

    def test_missing_optional_fields_are_unset_not_zero(self):
        player = normalize_player({"id": 1, "positionCode": "C"}, "forwards").to_dict()
        for key in ("number", "shootsCatches", "headshot"):
            assert key not in player

    def test_profile_link_requires_id(self):
        player = normalize_player({"firstName": {"default": "No"}, "lastName": {"default": "Id"}}, "forwards").to_dict()
        assert "id" not in player
        assert "profileLink" not in player

    def test_bare_string_name_is_not_a_locale_wrapper(self):
        player = normalize_player({"id": 2, "firstName": "Bare", "lastName": {"fr": "X"}}, "forwards").to_dict()
        assert player["firstName"] == ""
        assert player["lastName"] == ""


class TestRosterOrdering:
    """Test the composite roster sort key."""

    def test_groups_then_number_then_last_name(self):
        result = normalize_roster("TBL", SAMPLE_ROSTER)
        names = [p["lastName"] for p in result["players"]]
        assert names == [
            "Point", "Hagel", "Kucherov", "Abel", "Zed",
            "Hedman", "Cernak",
            "Goalie", "Vasilevskiy",
        ]

    def test_ordering_properties_hold(self):
        players = normalize_roster("TBL", SAMPLE_ROSTER)["players"]
        for a, b in zip(players, players[1:]):
            rank_a, rank_b = GROUP_RANK[a["positionGroup"]], GROUP_RANK[b["positionGroup"]]
            assert rank_a <= rank_b
            if rank_a == rank_b:
                num_a, num_b = a.get("number", 999), b.get("number", 999)
                assert num_a <= num_b
                if num_a == num_b:
                    assert a["lastName"] <= b["lastName"]

    def test_equal_numbers_tie_break_is_case_sensitive(self):
        data = {"forwards": [_raw(1, "a", "adams", 10), _raw(2, "b", "Zane", 10)]}
        names = [p["lastName"] for p in normalize_roster("TBL", data)["players"]]
        assert names == ["Zane", "adams"]

    def test_forward_precedes_goalie_example(self):
        data = {
            "forwards": [_raw(1, "Nikita", "Kucherov", 88, "R")],
            "goalies": [_raw(2, "Andrei", "Vasilevskiy", 35, "G")],
        }
        names = [p["lastName"] for p in normalize_roster("TBL", data)["players"]]
        assert names == ["Kucherov", "Vasilevskiy"]

    def test_missing_groups_are_empty(self):
        result = normalize_roster("TBL", {"goalies": [_raw(1, "G", "Only", 30, "G")]})
        assert len(result["players"]) == 1
        assert normalize_roster("TBL", {}) == {"team": "TBL", "players": []}

    def test_normalizing_twice_is_byte_identical(self):
        first = json.dumps(normalize_roster("TBL", SAMPLE_ROSTER))
        second = json.dumps(normalize_roster("TBL", SAMPLE_ROSTER))
        assert first == second


class TestGetTeamRoster:
    """Test the roster operation end to end with a fake upstream."""

    @pytest.mark.asyncio
    async def test_success_envelope(self, fake_upstream):
        client = fake_upstream(SAMPLE_ROSTER)
        result = await roster_tools.get_team_roster("tbl")

        assert result["isError"] is False
        assert result["structuredContent"]["team"] == "TBL"
        assert result["summaryText"] == "TBL roster: 9 players"
        assert client.requests[0]["url"] == "https://api-web.nhle.com/v1/roster/TBL/current"

    @pytest.mark.asyncio
    async def test_upstream_failure_is_error_envelope(self, fake_upstream):
        fake_upstream({"message": "nope"}, status_code=404, reason_phrase="Not Found")
        result = await roster_tools.get_team_roster("XYZ")

        assert result["isError"] is True
        assert "structuredContent" not in result
        assert result["summaryText"].startswith("Error: ")
        assert "roster for XYZ" in result["summaryText"]
        assert "404" in result["summaryText"]
