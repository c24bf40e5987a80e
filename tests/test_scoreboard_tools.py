"""
Tests for the scoreboard normalizer and tool.
"""

import json

import pytest

from nhl_mcp import scoreboard_tools
from nhl_mcp.scoreboard_tools import RELEVANT_STATES, normalize_scoreboard, normalize_game
from nhl_mcp.normalization import parse_instant


def _game(state, start, home="TBL", away="BOS", **extra):
    game = {
        "gameState": state,
        "gameDate": start[:10],
        "startTimeUTC": start,
        "venue": {"default": "Amalie Arena"},
        "homeTeam": {"abbrev": home, "name": {"default": "Lightning"}, "record": "3-1-0", "logo": f"https://logos/{home}.svg"},
        "awayTeam": {"abbrev": away, "name": {"default": "Bruins"}, "record": "2-2-0", "logo": f"https://logos/{away}.svg"},
        "tvBroadcasts": [{"network": "ESPN"}, {"network": "SN"}],
        "gameCenterLink": f"/gamecenter/{away.lower()}-vs-{home.lower()}/2026/10/21/2026020100",
        "ticketsLink": "https://tickets.example/tbl",
    }
    game.update(extra)
    return game


SAMPLE_SCOREBOARD = {
    "focusedDate": "2026-10-21",
    "gamesByDate": [
        {"date": "2026-10-19", "games": [_game("OFF", "2026-10-19T23:00:00Z", homeTeam={"abbrev": "TBL", "score": 4})]},
        {"date": "2026-10-21", "games": [_game("LIVE", "2026-10-21T23:00:00Z")]},
        {"date": "2026-10-23", "games": [_game("FUT", "2026-10-23T23:30:00Z", home="FLA", away="TBL")]},
        {"date": "2026-10-22", "games": [_game("PRE", "2026-10-22T00:00:00Z"), _game("PPD", "2026-10-22T01:00:00Z")]},
    ],
}


class TestNormalizeScoreboard:
    """Test filtering, ordering and field mapping."""

    def test_filters_to_relevant_states(self):
        games = normalize_scoreboard("TBL", SAMPLE_SCOREBOARD)["games"]
        assert [g["state"] for g in games] == ["LIVE", "PRE", "FUT"]
        assert all(g["state"] in RELEVANT_STATES for g in games)

    def test_sorted_by_start_time(self):
        games = normalize_scoreboard("TBL", SAMPLE_SCOREBOARD)["games"]
        starts = [parse_instant(g["startTimeUTC"]) for g in games]
        assert starts == sorted(starts)

    def test_start_times_compare_as_instants_not_strings(self):
        data = {"gamesByDate": [{"date": "2026-10-21", "games": [
            _game("FUT", "2026-10-21T20:00:00-05:00"),
            _game("FUT", "2026-10-21T23:30:00Z"),
        ]}]}
        games = normalize_scoreboard("TBL", data)["games"]
        assert [g["startTimeUTC"] for g in games] == ["2026-10-21T23:30:00Z", "2026-10-21T20:00:00-05:00"]

    def test_field_mapping(self):
        game = normalize_scoreboard("TBL", SAMPLE_SCOREBOARD)["games"][0]
        assert game["date"] == "2026-10-21"
        assert game["venue"] == "Amalie Arena"
        assert game["home"] == {"abbrev": "TBL", "name": "Lightning", "record": "3-1-0", "logo": "https://logos/TBL.svg"}
        assert game["tv"] == ["ESPN", "SN"]
        assert game["links"]["gameCenter"].startswith("https://www.nhl.com/gamecenter/")
        assert game["links"]["tickets"] == "https://tickets.example/tbl"

    def test_score_only_when_numeric(self):
        raw = _game("LIVE", "2026-10-21T23:00:00Z")
        raw["homeTeam"]["score"] = 0
        raw["awayTeam"]["score"] = "2"
        game = normalize_game(raw).to_dict()
        assert game["home"]["score"] == 0
        assert "score" not in game["away"]

    def test_sparse_game_defaults(self):
        game = normalize_game({"gameState": "FUT", "startTimeUTC": "2026-10-21T23:00:00Z"}, "2026-10-21").to_dict()
        assert game["date"] == "2026-10-21"
        assert game["venue"] == ""
        assert game["home"] == {"abbrev": "", "name": "", "logo": ""}
        assert game["tv"] == []
        assert game["links"] == {}

    def test_empty_network_names_dropped(self):
        raw = _game("FUT", "2026-10-21T23:00:00Z", tvBroadcasts=[{"network": "TNT"}, {}, {"network": ""}])
        assert normalize_game(raw).to_dict()["tv"] == ["TNT"]

    def test_absolute_game_center_link_passes_through(self):
        raw = _game("FUT", "2026-10-21T23:00:00Z", gameCenterLink="https://example.com/gc")
        assert normalize_game(raw).to_dict()["links"]["gameCenter"] == "https://example.com/gc"

    def test_non_string_game_state_dropped(self):
        data = {"gamesByDate": [{"date": "2026-10-21", "games": [
            _game({"code": "LIVE"}, "2026-10-21T23:00:00Z"),
            _game(["LIVE"], "2026-10-21T23:30:00Z"),
            _game("FUT", "2026-10-22T23:00:00Z"),
        ]}]}
        games = normalize_scoreboard("TBL", data)["games"]
        assert [g["state"] for g in games] == ["FUT"]

    def test_missing_games_by_date(self):
        assert normalize_scoreboard("TBL", {}) == {"team": "TBL", "games": []}

    def test_normalizing_twice_is_byte_identical(self):
        assert json.dumps(normalize_scoreboard("TBL", SAMPLE_SCOREBOARD)) == json.dumps(
            normalize_scoreboard("TBL", SAMPLE_SCOREBOARD)
        )


class TestGetTeamScoreboard:
    """Test the scoreboard operation with a fake upstream."""

    @pytest.mark.asyncio
    async def test_success_envelope(self, fake_upstream):
        client = fake_upstream(SAMPLE_SCOREBOARD)
        result = await scoreboard_tools.get_team_scoreboard("tbl")

        assert result["isError"] is False
        assert result["summaryText"] == "TBL games: 3"
        assert result["structuredContent"]["team"] == "TBL"
        assert client.requests[0]["url"] == "https://api-web.nhle.com/v1/scoreboard/TBL/now"

    @pytest.mark.asyncio
    async def test_server_error_is_error_envelope(self, fake_upstream):
        fake_upstream(None, status_code=503, reason_phrase="Service Unavailable")
        result = await scoreboard_tools.get_team_scoreboard("TBL")

        assert result["isError"] is True
        assert result["summaryText"].startswith("Error: Failed to fetch scoreboard for TBL")

    @pytest.mark.asyncio
    async def test_list_game_state_is_not_an_error(self, fake_upstream):
        fake_upstream({"gamesByDate": [{"date": "2026-10-21", "games": [
            _game(["LIVE"], "2026-10-21T23:00:00Z"),
            _game("PRE", "2026-10-22T00:00:00Z"),
        ]}]})
        result = await scoreboard_tools.get_team_scoreboard("TBL")

        assert result["isError"] is False
        assert result["summaryText"] == "TBL games: 1"
        assert [g["state"] for g in result["structuredContent"]["games"]] == ["PRE"]
